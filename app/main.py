from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from app.errors import install_error_handlers
from app.tools import build_tool_server
from datastore.reading_store import build_default_store
from logging_config import configure_logging
from services.sweeper import PeriodicSweeper
from settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    store = build_default_store()
    sweeper = PeriodicSweeper(store, interval_seconds=settings.sweep_interval_seconds)
    app.state.sweeper = sweeper
    await sweeper.start()
    try:
        async with app.state.tool_server.session_manager.run():
            yield
    finally:
        await sweeper.stop()
        store.clear()
        build_default_store.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    tool_server = build_tool_server(host=settings.bind_host)
    app = FastAPI(
        title="Heart Rate Relay",
        description="Short-lived heart-rate telemetry for paired devices, over HTTP and MCP.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.tool_server = tool_server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
    )
    install_error_handlers(app)
    app.include_router(router)
    # Mounted last so the API routes above take precedence; serves POST /mcp.
    app.mount("/", tool_server.streamable_http_app())
    return app

app = create_app()
