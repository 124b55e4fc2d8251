"""Agent-facing tools served over the Model Context Protocol.

The tools mirror the HTTP API over the same store and validators. Unlike the
HTTP API, an empty result is reported to the agent as a tool error so that it
is steered towards ``checkConnection`` instead of reasoning over nothing.
"""

from __future__ import annotations

import logging
from typing import Annotated, Callable, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel, Field

from app.schemas import ConnectionOut, HistoryOut, ReadingOut, StatsOut
from datastore.reading_store import ReadingStore, build_default_store
from services.connection import ConnectionState, connection_status
from services.validation import (
    DEFAULT_HISTORY_SECONDS,
    DEFAULT_STATS_SECONDS,
    MAX_WINDOW_SECONDS,
    MIN_WINDOW_SECONDS,
    InvalidInput,
    require_code,
    require_window,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "heart-rate"

INVALID_CODE_MESSAGE = (
    "Invalid pairing code format. Expected format: animal + 2 digits (e.g., tiger42)"
)

PairingCode = Annotated[str, Field(description="The user's pairing code (e.g., tiger42)")]
HistorySeconds = Annotated[
    int,
    Field(
        ge=MIN_WINDOW_SECONDS,
        le=MAX_WINDOW_SECONDS,
        description=(
            f"Number of seconds of history to retrieve "
            f"({MIN_WINDOW_SECONDS}-{MAX_WINDOW_SECONDS}, default: {DEFAULT_HISTORY_SECONDS})"
        ),
    ),
]
StatsSeconds = Annotated[
    int,
    Field(
        ge=MIN_WINDOW_SECONDS,
        le=MAX_WINDOW_SECONDS,
        description=(
            f"Number of seconds to calculate stats over "
            f"({MIN_WINDOW_SECONDS}-{MAX_WINDOW_SECONDS}, default: {DEFAULT_STATS_SECONDS})"
        ),
    ),
]

_STATUS_TEXT = {
    ConnectionState.streaming: "User is actively streaming heart rate data.",
    ConnectionState.idle: (
        "User is connected but no recent data. They may have paused or backgrounded the app."
    ),
    ConnectionState.disconnected: "User is not connected. No heart rate data available.",
}


def _check_code(tool: str, pairing_code: str) -> str:
    try:
        return require_code(pairing_code)
    except InvalidInput as exc:
        logger.info("Rejected tool call", extra={"tool": tool, "reason": str(exc)})
        raise ToolError(INVALID_CODE_MESSAGE) from exc


def _check_window(tool: str, seconds: int, default: int) -> int:
    try:
        return require_window(seconds, default)
    except InvalidInput as exc:
        logger.info("Rejected tool call", extra={"tool": tool, "reason": str(exc)})
        raise ToolError(str(exc)) from exc


def _no_data(tool: str, code: str, detail: str) -> ToolError:
    logger.info("No data for tool call", extra={"tool": tool, "pairing_code": code})
    return ToolError(f"{detail} Use checkConnection to verify the user is streaming.")


def _summarised(text: str, model: BaseModel) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=text)],
        structuredContent=model.model_dump(mode="json", by_alias=True),
    )


def _zone_summary(time_in_zone: dict[int, int]) -> str:
    entries = [f"Zone {zone}: {count}s" for zone, count in sorted(time_in_zone.items()) if count > 0]
    return ", ".join(entries) or "no zone data"


def build_tool_server(
    store_factory: Optional[Callable[[], ReadingStore]] = None,
    host: str = "127.0.0.1",
) -> FastMCP:
    """Create the MCP server with every heart-rate tool registered.

    ``store_factory`` is resolved on each call so the server follows the
    application's store lifecycle.
    """

    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Live heart-rate data from a paired phone. Call checkConnection first, "
            "then read the current value, recent history or windowed statistics."
        ),
        host=host,
        stateless_http=True,
        json_response=True,
        streamable_http_path="/mcp",
    )

    def resolve_store() -> ReadingStore:
        factory = store_factory or build_default_store
        return factory()

    @server.tool(
        name="checkConnection",
        description=(
            "Check if a user is connected and streaming heart rate data. "
            "Call this before other tools to verify the user is active."
        ),
    )
    def check_connection(pairingCode: PairingCode) -> Annotated[CallToolResult, ConnectionOut]:
        code = _check_code("checkConnection", pairingCode)
        status = connection_status(resolve_store(), code)
        logger.debug(
            "Connection checked",
            extra={"tool": "checkConnection", "pairing_code": code, "status": status.state.value},
        )
        return _summarised(_STATUS_TEXT[status.state], ConnectionOut.from_status(status))

    def current_heart_rate(tool: str, pairing_code: str) -> CallToolResult:
        code = _check_code(tool, pairing_code)
        store = resolve_store()
        reading = store.latest(code)
        if reading is None:
            raise _no_data(tool, code, f"No heart rate data available for {code}.")
        age = max(0, int((store.now() - reading.timestamp).total_seconds()))
        text = f"Current heart rate: {reading.bpm} BPM (Zone {reading.zone}), {age}s ago"
        return _summarised(text, ReadingOut.from_reading(reading))

    @server.tool(
        name="getCurrentHeartRate",
        description="Get the current heart rate reading. Returns BPM, zone (1-5), and timestamp.",
    )
    def get_current_heart_rate(pairingCode: PairingCode) -> Annotated[CallToolResult, ReadingOut]:
        return current_heart_rate("getCurrentHeartRate", pairingCode)

    @server.tool(
        name="getHeartRate",
        description="Alias of getCurrentHeartRate. Returns BPM, zone (1-5), and timestamp.",
    )
    def get_heart_rate(pairingCode: PairingCode) -> Annotated[CallToolResult, ReadingOut]:
        return current_heart_rate("getHeartRate", pairingCode)

    @server.tool(
        name="getHeartRateHistory",
        description=(
            "Get heart rate readings from the last N seconds. "
            "Returns an array of readings, oldest first, for trend analysis."
        ),
    )
    def get_heart_rate_history(
        pairingCode: PairingCode,
        seconds: HistorySeconds = DEFAULT_HISTORY_SECONDS,
    ) -> Annotated[CallToolResult, HistoryOut]:
        tool = "getHeartRateHistory"
        code = _check_code(tool, pairingCode)
        window = _check_window(tool, seconds, DEFAULT_HISTORY_SECONDS)
        readings = resolve_store().range(code, window)
        if not readings:
            raise _no_data(tool, code, f"No heart rate data in the last {window} seconds.")
        bpms = [r.bpm for r in readings]
        text = (
            f"{len(readings)} readings in last {window}s. "
            f"Range: {min(bpms)}-{max(bpms)} BPM, latest {bpms[-1]} BPM."
        )
        return _summarised(text, HistoryOut(readings=[ReadingOut.from_reading(r) for r in readings]))

    @server.tool(
        name="getHeartRateStats",
        description=(
            "Get heart rate statistics for the last N seconds. Includes average, min, max, "
            "and time spent in each zone (one reading counts as one second)."
        ),
    )
    def get_heart_rate_stats(
        pairingCode: PairingCode,
        seconds: StatsSeconds = DEFAULT_STATS_SECONDS,
    ) -> Annotated[CallToolResult, StatsOut]:
        tool = "getHeartRateStats"
        code = _check_code(tool, pairingCode)
        window = _check_window(tool, seconds, DEFAULT_STATS_SECONDS)
        aggregate = resolve_store().stats(code, window)
        if aggregate is None:
            raise _no_data(tool, code, f"No heart rate data in the last {window} seconds.")
        text = (
            f"Stats (last {window}s): Avg {aggregate.avg} BPM, "
            f"Range {aggregate.min}-{aggregate.max} BPM. "
            f"Time in zones: {_zone_summary(aggregate.time_in_zone)}"
        )
        return _summarised(text, StatsOut.from_aggregate(aggregate))

    return server
