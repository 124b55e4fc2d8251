"""HTTP route definitions for the service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.schemas import (
    ConnectionOut,
    ConnectionResponse,
    CurrentResponse,
    HealthResponse,
    HistoryOut,
    HistoryResponse,
    ReadingOut,
    ReadingSubmission,
    StatsOut,
    StatsResponse,
    SubmissionResponse,
)
from datastore.reading_store import ReadingStore, build_default_store
from services.connection import connection_status
from services.validation import (
    DEFAULT_HISTORY_SECONDS,
    DEFAULT_STATS_SECONDS,
    require_bpm,
    require_code,
    require_window,
    require_zone,
)

router = APIRouter()


def get_store() -> ReadingStore:
    return build_default_store()


@router.post(
    "/hr",
    response_model=SubmissionResponse,
    summary="Submit a heart-rate reading from a paired device.",
)
async def submit_reading(
    submission: ReadingSubmission,
    store: ReadingStore = Depends(get_store),
) -> SubmissionResponse:
    code = require_code(submission.code, missing_message="Missing or invalid pairing code")
    bpm = require_bpm(submission.bpm)
    zone = require_zone(submission.zone)
    store.insert(code, bpm, zone)
    return SubmissionResponse(success=True)


@router.get(
    "/hr/current",
    response_model=CurrentResponse,
    summary="Latest unexpired reading for a pairing code.",
)
async def get_current(
    code: Optional[str] = Query(None, description="Pairing code, e.g. tiger42"),
    store: ReadingStore = Depends(get_store),
) -> CurrentResponse:
    code = require_code(code)
    reading = store.latest(code)
    if reading is None:
        return CurrentResponse(data=None)
    return CurrentResponse(data=ReadingOut.from_reading(reading))


@router.get(
    "/hr/history",
    response_model=HistoryResponse,
    summary="Readings received within the last N seconds.",
)
async def get_history(
    code: Optional[str] = Query(None, description="Pairing code, e.g. tiger42"),
    seconds: Optional[str] = Query(None, description="Lookback window, 1-1800 (default 10)"),
    store: ReadingStore = Depends(get_store),
) -> HistoryResponse:
    code = require_code(code)
    window = require_window(seconds, DEFAULT_HISTORY_SECONDS)
    readings = store.range(code, window)
    return HistoryResponse(
        data=HistoryOut(readings=[ReadingOut.from_reading(r) for r in readings])
    )


@router.get(
    "/hr/stats",
    response_model=StatsResponse,
    summary="Average, extremes and zone distribution over the last N seconds.",
)
async def get_stats(
    code: Optional[str] = Query(None, description="Pairing code, e.g. tiger42"),
    seconds: Optional[str] = Query(None, description="Lookback window, 1-1800 (default 60)"),
    store: ReadingStore = Depends(get_store),
) -> StatsResponse:
    code = require_code(code)
    window = require_window(seconds, DEFAULT_STATS_SECONDS)
    aggregate = store.stats(code, window)
    if aggregate is None:
        return StatsResponse(data=None)
    return StatsResponse(data=StatsOut.from_aggregate(aggregate))


@router.get(
    "/hr/status",
    response_model=ConnectionResponse,
    summary="Whether the device behind a pairing code is streaming, idle or gone.",
)
async def get_status(
    code: Optional[str] = Query(None, description="Pairing code, e.g. tiger42"),
    store: ReadingStore = Depends(get_store),
) -> ConnectionResponse:
    code = require_code(code)
    return ConnectionResponse(data=ConnectionOut.from_status(connection_status(store, code)))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(store: ReadingStore = Depends(get_store)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        sessions=store.session_count(),
    )
