"""Pydantic schemas shared by the HTTP API and the agent tools."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.records import Aggregate, Reading
from services.connection import ConnectionState, ConnectionStatus


class WireModel(BaseModel):
    """Base for payloads whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReadingSubmission(BaseModel):
    """Body of ``POST /hr``.

    Fields are left untyped so that every rejection goes through the shared
    validators and produces the same ``{"error": ...}`` body.
    """

    code: Any = None
    bpm: Any = None
    zone: Any = None


class SubmissionResponse(BaseModel):
    success: bool = True


class ReadingOut(WireModel):
    """A single reading as exposed to callers."""

    bpm: int = Field(..., description="Heart rate in beats per minute")
    zone: int = Field(..., ge=1, le=5, description="Heart rate zone (1-5)")
    timestamp: datetime = Field(..., description="Instant the reading was received")

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingOut":
        return cls(bpm=reading.bpm, zone=reading.zone, timestamp=reading.timestamp)


class HistoryOut(WireModel):
    readings: List[ReadingOut] = Field(default_factory=list, description="Readings, oldest first")


class StatsOut(WireModel):
    """Aggregate over a window. ``timeInZone`` counts readings per zone."""

    avg: int = Field(..., description="Average BPM, rounded")
    min: int = Field(..., description="Minimum BPM")
    max: int = Field(..., description="Maximum BPM")
    count: int = Field(..., ge=0, description="Number of readings")
    time_in_zone: Dict[str, int] = Field(
        ..., description="Readings (about one per second) in each zone, keyed 1-5"
    )

    @classmethod
    def from_aggregate(cls, aggregate: Aggregate) -> "StatsOut":
        return cls(
            avg=aggregate.avg,
            min=aggregate.min,
            max=aggregate.max,
            count=aggregate.count,
            time_in_zone={str(zone): n for zone, n in sorted(aggregate.time_in_zone.items())},
        )


class ConnectionOut(WireModel):
    connected: bool = Field(..., description="Whether the device is connected")
    last_seen: Optional[datetime] = Field(
        None, description="Instant of the last reading, or null if never connected"
    )
    status: ConnectionState = Field(
        ...,
        description=(
            "streaming = active data flow, idle = connected but no recent data, "
            "disconnected = no connection"
        ),
    )

    @classmethod
    def from_status(cls, status: ConnectionStatus) -> "ConnectionOut":
        return cls(connected=status.connected, last_seen=status.last_seen, status=status.state)


class CurrentResponse(BaseModel):
    data: Optional[ReadingOut] = None


class HistoryResponse(BaseModel):
    data: HistoryOut


class StatsResponse(BaseModel):
    data: Optional[StatsOut] = None


class ConnectionResponse(BaseModel):
    data: ConnectionOut


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime
    sessions: int = Field(..., ge=0, description="Pairing codes with retained readings")
