"""Liveness classification derived from the age of the latest reading."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from datastore.reading_store import ReadingStore
from models.records import Reading

STREAMING_THRESHOLD_SECONDS = 10
IDLE_THRESHOLD_SECONDS = 60


class ConnectionState(str, Enum):
    streaming = "streaming"
    idle = "idle"
    disconnected = "disconnected"


@dataclass(frozen=True)
class ConnectionStatus:
    state: ConnectionState
    last_seen: Optional[datetime] = None

    @property
    def connected(self) -> bool:
        return self.state is not ConnectionState.disconnected


def evaluate(reading: Optional[Reading], now: datetime) -> ConnectionStatus:
    if reading is None:
        return ConnectionStatus(state=ConnectionState.disconnected)

    age = (now - reading.timestamp).total_seconds()
    if age <= STREAMING_THRESHOLD_SECONDS:
        state = ConnectionState.streaming
    elif age <= IDLE_THRESHOLD_SECONDS:
        state = ConnectionState.idle
    else:
        state = ConnectionState.disconnected
    return ConnectionStatus(state=state, last_seen=reading.timestamp)


def connection_status(store: ReadingStore, code: str) -> ConnectionStatus:
    return evaluate(store.latest(code), store.now())
