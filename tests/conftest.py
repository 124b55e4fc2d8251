from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from datastore.reading_store import ReadingStore


class FakeClock:
    """Manually advanced UTC clock for driving expiry without sleeping."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> ReadingStore:
    return ReadingStore(ttl_seconds=1800, clock=clock)
