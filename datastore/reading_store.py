"""In-memory, time-windowed store of heart-rate readings keyed by pairing code."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from threading import Lock
from typing import Callable, Deque, Dict, Optional

from models.records import Aggregate, Reading
from services.aggregator import Aggregator
from settings import get_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_TTL_SECONDS = 30 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReadingStore:
    """Per-code sessions of readings with a time-to-live.

    Each session is an append-only deque kept oldest-first, so the last entry
    is always the most recent reading and expired readings sit at the head.
    Empty sessions are dropped rather than kept. A single lock serialises every
    operation, including the sweep, and reads hand out copies only.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Clock = utc_now,
        aggregator: Optional[Aggregator] = None,
    ) -> None:
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._aggregator = aggregator or Aggregator()
        self._sessions: Dict[str, Deque[Reading]] = {}
        self._lock = Lock()

    def now(self) -> datetime:
        return self._clock()

    def insert(self, code: str, bpm: int, zone: int) -> Reading:
        """Append a reading stamped with the current instant."""
        with self._lock:
            now = self._clock()
            reading = Reading(bpm=bpm, zone=zone, timestamp=now)
            session = self._sessions.get(code)
            if session is None:
                session = deque()
                self._sessions[code] = session
            session.append(reading)
            self._prune_head(session, now - self.ttl)
        logger.debug(
            "Stored reading",
            extra={"pairing_code": code, "bpm": bpm, "zone": zone},
        )
        return reading

    def latest(self, code: str) -> Optional[Reading]:
        """Most recent reading, or ``None`` once it has outlived the TTL."""
        with self._lock:
            session = self._sessions.get(code)
            if not session:
                return None
            reading = session[-1]
            if reading.timestamp <= self._clock() - self.ttl:
                return None
            return reading

    def range(self, code: str, window_seconds: int) -> list[Reading]:
        with self._lock:
            session = self._sessions.get(code)
            if not session:
                return []
            now = self._clock()
            cutoff = max(now - timedelta(seconds=window_seconds), now - self.ttl)
            return [reading for reading in session if reading.timestamp > cutoff]

    def stats(self, code: str, window_seconds: int) -> Optional[Aggregate]:
        return self._aggregator.aggregate(self.range(code, window_seconds))

    def sweep(self) -> tuple[int, int]:
        """Drop expired readings everywhere and forget emptied sessions.

        Returns the number of readings and sessions removed.
        """
        removed_readings = 0
        removed_sessions = 0
        with self._lock:
            cutoff = self._clock() - self.ttl
            for code in list(self._sessions):
                session = self._sessions[code]
                before = len(session)
                kept = deque(r for r in session if r.timestamp > cutoff)
                removed_readings += before - len(kept)
                if kept:
                    self._sessions[code] = kept
                else:
                    del self._sessions[code]
                    removed_sessions += 1
            remaining = len(self._sessions)

        if removed_readings:
            logger.info(
                "Swept expired readings",
                extra={
                    "removed_readings": removed_readings,
                    "removed_sessions": removed_sessions,
                    "session_count": remaining,
                },
            )
        return removed_readings, removed_sessions

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def codes(self) -> list[str]:
        with self._lock:
            return sorted(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    @staticmethod
    def _prune_head(session: Deque[Reading], cutoff: datetime) -> None:
        while session and session[0].timestamp <= cutoff:
            session.popleft()


@lru_cache
def build_default_store() -> ReadingStore:
    settings = get_settings()
    return ReadingStore(ttl_seconds=settings.reading_ttl_seconds)
