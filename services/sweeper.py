"""Periodic background expiry for the reading store."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from datastore.reading_store import ReadingStore

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class PeriodicSweeper:
    """Runs ``store.sweep()`` every ``interval_seconds`` on the event loop."""

    def __init__(
        self,
        store: ReadingStore,
        interval_seconds: float = 60.0,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    def run_once(self) -> tuple[int, int]:
        return self.store.sweep()

    async def _run(self) -> None:
        while True:
            await self._sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception:
                logger.exception("Reading sweep failed")
