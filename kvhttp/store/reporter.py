"""
Status Reporter Module

Background task that periodically logs the store's request count and
item count. It reads through ConcurrentStore.stats(), so it follows the
same lock discipline as the request handlers and never mutates state.
"""

import asyncio
import logging
from typing import Optional

from ..config.settings import settings
from .concurrent import ConcurrentStore, StoreStats

logger = logging.getLogger(__name__)


class StatusReporter:
    """
    Periodic status logger for a ConcurrentStore.

    Usage:
        reporter = StatusReporter(store, interval=5.0)
        reporter.start()      # schedules run() on the running event loop
        ...
        await reporter.stop() # sets the stop signal and waits for the task

    Attributes:
        store: The store being reported on
        interval: Seconds between two status lines
    """

    def __init__(self, store: ConcurrentStore, interval: float = None):
        self.store = store
        self.interval = interval if interval is not None else settings.REPORT_INTERVAL
        if self.interval <= 0:
            raise ValueError(f"report interval must be positive, got {self.interval}")

        # Created per run: an asyncio.Event binds to the loop that first waits on it
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    def report(self) -> StoreStats:
        """Log one status line and return the snapshot it was built from."""
        stats = self.store.stats()
        logger.info(
            "Status: %d requests, %d items in database",
            stats.requests,
            stats.data_size,
        )
        return stats

    async def run(self) -> None:
        """
        Log a status line every interval until the stop signal is set.

        Waiting on the stop event with a timeout doubles as the ticker, so a
        stop request interrupts the current wait instead of sleeping it out.
        """
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        stop_event = self._stop_event

        logger.debug(f"Status reporter running every {self.interval}s")
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                self.report()
        logger.debug("Status reporter stopped")

    def start(self) -> None:
        """Schedule run() on the running event loop. No-op if already running."""
        if self.is_running():
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Signal the loop to exit and wait for it to finish."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is None:
            return
        try:
            await self._task
        finally:
            self._task = None

    def is_running(self) -> bool:
        """Check if the reporter task is currently running."""
        return self._task is not None and not self._task.done()
