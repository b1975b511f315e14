"""
Background sync runner.

Calls BatchSyncScheduler.run_sync() on a fixed interval.
"""

import asyncio
import logging
from typing import Optional

from .config import SyncConfig
from .scheduler import BatchSyncScheduler

logger = logging.getLogger(__name__)


class BackgroundSyncRunner:
    """
    Background task runner for the batch sync.

    Call `start()` to begin background syncing.
    Call `stop()` to gracefully stop.

    Usage:
        runner = BackgroundSyncRunner(scheduler, interval_seconds=3600)
        await runner.start()
        # ... later ...
        await runner.stop()
    """

    def __init__(
        self,
        scheduler: BatchSyncScheduler,
        interval_seconds: float,
        startup_delay_seconds: float = SyncConfig.BACKGROUND_SYNC_STARTUP_DELAY_SECONDS,
    ):
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds
        self.startup_delay_seconds = startup_delay_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start background sync loop."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Background sync started (every {self.interval_seconds}s)")

    async def stop(self):
        """Stop background sync loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Background sync stopped")

    async def _run_loop(self):
        """Main sync loop."""
        if self.startup_delay_seconds:
            await asyncio.sleep(self.startup_delay_seconds)

        while self._running:
            try:
                await self.scheduler.run_sync()
            except Exception:
                logger.exception("Scheduled sync failed")

            await asyncio.sleep(self.interval_seconds)
