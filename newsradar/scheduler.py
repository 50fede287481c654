"""
Periodic refresh trigger.

Runs one aggregation cycle immediately on start, then one every
REFRESH_INTERVAL_MINUTES. Cycles cannot overlap: run_cycle() is
single-flight, so a slow cycle simply delays the next tick.
"""

import asyncio
import logging
from typing import Optional

from newsradar.news.orchestrator import NewsAggregator

logger = logging.getLogger(__name__)


class CycleScheduler:
    def __init__(self, aggregator: NewsAggregator, interval_minutes: float = 15.0):
        self.aggregator = aggregator
        self.interval_seconds = max(1.0, interval_minutes * 60)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info(f"Scheduler started: every {self.interval_seconds / 60:.1f} min")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Scheduler stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await self.aggregator.run_cycle()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduled cycle failed, will retry next tick")
            await asyncio.sleep(self.interval_seconds)
