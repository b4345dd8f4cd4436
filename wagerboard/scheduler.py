"""Periodic leaderboard refresh using APScheduler."""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "leaderboard-refresh"


def _trigger(interval_ms: int) -> IntervalTrigger:
    return IntervalTrigger(seconds=interval_ms / 1000)


class RefreshScheduler:
    """
    Owns the single repeating refresh job.

    Must be started from within a running event loop.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[None]],
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.job = job
        self.scheduler = scheduler or AsyncIOScheduler()
        self._interval_ms: Optional[int] = None

    @property
    def interval_ms(self) -> Optional[int]:
        return self._interval_ms

    @property
    def is_running(self) -> bool:
        return self.scheduler.running and self.scheduler.get_job(REFRESH_JOB_ID) is not None

    def start(self, interval_ms: int, run_now: bool = True) -> None:
        """Register the refresh job, starting the scheduler if needed."""
        if not self.scheduler.running:
            self.scheduler.start()

        self._interval_ms = interval_ms
        # Passing next_run_time=None would add the job paused
        options = {"next_run_time": datetime.now()} if run_now else {}
        self.scheduler.add_job(
            self.job,
            _trigger(interval_ms),
            id=REFRESH_JOB_ID,
            name="Leaderboard: Refresh",
            replace_existing=True,
            coalesce=True,
            **options,
        )
        logger.info(f"Registered job: Leaderboard Refresh (every {interval_ms}ms)")

    def set_interval(self, interval_ms: int) -> None:
        """Change the refresh interval of an active job."""
        if interval_ms == self._interval_ms:
            return
        self._interval_ms = interval_ms
        if self.is_running:
            self.scheduler.reschedule_job(REFRESH_JOB_ID, trigger=_trigger(interval_ms))
            logger.info(f"Refresh interval changed to {interval_ms}ms")

    def resume(self, interval_ms: int) -> None:
        """Restart a cancelled job without an immediate run."""
        if not self.is_running:
            self.start(interval_ms, run_now=False)

    def cancel(self) -> None:
        """Remove the refresh job; the scheduler itself keeps running."""
        if self.scheduler.running and self.scheduler.get_job(REFRESH_JOB_ID) is not None:
            self.scheduler.remove_job(REFRESH_JOB_ID)
            logger.info("Auto-refresh cancelled")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")
