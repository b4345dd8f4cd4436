"""Leaderboard widget: fetch, decode, rank and render on demand or on a timer."""

import logging
from datetime import datetime
from typing import Callable, Optional

from wagerboard.config import Config
from wagerboard.datasources import SheetSource
from wagerboard.exceptions import EmptySourceError, FetchFailure, RenderFault
from wagerboard.models import DisplayRow, FetchState, LeaderboardSnapshot, LeaderboardStatus
from wagerboard.scheduler import RefreshScheduler
from .csv_decoder import iter_rows
from .normalizer import normalize_rows
from .ranking_service import MIN_DISPLAY_ROWS, build_display_rows, rank_records
from .render_service import RenderTarget, render_error, render_loading, render_rows
from .retry_policy import (
    MAX_ERRORS_BEFORE_STOP,
    RATE_LIMITED_INTERVAL_MS,
    RefreshDecision,
    RetryPolicy,
)

logger = logging.getLogger(__name__)

RENDER_FAULT_MESSAGE = "Error displaying leaderboard data"


class LeaderboardWidget:
    """
    The leaderboard pipeline bound to one render target.

    `refresh()` is the only entry point; the scheduler job and the manual
    retry route both call it. Overlapping calls are not serialized: the
    last one to finish decides what is displayed.
    """

    def __init__(
        self,
        datasource: SheetSource,
        state: FetchState,
        max_errors: int = MAX_ERRORS_BEFORE_STOP,
        rate_limited_interval_ms: int = RATE_LIMITED_INTERVAL_MS,
        min_rows: int = MIN_DISPLAY_ROWS,
        coin_icon_url: str = "",
        scheduler: Optional[RefreshScheduler] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.datasource = datasource
        self.state = state
        self.policy = RetryPolicy(
            state,
            max_errors=max_errors,
            rate_limited_interval_ms=rate_limited_interval_ms,
        )
        self.min_rows = min_rows
        self.coin_icon_url = coin_icon_url
        self.scheduler = scheduler or RefreshScheduler(self.refresh)
        self.target = RenderTarget()
        self.snapshot: Optional[LeaderboardSnapshot] = None
        self.display_rows: list[DisplayRow] = []
        self._now = now
        self._base_interval_ms = state.refresh_interval_ms

    @classmethod
    def from_config(
        cls,
        config: Config,
        datasource: SheetSource,
        state: FetchState,
    ) -> "LeaderboardWidget":
        return cls(
            datasource=datasource,
            state=state,
            max_errors=config.max_errors_before_stop,
            rate_limited_interval_ms=config.rate_limited_interval_ms,
            min_rows=config.min_display_rows,
            coin_icon_url=config.coin_icon_url,
        )

    def mount(self) -> None:
        """Start periodic refreshes, the first one immediately."""
        self.target.replace(render_loading(), at=self._now())
        self.scheduler.start(self.state.refresh_interval_ms, run_now=True)

    async def unmount(self) -> None:
        """Stop refreshing and release the data source."""
        self.scheduler.shutdown()
        await self.datasource.close()

    def remount(self) -> None:
        """Discard all session state and start over, as a page reload would."""
        logger.info("Remounting leaderboard widget")
        self.scheduler.cancel()
        self.state.reset(self._base_interval_ms)
        self.snapshot = None
        self.display_rows = []
        self.mount()

    async def refresh(self) -> None:
        """
        Run one fetch/render cycle.

        Fetch failures feed the retry policy; an empty export and render
        faults are displayed without counting as failures.
        """
        if not self.target.html:
            self.target.replace(render_loading(), at=self._now())

        try:
            text = await self.datasource.fetch_text()
        except FetchFailure as e:
            logger.error(f"Failed to load leaderboard: {e}")
            self._apply(self.policy.record_failure(e))
            return

        self._apply(self.policy.record_success())

        try:
            records = normalize_rows(iter_rows(text))
        except EmptySourceError as e:
            logger.info("Leaderboard export has no participants")
            self._show_message(str(e))
            return

        try:
            self._display(records)
        except RenderFault:
            logger.exception(RENDER_FAULT_MESSAGE)
            self._show_message(RENDER_FAULT_MESSAGE)

    def _display(self, records) -> None:
        now = self._now()
        try:
            snapshot = rank_records(records, fetched_at=now)
            rows = build_display_rows(snapshot, self.min_rows)
            html = render_rows(rows, self.coin_icon_url)
        except Exception as e:
            raise RenderFault(f"{RENDER_FAULT_MESSAGE}: {e}") from e

        self.snapshot = snapshot
        self.display_rows = rows
        self.target.replace(html, at=now)
        logger.info(f"Leaderboard updated with {len(snapshot)} participants")

    def _show_message(self, message: str, terminal: bool = False) -> None:
        now = self._now()
        self.snapshot = None
        self.display_rows = []
        self.target.replace(render_error(message, now, terminal=terminal), message=message, at=now)

    def _apply(self, decision: RefreshDecision) -> None:
        """Hand the policy's decision to the scheduler and the display."""
        if decision.cancel_timer:
            self.scheduler.cancel()
        else:
            self.scheduler.set_interval(decision.interval_ms)
            if decision.resume_timer:
                self.scheduler.resume(decision.interval_ms)

        if decision.message:
            self._show_message(decision.message, terminal=decision.terminal)

    def status(self) -> LeaderboardStatus:
        """Snapshot of the widget state for the JSON API."""
        return LeaderboardStatus(
            state=self.policy.current_state,
            consecutiveErrors=self.state.consecutive_error_count,
            refreshIntervalMs=self.state.refresh_interval_ms,
            autoRefresh=self.scheduler.is_running,
            lastUpdated=self.target.updated_at,
            message=self.target.message,
            rows=self.display_rows,
        )
