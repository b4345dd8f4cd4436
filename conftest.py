"""Shared fakes for the leaderboard tests."""

from datetime import datetime
from typing import Union

import pytest

from wagerboard.datasources import SheetSource
from wagerboard.exceptions import FetchFailure
from wagerboard.models import FetchState
from wagerboard.services import LeaderboardWidget

FIXED_NOW = datetime(2025, 8, 1, 12, 0, 0)


class StaticSource(SheetSource):
    """Serves queued payloads in order; the last one repeats."""

    def __init__(self, *responses: Union[str, FetchFailure]):
        self.responses = list(responses)
        self.calls = 0
        self.closed = False

    async def fetch_text(self) -> str:
        index = min(self.calls, len(self.responses) - 1)
        self.calls += 1
        response = self.responses[index]
        if isinstance(response, FetchFailure):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


class FakeScheduler:
    """Records what the widget asks of the refresh scheduler."""

    def __init__(self):
        self.running = False
        self.interval_ms = None
        self.starts: list[bool] = []
        self.cancelled = 0
        self.resumed = 0
        self.stopped = False

    @property
    def is_running(self) -> bool:
        return self.running

    def start(self, interval_ms: int, run_now: bool = True) -> None:
        self.running = True
        self.interval_ms = interval_ms
        self.starts.append(run_now)

    def set_interval(self, interval_ms: int) -> None:
        self.interval_ms = interval_ms

    def resume(self, interval_ms: int) -> None:
        self.resumed += 1
        if not self.running:
            self.start(interval_ms, run_now=False)

    def cancel(self) -> None:
        self.running = False
        self.cancelled += 1

    def shutdown(self) -> None:
        self.running = False
        self.stopped = True


@pytest.fixture
def make_widget():
    """Build a mounted widget over a StaticSource with a fake scheduler."""

    def _make(*responses: Union[str, FetchFailure]) -> LeaderboardWidget:
        widget = LeaderboardWidget(
            datasource=StaticSource(*responses),
            state=FetchState(refresh_interval_ms=30000),
            coin_icon_url="coin.svg",
            scheduler=FakeScheduler(),
            now=lambda: FIXED_NOW,
        )
        widget.mount()
        return widget

    return _make
