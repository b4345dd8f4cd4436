"""Display models for rendered leaderboard rows and API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .state import RetryState

NO_PRIZE = "—"


class DisplayRow(BaseModel):
    """
    One row of the rendered table.

    Placeholder rows (beyond the available data) carry only rank and prize.
    """
    model_config = ConfigDict(populate_by_name=True)

    rank: int
    username: str = ""
    avatarUrl: Optional[str] = None
    wagered: str = ""
    prize: str = Field(default=NO_PRIZE, description="Prize for this rank or the no-prize sentinel")
    rowClass: str = Field(default="", description="CSS classes for top-3 highlight")
    placeholder: bool = False

    @property
    def has_prize(self) -> bool:
        return self.prize != NO_PRIZE


class LeaderboardStatus(BaseModel):
    """
    Current widget state for the JSON API.
    """
    model_config = ConfigDict(populate_by_name=True)

    state: RetryState
    consecutiveErrors: int
    refreshIntervalMs: int
    autoRefresh: bool = Field(description="Whether the periodic refresh job is active")
    lastUpdated: Optional[datetime] = None
    message: Optional[str] = Field(default=None, description="Error or empty-state message, if any")
    rows: list[DisplayRow] = Field(default_factory=list)
