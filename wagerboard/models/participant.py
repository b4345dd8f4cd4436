"""Participant and snapshot models."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ParticipantRecord(BaseModel):
    """
    A single participant parsed from the spreadsheet export.

    `wagered` is kept as a string with exactly two fraction digits,
    the way it is displayed; use `amount` for arithmetic.
    """
    model_config = ConfigDict(populate_by_name=True)

    rank: int = Field(default=0, description="Position after ranking, 0 until ranked")
    username: str = Field(default="Anonymous", min_length=1)
    avatarUrl: Optional[str] = Field(default=None, description="Avatar image URL")
    wagered: str = Field(default="0.00", description="Wagered amount, 2 fraction digits")

    @property
    def amount(self) -> Decimal:
        """Get wagered amount as Decimal."""
        try:
            return Decimal(self.wagered)
        except InvalidOperation:
            return Decimal("0")


class LeaderboardSnapshot(BaseModel):
    """
    Ranked records from one successful fetch cycle.

    A new snapshot always replaces the previous one wholesale.
    """
    records: list[ParticipantRecord]
    fetchedAt: datetime

    def __len__(self) -> int:
        return len(self.records)
