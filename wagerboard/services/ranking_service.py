"""Ranking of participant records and projection into display rows."""

from datetime import datetime, timezone
from typing import Optional

from wagerboard.models import DisplayRow, LeaderboardSnapshot, ParticipantRecord, NO_PRIZE

PRIZES = {
    1: "100",
    2: "75",
    3: "50",
}
TOP_RANKS = 3
MIN_DISPLAY_ROWS = 5


def get_prize(rank: int) -> str:
    """Prize for a rank, or the no-prize sentinel."""
    return PRIZES.get(rank, NO_PRIZE)


def row_class(rank: int) -> str:
    """CSS classes highlighting the top ranks."""
    return f"top-rank rank-{rank}" if rank <= TOP_RANKS else ""


def rank_records(
    records: list[ParticipantRecord],
    fetched_at: Optional[datetime] = None,
) -> LeaderboardSnapshot:
    """
    Rank records by wagered amount, highest first.

    The sort is stable: equal amounts keep their fetch order.

    Args:
        records: Unranked records in fetch order
        fetched_at: Snapshot time, defaults to now (UTC)

    Returns:
        LeaderboardSnapshot with ranks 1..n assigned
    """
    ordered = sorted(records, key=lambda r: r.amount, reverse=True)

    ranked = [
        record.model_copy(update={"rank": i + 1})
        for i, record in enumerate(ordered)
    ]

    return LeaderboardSnapshot(
        records=ranked,
        fetchedAt=fetched_at or datetime.now(timezone.utc),
    )


def build_display_rows(
    snapshot: LeaderboardSnapshot,
    min_rows: int = MIN_DISPLAY_ROWS,
) -> list[DisplayRow]:
    """
    Project a snapshot into exactly max(len(snapshot), min_rows) rows.

    Rows past the end of the data are placeholders carrying only
    rank, prize and the top-rank marker.
    """
    rows: list[DisplayRow] = []

    for i in range(max(len(snapshot.records), min_rows)):
        rank = i + 1
        if i < len(snapshot.records):
            record = snapshot.records[i]
            rows.append(DisplayRow(
                rank=rank,
                username=record.username,
                avatarUrl=record.avatarUrl,
                wagered=record.wagered,
                prize=get_prize(rank),
                rowClass=row_class(rank),
            ))
        else:
            rows.append(DisplayRow(
                rank=rank,
                prize=get_prize(rank),
                rowClass=row_class(rank),
                placeholder=True,
            ))

    return rows
