"""HTML rendering of the leaderboard table body and page."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from html import escape
from typing import Optional

from wagerboard.models import DisplayRow

COLUMN_COUNT = 4
RETRY_ACTION = "/leaderboard/retry"

LEADERBOARD_STYLES = """
        .player-avatar {
            width: 32px;
            height: 32px;
            border-radius: 50%;
            margin-right: 8px;
            vertical-align: middle;
        }
        .leaderboard-table td {
            vertical-align: middle;
        }
        .coin-amount {
            display: inline-flex;
            align-items: center;
            gap: 4px;
            font-weight: 500;
        }
        .coin-amount img {
            width: 16px;
            height: 16px;
            object-fit: contain;
        }
        .leaderboard-table td:last-child .coin-amount {
            font-weight: bold;
            color: #ffd700;
        }
"""

ALERT_ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" '
    'fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" '
    'stroke-linejoin="round" class="feather feather-alert-triangle">'
    '<path d="M10.29 3.86L1.82 18a2 2 0 0 0 1.71 3h16.94a2 2 0 0 0 1.71-3L13.71 3.86a2 2 0 0 0-3.42 0z"></path>'
    '<line x1="12" y1="9" x2="12" y2="13"></line>'
    '<line x1="12" y1="17" x2="12.01" y2="17"></line>'
    "</svg>"
)


@dataclass
class RenderTarget:
    """
    In-memory stand-in for the table body element.

    Every update replaces the whole content.
    """

    html: str = ""
    message: Optional[str] = None
    updated_at: Optional[datetime] = None

    def replace(self, html: str, message: Optional[str] = None, at: Optional[datetime] = None) -> None:
        self.html = html
        self.message = message
        self.updated_at = at or datetime.now()


def format_amount(wagered: str) -> str:
    """Format a 2-digit decimal string with thousands grouping."""
    try:
        return f"{Decimal(wagered):,.2f}"
    except InvalidOperation:
        return "0.00"


def coin_amount(amount: str, icon_url: str, size: int = 16) -> str:
    """Amount followed by the coin icon."""
    return (
        '<span class="coin-amount" style="display: inline-flex; align-items: center; gap: 4px;">'
        f"<span>{escape(amount)}</span>"
        f'<img src="{escape(icon_url)}" alt="Coins" '
        f'style="width: {size}px; height: {size}px; display: inline-block; vertical-align: middle;">'
        "</span>"
    )


def _render_row(row: DisplayRow, icon_url: str) -> str:
    class_attr = f' class="{row.rowClass}"' if row.rowClass else ""
    prize_cell = coin_amount(row.prize, icon_url) if row.has_prize else escape(row.prize)

    if row.placeholder:
        player_cell = "-"
        wagered_cell = "-"
    else:
        avatar = (
            f'<img src="{escape(row.avatarUrl)}" alt="{escape(row.username)}" class="player-avatar"> '
            if row.avatarUrl
            else ""
        )
        player_cell = f"{avatar}{escape(row.username)}"
        wagered_cell = coin_amount(format_amount(row.wagered), icon_url)

    return (
        f"<tr{class_attr}>"
        f"<td>#{row.rank}</td>"
        f"<td>{player_cell}</td>"
        f"<td>{wagered_cell}</td>"
        f"<td>{prize_cell}</td>"
        "</tr>"
    )


def render_rows(rows: list[DisplayRow], icon_url: str) -> str:
    """Render display rows as table body markup."""
    return "\n".join(_render_row(row, icon_url) for row in rows)


def render_loading() -> str:
    return (
        f'<tr><td colspan="{COLUMN_COUNT}" style="text-align: center; padding: 2rem;">'
        "<p>Loading leaderboard data...</p>"
        "</td></tr>"
    )


def render_error(message: str, at: datetime, terminal: bool = False) -> str:
    """
    Render an error panel in place of the table rows.

    Non-terminal errors carry a "Try Again" control; terminal ones tell the
    user to reload instead.
    """
    text = escape(message)
    if terminal:
        text += (
            "<br><small>Auto-refresh disabled after multiple failures. "
            "Please refresh the page to try again.</small>"
        )

    retry = "" if terminal else (
        f'<form method="post" action="{RETRY_ACTION}">'
        '<button type="submit" class="retry-button">Try Again</button>'
        "</form>"
    )
    hint = (
        '<p class="refresh-hint"><small>Please refresh the page to try again</small></p>'
        if terminal
        else ""
    )

    return (
        f'<tr><td colspan="{COLUMN_COUNT}" class="error-message">'
        '<div class="error-content">'
        f"{ALERT_ICON}"
        "<h4>Leaderboard Unavailable</h4>"
        f'<div class="error-message-text">{text}</div>'
        f"{retry}"
        f'<p class="last-updated">Last updated: {at.strftime("%X")} - {at.strftime("%x")}</p>'
        f"{hint}"
        "</div></td></tr>"
    )


def render_page(body_html: str, title: str = "Leaderboard") -> str:
    """Wrap table body markup in a standalone page."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>{LEADERBOARD_STYLES}</style>
</head>
<body>
    <table class="leaderboard-table">
        <thead>
            <tr><th>Rank</th><th>Player</th><th>Wagered</th><th>Prize</th></tr>
        </thead>
        <tbody id="leaderboard-body">
{body_html}
        </tbody>
    </table>
</body>
</html>
"""
