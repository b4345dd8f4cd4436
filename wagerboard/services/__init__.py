from .csv_decoder import RawRow, decode_rows, iter_rows
from .normalizer import normalize_number, normalize_row, normalize_rows
from .ranking_service import build_display_rows, get_prize, rank_records
from .render_service import RenderTarget, render_error, render_page, render_rows
from .retry_policy import RefreshDecision, RetryPolicy
from .leaderboard_service import LeaderboardWidget

__all__ = [
    "RawRow",
    "decode_rows",
    "iter_rows",
    "normalize_number",
    "normalize_row",
    "normalize_rows",
    "build_display_rows",
    "get_prize",
    "rank_records",
    "RenderTarget",
    "render_error",
    "render_page",
    "render_rows",
    "RefreshDecision",
    "RetryPolicy",
    "LeaderboardWidget",
]
