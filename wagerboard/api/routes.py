"""API routes for the leaderboard widget."""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse

from wagerboard.models import LeaderboardStatus
from wagerboard.services import LeaderboardWidget, render_page
from .dependencies import get_widget

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def leaderboard_page(
    widget: LeaderboardWidget = Depends(get_widget),
) -> HTMLResponse:
    """Full page with the current leaderboard table."""
    return HTMLResponse(render_page(widget.target.html))


@router.get("/leaderboard/fragment", response_class=HTMLResponse)
async def leaderboard_fragment(
    widget: LeaderboardWidget = Depends(get_widget),
) -> HTMLResponse:
    """
    Current table body markup only.

    Returns: <tr> rows, or the loading/error panel
    """
    return HTMLResponse(widget.target.html)


@router.post("/leaderboard/retry")
async def retry_leaderboard(
    widget: LeaderboardWidget = Depends(get_widget),
) -> RedirectResponse:
    """Target of the "Try Again" button: refresh, then show the page."""
    await widget.refresh()
    return RedirectResponse(url="/", status_code=303)


@router.get("/v1/leaderboard", response_model=LeaderboardStatus)
async def get_leaderboard(
    widget: LeaderboardWidget = Depends(get_widget),
) -> LeaderboardStatus:
    """
    Get the displayed leaderboard and refresh state.

    Returns: state, consecutiveErrors, refreshIntervalMs, autoRefresh, lastUpdated, message, rows
    """
    return widget.status()


@router.post("/v1/leaderboard/refresh", response_model=LeaderboardStatus)
async def refresh_leaderboard(
    widget: LeaderboardWidget = Depends(get_widget),
) -> LeaderboardStatus:
    """Run one refresh cycle now and return the resulting state."""
    await widget.refresh()
    return widget.status()


@router.post("/v1/leaderboard/reset", response_model=LeaderboardStatus)
async def reset_leaderboard(
    widget: LeaderboardWidget = Depends(get_widget),
) -> LeaderboardStatus:
    """
    Reset failure state and restart auto-refresh.

    This is the recovery path after auto-refresh has been disabled.
    """
    widget.remount()
    return widget.status()
