"""FastAPI dependencies for dependency injection."""

from wagerboard.services import LeaderboardWidget

# Widget instance - mounted at app startup
_widget: LeaderboardWidget | None = None


def set_widget(widget: LeaderboardWidget | None) -> None:
    """Set (or clear) the mounted widget instance."""
    global _widget
    _widget = widget


def get_widget() -> LeaderboardWidget:
    """Get the mounted widget for dependency injection."""
    if _widget is None:
        raise RuntimeError("LeaderboardWidget not mounted. Call set_widget() first.")
    return _widget
