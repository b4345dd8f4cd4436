"""Refresh session state."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RetryState(str, Enum):
    """Health of the refresh loop."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    SUSPENDED = "suspended"


@dataclass
class FetchState:
    """
    Mutable timing and failure state for one mounted widget.

    Created on mount and discarded on unmount. The fetch controller owns
    `last_request_at_ms`; the retry policy owns the rest.
    """

    refresh_interval_ms: int
    consecutive_error_count: int = 0
    last_request_at_ms: Optional[float] = None
    suspended: bool = False

    def reset(self, refresh_interval_ms: int) -> None:
        """Return to a freshly mounted state."""
        self.refresh_interval_ms = refresh_interval_ms
        self.consecutive_error_count = 0
        self.last_request_at_ms = None
        self.suspended = False
