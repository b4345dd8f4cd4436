"""Consecutive-failure tracking and refresh interval decisions."""

import logging
from dataclasses import dataclass
from typing import Optional

from wagerboard.exceptions import FetchErrorKind, FetchFailure
from wagerboard.models import FetchState, RetryState

logger = logging.getLogger(__name__)

MAX_ERRORS_BEFORE_STOP = 2
RATE_LIMITED_INTERVAL_MS = 60000

ERROR_MESSAGES = {
    FetchErrorKind.NETWORK: (
        "Unable to connect to the server. "
        "Please check your internet connection and try again."
    ),
    FetchErrorKind.CONNECTION: (
        "Connection issue with the server. "
        "Please try again later or contact the administrator."
    ),
    FetchErrorKind.RATE_LIMIT: (
        "Too many requests to the server. "
        "Please wait a moment before trying again."
    ),
    FetchErrorKind.SERVER: (
        "The server is currently experiencing issues. Please try again later."
    ),
}

# Messages some export proxies return in Indonesian
TRANSLATIONS = {
    "Gagal memproses response dari server": "Failed to process server response",
    "Terjadi kesalahan pada server": "An error occurred on the server",
    "Permintaan tidak valid": "Invalid request",
    "Data tidak ditemukan": "Data not found",
    "Akses ditolak": "Access denied",
    "Terlalu banyak permintaan": "Too many requests",
    "Koneksi ke server gagal": "Failed to connect to server",
    "Timeout saat menghubungi server": "Server connection timeout",
}


def translate_error_message(message: str) -> str:
    """Translate a known server message to English, else return it unchanged."""
    return TRANSLATIONS.get(message, message)


def describe_failure(failure: FetchFailure) -> str:
    """User-facing message for a fetch failure."""
    template = ERROR_MESSAGES.get(failure.kind)
    if template is not None:
        return template
    if failure.reason and failure.reason in TRANSLATIONS:
        return f"Failed to fetch data: {failure.status_code} {translate_error_message(failure.reason)}"
    return translate_error_message(str(failure)) or "An unknown error occurred"


@dataclass
class RefreshDecision:
    """What the widget should do after a fetch attempt."""

    state: RetryState
    interval_ms: int
    cancel_timer: bool = False
    resume_timer: bool = False
    message: Optional[str] = None
    terminal: bool = False


class RetryPolicy:
    """
    Error/retry state machine.

    healthy (0 failures) -> degraded (below threshold) -> suspended
    (threshold reached, refresh job cancelled). Any success returns to
    healthy. Rate limiting widens the refresh interval without changing
    the state.
    """

    def __init__(
        self,
        state: FetchState,
        max_errors: int = MAX_ERRORS_BEFORE_STOP,
        rate_limited_interval_ms: int = RATE_LIMITED_INTERVAL_MS,
    ):
        self.state = state
        self.max_errors = max_errors
        self.rate_limited_interval_ms = rate_limited_interval_ms

    @property
    def current_state(self) -> RetryState:
        if self.state.suspended or self.state.consecutive_error_count >= self.max_errors:
            return RetryState.SUSPENDED
        if self.state.consecutive_error_count == 0:
            return RetryState.HEALTHY
        return RetryState.DEGRADED

    def record_success(self) -> RefreshDecision:
        """Reset the failure count after a successful fetch."""
        was_suspended = self.state.suspended
        if self.state.consecutive_error_count:
            logger.info(
                f"Fetch recovered after {self.state.consecutive_error_count} failure(s)"
            )
        self.state.consecutive_error_count = 0
        self.state.suspended = False

        return RefreshDecision(
            state=RetryState.HEALTHY,
            interval_ms=self.state.refresh_interval_ms,
            resume_timer=was_suspended,
        )

    def record_failure(self, failure: FetchFailure) -> RefreshDecision:
        """
        Count a failed fetch and decide how the refresh loop continues.

        Args:
            failure: The classified fetch failure

        Returns:
            RefreshDecision with the resulting state, interval and message
        """
        self.state.consecutive_error_count += 1
        count = self.state.consecutive_error_count
        message = describe_failure(failure)

        if failure.is_rate_limited:
            logger.warning(
                f"Rate limited, widening refresh interval to {self.rate_limited_interval_ms}ms"
            )
            self.state.refresh_interval_ms = self.rate_limited_interval_ms

        if count >= self.max_errors:
            logger.error(
                f"{count} consecutive fetch failures, disabling auto-refresh ({failure.kind.value})"
            )
            self.state.suspended = True
            return RefreshDecision(
                state=RetryState.SUSPENDED,
                interval_ms=self.state.refresh_interval_ms,
                cancel_timer=True,
                message=message,
                terminal=True,
            )

        logger.warning(
            f"Fetch failed ({failure.kind.value}), attempt {count}/{self.max_errors}: {failure}"
        )
        return RefreshDecision(
            state=RetryState.DEGRADED,
            interval_ms=self.state.refresh_interval_ms,
            message=message,
        )
