from enum import Enum


class FetchErrorKind(str, Enum):
    """Classification of a failed fetch."""
    NETWORK = "network"
    CONNECTION = "connection"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    UNKNOWN = "unknown"


class WagerboardError(Exception):
    """Base exception for leaderboard pipeline errors."""

    pass


class FetchFailure(WagerboardError):
    """The spreadsheet export could not be retrieved."""

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind = FetchErrorKind.UNKNOWN,
        status_code: int | None = None,
        reason: str = "",
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.reason = reason

    @classmethod
    def from_status(cls, status_code: int, reason: str) -> "FetchFailure":
        """Build a failure from a non-successful HTTP response."""
        if status_code == 429:
            kind = FetchErrorKind.RATE_LIMIT
        elif status_code >= 500:
            kind = FetchErrorKind.SERVER
        else:
            kind = FetchErrorKind.UNKNOWN
        return cls(
            f"Failed to fetch data: {status_code} {reason}".strip(),
            kind=kind,
            status_code=status_code,
            reason=reason,
        )

    @property
    def is_rate_limited(self) -> bool:
        return self.kind == FetchErrorKind.RATE_LIMIT


class EmptySourceError(WagerboardError):
    """The export contained no usable participant rows."""

    pass


class RenderFault(WagerboardError):
    """Unexpected failure while projecting or rendering the table."""

    pass
