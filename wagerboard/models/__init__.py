from .state import FetchState, RetryState
from .participant import ParticipantRecord, LeaderboardSnapshot
from .display import DisplayRow, LeaderboardStatus, NO_PRIZE

__all__ = [
    "FetchState",
    "RetryState",
    "ParticipantRecord",
    "LeaderboardSnapshot",
    "DisplayRow",
    "LeaderboardStatus",
    "NO_PRIZE",
]
