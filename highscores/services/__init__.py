"""Service layer helpers."""

from .guard import AbuseGuard, RejectionKind, Verdict
from .leaderboard import LeaderboardService, RankResult, SubmitResult
from .store import MemoryStore, ScoreStore, SQLModelStore
from .validation import PlayerKey, canonical_name, is_valid_name, is_valid_score

__all__ = [
    "AbuseGuard",
    "LeaderboardService",
    "MemoryStore",
    "PlayerKey",
    "RankResult",
    "RejectionKind",
    "SQLModelStore",
    "ScoreStore",
    "SubmitResult",
    "Verdict",
    "canonical_name",
    "is_valid_name",
    "is_valid_score",
]
