"""Score submission, top-N retrieval and rank lookup."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..core import LEADERBOARD_SIZE, MAX_SCORE, get_logger, now_ms
from ..models import ScoreRecord
from .guard import AbuseGuard, RejectionKind, Verdict, progression_denied
from .store import ScoreStore
from .validation import (
    PlayerKey,
    as_integer,
    canonical_name,
    is_valid_name,
    is_valid_score,
)

logger = get_logger(__name__)

INVALID_NAME_MESSAGE = "Invalid name! Use 3-16 characters (letters, numbers, _)"
INVALID_SCORE_MESSAGE = "Invalid or suspicious score"
SAVED_MESSAGE = "Score saved!"

_STATUS_BY_KIND = {
    RejectionKind.INVALID_INPUT: 400,
    RejectionKind.RATE_LIMITED: 429,
    RejectionKind.NOT_PROGRESSING: 400,
}


@dataclass(frozen=True)
class SubmitResult:
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[RejectionKind] = None

    @classmethod
    def accepted(cls) -> "SubmitResult":
        return cls(success=True, message=SAVED_MESSAGE)

    @classmethod
    def rejected(cls, verdict: Verdict) -> "SubmitResult":
        return cls(success=False, error=verdict.reason, kind=verdict.kind)

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        return _STATUS_BY_KIND.get(self.kind, 400)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "message": self.message}
        return {"success": False, "error": self.error}


@dataclass(frozen=True)
class RankResult:
    rank: Optional[int]
    total_players: int

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "rank": self.rank, "totalPlayers": self.total_players}


class PlayerLocks:
    """One mutex per player key, released from memory when unused."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._waiters[key] -= 1
                if not self._waiters[key]:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class LeaderboardService:
    """Entry point used by the HTTP layer.

    Checks run in a fixed order and the first failing gate wins: format,
    then rate limiting, then progression. Rate-limit state is therefore
    only consumed by well-formed submissions, and an attempt that passes the
    cooldown counts against the quota even if its score is then rejected.
    """

    def __init__(
        self,
        store: ScoreStore,
        guard: Optional[AbuseGuard] = None,
        *,
        clock: Callable[[], int] = now_ms,
        max_score: int = MAX_SCORE,
    ) -> None:
        self.store = store
        self.clock = clock
        self.guard = guard or AbuseGuard(store, clock=clock)
        self.max_score = max_score
        self._locks = PlayerLocks()

    def submit_score(
        self, raw_name: Any, raw_score: Any, session_id: Optional[str] = None
    ) -> SubmitResult:
        if not is_valid_name(raw_name):
            return SubmitResult.rejected(
                Verdict.deny(RejectionKind.INVALID_INPUT, INVALID_NAME_MESSAGE)
            )
        if not is_valid_score(raw_score, self.max_score):
            return SubmitResult.rejected(
                Verdict.deny(RejectionKind.INVALID_INPUT, INVALID_SCORE_MESSAGE)
            )

        key = canonical_name(raw_name)
        score = as_integer(raw_score)
        with self._locks.hold(key):
            verdict = self._admit(key, score, session_id)

        if not verdict.ok:
            logger.info("Rejected %s (%s): %s", key, score, verdict.reason)
            return SubmitResult.rejected(verdict)

        logger.info("Score submitted: %s - %s points", key, score)
        return SubmitResult.accepted()

    def _admit(self, key: PlayerKey, score: int, session_id: Optional[str]) -> Verdict:
        verdict = self.guard.check_rate_limit(key, session_id)
        if not verdict.ok:
            return verdict

        verdict = self.guard.validate_score_progression(key, score)
        if not verdict.ok:
            return verdict

        if not self.store.save_best_score(key, score, self.clock()):
            # Another writer stored a better score after the progression check.
            current = self.store.get_score(key)
            return progression_denied(current.score if current else score)
        return verdict

    def get_top_scores(self, limit: int = LEADERBOARD_SIZE) -> List[ScoreRecord]:
        return self.store.top_scores(max(0, limit))

    def get_rank(self, name: str) -> RankResult:
        rank, total = self.store.rank_of(canonical_name(name))
        return RankResult(rank=rank, total_players=total)


__all__ = [
    "INVALID_NAME_MESSAGE",
    "INVALID_SCORE_MESSAGE",
    "LeaderboardService",
    "PlayerLocks",
    "RankResult",
    "SAVED_MESSAGE",
    "SubmitResult",
]
