"""Per-player submission cooldown, daily quota and score progression."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from ..core import (
    DAILY_SUBMISSION_LIMIT,
    QUOTA_WINDOW_MS,
    SUBMIT_COOLDOWN_MS,
    get_logger,
    now_ms,
)
from .store import ScoreStore
from .validation import PlayerKey

logger = get_logger(__name__)


class RejectionKind(str, enum.Enum):
    """Why a submission was turned away."""

    INVALID_INPUT = "invalid_input"
    RATE_LIMITED = "rate_limited"
    NOT_PROGRESSING = "not_progressing"


@dataclass(frozen=True)
class Verdict:
    """Outcome of a single gate. ``reason`` is user-facing."""

    ok: bool
    reason: Optional[str] = None
    kind: Optional[RejectionKind] = None

    @classmethod
    def allow(cls) -> "Verdict":
        return cls(ok=True)

    @classmethod
    def deny(cls, kind: RejectionKind, reason: str) -> "Verdict":
        return cls(ok=False, reason=reason, kind=kind)


def generate_session_id() -> str:
    return uuid.uuid4().hex


class AbuseGuard:
    """Rate limiting and progression checks against the persistent store.

    The daily counter is anchored at first contact and never reset: once a
    full window has passed since a player was first seen, the quota gate no
    longer applies to them. Only the cooldown keeps limiting them.
    """

    def __init__(
        self,
        store: ScoreStore,
        *,
        clock: Callable[[], int] = now_ms,
        cooldown_ms: int = SUBMIT_COOLDOWN_MS,
        daily_limit: int = DAILY_SUBMISSION_LIMIT,
        window_ms: int = QUOTA_WINDOW_MS,
    ) -> None:
        self.store = store
        self.clock = clock
        self.cooldown_ms = cooldown_ms
        self.daily_limit = daily_limit
        self.window_ms = window_ms

    @property
    def cooldown_message(self) -> str:
        seconds = self.cooldown_ms // 1000
        return f"Cooldown active: wait at least {seconds} seconds between attempts"

    def check_rate_limit(
        self, key: PlayerKey, session_id_hint: Optional[str] = None
    ) -> Verdict:
        now = self.clock()
        activity = self.store.get_activity(key)

        if activity is None:
            self.store.create_activity(
                key, now, session_id_hint or generate_session_id()
            )
            logger.debug("First contact from %s", key)
            return Verdict.allow()

        if now - activity.last_submission < self.cooldown_ms:
            return Verdict.deny(RejectionKind.RATE_LIMITED, self.cooldown_message)

        windows_since_first = (now - activity.first_seen) / self.window_ms
        if windows_since_first < 1 and activity.submission_count >= self.daily_limit:
            return Verdict.deny(
                RejectionKind.RATE_LIMITED,
                "Daily quota exceeded: too many attempts today, try again tomorrow",
            )

        self.store.touch_activity(key, now)
        return Verdict.allow()

    def validate_score_progression(self, key: PlayerKey, new_score: int) -> Verdict:
        existing = self.store.get_score(key)
        if existing is not None and new_score <= existing.score:
            return progression_denied(existing.score)
        return Verdict.allow()


def progression_denied(best: int) -> Verdict:
    return Verdict.deny(
        RejectionKind.NOT_PROGRESSING,
        f"Score must exceed personal best of {best}",
    )


__all__ = [
    "AbuseGuard",
    "RejectionKind",
    "Verdict",
    "generate_session_id",
    "progression_denied",
]
