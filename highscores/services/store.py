"""Persistent storage for scores and player activity.

Two interchangeable backends implement :class:`ScoreStore`: a SQLModel
store for production and an in-memory store for tests and local tooling.
Both order the leaderboard by score descending with ties kept in
insertion order.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, func, select

from ..models import PlayerActivity, ScoreRecord
from .validation import PlayerKey


class ScoreStore(ABC):
    """Interface consumed by the abuse guard and leaderboard service."""

    @abstractmethod
    def initialize(self, reset: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_activity(self, key: PlayerKey) -> Optional[PlayerActivity]:
        raise NotImplementedError

    @abstractmethod
    def create_activity(
        self, key: PlayerKey, now: int, session_id: str
    ) -> PlayerActivity:
        raise NotImplementedError

    @abstractmethod
    def touch_activity(self, key: PlayerKey, now: int) -> None:
        """Record an accepted attempt: bump the counter, move the timestamp."""
        raise NotImplementedError

    @abstractmethod
    def get_score(self, key: PlayerKey) -> Optional[ScoreRecord]:
        raise NotImplementedError

    @abstractmethod
    def save_best_score(self, key: PlayerKey, score: int, timestamp: int) -> bool:
        """Insert or raise the stored best; return False if it was not lower."""
        raise NotImplementedError

    @abstractmethod
    def top_scores(self, limit: int) -> List[ScoreRecord]:
        raise NotImplementedError

    @abstractmethod
    def rank_of(self, key: PlayerKey) -> Tuple[Optional[int], int]:
        """Return the 1-based row-number rank of ``key`` and the total count."""
        raise NotImplementedError

    @abstractmethod
    def count_scores(self) -> int:
        raise NotImplementedError


class SQLModelStore(ScoreStore):
    """Store backed by a SQLAlchemy engine. Each call commits on its own."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def initialize(self, reset: bool = False) -> None:
        if reset:
            SQLModel.metadata.drop_all(self.engine)
        SQLModel.metadata.create_all(self.engine)

    def get_activity(self, key: PlayerKey) -> Optional[PlayerActivity]:
        with Session(self.engine) as session:
            return session.exec(
                select(PlayerActivity).where(PlayerActivity.name == key)
            ).first()

    def create_activity(
        self, key: PlayerKey, now: int, session_id: str
    ) -> PlayerActivity:
        activity = PlayerActivity(
            name=key,
            last_submission=now,
            submission_count=1,
            first_seen=now,
            session_id=session_id,
        )
        with Session(self.engine) as session:
            session.add(activity)
            session.commit()
            session.refresh(activity)
        return activity

    def touch_activity(self, key: PlayerKey, now: int) -> None:
        with Session(self.engine) as session:
            activity = session.exec(
                select(PlayerActivity).where(PlayerActivity.name == key)
            ).one()
            activity.last_submission = now
            activity.submission_count += 1
            session.add(activity)
            session.commit()

    def get_score(self, key: PlayerKey) -> Optional[ScoreRecord]:
        with Session(self.engine) as session:
            return session.exec(
                select(ScoreRecord).where(ScoreRecord.name == key)
            ).first()

    def save_best_score(self, key: PlayerKey, score: int, timestamp: int) -> bool:
        with Session(self.engine) as session:
            existing = session.exec(
                select(ScoreRecord).where(ScoreRecord.name == key)
            ).first()
            if existing is None:
                session.add(ScoreRecord(name=key, score=score, timestamp=timestamp))
            elif score > existing.score:
                existing.score = score
                existing.timestamp = timestamp
                session.add(existing)
            else:
                return False
            session.commit()
        return True

    def _ordering(self):
        return (ScoreRecord.score.desc(), ScoreRecord.id.asc())

    def top_scores(self, limit: int) -> List[ScoreRecord]:
        with Session(self.engine) as session:
            return list(
                session.exec(
                    select(ScoreRecord).order_by(*self._ordering()).limit(limit)
                ).all()
            )

    def rank_of(self, key: PlayerKey) -> Tuple[Optional[int], int]:
        ranked = select(
            ScoreRecord.name,
            func.row_number().over(order_by=self._ordering()).label("position"),
        ).subquery()
        with Session(self.engine) as session:
            rank = session.exec(
                select(ranked.c.position).where(ranked.c.name == key)
            ).first()
            total = session.exec(select(func.count(ScoreRecord.id))).one()
        return rank, total

    def count_scores(self) -> int:
        with Session(self.engine) as session:
            return session.exec(select(func.count(ScoreRecord.id))).one()


def _copy_score(record: ScoreRecord) -> ScoreRecord:
    return ScoreRecord(
        id=record.id, name=record.name, score=record.score, timestamp=record.timestamp
    )


def _copy_activity(activity: PlayerActivity) -> PlayerActivity:
    return PlayerActivity(
        id=activity.id,
        name=activity.name,
        last_submission=activity.last_submission,
        submission_count=activity.submission_count,
        first_seen=activity.first_seen,
        session_id=activity.session_id,
    )


class MemoryStore(ScoreStore):
    """Dictionary-backed store; dict order doubles as insertion order."""

    def __init__(self) -> None:
        self._scores: Dict[PlayerKey, ScoreRecord] = {}
        self._activity: Dict[PlayerKey, PlayerActivity] = {}
        self._lock = threading.Lock()
        self._next_id = 1

    def initialize(self, reset: bool = False) -> None:
        if reset:
            with self._lock:
                self._scores.clear()
                self._activity.clear()

    def get_activity(self, key: PlayerKey) -> Optional[PlayerActivity]:
        with self._lock:
            activity = self._activity.get(key)
            return _copy_activity(activity) if activity else None

    def create_activity(
        self, key: PlayerKey, now: int, session_id: str
    ) -> PlayerActivity:
        with self._lock:
            if key in self._activity:
                raise ValueError(f"activity for {key!r} already exists")
            activity = PlayerActivity(
                id=len(self._activity) + 1,
                name=key,
                last_submission=now,
                submission_count=1,
                first_seen=now,
                session_id=session_id,
            )
            self._activity[key] = activity
            return _copy_activity(activity)

    def touch_activity(self, key: PlayerKey, now: int) -> None:
        with self._lock:
            activity = self._activity[key]
            activity.last_submission = now
            activity.submission_count += 1

    def get_score(self, key: PlayerKey) -> Optional[ScoreRecord]:
        with self._lock:
            record = self._scores.get(key)
            return _copy_score(record) if record else None

    def save_best_score(self, key: PlayerKey, score: int, timestamp: int) -> bool:
        with self._lock:
            existing = self._scores.get(key)
            if existing is None:
                self._scores[key] = ScoreRecord(
                    id=self._next_id, name=key, score=score, timestamp=timestamp
                )
                self._next_id += 1
                return True
            if score <= existing.score:
                return False
            existing.score = score
            existing.timestamp = timestamp
            return True

    def _ordered(self) -> List[ScoreRecord]:
        # sorted() is stable, so equal scores keep insertion order.
        return sorted(self._scores.values(), key=lambda record: -record.score)

    def top_scores(self, limit: int) -> List[ScoreRecord]:
        with self._lock:
            return [_copy_score(record) for record in self._ordered()[:limit]]

    def rank_of(self, key: PlayerKey) -> Tuple[Optional[int], int]:
        with self._lock:
            ordered = self._ordered()
            for position, record in enumerate(ordered, start=1):
                if record.name == key:
                    return position, len(ordered)
            return None, len(ordered)

    def count_scores(self) -> int:
        with self._lock:
            return len(self._scores)


__all__ = ["MemoryStore", "SQLModelStore", "ScoreStore"]
