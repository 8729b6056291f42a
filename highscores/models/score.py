"""Database model for leaderboard results."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Column
from sqlmodel import Field as ORMField, SQLModel


class ScoreRecord(SQLModel, table=True):
    """Best score of a single player, keyed by case-folded name."""

    __tablename__ = "leaderboard"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    name: str = ORMField(index=True, unique=True, max_length=16)
    score: int = ORMField(index=True)
    timestamp: int = ORMField(sa_column=Column(BigInteger, nullable=False))

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score, "timestamp": self.timestamp}


__all__ = ["ScoreRecord"]
