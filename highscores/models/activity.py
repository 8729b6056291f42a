"""Database model for per-player submission activity."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Column
from sqlmodel import Field as ORMField, SQLModel


class PlayerActivity(SQLModel, table=True):
    """Rate-limit bookkeeping, independent of the leaderboard entry."""

    __tablename__ = "player_activity"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    name: str = ORMField(index=True, unique=True, max_length=16)
    last_submission: int = ORMField(sa_column=Column(BigInteger, nullable=False))
    submission_count: int
    first_seen: int = ORMField(sa_column=Column(BigInteger, nullable=False))
    session_id: str = ORMField(max_length=64)


__all__ = ["PlayerActivity"]
