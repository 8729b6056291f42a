"""Database model exports."""

from .activity import PlayerActivity
from .score import ScoreRecord

__all__ = [
    "PlayerActivity",
    "ScoreRecord",
]
