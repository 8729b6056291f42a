"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    DAILY_SUBMISSION_LIMIT,
    DATABASE_URL,
    DB_RESET,
    LEADERBOARD_SIZE,
    MAX_SCORE,
    QUOTA_WINDOW_MS,
    STATIC_DIR,
    SUBMIT_COOLDOWN_MS,
)
from .database import build_engine
from .logging import get_logger
from .time import now_ms

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DAILY_SUBMISSION_LIMIT",
    "DATABASE_URL",
    "DB_RESET",
    "LEADERBOARD_SIZE",
    "MAX_SCORE",
    "QUOTA_WINDOW_MS",
    "STATIC_DIR",
    "SUBMIT_COOLDOWN_MS",
    "build_engine",
    "get_logger",
    "now_ms",
]
