"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Return an integer environment variable or raise an error."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


_PROJECT_ROOT = Path(__file__).resolve().parents[2]


# Storage --------------------------------------------------------------------
DATA_DIR = Path(os.getenv("DATA_DIR", str(_PROJECT_ROOT / "data")))
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{DATA_DIR / 'highscores.db'}"
DB_RESET = _env_bool("DB_RESET", False)


# HTTP surface ---------------------------------------------------------------
# FRONTEND_ORIGIN can contain a comma-separated list for multi-domain deploys.
_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN", "*"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

ALLOWED_CORS_ORIGINS = _unique([*_frontend_origins, *_additional_origins])

_static_dir = os.getenv("STATIC_DIR")
STATIC_DIR = Path(_static_dir) if _static_dir else None

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# Anti-abuse rules -----------------------------------------------------------
SUBMIT_COOLDOWN_MS = _env_int("SUBMIT_COOLDOWN_MS", 30_000)
DAILY_SUBMISSION_LIMIT = _env_int("DAILY_SUBMISSION_LIMIT", 50)
QUOTA_WINDOW_MS = _env_int("QUOTA_WINDOW_MS", 24 * 60 * 60 * 1000)

# One point per second of play, at most one hour.
MAX_SCORE = _env_int("MAX_SCORE", 3600)

LEADERBOARD_SIZE = _env_int("LEADERBOARD_SIZE", 10)


__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DAILY_SUBMISSION_LIMIT",
    "DATABASE_URL",
    "DATA_DIR",
    "DB_RESET",
    "LEADERBOARD_SIZE",
    "LOG_LEVEL",
    "MAX_SCORE",
    "QUOTA_WINDOW_MS",
    "STATIC_DIR",
    "SUBMIT_COOLDOWN_MS",
]
