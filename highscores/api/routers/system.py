"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...services import LeaderboardService
from ...services.validation import NAME_PATTERN
from ..deps import get_leaderboard

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/config")
def get_config(service: LeaderboardService = Depends(get_leaderboard)) -> Dict[str, Any]:
    """Expose the submission rules so the game can explain rejections."""

    guard = service.guard
    return {
        "max_score": service.max_score,
        "cooldown_ms": guard.cooldown_ms,
        "daily_limit": guard.daily_limit,
        "name_pattern": NAME_PATTERN.pattern,
    }


__all__ = ["router"]
