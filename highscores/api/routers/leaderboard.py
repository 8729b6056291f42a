"""Leaderboard endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from ...core import LEADERBOARD_SIZE
from ...services import LeaderboardService
from ...services.leaderboard import INVALID_NAME_MESSAGE
from ..deps import get_leaderboard

router = APIRouter(prefix="/api", tags=["leaderboard"])


@router.get("/leaderboard")
def get_leaderboard_entries(
    limit: int = Query(LEADERBOARD_SIZE, ge=0, le=100),
    service: LeaderboardService = Depends(get_leaderboard),
) -> Dict[str, Any]:
    """Return the top scores, best first."""

    return {
        "success": True,
        "data": [record.to_dict() for record in service.get_top_scores(limit)],
    }


@router.post("/submit-score")
def submit_score(
    body: Any = Body(None),
    service: LeaderboardService = Depends(get_leaderboard),
) -> JSONResponse:
    """Submit a score for a player."""

    if not isinstance(body, dict):
        return JSONResponse({"success": False, "error": INVALID_NAME_MESSAGE}, 400)

    session_id = body.get("sessionId")
    result = service.submit_score(
        body.get("name"),
        body.get("score"),
        session_id if isinstance(session_id, str) and session_id else None,
    )
    return JSONResponse(result.to_dict(), status_code=result.status_code)


@router.get("/rank/{name}")
def get_rank(
    name: str, service: LeaderboardService = Depends(get_leaderboard)
) -> Dict[str, Any]:
    """Return a player's position and the number of ranked players."""

    return service.get_rank(name).to_dict()


__all__ = ["router"]
