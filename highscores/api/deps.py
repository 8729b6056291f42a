"""Request-scoped dependencies."""

from __future__ import annotations

from fastapi import Request

from ..services import LeaderboardService


def get_leaderboard(request: Request) -> LeaderboardService:
    """FastAPI dependency returning the service attached to the app."""

    return request.app.state.leaderboard


__all__ = ["get_leaderboard"]
