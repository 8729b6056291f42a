"""HTTP surface of the leaderboard service."""

from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, FastAPI

from .deps import get_leaderboard
from .routers import ALL_ROUTERS


def register_routes(app: FastAPI, routers: Iterable[APIRouter] = ALL_ROUTERS) -> None:
    """Mount the leaderboard and system routers on ``app``."""

    for router in routers:
        app.include_router(router)


__all__ = ["get_leaderboard", "register_routes"]
