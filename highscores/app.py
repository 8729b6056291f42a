"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .api import register_routes
from .core import ALLOWED_CORS_ORIGINS, DB_RESET, STATIC_DIR, build_engine, get_logger
from .services import LeaderboardService, SQLModelStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.leaderboard.store.initialize(reset=DB_RESET)
    yield


async def _store_fault(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"success": False, "error": "Internal server error"}, 500)


def create_app(service: Optional[LeaderboardService] = None) -> FastAPI:
    app = FastAPI(title="Highscores API", version=__version__, lifespan=lifespan)
    app.state.leaderboard = service or LeaderboardService(SQLModelStore(build_engine()))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials="*" not in ALLOWED_CORS_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_exception_handler(SQLAlchemyError, _store_fault)

    register_routes(app)

    # Mounted last so the API routes take precedence over the game assets.
    if STATIC_DIR is not None:
        app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("highscores.app:app", host="127.0.0.1", port=3000, reload=True)
