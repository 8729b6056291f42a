"""Database engine construction."""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from .config import DATA_DIR, DATABASE_URL


def build_engine(url: str = DATABASE_URL) -> Engine:
    """Create an engine, preparing SQLite specifics where needed."""

    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if url in {"sqlite://", "sqlite:///:memory:"}:
        # A single shared connection keeps in-memory data alive across sessions.
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)

    if url.startswith(f"sqlite:///{DATA_DIR}"):
        DATA_DIR.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args)


__all__ = ["build_engine"]
