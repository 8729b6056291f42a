"""Logger setup shared by the service and the HTTP layer."""

from __future__ import annotations

import logging

from .config import LOG_LEVEL

_ROOT = "highscores"
_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(LOG_LEVEL)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``highscores``."""

    _configure_root()
    if name == _ROOT or name.startswith(f"{_ROOT}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")


__all__ = ["get_logger"]
