"""Static checks on submitted names and scores."""

from __future__ import annotations

import re
from typing import Any, NewType, Optional

from ..core import MAX_SCORE

PlayerKey = NewType("PlayerKey", str)

NAME_PATTERN = re.compile(r"[A-Za-z0-9_]{3,16}")


def is_valid_name(raw: Any) -> bool:
    """True when the trimmed name is 3-16 letters, digits or underscores."""

    if not isinstance(raw, str):
        return False
    return NAME_PATTERN.fullmatch(raw.strip()) is not None


def as_integer(value: Any) -> Optional[int]:
    """Return ``value`` as an int if it is a whole number, else None.

    JSON decoders hand back ``10.0`` and ``1e3`` as floats; those count as
    whole numbers. Booleans and strings never do.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def is_valid_score(value: Any, max_score: int = MAX_SCORE) -> bool:
    """True for whole numbers in ``1..max_score``."""

    number = as_integer(value)
    return number is not None and 0 < number <= max_score


def canonical_name(raw: str) -> PlayerKey:
    """Normalise a player name into its storage key."""

    return PlayerKey(raw.strip().lower())


__all__ = [
    "NAME_PATTERN",
    "PlayerKey",
    "as_integer",
    "canonical_name",
    "is_valid_name",
    "is_valid_score",
]
