from __future__ import annotations

from enum import IntEnum
from typing import Union


class Difficulty(IntEnum):
    """Playing strength levels; each level searches that many plies."""

    BEGINNER = 1
    EASY = 2
    MEDIUM = 3
    HARD = 4
    EXPERT = 5


def depth_for(level: Union[Difficulty, int]) -> int:
    """Map a difficulty level to its search depth.

    Raises:
        ValueError: If ``level`` is not one of the five levels.
    """
    return int(Difficulty(level))


def parse_difficulty(name: str) -> Difficulty:
    """Look a level up by name (``"easy"``) or number (``"2"``).

    Raises:
        ValueError: If ``name`` matches no level.
    """
    key = name.strip()
    if key.isdigit():
        return Difficulty(int(key))
    try:
        return Difficulty[key.upper()]
    except KeyError:
        raise ValueError(f"unknown difficulty: {name!r}") from None
