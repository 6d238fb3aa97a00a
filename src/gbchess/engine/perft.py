from __future__ import annotations

from typing import Dict

from .game import GameState


def perft(game: GameState, depth: int) -> int:
    """Compute the perft node count for ``game`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Children are visited with the fast apply/undo path, so the game is left
    exactly as it was found.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for m in game.generate_moves():
        with game.applied(m):
            nodes += perft(game, depth - 1)
    return nodes


def divide(game: GameState, depth: int) -> Dict[str, int]:
    """Return perft(depth - 1) per root move, keyed by its display coordinate."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: Dict[str, int] = {}
    for m in game.generate_moves():
        with game.applied(m):
            out[m.to_coord()] = perft(game, depth - 1)
    return out
