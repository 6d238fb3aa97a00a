from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Final, Optional

from gbchess.engine.game import GameState
from gbchess.engine.move import Move
from gbchess.eval import evaluate
from gbchess.search.difficulty import Difficulty, depth_for


logger = logging.getLogger(__name__)

INF: Final = 10_000_000
# Returned when the side to move has no legal move; mate and stalemate alike.
NO_MOVES_SCORE: Final = 30_000


@dataclass
class SearchStats:
    nodes: int = 0


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: Optional[int]
    nodes: int
    depth: int
    time_ms: int


def minimax(
    game: GameState,
    depth: int,
    alpha: int,
    beta: int,
    maximizing: bool,
    stats: Optional[SearchStats] = None,
) -> int:
    """Depth-limited minimax with alpha-beta pruning.

    White maximizes, black minimizes. Moves are searched in generation order
    and every child is played through ``GameState.applied`` so the board is
    restored on every exit, including pruning breaks.

    Args:
        game (GameState): Position to search; left unchanged on return.
        depth (int): Remaining plies; 0 returns the static evaluation.
        alpha (int): Lower bound already guaranteed to the maximizer.
        beta (int): Upper bound already guaranteed to the minimizer.
        maximizing (bool): True if the side to move maximizes.
        stats (Optional[SearchStats]): Node counter, incremented per call.

    Returns:
        int: Minimax value of the position within the window.
    """
    if stats is not None:
        stats.nodes += 1
    if depth == 0:
        return evaluate(game)

    moves = game.generate_moves()
    if not moves:
        return -NO_MOVES_SCORE if maximizing else NO_MOVES_SCORE

    if maximizing:
        best = -INF
        for move in moves:
            with game.applied(move):
                value = minimax(game, depth - 1, alpha, beta, False, stats)
            best = max(best, value)
            alpha = max(alpha, value)
            if beta <= alpha:
                break
        return best

    best = INF
    for move in moves:
        with game.applied(move):
            value = minimax(game, depth - 1, alpha, beta, True, stats)
        best = min(best, value)
        beta = min(beta, value)
        if beta <= alpha:
            break
    return best


class SearchService:
    """Root driver around ``minimax``.

    Searches the given game in place; callers running several searches at
    once must hand each one its own ``GameState.clone()``.
    """

    def search(self, game: GameState, depth: int = 2) -> SearchResult:
        """Pick the best move for the side to move.

        Every root move gets its ``score`` set. Only ``best_move`` carries an
        exact value: once the root window narrows, the other moves hold
        fail-soft bounds (no better than the best for the side to move).
        A move replaces the current best only if strictly better, so the
        first of equal moves wins.

        Args:
            game (GameState): Position to search.
            depth (int): Search depth in plies, at least 1.

        Returns:
            SearchResult: Best move and its score, or ``None`` for both when
                the side to move has no legal move.

        Raises:
            ValueError: If ``depth`` is below 1.
        """
        if depth < 1:
            raise ValueError("depth must be >= 1")
        start = time.perf_counter()
        stats = SearchStats(nodes=1)
        maximizing = game.white_to_move

        best_move: Optional[Move] = None
        best_score: Optional[int] = None
        alpha, beta = -INF, INF
        for move in game.generate_moves():
            with game.applied(move):
                value = minimax(game, depth - 1, alpha, beta, not maximizing, stats)
            move.score = value
            if best_score is None or (value > best_score if maximizing else value < best_score):
                best_move, best_score = move, value
                if maximizing:
                    alpha = max(alpha, value)
                else:
                    beta = min(beta, value)

        time_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "search done",
            extra={
                "depth": depth,
                "nodes": stats.nodes,
                "time_ms": time_ms,
                "best_move": best_move.to_coord() if best_move else None,
                "score": best_score,
            },
        )
        return SearchResult(
            best_move=best_move,
            score=best_score,
            nodes=stats.nodes,
            depth=depth,
            time_ms=time_ms,
        )


def get_best_move(game: GameState, depth: int = 2) -> Optional[Move]:
    """Return the best move at ``depth`` with its score set, or None if there is none."""
    return SearchService().search(game, depth).best_move


def best_move_for_difficulty(game: GameState, level: Difficulty) -> Optional[Move]:
    return get_best_move(game, depth_for(level))
