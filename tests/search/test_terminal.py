from __future__ import annotations

from gbchess.engine.game import GameState
from gbchess.eval import evaluate
from gbchess.search.service import INF, NO_MOVES_SCORE, SearchService, minimax


def game_from(*rows: str, white_to_move: bool = True) -> GameState:
    return GameState.from_string("\n".join(rows), white_to_move=white_to_move)


def black_mated() -> GameState:
    # Kh8 vs Qg7, Kg6
    return game_from(
        ".......k",
        "......Q.",
        "......K.",
        "........",
        "........",
        "........",
        "........",
        "........",
        white_to_move=False,
    )


def test_checkmated_root_has_no_move() -> None:
    res = SearchService().search(black_mated(), depth=2)
    assert res.best_move is None
    assert res.score is None
    assert res.nodes == 1


def test_no_moves_sentinel_for_minimizer() -> None:
    assert minimax(black_mated(), 1, -INF, INF, False) == NO_MOVES_SCORE


def test_no_moves_sentinel_for_maximizer() -> None:
    white_mated = game_from(
        "........",
        "........",
        "........",
        "........",
        "........",
        "......k.",
        "......q.",
        ".......K",
    )
    assert minimax(white_mated, 3, -INF, INF, True) == -NO_MOVES_SCORE


def test_stalemate_scores_like_mate() -> None:
    g = game_from(
        ".......k",
        ".....Q..",
        "......K.",
        "........",
        "........",
        "........",
        "........",
        "........",
        white_to_move=False,
    )
    assert not g.is_in_check()
    assert minimax(g, 2, -INF, INF, False) == NO_MOVES_SCORE


def test_depth_zero_is_static_eval() -> None:
    g = GameState.new()
    assert minimax(g, 0, -INF, INF, True) == evaluate(g)


def test_mate_in_one_found() -> None:
    g = game_from(
        ".......k",
        "........",
        ".....K..",
        "......Q.",
        "........",
        "........",
        "........",
        "........",
    )
    res = SearchService().search(g, depth=2)
    assert res.best_move is not None
    assert res.score == NO_MOVES_SCORE
    g.make_move(*res.best_move.coords)
    assert g.is_in_check()
    assert g.is_game_over()
