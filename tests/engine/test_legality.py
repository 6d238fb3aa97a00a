from __future__ import annotations

import pytest

from gbchess.engine.board import Color, Kind, Piece
from gbchess.engine.game import GameState


def game_from(*rows: str, white_to_move: bool = True) -> GameState:
    return GameState.from_string("\n".join(rows), white_to_move=white_to_move)


def test_pawn_push_updates_turn_and_counter() -> None:
    g = GameState.new()
    assert g.make_move(6, 4, 4, 4) is True
    assert g.board.get(4, 4) == Piece(Kind.PAWN, Color.WHITE)
    assert g.board.is_empty(6, 4)
    assert g.white_to_move is False
    assert g.move_count == 1


@pytest.mark.parametrize(
    "move",
    [
        (-1, 0, 0, 0),  # source off board
        (6, 4, 8, 4),  # destination off board
        (4, 4, 3, 4),  # empty source
        (1, 4, 3, 4),  # black piece on white's turn
        (7, 0, 6, 0),  # onto own piece
        (6, 4, 3, 4),  # pawn triple push
        (6, 4, 5, 5),  # pawn diagonal without capture
        (6, 4, 7, 4),  # pawn backwards
        (7, 2, 5, 4),  # bishop through own pawn
        (7, 3, 5, 3),  # queen through own pawn
        (7, 1, 5, 1),  # knight straight
        (7, 4, 7, 4),  # null move
    ],
)
def test_illegal_moves_rejected_without_mutation(move: tuple[int, int, int, int]) -> None:
    g = GameState.new()
    before = g.board_flat()
    assert g.is_valid_move(*move) is False
    assert g.make_move(*move) is False
    assert g.board_flat() == before
    assert g.white_to_move is True
    assert g.move_count == 0


def test_turn_alternates() -> None:
    g = GameState.new()
    assert g.make_move(6, 4, 4, 4)
    # White again is rejected.
    assert g.make_move(6, 3, 4, 3) is False
    assert g.make_move(1, 4, 3, 4) is True
    assert g.is_turn(Color.WHITE)


def test_knight_jump_from_start() -> None:
    g = GameState.new()
    assert g.make_move(7, 1, 5, 2)
    assert g.board.get(5, 2) == Piece(Kind.KNIGHT, Color.WHITE)


def test_double_push_needs_empty_intermediate_square() -> None:
    g = game_from(
        "....k...",
        "........",
        "........",
        "........",
        "........",
        "....n...",
        "....P...",
        "....K...",
    )
    assert g.is_valid_move(6, 4, 4, 4) is False
    assert g.is_valid_move(6, 4, 5, 4) is False


def test_double_push_only_from_start_row() -> None:
    g = game_from(
        "....k...",
        "........",
        "........",
        "........",
        "........",
        "P.......",
        "........",
        "....K...",
    )
    assert g.is_valid_move(5, 0, 4, 0) is True
    assert g.is_valid_move(5, 0, 3, 0) is False


def test_pawn_captures_diagonally() -> None:
    g = game_from(
        "....k...",
        "........",
        "........",
        "...p....",
        "....P...",
        "........",
        "........",
        "....K...",
    )
    assert g.is_valid_move(4, 4, 3, 3) is True
    assert g.is_valid_move(4, 4, 3, 5) is False
    assert g.make_move(4, 4, 3, 3)
    assert g.board.get(3, 3) == Piece(Kind.PAWN, Color.WHITE)


def test_pawn_cannot_capture_straight_ahead() -> None:
    g = game_from(
        "....k...",
        "........",
        "........",
        "....p...",
        "....P...",
        "........",
        "........",
        "....K...",
    )
    assert g.is_valid_move(4, 4, 3, 4) is False


def test_slider_captures_first_enemy_only() -> None:
    g = game_from(
        "....k...",
        "........",
        "r.......",
        "........",
        "n.......",
        "........",
        "........",
        "R...K...",
    )
    assert g.is_valid_move(7, 0, 4, 0) is True
    assert g.is_valid_move(7, 0, 2, 0) is False


def test_black_moves_toward_row_seven() -> None:
    g = GameState.new(white_to_move=False)
    assert g.is_valid_move(1, 4, 3, 4) is True
    assert g.is_valid_move(1, 4, 2, 4) is True
    assert g.is_valid_move(6, 4, 4, 4) is False
