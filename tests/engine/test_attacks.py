from __future__ import annotations

from gbchess.engine.attacks import find_king, is_in_check, is_square_under_attack
from gbchess.engine.board import Board, Color


def board(*rows: str) -> Board:
    return Board.from_string("\n".join(rows))


def test_pawns_attack_diagonals_only() -> None:
    b = board(
        "........",
        "........",
        "........",
        "........",
        "....P...",
        "........",
        "........",
        "........",
    )
    assert is_square_under_attack(b, 3, 3, Color.WHITE)
    assert is_square_under_attack(b, 3, 5, Color.WHITE)
    # The square straight ahead is a push target, not an attacked square.
    assert not is_square_under_attack(b, 3, 4, Color.WHITE)
    assert not is_square_under_attack(b, 5, 3, Color.WHITE)


def test_black_pawn_attacks_toward_row_seven() -> None:
    b = board(
        "........",
        "........",
        "........",
        "...p....",
        "........",
        "........",
        "........",
        "........",
    )
    assert is_square_under_attack(b, 4, 2, Color.BLACK)
    assert is_square_under_attack(b, 4, 4, Color.BLACK)
    assert not is_square_under_attack(b, 2, 2, Color.BLACK)


def test_knight_jumps_over_pieces() -> None:
    b = board(
        "........",
        "........",
        "........",
        "........",
        "........",
        "PPP.....",
        "PNP.....",
        "PPP.....",
    )
    assert is_square_under_attack(b, 4, 0, Color.WHITE)
    assert is_square_under_attack(b, 4, 2, Color.WHITE)
    assert is_square_under_attack(b, 5, 3, Color.WHITE)


def test_sliders_are_blocked() -> None:
    b = board(
        "r.......",
        "........",
        "p.......",
        "........",
        "........",
        "........",
        "........",
        "........",
    )
    assert is_square_under_attack(b, 1, 0, Color.BLACK)
    assert is_square_under_attack(b, 0, 7, Color.BLACK)
    assert not is_square_under_attack(b, 4, 0, Color.BLACK)


def test_bishop_and_queen_lines() -> None:
    b = board(
        "........",
        "........",
        "........",
        "...B....",
        "........",
        "........",
        "......q.",
        "........",
    )
    assert is_square_under_attack(b, 0, 0, Color.WHITE)
    assert is_square_under_attack(b, 6, 6, Color.WHITE)
    assert not is_square_under_attack(b, 7, 7, Color.WHITE)
    assert is_square_under_attack(b, 6, 0, Color.BLACK)
    assert is_square_under_attack(b, 4, 4, Color.BLACK)
    # Line from g2 to a8 runs through the bishop on d5.
    assert not is_square_under_attack(b, 0, 0, Color.BLACK)


def test_off_board_square_is_never_attacked() -> None:
    assert not is_square_under_attack(Board.startpos(), -1, 0, Color.WHITE)


def test_check_detection() -> None:
    b = board(
        "....k...",
        "........",
        "........",
        "........",
        "........",
        "........",
        "........",
        "....R..K",
    )
    assert find_king(b, Color.BLACK) == (0, 4)
    assert is_in_check(b, Color.BLACK)
    assert not is_in_check(b, Color.WHITE)


def test_missing_king_is_not_in_check() -> None:
    b = board(
        "........",
        "........",
        "........",
        "........",
        "........",
        "........",
        "........",
        "....r...",
    )
    assert find_king(b, Color.WHITE) is None
    assert not is_in_check(b, Color.WHITE)
