"""Attack and check detection over a bare board.

Every query is a full scan of the 64 squares; nothing is cached.
"""

from __future__ import annotations

from typing import Optional

from .board import Board, Color, Kind, Piece, Square, in_bounds


KNIGHT_OFFSETS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_OFFSETS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))


def pawn_direction(color: Color) -> int:
    # White pawns advance toward row 0, black toward row 7.
    return -1 if color is Color.WHITE else 1


def path_is_clear(board: Board, fr: int, fc: int, tr: int, tc: int) -> bool:
    """Return True if every square strictly between the two squares is empty.

    The squares must share a row, a column, or a diagonal.
    """
    dr = (tr > fr) - (tr < fr)
    dc = (tc > fc) - (tc < fc)
    r, c = fr + dr, fc + dc
    while (r, c) != (tr, tc):
        if board.squares[r][c] is not None:
            return False
        r += dr
        c += dc
    return True


def is_diagonal(dr: int, dc: int) -> bool:
    return dr != 0 and abs(dr) == abs(dc)


def is_straight(dr: int, dc: int) -> bool:
    return (dr == 0) != (dc == 0)


def piece_attacks(board: Board, piece: Piece, fr: int, fc: int, tr: int, tc: int) -> bool:
    """Return True if ``piece`` standing on ``(fr, fc)`` attacks ``(tr, tc)``.

    Pawns attack only the two forward diagonals, never the square ahead.
    Castling never attacks anything.
    """
    dr = tr - fr
    dc = tc - fc
    if dr == 0 and dc == 0:
        return False
    kind = piece.kind
    if kind is Kind.PAWN:
        return dr == pawn_direction(piece.color) and abs(dc) == 1
    if kind is Kind.KNIGHT:
        return (dr, dc) in KNIGHT_OFFSETS
    if kind is Kind.KING:
        return abs(dr) <= 1 and abs(dc) <= 1
    if kind is Kind.BISHOP:
        return is_diagonal(dr, dc) and path_is_clear(board, fr, fc, tr, tc)
    if kind is Kind.ROOK:
        return is_straight(dr, dc) and path_is_clear(board, fr, fc, tr, tc)
    if kind is Kind.QUEEN:
        return (is_diagonal(dr, dc) or is_straight(dr, dc)) and path_is_clear(
            board, fr, fc, tr, tc
        )
    raise ValueError(f"unknown piece kind: {kind!r}")


def is_square_under_attack(board: Board, row: int, col: int, by: Color) -> bool:
    """Return True if any piece of color ``by`` attacks ``(row, col)``.

    Args:
        board (Board): Position to inspect.
        row (int): Target row.
        col (int): Target column.
        by (Color): Attacking side.

    Returns:
        bool: True on the first attacker found.
    """
    if not in_bounds(row, col):
        return False
    for r, c, piece in board.pieces():
        if piece.color is by and piece_attacks(board, piece, r, c, row, col):
            return True
    return False


def find_king(board: Board, color: Color) -> Optional[Square]:
    """Return the square of ``color``'s king, or None if it is not on the board."""
    for r, c, piece in board.pieces():
        if piece.kind is Kind.KING and piece.color is color:
            return r, c
    return None


def is_in_check(board: Board, color: Color) -> bool:
    """Return True if ``color``'s king is attacked.

    A board without that king is never in check.
    """
    king = find_king(board, color)
    if king is None:
        return False
    return is_square_under_attack(board, king[0], king[1], color.opponent)
