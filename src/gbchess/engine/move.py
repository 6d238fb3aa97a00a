from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .board import SIZE


FILES = "abcdefgh"


@dataclass
class Move:
    """Engine-internal move representation.

    Attributes:
        from_row (int): Origin row (0 = black's back rank).
        from_col (int): Origin column.
        to_row (int): Destination row.
        to_col (int): Destination column.
        score (int): Search score; only the search driver writes it.
    """

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    score: int = field(default=0, compare=False)

    @property
    def coords(self) -> Tuple[int, int, int, int]:
        return self.from_row, self.from_col, self.to_row, self.to_col

    def to_coord(self) -> str:
        """Format the move for display.

        Returns:
            str: Move written like ``"e2e4"`` (row 7 is rank 1).
        """
        return square_to_str(self.from_row, self.from_col) + square_to_str(
            self.to_row, self.to_col
        )


def square_to_str(row: int, col: int) -> str:
    """Convert a ``(row, col)`` square into its display name.

    Args:
        row (int): Row index in range 0..7.
        col (int): Column index in range 0..7.

    Returns:
        str: Square name such as ``"e4"``.

    Raises:
        ValueError: If the square is off the board.
    """
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise ValueError(f"invalid square: ({row}, {col})")
    return FILES[col] + str(SIZE - row)
