from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class Color(Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class Kind(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


@dataclass(frozen=True)
class Piece:
    """A piece identity: what it is and whose it is.

    Attributes:
        kind (Kind): Piece kind.
        color (Color): Owning side.
    """

    kind: Kind
    color: Color

    @property
    def symbol(self) -> str:
        """Return the board character, uppercase for white, lowercase for black."""
        ch = self.kind.value
        return ch.upper() if self.color is Color.WHITE else ch

    @classmethod
    def from_symbol(cls, ch: str) -> "Piece":
        """Parse a single board character.

        Args:
            ch (str): One of ``PNBRQK`` or ``pnbrqk``.

        Returns:
            Piece: The decoded piece.

        Raises:
            ValueError: If ``ch`` is not a piece character.
        """
        if len(ch) != 1 or ch.lower() not in _KIND_BY_CHAR:
            raise ValueError(f"invalid piece character: {ch!r}")
        color = Color.WHITE if ch.isupper() else Color.BLACK
        return cls(_KIND_BY_CHAR[ch.lower()], color)


_KIND_BY_CHAR = {k.value: k for k in Kind}

EMPTY = "."
SIZE = 8

# Row 0 is black's back rank, row 7 is white's.
STARTPOS = (
    "rnbqkbnr",
    "pppppppp",
    "........",
    "........",
    "........",
    "........",
    "PPPPPPPP",
    "RNBQKBNR",
)

Square = Tuple[int, int]


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


@dataclass
class Board:
    """8x8 grid of optional pieces.

    Notes:
    - Squares are addressed ``(row, col)``; row 0 is black's back rank,
      row 7 is white's back rank. Positional tables rely on this orientation.
    - The board knows nothing about turns or rules; see ``GameState``.
    """

    squares: List[List[Optional[Piece]]]

    @classmethod
    def empty(cls) -> "Board":
        return cls(squares=[[None] * SIZE for _ in range(SIZE)])

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board in the canonical starting position.

        Returns:
            Board: Board holding the standard initial layout.
        """
        return cls.from_string("\n".join(STARTPOS))

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """Create a board from its character form.

        Accepts either the newline-separated 8-row grid produced by
        ``to_string`` or the 64-character flat form from ``to_flat``.
        Surrounding whitespace on each row is ignored.

        Args:
            text (str): Board characters, ``.`` for empty squares.

        Returns:
            Board: Board decoded from ``text``.

        Raises:
            ValueError: If the text is not 8x8 or holds unknown characters.
        """
        if not text or not isinstance(text, str):
            raise ValueError("board text must be a non-empty string")
        rows = [r.strip() for r in text.strip().splitlines() if r.strip()]
        if len(rows) == 1 and len(rows[0]) == SIZE * SIZE:
            flat = rows[0]
            rows = [flat[i : i + SIZE] for i in range(0, SIZE * SIZE, SIZE)]
        if len(rows) != SIZE:
            raise ValueError("board must have 8 rows")
        board = cls.empty()
        for r, row in enumerate(rows):
            if len(row) != SIZE:
                raise ValueError(f"row {r} must have 8 squares")
            for c, ch in enumerate(row):
                if ch != EMPTY:
                    board.squares[r][c] = Piece.from_symbol(ch)
        return board

    def to_string(self) -> str:
        """Render the board as 8 newline-separated rows, row 0 first."""
        return "\n".join(self._row_chars(r) for r in range(SIZE))

    def to_flat(self) -> str:
        """Render the board as a single 64-character string."""
        return "".join(self._row_chars(r) for r in range(SIZE))

    def _row_chars(self, row: int) -> str:
        return "".join(p.symbol if p is not None else EMPTY for p in self.squares[row])

    def get(self, row: int, col: int) -> Optional[Piece]:
        return self.squares[row][col]

    def set(self, row: int, col: int, piece: Optional[Piece]) -> None:
        self.squares[row][col] = piece

    def is_empty(self, row: int, col: int) -> bool:
        return self.squares[row][col] is None

    def pieces(self) -> Iterator[Tuple[int, int, Piece]]:
        """Yield ``(row, col, piece)`` for every occupied square, row-major."""
        for r in range(SIZE):
            for c in range(SIZE):
                p = self.squares[r][c]
                if p is not None:
                    yield r, c, p

    def copy(self) -> "Board":
        # Pieces are immutable; only the row lists need copying.
        return Board(squares=[list(row) for row in self.squares])
