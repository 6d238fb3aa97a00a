"""Evaluation heuristics.

Deterministic; positive scores favor white. Four components are summed:
material with piece-square bonuses, king safety, pawn structure, mobility.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, Optional, Sequence

from gbchess.engine.attacks import KING_OFFSETS
from gbchess.engine.board import SIZE, Board, Color, Kind, in_bounds
from gbchess.engine.game import GameState


# Material values in centipawns
P_VAL: Final = 100
N_VAL: Final = 320
B_VAL: Final = 330
R_VAL: Final = 500
Q_VAL: Final = 900
K_VAL: Final = 20000

PIECE_VALUES: Final[Dict[Kind, int]] = {
    Kind.PAWN: P_VAL,
    Kind.KNIGHT: N_VAL,
    Kind.BISHOP: B_VAL,
    Kind.ROOK: R_VAL,
    Kind.QUEEN: Q_VAL,
    Kind.KING: K_VAL,
}

# Heuristic weights (centipawns)
KING_SHELTER_BONUS: Final = 8  # per own piece next to the king
PAWN_RANK_BONUS: Final = 5  # per rank advanced
PASSED_PAWN_BONUS: Final = 67
MOBILITY_WEIGHT: Final = 2  # per legal move of difference

# Piece-square tables, indexed in black's orientation: row 0 is black's back
# rank. Black reads table[row][col]; white reads the mirrored row 7 - row.
PAWN_TABLE: Final = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (50, 50, 50, 50, 50, 50, 50, 50),
    (10, 10, 20, 30, 30, 20, 10, 10),
    (5, 5, 10, 25, 25, 10, 5, 5),
    (0, 0, 0, 20, 20, 0, 0, 0),
    (5, -5, -10, 0, 0, -10, -5, 5),
    (5, 10, 10, -20, -20, 10, 10, 5),
    (0, 0, 0, 0, 0, 0, 0, 0),
)

KNIGHT_TABLE: Final = (
    (-50, -40, -30, -30, -30, -30, -40, -50),
    (-40, -20, 0, 0, 0, 0, -20, -40),
    (-30, 0, 10, 15, 15, 10, 0, -30),
    (-30, 5, 15, 20, 20, 15, 5, -30),
    (-30, 0, 15, 20, 20, 15, 0, -30),
    (-30, 5, 10, 15, 15, 10, 5, -30),
    (-40, -20, 0, 5, 5, 0, -20, -40),
    (-50, -40, -30, -30, -30, -30, -40, -50),
)

# Shared by bishops and queens.
CENTER_TABLE: Final = (
    (-20, -10, -10, -10, -10, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 10, 10, 5, 0, -10),
    (-10, 5, 5, 10, 10, 5, 5, -10),
    (-10, 0, 10, 10, 10, 10, 0, -10),
    (-10, 10, 10, 10, 10, 10, 10, -10),
    (-10, 5, 0, 0, 0, 0, 5, -10),
    (-20, -10, -10, -10, -10, -10, -10, -20),
)

POSITION_TABLES: Final[Dict[Kind, Sequence[Sequence[int]]]] = {
    Kind.PAWN: PAWN_TABLE,
    Kind.KNIGHT: KNIGHT_TABLE,
    Kind.BISHOP: CENTER_TABLE,
    Kind.QUEEN: CENTER_TABLE,
}


@dataclass(frozen=True)
class EvalBreakdown:
    material: int
    king_safety: int
    pawn_structure: int
    mobility: int

    @property
    def total(self) -> int:
        return self.material + self.king_safety + self.pawn_structure + self.mobility


def _sign(color: Color) -> int:
    return 1 if color is Color.WHITE else -1


def _mirror_row(row: int) -> int:
    return SIZE - 1 - row


def position_bonus(kind: Kind, color: Color, row: int, col: int) -> int:
    """Return the unsigned table bonus for a piece; white reads the mirrored row."""
    table: Optional[Sequence[Sequence[int]]] = POSITION_TABLES.get(kind)
    if table is None:
        return 0
    r = _mirror_row(row) if color is Color.WHITE else row
    return table[r][col]


def material_and_position(board: Board) -> int:
    score = 0
    for r, c, piece in board.pieces():
        value = PIECE_VALUES[piece.kind] + position_bonus(piece.kind, piece.color, r, c)
        score += _sign(piece.color) * value
    return score


def king_safety(board: Board) -> int:
    """Reward own pieces standing next to each king."""
    score = 0
    for r, c, piece in board.pieces():
        if piece.kind is not Kind.KING:
            continue
        shelter = 0
        for dr, dc in KING_OFFSETS:
            nr, nc = r + dr, c + dc
            if not in_bounds(nr, nc):
                continue
            neighbor = board.get(nr, nc)
            if neighbor is not None and neighbor.color is piece.color:
                shelter += KING_SHELTER_BONUS
        score += _sign(piece.color) * shelter
    return score


def is_passed_pawn(board: Board, row: int, col: int, color: Color) -> bool:
    """Return True if no enemy pawn sits on this or an adjacent file ahead of the pawn."""
    step = -1 if color is Color.WHITE else 1
    r = row + step
    while 0 <= r < SIZE:
        for c in (col - 1, col, col + 1):
            if not (0 <= c < SIZE):
                continue
            p = board.get(r, c)
            if p is not None and p.kind is Kind.PAWN and p.color is not color:
                return False
        r += step
    return True


def pawn_structure(board: Board) -> int:
    """Advancement and passed-pawn bonuses."""
    score = 0
    for r, c, piece in board.pieces():
        if piece.kind is not Kind.PAWN:
            continue
        advanced = _mirror_row(r) if piece.color is Color.WHITE else r
        bonus = advanced * PAWN_RANK_BONUS
        if is_passed_pawn(board, r, c, piece.color):
            bonus += PASSED_PAWN_BONUS
        score += _sign(piece.color) * bonus
    return score


def mobility(game: GameState) -> int:
    """Difference in legal move counts; the side to move is left unchanged."""
    white = game.count_moves(Color.WHITE)
    black = game.count_moves(Color.BLACK)
    return (white - black) * MOBILITY_WEIGHT


def evaluate_breakdown(game: GameState) -> EvalBreakdown:
    board = game.board
    return EvalBreakdown(
        material=material_and_position(board),
        king_safety=king_safety(board),
        pawn_structure=pawn_structure(board),
        mobility=mobility(game),
    )


def evaluate(game: GameState) -> int:
    """Return a static evaluation in centipawns from white's point of view.

    Args:
        game (GameState): Position to score. Its side to move is read and
            transiently overridden by the mobility term, then restored.

    Returns:
        int: Signed score, positive favoring white.
    """
    return evaluate_breakdown(game).total
