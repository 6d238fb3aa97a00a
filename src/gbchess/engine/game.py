from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional

from . import attacks
from .attacks import pawn_direction, piece_attacks
from .board import SIZE, Board, Color, Kind, Piece, Square, in_bounds
from .move import Move


HOME_ROW = {Color.WHITE: 7, Color.BLACK: 0}
PAWN_START_ROW = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_ROW = {Color.WHITE: 0, Color.BLACK: 7}
KING_HOME_COL = 4
KING_SIDE_ROOK_COL = 7
QUEEN_SIDE_ROOK_COL = 0


@dataclass
class CastlingRights:
    """Per-color, per-side castling eligibility.

    Flags only ever go from True to False during play; ``GameState.undo``
    restores a saved copy, it never re-grants a right.
    """

    white_king_side: bool = True
    white_queen_side: bool = True
    black_king_side: bool = True
    black_queen_side: bool = True

    @classmethod
    def none(cls) -> "CastlingRights":
        return cls(False, False, False, False)

    @classmethod
    def from_board(cls, board: Board) -> "CastlingRights":
        """Grant each right whose king and rook still stand on their home squares."""

        def home(color: Color, rook_col: int) -> bool:
            row = HOME_ROW[color]
            return board.get(row, KING_HOME_COL) == Piece(Kind.KING, color) and board.get(
                row, rook_col
            ) == Piece(Kind.ROOK, color)

        return cls(
            white_king_side=home(Color.WHITE, KING_SIDE_ROOK_COL),
            white_queen_side=home(Color.WHITE, QUEEN_SIDE_ROOK_COL),
            black_king_side=home(Color.BLACK, KING_SIDE_ROOK_COL),
            black_queen_side=home(Color.BLACK, QUEEN_SIDE_ROOK_COL),
        )

    def allows(self, color: Color, king_side: bool) -> bool:
        if color is Color.WHITE:
            return self.white_king_side if king_side else self.white_queen_side
        return self.black_king_side if king_side else self.black_queen_side

    def revoke(self, color: Color, king_side: Optional[bool] = None) -> None:
        """Clear one right, or both of ``color``'s rights when ``king_side`` is None."""
        if color is Color.WHITE:
            if king_side is None or king_side:
                self.white_king_side = False
            if king_side is None or not king_side:
                self.white_queen_side = False
        else:
            if king_side is None or king_side:
                self.black_king_side = False
            if king_side is None or not king_side:
                self.black_queen_side = False

    def copy(self) -> "CastlingRights":
        return replace(self)


@dataclass
class Undo:
    """Pre-image of a fast-path move, consumed by ``GameState.undo``."""

    move: Move
    moved: Piece
    captured: Optional[Piece]
    castling: CastlingRights
    white_to_move: bool
    move_count: int
    rook_from: Optional[Square] = None
    rook_to: Optional[Square] = None


@dataclass
class GameState:
    """Board plus turn, move counter and castling rights.

    Responsibility: move legality, move application (validated and fast
    path), move generation and check queries for one position.

    Notes:
    - White moves toward row 0 and is the maximizing side for search.
    - ``allow_self_check`` selects the legality policy. When False (default)
      a move that leaves the mover's own king attacked is illegal. When True
      only the castling-specific attack tests apply, so ordinary moves may
      leave the own king in check.
    - One search at a time per instance; use ``clone`` for parallel lines.
    - Strict legality plays out every candidate and rescans for check, and
      evaluation generates moves for both sides, so search cost grows
      steeply: depth 3 from the start takes seconds and depths 4-5 are
      only practical in sparse positions.
    """

    board: Board = field(default_factory=Board.startpos)
    white_to_move: bool = True
    move_count: int = 0
    castling: CastlingRights = field(default_factory=CastlingRights)
    allow_self_check: bool = False

    @classmethod
    def new(cls, *, white_to_move: bool = True, allow_self_check: bool = False) -> "GameState":
        """Create a game in the canonical starting position."""
        return cls(white_to_move=white_to_move, allow_self_check=allow_self_check)

    @classmethod
    def from_string(
        cls,
        text: str,
        *,
        white_to_move: bool = True,
        castling: Optional[CastlingRights] = None,
        allow_self_check: bool = False,
    ) -> "GameState":
        """Create a game from a board in character form.

        Args:
            text (str): Board as accepted by ``Board.from_string``.
            white_to_move (bool): Side to move.
            castling (Optional[CastlingRights]): Explicit rights; when omitted
                they are derived from king and rook placement.
            allow_self_check (bool): Legality policy, see class notes.

        Returns:
            GameState: New game at move count zero.

        Raises:
            ValueError: If ``text`` is not a valid board.
        """
        board = Board.from_string(text)
        return cls(
            board=board,
            white_to_move=white_to_move,
            castling=castling if castling is not None else CastlingRights.from_board(board),
            allow_self_check=allow_self_check,
        )

    # --- Turn and status queries ---
    @property
    def side_to_move(self) -> Color:
        return Color.WHITE if self.white_to_move else Color.BLACK

    def is_turn(self, color: Color) -> bool:
        return self.side_to_move is color

    def is_game_over(self) -> bool:
        """Return True if the side to move has no legal move (mate or stalemate)."""
        return not self.generate_moves()

    def board_string(self) -> str:
        return self.board.to_string()

    def board_flat(self) -> str:
        return self.board.to_flat()

    def clone(self) -> "GameState":
        """Return an independent deep copy: board grid and rights are not shared."""
        return GameState(
            board=self.board.copy(),
            white_to_move=self.white_to_move,
            move_count=self.move_count,
            castling=self.castling.copy(),
            allow_self_check=self.allow_self_check,
        )

    # --- Attack queries ---
    def is_square_under_attack(self, row: int, col: int, by: Color) -> bool:
        return attacks.is_square_under_attack(self.board, row, col, by)

    def find_king(self, color: Color) -> Optional[Square]:
        return attacks.find_king(self.board, color)

    def is_in_check(self, color: Optional[Color] = None) -> bool:
        """Return True if ``color`` (default: side to move) is in check."""
        if color is None:
            color = self.side_to_move
        return attacks.is_in_check(self.board, color)

    def would_leave_in_check(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        """Return True if the move would leave its mover's king attacked.

        The move is played on the board, including rook relocation and
        promotion, and always taken back before returning.
        """
        piece = self.board.get(fr, fc)
        if piece is None:
            return False
        with self.applied(Move(fr, fc, tr, tc)):
            return attacks.is_in_check(self.board, piece.color)

    # --- Legality ---
    def is_valid_move(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        """Return True if the side to move may play ``(fr, fc) -> (tr, tc)``.

        Rejections are plain False results; nothing on the board changes.
        """
        if not (in_bounds(fr, fc) and in_bounds(tr, tc)):
            return False
        piece = self.board.get(fr, fc)
        if piece is None or piece.color is not self.side_to_move:
            return False
        target = self.board.get(tr, tc)
        if target is not None and target.color is piece.color:
            return False
        if not self._follows_piece_rule(piece, fr, fc, tr, tc, target):
            return False
        if self.allow_self_check:
            return True
        return not self.would_leave_in_check(fr, fc, tr, tc)

    def _follows_piece_rule(
        self, piece: Piece, fr: int, fc: int, tr: int, tc: int, target: Optional[Piece]
    ) -> bool:
        if piece.kind is Kind.PAWN:
            return self._pawn_rule(piece.color, fr, fc, tr, tc, target)
        if piece.kind is Kind.KING and fr == tr and abs(tc - fc) == 2:
            return self._can_castle(piece.color, fr, fc, tc)
        # Knight, king step and sliders move exactly where they attack.
        return piece_attacks(self.board, piece, fr, fc, tr, tc)

    def _pawn_rule(
        self, color: Color, fr: int, fc: int, tr: int, tc: int, target: Optional[Piece]
    ) -> bool:
        step = pawn_direction(color)
        dr = tr - fr
        dc = tc - fc
        if dc == 0:
            if target is not None:
                return False
            if dr == step:
                return True
            return (
                dr == 2 * step
                and fr == PAWN_START_ROW[color]
                and self.board.is_empty(fr + step, fc)
            )
        return abs(dc) == 1 and dr == step and target is not None

    def _can_castle(self, color: Color, row: int, fc: int, tc: int) -> bool:
        if row != HOME_ROW[color] or fc != KING_HOME_COL:
            return False
        king_side = tc > fc
        if not self.castling.allows(color, king_side):
            return False
        rook_col = KING_SIDE_ROOK_COL if king_side else QUEEN_SIDE_ROOK_COL
        if self.board.get(row, rook_col) != Piece(Kind.ROOK, color):
            return False
        step = 1 if king_side else -1
        for c in range(fc + step, rook_col, step):
            if not self.board.is_empty(row, c):
                return False
        enemy = color.opponent
        for c in (fc, fc + step, tc):
            if self.is_square_under_attack(row, c, enemy):
                return False
        return True

    # --- Move generation ---
    def generate_moves(self) -> List[Move]:
        """Return all legal moves for the side to move.

        Every own piece is tried against all 64 destinations. Order is
        row-major over sources, then row-major over destinations.
        """
        color = self.side_to_move
        moves: List[Move] = []
        for fr, fc, piece in list(self.board.pieces()):
            if piece.color is not color:
                continue
            for tr in range(SIZE):
                for tc in range(SIZE):
                    if self.is_valid_move(fr, fc, tr, tc):
                        moves.append(Move(fr, fc, tr, tc))
        return moves

    def count_moves(self, color: Color) -> int:
        """Count legal moves for ``color`` regardless of whose turn it is."""
        with self._side_to_move(color):
            return len(self.generate_moves())

    @contextmanager
    def _side_to_move(self, color: Color) -> Iterator[None]:
        saved = self.white_to_move
        self.white_to_move = color is Color.WHITE
        try:
            yield
        finally:
            self.white_to_move = saved

    # --- Move application ---
    def make_move(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        """Validate and play a move.

        Returns:
            bool: True if the move was legal and has been played, False
                otherwise (the game is left untouched).
        """
        if not self.is_valid_move(fr, fc, tr, tc):
            return False
        self.apply(Move(fr, fc, tr, tc))
        return True

    def apply(self, move: Move) -> Undo:
        """Play a known-legal move in place and return its undo token.

        Handles castling rook relocation, promotion to a queen, castling
        rights revocation, the turn flip and the move counter, exactly as
        ``make_move`` does.

        Raises:
            ValueError: If the source square is empty.
        """
        fr, fc, tr, tc = move.coords
        piece = self.board.get(fr, fc)
        if piece is None:
            raise ValueError("no piece to move from source square")
        captured = self.board.get(tr, tc)
        token = Undo(
            move=move,
            moved=piece,
            captured=captured,
            castling=self.castling.copy(),
            white_to_move=self.white_to_move,
            move_count=self.move_count,
        )

        self._update_castling_rights_on_move(piece, fr, fc, tr, tc, captured)

        self.board.set(fr, fc, None)
        if piece.kind is Kind.PAWN and tr == PROMOTION_ROW[piece.color]:
            self.board.set(tr, tc, Piece(Kind.QUEEN, piece.color))
        else:
            self.board.set(tr, tc, piece)

        if piece.kind is Kind.KING and fr == tr and abs(tc - fc) == 2:
            rook_col = KING_SIDE_ROOK_COL if tc > fc else QUEEN_SIDE_ROOK_COL
            # Rook lands on the square the king passed over.
            token.rook_from = (tr, rook_col)
            token.rook_to = (tr, (fc + tc) // 2)
            self.board.set(tr, (fc + tc) // 2, self.board.get(tr, rook_col))
            self.board.set(tr, rook_col, None)

        self.white_to_move = not self.white_to_move
        self.move_count += 1
        return token

    def undo(self, token: Undo) -> None:
        """Take back the move recorded in ``token``, restoring the exact pre-image.

        Tokens must be undone in reverse order of ``apply``.
        """
        fr, fc, tr, tc = token.move.coords
        if token.rook_from is not None and token.rook_to is not None:
            self.board.set(*token.rook_from, self.board.get(*token.rook_to))
            self.board.set(*token.rook_to, None)
        self.board.set(fr, fc, token.moved)
        self.board.set(tr, tc, token.captured)
        self.castling = token.castling
        self.white_to_move = token.white_to_move
        self.move_count = token.move_count

    @contextmanager
    def applied(self, move: Move) -> Iterator[Undo]:
        """Scope a fast-path move: applied on entry, undone on every exit."""
        token = self.apply(move)
        try:
            yield token
        finally:
            self.undo(token)

    def _update_castling_rights_on_move(
        self,
        piece: Piece,
        fr: int,
        fc: int,
        tr: int,
        tc: int,
        captured: Optional[Piece],
    ) -> None:
        """Revoke rights on king moves, home-rook moves and home-rook captures."""
        if piece.kind is Kind.KING:
            self.castling.revoke(piece.color)
        elif piece.kind is Kind.ROOK and fr == HOME_ROW[piece.color]:
            if fc == KING_SIDE_ROOK_COL:
                self.castling.revoke(piece.color, king_side=True)
            elif fc == QUEEN_SIDE_ROOK_COL:
                self.castling.revoke(piece.color, king_side=False)
        if captured is not None and captured.kind is Kind.ROOK and tr == HOME_ROW[captured.color]:
            if tc == KING_SIDE_ROOK_COL:
                self.castling.revoke(captured.color, king_side=True)
            elif tc == QUEEN_SIDE_ROOK_COL:
                self.castling.revoke(captured.color, king_side=False)
