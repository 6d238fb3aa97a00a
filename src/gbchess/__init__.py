"""Deterministic chess decision engine: legal moves, static evaluation, alpha-beta search."""

from gbchess.engine.board import Board, Color, Kind, Piece
from gbchess.engine.game import CastlingRights, GameState
from gbchess.engine.move import Move
from gbchess.eval import evaluate
from gbchess.search.difficulty import Difficulty
from gbchess.search.service import SearchResult, SearchService, get_best_move

__all__ = [
    "Board",
    "CastlingRights",
    "Color",
    "Difficulty",
    "GameState",
    "Kind",
    "Move",
    "Piece",
    "SearchResult",
    "SearchService",
    "evaluate",
    "get_best_move",
]

__version__ = "0.1.0"
