from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import (
    ApiError,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...engine.game import GameState
from ...eval import evaluate_breakdown
from ...search.difficulty import depth_for, parse_difficulty
from ...search.service import SearchService


logger = logging.getLogger(__name__)


class CreateGameResponse(BaseModel):
    game_id: str
    board: str


class MoveRequest(BaseModel):
    # Range is checked by the engine so off-board squares surface as illegal moves.
    from_row: int
    from_col: int
    to_row: int
    to_col: int


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[str] = Field(
        default=None, description="Level name or number, e.g. 'easy' or '2'"
    )


class GameView(BaseModel):
    game_id: str
    board: str
    board_flat: str
    side_to_move: str
    move_count: int
    castling: Dict[str, bool]
    legal_moves: list[str]
    in_check: bool
    game_over: bool


class EvaluationView(BaseModel):
    material: int
    king_safety: int
    pawn_structure: int
    mobility: int
    total: int


def create_app(
    *, default_depth: int = 2, max_depth: int = 6, log_level: str = "INFO"
) -> FastAPI:
    app = FastAPI(title="GB Chess Engine API", version="0.1.0")

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO))

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    service = SearchService()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game = GameState.new()
        game_id = store.create(game)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(game_id=game_id, board=game.board_string())

    @app.get("/api/games/{game_id}/state", response_model=GameView)
    def get_state(game_id: str) -> GameView:
        with store.locked(game_id) as game:
            return _view(game_id, _require_game(game))

    @app.post("/api/games/{game_id}/move", response_model=GameView)
    def make_move(game_id: str, req: MoveRequest) -> GameView:
        with store.locked(game_id) as game:
            game = _require_game(game)
            if not game.make_move(req.from_row, req.from_col, req.to_row, req.to_col):
                raise ApiError(400, "illegal_move", "illegal move")
            return _view(game_id, game)

    @app.post("/api/games/{game_id}/search")
    def search(game_id: str, req: SearchRequest) -> Dict[str, Any]:
        depth = _resolve_depth(req, default_depth)
        if depth > max_depth:
            raise ApiError(400, "depth_too_large", f"depth must be <= {max_depth}")
        # Search a private copy so moves on the session are never blocked or corrupted.
        with store.locked(game_id) as game:
            snapshot = _require_game(game).clone()
        res = service.search(snapshot, depth=depth)
        best = res.best_move
        return {
            "best_move": None
            if best is None
            else {
                "from_row": best.from_row,
                "from_col": best.from_col,
                "to_row": best.to_row,
                "to_col": best.to_col,
                "coord": best.to_coord(),
            },
            "score": res.score,
            "nodes": res.nodes,
            "depth": res.depth,
            "time_ms": res.time_ms,
        }

    @app.get("/api/games/{game_id}/evaluate", response_model=EvaluationView)
    def evaluate(game_id: str) -> EvaluationView:
        with store.locked(game_id) as game:
            breakdown = evaluate_breakdown(_require_game(game))
        return EvaluationView(**asdict(breakdown), total=breakdown.total)

    @app.post("/api/games/{game_id}/clone", response_model=CreateGameResponse)
    def clone(game_id: str) -> CreateGameResponse:
        with store.locked(game_id) as game:
            copy = _require_game(game).clone()
        new_id = store.create(copy)
        logger.info("game cloned", extra={"game_id": new_id, "source_game_id": game_id})
        return CreateGameResponse(game_id=new_id, board=copy.board_string())

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        _require_game(store.get(game_id))
        store.delete(game_id)
        return {"status": "deleted"}

    return app


def _require_game(game: Optional[GameState]) -> GameState:
    if game is None:
        raise ApiError(404, "game_not_found", "game not found")
    return game


def _resolve_depth(req: SearchRequest, default_depth: int) -> int:
    if req.depth is not None:
        return req.depth
    if req.difficulty is not None:
        try:
            return depth_for(parse_difficulty(req.difficulty))
        except ValueError as e:
            raise ApiError(400, "unknown_difficulty", str(e))
    return default_depth


def _view(game_id: str, game: GameState) -> GameView:
    moves = game.generate_moves()
    return GameView(
        game_id=game_id,
        board=game.board_string(),
        board_flat=game.board_flat(),
        side_to_move="white" if game.white_to_move else "black",
        move_count=game.move_count,
        castling=asdict(game.castling),
        legal_moves=[m.to_coord() for m in moves],
        in_check=game.is_in_check(),
        game_over=not moves,
    )


# Default app for non-factory servers
app = create_app()
