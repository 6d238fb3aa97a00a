from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

import uvicorn

from gbchess.engine.game import GameState
from gbchess.eval import evaluate
from gbchess.search.difficulty import Difficulty, depth_for, parse_difficulty
from gbchess.search.service import get_best_move


Writer = Callable[[str], None]


def play_demo(
    white: Difficulty,
    black: Difficulty,
    max_moves: int,
    write: Writer = print,
    game: Optional[GameState] = None,
) -> GameState:
    """Let the engine play itself and narrate the game.

    Each full move prints the board, both replies with their search scores,
    and the resulting evaluation. Stops early when a side has no move.

    Returns:
        GameState: The final position.
    """
    game = game or GameState.new()
    write(f"Playing: White ({white.name.title()}) vs Black ({black.name.title()})")
    for number in range(1, max_moves + 1):
        write(f"\nMove {number}:")
        write(game.board_string())
        for name, level in (("White", white), ("Black", black)):
            move = get_best_move(game, depth_for(level))
            if move is None:
                winner = "Black" if name == "White" else "White"
                write(f"Game over: {name} has no move. {winner} wins!")
                return game
            write(f"{name} plays: {move.to_coord()} (score: {move.score})")
            if not game.make_move(*move.coords):
                # Search only returns generated moves, so this means the rules diverged.
                raise RuntimeError(f"engine chose an illegal move: {move.to_coord()}")
        score = evaluate(game)
        write(f"Position eval: {score:+d}")
    write("\nFinal position:")
    write(game.board_string())
    return game


def _cmd_serve(args: argparse.Namespace) -> int:
    uvicorn.run(
        "gbchess.protocol.http.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )
    return 0


def _cmd_demo(args: argparse.Namespace) -> int:
    play_demo(args.white, args.black, args.moves)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gbchess", description="GB chess engine")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=_cmd_serve)

    demo = sub.add_parser(
        "demo",
        help="Engine vs engine demonstration game",
        description="Levels search that many plies; hard and expert are slow "
        "from the opening (minutes per move).",
    )
    demo.add_argument("--moves", type=int, default=20, help="Full moves to play (default: 20)")
    demo.add_argument(
        "--white", type=parse_difficulty, default=Difficulty.BEGINNER, help="White level"
    )
    demo.add_argument("--black", type=parse_difficulty, default=Difficulty.EASY, help="Black level")
    demo.set_defaults(func=_cmd_demo)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
