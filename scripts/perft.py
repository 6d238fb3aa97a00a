#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding src/ to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from gbchess.engine.game import GameState
from gbchess.engine.perft import divide, perft


def main() -> None:
    parser = argparse.ArgumentParser(description="Count move-generation leaf nodes")
    parser.add_argument(
        "--board", type=str, default=None, help="Path to a board text file (default: start)"
    )
    parser.add_argument("--black", action="store_true", help="Black to move")
    parser.add_argument("--depth", type=int, default=2, help="Perft depth (default: 2)")
    parser.add_argument(
        "--permissive",
        action="store_true",
        help="Allow moves that leave the mover's own king in check",
    )
    parser.add_argument("--divide", action="store_true", help="Print counts per root move")
    args = parser.parse_args()

    if args.board:
        with open(args.board, "r", encoding="utf-8") as f:
            game = GameState.from_string(
                f.read(), white_to_move=not args.black, allow_self_check=args.permissive
            )
    else:
        game = GameState.new(white_to_move=not args.black, allow_self_check=args.permissive)

    start = time.perf_counter()
    if args.divide:
        per_move = divide(game, args.depth)
        for coord, count in per_move.items():
            print(f"{coord}: {count}")
        nodes = sum(per_move.values())
    else:
        nodes = perft(game, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
