#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import subprocess
import sys
import time
from typing import Any, Dict, List, Optional

# Ensure src/ is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from gbchess import __version__
from gbchess.engine.game import GameState
from gbchess.search.difficulty import Difficulty, depth_for, parse_difficulty
from gbchess.search.service import SearchService


def _git_info() -> Dict[str, Optional[str]]:
    def run(cmd: List[str]) -> Optional[str]:
        try:
            out = subprocess.check_output(cmd, cwd=REPO_ROOT, stderr=subprocess.DEVNULL)
            return out.decode().strip()
        except (OSError, subprocess.CalledProcessError):
            return None

    return {
        "commit": run(["git", "rev-parse", "HEAD"]),
        "describe": run(["git", "describe", "--dirty", "--tags", "--always"]),
    }


def load_game(path: Optional[str], black_to_move: bool) -> GameState:
    if path is None:
        return GameState.new(white_to_move=not black_to_move)
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        return GameState.from_string(text, white_to_move=not black_to_move)
    except ValueError as e:
        raise SystemExit(f"Invalid board in {path}: {e}")


def bench_level(
    svc: SearchService, game: GameState, level: Difficulty, iterations: int
) -> Dict[str, Any]:
    total_time = 0
    total_nodes = 0
    last = None
    for _ in range(max(1, iterations)):
        # Each run gets its own copy; the search must not leak state between runs.
        res = svc.search(game.clone(), depth=depth_for(level))
        total_time += max(0, res.time_ms)
        total_nodes += max(0, res.nodes)
        last = res
    assert last is not None

    avg_time = int(total_time / max(1, iterations))
    avg_nodes = int(total_nodes / max(1, iterations))
    nps = int(avg_nodes * 1000 / max(1, avg_time)) if avg_time > 0 else 0
    return {
        "level": level.name.lower(),
        "depth": last.depth,
        "best_move": last.best_move.to_coord() if last.best_move else None,
        "score": last.score,
        "time_ms": avg_time,
        "nodes": avg_nodes,
        "nps": nps,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Time the search at each difficulty level")
    parser.add_argument(
        "--board", default=None, help="Path to an 8-row board text file (default: start)"
    )
    parser.add_argument("--black", action="store_true", help="Black to move")
    parser.add_argument(
        "--max-level",
        type=parse_difficulty,
        default=Difficulty.MEDIUM,
        help="Highest level to run (default: medium)",
    )
    parser.add_argument(
        "--iterations", type=int, default=1, help="Repeat runs per level and average"
    )
    parser.add_argument("--out", type=str, default=None, help="Write JSON results to file path")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument("--progress", action="store_true", help="Print per-level progress to stderr")
    args = parser.parse_args()

    game = load_game(args.board, args.black)
    svc = SearchService()

    results: List[Dict[str, Any]] = []
    t0 = time.perf_counter()
    for level in Difficulty:
        if level > args.max_level:
            break
        if args.progress:
            sys.stderr.write(f"[{level.name.lower()}] depth={depth_for(level)}: running...\n")
            sys.stderr.flush()
        res = bench_level(svc, game, level, args.iterations)
        results.append(res)
        if args.progress:
            sys.stderr.write(
                f"    time={res['time_ms']}ms nodes={res['nodes']} nps={res['nps']} best={res['best_move']}\n"
            )
            sys.stderr.flush()

    dt_ms = int((time.perf_counter() - t0) * 1000)
    total_nodes = sum(r["nodes"] for r in results)

    payload = {
        "meta": {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "git": _git_info(),
            "engine": {"version": __version__},
            "config": {
                "board": args.board,
                "black_to_move": args.black,
                "max_level": args.max_level.name.lower(),
                "iterations": max(1, args.iterations),
            },
        },
        "results": results,
        "summary": {
            "levels": len(results),
            "total_time_ms": dt_ms,
            "total_nodes": total_nodes,
            "overall_nps": int(total_nodes * 1000 / max(1, dt_ms)) if dt_ms > 0 else 0,
        },
    }

    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2 if args.pretty else None)
        print(args.out)
    else:
        print(json.dumps(payload, indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
