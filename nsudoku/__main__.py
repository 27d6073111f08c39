# -*- coding: utf-8 -*-
"""
コマンドラインから nsudoku を動かすためのモジュールです。

    python -m nsudoku test
    python -m nsudoku test naive --sudoku "1.3.....2..4..1."
    python -m nsudoku test --progress --workers 4

終了コード: 0 = 解けた, 1 = 解なし, 2 = 入力が不正
"""

from __future__ import annotations

import argparse
import sys
import threading
import time
from typing import List, Optional

from tqdm import tqdm

from . import solve_puzzle
from .config import DEFAULT_PUZZLE, SPLIT_DEPTH
from .errors import InvalidPuzzle, InvalidShape, Unsatisfiable
from .grid.board import Board
from .grid.groups import Topology
from .grid.parser import parse_puzzle
from .logging_utils import get_logger
from .postprocess.render_result import render_board
from .types import SearchProgress


def _parse_block_shape(text: str) -> List[int]:
    try:
        return [int(x) for x in text.split(",") if x.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid block shape {text!r}, expected e.g. 3,3")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nsudoku", description="A N-dimensional Sudoku solver")
    sub = parser.add_subparsers(dest="mode", required=True)

    test = sub.add_parser("test", help="Test the sudoku solver on a puzzle (default: a 9x9 puzzle)")
    test.add_argument(
        "solver",
        nargs="?",
        choices=["dfs", "naive"],
        default="dfs",
        help="The solver strategy to use (dfs: propagation + parallel search, naive: plain DFS)",
    )
    test.add_argument("--sudoku", default=DEFAULT_PUZZLE, help="Puzzle text, one symbol per cell, '.' for empty")
    test.add_argument("--ndim", type=int, default=2, help="Number of dimensions of the puzzle text")
    test.add_argument(
        "--block-shape",
        type=_parse_block_shape,
        default=None,
        help="Block length per axis, comma separated (default: sqrt(V) on the first two axes)",
    )
    test.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    test.add_argument("--split-depth", type=int, default=SPLIT_DEPTH, help="Branch depth handed to the pool")
    test.add_argument("--progress", action="store_true", help="Show a progress bar")
    test.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level of the nsudoku logger (default: config.LOG_LEVEL)",
    )
    return parser


def _progress_bar():
    bar = tqdm(total=100, desc="explored", unit="%", bar_format="{l_bar}{bar}| {n:.1f}% {postfix}")
    lock = threading.Lock()

    def on_progress(progress: SearchProgress) -> None:
        with lock:
            bar.n = round(progress.explored * 100, 1)
            bar.set_postfix(nodes=progress.nodes, refresh=False)
            bar.refresh()

    return bar, on_progress


def run_test(args: argparse.Namespace) -> int:
    if args.log_level is not None:
        get_logger(args.log_level)

    try:
        puzzle = parse_puzzle(args.sudoku, ndim=args.ndim, block_shape=args.block_shape)
        topology = Topology(puzzle.axis_lengths, puzzle.block_shape)
        board = Board.create(topology, puzzle.givens)
    except (InvalidPuzzle, InvalidShape) as e:
        print(f"Invalid puzzle: {e}", file=sys.stderr)
        return 2

    print(f"Testing {args.solver} on:\n{render_board(board)}")

    bar = None
    callback = None
    if args.progress and args.solver == "dfs":
        bar, callback = _progress_bar()

    start = time.perf_counter()
    try:
        solution = solve_puzzle(
            puzzle,
            strategy=args.solver,
            workers=args.workers,
            split_depth=args.split_depth,
            progress_callback=callback,
        )
    except Unsatisfiable:
        solution = None
    finally:
        if bar is not None:
            bar.close()

    print(f"Took {time.perf_counter() - start:.3f}s")

    if solution is None:
        print("No solution found for sudoku")
        return 1
    print(f"Solution:\n{render_board(solution)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.mode == "test":
        return run_test(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
