# nsudoku/__init__.py
# -*- coding: utf-8 -*-
"""
nsudoku パッケージの入口となるモジュールです。

CLI や API からは:

    from nsudoku import solve

と呼び出されることを想定しています。

ここでは、
1. 軸の長さ・ブロック形状から制約グループ（Topology）を生成
2. 初期値から盤面（Board）を構築
3. 探索（並列 MRV 探索 または 素朴な DFS）
4. 解の最終確認
を順番に呼び出します。
"""

from __future__ import annotations

import time
from typing import Optional, Sequence

from .config import SEARCH_ALGORITHM, SPLIT_DEPTH
from .csp.naive import naive_search
from .csp.search import ProgressCallback, search
from .csp.signal import SolutionSignal
from .errors import Contradiction, InvalidPuzzle, InvalidShape, SolveError, Unsatisfiable
from .grid.board import Board, Givens
from .grid.groups import Topology
from .logging_utils import get_logger
from .types import Coordinate, Puzzle, SearchProgress

__all__ = [
    "Board",
    "Contradiction",
    "Coordinate",
    "InvalidPuzzle",
    "InvalidShape",
    "Puzzle",
    "SearchProgress",
    "SolutionSignal",
    "SolveError",
    "Topology",
    "Unsatisfiable",
    "build_board",
    "solve",
    "solve_puzzle",
]

logger = get_logger()


def build_board(
    axis_lengths: Sequence[int],
    givens: Givens,
    block_shape: Sequence[int],
) -> Board:
    """
    パズルの盤面を構築します。

    Raises
    ------
    InvalidPuzzle
        軸の長さが揃っていない、初期値の座標・値が範囲外など。
    InvalidShape
        ブロック形状が軸の長さを割り切れない。
    """
    topology = Topology(axis_lengths, block_shape)
    return Board.create(topology, givens)


def solve(
    axis_lengths: Sequence[int],
    givens: Givens,
    block_shape: Sequence[int],
    strategy: str = SEARCH_ALGORITHM,
    workers: Optional[int] = None,
    split_depth: int = SPLIT_DEPTH,
    progress_callback: Optional[ProgressCallback] = None,
) -> Board:
    """
    N 次元数独を解くメイン関数。

    Returns
    -------
    Board
        全マスが確定し、すべての制約グループで値が重複しない盤面。

    Raises
    ------
    InvalidPuzzle, InvalidShape
        盤面の構築に失敗した場合。
    Unsatisfiable
        探索し尽くしても解がない場合。
    """
    logger.info("=== solve() START ===")
    start = time.time()

    board = build_board(axis_lengths, givens, block_shape)
    logger.info(
        "Board: shape=%s, block_shape=%s, groups=%d, givens=%d",
        board.shape,
        board.topology.block_shape,
        len(board.topology.groups),
        board.topology.n_cells - board.unresolved_count(),
    )

    if strategy == "dfs":
        solution = search(
            board,
            workers=workers,
            split_depth=split_depth,
            progress_callback=progress_callback,
        )
    elif strategy == "naive":
        solution = naive_search(board)
    else:
        raise ValueError(f"unknown strategy: {strategy!r}")

    duration_ms = int((time.time() - start) * 1000)
    if solution is None:
        logger.info("=== solve() END: unsatisfiable (%d ms) ===", duration_ms)
        raise Unsatisfiable("no assignment satisfies every constraint group")

    # 全マス確定・重複なしの最終確認
    if not (solution.is_solved() and solution.is_consistent()):
        raise RuntimeError("search returned a board that is not a valid solution")

    logger.info("=== solve() END: solved (%d ms) ===", duration_ms)
    return solution


def solve_puzzle(puzzle: Puzzle, **kwargs) -> Board:
    """Puzzle（parse_puzzle などの結果）をそのまま solve() に渡すヘルパー。"""
    return solve(puzzle.axis_lengths, puzzle.givens, puzzle.block_shape, **kwargs)
