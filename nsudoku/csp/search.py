# -*- coding: utf-8 -*-
"""
並列バックトラック探索を行うモジュールです。

ざっくり流れ
------------
1. 盤面に制約伝播をかける。矛盾したらその枝は捨てる
2. 全マス確定していれば、それが解
3. MRV で分岐するマスを選ぶ（候補数が最小、同数なら座標の辞書順）
4. そのマスの候補値ごとに盤面を複製し、値を入れて子の枝を作る（値の昇順）
5. 浅い枝（深さ < split_depth）は共有ワーカープールに独立タスクとして投げ、
   深い部分木はタスクを受け取ったワーカーの中で逐次 DFS する
6. どこかの枝で解が見つかったら SolutionSignal に登録し、
   他のすべての枝（実行中・未着手）は信号を見て打ち切る

ワーカーは他のタスクの完了を待たない（子を投げたら自分は終わる）ので、
固定サイズのプールでもデッドロックしません。
待つのは呼び出し元（コーディネータ）のスレッドだけです。

注意: ThreadPoolExecutor には work stealing がないので、負荷の偏りは
浅い階層の枝を細かく分けることでならしています。また GIL のため、
スレッドを増やしても CPU 計算そのものは速くなりません。
プールが担っているのは、枝の並行実行と打ち切りの仕組みです。

打ち切りの確認は「新しい子の枝を作る前」と「伝播をかける前」に行います。
伝播の途中で信号が立っても、その1回の伝播は最後まで走らせて捨てます。
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Tuple

from ..config import DEFAULT_WORKERS, PROGRESS_LOG_INTERVAL, SEARCH_DEBUG_LOG, SPLIT_DEPTH
from ..errors import Contradiction
from ..grid.bitset import bit, values_of
from ..grid.board import Board
from ..logging_utils import get_logger, get_search_debug_logger
from ..types import PropagationOutcome, SearchProgress
from .propagation import propagate, select_branch_cell
from .signal import SolutionSignal

logger = get_logger()

ProgressCallback = Callable[[SearchProgress], None]

# 逐次 DFS の中で、ノード数をまとめて共有カウンタに反映する間隔
_NODE_FLUSH_INTERVAL = 256


class ParallelSearch:
    """
    並列探索のコーディネータです。

    1回の run() ごとに、ワーカープール・未完了タスク数・進捗を管理します。
    盤面はタスク間で共有せず、子の枝は必ず複製を受け取ります。
    """

    def __init__(
        self,
        workers: Optional[int] = None,
        split_depth: int = SPLIT_DEPTH,
        signal: Optional[SolutionSignal] = None,
        progress_callback: Optional[ProgressCallback] = None,
        debug_log: bool = SEARCH_DEBUG_LOG,
        log_interval: int = PROGRESS_LOG_INTERVAL,
    ) -> None:
        self.workers = max(1, int(workers or DEFAULT_WORKERS))
        self.split_depth = max(0, int(split_depth))
        self.signal = signal if signal is not None else SolutionSignal()
        self.progress_callback = progress_callback
        self.log_interval = max(1, int(log_interval))
        self.debug_logger: Optional[logging.Logger] = (
            get_search_debug_logger() if debug_log else None
        )

        self.nodes_visited = 0
        self.explored = 0.0
        self._pending = 0
        self._closed = False
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._abort = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None

    # ---- 公開 API ----------------------------------------------------------

    def run(self, board: Board) -> Optional[Board]:
        """
        探索を実行し、最初に見つかった解を返します。解がなければ None。

        引数の board は書き換えません。
        """
        logger.info(
            "[search] start: shape=%s, unresolved=%d, workers=%d, split_depth=%d",
            board.shape,
            board.unresolved_count(),
            self.workers,
            self.split_depth,
        )

        executor = ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="nsudoku-search"
        )
        self._executor = executor
        try:
            # 外から信号がすでに立っている場合は、根も投げずに終わる
            if self._spawn(board.clone(), depth=0, weight=1.0, changed=None):
                self._done.wait()
        finally:
            with self._lock:
                self._closed = True
            self._abort.set()
            executor.shutdown(wait=True, cancel_futures=True)

        if self._error is not None:
            raise self._error

        solution = self.signal.solution
        logger.info(
            "[search] end: nodes_visited=%d, explored=%.3f, solved=%s",
            self.nodes_visited,
            min(self.explored, 1.0),
            solution is not None,
        )
        return solution

    # ---- タスク管理 ----------------------------------------------------------

    def _cancelled(self) -> bool:
        return self.signal.is_set() or self._abort.is_set()

    def _spawn(
        self,
        board: Board,
        depth: int,
        weight: float,
        changed: Optional[Iterable[int]],
    ) -> bool:
        """子の枝をワーカープールに投げます。投げられなければ False。"""
        assert self._executor is not None
        with self._lock:
            if self._closed or self._cancelled():
                return False
            self._pending += 1
            self._executor.submit(self._explore, board, depth, weight, changed)
        return True

    def _finish(self, weight: float, nodes: int) -> None:
        with self._lock:
            self._pending -= 1
            self.explored += weight
            before = self.nodes_visited
            self.nodes_visited += nodes
            progress = SearchProgress(
                explored=min(self.explored, 1.0),
                nodes=self.nodes_visited,
                solved=self.signal.is_set(),
            )
            pending = self._pending
            if pending == 0:
                self._done.set()

        if before // self.log_interval != progress.nodes // self.log_interval:
            logger.info(
                "[search] nodes_visited = %d, explored=%.3f, pending=%d",
                progress.nodes,
                progress.explored,
                pending,
            )
        if self.progress_callback is not None:
            try:
                self.progress_callback(progress)
            except Exception as exc:
                self._fail(exc)

    def _offer(self, board: Board) -> None:
        if self.signal.offer(board):
            logger.info("[search] solution found")
            self._done.set()
        else:
            logger.debug("[search] late solution discarded")

    def _fail(self, exc: BaseException) -> None:
        with self._lock:
            if self._error is None:
                self._error = exc
        self._abort.set()
        self._done.set()

    # ---- 探索本体 ------------------------------------------------------------

    def _explore(
        self,
        board: Board,
        depth: int,
        weight: float,
        changed: Optional[Iterable[int]],
    ) -> None:
        """
        ワーカーで実行される1タスク（1つの枝）。

        浅い枝なら子の枝をプールに投げ、深い枝なら逐次 DFS で部分木を調べます。
        子に渡した分の重みは子が終わったときに加算されるので、
        ここでは残りの重みだけを「探索済み」として計上します。
        """
        remaining = weight
        nodes = 0
        try:
            if self._cancelled():
                return

            if depth >= self.split_depth:
                solution, nodes = self._dfs(board, changed)
                if solution is not None:
                    self._offer(solution)
                return

            try:
                outcome = propagate(board, changed)
            except Contradiction as exc:
                self._debug("Backtrack (depth=%d): %s", depth, exc)
                return
            nodes = 1

            if outcome is PropagationOutcome.SOLVED:
                self._offer(board)
                return

            idx = select_branch_cell(board)
            values = values_of(board.masks[idx])
            child_weight = weight / len(values)
            coord = board.topology.coord_of(idx)
            for value in values:
                if self._cancelled():
                    break
                child = board.clone()
                child.masks[idx] = bit(value)
                self._debug("Guess (depth=%d): %s = %d", depth, coord, value)
                if self._spawn(child, depth + 1, child_weight, (idx,)):
                    remaining -= child_weight
        except Exception as exc:  # ワーカー内の想定外エラーはコーディネータで再送出
            logger.exception("[search] worker failed")
            self._fail(exc)
        finally:
            self._finish(remaining, nodes)

    def _dfs(
        self,
        board: Board,
        changed: Optional[Iterable[int]],
    ) -> Tuple[Optional[Board], int]:
        """
        ワーカー内で部分木を逐次 DFS します（明示的なスタックを使う）。

        Returns
        -------
        (solution, nodes)
            見つかった解（なければ None）と、展開したノード数。
        """
        stack: List[Tuple[Board, Optional[Iterable[int]]]] = [(board, changed)]
        nodes = 0
        flushed = 0

        while stack:
            if self._cancelled():
                break

            node, node_changed = stack.pop()
            try:
                outcome = propagate(node, node_changed)
            except Contradiction as exc:
                self._debug("Backtrack: %s", exc)
                continue

            nodes += 1
            if nodes - flushed >= _NODE_FLUSH_INTERVAL:
                self._count_nodes(nodes - flushed)
                flushed = nodes

            if outcome is PropagationOutcome.SOLVED:
                return node, nodes - flushed

            idx = select_branch_cell(node)
            coord = node.topology.coord_of(idx)
            # 小さい値から調べたいので、逆順に積む
            for value in reversed(values_of(node.masks[idx])):
                child = node.clone()
                child.masks[idx] = bit(value)
                stack.append((child, (idx,)))
            self._debug("Guess: %s in %s", coord, values_of(node.masks[idx]))

        return None, nodes - flushed

    def _count_nodes(self, n: int) -> None:
        with self._lock:
            before = self.nodes_visited
            self.nodes_visited += n
            after = self.nodes_visited
        if before // self.log_interval != after // self.log_interval:
            logger.info("[search] nodes_visited = %d", after)

    def _debug(self, msg: str, *args) -> None:
        if self.debug_logger is not None:
            self.debug_logger.debug(msg, *args)


def search(
    board: Board,
    workers: Optional[int] = None,
    split_depth: int = SPLIT_DEPTH,
    signal: Optional[SolutionSignal] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> Optional[Board]:
    """
    並列探索のエントリポイントです。

    最初に見つかった解の盤面を返します。部分木を探索し尽くしても
    解がなければ None を返します。
    """
    runner = ParallelSearch(
        workers=workers,
        split_depth=split_depth,
        signal=signal,
        progress_callback=progress_callback,
    )
    return runner.run(board)
