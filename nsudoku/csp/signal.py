# -*- coding: utf-8 -*-
"""
「解が見つかった」ことを全ワーカーに知らせる、一度だけ書き込める信号です。

複数の枝がほぼ同時に解にたどり着いても、
offer() が True を返すのは最初の1回だけです（先着優先）。
他の枝は is_set() を見て、自分の探索を打ち切ります。
"""

from __future__ import annotations

import threading
from typing import Optional

from ..grid.board import Board


class SolutionSignal:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._solution: Optional[Board] = None
        self.rejected = 0

    def offer(self, board: Board) -> bool:
        """
        解を登録します。最初の登録だけが採用され True を返します。
        2回目以降は何もせず False を返します。
        """
        with self._lock:
            if self._event.is_set():
                self.rejected += 1
                return False
            self._solution = board
            self._event.set()
            return True

    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def solution(self) -> Optional[Board]:
        return self._solution
