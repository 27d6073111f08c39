# -*- coding: utf-8 -*-
"""
nsudoku で使う主なデータ構造（型）をまとめたモジュールです。

dataclass を使うことで、
「この構造体はどんなフィールドを持っているのか」を
分かりやすく表現しています。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

# 超グリッド上の座標を表す型 (x0, x1, ..., x{n-1})
Coordinate = Tuple[int, ...]


@dataclass
class Puzzle:
    """
    盤面を作るのに必要な入力一式です。

    Attributes
    ----------
    axis_lengths : tuple of int
        各軸の長さ。すべて記号数 V に等しい。
    block_shape : tuple of int
        各軸のブロックの長さ（2次元の 9x9 なら (3, 3)）。
    givens : dict[Coordinate, int]
        初期値（座標 -> 1..V の値）。
    """

    axis_lengths: Tuple[int, ...]
    block_shape: Tuple[int, ...]
    givens: Dict[Coordinate, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ConstraintGroup:
    """
    「全部違う値でなければならない」マスの集合（制約グループ）です。

    Attributes
    ----------
    kind : str
        "line"（行・列の一般化）または "block"（ブロックの一般化）。
    axis : int
        line の場合は、値が変化する軸の番号。block の場合は -1。
    cells : tuple of Coordinate
        グループに含まれるマスの座標。辞書順に並んでいます。
    indices : tuple of int
        cells を平坦化したインデックス（Board 内部の配列位置）。
    """

    kind: str  # "line" or "block"
    axis: int
    cells: Tuple[Coordinate, ...]
    indices: Tuple[int, ...]

    @property
    def size(self) -> int:
        """グループに含まれるマス数を返します。"""
        return len(self.cells)


class PropagationOutcome(Enum):
    """制約伝播の結果。矛盾は Contradiction 例外で表します。"""

    SOLVED = "solved"
    PARTIAL = "partial"


@dataclass
class SearchProgress:
    """
    並列探索の進捗を観測者（progress_callback）に渡すための構造体です。

    Attributes
    ----------
    explored : float
        最上位の枝空間のうち探索し終えた割合（0.0〜1.0）。
    nodes : int
        これまでに展開したノード数。
    solved : bool
        すでに解が見つかっているかどうか。
    """

    explored: float
    nodes: int
    solved: bool = False
