# -*- coding: utf-8 -*-
"""
N 次元数独の盤面（Grid Model）を表すモジュールです。

各マスの状態は「候補集合のビットマスク」1つで表します。
- 確定したマス  : ビットが1つだけ立ったマスク
- 未確定のマス  : 2つ以上のビットが立ったマスク
- 空のマスク(0) : 矛盾。正しい状態としては保持しません（伝播で検出）

マスクは平坦化した numpy.int64 配列に入っており、
添字は座標の辞書順（C 順）です。
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Tuple, Union

import numpy as np

from ..errors import Contradiction, InvalidPuzzle
from ..types import Coordinate
from .bitset import bit, full_mask, is_single, popcount, single_value, values_of
from .groups import Topology

Givens = Union[Mapping[Coordinate, int], Iterable[Tuple[Coordinate, int]]]


class Board:
    """
    盤面クラス。

    Topology（制約グループ）は全複製で共有し、
    マスクの配列だけを枝ごとに独立して持ちます。
    """

    def __init__(self, topology: Topology, masks: np.ndarray) -> None:
        self.topology = topology
        self.masks = masks

    @classmethod
    def create(cls, topology: Topology, givens: Givens) -> "Board":
        """
        初期値（座標 -> 値）から盤面を作ります。

        同じグループに同じ値が2つ与えられている場合はここでは弾かず、
        制約伝播の段階で矛盾として検出します。
        """
        size = topology.size
        masks = np.full(topology.n_cells, full_mask(size), dtype=np.int64)
        seen: Dict[Coordinate, int] = {}

        items = givens.items() if isinstance(givens, Mapping) else givens
        for coord, value in items:
            coord = _check_coord(topology, coord)
            value = _check_value(size, value, coord)
            if coord in seen and seen[coord] != value:
                raise InvalidPuzzle(
                    f"cell {coord} is given twice with different values ({seen[coord]} and {value})"
                )
            seen[coord] = value
            masks[topology.index_of(coord)] = bit(value)

        return cls(topology, masks)

    @classmethod
    def from_array(cls, topology: Topology, values: np.ndarray) -> "Board":
        """値の配列（0 = 未確定）から盤面を作ります。"""
        values = np.asarray(values)
        if values.shape != topology.shape:
            raise InvalidPuzzle(f"values of shape {values.shape} do not match {topology.shape}")
        givens = [
            (coord, int(values[coord]))
            for coord in topology.coords()
            if int(values[coord]) != 0
        ]
        return cls.create(topology, givens)

    # ---- 基本情報 ----------------------------------------------------------

    @property
    def size(self) -> int:
        return self.topology.size

    @property
    def ndim(self) -> int:
        return self.topology.ndim

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.topology.shape

    def clone(self) -> "Board":
        """マスク配列だけを複製します（制約グループは共有）。"""
        return Board(self.topology, self.masks.copy())

    # ---- マス単位の参照・変更 ---------------------------------------------

    def candidate_mask(self, coord: Coordinate) -> int:
        return int(self.masks[self.topology.index_of(coord)])

    def candidates(self, coord: Coordinate) -> List[int]:
        return values_of(self.candidate_mask(coord))

    def candidate_count(self, coord: Coordinate) -> int:
        return popcount(self.candidate_mask(coord))

    def value(self, coord: Coordinate) -> int:
        """確定していればその値、未確定なら 0 を返します。"""
        return single_value(self.candidate_mask(coord))

    def is_resolved(self, coord: Coordinate) -> bool:
        return is_single(self.candidate_mask(coord))

    def assign(self, coord: Coordinate, value: int) -> None:
        coord = _check_coord(self.topology, coord)
        value = _check_value(self.size, value, coord)
        self.masks[self.topology.index_of(coord)] = bit(value)

    def eliminate(self, coord: Coordinate, value: int) -> bool:
        """
        候補から value を取り除きます。変化があれば True。

        最後の候補を取り除こうとした場合は Contradiction を送出し、
        マスクは書き換えません（空の候補集合は保持しない）。
        """
        idx = self.topology.index_of(coord)
        mask = int(self.masks[idx])
        b = bit(value)
        if not mask & b:
            return False
        remaining = mask & ~b
        if remaining == 0:
            raise Contradiction(f"no candidates left at {tuple(coord)}", coord=tuple(coord))
        self.masks[idx] = remaining
        return True

    # ---- 盤面全体 ----------------------------------------------------------

    def _single_flags(self) -> np.ndarray:
        m = self.masks
        return (m != 0) & ((m & (m - 1)) == 0)

    def is_solved(self) -> bool:
        """全マスが確定しているかどうか（グループ内の重複は見ない）。"""
        return bool(np.all(self._single_flags()))

    def unresolved_count(self) -> int:
        return int(np.count_nonzero(~self._single_flags()))

    def to_array(self) -> np.ndarray:
        """値の配列を返します（shape = (V,)*ndim、未確定は 0）。"""
        single = self._single_flags()
        safe = np.where(single, self.masks, 1)
        values = np.where(single, np.log2(safe).astype(np.int64) + 1, 0)
        return values.reshape(self.shape)

    def assignment(self) -> Dict[Coordinate, int]:
        """確定しているマスの 座標 -> 値 の辞書を返します。"""
        flat = self.to_array().ravel()
        return {
            coord: int(flat[idx])
            for idx, coord in enumerate(self.topology.coords())
            if flat[idx]
        }

    def is_consistent(self) -> bool:
        """
        空の候補集合がなく、どのグループにも同じ確定値が2つないかを調べます。

        全マス確定済みの盤面に対しては、解として正しいかの最終確認になります。
        """
        if np.any(self.masks == 0):
            return False
        flat = self.to_array().ravel()
        for group in self.topology.groups:
            vals = flat[list(group.indices)]
            vals = vals[vals != 0]
            if len(np.unique(vals)) != len(vals):
                return False
        return True

    def __repr__(self) -> str:
        return f"Board(shape={self.shape}, unresolved={self.unresolved_count()})"


def _check_coord(topology: Topology, coord) -> Coordinate:
    try:
        coord = tuple(int(c) for c in coord)
    except (TypeError, ValueError):
        raise InvalidPuzzle(f"invalid coordinate {coord!r}")
    if len(coord) != topology.ndim:
        raise InvalidPuzzle(f"coordinate {coord} has {len(coord)} axes, expected {topology.ndim}")
    if any(c < 0 or c >= topology.size for c in coord):
        raise InvalidPuzzle(f"coordinate {coord} is out of range 0..{topology.size - 1}")
    return coord


def _check_value(size: int, value, coord: Coordinate) -> int:
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise InvalidPuzzle(f"invalid value {value!r} at {coord}")
    if value < 1 or value > size:
        raise InvalidPuzzle(f"value {value} at {coord} is out of range 1..{size}")
    return value
