# -*- coding: utf-8 -*-
"""
盤面の次元数とブロック形状から「制約グループ」を生成するモジュールです。

2次元の普通の数独でいうと、
- 行・列 -> line グループ（1つの軸に沿ってだけ座標が変わるマスの集合）
- 3x3 の箱 -> block グループ（全軸を同時に区切った超直方体）
にあたります。

生成したグループは Topology にまとめ、すべての Board の複製から
読み取り専用で共有されます。
"""

from __future__ import annotations

import itertools
from typing import Iterator, List, Sequence, Set, Tuple

import numpy as np

from ..config import MAX_CELLS, MAX_DIMENSIONS, MAX_SYMBOLS
from ..errors import InvalidPuzzle, InvalidShape
from ..types import ConstraintGroup, Coordinate


def validate_dimensions(axis_lengths: Sequence[int]) -> Tuple[int, int]:
    """
    軸の長さのリストを検査し、(次元数, 記号数 V) を返します。

    line グループが全部違う値で埋まるためには、
    どの軸もちょうど V マスでなければなりません。
    """
    lengths = [int(n) for n in axis_lengths]
    if not lengths:
        raise InvalidPuzzle("at least one axis is required")
    if len(lengths) > MAX_DIMENSIONS:
        raise InvalidPuzzle(
            f"{len(lengths)} dimensions requested, at most {MAX_DIMENSIONS} are supported"
        )

    size = lengths[0]
    if size < 1:
        raise InvalidPuzzle(f"axis length must be positive, got {size}")
    if size > MAX_SYMBOLS:
        raise InvalidPuzzle(f"at most {MAX_SYMBOLS} symbols are supported, got {size}")
    if any(n != size for n in lengths):
        raise InvalidPuzzle(
            f"every axis must have the same length as the symbol count, got {lengths}"
        )

    n_cells = size ** len(lengths)
    if n_cells > MAX_CELLS:
        raise InvalidPuzzle(
            f"{lengths} has {n_cells} cells, at most {MAX_CELLS} are supported"
        )

    return len(lengths), size


def _validate_block_shape(size: int, ndim: int, block_shape: Sequence[int]) -> Tuple[int, ...]:
    blocks = tuple(int(b) for b in block_shape)
    if len(blocks) != ndim:
        raise InvalidShape(
            f"block shape {blocks} has {len(blocks)} axes, the grid has {ndim}"
        )
    for axis, b in enumerate(blocks):
        if b < 1 or size % b != 0:
            raise InvalidShape(
                f"block length {b} does not divide axis {axis} of length {size}"
            )

    # ブロック内も全部違う値なので、体積はちょうど V（か、制約なしの 1）
    volume = int(np.prod(blocks))
    if volume not in (1, size):
        raise InvalidShape(
            f"block shape {blocks} holds {volume} cells, expected {size} (or 1 for no blocks)"
        )
    return blocks


def _make_group(kind: str, axis: int, indices: np.ndarray, shape: Tuple[int, ...]) -> ConstraintGroup:
    coords = np.unravel_index(indices, shape)
    cells = tuple(tuple(int(c[k]) for c in coords) for k in range(len(indices)))
    return ConstraintGroup(
        kind=kind,
        axis=axis,
        cells=cells,
        indices=tuple(int(i) for i in indices),
    )


def generate_groups(axis_lengths: Sequence[int], block_shape: Sequence[int]) -> List[ConstraintGroup]:
    """
    すべての制約グループを生成します。

    Parameters
    ----------
    axis_lengths : sequence of int
        各軸の長さ。全部 V に等しい必要があります。
    block_shape : sequence of int
        各軸のブロックの長さ。軸の長さを割り切る必要があります。
        全部 1 の場合はブロックグループを作りません。

    Returns
    -------
    list of ConstraintGroup
        line グループ（軸ごと、固定座標の辞書順）、
        続いて block グループ（ブロック原点の辞書順）。
        同じ入力からは常に同じ順番で生成されます。
    """
    ndim, size = validate_dimensions(axis_lengths)
    blocks = _validate_block_shape(size, ndim, block_shape)
    shape = (size,) * ndim

    # 平坦化インデックスを盤面の形に並べたもの（C 順 = 座標の辞書順）
    index_grid = np.arange(size ** ndim, dtype=np.int64).reshape(shape)
    groups: List[ConstraintGroup] = []

    # --- line グループ ---
    for axis in range(ndim):
        # 対象の軸を最後に回すと、各行が「その軸だけが変わる」マスの列になる
        lines = np.moveaxis(index_grid, axis, -1).reshape(-1, size)
        for line in lines:
            groups.append(_make_group("line", axis, line, shape))

    # --- block グループ ---
    if int(np.prod(blocks)) == size:
        counts = [size // b for b in blocks]
        split_shape: List[int] = []
        for c, b in zip(counts, blocks):
            split_shape.extend((c, b))
        # (c0, b0, c1, b1, ...) -> (c0, c1, ..., b0, b1, ...)
        order = list(range(0, 2 * ndim, 2)) + list(range(1, 2 * ndim, 2))
        boxes = index_grid.reshape(split_shape).transpose(order).reshape(-1, size)
        for box in boxes:
            groups.append(_make_group("block", -1, box, shape))

    return groups


class Topology:
    """
    盤面の「形」に関する読み取り専用の情報をまとめたクラスです。

    制約グループと、各マスの peer（同じグループに属する他のマス）を
    一度だけ計算し、すべての Board の複製で共有します。
    生成後に書き換えることはないので、スレッド間で同期なしに参照できます。
    """

    def __init__(self, axis_lengths: Sequence[int], block_shape: Sequence[int]) -> None:
        self.ndim, self.size = validate_dimensions(axis_lengths)
        self.shape: Tuple[int, ...] = (self.size,) * self.ndim
        self.block_shape: Tuple[int, ...] = tuple(int(b) for b in block_shape)
        self.groups: List[ConstraintGroup] = generate_groups(axis_lengths, block_shape)
        self.n_cells: int = self.size ** self.ndim

        peer_sets: List[Set[int]] = [set() for _ in range(self.n_cells)]
        for group in self.groups:
            for idx in group.indices:
                peer_sets[idx].update(group.indices)

        self.peers: Tuple[Tuple[int, ...], ...] = tuple(
            tuple(sorted(s - {i})) for i, s in enumerate(peer_sets)
        )

    def index_of(self, coord: Coordinate) -> int:
        return int(np.ravel_multi_index(tuple(coord), self.shape))

    def coord_of(self, index: int) -> Coordinate:
        return tuple(int(c) for c in np.unravel_index(index, self.shape))

    def coords(self) -> Iterator[Coordinate]:
        """全マスの座標を辞書順（= 平坦化インデックス順）で返します。"""
        return itertools.product(range(self.size), repeat=self.ndim)

    def __repr__(self) -> str:
        return (
            f"Topology(shape={self.shape}, block_shape={self.block_shape}, "
            f"groups={len(self.groups)})"
        )
