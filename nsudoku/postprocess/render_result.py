# -*- coding: utf-8 -*-
"""
探索結果をもとに表示用の情報を構築するモジュールです。
"""

from __future__ import annotations

import itertools
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..grid.board import Board
from ..grid.parser import value_to_symbol


def _box_lengths(board: Board) -> Tuple[int, int]:
    """2次元の区切り線を入れる間隔（ブロックがなければ区切らない）。"""
    topology = board.topology
    has_blocks = any(g.kind == "block" for g in topology.groups)
    if not has_blocks or topology.ndim < 2:
        return topology.size, topology.size
    return topology.block_shape[0], topology.block_shape[1]


def render_slice(values: np.ndarray, box_rows: int, box_cols: int) -> str:
    """
    2次元の値の配列を、ブロックの区切り線つきの文字列にします。

    例（4x4, ブロック 2x2）::

        +-----+-----+
        | 1 2 | 3 4 |
        | 3 4 | 1 2 |
        +-----+-----+
        ...
    """
    rows, cols = values.shape
    n_boxes = cols // box_cols
    horizontal_line = ("+" + "-" * (box_cols * 2 + 1)) * n_boxes + "+"

    lines: List[str] = []
    for i in range(rows):
        if i % box_rows == 0:
            lines.append(horizontal_line)
        parts = ["|"]
        for j in range(cols):
            parts.append(f"{value_to_symbol(int(values[i, j])):>2}")
            if j % box_cols == box_cols - 1:
                parts.append(" |")
        lines.append("".join(parts))
    lines.append(horizontal_line)
    return "\n".join(lines)


def render_board(board: Board) -> str:
    """
    盤面を人が読める文字列にします。

    3次元以上の場合は、最初の2軸の断面を
    残りの軸の座標ごとに並べて表示します。
    """
    values = board.to_array()
    box_rows, box_cols = _box_lengths(board)

    if board.ndim == 1:
        return render_slice(values.reshape(1, -1), 1, box_cols)
    if board.ndim == 2:
        return render_slice(values, box_rows, box_cols)

    out: List[str] = []
    for rest in itertools.product(range(board.size), repeat=board.ndim - 2):
        title = "[:, :, " + ", ".join(str(r) for r in rest) + "]"
        out.append(title)
        out.append(render_slice(values[(slice(None), slice(None)) + rest], box_rows, box_cols))
    return "\n".join(out)


def board_to_text(board: Board) -> str:
    """盤面を1行の文字列（入力と同じ形式）にします。"""
    return "".join(value_to_symbol(int(v)) for v in board.to_array().ravel())


def build_result(
    board: Optional[Board],
    duration_ms: int,
    status: str = "solved",
    message: str = "",
) -> Dict[str, Any]:
    """
    API やログ向けの結果辞書を作ります。

    board が None（解なし）の場合は status と message だけを返します。
    """
    result: Dict[str, Any] = {
        "status": status,
        "duration_ms": int(duration_ms),
        "message": message,
    }
    if board is None:
        return result

    result.update({
        "shape": list(board.shape),
        "block_shape": list(board.topology.block_shape),
        "values": board.to_array().tolist(),
        "text": board_to_text(board),
        "rendered": render_board(board),
    })
    return result
