# -*- coding: utf-8 -*-
"""
パズルの入力を内部表現（Puzzle）に変換するモジュールです。

主な役割:
- 1行の文字列（"..3.1.." のような形式）からの変換
- pandas.DataFrame（2次元の盤面）からの変換
- 値 <-> 表示用記号 の相互変換
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Sequence, Tuple

import pandas as pd

from ..errors import InvalidPuzzle
from ..types import Coordinate, Puzzle

# 値 1.. に対応する記号（1-9, A-Z, a-z の順）
SYMBOLS = "123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

# 未確定のマスを表す記号
EMPTY_SYMBOLS = ".0"


def symbol_to_value(ch: str) -> int:
    """
    記号1文字を値に変換します。未確定なら 0。

    例:
    - "." -> 0
    - "7" -> 7
    - "A" -> 10
    """
    if ch in EMPTY_SYMBOLS:
        return 0
    idx = SYMBOLS.find(ch)
    if len(ch) != 1 or idx < 0:
        raise InvalidPuzzle(f"unknown symbol {ch!r}")
    return idx + 1


def value_to_symbol(value: int) -> str:
    if value == 0:
        return "."
    return SYMBOLS[value - 1]


def infer_size(n_cells: int, ndim: int) -> int:
    """マス数 V**ndim から V を求めます。整数にならなければ InvalidPuzzle。"""
    if ndim < 1:
        raise InvalidPuzzle(f"ndim must be positive, got {ndim}")
    guess = round(n_cells ** (1.0 / ndim))
    for size in (guess - 1, guess, guess + 1):
        if size >= 1 and size ** ndim == n_cells:
            return size
    raise InvalidPuzzle(f"{n_cells} cells is not a {ndim}-dimensional power of an integer")


def default_block_shape(size: int, ndim: int) -> Tuple[int, ...]:
    """
    ブロック形状の既定値を返します。

    2次元以上で V が平方数なら、最初の2軸を sqrt(V) で区切ります
    （9x9 なら (3, 3)、9x9x9 なら (3, 3, 1)）。
    それ以外はブロックなし（全部 1）です。
    """
    root = math.isqrt(size)
    if ndim >= 2 and root * root == size:
        return (root, root) + (1,) * (ndim - 2)
    return (1,) * ndim


def parse_puzzle(
    text: str,
    ndim: int = 2,
    block_shape: Optional[Sequence[int]] = None,
) -> Puzzle:
    """
    1行の文字列からパズルを読み込みます。

    Parameters
    ----------
    text : str
        1マス1文字、座標の辞書順（2次元なら行優先）。空白は無視します。
    ndim : int
        次元数。
    block_shape : sequence of int, optional
        省略時は :func:`default_block_shape`。

    Returns
    -------
    Puzzle
    """
    symbols = "".join(text.split())
    size = infer_size(len(symbols), ndim)
    if size > len(SYMBOLS):
        raise InvalidPuzzle(f"text format supports at most {len(SYMBOLS)} symbols, got {size}")

    givens: Dict[Coordinate, int] = {}
    for flat, ch in enumerate(symbols):
        value = symbol_to_value(ch)
        if value == 0:
            continue
        coord = _unravel(flat, size, ndim)
        givens[coord] = value

    blocks = tuple(block_shape) if block_shape is not None else default_block_shape(size, ndim)
    return Puzzle(axis_lengths=(size,) * ndim, block_shape=blocks, givens=givens)


def normalize_cell(x: Any) -> int:
    """
    DataFrame の個々のセルの値を、整数の値に変換します。

    変換ルール
    ----------
    - None / NaN / 空文字 / "." / "0" : 0（未確定）
    - 数字の文字列・整数 : そのままの値（"12" -> 12）
    - 記号1文字 : :func:`symbol_to_value` の値
    """
    if x is None:
        return 0
    if not isinstance(x, str) and pd.isna(x):
        return 0

    s = str(x).strip()
    if not s:
        return 0
    if s.isdigit():
        return int(s)
    if len(s) == 1:
        return symbol_to_value(s)
    raise InvalidPuzzle(f"cannot read cell value {x!r}")


def board_from_dataframe(
    df: pd.DataFrame,
    block_shape: Optional[Sequence[int]] = None,
) -> Puzzle:
    """
    2次元の盤面（V 行 V 列の DataFrame）からパズルを読み込みます。
    """
    rows, cols = df.shape
    if rows != cols:
        raise InvalidPuzzle(f"board must be square, got {rows}x{cols}")

    givens: Dict[Coordinate, int] = {}
    for i in range(rows):
        for j in range(cols):
            value = normalize_cell(df.iat[i, j])
            if value:
                givens[(i, j)] = value

    blocks = tuple(block_shape) if block_shape is not None else default_block_shape(rows, 2)
    return Puzzle(axis_lengths=(rows, cols), block_shape=blocks, givens=givens)


def _unravel(flat: int, size: int, ndim: int) -> Coordinate:
    coord = []
    for _ in range(ndim):
        flat, rem = divmod(flat, size)
        coord.append(rem)
    return tuple(reversed(coord))
