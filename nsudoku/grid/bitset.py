# -*- coding: utf-8 -*-
"""
候補集合のビットマスク操作をまとめたモジュールです。

値 v（1 始まり）が候補に残っているとき、ビット (v - 1) が立ちます。
例: V=4 で候補 {1, 3} -> 0b0101
"""

from __future__ import annotations

from typing import List


def bit(value: int) -> int:
    return 1 << (value - 1)


def full_mask(size: int) -> int:
    """1..size の全部を候補に持つマスクを返します。"""
    return (1 << size) - 1


def popcount(mask: int) -> int:
    return int(mask).bit_count()


def is_single(mask: int) -> bool:
    mask = int(mask)
    return mask != 0 and mask & (mask - 1) == 0


def single_value(mask: int) -> int:
    """候補が1つだけのマスクからその値を返します。複数・空なら 0。"""
    if not is_single(mask):
        return 0
    return int(mask).bit_length()


def values_of(mask: int) -> List[int]:
    """マスクに含まれる値を昇順のリストで返します。"""
    mask = int(mask)
    values: List[int] = []
    while mask:
        low = mask & -mask
        values.append(low.bit_length())
        mask ^= low
    return values
