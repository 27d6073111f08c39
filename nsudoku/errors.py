# -*- coding: utf-8 -*-
"""
nsudoku が投げる例外をまとめたモジュールです。

呼び出し側（CLI や API）に届くのは SolveError の派生クラスだけです。

- InvalidPuzzle : 与えられた数字・座標・盤面サイズがおかしい
- InvalidShape  : ブロック形状が軸の長さを割り切れない
- Unsatisfiable : 探索し尽くしても解がない

Contradiction は探索の1つの枝の中だけで使う例外で、
その枝を捨てれば回復できるため、solve() の外には出しません。
"""

from __future__ import annotations

from typing import Optional, Tuple


class SolveError(Exception):
    """solve() が呼び出し側に返す失敗の基底クラス。"""


class InvalidPuzzle(SolveError):
    pass


class InvalidShape(SolveError):
    pass


class Unsatisfiable(SolveError):
    pass


class Contradiction(Exception):
    """
    制約伝播中に矛盾（候補が空になったマス）を見つけたことを表します。

    Attributes
    ----------
    coord : tuple of int or None
        候補が空になったマスの座標（分かる場合）。
    """

    def __init__(self, message: str, coord: Optional[Tuple[int, ...]] = None) -> None:
        super().__init__(message)
        self.coord = coord
