# -*- coding: utf-8 -*-
"""
制約伝播（propagation）を行うモジュールです。

推測（探索）はせずに、確実に言えることだけで候補を減らします。

1. 確定値の除去（assignment elimination）
   あるマスが値 x に確定したら、同じ制約グループに属する
   他のすべてのマス（peer）の候補から x を取り除く。
2. naked single
   候補が1つだけになったマスはその値に確定させ、
   1. をさらに引き起こす。
3. 矛盾の検出
   候補が空になったマスが出たら Contradiction を投げる。
   同じグループに同じ確定値が2つある場合も、
   片方の値をもう片方から取り除いた時点で空になるので、ここで検出されます。

これ以上何も変わらなくなる（不動点）まで繰り返します。
不動点の盤面に対してもう一度呼んでも何も変わりません（冪等）。
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

from ..errors import Contradiction
from ..grid.board import Board
from ..types import PropagationOutcome


def propagate(board: Board, changed: Optional[Iterable[int]] = None) -> PropagationOutcome:
    """
    盤面に制約伝播を適用し、不動点まで候補を絞り込みます。

    Parameters
    ----------
    board : Board
        対象の盤面。成功した場合はその場で書き換えます。
    changed : iterable of int, optional
        新たに確定したマスの平坦化インデックス。
        省略した場合は、確定済みのマスすべてを起点にします。
        探索では「親が不動点で、子で1マスだけ確定させた」状態なので、
        そのマスだけを渡せば十分です。

    Returns
    -------
    PropagationOutcome
        SOLVED（全マス確定）または PARTIAL（未確定のマスが残る）。

    Raises
    ------
    Contradiction
        候補が空になったマスがある場合。このとき board は書き換えません。
    """
    topology = board.topology
    peers = topology.peers

    # numpy の要素アクセスは遅いので、ループの間は Python の list で持つ
    cells = board.masks.tolist()

    if changed is None:
        for idx, mask in enumerate(cells):
            if mask == 0:
                raise Contradiction(
                    f"no candidates left at {topology.coord_of(idx)}",
                    coord=topology.coord_of(idx),
                )
        queue = deque(idx for idx, mask in enumerate(cells) if not mask & (mask - 1))
    else:
        queue = deque(changed)

    while queue:
        idx = queue.popleft()
        b = cells[idx]
        if b == 0 or b & (b - 1):
            # 未確定のマスは起点にならない
            continue

        for p in peers[idx]:
            mask = cells[p]
            if not mask & b:
                continue
            mask &= ~b
            if mask == 0:
                raise Contradiction(
                    f"no candidates left at {topology.coord_of(p)}",
                    coord=topology.coord_of(p),
                )
            cells[p] = mask
            if not mask & (mask - 1):
                # naked single
                queue.append(p)

    board.masks[:] = cells

    if all(not mask & (mask - 1) for mask in cells):
        return PropagationOutcome.SOLVED
    return PropagationOutcome.PARTIAL


def select_branch_cell(board: Board) -> Optional[int]:
    """
    次に分岐させるマス（平坦化インデックス）を選びます。

    MRV（Minimum Remaining Values）：
    - 未確定のマスのうち、候補数が最も少ないもの
    - 同じなら、座標の辞書順で最初のもの（= インデックスが最小）

    全マス確定済みなら None を返します。
    """
    best: Optional[int] = None
    best_count = 0
    for idx, mask in enumerate(board.masks.tolist()):
        if not mask & (mask - 1):
            continue
        count = mask.bit_count()
        if best is None or count < best_count:
            best = idx
            best_count = count
            if count == 2:
                break
    return best
