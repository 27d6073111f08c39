# -*- coding: utf-8 -*-
"""
素朴な深さ優先探索（制約伝播なし・逐次）を行うモジュールです。

- 未確定のマスを座標の辞書順に1つずつ埋める
- 値は 1..V を小さい順に試し、同じグループに同じ値がなければ採用
- 行き詰まったら1つ前のマスに戻る

並列探索との比較用の、いちばん単純な戦略です。
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..grid.board import Board
from ..logging_utils import get_logger

logger = get_logger()


def _fits(values: List[int], peers, idx: int, value: int) -> bool:
    return all(values[p] != value for p in peers[idx])


def naive_search(board: Board) -> Optional[Board]:
    """
    素朴な DFS で解を探します。解がなければ None を返します。

    初期値そのものが重複している場合も None です。
    """
    topology = board.topology
    peers = topology.peers
    size = topology.size

    values: List[int] = board.to_array().ravel().tolist()

    for idx, value in enumerate(values):
        if value and not _fits(values, peers, idx, value):
            logger.info("[naive] givens conflict at %s", topology.coord_of(idx))
            return None

    empties = [idx for idx, value in enumerate(values) if value == 0]
    logger.info("[naive] start: empty cells=%d", len(empties))

    pos = 0
    nodes = 0
    while 0 <= pos < len(empties):
        idx = empties[pos]
        value = values[idx] + 1
        while value <= size and not _fits(values, peers, idx, value):
            value += 1
        nodes += 1

        if value <= size:
            values[idx] = value
            pos += 1
        else:
            # このマスに入る値がもうないので、1つ前に戻る
            values[idx] = 0
            pos -= 1

    logger.info("[naive] end: nodes_visited=%d, solved=%s", nodes, pos >= 0)
    if pos < 0:
        return None

    return Board.from_array(topology, np.array(values, dtype=np.int64).reshape(topology.shape))
