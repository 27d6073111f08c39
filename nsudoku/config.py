# -*- coding: utf-8 -*-
"""
nsudoku 全体で共通して使う設定値をまとめたモジュールです。

実運用時には、ここを編集することで
- 並列探索のワーカー数
- どの深さまで枝をワーカープールに投げるか
- 探索ログの出力間隔
- 探索アルゴリズムの種類
などを簡単に変更できます。

各値は solve() などのキーワード引数で呼び出しごとに上書きすることもできます。
"""

from __future__ import annotations

import os

# ==== 盤面関連 =============================================================

# 1マスの候補集合は int64 のビットマスクで持つため、記号数 V の上限がある。
# （符号ビットを避け、さらに1ビット余裕を持たせて 62）
MAX_SYMBOLS: int = 62

# 次元数の上限（V**ndim 個のマスを作るので、現実的な範囲に制限）
MAX_DIMENSIONS: int = 8

# マスの総数 V**ndim の上限。peer の表を Python のリストで持つので、
# これを超える盤面は構築前に InvalidPuzzle として弾く
MAX_CELLS: int = 1_000_000

# ==== 探索関連 =============================================================

# 探索アルゴリズムの選択: "dfs"（伝播 + 並列 MRV 探索）, "naive"（素朴な DFS）
SEARCH_ALGORITHM: str = "dfs"

# 並列探索で使うワーカースレッド数（None の場合は CPU 数）
DEFAULT_WORKERS: int = os.cpu_count() or 1

# この深さ未満の枝はワーカープールに独立タスクとして投げる。
# それより深い部分木は、タスクを受け取ったワーカーの中で逐次 DFS する。
SPLIT_DEPTH: int = 3

# 何ノード探索するごとに INFO ログを出すか
PROGRESS_LOG_INTERVAL: int = 10000

# ==== ログ関連 ===========================================================

# nsudoku ロガーの出力レベル（"DEBUG", "INFO", "WARNING" など）
LOG_LEVEL: str = "INFO"

# 推測（Guess）とバックトラックを1件ずつファイルに記録するかどうか。
# 件数が非常に多くなるので、通常はオフにしておきます。
SEARCH_DEBUG_LOG: bool = False

# デバッグログの保存先
SEARCH_DEBUG_LOG_PATH: str = os.path.join("logs", "search_debug.log")

# ==== CLI 関連 =============================================================

# `python -m nsudoku test` で --sudoku を省略したときに解く 9x9 パズル
DEFAULT_PUZZLE: str = (
    ".......1.4.........2...........5.4.7..8...3....1.9....3..4..2...5.1........8.6..."
)
