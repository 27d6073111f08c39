# -*- coding: utf-8 -*-
"""
ログ出力の設定を行うモジュールです。

初学者向けポイント:
- 「ログ」とは、プログラムの実行状況を記録するメッセージのことです。
- 開発中やデバッグ時に「どこまで探索が進んだか」「どの枝を捨てたか」を
  確認するのに役立ちます。
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

from .config import LOG_LEVEL, SEARCH_DEBUG_LOG_PATH

# nsudoku パッケージ共通で使うロガー名
LOGGER_NAME = "nsudoku"

# 探索の推測・バックトラックを記録する専用ロガー名
SEARCH_DEBUG_LOGGER_NAME = "nsudoku.search_debug"


def get_logger(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    nsudoku 全体で共通して使う logger を返します。

    すでに handler（出力先）が設定されていない場合は、
    標準出力（コンソール）に config.LOG_LEVEL のレベルでログを表示するように設定します。
    level を渡すと、そのレベルに切り替えます（"DEBUG" や logging.WARNING など）。
    """
    logger = logging.getLogger(LOGGER_NAME)

    # まだハンドラが設定されていなければ、簡単な設定を行う
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(LOG_LEVEL)

    if level is not None:
        logger.setLevel(level)

    return logger


def get_search_debug_logger(log_file: str = SEARCH_DEBUG_LOG_PATH) -> logging.Logger:
    logger = logging.getLogger(SEARCH_DEBUG_LOGGER_NAME)

    if logger.handlers:
        return logger  # すでに初期化済み

    logger.setLevel(logging.DEBUG)

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh.setFormatter(formatter)

    logger.addHandler(fh)

    # 親ロガー（nsudoku）への伝播禁止（stdout に出さない）
    logger.propagate = False

    return logger
