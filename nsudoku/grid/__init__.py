# -*- coding: utf-8 -*-
"""
nsudoku.grid パッケージ

盤面（グリッド）に関する処理をまとめたサブパッケージです。
- bitset.py : 候補集合のビットマスク操作
- groups.py : 制約グループ（line / block）の生成と Topology
- board.py  : 盤面クラス Board
- parser.py : 文字列や DataFrame からパズルへの変換
"""
