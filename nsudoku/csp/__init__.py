# -*- coding: utf-8 -*-
"""
nsudoku.csp パッケージ

制約充足（CSP）としての数独の解き方をまとめています。

主に以下の役割を持つモジュールから構成されています。
- propagation.py : 制約伝播（確定値の除去・naked single・矛盾検出）
- signal.py      : 「解が見つかった」を伝える一度きりの信号
- search.py      : ワーカープールを使った並列バックトラック探索
- naive.py       : 比較用の素朴な逐次 DFS
"""
