"""共通で使う型や列挙型をまとめたモジュール

Python 標準ライブラリの ``types`` モジュールと名前が衝突しないよう、
このファイル名を ``puzzle_types`` としている。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Tuple


class TileState(IntEnum):
    """マス目 1 つの状態

    NumPy の ``int8`` 配列へそのまま格納できるよう ``IntEnum`` にしている。
    """

    EMPTY = 0
    FILLED = 1
    UNDETERMINED = 2  # 解析途中の盤面でのみ現れる


class Axis(Enum):
    """行と列のどちらの向きの列を扱うかを表す"""

    ROW = "row"
    COLUMN = "column"

    def orthogonal(self) -> "Axis":
        """直交する向きを返す"""
        return Axis.COLUMN if self is Axis.ROW else Axis.ROW


@dataclass(frozen=True)
class Segment:
    """1 本のライン上に置かれた 1 つのブロック (開始位置と長さ)"""

    index: int
    length: int

    @property
    def end(self) -> int:
        """ブロック直後の位置 (半開区間の終端)"""
        return self.index + self.length


# 1 行または 1 列分のマス状態。タプルなので比較は構造的に行われる
Line = Tuple[TileState, ...]

# 1 本のラインのヒント数字列。``(0,)`` は「塗りマスなし」を表す
LineRule = Tuple[int, ...]

# 行方向 (または列方向) すべてのヒント
AxisRules = Tuple[LineRule, ...]

# JSON 保存用のパズル辞書。キーは文字列で値は任意の型を許容
Puzzle = Dict[str, Any]

__all__ = ["TileState", "Axis", "Segment", "Line", "LineRule", "AxisRules", "Puzzle"]
