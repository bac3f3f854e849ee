"""パッケージ内で送出する例外クラスをまとめたモジュール

いずれも ``ValueError`` を継承しているため、呼び出し側は
``except ValueError`` でまとめて受け取ることもできる。
"""

from __future__ import annotations


class PicrossError(ValueError):
    """picross パッケージ共通の基底例外"""


class ParseError(PicrossError):
    """ヒント文字列やルールテキストの書式が不正"""


class DimensionMismatchError(PicrossError):
    """行と列の塗りマス合計、または盤面サイズが一致しない"""


class ContradictionError(PicrossError):
    """同じマスが塗りと空白の両方を要求された"""


class UndeterminedError(PicrossError):
    """未確定マスを含むラインからブロック長を求めようとした"""


__all__ = [
    "PicrossError",
    "ParseError",
    "DimensionMismatchError",
    "ContradictionError",
    "UndeterminedError",
]
