"""ヒント文字列・ルールテキストの読み書きをまとめたモジュール

書式は次のとおり。

* 1 本のラインのヒント: 半角スペース 1 つ区切りの数字列 (例 ``"3 1"``)。
  塗りマスがないラインは ``"0"`` と書く。
* 片方向すべてのヒント: ラインのヒントをカンマで連結 (例 ``"1 1,1,1 1"``)。
* ルールテキスト: 行ヒントを 1 行ずつ並べ、``-----`` の行を挟んで
  列ヒントを 1 行ずつ並べる。
"""

from __future__ import annotations

import operator
import re
from typing import Iterable, List, Sequence, Tuple

from .constants import RULES_SEPARATOR
from .errors import ParseError
from .puzzle_types import AxisRules, LineRule

_NUMBER = re.compile(r"\d+", re.ASCII)


def validate_line_rule(rule: Iterable[int]) -> LineRule:
    """数値列がヒントとして妥当か調べてタプルで返す

    空の並びは ``(0,)`` として扱う。``0`` は単独でのみ許可する。
    ``numpy.int64`` など整数として扱える値は ``int`` に変換する。
    """

    values = tuple(rule)
    if not values:
        return (0,)
    converted: List[int] = []
    for value in values:
        if isinstance(value, bool):
            raise ParseError(f"run lengths must be non-negative integers: {values!r}")
        try:
            number = operator.index(value)
        except TypeError as exc:
            raise ParseError(
                f"run lengths must be non-negative integers: {values!r}"
            ) from exc
        if number < 0:
            raise ParseError(f"run lengths must be non-negative integers: {values!r}")
        converted.append(number)
    runs = tuple(converted)
    if len(runs) > 1 and 0 in runs:
        raise ParseError(f"0 may only appear as a rule on its own: {runs!r}")
    return runs


def parse_line_rule(text: str) -> LineRule:
    """``"3 1"`` のような文字列を ``(3, 1)`` に変換する

    前後の空白は読み飛ばすため ``" 3 1 "`` も受け付けるが、
    ``serialize_line_rule`` は常に正規形 ``"3 1"`` を返す。
    バイト単位で元に戻るのは正規形の入力だけである。
    """
    tokens = text.strip().split(" ")
    runs: List[int] = []
    for token in tokens:
        if not _NUMBER.fullmatch(token):
            raise ParseError(f"invalid run length {token!r} in {text!r}")
        runs.append(int(token))
    return validate_line_rule(runs)


def serialize_line_rule(rule: Sequence[int]) -> str:
    return " ".join(str(v) for v in validate_line_rule(rule))


def parse_axis_rules(text: str) -> AxisRules:
    """``"1 1,1,1 1"`` のようなカンマ区切りの文字列を解析する"""
    return tuple(parse_line_rule(part) for part in text.strip().split(","))


def serialize_axis_rules(rules: Iterable[Sequence[int]]) -> str:
    return ",".join(serialize_line_rule(rule) for rule in rules)


def _parse_block(lines: List[str], name: str) -> AxisRules:
    if not lines:
        raise ParseError(f"{name} block is empty")
    rules = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            raise ParseError(f"{name} block line {number} is blank")
        rules.append(parse_line_rule(line))
    return tuple(rules)


def parse_rules_text(text: str) -> Tuple[AxisRules, AxisRules]:
    """ルールテキスト全体を (行ヒント, 列ヒント) に分解する"""

    lines = text.splitlines()
    separators = [i for i, line in enumerate(lines) if line == RULES_SEPARATOR]
    if len(separators) != 1:
        raise ParseError(
            f"rules text needs exactly one {RULES_SEPARATOR!r} line, found {len(separators)}"
        )
    split = separators[0]
    rows = _parse_block(lines[:split], "row")
    columns = _parse_block(lines[split + 1 :], "column")
    return rows, columns


def serialize_rules_text(
    rows: Iterable[Sequence[int]], columns: Iterable[Sequence[int]]
) -> str:
    """``parse_rules_text`` と対になる正規形 (末尾改行あり) を返す"""
    parts = [serialize_line_rule(rule) for rule in rows]
    parts.append(RULES_SEPARATOR)
    parts.extend(serialize_line_rule(rule) for rule in columns)
    return "\n".join(parts) + "\n"


__all__ = [
    "validate_line_rule",
    "parse_line_rule",
    "serialize_line_rule",
    "parse_axis_rules",
    "serialize_axis_rules",
    "parse_rules_text",
    "serialize_rules_text",
]
