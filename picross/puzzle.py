"""パズル定義 (行・列のヒント) を保持するモジュール"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Sequence

from .board import GameBoard
from .errors import DimensionMismatchError, ParseError
from .puzzle_io import (
    parse_axis_rules,
    parse_rules_text,
    serialize_axis_rules,
    serialize_rules_text,
    validate_line_rule,
)
from .puzzle_types import AxisRules, LineRule


@dataclass(frozen=True)
class PicrossGame:
    """行ヒントと列ヒントの組

    生成後は変更できない。行ヒントの塗りマス合計と列ヒントの合計が
    一致しない場合は ``DimensionMismatchError`` を送出する。
    """

    rows: AxisRules
    columns: AxisRules

    def __post_init__(self) -> None:
        rows = tuple(validate_line_rule(rule) for rule in self.rows)
        columns = tuple(validate_line_rule(rule) for rule in self.columns)
        # frozen なので object.__setattr__ で正規化した値を入れ直す
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "columns", columns)

        row_total = sum(sum(rule) for rule in rows)
        column_total = sum(sum(rule) for rule in columns)
        if row_total != column_total:
            raise DimensionMismatchError(
                f"row runs total {row_total} but column runs total {column_total}"
            )

    @property
    def width(self) -> int:
        return len(self.columns)

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def filled_count(self) -> int:
        """解で塗られるマスの総数"""
        return sum(sum(rule) for rule in self.rows)

    def row_rule(self, y: int) -> LineRule:
        return self.rows[y]

    def column_rule(self, x: int) -> LineRule:
        return self.columns[x]

    @classmethod
    def from_rules(cls, row_rules: str, column_rules: str) -> "PicrossGame":
        """``"1 1,1,1 1"`` 形式の文字列 2 つからパズルを作る"""
        return cls(parse_axis_rules(row_rules), parse_axis_rules(column_rules))

    @classmethod
    def from_text(cls, text: str) -> "PicrossGame":
        """``-----`` 区切りのルールテキストからパズルを作る"""
        rows, columns = parse_rules_text(text)
        return cls(rows, columns)

    @classmethod
    def from_board(cls, board: GameBoard) -> "PicrossGame":
        """完成済みの盤面からヒントを逆算する"""
        rows = [tuple(board.get_row_chunks(y)) for y in range(board.height)]
        columns = [tuple(board.get_column_chunks(x)) for x in range(board.width)]
        return cls(tuple(rows), tuple(columns))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PicrossGame":
        """``to_dict`` で作った辞書 (JSON 読み込み結果) からパズルを作る"""
        try:
            rows: Iterable[Sequence[int]] = data["rowRules"]
            columns: Iterable[Sequence[int]] = data["columnRules"]
        except KeyError as exc:
            raise ParseError(f"puzzle dict is missing {exc.args[0]!r}") from exc
        return cls(
            tuple(tuple(rule) for rule in rows),
            tuple(tuple(rule) for rule in columns),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": {"rows": self.height, "cols": self.width},
            "rowRules": [list(rule) for rule in self.rows],
            "columnRules": [list(rule) for rule in self.columns],
        }

    def to_text(self) -> str:
        return serialize_rules_text(self.rows, self.columns)

    def row_rules_string(self) -> str:
        return serialize_axis_rules(self.rows)

    def column_rules_string(self) -> str:
        return serialize_axis_rules(self.columns)


__all__ = ["PicrossGame"]
