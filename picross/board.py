"""解析中の盤面 (3 状態のマス目) を表すモジュール"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import numpy as np
from numba import njit

from .constants import TILE_CHARS
from .errors import (
    ContradictionError,
    DimensionMismatchError,
    ParseError,
    UndeterminedError,
)
from .puzzle_types import Line, TileState

# njit 関数の中では IntEnum ではなく素の int 定数を参照する
_UNDETERMINED = int(TileState.UNDETERMINED)
_FILLED = int(TileState.FILLED)

# 値 (0, 1, 2) から TileState を引くための表
_STATES = tuple(TileState)

_CHAR_TO_STATE = {char: TileState(value) for value, char in TILE_CHARS.items()}


@njit
def _merge_core(a: np.ndarray, b: np.ndarray, out: np.ndarray) -> int:
    """Numba 対応の盤面マージ本体

    矛盾したマスがあればその通し番号 (行優先) を、なければ -1 を返す。
    """

    rows, cols = a.shape
    for r in range(rows):
        for c in range(cols):
            x = a[r, c]
            y = b[r, c]
            if x == y or y == _UNDETERMINED:
                out[r, c] = x
            elif x == _UNDETERMINED:
                out[r, c] = y
            else:
                return r * cols + c
    return -1


def _to_line(values: np.ndarray) -> Line:
    return tuple(_STATES[v] for v in values.tolist())


def line_chunks(line: Iterable[int]) -> List[int]:
    """確定済みラインの塗りブロック長を先頭から順に返す

    塗りマスが 1 つもなければ ``[0]`` を返す。未確定マスがあると
    ブロック長を決められないため ``UndeterminedError`` を送出する。
    """

    chunks: List[int] = []
    run = 0
    for tile in line:
        if tile == _UNDETERMINED:
            raise UndeterminedError("line contains undetermined tiles")
        if tile == _FILLED:
            run += 1
        elif run:
            chunks.append(run)
            run = 0
    if run:
        chunks.append(run)
    return chunks or [0]


class GameBoard:
    """高さ x 幅の 3 状態グリッド

    内部では ``int8`` の NumPy 配列 ``(height, width)`` を行優先で保持する。
    ``merge`` や ``transpose`` は常に新しい盤面を返し、引数の盤面は変更しない。
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: np.ndarray) -> None:
        arr = np.array(cells, dtype=np.int8)
        if arr.ndim != 2:
            raise DimensionMismatchError("board must be two dimensional")
        if arr.size and (arr.min() < 0 or arr.max() > _UNDETERMINED):
            raise ValueError("board contains unknown tile values")
        self._cells = arr

    @classmethod
    def empty(cls, width: int, height: int) -> "GameBoard":
        """全マス未確定の盤面を作る"""
        if width < 0 or height < 0:
            raise DimensionMismatchError("width と height は 0 以上を指定してください")
        return cls(np.full((height, width), _UNDETERMINED, dtype=np.int8))

    @classmethod
    def from_rows(
        cls, rows: Iterable[Sequence[int]], width: Optional[int] = None
    ) -> "GameBoard":
        """ラインの並びから盤面を作る。行が 0 本のときは ``width`` を使う"""
        data = [[int(v) for v in row] for row in rows]
        if not data:
            return cls(np.zeros((0, width or 0), dtype=np.int8))
        expected = len(data[0]) if width is None else width
        if any(len(row) != expected for row in data):
            raise DimensionMismatchError("all rows must have the same width")
        return cls(np.array(data, dtype=np.int8))

    @classmethod
    def from_text(cls, text: str, width: Optional[int] = None) -> "GameBoard":
        """``render()`` と同じ書式の文字列から盤面を作る

        行末の空白が削られていても ``width`` (省略時は最長行) まで空白で補う。
        """

        lines = text.splitlines()
        if width is None:
            width = max((len(line) for line in lines), default=0)
        rows: List[List[TileState]] = []
        for y, line in enumerate(lines):
            if len(line) > width:
                raise DimensionMismatchError(f"row {y} is wider than {width}")
            row = []
            for char in line.ljust(width):
                state = _CHAR_TO_STATE.get(char)
                if state is None:
                    raise ParseError(f"unknown tile character {char!r} in row {y}")
                row.append(state)
            rows.append(row)
        return cls.from_rows(rows, width=width)

    @property
    def width(self) -> int:
        return int(self._cells.shape[1])

    @property
    def height(self) -> int:
        return int(self._cells.shape[0])

    def to_array(self) -> np.ndarray:
        """内部配列のコピーを返す"""
        return self._cells.copy()

    def copy(self) -> "GameBoard":
        return GameBoard(self._cells)

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"tile ({x}, {y}) is outside a {self.width}x{self.height} board")

    def get_tile(self, x: int, y: int) -> TileState:
        self._check_bounds(x, y)
        return _STATES[int(self._cells[y, x])]

    def set_tile(self, x: int, y: int, state: TileState) -> None:
        """マス (x, y) の状態を書き換える。盤面外なら ``IndexError``"""
        self._check_bounds(x, y)
        self._cells[y, x] = int(state)

    def get_row(self, y: int) -> Line:
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} is outside the board")
        return _to_line(self._cells[y])

    def get_column(self, x: int) -> Line:
        if not 0 <= x < self.width:
            raise IndexError(f"column {x} is outside the board")
        return _to_line(self._cells[:, x])

    def rows(self) -> List[Line]:
        return [_to_line(row) for row in self._cells]

    def columns(self) -> List[Line]:
        return [_to_line(col) for col in self._cells.T]

    def get_row_chunks(self, y: int) -> List[int]:
        return line_chunks(self.get_row(y))

    def get_column_chunks(self, x: int) -> List[int]:
        """列 x の塗りブロック長を上から順に返す"""
        return line_chunks(self.get_column(x))

    def transpose(self) -> "GameBoard":
        """行と列を入れ替えた新しい盤面を返す"""
        return GameBoard(self._cells.T.copy())

    def with_row(self, line: Sequence[int]) -> "GameBoard":
        """末尾に 1 行追加した新しい盤面を返す"""
        if len(line) != self.width:
            raise DimensionMismatchError(
                f"row length {len(line)} does not match width {self.width}"
            )
        row = np.array([int(v) for v in line], dtype=np.int8).reshape(1, self.width)
        return GameBoard(np.vstack([self._cells, row]))

    def merge(self, other: "GameBoard") -> "GameBoard":
        """2 つの盤面をマスごとに重ね合わせた新しい盤面を返す

        片方だけ確定しているマスは確定側の値、両方未確定なら未確定になる。
        塗りと空白がぶつかった場合は ``ContradictionError`` を送出する。
        """

        if self._cells.shape != other._cells.shape:
            raise DimensionMismatchError(
                f"cannot merge {self.width}x{self.height} with {other.width}x{other.height}"
            )
        out = np.empty_like(self._cells)
        conflict = _merge_core(self._cells, other._cells, out)
        if conflict >= 0:
            y, x = divmod(conflict, self.width)
            raise ContradictionError(f"tile ({x}, {y}) is both filled and empty")
        return GameBoard(out)

    def undetermined_count(self) -> int:
        return int(np.count_nonzero(self._cells == _UNDETERMINED))

    def is_complete(self) -> bool:
        """未確定マスが残っていなければ True"""
        return self.undetermined_count() == 0

    def render(self) -> str:
        """塗りを ``x``、空白を半角スペース、未確定を ``?`` で表した文字列"""
        return "\n".join(
            "".join(TILE_CHARS[v] for v in row) for row in self._cells.tolist()
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameBoard):
            return NotImplemented
        return self._cells.shape == other._cells.shape and bool(
            np.array_equal(self._cells, other._cells)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GameBoard(width={self.width}, height={self.height})"


__all__ = ["GameBoard", "line_chunks"]
