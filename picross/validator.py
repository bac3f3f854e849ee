"""盤面の状態がヒントと整合しているかを判定するモジュール"""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence

from .board import GameBoard, line_chunks
from .errors import DimensionMismatchError, UndeterminedError
from .puzzle import PicrossGame


class LineState(Enum):
    """1 本のラインの判定結果"""

    VALID = "valid"
    IN_PROGRESS = "in_progress"
    INVALID = "invalid"


class BoardState(Enum):
    """盤面全体の判定結果"""

    COMPLETE = "complete"
    IN_PROGRESS = "in_progress"
    INVALID = "invalid"


def classify_line(chunks: Sequence[int], rule: Sequence[int]) -> LineState:
    """ブロック長の並びをヒントと比べて分類する

    ヒントと完全に一致すれば VALID、ブロック数が多すぎるか
    同じ位置のブロックがヒントより長ければ INVALID、
    それ以外 (まだ伸ばせる途中経過) は IN_PROGRESS となる。
    """

    if list(chunks) == list(rule):
        return LineState.VALID
    if len(chunks) > len(rule):
        return LineState.INVALID
    if any(chunk > run for chunk, run in zip(chunks, rule)):
        return LineState.INVALID
    return LineState.IN_PROGRESS


def _column_states(game: PicrossGame, board: GameBoard) -> List[LineState | None]:
    """列ごとの判定。未確定マスを含む列は判定できないので None"""
    states: List[LineState | None] = []
    for x, rule in enumerate(game.columns):
        try:
            chunks = board.get_column_chunks(x)
        except UndeterminedError:
            states.append(None)
            continue
        states.append(classify_line(chunks, rule))
    return states


def validate_board(game: PicrossGame, board: GameBoard) -> BoardState:
    """途中までの盤面を列ヒントに照らして分類する

    行ヒントは行ごとの配置列挙で満たされている前提なので列だけを調べる。
    盤面は上から何行かだけ埋まった状態 (高さがパズルより低い) でもよい。
    """

    if board.width != game.width or board.height > game.height:
        raise DimensionMismatchError(
            f"board {board.width}x{board.height} does not fit puzzle "
            f"{game.width}x{game.height}"
        )

    states = _column_states(game, board)
    if any(state is LineState.INVALID for state in states):
        return BoardState.INVALID

    if board.height == game.height:
        if all(state is LineState.VALID for state in states):
            return BoardState.COMPLETE
        # 全行そろった後に確定済みで VALID でない列は、もう伸ばせない
        if any(state is LineState.IN_PROGRESS for state in states):
            return BoardState.INVALID
    return BoardState.IN_PROGRESS


def is_solution(game: PicrossGame, board: GameBoard) -> bool:
    """行・列すべてのヒントを満たす完成盤面なら True"""

    if board.width != game.width or board.height != game.height:
        return False
    if not board.is_complete():
        return False
    rows_ok = all(
        line_chunks(row) == list(rule) for row, rule in zip(board.rows(), game.rows)
    )
    columns_ok = all(
        line_chunks(col) == list(rule)
        for col, rule in zip(board.columns(), game.columns)
    )
    return rows_ok and columns_ok


__all__ = ["LineState", "BoardState", "classify_line", "validate_board", "is_solution"]
