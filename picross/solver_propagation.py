"""行と列の確定処理を交互に繰り返す伝播ソルバー (v2)

1 回の反復で全行・全列を部分的に解き、盤面が変化しなくなるまで続ける。
バックトラックはしないため、場合分けが必要なパズルは
INCOMPLETE で止まる。
"""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional, Sequence

from .board import GameBoard
from .errors import ContradictionError, DimensionMismatchError
from .line_iter import solve_line
from .puzzle import PicrossGame
from .puzzle_types import LineRule
from .solver import SolveResult, SolveStatus

logger = logging.getLogger(__name__)


def _solve_axis(rules: Sequence[LineRule], board: GameBoard) -> GameBoard:
    """盤面の各行を対応するヒントで部分的に解いた新しい盤面を返す"""
    if len(rules) != board.height:
        raise DimensionMismatchError(
            f"{len(rules)} rules for a board with {board.height} rows"
        )
    width = board.width
    solved = [solve_line(rule, width, line) for rule, line in zip(rules, board.rows())]
    return GameBoard.from_rows(solved, width=width)


def partial_board_from_rows(
    game: PicrossGame, board: Optional[GameBoard] = None
) -> GameBoard:
    """全行を部分的に解き、元の盤面とマージした盤面を返す"""
    if board is None:
        board = GameBoard.empty(game.width, game.height)
    return board.merge(_solve_axis(game.rows, board))


def partial_board_from_columns(
    game: PicrossGame, board: Optional[GameBoard] = None
) -> GameBoard:
    """全列を部分的に解き、元の盤面とマージした盤面を返す

    転置して行として処理し、結果を転置し直す。
    """
    if board is None:
        board = GameBoard.empty(game.width, game.height)
    solved = _solve_axis(game.columns, board.transpose()).transpose()
    return board.merge(solved)


def finish_propagation(
    board: GameBoard, stats: Dict[str, int], started: float, label: str
) -> SolveResult:
    """伝播が止まった盤面から終了状態を決める (v2 / v3 共通)"""
    elapsed = time.perf_counter() - started
    if board.is_complete():
        logger.info("%s 完了: %.3f 秒", label, elapsed)
        return SolveResult(SolveStatus.COMPLETE, board, stats)
    logger.warning(
        "%s: 盤面を確定できませんでした (未確定 %d マス)\n%s",
        label,
        board.undetermined_count(),
        board.render(),
    )
    return SolveResult(SolveStatus.INCOMPLETE, board, stats, "not complete")


class PropagationSolver:
    """盤面が不動点に達するまで行・列の確定を繰り返すソルバー"""

    def __init__(self, game: PicrossGame) -> None:
        self.game = game

    def set_game(self, game: PicrossGame) -> None:
        self.game = game

    def solve(self) -> SolveResult:
        game = self.game
        started = time.perf_counter()
        logger.info("伝播ソルバー開始: %dx%d", game.width, game.height)

        board = GameBoard.empty(game.width, game.height)
        iterations = 0
        lines_per_iteration = game.width + game.height
        try:
            while True:
                iterations += 1
                new_board = partial_board_from_columns(
                    game, partial_board_from_rows(game, board)
                )
                logger.debug(
                    "反復 %d: 未確定 %d マス", iterations, new_board.undetermined_count()
                )
                if new_board == board:
                    break
                board = new_board
        except ContradictionError as exc:
            logger.warning("矛盾を検出しました: %s\n%s", exc, board.render())
            stats = {"iterations": iterations, "steps": iterations * lines_per_iteration}
            return SolveResult(SolveStatus.CONTRADICTION, board, stats, str(exc))

        stats = {"iterations": iterations, "steps": iterations * lines_per_iteration}
        return finish_propagation(board, stats, started, "伝播ソルバー")


__all__ = [
    "PropagationSolver",
    "partial_board_from_rows",
    "partial_board_from_columns",
    "finish_propagation",
]
