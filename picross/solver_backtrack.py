"""行ごとの配置を深さ優先で試すバックトラックソルバー (v1)

完全だが最悪計算量は指数的。列ヒントに対する前方一致チェック
(``validate_board``) だけで枝刈りする。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .board import GameBoard
from .errors import PicrossError
from .line_iter import LinePlacements
from .puzzle import PicrossGame
from .puzzle_types import Line, TileState
from .solver import SolveResult, SolveStatus
from .validator import BoardState, validate_board

logger = logging.getLogger(__name__)


@dataclass
class _StackFrame:
    """探索スタック 1 段分の状態"""

    # 次に配置する行の番号 (= board の高さ)
    row_index: int
    # 次の行の配置候補。初回訪問時は None
    placements: Optional[Iterator[Line]]
    board: GameBoard


class BacktrackingSolver:
    """明示的なスタックで行配置の組み合わせを探索するソルバー"""

    def __init__(self, game: PicrossGame, *, step_limit: Optional[int] = None) -> None:
        self.game = game
        self.step_limit = step_limit

    def set_game(self, game: PicrossGame) -> None:
        self.game = game

    def solve(self) -> SolveResult:
        """解が見つかれば COMPLETE、探索し尽くしたら NO_SOLUTION を返す"""

        game = self.game
        start = time.perf_counter()
        logger.info("バックトラック探索開始: %dx%d", game.width, game.height)

        stack: List[_StackFrame] = [
            _StackFrame(row_index=0, placements=None, board=GameBoard.empty(game.width, 0))
        ]
        last_board = stack[0].board
        steps = 0
        max_depth = 0

        def stats() -> Dict[str, int]:
            return {"steps": steps, "max_depth": max_depth}

        try:
            while stack:
                frame = stack.pop()
                steps += 1
                if self.step_limit is not None and steps > self.step_limit:
                    logger.warning("ステップ上限 %d に達したため中断します", self.step_limit)
                    return SolveResult(
                        SolveStatus.ABORTED, _pad(last_board, game), stats(), "step_limit"
                    )
                if frame.row_index > max_depth:
                    max_depth = frame.row_index
                last_board = frame.board

                if frame.placements is None:
                    state = validate_board(game, frame.board)
                    if state is BoardState.INVALID:
                        continue
                    if state is BoardState.COMPLETE:
                        logger.info(
                            "バックトラック探索完了: %.3f 秒 (%d steps)",
                            time.perf_counter() - start,
                            steps,
                        )
                        return SolveResult(SolveStatus.COMPLETE, frame.board, stats())
                    rule = game.row_rule(frame.row_index)
                    frame.placements = iter(LinePlacements(rule, game.width))

                line = next(frame.placements, None)
                if line is None:
                    # この行の候補を使い切ったので一段戻る
                    continue
                # 親フレームは生成途中のイテレータごと積み直す
                stack.append(frame)
                stack.append(
                    _StackFrame(
                        row_index=frame.row_index + 1,
                        placements=None,
                        board=frame.board.with_row(line),
                    )
                )
        except PicrossError as exc:
            logger.warning("探索中にエラーが発生しました: %s", exc)
            return SolveResult(SolveStatus.CONTRADICTION, _pad(last_board, game), stats(), str(exc))

        logger.warning("解が見つかりませんでした (%d steps)", steps)
        return SolveResult(
            SolveStatus.NO_SOLUTION, _pad(last_board, game), stats(), "no solution"
        )


def _pad(board: GameBoard, game: PicrossGame) -> GameBoard:
    """途中までの盤面の下に未確定行を足してパズルと同じ高さにそろえる"""
    missing = game.height - board.height
    if missing <= 0:
        return board
    blank = (TileState.UNDETERMINED,) * game.width
    return GameBoard.from_rows(board.rows() + [blank] * missing, width=game.width)


__all__ = ["BacktrackingSolver"]
