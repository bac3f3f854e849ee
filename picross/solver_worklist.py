"""変化したマスに関係するラインだけを解き直す伝播ソルバー (v3)

推論能力は v2 と同じだが、確定したマスと交差するラインだけを
キューに積み直すため、大きな盤面ほど無駄な再計算が減る。
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Deque, Set, Tuple

from .board import GameBoard
from .errors import ContradictionError
from .line_iter import solve_line
from .puzzle import PicrossGame
from .puzzle_types import Axis, TileState
from .solver import SolveResult, SolveStatus
from .solver_propagation import finish_propagation

logger = logging.getLogger(__name__)

WorkItem = Tuple[Axis, int]


class WorklistSolver:
    """(向き, 番号) のキューを使って伝播を進めるソルバー"""

    def __init__(self, game: PicrossGame) -> None:
        self.game = game

    def set_game(self, game: PicrossGame) -> None:
        self.game = game

    def solve(self) -> SolveResult:
        game = self.game
        started = time.perf_counter()
        logger.info("ワークリストソルバー開始: %dx%d", game.width, game.height)

        board = GameBoard.empty(game.width, game.height)
        queue: Deque[WorkItem] = deque()
        queued: Set[WorkItem] = set()

        def enqueue(item: WorkItem) -> None:
            if item not in queued:
                queued.add(item)
                queue.append(item)

        for x in range(game.width):
            enqueue((Axis.COLUMN, x))
        for y in range(game.height):
            enqueue((Axis.ROW, y))

        steps = 0
        updates = 0
        try:
            while queue:
                item = queue.popleft()
                queued.discard(item)
                axis, index = item
                steps += 1

                if axis is Axis.ROW:
                    current = board.get_row(index)
                    solved = solve_line(game.row_rule(index), game.width, current)
                else:
                    current = board.get_column(index)
                    solved = solve_line(game.column_rule(index), game.height, current)

                for pos, (old, new) in enumerate(zip(current, solved)):
                    if old is not TileState.UNDETERMINED or new is TileState.UNDETERMINED:
                        continue
                    if axis is Axis.ROW:
                        board.set_tile(pos, index, new)
                    else:
                        board.set_tile(index, pos, new)
                    updates += 1
                    # 交差するラインだけを解き直す
                    enqueue((axis.orthogonal(), pos))
        except ContradictionError as exc:
            logger.warning("矛盾を検出しました: %s\n%s", exc, board.render())
            stats = {"steps": steps, "updates": updates}
            return SolveResult(SolveStatus.CONTRADICTION, board, stats, str(exc))

        logger.debug("ワークリスト処理数: %d ライン / %d マス更新", steps, updates)
        return finish_propagation(
            board, {"steps": steps, "updates": updates}, started, "ワークリストソルバー"
        )


__all__ = ["WorklistSolver"]
