"""ランダムなピクロス盤面を生成するモジュール"""

from __future__ import annotations

import hashlib
import logging
import random
import time
from typing import Dict, Tuple

from . import sat_unique
from .board import GameBoard
from .constants import DEFAULT_SOLVER_STEP_LIMIT, SCHEMA_VERSION, _evaluate_difficulty
from .puzzle import PicrossGame
from .puzzle_types import Puzzle, TileState
from .solver import SolveStatus
from .solver_backtrack import BacktrackingSolver
from .solver_worklist import WorklistSolver

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """ログ出力の設定を行う関数

    Python の ``logging`` モジュールはアプリの動作状況を
    画面やファイルに出力する仕組みです。ここでは ``basicConfig`` を
    使ってフォーマットと出力レベルをまとめて設定します。

    :param level: 表示するログの重要度。``logging.INFO`` などを指定
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


# 一意解にならなかったとき何回まで再生成するか
RETRY_LIMIT = 50


def _random_board(
    rows: int, cols: int, rng: random.Random, density: float
) -> GameBoard:
    """各マスを確率 ``density`` で塗った完成盤面を作る"""
    cells = [
        [TileState.FILLED if rng.random() < density else TileState.EMPTY for _ in range(cols)]
        for _ in range(rows)
    ]
    return GameBoard.from_rows(cells, width=cols)


def _rate_puzzle(game: PicrossGame, step_limit: int) -> Tuple[str, Dict[str, int]]:
    """ソルバーを実際に走らせて難易度と統計を求める"""

    result = WorklistSolver(game).solve()
    if result.status is SolveStatus.COMPLETE:
        stats = {"version": 3, "steps": result.stats["steps"], "maxDepth": 0}
        return _evaluate_difficulty(True, result.stats["steps"], 0), stats

    # ライン推論で止まった盤面はバックトラックの手数で評価する
    result = BacktrackingSolver(game, step_limit=step_limit).solve()
    stats = {
        "version": 1,
        "steps": result.stats["steps"],
        "maxDepth": result.stats["max_depth"],
    }
    return _evaluate_difficulty(False, stats["steps"], stats["maxDepth"]), stats


def generate_puzzle(
    rows: int,
    cols: int,
    *,
    density: float = 0.5,
    seed: int | None = None,
    unique: bool = True,
    solver_step_limit: int | None = None,
    timeout_s: float | None = None,
    return_stats: bool = False,
) -> Puzzle | tuple[Puzzle, Dict[str, int]]:
    """ランダムな絵からヒントを逆算してパズルを作る

    :param rows: 盤面の行数
    :param cols: 盤面の列数
    :param density: 各マスを塗る確率 (0 より大きく 1 以下)
    :param seed: 乱数シード。再現したいときに指定する
    :param unique: True なら解が一意になるまで作り直す
    :param solver_step_limit: 難易度評価に使うバックトラックの最大ステップ数
    :param timeout_s: 生成処理のタイムアウト秒。None なら無制限
    :param return_stats: True なら生成統計も返す
    :return: 生成したパズル。``return_stats`` が True の場合は
        ``(Puzzle, dict)`` のタプルを返す
    """

    if rows <= 0 or cols <= 0:
        raise ValueError("rows と cols は 1 以上を指定してください")
    if not 0.0 < density <= 1.0:
        raise ValueError("density は 0 より大きく 1 以下で指定してください")

    # 乱数生成器を作成。シードを指定すると結果を再現できる
    rng = random.Random(seed)

    if solver_step_limit is None:
        solver_step_limit = DEFAULT_SOLVER_STEP_LIMIT

    generation_params = {
        "rows": rows,
        "cols": cols,
        "density": density,
        "seed": seed,
        "unique": unique,
        "solverStepLimit": solver_step_limit,
    }
    seed_hash = hashlib.sha256(str(seed).encode("utf-8")).hexdigest()

    start_time = time.perf_counter()
    logger.info("盤面生成開始: %dx%d density=%.2f", rows, cols, density)

    for attempt in range(RETRY_LIMIT):
        if timeout_s is not None and time.perf_counter() - start_time >= timeout_s:
            raise TimeoutError("generation timed out")

        solution = _random_board(rows, cols, rng, density)
        game = PicrossGame.from_board(solution)
        if unique and not sat_unique.is_unique(game):
            logger.warning("解が一意でないため再試行します (%d 回目)", attempt + 1)
            continue

        difficulty, solver_stats = _rate_puzzle(game, solver_step_limit)
        puzzle: Puzzle = {
            "schemaVersion": SCHEMA_VERSION,
            "id": f"pc_{rows}x{cols}_{difficulty}_{seed_hash[:8]}",
            **game.to_dict(),
            "rules": game.to_text(),
            "solution": solution.render().split("\n"),
            "difficulty": difficulty,
            "solverStats": solver_stats,
            "generationParams": generation_params,
            "seedHash": seed_hash,
            "partial": False,
        }
        logger.info("盤面生成成功: %.3f 秒", time.perf_counter() - start_time)
        if return_stats:
            stats = {
                "attempts": attempt + 1,
                "filled": game.filled_count,
                "solver_steps": solver_stats["steps"],
                "solver_max_depth": solver_stats["maxDepth"],
            }
            return puzzle, stats
        return puzzle

    raise ValueError("盤面生成に失敗しました")


__all__ = ["generate_puzzle", "setup_logging", "RETRY_LIMIT"]
