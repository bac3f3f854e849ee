"""PySAT を使った一意解チェックモジュール

各マスに 1 つ、各ラインの配置候補ごとに 1 つの変数を用意し、
「ラインごとに配置をちょうど 1 つ選ぶ」「選んだ配置がマスの値を決める」
という節で盤面全体を CNF に変換する。
"""

from __future__ import annotations

from typing import List, Optional

from pysat.formula import CNF, IDPool

# EncType は PySAT で定義されている列挙型で、
# エンコーディング方式を数値で表現します
from pysat.card import CardEnc, EncType
from pysat.solvers import Minisat22

from .board import GameBoard
from .line_iter import LinePlacements
from .puzzle import PicrossGame
from .puzzle_types import Axis, TileState


def _create_variables(game: PicrossGame, pool: IDPool) -> List[List[int]]:
    """マスごとの SAT 変数を作成する補助関数"""
    cells: List[List[int]] = []
    for y in range(game.height):
        row = []
        for x in range(game.width):
            row.append(pool.id(f"x_{y}_{x}"))
        cells.append(row)
    return cells


def _build_cnf(game: PicrossGame, pool: IDPool, cells: List[List[int]]) -> Optional[CNF]:
    """盤面全体の CNF を作る。配置候補のないラインがあれば None"""

    cnf = CNF()
    lines = [(Axis.ROW, y, rule, game.width) for y, rule in enumerate(game.rows)]
    lines += [(Axis.COLUMN, x, rule, game.height) for x, rule in enumerate(game.columns)]

    for axis, index, rule, width in lines:
        selectors: List[int] = []
        for n, placement in enumerate(LinePlacements(rule, width)):
            sel = pool.id(f"p_{axis.value}_{index}_{n}")
            selectors.append(sel)
            for pos, tile in enumerate(placement):
                cell = cells[index][pos] if axis is Axis.ROW else cells[pos][index]
                # 配置 sel を選んだらマスの値はその配置どおり
                if tile is TileState.FILLED:
                    cnf.append([-sel, cell])
                else:
                    cnf.append([-sel, -cell])
        if not selectors:
            return None
        # 少なくとも 1 つ、かつ高々 1 つの配置を選ぶ
        cnf.append(selectors)
        if len(selectors) > 1:
            cnf.extend(
                CardEnc.atmost(
                    selectors,
                    1,
                    vpool=pool,
                    encoding=EncType.seqcounter,
                ).clauses
            )
    return cnf


def find_solutions(game: PicrossGame, limit: int = 2) -> List[GameBoard]:
    """最大 ``limit`` 個の解を求めて盤面のリストで返す"""

    if limit <= 0:
        raise ValueError("limit は 1 以上を指定してください")
    if game.width == 0 or game.height == 0:
        return [GameBoard.empty(game.width, game.height)]

    pool = IDPool()
    cells = _create_variables(game, pool)
    cnf = _build_cnf(game, pool, cells)
    if cnf is None:
        return []

    solutions: List[GameBoard] = []
    with Minisat22(bootstrap_with=cnf.clauses) as solver:
        while len(solutions) < limit and solver.solve():
            model = solver.get_model()
            rows = []
            blocking = []
            for row_vars in cells:
                row = []
                for var in row_vars:
                    filled = model[var - 1] > 0
                    row.append(TileState.FILLED if filled else TileState.EMPTY)
                    # 同じ塗り方を二度と返さないよう禁止節を作る
                    blocking.append(-var if filled else var)
                rows.append(row)
            solutions.append(GameBoard.from_rows(rows, width=game.width))
            solver.add_clause(blocking)
    return solutions


def count_solutions(game: PicrossGame, limit: int = 2) -> int:
    """解の個数を ``limit`` を上限として数える"""
    return len(find_solutions(game, limit=limit))


def is_unique(game: PicrossGame) -> bool:
    """与えられたヒントから解が一意か確認する"""
    return count_solutions(game, limit=2) == 1


__all__ = ["find_solutions", "count_solutions", "is_unique"]
