import random
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from picross import sat_unique  # noqa: E402
from picross import solver  # noqa: E402
from picross.board import GameBoard  # noqa: E402
from picross.puzzle import PicrossGame  # noqa: E402
from picross.puzzle_types import TileState  # noqa: E402
from picross.solver_backtrack import BacktrackingSolver  # noqa: E402
from picross.solver_propagation import (  # noqa: E402
    PropagationSolver,
    partial_board_from_columns,
    partial_board_from_rows,
)
from picross.solver_worklist import WorklistSolver  # noqa: E402
from picross.validator import is_solution  # noqa: E402

VERSIONS = ["v1", "v2", "v3"]

EXAMPLES = [
    ("1", "0,0,1", "  x"),
    ("1 1,1,1 1", "1 1,1,1 1", "x x\n x \nx x"),
    (
        "1 1,1 1,5,1 1 1,5",
        "3,3 1,3,3 1,3",
        " x x \n x x \nxxxxx\nx x x\nxxxxx",
    ),
]


@pytest.mark.parametrize("version", VERSIONS)
@pytest.mark.parametrize("rows, columns, expected", EXAMPLES)
def test_solve_examples(version: str, rows: str, columns: str, expected: str) -> None:
    game = PicrossGame.from_rules(rows, columns)
    result = solver.solve(game, version)
    assert result.status is solver.SolveStatus.COMPLETE
    assert result.solved
    assert result.reason is None
    assert result.board.render() == expected
    assert is_solution(game, result.board)


def _random_games(count: int, size: int) -> list:
    rng = random.Random(0)
    games = []
    for _ in range(count):
        cells = [
            [TileState.FILLED if rng.random() < 0.5 else TileState.EMPTY for _ in range(size)]
            for _ in range(size)
        ]
        games.append(PicrossGame.from_board(GameBoard.from_rows(cells)))
    return games


def test_solvers_agree_on_random_boards() -> None:
    for game in _random_games(10, 5):
        backtrack = solver.solve(game, "v1")
        assert backtrack.status is solver.SolveStatus.COMPLETE
        assert is_solution(game, backtrack.board)

        fixed_point = solver.solve(game, "v2")
        worklist = solver.solve(game, "v3")
        assert fixed_point.status is worklist.status
        assert fixed_point.board == worklist.board
        if worklist.status is solver.SolveStatus.COMPLETE:
            # ライン推論だけで解けたなら解は一意
            assert backtrack.board == worklist.board
        else:
            assert worklist.status is solver.SolveStatus.INCOMPLETE


def test_ambiguous_puzzle() -> None:
    game = PicrossGame.from_rules("1,1", "1,1")

    for version in ("v2", "v3"):
        result = solver.solve(game, version)
        assert result.status is solver.SolveStatus.INCOMPLETE
        assert result.reason == "not complete"
        assert result.board.render() == "??\n??"

    # バックトラックは左詰めの配置から試すので最初に見つかる解が決まる
    result = solver.solve(game, "v1")
    assert result.status is solver.SolveStatus.COMPLETE
    assert result.board.render() == "x \n x"


def test_case_split_puzzle() -> None:
    # 解は一意だがライン単位の推論だけでは確定しきれない
    game = PicrossGame.from_rules("1,3,1 2,1 1 1,1 1,1 2", "2,3 1,1,1 1,1 1,4")
    assert sat_unique.is_unique(game)

    for version in ("v2", "v3"):
        result = solver.solve(game, version)
        assert result.status is solver.SolveStatus.INCOMPLETE
        assert not result.board.is_complete()

    result = solver.solve(game, "v1")
    assert result.status is solver.SolveStatus.COMPLETE
    assert is_solution(game, result.board)
    assert result.board.render() == (
        " x    \n xxx  \n x  xx\nx  x x\nx    x\n x  xx"
    )
    assert result.board == sat_unique.find_solutions(game)[0]


def test_unsatisfiable_puzzle() -> None:
    game = PicrossGame.from_rules("2,0", "0,2")

    result = solver.solve(game, "v1")
    assert result.status is solver.SolveStatus.NO_SOLUTION
    assert result.reason == "no solution"
    assert result.board.height == game.height

    for version in ("v2", "v3"):
        result = solver.solve(game, version)
        assert result.status is solver.SolveStatus.CONTRADICTION
        assert not result.solved
        assert result.reason


def test_backtrack_step_limit() -> None:
    game = PicrossGame.from_rules("1 1,1,1 1", "1 1,1,1 1")
    result = BacktrackingSolver(game, step_limit=1).solve()
    assert result.status is solver.SolveStatus.ABORTED
    assert result.reason == "step_limit"
    assert result.board.render() == "???\n???\n???"

    result = solver.solve(game, "v1", step_limit=1000)
    assert result.status is solver.SolveStatus.COMPLETE


def test_solver_stats() -> None:
    game = PicrossGame.from_rules("1 1,1,1 1", "1 1,1,1 1")

    stats = solver.solve(game, "v1").stats
    assert set(stats) == {"steps", "max_depth"}
    assert stats["max_depth"] == game.height
    assert stats["steps"] > game.height

    stats = solver.solve(game, "v2").stats
    assert set(stats) == {"iterations", "steps"}
    assert stats["iterations"] >= 2

    stats = solver.solve(game, "v3").stats
    assert set(stats) == {"steps", "updates"}
    assert stats["updates"] == game.width * game.height
    assert stats["steps"] >= game.width + game.height


def test_set_game() -> None:
    first = PicrossGame.from_rules("1", "0,0,1")
    second = PicrossGame.from_rules("1", "1,0,0")
    for version in VERSIONS:
        instance = solver.create_solver(version, first)
        instance.set_game(second)
        assert instance.solve().board.render() == "x  "


def test_create_solver() -> None:
    game = PicrossGame.from_rules("1", "1")
    assert isinstance(solver.create_solver("v1", game), BacktrackingSolver)
    assert isinstance(solver.create_solver(solver.SolverVersion.V2, game), PropagationSolver)
    assert isinstance(solver.create_solver("v3", game), WorklistSolver)
    with pytest.raises(ValueError):
        solver.create_solver("v9", game)


def test_default_version_is_worklist() -> None:
    game = PicrossGame.from_rules("1 1,1,1 1", "1 1,1,1 1")
    result = solver.solve(game)
    assert set(result.stats) == {"steps", "updates"}


def test_empty_puzzle() -> None:
    game = PicrossGame((), ())
    for version in VERSIONS:
        result = solver.solve(game, version)
        assert result.status is solver.SolveStatus.COMPLETE
        assert result.board.render() == ""


def test_partial_boards() -> None:
    game = PicrossGame.from_rules("3,1,1", "1,3,1")
    rows = partial_board_from_rows(game)
    assert rows.render() == "xxx\n???\n???"
    columns = partial_board_from_columns(game, rows)
    assert columns.render() == "xxx\n x \n x "
