import json
import logging
import hashlib
from pathlib import Path
import sys
from typing import Any, Dict, cast

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from picross import generator  # noqa: E402
from picross import sat_unique  # noqa: E402
from picross.board import GameBoard  # noqa: E402
from picross.constants import DEFAULT_SOLVER_STEP_LIMIT, _evaluate_difficulty  # noqa: E402
from picross.puzzle import PicrossGame  # noqa: E402
from picross.validator import is_solution  # noqa: E402


def _solution_board(puzzle: Dict[str, Any]) -> GameBoard:
    cols = puzzle["size"]["cols"]
    return GameBoard.from_text("\n".join(puzzle["solution"]), width=cols)


def test_generate_puzzle_structure(tmp_path: Path) -> None:
    puzzle = cast(Dict[str, Any], generator.generate_puzzle(5, 5, density=0.6, seed=0))
    # JSON に変換できるか確認
    data = json.dumps(puzzle)
    assert puzzle["schemaVersion"] == "1.0"
    assert puzzle["size"] == {"rows": 5, "cols": 5}
    assert len(puzzle["rowRules"]) == 5
    assert len(puzzle["columnRules"]) == 5
    assert puzzle["difficulty"] in {"easy", "normal", "hard", "expert"}
    assert puzzle["id"].startswith(f"pc_5x5_{puzzle['difficulty']}_")
    assert puzzle["partial"] is False
    assert puzzle["solverStats"]["version"] in {1, 3}
    assert puzzle["solverStats"]["steps"] > 0
    assert puzzle["solverStats"]["maxDepth"] >= 0
    assert puzzle["generationParams"] == {
        "rows": 5,
        "cols": 5,
        "density": 0.6,
        "seed": 0,
        "unique": True,
        "solverStepLimit": DEFAULT_SOLVER_STEP_LIMIT,
    }
    assert puzzle["seedHash"] == hashlib.sha256(b"0").hexdigest()
    assert puzzle["id"].endswith(puzzle["seedHash"][:8])
    # 一時ファイルに保存し読み込んでみる
    file = tmp_path / "puzzle.json"
    file.write_text(data, encoding="utf-8")
    loaded = json.loads(file.read_text(encoding="utf-8"))
    assert PicrossGame.from_dict(loaded) == PicrossGame.from_text(loaded["rules"])


def test_generated_puzzle_is_unique() -> None:
    puzzle = cast(Dict[str, Any], generator.generate_puzzle(5, 5, density=0.6, seed=1))
    game = PicrossGame.from_dict(puzzle)
    board = _solution_board(puzzle)
    assert is_solution(game, board)
    assert sat_unique.is_unique(game)
    assert sat_unique.find_solutions(game)[0] == board


def test_generate_puzzle_deterministic() -> None:
    first = generator.generate_puzzle(4, 4, density=0.6, seed=7)
    second = generator.generate_puzzle(4, 4, density=0.6, seed=7)
    assert first == second


def test_generate_puzzle_return_stats() -> None:
    puzzle, stats = cast(
        tuple,
        generator.generate_puzzle(4, 4, density=0.6, seed=2, return_stats=True),
    )
    assert set(stats) == {"attempts", "filled", "solver_steps", "solver_max_depth"}
    assert 1 <= stats["attempts"] <= generator.RETRY_LIMIT
    assert stats["filled"] == PicrossGame.from_dict(puzzle).filled_count
    assert stats["solver_steps"] == puzzle["solverStats"]["steps"]


def test_generate_puzzle_without_uniqueness(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(game: PicrossGame) -> bool:
        raise AssertionError("is_unique should not be called")

    monkeypatch.setattr(sat_unique, "is_unique", fail)
    puzzle, stats = cast(
        tuple,
        generator.generate_puzzle(3, 6, seed=3, unique=False, return_stats=True),
    )
    assert stats["attempts"] == 1
    assert puzzle["size"] == {"rows": 3, "cols": 6}
    assert puzzle["generationParams"]["unique"] is False
    assert is_solution(PicrossGame.from_dict(puzzle), _solution_board(puzzle))


def test_generate_puzzle_retry_exhausted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sat_unique, "is_unique", lambda game: False)
    monkeypatch.setattr(generator, "RETRY_LIMIT", 3)
    with pytest.raises(ValueError):
        generator.generate_puzzle(3, 3, seed=0)


def test_generate_puzzle_timeout() -> None:
    with pytest.raises(TimeoutError):
        generator.generate_puzzle(5, 5, seed=0, timeout_s=0.0)


@pytest.mark.parametrize(
    "rows, cols, density",
    [(0, 5, 0.5), (5, -1, 0.5), (5, 5, 0.0), (5, 5, 1.5)],
)
def test_generate_puzzle_invalid_arguments(rows: int, cols: int, density: float) -> None:
    with pytest.raises(ValueError):
        generator.generate_puzzle(rows, cols, density=density)


def test_full_density_is_easy() -> None:
    puzzle = cast(Dict[str, Any], generator.generate_puzzle(3, 3, density=1.0, seed=0))
    assert puzzle["solution"] == ["xxx", "xxx", "xxx"]
    assert puzzle["rowRules"] == [[3], [3], [3]]
    assert puzzle["difficulty"] == "easy"
    assert puzzle["solverStats"] == {"version": 3, "steps": 6, "maxDepth": 0}


def test_evaluate_difficulty() -> None:
    assert _evaluate_difficulty(True, 10, 0) == "easy"
    assert _evaluate_difficulty(True, 60, 0) == "normal"
    assert _evaluate_difficulty(False, 100, 5) == "hard"
    assert _evaluate_difficulty(False, 20000, 5) == "expert"
    assert _evaluate_difficulty(False, 100, 31) == "expert"


def test_setup_logging() -> None:
    # 既にハンドラがある場合 basicConfig は何もしないので例外が出ないことだけ確認
    generator.setup_logging(logging.DEBUG)
