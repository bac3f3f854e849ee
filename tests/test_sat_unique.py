import pytest

from picross import sat_unique
from picross.puzzle import PicrossGame
from picross.validator import is_solution


def test_unique_puzzle() -> None:
    game = PicrossGame.from_rules("1 1,1,1 1", "1 1,1,1 1")
    assert sat_unique.is_unique(game)
    solutions = sat_unique.find_solutions(game)
    assert len(solutions) == 1
    assert solutions[0].render() == "x x\n x \nx x"


def test_ambiguous_puzzle_has_two_solutions() -> None:
    game = PicrossGame.from_rules("1,1", "1,1")
    solutions = sat_unique.find_solutions(game, limit=5)
    assert sorted(board.render() for board in solutions) == [" x\nx ", "x \n x"]
    assert all(is_solution(game, board) for board in solutions)
    assert sat_unique.count_solutions(game, limit=1) == 1
    assert not sat_unique.is_unique(game)


def test_unsatisfiable_puzzle() -> None:
    game = PicrossGame.from_rules("2,0", "0,2")
    assert sat_unique.count_solutions(game) == 0
    assert not sat_unique.is_unique(game)


def test_line_without_placements() -> None:
    game = PicrossGame.from_rules("2 1", "1,1,1")
    assert sat_unique.find_solutions(game) == []


def test_empty_puzzle() -> None:
    assert sat_unique.count_solutions(PicrossGame((), ())) == 1


def test_invalid_limit() -> None:
    game = PicrossGame.from_rules("1", "1")
    with pytest.raises(ValueError):
        sat_unique.find_solutions(game, limit=0)
