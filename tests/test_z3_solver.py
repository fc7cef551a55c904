import pytest

from starbattle_hints.z3_solver import SolutionCount, Z3SolutionCounter, Z3StarBattleSolver, format_duration


def test_solved_board_has_one_completion(solved5):
    assert Z3SolutionCounter().count_solutions(solved5) == SolutionCount(1, False)


def test_broken_board_has_none(make_board):
    board = make_board(5, stars=[(0, 0), (0, 3)])
    assert Z3SolutionCounter().count_solutions(board) == SolutionCount(0, False)


def test_count_stops_at_max_count(board5):
    assert Z3SolutionCounter().count_solutions(board5, max_count=1) == SolutionCount(1, False)
    # This small layout has more than one completion.
    assert Z3SolutionCounter().count_solutions(board5, max_count=2).count == 2


def test_solutions_respect_the_rules(board5):
    solutions, timed_out = Z3StarBattleSolver(board5).solve()
    assert not timed_out
    assert len(solutions) == 2
    for grid in solutions:
        assert all(sum(row) == 1 for row in grid)
        assert all(sum(column) == 1 for column in zip(*grid))


def test_calls_are_counted(board5, solved5):
    oracle = Z3SolutionCounter()
    oracle.count_solutions(board5, max_count=1)
    oracle.count_solutions(solved5)
    assert oracle.calls == 2


@pytest.mark.parametrize("seconds, text", [
    (0.0125, "12.50 ms"),
    (2.5, "2.500 s"),
    (125, "2 min 5.00 s"),
])
def test_format_duration(seconds, text):
    assert format_duration(seconds) == text
