# tests/conftest.py
import random

import pytest

from starbattle_hints.board import Board
from starbattle_hints.constants import STAR, STATE_EMPTY, STATE_STAR, STATE_CROSS
from starbattle_hints.deductions import AreaRelationDeduction, CellDeduction, count_range

# 10x10, two stars per unit: ten 2x5 regions, numbered in reading order.
REGIONS_10 = [[(r // 2) * 2 + (c // 5) + 1 for c in range(10)] for r in range(10)]
SOLUTION_10 = frozenset([
    (0, 0), (0, 5), (1, 2), (1, 7), (2, 4), (2, 9), (3, 1), (3, 6), (4, 3), (4, 8),
    (5, 0), (5, 5), (6, 2), (6, 7), (7, 4), (7, 9), (8, 1), (8, 6), (9, 3), (9, 8),
])

# 5x5, one star per unit.
REGIONS_5 = [
    [1, 1, 2, 2, 2],
    [1, 2, 2, 3, 3],
    [1, 4, 4, 3, 3],
    [4, 4, 5, 5, 3],
    [4, 5, 5, 5, 3],
]
SOLUTION_5 = frozenset([(0, 0), (1, 2), (2, 4), (3, 1), (4, 3)])


def grid_with(size, stars=(), crosses=()):
    grid = [[STATE_EMPTY] * size for _ in range(size)]
    for r, c in stars:
        grid[r][c] = STATE_STAR
    for r, c in crosses:
        grid[r][c] = STATE_CROSS
    return grid


@pytest.fixture
def board10():
    return Board(REGIONS_10, 2)


@pytest.fixture
def board5():
    return Board(REGIONS_5, 1)


@pytest.fixture
def make_board():
    """Factory: make_board(size, stars=..., crosses=...) on the 10x10 or 5x5 layout."""
    def factory(size=10, stars=(), crosses=()):
        regions, k = (REGIONS_10, 2) if size == 10 else (REGIONS_5, 1)
        return Board(regions, k, grid_with(size, stars, crosses))
    return factory


@pytest.fixture
def solved10():
    crosses = [(r, c) for r in range(10) for c in range(10) if (r, c) not in SOLUTION_10]
    return Board(REGIONS_10, 2, grid_with(10, SOLUTION_10, crosses))


@pytest.fixture
def solved5():
    crosses = [(r, c) for r in range(5) for c in range(5) if (r, c) not in SOLUTION_5]
    return Board(REGIONS_5, 1, grid_with(5, SOLUTION_5, crosses))


@pytest.fixture
def consistent_state():
    """Factory for a random partial state that agrees with the known solution."""
    def factory(seed, size=10, reveal=0.4, cross=0.4):
        rng = random.Random(seed)
        regions, k, solution = (REGIONS_10, 2, SOLUTION_10) if size == 10 else (REGIONS_5, 1, SOLUTION_5)
        stars, crosses = [], []
        for r in range(size):
            for c in range(size):
                if (r, c) in solution:
                    if rng.random() < reveal:
                        stars.append((r, c))
                elif rng.random() < cross:
                    crosses.append((r, c))
        return Board(regions, k, grid_with(size, stars, crosses))
    return factory


def assert_agrees_with(hint, solution):
    if hint.kind == 'place-star':
        assert set(hint.result_cells) <= solution, hint
    else:
        assert not set(hint.result_cells) & solution, hint


def assert_holds_in(deduction, solution):
    """A deduction is true of a solution when the solution's stars in its cells fit its count."""
    if isinstance(deduction, CellDeduction):
        assert (deduction.cell in solution) == (deduction.value == STAR), deduction
        return
    stars = len(set(deduction.cells) & solution)
    if isinstance(deduction, AreaRelationDeduction):
        assert stars == deduction.total_stars, deduction
        return
    lo, hi = count_range(deduction)
    assert lo <= stars <= hi, deduction


@pytest.fixture
def holds_in():
    return assert_holds_in


@pytest.fixture
def agrees_with():
    return assert_agrees_with


@pytest.fixture
def solution10():
    return SOLUTION_10


@pytest.fixture
def solution5():
    return SOLUTION_5
