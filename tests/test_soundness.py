"""
Every hint and deduction must agree with the known solution of the test layouts, whatever
partial (but consistent) state the board is in.
"""
import pytest

from starbattle_hints.config import DEFAULT_CONFIG
from starbattle_hints.runner import find_next_hint, solve_step_by_step
from starbattle_hints.techniques import TECHNIQUE_IDS, TECHNIQUES
from starbattle_hints.validation import validate_state

STATE_MIXES = [(0.2, 0.3), (0.3, 0.6), (0.5, 0.2), (0.6, 0.6), (0.1, 0.8), (0.0, 0.5)]


@pytest.mark.parametrize("seed", range(12))
def test_hint_on_random_state_agrees_with_solution(consistent_state, solution10, agrees_with, seed):
    reveal, cross = STATE_MIXES[seed % len(STATE_MIXES)]
    board = consistent_state(seed, reveal=reveal, cross=cross)
    hint = find_next_hint(board)
    if hint is None:
        return
    agrees_with(hint, solution10)
    assert validate_state(board.apply_hint(hint)) == []


@pytest.mark.parametrize("seed", range(6))
def test_small_board_hints_agree_with_solution(consistent_state, solution5, agrees_with, seed):
    board = consistent_state(seed, size=5, reveal=0.3, cross=0.3)
    steps, final_board = solve_step_by_step(board, max_steps=30)
    for hint in steps:
        agrees_with(hint, solution5)
    assert validate_state(final_board) == []


def test_hint_chain_agrees_with_solution(consistent_state, solution10, agrees_with):
    board = consistent_state(42, reveal=0.5, cross=0.5)
    steps, final_board = solve_step_by_step(board, max_steps=40)
    assert steps
    for hint in steps:
        agrees_with(hint, solution10)
    assert validate_state(final_board) == []


@pytest.mark.parametrize("seed", range(6))
@pytest.mark.parametrize("technique", TECHNIQUES, ids=TECHNIQUE_IDS)
def test_technique_output_agrees_with_solution(consistent_state, solution10, agrees_with, holds_in,
                                               technique, seed):
    reveal, cross = STATE_MIXES[seed]
    board = consistent_state(100 + seed, reveal=reveal, cross=cross)
    result = technique.find(board, DEFAULT_CONFIG)
    if result.is_hint:
        agrees_with(result.hint, solution10)
    for deduction in result.deductions:
        holds_in(deduction, solution10)
