import logging

import pytest

from starbattle_hints import main_solver
from starbattle_hints.board import Board
from starbattle_hints.config import EngineConfig
from starbattle_hints.constants import STAR, CROSS, KIND_PLACE_CROSS, KIND_PLACE_STAR
from starbattle_hints.deductions import CellDeduction
from starbattle_hints.diagnostics import Diagnostics
from starbattle_hints.errors import DeductionContradiction, TechniqueError, UnsoundHintError
from starbattle_hints.hints import NOTHING, Technique, TechniqueResult, star_hint
from starbattle_hints.runner import find_next_hint, solve_step_by_step
from starbattle_hints.techniques import TECHNIQUES, TECHNIQUE_IDS, get_technique
from starbattle_hints.validation import validate_state


def test_catalogue_order_is_fixed():
    assert TECHNIQUE_IDS[:4] == ('trivial-marks', 'two-by-two', 'one-by-n', 'exclusion')
    assert TECHNIQUE_IDS[-3:] == ('at-sea', 'by-a-thread', 'by-a-thread-at-sea')
    assert len(set(TECHNIQUE_IDS)) == len(TECHNIQUE_IDS) == 25
    assert get_technique('fish').name == "Fish"
    with pytest.raises(KeyError):
        get_technique('guessing')


def test_saturated_row_is_crossed_by_trivial_marks(make_board):
    board = make_board(10, stars=[(0, 0), (0, 5)], crosses=[(0, 1), (0, 2), (0, 3), (0, 4), (0, 6)])
    hint = find_next_hint(board)
    assert hint.technique == 'trivial-marks'
    assert hint.kind == KIND_PLACE_CROSS
    assert hint.result_cells == ((0, 7), (0, 8), (0, 9))
    assert hint.highlights['rows'] == [0]


def test_block_with_a_star_gets_its_other_cells_crossed(make_board):
    board = make_board(10, stars=[(4, 4)])
    hint = find_next_hint(board)
    assert hint.kind == KIND_PLACE_CROSS
    assert {(3, 3), (3, 4), (4, 3)} <= set(hint.result_cells)
    assert validate_state(board.apply_hint(hint)) == []


def test_all_cross_board_has_no_hint(make_board):
    every_cell = [(r, c) for r in range(10) for c in range(10)]
    assert find_next_hint(make_board(10, crosses=every_cell)) is None


def test_solved_board_has_no_hint(solved10):
    assert find_next_hint(solved10) is None


def test_same_board_gives_same_hint(consistent_state):
    board = consistent_state(7, reveal=0.3, cross=0.5)
    first, second = find_next_hint(board), find_next_hint(board)
    assert first == second
    assert first.id == second.id


@pytest.mark.parametrize("seed", range(4))
def test_no_earlier_technique_has_a_hint(consistent_state, seed):
    board = consistent_state(seed, reveal=0.3, cross=0.5)
    hint = find_next_hint(board)
    assert hint is not None
    position = TECHNIQUE_IDS.index(hint.technique)
    config = EngineConfig()
    for technique in TECHNIQUES[:position]:
        assert not technique.find(board, config).is_hint, technique.id


def test_direct_hint_skips_main_solver(monkeypatch, make_board):
    def fail(*args, **kwargs):
        raise AssertionError("main solver must not run")

    monkeypatch.setattr(main_solver, 'analyze_deductions', fail)
    hint = find_next_hint(make_board(10, stars=[(4, 4)]))
    assert hint.technique == 'trivial-marks'


def test_bundled_deductions_do_not_preempt_the_hint(monkeypatch, board5):
    calls = []
    monkeypatch.setattr(main_solver, 'analyze_deductions', lambda *a, **k: calls.append(a))
    bundled = Technique('bundled', "Bundled", lambda board, config: TechniqueResult.found(
        star_hint('bundled', [(0, 0)], "first"), [CellDeduction((4, 4), CROSS, 'bundled')]))
    hint = find_next_hint(board5, techniques=(bundled,))
    assert hint.technique == 'bundled'
    assert calls == []


def test_deductions_reach_the_main_solver(board5):
    derived = Technique('derived', "Derived", lambda board, config: TechniqueResult.derived(
        [CellDeduction((0, 0), STAR, 'derived')]))
    hint = find_next_hint(board5, techniques=(derived,))
    assert hint.technique == 'derived'
    assert hint.kind == KIND_PLACE_STAR
    assert hint.result_cells == ((0, 0),)


def test_deductions_accumulate_across_techniques(monkeypatch, make_board):
    seen = []

    def spy(deductions, board, diagnostics=None):
        seen.append(list(deductions))
        return None

    monkeypatch.setattr(main_solver, 'analyze_deductions', spy)
    first = Technique('first', "First", lambda board, config: TechniqueResult.derived(
        [CellDeduction((0, 1), CROSS, 'first')]))
    second = Technique('second', "Second", lambda board, config: TechniqueResult.derived(
        [CellDeduction((0, 3), CROSS, 'second'), CellDeduction((4, 4), CROSS, 'second')]))
    board = make_board(5, crosses=[(4, 4)])
    assert find_next_hint(board, techniques=(first, second)) is None
    # The stale deduction about R5C5 is filtered out before merging.
    assert seen == [
        [CellDeduction((0, 1), CROSS, 'first')],
        [CellDeduction((0, 1), CROSS, 'first'), CellDeduction((0, 3), CROSS, 'second')],
    ]


def test_technique_faults_are_wrapped(board5):
    broken = Technique('broken', "Broken", lambda board, config: 1 / 0)
    with pytest.raises(TechniqueError) as excinfo:
        find_next_hint(board5, techniques=(broken,))
    assert excinfo.value.technique_id == 'broken'
    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)


def test_contradictions_propagate_unchanged(board5):
    def contradict(board, config):
        raise DeductionContradiction("boom", target=(0, 0))

    with pytest.raises(DeductionContradiction):
        find_next_hint(board5, techniques=(Technique('c', "C", contradict),))

    disagree = Technique('d', "D", lambda board, config: TechniqueResult.derived(
        [CellDeduction((1, 1), STAR, 'd'), CellDeduction((1, 1), CROSS, 'd')]))
    with pytest.raises(DeductionContradiction):
        find_next_hint(board5, techniques=(disagree,))


def test_unsound_hints_are_rejected(make_board):
    board = make_board(5, stars=[(0, 0)])
    bad = Technique('bad', "Bad", lambda b, c: TechniqueResult.found(star_hint('bad', [(1, 1)], "no")))
    with pytest.raises(UnsoundHintError) as excinfo:
        find_next_hint(board, techniques=(bad,))
    assert excinfo.value.violations

    lenient = EngineConfig(verify_hints=False)
    assert find_next_hint(board, lenient, techniques=(bad,)).technique == 'bad'


def test_nothing_from_every_technique_is_none(board5):
    quiet = Technique('quiet', "Quiet", lambda board, config: NOTHING)
    assert find_next_hint(board5, techniques=(quiet, quiet)) is None


def test_diagnostics_trace_techniques(caplog, make_board):
    diagnostics = Diagnostics(logger=logging.getLogger('starbattle_hints.test'), trace_techniques=True)
    with caplog.at_level(logging.DEBUG, logger='starbattle_hints.test'):
        find_next_hint(make_board(10, stars=[(4, 4)]), EngineConfig(diagnostics=diagnostics))
    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("[trivial-marks] -> hint") for m in messages)
    assert any(m.startswith("Hint from trivial-marks (technique)") for m in messages)


def test_solve_step_by_step_stays_sound(board5, solution5, agrees_with):
    steps, final_board = solve_step_by_step(board5)
    assert steps
    for hint in steps:
        agrees_with(hint, solution5)
    assert validate_state(final_board) == []
    assert board5.stars() == []


def test_solve_step_by_step_respects_max_steps(board10):
    steps, final_board = solve_step_by_step(board10, max_steps=0)
    assert steps == []
    assert isinstance(final_board, Board)
