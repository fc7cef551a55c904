import pytest

from starbattle_hints.constants import STAR, CROSS, ROW, KIND_PLACE_STAR, KIND_PLACE_CROSS
from starbattle_hints.deductions import (
    AreaDeduction, AreaRelationDeduction, BlockDeduction, CellDeduction,
    ExclusiveSetDeduction, RelationArea
)
from starbattle_hints.errors import DeductionContradiction
from starbattle_hints.main_solver import analyze_deductions
from starbattle_hints.validation import validate_state


def test_no_deductions_means_no_hint(board10):
    assert analyze_deductions([], board10) is None


def test_stale_deductions_are_ignored(make_board):
    board = make_board(10, stars=[(0, 0)])
    assert analyze_deductions([CellDeduction((0, 0), STAR, 't')], board) is None


def test_direct_cell_facts(board5):
    hint = analyze_deductions([CellDeduction((2, 2), CROSS, 'finder')], board5)
    assert hint.kind == KIND_PLACE_CROSS
    assert hint.result_cells == ((2, 2),)
    assert hint.technique == 'finder'
    assert hint.explanation.startswith("Combining what is known")

    hint = analyze_deductions([CellDeduction((0, 0), STAR, 'finder')], board5)
    assert hint.kind == KIND_PLACE_STAR and hint.result_cells == ((0, 0),)


def test_exclusive_set_pinned_to_its_size(board10):
    hint = analyze_deductions([ExclusiveSetDeduction([(0, 0), (0, 2)], 2, 'squeeze')], board10)
    assert hint.kind == KIND_PLACE_STAR
    assert hint.result_cells == ((0, 0), (0, 2))
    assert hint.technique == 'squeeze'


def test_exclusive_set_with_no_stars_crosses_everything(board10):
    hint = analyze_deductions([ExclusiveSetDeduction([(3, 3), (3, 4), (4, 3)], 0, 't')], board10)
    assert hint.kind == KIND_PLACE_CROSS
    assert hint.result_cells == ((3, 3), (3, 4), (4, 3))


def test_block_at_its_maximum_crosses_the_rest(make_board):
    board = make_board(10, stars=[(0, 0)])
    hint = analyze_deductions([BlockDeduction((0, 0), 'two-by-two', max_stars=1)], board)
    assert hint.kind == KIND_PLACE_CROSS
    assert hint.result_cells == ((0, 1), (1, 0), (1, 1))


def test_unit_quota_tightens_area_bounds(make_board):
    # Only R1C1 and R1C3 are left in the row, so both take a star.
    board = make_board(10, crosses=[(0, 1)] + [(0, c) for c in range(3, 10)])
    deduction = AreaDeduction(ROW, 0, [(0, 0), (0, 2)], 'set-differentials', min_stars=1)
    hint = analyze_deductions([deduction], board)
    assert hint.kind == KIND_PLACE_STAR
    assert hint.result_cells == ((0, 0), (0, 2))
    assert validate_state(board.apply_hint(hint)) == []


def test_subset_differential_against_a_unit(make_board):
    board = make_board(10, crosses=[(0, c) for c in range(3, 10)])
    hint = analyze_deductions([ExclusiveSetDeduction([(0, 0), (0, 1)], 1, 'squeeze')], board)
    assert hint.kind == KIND_PLACE_STAR
    assert hint.result_cells == ((0, 2),)
    assert "outside" in hint.explanation


def test_relation_total_pins_its_union(board5):
    deduction = AreaRelationDeduction(
        (RelationArea(ROW, 0, [(0, 0)]), RelationArea(ROW, 2, [(2, 2)])), 2, 'entanglement')
    hint = analyze_deductions([deduction], board5)
    assert hint.kind == KIND_PLACE_STAR
    assert hint.result_cells == ((0, 0), (2, 2))


def test_relation_member_is_narrowed_by_the_others(board5):
    deduction = AreaRelationDeduction(
        (RelationArea(ROW, 0, [(0, 0), (0, 2)]), RelationArea(ROW, 2, [(2, 4)])), 2, 'entanglement')
    hint = analyze_deductions([deduction], board5)
    assert hint.kind == KIND_PLACE_STAR
    assert hint.result_cells == ((2, 4),)
    assert hint.technique == 'entanglement'


def test_conflicting_facts_raise(board5):
    with pytest.raises(DeductionContradiction):
        analyze_deductions([CellDeduction((1, 1), STAR, 'a'), CellDeduction((1, 1), CROSS, 'b')], board5)


def test_infeasible_bounds_raise(board10):
    with pytest.raises(DeductionContradiction):
        analyze_deductions([ExclusiveSetDeduction([(0, 0), (0, 1)], 2, 't')], board10)


def test_star_forced_on_a_dead_cell_raises(make_board):
    board = make_board(10, stars=[(4, 4)])
    with pytest.raises(DeductionContradiction):
        analyze_deductions([CellDeduction((5, 5), STAR, 't')], board)
