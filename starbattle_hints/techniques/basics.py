"""Saturation and adjacency rules: the cheapest techniques, tried first."""
from starbattle_hints.board import format_cell, is_independent
from starbattle_hints.deductions import BlockDeduction, CellDeduction
from starbattle_hints.constants import CROSS
from starbattle_hints.hints import TechniqueResult, NOTHING, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView, common_neighbors


def find_trivial_marks(board, config):
    """
    Full units and star neighbours.

    A unit that already holds k stars crosses its remaining empty cells
    (rows first, then columns, then regions); failing that, the empty
    neighbours of the first star in row-major order are crossed.
    """
    k = board.stars_per_unit
    for unit in board.units():
        empties = board.empty_cells(unit.cells)
        if empties and board.count_stars(unit.cells) >= k:
            return TechniqueResult.found(cross_hint(
                'trivial-marks', empties,
                f"{unit.label} already has {k} star{'s' if k > 1 else ''}, so its other cells are empty.",
                units=[unit]))

    for star in board.stars():
        empties = board.empty_cells(board.neighbors8(star))
        if empties:
            return TechniqueResult.found(cross_hint(
                'trivial-marks', empties,
                f"Stars cannot touch, so the cells around {format_cell(star)} are empty.",
                highlight_cells=[star]))
    return NOTHING


def find_two_by_two(board, config):
    """A 2x2 block with a star cannot hold another one."""
    deductions = []
    first_hint = None
    for block in board.blocks():
        cells = board.block_cells(block)
        if board.count_stars(cells) != 1:
            continue
        empties = board.empty_cells(cells)
        if not empties:
            continue
        deductions.append(BlockDeduction(block, 'two-by-two', max_stars=1,
                                         explanation=f"2x2 block at {format_cell(block)} already has a star"))
        if first_hint is None:
            first_hint = cross_hint(
                'two-by-two', empties,
                f"The 2x2 block at {format_cell(block)} already holds a star, so its other cells are empty.",
                highlight_cells=cells)
    if first_hint is None:
        return NOTHING
    return TechniqueResult.found(first_hint, deductions)


def find_one_by_n(board, config):
    """A unit whose remaining candidates number exactly its remaining stars."""
    view = BoardView(board)
    for unit in view.active_units():
        need = view.unit_need(unit)
        candidates = view.candidates(unit.cells)
        if len(candidates) != need or not is_independent(candidates):
            continue
        return TechniqueResult.found(star_hint(
            'one-by-n', candidates,
            f"{unit.label} needs {need} more star{'s' if need > 1 else ''} and has exactly"
            f" that many cells left that can hold one.",
            units=[unit]))
    return NOTHING


def find_simple_shapes(board, config):
    """
    A unit needing one more star crosses every cell that touches all of
    its candidates, since whichever candidate gets the star touches it.
    """
    view = BoardView(board)
    for unit in view.active_units():
        if view.unit_need(unit) != 1:
            continue
        candidates = view.candidates(unit.cells)
        if not candidates:
            continue
        forced = common_neighbors(board, candidates)
        if not forced:
            continue
        deductions = [CellDeduction(cell, CROSS, 'simple-shapes') for cell in forced]
        return TechniqueResult.found(cross_hint(
            'simple-shapes', forced,
            f"The last star of {unit.label} must go in one of {len(candidates)} cells that all"
            f" touch {', '.join(format_cell(c) for c in forced)}.",
            units=[unit], highlight_cells=candidates), deductions)
    return NOTHING
