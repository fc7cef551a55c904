"""Hypothesis-driven exclusions: try a star in a cell and see what breaks."""
from starbattle_hints.board import format_cell
from starbattle_hints.constants import CROSS, STAR, MAX_PROPAGATION_ROUNDS
from starbattle_hints.deductions import CellDeduction
from starbattle_hints.hints import TechniqueResult, NOTHING, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView


def _broken_by_star(view, cell, use_max_placeable):
    trial = view.propagation.clone()
    trial.place(cell)
    return trial.broken_unit(use_max_placeable=use_max_placeable)


def _exclude(board, technique_id, use_max_placeable, reason):
    view = BoardView(board)
    excluded = []
    for cell in sorted(view.viable):
        unit = _broken_by_star(view, cell, use_max_placeable)
        if unit is not None:
            excluded.append((cell, unit))
    if not excluded:
        return NOTHING
    cell, unit = excluded[0]
    deductions = [CellDeduction(c, CROSS, technique_id,
                                explanation=f"A star at {format_cell(c)} would {reason} {u.label}")
                  for c, u in excluded]
    hint = cross_hint(
        technique_id, [cell],
        f"A star at {format_cell(cell)} would {reason} {unit.label}, so it must be empty.",
        units=[unit], highlight_cells=[cell])
    return TechniqueResult.found(hint, deductions)


def find_exclusion(board, config):
    """A cell whose star would leave some unit with too few free cells."""
    return _exclude(board, 'exclusion', False, "leave too few free cells for")


def find_adjacent_exclusion(board, config):
    """
    Like exclusion, but counts how many stars the free cells of a unit can
    actually take once the adjacency rule is respected.
    """
    return _exclude(board, 'adjacent-exclusion', True, "leave no room for the stars of")


def find_pressured_exclusion(board, config):
    """
    Follow a hypothesis through forced stars until it settles or breaks.

    A star that leads to a contradiction means the cell is empty; a cross
    that leads to one means the cell holds a star.
    """
    view = BoardView(board)
    for cell in sorted(view.viable):
        trial = view.propagation.clone()
        trial.place(cell)
        if not trial.run(MAX_PROPAGATION_ROUNDS):
            return TechniqueResult.found(
                cross_hint('pressured-exclusion', [cell],
                           f"Placing a star at {format_cell(cell)} forces a chain of stars that"
                           f" breaks the puzzle, so it must be empty.",
                           highlight_cells=[cell]),
                [CellDeduction(cell, CROSS, 'pressured-exclusion')])

        trial = view.propagation.clone()
        trial.cross(cell)
        if not trial.run(MAX_PROPAGATION_ROUNDS):
            return TechniqueResult.found(
                star_hint('pressured-exclusion', [cell],
                          f"Leaving {format_cell(cell)} empty forces a chain of stars that"
                          f" breaks the puzzle, so it must hold a star.",
                          highlight_cells=[cell]),
                [CellDeduction(cell, STAR, 'pressured-exclusion')])
    return NOTHING
