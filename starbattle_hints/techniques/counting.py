"""
Counting arguments over groups of units.

All of them share one shape: a group of disjoint units whose candidates all
sit inside a cover of disjoint units, where the group still needs exactly as
many stars as the cover. The cover then cannot take any star outside the
group.
"""
from itertools import combinations

from starbattle_hints.board import format_cell
from starbattle_hints.constants import ROW, COLUMN, CROSS
from starbattle_hints.deductions import CellDeduction
from starbattle_hints.hints import TechniqueResult, NOTHING, cross_hint
from starbattle_hints.techniques.analysis import BoardView, line_index, other_kind


def _labels(units):
    return ", ".join(unit.label for unit in units)


def _confined_groups(view, sources, cover_of, max_group):
    board = view.board
    active = view.active_units(sources)
    for size in range(1, max_group + 1):
        for group in combinations(active, size):
            candidates = view.group_candidates(group)
            if not candidates:
                continue
            cover = cover_of(candidates)
            if view.group_need(group) != view.group_need(cover):
                continue
            group_cells = {cell for unit in group for cell in unit.cells}
            forced = sorted({cell for unit in cover for cell in unit.cells
                             if board.is_empty(cell) and cell not in group_cells})
            if forced:
                yield group, cover, forced


def _lines_cover(view, kind):
    lines = view.lines(kind)
    return lambda cells: [lines[i] for i in sorted({line_index(cell, kind) for cell in cells})]


def _regions_cover(view):
    board = view.board
    ordered = {rid: i for i, rid in enumerate(board.region_ids)}
    return lambda cells: [board.region(rid) for rid in
                          sorted({board.region_of(cell) for cell in cells}, key=ordered.get)]


def _confinement_result(technique_id, group, cover, forced, verb):
    need_text = "need" if len(group) > 1 else "needs"
    hint = cross_hint(
        technique_id, forced,
        f"{_labels(group)} {need_text} exactly as many stars as {_labels(cover)}, and {verb},"
        f" so the rest of {_labels(cover)} is empty.",
        units=list(group) + list(cover))
    return TechniqueResult.found(hint, [CellDeduction(cell, CROSS, technique_id) for cell in forced])


def find_undercounting(board, config):
    """Regions squeezed into as many rows (or columns) as they need stars."""
    view = BoardView(board)
    for kind in (ROW, COLUMN):
        for group, cover, forced in _confined_groups(view, view.regions(), _lines_cover(view, kind),
                                                     config.max_group_size):
            return _confinement_result('undercounting', group, cover, forced,
                                       "their stars can only go there")
    return NOTHING


def find_overcounting(board, config):
    """Rows (or columns) whose stars can only come from regions with no spare stars."""
    view = BoardView(board)
    for kind in (ROW, COLUMN):
        for group, cover, forced in _confined_groups(view, view.lines(kind), _regions_cover(view),
                                                     config.max_group_size):
            return _confinement_result('overcounting', group, cover, forced,
                                       "every candidate lies in those regions")
    return NOTHING


def find_fish(board, config):
    """Rows whose candidates fall into as many stars' worth of columns, and the transpose."""
    view = BoardView(board)
    for kind in (ROW, COLUMN):
        cover_of = _lines_cover(view, other_kind(kind))
        for group, cover, forced in _confined_groups(view, view.lines(kind), cover_of,
                                                     config.max_group_size):
            return _confinement_result('fish', group, cover, forced,
                                       "every candidate lies in those lines")
    return NOTHING


def find_finned_counts(board, config):
    """
    Undercounting with a fin.

    If regions would be confined to some lines except for one or two fin
    cells in another line, any cell of those lines (outside the regions)
    that touches every fin is empty: either a fin holds a star and the cell
    touches it, or the regions' stars fill the lines.
    """
    view = BoardView(board)
    active = view.active_units(view.regions())
    for kind in (ROW, COLUMN):
        lines = view.lines(kind)
        for size in range(1, config.max_group_size + 1):
            for group in combinations(active, size):
                candidates = view.group_candidates(group)
                line_ids = sorted({line_index(cell, kind) for cell in candidates})
                if len(line_ids) < 2:
                    continue
                group_need = view.group_need(group)
                group_cells = {cell for unit in group for cell in unit.cells}
                for fin_line in line_ids:
                    fins = [cell for cell in candidates if line_index(cell, kind) == fin_line]
                    if len(fins) > 2:
                        continue
                    cover = [lines[i] for i in line_ids if i != fin_line]
                    if group_need != view.group_need(cover):
                        continue
                    forced = sorted({cell for unit in cover for cell in unit.cells
                                     if board.is_empty(cell) and cell not in group_cells
                                     and all(abs(cell[0] - f[0]) <= 1 and abs(cell[1] - f[1]) <= 1
                                             for f in fins)})
                    if not forced:
                        continue
                    hint = cross_hint(
                        'finned-counts', forced,
                        f"{_labels(group)} fill {_labels(cover)} unless a star sits on the fin"
                        f" {', '.join(format_cell(f) for f in fins)}; either way"
                        f" {', '.join(format_cell(c) for c in forced)} must be empty.",
                        units=list(group) + cover, highlight_cells=fins)
                    return TechniqueResult.found(
                        hint, [CellDeduction(cell, CROSS, 'finned-counts') for cell in forced])
    return NOTHING
