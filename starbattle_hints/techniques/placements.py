"""Techniques that enumerate the ways a unit (or two) can still be finished."""
from itertools import combinations, product

from starbattle_hints.board import are_adjacent, format_cell
from starbattle_hints.constants import CROSS
from starbattle_hints.deductions import (
    AreaRelationDeduction, CellDeduction, ExclusiveSetDeduction, RelationArea
)
from starbattle_hints.hints import TechniqueResult, NOTHING, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView, placement_is_consistent, unit_placements


def _placements(view, config):
    """(unit, placements) for every active unit whose placements could be enumerated."""
    out = []
    for unit in view.active_units():
        placements = unit_placements(view.board, unit, config.max_placements, config.max_placement_candidates)
        if placements:
            out.append((unit, placements))
    return out


def _touched_by_all(board, placements, exclude=()):
    """Empty cells next to some star of every placement."""
    exclude = set(exclude)
    common = None
    for placement in placements:
        touched = set()
        for cell in placement:
            touched.update(board.neighbors8(cell))
        common = touched if common is None else common & touched
    return sorted(c for c in (common or ()) if board.is_empty(c) and c not in exclude)


def find_exact_fill(board, config):
    """A unit with exactly one valid way to place its remaining stars."""
    view = BoardView(board)
    for unit, placements in _placements(view, config):
        if len(placements) == 1:
            cells = list(placements[0])
            return TechniqueResult.found(star_hint(
                'exact-fill', cells,
                f"There is only one way to place the remaining stars of {unit.label}"
                f" without breaking another row, column or region.",
                units=[unit], highlight_cells=cells))
    return NOTHING


def find_squeeze(board, config):
    """
    Cells used by every valid placement of a unit are stars; candidates
    used by none are empty.
    """
    view = BoardView(board)
    deductions = []
    for unit, placements in _placements(view, config):
        used = set().union(*placements)
        deductions.append(ExclusiveSetDeduction(
            sorted(used), view.unit_need(unit), 'squeeze',
            explanation=f"{unit.label} places its stars among {len(used)} cells"))
        always = sorted(set(placements[0]).intersection(*placements[1:]))
        if always:
            return TechniqueResult.found(star_hint(
                'squeeze', always,
                f"Every way to finish {unit.label} uses {', '.join(format_cell(c) for c in always)}.",
                units=[unit], highlight_cells=sorted(used)), deductions)
        never = sorted(c for c in view.candidates(unit.cells) if c not in used)
        if never:
            return TechniqueResult.found(cross_hint(
                'squeeze', never,
                f"No valid way to finish {unit.label} uses {', '.join(format_cell(c) for c in never)}.",
                units=[unit], highlight_cells=sorted(used)), deductions)
    return TechniqueResult.derived(deductions)


def find_cross_empty_patterns(board, config):
    """Cells touched by a star in every way of finishing some unit are empty."""
    view = BoardView(board)
    for unit, placements in _placements(view, config):
        forced = _touched_by_all(board, placements, exclude=unit.cells)
        if forced:
            return TechniqueResult.found(
                cross_hint('cross-empty-patterns', forced,
                           f"Whichever way {unit.label} is finished, a star touches"
                           f" {', '.join(format_cell(c) for c in forced)}.",
                           units=[unit]),
                [CellDeduction(c, CROSS, 'cross-empty-patterns') for c in forced])
    return NOTHING


def _interacts(a_cells, b_cells):
    return any(a == b or are_adjacent(a, b) for a in a_cells for b in b_cells)


def _joint_placements(view, first, first_placements, second, second_placements):
    shared = set(first.cells) & set(second.cells)
    joint = []
    for p, q in product(first_placements, second_placements):
        # A star in a shared cell counts for both units.
        if set(p) & shared != set(q) & shared:
            continue
        combined = sorted(set(p) | set(q))
        if placement_is_consistent(view.propagation, combined):
            joint.append(combined)
    return joint


def find_entanglement(board, config):
    """
    Two units whose few possible placements interfere with each other.

    Only combinations that work for both units at once survive; what all
    surviving combinations agree on is forced.
    """
    view = BoardView(board)
    options = [(u, p) for u, p in _placements(view, config) if len(p) <= 8]
    deductions = []
    for (first, fp), (second, sp) in combinations(options, 2):
        first_cells = set().union(*fp)
        second_cells = set().union(*sp)
        if not _interacts(first_cells, second_cells):
            continue
        joint = _joint_placements(view, first, fp, second, sp)
        if not joint:
            continue
        units = [first, second]
        label = f"{first.label} and {second.label}"
        if not (set(first.cells) & set(second.cells)):
            deductions.append(AreaRelationDeduction(
                (RelationArea(first.kind, first.id, sorted(first_cells)),
                 RelationArea(second.kind, second.id, sorted(second_cells))),
                view.unit_need(first) + view.unit_need(second), 'entanglement',
                explanation=f"{label} are finished together"))

        always = sorted(set(joint[0]).intersection(*joint[1:]))
        new_stars = [c for c in always if board.is_empty(c)]
        if new_stars:
            return TechniqueResult.found(star_hint(
                'entanglement', new_stars,
                f"Every way to finish {label} together uses"
                f" {', '.join(format_cell(c) for c in new_stars)}.",
                units=units), deductions)

        used = set().union(*joint)
        never = sorted(c for c in view.candidates(sorted(first_cells | second_cells)) if c not in used)
        touched = _touched_by_all(board, joint)
        forced = sorted(set(never) | {c for c in touched if c not in used})
        if forced:
            return TechniqueResult.found(
                cross_hint('entanglement', forced,
                           f"No way to finish {label} together leaves"
                           f" {', '.join(format_cell(c) for c in forced)} free for a star.",
                           units=units),
                deductions + [CellDeduction(c, CROSS, 'entanglement') for c in forced])
    return TechniqueResult.derived(deductions)
