"""
Main solver.

Takes the deductions accumulated during a pass and looks for a certain move
no single technique could name: direct cell facts, counted cell sets pinned
by their bounds, bounds tightened by the unit quotas and by each other
(subset differences), and area relations split over their members.

Every fact found during the analysis is kept so that two facts disagreeing
about a cell surface as a :class:`DeductionContradiction` rather than one side
winning silently. The first group of facts found becomes the hint.
"""
import math
from collections import namedtuple

from starbattle_hints.board import format_cell
from starbattle_hints.constants import (
    STAR, CROSS, ROW, COLUMN, REGION, KIND_PLACE_STAR, KIND_PLACE_CROSS
)
from starbattle_hints.deductions import (
    AreaDeduction, AreaRelationDeduction, BlockDeduction, CellDeduction,
    ExclusiveSetDeduction, count_range, filter_valid_deductions
)
from starbattle_hints.errors import DeductionContradiction
from starbattle_hints.hints import make_hint
from starbattle_hints.techniques.analysis import BoardView, max_placeable
from starbattle_hints.validation import validate_state

_Constraint = namedtuple('_Constraint', ['cells', 'lo', 'hi', 'technique', 'label', 'from_unit'])
_Group = namedtuple('_Group', ['value', 'cells', 'technique', 'reason'])


def _bounds_text(lo, hi):
    if lo == hi:
        return f"exactly {lo}"
    if hi == math.inf:
        return f"at least {lo}"
    return f"{lo}-{hi}"


class _Synthesis:
    def __init__(self, board):
        self.board = board
        self.view = BoardView(board)
        self.facts = {}
        self.groups = []

    # --- Facts ---
    def record(self, cells, value, technique, reason):
        fresh = []
        for cell in cells:
            known = self.facts.get(cell)
            if known is not None and known[0] != value:
                raise DeductionContradiction(
                    f"{format_cell(cell)} is forced to {known[0]} ({known[1]}) and to {value} ({technique})",
                    target=cell, existing=known, incoming=(value, technique))
            if known is None:
                self.facts[cell] = (value, technique)
                fresh.append(cell)
        if fresh:
            self.groups.append(_Group(value, tuple(sorted(cells)), technique, reason))

    def resolve(self, cells, lo, hi, technique, label):
        """
        Evaluate "``cells`` hold between ``lo`` and ``hi`` stars" against the board.

        :raises DeductionContradiction: When no number of stars fits the bounds.
        """
        board = self.board
        empties = board.empty_cells(cells)
        open_cells = [c for c in empties if c in self.view.viable]
        stars = board.count_stars(cells)
        lo_left = lo - stars
        hi_left = min(hi - stars, max_placeable(open_cells))
        if lo_left > hi_left or hi - stars < 0:
            raise DeductionContradiction(
                f"{label} needs {_bounds_text(lo, hi)} stars but can only hold"
                f" {stars}-{stars + max(hi_left, 0)}",
                target=tuple(cells))
        if not empties:
            return
        if hi_left <= 0:
            self.record(empties, CROSS, technique,
                        f"{label} holds {_bounds_text(lo, hi)} stars and already has {stars}")
        elif open_cells and lo_left >= len(open_cells):
            self.record(open_cells, STAR, technique,
                        f"{label} holds {_bounds_text(lo, hi)} stars and only"
                        f" {', '.join(format_cell(c) for c in open_cells)} can still take one")

    # --- Constraint building ---
    def _unit_for(self, area_type, area_id):
        if area_type in (ROW, COLUMN):
            if isinstance(area_id, int) and 0 <= area_id < self.board.size:
                return self.board.unit(area_type, area_id)
            return None
        if area_type == REGION and area_id in self.board.region_ids:
            return self.board.region(area_id)
        return None

    def _quota_bounds(self, unit, cells):
        """Bounds the unit quota puts on ``cells`` (which must lie inside the unit)."""
        cell_set = set(cells)
        if not cell_set <= set(unit.cells):
            return 0, math.inf
        rest = [c for c in unit.cells if c not in cell_set]
        rest_stars = self.board.count_stars(rest)
        rest_room = max_placeable(self.view.candidates(rest))
        k = self.board.stars_per_unit
        return max(0, k - rest_stars - rest_room), k - rest_stars

    def constraint_for(self, deduction):
        lo, hi = count_range(deduction)
        if isinstance(deduction, BlockDeduction):
            hi = min(hi, 1)
            label = f"the 2x2 block at {format_cell(deduction.block)}"
        elif isinstance(deduction, AreaDeduction):
            unit = self._unit_for(deduction.area_type, deduction.area_id)
            label = f"{unit.label if unit else deduction.area_type} candidates"
            if unit is not None:
                q_lo, q_hi = self._quota_bounds(unit, deduction.candidate_cells)
                lo, hi = max(lo, q_lo), min(hi, q_hi)
        else:
            label = f"the set {', '.join(format_cell(c) for c in deduction.cells)}"
        return _Constraint(tuple(deduction.cells), lo, hi, deduction.technique, label, False)

    def unit_constraints(self):
        k = self.board.stars_per_unit
        return [_Constraint(unit.cells, k, k, None, unit.label, True) for unit in self.board.units()]

    # --- Passes ---
    def direct(self, deductions):
        for deduction in deductions:
            if not isinstance(deduction, CellDeduction):
                continue
            if deduction.value == STAR and deduction.cell not in self.view.viable:
                raise DeductionContradiction(
                    f"{deduction.technique} forces a star at {format_cell(deduction.cell)},"
                    f" which cannot hold one", target=deduction.cell, incoming=deduction)
            self.record([deduction.cell], deduction.value, deduction.technique,
                        deduction.explanation or f"{format_cell(deduction.cell)} is forced")

    def counted(self, constraints):
        for constraint in constraints:
            self.resolve(constraint.cells, constraint.lo, constraint.hi, constraint.technique, constraint.label)

    def differentials(self, constraints):
        pool = constraints + self.unit_constraints()
        cell_sets = [frozenset(c.cells) for c in pool]
        for i, inner in enumerate(pool):
            for j, outer in enumerate(pool):
                if i == j or (inner.from_unit and outer.from_unit):
                    continue
                if not cell_sets[i] < cell_sets[j]:
                    continue
                rest = [c for c in outer.cells if c not in cell_sets[i]]
                lo = outer.lo - inner.hi
                hi = outer.hi - inner.lo
                technique = inner.technique if not inner.from_unit else outer.technique
                self.resolve(rest, max(lo, 0), hi, technique,
                             f"the part of {outer.label} outside {inner.label}")

    def relations(self, relations, constraints):
        by_cells = {}
        for constraint in constraints:
            key = frozenset(constraint.cells)
            lo, hi = by_cells.get(key, (0, math.inf))
            by_cells[key] = (max(lo, constraint.lo), min(hi, constraint.hi))

        for relation in relations:
            total = relation.total_stars
            members = [area.candidate_cells for area in relation.areas]
            union = relation.cells
            label = " + ".join(self._relation_label(area) for area in relation.areas)
            self.resolve(union, total, total, relation.technique, label)
            if sum(len(m) for m in members) != len(union):
                continue

            bounds = []
            for area, cells in zip(relation.areas, members):
                stars = self.board.count_stars(cells)
                lo, hi = stars, stars + max_placeable(self.view.candidates(cells))
                unit = self._unit_for(area.area_type, area.area_id)
                if unit is not None:
                    q_lo, q_hi = self._quota_bounds(unit, cells)
                    lo, hi = max(lo, q_lo), min(hi, q_hi)
                d_lo, d_hi = by_cells.get(frozenset(cells), (0, math.inf))
                bounds.append((max(lo, d_lo), min(hi, d_hi)))

            for index, (area, cells) in enumerate(zip(relation.areas, members)):
                others_lo = sum(b[0] for i, b in enumerate(bounds) if i != index)
                others_hi = sum(b[1] for i, b in enumerate(bounds) if i != index)
                lo = max(bounds[index][0], total - others_hi)
                hi = min(bounds[index][1], total - others_lo)
                self.resolve(cells, lo, hi, relation.technique,
                             f"{self._relation_label(area)} (sharing {total} stars with {label})")

    def _relation_label(self, area):
        unit = self._unit_for(area.area_type, area.area_id)
        return unit.label if unit is not None else f"{area.area_type} {area.area_id}"


def analyze_deductions(deductions, board, diagnostics=None):
    """
    Synthesise a certain hint from accumulated deductions.

    :param list deductions: The accumulator; it is filtered against ``board`` first.
    :param Board board: Current board snapshot.
    :param Diagnostics diagnostics: Optional tracing switches.
    :returns: The first certain hint found, or None.
    :rtype: Hint | None
    :raises DeductionContradiction: When the deductions cannot all hold on this board.
    """
    deductions = filter_valid_deductions(deductions, board)
    if diagnostics is not None:
        diagnostics.accumulator(deductions)
    if not deductions:
        return None

    synthesis = _Synthesis(board)
    counted = [d for d in deductions if isinstance(d, (BlockDeduction, AreaDeduction, ExclusiveSetDeduction))]
    relations = [d for d in deductions if isinstance(d, AreaRelationDeduction)]
    constraints = [synthesis.constraint_for(d) for d in counted]

    synthesis.direct(deductions)
    synthesis.counted(constraints)
    synthesis.differentials(constraints)
    synthesis.relations(relations, constraints)

    if not synthesis.groups:
        return None
    group = synthesis.groups[0]
    kind = KIND_PLACE_STAR if group.value == STAR else KIND_PLACE_CROSS
    cells = [c for c in group.cells if board.is_empty(c)]
    hint = make_hint(group.technique, kind, cells, f"Combining what is known: {group.reason}.",
                     highlight_cells=cells)
    violations = validate_state(board.apply_hint(hint))
    if violations:
        raise DeductionContradiction(
            f"Combined deductions lead to an invalid board: {'; '.join(violations)}",
            target=hint.result_cells, incoming=hint)
    return hint
