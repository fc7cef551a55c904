"""
Deduction model.

A deduction is a piece of partial knowledge a technique could prove without
being able to name a certain move. There are five closed variants. Every star
count refers to the total number of stars inside the referenced cells,
stars already on the board included.

Deductions are filtered against the board before use (stale or out-of-range
ones are dropped) and merged into an accumulator keyed by their target.
"""
import math
from dataclasses import dataclass

from starbattle_hints.constants import STAR, CROSS
from starbattle_hints.errors import DeductionContradiction


def _as_cells(cells):
    return tuple(tuple(cell) for cell in cells)


@dataclass(frozen=True)
class CellDeduction:
    cell: tuple
    value: str
    technique: str
    explanation: str = None

    def __post_init__(self):
        if self.value not in (STAR, CROSS):
            raise ValueError(f"Cell deduction value must be '{STAR}' or '{CROSS}', got {self.value!r}")
        object.__setattr__(self, 'cell', tuple(self.cell))


@dataclass(frozen=True)
class BlockDeduction:
    """Star count of the 2x2 block whose top-left corner is ``block``."""
    block: tuple
    technique: str
    stars_required: int = None
    min_stars: int = None
    max_stars: int = None
    explanation: str = None

    def __post_init__(self):
        object.__setattr__(self, 'block', tuple(self.block))

    @property
    def cells(self):
        r, c = self.block
        return ((r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1))


@dataclass(frozen=True)
class AreaDeduction:
    area_type: str
    area_id: object
    candidate_cells: tuple
    technique: str
    stars_required: int = None
    min_stars: int = None
    max_stars: int = None
    explanation: str = None

    def __post_init__(self):
        object.__setattr__(self, 'candidate_cells', _as_cells(self.candidate_cells))

    @property
    def cells(self):
        return self.candidate_cells


@dataclass(frozen=True)
class ExclusiveSetDeduction:
    cells: tuple
    stars_required: int
    technique: str
    explanation: str = None

    def __post_init__(self):
        object.__setattr__(self, 'cells', _as_cells(self.cells))


@dataclass(frozen=True)
class RelationArea:
    area_type: str
    area_id: object
    candidate_cells: tuple

    def __post_init__(self):
        object.__setattr__(self, 'candidate_cells', _as_cells(self.candidate_cells))


@dataclass(frozen=True)
class AreaRelationDeduction:
    """The union of several areas' candidate cells holds exactly ``total_stars``."""
    areas: tuple
    total_stars: int
    technique: str
    explanation: str = None

    def __post_init__(self):
        object.__setattr__(self, 'areas', tuple(self.areas))

    @property
    def cells(self):
        seen, out = set(), []
        for area in self.areas:
            for cell in area.candidate_cells:
                if cell not in seen:
                    seen.add(cell)
                    out.append(cell)
        return tuple(out)


COUNTED_TYPES = (BlockDeduction, AreaDeduction, ExclusiveSetDeduction)


def count_range(deduction):
    """
    The (min, max) star range a counted deduction asserts for its cells.

    :returns: Lower and upper bound; the upper bound is ``math.inf`` when open.
    :rtype: tuple
    """
    if isinstance(deduction, ExclusiveSetDeduction):
        return deduction.stars_required, deduction.stars_required
    if deduction.stars_required is not None:
        return deduction.stars_required, deduction.stars_required
    lo = deduction.min_stars if deduction.min_stars is not None else 0
    hi = deduction.max_stars if deduction.max_stars is not None else math.inf
    return lo, hi


def is_exact(deduction):
    if isinstance(deduction, ExclusiveSetDeduction):
        return True
    return getattr(deduction, 'stars_required', None) is not None


def deduction_key(deduction):
    """Merge key of a deduction; ``None`` for area relations, which are never keyed."""
    if isinstance(deduction, CellDeduction):
        return ('cell', deduction.cell)
    if isinstance(deduction, BlockDeduction):
        return ('block', deduction.block)
    if isinstance(deduction, AreaDeduction):
        return ('area', deduction.area_type, deduction.area_id)
    if isinstance(deduction, ExclusiveSetDeduction):
        return ('exclusive', tuple(sorted(deduction.cells)))
    if isinstance(deduction, AreaRelationDeduction):
        return None
    raise TypeError(f"Unknown deduction type: {type(deduction).__name__}")


# --- Validity filter ---
def is_valid_deduction(deduction, board):
    """
    Whether a deduction still says something about the board.

    Once a deduction is invalid for a board it stays invalid for every board
    with more decided cells.
    """
    if isinstance(deduction, CellDeduction):
        return board.in_bounds(deduction.cell) and board.is_empty(deduction.cell)
    if isinstance(deduction, BlockDeduction):
        if not board.block_in_bounds(deduction.block):
            return False
        return _counted_is_open(deduction, deduction.cells, board)
    if isinstance(deduction, (AreaDeduction, ExclusiveSetDeduction)):
        cells = deduction.cells
        if not cells or not all(board.in_bounds(cell) for cell in cells):
            return False
        if isinstance(deduction, ExclusiveSetDeduction):
            return board.count_empties(cells) > 0
        return _counted_is_open(deduction, cells, board)
    if isinstance(deduction, AreaRelationDeduction):
        if not deduction.areas:
            return False
        for area in deduction.areas:
            if not all(board.in_bounds(cell) for cell in area.candidate_cells):
                return False
        return any(board.count_empties(area.candidate_cells) > 0 for area in deduction.areas)
    raise TypeError(f"Unknown deduction type: {type(deduction).__name__}")


def _counted_is_open(deduction, cells, board):
    if board.count_empties(cells) == 0:
        return False
    if deduction.stars_required is not None and board.count_stars(cells) >= deduction.stars_required:
        return False
    return True


def filter_valid_deductions(deductions, board):
    return [d for d in deductions if is_valid_deduction(d, board)]


# --- Merge ---
def resolve_conflict(existing, incoming):
    """
    Pick the more specific of two deductions sharing a merge key.

    Exact beats bounds-only, then the narrower range wins, and ties keep the
    existing entry. Disagreement about the very same cells raises.

    :raises DeductionContradiction: When both cannot hold at once.
    """
    if existing == incoming:
        return existing
    if isinstance(existing, CellDeduction):
        if existing.value != incoming.value:
            raise DeductionContradiction(
                f"Cell {existing.cell} forced to {existing.value} by {existing.technique}"
                f" and to {incoming.value} by {incoming.technique}",
                target=existing.cell, existing=existing, incoming=incoming)
        return existing

    e_lo, e_hi = count_range(existing)
    i_lo, i_hi = count_range(incoming)
    if set(existing.cells) == set(incoming.cells) and max(e_lo, i_lo) > min(e_hi, i_hi):
        raise DeductionContradiction(
            f"{existing.technique} and {incoming.technique} disagree on the star count"
            f" of {sorted(existing.cells)}: [{e_lo}, {e_hi}] vs [{i_lo}, {i_hi}]",
            target=deduction_key(existing), existing=existing, incoming=incoming)

    if is_exact(existing) != is_exact(incoming):
        return existing if is_exact(existing) else incoming
    if (i_hi - i_lo) < (e_hi - e_lo):
        return incoming
    return existing


def merge_deductions(existing, incoming):
    """
    Merge ``incoming`` into ``existing`` and return the new accumulator list.

    Order is stable: first-seen keys keep their position, replacements happen in place.
    Area deductions only collide when they also name the same candidate cells.
    """
    entries = []
    index = {}
    for deduction in list(existing) + list(incoming):
        key = deduction_key(deduction)
        if key is None:
            if deduction not in entries:
                entries.append(deduction)
            continue
        if isinstance(deduction, AreaDeduction):
            # Bounds on different parts of one unit are separate facts.
            key += (tuple(sorted(deduction.candidate_cells)),)
        position = index.get(key)
        if position is None:
            index[key] = len(entries)
            entries.append(deduction)
        else:
            entries[position] = resolve_conflict(entries[position], deduction)
    return entries
