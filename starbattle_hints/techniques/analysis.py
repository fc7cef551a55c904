"""
Shared reasoning helpers for the techniques: candidate cells, the 2x2-aware
maximum number of stars a cell set can take, hypothetical placements with
light propagation, and per-unit placement enumeration.
"""
from functools import lru_cache

from starbattle_hints.board import Board, are_adjacent, is_independent
from starbattle_hints.constants import MAX_EXACT_INDEPENDENT_CELLS, ROW, COLUMN


class Propagation:
    """
    A cheap, mutable overlay on a board for trying hypotheses.

    ``place`` adds a star, ``cross`` rules a cell out. A cell is *open* when it
    is empty on the board, untouched by the overlay, not next to any star and
    none of its units is already full.
    """

    def __init__(self, board, _copy_from=None):
        self.board = board
        if _copy_from is not None:
            self.stars = set(_copy_from.stars)
            self.crossed = set(_copy_from.crossed)
            self.blocked = set(_copy_from.blocked)
            self.need = dict(_copy_from.need)
            return
        self.stars = set(board.stars())
        self.crossed = set()
        self.blocked = set()
        for star in self.stars:
            self.blocked.update(board.neighbors8(star))
        self.need = {unit.key: board.need(unit) for unit in board.units()}

    def clone(self):
        return Propagation(self.board, _copy_from=self)

    def is_open(self, cell):
        if not self.board.is_empty(cell):
            return False
        if cell in self.stars or cell in self.crossed or cell in self.blocked:
            return False
        return all(self.need[unit.key] > 0 for unit in self.board.units_of(cell))

    def open_cells(self, cells):
        return [cell for cell in cells if self.is_open(cell)]

    def place(self, cell):
        self.stars.add(cell)
        self.blocked.update(self.board.neighbors8(cell))
        for unit in self.board.units_of(cell):
            self.need[unit.key] -= 1

    def cross(self, cell):
        self.crossed.add(cell)

    def broken_unit(self, use_max_placeable=False):
        """First unit that is over quota or can no longer be filled, else None."""
        for unit in self.board.units():
            need = self.need[unit.key]
            if need < 0:
                return unit
            if need == 0:
                continue
            open_cells = self.open_cells(unit.cells)
            if len(open_cells) < need:
                return unit
            if use_max_placeable and max_placeable(open_cells) < need:
                return unit
        return None

    def run(self, max_rounds):
        """
        Applies the forced-star rule to a fixpoint.

        :returns: False as soon as a contradiction appears, True otherwise.
        :rtype: bool
        """
        for _ in range(max_rounds):
            changed = False
            for unit in self.board.units():
                need = self.need[unit.key]
                if need < 0:
                    return False
                if need == 0:
                    continue
                open_cells = self.open_cells(unit.cells)
                if len(open_cells) < need or max_placeable(open_cells) < need:
                    return False
                if len(open_cells) == need:
                    if not is_independent(open_cells):
                        return False
                    for cell in open_cells:
                        if not self.is_open(cell):
                            return False
                        self.place(cell)
                    changed = True
            if not changed:
                return True
        return True


class BoardView:
    """Per-call cache of unit needs and candidate (viable) cells for one board."""

    def __init__(self, board):
        self.board = board
        self.k = board.stars_per_unit
        self.propagation = Propagation(board)
        self.need = dict(self.propagation.need)
        self.viable = {cell for cell in board.all_cells() if self.propagation.is_open(cell)}

    def candidates(self, cells):
        return [cell for cell in cells if cell in self.viable]

    def unit_need(self, unit):
        return self.need[unit.key]

    def active_units(self, units=None):
        units = self.board.units() if units is None else units
        return [unit for unit in units if self.need[unit.key] > 0]

    def lines(self, kind):
        size = self.board.size
        if kind == ROW:
            return [self.board.row(i) for i in range(size)]
        return [self.board.column(i) for i in range(size)]

    def regions(self):
        return [self.board.region(rid) for rid in self.board.region_ids]

    def group_need(self, units):
        return sum(self.need[unit.key] for unit in units)

    def group_candidates(self, units):
        seen, out = set(), []
        for unit in units:
            for cell in unit.cells:
                if cell in self.viable and cell not in seen:
                    seen.add(cell)
                    out.append(cell)
        return out


def line_index(cell, kind):
    return cell[0] if kind == ROW else cell[1]


def other_kind(kind):
    return COLUMN if kind == ROW else ROW


def common_neighbors(board, cells):
    """Empty cells outside ``cells`` touching every one of ``cells``."""
    cells = list(cells)
    if not cells:
        return []
    common = set(board.neighbors8(cells[0]))
    for cell in cells[1:]:
        common &= set(board.neighbors8(cell))
    common -= set(cells)
    return sorted(cell for cell in common if board.is_empty(cell))


# --- Maximum independent placement (king graph) ---
def max_placeable(cells):
    """
    Upper bound on how many stars fit in ``cells`` under the adjacency rule.

    Exact for small sets; larger sets fall back to counting the aligned 2x2
    tiles they touch, each of which holds at most one star.
    """
    cells = frozenset(cells)
    if len(cells) > MAX_EXACT_INDEPENDENT_CELLS:
        return len({(r // 2, c // 2) for r, c in cells})
    return _max_independent(cells)


@lru_cache(maxsize=65536)
def _max_independent(cells):
    if not cells:
        return 0
    first = min(cells)
    rest = cells - {first}
    conflicts = frozenset(cell for cell in rest if are_adjacent(first, cell))
    take = 1 + _max_independent(rest - conflicts)
    if not conflicts:
        return take
    return max(take, _max_independent(rest))


# --- Placements ---
def enumerate_independent(candidates, need, cap):
    results = []

    def walk(start, chosen):
        if len(results) > cap:
            return
        if len(chosen) == need:
            results.append(tuple(chosen))
            return
        for i in range(start, len(candidates)):
            cell = candidates[i]
            if any(are_adjacent(cell, other) for other in chosen):
                continue
            chosen.append(cell)
            walk(i + 1, chosen)
            chosen.pop()

    walk(0, [])
    return results


def placement_is_consistent(base, placement):
    trial = base.clone()
    for cell in placement:
        if not trial.is_open(cell):
            return False
        trial.place(cell)
    return trial.broken_unit() is None


def unit_placements(board, unit, max_placements, max_candidates):
    """
    Every way to finish ``unit`` that leaves all other units fillable.

    :returns: Tuple of placements (each a row-major tuple of cells), or None
        when the unit has too many candidates or placements to enumerate.
    :rtype: tuple | None
    """
    table = placement_table(board, max_placements, max_candidates)
    return table.get(unit.key)


def placement_table(board, max_placements, max_candidates):
    fingerprint = (board.regions, board.stars_per_unit, tuple(tuple(row) for row in board.grid))
    return _placement_table(fingerprint, max_placements, max_candidates)


@lru_cache(maxsize=16)
def _placement_table(fingerprint, max_placements, max_candidates):
    regions, k, grid = fingerprint
    board = Board(regions, k, grid)
    view = BoardView(board)
    table = {}
    for unit in view.active_units():
        candidates = view.candidates(unit.cells)
        need = view.unit_need(unit)
        if len(candidates) > max_candidates:
            table[unit.key] = None
            continue
        raw = enumerate_independent(candidates, need, max_placements * 4)
        if len(raw) > max_placements * 4:
            table[unit.key] = None
            continue
        valid = tuple(p for p in raw if placement_is_consistent(view.propagation, p))
        table[unit.key] = valid if len(valid) <= max_placements else None
    return table
