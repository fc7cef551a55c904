"""
Board model: the grid, its region map and the counting primitives every
technique is built on. Queries never mutate the board; ``with_cells`` and
``apply_hint`` return fresh copies.
"""
from collections import namedtuple

from starbattle_hints.constants import (
    STATE_EMPTY, STATE_STAR, STATE_CROSS, ROW, COLUMN, REGION,
    KIND_PLACE_STAR, BASE64_DISPLAY_ALPHABET
)
from starbattle_hints.errors import InvalidBoardError

_VALID_STATES = (STATE_EMPTY, STATE_STAR, STATE_CROSS)


class Unit(namedtuple('Unit', ['kind', 'id', 'cells'])):
    """A row, column or region. ``cells`` is a tuple of (r, c) in row-major order."""
    __slots__ = ()

    @property
    def key(self):
        return (self.kind, self.id)

    @property
    def label(self):
        if self.kind == ROW:
            return f"Row {self.id + 1}"
        if self.kind == COLUMN:
            return f"Column {self.id + 1}"
        return f"Region {format_region(self.id)}"


def format_region(region_id):
    if isinstance(region_id, int) and 1 <= region_id <= len(BASE64_DISPLAY_ALPHABET):
        return BASE64_DISPLAY_ALPHABET[region_id - 1]
    return str(region_id)


def format_cell(cell):
    return f"R{cell[0] + 1}C{cell[1] + 1}"


# --- Coordinate set algebra ---
# Results are deduplicated and keep the order of the left operand.
def intersection(left, right):
    right_set = set(right)
    seen, out = set(), []
    for cell in left:
        if cell in right_set and cell not in seen:
            seen.add(cell)
            out.append(cell)
    return out


def union(left, right):
    seen, out = set(), []
    for cell in list(left) + list(right):
        if cell not in seen:
            seen.add(cell)
            out.append(cell)
    return out


def difference(left, right):
    right_set = set(right)
    seen, out = set(), []
    for cell in left:
        if cell not in right_set and cell not in seen:
            seen.add(cell)
            out.append(cell)
    return out


def are_adjacent(a, b):
    return a != b and abs(a[0] - b[0]) <= 1 and abs(a[1] - b[1]) <= 1


def is_independent(cells):
    """True when no two of the cells touch, diagonals included."""
    cells = list(cells)
    for i, a in enumerate(cells):
        for b in cells[i + 1:]:
            if a == b or are_adjacent(a, b):
                return False
    return True


class Board:
    """
    A snapshot of a Star Battle puzzle in progress.

    :param list regions: N x N grid of region ids.
    :param int stars_per_unit: Stars required in every row, column and region (k).
    :param list grid: Optional N x N grid of cell states; defaults to all empty.
    """

    def __init__(self, regions, stars_per_unit, grid=None):
        if not regions or any(len(row) != len(regions) for row in regions):
            raise InvalidBoardError("Region grid must be a non-empty square")
        if not isinstance(stars_per_unit, int) or stars_per_unit < 1:
            raise InvalidBoardError(f"Invalid stars per unit: {stars_per_unit!r}")
        self.size = len(regions)
        self.stars_per_unit = stars_per_unit
        self.regions = tuple(tuple(row) for row in regions)
        if grid is None:
            grid = [[STATE_EMPTY] * self.size for _ in range(self.size)]
        if len(grid) != self.size or any(len(row) != self.size for row in grid):
            raise InvalidBoardError("Cell grid must match the region grid dimensions")
        if any(state not in _VALID_STATES for row in grid for state in row):
            raise InvalidBoardError("Cell grid contains an unknown state")
        self.grid = [list(row) for row in grid]

        region_cells = {}
        for r in range(self.size):
            for c in range(self.size):
                region_cells.setdefault(self.regions[r][c], []).append((r, c))
        self.region_ids = sorted(region_cells)
        self._rows = [Unit(ROW, r, tuple((r, c) for c in range(self.size))) for r in range(self.size)]
        self._cols = [Unit(COLUMN, c, tuple((r, c) for r in range(self.size))) for c in range(self.size)]
        self._regions = {rid: Unit(REGION, rid, tuple(cells)) for rid, cells in region_cells.items()}
        self._units = self._rows + self._cols + [self._regions[rid] for rid in self.region_ids]

    # --- Cell state ---
    def in_bounds(self, cell):
        r, c = cell
        return 0 <= r < self.size and 0 <= c < self.size

    def state(self, cell):
        return self.grid[cell[0]][cell[1]]

    def is_empty(self, cell):
        return self.grid[cell[0]][cell[1]] == STATE_EMPTY

    def is_star(self, cell):
        return self.grid[cell[0]][cell[1]] == STATE_STAR

    def is_cross(self, cell):
        return self.grid[cell[0]][cell[1]] == STATE_CROSS

    def all_cells(self):
        return [(r, c) for r in range(self.size) for c in range(self.size)]

    def stars(self):
        return [cell for cell in self.all_cells() if self.is_star(cell)]

    def is_solved(self):
        return all(self.need(unit) == 0 for unit in self._units)

    # --- Units ---
    def row(self, r):
        return self._rows[r]

    def column(self, c):
        return self._cols[c]

    def region(self, region_id):
        return self._regions[region_id]

    def region_of(self, cell):
        return self.regions[cell[0]][cell[1]]

    def units(self):
        """All units: rows, then columns, then regions in sorted id order."""
        return list(self._units)

    def units_of(self, cell):
        r, c = cell
        return (self._rows[r], self._cols[c], self._regions[self.regions[r][c]])

    def unit(self, kind, unit_id):
        if kind == ROW:
            return self._rows[unit_id]
        if kind == COLUMN:
            return self._cols[unit_id]
        return self._regions[unit_id]

    def need(self, unit):
        """Stars still missing from a unit (negative when over quota)."""
        return self.stars_per_unit - self.count_stars(unit.cells)

    # --- Counting over arbitrary cell sets ---
    def count_stars(self, cells):
        return sum(1 for cell in cells if self.is_star(cell))

    def count_crosses(self, cells):
        return sum(1 for cell in cells if self.is_cross(cell))

    def count_empties(self, cells):
        return sum(1 for cell in cells if self.is_empty(cell))

    def empty_cells(self, cells):
        return [cell for cell in cells if self.is_empty(cell)]

    def star_cells(self, cells):
        return [cell for cell in cells if self.is_star(cell)]

    # --- Geometry ---
    def neighbors8(self, cell):
        r, c = cell
        out = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = r + dr, c + dc
                if 0 <= nr < self.size and 0 <= nc < self.size:
                    out.append((nr, nc))
        return out

    def blocks(self):
        """Top-left corners of every 2x2 block, row-major."""
        return [(r, c) for r in range(self.size - 1) for c in range(self.size - 1)]

    def block_in_bounds(self, block):
        r, c = block
        return 0 <= r < self.size - 1 and 0 <= c < self.size - 1

    @staticmethod
    def block_cells(block):
        r, c = block
        return [(r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1)]

    # --- Copies ---
    def copy(self):
        return Board(self.regions, self.stars_per_unit, self.grid)

    def with_cells(self, cells, state):
        board = self.copy()
        for r, c in cells:
            board.grid[r][c] = state
        return board

    def apply_hint(self, hint):
        state = STATE_STAR if hint.kind == KIND_PLACE_STAR else STATE_CROSS
        return self.with_cells(hint.result_cells, state)

    def __repr__(self):
        return f"Board(size={self.size}, stars_per_unit={self.stars_per_unit}, stars={len(self.stars())})"
