"""Arguments built on 2x2 windows, each of which can hold at most one star."""
from starbattle_hints.board import format_cell
from starbattle_hints.constants import ROW, COLUMN
from starbattle_hints.deductions import BlockDeduction, ExclusiveSetDeduction
from starbattle_hints.hints import TechniqueResult, NOTHING, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView, common_neighbors


def window_cells(kind, start, pos, width):
    if kind == ROW:
        return [(start + dr, pos + d) for dr in (0, 1) for d in range(width)]
    return [(pos + d, start + dc) for d in range(width) for dc in (0, 1)]


def window_tilings(size):
    """Both ways of cutting a line of ``size`` cells into pieces of at most two."""
    even = [(pos, min(2, size - pos)) for pos in range(0, size, 2)]
    shifted = [(0, 1)] + [(pos, min(2, size - pos)) for pos in range(1, size, 2)]
    return [even, shifted]


def window_deduction(kind, start, pos, width, cells, technique_id, explanation):
    if width == 2:
        top_left = (start, pos) if kind == ROW else (pos, start)
        return BlockDeduction(top_left, technique_id, stars_required=1, explanation=explanation)
    return ExclusiveSetDeduction(cells, 1, technique_id, explanation=explanation)


def find_square_counting(board, config):
    """
    Two neighbouring rows (or columns) cut into 2x2 windows.

    When the windows that can still take a star number exactly the stars the
    pair of lines still needs, each of those windows holds exactly one star.
    """
    view = BoardView(board)
    size = board.size
    deductions = []
    for kind in (ROW, COLUMN):
        lines = view.lines(kind)
        for start in range(size - 1):
            band = (lines[start], lines[start + 1])
            band_need = view.group_need(band)
            if band_need <= 0:
                continue
            label = f"{band[0].label} and {band[1].label}"
            for tiling in window_tilings(size):
                open_windows = []
                for pos, width in tiling:
                    cells = window_cells(kind, start, pos, width)
                    candidates = view.candidates(cells)
                    if board.count_stars(cells) == 0 and candidates:
                        open_windows.append((pos, width, cells, candidates))
                if len(open_windows) != band_need:
                    continue
                explanation = f"{label} need {band_need} stars from exactly {band_need} windows"
                for pos, width, cells, candidates in open_windows:
                    deductions.append(window_deduction(kind, start, pos, width, cells,
                                                        'square-counting', explanation))
                for pos, width, cells, candidates in open_windows:
                    if len(candidates) == 1:
                        return TechniqueResult.found(star_hint(
                            'square-counting', candidates,
                            f"{label} need {band_need} stars and only {band_need} windows can take one;"
                            f" the window at {format_cell(cells[0])} has a single free cell.",
                            units=band, highlight_cells=cells), deductions)
                for pos, width, cells, candidates in open_windows:
                    forced = common_neighbors(board, candidates)
                    if forced:
                        return TechniqueResult.found(cross_hint(
                            'square-counting', forced,
                            f"{label} need a star in the window at {format_cell(cells[0])}, and every"
                            f" place for it touches {', '.join(format_cell(c) for c in forced)}.",
                            units=band, highlight_cells=cells), deductions)
    return TechniqueResult.derived(deductions)


def find_n_rooks(board, config):
    """
    On even boards, treat each aligned 2x2 block as a rook square.

    Every pair of rows and every pair of columns needs 2k stars, one per
    block at most. Bands with exactly enough open blocks fill them all; a
    crossing band that is then full leaves its other blocks empty.
    """
    size = board.size
    if size % 2:
        return NOTHING
    view = BoardView(board)
    half = size // 2
    rows, cols = view.lines(ROW), view.lines(COLUMN)

    def block(i, j):
        return [(2 * i + dr, 2 * j + dc) for dr in (0, 1) for dc in (0, 1)]

    open_blocks = {}
    for i in range(half):
        for j in range(half):
            cells = block(i, j)
            if board.count_stars(cells) == 0 and view.candidates(cells):
                open_blocks[(i, j)] = cells
    row_need = [view.group_need((rows[2 * i], rows[2 * i + 1])) for i in range(half)]
    col_need = [view.group_need((cols[2 * j], cols[2 * j + 1])) for j in range(half)]

    filled = set()
    for i in range(half):
        band = [(i, j) for j in range(half) if (i, j) in open_blocks]
        if band and len(band) == row_need[i]:
            filled.update(band)
    for j in range(half):
        band = [(i, j) for i in range(half) if (i, j) in open_blocks]
        if band and len(band) == col_need[j]:
            filled.update(band)
    if not filled:
        return NOTHING

    deductions = [BlockDeduction((2 * i, 2 * j), 'n-rooks', stars_required=1,
                                 explanation="its band needs a star in every open block")
                  for i, j in sorted(filled)]

    for i, j in sorted(filled):
        candidates = view.candidates(open_blocks[(i, j)])
        if len(candidates) == 1:
            return TechniqueResult.found(star_hint(
                'n-rooks', candidates,
                f"The block at {format_cell((2 * i, 2 * j))} must hold a star and has one free cell.",
                highlight_cells=open_blocks[(i, j)]), deductions)

    for axis in (0, 1):
        needs = row_need if axis == 0 else col_need
        for band_index in range(half):
            members = [key for key in open_blocks if key[axis] == band_index]
            taken = [key for key in members if key in filled]
            spare = sorted(key for key in members if key not in filled)
            if not spare or len(taken) != needs[band_index]:
                continue
            forced = sorted(cell for key in spare for cell in open_blocks[key] if board.is_empty(cell))
            first, second = 2 * band_index, 2 * band_index + 1
            lines = (rows[first], rows[second]) if axis == 0 else (cols[first], cols[second])
            return TechniqueResult.found(cross_hint(
                'n-rooks', forced,
                f"{lines[0].label} and {lines[1].label} get all their stars from blocks that must"
                f" each hold one, so their remaining blocks are empty.",
                units=lines), deductions)
    return TechniqueResult.derived(deductions)
