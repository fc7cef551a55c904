"""
Schema-based budgets.

Each schema is a small accounting identity over a band of lines, a region
split by lines, or the 2x2 cages of a two-line band. Schemas run in order;
the first certain move wins and the bounds they establish along the way are
handed to the main solver.
"""
from starbattle_hints.board import format_cell, is_independent
from starbattle_hints.constants import ROW, COLUMN, REGION
from starbattle_hints.deductions import AreaDeduction
from starbattle_hints.hints import TechniqueResult, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView, enumerate_independent, line_index, max_placeable
from starbattle_hints.techniques.squares import window_cells, window_deduction, window_tilings


def _band_label(band):
    return band[0].label if len(band) == 1 else f"{band[0].label} to {band[-1].label}"


def band_budget(view, config):
    """
    Stars a band of lines needs, minus what regions lying wholly inside it
    will bring, is the budget of the regions that only poke into the band.
    With a single such region, its share of the band is known exactly.
    """
    board = view.board
    regions = view.active_units(view.regions())
    region_candidates = {region.id: view.candidates(region.cells) for region in regions}
    deductions = []
    for kind in (ROW, COLUMN):
        lines = view.lines(kind)
        for first in range(board.size):
            for last in range(first, board.size - 1 if first == 0 else board.size):
                band = lines[first:last + 1]
                budget = view.group_need(band)
                partial = []
                for region in regions:
                    cells = region_candidates[region.id]
                    inside = [c for c in cells if first <= line_index(c, kind) <= last]
                    if not inside:
                        continue
                    if len(inside) == len(cells):
                        budget -= view.unit_need(region)
                    else:
                        partial.append((region, inside, [c for c in cells if c not in set(inside)]))
                if len(partial) != 1 or budget < 0:
                    continue
                region, inside, outside = partial[0]
                need = view.unit_need(region)
                label = _band_label(band)
                if budget == 0:
                    return TechniqueResult.found(cross_hint(
                        'schema-based', inside,
                        f"Regions lying wholly in {label} already use up its stars, so"
                        f" {region.label} has no star there.",
                        units=[region] + list(band)), deductions)
                if budget == len(inside) and is_independent(inside):
                    return TechniqueResult.found(star_hint(
                        'schema-based', inside,
                        f"{label} still needs {budget} stars from {region.label}, exactly its"
                        f" cells there.",
                        units=[region] + list(band)), deductions)
                if budget == need and outside:
                    return TechniqueResult.found(cross_hint(
                        'schema-based', outside,
                        f"{label} takes all {need} remaining stars of {region.label},"
                        f" so its cells outside the band are empty.",
                        units=[region] + list(band)), deductions)
                if budget < need:
                    deductions.append(AreaDeduction(
                        REGION, region.id, inside, 'schema-based', stars_required=budget,
                        explanation=f"{region.label} puts exactly {budget} stars into {label}"))
    return TechniqueResult.derived(deductions)


def line_partition(view, config):
    """
    Split a region by lines; every piece can take at most what fits in it
    and what its line still needs. What the other pieces cannot take, a
    piece must.
    """
    deductions = []
    for region in view.active_units(view.regions()):
        need = view.unit_need(region)
        candidates = view.candidates(region.cells)
        for kind in (ROW, COLUMN):
            lines = view.lines(kind)
            pieces = {}
            for cell in candidates:
                pieces.setdefault(line_index(cell, kind), []).append(cell)
            if len(pieces) < 2:
                continue
            caps = {i: min(max_placeable(cells), view.unit_need(lines[i]), need)
                    for i, cells in pieces.items()}
            total_cap = sum(caps.values())
            for i in sorted(pieces):
                lo = need - (total_cap - caps[i])
                if lo <= 0 or lo > caps[i]:
                    continue
                piece = pieces[i]
                if lo == len(piece) and is_independent(piece):
                    return TechniqueResult.found(star_hint(
                        'schema-based', piece,
                        f"The other lines through {region.label} can take at most"
                        f" {total_cap - caps[i]} of its {need} stars, so {lines[i].label} gets"
                        f" {lo} there.",
                        units=[region, lines[i]]), deductions)
                deductions.append(AreaDeduction(
                    REGION, region.id, piece, 'schema-based', min_stars=lo, max_stars=caps[i],
                    explanation=f"{region.label} puts at least {lo} stars into {lines[i].label}"))
    return TechniqueResult.derived(deductions)


def _band_shares(view, band, kind, first, last):
    """
    How many of its stars each region still has to put into a band.

    A region's share is at least what the band needs beyond what the other
    regions can fit there, and at least what the region cannot fit outside.
    It is at most what fits in its part of the band.

    :returns: List of (region, candidate cells in the band, lo, hi).
    """
    band_need = view.group_need(band)
    parts = []
    for region in view.active_units(view.regions()):
        cells = view.candidates(region.cells)
        inside = [c for c in cells if first <= line_index(c, kind) <= last]
        if inside:
            outside = [c for c in cells if c not in set(inside)]
            need = view.unit_need(region)
            parts.append((region, inside, outside, min(need, max_placeable(inside))))
    total_cap = sum(cap for _, _, _, cap in parts)
    shares = []
    for region, inside, outside, cap in parts:
        need = view.unit_need(region)
        lo = max(0, band_need - (total_cap - cap), need - max_placeable(outside))
        shares.append((region, inside, lo, min(cap, band_need)))
    return shares


def _pinned_cages(view, kind, start, tiling, band_need):
    """2x2 cages of one tiling of a two-line band, when each of them must hold exactly one star."""
    board = view.board
    cages = []
    for pos, width in tiling:
        cells = window_cells(kind, start, pos, width)
        candidates = view.candidates(cells)
        if board.count_stars(cells) == 0 and candidates:
            cages.append((pos, width, cells, candidates))
    return cages if len(cages) == band_need else None


def cage_quota(view, config):
    """
    A two-line band whose open 2x2 cages number exactly its need puts one
    star in every cage. Cages whose free cells all belong to one region give
    that region a star each; once they reach the most the region can take in
    the band, its other cells there stay empty.
    """
    board = view.board
    deductions = []
    for kind in (ROW, COLUMN):
        lines = view.lines(kind)
        for start in range(board.size - 1):
            band = (lines[start], lines[start + 1])
            band_need = view.group_need(band)
            if band_need <= 0:
                continue
            shares = None
            for tiling in window_tilings(board.size):
                cages = _pinned_cages(view, kind, start, tiling, band_need)
                if cages is None:
                    continue
                if shares is None:
                    shares = _band_shares(view, band, kind, start, start + 1)
                for region, inside, lo, hi in shares:
                    own = [cage for cage in cages
                           if all(board.region_of(c) == region.id for c in cage[3])]
                    if not own or len(own) != hi:
                        continue
                    label = _band_label(band)
                    caged = {c for cage in own for c in cage[3]}
                    for pos, width, cells, candidates in own:
                        deductions.append(window_deduction(
                            kind, start, pos, width, cells, 'schema-based',
                            f"{label} need a star in each of their {band_need} open cages"))
                    deductions.append(AreaDeduction(
                        REGION, region.id, sorted(caged), 'schema-based', stars_required=hi,
                        explanation=f"{region.label} takes {hi} stars from its own cages in {label}"))
                    rest = [c for c in inside if c not in caged]
                    if rest:
                        return TechniqueResult.found(cross_hint(
                            'schema-based', rest,
                            f"{label} need a star in each of their {band_need} open cages; {hi} of"
                            f" those lie inside {region.label}, which has room for no more than"
                            f" {hi} there, so its other cells in the band are empty.",
                            units=[region] + list(band), highlight_cells=sorted(caged)), deductions)
    return TechniqueResult.derived(deductions)


def region_local_cages(view, config):
    """
    A region that must put ``lo`` stars into a two-line band has to pack
    them into its own part of the band. A cell that belongs to no such
    packing cannot hold one of them.
    """
    board = view.board
    deductions = []
    for kind in (ROW, COLUMN):
        lines = view.lines(kind)
        for start in range(board.size - 1):
            band = (lines[start], lines[start + 1])
            if view.group_need(band) <= 0:
                continue
            label = _band_label(band)
            for region, inside, lo, hi in _band_shares(view, band, kind, start, start + 1):
                if lo <= 0 or lo > hi:
                    continue
                deductions.append(AreaDeduction(
                    REGION, region.id, inside, 'schema-based', min_stars=lo, max_stars=hi,
                    explanation=f"{region.label} puts at least {lo} stars into {label}"))
                if lo == 1 or len(inside) > config.max_placement_candidates:
                    continue
                packings = enumerate_independent(inside, lo, config.max_placements)
                if not packings or len(packings) > config.max_placements:
                    continue
                used = {cell for packing in packings for cell in packing}
                unused = [c for c in inside if c not in used]
                if unused:
                    return TechniqueResult.found(cross_hint(
                        'schema-based', unused,
                        f"{region.label} must put {lo} stars into {label}, and no way of fitting"
                        f" {lo} stars into its cells there uses"
                        f" {', '.join(format_cell(c) for c in unused)}.",
                        units=[region] + list(band)), deductions)
    return TechniqueResult.derived(deductions)


SCHEMAS = (band_budget, line_partition, cage_quota, region_local_cages)


def find_schema_based(board, config):
    view = BoardView(board)
    deductions = []
    for schema in SCHEMAS:
        result = schema(view, config)
        if result.is_hint:
            return TechniqueResult.found(result.hint, deductions + list(result.deductions))
        deductions.extend(result.deductions)
    return TechniqueResult.derived(deductions)
