"""Shape and overlap arguments between a line and the regions crossing it."""
from itertools import combinations

from starbattle_hints.board import format_cell, is_independent
from starbattle_hints.constants import ROW, COLUMN, REGION
from starbattle_hints.deductions import AreaDeduction, ExclusiveSetDeduction
from starbattle_hints.hints import TechniqueResult, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView, line_index, max_placeable


def _area(area_type, area_id, cells, lo, hi, technique_id, explanation):
    if lo == hi:
        return AreaDeduction(area_type, area_id, cells, technique_id, stars_required=lo,
                             explanation=explanation)
    return AreaDeduction(area_type, area_id, cells, technique_id, min_stars=lo, max_stars=hi,
                         explanation=explanation)


def find_composite_shapes(board, config):
    """
    Bound how many stars a region puts into a band of consecutive lines.

    The part outside the band can take at most as many stars as fit there
    (adjacency included) and as its lines still need, so the part inside must
    take the rest.
    """
    view = BoardView(board)
    deductions = []
    for region in view.active_units(view.regions()):
        need = view.unit_need(region)
        candidates = view.candidates(region.cells)
        for kind in (ROW, COLUMN):
            lines = view.lines(kind)
            indices = sorted({line_index(cell, kind) for cell in candidates})
            for a in range(len(indices)):
                for b in range(a, len(indices)):
                    if a == 0 and b == len(indices) - 1:
                        continue
                    first, last = indices[a], indices[b]
                    inside = [c for c in candidates if first <= line_index(c, kind) <= last]
                    outside = [c for c in candidates if not first <= line_index(c, kind) <= last]
                    outside_lines = {line_index(c, kind) for c in outside}
                    outside_cap = min(max_placeable(outside),
                                      sum(view.unit_need(lines[i]) for i in outside_lines))
                    lo = max(0, need - outside_cap)
                    hi = min(need, max_placeable(inside),
                             view.group_need(lines[first:last + 1]))
                    if lo == 0 or lo > hi:
                        continue
                    band = lines[first:last + 1]
                    band_label = band[0].label if len(band) == 1 else f"{band[0].label} to {band[-1].label}"
                    if lo == len(inside) and is_independent(inside):
                        return TechniqueResult.found(star_hint(
                            'composite-shapes', inside,
                            f"{region.label} cannot fit more than {outside_cap} of its {need} stars"
                            f" outside {band_label}, which forces every remaining cell inside it.",
                            units=[region] + list(band), highlight_cells=inside), deductions)
                    deductions.append(_area(
                        REGION, region.id, inside, lo, hi, 'composite-shapes',
                        f"{region.label} puts {lo}-{hi} stars into {band_label}"))
    return TechniqueResult.derived(deductions)


def _overlap_bounds(view, line_candidates, line_need, overlap, region_parts):
    """Lower/upper star bounds for ``overlap`` = line ∩ (union of ``region_parts``)."""
    line_only = [c for c in line_candidates if c not in set(overlap)]
    lo = max(0, line_need - max_placeable(line_only))
    from_regions = 0
    hi_regions = 0
    for need, outside in region_parts:
        from_regions += max(0, need - max_placeable(outside))
        hi_regions += need
    lo = max(lo, from_regions)
    hi = min(line_need, hi_regions, max_placeable(overlap))
    return lo, hi, line_only


def find_set_differentials(board, config):
    """
    Compare a line with the region (or pair of regions) crossing it.

    Stars the regions must put into the line, and stars the line must take
    from the regions, bound the overlap; when a bound reaches a unit's full
    need, the rest of that unit is empty.
    """
    view = BoardView(board)
    board_regions = {rid: board.region(rid) for rid in board.region_ids}
    deductions = []
    for kind in (ROW, COLUMN):
        for line in view.active_units(view.lines(kind)):
            line_need = view.unit_need(line)
            line_candidates = view.candidates(line.cells)
            line_set = set(line.cells)
            touching = []
            for cell in line_candidates:
                rid = board.region_of(cell)
                if rid not in touching:
                    touching.append(rid)
            regions = [board_regions[rid] for rid in touching if view.unit_need(board_regions[rid]) > 0]

            for size in (1, 2):
                for group in combinations(regions, size):
                    group_cells = {cell for region in group for cell in region.cells}
                    overlap = [c for c in line_candidates if c in group_cells]
                    parts = []
                    for region in group:
                        outside = [c for c in view.candidates(region.cells) if c not in line_set]
                        parts.append((view.unit_need(region), outside))
                    lo, hi, line_only = _overlap_bounds(view, line_candidates, line_need, overlap, parts)
                    if lo == 0 or lo > hi:
                        continue
                    labels = " and ".join(region.label for region in group)
                    if lo == line_need and line_only:
                        return TechniqueResult.found(cross_hint(
                            'set-differentials', line_only,
                            f"{labels} must put {lo} star{'s' if lo > 1 else ''} into {line.label},"
                            f" which is all it needs; its other cells are empty.",
                            units=[line] + list(group)), deductions)
                    if size == 1:
                        need, outside = parts[0]
                        if lo == need and outside:
                            return TechniqueResult.found(cross_hint(
                                'set-differentials', outside,
                                f"{line.label} must take {lo} star{'s' if lo > 1 else ''} from {labels},"
                                f" which is all that region needs; its cells off the line are empty.",
                                units=[line] + list(group)), deductions)
                    if lo == len(overlap) and is_independent(overlap):
                        return TechniqueResult.found(star_hint(
                            'set-differentials', overlap,
                            f"{line.label} and {labels} force a star into every cell they share.",
                            units=[line] + list(group)), deductions)
                    deductions.append(_area(
                        line.kind, line.id, overlap, lo, hi, 'set-differentials',
                        f"{line.label} holds {lo}-{hi} stars inside {labels}"))
    return TechniqueResult.derived(deductions)


def find_subset_constraint_squeeze(board, config):
    """
    A unit whose candidates all lie inside another unit with the same
    remaining need fills that unit; the rest of it is empty.
    """
    view = BoardView(board)
    active = view.active_units()
    candidates = {unit.key: view.candidates(unit.cells) for unit in active}
    deductions = []
    for inner in active:
        inner_cells = candidates[inner.key]
        if not inner_cells:
            continue
        for outer in active:
            if outer.key == inner.key or not set(inner_cells) <= set(outer.cells):
                continue
            need = view.unit_need(inner)
            deductions.append(ExclusiveSetDeduction(
                inner_cells, need, 'subset-constraint-squeeze',
                explanation=f"{inner.label} must place {need} stars inside {outer.label}"))
            if view.unit_need(outer) != need:
                continue
            forced = [c for c in outer.cells if board.is_empty(c) and c not in set(inner_cells)]
            if forced:
                return TechniqueResult.found(cross_hint(
                    'subset-constraint-squeeze', forced,
                    f"Every candidate of {inner.label} lies in {outer.label}, and both need {need}"
                    f" more star{'s' if need > 1 else ''}; the rest of {outer.label} is empty"
                    f" (e.g. {format_cell(forced[0])}).",
                    units=[inner, outer], highlight_cells=inner_cells), deductions)
    return TechniqueResult.derived(deductions)
