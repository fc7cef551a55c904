"""Entanglement through precomputed star configurations."""
from itertools import combinations

from starbattle_hints.board import format_cell
from starbattle_hints.constants import CROSS
from starbattle_hints.deductions import CellDeduction
from starbattle_hints.hints import TechniqueResult, NOTHING, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView

MAX_SUBSETS = 5000


def find_pattern_entanglement(board, config):
    """
    Look up every small group of placed stars in the pattern tables.

    The tables only know rows, columns and adjacency, which hold on any
    Star Battle board, so whatever they force holds here too.
    """
    library = config.pattern_library
    if library is None:
        return NOTHING
    stars = board.stars()
    view = None
    for count in library.star_counts(board.size, board.stars_per_unit):
        if count > len(stars):
            continue
        for tried, group in enumerate(combinations(stars, count)):
            if tried >= MAX_SUBSETS:
                break
            forced_empty, forced_star = library.lookup(board.size, group, board.stars_per_unit)
            crosses = [c for c in forced_empty if board.in_bounds(c) and board.is_empty(c)]
            group_text = ", ".join(format_cell(s) for s in group)
            if crosses:
                return TechniqueResult.found(
                    cross_hint('pattern-entanglement', crosses,
                               f"The stars at {group_text} form a known entanglement that leaves"
                               f" {', '.join(format_cell(c) for c in crosses)} empty.",
                               highlight_cells=group),
                    [CellDeduction(c, CROSS, 'pattern-entanglement') for c in crosses])
            if view is None:
                view = BoardView(board)
            new_stars = [c for c in forced_star if c in view.viable]
            if new_stars:
                return TechniqueResult.found(star_hint(
                    'pattern-entanglement', new_stars[:1],
                    f"The stars at {group_text} form a known entanglement that forces a star"
                    f" at {format_cell(new_stars[0])}.",
                    highlight_cells=group))
    return NOTHING
