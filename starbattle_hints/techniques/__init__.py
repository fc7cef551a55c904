"""
The technique catalogue, in the fixed order the runner tries them:
saturation and adjacency first, then counting, then shapes and relations,
and the oracle-backed uniqueness arguments last.
"""
from starbattle_hints.hints import Technique
from starbattle_hints.techniques.basics import (
    find_trivial_marks, find_two_by_two, find_one_by_n, find_simple_shapes
)
from starbattle_hints.techniques.exclusion import (
    find_exclusion, find_adjacent_exclusion, find_pressured_exclusion
)
from starbattle_hints.techniques.counting import (
    find_undercounting, find_overcounting, find_finned_counts, find_fish
)
from starbattle_hints.techniques.squares import find_square_counting, find_n_rooks
from starbattle_hints.techniques.shapes import (
    find_composite_shapes, find_set_differentials, find_subset_constraint_squeeze
)
from starbattle_hints.techniques.schemas import find_schema_based
from starbattle_hints.techniques.placements import (
    find_exact_fill, find_squeeze, find_cross_empty_patterns, find_entanglement
)
from starbattle_hints.techniques.pattern_entanglement import find_pattern_entanglement
from starbattle_hints.techniques.uniqueness import find_at_sea, find_by_a_thread, find_by_a_thread_at_sea

TECHNIQUES = (
    Technique('trivial-marks', "Trivial Marks", find_trivial_marks),
    Technique('two-by-two', "2x2 Blocks", find_two_by_two),
    Technique('one-by-n', "One by N", find_one_by_n),
    Technique('exclusion', "Exclusion", find_exclusion),
    Technique('simple-shapes', "Simple Shapes", find_simple_shapes),
    Technique('adjacent-exclusion', "Adjacent Exclusion", find_adjacent_exclusion),
    Technique('pressured-exclusion', "Pressured Exclusion", find_pressured_exclusion),
    Technique('undercounting', "Undercounting", find_undercounting),
    Technique('overcounting', "Overcounting", find_overcounting),
    Technique('finned-counts', "Finned Counts", find_finned_counts),
    Technique('square-counting', "Square Counting", find_square_counting),
    Technique('composite-shapes', "Composite Shapes", find_composite_shapes),
    Technique('set-differentials', "Set Differentials", find_set_differentials),
    Technique('subset-constraint-squeeze', "Subset Constraint Squeeze", find_subset_constraint_squeeze),
    Technique('schema-based', "Schema-Based Budgets", find_schema_based),
    Technique('exact-fill', "Exact Fill", find_exact_fill),
    Technique('squeeze', "Squeeze", find_squeeze),
    Technique('cross-empty-patterns', "Cross Empty Patterns", find_cross_empty_patterns),
    Technique('fish', "Fish", find_fish),
    Technique('n-rooks', "N-Rooks", find_n_rooks),
    Technique('entanglement', "Entanglement", find_entanglement),
    Technique('pattern-entanglement', "Pattern Entanglement", find_pattern_entanglement),
    Technique('at-sea', "At Sea", find_at_sea),
    Technique('by-a-thread', "By a Thread", find_by_a_thread),
    Technique('by-a-thread-at-sea', "By a Thread at Sea", find_by_a_thread_at_sea),
)

TECHNIQUE_IDS = tuple(t.id for t in TECHNIQUES)


def get_technique(technique_id):
    for technique in TECHNIQUES:
        if technique.id == technique_id:
            return technique
    raise KeyError(technique_id)
