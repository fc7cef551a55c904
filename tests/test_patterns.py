import json

import pytest

from starbattle_hints.patterns import INVERSE_TRANSFORM, PatternLibrary, canonicalize, transform_cell

STARS = [(0, 1), (2, 4), (5, 0)]


@pytest.mark.parametrize("index", range(8))
def test_inverse_transform_restores_cells(index):
    back = INVERSE_TRANSFORM[index]
    for cell in STARS + [(9, 9), (3, 7)]:
        assert transform_cell(transform_cell(cell, index, 10), back, 10) == cell


@pytest.mark.parametrize("index", range(8))
def test_canonical_form_ignores_symmetry(index):
    moved = [transform_cell(cell, index, 10) for cell in STARS]
    assert canonicalize(moved, 10)[0] == canonicalize(STARS, 10)[0]


def test_canonical_form_is_the_smallest_image():
    canonical, index = canonicalize(STARS, 10)
    assert canonical == tuple(sorted(transform_cell(c, index, 10) for c in STARS))
    assert all(canonical <= tuple(sorted(transform_cell(c, i, 10) for c in STARS)) for i in range(8))


def test_unknown_symmetry_index():
    with pytest.raises(ValueError):
        transform_cell((0, 0), 8, 10)


def test_lookup_in_any_orientation():
    library = PatternLibrary()
    library.add(10, STARS, forced_empty=[(1, 1)], forced_star=[(8, 8)])
    for index in range(8):
        moved = [transform_cell(cell, index, 10) for cell in STARS]
        empty, star = library.lookup(10, moved)
        assert empty == [transform_cell((1, 1), index, 10)]
        assert star == [transform_cell((8, 8), index, 10)]
    assert library.lookup(10, [(4, 4)]) == ([], [])


def test_star_counts_filter_by_stars_per_unit():
    library = PatternLibrary()
    library.add(10, [(0, 0), (0, 5)], stars_per_unit=2)
    library.add(10, [(0, 0), (0, 5), (2, 2)])
    library.add(14, [(0, 0)], stars_per_unit=3)
    assert library.star_counts(10, 2) == [2, 3]
    assert library.star_counts(10, 1) == [3]
    assert len(library) == 3


def test_load_reads_every_file_shape(tmp_path):
    (tmp_path / "pairs.json").write_text(json.dumps({
        'board_size': 10, 'stars_per_row': 2,
        'patterns': [{'initial_stars': [[0, 0], [2, 1]], 'forced_empty': [[1, 2]]}],
    }))
    (tmp_path / "pure.json").write_text(json.dumps({
        'board_size': 10,
        'pure_entanglement_templates': [{'canonical_stars': [[0, 0], [0, 3]], 'canonical_forced_empty': [[1, 1]]}],
    }))
    (tmp_path / "triples.json").write_text(json.dumps({
        'board_size': 10,
        'unconstrained_rules': [
            {'canonical_stars': [[0, 0], [3, 1], [6, 2]], 'canonical_candidate': [9, 3]},
            {'canonical_stars': [[0, 0], [3, 3], [6, 6]], 'canonical_forced_empty': [[9, 9]],
             'constraint_features': ['region_edge']},
        ],
        'constrained_rules': [{'canonical_stars': [[0, 0]]}],
    }))
    (tmp_path / "notes.txt").write_text("not a pattern file")

    library = PatternLibrary.load(str(tmp_path))
    assert len(library) == 3
    assert library.sources == ["pairs.json", "pure.json", "triples.json"]
    assert library.lookup(10, [(0, 0), (2, 1)], 2)[0] == [(1, 2)]
    assert library.lookup(10, [(0, 0), (0, 3)])[0] == [(1, 1)]
    assert library.lookup(10, [(0, 0), (3, 1), (6, 2)])[0] == [(9, 3)]
    assert library.lookup(10, [(0, 0), (3, 3), (6, 6)]) == ([], [])
