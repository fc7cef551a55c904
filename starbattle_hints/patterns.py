"""
Precomputed entanglement patterns.

Pattern files describe star configurations on an empty N x N board (rows,
columns and adjacency only) together with the cells every completion leaves
empty or fills. Four JSON shapes are understood:

* pair files: ``patterns`` with ``initial_stars``/``forced_empty``/``forced_star``
* triple files: ``unconstrained_rules`` with ``canonical_stars``/``canonical_candidate``
* pure files: ``pure_entanglement_templates`` with ``canonical_stars``/``canonical_forced_empty``
* constrained files: ``unconstrained_rules`` with ``canonical_stars``/``canonical_forced_empty``

Rules carrying ``constraint_features`` depend on extra conditions and are skipped.
Every configuration is re-canonicalised on load under the eight symmetries of the
square, so lookups are independent of how a file chose its canonical form.
"""
import json
import logging
import os

logger = logging.getLogger(__name__)


def transform_cell(cell, index, size):
    """Apply symmetry ``index`` (0-7) of the square to a cell."""
    r, c = cell
    m = size - 1
    if index == 0:
        return (r, c)
    if index == 1:
        return (c, m - r)
    if index == 2:
        return (m - r, m - c)
    if index == 3:
        return (m - c, r)
    if index == 4:
        return (r, m - c)
    if index == 5:
        return (m - r, c)
    if index == 6:
        return (c, r)
    if index == 7:
        return (m - c, m - r)
    raise ValueError(f"Unknown symmetry index: {index}")


# Rotations by 90 and 270 degrees undo each other; everything else is its own inverse.
INVERSE_TRANSFORM = {0: 0, 1: 3, 2: 2, 3: 1, 4: 4, 5: 5, 6: 6, 7: 7}


def canonicalize(stars, size):
    """
    Lexicographically smallest image of a star set over the eight symmetries.

    :param stars: Iterable of (r, c) star coordinates.
    :param int size: Board size.
    :returns: ``(canonical_stars, transform_index)`` where ``canonical_stars`` is a sorted tuple.
    :rtype: tuple
    """
    best = None
    for index in range(8):
        image = tuple(sorted(transform_cell(cell, index, size) for cell in stars))
        if best is None or image < best[0]:
            best = (image, index)
    return best


def _cells(raw):
    return [tuple(cell) for cell in raw or ()]


class PatternLibrary:
    """Pattern tables keyed by board size, stars per unit and canonical star configuration."""

    def __init__(self):
        self._entries = {}
        self.sources = []

    def __len__(self):
        return len(self._entries)

    def add(self, size, stars, forced_empty=(), forced_star=(), stars_per_unit=None):
        canonical, index = canonicalize(stars, size)
        key = (size, stars_per_unit, canonical)
        empty, star = self._entries.setdefault(key, (set(), set()))
        empty.update(transform_cell(cell, index, size) for cell in forced_empty)
        star.update(transform_cell(cell, index, size) for cell in forced_star)

    def star_counts(self, size, stars_per_unit):
        return sorted({len(key[2]) for key in self._entries
                       if key[0] == size and key[1] in (None, stars_per_unit)})

    def lookup(self, size, stars, stars_per_unit=None):
        """
        Forced cells for a local star configuration, in local coordinates.

        :returns: ``(forced_empty, forced_star)`` as sorted lists; both empty when unknown.
        :rtype: tuple
        """
        canonical, index = canonicalize(stars, size)
        back = INVERSE_TRANSFORM[index]
        empty, star = set(), set()
        for spu in (None, stars_per_unit):
            entry = self._entries.get((size, spu, canonical))
            if entry:
                empty.update(transform_cell(cell, back, size) for cell in entry[0])
                star.update(transform_cell(cell, back, size) for cell in entry[1])
        return sorted(empty), sorted(star)

    # --- Loading ---
    def add_file_data(self, data, source=None):
        """Register the contents of one parsed pattern file; returns the number of rules added."""
        size = data['board_size']
        added = 0
        if 'patterns' in data:
            spu = data.get('stars_per_row')
            for pattern in data['patterns']:
                self.add(size, _cells(pattern['initial_stars']), _cells(pattern.get('forced_empty')),
                         _cells(pattern.get('forced_star')), stars_per_unit=spu)
                added += 1
        for template in data.get('pure_entanglement_templates', ()):
            self.add(size, _cells(template['canonical_stars']), _cells(template['canonical_forced_empty']))
            added += 1
        for rule in data.get('unconstrained_rules', ()):
            if rule.get('constraint_features'):
                continue
            forced = _cells(rule.get('canonical_forced_empty'))
            if 'canonical_candidate' in rule:
                forced.append(tuple(rule['canonical_candidate']))
            self.add(size, _cells(rule['canonical_stars']), forced)
            added += 1
        skipped = len(data.get('constrained_rules', ()))
        if skipped:
            logger.info(f"Skipped {skipped} constrained rules from {source or 'pattern data'}")
        if source:
            self.sources.append(source)
        return added

    @classmethod
    def load(cls, directory):
        """
        Loads every ``*.json`` pattern file in a directory.

        :param str directory: Folder holding the pattern files.
        :returns: The populated library.
        :rtype: PatternLibrary
        """
        library = cls()
        for name in sorted(os.listdir(directory)):
            if not name.endswith('.json'):
                continue
            path = os.path.join(directory, name)
            with open(path, 'r') as f:
                data = json.load(f)
            count = library.add_file_data(data, source=name)
            logger.info(f"Loaded {count} entanglement rules from {path}")
        return library
