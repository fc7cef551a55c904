"""Hints, the unified technique result type and the technique descriptor."""
from collections import namedtuple
from dataclasses import dataclass, field

from starbattle_hints.constants import KIND_PLACE_STAR, KIND_PLACE_CROSS, ROW, COLUMN, REGION

RESULT_HINT = 'hint'
RESULT_DEDUCTIONS = 'deductions'
RESULT_NONE = 'none'


@dataclass(frozen=True)
class Hint:
    """
    A single certain move.

    :param str id: Cosmetic identifier, derived from the technique and first cell.
    :param str kind: ``place-star`` or ``place-cross``.
    :param str technique: Id of the technique the move is attributed to.
    :param tuple result_cells: Cells to set, row-major.
    :param str explanation: Why the move is forced.
    :param dict highlights: ``rows``, ``cols``, ``regions`` and ``cells`` to draw attention to.
    """
    id: str
    kind: str
    technique: str
    result_cells: tuple
    explanation: str
    highlights: dict = field(default_factory=dict, compare=False)

    def to_dict(self):
        return {
            'id': self.id,
            'kind': self.kind,
            'technique': self.technique,
            'resultCells': [list(cell) for cell in self.result_cells],
            'explanation': self.explanation,
            'highlights': {
                key: [list(v) if isinstance(v, tuple) else v for v in values]
                for key, values in self.highlights.items()
            },
        }


def highlights_for(units=(), cells=()):
    out = {'rows': [], 'cols': [], 'regions': [], 'cells': []}
    for unit in units:
        bucket = {ROW: 'rows', COLUMN: 'cols', REGION: 'regions'}[unit.kind]
        if unit.id not in out[bucket]:
            out[bucket].append(unit.id)
    out['cells'] = sorted(set(cells))
    return out


def make_hint(technique, kind, cells, explanation, units=(), highlight_cells=()):
    cells = tuple(sorted(set(cells)))
    first = cells[0] if cells else (0, 0)
    suffix = 'star' if kind == KIND_PLACE_STAR else 'cross'
    return Hint(
        id=f"{technique}-{suffix}-{first[0]}-{first[1]}",
        kind=kind,
        technique=technique,
        result_cells=cells,
        explanation=explanation,
        highlights=highlights_for(units, highlight_cells),
    )


def star_hint(technique, cells, explanation, units=(), highlight_cells=()):
    return make_hint(technique, KIND_PLACE_STAR, cells, explanation, units, highlight_cells)


def cross_hint(technique, cells, explanation, units=(), highlight_cells=()):
    return make_hint(technique, KIND_PLACE_CROSS, cells, explanation, units, highlight_cells)


@dataclass(frozen=True)
class TechniqueResult:
    """What a technique found: a certain hint (maybe with extra deductions), deductions only, or nothing."""
    kind: str
    hint: Hint = None
    deductions: tuple = ()

    @classmethod
    def found(cls, hint, deductions=()):
        return cls(RESULT_HINT, hint, tuple(deductions))

    @classmethod
    def derived(cls, deductions):
        deductions = tuple(deductions)
        if not deductions:
            return NOTHING
        return cls(RESULT_DEDUCTIONS, None, deductions)

    @property
    def is_hint(self):
        return self.kind == RESULT_HINT


NOTHING = TechniqueResult(RESULT_NONE)

Technique = namedtuple('Technique', ['id', 'name', 'find'])
