"""
Techniques that consult the solution-counting oracle.

They are tried last because every step costs a solver call. Any timeout makes
the whole technique give up for this pass; running out of the call budget
does the same.
"""
from starbattle_hints.board import format_cell
from starbattle_hints.constants import STATE_CROSS, STATE_STAR
from starbattle_hints.hints import NOTHING, TechniqueResult, cross_hint, star_hint
from starbattle_hints.techniques.analysis import BoardView, unit_placements

MAX_AT_SEA_PLACEMENTS = 6


class _OracleGaveUp(Exception):
    """Raised internally when the oracle times out or the call budget is spent."""


class _Budget:
    def __init__(self, config):
        self.oracle = config.oracle
        self.timeout_ms = config.oracle_timeout_ms
        self.remaining = config.oracle_call_budget

    def count(self, board, max_count):
        if self.remaining <= 0:
            raise _OracleGaveUp()
        self.remaining -= 1
        outcome = self.oracle.count_solutions(board, max_count=max_count, timeout_ms=self.timeout_ms)
        if outcome.timed_out:
            raise _OracleGaveUp()
        return outcome.count


def _small_units(board, config):
    view = BoardView(board)
    units = []
    for unit in view.active_units():
        placements = unit_placements(board, unit, config.max_placements, config.max_placement_candidates)
        if placements and 2 <= len(placements) <= MAX_AT_SEA_PLACEMENTS:
            units.append((len(placements), unit, placements))
    units.sort(key=lambda item: item[0])
    return [(unit, placements) for _, unit, placements in units]


def find_at_sea(board, config):
    """
    A unit with a handful of placements: drop every placement that leaves the
    puzzle without any solution. If only one survives, it is the answer.
    """
    if config.oracle is None:
        return NOTHING
    budget = _Budget(config)
    try:
        for unit, placements in _small_units(board, config):
            survivors = [p for p in placements if budget.count(board.with_cells(p, STATE_STAR), 1) > 0]
            if len(survivors) == 1:
                return TechniqueResult.found(star_hint(
                    'at-sea', survivors[0],
                    f"Of the {len(placements)} ways to finish {unit.label}, only one leaves the"
                    f" puzzle solvable.",
                    units=[unit], highlight_cells=survivors[0]))
    except _OracleGaveUp:
        return NOTHING
    return NOTHING


def find_by_a_thread(board, config):
    """
    Uniqueness on single cells: a hypothesis with no completion, or with
    more than one, cannot be part of the unique solution.
    """
    if config.oracle is None:
        return NOTHING
    budget = _Budget(config)
    view = BoardView(board)
    try:
        for cell in sorted(view.viable):
            with_star = budget.count(board.with_cells([cell], STATE_STAR), 2)
            if with_star != 1:
                reason = "no solution" if with_star == 0 else "more than one solution"
                return TechniqueResult.found(cross_hint(
                    'by-a-thread', [cell],
                    f"A star at {format_cell(cell)} would leave {reason}, so it must be empty.",
                    highlight_cells=[cell]))
            with_cross = budget.count(board.with_cells([cell], STATE_CROSS), 2)
            if with_cross != 1:
                reason = "no solution" if with_cross == 0 else "more than one solution"
                return TechniqueResult.found(star_hint(
                    'by-a-thread', [cell],
                    f"Leaving {format_cell(cell)} empty would leave {reason}, so it holds a star.",
                    highlight_cells=[cell]))
    except _OracleGaveUp:
        return NOTHING
    return NOTHING


def find_by_a_thread_at_sea(board, config):
    """Uniqueness on unit placements: the one placement with exactly one completion wins."""
    if config.oracle is None:
        return NOTHING
    budget = _Budget(config)
    try:
        for unit, placements in _small_units(board, config):
            unique = [p for p in placements if budget.count(board.with_cells(p, STATE_STAR), 2) == 1]
            if len(unique) == 1:
                return TechniqueResult.found(star_hint(
                    'by-a-thread-at-sea', unique[0],
                    f"Only one way to finish {unit.label} leads to exactly one solution.",
                    units=[unit], highlight_cells=unique[0]))
    except _OracleGaveUp:
        return NOTHING
    return NOTHING
