"""
Z3-backed solution counter.

This is the only place in the package that guesses: techniques that rely on
the puzzle having a unique solution ask it how many completions a
hypothetical board has, and treat a timeout as "no answer".
"""
import logging
import time
from collections import namedtuple

from z3 import Solver, Bool, PbEq, Implies, And, Not, Or, sat, unknown, is_true

logger = logging.getLogger(__name__)

SolutionCount = namedtuple('SolutionCount', ['count', 'timed_out'])


def format_duration(seconds):
    if seconds >= 60: return f"{int(seconds//60)} min {seconds%60:.2f} s"
    if seconds >= 1: return f"{seconds:.3f} s"
    return f"{seconds*1000:.2f} ms"


class Z3StarBattleSolver:
    """
    Encodes a board (region map plus already decided cells) for z3.

    :param Board board: The board to complete; stars and crosses on it are fixed.
    """

    def __init__(self, board):
        self.board = board
        self.dim = board.size
        self.stars_per_region = board.stars_per_unit
        self.solver = Solver()
        self.grid_vars = [[Bool(f"c_{r}_{c}") for c in range(self.dim)] for r in range(self.dim)]
        self.solutions = []
        self._add_constraints()

    def _add_constraints(self):
        s, dim, k = self.solver, self.dim, self.stars_per_region
        # Rule: k stars per row and column
        for i in range(dim):
            s.add(PbEq([(self.grid_vars[i][c], 1) for c in range(dim)], k))
            s.add(PbEq([(self.grid_vars[r][i], 1) for r in range(dim)], k))
        # Rule: k stars per region
        for region_id in self.board.region_ids:
            cells = self.board.region(region_id).cells
            s.add(PbEq([(self.grid_vars[r][c], 1) for r, c in cells], k))
        # Rule: Stars cannot be adjacent (covers the 2x2 rule as well)
        for r in range(dim):
            for c in range(dim):
                neighbors = [Not(self.grid_vars[nr][nc]) for nr, nc in self.board.neighbors8((r, c))]
                if neighbors:
                    s.add(Implies(self.grid_vars[r][c], And(neighbors)))
        # Cells already decided on the board
        for r in range(dim):
            for c in range(dim):
                if self.board.is_star((r, c)):
                    s.add(self.grid_vars[r][c])
                elif self.board.is_cross((r, c)):
                    s.add(Not(self.grid_vars[r][c]))

    def count_solutions(self, max_count=2, timeout_ms=None):
        """
        Counts completions up to ``max_count``, blocking each one found.

        :param int max_count: Stop once this many solutions are known.
        :param int timeout_ms: Wall-clock budget for the whole count, or None.
        :returns: The count and whether the budget ran out first.
        :rtype: SolutionCount
        """
        start_time = time.monotonic()
        deadline = start_time + timeout_ms / 1000.0 if timeout_ms else None
        while len(self.solutions) < max_count:
            if deadline is not None:
                remaining_ms = int((deadline - time.monotonic()) * 1000)
                if remaining_ms <= 0:
                    return SolutionCount(len(self.solutions), True)
                self.solver.set("timeout", remaining_ms)
            result = self.solver.check()
            if result == unknown:
                logger.info(f"Z3 gave up after {format_duration(time.monotonic() - start_time)}")
                return SolutionCount(len(self.solutions), True)
            if result != sat:
                break
            model = self.solver.model()
            solution = [[(1 if is_true(model.evaluate(self.grid_vars[r][c], model_completion=True)) else 0)
                         for c in range(self.dim)] for r in range(self.dim)]
            self.solutions.append(solution)
            # Block this solution and check for another
            self.solver.add(Or([Not(v) if solution[r][c] else v
                                for r, row in enumerate(self.grid_vars) for c, v in enumerate(row)]))
        logger.debug(f"Z3 count {len(self.solutions)} in {format_duration(time.monotonic() - start_time)}")
        return SolutionCount(len(self.solutions), False)

    def solve(self, timeout_ms=None):
        """Up to two solutions, enough to tell a unique puzzle from an ambiguous one."""
        outcome = self.count_solutions(max_count=2, timeout_ms=timeout_ms)
        return list(self.solutions), outcome.timed_out


class Z3SolutionCounter:
    """The oracle object handed to :class:`~starbattle_hints.config.EngineConfig`."""

    def __init__(self):
        self.calls = 0

    def count_solutions(self, board, max_count=2, timeout_ms=None):
        self.calls += 1
        return Z3StarBattleSolver(board).count_solutions(max_count=max_count, timeout_ms=timeout_ms)
