"""Engine configuration passed explicitly into every pass."""
from starbattle_hints import constants as const
from starbattle_hints.diagnostics import Diagnostics


class EngineConfig:
    """
    Collaborators and tunables for one or more engine passes.

    :param oracle: Object with ``count_solutions(board, max_count, timeout_ms)``; uniqueness
        techniques are skipped without one.
    :param pattern_library: A loaded :class:`~starbattle_hints.patterns.PatternLibrary`, or None.
    :param Diagnostics diagnostics: Logging/tracing switches.
    :param bool verify_hints: Re-validate every hint against the board invariants before returning it.
    """

    def __init__(self, oracle=None, pattern_library=None, diagnostics=None, verify_hints=True,
                 oracle_timeout_ms=const.DEFAULT_ORACLE_TIMEOUT_MS,
                 oracle_call_budget=const.DEFAULT_ORACLE_CALL_BUDGET,
                 max_group_size=const.DEFAULT_MAX_GROUP_SIZE,
                 max_placements=const.DEFAULT_MAX_PLACEMENTS,
                 max_placement_candidates=const.DEFAULT_MAX_PLACEMENT_CANDIDATES):
        self.oracle = oracle
        self.pattern_library = pattern_library
        self.diagnostics = diagnostics or Diagnostics()
        self.verify_hints = verify_hints
        self.oracle_timeout_ms = oracle_timeout_ms
        self.oracle_call_budget = oracle_call_budget
        self.max_group_size = max_group_size
        self.max_placements = max_placements
        self.max_placement_candidates = max_placement_candidates

    def __repr__(self):
        return (f"EngineConfig(oracle={type(self.oracle).__name__ if self.oracle else None}, "
                f"patterns={'yes' if self.pattern_library else 'no'}, verify_hints={self.verify_hints})")


DEFAULT_CONFIG = EngineConfig()
