"""
Priority runner.

Tries the techniques in their fixed order. A technique's own hint is returned
straight away; deductions are filtered, merged into the pass accumulator and
handed to the main solver, whose hint (if any) is returned instead. When
every technique has been tried, there is no hint.
"""
import logging

from starbattle_hints import main_solver
from starbattle_hints.config import DEFAULT_CONFIG
from starbattle_hints.constants import DEFAULT_MAX_SOLVE_STEPS
from starbattle_hints.deductions import filter_valid_deductions, merge_deductions
from starbattle_hints.errors import DeductionContradiction, TechniqueError, UnsoundHintError
from starbattle_hints.techniques import TECHNIQUES
from starbattle_hints.validation import validate_state

logger = logging.getLogger(__name__)


def run_technique(technique, board, config):
    """
    Invoke one technique, turning unexpected faults into :class:`TechniqueError`.

    Contradictions keep their own type so callers can tell them apart.
    """
    try:
        return technique.find(board, config)
    except DeductionContradiction:
        raise
    except Exception as e:
        logger.error(f"Technique '{technique.id}' raised {type(e).__name__}: {e}")
        raise TechniqueError(technique.id, e) from e


def _checked(hint, board, config, via_main_solver):
    if config.verify_hints:
        violations = validate_state(board.apply_hint(hint))
        if violations:
            raise UnsoundHintError(hint, violations)
    config.diagnostics.hint_found(hint, via_main_solver)
    return hint


def find_next_hint(board, config=None, techniques=TECHNIQUES):
    """
    The next certain move for a board.

    :param Board board: Snapshot to reason about; it is never modified.
    :param EngineConfig config: Collaborators and tunables; defaults to no oracle and no patterns.
    :param tuple techniques: Ordered techniques to try.
    :returns: A hint, or None when nothing can be proven.
    :rtype: Hint | None
    :raises DeductionContradiction: When deductions disagree (unsound technique or broken board).
    :raises TechniqueError: When a technique fails unexpectedly.
    """
    config = config or DEFAULT_CONFIG
    accumulated = []
    for technique in techniques:
        result = run_technique(technique, board, config)
        config.diagnostics.technique_result(technique.id, result)
        if result.is_hint:
            return _checked(result.hint, board, config, False)
        if result.deductions:
            accumulated = merge_deductions(accumulated, filter_valid_deductions(result.deductions, board))
            hint = main_solver.analyze_deductions(accumulated, board, config.diagnostics)
            if hint is not None:
                return _checked(hint, board, config, True)
    return None


def solve_step_by_step(board, config=None, max_steps=DEFAULT_MAX_SOLVE_STEPS):
    """
    Apply hints one after another until none is left.

    :returns: The hints in order and the final board.
    :rtype: tuple
    """
    steps = []
    current = board.copy()
    while len(steps) < max_steps:
        hint = find_next_hint(current, config)
        if hint is None:
            break
        current = current.apply_hint(hint)
        steps.append(hint)
    logger.info(f"Applied {len(steps)} hints; solved: {current.is_solved()}")
    return steps, current
