"""Explicit diagnostics configuration passed through the engine."""
import logging


class Diagnostics:
    """
    Controls how much the engine reports about its own reasoning.

    Tracing is off unless switched on here; nothing is read from the environment.

    :param logging.Logger logger: Logger to write to. Defaults to the package logger.
    :param bool trace_techniques: Log every technique invocation and its outcome.
    :param bool trace_deductions: Log the accumulated deductions before each main solver run.
    """

    def __init__(self, logger=None, trace_techniques=False, trace_deductions=False):
        self.logger = logger or logging.getLogger('starbattle_hints')
        self.trace_techniques = trace_techniques
        self.trace_deductions = trace_deductions

    def technique_result(self, technique_id, result):
        if self.trace_techniques:
            self.logger.debug(f"[{technique_id}] -> {result.kind}"
                              f" ({len(result.deductions)} deductions)")

    def accumulator(self, deductions):
        if self.trace_deductions:
            self.logger.debug(f"Accumulator holds {len(deductions)} deductions")
            for deduction in deductions:
                self.logger.debug(f"  {deduction!r}")

    def hint_found(self, hint, via_main_solver=False):
        source = "main solver" if via_main_solver else "technique"
        self.logger.info(f"Hint from {hint.technique} ({source}): {hint.explanation}")
