"""Exception taxonomy for the hint engine.

"No hint available" is not an error: the runner returns ``None`` for it. Everything
raised from this package derives from :class:`StarBattleError`.
"""


class StarBattleError(Exception):
    """Base class for all engine errors."""


class InvalidBoardError(StarBattleError, ValueError):
    """A board was constructed from a malformed grid."""


class PuzzleFormatError(StarBattleError, ValueError):
    """A puzzle string could not be decoded."""


class DeductionContradiction(StarBattleError):
    """Two deductions (or two resolved facts) disagree about the same target.

    :param str message: Human readable description.
    :param target: The cell, block, area key or cell set both sides talk about.
    :param existing: The fact already known.
    :param incoming: The fact that disagrees with it.
    """

    def __init__(self, message, target=None, existing=None, incoming=None):
        super().__init__(message)
        self.target = target
        self.existing = existing
        self.incoming = incoming


class TechniqueError(StarBattleError):
    """An unexpected fault inside a technique. Never to be read as "no hint"."""

    def __init__(self, technique_id, original):
        super().__init__(f"Technique '{technique_id}' failed: {original!r}")
        self.technique_id = technique_id
        self.original = original


class UnsoundHintError(StarBattleError):
    """Applying a hint would break a board invariant."""

    def __init__(self, hint, violations):
        super().__init__(f"Hint from '{hint.technique}' breaks the board: {'; '.join(violations)}")
        self.hint = hint
        self.violations = violations
