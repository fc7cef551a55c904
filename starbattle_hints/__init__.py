"""Star Battle hint engine: explains the next certain move on a board in progress."""
from starbattle_hints.board import Board, Unit
from starbattle_hints.config import EngineConfig, DEFAULT_CONFIG
from starbattle_hints.diagnostics import Diagnostics
from starbattle_hints.errors import (
    StarBattleError, InvalidBoardError, PuzzleFormatError,
    DeductionContradiction, TechniqueError, UnsoundHintError
)
from starbattle_hints.hints import Hint, TechniqueResult
from starbattle_hints.runner import find_next_hint, solve_step_by_step
from starbattle_hints.validation import validate_state

__version__ = "1.0.0"
