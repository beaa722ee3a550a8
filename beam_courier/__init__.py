"""Beam Courier package.

The rule engine lives in :mod:`beam_courier.game` and never imports pygame;
the optional front end is in :mod:`beam_courier.ui`.
"""

from .game import (
    Beam,
    Board,
    Carrier,
    CommandResult,
    Direction,
    EngineState,
    Level,
    PuzzleEngine,
    PuzzleSession,
    TileKind,
    is_win,
)
from .levels import LevelLoader, SolutionValidator
from .undo import ActionKind, UndoLog

__all__ = [
    "ActionKind",
    "Beam",
    "Board",
    "Carrier",
    "CommandResult",
    "Direction",
    "EngineState",
    "Level",
    "LevelLoader",
    "PuzzleEngine",
    "PuzzleSession",
    "SolutionValidator",
    "TileKind",
    "UndoLog",
    "is_win",
]
