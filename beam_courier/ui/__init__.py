"""User interface package for beam courier."""

from .main import (
    LEVEL_ENV_VAR,
    SOLUTION_ENV_VAR,
    BeamCourierApp,
    UIDirectories,
    bootstrap_directories,
    main,
    resolve_directories,
    run,
)
from .toolkit import PuzzleUI

__all__ = [
    "LEVEL_ENV_VAR",
    "SOLUTION_ENV_VAR",
    "UIDirectories",
    "BeamCourierApp",
    "PuzzleUI",
    "bootstrap_directories",
    "main",
    "resolve_directories",
    "run",
]
