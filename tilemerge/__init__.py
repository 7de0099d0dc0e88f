"""Sliding-tile merge engine for 2048-style puzzle games."""

from tilemerge.config import EngineConfiguration
from tilemerge.core import Cell, Direction
from tilemerge.envs import MoveResult, TwentyFortyEight, apply_move, is_terminal, new_game
from tilemerge.errors import InvariantViolation

__all__ = [
    "Cell",
    "Direction",
    "EngineConfiguration",
    "InvariantViolation",
    "MoveResult",
    "TwentyFortyEight",
    "apply_move",
    "is_terminal",
    "new_game",
]
