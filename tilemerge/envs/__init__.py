# -*- coding: utf-8 -*-
"""
Python implementation of a 2048 game session.

This module provides the `TwentyFortyEight` class, which owns the grid, score and flags of one game, and the
`new_game`, `apply_move` and `is_terminal` entry points used by user interfaces.
"""

from .twentyfortyeight import MoveResult, TwentyFortyEight, apply_move, is_terminal, new_game

__all__ = ["MoveResult", "TwentyFortyEight", "apply_move", "is_terminal", "new_game"]
