# -*- coding: utf-8 -*-
"""
This module provides the building blocks of the grid engine.

It includes the cell and direction types, functions for sliding and merging rows, spawning tiles,
checking if the game is done, and checking legal and illegal directions.
"""

from .cells import Cell, Direction, id_counter
from .gameboard import (
    TILE_SPAWN_PROBS,
    Grid,
    compact_and_merge_row,
    empty_grid,
    fill_cells,
    grid_from_values,
    grid_values,
    is_done,
    reverse_rows,
    slide_and_merge,
    spawn_tile,
    transpose,
)
from .gamemove import illegal_actions, legal_actions, legal_actions_mask

__all__ = [
    "TILE_SPAWN_PROBS",
    "Cell",
    "Direction",
    "Grid",
    "id_counter",
    "compact_and_merge_row",
    "empty_grid",
    "fill_cells",
    "grid_from_values",
    "grid_values",
    "is_done",
    "reverse_rows",
    "slide_and_merge",
    "spawn_tile",
    "transpose",
    "legal_actions",
    "illegal_actions",
    "legal_actions_mask",
]
