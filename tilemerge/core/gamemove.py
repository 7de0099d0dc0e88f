"""
Move utilities for the grid engine, providing functions for determining legal and illegal directions.
"""

from __future__ import annotations

from collections.abc import Callable

from numpy import ndarray

from tilemerge.core.cells import Direction
from tilemerge.core.gameboard import Grid, grid_values

# ##>: Array views turning each direction into a left move, matching the grid transforms.
_VIEWS: dict[Direction, Callable[[ndarray], ndarray]] = {
    Direction.LEFT: lambda board: board,
    Direction.UP: lambda board: board.T,
    Direction.RIGHT: lambda board: board[:, ::-1],
    Direction.DOWN: lambda board: board.T[:, ::-1],
}


def _moves_left(board: ndarray) -> bool:
    """Check whether a left move changes ``board``: a gap before a tile, or two equal tiles side by side."""
    near, far = board[:, :-1], board[:, 1:]
    return bool(((near == 0) & (far != 0)).any() or ((near != 0) & (near == far)).any())


def legal_actions_mask(state: Grid | ndarray) -> tuple[bool, bool, bool, bool]:
    """
    Get a boolean mask for all four directions.

    Parameters
    ----------
    state : Grid | ndarray
        The grid or its value matrix.

    Returns
    -------
    tuple[bool, bool, bool, bool]
        Mask for (left, up, right, down) where True means the move changes the board.

    Notes
    -----
    Each direction is checked on a view of the value matrix, so nothing is copied or simulated.
    """
    board = state if isinstance(state, ndarray) else grid_values(state)
    left, up, right, down = (_moves_left(_VIEWS[direction](board)) for direction in Direction)
    return left, up, right, down


def illegal_actions(state: Grid | ndarray) -> list[Direction]:
    """
    Determine the directions that would leave the board unchanged.

    Parameters
    ----------
    state : Grid | ndarray
        The grid or its value matrix.

    Returns
    -------
    list[Direction]
        Illegal directions, in action index order.
    """
    mask = legal_actions_mask(state)
    return [direction for direction in Direction if not mask[direction]]


def legal_actions(state: Grid | ndarray) -> list[Direction]:
    """
    Determine the directions that would change the board.

    Parameters
    ----------
    state : Grid | ndarray
        The grid or its value matrix.

    Returns
    -------
    list[Direction]
        Legal directions, in action index order.
    """
    mask = legal_actions_mask(state)
    return [direction for direction in Direction if mask[direction]]
