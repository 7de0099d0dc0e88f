"""
Cell and direction primitives shared by the board functions and the game session.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from itertools import count
from numbers import Integral

# ##>: Source of fresh identity tokens, called once per created cell.
IdSource = Callable[[], int]


class Direction(IntEnum):
    """
    Move directions.

    The integer values match the action indices used by ``legal_actions``
    (0: left, 1: up, 2: right, 3: down).
    """

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3

    @classmethod
    def parse(cls, direction: Direction | str | int) -> Direction:
        """
        Convert a direction name, index or member into a ``Direction``.

        Parameters
        ----------
        direction : Direction | str | int
            Member, case-insensitive name (``"left"``) or action index.

        Returns
        -------
        Direction
            The matching member.

        Raises
        ------
        ValueError
            If the value does not name one of the four directions.
        """
        if isinstance(direction, cls):
            return direction
        if isinstance(direction, str):
            try:
                return cls[direction.strip().upper()]
            except KeyError:
                raise ValueError(f'Unknown direction `{direction}`.') from None
        if isinstance(direction, Integral) and not isinstance(direction, bool):
            try:
                return cls(int(direction))
            except ValueError:
                raise ValueError(f'Unknown direction `{direction}`.') from None
        raise ValueError(f'Unknown direction `{direction!r}`.')


@dataclass(frozen=True)
class Cell:
    """
    One position of the grid.

    Attributes
    ----------
    value : int
        0 for an empty cell, otherwise a power of two.
    id : int
        Opaque identity token, unique per created cell. It carries no meaning for the game logic.
    merged : bool
        True if the cell is the product of a merge during the last move.
    is_new : bool
        True if the cell was spawned during the last move.
    """

    value: int
    id: int
    merged: bool = False
    is_new: bool = False

    @property
    def is_empty(self) -> bool:
        return self.value == 0

    def cleared(self) -> Cell:
        """Return the cell with both per-move flags reset."""
        if not (self.merged or self.is_new):
            return self
        return Cell(value=self.value, id=self.id)


def id_counter(start: int = 1) -> IdSource:
    """Return a monotonically increasing token source."""
    return count(start).__next__
