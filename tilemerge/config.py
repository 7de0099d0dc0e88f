# -*- coding: utf-8 -*-
"""
Game configuration.
"""
from collections.abc import Mapping
from dataclasses import dataclass

from tilemerge.core.gameboard import TILE_SPAWN_PROBS, is_tile_value


@dataclass(frozen=True)
class EngineConfiguration:
    """
    Rules of a game session.

    Attributes
    ----------
    size : int
        Side of the square grid.
    start_tiles : int
        Number of tiles spawned by a new game.
    target : int
        Tile value that wins the game.
    spawn_probs : tuple[tuple[int, float], ...]
        Probability of each spawned tile value, as (value, probability) pairs. A mapping is
        accepted and converted.
    """

    size: int = 4
    start_tiles: int = 2
    target: int = 2048
    spawn_probs: tuple[tuple[int, float], ...] = tuple(TILE_SPAWN_PROBS.items())

    def __post_init__(self):
        probs = self.spawn_probs.items() if isinstance(self.spawn_probs, Mapping) else self.spawn_probs
        object.__setattr__(self, 'spawn_probs', tuple((int(value), float(prob)) for value, prob in probs))

        if self.size < 2:
            raise ValueError(f'The grid size must be at least 2, got {self.size}.')
        if not 0 <= self.start_tiles <= self.size**2:
            raise ValueError(f'Cannot spawn {self.start_tiles} tiles on a {self.size}x{self.size} grid.')
        if self.target < 4 or not is_tile_value(self.target):
            raise ValueError(f'The target must be a power of two >= 4, got {self.target}.')
        if not self.spawn_probs or not all(is_tile_value(value) for value, _ in self.spawn_probs):
            raise ValueError('Spawned tiles must be powers of two.')
        if abs(sum(prob for _, prob in self.spawn_probs) - 1.0) > 1e-9:
            raise ValueError('Spawn probabilities must sum to 1.')
