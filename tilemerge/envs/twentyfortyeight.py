"""2048 game session driven by a user interface."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass

from numpy import ndarray
from numpy.random import PCG64DXSM, Generator, default_rng

from tilemerge.config import EngineConfiguration
from tilemerge.core.cells import Direction, IdSource, id_counter
from tilemerge.core.gameboard import (
    Grid,
    empty_grid,
    fill_cells,
    grid_from_values,
    grid_values,
    is_done,
    max_tile,
    slide_and_merge,
    spawn_tile,
)
from tilemerge.core.gamemove import legal_actions
from tilemerge.errors import InvariantViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of one move.

    Attributes
    ----------
    grid : Grid
        The grid after the move, including the spawned tile.
    score_delta : int
        Sum of the values produced by merges during the move.
    moved : bool
        Whether any cell changed position or value.
    reached_2048 : bool
        True only on the move that first reached the target tile.
    game_over : bool
        Whether the session is finished after the move.
    """

    grid: Grid
    score_delta: int
    moved: bool
    reached_2048: bool
    game_over: bool


class TwentyFortyEight:
    """
    2048 game session.

    This class owns the grid, the score and the win/game-over flags of one game. The grid is only
    changed by ``apply_move`` and reset by ``reset``.
    """

    # ##: All Actions.
    ACTIONS = {direction.name.lower(): int(direction) for direction in Direction}

    def __init__(
        self,
        config: EngineConfiguration | None = None,
        seed: int | None = None,
        rng: Generator | None = None,
        values: Sequence[Sequence[int]] | ndarray | None = None,
    ):
        """
        Initialize a session and start a new game.

        Parameters
        ----------
        config : EngineConfiguration, optional
            Rules of the game (default is a 4x4 grid with a 2048 target).
        seed : int, optional
            Seed of the random source, ignored when ``rng`` is given.
        rng : Generator, optional
            Random source used for every spawn.
        values : Sequence[Sequence[int]] | ndarray, optional
            Starting tile values. When omitted, the game starts from an empty grid with the
            configured number of random tiles.
        """
        self.config = config or EngineConfiguration()
        self._spawn_probs = dict(self.config.spawn_probs)
        self._rng = rng if rng is not None else self._make_rng(seed)
        self._next_id: IdSource = id_counter()
        self._lock = threading.Lock()

        self._grid: Grid = ()
        self._score = 0
        self._won = False
        self._keep_playing = False
        self._game_over = False

        if values is None:
            self._start(seed=None)
        else:
            self._load(values)

    @classmethod
    def from_values(
        cls,
        values: Sequence[Sequence[int]] | ndarray,
        config: EngineConfiguration | None = None,
        seed: int | None = None,
        rng: Generator | None = None,
        score: int = 0,
    ) -> TwentyFortyEight:
        """
        Create a session from a matrix of tile values.

        Parameters
        ----------
        values : Sequence[Sequence[int]] | ndarray
            Square matrix where 0 marks an empty cell.
        config : EngineConfiguration, optional
            Rules of the game. Its size must match the matrix.
        seed : int, optional
            Seed of the random source, ignored when ``rng`` is given.
        rng : Generator, optional
            Random source used for every spawn.
        score : int, optional
            Initial score (default is 0).

        Returns
        -------
        TwentyFortyEight
            The session, already flagged as finished if the board is terminal.

        Raises
        ------
        ValueError
            If the matrix is malformed or does not match the configured size.
        """
        session = cls(config=config, seed=seed, rng=rng, values=values)
        session._score = score
        return session

    @staticmethod
    def _make_rng(seed: int | None) -> Generator:
        return default_rng(PCG64DXSM(seed))

    def _load(self, values: Sequence[Sequence[int]] | ndarray) -> None:
        grid = grid_from_values(values, self._next_id)
        if len(grid) != self.config.size:
            raise ValueError(f'Expected a {self.config.size}x{self.config.size} board, got {len(grid)}x{len(grid)}.')

        self._grid = grid
        self._game_over = is_done(grid)

    def _start(self, seed: int | None) -> None:
        if seed is not None:
            self._rng = self._make_rng(seed)

        grid = empty_grid(self.config.size, self._next_id)
        self._grid = fill_cells(grid, self.config.start_tiles, self._rng, self._next_id, self._spawn_probs)
        self._score = 0
        self._won = False
        self._keep_playing = False
        self._game_over = is_done(self._grid)
        logger.debug('New game on a %dx%d grid.', self.config.size, self.config.size)

    @property
    def grid(self) -> Grid:
        """The current grid."""
        return self._grid

    @property
    def values(self) -> ndarray:
        """The tile values of the current grid as a 2D int64 array."""
        return grid_values(self._grid)

    @property
    def score(self) -> int:
        return self._score

    @property
    def won(self) -> bool:
        return self._won

    @property
    def keep_playing(self) -> bool:
        return self._keep_playing

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def max_tile(self) -> int:
        return max_tile(self._grid)

    @property
    def legal_directions(self) -> list[Direction]:
        """Directions that would change the grid."""
        if self._game_over:
            return []
        return legal_actions(self._grid)

    def is_terminal(self) -> bool:
        """
        Check if the grid admits no move.

        Returns
        -------
        bool
            True if the grid is full and no adjacent cells share a value.
        """
        return is_done(self._grid)

    def reset(self, seed: int | None = None) -> Grid:
        """
        Start a new game on this session.

        Parameters
        ----------
        seed : int, optional
            Re-seed the random source before spawning the starting tiles.

        Returns
        -------
        Grid
            The new grid with its starting tiles.
        """
        with self._lock:
            self._start(seed=seed)
            return self._grid

    def continue_after_win(self) -> None:
        """Keep playing after the target tile: no further win is reported."""
        with self._lock:
            self._keep_playing = True

    def apply_move(self, direction: Direction | str | int) -> MoveResult:
        """
        Slide and merge the tiles toward ``direction``.

        Parameters
        ----------
        direction : Direction | str | int
            The move, as a member, a name (``"left"``) or an action index.

        Returns
        -------
        MoveResult
            The grid after the move, the score gained and the resulting flags.

        Raises
        ------
        ValueError
            If ``direction`` is not one of the four directions.
        InvariantViolation
            If a tile has to be spawned on a full grid.

        Notes
        -----
        - If nothing moves, the session is left untouched and no tile is spawned.
        - The whole move is computed before the session is updated.
        """
        direction = Direction.parse(direction)

        with self._lock:
            if self._game_over:
                logger.debug('Move %s ignored: the game is over.', direction.name.lower())
                return MoveResult(grid=self._grid, score_delta=0, moved=False, reached_2048=False, game_over=True)

            score_delta, grid, moved = slide_and_merge(self._grid, direction, self._next_id)
            if not moved:
                logger.debug('Move %s changed nothing.', direction.name.lower())
                return MoveResult(grid=self._grid, score_delta=0, moved=False, reached_2048=False, game_over=False)

            # ##: Spawn one tile.
            spawned = spawn_tile(grid, self._rng, self._next_id, self._spawn_probs)
            if spawned is None:
                logger.error('No empty cell left after move %s.', direction.name.lower())
                raise InvariantViolation(f'Cannot spawn a tile after move `{direction.name.lower()}`: the grid is full.')

            # ##: Check victory.
            reached = False
            if not self._won and not self._keep_playing and (grid_values(spawned) == self.config.target).any():
                reached = True

            # ##: Commit.
            self._grid = spawned
            self._score += score_delta
            self._won = self._won or reached
            self._game_over = is_done(spawned)

            logger.debug('Move %s: +%d points.', direction.name.lower(), score_delta)
            if reached:
                logger.info('Reached %d with a score of %d.', self.config.target, self._score)
            if self._game_over:
                logger.info('Game over with a score of %d.', self._score)

            return MoveResult(
                grid=self._grid,
                score_delta=score_delta,
                moved=True,
                reached_2048=reached,
                game_over=self._game_over,
            )

    def __str__(self) -> str:
        return '\n'.join(' \t'.join(map(str, row)) for row in self.values.tolist())


def new_game(
    config: EngineConfiguration | None = None,
    seed: int | None = None,
    rng: Generator | None = None,
) -> TwentyFortyEight:
    """Create a session with a fresh grid holding the starting tiles."""
    return TwentyFortyEight(config=config, seed=seed, rng=rng)


def apply_move(session: TwentyFortyEight, direction: Direction | str | int) -> MoveResult:
    """Apply one move to ``session``."""
    return session.apply_move(direction)


def is_terminal(session: TwentyFortyEight) -> bool:
    """Check if the grid of ``session`` admits no move."""
    return session.is_terminal()
