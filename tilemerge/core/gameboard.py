"""
Core functionality of the grid engine: board construction, sliding and merging, tile spawning and
terminal-state detection.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from numpy import all as np_all
from numpy import any as np_any
from numpy import argwhere, array, asarray, int64, integer, issubdtype, ndarray
from numpy.random import Generator

from tilemerge.core.cells import Cell, Direction, IdSource

# ##>: Tile spawn probabilities for 2048 game (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}

Row = tuple[Cell, ...]
Grid = tuple[Row, ...]
Transform = Callable[[Grid], Grid]


def is_tile_value(value: int) -> bool:
    """Check whether ``value`` is a legal tile value (a power of two >= 2)."""
    return value >= 2 and value & (value - 1) == 0


def empty_grid(size: int, next_id: IdSource) -> Grid:
    """Build a ``size x size`` grid of empty cells."""
    return tuple(tuple(Cell(value=0, id=next_id()) for _ in range(size)) for _ in range(size))


def grid_from_values(values: Sequence[Sequence[int]] | ndarray, next_id: IdSource) -> Grid:
    """
    Build a grid from a square matrix of tile values, assigning fresh identity tokens.

    Parameters
    ----------
    values : Sequence[Sequence[int]] | ndarray
        Square matrix where 0 marks an empty cell.
    next_id : IdSource
        Source of identity tokens.

    Returns
    -------
    Grid
        The corresponding grid, with no per-move flag set.

    Raises
    ------
    ValueError
        If the matrix is not square, is not made of integers, or holds a value that is neither 0 nor a
        power of two.
    """
    matrix = asarray(values)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1] or matrix.shape[0] < 2:
        raise ValueError(f'Expected a square board, got shape {matrix.shape}.')
    if not issubdtype(matrix.dtype, integer):
        raise ValueError(f'Expected integer tile values, got dtype `{matrix.dtype}`.')

    for value in matrix.ravel().tolist():
        if value != 0 and not is_tile_value(int(value)):
            raise ValueError(f'Invalid tile value `{value}`: expected 0 or a power of two.')

    return tuple(tuple(Cell(value=int(value), id=next_id()) for value in row) for row in matrix.tolist())


def grid_values(grid: Grid) -> ndarray:
    """Return the tile values of ``grid`` as a 2D int64 array."""
    return array([[cell.value for cell in row] for row in grid], dtype=int64)


def transpose(grid: Grid) -> Grid:
    """Swap rows and columns."""
    return tuple(zip(*grid))


def reverse_rows(grid: Grid) -> Grid:
    """Reverse the order of the cells inside every row."""
    return tuple(row[::-1] for row in grid)


# ##>: Transforms bringing each direction back to a left move. Both transforms are involutions,
# ##>: so the inverse is the same sequence applied backwards.
_TRANSFORMS: dict[Direction, tuple[Transform, ...]] = {
    Direction.LEFT: (),
    Direction.RIGHT: (reverse_rows,),
    Direction.UP: (transpose,),
    Direction.DOWN: (transpose, reverse_rows),
}


def _apply(grid: Grid, transforms: Iterable[Transform]) -> Grid:
    for transform in transforms:
        grid = transform(grid)
    return grid


def clear_flags(grid: Grid) -> Grid:
    """Reset the merged and newly-spawned flags of every cell."""
    return tuple(tuple(cell.cleared() for cell in row) for row in grid)


def compact_and_merge_row(row: Row, next_id: IdSource) -> tuple[int, Row, bool]:
    """
    Slide a row to the left, merge adjacent equal values and compute the score.

    Parameters
    ----------
    row : Row
        One row of the grid.
    next_id : IdSource
        Source of identity tokens for the slots freed by merges.

    Returns
    -------
    score : int
        Sum of the values produced by merges.
    new_row : Row
        The row after compaction and merging, padded on the right with empty cells.
    moved : bool
        Whether any cell changed position or value.

    Notes
    -----
    - Cells keep their identity when they slide. The left cell of a merged pair keeps its identity.
    - A cell produced by a merge cannot merge again during the same move.
    - Empty cells are reused for padding so that an unchanged row is returned as is.
    """
    occupied = [index for index, cell in enumerate(row) if not cell.is_empty]
    tiles = [row[index] for index in occupied]
    blanks = [cell for cell in row if cell.is_empty]

    # ##: Compaction.
    moved = any(index != position for position, index in enumerate(occupied))

    # ##: Merge adjacent pairs.
    merged_row: list[Cell] = []
    score = 0
    i = 0
    while i < len(tiles):
        current = tiles[i]
        following = tiles[i + 1] if i + 1 < len(tiles) else None
        if (
            following is not None
            and following.value == current.value
            and not current.merged
            and not following.merged
        ):
            value = current.value * 2
            merged_row.append(Cell(value=value, id=current.id, merged=True))
            score += value
            moved = True
            i += 2
        else:
            merged_row.append(current)
            i += 1

    # ##: Refill the right side.
    missing = len(row) - len(merged_row)
    padding = blanks[:missing] + [Cell(value=0, id=next_id()) for _ in range(missing - len(blanks))]
    return score, tuple(merged_row + padding), moved


def slide_and_merge(grid: Grid, direction: Direction, next_id: IdSource) -> tuple[int, Grid, bool]:
    """
    Slide the grid toward ``direction``, merging adjacent cells, and compute the score.

    Parameters
    ----------
    grid : Grid
        The current grid.
    direction : Direction
        Direction of the move.
    next_id : IdSource
        Source of identity tokens.

    Returns
    -------
    score : int
        The total score obtained from all merges.
    updated_grid : Grid
        The grid after sliding and merging, without a new tile.
    moved : bool
        Whether any cell changed position or value.

    Notes
    -----
    - Per-move flags are cleared before the move.
    - Every direction is brought back to a left move with ``transpose`` and ``reverse_rows``.
    """
    transforms = _TRANSFORMS[direction]
    working = _apply(clear_flags(grid), transforms)

    score = 0
    moved = False
    rows = []
    for row in working:
        score_row, new_row, moved_row = compact_and_merge_row(row, next_id)
        score += score_row
        moved = moved or moved_row
        rows.append(new_row)

    return score, _apply(tuple(rows), reversed(transforms)), moved


def empty_cells(grid: Grid) -> list[tuple[int, int]]:
    """Return the positions (row, col) of the empty cells."""
    return [(int(r), int(c)) for r, c in argwhere(grid_values(grid) == 0)]


def spawn_tile(
    grid: Grid,
    rng: Generator,
    next_id: IdSource,
    spawn_probs: dict[int, float] | None = None,
) -> Grid | None:
    """
    Place a new tile on a random empty cell.

    Parameters
    ----------
    grid : Grid
        The grid to fill. It is not modified.
    rng : Generator
        Random source for the cell and the tile value.
    next_id : IdSource
        Source of identity tokens.
    spawn_probs : dict[int, float], optional
        Tile value probabilities, ``TILE_SPAWN_PROBS`` by default.

    Returns
    -------
    Grid | None
        A new grid with the tile flagged as new, or None if the grid has no empty cell.

    Notes
    -----
    The cell is chosen uniformly among the empty cells.
    """
    available = empty_cells(grid)
    if not available:
        return None

    probs = spawn_probs or TILE_SPAWN_PROBS
    row, col = available[int(rng.integers(len(available)))]
    value = int(rng.choice(list(probs), p=list(probs.values())))

    rows = [list(line) for line in grid]
    rows[row][col] = Cell(value=value, id=next_id(), is_new=True)
    return tuple(tuple(line) for line in rows)


def fill_cells(
    grid: Grid,
    number_tile: int,
    rng: Generator,
    next_id: IdSource,
    spawn_probs: dict[int, float] | None = None,
) -> Grid:
    """
    Spawn up to ``number_tile`` new tiles.

    If there are fewer empty cells than requested, all available cells are filled.
    """
    for _ in range(number_tile):
        filled = spawn_tile(grid, rng, next_id, spawn_probs)
        if filled is None:
            break
        grid = filled
    return grid


def is_done(grid: Grid | ndarray) -> bool:
    """
    Check if the game has ended.

    Parameters
    ----------
    grid : Grid | ndarray
        The grid or its value matrix.

    Returns
    -------
    bool
        True if the game is over, False otherwise.

    Notes
    -----
    The game is over when there are no empty cells AND no adjacent cells have the same value.
    """
    state = grid if isinstance(grid, ndarray) else grid_values(grid)
    return bool(
        np_all(state != 0) and not np_any(state[:-1] == state[1:]) and not np_any(state[:, :-1] == state[:, 1:])
    )


def max_tile(grid: Grid) -> int:
    """Return the highest tile value on the grid."""
    return max(cell.value for row in grid for cell in row)
