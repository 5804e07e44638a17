"""
Grid utilities for belief and color grids.

All grids are 2D arrays indexed [row, col] = [y, x] on a torus, so every
index is reduced with a true modulus before use.
"""

import numpy as np
from typing import Sequence, Tuple, Union


TOLERANCE = 1e-4


class GridShapeError(ValueError):
    """Grid is empty, ragged, or does not match the grid it is paired with."""


def zeros(height: int, width: int) -> np.ndarray:
    """
    Create a grid of zeros.

    Args:
        height: Number of rows
        width: Number of columns

    Returns:
        grid: [height, width] float64 zeros
    """
    if height < 1 or width < 1:
        raise GridShapeError(f"Grid dimensions must be >= 1, got {height}x{width}")
    return np.zeros((height, width), dtype=np.float64)


def check_rectangular(rows, name: str = "grid") -> Tuple[int, int]:
    """
    Check that a nested sequence (or array) is a non-empty rectangle.

    Returns:
        (height, width)
    """
    if isinstance(rows, np.ndarray):
        if rows.ndim != 2 or rows.size == 0:
            raise GridShapeError(f"{name} must be a non-empty 2D grid, got shape {rows.shape}")
        return rows.shape

    rows = list(rows)
    if len(rows) == 0:
        raise GridShapeError(f"{name} has no rows")

    for r, row in enumerate(rows):
        if not hasattr(row, "__len__"):
            raise GridShapeError(f"{name} must be 2D: row {r} is not a sequence ({type(row).__name__})")

    width = len(rows[0])
    if width == 0:
        raise GridShapeError(f"{name} has an empty first row")

    for r, row in enumerate(rows):
        if len(row) != width:
            raise GridShapeError(
                f"{name} is not rectangular: row {r} has {len(row)} cells, expected {width}"
            )
    return len(rows), width


def as_belief_grid(grid, name: str = "beliefs") -> np.ndarray:
    """
    Validate a belief grid and return it as a fresh float64 array.

    Raises:
        GridShapeError: empty or ragged grid
        ValueError: negative or non-finite entries
    """
    check_rectangular(grid, name)
    out = np.array(grid, dtype=np.float64)

    # Rows of equal length can still nest a third level
    if out.ndim != 2:
        raise GridShapeError(f"{name} must be a 2D grid, got shape {out.shape}")

    if not np.all(np.isfinite(out)):
        raise ValueError(f"{name} contains non-finite entries")
    if np.any(out < 0):
        raise ValueError(f"{name} contains negative entries (min={out.min():.3e})")
    return out


def check_same_shape(a: np.ndarray, b: np.ndarray, names: Tuple[str, str] = ("a", "b")):
    """Raise GridShapeError unless two grids have identical dimensions."""
    if np.shape(a) != np.shape(b):
        raise GridShapeError(
            f"{names[0]} shape {np.shape(a)} does not match {names[1]} shape {np.shape(b)}"
        )


def wrap_index(i, n: int):
    """
    Reduce an index onto [0, n) with a true (always non-negative) modulus.

    Works on Python ints and integer arrays.
    """
    return ((i % n) + n) % n


def toroidal_shift(grid: np.ndarray, dy: int, dx: int) -> np.ndarray:
    """
    Translate a grid on the torus.

    The value at [i, j] lands at [(i + dy) mod H, (j + dx) mod W]. The
    result is written into a fresh array, so this is an exact permutation
    of cells.

    Args:
        grid: [H, W] grid
        dy: Row offset (any integer)
        dx: Column offset (any integer)

    Returns:
        shifted: [H, W] new grid
    """
    H, W = grid.shape
    rows = wrap_index(np.arange(H) + dy, H)
    cols = wrap_index(np.arange(W) + dx, W)

    shifted = np.zeros_like(grid)
    shifted[np.ix_(rows, cols)] = grid
    return shifted


def close_enough(
    a: Union[float, Sequence, np.ndarray],
    b: Union[float, Sequence, np.ndarray],
    tol: float = TOLERANCE,
) -> bool:
    """
    Compare two scalars or two grids with an absolute per-cell tolerance.

    Grids of different shape are never close.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        return False
    return bool(np.all(np.abs(a - b) <= tol))
