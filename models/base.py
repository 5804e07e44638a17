"""
Grid world base class.

A fixed, cyclic (toroidal) map of colored cells. Cells are indexed
[row, col]; moving off one edge re-enters on the opposite edge.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Sequence, Tuple

from ..utils.grid import GridShapeError, check_rectangular


@dataclass
class GridWorld:
    """
    Colored grid world.

    Attributes:
        colors: [H, W] Read-only array of single-character color symbols

    Example:
        world = GridWorld.from_rows([['g', 'g'], ['r', 'g']])
        world.color_at(1, 0)   # 'r'
    """
    colors: np.ndarray

    _palette: Tuple[str, ...] = field(default=(), init=False, repr=False)

    def __post_init__(self):
        """Validate the map and freeze it."""
        check_rectangular(self.colors, "color grid")

        colors = np.array(self.colors, dtype=str)
        if colors.ndim != 2:
            raise GridShapeError(f"color grid must be 2D, got shape {colors.shape}")

        lengths = np.char.str_len(colors)
        if np.any(lengths != 1):
            bad = colors[lengths != 1][0]
            raise ValueError(f"Color symbols must be single characters, got {bad!r}")

        colors.flags.writeable = False
        self.colors = colors
        self._palette = tuple(sorted(np.unique(colors).tolist()))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "GridWorld":
        """Build a world from nested rows of color symbols."""
        check_rectangular(rows, "color grid")
        return cls(colors=np.array([list(row) for row in rows], dtype=str))

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)."""
        return self.colors.shape

    @property
    def height(self) -> int:
        """Number of rows."""
        return self.colors.shape[0]

    @property
    def width(self) -> int:
        """Number of columns."""
        return self.colors.shape[1]

    @property
    def n_cells(self) -> int:
        return self.colors.size

    @property
    def palette(self) -> Tuple[str, ...]:
        """Distinct colors present in the map, sorted."""
        return self._palette

    def color_at(self, row: int, col: int) -> str:
        """Color of a cell; indices wrap around the torus."""
        return str(self.colors[row % self.height, col % self.width])

    def __repr__(self) -> str:
        return f"GridWorld(H={self.height}, W={self.width}, palette={self.palette})"
