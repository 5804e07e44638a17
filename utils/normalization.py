"""
Normalization of probability grids.
"""

import numpy as np

from .grid import as_belief_grid


class DegenerateBeliefError(ValueError):
    """Total probability mass is zero or not finite, so it cannot be normalized."""


def normalize(grid) -> np.ndarray:
    """
    Rescale a grid so that its entries sum to one.

    Args:
        grid: [H, W] Unnormalized non-negative probabilities

    Returns:
        normalized: [H, W] New grid, sums to 1

    Raises:
        DegenerateBeliefError: if the total mass is zero or not finite
    """
    grid = as_belief_grid(grid, "grid")
    total = np.sum(grid)

    # Overflow in the sum shows up as inf even with finite entries
    if not np.isfinite(total) or total <= 0.0:
        raise DegenerateBeliefError(f"Cannot normalize grid with total mass {total}")

    return grid / total
