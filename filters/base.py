"""
Filter result container.
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple

from ..utils.metrics import compute_localization_error


@dataclass
class FilterResult:
    """
    Container for a localization run.

    Attributes:
        beliefs: [T+1, H, W] Belief grids (prior, then after each step)
        estimates: [T+1, 2] Most probable cell (row, col) at each step
        entropies: [T+1] Belief entropy in nats at each step
    """
    beliefs: np.ndarray
    estimates: np.ndarray
    entropies: np.ndarray

    @property
    def T(self) -> int:
        """Number of time steps."""
        return self.beliefs.shape[0] - 1

    @property
    def grid_shape(self) -> Tuple[int, int]:
        """(H, W) of the belief grids."""
        return self.beliefs.shape[1:]

    @property
    def final_beliefs(self) -> np.ndarray:
        """Beliefs after the last step."""
        return self.beliefs[-1]

    def position_error(self, true_positions: np.ndarray) -> np.ndarray:
        """
        Per-step toroidal distance between estimate and true cell.

        Args:
            true_positions: [T+1, 2] True cells

        Returns:
            error: [T+1]
        """
        error, _ = compute_localization_error(true_positions, self.estimates, self.grid_shape)
        return error

    def accuracy(self, true_positions: np.ndarray) -> float:
        """Fraction of steps where the estimate is exactly the true cell."""
        return float(np.mean(self.position_error(true_positions) == 0.0))

    def mean_entropy(self) -> float:
        return float(np.mean(self.entropies))
