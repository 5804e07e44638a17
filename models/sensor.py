"""
Hit/miss color sensor model.

p(z | cell) = p_hit if the cell's color equals z, p_miss otherwise.
Only the ratio p_hit / p_miss matters; the scale is removed by
normalization.
"""

import numpy as np
from dataclasses import dataclass
from numpy.random import Generator

from .base import GridWorld


@dataclass
class SensorModel:
    """
    Two-outcome color sensor.

    Attributes:
        p_hit: Relative likelihood of a correct reading (> 0)
        p_miss: Relative likelihood of an incorrect reading (> 0)
    """
    p_hit: float = 3.0
    p_miss: float = 1.0

    def __post_init__(self):
        for name in ("p_hit", "p_miss"):
            value = float(getattr(self, name))
            if not np.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be positive and finite, got {value}")
            setattr(self, name, value)

    @property
    def accuracy(self) -> float:
        """Probability that a simulated reading returns the true color."""
        return self.p_hit / (self.p_hit + self.p_miss)

    def likelihood(self, colors: np.ndarray, observed: str) -> np.ndarray:
        """
        Likelihood of an observation for every cell.

        Args:
            colors: [H, W] Color grid
            observed: Sensed color

        Returns:
            lik: [H, W] p_hit where the map matches, p_miss elsewhere
        """
        return np.where(np.asarray(colors) == observed, self.p_hit, self.p_miss)

    def sample_observation(self, world: GridWorld, row: int, col: int, rng: Generator) -> str:
        """
        Simulate a reading at a cell.

        The true color is returned with probability `accuracy`; otherwise a
        different palette color is drawn uniformly. A single-color world
        always reads correctly.
        """
        true_color = world.color_at(row, col)
        others = [c for c in world.palette if c != true_color]

        if not others or rng.uniform() < self.accuracy:
            return true_color
        return others[rng.integers(len(others))]
