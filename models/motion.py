"""
Motion noise model.

Motion is an exact shift on the torus followed by a 3x3 blur:

    center      1 - b
    adjacent    b / 6    (4 cells)
    diagonal    b / 12   (4 cells)

so the kernel sums to 1 for any blurring b in [0, 1].
"""

import numpy as np
from dataclasses import dataclass, field
from numpy.random import Generator
from typing import Tuple


# (dy, dx) offsets in the same row-major order as the 3x3 kernel
KERNEL_OFFSETS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1)]


def blur_kernel(blurring: float) -> np.ndarray:
    """
    Build the 3x3 blur kernel.

    Args:
        blurring: Fraction of probability that spills to the 8 neighbors

    Returns:
        kernel: [3, 3] indexed [dy + 1, dx + 1]
    """
    blurring = float(blurring)
    if not (0.0 <= blurring <= 1.0):
        raise ValueError(f"blurring must be in [0, 1], got {blurring}")

    center = 1.0 - blurring
    adjacent = blurring / 6.0
    corner = blurring / 12.0

    return np.array([
        [corner, adjacent, corner],
        [adjacent, center, adjacent],
        [corner, adjacent, corner],
    ])


@dataclass
class MotionModel:
    """
    Blurred motion model.

    Attributes:
        blurring: Motion noise level in [0, 1]. 0 means noiseless motion.
    """
    blurring: float = 0.0

    kernel: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        self.kernel = blur_kernel(self.blurring)

    def sample_offset(self, rng: Generator) -> Tuple[int, int]:
        """
        Draw the noise offset added to an intended motion.

        Returns:
            (dy, dx) with dy, dx in {-1, 0, 1}
        """
        k = rng.choice(len(KERNEL_OFFSETS), p=self.kernel.ravel())
        return KERNEL_OFFSETS[k]
