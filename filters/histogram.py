"""
Histogram filter on a cyclic colored grid.

Beliefs are a [H, W] probability grid over the robot's cell. Each time
step applies a motion update (exact toroidal shift + 3x3 blur) and a
sensor update (hit/miss reweighting). Every operation returns a new grid
and leaves its inputs untouched.
"""

import logging
import numbers
import numpy as np
from typing import Optional, Sequence, Tuple, Union

from .base import FilterResult
from ..models.base import GridWorld
from ..models.motion import KERNEL_OFFSETS, MotionModel, blur_kernel
from ..models.sensor import SensorModel
from ..utils.grid import as_belief_grid, check_same_shape, toroidal_shift
from ..utils.metrics import belief_entropy, map_estimate
from ..utils.normalization import normalize

logger = logging.getLogger(__name__)

ColorGrid = Union[GridWorld, np.ndarray, Sequence[Sequence[str]]]


def _as_world(color_grid: ColorGrid) -> GridWorld:
    if isinstance(color_grid, GridWorld):
        return color_grid
    if isinstance(color_grid, np.ndarray):
        return GridWorld(colors=color_grid)
    return GridWorld.from_rows(color_grid)


# =============================================================================
# Core operations
# =============================================================================

def blur(grid, blurring: float) -> np.ndarray:
    """
    Spread probability from each cell over its 3x3 toroidal neighborhood.

    Source cell [i, j] with value v adds v * kernel[dy+1, dx+1] to cell
    [(i+dy) mod H, (j+dx) mod W]. The result is normalized, so blur does
    not depend on the scale of the input.

    EXAMPLE - blurring=0.12 on a localized 3x3 belief:

        0.00  0.00  0.00        0.01  0.02  0.01
        0.00  1.00  0.00   ->   0.02  0.88  0.02
        0.00  0.00  0.00        0.01  0.02  0.01

    Args:
        grid: [H, W] Non-negative probabilities
        blurring: Spill fraction in [0, 1]

    Returns:
        blurred: [H, W] Normalized grid
    """
    grid = as_belief_grid(grid, "grid")
    kernel = blur_kernel(blurring)

    # Each shifted copy is a separate array, so accumulation never aliases
    blurred = np.zeros_like(grid)
    for dy, dx in KERNEL_OFFSETS:
        weight = kernel[dy + 1, dx + 1]
        if weight == 0.0:
            continue
        blurred += weight * toroidal_shift(grid, dy, dx)

    return normalize(blurred)


def initialize_beliefs(color_grid: ColorGrid) -> np.ndarray:
    """
    Uniform prior over all cells of a map.

    For a 2x2 map:

        0.25  0.25
        0.25  0.25

    Args:
        color_grid: GridWorld or [H, W] color symbols

    Returns:
        beliefs: [H, W] Uniform grid
    """
    world = _as_world(color_grid)
    H, W = world.shape
    return np.full((H, W), 1.0 / (H * W))


def move(dy: int, dx: int, beliefs, blurring: float) -> np.ndarray:
    """
    Motion update.

    Shifts every cell by (dy, dx) on the torus, then blurs to model motion
    noise. With dy = dx = 1 and blurring = 0:

        0.00  0.00  0.00        0.00  0.00  0.00
        0.00  1.00  0.00   ->   0.00  0.00  0.00
        0.00  0.00  0.00        0.00  0.00  1.00

    Args:
        dy: Intended row change (any integer, wraps)
        dx: Intended column change (any integer, wraps)
        beliefs: [H, W] Beliefs before motion
        blurring: Motion noise in [0, 1]

    Returns:
        beliefs: [H, W] Normalized beliefs after motion
    """
    for name, offset in (("dy", dy), ("dx", dx)):
        if not isinstance(offset, numbers.Integral):
            raise ValueError(f"{name} must be an integer, got {offset!r}")

    beliefs = as_belief_grid(beliefs)
    shifted = toroidal_shift(beliefs, int(dy), int(dx))
    return blur(shifted, blurring)


def sense(
    color: str,
    color_grid: ColorGrid,
    beliefs,
    p_hit: float,
    p_miss: float,
) -> np.ndarray:
    """
    Sensor update.

    Multiplies each cell by p_hit where the map color equals the observed
    color and by p_miss elsewhere, then normalizes.

    Args:
        color: Observed color
        color_grid: GridWorld or [H, W] color symbols
        beliefs: [H, W] Beliefs before sensing
        p_hit: Relative likelihood of a correct reading
        p_miss: Relative likelihood of an incorrect reading

    Returns:
        beliefs: [H, W] Normalized posterior
    """
    world = _as_world(color_grid)
    beliefs = as_belief_grid(beliefs)
    check_same_shape(beliefs, world.colors, ("beliefs", "color grid"))

    sensor = SensorModel(p_hit=p_hit, p_miss=p_miss)
    return normalize(beliefs * sensor.likelihood(world.colors, color))


# =============================================================================
# Localization loop
# =============================================================================

class HistogramFilter:
    """
    Grid localization with a histogram (discrete Bayes) filter.

    Starts from the uniform prior and runs move -> sense for each step.
    """

    def __init__(
        self,
        blurring: float = 0.0,
        p_hit: float = 3.0,
        p_miss: float = 1.0,
    ):
        """
        Args:
            blurring: Motion noise in [0, 1]
            p_hit: Relative likelihood of a correct color reading
            p_miss: Relative likelihood of an incorrect color reading
        """
        self.motion_model = MotionModel(blurring=blurring)
        self.sensor_model = SensorModel(p_hit=p_hit, p_miss=p_miss)

    @property
    def blurring(self) -> float:
        """Motion noise level used by the blur step."""
        return self.motion_model.blurring

    def step(
        self,
        world: GridWorld,
        beliefs: np.ndarray,
        motion: Tuple[int, int],
        observation: Optional[str],
    ) -> np.ndarray:
        """
        One predict/correct cycle.

        Args:
            world: Map
            beliefs: [H, W] Current beliefs
            motion: (dy, dx) intended motion
            observation: Sensed color, or None to skip the sensor update

        Returns:
            beliefs: [H, W] Updated beliefs
        """
        dy, dx = motion
        beliefs = move(dy, dx, beliefs, self.motion_model.blurring)
        if observation is not None:
            beliefs = sense(
                observation, world, beliefs,
                self.sensor_model.p_hit, self.sensor_model.p_miss,
            )
        return beliefs

    def filter(
        self,
        world: GridWorld,
        motions: Sequence[Tuple[int, int]],
        observations: Sequence[Optional[str]],
        initial_beliefs: Optional[np.ndarray] = None,
    ) -> FilterResult:
        """
        Run the filter over a sequence of motions and observations.

        Args:
            world: Map
            motions: [T, 2] (dy, dx) per step
            observations: [T] Color sensed after each motion
            initial_beliefs: Optional [H, W] prior (default uniform)

        Returns:
            FilterResult
        """
        motions = np.asarray(motions, dtype=np.int64).reshape(-1, 2)
        T = motions.shape[0]
        if len(observations) != T:
            raise ValueError(
                f"Got {T} motions but {len(observations)} observations"
            )

        if initial_beliefs is None:
            beliefs = initialize_beliefs(world)
        else:
            beliefs = normalize(initial_beliefs)
            check_same_shape(beliefs, world.colors, ("initial_beliefs", "color grid"))

        H, W = world.shape

        # Storage
        belief_history = np.zeros((T + 1, H, W))
        estimates = np.zeros((T + 1, 2), dtype=np.int64)
        entropies = np.zeros(T + 1)

        belief_history[0] = beliefs
        estimates[0] = map_estimate(beliefs)
        entropies[0] = belief_entropy(beliefs)

        for t in range(T):
            beliefs = self.step(world, beliefs, tuple(motions[t]), observations[t])

            belief_history[t + 1] = beliefs
            estimates[t + 1] = map_estimate(beliefs)
            entropies[t + 1] = belief_entropy(beliefs)

            logger.debug(
                "step=%d motion=%s obs=%s estimate=%s entropy=%.4f",
                t, tuple(motions[t]), observations[t], tuple(estimates[t + 1]), entropies[t + 1],
            )

        return FilterResult(
            beliefs=belief_history,
            estimates=estimates,
            entropies=entropies,
        )
