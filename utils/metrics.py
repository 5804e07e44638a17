"""
Evaluation metrics for grid localization.
"""

import numpy as np
from scipy.stats import entropy
from typing import Tuple

from .grid import wrap_index


def belief_entropy(beliefs: np.ndarray) -> float:
    """
    Shannon entropy of a belief grid in nats.

    0 for a fully localized belief, log(H*W) for the uniform belief.
    """
    return float(entropy(np.ravel(beliefs)))


def map_estimate(beliefs: np.ndarray) -> Tuple[int, int]:
    """
    Most probable cell (maximum a posteriori).

    Ties are broken by row-major order (first cell wins).

    Returns:
        (row, col)
    """
    flat_idx = int(np.argmax(beliefs))
    row, col = np.unravel_index(flat_idx, beliefs.shape)
    return int(row), int(col)


def toroidal_distance(
    a: np.ndarray,
    b: np.ndarray,
    shape: Tuple[int, int],
) -> np.ndarray:
    """
    Euclidean distance between cells on a torus.

    Each axis uses the shorter way around.

    Args:
        a: [..., 2] Cells as (row, col)
        b: [..., 2] Cells as (row, col)
        shape: (H, W) of the torus

    Returns:
        dist: [...] Distances
    """
    a = np.asarray(a, dtype=np.int64)
    b = np.asarray(b, dtype=np.int64)
    dims = np.asarray(shape, dtype=np.int64)

    delta = wrap_index(a - b, dims)
    delta = np.minimum(delta, dims - delta)
    return np.sqrt(np.sum(delta.astype(np.float64) ** 2, axis=-1))


def compute_localization_error(
    true_positions: np.ndarray,
    estimates: np.ndarray,
    shape: Tuple[int, int],
) -> Tuple[np.ndarray, float]:
    """
    Per-step localization error on the torus.

    Args:
        true_positions: [T+1, 2] True cells
        estimates: [T+1, 2] or [T, 2] Estimated cells
        shape: (H, W) of the world

    Returns:
        error_per_step: [T] or [T+1] Toroidal distance at each step
        error_mean: Mean error over all steps
    """
    true_positions = np.asarray(true_positions)
    estimates = np.asarray(estimates)

    # Handle case where estimates don't include the prior
    if estimates.shape[0] == true_positions.shape[0] - 1:
        true_aligned = true_positions[1:]
    else:
        true_aligned = true_positions

    T = min(true_aligned.shape[0], estimates.shape[0])
    error_per_step = toroidal_distance(true_aligned[:T], estimates[:T], shape)

    return error_per_step, float(np.mean(error_per_step))
