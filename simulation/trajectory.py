"""
Trajectory simulation and storage.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Dict, Any, Sequence, Tuple
from numpy.random import Generator, default_rng

from ..models.base import GridWorld
from ..models.motion import MotionModel
from ..models.sensor import SensorModel


# Unit moves: down, up, right, left
UNIT_MOTIONS = np.array([[1, 0], [-1, 0], [0, 1], [0, -1]])


@dataclass
class Trajectory:
    """
    Container for a simulated robot run on a grid world.

    Attributes:
        positions: [T+1, 2] True cells (row, col), starting cell first
        motions: [T, 2] Intended (dy, dx) commanded at each step
        observations: [T] Color sensed after each motion
        metadata: Optional dictionary for additional info
    """
    positions: np.ndarray
    motions: np.ndarray
    observations: np.ndarray
    metadata: Optional[Dict[str, Any]] = None

    @property
    def T(self) -> int:
        """Number of time steps."""
        return self.motions.shape[0]

    def subset(self, start: int, end: int) -> "Trajectory":
        """
        Extract a subset of the trajectory.

        Args:
            start: Start time index (inclusive)
            end: End time index (exclusive)

        Returns:
            New Trajectory with subset of data
        """
        return Trajectory(
            positions=self.positions[start:end+1].copy(),
            motions=self.motions[start:end].copy(),
            observations=self.observations[start:end].copy(),
            metadata=self.metadata,
        )

    def save(self, path: str):
        """Save trajectory to .npz file."""
        np.savez(
            path,
            positions=self.positions,
            motions=self.motions,
            observations=self.observations,
            metadata=self.metadata,
        )

    @classmethod
    def load(cls, path: str) -> "Trajectory":
        """Load trajectory from .npz file."""
        data = np.load(path, allow_pickle=True)
        metadata = data['metadata'].item() if 'metadata' in data else None
        return cls(
            positions=data['positions'],
            motions=data['motions'],
            observations=data['observations'],
            metadata=metadata,
        )


def simulate(
    world: GridWorld,
    T: int,
    motion_model: Optional[MotionModel] = None,
    sensor_model: Optional[SensorModel] = None,
    motions: Optional[Sequence[Tuple[int, int]]] = None,
    start: Optional[Tuple[int, int]] = None,
    seed: Optional[int] = None,
    rng: Optional[Generator] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Trajectory:
    """
    Simulate a robot moving and sensing on a grid world.

    Each step the robot is commanded a motion, lands on the commanded cell
    plus a noise offset drawn from the motion model, and senses a color
    through the sensor model.

    Args:
        world: GridWorld instance
        T: Number of time steps
        motion_model: Motion noise (default noiseless)
        sensor_model: Sensor noise (default p_hit=3, p_miss=1)
        motions: Optional [T, 2] commanded motions (default random unit moves)
        start: Optional starting cell (default uniform random)
        seed: Random seed (ignored if rng is provided)
        rng: NumPy random generator (optional)
        metadata: Optional metadata to attach

    Returns:
        Trajectory object
    """
    if rng is None:
        rng = default_rng(seed)
    if motion_model is None:
        motion_model = MotionModel()
    if sensor_model is None:
        sensor_model = SensorModel()

    if motions is None:
        motions = UNIT_MOTIONS[rng.integers(len(UNIT_MOTIONS), size=T)]
    motions = np.asarray(motions, dtype=np.int64).reshape(-1, 2)
    if motions.shape[0] != T:
        raise ValueError(f"Expected {T} motions, got {motions.shape[0]}")

    H, W = world.shape
    positions = np.zeros((T + 1, 2), dtype=np.int64)
    observations = np.empty(T, dtype='<U1')

    if start is None:
        positions[0] = [rng.integers(H), rng.integers(W)]
    else:
        positions[0] = [start[0] % H, start[1] % W]

    for t in range(T):
        noise_dy, noise_dx = motion_model.sample_offset(rng)
        row = (positions[t, 0] + motions[t, 0] + noise_dy) % H
        col = (positions[t, 1] + motions[t, 1] + noise_dx) % W
        positions[t + 1] = [row, col]

        observations[t] = sensor_model.sample_observation(world, row, col, rng)

    return Trajectory(
        positions=positions,
        motions=motions,
        observations=observations,
        metadata=metadata,
    )


def simulate_batch(
    world: GridWorld,
    T: int,
    n_trajectories: int,
    motion_model: Optional[MotionModel] = None,
    sensor_model: Optional[SensorModel] = None,
    seed: Optional[int] = None,
) -> list:
    """
    Simulate multiple independent trajectories.

    Args:
        world: GridWorld instance
        T: Number of time steps
        n_trajectories: Number of trajectories to simulate
        motion_model: Motion noise (default noiseless)
        sensor_model: Sensor noise (default p_hit=3, p_miss=1)
        seed: Random seed

    Returns:
        List of Trajectory objects
    """
    rng = default_rng(seed)

    trajectories = []
    for i in range(n_trajectories):
        traj = simulate(
            world, T,
            motion_model=motion_model,
            sensor_model=sensor_model,
            rng=rng,
            metadata={'trajectory_idx': i},
        )
        trajectories.append(traj)

    return trajectories
