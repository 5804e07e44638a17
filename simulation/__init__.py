"""
Robot trajectory simulation on grid worlds.
"""

from .trajectory import Trajectory, UNIT_MOTIONS, simulate, simulate_batch

__all__ = [
    "Trajectory",
    "UNIT_MOTIONS",
    "simulate",
    "simulate_batch",
]
