"""
Grid world, map loading, and motion/sensor model definitions.
"""

from .base import GridWorld
from .color_map import MapFormatError, parse_map, read_map
from .motion import MotionModel, blur_kernel
from .sensor import SensorModel

__all__ = [
    "GridWorld",
    "MapFormatError",
    "parse_map",
    "read_map",
    "MotionModel",
    "blur_kernel",
    "SensorModel",
]
