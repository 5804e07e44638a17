"""
Filtering algorithms.
"""

from .base import FilterResult
from .histogram import (
    HistogramFilter,
    initialize_beliefs,
    blur,
    move,
    sense,
)

__all__ = [
    "FilterResult",
    "HistogramFilter",
    "initialize_beliefs",
    "blur",
    "move",
    "sense",
]
