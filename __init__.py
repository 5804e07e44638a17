"""
Histogram Filter Library.

A NumPy-based library for grid localization on a cyclic colored world:
- Probability grid primitives (normalize, blur, toroidal shift)
- Motion (move) and sensor (sense) updates
- Histogram filter localization loop and trajectory simulation
"""

from . import models
from . import filters
from . import simulation
from . import utils

__version__ = "0.1.0"
