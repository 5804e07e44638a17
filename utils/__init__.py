"""
Utility functions.
"""

from .grid import (
    GridShapeError,
    zeros,
    check_rectangular,
    as_belief_grid,
    check_same_shape,
    wrap_index,
    toroidal_shift,
    close_enough,
)

from .normalization import (
    DegenerateBeliefError,
    normalize,
)

from .metrics import (
    belief_entropy,
    map_estimate,
    toroidal_distance,
    compute_localization_error,
)

__all__ = [
    "GridShapeError",
    "zeros",
    "check_rectangular",
    "as_belief_grid",
    "check_same_shape",
    "wrap_index",
    "toroidal_shift",
    "close_enough",
    "DegenerateBeliefError",
    "normalize",
    "belief_entropy",
    "map_estimate",
    "toroidal_distance",
    "compute_localization_error",
]
