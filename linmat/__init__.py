import logging

from .config import NumericConfig, DeterminantMethod, DEFAULT_CONFIG
from .errors import ShapeError
from .core import Matrix, Vec, VEC_SIZES, as_matrix
from .geometry import (
    get_rotation_matrix,
    get_rotation_matrix_axes,
    get_transform_matrix,
    transform_point,
)
from .utils.scalar import (
    EPSILON,
    lerp,
    epsilon_equals,
    clamp_min,
    clamp_max,
    clamp,
    map_range,
    mod,
    clamp_angle_rads,
    clamp_angle_degs,
    angle_diff_rads,
    angle_diff_degs,
    deg2rad,
    rad2deg,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
