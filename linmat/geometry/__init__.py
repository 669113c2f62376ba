from .rotation import (
    X_AXIS,
    Y_AXIS,
    Z_AXIS,
    get_rotation_matrix,
    get_rotation_matrix_axes,
    get_transform_matrix,
    transform_point,
)
