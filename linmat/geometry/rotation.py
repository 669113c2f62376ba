from __future__ import annotations

import math
from itertools import product
from typing import Any

from linmat.core.matrix import Matrix, as_matrix
from linmat.core.vec import Vec
from linmat.errors import ShapeError
from linmat.utils.scalar import deg2rad

############################
# ROTATIONS
############################

X_AXIS = (1.0, 0.0, 0.0)
Y_AXIS = (0.0, 1.0, 0.0)
Z_AXIS = (0.0, 0.0, 1.0)


def get_rotation_matrix(axis: Any, angle: float) -> Matrix:
    """
    3x3 rotation matrix about `axis` by `angle` degrees (Rodrigues' formula).

    Parameters
    ----------
    axis : Vec or (n, 1) Matrix
        Rotation axis, cast to a 3-vector. It is used as given, so it must
        already be of unit length for the result to be a proper rotation
        (call `.unit()` or `.to_unit()` first).
    angle : float
        Counterclockwise rotation angle in degrees (right-hand rule about
        the axis).

    Returns
    -------
    (3, 3) Matrix
        R = I + sin(t) K + (1 - cos(t)) K^2, where K is the cross product
        matrix of the axis and t the angle in radians.
    """
    theta = deg2rad(angle)
    k = Vec.to_vec(3, axis).get_cross_mat()
    k_squared = k.post_mul(k)
    return (
        Matrix.identity(3)
        .with_add(k.mul_scalar(math.sin(theta)))
        .with_add(k_squared.mul_scalar(1.0 - math.cos(theta)))
    )


def get_rotation_matrix_axes(rx: float, ry: float, rz: float) -> Matrix:
    """
    Compose elemental rotations about the x, y and z axes (degrees).

    The result is Rx @ Ry @ Rz: applied to a column vector, the z rotation
    acts first and the x rotation last.
    """
    r_x = get_rotation_matrix(Vec(3, X_AXIS), rx)
    r_y = get_rotation_matrix(Vec(3, Y_AXIS), ry)
    r_z = get_rotation_matrix(Vec(3, Z_AXIS), rz)
    return r_x.post_mul(r_y).post_mul(r_z)

############################
# HOMOGENEOUS TRANSFORMS
############################

def get_transform_matrix(translate: Any, rotation: Any) -> Matrix:
    """
    4x4 homogeneous transform from a translation and a 3x3 rotation.

    Parameters
    ----------
    translate : Vec or (n, 1) Matrix
        Translation, cast to a 3-vector. Placed in the last column.
    rotation : (3, 3) Matrix
        Rotation, copied into the upper-left 3x3 block.

    Returns
    -------
    (4, 4) Matrix
        [[R, t], [0, 1]].

    Raises
    ------
    ShapeError
        If `rotation` is not a 2D 3x3 matrix.
    """
    rotation = as_matrix(rotation)
    if not rotation.is_2d:
        raise ShapeError(f"Rotation matrix is not 2D, got a {rotation.ndim}D matrix.")
    if rotation.shape != (3, 3):
        raise ShapeError(
            f"Rotation matrix dimensions {'x'.join(map(str, rotation.shape))} are invalid, expected 3x3."
        )
    t = Vec.to_vec(3, translate)

    mat = Matrix((4, 4))
    for row, col in product(range(3), range(3)):
        mat.set(rotation.get(row, col), row, col)
    for row, value in enumerate(t.xyz):
        mat.set(value, row, 3)
    mat.set(1.0, 3, 3)
    return mat


def transform_point(transform: Any, point: Any) -> Vec:
    """
    Apply a 4x4 affine homogeneous transform to a 3D point.

    The point is extended with w = 1, multiplied by `transform` and the first
    three components of the product are returned.

    Raises
    ------
    ShapeError
        If `transform` is not a 2D 4x4 matrix.
    """
    transform = as_matrix(transform)
    if transform.shape != (4, 4):
        raise ShapeError(
            f"Transform matrix dimensions {'x'.join(map(str, transform.shape))} are invalid, expected 4x4."
        )
    p = Vec.to_vec(4, Vec.to_vec(3, point))
    p.w = 1.0
    return Vec.to_vec(3, transform.post_mul(p))


__all__ = [
    "X_AXIS", "Y_AXIS", "Z_AXIS",
    "get_rotation_matrix",
    "get_rotation_matrix_axes",
    "get_transform_matrix",
    "transform_point",
]
