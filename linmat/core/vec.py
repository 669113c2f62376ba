from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Iterator, Optional, Tuple

import numpy as np

from linmat.config import DEFAULT_CONFIG, NumericConfig
from linmat.core.matrix import Matrix, as_matrix
from linmat.utils.scalar import clamp_angle_degs, deg2rad, rad2deg
from linmat.utils.types import ArrayLike, FloatArray, Real, Shape

logger = logging.getLogger(__name__)

VEC_SIZES: Tuple[int, ...] = (2, 3, 4)

OptionalFloat = Optional[float]


def _check_size(size: Any) -> int:
    if size not in VEC_SIZES:
        raise ValueError(f"Vector size must be one of {VEC_SIZES}, got {size!r}.")
    return int(size)


def _axis(i: int, name: str) -> property:
    def getter(self: "Vec") -> OptionalFloat:
        if self.size <= i:
            return None
        return self._matrix.get(i, 0)

    def setter(self: "Vec", value: Real) -> None:
        if self.size <= i:
            return
        self._matrix.set(value, i, 0)

    return property(
        getter,
        setter,
        doc=f"The {name} component, or None if the vector has no {name} axis "
            f"(assigning to a missing axis does nothing).",
    )


class Vec:
    """
    Column vector of 2, 3 or 4 components.

    A Vec owns a Matrix of shape (size, 1) and delegates storage and
    arithmetic to it. Any vector-shaped Matrix can be turned into a Vec of
    a chosen size with `Vec.to_vec`, which truncates or zero-pads.

    Parameters
    ----------
    size : {2, 3, 4}
        Number of components.
    data : array_like, optional
        The `size` component values, in x, y, z, w order. Defaults to zeros.

    Notes
    -----
    The axis accessors (`x`, `y`, `z`, `w` and the `xy`, `xyz`, `xyzw`,
    `wxyz` tuples) report an axis the vector does not have as None; this is
    not an error. Out-of-range positional access through `get_axis` raises.
    """
    __slots__ = ("_matrix",)

    def __init__(self, size: int, data: Optional[ArrayLike] = None):
        self._matrix = Matrix((_check_size(size), 1), data)

    @classmethod
    def _wrap(cls, matrix: Matrix) -> "Vec":
        # Adopts a (size, 1) matrix that nothing else references.
        vec = cls.__new__(cls)
        vec._matrix = matrix
        return vec

    ############################
    # CASTING
    ############################

    @staticmethod
    def is_vec(size: int, mat: Any) -> bool:
        """True if `mat` is a vector-shaped matrix (n x 1) with n == size."""
        mat = as_matrix(mat)
        return mat.is_vector and mat.shape[0] == size

    @classmethod
    def to_vec(cls, size: int, mat: Any) -> "Vec":
        """
        Cast a vector-shaped matrix to a Vec of `size` components.

        The first min(size, n) values are copied and the remaining slots are
        zero-filled, e.g. casting (100, -200) to size 4 gives
        (100, -200, 0, 0) and casting that back to size 2 gives (100, -200).

        Raises
        ------
        ValueError
            If `size` is not 2, 3 or 4, or `mat` is not an n x 1 matrix.
        """
        size = _check_size(size)
        mat = as_matrix(mat)
        if not mat.is_vector:
            raise ValueError(
                f"Cannot convert matrix {'x'.join(map(str, mat.shape))} to vector-{size}."
            )
        n = min(size, mat.shape[0])
        buf = np.zeros(size, dtype=float)
        buf[:n] = mat.data[:n]
        return cls._wrap(Matrix((size, 1), buf))

    def is_vec_of_size(self, mat: Any) -> bool:
        return Vec.is_vec(self.size, mat)

    def cast(self, mat: Any) -> "Vec":
        """Cast `mat` to a Vec with as many components as this one."""
        return Vec.to_vec(self.size, mat)

    def copy(self) -> "Vec":
        return self.cast(self._matrix)

    ############################
    # STORAGE
    ############################

    @property
    def size(self) -> int:
        return self._matrix.shape[0]

    @property
    def shape(self) -> Shape:
        return self._matrix.shape

    @property
    def data(self) -> FloatArray:
        return self._matrix.data

    @property
    def matrix(self) -> Matrix:
        """Independent (size, 1) Matrix copy of this vector."""
        return self._matrix.copy()

    def get(self, *indices: int) -> float:
        return self._matrix.get(*indices)

    def set(self, value: Real, *indices: int) -> None:
        self._matrix.set(value, *indices)

    ############################
    # AXES
    ############################

    x = _axis(0, "x")
    y = _axis(1, "y")
    z = _axis(2, "z")
    w = _axis(3, "w")

    @property
    def xy(self) -> Tuple[OptionalFloat, OptionalFloat]:
        return (self.x, self.y)

    @property
    def xyz(self) -> Tuple[OptionalFloat, OptionalFloat, OptionalFloat]:
        return (self.x, self.y, self.z)

    @property
    def xyzw(self) -> Tuple[OptionalFloat, OptionalFloat, OptionalFloat, OptionalFloat]:
        return (self.x, self.y, self.z, self.w)

    @property
    def wxyz(self) -> Tuple[OptionalFloat, OptionalFloat, OptionalFloat, OptionalFloat]:
        return (self.w, self.x, self.y, self.z)

    def get_axis(self, i: int) -> float:
        """
        Component `i` in x, y, z, w order.

        Raises
        ------
        IndexError
            If i is outside [0, size).
        ValueError
            If i is not integral.
        """
        if i < 0 or i >= self.size:
            raise IndexError(f"Index {i} is not on [0, {self.size}).")
        if isinstance(i, bool) or i % 1 != 0:
            raise ValueError(f"Index {i} is not integer.")
        return self._matrix.get(int(i), 0)

    ############################
    # GEOMETRY
    ############################

    @property
    def mag_squared(self) -> float:
        d = self._matrix.data
        return float(np.dot(d, d))

    @property
    def mag(self) -> float:
        return math.sqrt(self.mag_squared)

    def unit(self) -> "Vec":
        """
        Scale this vector to unit length, in place.

        A zero vector is left unchanged.
        """
        mag_squared = self.mag_squared
        if mag_squared > 0:
            self._matrix.with_mul_scalar(1.0 / math.sqrt(mag_squared))
        else:
            logger.debug("Normalizing a zero vector, left unchanged")
        return self

    def to_unit(self) -> "Vec":
        return self.copy().unit()

    def dot(self, other: Any) -> float:
        """
        Dot product over this vector's components.

        `other` is cast to this vector's size first, so a longer vector is
        truncated and a shorter one zero-extended.
        """
        vec = self.cast(other)
        return float(np.dot(self._matrix.data, vec._matrix.data))

    def _projection_factor(self, other: Any) -> float:
        mag_squared = self.mag_squared
        if mag_squared == 0:
            raise ValueError("Cannot project onto a zero vector.")
        return self.dot(other) / mag_squared

    def project(self, other: Any) -> "Vec":
        """Projection of `other` onto this vector, as a new vector."""
        return Vec._wrap(self._matrix.mul_scalar(self._projection_factor(other)))

    def with_project(self, other: Any) -> "Vec":
        """Replace this vector by the projection of `other` onto it."""
        self._matrix.with_mul_scalar(self._projection_factor(other))
        return self

    def get_angle(self) -> OptionalFloat:
        """
        Angle of a 2D vector from the +x axis, in degrees on [0, 360).

        None for vectors that are not 2D.
        """
        if self.size != 2:
            return None
        return clamp_angle_degs(rad2deg(math.atan2(self.y, self.x)))

    def rotate(self, angle: float) -> "Vec":
        """
        Rotate a 2D vector counterclockwise about the origin, in place.

        `angle` is in degrees. The x component is carried along the rotated
        x basis and the y component along the y basis, which sits 90 degrees
        further. Vectors that are not 2D are returned unchanged.
        """
        if self.size != 2:
            logger.debug("rotate() ignored on a %d-vector", self.size)
            return self
        x, y = self.xy
        angle_x = deg2rad(angle)
        angle_y = deg2rad(angle + 90.0)
        self.x = x * math.cos(angle_x) + y * math.cos(angle_y)
        self.y = x * math.sin(angle_x) + y * math.sin(angle_y)
        return self

    def to_rotated(self, angle: float) -> "Vec":
        return self.copy().rotate(angle)

    def get_cross_mat(self) -> Matrix:
        """
        Skew-symmetric matrix K with K @ v == self x v.

        This vector is cast to 3 components first.
        """
        x, y, z = Vec.to_vec(3, self).xyz
        return Matrix((3, 3), [
             0.0, -z,    y,
             z,    0.0, -x,
            -y,    x,    0.0,
        ])

    def cross(self, other: Any) -> "Vec":
        """Cross product self x other as a 3-vector."""
        b = Vec.to_vec(3, other)
        return Vec.to_vec(3, self.get_cross_mat().post_mul(b))

    ############################
    # ARITHMETIC
    ############################

    def add(self, other: Any) -> "Vec":
        return Vec._wrap(self._matrix.add(other))

    def with_add(self, other: Any) -> "Vec":
        self._matrix.with_add(other)
        return self

    def sub(self, other: Any) -> "Vec":
        return Vec._wrap(self._matrix.sub(other))

    def with_sub(self, other: Any) -> "Vec":
        self._matrix.with_sub(other)
        return self

    def mul_scalar(self, a: Real) -> "Vec":
        return Vec._wrap(self._matrix.mul_scalar(a))

    def with_mul_scalar(self, a: Real) -> "Vec":
        self._matrix.with_mul_scalar(a)
        return self

    def allclose(
        self,
        other: Any,
        *,
        rtol: Optional[float] = None,
        atol: Optional[float] = None,
        config: NumericConfig = DEFAULT_CONFIG,
    ) -> bool:
        return self._matrix.allclose(other, rtol=rtol, atol=atol, config=config)

    def to_array(self) -> FloatArray:
        """Components as a flat numpy array of shape (size,)."""
        return self._matrix.data

    ############################
    # PYTHON PROTOCOL
    ############################

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec):
            return NotImplemented
        return self._matrix == other._matrix

    __hash__ = None  # mutable

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[float]:
        return iter(self._matrix.data.tolist())

    def __add__(self, other: Any) -> "Vec":
        return self.add(other)

    def __sub__(self, other: Any) -> "Vec":
        return self.sub(other)

    def __mul__(self, a: Any) -> "Vec":
        if not isinstance(a, numbers.Real):
            return NotImplemented
        return self.mul_scalar(a)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec":
        return self.mul_scalar(-1.0)

    def __repr__(self) -> str:
        return f"Vec({self.size}, {self._matrix.data.tolist()})"


__all__ = ["Vec", "VEC_SIZES"]
