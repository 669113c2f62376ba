from __future__ import annotations

import logging
import math
import numbers
from itertools import product
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from linmat.config import DEFAULT_CONFIG, DeterminantMethod, NumericConfig
from linmat.errors import ShapeError
from linmat.utils.scalar import mod
from linmat.utils.types import ArrayLike, AxisRange, FloatArray, Indices, Real, Shape

logger = logging.getLogger(__name__)

MapCallback = Callable[[float, Indices], Real]
VisitCallback = Callable[[float, Indices], Any]

############################
# INDEX HELPERS
############################

def _is_integral(x: Any) -> bool:
    if isinstance(x, (bool, np.bool_)):
        return False
    if isinstance(x, (int, np.integer)):
        return True
    if isinstance(x, (float, np.floating)):
        return math.isfinite(x) and float(x).is_integer()
    return False


def _normalize_index(index: Any, axis: int, *, what: str = "Index", stop: bool = False) -> int:
    """
    Validate one index against an axis of length `axis` and map it onto [0, axis).

    Parameters
    ----------
    index : int
        Index to check. Negative values count from the end of the axis.
    axis : int
        Length of the axis.
    what : str
        Label used in error messages.
    stop : bool
        If True, `index` is an exclusive stop bound and may also equal `axis`
        (the accepted domain becomes [-axis, axis]).

    Returns
    -------
    int
        The normalized, non-negative index.

    Raises
    ------
    ValueError
        If `index` is not integral.
    IndexError
        If `index` lies outside its domain.
    """
    if not _is_integral(index):
        raise ValueError(f"{what} {index!r} is not integer.")
    index = int(index)
    upper = axis if stop else axis - 1
    if index < -axis or index > upper:
        domain = f"[{-axis}, {axis}]" if stop else f"[{-axis}, {axis})"
        raise IndexError(f"{what} {index} is not on {domain}.")
    if index < 0:
        index += axis
    return index


def _resolve_range(rng: AxisRange, axis: int) -> range:
    """
    Turn one slicing argument into the range of indices it selects on an axis.

    A single integer keeps that one index; (start, stop) and
    (start, stop, step) select a half-open range whose default step follows
    the direction from start to stop.
    """
    if isinstance(rng, numbers.Real):
        index = _normalize_index(rng, axis, what="Range value")
        return range(index, index + 1)

    try:
        parts = tuple(rng)
    except TypeError:
        raise ValueError(
            f"Range {rng!r} must be an integer or a (start, stop[, step]) sequence."
        ) from None
    if len(parts) not in (2, 3):
        raise ValueError(f"Range {parts} must have 2 or 3 values, got {len(parts)}.")

    start = _normalize_index(parts[0], axis, what=f"Range {parts}'s start")
    stop = _normalize_index(parts[1], axis, what=f"Range {parts}'s stop", stop=True)

    if len(parts) == 3:
        step = parts[2]
        if not _is_integral(step):
            raise ValueError(f"Range {parts}'s step {step!r} is not integer.")
        step = int(step)
    else:
        step = 1 if stop > start else -1

    if step == 0:
        raise ValueError(f"Range {parts} has a step of 0.")
    if start < stop and step < 0:
        raise ValueError(f"Range {parts} expected {start} -> {stop}, but step {step} was negative.")
    if stop < start and step > 0:
        raise ValueError(f"Range {parts} expected {start} -> {stop}, but step {step} was positive.")
    if start == stop:
        raise ValueError(f"Range {parts} selects no index on an axis of length {axis}.")
    return range(start, stop, step)


def as_matrix(obj: Any) -> "Matrix":
    """
    Return the Matrix behind `obj`.

    Matrices are returned as they are; vectors (`linmat.Vec`) hand out their
    backing matrix. Nothing is copied, so callers must not mutate the result.
    """
    if isinstance(obj, Matrix):
        return obj
    backing = getattr(obj, "_matrix", None)
    if isinstance(backing, Matrix):
        return backing
    raise TypeError(f"Expected a Matrix or a Vec, got {type(obj).__name__}.")


def _shape_str(dim: Shape) -> str:
    return "x".join(str(d) for d in dim)

############################
# MATRIX
############################

class Matrix:
    """
    N-dimensional numeric array stored as one flat, row-major float buffer.

    Parameters
    ----------
    dim : sequence of int
        Axis lengths. At least one axis, every length an integer >= 1.
    data : array_like, optional
        The values in row-major order (last axis varies fastest). Must hold
        exactly prod(dim) numbers. Defaults to zeros. The values are copied.

    Raises
    ------
    ValueError
        If `dim` is empty, contains a non-integral or non-positive length, or
        if `data` does not hold prod(dim) values.

    Notes
    -----
    Every instance owns its buffer. `set`, `fill`, `transpose` and the
    ``with_*`` methods mutate the receiver (all but `set` return it); every
    other operation returns a new, independent matrix. Preconditions are checked
    before anything is written, so a failing in-place call leaves the
    receiver unchanged.

    Most operations (transpose, multiplication, determinant) need a 2D
    matrix; indexing, slicing and elementwise arithmetic work on any number
    of axes.
    """
    __slots__ = ("_dim", "_data")

    def __init__(self, dim: Sequence[int], data: Optional[ArrayLike] = None):
        dim = tuple(dim)
        if len(dim) == 0:
            raise ValueError("Dimensionality 0 is invalid, expected at least one axis.")
        length = 1
        for d in dim:
            if not _is_integral(d):
                raise ValueError(f"Dimension {d!r} is not integer.")
            if d <= 0:
                raise ValueError(f"Dimension {d} is invalid, expected > 0.")
            length *= int(d)

        if data is None:
            buf = np.zeros(length, dtype=float)
        else:
            buf = np.array(data, dtype=float).reshape(-1)
            if buf.size != length:
                raise ValueError(f"Data length expected {length}, got {buf.size}.")

        self._dim: Shape = tuple(int(d) for d in dim)
        self._data: FloatArray = buf

    @classmethod
    def _from_buffer(cls, dim: Shape, buf: FloatArray) -> "Matrix":
        # Adopts a freshly allocated buffer whose length already matches dim.
        mat = cls.__new__(cls)
        mat._dim = tuple(dim)
        mat._data = buf
        return mat

    @classmethod
    def identity(cls, size: int) -> "Matrix":
        """Return the size x size identity matrix."""
        mat = cls((size, size))
        n = mat._dim[0]
        mat._data[:: n + 1] = 1.0
        return mat

    @classmethod
    def zeros(cls, dim: Sequence[int]) -> "Matrix":
        return cls(dim)

    @classmethod
    def from_rows(cls, rows: ArrayLike) -> "Matrix":
        """
        Build a 2D matrix from a nested sequence of rows.

        >>> Matrix.from_rows([[1, 2, 3], [4, 5, 6]]).shape
        (2, 3)
        """
        try:
            arr = np.array(rows, dtype=float)
        except ValueError as e:
            raise ValueError("Rows must all have the same length.") from e
        if arr.ndim != 2:
            raise ValueError(f"Expected a nested sequence of rows, got {arr.ndim} level(s) of nesting.")
        return cls(arr.shape, arr)

    def copy(self) -> "Matrix":
        return Matrix._from_buffer(self._dim, self._data.copy())

    def reshape(self, dim: Sequence[int]) -> "Matrix":
        """Return a new matrix holding the same data under another shape."""
        return Matrix(dim, self._data)

    ############################
    # SHAPE
    ############################

    @property
    def shape(self) -> Shape:
        return self._dim

    @property
    def ndim(self) -> int:
        return len(self._dim)

    @property
    def size(self) -> int:
        """Total number of elements."""
        return int(self._data.size)

    @property
    def data(self) -> FloatArray:
        """Copy of the flat, row-major buffer."""
        return self._data.copy()

    @property
    def is_2d(self) -> bool:
        return len(self._dim) == 2

    @property
    def is_square(self) -> bool:
        return self.is_2d and self._dim[0] == self._dim[1]

    @property
    def is_vector(self) -> bool:
        """True for 2D column matrices (n x 1)."""
        return self.is_2d and self._dim[1] == 1

    def _require_2d(self, action: str) -> None:
        if not self.is_2d:
            raise ShapeError(f"Cannot {action} a non-2D matrix, got a {self.ndim}D matrix.")

    def _require_same_shape(self, other: "Matrix", action: str) -> None:
        if self.ndim != other.ndim:
            raise ShapeError(
                f"Cannot {action} two matrices with mismatching dimensionalities "
                f"{self.ndim} and {other.ndim}."
            )
        if self._dim != other._dim:
            raise ShapeError(
                f"Cannot {action} two matrices with mismatching dimensions "
                f"{_shape_str(self._dim)} and {_shape_str(other._dim)}."
            )

    ############################
    # INDEXING
    ############################

    def get_index(self, *indices: int) -> int:
        """
        Map a multi-index onto its offset in the flat buffer.

        Parameters
        ----------
        *indices : int
            One index per axis. Negative values count from the end of their
            axis, so each index must lie in [-dim[j], dim[j]).

        Returns
        -------
        int
            Row-major offset, accumulated as offset = offset * dim[j] + i_j.

        Raises
        ------
        ValueError
            If the number of indices differs from the number of axes, or an
            index is not integral.
        IndexError
            If an index lies outside its axis.
        """
        if len(indices) != len(self._dim):
            raise ValueError(f"Indices length expected {len(self._dim)}, got {len(indices)}.")
        offset = 0
        for index, axis in zip(indices, self._dim):
            offset = offset * axis + _normalize_index(index, axis)
        return offset

    def get_indices(self, index: int) -> Indices:
        """
        Map a flat offset back onto its multi-index, most significant axis first.

        Raises
        ------
        ValueError
            If `index` is not integral.
        IndexError
            If `index` lies outside [0, size).
        """
        if not _is_integral(index):
            raise ValueError(f"Index {index!r} is not integer.")
        index = int(index)
        if index < 0 or index >= self._data.size:
            raise IndexError(f"Index {index} is not on [0, {self._data.size}).")
        remaining = int(self._data.size)
        indices = []
        for axis in self._dim:
            remaining //= axis
            indices.append(index // remaining)
            index %= remaining
        return tuple(indices)

    def get(self, *indices: int) -> float:
        return float(self._data[self.get_index(*indices)])

    def set(self, value: Real, *indices: int) -> None:
        self._data[self.get_index(*indices)] = value

    ############################
    # BULK OPERATIONS
    ############################

    def fill(self, value: Real = 0.0) -> "Matrix":
        """Fill this matrix with `value`, in place."""
        self._data.fill(value)
        return self

    def to_filled(self, value: Real = 0.0) -> "Matrix":
        return self.copy().fill(value)

    def for_each(self, callback: VisitCallback) -> None:
        """Call `callback(value, indices)` for every element in row-major order."""
        for i, value in enumerate(self._data.tolist()):
            callback(value, self.get_indices(i))

    def includes(self, value: Real) -> bool:
        """Exact membership test. NaN is found if the matrix holds a NaN."""
        if isinstance(value, numbers.Real) and math.isnan(value):
            return bool(np.isnan(self._data).any())
        return bool((self._data == value).any())

    def _mapped(self, callback: MapCallback) -> FloatArray:
        return np.fromiter(
            (callback(value, self.get_indices(i)) for i, value in enumerate(self._data.tolist())),
            dtype=float,
            count=self._data.size,
        )

    def map(self, callback: MapCallback) -> "Matrix":
        """Return a new matrix whose elements are `callback(value, indices)`."""
        return Matrix._from_buffer(self._dim, self._mapped(callback))

    def with_map(self, callback: MapCallback) -> "Matrix":
        """Replace every element by `callback(value, indices)`, in place."""
        # all values are computed before the buffer is touched
        self._data[:] = self._mapped(callback)
        return self

    ############################
    # TRANSPOSE
    ############################

    def transpose(self) -> "Matrix":
        """
        Transpose this 2D matrix in place: new[x, y] = old[y, x].

        The two axis lengths are swapped along with the data.
        """
        self._require_2d("transpose")
        rows, cols = self._dim
        transposed = self._data.reshape(rows, cols).T.flatten()
        self._data[:] = transposed
        self._dim = (cols, rows)
        return self

    def to_transposed(self) -> "Matrix":
        return self.copy().transpose()

    ############################
    # SLICING
    ############################

    def slice(self, *ranges: AxisRange) -> "Matrix":
        """
        Extract a sub-matrix, one range per leading axis.

        Parameters
        ----------
        *ranges : int or (start, stop) or (start, stop, step)
            - an int keeps that single index; the axis is kept with length 1.
            - (start, stop) is half-open; the step is +1 if stop > start
              and -1 otherwise.
            - (start, stop, step) uses an explicit non-zero integer step whose
              sign must agree with the direction from start to stop.
            Negative bounds count from the end of the axis. `start` must lie
            in [-dim, dim) and `stop` in [-dim, dim]. Axes without a range
            are kept whole.

        Returns
        -------
        Matrix
            New matrix with the same number of axes. An axis of a ranged
            dimension holds ceil(|stop - start| / |step|) elements.

        Raises
        ------
        ValueError
            On too many ranges, non-integral bounds, a zero step, a step
            pointing away from stop, or an empty range.
        IndexError
            On bounds outside their axis.

        Examples
        --------
        >>> m = Matrix([2, 3, 4], range(24))
        >>> m.slice(1, (0, 2)).shape
        (1, 2, 4)
        """
        if len(ranges) > len(self._dim):
            raise ValueError(
                f"Too many ranges, expected at most {len(self._dim)}, got {len(ranges)}."
            )
        selected = [
            _resolve_range(ranges[j], axis) if j < len(ranges) else range(axis)
            for j, axis in enumerate(self._dim)
        ]
        new_dim = tuple(len(r) for r in selected)
        buf = np.fromiter(
            (self._data[self.get_index(*idx)] for idx in product(*selected)),
            dtype=float,
            count=math.prod(new_dim),
        )
        return Matrix._from_buffer(new_dim, buf)

    ############################
    # ARITHMETIC
    ############################

    def add(self, other: Any) -> "Matrix":
        """Elementwise sum with a matrix of identical shape."""
        other = as_matrix(other)
        self._require_same_shape(other, "add")
        return Matrix._from_buffer(self._dim, self._data + other._data)

    def with_add(self, other: Any) -> "Matrix":
        other = as_matrix(other)
        self._require_same_shape(other, "add")
        self._data += other._data
        return self

    def sub(self, other: Any) -> "Matrix":
        """Elementwise difference with a matrix of identical shape."""
        other = as_matrix(other)
        self._require_same_shape(other, "subtract")
        return Matrix._from_buffer(self._dim, self._data - other._data)

    def with_sub(self, other: Any) -> "Matrix":
        other = as_matrix(other)
        self._require_same_shape(other, "subtract")
        self._data -= other._data
        return self

    def add_scalar(self, a: Real) -> "Matrix":
        return Matrix._from_buffer(self._dim, self._data + a)

    def with_add_scalar(self, a: Real) -> "Matrix":
        self._data += a
        return self

    def sub_scalar(self, a: Real) -> "Matrix":
        return Matrix._from_buffer(self._dim, self._data - a)

    def with_sub_scalar(self, a: Real) -> "Matrix":
        self._data -= a
        return self

    def mul_scalar(self, a: Real) -> "Matrix":
        return Matrix._from_buffer(self._dim, self._data * a)

    def with_mul_scalar(self, a: Real) -> "Matrix":
        self._data *= a
        return self

    def post_mul(self, other: Any) -> "Matrix":
        """
        Matrix product self @ other.

        Both operands must be 2D and self.shape[1] must equal
        other.shape[0]. The result has shape (self.shape[0], other.shape[1])
        with result[r, c] = sum_i self[r, i] * other[i, c].
        """
        other = as_matrix(other)
        self._require_2d("matrix multiply")
        other._require_2d("matrix multiply")
        rows, inner = self._dim
        if inner != other._dim[0]:
            raise ShapeError(
                f"Cannot matrix multiply with a mismatching dimension: {inner} != {other._dim[0]}."
            )
        cols = other._dim[1]
        prod = self._data.reshape(rows, inner) @ other._data.reshape(inner, cols)
        return Matrix._from_buffer((rows, cols), prod.reshape(-1))

    def pre_mul(self, other: Any) -> "Matrix":
        """Matrix product other @ self."""
        return as_matrix(other).post_mul(self)

    ############################
    # DETERMINANT
    ############################

    def det(
        self,
        method: Optional[Union[DeterminantMethod, str]] = None,
        *,
        config: NumericConfig = DEFAULT_CONFIG,
    ) -> float:
        """
        Determinant of this 2D square matrix.

        Parameters
        ----------
        method : DeterminantMethod or str, optional
            Strategy for sizes >= 4. Defaults to `config.det_method`.
            Sizes 1 and 2 use their closed forms and size 3 the rule of
            Sarrus, whatever the method.
        config : NumericConfig
            Supplies the default method.

        Raises
        ------
        ShapeError
            If the matrix is not 2D or not square.
        """
        self._require_2d("find the determinant of")
        if not self.is_square:
            raise ShapeError(
                f"Cannot find the determinant of a non-square matrix, got a {_shape_str(self._dim)} matrix."
            )
        method = config.det_method if method is None else DeterminantMethod(method)
        size = self._dim[0]
        d = self._data
        if size == 1:
            return float(d[0])
        if size == 2:
            return float(d[0] * d[3] - d[1] * d[2])
        if size == 3 or method is DeterminantMethod.DIAGONAL_WRAP:
            return self._diagonal_wrap_det()
        if method is DeterminantMethod.LU:
            logger.debug("Computing a %dx%d determinant through LU factorization", size, size)
            return float(np.linalg.det(d.reshape(size, size)))
        return self._bareiss_det()

    def _bareiss_det(self) -> float:
        # fraction-free elimination: each division by the previous pivot is exact
        size = self._dim[0]
        a = self._data.reshape(size, size).copy()
        sign = 1.0
        prev = 1.0
        for k in range(size - 1):
            if a[k, k] == 0:
                below = np.flatnonzero(a[k + 1:, k])
                if below.size == 0:
                    return 0.0
                p = k + 1 + int(below[0])
                a[[k, p]] = a[[p, k]]
                sign = -sign
            pivot = a[k, k]
            a[k + 1:, k + 1:] = (
                a[k + 1:, k + 1:] * pivot - np.outer(a[k + 1:, k], a[k, k + 1:])
            ) / prev
            prev = pivot
        return float(sign * a[-1, -1])

    def _diagonal_wrap_det(self) -> float:
        size = self._dim[0]
        total = 0.0
        for col in range(size):
            forward = 1.0
            backward = 1.0
            for i in range(size):
                forward *= self.get(i, int(mod(col + i, size)))
                backward *= self.get(i, int(mod(col - i, size)))
            total += forward - backward
        return total

    ############################
    # PYTHON PROTOCOL
    ############################

    def allclose(
        self,
        other: Any,
        *,
        rtol: Optional[float] = None,
        atol: Optional[float] = None,
        config: NumericConfig = DEFAULT_CONFIG,
    ) -> bool:
        """
        Shape equality plus elementwise closeness within tolerance.

        Tolerances not given explicitly are taken from `config`.
        """
        other = as_matrix(other)
        if self._dim != other._dim:
            return False
        return bool(np.allclose(
            self._data,
            other._data,
            rtol=config.rtol if rtol is None else rtol,
            atol=config.atol if atol is None else atol,
        ))

    def to_array(self) -> FloatArray:
        """Independent numpy array with this matrix's shape."""
        return self._data.reshape(self._dim).copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._dim == other._dim and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # mutable

    def __len__(self) -> int:
        return self._dim[0]

    def __add__(self, other: Any) -> "Matrix":
        return self.add(other)

    def __sub__(self, other: Any) -> "Matrix":
        return self.sub(other)

    def __mul__(self, a: Any) -> "Matrix":
        if not isinstance(a, numbers.Real):
            return NotImplemented
        return self.mul_scalar(a)

    __rmul__ = __mul__

    def __neg__(self) -> "Matrix":
        return self.mul_scalar(-1.0)

    def __matmul__(self, other: Any) -> "Matrix":
        return self.post_mul(other)

    def __repr__(self) -> str:
        return f"Matrix({list(self._dim)}, {self._data.tolist()})"


__all__ = ["Matrix", "as_matrix"]
