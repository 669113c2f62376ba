from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray, ArrayLike

FloatArray = NDArray[np.floating]
IntArray   = NDArray[np.integer]

Real = Union[int, float, np.integer, np.floating]

Shape = Tuple[int, ...]
Indices = Tuple[int, ...]

# One slicing argument per axis: a single index, (start, stop) or (start, stop, step)
AxisRange = Union[int, Tuple[int, int], Tuple[int, int, int], Sequence[int]]

__all__ = [
    "ArrayLike",
    "FloatArray", "IntArray",
    "Real", "Shape", "Indices", "AxisRange",
]
