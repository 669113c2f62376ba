from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class DeterminantMethod(str, Enum):
    """
    Strategy used by `Matrix.det` for matrices of size >= 4.

    Sizes 1, 2 and 3 always use their closed forms.

    BAREISS
        Fraction-free Gaussian elimination. Every division is exact for
        integer-valued input, so integer matrices get exact determinants.
    LU
        Determinant from an LU factorization (numpy.linalg.det). Faster on
        large matrices, subject to rounding.
    DIAGONAL_WRAP
        Generalized rule of Sarrus: sum over every starting column of the
        wrapped forward diagonal product minus the wrapped backward diagonal
        product. Exact up to 3x3 only; kept for compatibility with results
        computed by that scheme.
    """
    BAREISS = "BAREISS"
    LU = "LU"
    DIAGONAL_WRAP = "DIAGONAL_WRAP"


@dataclass(frozen=True, slots=True)
class NumericConfig:
    """
    Numeric tolerances and strategy switches shared by the package.

    Parameters
    ----------
    epsilon
        Absolute threshold used by `epsilon_equals` when none is given.
    rtol, atol
        Relative and absolute tolerances used by `Matrix.allclose` and
        `Vec.allclose` (same meaning as in numpy.allclose).
    det_method
        Determinant strategy for matrices of size >= 4.

    Notes
    -----
    `Matrix.det`, `Matrix.allclose`, `Vec.allclose` and `epsilon_equals`
    take a `config` argument that defaults to `DEFAULT_CONFIG`.
    """
    epsilon: float = 0.001
    rtol: float = 1e-9
    atol: float = 1e-12
    det_method: DeterminantMethod = DeterminantMethod.BAREISS

    def validate(self) -> None:
        for name in ("epsilon", "rtol", "atol"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}.")
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}.")
        if not isinstance(self.det_method, DeterminantMethod):
            raise ValueError(f"Unknown det_method: {self.det_method!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "epsilon": float(self.epsilon),
            "rtol": float(self.rtol),
            "atol": float(self.atol),
            "det_method": self.det_method.value,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "NumericConfig":
        cfg = cls(
            epsilon=float(d.get("epsilon", 0.001)),
            rtol=float(d.get("rtol", 1e-9)),
            atol=float(d.get("atol", 1e-12)),
            det_method=DeterminantMethod(d.get("det_method", DeterminantMethod.BAREISS.value)),
        )
        cfg.validate()
        return cfg


DEFAULT_CONFIG: NumericConfig = NumericConfig()
DEFAULT_CONFIG.validate()
