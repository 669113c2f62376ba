from __future__ import annotations

import math
from typing import Optional, Tuple

from linmat.config import DEFAULT_CONFIG, NumericConfig

############################
# SCALAR UTILITIES
############################

EPSILON: float = DEFAULT_CONFIG.epsilon

TAU: float = 2.0 * math.pi


def lerp(a: float, b: float, t: float) -> float:
    """Linearly interpolate from `a` (t = 0) to `b` (t = 1)."""
    return a + t * (b - a)


def epsilon_equals(
    a: float,
    b: float,
    epsilon: Optional[float] = None,
    *,
    config: NumericConfig = DEFAULT_CONFIG,
) -> bool:
    """Return True if `a` lies within `epsilon` (default `config.epsilon`) of `b`, inclusive."""
    if epsilon is None:
        epsilon = config.epsilon
    return abs(a - b) <= epsilon


def clamp_min(value: float, lo: float) -> float:
    return max(value, lo)


def clamp_max(value: float, hi: float) -> float:
    return min(value, hi)


def clamp(value: float, lo: float, hi: float) -> float:
    """
    Clamp `value` into the closed interval spanned by `lo` and `hi`.

    The bounds may be given in either order.
    """
    if lo > hi:
        lo, hi = hi, lo
    return clamp_max(clamp_min(value, lo), hi)


def map_range(value: float, src: Tuple[float, float], dst: Tuple[float, float]) -> float:
    """
    Map `value` linearly from the interval `src` onto the interval `dst`.

    Parameters
    ----------
    value : float
        Value expressed on `src`. It does not need to lie inside `src`.
    src : (2,) tuple
        Source interval (a, b). Must not be degenerate.
    dst : (2,) tuple
        Destination interval (c, d). May be reversed (c > d).

    Returns
    -------
    float
        The mapped value, e.g. map_range(1, (0, 2), (-5, 5)) == 0.

    Raises
    ------
    ValueError
        If src[0] == src[1].
    """
    a, b = src
    c, d = dst
    if a == b:
        raise ValueError(f"Source range {tuple(src)} is degenerate.")
    return (value - a) / (b - a) * (d - c) + c


def mod(a: float, b: float) -> float:
    """
    Unsigned modulus: the remainder of a / b carried into [0, b) for b > 0.

    mod(-10, 3) == 2, where the C-style remainder would give -1.
    """
    if b == 0:
        raise ValueError("Modulus by zero is undefined.")
    return ((a % b) + b) % b


def clamp_angle_rads(angle: float) -> float:
    """Wrap an angle in radians into [0, 2π)."""
    return mod(angle, TAU)


def clamp_angle_degs(angle: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    return mod(angle, 360.0)


def angle_diff_rads(src: float, dst: float) -> float:
    """
    Signed angle in radians that rotates `src` onto `dst` along the shortest way.

    The result lies in (-π, π], e.g. angle_diff_rads(π/4, 7π/4) == -π/2.
    """
    diff = clamp_angle_rads(clamp_angle_rads(dst) - clamp_angle_rads(src))
    if diff > math.pi:
        return diff - TAU
    return diff


def angle_diff_degs(src: float, dst: float) -> float:
    """
    Signed angle in degrees that rotates `src` onto `dst` along the shortest way.

    The result lies in (-180, 180], e.g. angle_diff_degs(10, 350) == -20.
    """
    diff = clamp_angle_degs(clamp_angle_degs(dst) - clamp_angle_degs(src))
    if diff > 180.0:
        return diff - 360.0
    return diff


def deg2rad(x: float) -> float:
    return float(x) * math.pi / 180.0


def rad2deg(x: float) -> float:
    return float(x) * 180.0 / math.pi
