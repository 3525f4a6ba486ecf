from __future__ import annotations

import math
from typing import Any


def normalize_batch(xp: Any, v: Any) -> Any:
    """Normalize rows of an (..., D) array, leaving zero rows at zero."""
    n = xp.linalg.norm(v, axis=-1, keepdims=True)
    n = xp.where(n > 0.0, n, 1.0)
    return v / n


def clamp_float(x: float, lo: float, hi: float) -> float:
    """Clamp a Python float to [lo, hi]."""
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def is_positive_finite(x: float) -> bool:
    return math.isfinite(x) and x > 0.0


def turn_angles(xp: Any, count: int, phase: float = 0.0) -> Any:
    """Angles ``phase + i * 2pi / count`` for ``i in range(count)``."""
    step = 2.0 * math.pi / count
    return phase + step * xp.arange(count, dtype=xp.float64)
