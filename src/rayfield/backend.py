from __future__ import annotations

from typing import Any, Literal

import numpy as np

try:
    import cupy as cp  # type: ignore
except ImportError:  # pragma: no cover
    cp = None

ArrayModule = Any

BackendName = Literal["auto", "numpy", "cupy"]


def get_array_module(backend: BackendName = "numpy") -> ArrayModule:
    """Return numpy or cupy depending on availability and request.

    ``"auto"`` prefers CuPy and silently falls back to NumPy, ``"cupy"``
    insists on it.
    """
    if backend == "numpy":
        return np
    if backend == "cupy":
        if cp is None:
            msg = "backend='cupy' requested but CuPy is not available"
            raise RuntimeError(msg)
        return cp
    if backend == "auto":
        return cp if cp is not None else np
    msg = f"Unknown backend {backend!r}"
    raise ValueError(msg)


def is_cupy(xp: ArrayModule) -> bool:
    """Return True if xp is the CuPy module."""
    return cp is not None and xp is cp


def to_numpy(xp: ArrayModule, a: Any) -> np.ndarray:
    """Convert xp array to NumPy for matplotlib."""
    if is_cupy(xp):
        return cp.asnumpy(a)  # type: ignore[union-attr]
    return np.asarray(a)
