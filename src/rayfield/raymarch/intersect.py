"""Segment-vs-segment hit distances.

The probe ``p`` and the barrier ``(q0, q1)`` are expressed relative to the
probe start: ``a = q0 - p.a``, ``b = q1 - p.a``, ``v = p.b - p.a``. Solving
``v = inv.x * a + inv.y * b`` tells where ``v`` sits relative to the cone
spanned by the barrier:

- ``inv.x >= 0 and inv.y >= 0``: the probe points between the endpoints,
- ``inv.x + inv.y >= 1``: the probe end lies on or past the barrier line.

When both hold, ``inv / (inv.x + inv.y)`` are the barycentric weights of the
crossing point on the barrier, and its distance to the probe start is the
hit distance.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rayfield.backend import ArrayModule
    from rayfield.geometry import BarrierSet, Line


def segment_intersect_distance(probe: Line, barrier: Line) -> float | None:
    """Distance from ``probe.a`` to where ``probe`` crosses ``barrier``.

    Returns None when the probe does not reach the barrier, points away from
    it, or the configuration is degenerate (parallel, collinear, zero length).
    """
    a = barrier.a - probe.a
    b = barrier.b - probe.a
    v = probe.b - probe.a

    det = a.x * b.y - b.x * a.y
    if det == 0.0:
        return None

    inv_x = (v.x * b.y - b.x * v.y) / det
    inv_y = (v.y * a.x - a.y * v.x) / det
    total = inv_x + inv_y

    if not (inv_x >= 0.0 and inv_y >= 0.0 and total >= 1.0):
        return None

    wx = inv_x / total
    wy = inv_y / total
    hx = wx * a.x + wy * b.x
    hy = wx * a.y + wy * b.y
    dist = math.sqrt(hx * hx + hy * hy)
    if not math.isfinite(dist):
        return None
    return dist


def nearest_barrier_distance(probe: Line, barriers: BarrierSet) -> float | None:
    """Smallest hit distance of ``probe`` over all barriers, or None."""
    best: float | None = None
    for barrier in barriers:
        d = segment_intersect_distance(probe, barrier)
        if d is not None and (best is None or d < best):
            best = d
    return best


def nearest_barrier_distances(xp: ArrayModule, starts: Any, ends: Any, barriers: Any) -> Any:
    """Vectorised :func:`nearest_barrier_distance`.

    starts, ends: (K, 2) probe segment endpoints
    barriers:     (M, 2, 2) as produced by ``BarrierSet.as_array``
    returns:      (K,) distances, nan where nothing is hit
    """
    k = starts.shape[0]
    if barriers.shape[0] == 0:
        return xp.full((k,), xp.nan, dtype=xp.float64)

    a = barriers[None, :, 0, :] - starts[:, None, :]  # (K,M,2)
    b = barriers[None, :, 1, :] - starts[:, None, :]
    v = (ends - starts)[:, None, :]  # (K,1,2)

    ax, ay = a[..., 0], a[..., 1]
    bx, by = b[..., 0], b[..., 1]
    vx, vy = v[..., 0], v[..., 1]

    det = ax * by - bx * ay
    nonzero = det != 0.0
    det = xp.where(nonzero, det, 1.0)

    inv_x = (vx * by - bx * vy) / det
    inv_y = (vy * ax - ay * vx) / det
    total = inv_x + inv_y

    ok = nonzero & (inv_x >= 0.0) & (inv_y >= 0.0) & (total >= 1.0)
    total = xp.where(ok, total, 1.0)

    wx = inv_x / total
    wy = inv_y / total
    hx = wx * ax + wy * bx
    hy = wx * ay + wy * by
    dist = xp.sqrt(hx * hx + hy * hy)

    ok = ok & xp.isfinite(dist)
    dist = xp.where(ok, dist, xp.inf)

    nearest = xp.min(dist, axis=1)
    return xp.where(xp.isinf(nearest), xp.nan, nearest)
