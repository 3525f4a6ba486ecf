from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rayfield.geometry import BarrierSet, Line, Vec2
from rayfield.math_utils import clamp_float, normalize_batch
from rayfield.protocols import RayMarcher2D
from rayfield.raymarch.config import RayMarchConfig, RayMarchResult, Termination
from rayfield.raymarch.intersect import nearest_barrier_distance, nearest_barrier_distances

if TYPE_CHECKING:
    from rayfield.backend import ArrayModule


def _march(
        origin: Vec2,
        direction: Vec2,
        barriers: BarrierSet,
        cfg: RayMarchConfig,
) -> tuple[float, Termination, int]:
    max_dist = cfg.max_dist
    segment = Line(origin, origin + cfg.step_length * direction.normalized())
    travelled = 0.0
    steps = 0

    while True:
        hit = nearest_barrier_distance(segment, barriers)
        if hit is not None:
            # the last step may carry the probe slightly past max_dist
            return clamp_float(travelled + hit, 0.0, max_dist), "hit", steps

        if travelled >= max_dist or steps >= cfg.max_steps:
            return max_dist, "far", steps

        length = segment.length()
        if length <= 0.0:
            # zero direction, nothing can ever be hit
            return max_dist, "far", steps

        travelled += length
        segment = Line(segment.b, 2.0 * segment.b - segment.a)
        steps += 1


def march(
        origin: Vec2,
        direction: Vec2,
        barriers: BarrierSet,
        step_length: float,
        max_dist: float,
) -> float:
    """Distance a probe travels from ``origin`` along ``direction``.

    The probe is a segment of ``step_length`` that keeps moving forward by
    its own length until it crosses a barrier or has travelled ``max_dist``.
    """
    cfg = RayMarchConfig(step_length=step_length, max_dist=max_dist)
    return _march(origin, direction, barriers, cfg)[0]


class RayMarcher(RayMarcher2D):
    """Step-wise segment marcher against a fixed barrier set."""

    def __init__(self, config: RayMarchConfig, barriers: BarrierSet) -> None:
        """Initialise the marcher."""
        self.cfg = config
        self.barriers = barriers

    def march(self, origin: Vec2, direction: Vec2) -> float:
        return _march(origin, direction, self.barriers, self.cfg)[0]

    def trace(self, origin: Vec2, direction: Vec2) -> RayMarchResult:
        """March and report how and where the ray ended."""
        distance, termination, steps = _march(origin, direction, self.barriers, self.cfg)
        return RayMarchResult(
            distance=distance,
            termination=termination,
            steps=steps,
            point=origin + distance * direction.normalized(),
        )


class BatchMarcher:
    """Marches many directions from one origin at once.

    Every ray runs the same loop as :class:`RayMarcher`; rays that are done
    are masked out while the rest keep advancing.
    """

    def __init__(self, xp: ArrayModule, config: RayMarchConfig, barriers: BarrierSet) -> None:
        """Initialise the marcher."""
        self.xp = xp
        self.cfg = config
        self.barriers = barriers
        self._barrier_array = barriers.as_array(xp)

    def march(self, origin: Vec2, directions: Any) -> Any:
        """March.

        origin: single start point
        directions: (K, 2)
        returns: (K,) distances in [0, max_dist]
        """
        xp = self.xp
        cfg = self.cfg

        d = normalize_batch(xp, xp.asarray(directions, dtype=xp.float64).reshape(-1, 2))
        k = d.shape[0]

        starts = xp.broadcast_to(xp.asarray(origin.to_tuple(), dtype=xp.float64), (k, 2)).copy()
        ends = starts + cfg.step_length * d

        travelled = xp.zeros((k,), dtype=xp.float64)
        result = xp.full((k,), cfg.max_dist, dtype=xp.float64)
        active = xp.ones((k,), dtype=bool)
        steps = 0

        while bool(xp.any(active)):
            hit = nearest_barrier_distances(xp, starts, ends, self._barrier_array)
            hit_now = active & ~xp.isnan(hit)
            result = xp.where(hit_now, xp.minimum(travelled + hit, cfg.max_dist), result)
            active = active & ~hit_now

            # rays out of range already hold max_dist
            active = active & (travelled < cfg.max_dist)
            if steps >= cfg.max_steps:
                break

            step = ends - starts
            length = xp.sqrt(step[:, 0] * step[:, 0] + step[:, 1] * step[:, 1])
            active = active & (length > 0.0)

            travelled = xp.where(active, travelled + length, travelled)
            moving = active[:, None]
            starts, ends = xp.where(moving, ends, starts), xp.where(moving, 2.0 * ends - starts, ends)
            steps += 1

        return result
