from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import numpy as np

from rayfield.backend import to_numpy
from rayfield.geometry import Vec2
from rayfield.raymarch.marcher import BatchMarcher, RayMarcher

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from rayfield.backend import ArrayModule
    from rayfield.field.buffer import RayBuffer, RayFrame
    from rayfield.field.config import FieldConfig
    from rayfield.geometry import BarrierSet
    from rayfield.raymarch.config import RayMarchConfig

logger = logging.getLogger(__name__)

GroupResult = list[tuple[int, float]]


def partition(count: int, group_count: int) -> list[range]:
    """Split ``range(count)`` into ``group_count`` contiguous equal ranges."""
    if group_count <= 0:
        msg = f"group_count must be positive, got {group_count!r}"
        raise ValueError(msg)
    if count <= 0 or count % group_count:
        msg = f"{count} rays cannot be split into {group_count} equal groups"
        raise ValueError(msg)
    size = count // group_count
    return [range(g * size, (g + 1) * size) for g in range(group_count)]


def merge_groups(count: int, groups: Iterable[GroupResult]) -> np.ndarray:
    """Gather ``(index, value)`` pairs from all groups into a new (count,) array.

    Groups may arrive in any order; every index must appear exactly once.
    """
    out = np.empty((count,), dtype=np.float64)
    seen = np.zeros((count,), dtype=bool)
    for group in groups:
        for idx, value in group:
            if seen[idx]:
                msg = f"ray {idx} was evaluated twice"
                raise ValueError(msg)
            seen[idx] = True
            out[idx] = value
    if not seen.all():
        missing = np.flatnonzero(~seen)
        msg = f"{missing.size} rays were never evaluated, first is {int(missing[0])}"
        raise ValueError(msg)
    return out


class RayFieldEvaluator:
    """Evaluates a full set of rays per frame, one worker task per group.

    A fresh pool is created per call and joined before returning, so the
    caller blocks until every group is done and only ever sees whole frames.
    """

    def __init__(
            self,
            march_config: RayMarchConfig,
            field_config: FieldConfig,
            barriers: BarrierSet,
            xp: ArrayModule = np,
    ) -> None:
        """Initialise the evaluator."""
        self.march_config = march_config
        self.field_config = field_config
        self.barriers = barriers
        self.xp = xp
        self.marcher = RayMarcher(march_config, barriers)
        self.batch_marcher = BatchMarcher(xp, march_config, barriers) if field_config.vectorized else None

    def _evaluate_group(self, origin: Vec2, directions: np.ndarray, indices: range) -> GroupResult:
        if self.batch_marcher is not None:
            radii = to_numpy(self.xp, self.batch_marcher.march(origin, self.xp.asarray(directions)))
            return [(idx, float(r)) for idx, r in zip(indices, radii)]

        return [
            (idx, self.marcher.march(origin, Vec2(float(d[0]), float(d[1]))))
            for idx, d in zip(indices, directions)
        ]

    def evaluate(self, origin: Vec2, directions: Any) -> np.ndarray:
        """March every direction from ``origin``; returns (N,) distances."""
        directions = np.asarray(to_numpy(self.xp, directions), dtype=np.float64)
        count = directions.shape[0]
        groups = partition(count, self.field_config.group_count)

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=len(groups), thread_name_prefix="rayfield") as pool:
            futures = [
                pool.submit(self._evaluate_group, origin, directions[r.start:r.stop].copy(), r)
                for r in groups
            ]
            results: Sequence[GroupResult] = [f.result() for f in futures]

        radii = merge_groups(count, results)
        logger.debug(
            "evaluated %d rays in %d groups in %.2f ms",
            count,
            len(groups),
            (time.perf_counter() - start) * 1000.0,
        )
        return radii

    def evaluate_frame(self, origin: Vec2, buffer: RayBuffer) -> RayFrame:
        """Re-march the buffer's rays and publish the new radii."""
        frame = buffer.snapshot()
        radii = self.evaluate(origin, frame.directions)
        return buffer.publish(radii, origin=origin)
