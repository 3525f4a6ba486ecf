"""Per-frame ray fields handed to a renderer.

Mode A (:class:`RadialField`) keeps one radius per fixed direction and is
drawn as a closed outline. Mode B (:class:`TriangleFanField`) turns a
rotating fan of rays into a filled triangle list.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from rayfield.backend import to_numpy
from rayfield.field.buffer import RayBuffer, TriangleBuffer
from rayfield.field.evaluator import RayFieldEvaluator
from rayfield.probe import RadialProbe, RotatingFanProbe

if TYPE_CHECKING:
    from rayfield.backend import ArrayModule
    from rayfield.field.buffer import RayFrame, TriangleFrame
    from rayfield.field.config import FieldConfig
    from rayfield.geometry import Vec2
    from rayfield.raymarch.config import RayMarchConfig
    from rayfield.scene import Scene

logger = logging.getLogger(__name__)


def _origin_array(origin: Vec2) -> np.ndarray:
    return np.asarray(origin.to_tuple(), dtype=np.float64)


class RadialField:
    """Radial magnitude field: ``group_count * group_size`` evenly spread rays."""

    INITIAL_RADIUS: float = 1.0

    def __init__(
            self,
            scene: Scene,
            march_config: RayMarchConfig,
            field_config: FieldConfig,
            xp: ArrayModule = np,
    ) -> None:
        """Allocate the ray buffer and the evaluator."""
        self.scene = scene
        self.field_config = field_config
        self.probe = RadialProbe(num_rays=field_config.ray_count)
        self.buffer = RayBuffer(
            to_numpy(xp, self.probe.ray_directions(xp)),
            initial_radius=self.INITIAL_RADIUS,
            origin=scene.origin,
        )
        self.evaluator = RayFieldEvaluator(march_config, field_config, scene.barriers, xp=xp)
        logger.info(
            "radial field: %d rays in %d groups, %d barriers",
            field_config.ray_count,
            field_config.group_count,
            len(scene.barriers),
        )

    @property
    def frame_delay_ms(self) -> int:
        return self.field_config.frame_delay_ms

    def move_to(self, origin: Vec2) -> None:
        self.scene = self.scene.moved_to(origin)

    def step(self) -> RayFrame:
        """Evaluate and publish one frame."""
        return self.evaluator.evaluate_frame(self.scene.origin, self.buffer)

    def vertices(self) -> np.ndarray:
        return self.buffer.snapshot().vertices()

    def polyline(self) -> np.ndarray:
        """Closed (N + 1, 2) outline of the last published frame.

        The outline stays centred on the origin the frame was measured from
        until the next :meth:`step`, even after :meth:`move_to`.
        """
        pts = self.buffer.snapshot().points()
        return np.concatenate([pts, pts[:1]], axis=0)


class TriangleFanField:
    """Triangle fan field built from a rotating set of ray groups.

    Each group owns ``group_size + 1`` edge rays; consecutive edge hits and
    the origin form one triangle per sub-ray. The fan phase advances by
    ``angular_speed`` per frame, which is the only state carried between
    frames.
    """

    def __init__(
            self,
            scene: Scene,
            march_config: RayMarchConfig,
            field_config: FieldConfig,
            xp: ArrayModule = np,
    ) -> None:
        """Allocate the triangle buffer and the evaluator."""
        self.scene = scene
        self.xp = xp
        self.field_config = field_config
        self.probe = RotatingFanProbe(
            group_count=field_config.group_count,
            group_size=field_config.group_size,
            angular_speed=field_config.angular_speed,
        )
        self.buffer = TriangleBuffer(field_config.ray_count)
        self.evaluator = RayFieldEvaluator(march_config, field_config, scene.barriers, xp=xp)
        self.frame_index = 0
        logger.info(
            "triangle fan: %d groups x %d sub-rays, %.4f rad/frame",
            field_config.group_count,
            field_config.group_size,
            field_config.angular_speed,
        )

    @property
    def frame_delay_ms(self) -> int:
        return self.field_config.frame_delay_ms

    def move_to(self, origin: Vec2) -> None:
        self.scene = self.scene.moved_to(origin)

    def hit_points(self, frame_index: int) -> np.ndarray:
        """(G, S + 1, 2) edge hit points for the given frame."""
        probe = self.probe
        directions = to_numpy(self.xp, probe.ray_directions(self.xp, frame_index))
        radii = self.evaluator.evaluate(self.scene.origin, directions)
        pts = _origin_array(self.scene.origin)[None, :] + radii[:, None] * directions
        return pts.reshape(probe.group_count, probe.edges_per_group, 2)

    def step(self) -> TriangleFrame:
        """Evaluate, publish and advance the fan by one frame."""
        probe = self.probe
        hits = self.hit_points(self.frame_index)

        origin = np.broadcast_to(
            _origin_array(self.scene.origin),
            (probe.group_count, probe.group_size, 2),
        )
        triangles = np.stack([origin, hits[:, :-1], hits[:, 1:]], axis=2)

        frame = self.buffer.publish(triangles.reshape(-1, 3, 2))
        self.frame_index += 1
        return frame

    def vertices(self) -> np.ndarray:
        return self.buffer.snapshot().vertices()
