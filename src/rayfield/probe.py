from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rayfield.math_utils import turn_angles

if TYPE_CHECKING:
    from rayfield.backend import ArrayModule


@dataclass(frozen=True, slots=True)
class RadialProbe:
    """Emits ``num_rays`` unit directions evenly spread over a full turn.

    Ray ``i`` points at angle ``i * 2pi / num_rays`` measured from +x
    toward +y.
    """

    num_rays: int

    def __post_init__(self) -> None:
        if self.num_rays <= 0:
            msg = f"num_rays must be positive, got {self.num_rays!r}"
            raise ValueError(msg)

    def ray_directions(self, xp: ArrayModule) -> Any:
        """Return (num_rays, 2) unit directions."""
        theta = turn_angles(xp, self.num_rays)
        return xp.stack([xp.cos(theta), xp.sin(theta)], axis=-1)


@dataclass(frozen=True, slots=True)
class RotatingFanProbe:
    """Fan of ``group_count`` wedges, each cut into ``group_size`` sub-rays.

    Directions are computed from the slot index and a phase angle; nothing
    is stored per ray. Wedge ``g`` spans
    ``[phase + g * 2pi / G, phase + (g + 1) * 2pi / G]`` and has
    ``group_size + 1`` edge directions, the first and last shared in angle
    with the neighbouring wedges.

    Parameters
    ----------
    group_count:
        Number of wedges G.
    group_size:
        Sub-rays S per wedge.
    angular_speed:
        Phase advance per frame, radians.

    """

    group_count: int
    group_size: int
    angular_speed: float = 0.0

    def __post_init__(self) -> None:
        if self.group_count <= 0 or self.group_size <= 0:
            msg = (
                "group_count and group_size must be positive, "
                f"got {self.group_count!r} and {self.group_size!r}"
            )
            raise ValueError(msg)
        if not math.isfinite(self.angular_speed):
            msg = f"angular_speed must be finite, got {self.angular_speed!r}"
            raise ValueError(msg)

    @property
    def edges_per_group(self) -> int:
        return self.group_size + 1

    def phase(self, frame_index: int) -> float:
        return (frame_index * self.angular_speed) % (2.0 * math.pi)

    def ray_directions(self, xp: ArrayModule, frame_index: int = 0) -> Any:
        """Return (G * (S + 1), 2) edge directions, wedge by wedge."""
        wedge = 2.0 * math.pi / self.group_count
        group = xp.arange(self.group_count, dtype=xp.float64)[:, None]
        k = xp.arange(self.edges_per_group, dtype=xp.float64)[None, :]
        theta = (self.phase(frame_index) + wedge * (group + k / self.group_size)).reshape(-1)
        return xp.stack([xp.cos(theta), xp.sin(theta)], axis=-1)
