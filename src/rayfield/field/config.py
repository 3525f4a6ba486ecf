from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldConfig:
    """How a frame of rays is laid out and scheduled.

    group_count:
        Number of ray groups, one worker task per group.
    group_size:
        Rays per group.
    frame_delay_ms:
        Target time between frames for animated output.
    angular_speed:
        Rotation of the triangle fan per frame, radians.
    vectorized:
        March each group with array operations instead of ray by ray.
    """

    group_count: int = 16
    group_size: int = 4
    frame_delay_ms: int = 24
    angular_speed: float = 0.0
    vectorized: bool = False

    def __post_init__(self) -> None:
        for name in ("group_count", "group_size", "frame_delay_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise ValueError(msg)
        if not math.isfinite(self.angular_speed):
            msg = f"angular_speed must be finite, got {self.angular_speed!r}"
            raise ValueError(msg)

    @property
    def ray_count(self) -> int:
        return self.group_count * self.group_size
