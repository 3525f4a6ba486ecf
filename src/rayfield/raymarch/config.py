from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from rayfield.math_utils import is_positive_finite

if TYPE_CHECKING:
    from rayfield.geometry import Vec2


@dataclass(frozen=True, slots=True)
class RayMarchConfig:
    """Step length and range of a single probe ray.

    step_length:
        Length of every probe segment. Each advance moves the probe by
        exactly this much along its direction.
    max_dist:
        Range of a ray; rays that see nothing report this distance.
    """

    step_length: float = 0.01
    max_dist: float = 2.0

    def __post_init__(self) -> None:
        if not is_positive_finite(self.step_length):
            msg = f"step_length must be a positive finite number, got {self.step_length!r}"
            raise ValueError(msg)
        if not is_positive_finite(self.max_dist):
            msg = f"max_dist must be a positive finite number, got {self.max_dist!r}"
            raise ValueError(msg)

    @property
    def max_steps(self) -> int:
        """Upper bound on advances before a ray runs out of range."""
        return int(self.max_dist / self.step_length) + 1


Termination = Literal["hit", "far"]


@dataclass(frozen=True, slots=True)
class RayMarchResult:
    distance: float
    termination: Termination
    steps: int
    point: Vec2
