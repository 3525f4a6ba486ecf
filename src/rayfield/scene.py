from __future__ import annotations

from dataclasses import dataclass, replace

from rayfield.geometry import BarrierSet, Vec2
from rayfield.protocols import Drawable2D

DEFAULT_BARRIERS = (
    ((0.5, 0.5), (-0.5, 0.5)),
    ((-0.5, 0.5), (-0.5, -0.5)),
    ((0.0, 0.49), (0.5, 0.4)),
)


@dataclass(frozen=True, slots=True)
class Scene:
    """Complete scene definition: where rays start and what stops them."""

    origin: Vec2
    barriers: BarrierSet

    @property
    def drawables(self) -> list[Drawable2D]:
        return list(self.barriers)

    def moved_to(self, origin: Vec2) -> Scene:
        """Same barriers seen from another origin."""
        return replace(self, origin=origin)


def default_scene() -> Scene:
    """Two walls of a unit box plus a slanted shelf, viewed from (0, 0)."""
    return Scene(origin=Vec2(0.0, 0.0), barriers=BarrierSet.from_points(DEFAULT_BARRIERS))
