from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from rayfield.geometry import Vec2


class Drawable2D(Protocol):
    """2D debug drawable contract."""

    def polyline(self, num: int = 2) -> Any:
        """Return a (N,2) polyline suitable for plotting."""
        ...


class RayMarcher2D(Protocol):
    """Anything that turns one probe direction into a travelled distance."""

    def march(self, origin: Vec2, direction: Vec2) -> float:
        ...
