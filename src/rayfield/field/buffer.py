from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

import numpy as np

from rayfield.geometry import Vec2


def _frozen(a: Any) -> np.ndarray:
    out = np.array(a, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, slots=True)
class RayFrame:
    """Published state of a :class:`RayBuffer`; arrays are read-only.

    directions: (N, 2) unit ray seeds
    radii:      (N,) distance travelled by each ray
    origin:     where the rays of this frame started
    """

    frame_index: int
    directions: np.ndarray
    radii: np.ndarray
    origin: Vec2 = Vec2(0.0, 0.0)

    def __len__(self) -> int:
        return int(self.radii.shape[0])

    def vertices(self) -> np.ndarray:
        """(N, 3) float32 rows ``(dx, dy, rad)`` for a vertex buffer."""
        return np.concatenate([self.directions, self.radii[:, None]], axis=1).astype(np.float32)

    def points(self) -> np.ndarray:
        """(N, 2) ray end points ``origin + rad * dir``."""
        origin = np.asarray(self.origin.to_tuple(), dtype=np.float64)
        return origin[None, :] + self.radii[:, None] * self.directions


class RayBuffer:
    """Fixed-size direction/radius buffer shared between frames.

    Writers hand over a complete new radii array which replaces the old one
    under the lock, so readers see either the previous or the next frame and
    never a mix of both.
    """

    def __init__(
            self,
            directions: Any,
            initial_radius: float = 1.0,
            origin: Vec2 = Vec2(0.0, 0.0),
    ) -> None:
        """Allocate the buffer once; its size never changes afterwards."""
        directions = _frozen(directions)
        if directions.ndim != 2 or directions.shape[1] != 2:
            msg = f"directions must have shape (N, 2), got {directions.shape}"
            raise ValueError(msg)
        radii = _frozen(np.full((directions.shape[0],), float(initial_radius)))
        self._lock = threading.Lock()
        self._frame = RayFrame(frame_index=0, directions=directions, radii=radii, origin=origin)

    def __len__(self) -> int:
        return len(self._frame)

    def snapshot(self) -> RayFrame:
        with self._lock:
            return self._frame

    def publish(self, radii: Any, origin: Vec2 | None = None) -> RayFrame:
        """Swap in a full frame of radii and return the new frame.

        ``origin`` is where the radii were measured from; it defaults to the
        origin of the previous frame.
        """
        radii = _frozen(radii)
        with self._lock:
            current = self._frame
            if radii.shape != current.radii.shape:
                msg = f"radii must have shape {current.radii.shape}, got {radii.shape}"
                raise ValueError(msg)
            self._frame = RayFrame(
                frame_index=current.frame_index + 1,
                directions=current.directions,
                radii=radii,
                origin=current.origin if origin is None else origin,
            )
            return self._frame


@dataclass(frozen=True, slots=True)
class TriangleFrame:
    """Published triangle list, (T, 3, 2) read-only."""

    frame_index: int
    triangles: np.ndarray

    def __len__(self) -> int:
        return int(self.triangles.shape[0])

    def vertices(self) -> np.ndarray:
        """(3T, 2) float32 positions, three per triangle."""
        return self.triangles.reshape(-1, 2).astype(np.float32)


class TriangleBuffer:
    """Same publish discipline as :class:`RayBuffer` for a triangle list."""

    def __init__(self, triangle_count: int) -> None:
        """Allocate ``triangle_count`` degenerate triangles at the origin."""
        if triangle_count <= 0:
            msg = f"triangle_count must be positive, got {triangle_count!r}"
            raise ValueError(msg)
        self._lock = threading.Lock()
        self._frame = TriangleFrame(frame_index=0, triangles=_frozen(np.zeros((triangle_count, 3, 2))))

    def __len__(self) -> int:
        return len(self._frame)

    def snapshot(self) -> TriangleFrame:
        with self._lock:
            return self._frame

    def publish(self, triangles: Any) -> TriangleFrame:
        triangles = _frozen(triangles)
        with self._lock:
            current = self._frame
            if triangles.shape != current.triangles.shape:
                msg = f"triangles must have shape {current.triangles.shape}, got {triangles.shape}"
                raise ValueError(msg)
            self._frame = TriangleFrame(frame_index=current.frame_index + 1, triangles=triangles)
            return self._frame
