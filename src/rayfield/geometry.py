from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from rayfield.backend import ArrayModule
from rayfield.protocols import Drawable2D


@dataclass(frozen=True, slots=True)
class Vec2:
    """Immutable 2D vector."""

    x: float
    y: float

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Vec2:
        if not isinstance(k, (int, float)):
            return NotImplemented
        return Vec2(k * self.x, k * self.y)

    def __rmul__(self, k: float) -> Vec2:
        return self.__mul__(k)

    def __abs__(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> Vec2:
        """Unit vector; a zero vector is returned unchanged."""
        n = abs(self)
        if n == 0.0:
            return self
        return Vec2(self.x / n, self.y / n)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_angle(cls, theta: float) -> Vec2:
        return cls(math.cos(theta), math.sin(theta))


@dataclass(frozen=True, slots=True)
class Line(Drawable2D):
    """Directed segment from ``a`` to ``b``.

    Used both for probe segments (``a`` is where the probe starts) and for
    barriers, where the order of the endpoints carries no meaning.
    """

    a: Vec2
    b: Vec2

    def length(self) -> float:
        return abs(self.b - self.a)

    def direction(self) -> Vec2:
        return self.b - self.a

    def polyline(self, num: int = 2) -> Any:
        t = np.linspace(0.0, 1.0, max(num, 2), dtype=np.float64)[:, None]
        a = np.asarray(self.a.to_tuple(), dtype=np.float64)
        b = np.asarray(self.b.to_tuple(), dtype=np.float64)
        return a[None, :] + t * (b - a)[None, :]


@dataclass(frozen=True, slots=True)
class BarrierSet:
    """Ordered, immutable collection of barrier segments.

    Instances are shared between worker threads without locking, so nothing
    here may mutate after construction.
    """

    lines: tuple[Line, ...] = ()

    def __post_init__(self) -> None:
        # accept any iterable of lines but always store a tuple
        object.__setattr__(self, "lines", tuple(self.lines))

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, i: int) -> Line:
        return self.lines[i]

    def as_array(self, xp: ArrayModule) -> Any:
        """Return barriers as an (M, 2, 2) float64 array ``[line, endpoint, xy]``."""
        data = [[line.a.to_tuple(), line.b.to_tuple()] for line in self.lines]
        if not data:
            return xp.zeros((0, 2, 2), dtype=xp.float64)
        return xp.asarray(data, dtype=xp.float64)

    def segments(self) -> list[Any]:
        """Two-point polylines, one per barrier, for plotting."""
        return [line.polyline() for line in self.lines]

    @classmethod
    def from_points(cls, pairs: Iterable[Sequence[Sequence[float]]]) -> BarrierSet:
        """Build from ``[((ax, ay), (bx, by)), ...]``."""
        lines = []
        for a, b in pairs:
            lines.append(Line(Vec2(float(a[0]), float(a[1])), Vec2(float(b[0]), float(b[1]))))
        return cls(tuple(lines))
