from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import matplotlib as mpl

# IMPORTANT: set backend before importing pyplot
# - RAYFIELD_MPL_BACKEND wins when set (tests force Agg).
# - Otherwise prefer a GUI backend and fall back to Agg.
_BACKEND = os.environ.get("RAYFIELD_MPL_BACKEND", "").strip()
if _BACKEND:
    mpl.use(_BACKEND, force=True)
else:
    for candidate in ("TkAgg", "QtAgg", "Agg"):
        # noinspection PyBroadException
        try:
            mpl.use(candidate, force=True)
            break
        except Exception:  # pragma: no cover  # noqa: BLE001, S112
            continue

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.animation import FuncAnimation  # noqa: E402
from matplotlib.collections import PolyCollection  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import Callable

    import numpy as np

    from rayfield.geometry import BarrierSet, Vec2


class Plotter2D:
    """Matplotlib stand-in for the ray field renderer."""

    def __init__(self, title: str = "rayfield") -> None:
        """Initialize the plotter."""
        fig, ax = plt.subplots(figsize=(8, 8))
        self.fig = fig
        self.ax = ax
        ax.set_aspect("equal", "box")
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_title(title)
        self._field_artists: list[Any] = []

    def draw_barriers(self, barriers: BarrierSet, linewidth: float = 2.0) -> None:
        for pts in barriers.segments():
            self.ax.plot(pts[:, 0], pts[:, 1], linewidth=linewidth, color="black")

    def draw_point(self, p: Vec2, label: str | None = None) -> None:
        self.ax.scatter([p.x], [p.y], s=80)
        if label:
            self.ax.text(p.x + 0.05, p.y + 0.05, label)

    def clear_field(self) -> None:
        for artist in self._field_artists:
            artist.remove()
        self._field_artists.clear()

    def draw_radial(self, polyline: np.ndarray, linewidth: float = 1.0) -> None:
        """Closed outline from :meth:`RadialField.polyline`."""
        (line,) = self.ax.plot(polyline[:, 0], polyline[:, 1], linewidth=linewidth)
        self._field_artists.append(line)

    def draw_fan(self, triangles: np.ndarray, alpha: float = 0.6) -> None:
        """Filled (T, 3, 2) triangle list."""
        coll = PolyCollection(list(triangles), closed=True, alpha=alpha, linewidths=0.0)
        self.ax.add_collection(coll)
        self._field_artists.append(coll)

    def animate(self, update: Callable[[int], None], frames: int, interval_ms: int) -> FuncAnimation:
        """Redraw the field via ``update(frame_i)`` every ``interval_ms``."""

        def _update(frame_i: int) -> list[Any]:
            self.clear_field()
            update(frame_i)
            return list(self._field_artists)

        return FuncAnimation(
            self.fig,
            _update,
            frames=frames,
            interval=int(interval_ms),
            blit=False,
            repeat=True,
        )

    def show(self, xlim: tuple[float, float], ylim: tuple[float, float]) -> None:
        self.ax.set_xlim(*xlim)
        self.ax.set_ylim(*ylim)
        plt.tight_layout()
        plt.show()

    def save(self, path: str, xlim: tuple[float, float], ylim: tuple[float, float], dpi: int = 150) -> None:
        """Save figure to disk (useful if running headless with Agg)."""
        self.ax.set_xlim(*xlim)
        self.ax.set_ylim(*ylim)
        self.fig.tight_layout()
        self.fig.savefig(path, dpi=dpi)

    def close(self) -> None:
        plt.close(self.fig)
