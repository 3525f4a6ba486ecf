from __future__ import annotations

import logging

from rayfield.backend import BackendName, get_array_module
from rayfield.field import FieldConfig, RadialField
from rayfield.geometry import BarrierSet, Vec2
from rayfield.raymarch import RayMarchConfig
from rayfield.scene import DEFAULT_BARRIERS, Scene
from rayfield.viz.plot2d import Plotter2D

# ============================================================
# TOP-LEVEL PARAMETERS (extract everything tweakable here)
# ============================================================

# Run
BACKEND: BackendName = "numpy"
VECTORIZED = False
LOG_LEVEL = logging.DEBUG

# Rays
RAY_GROUP_COUNT = 16
RAY_GROUP_SIZE = 4
RAY_LEN = 0.01
MAX_DIST = 2.0

# Scene
ORIGIN = (0.0, 0.0)
BARRIERS = DEFAULT_BARRIERS

# Animation
FRAME_DELAY_MS = 24
FRAMES = 200

# Plot
PLOT_TITLE = "rayfield - radial magnitude field"
PLOT_XLIM = (-1.5, 1.5)
PLOT_YLIM = (-1.5, 1.5)


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    xp = get_array_module(BACKEND)

    scene = Scene(origin=Vec2(*ORIGIN), barriers=BarrierSet.from_points(BARRIERS))
    field = RadialField(
        scene,
        RayMarchConfig(step_length=RAY_LEN, max_dist=MAX_DIST),
        FieldConfig(
            group_count=RAY_GROUP_COUNT,
            group_size=RAY_GROUP_SIZE,
            frame_delay_ms=FRAME_DELAY_MS,
            vectorized=VECTORIZED,
        ),
        xp=xp,
    )

    plotter = Plotter2D(title=PLOT_TITLE)
    plotter.draw_barriers(scene.barriers)
    plotter.draw_point(scene.origin, label="origin")

    def update(_frame_i: int) -> None:
        field.step()
        plotter.draw_radial(field.polyline())

    ani = plotter.animate(update, frames=FRAMES, interval_ms=field.frame_delay_ms)
    _ = ani
    plotter.show(xlim=PLOT_XLIM, ylim=PLOT_YLIM)


if __name__ == "__main__":
    main()
