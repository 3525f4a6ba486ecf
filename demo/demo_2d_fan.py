from __future__ import annotations

import logging
import math

from rayfield.backend import BackendName, get_array_module
from rayfield.field import FieldConfig, TriangleFanField
from rayfield.geometry import BarrierSet, Vec2
from rayfield.raymarch import RayMarchConfig
from rayfield.scene import DEFAULT_BARRIERS, Scene
from rayfield.viz.plot2d import Plotter2D

# ============================================================
# TOP-LEVEL PARAMETERS (extract everything tweakable here)
# ============================================================

# Run
BACKEND: BackendName = "auto"
VECTORIZED = True
LOG_LEVEL = logging.INFO

# Rays
RAY_GROUP_COUNT = 16
RAY_GROUP_SIZE = 8
RAY_LEN = 0.01
MAX_DIST = 2.0
ANGULAR_SPEED = 2.0 * math.pi / 600.0  # one turn every 600 frames

# Scene
ORIGIN = (0.0, 0.0)
BARRIERS = DEFAULT_BARRIERS

# Animation
FRAME_DELAY_MS = 24
FRAMES = 600

# Plot
PLOT_TITLE = "rayfield - rotating triangle fan"
PLOT_XLIM = (-1.5, 1.5)
PLOT_YLIM = (-1.5, 1.5)

# Headless: set to a path to save the first frame instead of animating
SAVE_PATH: str | None = None


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    xp = get_array_module(BACKEND)

    scene = Scene(origin=Vec2(*ORIGIN), barriers=BarrierSet.from_points(BARRIERS))
    field = TriangleFanField(
        scene,
        RayMarchConfig(step_length=RAY_LEN, max_dist=MAX_DIST),
        FieldConfig(
            group_count=RAY_GROUP_COUNT,
            group_size=RAY_GROUP_SIZE,
            frame_delay_ms=FRAME_DELAY_MS,
            angular_speed=ANGULAR_SPEED,
            vectorized=VECTORIZED,
        ),
        xp=xp,
    )

    plotter = Plotter2D(title=PLOT_TITLE)
    plotter.draw_barriers(scene.barriers)
    plotter.draw_point(scene.origin, label="origin")

    if SAVE_PATH:
        plotter.draw_fan(field.step().triangles)
        plotter.save(SAVE_PATH, xlim=PLOT_XLIM, ylim=PLOT_YLIM)
        return

    def update(_frame_i: int) -> None:
        plotter.draw_fan(field.step().triangles)

    ani = plotter.animate(update, frames=FRAMES, interval_ms=field.frame_delay_ms)
    _ = ani
    plotter.show(xlim=PLOT_XLIM, ylim=PLOT_YLIM)


if __name__ == "__main__":
    main()
