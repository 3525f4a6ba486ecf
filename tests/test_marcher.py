import math

import numpy as np
import pytest

from rayfield.geometry import BarrierSet, Line, Vec2
from rayfield.raymarch import BatchMarcher, RayMarchConfig, RayMarcher, march
from rayfield.scene import default_scene

ORIGIN = Vec2(0.0, 0.0)
WALL = BarrierSet.from_points([((1.0, 1.0), (1.0, -1.0))])


def test_straight_into_wall():
    assert march(ORIGIN, Vec2(1.0, 0.0), WALL, 0.01, 2.0) == pytest.approx(1.0)


@pytest.mark.parametrize("theta", np.linspace(0.0, 2.0 * math.pi, 13))
def test_no_barriers_reaches_max_dist(theta):
    assert march(ORIGIN, Vec2.from_angle(float(theta)), BarrierSet(), 0.01, 2.0) == 2.0


def test_hit_within_first_step_is_exact():
    barrier = BarrierSet.from_points([((0.1, 1.0), (0.1, -1.0))])
    assert march(ORIGIN, Vec2(1.0, 0.0), barrier, 0.25, 2.0) == pytest.approx(0.1)


def test_hit_is_not_quantised_to_step():
    barrier = BarrierSet.from_points([((1.95, 1.0), (1.95, -1.0))])
    assert march(ORIGIN, Vec2(1.0, 0.0), barrier, 0.1, 2.0) == pytest.approx(1.95)


def test_parallel_barrier_never_hit():
    barrier = BarrierSet.from_points([((-1.0, 0.5), (1.0, 0.5))])
    assert march(ORIGIN, Vec2(1.0, 0.0), barrier, 0.01, 2.0) == 2.0


def test_collinear_barrier_never_hit():
    barrier = BarrierSet.from_points([((0.5, 0.0), (1.0, 0.0))])
    assert march(ORIGIN, Vec2(1.0, 0.0), barrier, 0.01, 2.0) == 2.0


def test_barrier_behind_is_ignored():
    barrier = BarrierSet.from_points([((-0.3, 1.0), (-0.3, -1.0))])
    assert march(ORIGIN, Vec2(1.0, 0.0), barrier, 0.01, 2.0) == 2.0


def test_barrier_out_of_range():
    barrier = BarrierSet.from_points([((3.0, 1.0), (3.0, -1.0))])
    assert march(ORIGIN, Vec2(1.0, 0.0), barrier, 0.01, 2.0) == 2.0


def test_overshoot_is_clamped_to_max_dist():
    # the step covering [1.8, 2.1] crosses a wall at 2.05
    barrier = BarrierSet.from_points([((2.05, 1.0), (2.05, -1.0))])
    assert march(ORIGIN, Vec2(1.0, 0.0), barrier, 0.3, 2.0) == 2.0


def test_oblique_ray_from_offset_origin():
    barrier = BarrierSet.from_points([((-2.0, 1.0), (2.0, 1.0))])
    assert march(Vec2(0.0, 0.0), Vec2(0.6, 0.8), barrier, 0.01, 2.0) == pytest.approx(1.25)
    assert march(Vec2(0.5, 0.5), Vec2(0.0, 1.0), barrier, 0.01, 2.0) == pytest.approx(0.5)


def test_direction_is_normalised():
    assert march(ORIGIN, Vec2(5.0, 0.0), WALL, 0.01, 2.0) == pytest.approx(1.0)


def test_zero_direction_terminates():
    assert march(ORIGIN, Vec2(0.0, 0.0), WALL, 0.01, 2.0) == 2.0


@pytest.mark.parametrize(("step_length", "max_dist"), [(0.0, 2.0), (-0.1, 2.0), (0.01, 0.0), (0.01, math.inf), (math.nan, 1.0)])
def test_invalid_parameters_rejected(step_length, max_dist):
    with pytest.raises(ValueError):
        march(ORIGIN, Vec2(1.0, 0.0), WALL, step_length, max_dist)


def test_trace_reports_termination():
    marcher = RayMarcher(RayMarchConfig(step_length=0.01, max_dist=2.0), WALL)

    hit = marcher.trace(ORIGIN, Vec2(1.0, 0.0))
    assert hit.termination == "hit"
    assert hit.distance == pytest.approx(1.0)
    assert hit.steps == 99
    assert hit.point.x == pytest.approx(1.0)
    assert hit.point.y == pytest.approx(0.0)

    far = marcher.trace(ORIGIN, Vec2(-1.0, 0.0))
    assert far.termination == "far"
    assert far.distance == 2.0
    assert far.point.x == pytest.approx(-2.0)
    assert far.steps <= RayMarchConfig(step_length=0.01, max_dist=2.0).max_steps


def test_marcher_matches_function():
    scene = default_scene()
    cfg = RayMarchConfig()
    marcher = RayMarcher(cfg, scene.barriers)
    for theta in np.linspace(0.0, 2.0 * math.pi, 17):
        d = Vec2.from_angle(float(theta))
        assert marcher.march(scene.origin, d) == march(scene.origin, d, scene.barriers, cfg.step_length, cfg.max_dist)


def test_default_scene_walls():
    scene = default_scene()
    marcher = RayMarcher(RayMarchConfig(), scene.barriers)
    assert marcher.march(scene.origin, Vec2(-1.0, 0.0)) == pytest.approx(0.5)
    assert marcher.march(scene.origin, Vec2(0.0, -1.0)) == 2.0
    assert marcher.march(scene.origin, Vec2(1.0, 0.0)) == 2.0


def test_results_stay_in_range():
    scene = default_scene()
    cfg = RayMarchConfig(step_length=0.07, max_dist=1.0)
    marcher = RayMarcher(cfg, scene.barriers)
    for theta in np.linspace(0.0, 2.0 * math.pi, 64, endpoint=False):
        r = marcher.march(scene.origin, Vec2.from_angle(float(theta)))
        assert 0.0 <= r <= cfg.max_dist


def test_batch_marcher_matches_scalar():
    scene = default_scene()
    cfg = RayMarchConfig()
    theta = np.linspace(0.0, 2.0 * math.pi, 64, endpoint=False)
    directions = np.stack([np.cos(theta), np.sin(theta)], axis=-1)

    got = BatchMarcher(np, cfg, scene.barriers).march(scene.origin, directions)

    scalar = RayMarcher(cfg, scene.barriers)
    expected = [scalar.march(scene.origin, Vec2(float(d[0]), float(d[1]))) for d in directions]
    np.testing.assert_allclose(got, expected, rtol=1e-12, atol=1e-12)


def test_batch_marcher_edge_cases():
    cfg = RayMarchConfig(step_length=0.01, max_dist=2.0)
    directions = np.array([[1.0, 0.0], [-1.0, 0.0], [0.0, 0.0]])

    got = BatchMarcher(np, cfg, WALL).march(ORIGIN, directions)

    assert got[0] == pytest.approx(1.0)
    assert got[1] == 2.0
    assert got[2] == 2.0


def test_batch_marcher_without_barriers():
    got = BatchMarcher(np, RayMarchConfig(), BarrierSet()).march(ORIGIN, np.eye(2))
    np.testing.assert_array_equal(got, [2.0, 2.0])


def test_tiny_direction_is_normalised_like_batch():
    wall = BarrierSet.from_points([((1.005, 1.0), (1.005, -1.0))])
    cfg = RayMarchConfig(step_length=0.01, max_dist=2.0)
    tiny = Vec2(1e-13, 0.0)

    scalar = RayMarcher(cfg, wall).march(ORIGIN, tiny)
    batched = BatchMarcher(np, cfg, wall).march(ORIGIN, np.array([[1e-13, 0.0]]))

    assert scalar == pytest.approx(1.005)
    assert batched[0] == pytest.approx(scalar)


def test_march_stops_after_max_steps(monkeypatch):
    cfg = RayMarchConfig(step_length=0.01, max_dist=2.0)
    # segments that barely advance would otherwise need ~2e15 steps
    monkeypatch.setattr(Line, "length", lambda self: 1e-15)

    result = RayMarcher(cfg, BarrierSet()).trace(ORIGIN, Vec2(1.0, 0.0))

    assert result.termination == "far"
    assert result.distance == 2.0
    assert result.steps == cfg.max_steps
