import numpy as np
import pytest

from rayfield.geometry import BarrierSet, Line, Vec2
from rayfield.raymarch.intersect import (
    nearest_barrier_distance,
    nearest_barrier_distances,
    segment_intersect_distance,
)

WALL = Line(Vec2(1.0, 1.0), Vec2(1.0, -1.0))


def seg(ax, ay, bx, by):
    return Line(Vec2(ax, ay), Vec2(bx, by))


def test_segment_crossing_wall():
    assert segment_intersect_distance(seg(0.0, 0.0, 2.0, 0.0), WALL) == pytest.approx(1.0)


def test_segment_ending_on_wall_counts_as_hit():
    assert segment_intersect_distance(seg(0.0, 0.0, 1.0, 0.0), WALL) == pytest.approx(1.0)


def test_segment_short_of_wall():
    assert segment_intersect_distance(seg(0.0, 0.0, 0.5, 0.0), WALL) is None


def test_segment_pointing_away():
    assert segment_intersect_distance(seg(0.0, 0.0, -2.0, 0.0), WALL) is None


def test_segment_passing_beside_segment():
    # crosses the line x=1 but above the barrier's upper end
    assert segment_intersect_distance(seg(0.0, 2.0, 2.0, 2.0), WALL) is None


def test_oblique_hit_distance():
    d = segment_intersect_distance(seg(0.0, 0.0, 3.0, 3.0), Line(Vec2(2.0, -5.0), Vec2(2.0, 5.0)))
    assert d == pytest.approx(2.0 * np.sqrt(2.0))


@pytest.mark.parametrize(
    "barrier",
    [
        Line(Vec2(1.0, 1.0), Vec2(1.0, -1.0)),
        Line(Vec2(0.3, 0.9), Vec2(0.8, -0.2)),
        Line(Vec2(-1.0, 0.5), Vec2(2.0, 0.1)),
    ],
)
def test_symmetric_in_barrier_endpoints(barrier):
    p = seg(0.0, 0.0, 1.5, 0.2)
    forward = segment_intersect_distance(p, barrier)
    backward = segment_intersect_distance(p, Line(barrier.b, barrier.a))
    assert forward is not None
    assert backward == pytest.approx(forward)


def test_parallel_is_no_hit():
    barrier = Line(Vec2(-1.0, 0.5), Vec2(1.0, 0.5))
    assert segment_intersect_distance(seg(0.0, 0.0, 2.0, 0.0), barrier) is None


def test_collinear_is_no_hit():
    barrier = Line(Vec2(0.5, 0.0), Vec2(1.0, 0.0))
    assert segment_intersect_distance(seg(0.0, 0.0, 2.0, 0.0), barrier) is None


def test_zero_length_segment_is_no_hit():
    assert segment_intersect_distance(seg(0.5, 0.0, 0.5, 0.0), WALL) is None


def test_degenerate_barrier_is_no_hit():
    point = Line(Vec2(1.0, 0.0), Vec2(1.0, 0.0))
    assert segment_intersect_distance(seg(0.0, 0.0, 2.0, 0.0), point) is None


def test_nearest_picks_closest():
    barriers = BarrierSet.from_points([
        ((3.0, -1.0), (3.0, 1.0)),
        ((1.0, -1.0), (1.0, 1.0)),
        ((2.0, -1.0), (2.0, 1.0)),
    ])
    assert nearest_barrier_distance(seg(0.0, 0.0, 4.0, 0.0), barriers) == pytest.approx(1.0)


def test_nearest_none_without_barriers():
    assert nearest_barrier_distance(seg(0.0, 0.0, 4.0, 0.0), BarrierSet()) is None


def test_vectorised_matches_scalar():
    barriers = BarrierSet.from_points([
        ((1.0, 1.0), (1.0, -1.0)),
        ((-0.5, 0.5), (-0.5, -0.5)),
        ((-1.0, 0.25), (1.0, 0.25)),
    ])
    rng = np.random.default_rng(7)
    starts = rng.uniform(-0.5, 0.5, size=(50, 2))
    ends = starts + rng.uniform(-2.0, 2.0, size=(50, 2))

    got = nearest_barrier_distances(np, starts, ends, barriers.as_array(np))

    for i in range(50):
        p = seg(starts[i, 0], starts[i, 1], ends[i, 0], ends[i, 1])
        expected = nearest_barrier_distance(p, barriers)
        if expected is None:
            assert np.isnan(got[i])
        else:
            assert got[i] == pytest.approx(expected)


def test_vectorised_degenerate_rows_are_nan():
    barriers = BarrierSet.from_points([((-1.0, 0.5), (1.0, 0.5))])
    starts = np.zeros((2, 2))
    ends = np.array([[2.0, 0.0], [0.0, 0.0]])
    with np.errstate(all="raise"):
        got = nearest_barrier_distances(np, starts, ends, barriers.as_array(np))
    assert np.isnan(got).all()


def test_vectorised_without_barriers():
    got = nearest_barrier_distances(np, np.zeros((3, 2)), np.ones((3, 2)), BarrierSet().as_array(np))
    assert got.shape == (3,)
    assert np.isnan(got).all()
