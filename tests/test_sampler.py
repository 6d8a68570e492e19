"""Tests for projectile/sampler.py: discretized flight paths."""

import numpy as np
import pytest

from simulation import LaunchParams, flight_time
from projectile.sampler import (
    PREVIEW_SAMPLES, RUN_SAMPLES, TrajectoryPoint,
    sample_trajectory, points_to_array,
)


@pytest.fixture
def params():
    return LaunchParams(initial_velocity=25, launch_angle=45,
                        initial_height=3, gravity=9.81)


class TestSampleTrajectory:
    """Test the sample_trajectory function."""

    @pytest.mark.parametrize("count", [1, 7, PREVIEW_SAMPLES, RUN_SAMPLES])
    def test_point_count(self, params, count):
        assert len(sample_trajectory(params, count)) == count + 1

    def test_time_endpoints(self, params):
        points = sample_trajectory(params, 50)
        assert points[0].t == 0.0
        assert points[-1].t == flight_time(params)

    def test_strictly_increasing_time(self, params):
        t = points_to_array(sample_trajectory(params, RUN_SAMPLES))[:, 2]
        assert np.all(np.diff(t) > 0)

    def test_evenly_spaced(self, params):
        t = points_to_array(sample_trajectory(params, 40))[:, 2]
        np.testing.assert_allclose(np.diff(t), flight_time(params) / 40, rtol=1e-9)

    def test_starts_at_launcher_and_lands(self, params):
        points = sample_trajectory(params, 100)
        assert points[0].x == 0.0
        assert points[0].y == 3.0
        assert points[-1].y == pytest.approx(0.0, abs=1e-9)

    def test_heights_clamped_to_ground(self):
        params = LaunchParams(initial_velocity=90, launch_angle=5, initial_height=80)
        ys = points_to_array(sample_trajectory(params, 333))[:, 1]
        assert np.all(ys >= 0.0)

    def test_deterministic(self, params):
        assert sample_trajectory(params, 120) == sample_trajectory(params, 120)

    def test_returns_immutable_points(self, params):
        points = sample_trajectory(params, 5)
        assert isinstance(points, tuple)
        assert all(isinstance(p, TrajectoryPoint) for p in points)
        assert all(type(p.x) is float for p in points)

    def test_default_count_is_preview(self, params):
        assert len(sample_trajectory(params)) == PREVIEW_SAMPLES + 1

    def test_preview_coarser_than_run(self):
        assert PREVIEW_SAMPLES < RUN_SAMPLES

    @pytest.mark.parametrize("count", [0, -3])
    def test_rejects_bad_count(self, params, count):
        with pytest.raises(ValueError):
            sample_trajectory(params, count)

    def test_vertical_drop(self):
        params = LaunchParams(initial_velocity=0, initial_height=10)
        arr = points_to_array(sample_trajectory(params, 20))
        np.testing.assert_array_equal(arr[:, 0], 0.0)
        assert np.all(np.diff(arr[:, 1]) < 0)

    def test_zero_flight_collapses_to_launch_point(self):
        params = LaunchParams(initial_velocity=0, initial_height=0)
        points = sample_trajectory(params, 4)
        assert points == tuple(TrajectoryPoint(0.0, 0.0, 0.0) for _ in range(5))


class TestPointsToArray:
    """Test converting points to an array."""

    def test_shape(self, params):
        arr = points_to_array(sample_trajectory(params, 9))
        assert arr.shape == (10, 3)

    def test_empty(self):
        assert points_to_array(()).shape == (0, 3)
