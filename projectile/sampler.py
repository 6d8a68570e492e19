"""Trajectory sampler: discretize the analytic flight path.

Points are evaluated at evenly spaced times over [0, flight_time], so the
first point is the launch and the last point is the landing. Heights are
clamped to the ground for display.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from simulation import LaunchParams, flight_time, position_at_time

# Coarse preview, redrawn on every parameter edit
PREVIEW_SAMPLES = 100

# Finer sampling generated once per run
RUN_SAMPLES = 200


class TrajectoryPoint(NamedTuple):
    x: float  # m
    y: float  # m, >= 0
    t: float  # s


def sample_trajectory(
    params: LaunchParams,
    count: int = PREVIEW_SAMPLES,
) -> tuple[TrajectoryPoint, ...]:
    """Return count + 1 points along the flight path.

    Deterministic: identical params always give an identical sequence.

    Raises:
        ValueError: If count is less than 1.
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    # linspace pins the endpoints: t[0] == 0 and t[-1] == flight time
    times = np.linspace(0.0, flight_time(params), count + 1)
    xs, ys = position_at_time(times, params)
    ys = np.maximum(ys, 0.0)

    return tuple(
        TrajectoryPoint(float(x), float(y), float(t))
        for x, y, t in zip(xs, ys, times)
    )


def points_to_array(points) -> np.ndarray:
    """Stack a point sequence into an (N, 3) float array of [x, y, t]."""
    if not points:
        return np.empty((0, 3), dtype=np.float64)
    return np.asarray(points, dtype=np.float64).reshape(-1, 3)
