"""Hover probe: read flight data under the pointer.

The pointer is mapped back to physical coordinates, matched against the
nearest sampled point, and rejected when it is too far from the path
either physically or on screen. Accepted positions are evaluated
analytically at the time the projectile reaches the pointer's x, or at
the matched sample's time when that arrival time is not beside the
sample (steep and vertical shots).
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from simulation import (
    LaunchParams, flight_time, position_at_time, trajectory_y_at_x, velocity_at_time,
)
from projectile.sampler import points_to_array
from projectile.scale import ViewTransform

# Reject pointers farther than this from every sample (m)
HOVER_DISTANCE_M = 5.0

# Reject pointers farther than this from the drawn path (px)
HOVER_DISTANCE_PX = 30.0

# Below this horizontal speed x / vx is meaningless (m/s)
_MIN_HORIZONTAL_SPEED = 1e-9


class ProbeReading(NamedTuple):
    time: float
    distance: float
    height: float
    speed: float
    sample_index: int


def reading_at_time(t: float, params: LaunchParams, sample_index: int = -1) -> ProbeReading:
    """Flight data at time t, clamped to the flight interval."""
    t = min(max(t, 0.0), flight_time(params))
    x, y = position_at_time(t, params)
    vel = velocity_at_time(t, params)
    return ProbeReading(
        time=float(t),
        distance=float(x),
        height=max(0.0, float(y)),
        speed=float(vel.magnitude),
        sample_index=sample_index,
    )


def probe_trajectory(
    params: LaunchParams,
    points,
    transform: ViewTransform,
    sx: float,
    sy: float,
) -> ProbeReading | None:
    """Flight data for a pointer at surface position (sx, sy), or None."""
    arr = points_to_array(points)
    if arr.shape[0] == 0:
        return None

    px, py = transform.to_physical(sx, sy)
    dist = np.hypot(arr[:, 0] - px, arr[:, 1] - py)
    idx = int(np.argmin(dist))
    if dist[idx] > HOVER_DISTANCE_M:
        return None

    near_sx, near_sy = transform.to_surface(arr[idx, 0], arr[idx, 1])
    if math.hypot(near_sx - sx, near_sy - sy) > HOVER_DISTANCE_PX:
        return None

    vx = float(velocity_at_time(0.0, params).vx)
    t = float(arr[idx, 2])
    if vx > _MIN_HORIZONTAL_SPEED:
        arrival = max(px, 0.0) / vx
        lo = arr[max(idx - 1, 0), 2]
        hi = arr[min(idx + 1, arr.shape[0] - 1), 2]
        # On steep shots x / vx can land far from the matched sample
        if lo <= arrival <= hi and (
            abs(trajectory_y_at_x(max(px, 0.0), params) - py) <= HOVER_DISTANCE_M
        ):
            t = arrival
    return reading_at_time(t, params, idx)
