"""Projectile kinematics engine.

Closed-form equations of motion for a point projectile launched from
height h0 with speed v0 at angle theta above the horizontal, under
uniform gravity g and no air resistance:

    x(t) = v0 cos(theta) t
    y(t) = h0 + v0 sin(theta) t - g t^2 / 2

All functions are pure. Domain checks raise KinematicsDomainError;
user-facing validation lives in validate_params().
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import NamedTuple

import numpy as np

# Default upper bound on launch speed accepted by validate_params (m/s)
DEFAULT_MAX_VELOCITY = 100.0

GRAVITY_PRESETS = {
    "earth": (9.81, "Earth"),
    "moon": (1.62, "Moon"),
    "mars": (3.72, "Mars"),
}


class KinematicsDomainError(ValueError):
    """Raised when kinematics are evaluated for out-of-domain parameters."""


@dataclass(frozen=True)
class LaunchParams:
    """Launch parameters of a single projectile run.

    Frozen: a run keeps the instance it was started with, so later edits
    to the UI never reach an animation already in flight.
    """

    initial_velocity: float = 25.0   # m/s
    launch_angle: float = 45.0       # degrees above horizontal
    initial_height: float = 0.0      # m
    gravity: float = 9.81            # m/s^2


class Position(NamedTuple):
    x: float
    y: float


class Velocity(NamedTuple):
    vx: float
    vy: float
    magnitude: float


class SimulationResult(NamedTuple):
    """Derived flight metrics. Never user-editable."""

    max_height: float
    range: float
    flight_time: float
    final_velocity: float


class Violation(NamedTuple):
    field: str
    reason: str


class ValidationReport(NamedTuple):
    valid: bool
    violations: tuple[Violation, ...]


def _check_domain(params: LaunchParams) -> None:
    """Fail fast on parameters the equations are not defined for."""
    for f in fields(params):
        value = getattr(params, f.name)
        if not math.isfinite(value):
            raise KinematicsDomainError(f"{f.name} must be finite, got {value!r}")
    if params.gravity <= 0:
        raise KinematicsDomainError(f"gravity must be positive, got {params.gravity}")
    if params.initial_velocity < 0:
        raise KinematicsDomainError(
            f"initial_velocity must be non-negative, got {params.initial_velocity}"
        )
    if params.initial_height < 0:
        raise KinematicsDomainError(
            f"initial_height must be non-negative, got {params.initial_height}"
        )
    if not 0 <= params.launch_angle <= 90:
        raise KinematicsDomainError(
            f"launch_angle must be within [0, 90] degrees, got {params.launch_angle}"
        )


def position_at_time(t, params: LaunchParams) -> Position:
    """Position at time t (scalar or ndarray). No ground clamp is applied."""
    _check_domain(params)
    theta = np.radians(params.launch_angle)
    v0 = params.initial_velocity
    x = v0 * np.cos(theta) * t
    y = params.initial_height + v0 * np.sin(theta) * t - 0.5 * params.gravity * t * t
    return Position(x, y)


def velocity_at_time(t, params: LaunchParams) -> Velocity:
    """Velocity components and speed at time t (scalar or ndarray)."""
    _check_domain(params)
    theta = np.radians(params.launch_angle)
    v0 = params.initial_velocity
    vx = v0 * np.cos(theta) + 0.0 * t  # broadcast to the shape of t
    vy = v0 * np.sin(theta) - params.gravity * t
    return Velocity(vx, vy, np.hypot(vx, vy))


def max_height(params: LaunchParams) -> float:
    """Apex height: h0 + (v0 sin(theta))^2 / (2g)."""
    _check_domain(params)
    vy0 = params.initial_velocity * math.sin(math.radians(params.launch_angle))
    return params.initial_height + vy0 * vy0 / (2.0 * params.gravity)


def flight_time(params: LaunchParams) -> float:
    """Time until the projectile returns to y = 0.

    Positive root of -g t^2 / 2 + v0 sin(theta) t + h0 = 0. A launch from
    the ground at rest has zero flight time; a negative discriminant
    (unreachable for validated input) also yields 0.
    """
    _check_domain(params)
    if params.initial_velocity == 0 and params.initial_height == 0:
        return 0.0

    b = params.initial_velocity * math.sin(math.radians(params.launch_angle))
    discriminant = b * b + 2.0 * params.gravity * params.initial_height
    if discriminant < 0:
        return 0.0
    return max(0.0, (b + math.sqrt(discriminant)) / params.gravity)


def horizontal_range(params: LaunchParams) -> float:
    """Horizontal distance covered until landing."""
    theta = math.radians(params.launch_angle)
    return params.initial_velocity * math.cos(theta) * flight_time(params)


def final_velocity(params: LaunchParams) -> float:
    """Horizontal velocity component at landing, v0 cos(theta).

    This is deliberately NOT the impact speed. The displayed "final
    velocity" has to vary with the launch angle even for h0 = 0, where
    the full impact speed would always equal v0. Without drag the
    horizontal component is constant, so it is also the landing value.
    Keep this definition; records and reports depend on it.
    """
    _check_domain(params)
    return params.initial_velocity * math.cos(math.radians(params.launch_angle))


def trajectory_y_at_x(x: float, params: LaunchParams) -> float:
    """Height of the flight path above horizontal distance x.

    y = h0 + x tan(theta) - g x^2 / (2 v0^2 cos^2(theta)). Returns h0 when
    the projectile has no horizontal motion.
    """
    _check_domain(params)
    theta = math.radians(params.launch_angle)
    vx = params.initial_velocity * math.cos(theta)
    if vx < 1e-9:
        return params.initial_height
    return (
        params.initial_height
        + x * math.tan(theta)
        - params.gravity * x * x / (2.0 * vx * vx)
    )


def compute_results(params: LaunchParams) -> SimulationResult:
    """All derived metrics for a parameter set."""
    return SimulationResult(
        max_height=max_height(params),
        range=horizontal_range(params),
        flight_time=flight_time(params),
        final_velocity=final_velocity(params),
    )


def validate_params(
    params: LaunchParams,
    max_velocity: float = DEFAULT_MAX_VELOCITY,
) -> ValidationReport:
    """Check params against the accepted input ranges.

    Out-of-range values are reported, never clamped.
    """
    violations = []

    for f in fields(params):
        value = getattr(params, f.name)
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            violations.append(Violation(f.name, "must be a finite number"))
    bad = {v.field for v in violations}

    if "initial_velocity" not in bad and not 0 <= params.initial_velocity <= max_velocity:
        violations.append(Violation(
            "initial_velocity", f"must be between 0 and {max_velocity:g} m/s",
        ))
    if "launch_angle" not in bad and not 0 <= params.launch_angle <= 90:
        violations.append(Violation(
            "launch_angle", "must be between 0 and 90 degrees",
        ))
    if "initial_height" not in bad and params.initial_height < 0:
        violations.append(Violation("initial_height", "cannot be negative"))
    if "gravity" not in bad and params.gravity <= 0:
        violations.append(Violation("gravity", "must be positive"))

    return ValidationReport(valid=not violations, violations=tuple(violations))
