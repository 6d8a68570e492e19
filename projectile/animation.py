"""Animation controller: run state machine driven by an external clock.

The controller never schedules anything itself. Whoever owns the frame
timer calls tick() with the current monotonic time; simulation time is
always recomputed from wall-clock elapsed time since the run started,
minus the total time spent paused. Frame rate and dropped frames
therefore never change where the projectile is.

Transitions:

    IDLE      --start-->  RUNNING
    RUNNING   --pause-->  PAUSED
    PAUSED    --resume--> RUNNING
    RUNNING   --tick---> COMPLETED   (once sim time reaches flight time)
    COMPLETED --start-->  RUNNING    (fresh snapshot)
    any       --reset-->  IDLE

Any other event is a no-op.
"""

from __future__ import annotations

import enum
import logging
import math
import time
from collections.abc import Callable
from typing import NamedTuple

from simulation import (
    LaunchParams, Position, SimulationResult, Velocity,
    compute_results, position_at_time, velocity_at_time,
)
from projectile.probe import ProbeReading, probe_trajectory
from projectile.sampler import RUN_SAMPLES, TrajectoryPoint, sample_trajectory
from projectile.scale import ViewTransform

logger = logging.getLogger(__name__)


class AnimationState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class Frame(NamedTuple):
    """Snapshot of a run for drawing one frame.

    Attributes:
        state: Controller state when the frame was taken.
        sim_time: Seconds of flight shown.
        flight_time: Total flight time of the run.
        position: Projectile position, height clamped to the ground.
        velocity: Instantaneous velocity at sim_time.
        drawn_up_to: Index of the last run sample already passed.
    """

    state: AnimationState
    sim_time: float
    flight_time: float
    position: Position
    velocity: Velocity
    drawn_up_to: int


class RunHandle:
    """Owns the animation state of one projectile run at a time.

    Args:
        clock: Monotonic time source in seconds, used when a transition
            is not given an explicit timestamp.
        sample_count: Number of sample intervals for the run path.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sample_count: int = RUN_SAMPLES,
    ):
        self._clock = clock
        self._sample_count = sample_count
        self._clear()
        # Bumped on every start/reset so stale frame callbacks can be told apart
        self.generation = 0

    def _clear(self) -> None:
        self._state = AnimationState.IDLE
        self._params: LaunchParams | None = None
        self._results: SimulationResult | None = None
        self._points: tuple[TrajectoryPoint, ...] = ()
        self._sim_time = 0.0
        self._anchor = 0.0
        self._pause_started = 0.0
        self._pause_accumulator = 0.0

    def _now(self, now: float | None) -> float:
        return self._clock() if now is None else now

    # -- Read-only state --

    @property
    def state(self) -> AnimationState:
        return self._state

    @property
    def params(self) -> LaunchParams | None:
        """Parameter snapshot of the current run."""
        return self._params

    @property
    def results(self) -> SimulationResult | None:
        return self._results

    @property
    def points(self) -> tuple[TrajectoryPoint, ...]:
        return self._points

    @property
    def sim_time(self) -> float:
        return self._sim_time

    @property
    def pause_accumulator(self) -> float:
        """Total wall-clock seconds spent paused in this run."""
        return self._pause_accumulator

    @property
    def is_active(self) -> bool:
        """True while a run is running or paused."""
        return self._state in (AnimationState.RUNNING, AnimationState.PAUSED)

    # -- Transitions --

    def start(self, params: LaunchParams, now: float | None = None) -> bool:
        """Begin a run from IDLE or COMPLETED with a snapshot of params."""
        if self.is_active:
            logger.debug("start ignored while %s", self._state.value)
            return False

        results = compute_results(params)
        points = sample_trajectory(params, self._sample_count)

        self._clear()
        self._params = params
        self._results = results
        self._points = points
        self._anchor = self._now(now)
        self._state = AnimationState.RUNNING
        self.generation += 1

        logger.info(
            "Run started: v0=%.2f m/s angle=%.1f deg h0=%.2f m g=%.2f, flight %.3f s",
            params.initial_velocity, params.launch_angle,
            params.initial_height, params.gravity, results.flight_time,
        )
        return True

    def tick(self, now: float | None = None, generation: int | None = None) -> bool:
        """Advance sim time from the clock. Returns True if state changed.

        Ignored unless RUNNING, and ignored when generation is given and
        belongs to a run that has since been reset or restarted.
        """
        if self._state is not AnimationState.RUNNING:
            return False
        if generation is not None and generation != self.generation:
            return False

        elapsed = self._now(now) - self._anchor - self._pause_accumulator
        flight = self._results.flight_time
        self._sim_time = min(max(elapsed, 0.0), flight)

        if self._sim_time >= flight:
            self._sim_time = flight
            self._state = AnimationState.COMPLETED
            logger.info("Run completed after %.3f s of flight", flight)
        return True

    def pause(self, now: float | None = None) -> bool:
        if self._state is not AnimationState.RUNNING:
            logger.debug("pause ignored while %s", self._state.value)
            return False
        self._pause_started = self._now(now)
        self._state = AnimationState.PAUSED
        logger.debug("Paused at t=%.3f s", self._sim_time)
        return True

    def resume(self, now: float | None = None) -> bool:
        if self._state is not AnimationState.PAUSED:
            logger.debug("resume ignored while %s", self._state.value)
            return False
        self._pause_accumulator += max(0.0, self._now(now) - self._pause_started)
        self._state = AnimationState.RUNNING
        logger.debug("Resumed after %.3f s paused in total", self._pause_accumulator)
        return True

    def reset(self) -> bool:
        """Discard the run and all time state. Returns False if already IDLE."""
        if self._state is AnimationState.IDLE:
            return False
        self._clear()
        self.generation += 1
        logger.info("Run reset")
        return True

    # -- Queries --

    def position_and_velocity_at(self, t: float) -> tuple[Position, Velocity] | None:
        """Analytic state of the current run at time t (clamped to the flight)."""
        if self._params is None:
            return None
        t = min(max(t, 0.0), self._results.flight_time)
        x, y = position_at_time(t, self._params)
        vx, vy, speed = velocity_at_time(t, self._params)
        return (
            Position(float(x), float(y)),
            Velocity(float(vx), float(vy), float(speed)),
        )

    def current_frame(self) -> Frame | None:
        """Frame for the current sim time, or None when IDLE."""
        if self._params is None:
            return None

        flight = self._results.flight_time
        last = len(self._points) - 1
        _, velocity = self.position_and_velocity_at(self._sim_time)

        if self._state is AnimationState.COMPLETED:
            final = self._points[last]
            return Frame(
                self._state, flight, flight,
                Position(final.x, final.y), velocity, last,
            )

        position, _ = self.position_and_velocity_at(self._sim_time)
        progress = self._sim_time / flight if flight > 0 else 0.0
        drawn = min(last, int(math.floor(progress * last)))
        return Frame(
            self._state, self._sim_time, flight,
            Position(position.x, max(0.0, position.y)), velocity, drawn,
        )

    def probe(self, transform: ViewTransform, sx: float, sy: float) -> ProbeReading | None:
        """Hover probe against the run path."""
        if self._params is None:
            return None
        return probe_trajectory(self._params, self._points, transform, sx, sy)


def start_run(
    params: LaunchParams,
    now: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> RunHandle:
    """Create a RunHandle and start it immediately."""
    handle = RunHandle(clock=clock)
    handle.start(params, now)
    return handle


def frame_status(frame: Frame | None) -> tuple[str, str]:
    """Status bar texts (elapsed time, position) for a frame.

    No frame (no run) gives a zero time and an empty position.
    """
    if frame is None:
        return "  t = 0.00 s  ", ""
    return (
        f"  t = {frame.sim_time:.2f} s  ",
        f"  x = {frame.position.x:.1f} m  y = {frame.position.y:.1f} m  "
        f"|v| = {frame.velocity.magnitude:.1f} m/s  ",
    )
