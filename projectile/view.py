"""Projectile view: orchestrates the run controller, canvas, and controls.

The QTimer is only a frame clock: every timeout hands time.monotonic()
to the RunHandle, which decides where the projectile is.
"""

import logging
import time

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import QWidget, QHBoxLayout, QSplitter, QLabel

from simulation import DEFAULT_MAX_VELOCITY, compute_results, validate_params
from projectile.animation import AnimationState, RunHandle, frame_status
from projectile.canvas import ProjectileCanvas
from projectile.controls import ProjectileControls
from projectile.probe import probe_trajectory
from projectile.records import build_record, reconstruct_preview
from projectile.render import Scene
from projectile.sampler import PREVIEW_SAMPLES, sample_trajectory
from projectile.scale import build_transform

logger = logging.getLogger(__name__)


class ProjectileView(QWidget):
    """Complete simulator: canvas + controls + run wiring."""

    FPS = 60

    def __init__(self, fps=FPS, max_velocity=DEFAULT_MAX_VELOCITY, parent=None):
        super().__init__(parent)
        self.max_velocity = max_velocity

        self.canvas = ProjectileCanvas()
        self.controls = ProjectileControls(max_velocity)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.canvas)
        splitter.addWidget(self.controls)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(splitter)

        # Status bar labels (AppWindow places these in a real status bar)
        self.time_label = QLabel()
        self.position_label = QLabel()
        self._clear_run_status()
        self.probe_label = QLabel()

        # Run state lives in the handle; the view only keeps the preview
        self.handle = RunHandle(clock=time.monotonic)
        self.preview_params = None
        self.preview_results = None
        self.preview_points = ()
        self.transform = None
        self._probe_point = None

        # Frame clock
        self.timer = QTimer()
        self.timer.setInterval(int(1000 / fps))
        self.timer.timeout.connect(self._on_timer)
        self._timer_generation = None

        # Wire signals
        self.controls.launch_params.params_changed.connect(self._on_param_changed)
        self.controls.simulate_btn.clicked.connect(self._on_simulate)
        self.controls.pause_btn.clicked.connect(self._toggle_pause)
        self.controls.reset_btn.clicked.connect(self._on_reset)
        self.canvas.hovered.connect(self._on_hover)
        self.canvas.hover_left.connect(self._clear_probe)
        self.canvas.resized.connect(self._on_resize)

        # Keyboard shortcuts
        for key, slot in [
            ("Return", self._on_simulate),
            ("Enter", self._on_simulate),
            ("Escape", self._on_reset),
            ("Space", self._toggle_pause),
        ]:
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.activated.connect(slot)

        self._update_preview()

    # -- Public interface --

    def deactivate(self):
        """Pause a running animation (window hidden or closing)."""
        if self.handle.state is AnimationState.RUNNING:
            self._toggle_pause()

    def current_record(self, name=None):
        """Record for the run snapshot, or the previewed params when idle."""
        params = self.handle.params or self.preview_params
        if params is None:
            return None
        return build_record(
            params, name,
            include_trajectory=self.controls.keep_points_checkbox.isChecked(),
        )

    def load_record(self, record):
        """Show a saved record's params as the new preview.

        The preview is rebuilt from record.params alone, so it matches the
        saved run exactly.
        """
        if self.handle.state is not AnimationState.IDLE:
            self._on_reset()
        self.controls.set_params(record.params, notify=False)
        self._update_preview(record.params, reconstruct_preview(record))

    # -- Preview --

    def _update_preview(self, params=None, points=None):
        if params is None:
            params = self.controls.get_params()
        report = validate_params(params, self.max_velocity)
        self.controls.show_violations(report.violations)
        if not report.valid:
            logger.warning("Rejected params: %s", report.violations)
            return

        self.preview_params = params
        self.preview_results = compute_results(params)
        if points is None:
            points = sample_trajectory(params, PREVIEW_SAMPLES)
        self.preview_points = points
        self._refit()
        self.controls.show_results(self.preview_results)
        self._render_preview()

    def _render_preview(self):
        params = self.preview_params
        self.canvas.set_scene(Scene(
            width=self.canvas.width(),
            height=self.canvas.height(),
            transform=self.transform,
            launch_angle=params.launch_angle,
            initial_height=params.initial_height,
            preview_points=self.preview_points,
            projectile=(0.0, params.initial_height),
            probe=self._probe_point,
        ))

    # -- Run frames --

    def _render_run_frame(self):
        frame = self.handle.current_frame()
        if frame is None:
            return
        params = self.handle.params
        self.canvas.set_scene(Scene(
            width=self.canvas.width(),
            height=self.canvas.height(),
            transform=self.transform,
            launch_angle=params.launch_angle,
            initial_height=params.initial_height,
            run_points=self.handle.points,
            drawn_up_to=frame.drawn_up_to,
            projectile=tuple(frame.position),
            probe=self._probe_point,
        ))
        self._set_run_status(frame)

    def _render(self):
        if self.handle.state is AnimationState.IDLE:
            if self.preview_params is not None:
                self._render_preview()
        else:
            self._render_run_frame()

    def _refit(self):
        if self.handle.state is AnimationState.IDLE:
            results = self.preview_results
        else:
            results = self.handle.results
        if results is None:
            return
        self.transform = build_transform(
            results.range, results.max_height,
            self.canvas.width(), self.canvas.height(),
        )

    # -- Playback --

    def _on_simulate(self):
        if self.handle.is_active:
            return
        params = self.controls.get_params()
        report = validate_params(params, self.max_velocity)
        self.controls.show_violations(report.violations)
        if not report.valid:
            logger.warning("Simulation not started, invalid params: %s", report.violations)
            return

        self.handle.start(params)
        self._timer_generation = self.handle.generation
        self._refit()
        self.controls.show_results(self.handle.results)
        self.controls.set_state(self.handle.state)
        self._render_run_frame()
        self.timer.start()

    def _toggle_pause(self):
        state = self.handle.state
        if state is AnimationState.RUNNING:
            self.handle.pause()
            self.timer.stop()
        elif state is AnimationState.PAUSED:
            self.handle.resume()
            self.timer.start()
        else:
            return
        self.controls.set_state(self.handle.state)

    def _on_timer(self):
        if not self.handle.tick(generation=self._timer_generation):
            return
        self._render_run_frame()
        if self.handle.state is AnimationState.COMPLETED:
            self.timer.stop()
            self.controls.show_results(self.handle.results)
            self.controls.set_state(self.handle.state)

    def _on_reset(self):
        self.timer.stop()
        self._timer_generation = None
        if not self.handle.reset():
            return
        self.controls.clear_results()
        self.controls.set_state(self.handle.state)
        self._clear_run_status()
        self._update_preview()

    def _set_run_status(self, frame):
        time_text, position_text = frame_status(frame)
        self.time_label.setText(time_text)
        self.position_label.setText(position_text)

    def _clear_run_status(self):
        self._set_run_status(None)

    # -- Canvas events --

    def _on_resize(self, width, height):
        self._refit()
        if self.transform is not None:
            self._render()

    def _on_hover(self, sx, sy):
        if self.transform is None:
            return
        if self.handle.state is AnimationState.IDLE:
            if self.preview_params is None:
                return
            reading = probe_trajectory(
                self.preview_params, self.preview_points, self.transform, sx, sy,
            )
        else:
            reading = self.handle.probe(self.transform, sx, sy)

        if reading is None:
            self._clear_probe()
            return

        self._probe_point = (reading.distance, reading.height)
        self.probe_label.setText(
            f"  t = {reading.time:.2f} s  distance = {reading.distance:.1f} m  "
            f"height = {reading.height:.1f} m  speed = {reading.speed:.1f} m/s  "
        )
        self._render()

    def _clear_probe(self):
        if self._probe_point is None:
            return
        self._probe_point = None
        self.probe_label.clear()
        self._render()

    # -- Parameter changes --

    def _on_param_changed(self):
        # Runs keep their own snapshot; edits only touch the preview
        if self.handle.is_active:
            return
        if self.handle.state is AnimationState.COMPLETED:
            self.handle.reset()
            self.controls.set_state(self.handle.state)
            self._set_run_status(self.handle.current_frame())
        self._update_preview()
