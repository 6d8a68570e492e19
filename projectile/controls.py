"""Projectile control panel: launch parameters, results and playback."""

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QGridLayout, QHBoxLayout,
    QLabel, QPushButton, QGroupBox, QCheckBox,
)

from simulation import DEFAULT_MAX_VELOCITY
from projectile.animation import AnimationState
from ui_common import LaunchParamsWidget

_PLACEHOLDER = "--"


class ProjectileControls(QWidget):
    """Parameter editor, results readout, and Simulate/Pause/Reset buttons."""

    def __init__(self, max_velocity=DEFAULT_MAX_VELOCITY, parent=None):
        super().__init__(parent)
        self._max_velocity = max_velocity
        self._init_ui()
        self.set_state(AnimationState.IDLE)

    def _init_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(8, 8, 8, 8)

        # --- Launch Parameters ---
        params_group = QGroupBox("Launch Parameters")
        params_layout = QVBoxLayout()
        params_group.setLayout(params_layout)

        self.launch_params = LaunchParamsWidget(self._max_velocity)
        params_layout.addWidget(self.launch_params)

        self.error_label = QLabel()
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #d9534f;")
        self.error_label.hide()
        params_layout.addWidget(self.error_label)

        main_layout.addWidget(params_group)

        # --- Results ---
        results_group = QGroupBox("Results")
        results_layout = QGridLayout()
        results_group.setLayout(results_layout)

        self.max_height_label = QLabel(_PLACEHOLDER)
        self.range_label = QLabel(_PLACEHOLDER)
        self.flight_time_label = QLabel(_PLACEHOLDER)
        self.final_velocity_label = QLabel(_PLACEHOLDER)

        rows = [
            ("Max height", self.max_height_label, "m"),
            ("Distance", self.range_label, "m"),
            ("Flight time", self.flight_time_label, "s"),
            ("Final velocity (horizontal)", self.final_velocity_label, "m/s"),
        ]
        for row, (text, value_label, unit) in enumerate(rows):
            value_label.setAlignment(
                Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
            )
            value_label.setMinimumWidth(60)
            results_layout.addWidget(QLabel(text), row, 0)
            results_layout.addWidget(value_label, row, 1)
            results_layout.addWidget(QLabel(unit), row, 2)

        main_layout.addWidget(results_group)

        # --- Playback ---
        pb_group = QGroupBox("Playback")
        pb_layout = QHBoxLayout()
        pb_group.setLayout(pb_layout)

        self.simulate_btn = QPushButton("Simulate")
        self.pause_btn = QPushButton("Pause")
        self.reset_btn = QPushButton("Reset")
        pb_layout.addWidget(self.simulate_btn)
        pb_layout.addWidget(self.pause_btn)
        pb_layout.addWidget(self.reset_btn)

        main_layout.addWidget(pb_group)

        self.keep_points_checkbox = QCheckBox("Store trajectory points in saved records")
        main_layout.addWidget(self.keep_points_checkbox)
        main_layout.addStretch()

    # -- Public accessors --

    def get_params(self):
        return self.launch_params.get_params()

    def set_params(self, params, notify=True):
        self.launch_params.set_params(params, notify)

    def show_results(self, results):
        self.max_height_label.setText(f"{results.max_height:.1f}")
        self.range_label.setText(f"{results.range:.1f}")
        self.flight_time_label.setText(f"{results.flight_time:.2f}")
        self.final_velocity_label.setText(f"{results.final_velocity:.1f}")

    def clear_results(self):
        for label in (self.max_height_label, self.range_label,
                      self.flight_time_label, self.final_velocity_label):
            label.setText(_PLACEHOLDER)

    def show_violations(self, violations):
        if not violations:
            self.error_label.hide()
            return
        self.error_label.setText(
            "\n".join(f"{v.field.replace('_', ' ')} {v.reason}" for v in violations)
        )
        self.error_label.show()

    def set_state(self, state):
        """Enable buttons and inputs for an AnimationState."""
        active = state in (AnimationState.RUNNING, AnimationState.PAUSED)

        self.simulate_btn.setEnabled(not active)
        self.simulate_btn.setText(
            "Simulate Again" if state is AnimationState.COMPLETED else "Simulate"
        )
        self.pause_btn.setEnabled(active)
        self.pause_btn.setText("Resume" if state is AnimationState.PAUSED else "Pause")
        self.reset_btn.setEnabled(state is not AnimationState.IDLE)
        self.launch_params.setEnabled(not active)
