"""Shared UI widgets: slider helpers and the launch parameter editor."""

import math

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QGridLayout, QSlider, QLabel, QComboBox, QDoubleSpinBox,
)

from simulation import DEFAULT_MAX_VELOCITY, GRAVITY_PRESETS, LaunchParams


# ---------------------------------------------------------------------------
# Slider helpers
# ---------------------------------------------------------------------------

def make_slider(minimum, maximum, value, resolution=100):
    """Create an integer QSlider that maps to float values.

    The slider range is [minimum*resolution, maximum*resolution].
    """
    slider = QSlider(Qt.Orientation.Horizontal)
    slider.setMinimum(int(minimum * resolution))
    slider.setMaximum(int(maximum * resolution))
    slider.setValue(int(round(value * resolution)))
    slider.resolution = resolution
    return slider


def slider_value(slider):
    """Read the float value from a slider created by make_slider."""
    return slider.value() / slider.resolution


def set_slider_value(slider, value):
    """Move a make_slider slider to the position closest to value."""
    slider.setValue(int(round(value * slider.resolution)))


# ---------------------------------------------------------------------------
# LaunchParamsWidget
# ---------------------------------------------------------------------------

class LaunchParamsWidget(QWidget):
    """Sliders with exact numeric entry for velocity, angle and height,
    plus a gravity preset picker.

    Each slider is paired with a QDoubleSpinBox; moving either updates the
    other. Emits params_changed whenever any value changes; call
    get_params() to read the current LaunchParams.
    """

    params_changed = pyqtSignal()

    # Largest launch height the numeric entry accepts (m)
    MAX_HEIGHT = 10000.0

    def __init__(self, max_velocity=DEFAULT_MAX_VELOCITY, parent=None):
        super().__init__(parent)
        layout = QGridLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # Params set programmatically, returned as-is until the user edits
        self._exact = None

        defaults = LaunchParams()
        self.velocity_slider = make_slider(0, max_velocity, defaults.initial_velocity, 10)
        self.angle_slider = make_slider(0, 90, defaults.launch_angle, 10)
        self.height_slider = make_slider(0, 100, defaults.initial_height, 10)

        self.velocity_spin = self._add_row(
            layout, 0, "v₀", self.velocity_slider, max_velocity, " m/s")
        self.angle_spin = self._add_row(
            layout, 1, "θ", self.angle_slider, 90, "°")
        self.height_spin = self._add_row(
            layout, 2, "h₀", self.height_slider, self.MAX_HEIGHT, " m")

        self.gravity_combo = QComboBox()
        for value, label in GRAVITY_PRESETS.values():
            self.gravity_combo.addItem(f"{label} ({value} m/s²)", value)
        self.gravity_combo.currentIndexChanged.connect(self._on_user_edit)
        layout.addWidget(QLabel("g"), 3, 0)
        layout.addWidget(self.gravity_combo, 3, 1, 1, 2)

    def _add_row(self, layout, row, label_text, slider, maximum, unit=""):
        spin = QDoubleSpinBox()
        spin.setDecimals(3)
        spin.setRange(0.0, maximum)
        spin.setSingleStep(0.1)
        spin.setSuffix(unit)
        spin.setKeyboardTracking(False)
        spin.setMinimumWidth(90)
        spin.setValue(slider_value(slider))

        layout.addWidget(QLabel(label_text), row, 0)
        layout.addWidget(slider, row, 1)
        layout.addWidget(spin, row, 2)

        def _from_slider(_val, sp=spin, sl=slider):
            sp.blockSignals(True)
            sp.setValue(slider_value(sl))
            sp.blockSignals(False)
            self._on_user_edit()

        def _from_spin(value, sl=slider):
            _fit_slider(sl, value)
            sl.blockSignals(True)
            set_slider_value(sl, value)
            sl.blockSignals(False)
            self._on_user_edit()

        slider.valueChanged.connect(_from_slider)
        spin.valueChanged.connect(_from_spin)
        return spin

    def _on_user_edit(self, *_args):
        self._exact = None
        self.params_changed.emit()

    def get_params(self):
        """Return a LaunchParams from the current widget values."""
        if self._exact is not None:
            return self._exact
        return LaunchParams(
            initial_velocity=self.velocity_spin.value(),
            launch_angle=self.angle_spin.value(),
            initial_height=self.height_spin.value(),
            gravity=float(self.gravity_combo.currentData()),
        )

    def set_params(self, params, notify=True):
        """Set widget values from a LaunchParams.

        get_params() returns params unchanged until the user edits a
        value. Gravity values without a preset are added to the picker.
        params_changed is emitted once at the end unless notify is False.
        """
        self.blockSignals(True)
        try:
            for spin, slider, value in (
                (self.velocity_spin, self.velocity_slider, params.initial_velocity),
                (self.angle_spin, self.angle_slider, params.launch_angle),
                (self.height_spin, self.height_slider, params.initial_height),
            ):
                _fit_slider(slider, value)
                spin.setValue(value)
                slider.blockSignals(True)
                set_slider_value(slider, value)
                slider.blockSignals(False)

            idx = self.gravity_combo.findData(params.gravity)
            if idx < 0:
                self.gravity_combo.addItem(f"Custom ({params.gravity:g} m/s²)",
                                           params.gravity)
                idx = self.gravity_combo.count() - 1
            self.gravity_combo.setCurrentIndex(idx)
        finally:
            self.blockSignals(False)
        self._exact = params
        if notify:
            self.params_changed.emit()


def _fit_slider(slider, value):
    """Extend a make_slider slider's maximum so value fits."""
    needed = int(math.ceil(value * slider.resolution))
    if needed > slider.maximum():
        slider.setMaximum(needed)
