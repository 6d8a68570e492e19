"""App window: hosts the projectile view with record toolbar and status bar.

Records are saved to and opened from JSON files; the Recent menu lists
the newest records in the last directory used, each of which can be
opened or deleted.
"""

import logging
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QMainWindow, QToolBar, QStatusBar, QFileDialog, QMessageBox, QMenu,
    QToolButton,
)

from simulation import DEFAULT_MAX_VELOCITY
from projectile.records import delete_record, load_record, recent_records, save_record
from projectile.view import ProjectileView

logger = logging.getLogger(__name__)

_RECORD_FILTER = "Simulation records (*.json)"


class AppWindow(QMainWindow):
    """Top-level window for the projectile simulator."""

    def __init__(self, fps=ProjectileView.FPS, max_velocity=DEFAULT_MAX_VELOCITY):
        super().__init__()
        self.setWindowTitle("Projectile Motion Simulator")
        self.resize(1200, 750)
        self._max_velocity = max_velocity
        self._records_dir = Path.home()

        # --- View ---
        self.projectile_view = ProjectileView(fps=fps, max_velocity=max_velocity)
        self.setCentralWidget(self.projectile_view)

        # --- Toolbar ---
        toolbar = QToolBar("Records")
        toolbar.setMovable(False)
        self.addToolBar(Qt.ToolBarArea.TopToolBarArea, toolbar)

        save_action = QAction("Save Record...", self)
        save_action.triggered.connect(self._on_save)
        toolbar.addAction(save_action)

        open_action = QAction("Open Record...", self)
        open_action.triggered.connect(self._on_open)
        toolbar.addAction(open_action)

        self._recent_menu = QMenu("Recent", self)
        self._recent_menu.aboutToShow.connect(self._populate_recent)
        recent_button = QToolButton()
        recent_button.setText("Recent")
        recent_button.setMenu(self._recent_menu)
        recent_button.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        toolbar.addWidget(recent_button)

        # --- Status bar ---
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.addWidget(self.projectile_view.time_label)
        self._status_bar.addWidget(self.projectile_view.position_label)
        self._status_bar.addPermanentWidget(self.projectile_view.probe_label)

    # -- Records --

    def _on_save(self):
        record = self.projectile_view.current_record()
        if record is None:
            return
        default = self._records_dir / f"{record.name.replace(':', '-')}.json"
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Record", str(default), _RECORD_FILTER,
        )
        if not path:
            return
        try:
            saved = save_record(path, record)
        except OSError as exc:
            logger.warning("Could not save record to %s: %s", path, exc)
            QMessageBox.warning(self, "Save Record", f"Could not save record:\n{exc}")
            return
        self._records_dir = saved.parent
        self._status_bar.showMessage(f"Saved {saved.name}", 3000)

    def _on_open(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Record", str(self._records_dir), _RECORD_FILTER,
        )
        if path:
            self._open_path(Path(path))

    def _open_path(self, path):
        try:
            record = load_record(path, self._max_velocity)
        except (OSError, ValueError) as exc:
            logger.warning("Could not open record %s: %s", path, exc)
            QMessageBox.warning(self, "Open Record", f"Could not open record:\n{exc}")
            return
        self._records_dir = path.parent
        self.projectile_view.load_record(record)
        self._status_bar.showMessage(f"Opened {record.name}", 3000)

    def _populate_recent(self):
        self._recent_menu.clear()
        entries = recent_records(self._records_dir, max_velocity=self._max_velocity)
        if not entries:
            empty = self._recent_menu.addAction("No records")
            empty.setEnabled(False)
            return
        for path, record in entries:
            entry = self._recent_menu.addMenu(
                f"{record.name}  ({record.params.initial_velocity:g} m/s, "
                f"{record.params.launch_angle:g}°)"
            )
            open_action = entry.addAction("Open")
            open_action.triggered.connect(lambda _checked=False, p=path: self._open_path(p))
            delete_action = entry.addAction("Delete")
            delete_action.triggered.connect(
                lambda _checked=False, p=path, n=record.name: self._delete_path(p, n)
            )

    def _delete_path(self, path, name):
        answer = QMessageBox.question(
            self, "Delete Record", f"Delete \"{name}\" ({path.name})?",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        try:
            delete_record(path)
        except (OSError, ValueError) as exc:
            logger.warning("Could not delete record %s: %s", path, exc)
            QMessageBox.warning(self, "Delete Record", f"Could not delete record:\n{exc}")
            return
        self._status_bar.showMessage(f"Deleted {name}", 3000)

    def closeEvent(self, event):
        self.projectile_view.deactivate()
        super().closeEvent(event)
