"""Entry point for the Projectile Motion Simulator."""

import argparse
import logging
import sys

from PyQt6.QtWidgets import QApplication

from app_window import AppWindow
from simulation import DEFAULT_MAX_VELOCITY


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Explore projectile motion with a real-time animated trajectory.",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Animation frame rate (default: 60)",
    )
    parser.add_argument(
        "--max-velocity",
        type=float,
        default=DEFAULT_MAX_VELOCITY,
        help=f"Largest accepted launch speed in m/s (default: {DEFAULT_MAX_VELOCITY:g})",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    args, _qt_args = parser.parse_known_args(argv)
    if args.fps < 1:
        parser.error("--fps must be at least 1")
    if args.max_velocity <= 0:
        parser.error("--max-velocity must be positive")
    return args


def main():
    args = parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    app = QApplication(sys.argv)
    window = AppWindow(fps=args.fps, max_velocity=args.max_velocity)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
