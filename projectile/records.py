"""Simulation records: JSON persistence of runs for history and replay.

A record stores the launch parameters, the derived results and,
optionally, the sampled trajectory. Parameters are the source of truth:
results are recomputed on load and trajectory points are only a cache,
so a preview can always be rebuilt from the params alone.

The on-disk keys follow the camelCase layout used by the web client's
storage API so records can be exchanged with it.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from simulation import (
    DEFAULT_MAX_VELOCITY, LaunchParams, SimulationResult,
    compute_results, validate_params,
)
from projectile.sampler import (
    PREVIEW_SAMPLES, RUN_SAMPLES, TrajectoryPoint, sample_trajectory,
)

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"

# Relative tolerance when comparing stored results to recomputed ones
_RESULT_RTOL = 1e-6

_PARAM_KEYS = (
    ("initialVelocity", "initial_velocity"),
    ("launchAngle", "launch_angle"),
    ("initialHeight", "initial_height"),
    ("gravity", "gravity"),
)

_RESULT_KEYS = (
    ("maxHeight", "max_height"),
    ("range", "range"),
    ("flightTime", "flight_time"),
    ("finalVelocity", "final_velocity"),
)


@dataclass(frozen=True)
class SimulationRecord:
    """A saved simulation.

    Attributes:
        name: Display name.
        params: Launch parameters (source of truth).
        results: Derived metrics for params.
        trajectory_points: Optional cached run samples.
        created_at: ISO-8601 UTC timestamp.
    """

    name: str
    params: LaunchParams
    results: SimulationResult
    trajectory_points: tuple[TrajectoryPoint, ...] | None = None
    created_at: str = ""


def build_record(
    params: LaunchParams,
    name: str | None = None,
    include_trajectory: bool = False,
    sample_count: int = RUN_SAMPLES,
) -> SimulationRecord:
    """Snapshot params (and optionally the sampled path) into a record."""
    now = datetime.now(timezone.utc)
    if not name:
        name = f"Simulation {now:%Y-%m-%d %H:%M}"
    points = sample_trajectory(params, sample_count) if include_trajectory else None
    return SimulationRecord(
        name=name,
        params=params,
        results=compute_results(params),
        trajectory_points=points,
        created_at=now.isoformat(timespec="seconds"),
    )


def reconstruct_preview(
    record: SimulationRecord,
    count: int = PREVIEW_SAMPLES,
) -> tuple[TrajectoryPoint, ...]:
    """Preview path rebuilt from the record's params only."""
    return sample_trajectory(record.params, count)


def record_to_dict(record: SimulationRecord) -> dict:
    data = {
        "name": record.name,
        "createdAt": record.created_at,
        "params": {
            key: getattr(record.params, attr) for key, attr in _PARAM_KEYS
        },
        "results": {
            key: getattr(record.results, attr) for key, attr in _RESULT_KEYS
        },
    }
    if record.trajectory_points is not None:
        data["trajectoryPoints"] = [
            {"x": p.x, "y": p.y, "t": p.t} for p in record.trajectory_points
        ]
    return data


def _number(mapping: dict, key: str, where: str) -> float:
    try:
        value = mapping[key]
    except KeyError:
        raise ValueError(f"Missing {where}.{key}") from None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}.{key} must be a number, got {value!r}")
    return float(value)


def record_from_dict(
    data: dict,
    max_velocity: float = DEFAULT_MAX_VELOCITY,
) -> SimulationRecord:
    """Parse and validate a record dict.

    Raises:
        ValueError: If the structure is malformed or params are invalid.
    """
    if not isinstance(data, dict) or not isinstance(data.get("params"), dict):
        raise ValueError("Record must be an object with a 'params' object")

    raw = data["params"]
    params = LaunchParams(**{
        attr: _number(raw, key, "params") for key, attr in _PARAM_KEYS
    })
    report = validate_params(params, max_velocity)
    if not report.valid:
        reasons = "; ".join(f"{v.field} {v.reason}" for v in report.violations)
        raise ValueError(f"Invalid record params: {reasons}")

    results = compute_results(params)
    stored = data.get("results")
    if isinstance(stored, dict):
        for key, attr in _RESULT_KEYS:
            value = stored.get(key)
            if isinstance(value, (int, float)) and not math.isclose(
                value, getattr(results, attr), rel_tol=_RESULT_RTOL, abs_tol=1e-9,
            ):
                logger.warning(
                    "Stored %s=%r differs from recomputed %r; using recomputed",
                    key, value, getattr(results, attr),
                )

    points = None
    raw_points = data.get("trajectoryPoints")
    if raw_points:
        if not isinstance(raw_points, list) or not all(
            isinstance(p, dict) for p in raw_points
        ):
            raise ValueError("trajectoryPoints must be a list of objects")
        points = tuple(
            TrajectoryPoint(
                _number(p, "x", "trajectoryPoints[]"),
                _number(p, "y", "trajectoryPoints[]"),
                _number(p, "t", "trajectoryPoints[]"),
            )
            for p in raw_points
        )

    return SimulationRecord(
        name=str(data.get("name") or "Untitled Simulation"),
        params=params,
        results=results,
        trajectory_points=points,
        created_at=str(data.get("createdAt", "")),
    )


def save_record(path: str | Path, record: SimulationRecord) -> Path:
    """Write a record as JSON, creating parent directories."""
    path = Path(path)
    if path.suffix != RECORD_SUFFIX:
        path = path.with_suffix(RECORD_SUFFIX)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(record_to_dict(record), f, indent=2)

    logger.info("Saved record %r to %s", record.name, path)
    return path


def load_record(
    path: str | Path,
    max_velocity: float = DEFAULT_MAX_VELOCITY,
) -> SimulationRecord:
    """Read and validate a JSON record.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a valid record.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Record not found: {path}")

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc

    record = record_from_dict(data, max_velocity)
    logger.info("Loaded record %r from %s", record.name, path)
    return record


def recent_records(
    directory: str | Path,
    limit: int = 10,
    max_velocity: float = DEFAULT_MAX_VELOCITY,
) -> list[tuple[Path, SimulationRecord]]:
    """Most recent readable records in a directory, newest first.

    Unreadable files are skipped with a warning.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    loaded = []
    for path in directory.glob(f"*{RECORD_SUFFIX}"):
        try:
            record = record_from_dict(json.loads(path.read_text()), max_velocity)
        except (OSError, ValueError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        loaded.append((path, record))

    loaded.sort(key=lambda item: (item[1].created_at, item[0].name), reverse=True)
    return loaded[:limit]


def delete_record(path: str | Path) -> None:
    """Remove a saved record file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If path is not a record file.
    """
    path = Path(path)
    if path.suffix != RECORD_SUFFIX:
        raise ValueError(f"Not a record file: {path}")
    if not path.is_file():
        raise FileNotFoundError(f"Record not found: {path}")
    path.unlink()
    logger.info("Deleted record %s", path)
