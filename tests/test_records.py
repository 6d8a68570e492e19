"""Tests for projectile/records.py: JSON records for history and replay."""

import json
import logging
import tempfile
from pathlib import Path

import pytest

from simulation import LaunchParams, compute_results
from projectile.records import (
    SimulationRecord, build_record, delete_record, load_record, reconstruct_preview,
    recent_records, record_from_dict, record_to_dict, save_record,
)
from projectile.sampler import PREVIEW_SAMPLES, sample_trajectory


@pytest.fixture
def params():
    return LaunchParams(initial_velocity=30, launch_angle=40,
                        initial_height=2, gravity=9.81)


@pytest.fixture
def tmpdir_path():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _write(path, data):
    path.write_text(json.dumps(data))
    return path


class TestBuildRecord:
    """Test creating records from params."""

    def test_defaults(self, params):
        record = build_record(params)
        assert record.params is params
        assert record.results == compute_results(params)
        assert record.trajectory_points is None
        assert record.name.startswith("Simulation ")
        assert record.created_at.endswith("+00:00")

    def test_custom_name_and_trajectory(self, params):
        record = build_record(params, name="Cannon", include_trajectory=True,
                              sample_count=50)
        assert record.name == "Cannon"
        assert len(record.trajectory_points) == 51

    def test_preview_rebuilt_from_params(self, params):
        record = build_record(params, include_trajectory=True)
        preview = reconstruct_preview(record)
        assert len(preview) == PREVIEW_SAMPLES + 1
        assert preview == sample_trajectory(params, PREVIEW_SAMPLES)


class TestDictLayout:
    """Test the JSON dict layout and its validation."""

    def test_camel_case_keys(self, params):
        data = record_to_dict(build_record(params, name="a"))
        assert set(data) == {"name", "createdAt", "params", "results"}
        assert set(data["params"]) == {
            "initialVelocity", "launchAngle", "initialHeight", "gravity",
        }
        assert set(data["results"]) == {
            "maxHeight", "range", "flightTime", "finalVelocity",
        }
        assert data["params"]["initialVelocity"] == 30

    def test_points_included_when_present(self, params):
        data = record_to_dict(build_record(params, include_trajectory=True,
                                           sample_count=4))
        assert len(data["trajectoryPoints"]) == 5
        assert set(data["trajectoryPoints"][0]) == {"x", "y", "t"}

    def test_from_dict_accepts_web_client_record(self):
        data = {
            "name": "From browser",
            "params": {"initialVelocity": 25, "launchAngle": 45,
                       "initialHeight": 0, "gravity": 9.81},
        }
        record = record_from_dict(data)
        assert record.params == LaunchParams(25.0, 45.0, 0.0, 9.81)
        assert record.results.range == pytest.approx(63.7, abs=0.1)
        assert record.created_at == ""

    def test_missing_name(self, params):
        data = record_to_dict(build_record(params))
        del data["name"]
        assert record_from_dict(data).name == "Untitled Simulation"

    @pytest.mark.parametrize("data", [
        [],
        {},
        {"params": "fast"},
        {"params": {"initialVelocity": 25, "launchAngle": 45, "initialHeight": 0}},
        {"params": {"initialVelocity": "25", "launchAngle": 45,
                    "initialHeight": 0, "gravity": 9.81}},
        {"params": {"initialVelocity": True, "launchAngle": 45,
                    "initialHeight": 0, "gravity": 9.81}},
        {"params": {"initialVelocity": 25, "launchAngle": 120,
                    "initialHeight": 0, "gravity": 9.81}},
        {"params": {"initialVelocity": 25, "launchAngle": 45,
                    "initialHeight": 0, "gravity": 9.81},
         "trajectoryPoints": [1, 2, 3]},
        {"params": {"initialVelocity": 25, "launchAngle": 45,
                    "initialHeight": 0, "gravity": 9.81},
         "trajectoryPoints": [{"x": 0, "y": 0}]},
    ])
    def test_rejects_malformed(self, data):
        with pytest.raises(ValueError):
            record_from_dict(data)

    def test_max_velocity_applies(self):
        data = {"params": {"initialVelocity": 150, "launchAngle": 45,
                           "initialHeight": 0, "gravity": 9.81}}
        with pytest.raises(ValueError, match="initial_velocity"):
            record_from_dict(data)
        assert record_from_dict(data, max_velocity=200).params.initial_velocity == 150

    def test_stale_results_recomputed(self, params, caplog):
        data = record_to_dict(build_record(params))
        data["results"]["range"] = 1.0
        with caplog.at_level(logging.WARNING, logger="projectile.records"):
            record = record_from_dict(data)
        assert record.results == compute_results(params)
        assert "range" in caplog.text


class TestFiles:
    """Test saving and loading record files."""

    def test_round_trip(self, params, tmpdir_path):
        record = build_record(params, name="Round trip", include_trajectory=True)
        path = save_record(tmpdir_path / "shot.json", record)
        loaded = load_record(path)
        assert loaded.name == record.name
        assert loaded.params == record.params
        assert loaded.results == record.results
        assert loaded.trajectory_points == record.trajectory_points
        assert loaded.created_at == record.created_at

    def test_suffix_forced(self, params, tmpdir_path):
        path = save_record(tmpdir_path / "nested" / "shot.txt", build_record(params))
        assert path == tmpdir_path / "nested" / "shot.json"
        assert path.exists()

    def test_missing_file(self, tmpdir_path):
        with pytest.raises(FileNotFoundError):
            load_record(tmpdir_path / "nope.json")

    def test_bad_json(self, tmpdir_path):
        path = tmpdir_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_record(path)

    def test_invalid_params_in_file(self, tmpdir_path):
        path = _write(tmpdir_path / "neg.json", {
            "params": {"initialVelocity": 25, "launchAngle": 45,
                       "initialHeight": -3, "gravity": 9.81},
        })
        with pytest.raises(ValueError, match="initial_height"):
            load_record(path)


class TestRecentRecords:
    """Test listing the newest records in a directory."""

    def _save(self, directory, name, created_at, params):
        record = SimulationRecord(
            name=name, params=params, results=compute_results(params),
            created_at=created_at,
        )
        return save_record(directory / f"{name}.json", record)

    def test_newest_first(self, params, tmpdir_path):
        self._save(tmpdir_path, "old", "2024-01-01T10:00:00+00:00", params)
        self._save(tmpdir_path, "new", "2024-03-01T10:00:00+00:00", params)
        self._save(tmpdir_path, "mid", "2024-02-01T10:00:00+00:00", params)
        names = [r.name for _, r in recent_records(tmpdir_path)]
        assert names == ["new", "mid", "old"]

    def test_limit(self, params, tmpdir_path):
        for i in range(12):
            self._save(tmpdir_path, f"run{i:02d}", f"2024-01-{i + 1:02d}T00:00:00+00:00", params)
        entries = recent_records(tmpdir_path)
        assert len(entries) == 10
        assert entries[0][1].name == "run11"
        assert len(recent_records(tmpdir_path, limit=3)) == 3

    def test_skips_unreadable(self, params, tmpdir_path, caplog):
        self._save(tmpdir_path, "good", "2024-01-01T00:00:00+00:00", params)
        (tmpdir_path / "garbage.json").write_text("]]]")
        _write(tmpdir_path / "invalid.json", {"params": {}})
        (tmpdir_path / "notes.txt").write_text("ignored")
        with caplog.at_level(logging.WARNING, logger="projectile.records"):
            entries = recent_records(tmpdir_path)
        assert [r.name for _, r in entries] == ["good"]
        assert "garbage.json" in caplog.text

    def test_missing_directory(self, tmpdir_path):
        assert recent_records(tmpdir_path / "absent") == []


class TestDeleteRecord:
    """Test removing records from the history directory."""

    def test_removes_file_from_history(self, params, tmpdir_path):
        keep = save_record(tmpdir_path / "keep.json", build_record(params, name="keep"))
        gone = save_record(tmpdir_path / "gone.json", build_record(params, name="gone"))
        delete_record(gone)
        assert not gone.exists()
        assert keep.exists()
        assert [r.name for _, r in recent_records(tmpdir_path)] == ["keep"]

    def test_missing_file(self, tmpdir_path):
        with pytest.raises(FileNotFoundError):
            delete_record(tmpdir_path / "nope.json")

    def test_refuses_non_record(self, tmpdir_path):
        other = tmpdir_path / "notes.txt"
        other.write_text("keep me")
        with pytest.raises(ValueError):
            delete_record(other)
        assert other.exists()

    def test_logs(self, params, tmpdir_path, caplog):
        path = save_record(tmpdir_path / "a.json", build_record(params))
        with caplog.at_level(logging.INFO, logger="projectile.records"):
            delete_record(path)
        assert "Deleted record" in caplog.text


class TestExactParams:
    """Test that records keep params the sliders cannot represent."""

    def test_preview_uses_exact_params(self, tmpdir_path):
        exact = LaunchParams(initial_velocity=25.37, launch_angle=45.25,
                             initial_height=3.333, gravity=9.81)
        path = save_record(tmpdir_path / "exact.json", build_record(exact))
        loaded = load_record(path)

        assert loaded.params == exact
        assert reconstruct_preview(loaded) == sample_trajectory(exact, PREVIEW_SAMPLES)
        assert loaded.results.range == pytest.approx(68.76, abs=0.01)

        rounded = LaunchParams(25.4, 45.25, 3.333, 9.81)
        assert reconstruct_preview(loaded)[-1].x != pytest.approx(
            sample_trajectory(rounded, PREVIEW_SAMPLES)[-1].x, abs=0.05,
        )
