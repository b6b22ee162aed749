"""Tests for the preview_assignment CLI script."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

SCRIPT_PATH = Path(__file__).parents[3] / "scripts" / "preview_assignment.py"


def run_preview(snapshot: Path, *args: str, env: dict[str, str] | None = None) -> tuple[int, str]:
    """Run the script against a snapshot file and return (exit code, stdout)."""
    result = subprocess.run(
        [sys.executable, str(SCRIPT_PATH), str(snapshot), *args],
        capture_output=True,
        text=True,
        env={**os.environ, **(env or {})},
    )
    return result.returncode, result.stdout


def make_registrant(registrant_id: int, gender: str = "FEMALE", gbs: int | None = 1) -> dict[str, Any]:
    return {
        "id": registrant_id,
        "name": f"Registrant {registrant_id}",
        "gender": gender,
        "gradeNumber": 1,
        "univGroupNumber": 1,
        "gbsNumber": gbs,
        "scheduleIds": [1],
    }


def make_dormitory(dormitory_id: int, gender: str = "FEMALE", optimal: int = 10) -> dict[str, Any]:
    return {"id": dormitory_id, "name": f"Dorm {dormitory_id}", "gender": gender, "optimalCapacity": optimal}


def write_snapshot(tmp_path: Path, **overrides: Any) -> Path:
    """Write a snapshot of 12 female registrants and two 10-bed dormitories."""
    snapshot: dict[str, Any] = {
        "capacityBasis": "MAX",
        "registrants": [make_registrant(i) for i in range(1, 13)],
        "dormitories": [make_dormitory(1), make_dormitory(2)],
        "schedules": [{"id": 1, "time": "2026-02-20T23:00:00", "type": "SLEEP"}],
    }
    snapshot.update(overrides)
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot))
    return path


class TestSuccessfulRuns:
    def test_writes_preview_to_output_file(self, tmp_path):
        output = tmp_path / "preview.json"

        code, _ = run_preview(write_snapshot(tmp_path), "--output", str(output))

        assert code == 0
        preview = json.loads(output.read_text())
        assert preview["isAssignable"] is True
        assert preview["capacityBasis"] == "MAX"
        assert len(preview["previewAssignments"]) == 12

    def test_prints_preview_without_output_option(self, tmp_path):
        code, stdout = run_preview(write_snapshot(tmp_path))

        assert code == 0
        assert '"isAssignable": true' in stdout
        assert '"previewAssignments"' in stdout

    def test_shortfall_still_succeeds(self, tmp_path):
        output = tmp_path / "preview.json"
        snapshot = write_snapshot(tmp_path, registrants=[make_registrant(i) for i in range(1, 23)])

        code, stdout = run_preview(snapshot, "--output", str(output))

        assert code == 0
        assert json.loads(output.read_text())["isAssignable"] is False
        assert "could not be placed" in stdout

    def test_gender_option_narrows_the_snapshot(self, tmp_path):
        output = tmp_path / "preview.json"
        snapshot = write_snapshot(
            tmp_path,
            registrants=[make_registrant(1), make_registrant(2, gender="MALE", gbs=2)],
            dormitories=[make_dormitory(1), make_dormitory(2, gender="MALE")],
        )

        code, _ = run_preview(snapshot, "--gender", "MALE", "--output", str(output))

        assert code == 0
        preview = json.loads(output.read_text())
        assert [a["userRetreatRegistrationId"] for a in preview["previewAssignments"]] == [2]
        assert [s["dormitoryId"] for s in preview["dormitorySummary"]] == [2]

    def test_random_strategy_is_repeatable_for_a_seed(self, tmp_path):
        snapshot = write_snapshot(
            tmp_path,
            registrants=[make_registrant(i, gbs=None) for i in range(1, 8)],
            dormitories=[make_dormitory(1, optimal=3), make_dormitory(2, optimal=4)],
        )
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"

        run_preview(snapshot, "--strategy", "RANDOM", "--seed", "11", "--output", str(first))
        run_preview(snapshot, "--strategy", "RANDOM", "--seed", "11", "--output", str(second))

        assert json.loads(first.read_text())["assignmentStrategy"] == "RANDOM"
        assert first.read_text() == second.read_text()

    def test_save_log_writes_under_configured_directory(self, tmp_path):
        log_dir = tmp_path / "runs"

        code, _ = run_preview(
            write_snapshot(tmp_path),
            "--save-log",
            "spring-retreat",
            "--output",
            str(tmp_path / "preview.json"),
            env={"DORMITORY_ENGINE_LOG_DIR": str(log_dir)},
        )

        assert code == 0
        logs = list(log_dir.glob("spring-retreat_assignment_log_*.json"))
        assert len(logs) == 1
        assert json.loads(logs[0].read_text())["config"]["engine.log_dir"] == str(log_dir)


class TestFailures:
    """Bad input exits non-zero with a logged error instead of a traceback."""

    def test_missing_snapshot_file(self, tmp_path):
        code, stdout = run_preview(tmp_path / "missing.json")

        assert code == 1
        assert "Snapshot file not found" in stdout

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text("{not json")

        code, stdout = run_preview(path)

        assert code == 2
        assert "Invalid snapshot" in stdout
        assert "Traceback" not in stdout

    def test_registrant_with_mixed_gender(self, tmp_path):
        snapshot = write_snapshot(tmp_path, registrants=[make_registrant(1, gender="MIXED")])

        code, stdout = run_preview(snapshot)

        assert code == 2
        assert "Invalid snapshot" in stdout

    def test_mixed_gender_dormitory(self, tmp_path):
        snapshot = write_snapshot(tmp_path, dormitories=[make_dormitory(1, gender="MIXED")])

        code, stdout = run_preview(snapshot)

        assert code == 2
        assert "MixedGenderDormitoryError" in stdout
