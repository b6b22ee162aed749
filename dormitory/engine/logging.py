"""
Assignment Logger - Run-scoped event log for the assignment engine.

Tracks placements, cohesion violations, unplaced registrants, feasibility
warnings and progress for one engine run.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class AssignmentLogger:
    """Logger for tracking placement decisions and violations during a run."""

    def __init__(self, debug_mode: bool = False) -> None:
        self.debug_mode = debug_mode
        self.placements: dict[str, list[str]] = defaultdict(list)
        self.cohesion_violations: list[dict[str, Any]] = []
        self.unplaced: list[dict[str, int]] = []
        self.feasibility_warnings: list[str] = []
        self.progress: list[str] = []

    def log_placement(self, unit_label: str, details: str) -> None:
        """Log a placement decision. Only retained in debug mode."""
        if self.debug_mode:
            self.placements[unit_label].append(details)
            logger.debug(f"[PLACEMENT] {unit_label}: {details}")

    def log_cohesion_violation(self, unit_label: str, dormitory_ids: list[int]) -> None:
        """Log a cohesion unit that had to be split across dormitories."""
        self.cohesion_violations.append({"unit": unit_label, "dormitory_ids": dormitory_ids})
        logger.info(f"[COHESION] {unit_label} split across dormitories {dormitory_ids}")

    def log_unplaced(self, registrant_id: int, schedule_id: int) -> None:
        """Log a (registrant, night) pair that no dormitory could host."""
        self.unplaced.append({"registrant_id": registrant_id, "schedule_id": schedule_id})
        logger.warning(f"[UNPLACED] Registrant {registrant_id} has no bed on schedule {schedule_id}")

    def log_feasibility_warning(self, warning: str) -> None:
        """Log potential feasibility issues found before placement."""
        self.feasibility_warnings.append(warning)
        logger.warning(f"[FEASIBILITY] {warning}")

    def log_progress(self, message: str) -> None:
        """Log engine progress."""
        self.progress.append(message)
        if self.debug_mode:
            logger.debug(f"[ENGINE] {message}")

    def get_summary(self) -> dict[str, Any]:
        """Get summary of all logged information."""
        return {
            "placements": dict(self.placements),
            "cohesion_violations": self.cohesion_violations,
            "unplaced": self.unplaced,
            "feasibility_warnings": self.feasibility_warnings,
            "progress": self.progress,
        }

    def save_to_file(
        self,
        log_dir: str | Path,
        run_label: str,
        run_id: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> str:
        """Save logs to a JSON file and return the file path.

        config, when given, records the resolved engine settings of the run.
        """
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        run_id_suffix = f"_{run_id}" if run_id else ""
        filepath = logs_dir / f"{run_label}_assignment_log_{timestamp}{run_id_suffix}.json"

        log_data = {
            "timestamp": datetime.now().isoformat(),
            "run_label": run_label,
            "run_id": run_id,
            "debug_mode": self.debug_mode,
            "config": config or {},
            "summary": self.get_summary(),
        }

        with open(filepath, "w") as f:
            json.dump(log_data, f, indent=2, default=str)

        logger.info(f"Assignment logs saved to {filepath}")
        return str(filepath)
