#!/usr/bin/env python3
"""
Preview a dormitory assignment from a JSON snapshot file.

The snapshot uses the same camelCase shape as the preview API payload:
registrants, dormitories, schedules, existingAssignments, and optionally
assignmentStrategy, capacityBasis and seed. The preview is printed as JSON.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError as SnapshotError  # noqa: E402

from dormitory.config import ConfigError, ConfigLoader  # noqa: E402
from dormitory.engine import DormitoryAssignmentEngine, select_snapshot  # noqa: E402
from dormitory.errors import AssignmentConfigurationError  # noqa: E402
from dormitory.logging_config import configure_logging, get_logger  # noqa: E402
from dormitory.models import AssignmentRequest, AssignmentStrategy, CapacityBasis, Gender  # noqa: E402

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview a retreat dormitory assignment")
    parser.add_argument("snapshot", type=Path, help="JSON snapshot file")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in AssignmentStrategy],
        help="Override the snapshot's assignment strategy",
    )
    parser.add_argument("--basis", choices=[b.value for b in CapacityBasis], help="Override the capacity basis")
    parser.add_argument("--seed", type=int, help="Seed for the RANDOM strategy")
    parser.add_argument("--gender", choices=[Gender.MALE.value, Gender.FEMALE.value], help="Only assign one gender")
    parser.add_argument("--output", type=Path, help="Write the preview here instead of stdout")
    parser.add_argument("--save-log", metavar="LABEL", help="Save the run log under the engine log directory")
    parser.add_argument("--debug", action="store_true", help="Keep per-unit placement decisions in the run log")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(source="cli", debug=args.debug)

    if not args.snapshot.exists():
        logger.error(f"Snapshot file not found: {args.snapshot}")
        return 1

    try:
        request = AssignmentRequest.model_validate_json(args.snapshot.read_text())
    except SnapshotError as e:
        logger.error(f"Invalid snapshot {args.snapshot}: {e.error_count()} error(s)\n{e}")
        return 2

    updates: dict[str, object] = {}
    if args.strategy:
        updates["assignment_strategy"] = AssignmentStrategy(args.strategy)
    if args.basis:
        updates["capacity_basis"] = CapacityBasis(args.basis)
    if args.seed is not None:
        updates["seed"] = args.seed
    if args.gender:
        registrants, dormitories = select_snapshot(
            request.registrants, request.dormitories, gender=Gender(args.gender)
        )
        updates["registrants"] = registrants
        updates["dormitories"] = dormitories
    if updates:
        request = request.model_copy(update=updates)

    try:
        config = ConfigLoader(overrides={"engine.debug.enabled": True} if args.debug else None)
        engine = DormitoryAssignmentEngine(request, config=config)
        result = engine.run()
    except (AssignmentConfigurationError, ConfigError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 2

    output = result.preview.model_dump_json(by_alias=True, indent=2)
    if args.output:
        args.output.write_text(output + "\n")
        logger.info(f"Preview written to {args.output}")
    else:
        print(output)

    if args.save_log:
        engine.save_log(args.save_log)

    if not result.preview.is_assignable:
        logger.warning(f"{len(result.unplaced)} registrant-nights could not be placed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
