"""
Preview Compiler - aggregates assignment records into the preview shape.

Pure aggregation over the run's records and the immutable snapshot. The only
side effect is an ERROR log when a dormitory ends up over capacity, which can
only happen through a packing defect or pre-existing overbooking.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from dormitory.errors import AssignmentInvariantError
from dormitory.models import (
    AssignmentRecord,
    AssignmentStrategy,
    CapacityBasis,
    DailySleepStat,
    Dormitory,
    DormitoryAssignmentPreview,
    DormitorySummary,
    ExistingAssignment,
    PreviewAssignment,
    Registrant,
    Schedule,
    ScheduleCapacityEntry,
    ScheduleCountEntry,
)

from .capacity import resolve_capacity

logger = logging.getLogger(__name__)


def order_nights(nights: Sequence[Schedule]) -> list[Schedule]:
    """Report order: by time, untimed schedules last, then by id."""
    return sorted(nights, key=lambda s: s.sort_key())


def count_occupancy(existing_assignments: Sequence[ExistingAssignment]) -> Counter[tuple[int, int]]:
    """Pre-existing beds taken per (dormitory id, night id)."""
    occupancy: Counter[tuple[int, int]] = Counter()
    for existing in existing_assignments:
        for night_id in existing.schedule_ids:
            occupancy[(existing.dormitory_id, night_id)] += 1
    return occupancy


def is_fully_placed(
    records: Sequence[AssignmentRecord],
    registrants: Sequence[Registrant],
    night_ids: Sequence[int],
) -> bool:
    placed = {(r.registrant_id, r.schedule_id) for r in records}
    return all(
        (registrant.id, night_id) in placed
        for registrant in registrants
        for night_id in registrant.attended_nights(night_ids)
    )


def _summarize_dormitory(
    dormitory: Dormitory,
    night_ids: list[int],
    capacity_basis: CapacityBasis,
    occupancy: Counter[tuple[int, int]],
    new_counts: Counter[tuple[int, int]],
) -> DormitorySummary:
    capacities = []
    current = []
    new = []
    remaining = []
    over_capacity = []

    for night_id in night_ids:
        capacity = resolve_capacity(dormitory, night_id, capacity_basis)
        occupied = occupancy.get((dormitory.id, night_id), 0)
        added = new_counts.get((dormitory.id, night_id), 0)
        left = capacity - occupied - added
        if left < 0:
            over_capacity.append(night_id)
            logger.error(
                f"Dormitory {dormitory.id} ({dormitory.name}) over capacity on schedule {night_id}: "
                f"capacity {capacity}, current {occupied}, new {added}"
            )
            left = 0

        capacities.append(ScheduleCapacityEntry(schedule_id=night_id, capacity=capacity))
        current.append(ScheduleCountEntry(schedule_id=night_id, count=occupied))
        new.append(ScheduleCountEntry(schedule_id=night_id, count=added))
        remaining.append(ScheduleCountEntry(schedule_id=night_id, count=left))

    return DormitorySummary(
        dormitory_id=dormitory.id,
        dormitory_name=dormitory.name,
        capacity_by_schedule=capacities,
        current_occupancy_by_schedule=current,
        new_assignments_by_schedule=new,
        remaining_capacity_by_schedule=remaining,
        over_capacity_schedule_ids=over_capacity,
    )


def compile_preview(
    records: Sequence[AssignmentRecord],
    dormitories: Sequence[Dormitory],
    nights: Sequence[Schedule],
    capacity_basis: CapacityBasis,
    strategy: AssignmentStrategy,
    *,
    registrants: Sequence[Registrant],
    existing_assignments: Sequence[ExistingAssignment] = (),
) -> DormitoryAssignmentPreview:
    """Build the DormitoryAssignmentPreview for one run.

    Args:
        records: Assignment records produced by the engine
        dormitories: Dormitory snapshot used by the run
        nights: Sleeping schedules of the run, any order
        capacity_basis: Capacity basis the run used
        strategy: Strategy the run used
        registrants: Roster the run tried to place
        existing_assignments: Pre-existing occupancy shown as "current"

    Returns:
        The preview with assignments, per-dormitory summaries and nightly demand

    Raises:
        AssignmentInvariantError: a record references an unknown registrant or dormitory
    """
    night_ids = [s.id for s in order_nights(nights)]
    night_position = {night_id: i for i, night_id in enumerate(night_ids)}
    registrant_by_id = {r.id: r for r in registrants}
    dormitory_by_id = {d.id: d for d in dormitories}

    preview_assignments = []
    for record in sorted(records, key=lambda r: (r.registrant_id, night_position.get(r.schedule_id, len(night_ids)))):
        registrant = registrant_by_id.get(record.registrant_id)
        dormitory = dormitory_by_id.get(record.dormitory_id)
        if registrant is None or dormitory is None:
            raise AssignmentInvariantError(
                f"Record for registrant {record.registrant_id} in dormitory {record.dormitory_id} "
                f"does not match the snapshot"
            )
        preview_assignments.append(
            PreviewAssignment(
                user_retreat_registration_id=registrant.id,
                schedule_id=record.schedule_id,
                dormitory_id=dormitory.id,
                dormitory_name=dormitory.name,
                gbs_number=registrant.gbs_number,
                univ_group_number=registrant.univ_group_number,
                grade_number=registrant.grade_number,
                user_name=registrant.name,
                cohesion_violation=record.cohesion_violation,
            )
        )

    occupancy = count_occupancy(existing_assignments)
    new_counts: Counter[tuple[int, int]] = Counter((r.dormitory_id, r.schedule_id) for r in records)
    dormitory_summary = [
        _summarize_dormitory(dormitory, night_ids, capacity_basis, occupancy, new_counts)
        for dormitory in sorted(dormitories, key=lambda d: d.id)
    ]

    daily_sleep_stats = [
        DailySleepStat(
            schedule_id=night_id,
            total_count=sum(1 for r in registrants if night_id in r.schedule_ids),
        )
        for night_id in night_ids
    ]

    return DormitoryAssignmentPreview(
        capacity_basis=capacity_basis,
        assignment_strategy=strategy,
        is_assignable=is_fully_placed(records, registrants, night_ids),
        preview_assignments=preview_assignments,
        dormitory_summary=dormitory_summary,
        daily_sleep_stats=daily_sleep_stats,
    )
