"""Result Analysis - Pure functions for analyzing engine results.

These functions take explicit parameters and have no side effects, so they
can be unit tested without running the engine.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from dormitory.errors import PreviewNotAssignableError

if TYPE_CHECKING:
    from dormitory.models import AssignmentRecord, CohesionUnit, DormitoryAssignmentPreview, Registrant


def find_unplaced(
    records: Sequence[AssignmentRecord],
    registrants: Sequence[Registrant],
    night_ids: Sequence[int],
) -> list[tuple[int, int]]:
    """(registrant id, night id) pairs the registrant attends but has no record for.

    Args:
        records: Assignment records of a run
        registrants: Roster of the run
        night_ids: Sleeping schedules in report order

    Returns:
        Pairs ordered by registrant id, then night order
    """
    placed = {(r.registrant_id, r.schedule_id) for r in records}
    return [
        (registrant.id, night_id)
        for registrant in sorted(registrants, key=lambda r: r.id)
        for night_id in registrant.attended_nights(night_ids)
        if (registrant.id, night_id) not in placed
    ]


def find_split_units(units: Sequence[CohesionUnit], records: Sequence[AssignmentRecord]) -> list[CohesionUnit]:
    """Units whose members ended up in more than one dormitory."""
    dormitories_by_registrant: dict[int, set[int]] = defaultdict(set)
    for record in records:
        dormitories_by_registrant[record.registrant_id].add(record.dormitory_id)

    split = []
    for unit in units:
        used: set[int] = set()
        for member in unit.members:
            used |= dormitories_by_registrant.get(member.id, set())
        if len(used) > 1:
            split.append(unit)
    return split


def build_bulk_assignments(preview: DormitoryAssignmentPreview) -> list[dict[str, Any]]:
    """Derive the commit payload from an assignable preview.

    One entry per (registrant, dormitory) with the nights spent there, in the
    camelCase shape the bulk-assign endpoint accepts.

    Raises:
        PreviewNotAssignableError: the preview leaves some registrant-night unplaced
    """
    if not preview.is_assignable:
        raise PreviewNotAssignableError("Preview is not assignable; resolve unplaced registrants before committing")

    grouped: dict[tuple[int, int], list[int]] = defaultdict(list)
    for assignment in preview.preview_assignments:
        grouped[(assignment.user_retreat_registration_id, assignment.dormitory_id)].append(assignment.schedule_id)

    return [
        {
            "userRetreatRegistrationId": registrant_id,
            "dormitoryId": dormitory_id,
            "scheduleIds": schedule_ids,
        }
        for (registrant_id, dormitory_id), schedule_ids in sorted(grouped.items())
    ]
