"""
Input validation and pre-run feasibility checks for the assignment engine.

validate_request() enforces the fatal configuration rules before any
placement. check_feasibility() only reports: running short of beds is data,
not an error.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Sequence
from typing import TYPE_CHECKING

from dormitory.errors import (
    AlreadyAssignedError,
    AssignmentConfigurationError,
    DuplicateDormitoryError,
    DuplicateRegistrantError,
    MixedGenderDormitoryError,
    UnknownNightError,
)
from dormitory.models import CapacityBasis, Dormitory, ExistingAssignment, Gender, Registrant, Schedule

from .capacity import resolve_capacity

if TYPE_CHECKING:
    from dormitory.models import CohesionUnit

    from .capacity import CapacityTable
    from .logging import AssignmentLogger

logger = logging.getLogger(__name__)

SINGLE_GENDERS = (Gender.MALE, Gender.FEMALE)


def _duplicates(ids: Sequence[int]) -> list[int]:
    return sorted(i for i, count in Counter(ids).items() if count > 1)


def validate_request(
    registrants: Sequence[Registrant],
    dormitories: Sequence[Dormitory],
    schedules: Sequence[Schedule],
    basis: CapacityBasis,
    existing_assignments: Sequence[ExistingAssignment] = (),
) -> None:
    """Reject configuration errors. Raises the first violation found.

    Raises:
        AssignmentConfigurationError: or one of its specific subclasses
    """
    duplicate_schedules = _duplicates([s.id for s in schedules])
    if duplicate_schedules:
        raise AssignmentConfigurationError(f"Duplicate schedule ids: {duplicate_schedules}")
    schedule_ids = {s.id for s in schedules}

    duplicate_registrants = _duplicates([r.id for r in registrants])
    if duplicate_registrants:
        raise DuplicateRegistrantError(f"Duplicate registrant ids: {duplicate_registrants}")

    duplicate_dormitories = _duplicates([d.id for d in dormitories])
    if duplicate_dormitories:
        raise DuplicateDormitoryError(f"Duplicate dormitory ids: {duplicate_dormitories}")

    for registrant in registrants:
        unknown = sorted(registrant.schedule_ids - schedule_ids)
        if unknown:
            raise UnknownNightError(f"Registrant {registrant.id} ({registrant.name}) references unknown schedules {unknown}")

    night_ids = [s.id for s in schedules]
    for dormitory in dormitories:
        if dormitory.gender not in SINGLE_GENDERS:
            tag = dormitory.gender.value if dormitory.gender else "no gender"
            raise MixedGenderDormitoryError(
                f"Dormitory {dormitory.id} ({dormitory.name}) is tagged {tag}; "
                f"each dormitory must house exactly one gender"
            )
        unknown = sorted({c.schedule_id for c in dormitory.schedule_capacities} - schedule_ids)
        if unknown:
            raise UnknownNightError(f"Dormitory {dormitory.id} ({dormitory.name}) declares capacity for unknown schedules {unknown}")
        for night_id in night_ids:
            resolve_capacity(dormitory, night_id, basis)

    roster_ids = {r.id for r in registrants}
    for existing in existing_assignments:
        if existing.registrant_id in roster_ids:
            raise AlreadyAssignedError(
                f"Registrant {existing.registrant_id} is already assigned to dormitory {existing.dormitory_id}"
            )
        unknown = sorted(existing.schedule_ids - schedule_ids)
        if unknown:
            raise UnknownNightError(
                f"Existing assignment of registrant {existing.registrant_id} references unknown schedules {unknown}"
            )

    logger.debug(
        f"Validated {len(registrants)} registrants, {len(dormitories)} dormitories, {len(schedules)} schedules"
    )


def check_feasibility(
    units: Sequence[CohesionUnit],
    dormitories: Sequence[Dormitory],
    night_ids: Sequence[int],
    capacity_table: CapacityTable,
    assignment_logger: AssignmentLogger,
) -> None:
    """Log demand against supply before placement and record warnings."""
    logger.info("=== Pre-run Feasibility Check ===")

    dormitory_ids_by_gender: dict[Gender, list[int]] = defaultdict(list)
    for dormitory in dormitories:
        if dormitory.gender is not None:
            dormitory_ids_by_gender[dormitory.gender].append(dormitory.id)

    demand: dict[tuple[int, Gender], int] = defaultdict(int)
    for unit in units:
        for night_id, count in unit.demand(night_ids).items():
            demand[(night_id, unit.gender)] += count

    for night_id in night_ids:
        for gender in SINGLE_GENDERS:
            needed = demand.get((night_id, gender), 0)
            supply = capacity_table.total_remaining(dormitory_ids_by_gender.get(gender, []), night_id)
            logger.info(f"Schedule {night_id} {gender.value}: demand {needed}, free beds {supply}")
            if needed > supply:
                assignment_logger.log_feasibility_warning(
                    f"Schedule {night_id} {gender.value}: {needed} registrants but only {supply} free beds"
                )

    for gender in SINGLE_GENDERS:
        if not dormitory_ids_by_gender.get(gender):
            stranded = sum(u.size for u in units if u.gender == gender)
            if stranded:
                assignment_logger.log_feasibility_warning(
                    f"CRITICAL: {stranded} {gender.value} registrants but no {gender.value} dormitory selected"
                )

    for unit in units:
        if unit.size < 2:
            continue
        unit_demand = unit.demand(night_ids)
        hosts = [d for d in dormitory_ids_by_gender.get(unit.gender, []) if capacity_table.can_host(d, unit_demand)]
        if not hosts:
            assignment_logger.log_feasibility_warning(
                f"{unit.label} fits in no single dormitory and will be split"
            )

    logger.info("=== End Feasibility Check ===")
