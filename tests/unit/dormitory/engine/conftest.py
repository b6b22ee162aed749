"""
Shared fixtures for assignment engine unit tests.

Provides small factories and a minimal AssignmentContext for fast, isolated
strategy testing.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

import pytest

from dormitory.engine.capacity import CapacityTable
from dormitory.engine.context import AssignmentContext
from dormitory.engine.grouping import build_units
from dormitory.engine.logging import AssignmentLogger
from dormitory.models import (
    CapacityBasis,
    Dormitory,
    Gender,
    NightCapacity,
    Registrant,
    Schedule,
    ScheduleType,
)

RETREAT_START = datetime(2026, 2, 20, 23, 0)


def create_night(schedule_id: int, day: int | None = None, schedule_type: ScheduleType = ScheduleType.SLEEP) -> Schedule:
    """Create a schedule slot; nights fall on consecutive days by default."""
    offset = day if day is not None else schedule_id - 1
    return Schedule(id=schedule_id, time=RETREAT_START + timedelta(days=offset), type=schedule_type)


def create_registrant(
    registrant_id: int,
    gender: Gender = Gender.FEMALE,
    gbs_number: int | None = None,
    nights: Iterable[int] = (1,),
    name: str | None = None,
    grade_number: int = 1,
    univ_group_number: int = 1,
) -> Registrant:
    """Create a test registrant with sensible defaults."""
    return Registrant(
        id=registrant_id,
        name=name or f"Registrant {registrant_id}",
        gender=gender,
        grade_number=grade_number,
        univ_group_number=univ_group_number,
        gbs_number=gbs_number,
        schedule_ids=frozenset(nights),
    )


def create_dormitory(
    dormitory_id: int,
    gender: Gender | None = Gender.FEMALE,
    optimal_capacity: int | None = 10,
    max_capacity: int | None = None,
    name: str | None = None,
    night_capacities: dict[int, tuple[int | None, int | None]] | None = None,
) -> Dormitory:
    """Create a test dormitory.

    night_capacities maps schedule id to (optimal, max) overrides; when given,
    nights not listed are closed.
    """
    return Dormitory(
        id=dormitory_id,
        name=name or f"Dorm {dormitory_id}",
        gender=gender,
        optimal_capacity=optimal_capacity,
        max_capacity=max_capacity,
        schedule_capacities=[
            NightCapacity(schedule_id=night_id, optimal_capacity=optimal, max_capacity=maximum)
            for night_id, (optimal, maximum) in (night_capacities or {}).items()
        ],
    )


def create_gbs_group(
    first_id: int,
    size: int,
    gbs_number: int,
    gender: Gender = Gender.FEMALE,
    nights: Iterable[int] = (1,),
) -> list[Registrant]:
    """Create consecutive registrants sharing a GBS group."""
    nights = tuple(nights)
    return [
        create_registrant(first_id + i, gender=gender, gbs_number=gbs_number, nights=nights) for i in range(size)
    ]


def build_assignment_context(
    registrants: list[Registrant],
    dormitories: list[Dormitory],
    night_ids: list[int],
    basis: CapacityBasis = CapacityBasis.OPTIMAL,
    seed: int = 42,
    debug_mode: bool = False,
) -> AssignmentContext:
    """Build a minimal AssignmentContext for strategy testing."""
    registrants = sorted(registrants, key=lambda r: r.id)
    dormitories = sorted(dormitories, key=lambda d: d.id)
    return AssignmentContext(
        registrants=registrants,
        units=build_units(registrants),
        dormitories=dormitories,
        night_ids=night_ids,
        capacity_table=CapacityTable.build(dormitories, night_ids, basis),
        seed=seed,
        assignment_logger=AssignmentLogger(debug_mode=debug_mode),
    )


def placements_by_registrant(records) -> dict[int, dict[int, int]]:
    """registrant id -> {night id: dormitory id}"""
    result: dict[int, dict[int, int]] = {}
    for record in records:
        result.setdefault(record.registrant_id, {})[record.schedule_id] = record.dormitory_id
    return result


@pytest.fixture
def two_nights() -> list[Schedule]:
    return [create_night(1), create_night(2)]


@pytest.fixture
def female_dorms() -> list[Dormitory]:
    """Two female dormitories with 10 beds every night."""
    return [
        create_dormitory(1, name="Dorm A", optimal_capacity=10),
        create_dormitory(2, name="Dorm B", optimal_capacity=10),
    ]
