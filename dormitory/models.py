"""
Domain models for the dormitory assignment engine.

Wire-facing models use camelCase aliases so the preview reproduces the
DormitoryAssignmentPreview contract consumed by the admin UI. All models are
frozen: the engine reads the snapshot and never mutates it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Gender(Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    MIXED = "MIXED"  # Dormitory tag only - always rejected by the engine


class CapacityBasis(Enum):
    OPTIMAL = "OPTIMAL"  # Comfortable occupancy
    MAX = "MAX"  # Hard physical limit


class AssignmentStrategy(Enum):
    SAME_GBS_SAME_DORMITORY = "SAME_GBS_SAME_DORMITORY"
    RANDOM = "RANDOM"


class ScheduleType(Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SLEEP = "SLEEP"


class WireModel(BaseModel):
    """Base for frozen models exchanged with callers in camelCase."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Input snapshot
# =============================================================================


class Schedule(WireModel):
    """One retreat schedule slot. SLEEP slots are the nights the engine packs."""

    id: int
    time: datetime | None = None
    type: ScheduleType = ScheduleType.SLEEP

    def sort_key(self) -> tuple[int, datetime, int]:
        """Report ordering: timed slots first by time, then by id.

        Aware times are compared in UTC; naive times are taken as they are.
        """
        if self.time is None:
            return (1, datetime.min, self.id)
        time = self.time
        if time.tzinfo is not None:
            time = time.astimezone(timezone.utc).replace(tzinfo=None)
        return (0, time, self.id)


class Registrant(WireModel):
    """A retreat registrant (userRetreatRegistration) to be housed."""

    id: int
    name: str = ""
    gender: Gender
    grade_number: int
    univ_group_number: int
    gbs_number: int | None = None
    schedule_ids: frozenset[int] = Field(default_factory=frozenset)

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v: Gender) -> Gender:
        if v == Gender.MIXED:
            raise ValueError("Registrant gender must be MALE or FEMALE")
        return v

    def attended_nights(self, night_ids: Iterable[int]) -> list[int]:
        """Nights (in the given order) this registrant sleeps on-site."""
        return [night_id for night_id in night_ids if night_id in self.schedule_ids]


class NightCapacity(WireModel):
    """Per-night capacity override for a repurposed or closed room."""

    schedule_id: int
    optimal_capacity: int | None = None
    max_capacity: int | None = None


class Dormitory(WireModel):
    """Dormitory inventory entry.

    When schedule_capacities is non-empty it is authoritative and nights
    without an entry are closed (capacity 0). Otherwise the default
    capacities apply to every night. A missing max capacity falls back to
    the optimal capacity.
    """

    id: int
    name: str
    gender: Gender | None = None
    optimal_capacity: int | None = None
    max_capacity: int | None = None
    schedule_capacities: list[NightCapacity] = Field(default_factory=list)

    def capacity_override(self, schedule_id: int) -> NightCapacity | None:
        for override in self.schedule_capacities:
            if override.schedule_id == schedule_id:
                return override
        return None


class ExistingAssignment(WireModel):
    """A bed already occupied before this run (pre-existing occupancy)."""

    registrant_id: int
    dormitory_id: int
    schedule_ids: frozenset[int] = Field(default_factory=frozenset)


class AssignmentRequest(WireModel):
    """Everything one engine run needs, as sent by the request layer."""

    registrants: list[Registrant]
    dormitories: list[Dormitory]
    schedules: list[Schedule]
    existing_assignments: list[ExistingAssignment] = Field(default_factory=list)
    assignment_strategy: AssignmentStrategy = AssignmentStrategy.SAME_GBS_SAME_DORMITORY
    capacity_basis: CapacityBasis = CapacityBasis.OPTIMAL
    seed: int | None = None


# =============================================================================
# Engine output
# =============================================================================


class AssignmentRecord(WireModel):
    """One (registrant, night, dormitory) placement. Never mutated after creation."""

    registrant_id: int
    schedule_id: int
    dormitory_id: int
    cohesion_violation: bool = False


@dataclass(frozen=True)
class CohesionUnit:
    """Registrants the grouping strategy keeps together.

    Same GBS group and same gender, or a single registrant with no GBS group.
    Members do not necessarily attend the same nights.
    """

    gender: Gender
    gbs_number: int | None
    members: tuple[Registrant, ...]

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def min_registrant_id(self) -> int:
        return min(m.id for m in self.members)

    @property
    def label(self) -> str:
        if self.gbs_number is None:
            return f"registrant {self.members[0].id} ({self.gender.value})"
        return f"GBS {self.gbs_number} ({self.gender.value}, {self.size} members)"

    def demand(self, night_ids: Iterable[int]) -> dict[int, int]:
        """Count of members attending each night, nights with zero demand omitted."""
        result: dict[int, int] = {}
        for night_id in night_ids:
            count = sum(1 for m in self.members if night_id in m.schedule_ids)
            if count:
                result[night_id] = count
        return result


# =============================================================================
# Preview (DormitoryAssignmentPreview contract)
# =============================================================================


class PreviewAssignment(WireModel):
    user_retreat_registration_id: int
    schedule_id: int
    dormitory_id: int
    dormitory_name: str
    gbs_number: int | None
    univ_group_number: int
    grade_number: int
    user_name: str
    cohesion_violation: bool = False


class ScheduleCapacityEntry(WireModel):
    schedule_id: int
    capacity: int


class ScheduleCountEntry(WireModel):
    schedule_id: int
    count: int


class DormitorySummary(WireModel):
    dormitory_id: int
    dormitory_name: str
    capacity_by_schedule: list[ScheduleCapacityEntry]
    current_occupancy_by_schedule: list[ScheduleCountEntry]
    new_assignments_by_schedule: list[ScheduleCountEntry]
    remaining_capacity_by_schedule: list[ScheduleCountEntry]
    over_capacity_schedule_ids: list[int] = Field(default_factory=list)


class DailySleepStat(WireModel):
    schedule_id: int
    total_count: int


class DormitoryAssignmentPreview(WireModel):
    """Dry-run allocation plus occupancy summaries and a feasibility verdict."""

    capacity_basis: CapacityBasis
    assignment_strategy: AssignmentStrategy
    is_assignable: bool
    preview_assignments: list[PreviewAssignment]
    dormitory_summary: list[DormitorySummary]
    daily_sleep_stats: list[DailySleepStat]
