"""
Shared context for placement strategies.

Provides the AssignmentContext dataclass that holds the run-local state every
strategy reads and the records it produces.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from dormitory.errors import AssignmentInvariantError
from dormitory.models import AssignmentRecord, Dormitory, Gender, Registrant

if TYPE_CHECKING:
    from dormitory.models import CohesionUnit

    from .capacity import CapacityTable
    from .logging import AssignmentLogger


@dataclass
class AssignmentContext:
    """
    Shared context passed to all placement strategies.

    The capacity table is a working copy owned by this run; strategies
    decrement it and append records through place() or commit().
    """

    # Roster, sorted by registrant id
    registrants: list[Registrant]

    # Cohesion units in packing order
    units: list[CohesionUnit]

    # Dormitories, sorted by id
    dormitories: list[Dormitory]

    # SLEEP schedule ids in report order
    night_ids: list[int]

    capacity_table: CapacityTable

    # Seed for the RANDOM shuffle
    seed: int

    assignment_logger: AssignmentLogger

    records: list[AssignmentRecord] = field(default_factory=list)
    _placed: set[tuple[int, int]] = field(default_factory=set, repr=False)

    def dormitories_for(self, gender: Gender) -> list[Dormitory]:
        """Dormitories tagged for the given gender, ascending id."""
        return [d for d in self.dormitories if d.gender == gender]

    def is_placed(self, registrant_id: int, night_id: int) -> bool:
        return (registrant_id, night_id) in self._placed

    def reserve(self, registrant_id: int, night_id: int, dormitory_id: int) -> None:
        """Take one bed for a (registrant, night) without emitting a record yet."""
        if self.is_placed(registrant_id, night_id):
            raise AssignmentInvariantError(f"Registrant {registrant_id} already has a bed on schedule {night_id}")
        self.capacity_table.reserve(dormitory_id, night_id)
        self._placed.add((registrant_id, night_id))

    def commit(self, placements: Iterable[tuple[int, int, int]], cohesion_violation: bool = False) -> None:
        """Emit records for reserved (registrant, night, dormitory) placements."""
        for registrant_id, night_id, dormitory_id in placements:
            self.records.append(
                AssignmentRecord(
                    registrant_id=registrant_id,
                    schedule_id=night_id,
                    dormitory_id=dormitory_id,
                    cohesion_violation=cohesion_violation,
                )
            )

    def place(self, registrant_id: int, night_id: int, dormitory_id: int) -> None:
        """Reserve and record a single placement."""
        self.reserve(registrant_id, night_id, dormitory_id)
        self.commit([(registrant_id, night_id, dormitory_id)])


class PlacementStrategy(Protocol):
    """
    Protocol for placement strategies.

    A strategy is a function taking the context; it places what it can and
    logs every (registrant, night) it cannot place.
    """

    def __call__(self, ctx: AssignmentContext) -> None:
        """Populate ctx.records."""
        ...
