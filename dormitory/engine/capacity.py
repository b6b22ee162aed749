"""
Capacity Resolver - usable bed counts per dormitory and night.

resolve_capacity() is a pure lookup. CapacityTable is the run-local working
copy of remaining beds that the placement strategies decrement; it is built
fresh for every run so concurrent what-if runs never share state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from dormitory.errors import AssignmentInvariantError, InvalidCapacityError
from dormitory.logging_config import TRACE
from dormitory.models import CapacityBasis, Dormitory

logger = logging.getLogger(__name__)


def _declared_capacities(dormitory: Dormitory, schedule_id: int) -> tuple[int | None, int | None] | None:
    """Return (optimal, max) declared for the night, or None when the room is closed."""
    if dormitory.schedule_capacities:
        override = dormitory.capacity_override(schedule_id)
        if override is None:
            return None
        return override.optimal_capacity, override.max_capacity
    return dormitory.optimal_capacity, dormitory.max_capacity


def resolve_capacity(dormitory: Dormitory, schedule_id: int, basis: CapacityBasis) -> int:
    """Usable beds in a dormitory for one night under the given capacity basis.

    Returns 0 when the dormitory is not configured for the night. A missing
    max capacity falls back to the optimal capacity.

    Raises:
        InvalidCapacityError: negative or missing values, or max below optimal
    """
    declared = _declared_capacities(dormitory, schedule_id)
    if declared is None:
        return 0

    optimal, maximum = declared
    where = f"Dormitory {dormitory.id} ({dormitory.name}) schedule {schedule_id}"

    if optimal is None:
        raise InvalidCapacityError(f"{where}: optimal capacity is missing")
    if optimal < 0:
        raise InvalidCapacityError(f"{where}: optimal capacity {optimal} is negative")
    if maximum is None:
        maximum = optimal
    if maximum < 0:
        raise InvalidCapacityError(f"{where}: max capacity {maximum} is negative")
    if maximum < optimal:
        raise InvalidCapacityError(f"{where}: max capacity {maximum} is below optimal capacity {optimal}")

    return optimal if basis == CapacityBasis.OPTIMAL else maximum


class CapacityTable:
    """Remaining beds per (dormitory id, night id) for a single run."""

    def __init__(self, remaining: Mapping[tuple[int, int], int]) -> None:
        self._remaining: dict[tuple[int, int], int] = dict(remaining)

    @classmethod
    def build(
        cls,
        dormitories: Iterable[Dormitory],
        night_ids: Iterable[int],
        basis: CapacityBasis,
        occupancy: Mapping[tuple[int, int], int] | None = None,
    ) -> CapacityTable:
        """Resolve every (dormitory, night) capacity and subtract pre-existing occupancy.

        Pre-existing occupancy above capacity leaves 0 beds rather than a
        negative count; the preview compiler flags that condition.
        """
        occupancy = occupancy or {}
        night_ids = list(night_ids)
        remaining: dict[tuple[int, int], int] = {}
        for dormitory in dormitories:
            for night_id in night_ids:
                capacity = resolve_capacity(dormitory, night_id, basis)
                current = occupancy.get((dormitory.id, night_id), 0)
                if current > capacity:
                    logger.warning(
                        f"Dormitory {dormitory.name} already holds {current} on schedule {night_id} "
                        f"but {basis.value} capacity is {capacity}"
                    )
                remaining[(dormitory.id, night_id)] = max(capacity - current, 0)
        return cls(remaining)

    def remaining(self, dormitory_id: int, night_id: int) -> int:
        return self._remaining.get((dormitory_id, night_id), 0)

    def can_host(self, dormitory_id: int, demand: Mapping[int, int]) -> bool:
        """True if the dormitory can take the full per-night demand."""
        return all(self.remaining(dormitory_id, n) >= count for n, count in demand.items())

    def slack_after(self, dormitory_id: int, demand: Mapping[int, int]) -> int:
        """Beds left over on the demanded nights after placing the demand."""
        return sum(self.remaining(dormitory_id, n) - count for n, count in demand.items())

    def reserve(self, dormitory_id: int, night_id: int, count: int = 1) -> None:
        """Take beds. Going below zero is an engine defect, never a user error."""
        left = self.remaining(dormitory_id, night_id) - count
        if count < 0 or left < 0:
            raise AssignmentInvariantError(
                f"Reserving {count} bed(s) in dormitory {dormitory_id} on schedule {night_id} "
                f"would leave {left} remaining"
            )
        self._remaining[(dormitory_id, night_id)] = left
        logger.log(TRACE, f"Reserved {count} in dormitory {dormitory_id} schedule {night_id}, {left} left")

    def total_remaining(self, dormitory_ids: Iterable[int], night_id: int) -> int:
        return sum(self.remaining(d, night_id) for d in dormitory_ids)

    def copy(self) -> CapacityTable:
        return CapacityTable(self._remaining)
