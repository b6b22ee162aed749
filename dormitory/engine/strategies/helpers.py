"""
Shared dormitory selection helpers for placement strategies.

Every choice goes through the same ordering: sticky placement first, then
tightest fit, then ascending dormitory id.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dormitory.models import Dormitory, Registrant

    from ..capacity import CapacityTable
    from ..context import AssignmentContext


def selection_key(sticky: int, slack: int, dormitory_id: int) -> tuple[int, int, int]:
    """Sort key: most co-located members, then least slack, then lowest id."""
    return (-sticky, slack, dormitory_id)


def best_whole_unit_dormitory(
    ctx: AssignmentContext,
    candidates: Sequence[Dormitory],
    demand: Mapping[int, int],
) -> Dormitory | None:
    """The dormitory that can take the full per-night demand, or None."""
    hosts = [d for d in candidates if ctx.capacity_table.can_host(d.id, demand)]
    if not hosts:
        return None
    return min(hosts, key=lambda d: selection_key(0, ctx.capacity_table.slack_after(d.id, demand), d.id))


def members_that_fit(
    capacity_table: CapacityTable,
    dormitory_id: int,
    members: Sequence[Registrant],
    night_ids: Sequence[int],
) -> list[Registrant]:
    """Greedily pick members (in the given order) the dormitory can host on all their nights."""
    remaining = {n: capacity_table.remaining(dormitory_id, n) for n in night_ids}
    chosen: list[Registrant] = []
    for member in members:
        nights = member.attended_nights(night_ids)
        if all(remaining[n] > 0 for n in nights):
            for n in nights:
                remaining[n] -= 1
            chosen.append(member)
    return chosen


def best_night_dormitory(
    ctx: AssignmentContext,
    candidates: Sequence[Dormitory],
    night_id: int,
    sticky: Mapping[int, int] | None = None,
) -> Dormitory | None:
    """The dormitory with a free bed on one night, or None."""
    sticky = sticky or {}
    open_rooms = [d for d in candidates if ctx.capacity_table.remaining(d.id, night_id) > 0]
    if not open_rooms:
        return None
    return min(
        open_rooms,
        key=lambda d: selection_key(sticky.get(d.id, 0), ctx.capacity_table.remaining(d.id, night_id) - 1, d.id),
    )
