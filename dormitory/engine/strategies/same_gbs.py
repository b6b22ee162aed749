"""
SAME_GBS_SAME_DORMITORY strategy - greedy largest-unit-first packing.

Each cohesion unit goes whole into one dormitory when any dormitory of its
gender can take its full per-night demand. Otherwise the unit is split: the
dormitory able to host the most remaining members on all of their nights is
filled first, and whoever is still left is placed night by night.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from .helpers import best_night_dormitory, best_whole_unit_dormitory, members_that_fit, selection_key

if TYPE_CHECKING:
    from dormitory.models import CohesionUnit, Dormitory, Registrant

    from ..context import AssignmentContext

logger = logging.getLogger(__name__)

Placement = tuple[int, int, int]  # (registrant id, night id, dormitory id)


def _split_order(unit: CohesionUnit, night_ids: list[int]) -> list[Registrant]:
    """Members attending the most nights first, then ascending id.

    Members sleeping none of the packed nights need no bed and are left out.
    """
    sleepers = [m for m in unit.members if m.attended_nights(night_ids)]
    return sorted(sleepers, key=lambda m: (-len(m.attended_nights(night_ids)), m.id))


def _place_split_unit(
    ctx: AssignmentContext,
    unit: CohesionUnit,
    candidates: list[Dormitory],
) -> list[Placement]:
    placements: list[Placement] = []
    hosted: dict[int, int] = defaultdict(int)  # dormitory id -> members of this unit placed there
    survivors = _split_order(unit, ctx.night_ids)

    # Sub-groups: repeatedly fill the dormitory that keeps the most survivors together
    while survivors:
        best: tuple[tuple[int, int, int, int], Dormitory, list[Registrant]] | None = None
        for dormitory in candidates:
            fit = members_that_fit(ctx.capacity_table, dormitory.id, survivors, ctx.night_ids)
            if not fit:
                continue
            demand: dict[int, int] = defaultdict(int)
            for member in fit:
                for night_id in member.attended_nights(ctx.night_ids):
                    demand[night_id] += 1
            slack = ctx.capacity_table.slack_after(dormitory.id, demand)
            key = (-len(fit), *selection_key(hosted[dormitory.id], slack, dormitory.id))
            if best is None or key < best[0]:
                best = (key, dormitory, fit)

        if best is None:
            break

        _, dormitory, fit = best
        for member in fit:
            for night_id in member.attended_nights(ctx.night_ids):
                ctx.reserve(member.id, night_id, dormitory.id)
                placements.append((member.id, night_id, dormitory.id))
            hosted[dormitory.id] += 1
        ctx.assignment_logger.log_placement(unit.label, f"{len(fit)} members to {dormitory.name}")
        placed_ids = {m.id for m in fit}
        survivors = [m for m in survivors if m.id not in placed_ids]

    # Individuals: whatever is left goes night by night
    for member in survivors:
        landed: set[int] = set()
        for night_id in member.attended_nights(ctx.night_ids):
            dormitory = best_night_dormitory(ctx, candidates, night_id, sticky=hosted)
            if dormitory is None:
                ctx.assignment_logger.log_unplaced(member.id, night_id)
                continue
            ctx.reserve(member.id, night_id, dormitory.id)
            placements.append((member.id, night_id, dormitory.id))
            if dormitory.id not in landed:
                landed.add(dormitory.id)
                hosted[dormitory.id] += 1
            ctx.assignment_logger.log_placement(
                unit.label, f"registrant {member.id} to {dormitory.name} on schedule {night_id}"
            )

    return placements


def place_cohesion_units(ctx: AssignmentContext) -> None:
    """Place every unit in packing order, keeping GBS groups together where beds allow."""
    for unit in ctx.units:
        demand = unit.demand(ctx.night_ids)
        if not demand:
            continue

        candidates = ctx.dormitories_for(unit.gender)
        dormitory = best_whole_unit_dormitory(ctx, candidates, demand)
        if dormitory is not None:
            placements = []
            for member in unit.members:
                for night_id in member.attended_nights(ctx.night_ids):
                    ctx.reserve(member.id, night_id, dormitory.id)
                    placements.append((member.id, night_id, dormitory.id))
            ctx.commit(placements)
            ctx.assignment_logger.log_placement(unit.label, f"whole unit to {dormitory.name}")
            continue

        placements = _place_split_unit(ctx, unit, candidates)
        used = sorted({dormitory_id for _, _, dormitory_id in placements})
        split = len(used) > 1
        ctx.commit(placements, cohesion_violation=split)
        if split:
            ctx.assignment_logger.log_cohesion_violation(unit.label, used)

    ctx.assignment_logger.log_progress(f"Placed {len(ctx.records)} registrant-nights across {len(ctx.units)} units")
