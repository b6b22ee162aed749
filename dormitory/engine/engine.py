"""
Dormitory Assignment Engine - places registrants into dormitories per night.

A run validates the snapshot, builds its own capacity table, packs with the
requested strategy and compiles the preview. Infeasibility comes back as data
on the preview, never as an exception.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from dormitory.config import ConfigLoader
from dormitory.errors import AssignmentInvariantError
from dormitory.models import (
    AssignmentRecord,
    AssignmentRequest,
    AssignmentStrategy,
    CapacityBasis,
    Dormitory,
    DormitoryAssignmentPreview,
    ExistingAssignment,
    Registrant,
    Schedule,
    ScheduleType,
)

from .analysis import find_split_units, find_unplaced
from .capacity import CapacityTable, resolve_capacity
from .context import AssignmentContext
from .grouping import build_units
from .logging import AssignmentLogger
from .preview import compile_preview, count_occupancy, order_nights
from .strategies import STRATEGIES
from .validation import check_feasibility, validate_request

logger = logging.getLogger(__name__)


@dataclass
class AssignmentResult:
    """Everything one run produced."""

    preview: DormitoryAssignmentPreview
    records: list[AssignmentRecord]
    unplaced: list[tuple[int, int]] = field(default_factory=list)
    split_units: list[str] = field(default_factory=list)
    log_summary: dict[str, Any] = field(default_factory=dict)


class DormitoryAssignmentEngine:
    """Greedy dormitory packer over an immutable snapshot."""

    def __init__(self, request: AssignmentRequest, config: ConfigLoader | None = None):
        self.request = request
        self.config = config or ConfigLoader.get_instance()
        self.assignment_logger = AssignmentLogger(debug_mode=self.config.get_bool("engine.debug.enabled"))

        night_type = ScheduleType(self.config.get_str("engine.night.schedule_type"))
        self.nights = order_nights([s for s in request.schedules if s.type == night_type])
        self.night_ids = [s.id for s in self.nights]
        self.dormitories = sorted(request.dormitories, key=lambda d: d.id)
        self.registrants = sorted(request.registrants, key=lambda r: r.id)
        self.seed = request.seed if request.seed is not None else self.config.get_int("engine.random.seed")

    def _relevant_existing_assignments(self) -> list[ExistingAssignment]:
        """Existing occupants of dormitories in this snapshot."""
        dormitory_ids = {d.id for d in self.dormitories}
        relevant = []
        for existing in self.request.existing_assignments:
            if existing.dormitory_id in dormitory_ids:
                relevant.append(existing)
            else:
                logger.info(
                    f"Ignoring existing assignment of registrant {existing.registrant_id} "
                    f"to dormitory {existing.dormitory_id} outside the selection"
                )
        return relevant

    def run(self) -> AssignmentResult:
        """Run the engine once.

        Raises:
            AssignmentConfigurationError: the snapshot is invalid
            AssignmentInvariantError: the packing produced an impossible result
        """
        request = self.request
        strategy = request.assignment_strategy
        basis = request.capacity_basis

        logger.info(
            f"Assigning {len(self.registrants)} registrants to {len(self.dormitories)} dormitories "
            f"over {len(self.night_ids)} nights (strategy={strategy.value}, basis={basis.value})"
        )

        validate_request(
            self.registrants,
            self.dormitories,
            request.schedules,
            basis,
            request.existing_assignments,
        )
        existing = self._relevant_existing_assignments()

        capacity_table = CapacityTable.build(self.dormitories, self.night_ids, basis, count_occupancy(existing))
        units = build_units(self.registrants)
        check_feasibility(units, self.dormitories, self.night_ids, capacity_table, self.assignment_logger)

        ctx = AssignmentContext(
            registrants=self.registrants,
            units=units,
            dormitories=self.dormitories,
            night_ids=self.night_ids,
            capacity_table=capacity_table,
            seed=self.seed,
            assignment_logger=self.assignment_logger,
        )
        STRATEGIES[strategy](ctx)

        preview = compile_preview(
            ctx.records,
            self.dormitories,
            self.nights,
            basis,
            strategy,
            registrants=self.registrants,
            existing_assignments=existing,
        )
        self._verify_invariants(ctx.records, existing)

        unplaced = find_unplaced(ctx.records, self.registrants, self.night_ids)
        split_units = [unit.label for unit in find_split_units(units, ctx.records)]

        if preview.is_assignable:
            logger.info(f"Run complete: {len(ctx.records)} registrant-nights placed")
        else:
            logger.warning(f"Run complete with {len(unplaced)} unplaced registrant-nights; preview is not assignable")
        if split_units:
            logger.info(f"{len(split_units)} cohesion units split across dormitories")

        return AssignmentResult(
            preview=preview,
            records=list(ctx.records),
            unplaced=unplaced,
            split_units=split_units,
            log_summary=self.assignment_logger.get_summary(),
        )

    def _verify_invariants(self, records: list[AssignmentRecord], existing: list[ExistingAssignment]) -> None:
        """Fail loudly if the packing broke a rule it must never break."""
        pairs = Counter((r.registrant_id, r.schedule_id) for r in records)
        doubled = sorted(pair for pair, count in pairs.items() if count > 1)
        if doubled:
            raise AssignmentInvariantError(f"Registrant-nights with more than one bed: {doubled}")

        registrant_by_id = {r.id: r for r in self.registrants}
        dormitory_by_id = {d.id: d for d in self.dormitories}
        for record in records:
            registrant = registrant_by_id[record.registrant_id]
            if record.schedule_id not in registrant.schedule_ids:
                raise AssignmentInvariantError(
                    f"Registrant {registrant.id} placed on schedule {record.schedule_id} they do not attend"
                )
            if dormitory_by_id[record.dormitory_id].gender != registrant.gender:
                raise AssignmentInvariantError(
                    f"Registrant {registrant.id} placed in dormitory {record.dormitory_id} of another gender"
                )

        occupancy = count_occupancy(existing)
        new_counts = Counter((r.dormitory_id, r.schedule_id) for r in records)
        for (dormitory_id, night_id), added in new_counts.items():
            capacity = resolve_capacity(dormitory_by_id[dormitory_id], night_id, self.request.capacity_basis)
            free = max(capacity - occupancy.get((dormitory_id, night_id), 0), 0)
            if added > free:
                raise AssignmentInvariantError(
                    f"Dormitory {dormitory_id} received {added} on schedule {night_id} with {free} free beds"
                )

    def save_log(self, run_label: str, run_id: str | None = None) -> str:
        """Write the run log under the configured log directory."""
        return self.assignment_logger.save_to_file(
            self.config.get_str("engine.log_dir"), run_label, run_id, config=self.config.as_dict()
        )


def assign(
    registrants: Sequence[Registrant],
    dormitories: Sequence[Dormitory],
    nights: Sequence[Schedule],
    strategy: AssignmentStrategy,
    capacity_basis: CapacityBasis,
    *,
    existing_assignments: Sequence[ExistingAssignment] = (),
    seed: int | None = None,
    config: ConfigLoader | None = None,
) -> DormitoryAssignmentPreview:
    """Run the engine once and return only the preview."""
    request = AssignmentRequest(
        registrants=list(registrants),
        dormitories=list(dormitories),
        schedules=list(nights),
        existing_assignments=list(existing_assignments),
        assignment_strategy=strategy,
        capacity_basis=capacity_basis,
        seed=seed,
    )
    return DormitoryAssignmentEngine(request, config=config).run().preview
