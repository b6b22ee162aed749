"""Narrow a roster/dormitory snapshot to the operator's selection."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from dormitory.errors import UnknownDormitoryError, UnknownRegistrantError
from dormitory.models import Dormitory, Gender, Registrant

logger = logging.getLogger(__name__)


def select_snapshot(
    registrants: Sequence[Registrant],
    dormitories: Sequence[Dormitory],
    registrant_ids: Iterable[int] | None = None,
    dormitory_ids: Iterable[int] | None = None,
    gender: Gender | None = None,
) -> tuple[list[Registrant], list[Dormitory]]:
    """Return the selected registrants and dormitories, in input order.

    None for an id list means "all". A gender keeps only registrants of that
    gender and dormitories tagged for it.

    Raises:
        UnknownRegistrantError: a selected registrant id is not in the roster
        UnknownDormitoryError: a selected dormitory id is not in the snapshot
    """
    selected_registrants = list(registrants)
    if registrant_ids is not None:
        wanted = set(registrant_ids)
        missing = sorted(wanted - {r.id for r in registrants})
        if missing:
            raise UnknownRegistrantError(f"Selected registrants not in roster: {missing}")
        selected_registrants = [r for r in registrants if r.id in wanted]

    selected_dormitories = list(dormitories)
    if dormitory_ids is not None:
        wanted = set(dormitory_ids)
        missing = sorted(wanted - {d.id for d in dormitories})
        if missing:
            raise UnknownDormitoryError(f"Selected dormitories not in snapshot: {missing}")
        selected_dormitories = [d for d in dormitories if d.id in wanted]

    if gender is not None:
        selected_registrants = [r for r in selected_registrants if r.gender == gender]
        selected_dormitories = [d for d in selected_dormitories if d.gender == gender]

    logger.debug(
        f"Selected {len(selected_registrants)}/{len(registrants)} registrants, "
        f"{len(selected_dormitories)}/{len(dormitories)} dormitories"
    )
    return selected_registrants, selected_dormitories
