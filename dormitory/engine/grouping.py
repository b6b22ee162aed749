"""
Grouping Index - partitions registrants into cohesion units.

Registrants sharing a GBS group and gender form one unit; registrants without
a GBS group are singleton units. The emitted order is load-bearing: the
cohesive strategy packs largest units first, so reordering changes the
placement.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from dormitory.models import CohesionUnit, Gender, Registrant

logger = logging.getLogger(__name__)


def unit_sort_key(unit: CohesionUnit) -> tuple[int, int, int, int]:
    """Largest first, then ascending GBS number (ungrouped last), then lowest registrant id."""
    has_no_gbs = 1 if unit.gbs_number is None else 0
    return (-unit.size, has_no_gbs, unit.gbs_number or 0, unit.min_registrant_id)


def build_units(registrants: Iterable[Registrant]) -> list[CohesionUnit]:
    """Build cohesion units in packing order.

    Members inside a unit are ordered by ascending registrant id.
    """
    grouped: dict[tuple[int, Gender], list[Registrant]] = defaultdict(list)
    units: list[CohesionUnit] = []

    for registrant in registrants:
        if registrant.gbs_number is None:
            units.append(CohesionUnit(gender=registrant.gender, gbs_number=None, members=(registrant,)))
        else:
            grouped[(registrant.gbs_number, registrant.gender)].append(registrant)

    for (gbs_number, gender), members in grouped.items():
        ordered = tuple(sorted(members, key=lambda r: r.id))
        units.append(CohesionUnit(gender=gender, gbs_number=gbs_number, members=ordered))

    units.sort(key=unit_sort_key)

    logger.info(
        f"Built {len(units)} cohesion units "
        f"({len(grouped)} GBS groups, {sum(1 for u in units if u.gbs_number is None)} ungrouped registrants)"
    )
    return units
