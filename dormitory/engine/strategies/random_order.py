"""
RANDOM strategy - seeded shuffle, then per-night tightest fit.

Cohesion is ignored. The shuffle runs over registrants sorted by id with a
private random.Random, so a fixed seed always yields the same preview.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from .helpers import best_night_dormitory

if TYPE_CHECKING:
    from ..context import AssignmentContext

logger = logging.getLogger(__name__)


def place_randomly(ctx: AssignmentContext) -> None:
    order = list(ctx.registrants)
    random.Random(ctx.seed).shuffle(order)
    logger.debug(f"Shuffled {len(order)} registrants with seed {ctx.seed}")

    for registrant in order:
        candidates = ctx.dormitories_for(registrant.gender)
        for night_id in registrant.attended_nights(ctx.night_ids):
            dormitory = best_night_dormitory(ctx, candidates, night_id)
            if dormitory is None:
                ctx.assignment_logger.log_unplaced(registrant.id, night_id)
                continue
            ctx.place(registrant.id, night_id, dormitory.id)

    ctx.assignment_logger.log_progress(f"Placed {len(ctx.records)} registrant-nights in shuffled order")
