"""
Placement strategies for the dormitory assignment engine.

Each strategy is a function over the shared AssignmentContext.
"""

from dormitory.models import AssignmentStrategy

from ..context import PlacementStrategy
from .random_order import place_randomly
from .same_gbs import place_cohesion_units

STRATEGIES: dict[AssignmentStrategy, PlacementStrategy] = {
    AssignmentStrategy.SAME_GBS_SAME_DORMITORY: place_cohesion_units,
    AssignmentStrategy.RANDOM: place_randomly,
}

__all__ = [
    "STRATEGIES",
    "place_cohesion_units",
    "place_randomly",
]
