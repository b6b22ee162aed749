"""
Unit tests for the RANDOM strategy.

"Random" means a seeded shuffle: the same input and seed must always give the
same preview.
"""

from __future__ import annotations

import random

from dormitory.config import ConfigLoader
from dormitory.engine import assign
from dormitory.engine.strategies.random_order import place_randomly
from dormitory.models import AssignmentStrategy, CapacityBasis, Gender

from .conftest import (
    build_assignment_context,
    create_dormitory,
    create_gbs_group,
    create_night,
    create_registrant,
    placements_by_registrant,
)

RANDOM = AssignmentStrategy.RANDOM


def _mixed_roster():
    registrants = []
    for i in range(1, 31):
        gender = Gender.FEMALE if i % 3 else Gender.MALE
        nights = (1, 2) if i % 4 else (2,)
        registrants.append(create_registrant(i, gender=gender, gbs_number=i % 5 or None, nights=nights))
    return registrants


def _dorms():
    return [
        create_dormitory(1, gender=Gender.FEMALE, optimal_capacity=8, max_capacity=12),
        create_dormitory(2, gender=Gender.FEMALE, optimal_capacity=6, max_capacity=9),
        create_dormitory(3, gender=Gender.MALE, optimal_capacity=5, max_capacity=7),
        create_dormitory(4, gender=Gender.MALE, optimal_capacity=4),
    ]


class TestDeterminism:
    def test_same_seed_gives_identical_preview(self):
        nights = [create_night(1), create_night(2)]

        first = assign(_mixed_roster(), _dorms(), nights, RANDOM, CapacityBasis.OPTIMAL, seed=7)
        second = assign(_mixed_roster(), _dorms(), nights, RANDOM, CapacityBasis.OPTIMAL, seed=7)

        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    def test_input_order_does_not_matter(self):
        nights = [create_night(1), create_night(2)]
        roster = _mixed_roster()

        forward = assign(roster, _dorms(), nights, RANDOM, CapacityBasis.OPTIMAL, seed=3)
        backward = assign(list(reversed(roster)), list(reversed(_dorms())), nights, RANDOM, CapacityBasis.OPTIMAL, seed=3)

        assert forward == backward

    def test_seed_defaults_to_config(self):
        nights = [create_night(1), create_night(2)]
        config = ConfigLoader(overrides={"engine.random.seed": 11})

        from_config = assign(_mixed_roster(), _dorms(), nights, RANDOM, CapacityBasis.OPTIMAL, config=config)
        explicit = assign(_mixed_roster(), _dorms(), nights, RANDOM, CapacityBasis.OPTIMAL, seed=11)

        assert from_config == explicit

    def test_shuffle_order_decides_who_gets_scarce_beds(self):
        """With one bed, the first registrant of the seeded shuffle gets it."""
        registrants = [create_registrant(i) for i in (1, 2, 3)]
        ctx = build_assignment_context(registrants, [create_dormitory(1, optimal_capacity=1)], [1], seed=5)

        place_randomly(ctx)

        expected_order = sorted(registrants, key=lambda r: r.id)
        random.Random(5).shuffle(expected_order)
        assert [r.registrant_id for r in ctx.records] == [expected_order[0].id]
        assert len(ctx.assignment_logger.unplaced) == 2


class TestPlacement:
    def test_everyone_placed_when_beds_suffice(self):
        nights = [create_night(1), create_night(2)]

        preview = assign(_mixed_roster(), _dorms(), nights, RANDOM, CapacityBasis.MAX, seed=1)

        assert preview.is_assignable is True

    def test_gender_respected(self):
        registrants = _mixed_roster()
        dorms = _dorms()
        ctx = build_assignment_context(registrants, dorms, [1, 2], basis=CapacityBasis.MAX, seed=99)

        place_randomly(ctx)

        gender_of_dorm = {d.id: d.gender for d in dorms}
        gender_of = {r.id: r.gender for r in registrants}
        assert all(gender_of_dorm[r.dormitory_id] == gender_of[r.registrant_id] for r in ctx.records)

    def test_tightest_fit_per_night(self):
        dorms = [create_dormitory(1, optimal_capacity=5), create_dormitory(2, optimal_capacity=2)]
        ctx = build_assignment_context([create_registrant(1)], dorms, [1])

        place_randomly(ctx)

        assert placements_by_registrant(ctx.records) == {1: {1: 2}}

    def test_nights_are_placed_independently(self):
        """Each night picks its own tightest room; staying put is not preferred."""
        dorms = [
            create_dormitory(1, optimal_capacity=None, night_capacities={1: (1, 1), 2: (5, 5)}),
            create_dormitory(2, optimal_capacity=None, night_capacities={1: (5, 5), 2: (1, 1)}),
        ]
        ctx = build_assignment_context([create_registrant(1, nights=(1, 2))], dorms, [1, 2])

        place_randomly(ctx)

        assert placements_by_registrant(ctx.records) == {1: {1: 1, 2: 2}}

    def test_cohesion_is_never_flagged(self, female_dorms):
        nights = [create_night(1)]

        preview = assign(create_gbs_group(1, 15, gbs_number=1), female_dorms, nights, RANDOM, CapacityBasis.MAX)

        assert preview.is_assignable is True
        assert len({a.dormitory_id for a in preview.preview_assignments}) == 2
        assert not any(a.cohesion_violation for a in preview.preview_assignments)

    def test_shortfall_reported_as_data(self, female_dorms):
        preview = assign(
            create_gbs_group(1, 23, gbs_number=1), female_dorms, [create_night(1)], RANDOM, CapacityBasis.MAX
        )

        assert preview.is_assignable is False
        assert len(preview.preview_assignments) == 20
