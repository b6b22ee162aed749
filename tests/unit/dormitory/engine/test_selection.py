"""Unit tests for snapshot selection."""

from __future__ import annotations

import pytest

from dormitory.engine.selection import select_snapshot
from dormitory.errors import UnknownDormitoryError, UnknownRegistrantError
from dormitory.models import Gender

from .conftest import create_dormitory, create_registrant


@pytest.fixture
def roster():
    return [
        create_registrant(1, gender=Gender.FEMALE),
        create_registrant(2, gender=Gender.MALE),
        create_registrant(3, gender=Gender.FEMALE),
    ]


@pytest.fixture
def dorms():
    return [
        create_dormitory(10, gender=Gender.FEMALE),
        create_dormitory(20, gender=Gender.MALE),
    ]


class TestSelectSnapshot:
    def test_no_selection_keeps_everything(self, roster, dorms):
        registrants, dormitories = select_snapshot(roster, dorms)

        assert registrants == roster
        assert dormitories == dorms

    def test_selects_ids_in_input_order(self, roster, dorms):
        registrants, dormitories = select_snapshot(roster, dorms, registrant_ids=[3, 1], dormitory_ids=[20])

        assert [r.id for r in registrants] == [1, 3]
        assert [d.id for d in dormitories] == [20]

    def test_gender_tab(self, roster, dorms):
        registrants, dormitories = select_snapshot(roster, dorms, gender=Gender.MALE)

        assert [r.id for r in registrants] == [2]
        assert [d.id for d in dormitories] == [20]

    def test_empty_selection_is_allowed(self, roster, dorms):
        registrants, dormitories = select_snapshot(roster, dorms, registrant_ids=[], dormitory_ids=[])

        assert registrants == []
        assert dormitories == []

    def test_unknown_registrant(self, roster, dorms):
        with pytest.raises(UnknownRegistrantError, match=r"\[99\]"):
            select_snapshot(roster, dorms, registrant_ids=[1, 99])

    def test_unknown_dormitory(self, roster, dorms):
        with pytest.raises(UnknownDormitoryError):
            select_snapshot(roster, dorms, dormitory_ids=[30])

    def test_input_is_not_mutated(self, roster, dorms):
        original = list(roster)

        select_snapshot(roster, dorms, registrant_ids=[1], gender=Gender.FEMALE)

        assert roster == original
