"""Tests for availability matching and normalization."""

from shiftops.services.availability import (
    has_day_constraint,
    is_within_availability,
    normalize_availability,
)

AVAILABILITY = {"mon": [("06:00", "10:00"), ("14:00", "22:00")], "tue": []}


def test_range_inside_any_slot_matches():
    assert is_within_availability(AVAILABILITY, "mon", "15:00", "21:00")
    assert is_within_availability(AVAILABILITY, "mon", "06:00", "10:00")


def test_range_spanning_two_slots_does_not_match():
    assert not is_within_availability(AVAILABILITY, "mon", "09:00", "15:00")


def test_empty_or_absent_day_is_unconstrained():
    assert is_within_availability(AVAILABILITY, "tue", "00:00", "23:59")
    assert is_within_availability(AVAILABILITY, "sat", "00:00", "23:59")
    assert is_within_availability(None, "mon", "00:00", "23:59")
    assert not has_day_constraint(AVAILABILITY, "tue")
    assert has_day_constraint(AVAILABILITY, "mon")


def test_normalize_accepts_lists_and_dicts():
    raw = {
        "Monday": [["09:00", "17:00"]],
        "wed": [{"start": "08:00", "end": "12:00:00"}],
    }
    assert normalize_availability(raw) == {
        "mon": [("09:00", "17:00")],
        "wed": [("08:00", "12:00")],
    }


def test_normalize_drops_bad_entries():
    raw = {"mon": [["9", "17:00"], ["09:00"]], "holiday": [["09:00", "17:00"]], "fri": "all day"}
    assert normalize_availability(raw) == {"mon": []}
    assert normalize_availability(None) is None
    assert normalize_availability([["09:00", "17:00"]]) is None
