"""Weekly availability matching.

Times are compared as fixed-width ``HH:MM`` strings, which orders the same as
comparing minutes since midnight. Shifts that cross midnight are not treated
specially: a 22:00-02:00 shift compares its end against the same day's slots.
"""

from __future__ import annotations

from typing import Optional

from shiftops.domain.records import WEEKDAY_KEYS, AvailabilityMap


def has_day_constraint(availability: Optional[AvailabilityMap], weekday: str) -> bool:
    """True when the map lists at least one slot for ``weekday``."""
    if not availability:
        return False
    return bool(availability.get(weekday))


def is_within_availability(
    availability: Optional[AvailabilityMap],
    weekday: str,
    range_start: str,
    range_end: str,
) -> bool:
    """
    Check whether ``[range_start, range_end]`` fits inside one of the day's slots.

    A day with no slots is unconstrained and always matches.
    """
    if not has_day_constraint(availability, weekday):
        return True
    return any(
        slot_start <= range_start and range_end <= slot_end
        for slot_start, slot_end in availability[weekday]
    )


def normalize_availability(raw) -> Optional[AvailabilityMap]:
    """
    Convert stored availability JSON into an ``AvailabilityMap``.

    Unknown day keys and slots that are not two ``HH:MM`` strings are dropped.
    Returns None when ``raw`` is not a mapping.
    """
    if not isinstance(raw, dict):
        return None
    result: AvailabilityMap = {}
    for day, slots in raw.items():
        key = str(day).lower()[:3]
        if key not in WEEKDAY_KEYS or not isinstance(slots, (list, tuple)):
            continue
        parsed = []
        for slot in slots:
            if isinstance(slot, dict):
                slot = (slot.get("start"), slot.get("end"))
            if not isinstance(slot, (list, tuple)) or len(slot) != 2:
                continue
            start, end = slot
            if _is_hhmm(start) and _is_hhmm(end):
                parsed.append((start[:5], end[:5]))
        result[key] = parsed
    return result


def _is_hhmm(value) -> bool:
    return (
        isinstance(value, str)
        and len(value) >= 5
        and value[2] == ":"
        and value[:2].isdigit()
        and value[3:5].isdigit()
    )
