"""Read-only conflict analysis over a materialized schedule."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional

from shiftops.domain.records import AvailabilityMap, Conflict, ConflictKind, ShiftSpan

from .availability import has_day_constraint, is_within_availability
from .timeutils import clock_hhmm, hours_between, to_local, weekday_key


# Baseline thresholds for schedule views. These do not read org labor rules;
# the rules engine applies the configurable ones at assignment time.
BASELINE_REST_HOURS = 8.0
BASELINE_WEEKLY_HOURS = 40.0


def detect_conflicts(
    shifts: Iterable[ShiftSpan],
    availability: Optional[Mapping[str, AvailabilityMap]] = None,
    tz: str = "UTC",
) -> Dict[str, List[Conflict]]:
    """
    Find overlaps, short rest gaps, weekly overtime and availability misses per employee.

    Args:
        shifts: Shifts to analyse; those without an employee are ignored
        availability: Optional employee_id -> AvailabilityMap
        tz: Timezone used to read weekdays and wall-clock times

    Returns:
        Dict of employee_id -> conflicts, in the order: adjacent-pair conflicts,
        overtime, then per-shift availability misses
    """
    by_employee: Dict[str, List[ShiftSpan]] = defaultdict(list)
    for shift in shifts:
        if not shift.employee_id:
            continue
        by_employee[shift.employee_id].append(shift)

    detected: Dict[str, List[Conflict]] = {}
    for employee_id, emp_shifts in by_employee.items():
        conflicts: List[Conflict] = []
        who = emp_shifts[0].employee_name or "employee"

        conflicts.extend(_pair_conflicts(emp_shifts, who))

        total_hours = sum(hours_between(s.start_at, s.end_at) for s in emp_shifts)
        if total_hours > BASELINE_WEEKLY_HOURS:
            conflicts.append(Conflict(
                kind=ConflictKind.OVERTIME,
                message=(
                    f"Employee scheduled for {total_hours:.1f} hours "
                    f"(exceeds {BASELINE_WEEKLY_HOURS:.0f} hours)"
                ),
                shift_ids=[s.id for s in emp_shifts],
            ))

        emp_availability = (availability or {}).get(employee_id)
        if emp_availability:
            conflicts.extend(_availability_conflicts(emp_shifts, emp_availability, tz))

        detected[employee_id] = conflicts

    return detected


def _pair_conflicts(emp_shifts: List[ShiftSpan], who: str) -> List[Conflict]:
    ordered = sorted(emp_shifts, key=lambda s: s.start_at)
    conflicts: List[Conflict] = []
    for current, following in zip(ordered, ordered[1:]):
        if current.end_at > following.start_at:
            conflicts.append(Conflict(
                kind=ConflictKind.OVERLAP,
                message=f"Shift overlap detected for {who}",
                shift_ids=[current.id, following.id],
            ))
        elif hours_between(current.end_at, following.start_at) < BASELINE_REST_HOURS:
            conflicts.append(Conflict(
                kind=ConflictKind.REST_VIOLATION,
                message=f"Less than {BASELINE_REST_HOURS:.0f} hours rest between shifts for {who}",
                shift_ids=[current.id, following.id],
            ))
    return conflicts


def _availability_conflicts(
    emp_shifts: List[ShiftSpan],
    availability: AvailabilityMap,
    tz: str,
) -> List[Conflict]:
    conflicts: List[Conflict] = []
    for shift in emp_shifts:
        day = weekday_key(shift.start_at, tz)
        if not has_day_constraint(availability, day):
            continue
        start_hm = clock_hhmm(shift.start_at, tz)
        end_hm = clock_hhmm(shift.end_at, tz)
        if not is_within_availability(availability, day, start_hm, end_hm):
            local_date = to_local(shift.start_at, tz).date()
            conflicts.append(Conflict(
                kind=ConflictKind.AVAILABILITY,
                message=f"Shift outside employee availability on {local_date.isoformat()}",
                shift_ids=[shift.id],
            ))
    return conflicts


def summarize_conflicts(detected: Dict[str, List[Conflict]]) -> Dict[str, int]:
    """Count conflicts by kind across all employees."""
    counts = {kind.value: 0 for kind in ConflictKind}
    for conflicts in detected.values():
        for conflict in conflicts:
            counts[conflict.kind.value] += 1
    return counts
