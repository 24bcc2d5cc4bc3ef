"""Pre-commit eligibility check for assigning an employee to a shift.

Callers must serialize the check and the subsequent insert per employee (for
example with a unique constraint or a locked commit step); two concurrent
evaluations can both see the schedule before either assignment lands.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from shiftops.domain.records import (
    ActiveAssignment,
    ConflictKind,
    Conflict,
    EmployeeRecord,
    LaborRuleSet,
    RuleResult,
    ShiftChange,
)

from .availability import has_day_constraint, is_within_availability
from .timeutils import (
    clock_hhmm,
    day_bounds,
    format_hours,
    intervals_overlap,
    parse_instant,
    week_bounds,
    weekday_key,
    whole_hours_between,
)

logger = logging.getLogger(__name__)


EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
OVERLAP_EXISTING_SHIFT = "OVERLAP_EXISTING_SHIFT"
OUTSIDE_AVAILABILITY_WINDOW = "OUTSIDE_AVAILABILITY_WINDOW"
RULES_ENGINE_ERROR = "RULES_ENGINE_ERROR"


class AssignmentStore(Protocol):
    """Read-only data the rules engine needs from the backing store."""

    async def fetch_employee(self, employee_id: str) -> Optional[EmployeeRecord]:
        ...

    async def fetch_labor_rules(self, org_id: str) -> Optional[LaborRuleSet]:
        ...

    async def fetch_active_assignments(self, employee_id: str) -> List[ActiveAssignment]:
        ...


def shift_change_from_payload(payload: Dict) -> ShiftChange:
    """
    Build a ShiftChange from a request payload.

    Accepts camelCase keys (``employeeId``, ``startAt`` ...) or their snake_case
    forms. Raises ValueError when a required field is missing.
    """
    def pick(camel: str, snake: str, required: bool = True):
        value = payload.get(camel, payload.get(snake))
        if required and value in (None, ""):
            raise ValueError(f"ShiftChange payload missing '{camel}'")
        return value

    return ShiftChange(
        employee_id=str(pick("employeeId", "employee_id")),
        shift_id=str(pick("shiftId", "shift_id")),
        department_id=pick("departmentId", "department_id", required=False),
        position_id=pick("positionId", "position_id", required=False),
        start_at=parse_instant(pick("startAt", "start_at")),
        end_at=parse_instant(pick("endAt", "end_at")),
        required_skills=tuple(pick("requiredSkills", "required_skills", required=False) or ()),
    )


async def evaluate_assignment(change: ShiftChange, store: AssignmentStore) -> RuleResult:
    """
    Decide whether ``change.employee_id`` may take the proposed shift.

    Blocks (ineligible): missing employee, missing skills, overlap with an
    active assignment, rest gap shorter than the org minimum, internal error.
    Warnings (advisory): outside availability, weekly overtime forecast,
    daily maximum exceeded.

    Never raises; store failures become a ``RULES_ENGINE_ERROR`` block and the
    partially filled result is returned.
    """
    result = RuleResult()

    try:
        employee = await store.fetch_employee(change.employee_id)
        if employee is None:
            result.block(EMPLOYEE_NOT_FOUND)
            return result

        labor_rules = await store.fetch_labor_rules(employee.org_id)
        tz = employee.timezone or "UTC"

        _check_skills(change, employee, result)

        active = await store.fetch_active_assignments(change.employee_id)

        for existing in active:
            _check_overlap(change, existing, result)
            if labor_rules is not None:
                _check_rest(change, existing, labor_rules, result)

        _check_availability(change, employee, tz, result)

        new_hours = whole_hours_between(change.start_at, change.end_at)
        _forecast_week(change, active, new_hours, labor_rules, tz, result)
        if labor_rules is not None:
            _check_daily_max(change, active, new_hours, labor_rules, tz, result)

    except Exception:
        logger.exception(
            "Rules engine error evaluating employee=%s shift=%s",
            change.employee_id,
            change.shift_id,
        )
        result.block(RULES_ENGINE_ERROR)

    return result


def _check_skills(change: ShiftChange, employee: EmployeeRecord, result: RuleResult) -> None:
    if not change.required_skills:
        return
    have = set(employee.skills)
    missing = [skill for skill in change.required_skills if skill not in have]
    if missing:
        result.block(f"LACK_SKILL_{'_'.join(missing)}")


def _check_overlap(change: ShiftChange, existing: ActiveAssignment, result: RuleResult) -> None:
    if intervals_overlap(change.start_at, change.end_at, existing.start_at, existing.end_at):
        result.block(OVERLAP_EXISTING_SHIFT)
        result.conflicts.append(Conflict(
            kind=ConflictKind.OVERLAP,
            message=f"Overlaps with shift at {existing.start_at.isoformat()}",
            shift_ids=[existing.shift_id],
        ))


def _check_rest(
    change: ShiftChange,
    existing: ActiveAssignment,
    rules: LaborRuleSet,
    result: RuleResult,
) -> None:
    min_rest = rules.min_rest_hours
    gaps = (
        whole_hours_between(existing.end_at, change.start_at),  # existing, then new
        whole_hours_between(change.end_at, existing.start_at),  # new, then existing
    )
    for gap in gaps:
        if 0 <= gap < min_rest:
            result.block(f"REST_VIOLATION_{format_hours(min_rest)}H")
            result.conflicts.append(Conflict(
                kind=ConflictKind.REST_VIOLATION,
                message=f"Less than {format_hours(min_rest)} hours rest between shifts",
                shift_ids=[existing.shift_id],
            ))


def _check_availability(
    change: ShiftChange,
    employee: EmployeeRecord,
    tz: str,
    result: RuleResult,
) -> None:
    if not employee.availability:
        return
    day = weekday_key(change.start_at, tz)
    if not has_day_constraint(employee.availability, day):
        return
    start_hm = clock_hhmm(change.start_at, tz)
    end_hm = clock_hhmm(change.end_at, tz)
    if not is_within_availability(employee.availability, day, start_hm, end_hm):
        result.warn(OUTSIDE_AVAILABILITY_WINDOW)
        result.conflicts.append(Conflict(
            kind=ConflictKind.AVAILABILITY,
            message="Outside employee's preferred availability",
        ))


def _hours_starting_within(active: List[ActiveAssignment], start, end) -> int:
    return sum(
        whole_hours_between(a.start_at, a.end_at)
        for a in active
        if start <= a.start_at < end
    )


def _forecast_week(
    change: ShiftChange,
    active: List[ActiveAssignment],
    new_hours: int,
    rules: Optional[LaborRuleSet],
    tz: str,
    result: RuleResult,
) -> None:
    week_start, week_end = week_bounds(change.start_at, tz)
    total = _hours_starting_within(active, week_start, week_end) + new_hours
    result.metrics.projected_weekly_hours = total

    if rules is None or total <= rules.max_hours_week:
        return
    overtime = total - rules.max_hours_week
    result.metrics.projected_overtime_hours = overtime
    result.warn(f"OVERTIME_FORECAST_{format_hours(overtime)}H")
    result.conflicts.append(Conflict(
        kind=ConflictKind.OVERTIME,
        message=(
            f"Will exceed {format_hours(rules.max_hours_week)}h limit "
            f"({format_hours(total)}h total)"
        ),
    ))


def _check_daily_max(
    change: ShiftChange,
    active: List[ActiveAssignment],
    new_hours: int,
    rules: LaborRuleSet,
    tz: str,
    result: RuleResult,
) -> None:
    day_start, day_end = day_bounds(change.start_at, tz)
    total = _hours_starting_within(active, day_start, day_end) + new_hours
    if total > rules.max_hours_day:
        result.warn(f"DAILY_MAX_EXCEEDED_{format_hours(total - rules.max_hours_day)}H")
