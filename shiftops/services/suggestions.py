"""Ranking candidate employees for an open shift."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from shiftops.domain.records import ActiveAssignment, EmployeeRecord

from .availability import has_day_constraint, is_within_availability
from .conflicts import BASELINE_REST_HOURS
from .timeutils import clock_hhmm, hours_between, weekday_key


@dataclass
class EmployeeSuggestion:
    employee_id: str
    employee_name: str
    score: int
    details: Dict[str, float]
    warnings: List[str] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)


def calculate_availability_match(
    employee: EmployeeRecord,
    shift_start: datetime,
    shift_end: datetime,
    tz: str,
    warnings: List[str],
) -> float:
    """30 inside a slot, 10 outside the day's slots, 20 when no preference is set."""
    day = weekday_key(shift_start, tz)
    if not has_day_constraint(employee.availability, day):
        return 20.0
    if is_within_availability(
        employee.availability, day, clock_hhmm(shift_start, tz), clock_hhmm(shift_end, tz)
    ):
        return 30.0
    warnings.append("Outside preferred availability")
    return 10.0


def calculate_skills_match(
    employee: EmployeeRecord,
    required_skills: Sequence[str],
    warnings: List[str],
) -> float:
    """Up to 25 points in proportion to the required skills the employee holds."""
    if not required_skills:
        return 25.0
    have = set(employee.skills)
    matched = [s for s in required_skills if s in have]
    score = len(matched) / len(required_skills) * 25.0
    if score < 25.0:
        warnings.append(f"Missing {len(required_skills) - len(matched)} required skills")
    return score


def calculate_hours_balance(
    weekly_hours: float,
    shift_hours: float,
    weekly_cap: float,
    warnings: List[str],
) -> float:
    """
    Prefer employees with room in their week.

    Args:
        weekly_hours: Hours already assigned this week
        shift_hours: Length of the shift being filled
        weekly_cap: Hours above which the pick is penalized hardest
        warnings: Collected warnings (appended to)

    Returns:
        20 with room to spare, 15 within 5h of the cap, 5 over the cap
    """
    projected = weekly_hours + shift_hours
    if projected > weekly_cap:
        warnings.append(f"Would exceed {weekly_cap:.0f}h/week ({projected:.1f}h)")
        return 5.0
    if projected > weekly_cap - 5:
        return 15.0
    return 20.0


def calculate_seniority(employee: EmployeeRecord) -> float:
    return min(employee.seniority_rank / 10 * 15, 15.0)


def calculate_department_match(
    employee: EmployeeRecord,
    department_id: Optional[str],
    warnings: List[str],
) -> float:
    if not department_id:
        return 10.0
    if department_id in employee.department_ids:
        return 10.0
    warnings.append("Not in shift department")
    return 0.0


def find_assignment_conflicts(
    shift_start: datetime,
    shift_end: datetime,
    assignments: Sequence[ActiveAssignment],
) -> List[str]:
    conflicts: List[str] = []
    for existing in assignments:
        if shift_start < existing.end_at and shift_end > existing.start_at:
            conflicts.append("Overlapping shift")
        gap = abs(hours_between(existing.end_at, shift_start))
        if 0 < gap < BASELINE_REST_HOURS:
            conflicts.append(f"Less than {BASELINE_REST_HOURS:.0f}h rest")
    return conflicts


def suggest_assignments(
    shift_start: datetime,
    shift_end: datetime,
    employees: Sequence[EmployeeRecord],
    week_assignments: Dict[str, List[ActiveAssignment]],
    required_skills: Sequence[str] = (),
    department_id: Optional[str] = None,
    shift_id: Optional[str] = None,
    tz: str = "UTC",
    weekly_cap: float = 40.0,
) -> List[EmployeeSuggestion]:
    """
    Score every candidate for a shift, best first.

    Points: availability (30), skills (25), hours balance (20), seniority (15),
    department (10). Any overlap or short-rest conflict zeroes the score.

    Args:
        shift_start: Shift start
        shift_end: Shift end
        employees: Candidate employees
        week_assignments: employee_id -> active assignments in the shift's week
        required_skills: Skills the shift requires
        department_id: Department the shift belongs to, if any
        shift_id: The shift being filled; its own assignments are ignored so the
            current holder is scored like any other candidate
        tz: Timezone for availability lookups
        weekly_cap: Weekly hours threshold for the hours balance

    Returns:
        Suggestions sorted by descending score
    """
    shift_hours = hours_between(shift_start, shift_end)
    suggestions: List[EmployeeSuggestion] = []

    for employee in employees:
        warnings: List[str] = []
        assignments = [
            a for a in week_assignments.get(employee.id, [])
            if shift_id is None or a.shift_id != shift_id
        ]
        weekly_hours = sum(hours_between(a.start_at, a.end_at) for a in assignments)

        details = {
            "availability_match": calculate_availability_match(
                employee, shift_start, shift_end, tz, warnings
            ),
            "skills_match": calculate_skills_match(employee, required_skills, warnings),
            "hours_balance": calculate_hours_balance(weekly_hours, shift_hours, weekly_cap, warnings),
            "seniority": calculate_seniority(employee),
            "department_match": calculate_department_match(employee, department_id, warnings),
        }
        conflicts = find_assignment_conflicts(shift_start, shift_end, assignments)
        total = math.floor(sum(details.values()) + 0.5)

        suggestions.append(EmployeeSuggestion(
            employee_id=employee.id,
            employee_name=employee.display_name,
            score=0 if conflicts else int(total),
            details=details,
            warnings=warnings,
            conflicts=conflicts,
        ))

    suggestions.sort(key=lambda s: s.score, reverse=True)
    return suggestions
