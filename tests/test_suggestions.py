"""Tests for shift assignment suggestions."""

from conftest import utc
from shiftops.domain.records import ActiveAssignment, EmployeeRecord
from shiftops.services.suggestions import (
    calculate_hours_balance,
    calculate_seniority,
    find_assignment_conflicts,
    suggest_assignments,
)

SHIFT_START = utc(2025, 11, 24, 9)
SHIFT_END = utc(2025, 11, 24, 17)


def _employee(employee_id, **kwargs):
    return EmployeeRecord(id=employee_id, org_id="o1", display_name=employee_id.title(), **kwargs)


def _assignment(shift_id, start, end):
    return ActiveAssignment(assignment_id=f"a-{shift_id}", shift_id=shift_id, start_at=start, end_at=end)


def test_ranks_candidates_best_first():
    employees = [
        _employee("cara", skills=("forklift",)),
        _employee("ben"),
        _employee(
            "ana",
            skills=("forklift",),
            availability={"mon": [("08:00", "18:00")]},
            seniority_rank=10,
            department_ids=("d1",),
        ),
    ]
    week = {
        "ben": [_assignment(f"b{d}", utc(2025, 11, 25 + d, 9), utc(2025, 11, 25 + d, 17)) for d in range(4)],
        "cara": [_assignment("c1", utc(2025, 11, 24, 12), utc(2025, 11, 24, 20))],
    }

    suggestions = suggest_assignments(
        SHIFT_START, SHIFT_END, employees, week, required_skills=("forklift",), department_id="d1"
    )

    assert [s.employee_id for s in suggestions] == ["ana", "ben", "cara"]
    ana, ben, cara = suggestions
    assert ana.score == 100
    assert ana.warnings == []
    # no preference 20, no skills 0, 40h projected 15, seniority 0, other department 0
    assert ben.score == 35
    assert "Missing 1 required skills" in ben.warnings
    assert "Not in shift department" in ben.warnings
    assert cara.score == 0
    assert cara.conflicts == ["Overlapping shift"]


def test_short_rest_zeroes_the_score():
    employees = [_employee("dan")]
    week = {"dan": [_assignment("night", utc(2025, 11, 23, 23), utc(2025, 11, 24, 3))]}
    [dan] = suggest_assignments(SHIFT_START, SHIFT_END, employees, week)
    assert dan.conflicts == ["Less than 8h rest"]
    assert dan.score == 0
    assert dan.details["availability_match"] == 20.0


def test_outside_availability_scores_ten():
    employees = [_employee("eve", availability={"mon": [("12:00", "20:00")]})]
    [eve] = suggest_assignments(SHIFT_START, SHIFT_END, employees, {})
    assert eve.details["availability_match"] == 10.0
    assert "Outside preferred availability" in eve.warnings


def test_total_rounds_half_up():
    employees = [_employee("fay", seniority_rank=3)]
    [fay] = suggest_assignments(SHIFT_START, SHIFT_END, employees, {})
    # 20 + 25 + 20 + 4.5 + 10
    assert fay.score == 80


def test_hours_balance_bands():
    warnings = []
    assert calculate_hours_balance(0, 8, 40, warnings) == 20.0
    assert calculate_hours_balance(30, 8, 40, warnings) == 15.0
    assert calculate_hours_balance(36, 8, 40, warnings) == 5.0
    assert warnings == ["Would exceed 40h/week (44.0h)"]


def test_seniority_is_capped():
    assert calculate_seniority(_employee("x", seniority_rank=25)) == 15.0
    assert calculate_seniority(_employee("y")) == 0.0


def test_adjacent_assignment_is_not_a_conflict():
    assert find_assignment_conflicts(
        SHIFT_START, SHIFT_END, [_assignment("prev", utc(2025, 11, 24, 1), SHIFT_START)]
    ) == []


def test_current_holder_is_not_in_conflict_with_own_shift():
    employees = [_employee("gus")]
    week = {"gus": [_assignment("target", SHIFT_START, SHIFT_END)]}

    [gus] = suggest_assignments(SHIFT_START, SHIFT_END, employees, week, shift_id="target")
    assert gus.conflicts == []
    assert gus.score == 75

    [gus] = suggest_assignments(SHIFT_START, SHIFT_END, employees, week)
    assert gus.conflicts == ["Overlapping shift"]
