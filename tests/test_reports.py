"""Tests for task and hours reports."""

from datetime import timedelta
from types import SimpleNamespace

import pytest

from conftest import utc
from shiftops.domain.records import ShiftSpan
from shiftops.services.reports import (
    coverage_by_hour,
    mtc_metrics,
    on_time_metrics,
    tasks_frame,
    weekly_hours,
)

DUE = utc(2025, 11, 24, 10)


def _task(task_id, title, status="done", completed_delta=None, department_id=None):
    completed_at = DUE + completed_delta if completed_delta is not None else None
    return SimpleNamespace(
        id=task_id,
        title=title,
        location_id="l1",
        department_id=department_id,
        shift_id=None,
        assigned_role=None,
        status=status,
        due_at=DUE,
        completed_at=completed_at,
    )


@pytest.fixture
def frame():
    return tasks_frame([
        _task("t1", "Open tills", completed_delta=timedelta(minutes=-10), department_id="d1"),
        _task("t2", "Open tills", completed_delta=timedelta(minutes=20), department_id="d1"),
        _task("t3", "Clean grill", completed_delta=timedelta(minutes=-30)),
        _task("t4", "Clean grill", status="pending"),
    ])


def test_on_time_rate_per_template(frame):
    result = on_time_metrics(frame, "template")
    assert result["name"].tolist() == ["Open tills", "Clean grill"]
    assert result["rate"].tolist() == [50, 50]
    assert result["total"].tolist() == [2, 2]
    assert result["on_time"].tolist() == [1, 1]


def test_missing_group_value_gets_a_label(frame):
    result = on_time_metrics(frame, "department")
    rows = dict(zip(result["name"], result["rate"]))
    assert rows == {"d1": 50, "No Department": 50}


def test_unknown_group_by_is_rejected(frame):
    with pytest.raises(ValueError, match="Unknown group_by"):
        on_time_metrics(frame, "weather")


def test_mean_time_to_complete(frame):
    result = mtc_metrics(frame, "template")
    assert result["name"].tolist() == ["Clean grill", "Open tills"]
    assert result["avg_minutes"].tolist() == [-30, 5]
    assert result["count"].tolist() == [1, 2]


def test_coverage_by_hour_uses_local_time(frame):
    result = coverage_by_hour(frame, "Europe/Berlin")
    assert len(result) == 24
    counts = dict(zip(result["hour"], result["count"]))
    # completions at 09:30, 09:50 and 10:20 UTC
    assert counts[10] == 2
    assert counts[11] == 1
    assert sum(counts.values()) == 3


def test_empty_frame_reports():
    empty = tasks_frame([])
    assert on_time_metrics(empty, "template").empty
    assert mtc_metrics(empty, "template").empty
    assert coverage_by_hour(empty)["count"].sum() == 0


def test_weekly_hours_flags_overtime():
    spans = [
        ShiftSpan(
            id=f"s{i}",
            start_at=utc(2025, 11, 24 + i, 8),
            end_at=utc(2025, 11, 24 + i, 17),
            employee_id="e1",
            employee_name="Ana",
        )
        for i in range(5)
    ]
    spans.append(ShiftSpan(
        id="b1", start_at=utc(2025, 11, 24, 9), end_at=utc(2025, 11, 24, 13), employee_id="e2", employee_name="Ben"
    ))
    spans.append(ShiftSpan(id="open", start_at=utc(2025, 11, 24, 9), end_at=utc(2025, 11, 24, 13)))

    result = weekly_hours(spans, cap=40)
    assert result["employee_id"].tolist() == ["e1", "e2"]
    assert result["hours"].tolist() == [45.0, 4.0]
    assert result["is_overtime"].tolist() == [True, False]
    assert result["percentage"].tolist() == [112.5, 10.0]
