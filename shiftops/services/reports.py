"""Task completion and scheduled-hours metrics."""

from __future__ import annotations

import math
from typing import Iterable, List

import pandas as pd

from shiftops.domain.records import ShiftSpan, TaskStatus

from .timeutils import hours_between


# group_by -> (column, label used when the column is empty)
GROUP_COLUMNS = {
    "template": ("title", "Unknown"),
    "location": ("location_id", "Unknown"),
    "department": ("department_id", "No Department"),
    "shift": ("shift_id", "No Shift"),
    "role": ("assigned_role", "Unassigned"),
}

TASK_COLUMNS = [
    "id", "title", "location_id", "department_id", "shift_id",
    "assigned_role", "status", "due_at", "completed_at",
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def tasks_frame(tasks: Iterable) -> pd.DataFrame:
    """Build a DataFrame from stored task rows."""
    rows = [{col: getattr(task, col) for col in TASK_COLUMNS} for task in tasks]
    df = pd.DataFrame(rows, columns=TASK_COLUMNS)
    df["due_at"] = pd.to_datetime(df["due_at"], utc=True)
    df["completed_at"] = pd.to_datetime(df["completed_at"], utc=True)
    return df


def _group_names(df: pd.DataFrame, group_by: str) -> pd.Series:
    if group_by not in GROUP_COLUMNS:
        raise ValueError(f"Unknown group_by '{group_by}'; expected one of {sorted(GROUP_COLUMNS)}")
    column, fallback = GROUP_COLUMNS[group_by]
    return df[column].fillna(fallback).replace("", fallback)


def on_time_metrics(df: pd.DataFrame, group_by: str) -> pd.DataFrame:
    """
    On-time completion rate per group.

    A task is on time when it is done and completed no later than its due time.

    Returns:
        DataFrame with name, rate (percent, rounded), total, on_time; best rate first
    """
    if df.empty:
        return pd.DataFrame(columns=["name", "rate", "total", "on_time"])
    ts = df.copy()
    ts["name"] = _group_names(ts, group_by)
    ts["on_time"] = (
        (ts["status"] == TaskStatus.DONE.value)
        & ts["completed_at"].notna()
        & (ts["completed_at"] <= ts["due_at"])
    )
    grouped = ts.groupby("name", sort=False).agg(
        total=("on_time", "size"),
        on_time=("on_time", "sum"),
    ).reset_index()
    grouped["on_time"] = grouped["on_time"].astype(int)
    grouped["rate"] = [
        _round_half_up(on_time / total * 100) if total else 0
        for on_time, total in zip(grouped["on_time"], grouped["total"])
    ]
    grouped = grouped.sort_values("rate", ascending=False, kind="stable")
    return grouped[["name", "rate", "total", "on_time"]].reset_index(drop=True)


def mtc_metrics(df: pd.DataFrame, group_by: str) -> pd.DataFrame:
    """
    Mean minutes from due time to completion per group (negative means early).

    Returns:
        DataFrame with name, avg_minutes (rounded), count; fastest first
    """
    columns = ["name", "avg_minutes", "count"]
    if df.empty:
        return pd.DataFrame(columns=columns)
    done = df[(df["status"] == TaskStatus.DONE.value) & df["completed_at"].notna()].copy()
    if done.empty:
        return pd.DataFrame(columns=columns)
    done["name"] = _group_names(done, group_by)
    done["minutes"] = (done["completed_at"] - done["due_at"]).dt.total_seconds() / 60.0
    grouped = done.groupby("name", sort=False)["minutes"].agg(["mean", "count"]).reset_index()
    grouped["avg_minutes"] = grouped["mean"].map(_round_half_up)
    grouped = grouped.sort_values("avg_minutes", kind="stable")
    return grouped[["name", "avg_minutes", "count"]].reset_index(drop=True)


def coverage_by_hour(df: pd.DataFrame, tz: str = "UTC") -> pd.DataFrame:
    """Completed tasks per local hour of day (always 24 rows)."""
    hours = pd.DataFrame({"hour": range(24)})
    completed = df["completed_at"].dropna() if not df.empty else pd.Series([], dtype="datetime64[ns, UTC]")
    counts = completed.dt.tz_convert(tz).dt.hour.value_counts()
    hours["count"] = hours["hour"].map(counts).fillna(0).astype(int)
    return hours


def weekly_hours(spans: Iterable[ShiftSpan], cap: float = 40.0) -> pd.DataFrame:
    """
    Scheduled hours per employee with an overtime flag.

    Returns:
        DataFrame with employee_id, name, hours, is_overtime, percentage (of cap);
        most hours first
    """
    rows: List[dict] = [
        {
            "employee_id": span.employee_id,
            "name": span.employee_name or span.employee_id,
            "hours": hours_between(span.start_at, span.end_at),
        }
        for span in spans
        if span.employee_id
    ]
    columns = ["employee_id", "name", "hours", "is_overtime", "percentage"]
    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(rows)
    per_emp = df.groupby(["employee_id", "name"], sort=False)["hours"].sum().reset_index()
    per_emp["is_overtime"] = per_emp["hours"] > cap
    per_emp["percentage"] = per_emp["hours"] / cap * 100
    per_emp = per_emp.sort_values("hours", ascending=False, kind="stable")
    return per_emp[columns].reset_index(drop=True)
