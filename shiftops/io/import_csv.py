"""CSV import utilities to load data into database."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from shiftops.domain.models import Assignment, Employee, Shift, Task
from shiftops.domain.records import TaskStatus
from shiftops.services.urgency import snapshot_urgency

logger = logging.getLogger(__name__)


def _read(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    df.columns = df.columns.str.lower().str.strip()
    return df


def _split_tags(value: str) -> list:
    """Skill lists are stored semicolon-separated in CSV."""
    return [tag.strip() for tag in value.split(";") if tag.strip()]


def _optional(value: str):
    return value if value != "" else None


def _timestamp(value: str):
    if value == "":
        return None
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    # stored as UTC wall time
    return ts.tz_convert("UTC").to_pydatetime()


def import_employees_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import employees from CSV into database.

    Columns: id, org_id, display_name, skills (semicolon-separated),
    availability (JSON), seniority_rank, active

    Returns:
        Number of employees imported
    """
    df = _read(csv_path)

    employees = []
    for _, row in df.iterrows():
        availability = row.get("availability", "")
        employees.append(Employee(
            id=row["id"],
            org_id=row["org_id"],
            display_name=row["display_name"],
            skills=_split_tags(row.get("skills", "")),
            availability_rules=json.loads(availability) if availability else None,
            seniority_rank=int(row["seniority_rank"]) if row.get("seniority_rank", "") else None,
            active=str(row.get("active", "TRUE")).upper() in ["TRUE", "T", "1", "YES", ""],
        ))

    session.add_all(employees)
    session.commit()

    logger.info("Imported %d employees from %s", len(employees), csv_path)
    return len(employees)


def import_shifts_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import shifts from CSV into database.

    Columns: id, location_id, department_id, name, start_at, end_at,
    required_skills (semicolon-separated), is_open

    Returns:
        Number of shifts imported
    """
    df = _read(csv_path)

    shifts = []
    for _, row in df.iterrows():
        start_at = _timestamp(row["start_at"])
        end_at = _timestamp(row["end_at"])
        if start_at is None or end_at is None:
            raise ValueError(f"Shift {row['id']} is missing start_at/end_at")
        if end_at <= start_at:
            raise ValueError(f"Shift {row['id']} ends before it starts: {row['start_at']} - {row['end_at']}")
        shifts.append(Shift(
            id=row["id"],
            location_id=row["location_id"],
            department_id=_optional(row.get("department_id", "")),
            name=row.get("name", "") or "Shift",
            start_at=start_at,
            end_at=end_at,
            required_skills=_split_tags(row.get("required_skills", "")),
            is_open=str(row.get("is_open", "")).upper() in ["TRUE", "T", "1", "YES"],
        ))

    session.add_all(shifts)
    session.commit()

    logger.info("Imported %d shifts from %s", len(shifts), csv_path)
    return len(shifts)


def import_assignments_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import assignments from CSV (columns: shift_id, employee_id, status).

    Returns:
        Number of assignments imported
    """
    df = _read(csv_path)

    valid = {"assigned", "waiting", "cancelled"}
    assignments = []
    for _, row in df.iterrows():
        status = (row.get("status", "") or "assigned").lower()
        if status not in valid:
            raise ValueError(f"Unknown assignment status '{status}' for shift {row['shift_id']}")
        assignments.append(Assignment(
            shift_id=row["shift_id"],
            employee_id=row["employee_id"],
            status=status,
        ))

    session.add_all(assignments)
    session.commit()

    logger.info("Imported %d assignments from %s", len(assignments), csv_path)
    return len(assignments)


def import_tasks_csv(session: Session, csv_path: str | Path, now: datetime | None = None) -> int:
    """
    Import task instances from CSV.

    Columns: id, location_id, title, due_at, criticality, and optionally
    department_id, shift_id, assigned_role, window_start, window_end, status,
    completed_at

    Pending tasks get their urgency score as of ``now`` (default: current time).

    Returns:
        Number of tasks imported
    """
    df = _read(csv_path)

    tasks = []
    for _, row in df.iterrows():
        tasks.append(Task(
            id=row["id"],
            location_id=row["location_id"],
            department_id=_optional(row.get("department_id", "")),
            shift_id=_optional(row.get("shift_id", "")),
            title=row["title"],
            assigned_role=_optional(row.get("assigned_role", "")),
            due_at=_timestamp(row["due_at"]),
            window_start=_timestamp(row.get("window_start", "")),
            window_end=_timestamp(row.get("window_end", "")),
            criticality=int(row.get("criticality", "") or 3),
            status=(row.get("status", "") or "pending").lower(),
            completed_at=_timestamp(row.get("completed_at", "")),
        ))

    now = now or datetime.now(timezone.utc)
    for task in tasks:
        if task.status == TaskStatus.PENDING.value:
            snapshot_urgency(task, now)

    session.add_all(tasks)
    session.commit()

    logger.info("Imported %d tasks from %s", len(tasks), csv_path)
    return len(tasks)
