"""Command-line interface for the shift and task decision core."""

from __future__ import annotations

import argparse
import asyncio
import json
from collections import defaultdict
from datetime import datetime, timezone

from shiftops.config import ShiftOpsConfig, configure_logging, load_config
from shiftops.domain.db import get_session, init_database
from shiftops.domain.models import Location
from shiftops.domain.records import ShiftChange
from shiftops.domain.repositories import (
    AssignmentRepository,
    EmployeeRepository,
    OrganizationRepository,
    ShiftRepository,
    TaskRepository,
)
from shiftops.domain.store import SessionAssignmentStore
from shiftops.io.import_csv import (
    import_assignments_csv,
    import_employees_csv,
    import_shifts_csv,
    import_tasks_csv,
)
from shiftops.services.conflicts import detect_conflicts, summarize_conflicts
from shiftops.services.reports import coverage_by_hour, mtc_metrics, on_time_metrics, tasks_frame, weekly_hours
from shiftops.services.rules_engine import evaluate_assignment
from shiftops.services.suggestions import suggest_assignments
from shiftops.services.timeutils import iso_week_range, parse_instant, week_bounds
from shiftops.services.urgency import rank_tasks


def _config(args: argparse.Namespace) -> ShiftOpsConfig:
    cfg = load_config(args.config) if args.config else ShiftOpsConfig()
    if args.db:
        cfg.db_url = args.db
    return cfg


def _cmd_init_db(args: argparse.Namespace, cfg: ShiftOpsConfig) -> None:
    """Initialize the database."""
    init_database(cfg.db_url)
    print(f"[OK] Database initialized: {cfg.db_url}")


def _cmd_import_csv(args: argparse.Namespace, cfg: ShiftOpsConfig) -> None:
    """Import CSV data into database."""
    session = get_session(cfg.db_url)

    try:
        if args.employees:
            count = import_employees_csv(session, args.employees)
            print(f"[OK] Imported {count} employees")

        if args.shifts:
            count = import_shifts_csv(session, args.shifts)
            print(f"[OK] Imported {count} shifts")

        if args.assignments:
            count = import_assignments_csv(session, args.assignments)
            print(f"[OK] Imported {count} assignments")

        if args.tasks:
            count = import_tasks_csv(session, args.tasks)
            print(f"[OK] Imported {count} tasks")

        session.close()
        print("[OK] CSV import complete")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Import failed: {e}")
        raise


def _cmd_conflicts(args: argparse.Namespace, cfg: ShiftOpsConfig) -> None:
    """Report schedule conflicts for a week."""
    session = get_session(cfg.db_url)

    try:
        tz = args.tz or cfg.timezone
        start, end = iso_week_range(args.week, tz)
        shifts = ShiftRepository.get_between(session, start, end)
        spans = ShiftRepository.to_spans(shifts)

        availability = {}
        for employee_id in {s.employee_id for s in spans if s.employee_id}:
            employee = EmployeeRepository.get_by_id(session, employee_id)
            if employee is not None:
                record = EmployeeRepository.to_record(employee)
                if record.availability:
                    availability[employee_id] = record.availability

        detected = detect_conflicts(spans, availability, tz=tz)
        for employee_id, conflicts in detected.items():
            for conflict in conflicts:
                print(f"{employee_id}\t{conflict.kind.value}\t{conflict.message}\t{','.join(conflict.shift_ids)}")

        session.close()
        print(f"[OK] {args.week}: {summarize_conflicts(detected)}")

    except Exception as e:
        session.close()
        print(f"[ERROR] Conflict detection failed: {e}")
        raise


def _cmd_evaluate(args: argparse.Namespace, cfg: ShiftOpsConfig) -> None:
    """Evaluate whether an employee can take a shift."""
    session = get_session(cfg.db_url)

    try:
        shift = ShiftRepository.get_by_id(session, args.shift)
        if shift is None:
            raise ValueError(f"Shift {args.shift} not found")

        change = ShiftChange(
            employee_id=args.employee,
            shift_id=shift.id,
            department_id=shift.department_id,
            start_at=parse_instant(shift.start_at),
            end_at=parse_instant(shift.end_at),
            required_skills=tuple(shift.required_skills or ()),
        )
        result = asyncio.run(evaluate_assignment(change, SessionAssignmentStore(session)))

        session.close()
        print(json.dumps(result.to_dict(), indent=2))

    except Exception as e:
        session.close()
        print(f"[ERROR] Evaluation failed: {e}")
        raise


def _cmd_urgency(args: argparse.Namespace, cfg: ShiftOpsConfig) -> None:
    """List pending tasks by urgency."""
    session = get_session(cfg.db_url)

    try:
        now = parse_instant(args.now) if args.now else datetime.now(timezone.utc)
        tasks = TaskRepository.get_pending(session, location_id=args.location)
        for task, urgency in rank_tasks(tasks, now):
            print(f"{urgency.score:.3f}\t{urgency.level.value}\t{parse_instant(task.due_at).isoformat()}\t{task.title}")

        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Urgency listing failed: {e}")
        raise


def _cmd_suggest(args: argparse.Namespace, cfg: ShiftOpsConfig) -> None:
    """Rank employees for a shift."""
    session = get_session(cfg.db_url)

    try:
        shift = ShiftRepository.get_by_id(session, args.shift)
        if shift is None:
            raise ValueError(f"Shift {args.shift} not found")
        location = session.get(Location, shift.location_id)
        if location is None:
            raise ValueError(f"Location {shift.location_id} of shift {shift.id} not found")
        tz = OrganizationRepository.get_timezone(session, location.org_id)

        start_at = parse_instant(shift.start_at)
        end_at = parse_instant(shift.end_at)
        week_start, week_end = week_bounds(start_at, tz)

        week_assignments = defaultdict(list)
        for week_shift in ShiftRepository.get_between(session, week_start, week_end):
            for assignment in week_shift.assignments:
                if assignment.status == "assigned":
                    week_assignments[assignment.employee_id].append(
                        AssignmentRepository.to_active(assignment)
                    )

        employees = [
            EmployeeRepository.to_record(e)
            for e in EmployeeRepository.get_active_by_org(session, location.org_id)
        ]
        suggestions = suggest_assignments(
            start_at,
            end_at,
            employees,
            week_assignments,
            required_skills=shift.required_skills or (),
            department_id=shift.department_id,
            shift_id=shift.id,
            tz=tz,
            weekly_cap=cfg.suggestion_weekly_cap,
        )
        for s in suggestions[: args.limit]:
            notes = "; ".join(s.conflicts + s.warnings)
            print(f"{s.score}\t{s.employee_name}\t{notes}")

        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Suggestion failed: {e}")
        raise


def _cmd_report(args: argparse.Namespace, cfg: ShiftOpsConfig) -> None:
    """Print task completion and scheduled-hours metrics for a week."""
    session = get_session(cfg.db_url)

    try:
        tz = args.tz or cfg.timezone
        start, end = iso_week_range(args.week, tz)
        group_by = args.group_by or cfg.report_group_by

        df = tasks_frame(TaskRepository.get_due_between(session, start, end))
        spans = ShiftRepository.to_spans(ShiftRepository.get_between(session, start, end))

        lines = [f"On-time completion by {group_by}:"]
        lines.append(on_time_metrics(df, group_by).to_string(index=False))
        lines.append("")
        lines.append(f"Mean minutes to complete by {group_by}:")
        lines.append(mtc_metrics(df, group_by).to_string(index=False))
        lines.append("")
        lines.append("Completions by hour:")
        coverage = coverage_by_hour(df, tz)
        lines.append(coverage[coverage["count"] > 0].to_string(index=False))
        lines.append("")
        lines.append("Scheduled hours per employee:")
        lines.append(weekly_hours(spans, cfg.suggestion_weekly_cap).to_string(index=False))

        session.close()
        print("\n".join(lines))

    except Exception as e:
        session.close()
        print(f"[ERROR] Report failed: {e}")
        raise


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="shiftops",
        description="Shift assignment rules, conflict detection and task urgency",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default: sqlite:///shiftops.db)")
    parser.add_argument("--config", help="Path to config YAML/JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.set_defaults(func=_cmd_init_db)

    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--employees", help="Path to employees CSV")
    imp.add_argument("--shifts", help="Path to shifts CSV")
    imp.add_argument("--assignments", help="Path to assignments CSV")
    imp.add_argument("--tasks", help="Path to tasks CSV")
    imp.set_defaults(func=_cmd_import_csv)

    con = sub.add_parser("conflicts", help="Detect schedule conflicts for a week")
    con.add_argument("--week", required=True, help="Week ID (e.g., 2025-W48)")
    con.add_argument("--tz", help="Timezone for weekdays and clock times")
    con.set_defaults(func=_cmd_conflicts)

    ev = sub.add_parser("evaluate", help="Check whether an employee can take a shift")
    ev.add_argument("--employee", required=True, help="Employee ID")
    ev.add_argument("--shift", required=True, help="Shift ID")
    ev.set_defaults(func=_cmd_evaluate)

    urg = sub.add_parser("urgency", help="List pending tasks by urgency")
    urg.add_argument("--location", help="Only tasks for this location")
    urg.add_argument("--now", help="Reference time (ISO-8601, default: now)")
    urg.set_defaults(func=_cmd_urgency)

    sug = sub.add_parser("suggest", help="Rank employees for a shift")
    sug.add_argument("--shift", required=True, help="Shift ID")
    sug.add_argument("--limit", type=int, default=10, help="Number of suggestions to print")
    sug.set_defaults(func=_cmd_suggest)

    rep = sub.add_parser("report", help="Task and hours metrics for a week")
    rep.add_argument("--week", required=True, help="Week ID (e.g., 2025-W48)")
    rep.add_argument("--group-by", choices=["template", "location", "department", "shift", "role"])
    rep.add_argument("--tz", help="Timezone for hour-of-day buckets")
    rep.set_defaults(func=_cmd_report)

    args = parser.parse_args(argv)
    cfg = _config(args)
    configure_logging(cfg.log_level)
    args.func(args, cfg)


if __name__ == "__main__":
    main()
