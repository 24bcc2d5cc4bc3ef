"""Repository classes for data access."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from shiftops.services.availability import normalize_availability
from shiftops.services.timeutils import parse_instant, to_utc

from .models import Assignment, Employee, LaborRules, Organization, Shift, Task
from .records import ActiveAssignment, AssignmentStatus, EmployeeRecord, LaborRuleSet, ShiftSpan


class EmployeeRepository:
    """Repository for employee data access."""

    @staticmethod
    def get_all(session: Session) -> List[Employee]:
        """Get all employees."""
        return session.query(Employee).all()

    @staticmethod
    def get_by_id(session: Session, employee_id: str) -> Optional[Employee]:
        """Get employee by ID."""
        return session.query(Employee).filter(Employee.id == employee_id).first()

    @staticmethod
    def get_active_by_org(session: Session, org_id: str) -> List[Employee]:
        """Get active employees of an organization."""
        return (
            session.query(Employee)
            .filter(Employee.org_id == org_id, Employee.active.is_(True))
            .all()
        )

    @staticmethod
    def to_record(employee: Employee) -> EmployeeRecord:
        """Convert an employee row into the typed record used by the rules engine."""
        org = employee.organization
        return EmployeeRecord(
            id=employee.id,
            org_id=employee.org_id,
            display_name=employee.display_name,
            skills=tuple(employee.skills or ()),
            availability=normalize_availability(employee.availability_rules),
            seniority_rank=int(employee.seniority_rank or 0),
            department_ids=tuple(m.department_id for m in employee.departments),
            timezone=(org.timezone if org is not None and org.timezone else "UTC"),
        )


class LaborRulesRepository:
    """Repository for organization labor rules."""

    @staticmethod
    def get_by_org(session: Session, org_id: str) -> Optional[LaborRules]:
        """Get labor rules for an organization (None when not configured)."""
        return session.query(LaborRules).filter(LaborRules.org_id == org_id).first()

    @staticmethod
    def to_record(rules: LaborRules) -> LaborRuleSet:
        return LaborRuleSet(
            min_rest_hours=float(rules.min_rest_hours),
            max_hours_day=float(rules.max_hours_day),
            max_hours_week=float(rules.max_hours_week),
        )


class OrganizationRepository:
    """Repository for organizations."""

    @staticmethod
    def get_by_id(session: Session, org_id: str) -> Optional[Organization]:
        return session.query(Organization).filter(Organization.id == org_id).first()

    @staticmethod
    def get_timezone(session: Session, org_id: str) -> str:
        """Organization timezone, 'UTC' when unknown."""
        org = OrganizationRepository.get_by_id(session, org_id)
        return org.timezone if org is not None and org.timezone else "UTC"


class ShiftRepository:
    """Repository for shift data access."""

    @staticmethod
    def get_by_id(session: Session, shift_id: str) -> Optional[Shift]:
        """Get shift by ID."""
        return session.query(Shift).filter(Shift.id == shift_id).first()

    @staticmethod
    def get_between(session: Session, start: datetime, end: datetime) -> List[Shift]:
        """Get non-archived shifts starting in [start, end), ordered by start."""
        return (
            session.query(Shift)
            .filter(Shift.archived_at.is_(None))
            .filter(Shift.start_at >= to_utc(start), Shift.start_at < to_utc(end))
            .order_by(Shift.start_at)
            .all()
        )

    @staticmethod
    def to_spans(shifts: List[Shift]) -> List[ShiftSpan]:
        """
        Convert shifts into spans for conflict detection.

        A shift carries its active assignment's employee, if any.
        """
        spans = []
        for shift in shifts:
            active = next(
                (a for a in shift.assignments if a.status == AssignmentStatus.ASSIGNED.value),
                None,
            )
            spans.append(ShiftSpan(
                id=shift.id,
                start_at=parse_instant(shift.start_at),
                end_at=parse_instant(shift.end_at),
                employee_id=active.employee_id if active else None,
                employee_name=active.employee.display_name if active else None,
            ))
        return spans


class AssignmentRepository:
    """Repository for assignment data access."""

    @staticmethod
    def get_all(session: Session) -> List[Assignment]:
        """Get all assignments."""
        return session.query(Assignment).all()

    @staticmethod
    def get_active_by_employee(session: Session, employee_id: str) -> List[Assignment]:
        """Get an employee's assignments with status 'assigned'."""
        return (
            session.query(Assignment)
            .join(Shift)
            .filter(Assignment.employee_id == employee_id)
            .filter(Assignment.status == AssignmentStatus.ASSIGNED.value)
            .order_by(Shift.start_at)
            .all()
        )

    @staticmethod
    def to_active(assignment: Assignment) -> ActiveAssignment:
        return ActiveAssignment(
            assignment_id=assignment.id,
            shift_id=assignment.shift_id,
            start_at=parse_instant(assignment.shift.start_at),
            end_at=parse_instant(assignment.shift.end_at),
        )


class TaskRepository:
    """Repository for task instances."""

    @staticmethod
    def get_pending(session: Session, location_id: str | None = None) -> List[Task]:
        """Get pending tasks, optionally for one location."""
        query = session.query(Task).filter(Task.status == "pending")
        if location_id is not None:
            query = query.filter(Task.location_id == location_id)
        return query.order_by(Task.due_at).all()

    @staticmethod
    def get_due_between(session: Session, start: datetime, end: datetime) -> List[Task]:
        """Get tasks due in [start, end)."""
        return (
            session.query(Task)
            .filter(Task.due_at >= to_utc(start), Task.due_at < to_utc(end))
            .order_by(Task.due_at)
            .all()
        )
