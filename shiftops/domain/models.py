"""SQLAlchemy models for the shift and task management store."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Organization(Base):
    """Top-level tenant; owns locations, employees and labor rules."""

    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    timezone = Column(String(64), nullable=False, default="UTC")
    archived_at = Column(DateTime(timezone=True), nullable=True)

    locations = relationship("Location", back_populates="organization")
    employees = relationship("Employee", back_populates="organization")
    labor_rules = relationship("LaborRules", back_populates="organization", uselist=False)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name='{self.name}', tz='{self.timezone}')>"


class Location(Base):
    __tablename__ = "locations"

    id = Column(String(36), primary_key=True, default=_new_id)
    org_id = Column(String(36), ForeignKey("organizations.id"), nullable=False)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=True)
    archived_at = Column(DateTime(timezone=True), nullable=True)

    organization = relationship("Organization", back_populates="locations")
    departments = relationship("Department", back_populates="location")

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name='{self.name}')>"


class Department(Base):
    __tablename__ = "departments"

    id = Column(String(36), primary_key=True, default=_new_id)
    location_id = Column(String(36), ForeignKey("locations.id"), nullable=False)
    name = Column(String(200), nullable=False)
    archived_at = Column(DateTime(timezone=True), nullable=True)

    location = relationship("Location", back_populates="departments")

    def __repr__(self) -> str:
        return f"<Department(id={self.id}, name='{self.name}')>"


class LaborRules(Base):
    """Per-organization labor policy thresholds."""

    __tablename__ = "labor_rules"

    id = Column(String(36), primary_key=True, default=_new_id)
    org_id = Column(String(36), ForeignKey("organizations.id"), nullable=False, unique=True)
    jurisdiction = Column(String(100), nullable=False, default="default")
    min_rest_hours = Column(Float, nullable=False, default=8)
    max_hours_day = Column(Float, nullable=False, default=12)
    max_hours_week = Column(Float, nullable=False, default=40)

    organization = relationship("Organization", back_populates="labor_rules")

    def __repr__(self) -> str:
        return (
            f"<LaborRules(org={self.org_id}, rest={self.min_rest_hours}h, "
            f"day={self.max_hours_day}h, week={self.max_hours_week}h)>"
        )


class Employee(Base):
    """Employee profile with skills and weekly availability."""

    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=_new_id)
    org_id = Column(String(36), ForeignKey("organizations.id"), nullable=False)
    display_name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    seniority_rank = Column(Integer, nullable=True)

    skills = Column(JSON, nullable=True)  # list of skill tags
    availability_rules = Column(JSON, nullable=True)  # {"mon": [["09:00", "17:00"]], ...}

    organization = relationship("Organization", back_populates="employees")
    departments = relationship("EmployeeDepartment", back_populates="employee")
    assignments = relationship("Assignment", back_populates="employee")

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name='{self.display_name}')>"


class EmployeeDepartment(Base):
    """Department membership for an employee."""

    __tablename__ = "employee_departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False)
    department_id = Column(String(36), ForeignKey("departments.id"), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)

    employee = relationship("Employee", back_populates="departments")


class Shift(Base):
    """A concrete work period at a location, optionally tied to a department."""

    __tablename__ = "shifts"

    id = Column(String(36), primary_key=True, default=_new_id)
    location_id = Column(String(36), ForeignKey("locations.id"), nullable=False)
    department_id = Column(String(36), ForeignKey("departments.id"), nullable=True)
    name = Column(String(200), nullable=False, default="Shift")
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    required_skills = Column(JSON, nullable=True)
    is_open = Column(Boolean, nullable=False, default=False)  # claimable by employees
    archived_at = Column(DateTime(timezone=True), nullable=True)

    assignments = relationship("Assignment", back_populates="shift")

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, start={self.start_at}, end={self.end_at})>"


class Assignment(Base):
    """Links an employee to a shift. At most one ``assigned`` row per shift."""

    __tablename__ = "schedule_assignments"

    id = Column(String(36), primary_key=True, default=_new_id)
    shift_id = Column(String(36), ForeignKey("shifts.id"), nullable=False)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False)
    status = Column(String(20), nullable=False, default="assigned")  # assigned, waiting, cancelled
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    shift = relationship("Shift", back_populates="assignments")
    employee = relationship("Employee", back_populates="assignments")

    def __repr__(self) -> str:
        return f"<Assignment(id={self.id}, shift={self.shift_id}, emp={self.employee_id}, status={self.status})>"


class Task(Base):
    """A task instance with a due time and criticality (1-5)."""

    __tablename__ = "task_instances"

    id = Column(String(36), primary_key=True, default=_new_id)
    location_id = Column(String(36), ForeignKey("locations.id"), nullable=False)
    department_id = Column(String(36), ForeignKey("departments.id"), nullable=True)
    shift_id = Column(String(36), ForeignKey("shifts.id"), nullable=True)
    title = Column(String(200), nullable=False)
    assigned_role = Column(String(50), nullable=True)

    due_at = Column(DateTime(timezone=True), nullable=False)
    window_start = Column(DateTime(timezone=True), nullable=True)
    window_end = Column(DateTime(timezone=True), nullable=True)
    criticality = Column(Integer, nullable=False, default=3)
    status = Column(String(20), nullable=False, default="pending")  # pending, done, skipped, deferred
    completed_at = Column(DateTime(timezone=True), nullable=True)
    urgency_score = Column(Float, nullable=True)  # snapshot taken at materialization
    notes = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', due={self.due_at}, status={self.status})>"
