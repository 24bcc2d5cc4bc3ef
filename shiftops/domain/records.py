"""Typed records consumed by the decision core.

ORM rows are converted into these once, at the repository boundary, so the
rules engine, conflict detector and urgency scorer never see loosely shaped data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple


WEEKDAY_KEYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

# weekday key -> ordered list of ("HH:MM", "HH:MM") slots
AvailabilityMap = Dict[str, List[Tuple[str, str]]]


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    WAITING = "waiting"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    SKIPPED = "skipped"
    DEFERRED = "deferred"


class ConflictKind(str, Enum):
    OVERLAP = "overlap"
    REST_VIOLATION = "rest_violation"
    OVERTIME = "overtime"
    AVAILABILITY = "availability"


class UrgencyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ShiftSpan:
    """A shift as seen by the conflict detector (employee may be unassigned)."""

    id: str
    start_at: datetime
    end_at: datetime
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None


@dataclass(frozen=True)
class ShiftChange:
    """A proposed assignment of an employee to a shift."""

    employee_id: str
    shift_id: str
    department_id: Optional[str]
    start_at: datetime
    end_at: datetime
    position_id: Optional[str] = None
    required_skills: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EmployeeRecord:
    id: str
    org_id: str
    display_name: str = ""
    skills: Tuple[str, ...] = ()
    availability: Optional[AvailabilityMap] = None
    seniority_rank: int = 0
    department_ids: Tuple[str, ...] = ()
    timezone: str = "UTC"


@dataclass(frozen=True)
class LaborRuleSet:
    min_rest_hours: float
    max_hours_day: float
    max_hours_week: float


@dataclass(frozen=True)
class ActiveAssignment:
    """An assignment with status ``assigned`` and its shift's time range."""

    assignment_id: str
    shift_id: str
    start_at: datetime
    end_at: datetime


@dataclass(frozen=True)
class TaskUrgencyInput:
    due_at: datetime
    criticality: int
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None


@dataclass(frozen=True)
class UrgencyScore:
    score: float
    level: UrgencyLevel


@dataclass
class Conflict:
    kind: ConflictKind
    message: str
    shift_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {"type": self.kind.value, "message": self.message, "shiftIds": list(self.shift_ids)}


@dataclass
class RuleMetrics:
    projected_weekly_hours: float = 0
    projected_overtime_hours: float = 0


@dataclass
class RuleResult:
    """Outcome of evaluating a proposed assignment.

    ``blocks`` are hard failures and make the assignment ineligible;
    ``warnings`` are advisories that never affect ``eligible``.
    """

    eligible: bool = True
    warnings: List[str] = field(default_factory=list)
    blocks: List[str] = field(default_factory=list)
    metrics: RuleMetrics = field(default_factory=RuleMetrics)
    conflicts: List[Conflict] = field(default_factory=list)

    def block(self, code: str) -> None:
        self.blocks.append(code)
        self.eligible = False

    def warn(self, code: str) -> None:
        self.warnings.append(code)

    def to_dict(self) -> Dict:
        return {
            "eligible": self.eligible,
            "warnings": list(self.warnings),
            "blocks": list(self.blocks),
            "metrics": {
                "projectedWeeklyHours": self.metrics.projected_weekly_hours,
                "projectedOvertimeHours": self.metrics.projected_overtime_hours,
            },
            "conflicts": [
                {"type": c.kind.value, "message": c.message} for c in self.conflicts
            ],
        }
