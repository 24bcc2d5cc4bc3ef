"""AssignmentStore backed by a SQLAlchemy session."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from .records import ActiveAssignment, EmployeeRecord, LaborRuleSet
from .repositories import AssignmentRepository, EmployeeRepository, LaborRulesRepository


class SessionAssignmentStore:
    """
    Serves the rules engine's reads from the database.

    Queries run synchronously on the session; the coroutine interface matches
    stores that talk to a remote API.
    """

    def __init__(self, session: Session):
        self.session = session

    async def fetch_employee(self, employee_id: str) -> Optional[EmployeeRecord]:
        employee = EmployeeRepository.get_by_id(self.session, employee_id)
        if employee is None:
            return None
        return EmployeeRepository.to_record(employee)

    async def fetch_labor_rules(self, org_id: str) -> Optional[LaborRuleSet]:
        rules = LaborRulesRepository.get_by_org(self.session, org_id)
        if rules is None:
            return None
        return LaborRulesRepository.to_record(rules)

    async def fetch_active_assignments(self, employee_id: str) -> List[ActiveAssignment]:
        return [
            AssignmentRepository.to_active(a)
            for a in AssignmentRepository.get_active_by_employee(self.session, employee_id)
        ]
