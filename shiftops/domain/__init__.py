"""Domain models and typed records.

Data access lives in ``shiftops.domain.repositories`` and
``shiftops.domain.store``; import those modules directly.
"""

from .models import (
    Assignment,
    Base,
    Department,
    Employee,
    EmployeeDepartment,
    LaborRules,
    Location,
    Organization,
    Shift,
    Task,
)

__all__ = [
    "Assignment",
    "Base",
    "Department",
    "Employee",
    "EmployeeDepartment",
    "LaborRules",
    "Location",
    "Organization",
    "Shift",
    "Task",
]
