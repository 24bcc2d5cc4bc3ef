"""I/O utilities for CSV import."""

from .import_csv import import_assignments_csv, import_employees_csv, import_shifts_csv, import_tasks_csv

__all__ = [
    "import_employees_csv",
    "import_shifts_csv",
    "import_assignments_csv",
    "import_tasks_csv",
]
