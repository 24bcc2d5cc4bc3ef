"""Decision core for workforce shift and task management.

Modules:
- config: load configuration (YAML or JSON) and set up logging
- domain: SQLAlchemy models, typed records, repositories and the rules-engine store
- services.timeutils: interval arithmetic and timezone-aware day/week bounds
- services.availability: weekly availability matching
- services.urgency: task urgency scoring
- services.conflicts: schedule conflict detection
- services.rules_engine: pre-commit assignment eligibility
- services.suggestions: candidate ranking for open shifts
- services.reports: completion and scheduled-hours metrics
- io: CSV import
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "services",
    "io",
    "cli",
]
