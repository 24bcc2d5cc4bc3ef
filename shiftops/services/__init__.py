"""Decision services: availability, urgency, conflicts, assignment rules, suggestions and reports."""

from .availability import is_within_availability, normalize_availability
from .conflicts import detect_conflicts
from .reports import coverage_by_hour, mtc_metrics, on_time_metrics, weekly_hours
from .rules_engine import evaluate_assignment, shift_change_from_payload
from .suggestions import suggest_assignments
from .urgency import calculate_urgency_score, get_urgency_level, rank_tasks, score_task

__all__ = [
    "is_within_availability",
    "normalize_availability",
    "detect_conflicts",
    "coverage_by_hour",
    "mtc_metrics",
    "on_time_metrics",
    "weekly_hours",
    "evaluate_assignment",
    "shift_change_from_payload",
    "suggest_assignments",
    "calculate_urgency_score",
    "get_urgency_level",
    "rank_tasks",
    "score_task",
]
