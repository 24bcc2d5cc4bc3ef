"""Task urgency scoring.

UrgencyScore = 0.4*TimeDecay + 0.3*Criticality + 0.2*OverdueFlag + 0.1*ShiftProximity

Overdue tasks are floored at the critical threshold.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, List, Optional

from shiftops.domain.records import TaskStatus, TaskUrgencyInput, UrgencyLevel, UrgencyScore

from .timeutils import parse_instant


WEIGHT_TIME_DECAY = 0.4
WEIGHT_CRITICALITY = 0.3
WEIGHT_OVERDUE = 0.2
WEIGHT_SHIFT_PROXIMITY = 0.1

CRITICAL_THRESHOLD = 0.8
HIGH_THRESHOLD = 0.6
MEDIUM_THRESHOLD = 0.4


def _minutes_until(target: datetime, now: datetime) -> float:
    return (parse_instant(target) - parse_instant(now)).total_seconds() / 60.0


def _logistic(rate: float, minutes: float, midpoint: float) -> float:
    exponent = rate * (minutes - midpoint)
    # math.exp overflows past ~709; the curve is already 0 there
    if exponent > 700:
        return 0.0
    return 1.0 / (1.0 + math.exp(exponent))


def calculate_time_decay(due_at: datetime, now: datetime) -> float:
    """
    Time pressure in [0, 1].

    Due or past due scores 1.0. Inside the last hour a steep curve centred on
    30 minutes remaining applies; before that a gentler one centred on 3 hours.
    """
    minutes = _minutes_until(due_at, now)
    if minutes <= 0:
        return 1.0
    if minutes <= 60:
        return _logistic(0.1, minutes, 30)
    return _logistic(0.02, minutes, 180)


def calculate_criticality(level: float) -> float:
    """Map criticality 1-5 onto 0.2-1.0."""
    return max(0.2, min(1.0, level * 0.2))


def calculate_overdue_flag(due_at: datetime, now: datetime) -> float:
    return 1.0 if parse_instant(due_at) < parse_instant(now) else 0.0


def calculate_shift_proximity(window_end: Optional[datetime], now: datetime) -> float:
    """0.3 when the task window closes within the next 30 minutes."""
    if window_end is None:
        return 0.0
    minutes = _minutes_until(window_end, now)
    return 0.3 if 0 < minutes <= 30 else 0.0


def calculate_urgency_score(task: TaskUrgencyInput, now: datetime) -> float:
    time_decay = calculate_time_decay(task.due_at, now)
    criticality = calculate_criticality(task.criticality)
    overdue = calculate_overdue_flag(task.due_at, now)
    proximity = calculate_shift_proximity(task.window_end, now)

    score = (
        WEIGHT_TIME_DECAY * time_decay
        + WEIGHT_CRITICALITY * criticality
        + WEIGHT_OVERDUE * overdue
        + WEIGHT_SHIFT_PROXIMITY * proximity
    )

    if overdue == 1.0 and score < CRITICAL_THRESHOLD:
        return CRITICAL_THRESHOLD
    return score


def get_urgency_level(score: float) -> UrgencyLevel:
    if score >= CRITICAL_THRESHOLD:
        return UrgencyLevel.CRITICAL
    if score >= HIGH_THRESHOLD:
        return UrgencyLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return UrgencyLevel.MEDIUM
    return UrgencyLevel.LOW


def score_task(task: TaskUrgencyInput, now: datetime) -> UrgencyScore:
    score = calculate_urgency_score(task, now)
    return UrgencyScore(score=score, level=get_urgency_level(score))


def task_input(task) -> TaskUrgencyInput:
    """Build the scorer input from a stored task row."""
    return TaskUrgencyInput(
        due_at=parse_instant(task.due_at),
        criticality=int(task.criticality or 0),
        window_start=parse_instant(task.window_start) if task.window_start else None,
        window_end=parse_instant(task.window_end) if task.window_end else None,
    )


def rank_tasks(tasks: Iterable, now: datetime) -> List[tuple]:
    """
    Order pending tasks by descending urgency.

    Args:
        tasks: Stored task rows (anything with due_at, criticality, window_end, status)
        now: Reference time

    Returns:
        List of (task, UrgencyScore) pairs, most urgent first; ties keep due order
    """
    scored = [
        (task, score_task(task_input(task), now))
        for task in tasks
        if task.status == TaskStatus.PENDING.value
    ]
    scored.sort(key=lambda pair: (-pair[1].score, parse_instant(pair[0].due_at)))
    return scored


def snapshot_urgency(task, now: datetime) -> float:
    """Stamp the current urgency score onto a stored task and return it."""
    score = calculate_urgency_score(task_input(task), now)
    task.urgency_score = round(score, 4)
    return task.urgency_score
