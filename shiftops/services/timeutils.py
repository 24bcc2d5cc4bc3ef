"""Date/time helpers: hour differences, overlap tests and timezone-aware day/week bounds."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Tuple

import pandas as pd

from shiftops.domain.records import WEEKDAY_KEYS


def parse_instant(value) -> datetime:
    """
    Coerce an ISO-8601 string or datetime into an aware datetime.

    Naive values are taken as UTC (SQLite hands timestamps back without an offset).
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.to_pydatetime()


def to_utc(value) -> datetime:
    """Aware UTC datetime; timestamps are stored in UTC."""
    return parse_instant(value).astimezone(timezone.utc)


def hours_between(start: datetime, end: datetime) -> float:
    """Fractional hours from ``start`` to ``end`` (negative if end precedes start)."""
    return (end - start).total_seconds() / 3600.0


def whole_hours_between(start: datetime, end: datetime) -> int:
    """Hours from ``start`` to ``end`` truncated toward zero."""
    return int(hours_between(start, end))


def intervals_overlap(
    new_start: datetime,
    new_end: datetime,
    exist_start: datetime,
    exist_end: datetime,
) -> bool:
    return (
        (exist_start <= new_start < exist_end)
        or (exist_start < new_end <= exist_end)
        or (new_start <= exist_start and new_end >= exist_end)
    )


def to_local(instant: datetime, tz: str) -> pd.Timestamp:
    return pd.Timestamp(parse_instant(instant)).tz_convert(tz)


def weekday_key(instant: datetime, tz: str = "UTC") -> str:
    """Weekday key (``sun`` .. ``sat``) of the instant in ``tz``."""
    # pandas counts Monday as 0
    return WEEKDAY_KEYS[(to_local(instant, tz).dayofweek + 1) % 7]


def clock_hhmm(instant: datetime, tz: str = "UTC") -> str:
    """Local wall-clock time as ``HH:MM``."""
    return to_local(instant, tz).strftime("%H:%M")


def _localize_wall_time(wall: pd.Timestamp, tz: str) -> datetime:
    """
    Attach ``tz`` to a naive wall-clock time.

    Where clocks jump forward past that time the next valid instant is used;
    a repeated wall time resolves to its first occurrence.
    """
    return wall.tz_localize(tz, nonexistent="shift_forward", ambiguous=True).to_pydatetime()


def day_bounds(instant: datetime, tz: str = "UTC") -> Tuple[datetime, datetime]:
    """Local calendar day containing the instant, as ``[midnight, next midnight)``."""
    midnight = to_local(instant, tz).tz_localize(None).normalize()
    return _localize_wall_time(midnight, tz), _localize_wall_time(midnight + pd.Timedelta(days=1), tz)


def week_bounds(instant: datetime, tz: str = "UTC") -> Tuple[datetime, datetime]:
    """ISO week (Monday start) containing the instant, as ``[Mon 00:00, next Mon 00:00)``."""
    local = to_local(instant, tz).tz_localize(None).normalize()
    monday = local - pd.Timedelta(days=local.dayofweek)
    return _localize_wall_time(monday, tz), _localize_wall_time(monday + pd.Timedelta(days=7), tz)


def iso_week_range(week_id: str, tz: str = "UTC") -> Tuple[datetime, datetime]:
    """Bounds of an ISO week id such as ``2025-W48`` in ``tz``."""
    try:
        year, week = week_id.upper().split("-W")
        monday = date.fromisocalendar(int(year), int(week), 1)
    except ValueError as e:
        raise ValueError(f"Invalid ISO week id '{week_id}' (expected e.g. 2025-W48)") from e
    return week_bounds(_localize_wall_time(pd.Timestamp(monday), tz), tz)


def format_hours(value: float) -> str:
    """Render an hour figure for a rule code: ``5`` rather than ``5.0``."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
