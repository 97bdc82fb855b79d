"""Calendar-day helpers.

Attendance is recorded per session day with no time of day; the store
returns ``date`` objects while requests carry ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Strict ``YYYY-MM-DD``; raises ValueError for anything else."""
    text = value.strip()
    if len(text) != 10:
        raise ValueError(f"Not an ISO date: {value!r}")
    return date.fromisoformat(text)


def format_iso_date(value: date) -> str:
    return value.isoformat()


def coerce_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))


def now_local() -> datetime:
    return datetime.now().astimezone()


def today_local() -> date:
    return now_local().date()
