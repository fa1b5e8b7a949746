from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import List, Tuple, Union

DayLike = Union[date, datetime]


def as_day(value: DayLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def same_day(a: DayLike, b: DayLike) -> bool:
    """True when year, month and day-of-month match; time of day is ignored."""
    return a.year == b.year and a.month == b.month and a.day == b.day


def days_between(start: DayLike, end: DayLike) -> List[date]:
    """Inclusive ascending run of days from start to end; empty if start > end."""
    current = as_day(start); last = as_day(end)
    days: List[date] = []
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days


def normalize_range(a: DayLike, b: DayLike) -> Tuple[date, date]:
    a, b = as_day(a), as_day(b)
    return (a, b) if a <= b else (b, a)


def add_days(day: DayLike, n: int) -> date:
    return as_day(day) + timedelta(days=n)


def span_days(start: DayLike, end: DayLike) -> int:
    return (as_day(end) - as_day(start)).days + 1


def parse_day(text: str) -> date:
    # older saves hold full timestamps ("2024-01-30T05:00:00.000Z")
    raw = (text or "").strip()
    if "T" in raw:
        raw = raw.split("T", 1)[0]
    return date.fromisoformat(raw)
