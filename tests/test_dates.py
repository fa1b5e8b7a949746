# tests/test_dates.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from task_planner.dates import add_days, days_between, normalize_range, parse_day, same_day, span_days


def test_same_day_ignores_time_of_day() -> None:
    assert same_day(datetime(2024, 3, 1, 0, 1), datetime(2024, 3, 1, 23, 59))
    assert same_day(date(2024, 3, 1), datetime(2024, 3, 1, 12, 0))
    assert not same_day(date(2024, 3, 1), date(2023, 3, 1))
    assert not same_day(date(2024, 3, 1), date(2024, 4, 1))


@pytest.mark.parametrize(
    "start,end",
    [
        (date(2024, 1, 1), date(2024, 1, 1)),
        (date(2024, 1, 30), date(2024, 2, 2)),
        (date(2024, 2, 27), date(2024, 3, 2)),
        (date(2023, 12, 25), date(2024, 1, 8)),
    ],
)
def test_days_between_is_inclusive_and_gapless(start: date, end: date) -> None:
    days = days_between(start, end)
    assert len(days) == (end - start).days + 1
    assert days[0] == start and days[-1] == end
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))


def test_days_between_reversed_is_empty() -> None:
    assert days_between(date(2024, 1, 5), date(2024, 1, 4)) == []


def test_days_between_crosses_leap_day() -> None:
    assert date(2024, 2, 29) in days_between(date(2024, 2, 28), date(2024, 3, 1))


def test_normalize_and_span() -> None:
    a, b = date(2024, 5, 9), date(2024, 5, 2)
    assert normalize_range(a, b) == (b, a)
    assert normalize_range(b, a) == (b, a)
    assert span_days(b, a) == 8
    assert add_days(b, 7) == a


def test_parse_day_accepts_dates_and_timestamps() -> None:
    assert parse_day("2024-01-30") == date(2024, 1, 30)
    assert parse_day("2024-01-30T05:00:00.000Z") == date(2024, 1, 30)
    with pytest.raises(ValueError):
        parse_day("not a date")
