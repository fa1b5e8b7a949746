from __future__ import annotations
import calendar
from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
MONTH_NAMES = ["January", "February", "March", "April", "May", "June", "July",
               "August", "September", "October", "November", "December"]

Slot = Optional[date]


def first_weekday_offset(year: int, month0: int) -> int:
    # calendar counts Monday as 0; the grid starts on Sunday
    weekday, _ = calendar.monthrange(year, month0 + 1)
    return (weekday + 1) % 7


def days_in_month(year: int, month0: int) -> int:
    return calendar.monthrange(year, month0 + 1)[1]


def month_slots(year: int, month0: int) -> List[Slot]:
    """Leading blanks up to the 1st's weekday, then every day of the month."""
    if not 0 <= month0 <= 11:
        raise ValueError(f"month must be 0..11, got {month0}")
    slots: List[Slot] = [None] * first_weekday_offset(year, month0)
    slots.extend(date(year, month0 + 1, d) for d in range(1, days_in_month(year, month0) + 1))
    return slots


def month_weeks(slots: Sequence[Slot]) -> List[List[Slot]]:
    return [list(slots[i:i + 7]) for i in range(0, len(slots), 7)]


def shift_month(year: int, month0: int, direction: Union[int, str]) -> Tuple[int, int]:
    if direction in ("next", 1):
        step = 1
    elif direction in ("prev", -1):
        step = -1
    else:
        raise ValueError(f"direction must be 'prev'/'next' or -1/+1, got {direction!r}")
    y, m = divmod(year * 12 + month0 + step, 12)
    return y, m


def month_title(year: int, month0: int) -> str:
    return f"{MONTH_NAMES[month0]} {year}"
