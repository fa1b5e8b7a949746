"""Lane layout for one calendar week row.

Tasks are placed in the order given (store order, no sorting by start
date). Each gets the first lane whose cells are free across its column
span in this row. Rows are laid out independently, so a task crossing a
week boundary may sit in different lanes on each row.
"""

from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .models import LaneAssignment, Task

WeekSlots = Sequence[Optional[date]]


def _columns_for(task: Task, week: WeekSlots) -> Optional[range]:
    hits = [i for i, day in enumerate(week) if day is not None and task.covers(day)]
    if not hits:
        return None
    return range(hits[0], hits[-1] + 1)


def layout_week(week: WeekSlots, tasks: Iterable[Task]) -> List[LaneAssignment]:
    used: Dict[int, Set[int]] = {}  # lane -> occupied columns
    out: List[LaneAssignment] = []
    for task in tasks:
        cols = _columns_for(task, week)
        if cols is None:
            continue
        lane = 0
        while any(c in used.get(lane, ()) for c in cols):
            lane += 1
        used.setdefault(lane, set()).update(cols)
        out.append(LaneAssignment(task, cols.start, cols.stop - 1, lane))
    return out


def layout_weeks(weeks: Iterable[WeekSlots], tasks: Sequence[Task]) -> List[List[LaneAssignment]]:
    return [layout_week(week, tasks) for week in weeks]


def lane_count(assignments: Iterable[LaneAssignment]) -> int:
    return max((a.lane for a in assignments), default=-1) + 1
