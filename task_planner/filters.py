from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, List

from .dates import add_days
from .models import Category, Filters, Task


def visible_tasks(tasks: Iterable[Task], filters: Filters, today: date) -> List[Task]:
    """Tasks passing the category, search and timeframe filters, in input order.

    The timeframe only bounds the start date: a task starting before the
    cutoff stays visible however far past it it ends.
    """
    term = filters.search_term.lower() if filters.search_term else ""
    days = filters.timeframe.days
    cutoff = add_days(today, days) if days is not None else None
    out: List[Task] = []
    for task in tasks:
        if task.category not in filters.categories:
            continue
        if term and term not in task.name.lower():
            continue
        if cutoff is not None and task.start_date > cutoff:
            continue
        out.append(task)
    return out


def category_counts(tasks: Iterable[Task]) -> Dict[Category, int]:
    counts = {cat: 0 for cat in Category}
    for task in tasks:
        counts[task.category] += 1
    return counts
