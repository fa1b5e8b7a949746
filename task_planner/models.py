"""Value types shared by the store, filters, layout and the interaction machine."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from .dates import normalize_range, span_days


class Category(Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    COMPLETED = "Completed"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw) -> "Category":
        if isinstance(raw, Category):
            return raw
        text = str(raw or "").strip()
        for cat in cls:
            if text == cat.value:
                return cat
        key = text.replace(" ", "").replace("_", "").lower()
        for cat in cls:
            if key == cat.name.replace("_", "").lower():
                return cat
        raise ValueError(f"Unknown task category: {raw!r}")


ALL_CATEGORIES: FrozenSet[Category] = frozenset(Category)


class Timeframe(Enum):
    ONE_WEEK = "1week"
    TWO_WEEKS = "2weeks"
    THREE_WEEKS = "3weeks"
    ALL = "all"

    @property
    def days(self) -> Optional[int]:
        return {"1week": 7, "2weeks": 14, "3weeks": 21}.get(self.value)

    @property
    def label(self) -> str:
        if self is Timeframe.ALL:
            return "All tasks"
        n = self.days // 7
        return f"Next {n} week" + ("s" if n != 1 else "")

    @classmethod
    def parse(cls, raw) -> "Timeframe":
        if isinstance(raw, Timeframe):
            return raw
        try:
            return cls(str(raw).strip())
        except ValueError:
            raise ValueError(f"Unknown timeframe: {raw!r}") from None


@dataclass(frozen=True)
class Task:
    id: str
    name: str
    category: Category
    start_date: date
    end_date: date

    @property
    def span_days(self) -> int:
        return span_days(self.start_date, self.end_date)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class DateSelection:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_selecting: bool = False

    def normalized(self) -> Optional[Tuple[date, date]]:
        if self.start_date is None or self.end_date is None:
            return None
        return normalize_range(self.start_date, self.end_date)


@dataclass(frozen=True)
class Filters:
    categories: FrozenSet[Category] = field(default_factory=lambda: ALL_CATEGORIES)
    timeframe: Timeframe = Timeframe.ALL
    search_term: str = ""

    def with_changes(self, **partial) -> "Filters":
        unknown = set(partial) - {"categories", "timeframe", "search_term"}
        if unknown:
            raise ValueError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")
        if "categories" in partial:
            partial["categories"] = frozenset(Category.parse(c) for c in partial["categories"])
        if "timeframe" in partial:
            partial["timeframe"] = Timeframe.parse(partial["timeframe"])
        if "search_term" in partial:
            partial["search_term"] = partial["search_term"] or ""
        return replace(self, **partial)


@dataclass(frozen=True)
class LaneAssignment:
    task: Task
    start_column: int
    end_column: int
    lane: int

    @property
    def columns(self) -> range:
        return range(self.start_column, self.end_column + 1)
