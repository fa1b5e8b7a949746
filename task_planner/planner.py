"""UI-facing commands over the store, filters, month grid and pointer machine.

Every command returns a fresh :class:`PlannerView` holding everything the
presentation layer needs to draw the month.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from .dates import add_days
from .filters import category_counts, visible_tasks
from .geometry import CalendarGeometry
from .grid import Slot, month_slots, month_title, month_weeks, shift_month
from .interaction import EDGE_MARGIN_PX, CreateRequest, EditRequest, InteractionMachine, Mode
from .layout import layout_weeks
from .models import Category, Filters, LaneAssignment, Task

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerView:
    year: int
    month: int  # 0-based
    title: str
    today: date
    slots: List[Slot]
    weeks: List[List[Slot]]
    week_layouts: List[List[LaneAssignment]]
    visible_tasks: List[Task]
    category_counts: Dict[Category, int]
    filters: Filters
    selection: Optional[Tuple[date, date]]
    drop_target: Optional[Tuple[date, date]]
    pending_range: Optional[Tuple[date, date]]
    editing_task: Optional[Task]
    mode: Mode
    active_task_id: Optional[str]

    @property
    def task_count(self) -> int:
        return len(self.visible_tasks)

    def in_selection(self, day: Optional[date]) -> bool:
        return day is not None and self.selection is not None and self.selection[0] <= day <= self.selection[1]

    def in_drop_target(self, day: Optional[date]) -> bool:
        return day is not None and self.drop_target is not None and self.drop_target[0] <= day <= self.drop_target[1]

    def is_today(self, day: Optional[date]) -> bool:
        return day is not None and day == self.today


class Planner:
    def __init__(self, store, today: Optional[date] = None, geometry: Optional[CalendarGeometry] = None,
                 prefs=None, clock: Callable[[], date] = date.today,
                 subscribe: Optional[Callable[[], Callable[[], None]]] = None):
        self.store = store
        self.clock = clock
        self._today = today
        start = self.today
        self.year, self.month = start.year, start.month - 1
        if geometry is None:
            if prefs is not None:
                geometry = CalendarGeometry(cell_height=prefs.cell_height, header_height=prefs.header_height)
            else:
                geometry = CalendarGeometry()
        self.geometry = geometry
        self.filters = Filters()
        if prefs is not None:
            self.filters = self.filters.with_changes(timeframe=prefs.default_timeframe)
        edge = prefs.edge_margin if prefs is not None else EDGE_MARGIN_PX
        self.machine = InteractionMachine(store, self.day_at, subscribe=subscribe, edge_margin=edge)
        self.pending_range: Optional[Tuple[date, date]] = None
        self.editing_task_id: Optional[str] = None

    @property
    def today(self) -> date:
        return self._today if self._today is not None else self.clock()

    # -------------------- derived state --------------------
    @property
    def slots(self) -> List[Slot]:
        return month_slots(self.year, self.month)

    def day_at(self, x: float, y: float) -> Optional[date]:
        return self.geometry.day_at(x, y, self.slots)

    def view(self) -> PlannerView:
        slots = self.slots
        weeks = month_weeks(slots)
        visible = visible_tasks(self.store.tasks, self.filters, self.today)
        layouts = layout_weeks(weeks, visible)
        # hit testing follows the rows as last drawn
        self.geometry = self.geometry.fitted(layouts)
        sel = self.machine.selection
        editing = self.store.get(self.editing_task_id) if self.editing_task_id else None
        return PlannerView(
            year=self.year,
            month=self.month,
            title=month_title(self.year, self.month),
            today=self.today,
            slots=slots,
            weeks=weeks,
            week_layouts=layouts,
            visible_tasks=visible,
            category_counts=category_counts(visible),
            filters=self.filters,
            selection=sel.normalized() if sel.is_selecting else None,
            drop_target=self._drop_target(),
            pending_range=self.pending_range,
            editing_task=editing,
            mode=self.machine.mode,
            active_task_id=self.machine.task_id,
        )

    def _drop_target(self) -> Optional[Tuple[date, date]]:
        day = self.machine.hover_day
        if self.machine.mode is not Mode.DRAGGING or day is None:
            return None
        task = self.store.get(self.machine.task_id)
        if task is None:
            return None
        return day, add_days(day, (task.end_date - task.start_date).days)

    # -------------------- task commands --------------------
    def create_task(self, name: str, category) -> PlannerView:
        name = (name or "").strip()
        if self.pending_range is None:
            log.debug("create_task ignored, no date range selected")
            return self.view()
        if not name:
            log.debug("create_task ignored, empty name")
            return self.view()
        start, end = self.pending_range
        self.store.create(name, category, start, end)
        self.pending_range = None
        return self.view()

    def cancel_create(self) -> PlannerView:
        self.pending_range = None
        return self.view()

    def open_task(self, task_id: str) -> PlannerView:
        self.editing_task_id = task_id if self.store.get(task_id) is not None else None
        return self.view()

    def close_task(self) -> PlannerView:
        self.editing_task_id = None
        return self.view()

    def edit_task(self, name: str, category) -> PlannerView:
        name = (name or "").strip()
        if self.editing_task_id is None:
            return self.view()
        if name:
            self.store.update(self.editing_task_id, name=name, category=category)
        else:
            log.debug("edit_task ignored, empty name")
        self.editing_task_id = None
        return self.view()

    def delete_task(self, task_id: str) -> PlannerView:
        self.store.delete(task_id)
        if self.editing_task_id == task_id:
            self.editing_task_id = None
        return self.view()

    # -------------------- navigation / filters --------------------
    def navigate_month(self, direction) -> PlannerView:
        self.year, self.month = shift_month(self.year, self.month, direction)
        return self.view()

    def go_to_today(self) -> PlannerView:
        t = self.today
        self.year, self.month = t.year, t.month - 1
        return self.view()

    def set_filters(self, **partial) -> PlannerView:
        self.filters = self.filters.with_changes(**partial)
        return self.view()

    def toggle_category(self, category, enabled: bool) -> PlannerView:
        cat = Category.parse(category)
        cats = set(self.filters.categories)
        if enabled:
            cats.add(cat)
        else:
            cats.discard(cat)
        return self.set_filters(categories=cats)

    def set_viewport_width(self, width: float) -> None:
        if width != self.geometry.width:
            self.geometry = replace(self.geometry, width=width)

    # -------------------- pointer entry points --------------------
    def pointer_down_day(self, day: Optional[date]) -> PlannerView:
        self.machine.pointer_down_day(day)
        return self.view()

    def pointer_down_task(self, task_id: str, offset_x: float, bar_width: float) -> PlannerView:
        self.machine.pointer_down_task(task_id, offset_x, bar_width)
        return self.view()

    def pointer_down(self, x: float, y: float) -> PlannerView:
        """Press at a grid point: a task bar under it wins over the day cell."""
        hit = self.geometry.bar_at(x, y, self.view().week_layouts)
        if hit is not None:
            assignment, offset_x, width = hit
            return self.pointer_down_task(assignment.task.id, offset_x, width)
        return self.pointer_down_day(self.day_at(x, y))

    def pointer_enter(self, day: Optional[date]) -> PlannerView:
        self.machine.pointer_enter(day)
        return self.view()

    def pointer_move(self, x: float, y: float) -> PlannerView:
        self.machine.pointer_move(x, y)
        return self.view()

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> PlannerView:
        outcome = self.machine.pointer_up(x, y)
        if isinstance(outcome, CreateRequest):
            self.pending_range = (outcome.start_date, outcome.end_date)
        elif isinstance(outcome, EditRequest):
            self.editing_task_id = outcome.task_id
        return self.view()
