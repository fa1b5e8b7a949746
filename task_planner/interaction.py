"""Pointer interaction state machine for the month grid.

Modes::

    IDLE --down on day--> SELECTING --enter/move--> SELECTING --up--> IDLE (CreateRequest)
    IDLE --down on bar, left edge--> RESIZING_START --move--> live start update
    IDLE --down on bar, right edge--> RESIZING_END --move--> live end update
    IDLE --down on bar, elsewhere--> DRAGGING --up--> IDLE (task moved, duration kept)

Every pointer up returns to IDLE. Points that resolve to no day are
ignored. While dragging or resizing, the ``subscribe`` hook holds the
global pointer tracking; its release callable runs once on the way back
to IDLE.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional, Union

from .dates import add_days
from .models import DateSelection, Task

log = logging.getLogger(__name__)

EDGE_MARGIN_PX = 10

Resolver = Callable[[float, float], Optional[date]]
Subscribe = Callable[[], Callable[[], None]]


class Mode(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    DRAGGING = "dragging"
    RESIZING_START = "resizing-start"
    RESIZING_END = "resizing-end"


@dataclass(frozen=True)
class CreateRequest:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class EditRequest:
    task_id: str


Outcome = Union[CreateRequest, EditRequest, Task, None]


class InteractionMachine:
    def __init__(self, store, resolve: Resolver, subscribe: Optional[Subscribe] = None,
                 edge_margin: float = EDGE_MARGIN_PX):
        self.store = store
        self.resolve = resolve
        self.subscribe = subscribe
        self.edge_margin = edge_margin
        self.mode = Mode.IDLE
        self.task_id: Optional[str] = None
        self.selection = DateSelection()
        self.hover_day: Optional[date] = None
        self._moved = False
        self._release: Optional[Callable[[], None]] = None

    # -------------------- pointer down --------------------
    def pointer_down_day(self, day: Optional[date]) -> None:
        if self.mode is not Mode.IDLE or day is None:
            return
        self.mode = Mode.SELECTING
        self.selection = DateSelection(day, day, True)

    def pointer_down_task(self, task_id: str, offset_x: float, bar_width: float) -> None:
        if self.mode is not Mode.IDLE or self.store.get(task_id) is None:
            return
        if offset_x < self.edge_margin:
            self.mode = Mode.RESIZING_START
        elif offset_x > bar_width - self.edge_margin:
            self.mode = Mode.RESIZING_END
        else:
            self.mode = Mode.DRAGGING
        self.task_id = task_id
        self.hover_day = None
        self._moved = False
        if self.subscribe is not None:
            self._release = self.subscribe()

    # -------------------- pointer motion --------------------
    def pointer_enter(self, day: Optional[date]) -> None:
        if self.mode is Mode.SELECTING and day is not None and self.selection.start_date is not None:
            if day != self.selection.end_date:
                self.selection = DateSelection(self.selection.start_date, day, True)

    def pointer_move(self, x: float, y: float) -> None:
        if self.mode is Mode.IDLE:
            return
        day = self.resolve(x, y)
        if self.mode is Mode.SELECTING:
            self.pointer_enter(day)
            return
        self._moved = True
        self.hover_day = day
        if day is None:
            return
        task = self.store.get(self.task_id)
        if task is None:
            return
        if self.mode is Mode.RESIZING_START and day <= task.end_date:
            self.store.set_date_range(task.id, day, task.end_date)
        elif self.mode is Mode.RESIZING_END and day >= task.start_date:
            self.store.set_date_range(task.id, task.start_date, day)

    # -------------------- pointer up --------------------
    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> Outcome:
        mode, task_id, moved = self.mode, self.task_id, self._moved
        outcome: Outcome = None
        try:
            if mode is Mode.SELECTING:
                rng = self.selection.normalized()
                if rng is not None:
                    outcome = CreateRequest(*rng)
            elif mode in (Mode.DRAGGING, Mode.RESIZING_START, Mode.RESIZING_END) and not moved:
                outcome = EditRequest(task_id)
            elif mode is Mode.DRAGGING:
                outcome = self._finish_drag(task_id, x, y)
        finally:
            self._reset()
        return outcome

    def _finish_drag(self, task_id: Optional[str], x, y) -> Optional[Task]:
        day = self.resolve(x, y) if x is not None and y is not None else None
        if day is None:
            log.debug("Drop outside the day grid ignored")
            return None
        task = self.store.get(task_id)
        if task is None:
            return None
        duration = (task.end_date - task.start_date).days
        return self.store.set_date_range(task.id, day, add_days(day, duration))

    def _reset(self) -> None:
        release, self._release = self._release, None
        self.mode = Mode.IDLE
        self.task_id = None
        self.hover_day = None
        self._moved = False
        self.selection = DateSelection()
        if release is not None:
            release()
