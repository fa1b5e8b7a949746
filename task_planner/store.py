from __future__ import annotations
import logging
import string
import time
import uuid
from dataclasses import replace
from datetime import date
from typing import Callable, List, Optional, Tuple

from .dates import normalize_range
from .models import Category, Task
from .persistence import STORAGE_KEY, load_tasks, save_tasks

log = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
_PATCHABLE = ("name", "category", "start_date", "end_date")

Listener = Callable[[Tuple[Task, ...]], None]


def new_task_id() -> str:
    """Epoch milliseconds followed by nine random base36 characters."""
    n = uuid.uuid4().int
    suffix = ""
    for _ in range(9):
        n, r = divmod(n, 36)
        suffix += _BASE36[r]
    return f"{int(time.time() * 1000)}{suffix}"


class TaskStore:
    """Ordered in-memory task collection.

    ``tasks`` is a tuple snapshot that is replaced, never mutated, so
    listeners can compare snapshots by identity. Each mutation persists the
    whole list through ``backend`` when one is attached.
    """
    def __init__(self, tasks=(), backend=None, key: str = STORAGE_KEY):
        self._tasks: Tuple[Task, ...] = tuple(tasks)
        self.backend = backend
        self.key = key
        self._listeners: List[Listener] = []

    @classmethod
    def load(cls, backend, key: str = STORAGE_KEY) -> "TaskStore":
        return cls(load_tasks(backend, key), backend=backend, key=key)

    # queries
    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    def get(self, task_id: str) -> Optional[Task]:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def __len__(self) -> int: return len(self._tasks)
    def __iter__(self): return iter(self._tasks)

    # listeners
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _commit(self, tasks: Tuple[Task, ...]):
        self._tasks = tasks
        if self.backend is not None:
            save_tasks(self.backend, tasks, self.key)
        for listener in list(self._listeners):
            listener(tasks)

    # mutations
    def create(self, name: str, category, start_date: date, end_date: date) -> Task:
        start, end = normalize_range(start_date, end_date)
        task = Task(id=new_task_id(), name=name, category=Category.parse(category),
                    start_date=start, end_date=end)
        self._commit(self._tasks + (task,))
        log.debug("Created task %s (%s .. %s)", task.id, start, end)
        return task

    def update(self, task_id: str, **patch) -> Optional[Task]:
        unknown = set(patch) - set(_PATCHABLE)
        if unknown:
            raise ValueError(f"Cannot patch task field(s): {', '.join(sorted(unknown))}")
        current = self.get(task_id)
        if current is None:
            log.debug("Update ignored, no task %s", task_id)
            return None
        if "category" in patch:
            patch["category"] = Category.parse(patch["category"])
        updated = replace(current, **patch)
        if updated.start_date > updated.end_date:
            start, end = normalize_range(updated.start_date, updated.end_date)
            updated = replace(updated, start_date=start, end_date=end)
        self._commit(tuple(updated if t.id == task_id else t for t in self._tasks))
        return updated

    def delete(self, task_id: str) -> bool:
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            log.debug("Delete ignored, no task %s", task_id)
            return False
        self._commit(remaining)
        return True

    def set_date_range(self, task_id: str, start_date: date, end_date: date) -> Optional[Task]:
        current = self.get(task_id)
        if current is None:
            return None
        if current.start_date == start_date and current.end_date == end_date:
            return current
        updated = replace(current, start_date=start_date, end_date=end_date)
        self._commit(tuple(updated if t.id == task_id else t for t in self._tasks))
        return updated
