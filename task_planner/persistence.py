"""Task list persistence under a single well-known key.

The stored value is a JSON list of ``{id, name, category, startDate,
endDate}`` records with ISO-8601 dates. Reading never raises: a missing
or unreadable value yields an empty list and a logged warning.
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .dates import normalize_range, parse_day
from .models import Category, Task

log = logging.getLogger(__name__)

STORAGE_KEY = "taskPlannerTasks"


class MemoryBackend:
    """Dict-backed key/value store."""
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileBackend:
    """Key/value pairs kept in one JSON object file, rewritten atomically on every set."""
    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            log.warning("Replacing unreadable store file %s", self.path)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".tasks-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


def task_to_record(task: Task) -> dict:
    return {
        "id": task.id,
        "name": task.name,
        "category": task.category.label,
        "startDate": task.start_date.isoformat(),
        "endDate": task.end_date.isoformat(),
    }


def task_from_record(raw: dict) -> Task:
    start, end = normalize_range(parse_day(raw["startDate"]), parse_day(raw["endDate"]))
    return Task(
        id=str(raw["id"]),
        name=str(raw.get("name", "")),
        category=Category.parse(raw.get("category")),
        start_date=start,
        end_date=end,
    )


def serialize_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_record(t) for t in tasks])


def deserialize_tasks(text: str) -> List[Task]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("stored task list is not a JSON array")
    return [task_from_record(raw) for raw in data]


def load_tasks(backend, key: str = STORAGE_KEY) -> List[Task]:
    try:
        stored = backend.get(key)
        if not stored:
            return []
        tasks = deserialize_tasks(stored)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        log.warning("Error loading tasks from %r: %s", key, e)
        return []
    log.debug("Loaded %d task(s) from %r", len(tasks), key)
    return tasks


def save_tasks(backend, tasks: Iterable[Task], key: str = STORAGE_KEY) -> bool:
    try:
        backend.set(key, serialize_tasks(tasks))
    except (OSError, TypeError, ValueError) as e:
        log.warning("Error saving tasks to %r: %s", key, e)
        return False
    return True
