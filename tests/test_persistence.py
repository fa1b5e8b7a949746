# tests/test_persistence.py

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pytest

from task_planner.models import Category
from task_planner.persistence import (
    STORAGE_KEY,
    JsonFileBackend,
    MemoryBackend,
    deserialize_tasks,
    load_tasks,
    save_tasks,
    serialize_tasks,
)
from task_planner.store import TaskStore


def _tuples(tasks):
    return [(t.id, t.name, t.category, t.start_date, t.end_date) for t in tasks]


def test_round_trip_through_store(backend: MemoryBackend) -> None:
    store = TaskStore(backend=backend)
    store.create("Design", Category.TODO, date(2024, 1, 30), date(2024, 2, 2))
    store.create("Build", Category.IN_PROGRESS, date(2024, 2, 5), date(2024, 2, 9))
    store.create("Ship", Category.COMPLETED, date(2024, 2, 29), date(2024, 2, 29))

    reloaded = TaskStore.load(backend)
    assert _tuples(reloaded.tasks) == _tuples(store.tasks)


def test_serialized_form_uses_labels_and_iso_dates() -> None:
    store = TaskStore()
    store.create("Review PR", Category.REVIEW, date(2024, 3, 1), date(2024, 3, 4))
    records = json.loads(serialize_tasks(store.tasks))
    assert records[0]["category"] == "Review"
    assert records[0]["startDate"] == "2024-03-01"
    assert records[0]["endDate"] == "2024-03-04"


def test_missing_key_loads_empty(backend: MemoryBackend) -> None:
    assert load_tasks(backend) == []


@pytest.mark.parametrize(
    "stored",
    [
        "{not json",
        json.dumps({"id": "1"}),
        json.dumps([{"id": "1", "name": "x", "category": "Someday",
                     "startDate": "2024-01-01", "endDate": "2024-01-02"}]),
        json.dumps([{"id": "1", "name": "x", "category": "To Do", "startDate": "yesterday",
                     "endDate": "2024-01-02"}]),
        json.dumps([{"name": "no id"}]),
        json.dumps(["just a string"]),
    ],
)
def test_corrupt_data_loads_empty(stored: str, caplog: pytest.LogCaptureFixture) -> None:
    backend = MemoryBackend({STORAGE_KEY: stored})
    with caplog.at_level(logging.WARNING, logger="task_planner.persistence"):
        assert load_tasks(backend) == []
    assert "Error loading tasks" in caplog.text


def test_loads_timestamp_dates_from_older_saves() -> None:
    stored = json.dumps([{
        "id": "1706590000000abcdefghi", "name": "Legacy", "category": "In Progress",
        "startDate": "2024-01-30T05:00:00.000Z", "endDate": "2024-02-02T05:00:00.000Z",
    }])
    [task] = deserialize_tasks(stored)
    assert (task.start_date, task.end_date) == (date(2024, 1, 30), date(2024, 2, 2))
    assert task.category is Category.IN_PROGRESS


class _BrokenBackend(MemoryBackend):
    def set(self, key: str, value: str) -> None:
        raise OSError("disk full")


def test_save_failure_keeps_memory_state(caplog: pytest.LogCaptureFixture) -> None:
    store = TaskStore(backend=_BrokenBackend())
    with caplog.at_level(logging.WARNING, logger="task_planner.persistence"):
        task = store.create("Still here", Category.TODO, date(2024, 2, 1), date(2024, 2, 1))
    assert store.get(task.id) == task
    assert "Error saving tasks" in caplog.text
    assert save_tasks(_BrokenBackend(), store.tasks) is False


def test_json_file_backend_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "tasks.json"
    backend = JsonFileBackend(path)
    assert backend.get(STORAGE_KEY) is None

    store = TaskStore(backend=backend)
    store.create("On disk", Category.REVIEW, date(2024, 2, 12), date(2024, 2, 14))
    assert path.exists()
    assert _tuples(TaskStore.load(JsonFileBackend(path)).tasks) == _tuples(store.tasks)
    assert not list(path.parent.glob(".tasks-*"))


def test_json_file_backend_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"other": "value"}), encoding="utf-8")
    JsonFileBackend(path).set(STORAGE_KEY, "[]")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"other": "value", STORAGE_KEY: "[]"}


def test_unreadable_file_loads_empty_and_is_replaced_on_save(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("garbage", encoding="utf-8")
    store = TaskStore.load(JsonFileBackend(path))
    assert store.tasks == ()

    store.create("Fresh", Category.TODO, date(2024, 2, 1), date(2024, 2, 2))
    assert [t.name for t in load_tasks(JsonFileBackend(path))] == ["Fresh"]
