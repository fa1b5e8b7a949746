# tests/test_store.py

from __future__ import annotations

import json
import string
from datetime import date

import pytest

from task_planner.models import Category
from task_planner.persistence import STORAGE_KEY, MemoryBackend
from task_planner.store import TaskStore, new_task_id


def test_create_normalizes_reversed_range(store: TaskStore) -> None:
    task = store.create("Plan sprint", Category.TODO, date(2024, 2, 9), date(2024, 2, 5))
    assert (task.start_date, task.end_date) == (date(2024, 2, 5), date(2024, 2, 9))
    assert task.start_date <= task.end_date


def test_create_appends_in_order_with_unique_ids(store: TaskStore) -> None:
    created = [store.create(f"t{i}", Category.REVIEW, date(2024, 2, 1), date(2024, 2, 1)) for i in range(50)]
    assert [t.name for t in store.tasks] == [f"t{i}" for i in range(50)]
    assert len({t.id for t in created}) == 50


def test_create_accepts_category_label(store: TaskStore) -> None:
    task = store.create("Label", "In Progress", date(2024, 2, 1), date(2024, 2, 2))
    assert task.category is Category.IN_PROGRESS


def test_new_task_id_shape() -> None:
    tid = new_task_id()
    assert tid[:13].isdigit()
    assert len(tid[-9:]) == 9
    assert set(tid[-9:]) <= set(string.digits + string.ascii_lowercase)


def test_mutations_replace_the_snapshot(store: TaskStore) -> None:
    before = store.tasks
    task = store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    after_create = store.tasks
    assert before == () and after_create is not before

    store.update(task.id, name="B")
    assert after_create[0].name == "A"
    assert store.tasks[0].name == "B"


def test_update_merges_fields(store: TaskStore) -> None:
    task = store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    updated = store.update(task.id, name="Renamed", category="Completed")
    assert updated is not None
    assert updated.name == "Renamed"
    assert updated.category is Category.COMPLETED
    assert (updated.start_date, updated.end_date) == (task.start_date, task.end_date)
    assert updated.id == task.id


def test_update_normalizes_reversed_dates(store: TaskStore) -> None:
    task = store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    updated = store.update(task.id, start_date=date(2024, 2, 10))
    assert (updated.start_date, updated.end_date) == (date(2024, 2, 3), date(2024, 2, 10))


def test_update_unknown_id_is_noop(store: TaskStore) -> None:
    store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    snapshot = store.tasks
    assert store.update("missing", name="x") is None
    assert store.tasks is snapshot


def test_update_rejects_unknown_fields(store: TaskStore) -> None:
    task = store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    with pytest.raises(ValueError):
        store.update(task.id, id="other")


def test_delete(store: TaskStore) -> None:
    a = store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    b = store.create("B", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    assert store.delete(a.id) is True
    assert [t.id for t in store.tasks] == [b.id]
    assert store.delete(a.id) is False
    assert len(store) == 1


def test_set_date_range(store: TaskStore) -> None:
    task = store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    moved = store.set_date_range(task.id, date(2024, 2, 11), date(2024, 2, 13))
    assert (moved.start_date, moved.end_date) == (date(2024, 2, 11), date(2024, 2, 13))
    assert store.get(task.id) == moved
    assert store.set_date_range("missing", date(2024, 2, 1), date(2024, 2, 1)) is None


def test_every_mutation_persists(store: TaskStore, backend: MemoryBackend) -> None:
    task = store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    records = json.loads(backend.values[STORAGE_KEY])
    assert records == [{
        "id": task.id, "name": "A", "category": "To Do",
        "startDate": "2024-02-01", "endDate": "2024-02-03",
    }]
    store.delete(task.id)
    assert json.loads(backend.values[STORAGE_KEY]) == []


def test_listeners_receive_snapshots(store: TaskStore) -> None:
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    assert seen == [store.tasks]
    unsubscribe()
    store.create("B", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    assert len(seen) == 1


def test_store_without_backend_keeps_working() -> None:
    store = TaskStore()
    store.create("A", Category.TODO, date(2024, 2, 1), date(2024, 2, 3))
    assert len(store) == 1
