# tests/conftest.py

from __future__ import annotations

from datetime import date

import pytest

from task_planner.geometry import CalendarGeometry
from task_planner.grid import month_slots
from task_planner.persistence import MemoryBackend
from task_planner.planner import Planner
from task_planner.store import TaskStore


@pytest.fixture()
def today() -> date:
    return date(2024, 2, 14)


@pytest.fixture()
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture()
def store(backend: MemoryBackend) -> TaskStore:
    return TaskStore(backend=backend)


@pytest.fixture()
def geometry() -> CalendarGeometry:
    # 100px columns keep the arithmetic readable
    return CalendarGeometry(width=700)


@pytest.fixture()
def feb_slots():
    return month_slots(2024, 1)


@pytest.fixture()
def planner(store: TaskStore, today: date, geometry: CalendarGeometry) -> Planner:
    return Planner(store, today=today, geometry=geometry)

