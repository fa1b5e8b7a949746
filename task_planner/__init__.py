"""Month-grid task planner: layout engine, pointer interaction and a PySide6 shell."""

from .models import Category, DateSelection, Filters, LaneAssignment, Task, Timeframe
from .store import TaskStore
from .planner import Planner, PlannerView

__all__ = [
    "Category", "DateSelection", "Filters", "LaneAssignment", "Task", "Timeframe",
    "TaskStore", "Planner", "PlannerView",
]

__version__ = "1.0.0"
