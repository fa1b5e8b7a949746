"""Pixel geometry of the month grid: pointer -> day, lane -> bar rectangle.

Week rows are ``cell_height`` tall unless their lanes need more room;
``fitted`` grows each row to hold every bar laid out in it.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Sequence, Tuple

from .layout import lane_count
from .models import LaneAssignment

CELL_HEIGHT = 120
HEADER_HEIGHT = 40
BAR_TOP = 32       # below the day number
BAR_PITCH = 28     # lane to lane
BAR_INSET = 4
BAR_HEIGHT = 24
BAR_SIDE_INSET = 2

Rect = Tuple[float, float, float, float]


def row_height_for(lanes: int, cell_height: int = CELL_HEIGHT) -> int:
    """Height a week row needs to show ``lanes`` stacked bars."""
    return max(cell_height, BAR_TOP + lanes * BAR_PITCH + BAR_INSET)


@dataclass(frozen=True)
class CalendarGeometry:
    width: float = 7 * 140
    cell_height: int = CELL_HEIGHT
    header_height: int = HEADER_HEIGHT
    row_heights: Tuple[int, ...] = ()

    @property
    def column_width(self) -> float:
        return self.width / 7.0

    def fitted(self, week_layouts: Sequence[Sequence[LaneAssignment]]) -> "CalendarGeometry":
        heights = tuple(row_height_for(lane_count(row), self.cell_height) for row in week_layouts)
        return self if heights == self.row_heights else replace(self, row_heights=heights)

    def row_height(self, row: int) -> int:
        return self.row_heights[row] if 0 <= row < len(self.row_heights) else self.cell_height

    def row_top(self, row: int) -> float:
        return self.header_height + sum(self.row_height(r) for r in range(row))

    def row_at(self, y: float) -> Optional[int]:
        if y < self.header_height:
            return None
        top = self.header_height
        for row, h in enumerate(self.row_heights):
            if y < top + h:
                return row
            top += h
        return len(self.row_heights) + math.floor((y - top) / self.cell_height)

    def height_for(self, rows: int) -> int:
        return int(self.row_top(rows))

    def day_index(self, x: float, y: float) -> Optional[int]:
        if self.column_width <= 0:
            return None
        col = math.floor(x / self.column_width)
        row = self.row_at(y)
        if col < 0 or col > 6 or row is None:
            return None
        return row * 7 + col

    def day_at(self, x: float, y: float, slots: Sequence[Optional[date]]) -> Optional[date]:
        """Day under the point, or None off the grid and on blank slots."""
        idx = self.day_index(x, y)
        if idx is None or idx >= len(slots):
            return None
        return slots[idx]

    def cell_rect(self, index: int) -> Rect:
        row, col = divmod(index, 7)
        return (col * self.column_width, self.row_top(row), self.column_width, self.row_height(row))

    def bar_rect(self, assignment: LaneAssignment, row: int) -> Rect:
        cw = self.column_width
        left = assignment.start_column * cw + BAR_SIDE_INSET
        width = (assignment.end_column - assignment.start_column + 1) * cw - 2 * BAR_SIDE_INSET
        top = self.row_top(row) + BAR_TOP + assignment.lane * BAR_PITCH + BAR_INSET
        return (left, top, width, BAR_HEIGHT)

    def bar_at(self, x: float, y: float,
               week_layouts: Sequence[Sequence[LaneAssignment]]) -> Optional[Tuple[LaneAssignment, float, float]]:
        """Top-most bar under the point as (assignment, x offset in bar, bar width)."""
        row = self.row_at(y)
        if row is None or row >= len(week_layouts):
            return None
        for a in reversed(list(week_layouts[row])):
            left, top, w, h = self.bar_rect(a, row)
            if left <= x < left + w and top <= y < top + h:
                return a, x - left, w
        return None


def bar_rects(geometry: CalendarGeometry,
              week_layouts: Sequence[Sequence[LaneAssignment]]) -> List[Tuple[LaneAssignment, int, Rect]]:
    out: List[Tuple[LaneAssignment, int, Rect]] = []
    for row, assignments in enumerate(week_layouts):
        for a in assignments:
            out.append((a, row, geometry.bar_rect(a, row)))
    return out
