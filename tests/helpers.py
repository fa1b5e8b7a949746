# tests/helpers.py

from __future__ import annotations

from datetime import date

from task_planner.geometry import CalendarGeometry

# Feb 2024: leap month, the 1st is a Thursday (four leading blanks)
FEB_2024_OFFSET = 4


def cell_point(day: date, *, top: bool = False, offset: int = FEB_2024_OFFSET, geometry=None):
    """Pixel point inside the Feb 2024 cell of ``day`` (cell centre, or near its top edge)."""
    g = geometry or CalendarGeometry(width=700)
    row, col = divmod(offset + day.day - 1, 7)
    x = col * g.column_width + g.column_width / 2
    y = g.header_height + row * g.cell_height + (10 if top else g.cell_height / 2)
    return x, y
