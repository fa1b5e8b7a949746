# Task Planner (PySide6): month grid with drag-to-create, drag-to-move and
# edge resizing of day-range tasks, plus a filter dock.

from __future__ import annotations
from datetime import date
from typing import Callable, Dict, Optional
import logging
import sys

from PySide6.QtCore import Qt, QRectF, QTimer
from PySide6.QtGui import QPainter, QPen, QBrush, QColor, QFont, QFontMetrics, QAction, QShortcut, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QScrollArea, QDockWidget,
    QToolBar, QComboBox, QLabel, QDialog, QDialogButtonBox, QGridLayout, QPushButton,
    QMessageBox, QCheckBox, QLineEdit, QGroupBox, QRadioButton, QButtonGroup, QToolButton
)

from .config import Prefs, data_path, log_dir, pref_path
from .geometry import CalendarGeometry, bar_rects
from .grid import WEEKDAY_NAMES
from .interaction import Mode
from .logging_setup import setup_logging
from .models import Category, Task, Timeframe
from .persistence import JsonFileBackend
from .planner import Planner, PlannerView
from .store import TaskStore

log = logging.getLogger(__name__)


def hex_to_qcolor(s: str, fallback: str = "#000000") -> QColor:
    c = QColor(s)
    if not c.isValid():
        c = QColor(fallback)
    return c


class TaskDialog(QDialog):
    """Create or edit a task: name and category. Edit mode adds a Delete button."""
    def __init__(self, title: str, start: date, end: date, name: str = "",
                 category: Category = Category.TODO, allow_delete: bool = False, parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setModal(True)
        self.deleted = False

        v = QVBoxLayout(self)
        days = (end - start).days + 1
        span = start.strftime("%b %d, %Y") if start == end else f"{start.strftime('%b %d, %Y')} to {end.strftime('%b %d, %Y')}"
        v.addWidget(QLabel(f"<b>{span}</b>  ({days} day{'s' if days != 1 else ''})"))

        grid = QGridLayout()
        grid.addWidget(QLabel("Task Name:"), 0, 0)
        self.name_edit = QLineEdit(name)
        self.name_edit.setPlaceholderText("Enter task name...")
        grid.addWidget(self.name_edit, 0, 1)
        grid.addWidget(QLabel("Category:"), 1, 0)
        self.category_combo = QComboBox()
        for cat in Category:
            self.category_combo.addItem(cat.label, cat)
        self.category_combo.setCurrentIndex(list(Category).index(category))
        grid.addWidget(self.category_combo, 1, 1)
        v.addLayout(grid)

        box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        self.ok_btn = box.button(QDialogButtonBox.StandardButton.Ok)
        self.ok_btn.setText("Save" if allow_delete else "Create Task")
        if allow_delete:
            del_btn = box.addButton("Delete", QDialogButtonBox.ButtonRole.DestructiveRole)
            del_btn.clicked.connect(self._delete)
        box.accepted.connect(self.accept); box.rejected.connect(self.reject)
        v.addWidget(box)

        self.name_edit.textChanged.connect(self._refresh_ok)
        self._refresh_ok()
        self.name_edit.setFocus()

    def _refresh_ok(self):
        self.ok_btn.setEnabled(bool(self.name_edit.text().strip()))

    def _delete(self):
        self.deleted = True
        self.accept()

    def result_payload(self) -> dict:
        return {
            "name": self.name_edit.text().strip(),
            "category": self.category_combo.currentData(),
        }


class FilterPanel(QWidget):
    """Search box, category checkboxes with counts, timeframe radios."""
    def __init__(self, prefs: Prefs, parent=None):
        super().__init__(parent)
        self.owner = None
        self.prefs = prefs
        v = QVBoxLayout(self); v.setContentsMargins(8, 8, 8, 8)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search tasks...")
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(self._on_search)
        v.addWidget(self.search_edit)

        cat_box = QGroupBox("Categories")
        cgrid = QGridLayout(cat_box)
        self.checks: Dict[Category, QCheckBox] = {}
        self.count_labels: Dict[Category, QLabel] = {}
        for row, cat in enumerate(Category):
            swatch = QLabel(); swatch.setFixedSize(12, 12)
            swatch.setStyleSheet(f"border-radius:6px; background:{prefs.color_for(cat)};")
            cgrid.addWidget(swatch, row, 0)
            cb = QCheckBox(cat.label); cb.setChecked(True)
            cb.toggled.connect(lambda checked, c=cat: self._on_category(c, checked))
            self.checks[cat] = cb
            cgrid.addWidget(cb, row, 1)
            count = QLabel("0"); count.setAlignment(Qt.AlignmentFlag.AlignRight)
            self.count_labels[cat] = count
            cgrid.addWidget(count, row, 2)
        v.addWidget(cat_box)

        time_box = QGroupBox("Time Range")
        tv = QVBoxLayout(time_box)
        self.timeframe_group = QButtonGroup(self)
        self.radios: Dict[Timeframe, QRadioButton] = {}
        for tf in (Timeframe.ALL, Timeframe.ONE_WEEK, Timeframe.TWO_WEEKS, Timeframe.THREE_WEEKS):
            rb = QRadioButton(tf.label)
            rb.toggled.connect(lambda checked, t=tf: checked and self._on_timeframe(t))
            self.timeframe_group.addButton(rb)
            self.radios[tf] = rb
            tv.addWidget(rb)
        self.radios[prefs.default_timeframe].setChecked(True)
        v.addWidget(time_box)
        v.addStretch(1)

    def _on_search(self, text: str):
        if self.owner: self.owner.apply_view(self.owner.planner.set_filters(search_term=text))

    def _on_category(self, cat: Category, checked: bool):
        if self.owner: self.owner.apply_view(self.owner.planner.toggle_category(cat, checked))

    def _on_timeframe(self, tf: Timeframe):
        if self.owner: self.owner.apply_view(self.owner.planner.set_filters(timeframe=tf))

    def set_counts(self, counts: Dict[Category, int]):
        for cat, label in self.count_labels.items():
            label.setText(str(counts.get(cat, 0)))


class MonthView(QWidget):
    """Paints the month grid and task bars; feeds pointer events to the planner."""
    def __init__(self, planner: Planner, prefs: Prefs, parent=None):
        super().__init__(parent)
        self.owner = None
        self.planner = planner
        self.prefs = prefs
        self.view: PlannerView = planner.view()
        self.setMinimumWidth(7 * 90); self.setMouseTracking(True)
        self._update_height()

    @property
    def geometry_model(self) -> CalendarGeometry:
        return self.planner.geometry

    def track_pointer(self) -> Callable[[], None]:
        # pointer stays with this widget until the drag/resize ends
        self.grabMouse()
        def release():
            self.releaseMouse()
            self.unsetCursor()
        return release

    def set_view(self, view: PlannerView):
        self.view = view
        self._update_height()
        self.update()

    def _update_height(self):
        self.setMinimumHeight(self.geometry_model.height_for(len(self.view.weeks)) + 1)

    def resizeEvent(self, e):
        super().resizeEvent(e)
        self.planner.set_viewport_width(self.width())

    # -------------------- painting --------------------
    def paintEvent(self, event):
        p = QPainter(self); p.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        g = self.geometry_model
        cw = g.column_width
        p.fillRect(self.rect(), QColor("#FFFFFF"))

        # weekday header
        p.setFont(QFont("Segoe UI", 9, QFont.Weight.DemiBold))
        p.setPen(QPen(QColor("#4B5563")))
        for col, name in enumerate(WEEKDAY_NAMES):
            r = QRectF(col * cw, 0, cw, g.header_height)
            p.drawText(r, Qt.AlignmentFlag.AlignCenter, name[:3])

        grid_pen = QPen(hex_to_qcolor(self.prefs.grid_line, "#E5E7EB"))
        day_font = QFont("Segoe UI", 9)
        for idx, day in enumerate(self.view.slots):
            x, y, w, h = g.cell_rect(idx)
            cell = QRectF(x, y, w, h)
            if day is None:
                p.fillRect(cell, hex_to_qcolor(self.prefs.blank_cell, "#F9FAFB"))
            elif self.view.in_selection(day) or self.view.in_drop_target(day):
                p.fillRect(cell, hex_to_qcolor(self.prefs.selection_fill, "#BFDBFE"))
            elif self.view.is_today(day):
                p.fillRect(cell, hex_to_qcolor(self.prefs.today_fill, "#DBEAFE"))
            p.setPen(grid_pen); p.setBrush(Qt.BrushStyle.NoBrush); p.drawRect(cell)
            if day is not None:
                p.setFont(day_font)
                p.setPen(QPen(QColor("#1D4ED8") if self.view.is_today(day) else QColor("#374151")))
                p.drawText(cell.adjusted(8, 6, -8, -6), Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop, str(day.day))

        bar_font = QFont("Segoe UI", 8, QFont.Weight.Medium)
        fm = QFontMetrics(bar_font)
        p.setFont(bar_font)
        for assignment, _row, (x, y, w, h) in bar_rects(g, self.view.week_layouts):
            self._paint_bar(p, fm, assignment.task, QRectF(x, y, w, h))

    def _paint_bar(self, p: QPainter, fm: QFontMetrics, task: Task, rect: QRectF):
        fill = hex_to_qcolor(self.prefs.color_for(task.category), "#3B82F6")
        if self.view.active_task_id == task.id and self.view.mode is Mode.DRAGGING:
            fill.setAlpha(120)
        p.setPen(QPen(fill.darker(130), 1)); p.setBrush(QBrush(fill))
        p.drawRoundedRect(rect, 6, 6)
        p.setPen(QPen(hex_to_qcolor(self.prefs.bar_text, "#FFFFFF")))
        text_rect = rect.adjusted(8, 0, -8, 0)
        days = f"{task.span_days}d"
        if rect.width() > 7 * self.geometry_model.column_width * 0.2:
            p.drawText(text_rect, Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter, days)
            text_rect.adjust(0, 0, -(fm.horizontalAdvance(days) + 6), 0)
        name = fm.elidedText(task.name, Qt.TextElideMode.ElideRight, int(max(0, text_rect.width())))
        p.drawText(text_rect, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter, name)

    # -------------------- pointer --------------------
    def _hover_update_cursor(self, x: float, y: float):
        hit = self.geometry_model.bar_at(x, y, self.view.week_layouts)
        if hit is None:
            self.unsetCursor(); return
        _a, offset_x, width = hit
        margin = self.planner.machine.edge_margin
        if offset_x < margin or offset_x > width - margin:
            self.setCursor(Qt.CursorShape.SizeHorCursor)
        else:
            self.setCursor(Qt.CursorShape.OpenHandCursor)

    def mousePressEvent(self, e):
        if e.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(e)
        pos = e.position()
        view = self.planner.pointer_down(pos.x(), pos.y())
        if view.mode is Mode.DRAGGING:
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        elif view.mode in (Mode.RESIZING_START, Mode.RESIZING_END):
            self.setCursor(Qt.CursorShape.SizeHorCursor)
        if self.owner: self.owner.apply_view(view)
        e.accept()

    def mouseMoveEvent(self, e):
        pos = e.position()
        if self.planner.machine.mode is Mode.IDLE:
            self._hover_update_cursor(pos.x(), pos.y())
            return super().mouseMoveEvent(e)
        view = self.planner.pointer_move(pos.x(), pos.y())
        if self.owner: self.owner.apply_view(view)
        e.accept()

    def mouseReleaseEvent(self, e):
        if e.button() != Qt.MouseButton.LeftButton:
            return super().mouseReleaseEvent(e)
        pos = e.position()
        was_dragging = self.planner.machine.mode is Mode.DRAGGING
        view = self.planner.pointer_up(pos.x(), pos.y())
        if was_dragging and view.editing_task is None and self.planner.day_at(pos.x(), pos.y()) is None:
            if self.owner: self.owner.flash_status("Dropped outside the month, task unchanged", warn=True)
        if self.owner: self.owner.apply_view(view)
        e.accept()


class MainWindow(QMainWindow):
    def __init__(self, prefs: Optional[Prefs] = None):
        super().__init__()
        self.setWindowTitle("Task Planner"); self.resize(1240, 860)
        self.prefs = prefs if prefs is not None else Prefs.from_config(pref_path())
        self.store = TaskStore.load(JsonFileBackend(data_path()))
        self.planner = Planner(self.store, prefs=self.prefs)
        self._dialog_pending = False

        # Menus
        menu = self.menuBar(); task_menu = menu.addMenu("Tasks")
        today_act = QAction("Go to Today", self); today_act.triggered.connect(self.go_to_today)
        task_menu.addAction(today_act)
        quit_act = QAction("Quit", self); quit_act.triggered.connect(self.close)
        task_menu.addAction(quit_act)

        # Toolbar
        tb = QToolBar("Navigation", self); tb.setMovable(False); self.addToolBar(tb)
        self.prev_btn = QToolButton(); self.prev_btn.setText("◀"); self.prev_btn.setToolTip("Previous month")
        self.prev_btn.clicked.connect(lambda: self.apply_view(self.planner.navigate_month("prev")))
        tb.addWidget(self.prev_btn)
        self.month_label = QLabel(); self.month_label.setMinimumWidth(180)
        self.month_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        tb.addWidget(self.month_label)
        self.next_btn = QToolButton(); self.next_btn.setText("▶"); self.next_btn.setToolTip("Next month")
        self.next_btn.clicked.connect(lambda: self.apply_view(self.planner.navigate_month("next")))
        tb.addWidget(self.next_btn)
        tb.addSeparator()
        self.today_btn = QPushButton("Today"); self.today_btn.clicked.connect(self.go_to_today)
        tb.addWidget(self.today_btn)
        tb.addSeparator(); self.count_label = QLabel(); tb.addWidget(self.count_label)

        # Month view + scroll
        self.month_view = MonthView(self.planner, self.prefs); self.month_view.owner = self
        self.planner.machine.subscribe = self.month_view.track_pointer
        scroll = QScrollArea(); scroll.setWidget(self.month_view); scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setCentralWidget(scroll)

        # Filter dock (left)
        self.filter_dock = QDockWidget("Filters", self)
        self.filter_dock.setAllowedAreas(Qt.DockWidgetArea.LeftDockWidgetArea | Qt.DockWidgetArea.RightDockWidgetArea)
        self.filter_panel = FilterPanel(self.prefs); self.filter_panel.owner = self
        self.filter_panel.setFixedWidth(240)
        self.filter_dock.setWidget(self.filter_panel)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, self.filter_dock)

        self._init_shortcuts()
        self.statusBar().showMessage("Drag across days to create a task", 3000)
        self.apply_view(self.planner.view())

    def _init_shortcuts(self):
        self.prev_shortcut = QShortcut(QKeySequence("Ctrl+Left"), self)
        self.prev_shortcut.activated.connect(lambda: self.apply_view(self.planner.navigate_month("prev")))
        self.next_shortcut = QShortcut(QKeySequence("Ctrl+Right"), self)
        self.next_shortcut.activated.connect(lambda: self.apply_view(self.planner.navigate_month("next")))

    def go_to_today(self):
        self.apply_view(self.planner.go_to_today())

    # -------------------- rendering --------------------
    def apply_view(self, view: PlannerView):
        self.month_label.setText(f"<b>{view.title}</b>")
        n = view.task_count
        self.count_label.setText(f"  {n} task{'s' if n != 1 else ''}")
        self.filter_panel.set_counts(view.category_counts)
        self.month_view.set_view(view)
        if (view.pending_range or view.editing_task) and not self._dialog_pending:
            # leave the mouse handler before opening a modal dialog
            self._dialog_pending = True
            QTimer.singleShot(0, self._open_pending_dialog)

    def _open_pending_dialog(self):
        self._dialog_pending = False
        view = self.planner.view()
        if view.pending_range is not None:
            self.open_create_dialog(*view.pending_range)
        elif view.editing_task is not None:
            self.open_edit_dialog(view.editing_task)

    def open_create_dialog(self, start: date, end: date):
        dlg = TaskDialog("Create New Task", start, end, parent=self)
        if dlg.exec():
            payload = dlg.result_payload()
            self.apply_view(self.planner.create_task(payload["name"], payload["category"]))
            self.flash_status("Task created")
        else:
            self.apply_view(self.planner.cancel_create())

    def open_edit_dialog(self, task: Task):
        dlg = TaskDialog("Edit Task", task.start_date, task.end_date, name=task.name,
                         category=task.category, allow_delete=True, parent=self)
        if not dlg.exec():
            self.apply_view(self.planner.close_task())
            return
        if dlg.deleted:
            answer = QMessageBox.question(self, "Delete Task", f"Delete “{task.name}”?")
            if answer == QMessageBox.StandardButton.Yes:
                self.apply_view(self.planner.delete_task(task.id))
                self.flash_status("Task deleted")
            else:
                self.apply_view(self.planner.close_task())
            return
        payload = dlg.result_payload()
        self.apply_view(self.planner.edit_task(payload["name"], payload["category"]))
        self.flash_status("Task updated")

    def flash_status(self, msg: str, warn: bool = False):
        if warn: self.statusBar().setStyleSheet("color:#b00020;")
        else: self.statusBar().setStyleSheet("")
        self.statusBar().showMessage(msg, 2500)


def main():
    prefs = Prefs.from_config(pref_path())
    setup_logging(log_dir=log_dir(), console_level=getattr(logging, prefs.log_level, logging.INFO))
    log.info("Task data: %s", data_path())
    app = QApplication(sys.argv)
    w = MainWindow(prefs); w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
