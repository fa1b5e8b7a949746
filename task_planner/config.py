from __future__ import annotations
import configparser
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from .geometry import CELL_HEIGHT, HEADER_HEIGHT
from .interaction import EDGE_MARGIN_PX
from .models import Category, Timeframe

log = logging.getLogger(__name__)


def app_dir() -> Path:
    override = os.environ.get("TASK_PLANNER_HOME", "").strip()
    return Path(override).expanduser() if override else Path.home() / ".task-planner"


def pref_path() -> Path: return app_dir() / "pref.ini"
def data_path() -> Path: return app_dir() / "tasks.json"
def log_dir() -> Path: return app_dir() / "logs"


_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

DEFAULT_CATEGORY_COLORS: Dict[Category, str] = {
    Category.TODO: "#3B82F6",
    Category.IN_PROGRESS: "#F97316",
    Category.REVIEW: "#A855F7",
    Category.COMPLETED: "#22C55E",
}


def _color_key(cat: Category) -> str:
    return "category_" + cat.name.lower()


@dataclass
class Prefs:
    # Colors
    category_colors: Dict[Category, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_COLORS))
    grid_line: str = "#E5E7EB"
    blank_cell: str = "#F9FAFB"
    today_fill: str = "#DBEAFE"
    selection_fill: str = "#BFDBFE"
    bar_text: str = "#FFFFFF"
    # UI options
    cell_height: int = CELL_HEIGHT
    header_height: int = HEADER_HEIGHT
    edge_margin: int = EDGE_MARGIN_PX
    default_timeframe: Timeframe = Timeframe.ALL
    log_level: str = "INFO"

    def color_for(self, cat: Category) -> str:
        return self.category_colors.get(cat, DEFAULT_CATEGORY_COLORS[cat])

    def as_color_dict(self) -> Dict[str, str]:
        out = {_color_key(cat): self.color_for(cat) for cat in Category}
        out.update({
            "grid_line": self.grid_line,
            "blank_cell": self.blank_cell,
            "today_fill": self.today_fill,
            "selection_fill": self.selection_fill,
            "bar_text": self.bar_text,
        })
        return out

    def as_ui_dict(self) -> Dict[str, str]:
        return {
            "cell_height": str(int(self.cell_height)),
            "header_height": str(int(self.header_height)),
            "edge_margin": str(int(self.edge_margin)),
            "default_timeframe": self.default_timeframe.value,
            "log_level": self.log_level,
        }

    @classmethod
    def from_config(cls, path: Path) -> "Prefs":
        cfg = configparser.ConfigParser()
        if not path.exists():
            p = cls()
            try:
                p.save(path)
            except OSError as e:
                log.warning("Could not write default preferences to %s: %s", path, e)
            return p
        try:
            cfg.read(path, encoding="utf-8")
        except configparser.Error as e:
            log.warning("Ignoring unreadable preferences %s: %s", path, e)
            return cls()
        sec = cfg["colors"] if "colors" in cfg else {}
        ui  = cfg["ui"]     if "ui"     in cfg else {}

        def get_color(name: str, default_hex: str) -> str:
            raw = sec.get(name, default_hex).strip()
            return raw if _HEX_RE.match(raw) else default_hex

        def get_int(key: str, default: int, lo: int, hi: int) -> int:
            try:
                value = int(ui.get(key, str(default)))
            except ValueError:
                return default
            return max(lo, min(hi, value))

        try:
            timeframe = Timeframe.parse(ui.get("default_timeframe", "all"))
        except ValueError:
            timeframe = Timeframe.ALL
        level = ui.get("log_level", "INFO").strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            level = "INFO"

        return cls(
            category_colors={cat: get_color(_color_key(cat), DEFAULT_CATEGORY_COLORS[cat]) for cat in Category},
            grid_line=get_color("grid_line", "#E5E7EB"),
            blank_cell=get_color("blank_cell", "#F9FAFB"),
            today_fill=get_color("today_fill", "#DBEAFE"),
            selection_fill=get_color("selection_fill", "#BFDBFE"),
            bar_text=get_color("bar_text", "#FFFFFF"),
            cell_height=get_int("cell_height", CELL_HEIGHT, 60, 400),
            header_height=get_int("header_height", HEADER_HEIGHT, 0, 200),
            edge_margin=get_int("edge_margin", EDGE_MARGIN_PX, 1, 50),
            default_timeframe=timeframe,
            log_level=level,
        )

    def save(self, path: Path):
        cfg = configparser.ConfigParser()
        cfg["colors"] = self.as_color_dict()
        cfg["ui"] = self.as_ui_dict()
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            cfg.write(f)
