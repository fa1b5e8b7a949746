"""Logging for the desktop app.

stderr shows the planner's own messages at the chosen level and only
errors from Qt and other libraries. ``task-planner.log`` in the app's log
directory keeps everything down to DEBUG, which is where storage failures
and ignored pointer commands end up.
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Union

LOG_FILE_NAME = "task-planner.log"
_OWN_PREFIX = "task_planner"


class _ConsoleNoiseFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(_OWN_PREFIX):
            return True
        return record.levelno >= logging.ERROR


def _formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(
    *,
    log_dir: Union[str, Path],
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Replace the root handlers with the console and file pair; returns the log file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = _formatter()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn output goes to the same handlers
    logging.captureWarnings(True)
    return log_file
