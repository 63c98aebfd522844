# src/checklist_app/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Minimum console level per logger prefix; longest matching prefix wins.
# The poller ticks every few seconds and logs every decision at DEBUG/INFO.
CONSOLE_THRESHOLDS: dict[str, int] = {
    "checklist_app": logging.DEBUG,
    "checklist_app.tasks.task_poller": logging.WARNING,
    "checklist_app.storage.pocketbase": logging.INFO,
    "requests": logging.ERROR,
    "urllib3": logging.ERROR,
    "nio": logging.ERROR,
    "py.warnings": logging.ERROR,
}

# Levels applied to the loggers themselves, so the file log is not flooded either.
LIBRARY_LEVELS: dict[str, int] = {
    "urllib3": logging.WARNING,
    "requests": logging.WARNING,
    "nio": logging.INFO,
    "nio.crypto": logging.ERROR,
}


class ConsoleThresholdFilter(logging.Filter):
    """Drop console records below the threshold of their logger prefix."""

    def __init__(self, thresholds: dict[str, int] | None = None, default: int = logging.ERROR) -> None:
        super().__init__()
        self.thresholds = dict(CONSOLE_THRESHOLDS if thresholds is None else thresholds)
        self.default = default

    def threshold_for(self, name: str) -> int:
        best, level = "", self.default
        for prefix, lvl in self.thresholds.items():
            if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > len(best):
                best, level = prefix, lvl
        return level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.threshold_for(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/checklist",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler (filtered per logger) plus a rotating checklist.log in
    log_dir. Replaces any handlers already on the root logger.

    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "checklist.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(ConsoleThresholdFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    logging.captureWarnings(True)
    return log_file
