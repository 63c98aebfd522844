# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from checklist_app.logging_setup import ConsoleThresholdFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("checklist_app.core.checklist", logging.INFO, True),
        ("checklist_app.tasks.task_poller", logging.INFO, False),
        ("checklist_app.tasks.task_poller", logging.WARNING, True),
        ("urllib3.connectionpool", logging.WARNING, False),
        ("nio.crypto", logging.ERROR, True),
        ("some.other.lib", logging.WARNING, False),
        ("checklist_appish", logging.INFO, False),
    ],
)
def test_console_threshold_filter(name: str, level: int, shown: bool) -> None:
    assert ConsoleThresholdFilter().filter(_record(name, level)) is shown


def test_setup_logging_writes_file_and_quiets_libraries(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    saved_level = root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("checklist_app.tests").debug("hello file")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / "logs" / "checklist.log"
        assert "hello file" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
