# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todoterm.logging_setup import setup_logging


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    saved = list(root.handlers)
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved:
        root.addHandler(h)


def _file_handlers(root: logging.Logger):
    return [h for h in root.handlers if isinstance(h, logging.FileHandler)]


def test_reconfiguring_closes_previous_handlers(tmp_path: Path, root_logger: logging.Logger) -> None:
    setup_logging(tmp_path / "first.log")
    [first] = _file_handlers(root_logger)
    assert first.stream is not None

    setup_logging(tmp_path / "second.log")
    [second] = _file_handlers(root_logger)
    assert second is not first
    assert first.stream is None


def test_file_gets_debug_and_console_level_from_string(tmp_path: Path, root_logger: logging.Logger) -> None:
    log_file = tmp_path / "todoterm.log"
    setup_logging(log_file, console_level="error")

    console = [h for h in root_logger.handlers if not isinstance(h, logging.FileHandler)]
    assert [h.level for h in console] == [logging.ERROR]

    logging.getLogger("todoterm.test").debug("written to file")
    for h in root_logger.handlers:
        h.flush()
    assert "written to file" in log_file.read_text()
