# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, List

import pytest

from todoterm.CONFIG.settings import DateFormats, Settings
from todoterm.state import AppState
from todoterm.TASKS.database import TaskFile
from todoterm.TASKS.model import Task
from todoterm.TASKS.store import TaskStore


class FakeStorage:
    """
    In-memory stand-in for TaskFile.

    Counts saves so tests can check which store operations persist.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self.tasks: List[Task] = list(tasks)
        self.saves = 0

    def load(self) -> List[Task]:
        return list(self.tasks)

    def save(self, tasks: Iterable[Task]) -> None:
        self.tasks = list(tasks)
        self.saves += 1


@pytest.fixture()
def formats() -> DateFormats:
    return DateFormats()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(path=tmp_path / "settings.yaml")


@pytest.fixture()
def task_file(tmp_path: Path) -> TaskFile:
    return TaskFile(tmp_path / "tasks.json")


@pytest.fixture()
def store(task_file: TaskFile) -> TaskStore:
    return TaskStore(task_file)


@pytest.fixture()
def state(settings: Settings, tmp_path: Path) -> AppState:
    return AppState(settings=settings, tasks_file=tmp_path / "tasks.json")


@pytest.fixture()
def make_task():
    def _make(name: str, date: datetime, **kwargs) -> Task:
        return Task(name=name, date=date, **kwargs)

    return _make
