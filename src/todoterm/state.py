# state.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from todoterm.CONFIG.settings import Settings, load_settings, settings_path, tasks_path
from todoterm.TASKS.database import TaskFile
from todoterm.TASKS.store import TaskStore


@dataclass
class AppState:
    """
    What every command and TUI page works against: one Settings object and
    one TaskStore. The store is opened on first use, so `config` works even
    when the task file is unreadable.
    """
    settings: Settings
    tasks_file: Path
    _store: Optional[TaskStore] = field(default=None, repr=False)

    @property
    def store(self) -> TaskStore:
        if self._store is None:
            self._store = TaskStore(TaskFile(self.tasks_file))
        return self._store


def create_initial_state() -> AppState:
    return AppState(settings=load_settings(settings_path()), tasks_file=tasks_path())
