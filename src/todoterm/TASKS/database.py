# TASKS/database.py
import json
import logging
import os
from pathlib import Path
from typing import Iterable, List

from todoterm.TASKS.model import Task
from todoterm.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)


def _sort_key(task: Task):
    return (task.date, task.id if task.id is not None else 0)


class TaskFile:
    """
    Flat JSON file holding every task.

    The whole collection is read once and rewritten in full on every save,
    ordered by due date so the file diffs nicely.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Task]:
        """Read all tasks. A missing file is created empty."""
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write([])
            logger.info("Created empty task file at %s", self.path)
            return []

        try:
            with self.path.open("r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Error reading task file %s: %s", self.path, e)
            raise StorageError(f"Could not read task file {self.path}: {e}") from e

        if not isinstance(records, list):
            raise StorageError(f"Task file {self.path} must contain a JSON array")

        tasks = []
        for record in records:
            if not isinstance(record, dict):
                raise StorageError(f"Invalid task record in {self.path}: {record!r}")
            try:
                tasks.append(Task.from_dict(record))
            except ValidationError as e:
                raise StorageError(f"Invalid task record in {self.path}: {e}") from e

        tasks.sort(key=_sort_key)
        logger.debug("Loaded %d task(s) from %s", len(tasks), self.path)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        ordered = sorted(tasks, key=_sort_key)
        self._write([t.to_dict() for t in ordered])
        logger.debug("Saved %d task(s) to %s", len(ordered), self.path)

    def _write(self, records: list) -> None:
        tmp = self.path.with_suffix(".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(records, f, indent=4, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error("Error writing task file %s: %s", self.path, e)
            raise StorageError(f"Could not write task file {self.path}: {e}") from e
