# TASKS/store.py
import logging
from typing import Dict, List, Optional

from todoterm.TASKS.model import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    The in-memory collection of every task, keyed by id.

    `storage` is anything with `load() -> list[Task]` and `save(tasks)`; the
    CLI and the TUI pass a TaskFile. Every mutating call saves the whole
    collection before returning. Ids come from a counter that only grows, so
    an id is never handed out twice in the life of the task file.
    """

    def __init__(self, storage):
        self._storage = storage
        self._tasks: Dict[int, Task] = {}

        loaded = storage.load()
        self.current_id = max([0, *(t.id for t in loaded if t.id is not None)])

        repaired = False
        for task in loaded:
            if task.id is None or task.id < 1 or task.id in self._tasks:
                logger.warning("Task '%s' had a missing, non-positive or duplicate id, assigning a new one", task.name)
                task.id = self._next_id()
                repaired = True
            self._tasks[task.id] = task

        if repaired:
            self.save()
        logger.info("TaskStore ready total=%d current_id=%d", len(self._tasks), self.current_id)

    def _next_id(self) -> int:
        self.current_id += 1
        return self.current_id

    def save(self) -> None:
        self._storage.save(self._tasks.values())

    # ---- queries ----

    def tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def get(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: int) -> bool:
        return task_id in self._tasks

    # ---- mutations ----

    def add(self, task: Task) -> int:
        task.id = self._next_id()
        self._tasks[task.id] = task
        self.save()
        logger.info("Task added id=%s name=%r date=%s repeats=%s", task.id, task.name, task.date, task.repeats)
        return task.id

    def update(self, task: Task) -> Optional[int]:
        """Replace the stored task that has the same id (used by the edit form)."""
        if task.id is None or task.id not in self._tasks:
            return None
        self._tasks[task.id] = task
        self.save()
        logger.info("Task updated id=%s", task.id)
        return task.id

    def delete(self, task_id: int) -> Optional[int]:
        if task_id not in self._tasks:
            return None
        del self._tasks[task_id]
        self.save()
        logger.info("Task deleted id=%s", task_id)
        return task_id

    def set_complete(self, task_id: int, complete: bool) -> Optional[int]:
        """
        Mark a task complete or incomplete.

        Completing a recurring task keeps the original (now complete) and adds
        its successor under a fresh id. The id returned is the task that is now
        current: the successor if one was created, otherwise `task_id`.
        """
        task = self._tasks.get(task_id)
        if task is None:
            return None

        current_id = task_id
        if complete:
            successor = task.mark_complete()
            if successor is not None:
                current_id = self.add(successor)
            logger.info("Task completed id=%s successor=%s", task_id, current_id if successor else None)
        else:
            task.mark_incomplete()
            logger.info("Task marked incomplete id=%s", task_id)

        self.save()
        return current_id

    def toggle_complete(self, task_id: int) -> Optional[int]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        return self.set_complete(task_id, not task.complete)
