# TASKS/task_form.py
from dataclasses import dataclass
from typing import Optional

from todoterm.CONFIG.settings import DateFormats
from todoterm.TASKS.dates import date_to_input_str, parse_date
from todoterm.TASKS.model import Task
from todoterm.TASKS.repeat import Repeat
from todoterm.exceptions import ValidationError


@dataclass
class TaskForm:
    """Raw text typed into the task form (TUI) or passed as CLI options."""
    name: str = ""
    date: str = ""
    repeats: str = ""
    group: str = ""
    description: str = ""
    url: str = ""
    id: Optional[int] = None

    @classmethod
    def from_task(cls, task: Task, formats: DateFormats) -> "TaskForm":
        return cls(
            id=task.id,
            name=task.name,
            date=date_to_input_str(task.date, formats),
            repeats=str(task.repeats),
            group=task.group or "",
            description=task.description or "",
            url=task.url or "",
        )

    def submit(self, formats: DateFormats) -> Task:
        """Validate the fields and build a Task. Nothing is stored here."""
        name = self.name.strip()
        if not name:
            raise ValidationError("Task name cannot be empty")

        repeats = Repeat.parse(self.repeats) if self.repeats.strip() else Repeat.never()
        date = parse_date(self.date, formats)

        return Task(
            id=self.id,
            name=name,
            date=date,
            repeats=repeats,
            group=self.group.strip() or None,
            description=self.description.strip() or None,
            url=self.url.strip() or None,
        )
