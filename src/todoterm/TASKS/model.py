# TASKS/model.py
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from todoterm.TASKS.dates import date_has_time, from_iso, get_today, to_iso
from todoterm.TASKS.repeat import Repeat, compute_next_occurrence
from todoterm.exceptions import ValidationError


@dataclass
class Task:
    name: str
    date: datetime = field(default_factory=get_today)
    repeats: Repeat = field(default_factory=Repeat.never)
    description: Optional[str] = None
    url: Optional[str] = None
    group: Optional[str] = None
    complete: bool = False
    id: Optional[int] = None  # assigned by the store on insertion

    def __post_init__(self):
        if self.group is not None:
            self.group = self.group.strip() or None

    def has_time(self) -> bool:
        return date_has_time(self.date)

    def mark_complete(self) -> Optional["Task"]:
        """
        Mark this task complete.

        Returns the next occurrence as a new, id-less, incomplete task when the
        repeat rule produces one. The store decides what to do with it.
        """
        self.complete = True
        next_date = compute_next_occurrence(self.date, self.repeats)
        if next_date is None:
            return None
        return replace(self, id=None, date=next_date, complete=False)

    def mark_incomplete(self) -> None:
        self.complete = False

    def toggle(self) -> Optional["Task"]:
        if self.complete:
            self.mark_incomplete()
            return None
        return self.mark_complete()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date": to_iso(self.date),
            "repeats": self.repeats.to_json(),
            "description": self.description,
            "url": self.url,
            "group": self.group,
            "complete": self.complete,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        complete = data.get("complete", False)
        if not isinstance(complete, bool):
            raise ValidationError(f"Invalid task record {data!r}: 'complete' must be true or false")
        try:
            raw_id = data.get("id")
            return cls(
                id=int(raw_id) if raw_id is not None else None,
                name=str(data["name"]),
                date=from_iso(str(data["date"])),
                repeats=Repeat.from_json(data.get("repeats", "Never")),
                description=data.get("description"),
                url=data.get("url"),
                group=data.get("group"),
                complete=complete,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid task record {data!r}: {e}") from e

    def __str__(self):
        completed = "[x]" if self.complete else "[ ]"
        return f"{completed} {self.name}\t\t{to_iso(self.date)}\t\t{self.repeats}"
