# TASKS/repeat.py
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from dateutil.relativedelta import relativedelta

from todoterm.TASKS.day_of_week import DayOfWeek
from todoterm.exceptions import ValidationError


class RepeatKind(Enum):
    NEVER = "Never"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
    DAYS_OF_WEEK = "DaysOfWeek"


_KEYWORD_KINDS = [
    RepeatKind.NEVER,
    RepeatKind.DAILY,
    RepeatKind.WEEKLY,
    RepeatKind.MONTHLY,
    RepeatKind.YEARLY,
]


@dataclass(frozen=True)
class Repeat:
    """
    Recurrence rule of a task.

    `days` is only used by DAYS_OF_WEEK and keeps the order the days were
    written in, so the rule always prints the same way it was entered.
    """
    kind: RepeatKind = RepeatKind.NEVER
    days: Tuple[DayOfWeek, ...] = ()

    @classmethod
    def never(cls) -> "Repeat":
        return cls(RepeatKind.NEVER)

    @classmethod
    def daily(cls) -> "Repeat":
        return cls(RepeatKind.DAILY)

    @classmethod
    def weekly(cls) -> "Repeat":
        return cls(RepeatKind.WEEKLY)

    @classmethod
    def monthly(cls) -> "Repeat":
        return cls(RepeatKind.MONTHLY)

    @classmethod
    def yearly(cls) -> "Repeat":
        return cls(RepeatKind.YEARLY)

    @classmethod
    def days_of_week(cls, days: Iterable[DayOfWeek]) -> "Repeat":
        unique = []
        for day in days:
            if day not in unique:
                unique.append(day)
        if not unique:
            return cls.never()
        return cls(RepeatKind.DAYS_OF_WEEK, tuple(unique))

    @classmethod
    def parse(cls, s: str) -> "Repeat":
        """
        Parse a repeat rule typed by the user.

        Accepts the keywords Never, Daily, Weekly, Monthly and Yearly in any
        case, otherwise a comma separated list of day abbreviations such as
        "Mon, Wed,fri". A single unknown token rejects the whole rule.
        """
        text = s.strip()
        for kind in _KEYWORD_KINDS:
            if text.lower() == kind.value.lower():
                return cls(kind)

        try:
            days = [DayOfWeek.from_str(token) for token in text.split(",")]
        except ValidationError as err:
            raise ValidationError(f"Invalid repeat format: '{s}'") from err
        return cls.days_of_week(days)

    def is_recurring(self) -> bool:
        return self.kind is not RepeatKind.NEVER

    def to_json(self) -> Any:
        if self.kind is RepeatKind.DAYS_OF_WEEK:
            return {RepeatKind.DAYS_OF_WEEK.value: [d.full_name() for d in self.days]}
        return self.kind.value

    @classmethod
    def from_json(cls, value: Any) -> "Repeat":
        if isinstance(value, str):
            for kind in _KEYWORD_KINDS:
                if value == kind.value:
                    return cls(kind)
        elif isinstance(value, dict) and list(value.keys()) == [RepeatKind.DAYS_OF_WEEK.value]:
            names = value[RepeatKind.DAYS_OF_WEEK.value]
            if isinstance(names, list):
                return cls.days_of_week(DayOfWeek.from_name(str(n)) for n in names)
        raise ValidationError(f"Invalid stored repeat value: {value!r}")

    def __str__(self) -> str:
        if self.kind is RepeatKind.DAYS_OF_WEEK:
            return ",".join(str(d) for d in self.days)
        return self.kind.value


def compute_next_occurrence(current_date: datetime, repeat: Repeat) -> Optional[datetime]:
    """Return the due date of the next occurrence, or None when the rule never repeats."""
    kind = repeat.kind
    if kind is RepeatKind.NEVER:
        return None
    if kind is RepeatKind.DAILY:
        return current_date + timedelta(days=1)
    if kind is RepeatKind.WEEKLY:
        return current_date + timedelta(weeks=1)
    if kind is RepeatKind.MONTHLY:
        # relativedelta clamps to the last day of shorter months
        return current_date + relativedelta(months=1)
    if kind is RepeatKind.YEARLY:
        return current_date + relativedelta(months=12)

    # Look strictly forward, at most one week.
    for offset in range(1, 8):
        candidate = current_date + timedelta(days=offset)
        if DayOfWeek.from_weekday(candidate.weekday()) in repeat.days:
            return candidate
    return None
