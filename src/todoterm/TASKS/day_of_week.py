# TASKS/day_of_week.py
from enum import Enum

from todoterm.exceptions import ValidationError


class DayOfWeek(Enum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    def to_int(self) -> int:
        return self.value

    def to_weekday(self) -> int:
        """Index used by datetime.weekday() (Monday is 0)."""
        return self.value - 1

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        return cls(weekday + 1)

    @classmethod
    def from_str(cls, s: str) -> "DayOfWeek":
        """Parse a three letter abbreviation like 'Mon' or 'fri'."""
        key = s.strip().lower()
        for day in cls:
            if day.abbrev().lower() == key:
                return day
        raise ValidationError(f"Invalid day of the week: '{s}'")

    @classmethod
    def from_name(cls, name: str) -> "DayOfWeek":
        """Parse the full name stored in the task file ('Monday')."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValidationError(f"Invalid day of the week: '{name}'") from None

    def abbrev(self) -> str:
        return self.name[:3].capitalize()

    def full_name(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return self.abbrev()
