# TASKS/filters.py
"""
Read-only views over the task collection.

Every function takes an iterable of tasks and returns a new list, so they can
be chained in any order. group_by_day expects its input already sorted by date.
"""
from datetime import date, datetime, timedelta
from enum import Enum
from itertools import groupby
from typing import Iterable, List, Optional

from todoterm.TASKS.model import Task


class DateFilter(str, Enum):
    ALL = "all"
    TODAY = "today"
    PAST = "past"
    TODAY_AND_PAST = "today-and-past"
    NEXT_24_HOURS = "next-24-hours"


def filter_by_completion(tasks: Iterable[Task], show_complete: bool) -> List[Task]:
    if show_complete:
        return list(tasks)
    return [t for t in tasks if not t.complete]


def filter_by_relative_date(
    tasks: Iterable[Task], mode: DateFilter, now: Optional[datetime] = None
) -> List[Task]:
    """Keep tasks relative to `now` (defaults to the current local time)."""
    if now is None:
        now = datetime.now()
    today = now.date()

    if mode == DateFilter.TODAY:
        return [t for t in tasks if t.date.date() == today]
    if mode == DateFilter.PAST:
        return [t for t in tasks if t.date < now]
    if mode == DateFilter.TODAY_AND_PAST:
        return [t for t in tasks if t.date.date() <= today]
    if mode == DateFilter.NEXT_24_HOURS:
        end = now + timedelta(hours=24)
        return [t for t in tasks if now <= t.date < end]
    return list(tasks)


def filter_by_exact_date(tasks: Iterable[Task], day: date) -> List[Task]:
    return [t for t in tasks if t.date.date() == day]


def filter_by_group(tasks: Iterable[Task], group: Optional[str]) -> List[Task]:
    """Case-insensitive group match. An empty filter keeps everything."""
    if not group:
        return list(tasks)
    wanted = group.casefold()
    return [t for t in tasks if t.group is not None and t.group.casefold() == wanted]


def sort_by_date(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: (t.date, t.id if t.id is not None else 0))


def group_by_day(tasks: Iterable[Task]) -> List[List[Task]]:
    """Split a date-sorted sequence into runs that fall on the same calendar day."""
    return [list(run) for _, run in groupby(tasks, key=lambda t: t.date.date())]


def get_groups(tasks: Iterable[Task]) -> List[str]:
    """Distinct group labels, in the order they first appear by due date."""
    groups: List[str] = []
    for task in sort_by_date(tasks):
        if task.group and task.group not in groups:
            groups.append(task.group)
    return groups
