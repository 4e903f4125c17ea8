# tests/test_repeat.py

from __future__ import annotations

from datetime import datetime

import pytest

from todoterm.TASKS.day_of_week import DayOfWeek
from todoterm.TASKS.repeat import Repeat, RepeatKind, compute_next_occurrence
from todoterm.exceptions import ValidationError


def test_day_of_week_parsing_and_numbering() -> None:
    assert DayOfWeek.from_str("mon") is DayOfWeek.MONDAY
    assert DayOfWeek.from_str(" Sun ") is DayOfWeek.SUNDAY
    assert DayOfWeek.MONDAY.to_int() == 1
    assert DayOfWeek.SUNDAY.to_int() == 7
    assert DayOfWeek.from_weekday(datetime(2024, 1, 1).weekday()) is DayOfWeek.MONDAY
    assert str(DayOfWeek.WEDNESDAY) == "Wed"
    assert DayOfWeek.from_name("Friday") is DayOfWeek.FRIDAY

    with pytest.raises(ValidationError):
        DayOfWeek.from_str("Monday")


@pytest.mark.parametrize(
    "text, kind",
    [
        ("never", RepeatKind.NEVER),
        ("Daily", RepeatKind.DAILY),
        ("WEEKLY", RepeatKind.WEEKLY),
        ("monthly", RepeatKind.MONTHLY),
        (" Yearly ", RepeatKind.YEARLY),
    ],
)
def test_parse_keywords_case_insensitive(text: str, kind: RepeatKind) -> None:
    assert Repeat.parse(text).kind is kind


def test_parse_days_of_week() -> None:
    rule = Repeat.parse("Mon, wed,FRI")
    assert rule.kind is RepeatKind.DAYS_OF_WEEK
    assert rule.days == (DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY, DayOfWeek.FRIDAY)
    assert str(rule) == "Mon,Wed,Fri"


@pytest.mark.parametrize("text", ["", "Mon,Funday", "every day", "Mon,,Tue"])
def test_parse_rejects_malformed_rules(text: str) -> None:
    with pytest.raises(ValidationError):
        Repeat.parse(text)


def test_display_string_parses_back() -> None:
    for rule in [Repeat.never(), Repeat.daily(), Repeat.yearly(),
                 Repeat.days_of_week([DayOfWeek.TUESDAY, DayOfWeek.SATURDAY])]:
        assert Repeat.parse(str(rule)) == rule


def test_json_tagged_value() -> None:
    assert Repeat.monthly().to_json() == "Monthly"
    rule = Repeat.days_of_week([DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY])
    assert rule.to_json() == {"DaysOfWeek": ["Monday", "Wednesday"]}
    assert Repeat.from_json(rule.to_json()) == rule

    with pytest.raises(ValidationError):
        Repeat.from_json("Fortnightly")
    with pytest.raises(ValidationError):
        Repeat.from_json({"DaysOfWeek": ["Mon"]})


def test_never_has_no_next_occurrence() -> None:
    assert compute_next_occurrence(datetime(2024, 1, 1, 9, 0), Repeat.never()) is None


def test_daily_and_weekly_keep_time_of_day() -> None:
    start = datetime(2024, 3, 10, 8, 30)
    assert compute_next_occurrence(start, Repeat.daily()) == datetime(2024, 3, 11, 8, 30)
    assert compute_next_occurrence(start, Repeat.weekly()) == datetime(2024, 3, 17, 8, 30)


def test_monthly_clamps_to_end_of_shorter_month() -> None:
    jan_31 = datetime(2024, 1, 31, 23, 59, 59)
    assert compute_next_occurrence(jan_31, Repeat.monthly()) == datetime(2024, 2, 29, 23, 59, 59)
    assert compute_next_occurrence(datetime(2023, 1, 31), Repeat.monthly()) == datetime(2023, 2, 28)


def test_yearly_from_leap_day() -> None:
    assert compute_next_occurrence(datetime(2024, 2, 29), Repeat.yearly()) == datetime(2025, 2, 28)


def test_days_of_week_looks_strictly_forward() -> None:
    monday = datetime(2024, 1, 1, 23, 59, 59)
    only_monday = Repeat.days_of_week([DayOfWeek.MONDAY])
    assert compute_next_occurrence(monday, only_monday) == datetime(2024, 1, 8, 23, 59, 59)

    mon_thu = Repeat.parse("Mon,Thu")
    assert compute_next_occurrence(monday, mon_thu) == datetime(2024, 1, 4, 23, 59, 59)


def test_days_of_week_result_always_in_rule() -> None:
    rule = Repeat.parse("Tue,Sat")
    current = datetime(2024, 5, 1, 12, 0)
    for _ in range(10):
        nxt = compute_next_occurrence(current, rule)
        assert nxt > current
        assert (nxt - current).days <= 7
        assert DayOfWeek.from_weekday(nxt.weekday()) in rule.days
        current = nxt


def test_empty_days_of_week_never_recurs() -> None:
    assert compute_next_occurrence(datetime(2024, 1, 1), Repeat.days_of_week([])) is None


def test_empty_day_list_is_never() -> None:
    assert Repeat.days_of_week([]) == Repeat.never()
    loaded = Repeat.from_json({"DaysOfWeek": []})
    assert loaded == Repeat.never()
    assert loaded.is_recurring() is False
    assert str(loaded) == "Never"
