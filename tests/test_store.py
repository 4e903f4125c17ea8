# tests/test_store.py

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from todoterm.TASKS.database import TaskFile
from todoterm.TASKS.filters import DateFilter, filter_by_relative_date
from todoterm.TASKS.model import Task
from todoterm.TASKS.repeat import Repeat
from todoterm.TASKS.store import TaskStore
from todoterm.exceptions import StorageError

from conftest import FakeStorage


def test_add_assigns_increasing_ids_and_persists(store: TaskStore, task_file: TaskFile) -> None:
    first = store.add(Task(name="a", date=datetime(2024, 1, 2)))
    second = store.add(Task(name="b", date=datetime(2024, 1, 1)))

    assert (first, second) == (1, 2)
    assert store.current_id == 2
    assert [t.name for t in task_file.load()] == ["b", "a"]


def test_ids_are_not_reused_after_delete(store: TaskStore) -> None:
    store.add(Task(name="a"))
    doomed = store.add(Task(name="b"))
    assert store.delete(doomed) == doomed
    assert store.add(Task(name="c")) == 3


def test_pay_rent_keeps_both_tasks(store: TaskStore) -> None:
    rent_id = store.add(Task(name="Pay rent", date=datetime(2024, 1, 31, 23, 59, 59), repeats=Repeat.monthly()))

    current = store.set_complete(rent_id, True)

    assert current != rent_id
    assert len(store) == 2
    assert store.get(rent_id).complete is True
    successor = store.get(current)
    assert successor.complete is False
    assert successor.date == datetime(2024, 2, 29, 23, 59, 59)
    assert successor.name == "Pay rent"


def test_complete_non_recurring_returns_same_id(store: TaskStore) -> None:
    task_id = store.add(Task(name="once", date=datetime(2024, 1, 1)))
    assert store.set_complete(task_id, True) == task_id
    assert len(store) == 1
    assert store.set_complete(task_id, False) == task_id
    assert store.get(task_id).complete is False


def test_toggle_complete(store: TaskStore) -> None:
    task_id = store.add(Task(name="daily", date=datetime(2024, 1, 1), repeats=Repeat.daily()))
    successor_id = store.toggle_complete(task_id)
    assert successor_id == 2
    assert store.toggle_complete(task_id) == task_id
    assert store.get(task_id).complete is False
    assert len(store) == 2


def test_missing_ids_are_not_found_and_do_not_save() -> None:
    storage = FakeStorage()
    store = TaskStore(storage)

    assert store.get(42) is None
    assert store.delete(42) is None
    assert store.set_complete(42, True) is None
    assert store.toggle_complete(42) is None
    assert store.update(Task(name="ghost", id=42)) is None
    assert storage.saves == 0


def test_every_mutation_saves() -> None:
    storage = FakeStorage()
    store = TaskStore(storage)

    task_id = store.add(Task(name="a"))
    assert storage.saves == 1
    store.set_complete(task_id, True)
    assert storage.saves == 2
    store.update(Task(name="a2", id=task_id))
    assert storage.saves == 3
    store.delete(task_id)
    assert storage.saves == 4


def test_update_replaces_by_id(store: TaskStore) -> None:
    task_id = store.add(Task(name="draft", date=datetime(2024, 1, 1)))
    assert store.update(Task(name="final", date=datetime(2024, 1, 2), id=task_id)) == task_id
    assert store.get(task_id).name == "final"
    assert len(store) == 1


def test_reload_restores_tasks_and_counter(task_file: TaskFile) -> None:
    store = TaskStore(task_file)
    store.add(Task(name="a", date=datetime(2024, 1, 1), group="home"))
    store.add(Task(name="b", date=datetime(2024, 1, 2), repeats=Repeat.parse("Mon,Fri")))

    reloaded = TaskStore(task_file)
    assert sorted(t.name for t in reloaded.tasks()) == ["a", "b"]
    assert reloaded.get(2).repeats == Repeat.parse("Mon,Fri")
    assert reloaded.current_id == 2
    assert reloaded.add(Task(name="c")) == 3


def test_records_without_ids_get_fresh_ones(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([
        {"id": 5, "name": "kept", "date": "2024-01-01T23:59:59", "repeats": "Never"},
        {"name": "new", "date": "2024-01-02T23:59:59", "repeats": "Daily"},
    ]))

    store = TaskStore(TaskFile(path))
    assert store.get(5).name == "kept"
    assert store.get(6).name == "new"
    assert all("id" in r and r["id"] is not None for r in json.loads(path.read_text()))


def test_missing_file_is_created_empty(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "tasks.json"
    assert TaskFile(path).load() == []
    assert json.loads(path.read_text()) == []


def test_file_is_sorted_by_date(task_file: TaskFile) -> None:
    store = TaskStore(task_file)
    store.add(Task(name="late", date=datetime(2024, 5, 1)))
    store.add(Task(name="early", date=datetime(2024, 1, 1)))
    records = json.loads(task_file.path.read_text())
    assert [r["name"] for r in records] == ["early", "late"]


@pytest.mark.parametrize("content", [
    b"not json",
    b'{"name": "x"}',
    b'[{"name": "x", "date": "nope"}]',
    b"[1]",
    b"[\xff]",
    b'[{"name": "\xff\xfe", "date": "2024-01-01T23:59:59"}]',
    b'[{"name": "x", "date": "2024-01-01T23:59:59", "complete": "false"}]',
])
def test_unreadable_file_is_storage_error(tmp_path: Path, content: bytes) -> None:
    path = tmp_path / "tasks.json"
    path.write_bytes(content)
    with pytest.raises(StorageError):
        TaskStore(TaskFile(path))


def test_non_positive_ids_are_reassigned(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([
        {"id": -3, "name": "negative", "date": "2024-01-01T23:59:59"},
        {"id": 0, "name": "zero", "date": "2024-01-02T23:59:59"},
    ]))

    store = TaskStore(TaskFile(path))
    assert sorted(t.id for t in store.tasks()) == [1, 2]
    assert store.current_id == 2
    assert store.add(Task(name="next")) == 3
    assert all(r["id"] >= 1 for r in json.loads(path.read_text()))


def test_only_negative_id_seeds_counter_at_zero(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": -3, "name": "negative", "date": "2024-01-01T23:59:59"}]))

    store = TaskStore(TaskFile(path))
    assert [t.id for t in store.tasks()] == [1]
    assert store.add(Task(name="next")) == 2


def test_reload_is_independent_of_file_order(tmp_path: Path) -> None:
    records = [
        {"id": 3, "name": "late", "date": "2024-06-01T09:30:00", "repeats": {"DaysOfWeek": ["Tuesday", "Friday"]},
         "description": "notes", "url": "https://example.com", "group": "work", "complete": False},
        {"id": 1, "name": "early", "date": "2024-01-01T23:59:59", "repeats": "Monthly",
         "description": None, "url": None, "group": None, "complete": True},
        {"id": 2, "name": "middle", "date": "2024-03-15T23:59:59", "repeats": "Never",
         "description": None, "url": None, "group": "home", "complete": False},
    ]
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps(records))

    store = TaskStore(TaskFile(path))
    store.save()
    reloaded = TaskStore(TaskFile(path))

    def by_id(tasks):
        return {t.id: t.to_dict() for t in tasks}

    assert by_id(reloaded.tasks()) == {r["id"]: r for r in records}
    assert by_id(reloaded.tasks()) == by_id(store.tasks())
    assert reloaded.current_id == 3


def test_offset_timestamps_load_as_local_time(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([
        {"id": 1, "name": "from old file", "date": "2024-01-31T23:59:59+01:00", "repeats": "Monthly"},
        {"id": 2, "name": "naive", "date": "2024-01-15T10:00:00", "repeats": "Never"},
    ]))

    store = TaskStore(TaskFile(path))
    expected = datetime(2024, 1, 31, 23, 59, 59, tzinfo=timezone(timedelta(hours=1))).astimezone().replace(tzinfo=None)
    assert store.get(1).date == expected
    assert store.get(1).date.tzinfo is None

    store.set_complete(1, True)
    assert store.get(3).date.tzinfo is None
    assert len(filter_by_relative_date(store.tasks(), DateFilter.PAST, now=datetime(2030, 1, 1))) == 3
