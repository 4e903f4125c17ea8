# TUI/task_page.py
import curses
import logging
from typing import Optional

from todoterm.exceptions import ValidationError
from todoterm.state import AppState
from todoterm.TASKS.task_form import TaskForm
from todoterm.TUI.utils import (
    ERROR_PAIR, PRIMARY_PAIR, InputMode, UIPage, add_line, color_attr, is_printable, key_hint, key_matches,
)

logger = logging.getLogger(__name__)

FIELDS = ["name", "date", "repeats", "group", "description", "url"]
REPEATS_HINT = "Never | Daily | Weekly | Monthly | Yearly | Mon,Tue,Wed,Thu,Fri,Sat,Sun"


class TaskPage:
    """New/edit form. Starts in normal mode; typing happens in insert mode."""

    def __init__(self, state: AppState, task_id: Optional[int] = None):
        self.state = state
        self.editing_task = task_id
        self.input_mode = InputMode.NORMAL
        self.current_idx = 0
        self.error: Optional[str] = None

        task = state.store.get(task_id) if task_id is not None else None
        if task is not None:
            self.task_form = TaskForm.from_task(task, state.settings.date_formats)
        else:
            self.editing_task = None
            self.task_form = TaskForm()

    @property
    def current_field(self) -> str:
        return FIELDS[self.current_idx]

    def next_field(self) -> None:
        if self.current_idx < len(FIELDS) - 1:
            self.current_idx += 1

    def prev_field(self) -> None:
        if self.current_idx > 0:
            self.current_idx -= 1

    def add_char(self, c: str) -> None:
        setattr(self.task_form, self.current_field, getattr(self.task_form, self.current_field) + c)

    def remove_char(self) -> None:
        setattr(self.task_form, self.current_field, getattr(self.task_form, self.current_field)[:-1])

    def submit(self) -> bool:
        """Save the form. On a validation error the message is kept and the input stays."""
        try:
            task = self.task_form.submit(self.state.settings.date_formats)
        except ValidationError as e:
            self.error = str(e)
            return False

        self.error = None
        if self.editing_task is not None:
            original = self.state.store.get(self.editing_task)
            if original is not None:
                task.complete = original.complete
                self.state.store.update(task)
                return True
            logger.warning("Task id=%s vanished while editing, adding it again", self.editing_task)
            task.id = None
        self.state.store.add(task)
        return True

    def date_hint(self) -> str:
        formats = self.state.settings.date_formats
        return f"{formats.input_date_hint} or {formats.input_datetime_hint}"

    def handle_key(self, ch) -> UIPage:
        kb = self.state.settings.keybindings

        if key_matches(ch, kb.save_changes):
            return UIPage.ALL_TASKS if self.submit() else UIPage.SAME_PAGE

        if self.input_mode == InputMode.INSERT:
            if key_matches(ch, kb.enter_normal_mode):
                self.input_mode = InputMode.NORMAL
            elif key_matches(ch, "Tab") or key_matches(ch, "Down"):
                self.next_field()
            elif key_matches(ch, "Up"):
                self.prev_field()
            elif key_matches(ch, "Backspace"):
                self.remove_char()
            elif is_printable(ch):
                self.add_char(ch)
            return UIPage.SAME_PAGE

        if key_matches(ch, kb.quit):
            return UIPage.QUIT
        if key_matches(ch, kb.go_back):
            return UIPage.ALL_TASKS
        if key_matches(ch, kb.enter_insert_mode):
            self.input_mode = InputMode.INSERT
        elif key_matches(ch, kb.down) or key_matches(ch, "Tab") or key_matches(ch, "Down"):
            self.next_field()
        elif key_matches(ch, kb.up) or key_matches(ch, "Up"):
            self.prev_field()
        return UIPage.SAME_PAGE

    def draw(self, stdscr) -> None:
        height, width = stdscr.getmaxyx()
        kb = self.state.settings.keybindings
        insert = self.input_mode == InputMode.INSERT

        title = "Edit task" if self.editing_task is not None else "New task"
        mode = "-- INSERT --" if insert else "-- NORMAL --"
        add_line(stdscr, 0, 1, f"{title}  {mode}", curses.A_BOLD | color_attr(PRIMARY_PAIR))
        add_line(stdscr, 1, 1, key_hint(
            (kb.enter_insert_mode, "insert"), (kb.enter_normal_mode, "normal"),
            (kb.save_changes, "save"), (kb.go_back, "back"), (kb.quit, "quit"),
        ) + "  (*) required", curses.A_DIM)

        labels = {
            "name": "Name (*)",
            "date": f"Date ({self.date_hint()})",
            "repeats": f"Repeats ({REPEATS_HINT})",
            "group": "Group",
            "description": "Description",
            "url": "URL",
        }
        y = 3
        cursor = None
        for idx, name in enumerate(FIELDS):
            selected = idx == self.current_idx
            label_attr = curses.A_BOLD | color_attr(PRIMARY_PAIR) if selected else curses.A_NORMAL
            add_line(stdscr, y, 1, labels[name], label_attr)
            value = getattr(self.task_form, name)
            add_line(stdscr, y + 1, 3, value, curses.A_UNDERLINE if selected and insert else curses.A_NORMAL)
            if selected:
                cursor = (y + 1, min(3 + len(value), width - 2))
            y += 3

        if self.error:
            add_line(stdscr, y, 1, f"Error: {self.error}", curses.A_BOLD | color_attr(ERROR_PAIR))

        if insert and cursor is not None and cursor[0] < height:
            curses.curs_set(1)
            stdscr.move(*cursor)
        else:
            curses.curs_set(0)
