# TUI/delete_task_page.py
import curses
from typing import Optional

from todoterm.state import AppState
from todoterm.TUI.utils import (
    ERROR_PAIR, PRIMARY_PAIR, InputMode, UIPage, add_line, color_attr, is_printable, key_hint, key_matches,
)


class DeleteTaskPage:
    """Asks the user to retype the task name before the task is deleted."""

    def __init__(self, state: AppState, task_id: int):
        self.state = state
        self.task_id = task_id
        self.typed = ""
        self.input_mode = InputMode.NORMAL
        self.error: Optional[str] = None

    def task_name(self) -> Optional[str]:
        task = self.state.store.get(self.task_id)
        return task.name if task is not None else None

    def add_char(self, c: str) -> None:
        self.typed += c

    def remove_char(self) -> None:
        self.typed = self.typed[:-1]

    def submit(self) -> bool:
        name = self.task_name()
        if name is None:
            return True
        if self.typed != name:
            self.error = f"The name you entered is not the same as the task name: '{name}'"
            return False
        self.state.store.delete(self.task_id)
        return True

    def handle_key(self, ch) -> UIPage:
        kb = self.state.settings.keybindings

        if key_matches(ch, kb.save_changes):
            return UIPage.ALL_TASKS if self.submit() else UIPage.SAME_PAGE

        if self.input_mode == InputMode.INSERT:
            if key_matches(ch, kb.enter_normal_mode):
                self.input_mode = InputMode.NORMAL
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
        return UIPage.SAME_PAGE

    def draw(self, stdscr) -> None:
        kb = self.state.settings.keybindings
        insert = self.input_mode == InputMode.INSERT

        add_line(stdscr, 0, 1, "Delete task", curses.A_BOLD | color_attr(PRIMARY_PAIR))
        add_line(stdscr, 1, 1, key_hint(
            (kb.enter_insert_mode, "insert"), (kb.enter_normal_mode, "normal"),
            (kb.save_changes, "delete"), (kb.go_back, "back"), (kb.quit, "quit"),
        ), curses.A_DIM)
        add_line(stdscr, 3, 1, f"To delete this task, please write down the exact name: '{self.task_name()}'")
        add_line(stdscr, 5, 3, self.typed, curses.A_UNDERLINE if insert else curses.A_NORMAL)
        if self.error:
            add_line(stdscr, 7, 1, f"Error: {self.error}", curses.A_BOLD | color_attr(ERROR_PAIR))

        if insert:
            curses.curs_set(1)
            stdscr.move(5, min(3 + len(self.typed), stdscr.getmaxyx()[1] - 2))
        else:
            curses.curs_set(0)
