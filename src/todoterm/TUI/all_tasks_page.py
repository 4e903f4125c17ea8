# TUI/all_tasks_page.py
import curses
import logging
import webbrowser
from datetime import datetime
from typing import List, Optional

from todoterm.state import AppState
from todoterm.TASKS.dates import date_to_display_str, end_of_day
from todoterm.TASKS.filters import filter_by_completion, get_groups, group_by_day, sort_by_date
from todoterm.TASKS.model import Task
from todoterm.TUI.utils import (
    ACCENT_PAIR, PRIMARY_PAIR, SECONDARY_PAIR, UIPage, add_line, color_attr, key_hint, key_matches,
)

logger = logging.getLogger(__name__)

ALL_TASKS = "All Tasks"


class AllTasksPage:
    """
    The main screen: tasks split into day sections, with group tabs on top.

    The page never keeps its own copy of the tasks; every view is rebuilt from
    the store. `current_id` is the selected task, `current_group` the selected
    tab (None for All Tasks).
    """

    def __init__(self, state: AppState):
        self.state = state
        self.show_hidden = state.settings.show_complete
        self.current_group: Optional[str] = state.settings.current_group
        self.current_id: Optional[int] = None
        self.message: Optional[str] = None

        self.ensure_group_exists()

    @property
    def store(self):
        return self.state.store

    # ---- views ----

    def visible_tasks(self) -> List[Task]:
        tasks = filter_by_completion(self.store.tasks(), self.show_hidden)
        if self.current_group is not None:
            tasks = [t for t in tasks if t.group == self.current_group]
        return sort_by_date(tasks)

    def day_groups(self) -> List[List[Task]]:
        return group_by_day(self.visible_tasks())

    def get_groups(self) -> List[str]:
        tasks = filter_by_completion(self.store.tasks(), self.show_hidden)
        return [ALL_TASKS] + get_groups(tasks)

    def _visible_ids(self) -> List[int]:
        return [t.id for t in self.visible_tasks()]

    # ---- selection ----

    def next(self) -> None:
        ids = self._visible_ids()
        if not ids:
            return
        if self.current_id not in ids:
            self.current_id = ids[0]
            return
        idx = ids.index(self.current_id)
        if idx < len(ids) - 1:
            self.current_id = ids[idx + 1]

    def prev(self) -> None:
        ids = self._visible_ids()
        if not ids:
            return
        if self.current_id not in ids:
            self.current_id = ids[-1]
            return
        idx = ids.index(self.current_id)
        if idx > 0:
            self.current_id = ids[idx - 1]

    def move_closest(self) -> None:
        """Select the visible task nearest in time to the selected one (or to now)."""
        current = self.store.get(self.current_id) if self.current_id is not None else None
        anchor = current.date if current is not None else datetime.now()

        tasks = self.visible_tasks()
        if not tasks:
            self.current_id = None
            return
        closest = min(tasks, key=lambda t: abs((t.date - anchor).total_seconds()))
        self.current_id = closest.id

    def ensure_group_exists(self) -> None:
        """Fall back to All Tasks when the selected group has no visible task left."""
        if self.current_group is None:
            return
        if not any(t.group == self.current_group for t in self.visible_tasks()):
            self.set_group(None)

    def ensure_task_exists(self) -> None:
        if self.current_id is not None and self.current_id not in self._visible_ids():
            self.current_id = None

    # ---- groups ----

    def set_group(self, group: Optional[str]) -> None:
        self.current_group = group
        self.ensure_task_exists()
        self.state.settings.update(current_group=group)

    def next_group(self) -> None:
        groups = self.get_groups()
        self.current_id = None
        if self.current_group is None:
            if len(groups) > 1:
                self.current_group = groups[1]
        elif self.current_group in groups:
            idx = groups.index(self.current_group)
            if idx < len(groups) - 1:
                self.current_group = groups[idx + 1]
        else:
            self.current_group = None
        self.state.settings.update(current_group=self.current_group)

    def prev_group(self) -> None:
        groups = self.get_groups()
        self.current_id = None
        if self.current_group in groups and groups.index(self.current_group) > 1:
            self.current_group = groups[groups.index(self.current_group) - 1]
        else:
            self.current_group = None
        self.state.settings.update(current_group=self.current_group)

    # ---- actions ----

    def toggle_selected(self) -> None:
        if self.current_id is not None:
            self.store.toggle_complete(self.current_id)
            if not self.show_hidden:
                self.move_closest()
        self.ensure_group_exists()

    def toggle_hidden(self) -> None:
        self.show_hidden = not self.show_hidden
        self.state.settings.update(show_complete=self.show_hidden)
        self.ensure_group_exists()
        if not self.show_hidden:
            self.move_closest()

    def open_selected_link(self) -> None:
        if self.current_id is None:
            return
        task = self.store.get(self.current_id)
        if task is None or not task.url:
            return
        logger.info("Opening link for task id=%s: %s", task.id, task.url)
        if not webbrowser.open(task.url):
            self.message = f"Could not open {task.url}"

    def handle_key(self, ch) -> UIPage:
        kb = self.state.settings.keybindings
        self.message = None

        if key_matches(ch, kb.quit):
            return UIPage.QUIT
        if key_matches(ch, kb.down):
            self.next()
        elif key_matches(ch, kb.up):
            self.prev()
        elif key_matches(ch, kb.next_group):
            self.next_group()
        elif key_matches(ch, kb.prev_group):
            self.prev_group()
        elif key_matches(ch, kb.complete_task):
            self.toggle_selected()
        elif key_matches(ch, kb.toggle_completed_tasks):
            self.toggle_hidden()
        elif key_matches(ch, kb.open_link):
            self.open_selected_link()
        elif key_matches(ch, kb.new_task):
            return UIPage.NEW_TASK
        elif key_matches(ch, kb.edit_task):
            if self.current_id is not None:
                return UIPage.EDIT_TASK
        elif key_matches(ch, kb.delete_task):
            if self.current_id is not None:
                return UIPage.DELETE_TASK
        return UIPage.SAME_PAGE

    # ---- drawing ----

    def _rows(self):
        """(text, attr, task_id) per screen line, day headers included."""
        settings = self.state.settings
        rows = []
        for day in self.day_groups():
            header = date_to_display_str(end_of_day(day[0].date.date()), settings.date_formats)
            rows.append((f" {header.upper()}", curses.A_BOLD | color_attr(ACCENT_PAIR), None))
            for task in day:
                icon = settings.icons.get_complete_icon(task.complete)
                repeats = settings.icons.repeats if task.repeats.is_recurring() else ""
                time_str = task.date.strftime(" %H:%M") if task.has_time() else ""
                text = f"   {icon} {task.name}{time_str} {repeats}"

                if task.id == self.current_id:
                    attr = curses.A_BOLD | curses.A_REVERSE | color_attr(SECONDARY_PAIR)
                elif task.complete:
                    attr = curses.A_DIM
                else:
                    attr = curses.A_BOLD
                rows.append((text, attr, task.id))
            rows.append(("", 0, None))
        return rows

    def draw(self, stdscr) -> None:
        height, width = stdscr.getmaxyx()
        kb = self.state.settings.keybindings

        # Group tabs
        x = 1
        for group in self.get_groups():
            selected = group == (self.current_group or ALL_TASKS)
            attr = curses.A_BOLD | color_attr(SECONDARY_PAIR) if selected else curses.A_NORMAL
            label = f" {group} "
            add_line(stdscr, 0, x, label, attr)
            x += len(label) + 1
        add_line(stdscr, 1, 0, "-" * (width - 1), color_attr(PRIMARY_PAIR))

        rows = self._rows()
        body_top, body_height = 2, max(height - 4, 1)
        selected_idx = next((i for i, r in enumerate(rows) if r[2] == self.current_id and r[2] is not None), 0)
        offset = max(0, selected_idx - body_height + 1)

        if not rows:
            add_line(stdscr, body_top, 2, f"No tasks. Press '{kb.new_task}' to add one.", curses.A_DIM)
        for i, (text, attr, _) in enumerate(rows[offset:offset + body_height]):
            add_line(stdscr, body_top + i, 0, text, attr)

        footer = self.message or key_hint(
            (kb.new_task, "new"), (kb.edit_task, "edit"), (kb.complete_task, "done"),
            (kb.delete_task, "delete"), (kb.toggle_completed_tasks, "show/hide done"),
            (kb.open_link, "open link"), (kb.quit, "quit"),
        )
        add_line(stdscr, height - 1, 0, footer, curses.A_DIM)
