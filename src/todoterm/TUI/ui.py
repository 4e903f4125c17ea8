# TUI/ui.py
import curses
import logging
import os

from todoterm.state import AppState
from todoterm.TUI.all_tasks_page import AllTasksPage
from todoterm.TUI.delete_task_page import DeleteTaskPage
from todoterm.TUI.task_page import TaskPage
from todoterm.TUI.utils import ACCENT_PAIR, COLORS, ERROR_PAIR, PRIMARY_PAIR, SECONDARY_PAIR, UIPage

logger = logging.getLogger(__name__)


def _init_colors(state: AppState) -> None:
    if not curses.has_colors():
        return
    curses.start_color()
    curses.use_default_colors()
    colors = state.settings.colors
    curses.init_pair(PRIMARY_PAIR, COLORS[colors.primary_color], -1)
    curses.init_pair(SECONDARY_PAIR, COLORS[colors.secondary_color], -1)
    curses.init_pair(ACCENT_PAIR, COLORS[colors.accent_color], -1)
    curses.init_pair(ERROR_PAIR, curses.COLOR_RED, -1)


def next_page(state: AppState, page, target: UIPage):
    """The page to show after `page` asked for `target`."""
    if target == UIPage.ALL_TASKS:
        return AllTasksPage(state)
    if target == UIPage.NEW_TASK:
        return TaskPage(state)
    if target == UIPage.EDIT_TASK:
        return TaskPage(state, page.current_id)
    if target == UIPage.DELETE_TASK:
        return DeleteTaskPage(state, page.current_id)
    return page


def run_app(stdscr, state: AppState) -> None:
    curses.curs_set(0)
    stdscr.keypad(True)
    _init_colors(state)

    page = AllTasksPage(state)
    while True:
        stdscr.erase()
        page.draw(stdscr)
        stdscr.refresh()

        ch = stdscr.get_wch()
        if ch == curses.KEY_RESIZE:
            continue

        target = page.handle_key(ch)
        if target == UIPage.QUIT:
            break
        if target != UIPage.SAME_PAGE:
            logger.debug("Switching to page %s", target.value)
            page = next_page(state, page, target)


def start_ui(state: AppState) -> None:
    # Esc is a keybinding; don't wait a full second to tell it apart from escape sequences
    os.environ.setdefault("ESCDELAY", "25")
    curses.wrapper(run_app, state)
