# TUI/utils.py
import curses
from enum import Enum
from typing import Dict, Tuple, Union

Key = Union[str, int]


class UIPage(Enum):
    QUIT = "quit"
    SAME_PAGE = "same_page"
    ALL_TASKS = "all_tasks"
    NEW_TASK = "new_task"
    EDIT_TASK = "edit_task"
    DELETE_TASK = "delete_task"


class InputMode(Enum):
    NORMAL = "normal"
    INSERT = "insert"


# What get_wch() hands back for each named key
NAMED_KEYS: Dict[str, Tuple[Key, ...]] = {
    "Esc": ("\x1b",),
    "Backspace": (curses.KEY_BACKSPACE, "\x7f", "\b"),
    "Left": (curses.KEY_LEFT,),
    "Right": (curses.KEY_RIGHT,),
    "Up": (curses.KEY_UP,),
    "Down": (curses.KEY_DOWN,),
    "Home": (curses.KEY_HOME,),
    "End": (curses.KEY_END,),
    "Delete": (curses.KEY_DC,),
    "Insert": (curses.KEY_IC,),
    "PageUp": (curses.KEY_PPAGE,),
    "PageDown": (curses.KEY_NPAGE,),
    "Space": (" ",),
    "Tab": ("\t",),
    "Enter": ("\n", "\r", curses.KEY_ENTER),
}
NAMED_KEYS.update({f"F{n}": (curses.KEY_F0 + n,) for n in range(1, 13)})

COLORS = {
    "default": -1,
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

# Color pair numbers set up by start_ui()
PRIMARY_PAIR = 1
SECONDARY_PAIR = 2
ACCENT_PAIR = 3
ERROR_PAIR = 4


def key_matches(ch: Key, binding: str) -> bool:
    """True when the key read from curses is the one named by a keybinding setting."""
    if binding in NAMED_KEYS:
        return ch in NAMED_KEYS[binding]
    return ch == binding


def is_printable(ch: Key) -> bool:
    return isinstance(ch, str) and ch.isprintable()


def color_attr(pair: int) -> int:
    if curses.has_colors():
        return curses.color_pair(pair)
    return curses.A_BOLD


def add_line(win, y: int, x: int, text: str, attr: int = 0) -> None:
    """addnstr clipped to the window; never touches the last column."""
    height, width = win.getmaxyx()
    if y < 0 or y >= height or x >= width - 1:
        return
    win.addnstr(y, x, text, width - x - 1, attr)


def key_hint(*pairs: Tuple[str, str]) -> str:
    return "  ".join(f"{key}: {action}" for key, action in pairs)
