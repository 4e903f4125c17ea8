# CONFIG/settings.py
"""
User settings for todoterm.

Settings live in <config dir>/settings.yaml next to the task file. The file is
merged over the defaults on load, so new settings keys appear without the user
having to reset their configuration. Presentation code changes settings only
through Settings.update()/Settings.set_value(), which write the file straight
away.
"""
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from todoterm.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TODOTERM"

SETTINGS_FILE = "settings.yaml"
TASKS_FILE = "tasks.json"
LOG_FILE = "todoterm.log"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def config_dir() -> Path:
    raw = os.getenv(_k("CONFIG_DIR"))
    if raw is None or raw.strip() == "":
        path = Path.home() / ".config" / "todoterm"
    else:
        path = Path(raw).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path


def settings_path() -> Path:
    return config_dir() / SETTINGS_FILE


def tasks_path() -> Path:
    return config_dir() / TASKS_FILE


def log_path() -> Path:
    return config_dir() / LOG_FILE


def log_level() -> str:
    return os.getenv(_k("LOG_LEVEL"), "WARNING").upper()


KEY_NAMES = [
    "Esc", "Backspace", "Left", "Right", "Up", "Down", "Home", "End",
    "Delete", "Insert", "PageUp", "PageDown", "Space", "Tab", "Enter",
] + [f"F{n}" for n in range(1, 13)]

COLOR_NAMES = ["default", "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"]


def normalize_key(key: Any) -> str:
    """Canonical spelling of a key binding: a single character or a name from KEY_NAMES."""
    s = str(key)
    if len(s) == 1:
        return s
    for name in KEY_NAMES:
        if s.lower() == name.lower():
            return name
    raise ValidationError(f"Invalid key: '{s}'")


def normalize_color(color: Any) -> str:
    s = str(color).strip().lower()
    if s not in COLOR_NAMES:
        raise ValidationError(f"Invalid color: '{color}' (choose from {', '.join(COLOR_NAMES)})")
    return s


@dataclass
class DateFormats:
    display_date_format: str = "%a %b %d"
    display_datetime_format: str = "%a %b %d at %H:%M"
    input_date_format: str = "%d-%m-%Y"
    input_date_hint: str = "DD-MM-YYYY"
    input_datetime_format: str = "%d-%m-%Y %H:%M"
    input_datetime_hint: str = "DD-MM-YYYY HH:MM"


SPECIAL_ICONS = {"complete": "\U000f0134", "incomplete": "\U000f0766", "repeats": "\uf021"}
CHAR_ICONS = {"complete": "[x]", "incomplete": "[ ]", "repeats": "(r)"}


@dataclass
class Icons:
    complete: str = CHAR_ICONS["complete"]
    incomplete: str = CHAR_ICONS["incomplete"]
    repeats: str = CHAR_ICONS["repeats"]

    def get_complete_icon(self, complete: bool) -> str:
        return self.complete if complete else self.incomplete


@dataclass
class Colors:
    primary_color: str = "green"
    secondary_color: str = "yellow"
    accent_color: str = "blue"

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, normalize_color(getattr(self, f.name)))


VI_NAVIGATION = {"down": "j", "up": "k", "next_group": "l", "prev_group": "y"}
NORMAL_NAVIGATION = {"down": "Down", "up": "Up", "next_group": "Right", "prev_group": "Left"}


@dataclass
class KeyBindings:
    quit: str = "q"
    down: str = "j"
    up: str = "k"
    complete_task: str = "x"
    toggle_completed_tasks: str = "h"
    delete_task: str = "d"
    new_task: str = "n"
    edit_task: str = "e"
    save_changes: str = "Enter"
    enter_insert_mode: str = "i"
    enter_normal_mode: str = "Esc"
    go_back: str = "b"
    open_link: str = "o"
    next_group: str = "l"
    prev_group: str = "y"

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, normalize_key(getattr(self, f.name)))


def _build_section(cls, raw: Any, section: str):
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ValidationError(f"Settings section '{section}' must be a mapping")
    known = {f.name for f in fields(cls)}
    for key in raw:
        if key not in known:
            logger.warning("Ignoring unknown setting %s.%s", section, key)
    return cls(**{k: v for k, v in raw.items() if k in known})


@dataclass
class Settings:
    date_formats: DateFormats = field(default_factory=DateFormats)
    show_complete: bool = True
    current_group: Optional[str] = None
    icons: Icons = field(default_factory=Icons)
    colors: Colors = field(default_factory=Colors)
    keybindings: KeyBindings = field(default_factory=KeyBindings)
    path: Optional[Path] = field(default=None, repr=False, compare=False)

    # ---- update-and-persist ----

    def update(self, **changes: Any) -> None:
        """Apply top-level changes (show_complete, current_group, ...) and save."""
        for key, value in changes.items():
            if key == "path" or key not in {f.name for f in fields(self)}:
                raise ValidationError(f"Unknown setting: '{key}'")
            setattr(self, key, value)
        self.save()

    def set_value(self, dotted_key: str, value: str) -> None:
        """Set one value from a `section.key` path, as typed on the command line, and save."""
        parts = dotted_key.split(".")
        if len(parts) == 1:
            key = parts[0]
            if key == "show_complete":
                self.update(show_complete=_parse_bool(value))
            elif key == "current_group":
                self.update(current_group=value or None)
            else:
                raise ValidationError(f"Unknown setting: '{dotted_key}'")
            return

        if len(parts) != 2:
            raise ValidationError(f"Unknown setting: '{dotted_key}'")
        section_name, key = parts
        section = getattr(self, section_name, None)
        if section_name == "path" or section is None or not hasattr(section, "__dataclass_fields__"):
            raise ValidationError(f"Unknown setting: '{dotted_key}'")
        if key not in {f.name for f in fields(section)}:
            raise ValidationError(f"Unknown setting: '{dotted_key}'")
        data = asdict(section)
        data[key] = value
        setattr(self, section_name, type(section)(**data))
        self.save()

    def set_vi_mode(self) -> None:
        self._set_navigation(VI_NAVIGATION)

    def set_normal_mode(self) -> None:
        self._set_navigation(NORMAL_NAVIGATION)

    def _set_navigation(self, keys: Dict[str, str]) -> None:
        data = asdict(self.keybindings)
        data.update(keys)
        self.keybindings = KeyBindings(**data)
        self.save()

    def set_special_icons(self) -> None:
        self.icons = Icons(**SPECIAL_ICONS)
        self.save()

    def set_char_icons(self) -> None:
        self.icons = Icons(**CHAR_ICONS)
        self.save()

    # ---- serialization ----

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date_formats": asdict(self.date_formats),
            "show_complete": self.show_complete,
            "current_group": self.current_group,
            "icons": asdict(self.icons),
            "colors": asdict(self.colors),
            "keybindings": asdict(self.keybindings),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: Optional[Path] = None) -> "Settings":
        current_group = data.get("current_group")
        return cls(
            date_formats=_build_section(DateFormats, data.get("date_formats"), "date_formats"),
            show_complete=bool(data.get("show_complete", True)),
            current_group=str(current_group) if current_group is not None else None,
            icons=_build_section(Icons, data.get("icons"), "icons"),
            colors=_build_section(Colors, data.get("colors"), "colors"),
            keybindings=_build_section(KeyBindings, data.get("keybindings"), "keybindings"),
            path=path,
        )

    def save(self) -> None:
        if self.path is None:
            return
        write_settings(self.path, self)


def _parse_bool(value: str) -> bool:
    raw = value.strip().lower()
    if raw in {"1", "true", "yes", "y", "on"}:
        return True
    if raw in {"0", "false", "no", "n", "off"}:
        return False
    raise ValidationError(f"Expected a boolean, got '{value}'")


def write_settings(path: Path, settings: Settings) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            yaml.safe_dump(settings.to_dict(), f, sort_keys=False, allow_unicode=True)
        os.replace(tmp, path)
    except OSError as e:
        logger.error("Error writing settings file %s: %s", path, e)
        raise StorageError(f"Could not write settings file {path}: {e}") from e
    logger.debug("Settings saved to %s", path)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating the file with defaults when it is missing."""
    if path is None:
        path = settings_path()

    if not path.exists():
        settings = Settings(path=path)
        settings.save()
        logger.info("Default settings file created at %s", path)
        return settings

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.error("Error loading settings file %s: %s", path, e)
        raise StorageError(f"Could not read settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise StorageError(f"Settings file {path} must contain a mapping")
    try:
        return Settings.from_dict(data, path=path)
    except (ValidationError, TypeError) as e:
        raise StorageError(f"Invalid settings file {path}: {e}") from e


def reset_settings(path: Optional[Path] = None) -> Settings:
    if path is None:
        path = settings_path()
    settings = Settings(path=path)
    settings.save()
    logger.info("Settings reset to defaults at %s", path)
    return settings
