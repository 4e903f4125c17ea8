# logging_setup.py
import logging
import sys
from pathlib import Path
from typing import Union


class _ConsoleFilter(logging.Filter):
    """Only todoterm records reach the terminal; everything else goes to the log file."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("todoterm"):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    log_file: Union[str, Path],
    console_level: Union[int, str] = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure the root logger once per process:
    - stderr handler, quiet by default so CLI output stays parseable
    - file handler with everything, in the config directory
    """
    if isinstance(console_level, str):
        console_level = getattr(logging, console_level.upper(), logging.WARNING)

    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
