import logging

import typer

from todoterm.CONFIG.config_app import config_command
from todoterm.CONFIG.settings import log_level, log_path
from todoterm.TASKS.task_app import storage_guard, task_app
from todoterm.TUI.ui import start_ui
from todoterm.logging_setup import setup_logging
from todoterm.state import create_initial_state

logger = logging.getLogger(__name__)

app = task_app
app.command("config", help="View or change todoterm settings.")(config_command)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context):
    """Track tasks from the terminal. Run without a command to open the task list."""
    setup_logging(log_path(), log_level())
    with storage_guard():
        ctx.obj = create_initial_state()

    if ctx.invoked_subcommand is None:
        logger.info("Starting terminal UI")
        with storage_guard():
            start_ui(ctx.obj)


def main():
    app()


if __name__ == "__main__":
    main()
