# CONFIG/config_app.py
from enum import Enum
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape

from todoterm.CONFIG.settings import reset_settings
from todoterm.exceptions import ValidationError
from todoterm.TASKS.task_app import err_console, storage_guard

console = Console()


class NavigationMode(str, Enum):
    VI = "vi"
    NORMAL = "normal"


class IconSet(str, Enum):
    SPECIAL = "special"
    CHARS = "chars"


def config_command(
    ctx: typer.Context,
    reset: bool = typer.Option(False, "--reset", help="Restore every setting to its default value."),
    show: bool = typer.Option(False, "--show", help="Print the current settings."),
    mode: Optional[NavigationMode] = typer.Option(None, "--mode", help="Navigation keys: vi (j/k/l/y) or normal (arrow keys)."),
    icons: Optional[IconSet] = typer.Option(None, "--icons", help="Icon set: special (needs a Nerd Font) or chars."),
    set_values: List[str] = typer.Option([], "--set", help="Set a single value, e.g. --set colors.primary_color=cyan."),
):
    """View or change todoterm settings."""
    state = ctx.find_root().obj

    with storage_guard():
        if reset:
            state.settings = reset_settings(state.settings.path)
            console.print("[green]Settings reset to defaults.[/green]")

        if mode == NavigationMode.VI:
            state.settings.set_vi_mode()
            console.print("[green]Navigation set to vi keys.[/green]")
        elif mode == NavigationMode.NORMAL:
            state.settings.set_normal_mode()
            console.print("[green]Navigation set to arrow keys.[/green]")

        if icons == IconSet.SPECIAL:
            state.settings.set_special_icons()
            console.print("[green]Using special icons.[/green]")
        elif icons == IconSet.CHARS:
            state.settings.set_char_icons()
            console.print("[green]Using character icons.[/green]")

        for item in set_values:
            key, sep, value = item.partition("=")
            if not sep:
                err_console.print(f"[red]Error: expected KEY=VALUE, got '{escape(item)}'[/red]")
                raise typer.Exit(code=1)
            try:
                state.settings.set_value(key.strip(), value.strip())
            except (ValidationError, TypeError) as e:
                err_console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)
            console.print(f"[green]{escape(key.strip())} set to '{escape(value.strip())}'.[/green]")

    changed = reset or mode is not None or icons is not None or set_values
    if show or not changed:
        console.print(f"[bold]Settings file:[/bold] {escape(str(state.settings.path))}")
        typer.echo(yaml.safe_dump(state.settings.to_dict(), sort_keys=False, allow_unicode=True), nl=False)
