# TASKS/task_app.py
import json
import logging
from contextlib import contextmanager
from enum import Enum
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from todoterm.CONFIG.settings import Settings
from todoterm.TASKS.dates import date_to_display_str, parse_date
from todoterm.TASKS.filters import (
    DateFilter, filter_by_completion, filter_by_exact_date, filter_by_group,
    filter_by_relative_date, sort_by_date,
)
from todoterm.TASKS.model import Task
from todoterm.TASKS.task_form import TaskForm
from todoterm.exceptions import StorageError, ValidationError
from todoterm.state import AppState

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

task_app = typer.Typer(help="A terminal task tracker with recurring tasks.")


class OutputFormat(str, Enum):
    PLAIN = "plain"
    JSON = "json"
    JSON_PRETTY = "json-pretty"


@contextmanager
def storage_guard():
    """Turn an unreadable/unwritable store into a one-line message and exit code 2."""
    try:
        yield
    except StorageError as e:
        logger.error("Storage failure: %s", e)
        err_console.print(f"[red]Storage error: {escape(str(e))}[/red]")
        raise typer.Exit(code=2)


def _state(ctx: typer.Context) -> AppState:
    return ctx.find_root().obj


def _not_found(task_id: int):
    err_console.print(f"[red]Task with id {task_id} not found[/red]")
    raise typer.Exit(code=1)


def _invalid(error: ValidationError):
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(code=1)


def _dump(data, fmt: OutputFormat):
    indent = 4 if fmt == OutputFormat.JSON_PRETTY else None
    typer.echo(json.dumps(data, indent=indent, ensure_ascii=False))


def print_task(task: Task, fmt: OutputFormat, settings: Settings):
    if fmt != OutputFormat.PLAIN:
        _dump(task.to_dict(), fmt)
        return

    console.print(f"[bold cyan]{task.id}[/bold cyan] {escape(task.name)}")
    console.print(f"Date: {escape(date_to_display_str(task.date, settings.date_formats))}")
    console.print(f"Repeats: {task.repeats}")
    if task.group:
        console.print(f"Group: {escape(task.group)}")
    if task.description:
        console.print(f"Description: {escape(task.description)}")
    if task.url:
        console.print(f"URL: {escape(task.url)}")
    console.print(f"Complete: {escape(settings.icons.get_complete_icon(task.complete))}")


def print_tasks(tasks: List[Task], fmt: OutputFormat, settings: Settings):
    if fmt != OutputFormat.PLAIN:
        _dump([t.to_dict() for t in tasks], fmt)
        return

    if not tasks:
        console.print("[yellow]No tasks found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("", justify="center")
    table.add_column("Task", justify="left")
    table.add_column("Due", justify="left")
    table.add_column("Repeats", justify="center")
    table.add_column("Group", justify="left")

    for task in tasks:
        row_style = "strike dim" if task.complete else ""
        table.add_row(
            Text(str(task.id)),
            Text(settings.icons.get_complete_icon(task.complete), style="green" if task.complete else ""),
            Text(task.name, style=row_style),
            Text(date_to_display_str(task.date, settings.date_formats), style=row_style),
            Text(str(task.repeats) if task.repeats.is_recurring() else "-", style=row_style),
            Text(task.group or "-", style=row_style),
        )
    console.print(table)


@task_app.command("add")
def add_task_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="The name of the new task."),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Due date, in the configured input date or datetime format. Defaults to today."),
    repeats: Optional[str] = typer.Option(None, "--repeats", "-r", help="Never, Daily, Weekly, Monthly, Yearly or days like 'Mon,Thu'."),
    group: Optional[str] = typer.Option(None, "--group", "-g", help="Group label for the task."),
    description: Optional[str] = typer.Option(None, "--description", help="Free text description."),
    url: Optional[str] = typer.Option(None, "--url", help="Link attached to the task."),
    fmt: OutputFormat = typer.Option(OutputFormat.PLAIN, "--format", "-f", help="Output format."),
):
    """Add a new task."""
    state = _state(ctx)
    form = TaskForm(
        name=name,
        date=date or "",
        repeats=repeats or "",
        group=group or "",
        description=description or "",
        url=url or "",
    )
    try:
        task = form.submit(state.settings.date_formats)
    except ValidationError as e:
        _invalid(e)

    with storage_guard():
        state.store.add(task)
    print_task(task, fmt, state.settings)


@task_app.command("delete")
def delete_task_command(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="The id of the task to delete."),
    fmt: OutputFormat = typer.Option(OutputFormat.PLAIN, "--format", "-f", help="Output format."),
):
    """Delete a task by its id."""
    state = _state(ctx)
    with storage_guard():
        task = state.store.get(task_id)
        if task is None:
            _not_found(task_id)
        state.store.delete(task_id)

    if fmt == OutputFormat.PLAIN:
        console.print(f"[green]Task '{escape(task.name)}' (ID: {task_id}) deleted.[/green]")
    else:
        _dump(task.to_dict(), fmt)


task_app.command("rm", hidden=True)(delete_task_command)


def _report_completion(state: AppState, task_id: int, current_id: int, fmt: OutputFormat):
    task = state.store.get(task_id)
    successor = state.store.get(current_id) if current_id != task_id else None

    if fmt != OutputFormat.PLAIN:
        data = task.to_dict()
        data["next"] = successor.to_dict() if successor else None
        _dump(data, fmt)
        return

    print_task(task, fmt, state.settings)
    if successor is not None:
        console.print("[green]Next occurrence:[/green]")
        print_task(successor, fmt, state.settings)


@task_app.command("complete")
def complete_task_command(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="The id of the task to mark complete."),
    incomplete: bool = typer.Option(False, "--incomplete", help="Mark the task incomplete instead."),
    fmt: OutputFormat = typer.Option(OutputFormat.PLAIN, "--format", "-f", help="Output format."),
):
    """Mark a task complete (or incomplete). Recurring tasks get their next occurrence."""
    state = _state(ctx)
    with storage_guard():
        task = state.store.get(task_id)
        if task is None:
            _not_found(task_id)

        complete = not incomplete
        if task.complete == complete:
            word = "complete" if complete else "incomplete"
            console.print(f"[yellow]Task '{escape(task.name)}' is already marked as {word}.[/yellow]")
            raise typer.Exit(code=0)

        current_id = state.store.set_complete(task_id, complete)
        _report_completion(state, task_id, current_id, fmt)


@task_app.command("toggle")
def toggle_task_command(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="The id of the task to toggle."),
    fmt: OutputFormat = typer.Option(OutputFormat.PLAIN, "--format", "-f", help="Output format."),
):
    """Toggle the complete status of a task."""
    state = _state(ctx)
    with storage_guard():
        current_id = state.store.toggle_complete(task_id)
        if current_id is None:
            _not_found(task_id)
        _report_completion(state, task_id, current_id, fmt)


@task_app.command("ls")
def list_tasks_command(
    ctx: typer.Context,
    show_complete: bool = typer.Option(False, "--show-complete", "-a", help="Include completed tasks."),
    date_filter: DateFilter = typer.Option(DateFilter.ALL, "--filter", help="Relative date filter."),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Only tasks due on this date."),
    group: Optional[str] = typer.Option(None, "--group", "-g", help="Only tasks in this group (case-insensitive)."),
    fmt: OutputFormat = typer.Option(OutputFormat.PLAIN, "--format", "-f", help="Output format."),
):
    """List tasks, soonest first."""
    state = _state(ctx)
    with storage_guard():
        tasks = state.store.tasks()

    tasks = filter_by_completion(tasks, show_complete)
    tasks = filter_by_relative_date(tasks, date_filter)
    if date is not None:
        try:
            day = parse_date(date, state.settings.date_formats).date()
        except ValidationError as e:
            _invalid(e)
        tasks = filter_by_exact_date(tasks, day)
    tasks = filter_by_group(tasks, group)

    print_tasks(sort_by_date(tasks), fmt, state.settings)


task_app.command("list", hidden=True)(list_tasks_command)
