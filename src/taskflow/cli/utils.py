"""
CLI utility helpers - output formatting and task loading.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from taskflow.errors import TaskflowError
from taskflow.loader import load_task
from taskflow.run_step import RunStep
from taskflow.task import Task

console = Console()
err_console = Console(stderr=True)


def fail(error: TaskflowError | str) -> NoReturn:
    """Print an error and exit with code 1."""
    if isinstance(error, TaskflowError):
        err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
    else:
        err_console.print(f"[bold red]Error[/bold red]: {error}")
    raise typer.Exit(code=1)


def load_task_or_exit(ref: str) -> Task:
    """Resolve a ``module:attr`` task reference, exiting on failure."""
    try:
        return load_task(ref)
    except TaskflowError as e:
        fail(e)


def print_run_steps(run_steps: Iterable[RunStep], *, title: str = "") -> None:
    """Render a run trace as a Rich table."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("StepKey", overflow="fold")
    table.add_column("StepCode", overflow="fold")
    for index, run_step in enumerate(run_steps, start=1):
        table.add_row(str(index), run_step.step_key, run_step.step_code)
    console.print(table)
