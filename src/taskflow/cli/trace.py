"""
CLI: ``taskflow trace`` - inspect serialized run traces.
"""

from __future__ import annotations

from pathlib import Path

import typer

from taskflow.cli.utils import console, fail, print_run_steps
from taskflow.errors import TraceDecodeError
from taskflow.run_step import run_steps_from_json, run_steps_to_json

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_trace(
    trace_file: Path = typer.Argument(..., help="JSON run trace file."),
    json_out: bool = typer.Option(False, "--json", "-j", help="Print normalized JSON."),
) -> None:
    """Validate a run trace and print it."""
    if not trace_file.exists():
        fail(f"File not found: {trace_file}")

    try:
        run_steps = run_steps_from_json(trace_file.read_bytes())
    except TraceDecodeError as e:
        fail(e)

    if json_out:
        console.print_json(run_steps_to_json(run_steps))
        return

    if not run_steps:
        console.print("[dim]No steps.[/dim]")
        return
    print_run_steps(run_steps, title=str(trace_file.name))
