"""
Root Typer application for the taskflow CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from taskflow import __version__

app = Typer(
    name="taskflow",
    help="taskflow - draw task graphs and inspect run traces.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"taskflow {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """taskflow CLI - render Mermaid graphs of tasks and their run traces."""


# ── Sub-command registration ─────────────────────────────────────────────

from taskflow.cli.config import app as config_app  # noqa: E402
from taskflow.cli.graph import graph_cmd  # noqa: E402
from taskflow.cli.trace import app as trace_app  # noqa: E402

app.command("graph")(graph_cmd)
app.add_typer(trace_app, name="trace", help="Run trace inspection.")
app.add_typer(config_app, name="config", help="Configuration inspection.")
