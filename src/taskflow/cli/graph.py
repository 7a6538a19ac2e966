"""
CLI: ``taskflow graph`` - render a task as a Mermaid flowchart.

Example:
    taskflow graph shop.tasks:Checkout
    taskflow graph shop.tasks:Checkout --trace run.json -c SUCCESS -c FAILURE
    taskflow graph shop.tasks:Checkout --sort --direction LR -o checkout.md
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import typer

from taskflow.cli.utils import fail, load_task_or_exit
from taskflow.errors import TraceDecodeError
from taskflow.graph import GraphConfig, render_graph, render_graph_from_json

_DIRECTIONS = ("TD", "TB", "BT", "LR", "RL")


def graph_cmd(
    ref: str = typer.Argument(..., help="Task reference, 'package.module:Attr'."),
    trace_file: Path | None = typer.Option(
        None,
        "--trace",
        "-t",
        help="JSON run trace to highlight on the graph.",
    ),
    codes: list[str] | None = typer.Option(
        None,
        "--code",
        "-c",
        help="Only draw edges with this code (repeatable).",
    ),
    sort: bool = typer.Option(False, "--sort", help="Sort step keys and codes."),
    direction: str | None = typer.Option(
        None,
        "--direction",
        "-d",
        help="Flowchart direction: TD, TB, BT, LR, RL.",
    ),
    output_file: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write output to file instead of stdout.",
    ),
) -> None:
    """Render a task's step graph as Mermaid markup."""
    config = GraphConfig.from_settings()
    if sort:
        config = dataclasses.replace(config, sort_keys=True)
    if direction is not None:
        direction = direction.upper()
        if direction not in _DIRECTIONS:
            fail(f"Unknown direction: {direction}. Use: {', '.join(_DIRECTIONS)}")
        config = dataclasses.replace(config, direction=direction)

    task = load_task_or_exit(ref)

    if trace_file is None:
        text = render_graph(task, codes, config)
    else:
        if not trace_file.exists():
            fail(f"File not found: {trace_file}")
        try:
            text = render_graph_from_json(task, trace_file.read_bytes(), codes, config)
        except TraceDecodeError as e:
            fail(e)

    if output_file:
        output_file.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Written to {output_file}")
    else:
        typer.echo(text)
