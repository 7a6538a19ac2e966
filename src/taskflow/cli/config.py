"""
CLI: ``taskflow config`` - configuration inspection.
"""

from __future__ import annotations

import typer

from taskflow.cli.utils import console, fail
from taskflow.settings import get_settings

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    format: str = typer.Option("json", "--format", "-f", help="Output format: json, env"),
) -> None:
    """Show the effective configuration."""
    if format not in ("json", "env"):
        fail(f"Unknown format: {format}. Use: json, env")

    settings = get_settings()

    if format == "env":
        for key, value in sorted(settings.model_dump().items()):
            console.print(f"TASKFLOW_{key.upper()}={'' if value is None else value}")
        return

    console.print_json(settings.model_dump_json())
