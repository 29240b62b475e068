"""Config commands: init and show."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pgexplain.config import (
    CONFIG_FILENAME,
    find_config_file,
    load_config_from_env,
    read_config_file,
    write_config_template,
)
from pgexplain.exceptions import ConfigurationError

console = Console()
error_console = Console(stderr=True)

config_app = typer.Typer(help="Manage the .pgexplainrc configuration file")


def register(app: typer.Typer) -> None:
    """Register the config command group on the given Typer app."""
    app.add_typer(config_app, name="config")


@config_app.command("init")
def init(
    path: Annotated[
        Optional[Path],
        typer.Option(
            "--path", "-p", help="Where to write the config file (default: ~/.pgexplainrc)"
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """Write a commented config file with the default settings."""
    if path is None:
        path = Path.home() / CONFIG_FILENAME

    try:
        written = write_config_template(path, force=force)
    except ConfigurationError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(code=1)

    console.print(f"✅ Created {escape(str(written.resolve()))}")


@config_app.command("show")
def show() -> None:
    """Show the effective configuration and where it came from."""
    path = find_config_file()

    try:
        config = read_config_file(path) if path and path.exists() else load_config_from_env()
    except ConfigurationError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(code=1)

    source = str(path) if path and path.exists() else "defaults + environment"

    table = Table(title=f"Configuration ({escape(source)})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)
