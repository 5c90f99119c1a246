#!/usr/bin/env python3
"""
imgbatch CLI Main Application

Typer-based command-line interface with Rich formatting.
"""

import sys
import typer
from rich.console import Console
from typing import Optional

from imgbatch.cli import __version__
from imgbatch.cli.commands import config, convert, inspect

console = Console()

app = typer.Typer(
    name="imgbatch",
    help="Batch image converter for PNG, JPEG and WEBP, with ZIP archive support",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command(name="convert")(convert.convert)
app.command(name="inspect")(inspect.inspect)
app.add_typer(config.app, name="config", help="Create and inspect configuration files")


def version_callback(value: bool):
    """Show version information."""
    if value:
        console.print(f"[bold cyan]imgbatch[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit"
    ),
):
    """
    imgbatch - convert batches of images between PNG, JPEG and WEBP.

    [bold]Quick Start:[/bold]

    • Convert files: [cyan]imgbatch convert a.png b.jpg --to webp[/cyan]
    • Convert an archive: [cyan]imgbatch convert photos.zip --to png[/cyan]
    • Inspect inputs: [cyan]imgbatch inspect photos.zip[/cyan]
    • Write a config file: [cyan]imgbatch config init[/cyan]
    """
    pass


def main():
    """Entry point for the imgbatch console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
