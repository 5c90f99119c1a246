"""
Config Command

Commands for creating and inspecting imgbatch configuration files.
"""

from pathlib import Path
from typing import Optional, Annotated
import typer

from imgbatch.cli.config_utils import load_config_from_cli, print_config_summary
from imgbatch.cli.error_handling import handle_error
from imgbatch.cli.utils import console
from imgbatch.core.config import ConfigManager
from imgbatch.core.exceptions import ConfigurationError, ErrorCode

app = typer.Typer(
    help="Create and inspect configuration files",
    no_args_is_help=True,
)


@app.command("init")
def config_init(
    path: Annotated[Path, typer.Argument(help="Where to write the configuration file")] = Path("imgbatch.yaml"),
    force: Annotated[bool, typer.Option("--force", "-f", help="Replace an existing file")] = False,
):
    """
    Write a configuration file containing every setting at its default.

    [bold cyan]Examples:[/bold cyan]

    • In the current directory: [green]imgbatch config init[/green]
    • User-wide: [green]imgbatch config init ~/.config/imgbatch/config.yaml[/green]
    """
    if path.exists() and not force:
        handle_error(ConfigurationError(
            f"{path} already exists (use --force to replace it)",
            error_code=ErrorCode.FS_INVALID_PATH,
            config_key="config_file",
            config_value=str(path)
        ))

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        ConfigManager().create_example_config(path)
    except OSError as e:
        handle_error(ConfigurationError(
            f"Could not write configuration file {path}: {e}",
            error_code=ErrorCode.FS_PERMISSION_DENIED,
            cause=e
        ))

    console.print(f"[green]Wrote example configuration to {path}[/green]")


@app.command("show")
def config_show(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file to load")] = None,
):
    """Show the effective configuration after files and IMGBATCH_* variables are applied."""
    app_config = load_config_from_cli(config_file=config)
    print_config_summary(app_config)
