"""
Configuration Utilities for CLI Commands

Shared helpers for turning CLI options into a validated AppConfig and
displaying it.
"""

from typing import Dict, Any, Optional
from rich.table import Table

from imgbatch.cli.error_handling import handle_error
from imgbatch.cli.utils import console
from imgbatch.core.config import ConfigManager, AppConfig
from imgbatch.core.exceptions import ImgBatchError


def load_config_from_cli(
    config_file: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None
) -> AppConfig:
    """
    Load configuration from CLI arguments with proper error handling.

    Args:
        config_file: Optional path to configuration file
        cli_args: Dictionary of CLI arguments to override config

    Returns:
        Validated AppConfig instance

    Raises:
        typer.Exit: If configuration is invalid
    """
    try:
        config_manager = ConfigManager(config_file=config_file)
        app_config = config_manager.load_config(cli_args=cli_args or {})
    except ImgBatchError as e:
        handle_error(e)

    warnings = config_manager.validate_config(app_config)
    if warnings:
        console.print("[yellow]Configuration warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  • {warning}")
        console.print()

    return app_config


def build_cli_args(**kwargs: Any) -> Dict[str, Any]:
    """
    Collect CLI options into a dictionary for ConfigManager.

    Options left at None are dropped so lower-precedence sources apply.
    """
    return {key: value for key, value in kwargs.items() if value is not None}


def print_config_summary(config: AppConfig) -> None:
    """
    Print a formatted summary of the current configuration.

    Args:
        config: AppConfig instance to summarize
    """
    table = Table(title="Configuration Summary", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="dim", width=20)
    table.add_column("Value", style="white", width=40)

    table.add_row("Target Format", config.conversion.target_format)
    table.add_row("Workers", str(config.conversion.max_workers))
    table.add_row("Output Dir", str(config.output.output_dir))
    table.add_row("Archive", config.output.archive_name if config.output.write_archive else "✗ Disabled")
    table.add_row("Individual Files", "✓ Yes" if config.output.write_individual else "✗ No")
    table.add_row("Overwrite", "✓ Yes" if config.output.overwrite else "✗ No")
    table.add_row("Dry Run", "✓ Yes" if config.dry_run else "✗ No")

    console.print(table)
