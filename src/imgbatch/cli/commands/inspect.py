"""
Inspect Command

Shows how a set of inputs would be classified without converting them.
"""

from pathlib import Path
from typing import List, Annotated
import typer
from rich.table import Table

from imgbatch.cli.utils import (
    console,
    format_size,
    print_diagnostics,
    print_source_summary,
    read_raw_files,
    setup_logging,
)
from imgbatch.pipeline.orchestrator import BatchConverter
from imgbatch.processing.exceptions import ImageProcessingError


def inspect(
    inputs: Annotated[List[Path], typer.Argument(
        help="Image files and/or ZIP archives to inspect",
        exists=True, dir_okay=False, readable=True
    )],
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
):
    """
    List accepted images with their inferred format and dimensions.

    Images that cannot be decoded are still listed: decoding is only
    attempted for real during conversion.
    """
    setup_logging(verbose=verbose)

    converter = BatchConverter()
    context = converter.load(read_raw_files(inputs))

    if context.source_items:
        table = Table(title="Accepted images", show_header=True, header_style="bold cyan")
        table.add_column("Name")
        table.add_column("Format")
        table.add_column("Dimensions", justify="right")
        table.add_column("Size", justify="right")

        for item in context.source_items:
            try:
                info = converter.processor.get_image_info(item.data)
                dimensions = f"{info['width']}x{info['height']}"
            except ImageProcessingError:
                dimensions = "[red]unreadable[/red]"
            table.add_row(
                item.original_name,
                item.source_format.value,
                dimensions,
                format_size(len(item.data)),
            )
        console.print(table)

    print_source_summary(context)
    print_diagnostics(list(context.input_diagnostics), title="Skipped")

    if not context.can_convert:
        raise typer.Exit(1)
