"""
Convert Command

Converts loose images and the images inside ZIP archives to one target
format, then writes them individually and/or as a single archive.
"""

import asyncio
from pathlib import Path
from typing import Optional, List, Annotated
import typer
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from imgbatch.cli.config_utils import load_config_from_cli, build_cli_args, print_config_summary
from imgbatch.cli.error_handling import handle_error
from imgbatch.cli.utils import (
    build_results_table,
    console,
    format_size,
    print_diagnostics,
    print_header,
    print_source_summary,
    read_raw_files,
    setup_logging,
    write_results,
)
from imgbatch.core.config import AppConfig
from imgbatch.core.exceptions import ErrorCode, ProcessingError
from imgbatch.pipeline.models import RunContext
from imgbatch.pipeline.orchestrator import BatchConverter
from imgbatch.processing.exceptions import PackingError
from imgbatch.processing.formats import ImageFormat


async def _convert_with_progress(converter: BatchConverter, target_format: ImageFormat) -> RunContext:
    total = len(converter.context.source_items)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"[cyan]Converting to {target_format.value}...", total=total)

        def on_item_done(index, item, output):
            progress.advance(task)

        return await converter.convert(target_format, on_item_done=on_item_done)


def _write_outputs(converter: BatchConverter, config: AppConfig) -> None:
    output_dir = config.output.output_dir
    results = converter.results

    if config.output.write_individual:
        try:
            written = write_results(results, output_dir, overwrite=config.output.overwrite)
        except OSError as e:
            handle_error(ProcessingError(
                f"Could not write converted images to {output_dir}: {e}",
                error_code=ErrorCode.FS_PERMISSION_DENIED,
                cause=e
            ))
        console.print(f"[green]Wrote {len(written)} image(s) to {output_dir}[/green]")

    if config.output.write_archive:
        try:
            archive_data = converter.pack()
            output_dir.mkdir(parents=True, exist_ok=True)
            archive_path = output_dir / config.output.archive_name
            if archive_path.exists() and not config.output.overwrite:
                raise PackingError(
                    f"{archive_path} already exists (use --overwrite to replace it)",
                    error_code=ErrorCode.FS_INVALID_PATH
                )
            archive_path.write_bytes(archive_data)
        except PackingError as e:
            handle_error(e)
        except OSError as e:
            handle_error(PackingError(f"Could not write archive: {e}", cause=e))
        console.print(
            f"[green]Wrote archive {archive_path} ({format_size(len(archive_data))})[/green]"
        )


def convert(
    inputs: Annotated[List[Path], typer.Argument(
        help="Image files (PNG, JPEG, WEBP) and/or ZIP archives containing them",
        exists=True, dir_okay=False, readable=True
    )],
    to: Annotated[Optional[str], typer.Option("--to", "-t", help="Target format: png, jpeg (jpg) or webp")] = None,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output directory")] = None,
    archive: Annotated[Optional[bool], typer.Option("--archive/--no-archive", help="Write all results into one ZIP archive")] = None,
    archive_name: Annotated[Optional[str], typer.Option("--archive-name", help="File name of the output archive")] = None,
    individual: Annotated[Optional[bool], typer.Option("--individual/--no-individual", help="Write each converted image as its own file")] = None,
    overwrite: Annotated[Optional[bool], typer.Option("--overwrite", help="Replace existing output files")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", "-w", min=1, max=32, help="Parallel conversion threads")] = None,
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file to load")] = None,
    dry_run: Annotated[Optional[bool], typer.Option("--dry-run", help="Classify inputs without converting")] = None,
    verbose: Annotated[Optional[bool], typer.Option("--verbose", "-v", help="Enable verbose output")] = None,
    debug: Annotated[Optional[bool], typer.Option("--debug", help="Enable debug logging")] = None,
):
    """
    Convert images to PNG, JPEG or WEBP.

    ZIP archives are expanded in place; every supported entry is converted.
    Unsupported or broken files are reported and skipped.

    [bold cyan]Examples:[/bold cyan]

    • Single file: [green]imgbatch convert photo.png --to webp[/green]
    • Archive to JPEG files: [green]imgbatch convert album.zip --to jpg --individual --no-archive[/green]
    • Preview only: [green]imgbatch convert *.png album.zip --dry-run[/green]
    """
    cli_args = build_cli_args(
        to=to,
        output=output,
        archive=archive,
        archive_name=archive_name,
        individual=individual,
        overwrite=overwrite,
        workers=workers,
        dry_run=dry_run,
        verbose=verbose,
        debug=debug,
    )
    app_config = load_config_from_cli(config_file=config, cli_args=cli_args)
    setup_logging(app_config.verbose, app_config.debug)

    target_format = app_config.conversion.image_format
    print_header("imgbatch", f"Converting {len(inputs)} input(s) to {target_format.value}")
    if app_config.verbose:
        print_config_summary(app_config)

    converter = BatchConverter(max_workers=app_config.conversion.max_workers)
    context = converter.load(read_raw_files(inputs))

    print_source_summary(context)
    print_diagnostics(list(context.input_diagnostics), title="Skipped")

    if not context.can_convert:
        console.print("[red]No supported images to convert.[/red]")
        raise typer.Exit(1)

    if app_config.dry_run:
        console.print(f"[yellow]Dry run:[/yellow] {len(context.source_items)} image(s) would be converted")
        for item in context.source_items:
            console.print(f"  • {item.original_name} ({item.source_format.value})")
        return

    context = asyncio.run(_convert_with_progress(converter, target_format))

    if context.results:
        console.print(build_results_table(context.results))
    print_diagnostics(context.conversion_diagnostics, title="Failed")
    console.print(
        f"\n[bold]{len(context.results)}[/bold] converted, "
        f"[bold]{len(context.conversion_diagnostics)}[/bold] failed"
    )

    if not context.results:
        raise typer.Exit(1)

    _write_outputs(converter, app_config)
