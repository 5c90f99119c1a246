"""
CLI Utilities

Shared utilities for CLI commands: logging setup, input loading,
result writing and common formatting.
"""

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Optional, Set

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from imgbatch.pipeline.models import ConversionResult, Diagnostic, RawFile, RunContext
from imgbatch.processing.archive import unique_filename

console = Console()

# Older mimetypes tables do not know WEBP
mimetypes.add_type('image/webp', '.webp')


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Set up logging configuration for the application."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )


def guess_content_type(path: Path) -> Optional[str]:
    """Guess the declared content type of a file from its name."""
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type


def read_raw_files(paths: Iterable[Path]) -> List[RawFile]:
    """
    Read input files into memory.

    The declared content type is guessed from the file name, the same
    information a browser file picker would attach.
    """
    raw_files = []
    for path in paths:
        raw_files.append(RawFile(
            name=path.name,
            data=path.read_bytes(),
            content_type=guess_content_type(path),
        ))
    return raw_files


def write_results(results: Iterable[ConversionResult], output_dir: Path,
                  overwrite: bool = False) -> List[Path]:
    """
    Write converted images into ``output_dir``.

    Only the base name of each result is used, so archive entry paths never
    escape the output directory. Names are made unique within the run, and
    against existing files unless ``overwrite`` is set.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    used: Set[str] = set()
    if not overwrite:
        used.update(p.name for p in output_dir.iterdir())

    written = []
    for result in results:
        name = unique_filename(Path(result.filename).name, used)
        used.add(name)
        path = output_dir / name
        path.write_bytes(result.data)
        written.append(path)
    return written


def print_header(title: str, subtitle: Optional[str] = None) -> None:
    """Print a formatted header for CLI output."""
    if subtitle:
        header_text = f"[bold cyan]{title}[/bold cyan]\n[dim]{subtitle}[/dim]"
    else:
        header_text = f"[bold cyan]{title}[/bold cyan]"

    console.print(Panel(header_text, border_style="cyan"))


def print_diagnostics(diagnostics: List[Diagnostic], title: str = "Problems") -> None:
    if not diagnostics:
        return
    console.print(f"\n[bold yellow]{title}:[/bold yellow]")
    for diagnostic in diagnostics:
        console.print(f"  [yellow]•[/yellow] {diagnostic.message}")


def print_source_summary(context: RunContext) -> None:
    """Print the inferred source format and accepted item count."""
    indicator = context.source_format
    if indicator.enabled:
        console.print(
            f"Source format: [cyan]{indicator.value}[/cyan] "
            f"({len(context.source_items)} image(s) accepted)"
        )
    else:
        console.print("Source format: [dim]none[/dim] (no supported images found)")


def build_results_table(results: List[ConversionResult]) -> Table:
    table = Table(title="Converted", show_header=True, header_style="bold cyan")
    table.add_column("Source", style="dim")
    table.add_column("Output")
    table.add_column("Size", justify="right")
    for result in results:
        table.add_row(result.source_name, result.filename, format_size(len(result.data)))
    return table


def format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"
