"""
Conversion Orchestrator

Drives the conversion engine over a work list with per-item failure
isolation, and owns the run context of a batch session. Items are
converted on a thread pool; results are gathered by index so output
order always matches input order.
"""

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence

from imgbatch.core.exceptions import ErrorCode
from imgbatch.pipeline.models import (
    ConversionOutcome,
    ConversionResult,
    Diagnostic,
    DiagnosticKind,
    RawFile,
    RunContext,
    SourceItem,
)
from imgbatch.pipeline.normalizer import normalize
from imgbatch.processing.archive import ArchiveReader, ArchiveWriter
from imgbatch.processing.exceptions import PackingError
from imgbatch.processing.formats import ImageFormat
from imgbatch.processing.image_processor import ImageProcessor

logger = logging.getLogger(__name__)

ItemCallback = Callable[[int, SourceItem, Optional[bytes]], None]


def change_extension(filename: str, new_ext: str) -> str:
    """Replace the text after the last dot, or append one if there is none."""
    if '.' not in filename:
        return f"{filename}.{new_ext}"
    return f"{filename.rsplit('.', 1)[0]}.{new_ext}"


async def run_conversion(
    source_items: Sequence[SourceItem],
    target_format: ImageFormat,
    processor: Optional[ImageProcessor] = None,
    max_workers: int = 4,
    on_item_done: Optional[ItemCallback] = None,
) -> ConversionOutcome:
    """
    Convert every source item to ``target_format``.

    Args:
        source_items: Work list in input order
        target_format: Desired output format
        processor: Conversion engine (a default ImageProcessor if omitted)
        max_workers: Thread pool size
        on_item_done: Called on the event loop as each item finishes;
            exceptions it raises are logged and do not affect the run

    Returns:
        ConversionOutcome with results and failure diagnostics in input order
    """
    processor = processor or ImageProcessor()
    loop = asyncio.get_running_loop()

    def convert_item(item: SourceItem) -> Optional[bytes]:
        try:
            return processor.convert(item.data, item.source_format, target_format.mime)
        except Exception as e:
            logger.warning(f"Unexpected error converting {item.original_name}: {e}")
            return None

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="imgbatch") as pool:

        async def process(index: int, item: SourceItem) -> Optional[bytes]:
            output = await loop.run_in_executor(pool, convert_item, item)
            if on_item_done:
                try:
                    on_item_done(index, item, output)
                except Exception as e:
                    logger.warning(f"Progress callback failed for {item.original_name}: {e}")
            return output

        outputs = await asyncio.gather(
            *(process(index, item) for index, item in enumerate(source_items))
        )

    results: List[ConversionResult] = []
    diagnostics: List[Diagnostic] = []
    for item, output in zip(source_items, outputs):
        if output is None:
            diagnostics.append(Diagnostic.create(DiagnosticKind.CONVERSION_FAILURE, item.original_name))
            continue
        results.append(ConversionResult(
            data=output,
            filename=change_extension(item.original_name, target_format.extension),
            source_name=item.original_name,
        ))

    logger.info(
        f"Converted {len(results)}/{len(source_items)} images to {target_format.value}"
    )
    return ConversionOutcome(tuple(results), tuple(diagnostics))


class BatchConverter:
    """
    Session object holding the single active run.

    Every ``load`` and every ``convert`` takes a new generation number.
    A conversion only commits its results if its generation is still the
    current one when it finishes, so work started before a newer load or
    conversion can never leak into the newer state.
    """

    def __init__(
        self,
        processor: Optional[ImageProcessor] = None,
        reader: Optional[ArchiveReader] = None,
        writer: Optional[ArchiveWriter] = None,
        max_workers: int = 4,
    ):
        self.processor = processor or ImageProcessor()
        self.reader = reader or ArchiveReader()
        self.writer = writer or ArchiveWriter()
        self.max_workers = max_workers
        self.context = RunContext()

        self._lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def load(self, raw_files: Iterable[RawFile]) -> RunContext:
        """
        Replace the current run with a freshly normalized input set.

        The new generation is taken when the context is installed, so a
        load always supersedes any conversion started while it was
        normalizing.
        """
        normalized = normalize(raw_files, self.reader)

        with self._lock:
            self._generation += 1
            context = RunContext(
                generation=self._generation,
                source_items=normalized.source_items,
                input_diagnostics=normalized.diagnostics,
                source_format=normalized.source_format,
            )
            self.context = context
        return context

    async def convert(self, target_format: ImageFormat,
                      on_item_done: Optional[ItemCallback] = None) -> RunContext:
        """
        Convert the loaded source items, replacing any previous results.

        Does nothing when no items were accepted.
        """
        with self._lock:
            context = self.context
            if not context.can_convert:
                logger.info("Nothing to convert")
                return context
            self._generation += 1
            generation = self._generation
            context.generation = generation
            context.target_format = target_format
            context.results = []
            context.conversion_diagnostics = []
            items = context.source_items

        outcome = await run_conversion(
            items,
            target_format,
            processor=self.processor,
            max_workers=self.max_workers,
            on_item_done=on_item_done,
        )

        with self._lock:
            if generation != self._generation or self.context is not context:
                logger.info(f"Discarding results of superseded conversion (generation {generation})")
                return self.context
            context.results = list(outcome.results)
            context.conversion_diagnostics = list(outcome.diagnostics)
        return context

    @property
    def results(self) -> List[ConversionResult]:
        return list(self.context.results)

    def get_result(self, filename: str) -> Optional[ConversionResult]:
        """Return the first result with the given output filename."""
        for result in self.context.results:
            if result.filename == filename:
                return result
        return None

    def pack(self) -> bytes:
        """
        Pack the current results into a ZIP archive.

        Raises:
            PackingError: If there are no results or the archive cannot be built
        """
        results = self.results
        if not results:
            raise PackingError("No converted images to pack", error_code=ErrorCode.ARCHIVE_EMPTY)
        return self.writer.pack(results)
