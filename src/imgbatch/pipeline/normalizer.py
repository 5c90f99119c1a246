"""
Input Normalizer

Flattens a selection of loose files and ZIP archives into an ordered
work list. Archive entries take the archive's position in the flow and
are classified individually by extension; loose files are classified
by their declared content type.
"""

import logging
from typing import Iterable, List, Optional

from imgbatch.pipeline.models import (
    Diagnostic,
    DiagnosticKind,
    NormalizedInput,
    RawFile,
    SourceFormatIndicator,
    SourceItem,
)
from imgbatch.processing.archive import ArchiveReader
from imgbatch.processing.exceptions import ArchiveOpenError
from imgbatch.processing.formats import (
    RejectReason,
    classify,
    is_archive,
    is_zip_name,
    is_zip_type,
)

logger = logging.getLogger(__name__)


def _archive_failure_kind(raw: RawFile) -> DiagnosticKind:
    """
    Pick the diagnostic for an archive that would not open.

    When the name and the declared type disagree about the input being a
    ZIP, the failure is reported as a type mismatch rather than a broken
    archive.
    """
    by_name = is_zip_name(raw.name)
    by_type = is_zip_type(raw.content_type)
    if by_name and raw.content_type and not by_type:
        return DiagnosticKind.ARCHIVE_TYPE_MISMATCH
    if by_type and not by_name:
        return DiagnosticKind.ARCHIVE_TYPE_MISMATCH
    return DiagnosticKind.ARCHIVE_OPEN_FAILURE


def _expand_archive(raw: RawFile, reader: ArchiveReader,
                    items: List[SourceItem], diagnostics: List[Diagnostic]) -> None:
    try:
        entries = reader.unpack(raw.data, raw.name)
    except ArchiveOpenError:
        diagnostics.append(Diagnostic.create(_archive_failure_kind(raw), raw.name))
        return

    for entry in entries:
        classification = classify(entry.name, from_archive=True)
        if not classification.accepted:
            diagnostics.append(Diagnostic.create(
                DiagnosticKind.from_reject_reason(classification.reason), entry.name
            ))
            continue
        if not entry.readable:
            diagnostics.append(Diagnostic.create(
                DiagnosticKind.from_reject_reason(RejectReason.UNREADABLE), entry.name
            ))
            continue
        items.append(SourceItem(entry.data, entry.name, classification.format))


def normalize(raw_files: Iterable[RawFile],
              reader: Optional[ArchiveReader] = None) -> NormalizedInput:
    """
    Build the work list for a conversion run.

    Args:
        raw_files: Selected inputs in selection order
        reader: Archive reader to use (a default one if omitted)

    Returns:
        NormalizedInput with accepted items, diagnostics and the inferred
        source format indicator
    """
    reader = reader or ArchiveReader()
    items: List[SourceItem] = []
    diagnostics: List[Diagnostic] = []

    for raw in raw_files:
        if is_archive(raw.name, raw.content_type):
            _expand_archive(raw, reader, items, diagnostics)
            continue

        classification = classify(raw.name, raw.content_type)
        if classification.accepted:
            items.append(SourceItem(raw.data, raw.name, classification.format))
        else:
            diagnostics.append(Diagnostic.create(
                DiagnosticKind.from_reject_reason(classification.reason), raw.name
            ))

    indicator = SourceFormatIndicator.from_items(items)
    logger.info(
        f"Normalized input: {len(items)} accepted, {len(diagnostics)} rejected, "
        f"source format {indicator.value or 'none'}"
    )
    return NormalizedInput(tuple(items), tuple(diagnostics), indicator)
