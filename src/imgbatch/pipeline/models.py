"""
Pipeline Data Models

Dataclasses passed between the normalizer, the orchestrator and the
archive writer, plus the per-run context that replaces global state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from imgbatch.processing.formats import ImageFormat, RejectReason

MIXED_FORMAT = "mixed"


class DiagnosticKind(Enum):
    """Category of a rejection or failure."""

    UNSUPPORTED_EXTENSION = 'unsupported_extension'
    UNSUPPORTED_TYPE = 'unsupported_type'
    UNREADABLE = 'unreadable'
    ARCHIVE_OPEN_FAILURE = 'archive_open_failure'
    ARCHIVE_TYPE_MISMATCH = 'archive_type_mismatch'
    CONVERSION_FAILURE = 'conversion_failure'

    @classmethod
    def from_reject_reason(cls, reason: RejectReason) -> 'DiagnosticKind':
        return cls(reason.value)


DIAGNOSTIC_MESSAGES = {
    DiagnosticKind.UNSUPPORTED_EXTENSION: "{name} has an unsupported extension.",
    DiagnosticKind.UNSUPPORTED_TYPE: "{name} is not a supported image type.",
    DiagnosticKind.UNREADABLE: "{name} could not be read from its archive.",
    DiagnosticKind.ARCHIVE_OPEN_FAILURE: "{name} could not be unzipped.",
    DiagnosticKind.ARCHIVE_TYPE_MISMATCH: "{name} looked like a ZIP archive but could not be processed as one.",
    DiagnosticKind.CONVERSION_FAILURE: "{name} could not be converted.",
}


@dataclass(frozen=True)
class RawFile:
    """One selected input: a loose image or a ZIP archive."""

    name: str
    data: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class SourceItem:
    """An accepted image waiting for conversion."""

    data: bytes
    original_name: str
    source_format: ImageFormat


@dataclass(frozen=True)
class Diagnostic:
    """Human-readable reason a file was rejected or failed."""

    message: str
    filename: str
    kind: DiagnosticKind

    @classmethod
    def create(cls, kind: DiagnosticKind, filename: str) -> 'Diagnostic':
        return cls(DIAGNOSTIC_MESSAGES[kind].format(name=filename), filename, kind)


@dataclass(frozen=True)
class ConversionResult:
    """A successfully converted image."""

    data: bytes
    filename: str
    source_name: str


@dataclass(frozen=True)
class SourceFormatIndicator:
    """
    Read-only summary of the accepted items' formats.

    ``value`` is a format tag when every item shares it, ``"mixed"`` when
    they do not, and None when nothing was accepted (``enabled`` is then
    False and conversion is unavailable). The indicator is never editable:
    the source format is always inferred.
    """

    value: Optional[str]
    enabled: bool
    editable: bool = False

    @classmethod
    def from_items(cls, items: List[SourceItem]) -> 'SourceFormatIndicator':
        if not items:
            return cls(value=None, enabled=False)
        formats = {item.source_format for item in items}
        if len(formats) == 1:
            return cls(value=formats.pop().value, enabled=True)
        return cls(value=MIXED_FORMAT, enabled=True)


@dataclass(frozen=True)
class NormalizedInput:
    """Output of the input normalizer."""

    source_items: Tuple[SourceItem, ...]
    diagnostics: Tuple[Diagnostic, ...]
    source_format: SourceFormatIndicator


@dataclass(frozen=True)
class ConversionOutcome:
    """Results and failures of one conversion pass, in input order."""

    results: Tuple[ConversionResult, ...]
    diagnostics: Tuple[Diagnostic, ...]


@dataclass
class RunContext:
    """
    State of the single active run.

    A new context is created for every loaded input selection; results and
    conversion diagnostics are replaced by every conversion. ``generation``
    identifies the load or conversion that last wrote to the context.
    """

    generation: int = 0
    source_items: Tuple[SourceItem, ...] = ()
    input_diagnostics: Tuple[Diagnostic, ...] = ()
    conversion_diagnostics: List[Diagnostic] = field(default_factory=list)
    results: List[ConversionResult] = field(default_factory=list)
    source_format: SourceFormatIndicator = field(
        default_factory=lambda: SourceFormatIndicator(value=None, enabled=False)
    )
    target_format: Optional[ImageFormat] = None

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self.input_diagnostics) + list(self.conversion_diagnostics)

    @property
    def can_convert(self) -> bool:
        return bool(self.source_items)

    @property
    def can_pack(self) -> bool:
        return bool(self.results)
