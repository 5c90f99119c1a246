"""
Conversion Pipeline

Input normalization, per-item conversion and run-state management.
"""

from imgbatch.pipeline.models import (
    MIXED_FORMAT,
    ConversionOutcome,
    ConversionResult,
    Diagnostic,
    DiagnosticKind,
    NormalizedInput,
    RawFile,
    RunContext,
    SourceFormatIndicator,
    SourceItem,
)
from imgbatch.pipeline.normalizer import normalize
from imgbatch.pipeline.orchestrator import BatchConverter, change_extension, run_conversion

__all__ = [
    'MIXED_FORMAT',
    'ConversionOutcome',
    'ConversionResult',
    'Diagnostic',
    'DiagnosticKind',
    'NormalizedInput',
    'RawFile',
    'RunContext',
    'SourceFormatIndicator',
    'SourceItem',
    'normalize',
    'BatchConverter',
    'change_extension',
    'run_conversion',
]
