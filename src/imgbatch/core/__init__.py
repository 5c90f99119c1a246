"""
Core imgbatch Package

Contains shared infrastructure: the exception hierarchy and configuration.
"""

from imgbatch.core.exceptions import (
    ImgBatchError,
    ConfigurationError,
    ProcessingError,
    ErrorCode,
    ErrorContext,
    RecoverySuggestion
)

__all__ = [
    'ImgBatchError',
    'ConfigurationError',
    'ProcessingError',
    'ErrorCode',
    'ErrorContext',
    'RecoverySuggestion',
]
