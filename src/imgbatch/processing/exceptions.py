"""
Processing Exceptions

Exception classes for image conversion and ZIP archive operations.
"""

from typing import Iterable, Optional

from imgbatch.core.exceptions import ErrorCode, ProcessingError, RecoverySuggestion


class ImageProcessingError(ProcessingError):
    """Exception raised during image processing operations."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('error_code', ErrorCode.PROCESSING_CORRUPT_DATA)
        super().__init__(message, **kwargs)


class UnsupportedFormatError(ProcessingError):
    """Exception raised when attempting to produce an unsupported format."""

    def __init__(self, format_name: str, supported_formats: Iterable[str]):
        self.format_name = format_name
        self.supported_formats = sorted(supported_formats)
        message = (
            f"Unsupported format: {format_name}. "
            f"Supported formats: {', '.join(self.supported_formats)}"
        )
        super().__init__(message, error_code=ErrorCode.PROCESSING_UNSUPPORTED_FORMAT)


class ArchiveError(ProcessingError):
    """Base exception for ZIP archive problems."""
    pass


class ArchiveOpenError(ArchiveError):
    """Exception raised when a container cannot be opened as a ZIP archive."""

    def __init__(self, archive_name: str, cause: Optional[Exception] = None):
        self.archive_name = archive_name
        super().__init__(
            f"Could not open {archive_name} as a ZIP archive",
            error_code=ErrorCode.ARCHIVE_OPEN_FAILED,
            filename=archive_name,
            cause=cause,
        )


class PackingError(ArchiveError):
    """Exception raised when the output archive cannot be produced."""

    def __init__(self, message: str, cause: Optional[Exception] = None,
                 error_code: ErrorCode = ErrorCode.ARCHIVE_PACK_FAILED):
        super().__init__(message, error_code=error_code, cause=cause)
        if error_code == ErrorCode.ARCHIVE_EMPTY:
            self.add_suggestion(RecoverySuggestion(
                action="Convert something first",
                description="No image was converted successfully, so there is nothing to pack.",
                priority=1
            ))
