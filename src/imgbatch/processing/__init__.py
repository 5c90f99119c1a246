"""
Image and Archive Processing

Leaf components of the conversion pipeline:

- formats: classification of names and content types into ImageFormat
- archive: in-memory ZIP unpacking and collision-safe packing
- ImageProcessor: Pillow-based decode/re-encode engine

Example usage:
    from imgbatch.processing import ImageProcessor, ImageFormat

    processor = ImageProcessor()
    output = processor.convert(data, ImageFormat.PNG, ImageFormat.WEBP.mime)
"""

from imgbatch.processing.exceptions import (
    ImageProcessingError,
    UnsupportedFormatError,
    ArchiveError,
    ArchiveOpenError,
    PackingError,
)
from imgbatch.processing.formats import (
    ImageFormat,
    RejectReason,
    Classification,
    classify,
    classify_extension,
    classify_content_type,
    get_extension,
    is_archive,
)
from imgbatch.processing.archive import (
    ARCHIVE_NAME,
    ArchiveEntry,
    ArchiveReader,
    ArchiveWriter,
    unique_filename,
)
from imgbatch.processing.image_processor import ImageProcessor

__all__ = [
    'ImageProcessingError',
    'UnsupportedFormatError',
    'ArchiveError',
    'ArchiveOpenError',
    'PackingError',
    'ImageFormat',
    'RejectReason',
    'Classification',
    'classify',
    'classify_extension',
    'classify_content_type',
    'get_extension',
    'is_archive',
    'ARCHIVE_NAME',
    'ArchiveEntry',
    'ArchiveReader',
    'ArchiveWriter',
    'unique_filename',
    'ImageProcessor',
]
