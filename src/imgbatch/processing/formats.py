"""
Format Classification

Maps file names and declared content types onto the three supported
image formats. Archive entries are classified by extension because ZIP
entries carry no content type; loose files are classified by their
declared content type only.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ImageFormat(Enum):
    """Supported image formats."""

    PNG = 'png'
    JPEG = 'jpeg'
    WEBP = 'webp'

    @property
    def mime(self) -> str:
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        """Canonical file extension written for this format."""
        return 'jpg' if self is ImageFormat.JPEG else self.value

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @classmethod
    def parse(cls, value: str) -> 'ImageFormat':
        """Parse a format name or extension (``jpg`` is accepted)."""
        try:
            return EXTENSION_FORMATS[value.strip().lower().lstrip('.')]
        except KeyError:
            raise ValueError(
                f"Unsupported image format '{value}'. "
                f"Choose one of: {', '.join(f.value for f in cls)}"
            ) from None

    @classmethod
    def from_mime(cls, mime: str) -> Optional['ImageFormat']:
        return MIME_FORMATS.get(_normalize_mime(mime))


class RejectReason(Enum):
    """Why an input could not be accepted."""

    UNSUPPORTED_EXTENSION = 'unsupported_extension'
    UNSUPPORTED_TYPE = 'unsupported_type'
    UNREADABLE = 'unreadable'


EXTENSION_FORMATS = {
    'png': ImageFormat.PNG,
    'jpg': ImageFormat.JPEG,
    'jpeg': ImageFormat.JPEG,
    'webp': ImageFormat.WEBP,
}

MIME_FORMATS = {
    'image/png': ImageFormat.PNG,
    'image/jpeg': ImageFormat.JPEG,
    'image/webp': ImageFormat.WEBP,
}

ZIP_CONTENT_TYPES = frozenset({
    'application/zip',
    'application/x-zip',
    'application/x-zip-compressed',
})

# Declared types that name a supported format without being one of them exactly
NEAR_SUPPORTED_TYPE = re.compile(r"image/(png|jpeg|webp)")


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one file name or archive entry."""

    format: Optional[ImageFormat] = None
    reason: Optional[RejectReason] = None

    @property
    def accepted(self) -> bool:
        return self.format is not None

    @classmethod
    def accept(cls, image_format: ImageFormat) -> 'Classification':
        return cls(format=image_format)

    @classmethod
    def reject(cls, reason: RejectReason) -> 'Classification':
        return cls(reason=reason)


def _normalize_mime(mime: Optional[str]) -> str:
    if not mime:
        return ''
    return mime.split(';', 1)[0].strip().lower()


def get_extension(name: str) -> str:
    """Return the text after the last dot, or an empty string."""
    if '.' not in name:
        return ''
    return name.rsplit('.', 1)[1]


def classify_extension(name: str) -> Classification:
    image_format = EXTENSION_FORMATS.get(get_extension(name).lower())
    if image_format is None:
        return Classification.reject(RejectReason.UNSUPPORTED_EXTENSION)
    return Classification.accept(image_format)


def classify_content_type(declared_type: Optional[str]) -> Classification:
    """
    Classify by declared content type.

    Only a type that mentions a supported image format without matching
    it exactly (``image/jpeg2000``) is an unsupported declared type. A
    missing or unrelated type is reported as an unsupported extension.
    """
    mime = _normalize_mime(declared_type)
    if not mime:
        return Classification.reject(RejectReason.UNSUPPORTED_EXTENSION)
    image_format = MIME_FORMATS.get(mime)
    if image_format is not None:
        return Classification.accept(image_format)
    if NEAR_SUPPORTED_TYPE.search(mime):
        return Classification.reject(RejectReason.UNSUPPORTED_TYPE)
    return Classification.reject(RejectReason.UNSUPPORTED_EXTENSION)


def classify(name: str, declared_type: Optional[str] = None,
             from_archive: bool = False) -> Classification:
    """
    Decide the canonical format of an input.

    Args:
        name: File or archive entry name
        declared_type: Content type declared for a loose file
        from_archive: Whether the input is an archive entry

    Returns:
        Accepted or rejected Classification
    """
    if from_archive:
        result = classify_extension(name)
    else:
        result = classify_content_type(declared_type)

    logger.debug(
        f"Classified {name!r} (type={declared_type!r}, archive={from_archive}): "
        f"{result.format.value if result.accepted else result.reason.value}"
    )
    return result


def is_zip_name(name: str) -> bool:
    return name.lower().endswith('.zip')


def is_zip_type(declared_type: Optional[str]) -> bool:
    return _normalize_mime(declared_type) in ZIP_CONTENT_TYPES


def is_archive(name: str, declared_type: Optional[str] = None) -> bool:
    """An input is treated as a ZIP archive by suffix or by declared type."""
    return is_zip_name(name) or is_zip_type(declared_type)
