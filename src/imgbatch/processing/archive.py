"""
ZIP Archive Reading and Writing

In-memory unpacking of input archives and packing of converted results.
Nothing touches the filesystem: both directions work on ``bytes``.
"""

import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Set

from imgbatch.processing.exceptions import ArchiveOpenError, PackingError

logger = logging.getLogger(__name__)

ARCHIVE_NAME = "converted_images.zip"

# Raised by zipfile for damaged or unsupported member data
ENTRY_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    OSError,
    NotImplementedError,
    RuntimeError,
)


class PackableItem(Protocol):
    filename: str
    data: bytes


@dataclass(frozen=True)
class ArchiveEntry:
    """A non-directory archive member with its raw bytes, or the read error."""

    name: str
    data: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def readable(self) -> bool:
        return self.error is None


def unique_filename(filename: str, used: Set[str]) -> str:
    """
    Return ``filename`` or the first ``base(n).ext`` variant not in ``used``.

    Args:
        filename: Proposed name
        used: Names already taken in the current pack operation

    Returns:
        A name not present in ``used`` (``used`` itself is not modified)
    """
    if filename not in used:
        return filename

    if '.' in filename:
        base, ext = filename.rsplit('.', 1)
        suffix = f".{ext}"
    else:
        base, suffix = filename, ''
    base = base or 'file'

    counter = 1
    while True:
        candidate = f"{base}({counter}){suffix}"
        if candidate not in used:
            return candidate
        counter += 1


class ArchiveReader:
    """Unpacks a ZIP byte stream into named entries."""

    def unpack(self, data: bytes, archive_name: str = "archive.zip") -> List[ArchiveEntry]:
        """
        Read every non-directory entry in enumeration order.

        Args:
            data: Raw archive bytes
            archive_name: Name used in diagnostics

        Returns:
            List of ArchiveEntry objects

        Raises:
            ArchiveOpenError: If the container itself cannot be opened
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError, EOFError) as e:
            logger.warning(f"Failed to open archive {archive_name}: {e}")
            raise ArchiveOpenError(archive_name, cause=e) from e

        entries = []
        with archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                try:
                    entries.append(ArchiveEntry(info.filename, data=archive.read(info)))
                except ENTRY_READ_ERRORS as e:
                    logger.warning(f"Could not read {info.filename} from {archive_name}: {e}")
                    entries.append(ArchiveEntry(info.filename, error=str(e)))

        logger.debug(f"Unpacked {len(entries)} entries from {archive_name}")
        return entries


class ArchiveWriter:
    """Packs named byte buffers into a single ZIP byte stream."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression

    def assign_names(self, filenames: Iterable[str]) -> List[str]:
        """Resolve collisions for a sequence of names, first come first served."""
        used: Set[str] = set()
        assigned = []
        for filename in filenames:
            name = unique_filename(filename, used)
            used.add(name)
            assigned.append(name)
        return assigned

    def pack(self, results: Iterable[PackableItem]) -> bytes:
        """
        Pack converted results into an archive, in order.

        Args:
            results: Objects exposing ``filename`` and ``data``

        Returns:
            The complete archive bytes

        Raises:
            PackingError: If the archive cannot be produced
        """
        items = list(results)
        names = self.assign_names(item.filename for item in items)

        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, 'w', compression=self.compression) as archive:
                for name, item in zip(names, items):
                    archive.writestr(name, item.data)
        except (zipfile.LargeZipFile, OSError, ValueError) as e:
            logger.error(f"Failed to pack {len(items)} files: {e}")
            raise PackingError(f"Failed to create archive: {e}", cause=e) from e

        logger.info(f"Packed {len(items)} files into archive ({buffer.tell()} bytes)")
        return buffer.getvalue()
