"""
Shared Test Fixtures

Builds real PNG, JPEG and WEBP images and ZIP archives in memory so tests
exercise Pillow and zipfile end to end without touching sample files.
"""

import io
import zipfile
from typing import List, Tuple

import pytest
from PIL import Image


def make_image_bytes(fmt: str = 'PNG', size: Tuple[int, int] = (32, 24),
                     mode: str = 'RGB', color=(200, 30, 30)) -> bytes:
    """Encode a solid-color image in the given Pillow format."""
    if mode == 'RGBA' and len(color) == 3:
        color = color + (128,)
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def make_zip_bytes(entries: List[Tuple[str, bytes]], directories: List[str] = ()) -> bytes:
    """Pack (name, data) pairs, plus optional directory entries, into a ZIP."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
        for directory in directories:
            archive.writestr(zipfile.ZipInfo(directory.rstrip('/') + '/'), b'')
        for name, data in entries:
            archive.writestr(name, data)
    return buffer.getvalue()


def zip_names(data: bytes) -> List[str]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return archive.namelist()


@pytest.fixture
def png_bytes():
    return make_image_bytes('PNG')


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes('JPEG')


@pytest.fixture
def webp_bytes():
    return make_image_bytes('WEBP')


@pytest.fixture
def rgba_png_bytes():
    return make_image_bytes('PNG', size=(40, 30), mode='RGBA', color=(0, 255, 0, 128))


@pytest.fixture
def corrupt_bytes():
    return b"definitely not an image"


@pytest.fixture
def make_image():
    """Factory fixture for encoded images."""
    return make_image_bytes


@pytest.fixture
def make_zip():
    """Factory fixture for in-memory ZIP archives."""
    return make_zip_bytes


@pytest.fixture
def read_zip_names():
    return zip_names
