"""
Tests for in-memory ZIP reading and writing.
"""

import io
import zipfile
from dataclasses import dataclass
from unittest.mock import patch

import pytest

from imgbatch.processing.archive import (
    ARCHIVE_NAME,
    ArchiveReader,
    ArchiveWriter,
    unique_filename,
)
from imgbatch.processing.exceptions import ArchiveOpenError, PackingError


@dataclass
class Packable:
    filename: str
    data: bytes


class TestUniqueFilename:
    """Test collision-safe naming."""

    def test_unused_name_unchanged(self):
        assert unique_filename('a.png', set()) == 'a.png'

    def test_first_collision(self):
        assert unique_filename('a.png', {'a.png'}) == 'a(1).png'

    def test_skips_taken_counters(self):
        assert unique_filename('b.png', {'b.png', 'b(1).png'}) == 'b(2).png'

    def test_no_extension(self):
        assert unique_filename('README', {'README'}) == 'README(1)'

    def test_empty_base_becomes_file(self):
        assert unique_filename('.png', {'.png'}) == 'file(1).png'

    def test_multiple_dots_keep_inner_parts(self):
        assert unique_filename('my.photo.jpg', {'my.photo.jpg'}) == 'my.photo(1).jpg'

    def test_does_not_modify_used(self):
        used = {'a.png'}
        unique_filename('a.png', used)
        assert used == {'a.png'}


class TestArchiveReader:
    """Test ArchiveReader.unpack."""

    def test_entries_in_order(self, make_zip):
        data = make_zip([('z.png', b'1'), ('a.jpg', b'22'), ('m.webp', b'333')])

        entries = ArchiveReader().unpack(data, 'in.zip')

        assert [e.name for e in entries] == ['z.png', 'a.jpg', 'm.webp']
        assert [e.data for e in entries] == [b'1', b'22', b'333']
        assert all(e.readable for e in entries)

    def test_skips_directories(self, make_zip):
        data = make_zip([('photos/a.png', b'x')], directories=['photos'])

        entries = ArchiveReader().unpack(data)

        assert [e.name for e in entries] == ['photos/a.png']

    def test_zero_length_entry_passes_through(self, make_zip):
        entries = ArchiveReader().unpack(make_zip([('empty.png', b'')]))
        assert entries[0].data == b''
        assert entries[0].readable

    def test_invalid_container_raises(self):
        with pytest.raises(ArchiveOpenError) as exc_info:
            ArchiveReader().unpack(b'not a zip at all', 'broken.zip')

        assert exc_info.value.archive_name == 'broken.zip'
        assert exc_info.value.context.filename == 'broken.zip'

    def test_corrupt_entry_reported_individually(self, make_zip):
        data = make_zip([('good.png', b'good data'), ('bad.png', b'bad data')])

        original_read = zipfile.ZipFile.read

        def flaky_read(self, name, pwd=None):
            entry_name = name.filename if isinstance(name, zipfile.ZipInfo) else name
            if entry_name == 'bad.png':
                raise zipfile.BadZipFile("Bad CRC-32 for file 'bad.png'")
            return original_read(self, name, pwd)

        with patch.object(zipfile.ZipFile, 'read', flaky_read):
            entries = ArchiveReader().unpack(data, 'in.zip')

        assert entries[0].data == b'good data'
        assert entries[1].name == 'bad.png'
        assert entries[1].data is None
        assert not entries[1].readable
        assert 'CRC' in entries[1].error


class TestArchiveWriter:
    """Test ArchiveWriter.pack."""

    def test_archive_name_constant(self):
        assert ARCHIVE_NAME == 'converted_images.zip'

    def test_pack_roundtrip(self, read_zip_names):
        results = [Packable('one.png', b'1'), Packable('two.png', b'2')]

        data = ArchiveWriter().pack(results)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == ['one.png', 'two.png']
            assert archive.read('two.png') == b'2'
            assert archive.getinfo('one.png').compress_type == zipfile.ZIP_DEFLATED

    def test_two_collisions(self, read_zip_names):
        data = ArchiveWriter().pack([Packable('a.png', b'1'), Packable('a.png', b'2')])
        assert read_zip_names(data) == ['a.png', 'a(1).png']

    def test_three_collisions(self, read_zip_names):
        data = ArchiveWriter().pack([Packable('b.png', b'1')] * 3)
        assert read_zip_names(data) == ['b.png', 'b(1).png', 'b(2).png']

    def test_collision_with_existing_suffixed_name(self):
        names = ArchiveWriter().assign_names(['a(1).png', 'a.png', 'a.png'])
        assert names == ['a(1).png', 'a.png', 'a(2).png']

    def test_names_are_per_pack_operation(self, read_zip_names):
        writer = ArchiveWriter()
        writer.pack([Packable('a.png', b'1')])
        data = writer.pack([Packable('a.png', b'2')])
        assert read_zip_names(data) == ['a.png']

    def test_empty_pack_is_valid_archive(self, read_zip_names):
        assert read_zip_names(ArchiveWriter().pack([])) == []

    def test_write_failure_raises_packing_error(self):
        with patch.object(zipfile.ZipFile, 'writestr', side_effect=OSError("disk on fire")):
            with pytest.raises(PackingError, match="disk on fire"):
                ArchiveWriter().pack([Packable('a.png', b'1')])
