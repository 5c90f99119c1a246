"""
Tests for the input normalizer.
"""

import pytest

from imgbatch.pipeline.models import (
    MIXED_FORMAT,
    Diagnostic,
    DiagnosticKind,
    RawFile,
    SourceFormatIndicator,
    SourceItem,
)
from imgbatch.pipeline.normalizer import normalize
from imgbatch.processing.archive import ArchiveEntry, ArchiveReader
from imgbatch.processing.formats import ImageFormat


class TestLooseFiles:
    """Loose files are classified by declared content type."""

    def test_accepts_supported_types(self, png_bytes, jpeg_bytes):
        normalized = normalize([
            RawFile('a.png', png_bytes, 'image/png'),
            RawFile('b.jpg', jpeg_bytes, 'image/jpeg'),
        ])

        assert [i.original_name for i in normalized.source_items] == ['a.png', 'b.jpg']
        assert [i.source_format for i in normalized.source_items] == [ImageFormat.PNG, ImageFormat.JPEG]
        assert normalized.source_items[0].data == png_bytes
        assert normalized.diagnostics == ()

    def test_declared_type_wins_over_extension(self, png_bytes):
        normalized = normalize([
            RawFile('photo.png', png_bytes, 'image/jpeg'),
            RawFile('photo.txt', png_bytes, 'image/png'),
        ])

        assert [i.source_format for i in normalized.source_items] == [ImageFormat.JPEG, ImageFormat.PNG]

    def test_unrelated_declared_type(self, png_bytes):
        normalized = normalize([RawFile('photo.png', png_bytes, 'image/gif')])

        assert normalized.source_items == ()
        assert normalized.diagnostics[0].kind is DiagnosticKind.UNSUPPORTED_EXTENSION
        assert normalized.diagnostics[0].message == 'photo.png has an unsupported extension.'

    def test_unsupported_declared_type(self, png_bytes):
        normalized = normalize([RawFile('photo.png', png_bytes, 'image/jpeg2000')])

        assert normalized.source_items == ()
        assert normalized.diagnostics[0].kind is DiagnosticKind.UNSUPPORTED_TYPE
        assert normalized.diagnostics[0].filename == 'photo.png'
        assert 'photo.png' in normalized.diagnostics[0].message

    def test_missing_declared_type(self):
        normalized = normalize([RawFile('notes', b'hello', None)])

        assert normalized.diagnostics[0].kind is DiagnosticKind.UNSUPPORTED_EXTENSION

    def test_zero_length_file_passes_through(self):
        normalized = normalize([RawFile('empty.png', b'', 'image/png')])

        assert normalized.source_items == (SourceItem(b'', 'empty.png', ImageFormat.PNG),)


class TestArchives:
    """Archive entries are expanded inline and classified by extension."""

    def test_entries_expanded_in_place(self, make_zip, png_bytes, jpeg_bytes, webp_bytes):
        archive = make_zip([('x.jpg', jpeg_bytes), ('y.webp', webp_bytes)])

        normalized = normalize([
            RawFile('first.png', png_bytes, 'image/png'),
            RawFile('bundle.zip', archive, 'application/zip'),
            RawFile('last.png', png_bytes, 'image/png'),
        ])

        assert [i.original_name for i in normalized.source_items] == [
            'first.png', 'x.jpg', 'y.webp', 'last.png'
        ]
        assert normalized.source_items[1].data == jpeg_bytes

    @pytest.mark.parametrize("ext,expected", [
        ('png', ImageFormat.PNG),
        ('jpg', ImageFormat.JPEG),
        ('jpeg', ImageFormat.JPEG),
        ('webp', ImageFormat.WEBP),
    ])
    def test_supported_entry_extensions(self, make_zip, ext, expected):
        archive = make_zip([(f'img.{ext}', b'data')])

        normalized = normalize([RawFile('in.zip', archive, None)])

        assert normalized.source_items[0].source_format is expected

    def test_unsupported_entry_reported(self, make_zip, png_bytes, jpeg_bytes):
        archive = make_zip([('a.png', png_bytes), ('notes.txt', b'hi'), ('b.jpg', jpeg_bytes)])

        normalized = normalize([RawFile('in.zip', archive, 'application/zip')])

        assert len(normalized.source_items) == 2
        assert len(normalized.diagnostics) == 1
        diagnostic = normalized.diagnostics[0]
        assert diagnostic.kind is DiagnosticKind.UNSUPPORTED_EXTENSION
        assert diagnostic.filename == 'notes.txt'
        assert 'notes.txt' in diagnostic.message

    def test_directories_skipped(self, make_zip, png_bytes):
        archive = make_zip([('nested/a.png', png_bytes)], directories=['nested'])

        normalized = normalize([RawFile('in.zip', archive, None)])

        assert [i.original_name for i in normalized.source_items] == ['nested/a.png']
        assert normalized.diagnostics == ()

    def test_detected_by_type_alone(self, make_zip, png_bytes):
        archive = make_zip([('a.png', png_bytes)])

        normalized = normalize([RawFile('download', archive, 'application/zip')])

        assert len(normalized.source_items) == 1

    def test_broken_archive(self):
        normalized = normalize([RawFile('broken.zip', b'garbage', 'application/zip')])

        assert normalized.source_items == ()
        assert normalized.diagnostics == (
            Diagnostic.create(DiagnosticKind.ARCHIVE_OPEN_FAILURE, 'broken.zip'),
        )

    def test_broken_archive_without_type(self):
        normalized = normalize([RawFile('broken.zip', b'garbage', None)])

        assert normalized.diagnostics[0].kind is DiagnosticKind.ARCHIVE_OPEN_FAILURE

    def test_zip_name_with_other_type_is_mismatch(self):
        normalized = normalize([RawFile('fake.zip', b'garbage', 'text/plain')])

        assert normalized.diagnostics[0].kind is DiagnosticKind.ARCHIVE_TYPE_MISMATCH
        assert normalized.diagnostics[0].filename == 'fake.zip'

    def test_zip_type_with_other_name_is_mismatch(self):
        normalized = normalize([RawFile('fake.png', b'garbage', 'application/zip')])

        assert normalized.diagnostics[0].kind is DiagnosticKind.ARCHIVE_TYPE_MISMATCH

    def test_unreadable_entry(self, png_bytes):
        class StubReader(ArchiveReader):
            def unpack(self, data, archive_name="archive.zip"):
                return [
                    ArchiveEntry('ok.png', data=png_bytes),
                    ArchiveEntry('bad.png', error='Bad CRC-32'),
                ]

        normalized = normalize([RawFile('in.zip', b'', None)], reader=StubReader())

        assert [i.original_name for i in normalized.source_items] == ['ok.png']
        assert normalized.diagnostics[0].kind is DiagnosticKind.UNREADABLE
        assert normalized.diagnostics[0].filename == 'bad.png'

    def test_broken_archive_does_not_stop_other_inputs(self, png_bytes):
        normalized = normalize([
            RawFile('broken.zip', b'garbage', None),
            RawFile('a.png', png_bytes, 'image/png'),
        ])

        assert len(normalized.source_items) == 1
        assert len(normalized.diagnostics) == 1


class TestSourceFormatIndicator:
    """The source format is inferred and never editable."""

    def test_mixed_archive(self, make_zip, png_bytes, webp_bytes):
        archive = make_zip([('a.png', png_bytes), ('b.webp', webp_bytes)])

        indicator = normalize([RawFile('in.zip', archive, None)]).source_format

        assert indicator == SourceFormatIndicator(value=MIXED_FORMAT, enabled=True)
        assert indicator.editable is False

    def test_single_format(self, png_bytes):
        indicator = normalize([
            RawFile('a.png', png_bytes, 'image/png'),
            RawFile('b.png', png_bytes, 'image/png'),
        ]).source_format

        assert indicator.value == 'png'
        assert indicator.enabled
        assert not indicator.editable

    def test_jpg_and_jpeg_are_one_format(self, make_zip, jpeg_bytes):
        archive = make_zip([('a.jpg', jpeg_bytes), ('b.jpeg', jpeg_bytes)])

        assert normalize([RawFile('in.zip', archive, None)]).source_format.value == 'jpeg'

    def test_empty_disables(self):
        indicator = normalize([RawFile('notes.txt', b'hi', 'text/plain')]).source_format

        assert indicator.value is None
        assert not indicator.enabled
        assert not indicator.editable

    def test_no_inputs(self):
        normalized = normalize([])

        assert normalized.source_items == ()
        assert not normalized.source_format.enabled
