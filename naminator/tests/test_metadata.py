"""Tests for naminator.core.metadata module."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from naminator.core.errors import MetadataError
from naminator.core.metadata import (
    REQUIRED_TAGS,
    MetadataProvider,
    canonical_extension,
    parse_capture_time,
)
from naminator.core.models import Photo


@pytest.fixture
def pool():
    return MagicMock()


def set_tags(pool, tags):
    pool.get.return_value.read_tags.return_value = tags


class TestCanonicalExtension:
    """Tests for canonical_extension()."""

    @pytest.mark.parametrize("ext,expected", [
        ("JPG", "jpg"),
        (".jpeg", "jpeg"),
        ("ARW", "raw"),
        (".nef", "raw"),
        ("HIF", "heif"),
        ("heic", "heif"),
        ("png", "png"),
    ])
    def test_mapping(self, ext, expected):
        assert canonical_extension(ext) == expected


class TestParseCaptureTime:
    """Tests for parse_capture_time()."""

    def test_plain(self):
        assert parse_capture_time("2024:03:05 10:00:00") == datetime(2024, 3, 5, 10, 0, 0)

    def test_subseconds(self):
        assert parse_capture_time("2024:03:05 10:00:00.500") == datetime(2024, 3, 5, 10, 0, 0, 500000)

    def test_long_subseconds_truncated(self):
        parsed = parse_capture_time("2024:03:05 10:00:00.123456789+01:00")
        assert parsed.microsecond == 123456
        assert parsed.utcoffset() == timedelta(hours=1)

    def test_offset(self):
        parsed = parse_capture_time("2024:03:05 10:00:00.12+09:00")
        assert parsed.hour == 10
        assert parsed.utcoffset() == timedelta(hours=9)

    def test_utc_suffix(self):
        parsed = parse_capture_time("2024:03:05 10:00:00Z")
        assert parsed.tzinfo == timezone.utc

    @pytest.mark.parametrize("value", ["", "0000:00:00 00:00:00", "yesterday"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_capture_time(value)


class TestMetadataProvider:
    """Tests for MetadataProvider."""

    def test_analyze(self, pool):
        set_tags(pool, {
            "SourceFile": "/photos/DSC0001.ARW",
            "FileName": "DSC0001.ARW",
            "SubSecDateTimeOriginal": "2024:03:05 10:00:00.50",
            "FileTypeExtension": "ARW",
        })
        provider = MetadataProvider(pool)

        photo = provider.analyze("/photos/DSC0001.ARW")

        pool.get.return_value.read_tags.assert_called_once_with("/photos/DSC0001.ARW", REQUIRED_TAGS)
        assert photo.name == "DSC0001.ARW"
        assert photo.source_path == "/photos/DSC0001.ARW"
        assert photo.source_dir == "/photos"
        assert photo.extension == "raw"
        assert photo.created_at == datetime(2024, 3, 5, 10, 0, 0, 500000)

    def test_missing_tag_leaves_photo_untouched(self, pool):
        set_tags(pool, {"FileName": "a.jpg", "FileTypeExtension": "JPG"})
        photo = Photo.for_path("/photos/a.jpg")

        with pytest.raises(MetadataError, match="error on 'SubSecDateTimeOriginal': tag not found"):
            MetadataProvider(pool).analyze("/photos/a.jpg", photo)

        assert photo.created_at is None
        assert photo.extension == ""

    def test_bad_date(self, pool):
        set_tags(pool, {
            "FileName": "a.jpg",
            "SubSecDateTimeOriginal": "not a date",
            "FileTypeExtension": "JPG",
        })
        with pytest.raises(MetadataError, match="failed to parse createdAt"):
            MetadataProvider(pool).analyze("/photos/a.jpg")

    def test_empty_result(self, pool):
        set_tags(pool, {})
        with pytest.raises(MetadataError):
            MetadataProvider(pool).analyze("/photos/a.jpg")

    def test_exiftool_failure_wrapped(self, pool):
        pool.get.return_value.read_tags.side_effect = RuntimeError("boom")
        with pytest.raises(MetadataError, match="boom"):
            MetadataProvider(pool).analyze("/photos/a.jpg")

    def test_mime_type(self, pool):
        set_tags(pool, {"MIMEType": "image/jpeg"})
        assert MetadataProvider(pool).mime_type("/photos/a.jpg") == "image/jpeg"

    def test_mime_type_unknown(self, pool):
        pool.get.side_effect = RuntimeError("failed to run exiftool")
        assert MetadataProvider(pool).mime_type("/photos/a.jpg") == ""

    def test_close_stops_processes(self, pool):
        with MetadataProvider(pool):
            pass
        pool.close_all.assert_called_once()
