"""Tests for naminator.core.scanner module."""

import os

import pytest

from naminator.core.errors import ConfigurationError
from naminator.core.scanner import FileScanner, walk_files


def sniff(path):
    return "text/plain" if path.endswith(".txt") else "image/jpeg"


class TestWalkFiles:
    """Tests for walk_files()."""

    def test_file_root(self, temp_dir, make_file):
        photo = make_file(os.path.join(temp_dir, "a.jpg"))
        assert walk_files(photo) == [photo]

    def test_recursive(self, sample_card):
        files = walk_files(sample_card)
        assert len(files) == 4
        assert os.path.join(sample_card, "100MSDCF", "DSC0003.JPG") in files


class TestFileScanner:
    """Tests for FileScanner class."""

    def test_scan_keeps_images(self, sample_card):
        scanner = FileScanner([sample_card], sniff)
        scanner.scan()

        assert scanner.image_count == 3
        assert scanner.images == [
            os.path.join(sample_card, "DSC0001.JPG"),
            os.path.join(sample_card, "DSC0002.JPG"),
            os.path.join(sample_card, "100MSDCF", "DSC0003.JPG"),
        ]
        assert scanner.skipped == [os.path.join(sample_card, "notes.txt")]

    def test_unknown_mime_skipped(self, sample_card):
        images = FileScanner([sample_card], lambda path: "").scan()
        assert images == []

    def test_files_and_dirs(self, sample_card):
        single = os.path.join(sample_card, "DSC0001.JPG")
        sub = os.path.join(sample_card, "100MSDCF")

        images = FileScanner([single, sub], sniff).scan()

        assert images == [single, os.path.join(sub, "DSC0003.JPG")]

    def test_missing_root(self, temp_dir):
        with pytest.raises(ConfigurationError, match="Path does not exist"):
            FileScanner([os.path.join(temp_dir, "missing")], sniff).scan()
