"""Pytest configuration and fixtures."""

import os
import tempfile
import shutil
from datetime import datetime
from typing import Dict, Generator, Iterable, Optional

import pytest

from naminator.core.errors import MetadataError
from naminator.core.metadata import canonical_extension
from naminator.core.models import Photo
from naminator.core.utils import parent_dir


class FakeProvider:
    """Stands in for MetadataProvider without running ExifTool.

    Capture times are looked up by file base name. Names listed in
    failures raise MetadataError like a photo without EXIF data would.
    """

    def __init__(self, times: Dict[str, datetime], failures: Iterable[str] = ()):
        self.times = times
        self.failures = set(failures)
        self.calls = []

    def analyze(self, path: str, photo: Optional[Photo] = None) -> Photo:
        self.calls.append(path)
        if photo is None:
            photo = Photo.for_path(path)
        name = os.path.basename(path)
        if name in self.failures or name not in self.times:
            raise MetadataError("error on 'SubSecDateTimeOriginal': tag not found")
        photo.name = name
        photo.source_path = path
        photo.source_dir = parent_dir(path)
        photo.extension = canonical_extension(os.path.splitext(name)[1])
        photo.created_at = self.times[name]
        return photo

    def mime_type(self, path: str) -> str:
        if path.endswith(".txt"):
            return "text/plain"
        return "image/jpeg"

    def close(self) -> None:
        pass

    def __enter__(self) -> "FakeProvider":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def write_file(path: str, data: bytes = b"fake jpg data") -> str:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return path


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_card(temp_dir: str) -> str:
    """Create a sample memory card dump.

    Structure:
        temp_dir/card/
        ├── DSC0001.JPG      2024-01-01 09:00:00
        ├── DSC0002.JPG      2024-01-01 09:00:01
        ├── notes.txt
        └── 100MSDCF/
            └── DSC0003.JPG  2024-01-02 08:00:00
    """
    card = os.path.join(temp_dir, "card")
    write_file(os.path.join(card, "DSC0001.JPG"), b"photo 1")
    write_file(os.path.join(card, "DSC0002.JPG"), b"photo 2")
    write_file(os.path.join(card, "notes.txt"), b"not a photo")
    write_file(os.path.join(card, "100MSDCF", "DSC0003.JPG"), b"photo 3")
    return card


@pytest.fixture
def sample_times() -> Dict[str, datetime]:
    """Capture times for the sample card photos."""
    return {
        "DSC0001.JPG": datetime(2024, 1, 1, 9, 0, 0),
        "DSC0002.JPG": datetime(2024, 1, 1, 9, 0, 1),
        "DSC0003.JPG": datetime(2024, 1, 2, 8, 0, 0),
    }


@pytest.fixture
def fake_provider(sample_times) -> FakeProvider:
    return FakeProvider(sample_times)


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances with custom capture times."""
    return FakeProvider


@pytest.fixture
def make_file():
    """Factory writing a small file, creating parent directories."""
    return write_file
