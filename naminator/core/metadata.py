"""Capture metadata extraction for naminator.

Reads the few ExifTool tags the naming policy needs and turns them into a
populated Photo.
"""

import logging
import re
from datetime import datetime
from typing import Optional

from naminator.core.errors import MetadataError
from naminator.core.exiftool import ThreadLocalExifTool
from naminator.core.models import Photo
from naminator.core.utils import parent_dir

logger = logging.getLogger(__name__)

# Tags read for every photo
FILE_NAME_TAG = "FileName"
DATE_TAG = "SubSecDateTimeOriginal"
SOURCE_FILE_TAG = "SourceFile"
EXTENSION_TAG = "FileTypeExtension"
MIME_TYPE_TAG = "MIMEType"

REQUIRED_TAGS = [FILE_NAME_TAG, DATE_TAG, EXTENSION_TAG]

# Camera raw variants share one grouping directory
RAW_EXTENSIONS = {"arw", "cr2", "cr3", "nef", "orf", "raf", "rw2", "dng"}
HEIF_EXTENSIONS = {"hif", "heic", "heif"}

_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")

_DATE_FORMATS = (
    "%Y:%m:%d %H:%M:%S.%f%z",
    "%Y:%m:%d %H:%M:%S%z",
    "%Y:%m:%d %H:%M:%S.%f",
    "%Y:%m:%d %H:%M:%S",
)


def canonical_extension(ext: str) -> str:
    """Normalize a file type extension.

    Lower-cases and drops the leading dot; camera raw variants become
    "raw" and HEIF variants become "heif".

    Example:
        >>> canonical_extension(".ARW")
        'raw'
        >>> canonical_extension("JPG")
        'jpg'
    """
    ext = ext.strip().lstrip(".").lower()
    if ext in RAW_EXTENSIONS:
        return "raw"
    if ext in HEIF_EXTENSIONS:
        return "heif"
    return ext


def parse_capture_time(value: str) -> datetime:
    """Parse an ExifTool date/time value, keeping sub-seconds.

    Accepts "YYYY:MM:DD HH:MM:SS" with optional fractional seconds and
    optional UTC offset ("+09:00" or "Z"). The offset is kept on the
    returned datetime; the local wall-clock time is what gets formatted.

    Raises:
        ValueError: If the value matches none of the known formats.
    """
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # strptime's %f takes at most microseconds
    text = _LONG_FRACTION.sub(r"\1", text)
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"unrecognized date/time {value!r}")


class MetadataProvider:
    """Extracts capture metadata with ExifTool.

    Safe to call from many threads at once: each thread talks to its own
    ExifTool process.

    Usage:
        with MetadataProvider() as provider:
            photo = provider.analyze("/photos/DSC0001.ARW")
    """

    def __init__(self, pool: Optional[ThreadLocalExifTool] = None):
        self._pool = pool or ThreadLocalExifTool()

    def read(self, path: str, tags: list) -> dict:
        """Read raw tags for a path, wrapping ExifTool failures.

        Raises:
            MetadataError: If ExifTool fails for this file.
        """
        try:
            return self._pool.get().read_tags(path, tags)
        except Exception as e:
            raise MetadataError(f"failed to extract metadata: {e}") from e

    def analyze(self, path: str, photo: Optional[Photo] = None) -> Photo:
        """Populate a Photo from the file's metadata.

        Args:
            path: File to analyze.
            photo: Photo to fill in. A new one is created if omitted.

        Returns:
            The populated photo.

        Raises:
            MetadataError: If a required tag is missing or unparsable.
                The photo is left untouched in that case.
        """
        if photo is None:
            photo = Photo.for_path(path)

        info = self.read(path, REQUIRED_TAGS)
        if not info:
            raise MetadataError("failed to extract metadata")

        for tag in (FILE_NAME_TAG, DATE_TAG, EXTENSION_TAG):
            if info.get(tag) in (None, ""):
                raise MetadataError(f"error on '{tag}': tag not found")

        try:
            created_at = parse_capture_time(info[DATE_TAG])
        except ValueError as e:
            raise MetadataError(f"failed to parse createdAt: {e}") from e

        photo.name = str(info[FILE_NAME_TAG])
        photo.source_path = str(info.get(SOURCE_FILE_TAG) or path)
        photo.source_dir = parent_dir(path)
        photo.extension = canonical_extension(str(info[EXTENSION_TAG]))
        photo.created_at = created_at
        logger.debug(f"Analyzed {path}: {created_at.isoformat()} .{photo.extension}")
        return photo

    def mime_type(self, path: str) -> str:
        """Return the content-sniffed MIME type, or "" if unknown."""
        try:
            info = self.read(path, [MIME_TYPE_TAG])
        except MetadataError as e:
            logger.debug(f"Cannot sniff {path}: {e}")
            return ""
        return str(info.get(MIME_TYPE_TAG) or "")

    def close(self) -> None:
        """Stop every ExifTool process started by this provider."""
        self._pool.close_all()

    def __enter__(self) -> "MetadataProvider":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
