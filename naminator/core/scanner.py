"""Image discovery for naminator."""

import logging
import os
from typing import Callable, Iterator, List, Optional, Tuple

from naminator.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# (path) -> MIME type string, "" when unknown
MimeSniffer = Callable[[str], str]


def _fast_walk(path: str) -> Iterator[Tuple[str, List[str], List[str]]]:
    """Fast directory walker using os.scandir.

    Symlinked directories are listed as files and not followed.

    Args:
        path: Root directory to walk.

    Yields:
        Tuples of (dirpath, dirnames, filenames) like os.walk().
    """
    try:
        with os.scandir(path) as entries:
            dirs = []
            files = []
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        dirs.append(entry.name)
                    else:
                        files.append(entry.name)
                except OSError as e:
                    logger.debug(f"Cannot access entry {entry.path}: {e}")
                    continue
            yield path, sorted(dirs), sorted(files)
            for d in sorted(dirs):
                yield from _fast_walk(os.path.join(path, d))
    except OSError as e:
        logger.debug(f"Cannot access directory {path}: {e}")


def walk_files(root: str) -> List[str]:
    """List every file under root; a file root is returned as-is."""
    if not os.path.isdir(root):
        return [root]
    files = []
    for dirpath, _dirnames, filenames in _fast_walk(root):
        for filename in filenames:
            files.append(os.path.join(dirpath, filename))
    return files


class FileScanner:
    """Finds image files under one or more roots.

    Usage:
        scanner = FileScanner(["/photos/card1", "/photos/extra.jpg"], sniff)
        scanner.scan()

        print(f"Found {scanner.image_count} images")
        for path in scanner.images:
            ...
    """

    def __init__(self, roots: List[str], sniff: MimeSniffer):
        """Initialize scanner.

        Args:
            roots: Files or directories to scan.
            sniff: Returns the content MIME type of a file.
        """
        self.roots = list(roots)
        self.sniff = sniff
        self.images: List[str] = []
        self.skipped: List[str] = []

    def scan(self) -> List[str]:
        """Walk every root and keep the files whose MIME type is an image.

        Returns:
            Image paths in discovery order.

        Raises:
            ConfigurationError: If a root does not exist.
        """
        self.images = []
        self.skipped = []

        for root in self.roots:
            if not os.path.exists(root):
                raise ConfigurationError(f"Path does not exist: {root}")
            for filepath in walk_files(root):
                mime = self.sniff(filepath)
                if "image" in mime:
                    self.images.append(filepath)
                else:
                    logger.debug(f"Skipping non-image {filepath} ({mime or 'unknown'})")
                    self.skipped.append(filepath)

        return self.images

    @property
    def image_count(self) -> int:
        """Number of image files found."""
        return len(self.images)

