"""Utility functions for file and path operations."""

import os
from typing import Iterator, Optional


def normalize_path(path: str) -> str:
    """Clean up a user-supplied path: trim whitespace, expand ~, normpath."""
    return os.path.normpath(os.path.expanduser(path.strip()))


def parent_dir(path: str) -> str:
    """Directory part of path; "." for a bare file name."""
    return os.path.dirname(path) or os.curdir


def same_path(a: str, b: str) -> bool:
    """Check whether two paths name the same location."""
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))


def checkout_dir(path: str) -> str:
    """Create a destination directory and its parents if missing.

    Safe to call from several threads for the same path: a directory
    created concurrently by another caller counts as success.

    Args:
        path: Directory path.

    Returns:
        The directory path.

    Raises:
        FileExistsError: If path exists as a file (not a directory).
    """
    if os.path.isfile(path):
        raise FileExistsError(f"Cannot create directory: {path} exists as a file")
    os.makedirs(path, exist_ok=True)
    return path


def _try_reserve(path: str) -> bool:
    try:
        fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError:
        return False
    os.close(fd)
    return True


def _candidates(path: str) -> Iterator[str]:
    yield path
    base, ext = os.path.splitext(path)
    n = 1
    while True:
        yield f"{base}-{n:03d}{ext}"
        n += 1


def reserve_unique_path(path: str, current: Optional[str] = None) -> str:
    """Reserve a destination path, adding an index suffix if it is taken.

    Uses os.open() with O_CREAT | O_EXCL to atomically claim the path, so
    two threads renaming photos shot in the same second never receive the
    same destination. The empty placeholder is replaced by the caller's
    os.replace().

    Args:
        path: Desired destination path.
        current: Where the file lives now. A candidate naming this
            location is returned without reserving anything, so a file
            that already carries a suffixed name keeps it.

    Returns:
        Original path if it was free, otherwise path with -NNN suffix.

    Examples:
        >>> reserve_unique_path("/out/2024-01-01_09-00-00.jpg")  # free
        '/out/2024-01-01_09-00-00.jpg'
        >>> reserve_unique_path("/out/2024-01-01_09-00-00.jpg")  # taken
        '/out/2024-01-01_09-00-00-001.jpg'
    """
    for candidate in _candidates(path):
        if current and same_path(candidate, current):
            return candidate
        if _try_reserve(candidate):
            return candidate
