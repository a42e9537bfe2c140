"""ExifTool processes for naminator.

Locates the exiftool executable and keeps stay-open ExifTool processes,
one per worker thread, for the metadata provider.
"""

import logging
import os
import shutil
import sys
import threading
from typing import Optional, List

import exiftool

logger = logging.getLogger(__name__)

# Bundled copy, relative to the working directory
LOCAL_EXIFTOOL_DIR = os.path.join("tools", "exiftool")
LOCAL_EXIFTOOL_NAME = "exiftool.exe" if sys.platform == "win32" else "exiftool"

INSTALL_URL = "https://exiftool.org/"


def find_exiftool(base_dir: Optional[str] = None) -> Optional[str]:
    """Locate exiftool on PATH, then under <base_dir>/tools/exiftool.

    Args:
        base_dir: Directory holding the bundled tools folder
            (default: the current working directory).

    Returns:
        Command or path to run, or None when neither is present.
    """
    if shutil.which("exiftool"):
        return "exiftool"
    bundled = os.path.join(base_dir or os.getcwd(), LOCAL_EXIFTOOL_DIR, LOCAL_EXIFTOOL_NAME)
    return bundled if os.path.isfile(bundled) else None


def get_exiftool_path(base_dir: Optional[str] = None) -> Optional[str]:
    """Like find_exiftool(), but warns when nothing is found."""
    path = find_exiftool(base_dir)
    if path is None:
        logger.warning(f"ExifTool not found. Install from {INSTALL_URL}")
    return path


def is_exiftool_available() -> bool:
    return find_exiftool() is not None


def get_install_instructions() -> str:
    """Message printed by the CLI when ExifTool is missing."""
    return (
        "ExifTool not found. Please install it:\n"
        f"  1. Download from {INSTALL_URL}\n"
        "  2. Place it in PATH or in ./tools/exiftool/"
    )


def strip_group(tag: str) -> str:
    """Drop the 'Group:' prefix pyexiftool puts on tag names.

    Example:
        >>> strip_group("Composite:SubSecDateTimeOriginal")
        'SubSecDateTimeOriginal'
    """
    return tag.rsplit(":", 1)[-1]


class ExifToolManager:
    """Owns a single stay-open ExifTool process.

    The process answers one request at a time, so a manager must not be
    shared between threads; ThreadLocalExifTool hands out one per thread.

    Usage:
        with ExifToolManager() as et:
            tags = et.read_tags("/photos/DSC0001.JPG", ["FileName"])
    """

    def __init__(self, executable: Optional[str] = None):
        """
        Args:
            executable: exiftool command or path. Located on start() if omitted.
        """
        self._process: Optional[exiftool.ExifToolHelper] = None
        self._executable = executable

    def start(self) -> bool:
        """Launch the process. Returns False if it could not be started."""
        if self._executable is None:
            self._executable = get_exiftool_path()
        if not self._executable:
            return False

        process = exiftool.ExifToolHelper(executable=self._executable)
        try:
            process.run()
        except Exception as e:
            logger.error(f"Could not launch {self._executable}: {e}")
            return False
        self._process = process
        logger.debug(f"Started ExifTool ({self._executable}) on {threading.current_thread().name}")
        return True

    def stop(self) -> None:
        """Terminate the process if it is running."""
        process, self._process = self._process, None
        if process is None:
            return
        try:
            process.terminate()
        except Exception as e:
            logger.debug(f"ExifTool did not terminate cleanly: {e}")

    def read_tags(self, filepath: str, tags: Optional[List[str]] = None) -> dict:
        """Read the given tags (or all tags) of one file.

        Returns:
            Tag values keyed by tag name without group prefix; empty if
            ExifTool returned nothing for the file.

        Raises:
            RuntimeError: If the process is not running.
            exiftool.exceptions.ExifToolException: If ExifTool reports an error.
        """
        if self._process is None:
            raise RuntimeError("ExifTool is not running")

        if tags:
            records = self._process.get_tags(filepath, tags)
        else:
            records = self._process.get_metadata(filepath)
        if not records:
            return {}
        return {strip_group(key): value for key, value in records[0].items()}

    @property
    def is_running(self) -> bool:
        return self._process is not None

    def __enter__(self) -> "ExifToolManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()


class ThreadLocalExifTool:
    """One ExifToolManager per thread.

    ExifTool's stay-open protocol handles a single request at a time, so
    each worker thread gets its own process. close_all() stops every
    process started through this pool.
    """

    def __init__(self, executable: Optional[str] = None):
        self._executable = executable
        self._local = threading.local()
        self._all: List[ExifToolManager] = []
        self._lock = threading.Lock()

    def get(self) -> ExifToolManager:
        """Get or start the current thread's ExifTool process.

        Raises:
            RuntimeError: If ExifTool could not be started.
        """
        manager = getattr(self._local, "manager", None)
        if manager is None or not manager.is_running:
            manager = ExifToolManager(self._executable)
            if not manager.start():
                raise RuntimeError("failed to run exiftool")
            self._local.manager = manager
            with self._lock:
                self._all.append(manager)
        return manager

    def close_all(self) -> None:
        """Stop ExifTool processes across all threads."""
        with self._lock:
            for manager in self._all:
                manager.stop()
            self._all.clear()

    def __enter__(self) -> "ThreadLocalExifTool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close_all()
