"""Run log file for naminator.

The live feed only shows the last few events; the run log keeps all of
them so a run can be reviewed after the terminal has scrolled away.
"""

import os
import time
from typing import Optional, TextIO, Union

from naminator.core.models import OutcomeEvent

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class RunLog:
    """Appends timestamped lines to a log file.

    The file (and its parent directory) is only created on the first
    write, so a run that logs nothing leaves no empty file behind.

    Usage:
        with RunLog("~/naminator.log") as run_log:
            run_log.write("Started")
            run_log.record(outcome)
    """

    def __init__(self, filepath: str):
        self.filepath = filepath
        self._stream: Optional[TextIO] = None

    def _ensure_open(self) -> TextIO:
        if self._stream is None:
            parent = os.path.dirname(self.filepath)
            if parent:
                os.makedirs(parent, exist_ok=True)
            self._stream = open(self.filepath, "a", encoding="utf-8")
        return self._stream

    def write(self, message: str) -> None:
        """Append one line, prefixed with the local time."""
        stamp = time.strftime(TIMESTAMP_FORMAT)
        self._ensure_open().write(f"{stamp} - {message}\n")

    def record(self, event: OutcomeEvent) -> None:
        """Append an outcome event as '[INFO|ERROR] <kind>: <description>'."""
        level = "ERROR" if event.failed else "INFO"
        self.write(f"[{level}] {event.kind.value}: {event.describe()}")

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> "RunLog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class NullRunLog:
    """Run log used when no --log file was given; discards everything."""

    def write(self, message: str) -> None:
        pass

    def record(self, event: OutcomeEvent) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "NullRunLog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass


def open_run_log(filepath: Optional[str]) -> Union[RunLog, NullRunLog]:
    """Return a RunLog for filepath, or a NullRunLog when it is empty."""
    if filepath:
        return RunLog(filepath)
    return NullRunLog()
