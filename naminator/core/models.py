"""Data models for naminator."""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Union

from naminator.core.errors import ConfigurationError
from naminator.core.utils import parent_dir


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as '1.23s'."""
    return f"{seconds:.2f}s"


def shorten_home(path: str) -> str:
    """Show the user's home directory prefix as '~'."""
    home = os.path.expanduser("~")
    if home and home != "~":
        return path.replace(home, "~")
    return path


def _label(text: str) -> str:
    return f"{text:<7}"


@dataclass(slots=True)
class Photo:
    """A photo file moving through the pipeline.

    Created empty when a task starts, populated by the metadata provider,
    then given renamed_path by the naming policy.
    """
    name: str = ""
    source_path: str = ""
    source_dir: str = ""
    extension: str = ""
    created_at: Optional[datetime] = None
    renamed_path: Optional[str] = None

    @classmethod
    def for_path(cls, path: str) -> "Photo":
        """Create a placeholder photo named after the path's base name."""
        return cls(
            name=os.path.basename(path),
            source_path=path,
            source_dir=parent_dir(path),
        )


@dataclass
class RenameConfig:
    """Configuration values consumed by the pipeline.

    All fields are validated on construction.
    """
    dest_dir: Optional[str] = None
    dry_run: bool = False
    group_by_date: bool = False
    group_by_ext: bool = False
    clean: bool = False

    # Thread pool size for per-file tasks
    workers: int = 8

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ConfigurationError("Workers must be at least 1")
        if self.dest_dir == "":
            self.dest_dir = None

    @property
    def grouping(self) -> bool:
        """Whether any grouping subdirectory is requested."""
        return self.group_by_date or self.group_by_ext


class OutcomeKind(Enum):
    """Which pipeline step an outcome event describes."""
    ANALYSIS = "analysis"
    RENAME = "rename"
    CLEANUP = "cleanup"


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of reading metadata for one photo."""
    photo: Photo
    duration: float = 0.0
    error: Optional[Exception] = None

    kind = OutcomeKind.ANALYSIS

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def path(self) -> str:
        return self.photo.source_path

    def describe(self) -> str:
        if self.error is not None:
            return f"{self.photo.name}: {_label('FAILED')} {self.error}"
        return f"{self.photo.name}: {_label('OK')} Got exif data {format_duration(self.duration)}"


@dataclass(frozen=True)
class RenameOutcome:
    """Result of moving one photo to its computed destination."""
    photo: Photo
    dry_run: bool = False
    error: Optional[Exception] = None

    kind = OutcomeKind.RENAME

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def path(self) -> str:
        return self.photo.source_path

    def describe(self) -> str:
        if self.error is not None:
            return f"{self.photo.name}: {_label('FAILED')} {self.error}"
        renamed_path = shorten_home(self.photo.renamed_path or "")
        if self.dry_run:
            return f"{self.photo.name}: DRY-RUN Would rename -> {renamed_path}"
        return f"{self.photo.name}: {_label('OK')} Renamed to {renamed_path}"


@dataclass(frozen=True)
class CleanupOutcome:
    """Result of trying to remove one input directory."""
    directory: str
    dry_run: bool = False
    empty: bool = False
    error: Optional[Exception] = None

    kind = OutcomeKind.CLEANUP

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def path(self) -> str:
        return self.directory

    def describe(self) -> str:
        if self.error is not None:
            return f"{self.directory}: {_label('FAILED')} {self.error}"
        if self.dry_run:
            return f"{self.directory}: {_label('DRY-RUN')} Would remove if empty"
        if self.empty:
            return f"{self.directory}: {_label('OK')} Removed because empty"
        return f"{self.directory}: {_label('SKIP')} Do not remove because NOT empty"


OutcomeEvent = Union[AnalysisOutcome, RenameOutcome, CleanupOutcome]


@dataclass
class RunResult:
    """Results from a full pipeline run.

    Returned by NaminatorOrchestrator.run(). errors holds one message per
    failed analysis, rename or cleanup so the CLI can print a combined
    summary and pick the exit status.
    """
    total: int = 0
    analyzed: int = 0
    renamed: int = 0
    failed: int = 0
    cleaned: int = 0
    elapsed_time: float = 0.0
    dry_run: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def record(self, event: OutcomeEvent) -> None:
        """Count an outcome event and keep its error message."""
        if event.kind is OutcomeKind.ANALYSIS:
            if event.failed:
                self.failed += 1
                self.errors.append(f"{event.path}: failed to get EXIF data: {event.error}")
            else:
                self.analyzed += 1
        elif event.kind is OutcomeKind.RENAME:
            if event.failed:
                self.failed += 1
                self.errors.append(f"{event.path}: failed to rename: {event.error}")
            else:
                self.renamed += 1
        else:
            if event.failed:
                self.errors.append(f"{event.path}: failed to remove dir: {event.error}")
            elif event.empty and not event.dry_run:
                self.cleaned += 1
