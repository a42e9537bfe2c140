"""Core processing logic for naminator."""

from naminator.core.errors import (
    NaminatorError,
    ConfigurationError,
    MetadataError,
    RenameError,
    CleanupError,
)

from naminator.core.models import (
    Photo,
    RenameConfig,
    OutcomeKind,
    AnalysisOutcome,
    RenameOutcome,
    CleanupOutcome,
    OutcomeEvent,
    RunResult,
)

from naminator.core.utils import (
    normalize_path,
    checkout_dir,
    reserve_unique_path,
)

from naminator.core.logger import (
    RunLog,
    NullRunLog,
    open_run_log,
)

from naminator.core.exiftool import (
    get_exiftool_path,
    is_exiftool_available,
    ExifToolManager,
    ThreadLocalExifTool,
)

from naminator.core.metadata import (
    MetadataProvider,
    canonical_extension,
    parse_capture_time,
)

from naminator.core.scanner import (
    FileScanner,
)

from naminator.core.naming import compute_destination

from naminator.core.feed import (
    EventFeed,
    feed_capacity,
    retain,
)

from naminator.core.events import EventQueue

from naminator.core.cleaner import (
    DirectoryCleaner,
    is_empty_dir,
)

from naminator.core.orchestrator import NaminatorOrchestrator

__all__ = [
    # Errors
    "NaminatorError",
    "ConfigurationError",
    "MetadataError",
    "RenameError",
    "CleanupError",
    # Models
    "Photo",
    "RenameConfig",
    "OutcomeKind",
    "AnalysisOutcome",
    "RenameOutcome",
    "CleanupOutcome",
    "OutcomeEvent",
    "RunResult",
    # Utils
    "normalize_path",
    "checkout_dir",
    "reserve_unique_path",
    # Run log
    "RunLog",
    "NullRunLog",
    "open_run_log",
    # ExifTool
    "get_exiftool_path",
    "is_exiftool_available",
    "ExifToolManager",
    "ThreadLocalExifTool",
    # Metadata
    "MetadataProvider",
    "canonical_extension",
    "parse_capture_time",
    # Scanner
    "FileScanner",
    # Naming
    "compute_destination",
    # Feed
    "EventFeed",
    "feed_capacity",
    "retain",
    "EventQueue",
    # Cleaner
    "DirectoryCleaner",
    "is_empty_dir",
    # Orchestrator
    "NaminatorOrchestrator",
]
