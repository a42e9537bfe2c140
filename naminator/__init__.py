"""naminator - Rename photos after the time they were taken.

High-level API:
    from naminator import NaminatorOrchestrator, RenameConfig, EventQueue

    config = RenameConfig(dest_dir="/photos/sorted", group_by_date=True)
    events = EventQueue()

    result = NaminatorOrchestrator(config).run(files, roots=["/photos/card1"], events=events)
    print(f"Renamed {result.renamed} photos")

Outcome events arrive on the queue while the run is in progress; feed them
to an EventFeed to keep a bounded view that never hides an error.
"""

__version__ = "1.0.0"

# Public API exports
from naminator.core.orchestrator import NaminatorOrchestrator
from naminator.core.events import EventQueue
from naminator.core.feed import EventFeed
from naminator.core.models import (
    Photo,
    RenameConfig,
    RunResult,
    AnalysisOutcome,
    RenameOutcome,
    CleanupOutcome,
    OutcomeKind,
)

__all__ = [
    "NaminatorOrchestrator",
    "EventQueue",
    "EventFeed",
    "Photo",
    "RenameConfig",
    "RunResult",
    "AnalysisOutcome",
    "RenameOutcome",
    "CleanupOutcome",
    "OutcomeKind",
    "__version__",
]
