"""Bounded outcome feed with error-prioritized retention.

The feed keeps the last few outcome events for the live display. Its size
is bounded by the terminal, but once a run has produced an error, error
events are kept on screen and routine events are evicted first.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional

from naminator.core.models import OutcomeEvent, OutcomeKind

logger = logging.getLogger(__name__)

# Hard cap on visible events
MAX_HEIGHT = 30

# Terminal lines used by everything except the feed itself
RESERVED_LINES = 9

# Progress bar latch: decided once, this many seconds into the run
PROGRESS_LATCH_SECONDS = 3.0
PROGRESS_LATCH_PERCENT = 0.25
ALWAYS_SHOW_PROGRESS_OVER = 100

Slots = List[Optional[OutcomeEvent]]


class FileState(Enum):
    """Last known outcome for a file."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def feed_capacity(total: int, term_height: int) -> int:
    """Number of visible feed slots.

    Args:
        total: Number of files in the run.
        term_height: Terminal height in lines.

    Returns:
        min(total, term_height - RESERVED_LINES, MAX_HEIGHT), at least 1.
    """
    budget = term_height - RESERVED_LINES
    if budget < 1:
        budget = 1
    return max(1, min(total, budget, MAX_HEIGHT))


def _is_routine(slot: Optional[OutcomeEvent]) -> bool:
    return slot is None or not slot.failed


def ring_append(slots: Slots, event: OutcomeEvent) -> Slots:
    """Fill the first empty slot, or drop the oldest and append."""
    result = list(slots)
    for i, slot in enumerate(result):
        if slot is None:
            result[i] = event
            return result
    return result[1:] + [event]


def retain(slots: Slots, event: OutcomeEvent, capacity: int, has_errors: bool) -> Slots:
    """Return the visible slots after pushing one event.

    Without errors so far the slots behave as a ring. Once the run has
    seen an error, the first empty or non-error slot is dropped (at most
    one per push) and the event appended; if that still overflows, the
    oldest slots are trimmed. A non-error event that finds nothing but
    errors on a full feed is not shown, so visible errors are only ever
    evicted by newer errors.

    Args:
        slots: Current visible slots, oldest first. None is an empty slot.
        event: Incoming event.
        capacity: Maximum number of slots.
        has_errors: Whether any error has been seen in this run, including
            the incoming event.

    Returns:
        New list of slots; the input list is not modified.
    """
    if not has_errors:
        return ring_append(slots, event)

    kept: Slots = []
    dropped = False
    for slot in slots:
        if not dropped and _is_routine(slot):
            dropped = True
            continue
        kept.append(slot)

    if len(kept) >= capacity:
        if not event.failed:
            return kept[len(kept) - capacity:]
        kept = kept[len(kept) - capacity + 1:]
    kept.append(event)
    return kept


class EventFeed:
    """Live feed state consumed by the display.

    Holds the visible slots, every error event seen so far, per-file
    outcome states and the processed/total counters. All state belongs to
    one instance, so runs (and tests) never leak into each other.

    Not thread safe: push() is called from the single consumer loop.
    """

    def __init__(
        self,
        total: int,
        capacity: Optional[int] = None,
        term_height: int = 24,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize feed.

        Args:
            total: Number of files in the run.
            capacity: Visible slots. Derived from total and term_height if omitted.
            term_height: Terminal height in lines.
            clock: Monotonic time source.
        """
        self.total = total
        self.capacity = capacity if capacity is not None else feed_capacity(total, term_height)
        self.slots: Slots = [None] * self.capacity
        self.errors: List[OutcomeEvent] = []
        self.processed = 0
        self.files: Dict[str, FileState] = {}
        self.finished = False
        self._clock = clock
        self.start_time = clock()

        # Progress bar latch
        self._show_progress_set = False
        self._show_progress = False

    def push(self, event: OutcomeEvent) -> None:
        """Record an outcome event."""
        if event.failed:
            self.errors.append(event)

        self.slots = retain(self.slots, event, self.capacity, bool(self.errors))

        if event.kind is OutcomeKind.ANALYSIS:
            self.processed += 1

        if event.kind in (OutcomeKind.ANALYSIS, OutcomeKind.RENAME):
            self.files[event.path] = FileState.FAILED if event.failed else FileState.SUCCEEDED

    def finish(self) -> None:
        """Mark the run as finished."""
        self.finished = True

    @property
    def visible(self) -> Slots:
        """Visible slots, oldest first."""
        return list(self.slots)

    @property
    def successes(self) -> int:
        return sum(1 for state in self.files.values() if state is FileState.SUCCEEDED)

    @property
    def failures(self) -> int:
        return sum(1 for state in self.files.values() if state is FileState.FAILED)

    @property
    def percent(self) -> float:
        """Fraction of files processed, 0.0 to 1.0."""
        if self.total <= 0:
            return 1.0
        return min(1.0, self.processed / self.total)

    @property
    def elapsed(self) -> float:
        """Seconds since the feed was created."""
        return self._clock() - self.start_time

    def should_show_progress(self) -> bool:
        """Whether the display should draw a progress bar right now.

        Large runs always get one. Otherwise the decision is latched the
        first time this is asked after PROGRESS_LATCH_SECONDS: slow runs
        (under a quarter done by then) get a bar for the rest of the run.
        """
        if not self._show_progress_set and self.elapsed > PROGRESS_LATCH_SECONDS:
            self._show_progress = self.percent < PROGRESS_LATCH_PERCENT
            self._show_progress_set = True
            logger.debug(f"Progress bar latch set to {self._show_progress}")
        if self.percent >= 1:
            return False
        return self.total > ALWAYS_SHOW_PROGRESS_OVER or self._show_progress
