"""Thread-safe hand-off of outcome events to a single consumer."""

import queue
import threading
from typing import Iterator, Optional

from naminator.core.models import OutcomeEvent

# Marks the end of the stream
_FINISHED = object()


class EventQueue:
    """Carries outcome events from worker threads to one consumer loop.

    Emitters never wait on each other: emit() only enqueues. finish()
    sends the terminal signal; calling it again is a no-op, so the
    consumer sees it exactly once.

    Usage:
        events = EventQueue()
        # worker threads: events.emit(outcome) ... events.finish()
        for event in events:
            feed.push(event)
    """

    def __init__(self):
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._finished = False

    def emit(self, event: OutcomeEvent) -> None:
        """Enqueue an event. Safe to call from any thread."""
        self._queue.put(event)

    def finish(self) -> None:
        """Send the finished signal once."""
        with self._lock:
            if self._finished:
                return
            self._finished = True
        self._queue.put(_FINISHED)

    @property
    def is_finished(self) -> bool:
        """Whether finish() has been called."""
        return self._finished

    def events(self, tick: Optional[float] = None) -> Iterator[Optional[OutcomeEvent]]:
        """Yield events until the finished signal arrives.

        Args:
            tick: If set, yield None whenever no event arrives within
                this many seconds, so the consumer can redraw.
        """
        while True:
            try:
                item = self._queue.get(timeout=tick)
            except queue.Empty:
                yield None
                continue
            if item is _FINISHED:
                return
            yield item

    def __iter__(self) -> Iterator[OutcomeEvent]:
        return self.events()
