"""Live terminal view of the outcome feed."""

import shutil
from typing import List, Optional, TextIO

from tqdm import tqdm

from naminator.core.feed import EventFeed
from naminator.core.models import OutcomeEvent, format_duration

SPINNER = "|/-\\"
EMPTY_SLOT = "." * 30


def format_slot(slot: Optional[OutcomeEvent]) -> str:
    """Render one feed slot; empty slots are a row of dots."""
    if slot is None:
        return EMPTY_SLOT
    return slot.describe()


def truncate(message: str, width: int) -> str:
    """Cut a message to width, marking the cut with '...'."""
    if len(message) > width:
        return message[:width - 3] + "..."
    return message


class FeedDisplay:
    """Draws an EventFeed with tqdm status lines.

    Layout:
        header line (spinner and counts)
        one line per feed slot
        progress bar (only when the feed asks for one)

    Usage:
        with FeedDisplay(feed) as display:
            for event in events.events(tick=0.1):
                if event is not None:
                    feed.push(event)
                display.render()
            feed.finish()
        # final state is drawn on exit
    """

    def __init__(self, feed: EventFeed, file: Optional[TextIO] = None, disable: bool = False):
        """Initialize display.

        Args:
            feed: Feed to draw.
            file: Output stream (default: stderr, as tqdm does).
            disable: If True, draw nothing.
        """
        self.feed = feed
        self._file = file
        self._disable = disable
        self._frame = 0

        # Leave room for the spinner/label prefix of each line
        terminal_width = shutil.get_terminal_size().columns
        self._width = max(20, terminal_width - 4)

        self._header = self._line(0)
        self._lines: List[tqdm] = [self._line(i + 1) for i in range(feed.capacity)]
        self._progress: Optional[tqdm] = None

    def _line(self, position: int) -> tqdm:
        return tqdm(
            total=0,
            position=position,
            bar_format="{desc}",
            file=self._file,
            disable=self._disable,
            leave=True,
        )

    def header_text(self) -> str:
        """Status line shown above the feed."""
        feed = self.feed
        if feed.finished:
            return (
                f"Renaming done. Time: {format_duration(feed.elapsed)}"
                f" ({feed.successes} OK, {feed.failures} failed, {feed.total} total)"
            )
        spinner = SPINNER[self._frame % len(SPINNER)]
        done = feed.successes + feed.failures
        return f"{spinner} Processing photos... ({done}/{feed.total})"

    def _render_progress(self) -> None:
        if self.feed.should_show_progress():
            if self._progress is None:
                self._progress = tqdm(
                    total=self.feed.total,
                    position=len(self._lines) + 1,
                    file=self._file,
                    disable=self._disable,
                    leave=False,
                )
            self._progress.n = self.feed.processed
            self._progress.refresh()
        elif self._progress is not None:
            self._progress.close()
            self._progress = None

    def render(self) -> None:
        """Redraw every line from the feed's current state."""
        self._frame += 1
        self._header.set_description_str(truncate(self.header_text(), self._width), refresh=True)
        for line, slot in zip(self._lines, self.feed.visible):
            line.set_description_str(truncate(format_slot(slot), self._width), refresh=True)
        self._render_progress()

    def close(self) -> None:
        """Draw the final state and release the terminal lines."""
        self.render()
        if self._progress is not None:
            self._progress.close()
            self._progress = None
        for line in reversed(self._lines):
            line.close()
        self._header.close()

    def __enter__(self) -> "FeedDisplay":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
