"""Tests for naminator.cli.display module."""

import io
from datetime import datetime

from naminator.cli.display import EMPTY_SLOT, FeedDisplay, format_slot, truncate
from naminator.core.errors import MetadataError
from naminator.core.feed import EventFeed
from naminator.core.models import AnalysisOutcome, Photo


def outcome(name="a.jpg", error=None):
    photo = Photo.for_path(f"/photos/{name}")
    photo.created_at = datetime(2024, 1, 1)
    return AnalysisOutcome(photo, duration=0.1, error=error)


class TestFormatting:
    """Tests for slot formatting helpers."""

    def test_empty_slot(self):
        assert format_slot(None) == EMPTY_SLOT

    def test_event_slot(self):
        assert format_slot(outcome()) == "a.jpg: OK      Got exif data 0.10s"

    def test_truncate(self):
        assert truncate("short", 10) == "short"
        assert truncate("a" * 20, 10) == "aaaaaaa..."


class TestFeedDisplay:
    """Tests for FeedDisplay."""

    def test_header_while_running(self):
        feed = EventFeed(3, capacity=2)
        feed.push(outcome())
        display = FeedDisplay(feed, disable=True)

        assert display.header_text().endswith("Processing photos... (1/3)")
        display.close()

    def test_header_when_done(self):
        feed = EventFeed(2, capacity=2)
        feed.push(outcome("a.jpg"))
        feed.push(outcome("b.jpg", error=MetadataError("no date")))
        feed.finish()

        with FeedDisplay(feed, disable=True) as display:
            header = display.header_text()

        assert header.startswith("Renaming done. Time: ")
        assert header.endswith("(1 OK, 1 failed, 2 total)")

    def test_renders_to_stream(self):
        stream = io.StringIO()
        feed = EventFeed(2, capacity=2)
        feed.push(outcome("a.jpg"))

        with FeedDisplay(feed, file=stream) as display:
            display.render()

        output = stream.getvalue()
        assert "a.jpg: OK" in output
        assert EMPTY_SLOT in output
