"""High-level orchestrator for naminator.

Fans out one analyze+rename task per photo, then cleans up emptied input
directories and signals the display that the run is over.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from naminator.core.cleaner import DirectoryCleaner
from naminator.core.errors import ConfigurationError, MetadataError, RenameError
from naminator.core.events import EventQueue
from naminator.core.metadata import MetadataProvider
from naminator.core.models import (
    AnalysisOutcome,
    OutcomeEvent,
    Photo,
    RenameConfig,
    RenameOutcome,
    RunResult,
)
from naminator.core.naming import compute_destination
from naminator.core.utils import checkout_dir, parent_dir, reserve_unique_path, same_path

logger = logging.getLogger(__name__)


class NaminatorOrchestrator:
    """Coordinates analysis, renaming and cleanup for one run.

    Every file is handled by its own task on a thread pool. A failure
    while reading metadata or moving a file is reported as an error event
    for that file only; the other tasks carry on.

    Usage:
        config = RenameConfig(dest_dir="/out", group_by_date=True)
        events = EventQueue()

        with MetadataProvider() as provider:
            orchestrator = NaminatorOrchestrator(config, provider)
            result = orchestrator.run(files, roots=["/photos"], events=events)

        print(f"Renamed {result.renamed} photos")
    """

    def __init__(
        self,
        config: RenameConfig,
        provider: Optional[MetadataProvider] = None,
    ):
        """Initialize orchestrator.

        Args:
            config: Destination and grouping options.
            provider: Metadata source. A MetadataProvider is created if omitted.
        """
        self.config = config
        self.provider = provider or MetadataProvider()
        self._result = RunResult()
        self._result_lock = threading.Lock()
        self._events: Optional[EventQueue] = None
        self._cancel_event = threading.Event()

    def cancel(self) -> None:
        """Skip every task that has not started yet."""
        self._cancel_event.set()

    def _emit(self, event: OutcomeEvent) -> None:
        with self._result_lock:
            self._result.record(event)
        if self._events is not None:
            self._events.emit(event)

    def analyze(self, path: str) -> Photo:
        """Read metadata for one file and emit the analysis outcome.

        Returns:
            The populated photo.

        Raises:
            MetadataError: If metadata could not be read. The error event
                has already been emitted.
        """
        photo = Photo.for_path(path)
        start = time.monotonic()
        try:
            self.provider.analyze(path, photo)
        except MetadataError as e:
            logger.debug(f"{path}: failed to get EXIF data: {e}")
            self._emit(AnalysisOutcome(photo, time.monotonic() - start, error=e))
            raise
        except Exception as e:
            logger.exception(f"{path}: unexpected error while reading metadata")
            error = MetadataError(str(e))
            self._emit(AnalysisOutcome(photo, time.monotonic() - start, error=error))
            raise error from e

        self._emit(AnalysisOutcome(photo, time.monotonic() - start))
        return photo

    def rename(self, photo: Photo) -> RenameOutcome:
        """Move a photo to its computed destination.

        In dry-run mode only the destination is computed. A destination
        already taken by another file gets an index suffix; a photo that
        already sits at its destination is left alone.

        Args:
            photo: Analyzed photo. Its renamed_path is set.

        Returns:
            The rename outcome (not emitted).
        """
        try:
            dest = compute_destination(photo, self.config)
        except ValueError as e:
            return RenameOutcome(photo, dry_run=self.config.dry_run, error=RenameError(str(e)))
        photo.renamed_path = dest

        if self.config.dry_run:
            return RenameOutcome(photo, dry_run=True)

        if same_path(dest, photo.source_path):
            logger.debug(f"{photo.source_path}: already named {dest}")
            return RenameOutcome(photo)

        try:
            checkout_dir(parent_dir(dest))
            final = reserve_unique_path(dest, current=photo.source_path)
        except OSError as e:
            return RenameOutcome(photo, error=RenameError(str(e)))

        photo.renamed_path = final
        if same_path(final, photo.source_path):
            logger.debug(f"{photo.source_path}: keeps its suffixed name")
            return RenameOutcome(photo)

        try:
            os.replace(photo.source_path, final)
        except (OSError, ValueError) as e:
            # Release the placeholder reserved above
            try:
                os.remove(final)
            except OSError:
                logger.debug(f"Could not remove placeholder {final}")
            return RenameOutcome(photo, error=RenameError(str(e)))

        logger.debug(f"Renamed {photo.source_path} -> {final}")
        return RenameOutcome(photo)

    def process_file(self, path: str) -> None:
        """Task body for one file: analyze, then rename."""
        if self._cancel_event.is_set():
            return
        try:
            photo = self.analyze(path)
        except MetadataError:
            return

        try:
            outcome = self.rename(photo)
        except Exception as e:
            logger.exception(f"{path}: unexpected error while renaming")
            outcome = RenameOutcome(photo, dry_run=self.config.dry_run, error=RenameError(str(e)))
        self._emit(outcome)

    def run(
        self,
        files: List[str],
        roots: Optional[List[str]] = None,
        events: Optional[EventQueue] = None,
    ) -> RunResult:
        """Process every file, then clean up.

        Args:
            files: Image files to rename.
            roots: Original input paths, used by the cleanup pass.
            events: Queue receiving outcome events. finish() is called on
                it exactly once, after cleanup, even if the run fails.

        Returns:
            RunResult with counts and every per-item error message.

        Raises:
            ConfigurationError: If there are no files to process.
        """
        self._events = events
        self._result = RunResult(total=len(files), dry_run=self.config.dry_run)
        start_time = time.monotonic()

        try:
            if not files:
                raise ConfigurationError("No image files to process")

            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                futures = {executor.submit(self.process_file, path): path for path in files}
                for future in as_completed(futures):
                    exc = future.exception()
                    if exc is not None:
                        logger.error(f"Task for {futures[future]} failed: {exc}")

            if self.config.clean:
                cleaner = DirectoryCleaner(dry_run=self.config.dry_run)
                cleaner.clean(roots or [], emit=self._emit)
        finally:
            self._result.elapsed_time = round(time.monotonic() - start_time, 3)
            if events is not None:
                events.finish()
            self._events = None

        return self._result
