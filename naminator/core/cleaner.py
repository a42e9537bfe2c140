"""Removal of emptied input directories."""

import logging
import os
import shutil
from typing import Callable, List

from naminator.core.errors import CleanupError
from naminator.core.models import CleanupOutcome

logger = logging.getLogger(__name__)


def is_empty_dir(path: str) -> bool:
    """Check whether a directory has no entries.

    Reads at most one entry instead of listing the whole directory.

    Raises:
        OSError: If the directory cannot be opened.
    """
    with os.scandir(path) as entries:
        for _ in entries:
            return False
    return True


class DirectoryCleaner:
    """Removes input directories left empty after renaming.

    Only run after every rename task has finished, so it never races with
    a move out of the same directory.

    Usage:
        cleaner = DirectoryCleaner(dry_run=False)
        for outcome in cleaner.clean(["/photos/card1"]):
            print(outcome.describe())
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def clean_one(self, root: str) -> CleanupOutcome:
        """Inspect one directory and remove it if empty."""
        try:
            empty = is_empty_dir(root)
        except OSError as e:
            logger.warning(f"Cannot read directory {root}: {e}")
            return CleanupOutcome(root, dry_run=self.dry_run, error=CleanupError(str(e)))

        if self.dry_run:
            return CleanupOutcome(root, dry_run=True, empty=empty)

        if not empty:
            logger.debug(f"Skip cleaning {root}: not empty")
            return CleanupOutcome(root, empty=False)

        try:
            shutil.rmtree(root)
        except OSError as e:
            logger.warning(f"Failed to remove {root}: {e}")
            return CleanupOutcome(root, empty=True, error=CleanupError(str(e)))

        logger.debug(f"Removed empty directory {root}")
        return CleanupOutcome(root, empty=True)

    def clean(
        self,
        roots: List[str],
        emit: Callable[[CleanupOutcome], None] = None,
    ) -> List[CleanupOutcome]:
        """Clean every directory root; file roots are skipped silently.

        Args:
            roots: Original input paths.
            emit: Optional callback receiving each outcome as it happens.

        Returns:
            One outcome per directory root.
        """
        outcomes = []
        for root in roots:
            if not os.path.isdir(root):
                continue
            outcome = self.clean_one(root)
            if emit:
                emit(outcome)
            outcomes.append(outcome)
        return outcomes
