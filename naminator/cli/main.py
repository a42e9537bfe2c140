"""Command-line interface for naminator."""

import argparse
import shutil
import sys
import threading
from typing import Dict, List, Optional

from naminator import __version__
from naminator.cli.display import FeedDisplay
from naminator.core.errors import ConfigurationError
from naminator.core.events import EventQueue
from naminator.core.exiftool import get_install_instructions, is_exiftool_available
from naminator.core.feed import EventFeed
from naminator.core.logger import open_run_log
from naminator.core.metadata import MetadataProvider
from naminator.core.models import RenameConfig, RunResult
from naminator.core.orchestrator import NaminatorOrchestrator
from naminator.core.scanner import FileScanner
from naminator.core.utils import normalize_path


# Program description
DESCRIPTION = """naminator

Renames photos after the time they were taken, e.g. 2024-01-01_09-00-00.jpg,
using the capture time stored in their EXIF metadata (read with ExifTool).

Files and directories may be given; directories are searched recursively and
only image files are renamed. Photos can be moved to another directory and
grouped into per-date and per-extension subdirectories.
"""

# Seconds between redraws while waiting for events
REFRESH_INTERVAL = 0.1

# Number of errors listed after a run
MAX_LISTED_ERRORS = 10


def build_config(parsed: argparse.Namespace) -> RenameConfig:
    """Create the run configuration from parsed arguments.

    Raises:
        ConfigurationError: If an option value is invalid.
    """
    return RenameConfig(
        dest_dir=normalize_path(parsed.dest_dir) if parsed.dest_dir else None,
        dry_run=parsed.dry_run,
        group_by_date=parsed.group_by_date,
        group_by_ext=parsed.group_by_ext,
        clean=parsed.clean,
        workers=parsed.workers,
    )


def print_summary(result: RunResult) -> None:
    """Print errors and counts after the live display has closed."""
    if result.errors:
        print("\nWarnings/Errors:")
        for error in result.errors[:MAX_LISTED_ERRORS]:
            print(f"  {error}")
        if len(result.errors) > MAX_LISTED_ERRORS:
            print(f"  ... and {len(result.errors) - MAX_LISTED_ERRORS} more")

    verb = "Would rename" if result.dry_run else "Renamed"
    print(f"\n{verb}: {result.renamed} of {result.total} photos")
    if result.failed:
        print(f"Failed: {result.failed}")
    if result.cleaned:
        print(f"Removed empty directories: {result.cleaned}")
    print(f"Time used: {result.elapsed_time} seconds")


def run_rename(
    paths: List[str],
    config: RenameConfig,
    log_file: Optional[str] = None,
    show_display: bool = True,
) -> int:
    """Discover photos under paths and rename them.

    The orchestrator runs on a background thread; this thread consumes its
    events, feeds the live display and writes the optional log file.

    Args:
        paths: Input files and directories.
        config: Run configuration.
        log_file: Optional log file path.
        show_display: If False, skip the live display.

    Returns:
        Exit code (0 success, 1 fatal error, 2 some photos failed, 130 interrupted).
    """
    if not is_exiftool_available():
        print(get_install_instructions())
        return 1

    if config.dry_run:
        print("\n=== DRY RUN MODE ===")
        print("No files will be moved or removed.\n")

    with MetadataProvider() as provider:
        print("Scanning files...")
        try:
            scanner = FileScanner(paths, provider.mime_type)
            files = scanner.scan()
        except ConfigurationError as e:
            print(f"Error: {e}")
            return 1
        print(f"Found {scanner.image_count} photos ({len(scanner.skipped)} other files ignored)")

        if not files:
            print("Error: No image files found")
            return 1

        feed = EventFeed(len(files), term_height=shutil.get_terminal_size().lines)
        events = EventQueue()
        orchestrator = NaminatorOrchestrator(config, provider)
        outcome: Dict[str, object] = {}

        def work():
            try:
                outcome["result"] = orchestrator.run(files, roots=paths, events=events)
            except Exception as e:
                outcome["error"] = e

        worker = threading.Thread(target=work, name="naminator-run", daemon=True)

        with open_run_log(log_file) as run_log:
            run_log.write(f"Started renaming {len(files)} photos from {', '.join(paths)}")
            try:
                with FeedDisplay(feed, disable=not show_display) as display:
                    worker.start()
                    for event in events.events(tick=REFRESH_INTERVAL):
                        if event is not None:
                            feed.push(event)
                            run_log.record(event)
                        display.render()
                    feed.finish()
            except KeyboardInterrupt:
                orchestrator.cancel()
                run_log.write("Interrupted")
                print("\n\nInterrupted! Photos already renamed keep their new names.")
                return 130

            worker.join()
            run_log.write(f"Finished: {feed.successes} OK, {feed.failures} failed")

    if "error" in outcome:
        print(f"Error: {outcome['error']}")
        return 1

    result: RunResult = outcome["result"]
    print_summary(result)

    if result.has_errors:
        return 2
    return 0


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (default: sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="naminator",
        usage="%(prog)s [OPTIONS] [files... | dirs...]",
        description=DESCRIPTION,
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="Photo files or directories to rename"
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "-d", "--dest-dir",
        help="Directory path to move renamed photos",
        type=str,
        default=None
    )

    parser.add_argument(
        "-n", "--dry-run",
        help="Display the operations that would be performed without actually running them",
        action="store_true"
    )

    parser.add_argument(
        "-t", "--group-by-date",
        help="Create a date directory and classify the photos for each date",
        action="store_true"
    )

    parser.add_argument(
        "-e", "--group-by-ext",
        help="Create an extension directory and classify the photos for each ext",
        action="store_true"
    )

    parser.add_argument(
        "-c", "--clean",
        help="Clean up directories after renaming",
        action="store_true"
    )

    parser.add_argument(
        "-w", "--workers",
        help="Number of photos processed in parallel (default: 8)",
        type=int,
        default=8
    )

    parser.add_argument(
        "--log",
        help="Write every operation to this log file",
        type=str,
        default=None
    )

    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parsed = parse_args(args)

    if not parsed.paths:
        print("Error: too few arguments")
        return 1

    try:
        config = build_config(parsed)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1

    paths = [normalize_path(p) for p in parsed.paths]
    log_file = normalize_path(parsed.log) if parsed.log else None

    return run_rename(paths, config, log_file=log_file)


if __name__ == "__main__":
    sys.exit(main())
