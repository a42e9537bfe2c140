"""Destination naming policy.

Turns a photo's capture time and extension into the path it should be
moved to. Nothing here touches the filesystem; collisions are handled by
the rename step (see reserve_unique_path).
"""

import os

from naminator.core.models import Photo, RenameConfig
from naminator.core.utils import parent_dir

DATE_DIR_FORMAT = "%Y-%m-%d"
FILENAME_FORMAT = "%Y-%m-%d_%H-%M-%S"


def base_dir(photo: Photo, config: RenameConfig) -> str:
    """Directory the grouping subdirectories hang off.

    Without a destination override, grouped photos go next to their
    original folder rather than inside it.
    """
    if config.dest_dir:
        return config.dest_dir
    if config.grouping:
        return parent_dir(photo.source_dir)
    return photo.source_dir


def destination_dir(photo: Photo, config: RenameConfig) -> str:
    """Directory a photo is moved into."""
    dest = base_dir(photo, config)
    if config.group_by_date:
        dest = os.path.join(dest, photo.created_at.strftime(DATE_DIR_FORMAT))
    if config.group_by_ext:
        dest = os.path.join(dest, photo.extension)
    return dest


def destination_name(photo: Photo) -> str:
    """File name for a photo, e.g. '2024-01-01_09-00-00.jpg'."""
    return f"{photo.created_at.strftime(FILENAME_FORMAT)}.{photo.extension}"


def compute_destination(photo: Photo, config: RenameConfig) -> str:
    """Compute where a photo should live.

    Args:
        photo: Photo with created_at, extension and source_dir populated.
        config: Destination override and grouping flags.

    Returns:
        Destination path. Identical inputs always give the same path.

    Raises:
        ValueError: If the photo has no capture time or extension.
    """
    if photo.created_at is None or not photo.extension:
        raise ValueError(f"{photo.name}: capture time and extension are required")
    return os.path.join(destination_dir(photo, config), destination_name(photo))
