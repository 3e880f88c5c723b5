"""Utility functions for the data pipeline."""

from pathlib import Path

from loguru import logger

from image_regression.errors import DatasetDirectoryError


def get_files(root: Path, marker: str) -> list[Path]:
    """List regular files directly under root whose name contains marker.

    Args:
        root: Directory to scan (not recursive).
        marker: Substring that must appear anywhere in the file name
            (e.g., "webp").

    Returns:
        Matching file paths sorted by name.

    Raises:
        DatasetDirectoryError: root is missing, not a directory, or unreadable.
    """
    if not root.is_dir():
        logger.error(f"Data directory not found: {root}")
        raise DatasetDirectoryError(root, "Data directory not found")
    try:
        entries = list(root.iterdir())
    except OSError as e:
        logger.error(f"Cannot read data directory {root}: {e}")
        raise DatasetDirectoryError(root, "Cannot read data directory") from e

    files = []
    for p in entries:
        if marker not in p.name:
            continue
        if not p.is_file():
            logger.warning(f"Skipping non-file entry matching {marker!r}: {p}")
            continue
        files.append(p)
    return sorted(files, key=lambda p: p.name)
