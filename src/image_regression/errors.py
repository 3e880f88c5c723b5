"""Exception types raised while building a regression dataset."""

from __future__ import annotations

from pathlib import Path


class PixelCountError(ValueError):
    """Raw pixel buffer does not hold exactly ``expected`` values."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Expected {expected} pixel values, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class DatasetError(Exception):
    """Base class for fatal dataset construction failures.

    Carries the offending ``path`` so a malformed data directory can be
    diagnosed from the traceback alone.
    """

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class DatasetDirectoryError(DatasetError):
    """Data directory is missing, not a directory, or unreadable."""


class ImageDecodeError(DatasetError):
    """Pillow could not open or decode an image file."""


class LabelParseError(DatasetError):
    """Filename prefix before the first underscore is not an integer."""

    def __init__(self, path: Path, prefix: str) -> None:
        super().__init__(path, f"Cannot parse integer label from {prefix!r}")
        self.prefix = prefix


class SampleShapeError(DatasetError):
    """Decoded image does not have the expected number of pixels."""

    def __init__(self, path: Path, expected: int, actual: int) -> None:
        super().__init__(
            path, f"Expected {expected} pixels after decoding, got {actual}"
        )
        self.expected = expected
        self.actual = actual
