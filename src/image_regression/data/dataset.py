"""Flat directory of label-prefixed webp images for scalar regression."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from loguru import logger
from PIL import Image, UnidentifiedImageError
from torch.utils.data import Dataset

from image_regression.data.item import NUM_PIXELS, ImageItem
from image_regression.data.utils import get_files
from image_regression.errors import (
    ImageDecodeError,
    LabelParseError,
    PixelCountError,
    SampleShapeError,
)

DEFAULT_DATA_ROOT = Path("./data")
FILE_MARKER = "webp"

_LABEL_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_label(path: Path) -> int:
    """Integer label from the filename text before the first underscore.

    ``"42_front.webp"`` -> 42.  A name without an underscore uses the whole
    name, which then fails to parse unless it is a bare integer.

    Raises:
        LabelParseError: the prefix is not an integer.
    """
    prefix = path.name.split("_", 1)[0]
    if not _LABEL_PATTERN.fullmatch(prefix):
        logger.error(f"Unparsable label prefix {prefix!r} in {path}")
        raise LabelParseError(path, prefix)
    return int(prefix)


def load_grayscale(path: Path) -> bytes:
    """Decode an image to 8-bit grayscale at native size and return raw bytes.

    Raises:
        ImageDecodeError: Pillow cannot open or decode the file.
    """
    try:
        with Image.open(path) as img:
            return img.convert("L").tobytes()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.error(f"Failed to decode image {path}: {e}")
        raise ImageDecodeError(path, "Failed to decode image") from e


class ImageRegressionDataset(Dataset[ImageItem]):
    """Dataset of grayscale images whose filenames carry an integer label.

    Every regular file directly under ``root`` whose name contains ``"webp"``
    is decoded and normalized at construction time.  Files are named
    ``<label>_<anything>.webp``; anything else in the directory is ignored.

    Loading is all-or-nothing: an unreadable directory, an undecodable image,
    an unparsable label or a wrongly sized image aborts construction with a
    :class:`~image_regression.errors.DatasetError` naming the file.

    Images are never resized.  They must already be ``IMG_WIDTH x IMG_HEIGHT``
    pixels.

    Args:
        root: Directory holding the image files.
        split: Name recorded for logging.  ``"train"`` and ``"test"`` load the
            same way; pass a different ``root`` to get a different split.
    """

    def __init__(
        self,
        root: Path | str = DEFAULT_DATA_ROOT,
        split: Literal["train", "val", "test"] = "train",
    ) -> None:
        self.root = Path(root)
        self.split = split
        self.samples: list[ImageItem] = []
        self.paths: list[Path] = []

        for path in get_files(self.root, FILE_MARKER):
            raw = load_grayscale(path)
            label = parse_label(path)
            try:
                item = ImageItem.from_raw(raw, label)
            except PixelCountError as e:
                logger.error(
                    f"{path} decoded to {e.actual} pixels, expected {NUM_PIXELS}"
                )
                raise SampleShapeError(path, e.expected, e.actual) from e
            self.samples.append(item)
            self.paths.append(path)

        logger.debug(
            f"ImageRegressionDataset[{split}]: loaded {len(self.samples)} "
            f"samples from {self.root}"
        )

    @classmethod
    def train(cls, root: Path | str = DEFAULT_DATA_ROOT) -> ImageRegressionDataset:
        """Training dataset read from ``root``."""
        return cls(root, split="train")

    @classmethod
    def test(cls, root: Path | str = DEFAULT_DATA_ROOT) -> ImageRegressionDataset:
        """Test dataset read from ``root`` (same loading as :meth:`train`)."""
        return cls(root, split="test")

    @property
    def labels(self) -> list[int]:
        return [item.label for item in self.samples]

    def get(self, index: int) -> ImageItem | None:
        """Sample at ``index``, or ``None`` when out of range.

        Negative indices are treated as out of range.
        """
        if 0 <= index < len(self.samples):
            return self.samples[index]
        return None

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, idx: int) -> ImageItem:
        item = self.get(idx)
        if item is None:
            msg = f"Index {idx} out of range for dataset of length {len(self)}"
            raise IndexError(msg)
        return item
