"""Shared pytest fixtures for image_regression tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from image_regression.data.item import IMG_HEIGHT, IMG_WIDTH

WriteImage = Callable[..., Path]


@pytest.fixture()
def write_webp(tmp_path: Path) -> WriteImage:
    """Factory writing a lossless grayscale webp into ``tmp_path / "data"``.

    Lossless webp round-trips 8-bit grayscale exactly, so the stored pixel
    values can be asserted after decoding.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir(exist_ok=True)

    def _write(
        name: str,
        value: int = 128,
        size: tuple[int, int] = (IMG_WIDTH, IMG_HEIGHT),
    ) -> Path:
        path = data_dir / name
        Image.new("L", size, color=value).save(path, format="WEBP", lossless=True)
        return path

    return _write


@pytest.fixture()
def tmp_dataset_dir(write_webp: WriteImage) -> Path:
    """Data directory mixing valid samples with files that must be ignored.

    - ``3_a.webp``, ``3_b.webp``, ``7_c.webp``: valid 90x50 samples.
    - ``notes.txt``: not an image, name lacks "webp".
    - ``other.png``: valid image, name lacks "webp".
    """
    write_webp("3_a.webp", value=30)
    write_webp("3_b.webp", value=60)
    path = write_webp("7_c.webp", value=255)
    data_dir = path.parent
    (data_dir / "notes.txt").write_text("not an image\n")
    Image.new("L", (IMG_WIDTH, IMG_HEIGHT), color=10).save(data_dir / "other.png")
    return data_dir
