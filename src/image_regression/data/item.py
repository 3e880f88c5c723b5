"""Normalized grayscale sample: fixed-length pixel vector plus scalar label."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import torch

from image_regression.errors import PixelCountError

IMG_WIDTH: int = 90
IMG_HEIGHT: int = 50
NUM_PIXELS: int = IMG_WIDTH * IMG_HEIGHT

_PIXEL_MAX = 255.0


@dataclass(frozen=True)
class ImageItem:
    """One dataset sample.

    image: float32 tensor of shape (NUM_PIXELS,), values in [0, 1], in the
        row-major order the decoder produced them.
    label: integer regression target parsed from the filename.
    """

    image: torch.Tensor
    label: int

    @classmethod
    def from_raw(cls, image_raw: bytes | bytearray | Iterable[int], label: int) -> ImageItem:
        """Normalize 8-bit grayscale bytes to [0, 1] by dividing by 255.

        Raises:
            PixelCountError: ``image_raw`` does not hold exactly
                ``IMG_WIDTH * IMG_HEIGHT`` values.
        """
        buffer = bytearray(image_raw)
        if len(buffer) != NUM_PIXELS:
            raise PixelCountError(expected=NUM_PIXELS, actual=len(buffer))
        pixels = torch.frombuffer(buffer, dtype=torch.uint8)
        image = pixels.to(torch.float32) / _PIXEL_MAX
        return cls(image=image, label=int(label))
