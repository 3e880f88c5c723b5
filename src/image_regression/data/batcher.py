"""Collate ImageItem samples into stacked RegressionBatch tensors."""

from __future__ import annotations

from collections.abc import Sequence

import torch

from image_regression.data.item import IMG_HEIGHT, IMG_WIDTH, ImageItem
from image_regression.types import RegressionBatch


class ImageBatcher:
    """Stack samples into ``{"images": (B, W, H), "labels": (B,)}``.

    Input order is preserved; no shuffling or filtering happens here.  An
    instance is directly usable as a ``DataLoader`` ``collate_fn``.

    Args:
        device: Device for the produced tensors.  ``None`` keeps them on CPU,
            which is what DataLoader workers need; Lightning moves batches
            to the accelerator itself.
        dtype: Floating element type for both images and labels.
    """

    def __init__(
        self,
        device: torch.device | str | None = None,
        dtype: torch.dtype = torch.float32,
    ) -> None:
        self.device = torch.device(device) if device is not None else None
        self.dtype = dtype

    def batch(
        self,
        samples: Sequence[ImageItem],
        device: torch.device | str | None = None,
    ) -> RegressionBatch:
        """Build a batch, overriding the configured device if one is given."""
        if not samples:
            msg = "Cannot batch an empty list of samples"
            raise ValueError(msg)
        target = torch.device(device) if device is not None else self.device

        labels = torch.tensor(
            [item.label for item in samples], dtype=self.dtype, device=target
        )
        images = torch.stack(
            [
                item.image.to(device=target, dtype=self.dtype).reshape(
                    IMG_WIDTH, IMG_HEIGHT
                )
                for item in samples
            ]
        )
        return {"images": images, "labels": labels}

    def __call__(self, samples: Sequence[ImageItem]) -> RegressionBatch:
        return self.batch(samples)
