"""Type aliases and containers for image_regression inter-module contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypedDict

import torch


class RegressionBatch(TypedDict):
    """A single batch produced by ImageBatcher.

    images: Float tensor of shape (B, IMG_WIDTH, IMG_HEIGHT), values in [0, 1].
    labels: Float tensor of shape (B,), one regression target per image.
    """

    images: torch.Tensor
    labels: torch.Tensor


@dataclass
class RegressionOutput:
    """Result of one forward step.

    loss: Scalar MSE loss, mean over all elements.
    predictions: Model output of shape (B, num_classes).
    targets: Labels unsqueezed to shape (B, 1).
    """

    loss: torch.Tensor
    predictions: torch.Tensor
    targets: torch.Tensor


@dataclass
class TrainOutput(RegressionOutput):
    """RegressionOutput plus per-parameter gradients for an external optimizer.

    ``gradients`` maps ``named_parameters()`` names to tensors with the same
    shape as the parameter.
    """

    gradients: dict[str, torch.Tensor] = field(default_factory=dict)
