"""Loss functions for scalar regression training."""

from __future__ import annotations

import torch.nn as nn


def build_loss_fn(name: str = "mse") -> nn.Module:
    """Factory for regression losses.

    Both losses reduce by mean over every element of the prediction tensor.

    Parameters
    ----------
    name:
        ``"mse"`` (squared error) or ``"l1"`` (absolute error).

    Returns
    -------
    nn.Module
        The configured loss function.
    """
    if name == "mse":
        return nn.MSELoss(reduction="mean")
    if name == "l1":
        return nn.L1Loss(reduction="mean")
    msg = f"Unknown loss function: {name!r}. Use 'mse' or 'l1'."
    raise ValueError(msg)
