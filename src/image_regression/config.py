"""Pydantic frozen configuration models for image_regression."""

from __future__ import annotations

from typing import TYPE_CHECKING

import torch
from pydantic import BaseModel, Field, PositiveInt, model_validator

if TYPE_CHECKING:
    from image_regression.models.regressor import ImageRegressionModel


class OptimizerConfig(BaseModel, frozen=True):
    """Adam hyperparameters consumed by ``configure_optimizers``."""

    learning_rate: float = Field(default=1e-4, gt=0.0)
    weight_decay: float = Field(default=0.0, ge=0.0)
    betas: tuple[float, float] = (0.9, 0.999)
    eps: float = Field(default=1e-5, gt=0.0)


class ModelConfig(BaseModel, frozen=True):
    """Layer sizes for ImageRegressionModel.

    Only read at construction time to fix the linear layer shapes.
    ``num_classes`` is the width of the regression head (1 for a single
    scalar target).
    """

    num_classes: PositiveInt
    hidden_size: PositiveInt
    dropout: float = Field(default=0.5, ge=0.0, le=1.0)

    def init(
        self,
        device: torch.device | str | None = None,
        optimizer: OptimizerConfig | None = None,
    ) -> ImageRegressionModel:
        """Build the model and move its parameters to ``device``."""
        from image_regression.models.regressor import ImageRegressionModel

        model = ImageRegressionModel(
            num_classes=self.num_classes,
            hidden_size=self.hidden_size,
            dropout=self.dropout,
            optimizer=optimizer,
        )
        if device is not None:
            model = model.to(device)
        return model


class DataModuleConfig(BaseModel, frozen=True):
    """Configuration for ImageRegressionDataModule.

    ``val_root`` and ``test_root`` default to ``data_root``: the dataset has
    no split of its own, so every stage reads the same directory unless a
    separate one is given.
    """

    data_root: str = "./data"
    val_root: str | None = None
    test_root: str | None = None
    batch_size: PositiveInt = 64
    num_workers: int = Field(default=4, ge=0)
    pin_memory: bool = True
    persistent_workers: bool = True
    shuffle: bool = True

    @model_validator(mode="after")
    def _persistent_workers_requires_workers(self) -> DataModuleConfig:
        """persistent_workers=True with num_workers=0 is rejected by DataLoader."""
        if self.persistent_workers and self.num_workers == 0:
            # Use object.__setattr__ because model is frozen
            object.__setattr__(self, "persistent_workers", False)
        return self
