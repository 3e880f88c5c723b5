"""Small CNN regressing a scalar label from a single-channel image."""

from __future__ import annotations

from typing import Any

import lightning as L
import torch
import torch.nn as nn
import torch.nn.functional as F
from torchmetrics import MeanAbsoluteError, MeanSquaredError

from image_regression.config import ModelConfig, OptimizerConfig
from image_regression.losses import build_loss_fn
from image_regression.types import RegressionBatch, RegressionOutput, TrainOutput
from image_regression.utils.hydra import register

CONV1_CHANNELS = 8
CONV2_CHANNELS = 16
KERNEL_SIZE = (3, 3)

# Adaptive pooling always yields this spatial size, whatever the input
# width/height, so linear1's input width is fixed.
POOL_OUTPUT_SIZE = (8, 8)
FLAT_FEATURES = CONV2_CHANNELS * POOL_OUTPUT_SIZE[0] * POOL_OUTPUT_SIZE[1]


@register(group="model", name="cnn_regressor", num_classes=1, hidden_size=512)
class ImageRegressionModel(L.LightningModule):
    """Two conv layers, adaptive average pool, two linear layers.

    Shapes (B = batch size):

    - images ``(B, W, H)`` -> ``(B, 1, W, H)``
    - conv1 -> ``(B, 8, W-2, H-2)``, dropout
    - conv2 -> ``(B, 16, W-4, H-4)``, dropout, ReLU
    - pool -> ``(B, 16, 8, 8)`` -> flatten ``(B, 1024)``
    - linear1 -> ``(B, hidden_size)``, dropout, ReLU
    - linear2 -> ``(B, num_classes)``

    Dropout is applied functionally from an explicit ``training`` flag, so
    ``valid_step`` is deterministic regardless of the module's train/eval
    mode.  Use :meth:`ModelConfig.init` or Hydra to construct.
    """

    def __init__(
        self,
        num_classes: int = 1,
        hidden_size: int = 512,
        dropout: float = 0.5,
        learning_rate: float = 1e-4,
        weight_decay: float = 0.0,
        betas: tuple[float, float] = (0.9, 0.999),
        eps: float = 1e-5,
        loss: str = "mse",
        optimizer: OptimizerConfig | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__()
        self.model_config = ModelConfig(
            num_classes=num_classes, hidden_size=hidden_size, dropout=dropout
        )
        self.optimizer_config = optimizer or OptimizerConfig(
            learning_rate=learning_rate,
            weight_decay=weight_decay,
            betas=tuple(betas),
            eps=eps,
        )
        self.save_hyperparameters(ignore=["optimizer", "kwargs"])

        self.conv1 = nn.Conv2d(1, CONV1_CHANNELS, KERNEL_SIZE)
        self.conv2 = nn.Conv2d(CONV1_CHANNELS, CONV2_CHANNELS, KERNEL_SIZE)
        self.pool = nn.AdaptiveAvgPool2d(POOL_OUTPUT_SIZE)
        self.linear1 = nn.Linear(FLAT_FEATURES, self.model_config.hidden_size)
        self.linear2 = nn.Linear(
            self.model_config.hidden_size, self.model_config.num_classes
        )
        self.dropout_p = self.model_config.dropout
        self.loss_fn = build_loss_fn(loss)

        self.val_mae = MeanAbsoluteError()
        self.val_rmse = MeanSquaredError(squared=False)
        self.test_mae = MeanAbsoluteError()
        self.test_rmse = MeanSquaredError(squared=False)

    def forward(
        self, images: torch.Tensor, training: bool | None = None
    ) -> torch.Tensor:
        if training is None:
            training = self.training
        batch_size, width, height = images.shape

        # Create a channel.
        x = images.reshape(batch_size, 1, width, height)

        x = self.conv1(x)  # (B, 8, _, _)
        x = F.dropout(x, p=self.dropout_p, training=training)
        x = self.conv2(x)  # (B, 16, _, _)
        x = F.dropout(x, p=self.dropout_p, training=training)
        x = F.relu(x)

        x = self.pool(x)  # (B, 16, 8, 8)
        x = x.reshape(batch_size, FLAT_FEATURES)
        x = self.linear1(x)
        x = F.dropout(x, p=self.dropout_p, training=training)
        x = F.relu(x)

        return self.linear2(x)  # (B, num_classes)

    # ------------------------------------------------------------------
    # Step contracts
    # ------------------------------------------------------------------

    def forward_step(
        self, batch: RegressionBatch, training: bool
    ) -> RegressionOutput:
        """Predict and compute the loss against labels reshaped to (B, 1)."""
        targets = batch["labels"].unsqueeze(1)
        predictions = self(batch["images"], training=training)
        loss = self.loss_fn(predictions, targets.expand_as(predictions))
        return RegressionOutput(loss=loss, predictions=predictions, targets=targets)

    def train_step(self, batch: RegressionBatch) -> TrainOutput:
        """Forward with dropout and return gradients without updating weights.

        Gradients come from ``torch.autograd.grad``; ``param.grad`` is left
        untouched so an external optimizer decides how to apply them.
        """
        named = [(n, p) for n, p in self.named_parameters() if p.requires_grad]
        with torch.enable_grad():
            output = self.forward_step(batch, training=True)
            grads = torch.autograd.grad(output.loss, [p for _, p in named])
        return TrainOutput(
            loss=output.loss.detach(),
            predictions=output.predictions.detach(),
            targets=output.targets,
            gradients={name: g for (name, _), g in zip(named, grads)},
        )

    def valid_step(self, batch: RegressionBatch) -> RegressionOutput:
        """Inference-mode forward step: no dropout, no autograd graph."""
        with torch.no_grad():
            return self.forward_step(batch, training=False)

    # ------------------------------------------------------------------
    # Lightning hooks
    # ------------------------------------------------------------------

    def training_step(self, batch: RegressionBatch, batch_idx: int) -> torch.Tensor:
        output = self.forward_step(batch, training=True)
        self.log(
            "train/loss",
            output.loss,
            on_step=True,
            on_epoch=True,
            prog_bar=True,
            batch_size=output.targets.shape[0],
        )
        return output.loss

    def validation_step(self, batch: RegressionBatch, batch_idx: int) -> None:
        output = self.valid_step(batch)
        self.log(
            "val/loss",
            output.loss,
            on_step=False,
            on_epoch=True,
            prog_bar=True,
            batch_size=output.targets.shape[0],
        )
        targets = output.targets.expand_as(output.predictions)
        self.val_mae.update(output.predictions, targets)
        self.val_rmse.update(output.predictions, targets)

    def on_validation_epoch_end(self) -> None:
        self.log("val/mae", self.val_mae.compute(), prog_bar=True)
        self.log("val/rmse", self.val_rmse.compute())
        self.val_mae.reset()
        self.val_rmse.reset()

    def test_step(self, batch: RegressionBatch, batch_idx: int) -> None:
        output = self.valid_step(batch)
        self.log(
            "test/loss",
            output.loss,
            on_step=False,
            on_epoch=True,
            batch_size=output.targets.shape[0],
        )
        targets = output.targets.expand_as(output.predictions)
        self.test_mae.update(output.predictions, targets)
        self.test_rmse.update(output.predictions, targets)

    def on_test_epoch_end(self) -> None:
        self.log("test/mae", self.test_mae.compute())
        self.log("test/rmse", self.test_rmse.compute())
        self.test_mae.reset()
        self.test_rmse.reset()

    def configure_optimizers(self) -> dict[str, Any]:  # type: ignore[override]
        cfg = self.optimizer_config
        optimizer = torch.optim.Adam(
            self.parameters(),
            lr=cfg.learning_rate,
            betas=cfg.betas,
            eps=cfg.eps,
            weight_decay=cfg.weight_decay,
        )
        return {"optimizer": optimizer}
