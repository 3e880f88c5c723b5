"""Unit tests for image_regression.types and image_regression.config."""

import pytest
import torch
from pydantic import ValidationError

from image_regression.config import DataModuleConfig, ModelConfig, OptimizerConfig
from image_regression.types import RegressionBatch, RegressionOutput, TrainOutput


class TestModelConfig:
    def test_default_dropout(self) -> None:
        cfg = ModelConfig(num_classes=10, hidden_size=512)
        assert cfg.dropout == pytest.approx(0.5)

    def test_frozen_raises_on_mutation(self) -> None:
        cfg = ModelConfig(num_classes=1, hidden_size=512)
        with pytest.raises(ValidationError):
            cfg.hidden_size = 64  # type: ignore[misc]

    @pytest.mark.parametrize("dropout", [0.0, 1.0])
    def test_dropout_bounds_inclusive(self, dropout: float) -> None:
        assert ModelConfig(num_classes=1, hidden_size=1, dropout=dropout).dropout == dropout

    @pytest.mark.parametrize("dropout", [-0.1, 1.01])
    def test_dropout_out_of_range(self, dropout: float) -> None:
        with pytest.raises(ValidationError):
            ModelConfig(num_classes=1, hidden_size=1, dropout=dropout)

    @pytest.mark.parametrize("field", ["num_classes", "hidden_size"])
    def test_sizes_must_be_positive(self, field: str) -> None:
        kwargs = {"num_classes": 1, "hidden_size": 1, field: 0}
        with pytest.raises(ValidationError):
            ModelConfig(**kwargs)


class TestOptimizerConfig:
    def test_defaults(self) -> None:
        cfg = OptimizerConfig()
        assert cfg.learning_rate == pytest.approx(1e-4)
        assert cfg.weight_decay == 0.0
        assert cfg.betas == (0.9, 0.999)
        assert cfg.eps == pytest.approx(1e-5)

    def test_learning_rate_positive(self) -> None:
        with pytest.raises(ValidationError):
            OptimizerConfig(learning_rate=0.0)


class TestDataModuleConfig:
    def test_defaults(self) -> None:
        cfg = DataModuleConfig()
        assert cfg.data_root == "./data"
        assert cfg.val_root is None
        assert cfg.test_root is None
        assert cfg.batch_size == 64
        assert cfg.num_workers == 4
        assert cfg.pin_memory is True
        assert cfg.persistent_workers is True
        assert cfg.shuffle is True

    def test_frozen_raises_on_mutation(self) -> None:
        cfg = DataModuleConfig()
        with pytest.raises(ValidationError):
            cfg.batch_size = 8  # type: ignore[misc]

    def test_persistent_workers_auto_corrected_when_num_workers_zero(self) -> None:
        cfg = DataModuleConfig(num_workers=0, persistent_workers=True)
        assert cfg.persistent_workers is False

    def test_persistent_workers_preserved_when_num_workers_nonzero(self) -> None:
        cfg = DataModuleConfig(num_workers=2, persistent_workers=True)
        assert cfg.persistent_workers is True

    def test_batch_size_positive(self) -> None:
        with pytest.raises(ValidationError):
            DataModuleConfig(batch_size=0)


class TestRegressionTypes:
    def test_batch_typed_dict_keys(self) -> None:
        batch: RegressionBatch = {
            "images": torch.zeros(2, 90, 50),
            "labels": torch.zeros(2),
        }
        assert set(batch) == {"images", "labels"}

    def test_train_output_extends_regression_output(self) -> None:
        out = TrainOutput(
            loss=torch.tensor(0.0),
            predictions=torch.zeros(2, 1),
            targets=torch.zeros(2, 1),
        )
        assert isinstance(out, RegressionOutput)
        assert out.gradients == {}
