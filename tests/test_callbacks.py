"""Tests for the observability callbacks.

All tests use minimal models, MagicMock trainers, and CPU only.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from loguru import logger

from image_regression.callbacks import LabelStatisticsCallback, ModelInfoCallback
from image_regression.config import ModelConfig

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def log_messages() -> Any:
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, format="{message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)


def _mock_trainer(datamodule: Any = None) -> MagicMock:
    trainer = MagicMock()
    trainer.datamodule = datamodule
    return trainer


def _mock_datamodule(labels: list[int] | None) -> MagicMock:
    dm = MagicMock()
    if labels is None:
        dm._train_dataset = None
    else:
        dm._train_dataset.labels = labels
    return dm


# ---------------------------------------------------------------------------
# ModelInfoCallback
# ---------------------------------------------------------------------------


class TestModelInfoCallback:
    def test_logs_parameter_count(self, log_messages: list[str]) -> None:
        model = ModelConfig(num_classes=1, hidden_size=4).init()
        expected = sum(p.numel() for p in model.parameters())
        ModelInfoCallback().on_fit_start(_mock_trainer(), model)
        joined = "".join(log_messages)
        assert "ImageRegressionModel" in joined
        assert f"{expected:,}" in joined


# ---------------------------------------------------------------------------
# LabelStatisticsCallback
# ---------------------------------------------------------------------------


class TestLabelStatisticsCallback:
    def test_summary_logged(self, log_messages: list[str]) -> None:
        dm = _mock_datamodule([3, 3, 7])
        LabelStatisticsCallback().on_fit_start(_mock_trainer(dm), MagicMock())
        joined = "".join(log_messages)
        assert "3 samples" in joined
        assert "2 distinct labels" in joined
        assert "range [3, 7]" in joined

    def test_no_datamodule_skips(self, log_messages: list[str]) -> None:
        LabelStatisticsCallback().on_fit_start(_mock_trainer(None), MagicMock())
        assert any("Skipping label statistics" in m for m in log_messages)

    def test_no_train_dataset_skips(self, log_messages: list[str]) -> None:
        dm = _mock_datamodule(None)
        LabelStatisticsCallback().on_fit_start(_mock_trainer(dm), MagicMock())
        assert any("No _train_dataset" in m for m in log_messages)

    def test_empty_dataset_skips(self, log_messages: list[str]) -> None:
        dm = _mock_datamodule([])
        LabelStatisticsCallback().on_fit_start(_mock_trainer(dm), MagicMock())
        assert any("empty" in m for m in log_messages)
