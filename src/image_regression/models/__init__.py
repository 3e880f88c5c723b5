"""Regression model implementations."""

from image_regression.models.regressor import (
    FLAT_FEATURES,
    POOL_OUTPUT_SIZE,
    ImageRegressionModel,
)

__all__ = [
    "FLAT_FEATURES",
    "POOL_OUTPUT_SIZE",
    "ImageRegressionModel",
]
