"""Training callbacks for image_regression."""

from image_regression.callbacks.model_info import ModelInfoCallback
from image_regression.callbacks.statistics import LabelStatisticsCallback

__all__ = [
    "LabelStatisticsCallback",
    "ModelInfoCallback",
]
