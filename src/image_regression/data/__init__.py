"""Data pipeline for image_regression."""

from image_regression.data.batcher import ImageBatcher
from image_regression.data.datamodule import ImageRegressionDataModule
from image_regression.data.dataset import ImageRegressionDataset
from image_regression.data.item import IMG_HEIGHT, IMG_WIDTH, NUM_PIXELS, ImageItem

__all__ = [
    "IMG_HEIGHT",
    "IMG_WIDTH",
    "NUM_PIXELS",
    "ImageBatcher",
    "ImageItem",
    "ImageRegressionDataModule",
    "ImageRegressionDataset",
]
