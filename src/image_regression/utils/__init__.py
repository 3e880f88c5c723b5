"""Shared helpers for image_regression."""

from image_regression.utils.hydra import register

__all__ = ["register"]
