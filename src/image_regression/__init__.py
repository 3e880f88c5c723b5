"""Grayscale image regression training with PyTorch Lightning."""

__version__ = "0.0.1"
