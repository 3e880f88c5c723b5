"""LightningDataModule for the label-prefixed webp regression dataset."""

from pathlib import Path
from typing import Any

import lightning as L
import torch
from loguru import logger
from torch.utils.data import DataLoader

from image_regression.config import DataModuleConfig
from image_regression.data.batcher import ImageBatcher
from image_regression.data.dataset import ImageRegressionDataset
from image_regression.data.item import ImageItem
from image_regression.utils.hydra import register


@register(group="data", name="webp_folder")
class ImageRegressionDataModule(L.LightningDataModule):
    """DataModule serving ImageRegressionDataset through ImageBatcher.

    All three stages read ``data_root`` unless ``val_root`` / ``test_root``
    point elsewhere.  The directory carries no split of its own and no split
    ratio is applied here.

    Only the train loader shuffles.  Batches are collated on CPU; Lightning
    transfers them to the model's device.

    Args:
        config: DataModuleConfig frozen model with all DataLoader parameters.
            If provided, flat kwargs are ignored.
        data_root: Directory of ``<label>_*.webp`` files (used when config
            is None, e.g. Hydra).
        val_root: Optional separate validation directory.
        test_root: Optional separate test directory.
        batch_size: Batch size for DataLoaders (default: 64).
        num_workers: Number of DataLoader workers (default: 4).
        pin_memory: Whether to pin memory (default: True).
        persistent_workers: Keep workers alive between epochs (default: True).
        shuffle: Shuffle the train loader each epoch (default: True).
        **kwargs: Absorbs extra Hydra-injected keys (_target_, _recursive_, etc.).
    """

    def __init__(
        self,
        config: DataModuleConfig | None = None,
        *,
        data_root: str = "./data",
        val_root: str | None = None,
        test_root: str | None = None,
        batch_size: int = 64,
        num_workers: int = 4,
        pin_memory: bool = True,
        persistent_workers: bool = True,
        shuffle: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__()
        if config is not None:
            self._config = config
        else:
            self._config = DataModuleConfig(
                data_root=data_root,
                val_root=val_root,
                test_root=test_root,
                batch_size=batch_size,
                num_workers=num_workers,
                pin_memory=pin_memory,
                persistent_workers=persistent_workers,
                shuffle=shuffle,
            )
        self._data_root = Path(self._config.data_root)
        self._val_root = Path(self._config.val_root or self._config.data_root)
        self._test_root = Path(self._config.test_root or self._config.data_root)

        # Multiprocessing DataLoader workers crash on Apple Silicon MPS.
        num_workers = self._config.num_workers
        if torch.backends.mps.is_available() and num_workers > 0:
            logger.warning(
                "MPS detected: setting num_workers=0 to avoid multiprocessing "
                "crash. Use linux-64 / CUDA for multi-worker DataLoading."
            )
            num_workers = 0

        self._num_workers = num_workers
        self._pin_memory = self._config.pin_memory
        self._persistent_workers = self._config.persistent_workers and num_workers > 0
        self._batch_size = self._config.batch_size
        self._shuffle = self._config.shuffle
        self._batcher = ImageBatcher()

        self._train_dataset: ImageRegressionDataset | None = None
        self._val_dataset: ImageRegressionDataset | None = None
        self._test_dataset: ImageRegressionDataset | None = None

    # ------------------------------------------------------------------
    # LightningDataModule lifecycle
    # ------------------------------------------------------------------

    def setup(self, stage: str | None = None) -> None:
        """Instantiate datasets for the given stage.

        Args:
            stage: "fit", "validate", "test", or None (all stages).
                   "fit" instantiates train + val.
                   "validate" instantiates val only.
                   "test" instantiates test only.
        """
        if stage in ("fit", None):
            self._train_dataset = ImageRegressionDataset.train(self._data_root)
            self._val_dataset = ImageRegressionDataset(self._val_root, split="val")
            logger.info(
                f"Setup fit: train={len(self._train_dataset)}, "
                f"val={len(self._val_dataset)} samples"
            )
        elif stage == "validate":
            self._val_dataset = ImageRegressionDataset(self._val_root, split="val")
            logger.info(f"Setup validate: {len(self._val_dataset)} samples")

        if stage in ("test", None):
            self._test_dataset = ImageRegressionDataset.test(self._test_root)
            logger.info(f"Setup test: {len(self._test_dataset)} samples")

    # ------------------------------------------------------------------
    # DataLoaders
    # ------------------------------------------------------------------

    def _loader(
        self, dataset: ImageRegressionDataset, shuffle: bool
    ) -> DataLoader[ImageItem]:
        return DataLoader(
            dataset,
            batch_size=self._batch_size,
            shuffle=shuffle,
            num_workers=self._num_workers,
            pin_memory=self._pin_memory,
            persistent_workers=self._persistent_workers,
            collate_fn=self._batcher,
        )

    def train_dataloader(self) -> DataLoader[ImageItem]:
        """Return the training DataLoader (shuffled unless disabled)."""
        if self._train_dataset is None:
            raise RuntimeError("Call setup('fit') first")
        return self._loader(self._train_dataset, shuffle=self._shuffle)

    def val_dataloader(self) -> DataLoader[ImageItem]:
        """Return validation DataLoader (deterministic order)."""
        if self._val_dataset is None:
            raise RuntimeError("Call setup('fit') first")
        return self._loader(self._val_dataset, shuffle=False)

    def test_dataloader(self) -> DataLoader[ImageItem]:
        """Return test DataLoader (deterministic order)."""
        if self._test_dataset is None:
            raise RuntimeError("Call setup('test') first")
        return self._loader(self._test_dataset, shuffle=False)
