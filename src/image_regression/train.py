"""Training entrypoint for image_regression.

Usage:
    image-regression-train                              # defaults
    image-regression-train data.data_root=/data/ages    # other directory
    image-regression-train model.hidden_size=256        # override model
    image-regression-train trainer.max_epochs=50        # override epochs
"""

import sys
from typing import Any

import hydra
import lightning as L
from lightning.pytorch.callbacks import ModelCheckpoint
from loguru import logger
from omegaconf import DictConfig, OmegaConf

# Import to trigger @register decorators BEFORE Hydra parses config
import image_regression.data  # noqa: F401
import image_regression.models  # noqa: F401


@hydra.main(version_base=None, config_path="conf", config_name="train_regressor")
def main(cfg: DictConfig) -> None:
    """Fit, then test on the best checkpoint, with the given Hydra config."""
    logger.remove()
    logger.add(sys.stderr, level=cfg.get("log_level", "INFO"))

    logger.info(f"Configuration:\n{OmegaConf.to_yaml(cfg)}")

    L.seed_everything(cfg.get("seed", 42), workers=True)

    datamodule: L.LightningDataModule = hydra.utils.instantiate(cfg.data)
    model: L.LightningModule = hydra.utils.instantiate(cfg.model)

    loggers: list[Any] = []
    if cfg.get("logging"):
        for v in cfg.logging.values():
            if v is not None and "_target_" in v:
                loggers.append(hydra.utils.instantiate(v))

    callbacks: list[L.Callback] = []
    if cfg.get("callbacks"):
        for v in cfg.callbacks.values():
            if v is not None and "_target_" in v:
                callbacks.append(hydra.utils.instantiate(v))

    trainer = L.Trainer(
        **dict(cfg.trainer),
        callbacks=callbacks,
        logger=loggers or False,
    )
    trainer.fit(model, datamodule=datamodule)

    # "best" needs a ModelCheckpoint; otherwise test the final weights
    has_checkpoint = any(isinstance(cb, ModelCheckpoint) for cb in callbacks)
    trainer.test(
        model,
        datamodule=datamodule,
        ckpt_path="best" if has_checkpoint else None,
    )


if __name__ == "__main__":
    main()
