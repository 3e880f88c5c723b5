"""Label statistics callback — prints the training label distribution."""

from __future__ import annotations

from collections import Counter

import lightning as L
from loguru import logger
from rich import box
from rich.console import Console
from rich.table import Table


class LabelStatisticsCallback(L.Callback):
    """Print a rich table of label counts from the training dataset.

    Reads ``trainer.datamodule._train_dataset.labels``.  Labels are sorted
    numerically; ``max_rows`` caps the table for wide label ranges (the
    summary line is always logged).

    Args:
        max_rows: Maximum number of distinct labels listed in the table.
    """

    def __init__(self, max_rows: int = 50) -> None:
        super().__init__()
        self.max_rows = max_rows

    def on_fit_start(self, trainer: L.Trainer, pl_module: L.LightningModule) -> None:
        """Compute and display the label distribution at training start."""
        datamodule = getattr(trainer, "datamodule", None)
        if datamodule is None:
            logger.warning("No datamodule found. Skipping label statistics.")
            return

        train_dataset = getattr(datamodule, "_train_dataset", None)
        if train_dataset is None:
            logger.warning(
                "No _train_dataset found on datamodule. Skipping label statistics."
            )
            return

        labels: list[int] = list(train_dataset.labels)
        total = len(labels)
        if total == 0:
            logger.warning("Training dataset is empty. Skipping label statistics.")
            return

        counts = Counter(labels)
        mean = sum(labels) / total
        std = (sum((v - mean) ** 2 for v in labels) / total) ** 0.5
        logger.info(
            f"Training dataset: {total} samples, {len(counts)} distinct labels, "
            f"range [{min(labels)}, {max(labels)}], mean {mean:.2f}, std {std:.2f}"
        )

        console = Console()
        table = Table(
            title="Training Label Distribution",
            header_style="bold magenta",
            box=box.SQUARE,
            show_lines=True,
        )
        table.add_column("Label", justify="right", style="cyan")
        table.add_column("Count", justify="right", style="green")
        table.add_column("Percentage", justify="right", style="yellow")

        for label in sorted(counts)[: self.max_rows]:
            count = counts[label]
            table.add_row(str(label), str(count), f"{count / total * 100:.1f}%")

        console.print(table)
