"""
Training Controller - Fixed-epoch training over the reference dataset.
"""

import logging
import time
from dataclasses import dataclass
from typing import List

import numpy as np

from ..config import TrainingConfig, DEFAULT_CONFIG
from ..data_layer.dataset_loader import DatasetRecord
from ..data_layer.statistics import DatasetStatistics
from .neural_network import NeuralNetwork

LOG = logging.getLogger(__name__)


@dataclass
class TrainingReport:
    """Outcome of a training run."""
    epochs_run: int
    sample_count: int
    initial_mse: float
    final_mse: float
    duration_seconds: float = 0.0

    @property
    def improvement_pct(self) -> float:
        if self.initial_mse == 0:
            return 0.0
        return (self.initial_mse - self.final_mse) / self.initial_mse * 100.0


def _build_samples(
    records: List[DatasetRecord],
    stats: DatasetStatistics,
    config: TrainingConfig
):
    inputs = [stats.normalize(r.feature_a, r.feature_b) for r in records]
    targets = [
        np.array([config.reference_target if r.is_reference_group else config.other_target])
        for r in records
    ]
    return inputs, targets


class TrainingController:
    """
    Trains the network on every record, every epoch, in file order.

    There is no shuffling, batching, validation split or early stopping:
    the full epoch count always runs. Normalization statistics are fixed
    before the first epoch.
    """

    def __init__(self, network: NeuralNetwork, config: TrainingConfig = None):
        self.network = network
        self.config = config or DEFAULT_CONFIG.training
        self._last_report: TrainingReport = None

    def train(
        self,
        records: List[DatasetRecord],
        stats: DatasetStatistics
    ) -> TrainingReport:
        """
        Run the training loop.

        Args:
            records: Reference dataset, in file order
            stats: Normalization constants captured before training

        Returns:
            TrainingReport with first- and last-epoch MSE
        """
        if not records:
            LOG.warning("No dataset records available, skipping training")
            self._last_report = TrainingReport(
                epochs_run=0, sample_count=0, initial_mse=0.0, final_mse=0.0
            )
            return self._last_report

        epochs = self.config.epochs
        inputs, targets = _build_samples(records, stats, self.config)
        count = len(records)

        LOG.info(f"Training on {count} samples for {epochs} epochs")
        started = time.perf_counter()

        initial_mse = 0.0
        final_mse = 0.0
        for epoch in range(epochs):
            total_sq_error = 0.0
            for x, y in zip(inputs, targets):
                total_sq_error += self.network.train(x, y)

            if epoch == 0:
                initial_mse = total_sq_error / count
            if epoch == epochs - 1:
                final_mse = total_sq_error / count

        report = TrainingReport(
            epochs_run=epochs,
            sample_count=count,
            initial_mse=initial_mse,
            final_mse=final_mse,
            duration_seconds=time.perf_counter() - started
        )
        LOG.info(
            f"Training complete: epochs={epochs}, initial MSE={initial_mse:.5f}, "
            f"final MSE={final_mse:.5f}, improvement={report.improvement_pct:.1f}%"
        )
        self._last_report = report
        return report

    @property
    def last_report(self) -> TrainingReport:
        return self._last_report
