"""
Feature statistics and z-score normalization.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from .dataset_loader import DatasetRecord

logger = logging.getLogger(__name__)


def calculate_z_score(value, mean, std):
    """Applies standard Z-Score normalization: (x - mean) / std"""
    if std == 0:
        return 0.0
    return (value - mean) / std


@dataclass(frozen=True)
class FeatureStatistics:
    """Summary statistics of a single feature."""
    mean: float = 0.0
    stddev: float = 0.0
    min: float = 0.0
    max: float = 0.0
    count: int = 0

    def z_score(self, value: float) -> float:
        return float(calculate_z_score(value, self.mean, self.stddev))


def compute_statistics(values: Iterable[float]) -> FeatureStatistics:
    """
    Compute mean, sample standard deviation, min and max.

    Empty input yields all-zero statistics; a single value yields
    stddev 0.
    """
    data = np.asarray(list(values), dtype=np.float64)
    n = data.size

    if n == 0:
        return FeatureStatistics()

    std = float(np.std(data, ddof=1)) if n > 1 else 0.0

    return FeatureStatistics(
        mean=float(np.sum(data) / n),
        stddev=std,
        min=float(np.min(data)),
        max=float(np.max(data)),
        count=int(n)
    )


@dataclass(frozen=True)
class DatasetStatistics:
    """Normalization constants for both model features."""
    feature_a: FeatureStatistics
    feature_b: FeatureStatistics

    @classmethod
    def from_records(cls, records: List[DatasetRecord]) -> "DatasetStatistics":
        stats = cls(
            feature_a=compute_statistics(r.feature_a for r in records),
            feature_b=compute_statistics(r.feature_b for r in records)
        )
        logger.info(
            f"Normalization stats over {len(records)} records: "
            f"A mean={stats.feature_a.mean:.2f} std={stats.feature_a.stddev:.2f}, "
            f"B mean={stats.feature_b.mean:.2f} std={stats.feature_b.stddev:.2f}"
        )
        return stats

    @classmethod
    def neutral(cls) -> "DatasetStatistics":
        """Degenerate statistics: every feature normalizes to 0."""
        return cls(feature_a=FeatureStatistics(), feature_b=FeatureStatistics())

    @property
    def is_degenerate(self) -> bool:
        return self.feature_a.stddev == 0 and self.feature_b.stddev == 0

    def normalize(self, feature_a: float, feature_b: float) -> np.ndarray:
        return np.array([
            self.feature_a.z_score(feature_a),
            self.feature_b.z_score(feature_b)
        ])
