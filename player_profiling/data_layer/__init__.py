"""
Data Layer - Reference dataset import, statistics, and telemetry storage.
"""

from .dataset_loader import DatasetLoader, DatasetRecord, load_dataset
from .statistics import (
    DatasetStatistics,
    FeatureStatistics,
    calculate_z_score,
    compute_statistics
)
from .telemetry_store import (
    BoolValue,
    FloatValue,
    IntValue,
    StringValue,
    TelemetryEvent,
    TelemetryStore,
    TelemetryValue,
    numeric_value,
    wrap_value
)

__all__ = [
    "DatasetLoader",
    "DatasetRecord",
    "load_dataset",
    "DatasetStatistics",
    "FeatureStatistics",
    "calculate_z_score",
    "compute_statistics",
    "BoolValue",
    "FloatValue",
    "IntValue",
    "StringValue",
    "TelemetryEvent",
    "TelemetryStore",
    "TelemetryValue",
    "numeric_value",
    "wrap_value"
]
