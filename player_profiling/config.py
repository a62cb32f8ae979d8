"""
Configuration settings for the Player Profiling subsystem.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum, auto


class ServiceStatus(Enum):
    """Lifecycle status of the profiling service."""
    UNINITIALIZED = auto()  # Nothing loaded yet
    INITIALIZING = auto()   # Dataset load + training in progress
    READY = auto()          # Trained on the reference dataset
    DEGRADED = auto()       # Ready, but running on neutral statistics


@dataclass(frozen=True)
class ColumnLayout:
    """Fixed column indices of the reference CSV."""
    group: int
    feature_a: int
    feature_b: int

    @property
    def min_columns(self) -> int:
        return max(self.group, self.feature_a, self.feature_b) + 1


# Group, floor matrix map score, floor matrix observation score
CANONICAL_LAYOUT = ColumnLayout(group=1, feature_a=11, feature_b=12)

# Older importer read working-memory (col 9) and floor matrix map (col 11).
# Kept only for migration checks against historical exports.
LEGACY_LAYOUT = ColumnLayout(group=1, feature_a=9, feature_b=11)


@dataclass
class DatasetConfig:
    """Configuration for the reference dataset import."""
    csv_path: str = "data/Dataset path learning floor matrix task.csv"
    layout: ColumnLayout = CANONICAL_LAYOUT
    delimiter: str = ","
    reference_marker: str = "Down"
    case_sensitive: bool = False


@dataclass
class NetworkConfig:
    """Topology and initialisation of the classifier."""
    input_nodes: int = 2
    hidden_nodes: int = 5
    output_nodes: int = 1
    seed: int = 12345
    learning_rate: float = 0.1


@dataclass
class TrainingConfig:
    """Configuration for the offline training loop."""
    epochs: int = 1000
    reference_target: float = 1.0
    other_target: float = 0.0


@dataclass
class ScoringCalibration:
    """
    Linear-clamp transform from gameplay metrics into dataset feature ranges.

    feature_a = clamp(a_offset - avg_interval / a_interval_scale, a_min, a_max)
    feature_b = clamp(b_offset - loss_rate * b_rate_scale, b_min, b_max)
    """
    a_offset: float = 5.0
    a_interval_scale: float = 15.0  # seconds per point of map score
    a_min: float = 1.0
    a_max: float = 5.0
    b_offset: float = 6.0
    b_rate_scale: float = 2.0       # points of observation score per life/min
    b_min: float = 1.0
    b_max: float = 6.0


@dataclass
class ScoringConfig:
    """Configuration for online profile scoring."""
    checkpoint_label: str = "CheckpointReached"
    life_lost_label: str = "LifeLost"
    seconds_per_minute: float = 60.0
    neutral_similarity: float = 0.5
    calibration: ScoringCalibration = field(default_factory=ScoringCalibration)

    # Final-checkpoint assessment
    total_checkpoints: int = 5
    dissimilarity_threshold_pct: float = 50.0

    def is_checkpoint_label(self, label: str) -> bool:
        return (
            label == self.checkpoint_label
            or label.startswith(self.checkpoint_label + "_")
        )

    def is_life_lost_label(self, label: str) -> bool:
        return label == self.life_lost_label


@dataclass
class ThresholdRule:
    """Fires an adaptation signal when a telemetry value exceeds a threshold."""
    label: str
    threshold: float
    value_kind: str = "int"  # 'int' or 'float'
    source_id: Optional[str] = None        # exact source match
    source_contains: Optional[str] = None  # substring source match
    message: str = ""

    def matches_source(self, source_id: str) -> bool:
        if self.source_id is not None and source_id != self.source_id:
            return False
        if self.source_contains is not None and self.source_contains not in source_id:
            return False
        return True


def default_rules() -> List[ThresholdRule]:
    return [
        ThresholdRule(
            label="interactionCount",
            threshold=10,
            source_id="Object1",
            message="Object1 usage high, adjusting game parameter",
        ),
        ThresholdRule(
            label="interactionCount",
            threshold=5,
            source_contains="Puzzle",
            message="High repetition on puzzle, lowering difficulty",
        ),
        ThresholdRule(
            label="timeTaken",
            threshold=60.0,
            value_kind="float",
            message="Player is taking a long time, triggering hint system",
        ),
    ]


@dataclass
class TelemetryConfig:
    """Configuration for telemetry ingestion."""
    history_size: int = 100
    rules: List[ThresholdRule] = field(default_factory=default_rules)


@dataclass
class ProfilingConfig:
    """Master configuration container."""
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    training: TrainingConfig = field(default_factory=TrainingConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)


# Global default configuration
DEFAULT_CONFIG = ProfilingConfig()
