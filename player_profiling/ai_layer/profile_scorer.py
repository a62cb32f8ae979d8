"""
Profile Scorer - Turns checkpoint and life-loss telemetry into a similarity score.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..config import ScoringConfig, DEFAULT_CONFIG
from ..data_layer.statistics import DatasetStatistics
from .neural_network import NeuralNetwork

logger = logging.getLogger(__name__)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class ProfileState:
    """Aggregated gameplay timeline for the current player."""
    checkpoint_timestamps: List[float] = field(default_factory=list)
    life_lost_timestamps: List[float] = field(default_factory=list)
    current_similarity: float = 0.5

    @property
    def max_observed_timestamp(self) -> float:
        last_checkpoint = self.checkpoint_timestamps[-1] if self.checkpoint_timestamps else 0.0
        last_loss = self.life_lost_timestamps[-1] if self.life_lost_timestamps else 0.0
        return max(last_checkpoint, last_loss)


@dataclass
class ProfileEvaluation:
    """Derived metrics and model features from one evaluation."""
    avg_checkpoint_interval: float
    life_loss_rate: float
    feature_a: float
    feature_b: float
    similarity: float


@dataclass
class ProfileAssessment:
    """Verdict issued when the player reaches the final checkpoint."""
    similarity: float
    dissimilarity_pct: float
    confident: bool
    checkpoint_count: int


def _notify(listeners: List[Callable], payload):
    for callback in list(listeners):
        try:
            callback(payload)
        except Exception:
            logger.exception(f"Listener {callback!r} failed")


def average_checkpoint_interval(timestamps: List[float]) -> float:
    """Mean of successive deltas, the first measured from time 0."""
    if not timestamps:
        return 0.0
    if len(timestamps) == 1:
        return timestamps[0]

    deltas = []
    previous = 0.0
    for ts in timestamps:
        deltas.append(ts - previous)
        previous = ts
    return sum(deltas) / len(deltas)


def life_loss_rate(
    loss_count: int,
    max_observed_timestamp: float,
    seconds_per_minute: float = 60.0
) -> float:
    """Lives lost per minute of observed play."""
    minutes = max_observed_timestamp / seconds_per_minute
    if minutes <= 0:
        return 0.0
    return loss_count / minutes


class ProfileScorer:
    """
    Online evaluation of player behaviour against the trained model.

    Two effective states: until mark_ready() is called, timestamps are
    recorded but evaluation is deferred. Afterwards every checkpoint or
    life-loss event recomputes current_similarity.
    """

    def __init__(
        self,
        config: ScoringConfig = None,
        lock: threading.RLock = None
    ):
        """
        Initialize the scorer.

        Args:
            config: Scoring configuration
            lock: Lock shared with other writers of profile state
        """
        self.config = config or DEFAULT_CONFIG.scoring
        self._lock = lock or threading.RLock()
        self._state = ProfileState(current_similarity=self.config.neutral_similarity)

        self._network: Optional[NeuralNetwork] = None
        self._stats: Optional[DatasetStatistics] = None
        self._ready = False

        self._last_evaluation: Optional[ProfileEvaluation] = None
        self._assessment: Optional[ProfileAssessment] = None
        self._listeners: List[Callable[[float], None]] = []
        self._assessment_listeners: List[Callable[[ProfileAssessment], None]] = []

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def state(self) -> ProfileState:
        return self._state

    @property
    def current_similarity(self) -> float:
        return self._state.current_similarity

    @property
    def last_evaluation(self) -> Optional[ProfileEvaluation]:
        return self._last_evaluation

    @property
    def assessment(self) -> Optional[ProfileAssessment]:
        return self._assessment

    def subscribe(self, callback: Callable[[float], None]):
        """Register a callback invoked with the new similarity on change."""
        self._listeners.append(callback)

    def subscribe_assessment(self, callback: Callable[[ProfileAssessment], None]):
        self._assessment_listeners.append(callback)

    def mark_ready(self, network: NeuralNetwork, stats: DatasetStatistics):
        """
        Attach the trained model and leave the uninitialized state.

        Runs a catch-up evaluation if events arrived before readiness.
        """
        with self._lock:
            self._network = network
            self._stats = stats
            self._ready = True
            logger.info("ProfileScorer ready")

            if self._state.checkpoint_timestamps or self._state.life_lost_timestamps:
                logger.info("Evaluating telemetry received before readiness")
                self.evaluate()
                self._maybe_assess()

    def predict(self, feature_a: float, feature_b: float) -> float:
        """
        Similarity of a feature pair to the reference group.

        Stateless: does not touch the profile timeline.
        """
        if self._network is None or self._stats is None:
            return self.config.neutral_similarity

        inputs = self._stats.normalize(feature_a, feature_b)
        output = self._network.feed_forward(inputs)
        return float(output[0])

    def record_checkpoint(self, timestamp: float) -> Optional[ProfileEvaluation]:
        with self._lock:
            checkpoints = self._state.checkpoint_timestamps
            if checkpoints and timestamp < checkpoints[-1]:
                logger.debug(f"Out-of-order checkpoint timestamp {timestamp:.2f} < {checkpoints[-1]:.2f}")
            checkpoints.append(timestamp)
            evaluation = self.evaluate()
            self._maybe_assess()
            return evaluation

    def record_life_lost(self, timestamp: float) -> Optional[ProfileEvaluation]:
        with self._lock:
            losses = self._state.life_lost_timestamps
            if losses and timestamp < losses[-1]:
                logger.debug(f"Out-of-order life-loss timestamp {timestamp:.2f} < {losses[-1]:.2f}")
            losses.append(timestamp)
            return self.evaluate()

    def compute_features(self) -> tuple[float, float, float, float]:
        """
        Derive model features from the current timeline.

        Returns:
            Tuple of (avg_interval, loss_rate, feature_a, feature_b)
        """
        cal = self.config.calibration
        state = self._state

        avg_interval = average_checkpoint_interval(state.checkpoint_timestamps)
        loss_rate = life_loss_rate(
            len(state.life_lost_timestamps),
            state.max_observed_timestamp,
            self.config.seconds_per_minute
        )

        feature_a = clamp(cal.a_offset - avg_interval / cal.a_interval_scale, cal.a_min, cal.a_max)
        feature_b = clamp(cal.b_offset - loss_rate * cal.b_rate_scale, cal.b_min, cal.b_max)
        return avg_interval, loss_rate, feature_a, feature_b

    def evaluate(self) -> Optional[ProfileEvaluation]:
        """
        Recompute current_similarity from the recorded timeline.

        Returns:
            ProfileEvaluation, or None while the scorer is not ready
        """
        with self._lock:
            if not self._ready:
                logger.debug("Evaluation deferred: model not ready")
                return None

            avg_interval, loss_rate, feature_a, feature_b = self.compute_features()
            similarity = self.predict(feature_a, feature_b)

            evaluation = ProfileEvaluation(
                avg_checkpoint_interval=avg_interval,
                life_loss_rate=loss_rate,
                feature_a=feature_a,
                feature_b=feature_b,
                similarity=similarity
            )
            self._last_evaluation = evaluation

            previous = self._state.current_similarity
            self._state.current_similarity = similarity

            logger.info(
                f"Profile evaluated: interval={avg_interval:.2f}s, loss rate={loss_rate:.2f}/min, "
                f"features=({feature_a:.2f}, {feature_b:.2f}), similarity={similarity:.3f}"
            )

            if similarity != previous:
                _notify(self._listeners, similarity)

            return evaluation

    def _maybe_assess(self):
        if self._assessment is not None or not self._ready:
            return
        count = len(self._state.checkpoint_timestamps)
        if count < self.config.total_checkpoints:
            return
        self._assessment = self.assess()
        _notify(self._assessment_listeners, self._assessment)

    def assess(self) -> ProfileAssessment:
        """Build a verdict from the current similarity."""
        similarity = self._state.current_similarity
        dissimilarity = (1.0 - similarity) * 100.0
        confident = dissimilarity > self.config.dissimilarity_threshold_pct

        assessment = ProfileAssessment(
            similarity=similarity,
            dissimilarity_pct=dissimilarity,
            confident=confident,
            checkpoint_count=len(self._state.checkpoint_timestamps)
        )
        logger.info(
            f"Final checkpoint assessment: similarity={similarity * 100:.1f}%, "
            f"dissimilarity={dissimilarity:.1f}% ({'confident' if confident else 'not confident'})"
        )
        return assessment
