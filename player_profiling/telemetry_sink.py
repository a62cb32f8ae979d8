"""
Telemetry Sink - Single ingestion surface for all gameplay producers.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Deque, List, Optional

from .config import ScoringConfig, TelemetryConfig, ThresholdRule, DEFAULT_CONFIG
from .data_layer.telemetry_store import (
    FloatValue,
    IntValue,
    TelemetryEvent,
    TelemetryStore,
    TelemetryValue,
    numeric_value,
    wrap_value
)
from .ai_layer.profile_scorer import ProfileScorer

logger = logging.getLogger(__name__)


class IngestStatus(Enum):
    """Outcome of a single ingest call."""
    STORED = auto()     # Stored, no scoring effect
    EVALUATED = auto()  # Special label, score recomputed
    DEFERRED = auto()   # Special label, model not ready yet
    REJECTED = auto()   # Unsupported value or internal failure


@dataclass
class AdaptationSignal:
    """Emitted when a threshold rule fires."""
    source_id: str
    label: str
    value: float
    threshold: float
    message: str
    timestamp: float


def _value_matches_kind(value: TelemetryValue, kind: str) -> bool:
    return isinstance(value, (IntValue, FloatValue)) and value.kind == kind


class TelemetrySink:
    """
    Dispatches (source_id, label, value) telemetry.

    Every event is stored under its key. Checkpoint and life-loss labels
    are forwarded to the profile scorer; all events are checked against
    the threshold rules.
    """

    def __init__(
        self,
        scorer: ProfileScorer,
        config: TelemetryConfig = None,
        scoring_config: ScoringConfig = None,
        clock: Callable[[], float] = None,
        lock: threading.RLock = None
    ):
        """
        Initialize the sink.

        Args:
            scorer: Profile scorer receiving checkpoint/life-loss events
            config: Telemetry configuration (history size, rules)
            scoring_config: Labels that trigger scoring
            clock: Fallback timestamp source in seconds
            lock: Lock shared with the scorer
        """
        self.config = config or DEFAULT_CONFIG.telemetry
        self.scoring_config = scoring_config or scorer.config
        self._scorer = scorer
        self._store = TelemetryStore(self.config)
        self._rules: List[ThresholdRule] = list(self.config.rules)
        self._lock = lock or threading.RLock()

        started = time.monotonic()
        self._clock = clock or (lambda: time.monotonic() - started)

        self._signal_listeners: List[Callable[[AdaptationSignal], None]] = []
        self._signals: Deque[AdaptationSignal] = deque(maxlen=self.config.history_size)
        self._ingested_count = 0
        self._rejected_count = 0

    @property
    def store(self) -> TelemetryStore:
        return self._store

    @property
    def rules(self) -> List[ThresholdRule]:
        return list(self._rules)

    @property
    def signals(self) -> List[AdaptationSignal]:
        return list(self._signals)

    def clear_signals(self):
        with self._lock:
            self._signals.clear()

    def add_rule(self, rule: ThresholdRule):
        with self._lock:
            self._rules.append(rule)

    def subscribe_signals(self, callback: Callable[[AdaptationSignal], None]):
        self._signal_listeners.append(callback)

    def _resolve_timestamp(self, value: TelemetryValue, timestamp: Optional[float]) -> float:
        if timestamp is not None:
            return float(timestamp)
        numeric = numeric_value(value)
        if numeric is not None:
            return numeric
        return float(self._clock())

    def _apply_rules(self, event: TelemetryEvent):
        for rule in self._rules:
            if rule.label != event.label or not rule.matches_source(event.source_id):
                continue
            if not _value_matches_kind(event.value, rule.value_kind):
                continue
            if event.value.value <= rule.threshold:
                continue

            signal = AdaptationSignal(
                source_id=event.source_id,
                label=event.label,
                value=float(event.value.value),
                threshold=rule.threshold,
                message=rule.message,
                timestamp=event.timestamp
            )
            self._signals.append(signal)
            logger.info(
                f"[Adaptation] {event.source_id}/{event.label}={event.value.value} "
                f"> {rule.threshold}: {rule.message}"
            )
            for callback in list(self._signal_listeners):
                try:
                    callback(signal)
                except Exception:
                    logger.exception(f"Signal listener {callback!r} failed")

    def _dispatch(self, event: TelemetryEvent) -> IngestStatus:
        self._store.store(event)
        logger.debug(f"Received from {event.source_id}: [{event.label} = {event.value.value}]")

        status = IngestStatus.STORED
        if self.scoring_config.is_checkpoint_label(event.label):
            evaluation = self._scorer.record_checkpoint(event.timestamp)
            status = IngestStatus.EVALUATED if evaluation else IngestStatus.DEFERRED
        elif self.scoring_config.is_life_lost_label(event.label):
            evaluation = self._scorer.record_life_lost(event.timestamp)
            status = IngestStatus.EVALUATED if evaluation else IngestStatus.DEFERRED

        self._apply_rules(event)
        return status

    def ingest(
        self,
        source_id: str,
        label: str,
        value,
        timestamp: float = None
    ) -> IngestStatus:
        """
        Ingest one telemetry data point. Never raises.

        Args:
            source_id: Producer identifier (e.g. "CheckpointManager")
            label: Data label (e.g. "LifeLost", "interactionCount")
            value: int, float, bool or str (or a TelemetryValue)
            timestamp: Event time in seconds; defaults to a numeric value,
                then to the sink clock

        Returns:
            IngestStatus describing what happened
        """
        with self._lock:
            self._ingested_count += 1
            try:
                wrapped = wrap_value(value)
            except TypeError as e:
                self._rejected_count += 1
                logger.warning(f"Rejected telemetry {source_id}/{label}: {e}")
                return IngestStatus.REJECTED

            try:
                event = TelemetryEvent(
                    source_id=source_id,
                    label=label,
                    value=wrapped,
                    timestamp=self._resolve_timestamp(wrapped, timestamp)
                )
                return self._dispatch(event)
            except Exception:
                self._rejected_count += 1
                logger.exception(f"Failed to process telemetry {source_id}/{label}")
                return IngestStatus.REJECTED

    @property
    def statistics(self) -> dict:
        return {
            'ingested': self._ingested_count,
            'rejected': self._rejected_count,
            'keys': len(self._store),
            'signals': len(self._signals)
        }
