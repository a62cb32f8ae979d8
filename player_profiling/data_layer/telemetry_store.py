"""
Telemetry Store - Latest-value store for keyed gameplay telemetry.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Union

from ..config import TelemetryConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntValue:
    value: int
    kind = "int"


@dataclass(frozen=True)
class FloatValue:
    value: float
    kind = "float"


@dataclass(frozen=True)
class BoolValue:
    value: bool
    kind = "bool"


@dataclass(frozen=True)
class StringValue:
    value: str
    kind = "string"


TelemetryValue = Union[IntValue, FloatValue, BoolValue, StringValue]


def wrap_value(raw) -> TelemetryValue:
    """
    Wrap a raw Python value into the telemetry value union.

    Raises:
        TypeError: for unsupported value types
    """
    if isinstance(raw, (IntValue, FloatValue, BoolValue, StringValue)):
        return raw
    # bool is a subclass of int
    if isinstance(raw, bool):
        return BoolValue(raw)
    if isinstance(raw, int):
        return IntValue(raw)
    if isinstance(raw, float):
        return FloatValue(raw)
    if isinstance(raw, str):
        return StringValue(raw)
    raise TypeError(f"Unsupported telemetry value type: {type(raw).__name__}")


def numeric_value(value: TelemetryValue) -> Optional[float]:
    """Return the value as float for IntValue/FloatValue, else None."""
    if isinstance(value, (IntValue, FloatValue)):
        return float(value.value)
    return None


@dataclass(frozen=True)
class TelemetryEvent:
    """A single keyed telemetry data point."""
    source_id: str
    label: str
    value: TelemetryValue
    timestamp: float


class TelemetryStore:
    """
    In-memory store of the latest value per (source, label).

    Also keeps a bounded history per key.
    """

    def __init__(self, config: TelemetryConfig = None):
        self.config = config or DEFAULT_CONFIG.telemetry
        self._history_size = self.config.history_size

        # Structure: {source_id: {label: TelemetryEvent}}
        self._latest: Dict[str, Dict[str, TelemetryEvent]] = {}
        self._history: Dict[str, Dict[str, Deque[TelemetryEvent]]] = {}

        logger.debug(f"Initialized TelemetryStore with history size {self._history_size}")

    def store(self, event: TelemetryEvent):
        """Store an event, overwriting the previous value for its key."""
        self._latest.setdefault(event.source_id, {})[event.label] = event

        by_label = self._history.setdefault(event.source_id, {})
        if event.label not in by_label:
            by_label[event.label] = deque(maxlen=self._history_size)
        by_label[event.label].append(event)

    def get_latest(self, source_id: str, label: str) -> Optional[TelemetryEvent]:
        return self._latest.get(source_id, {}).get(label)

    def get_value(self, source_id: str, label: str):
        """Get the latest raw value for a key, or None."""
        event = self.get_latest(source_id, label)
        return event.value.value if event is not None else None

    def get_history(
        self,
        source_id: str,
        label: str,
        n: int = None
    ) -> List[TelemetryEvent]:
        """
        Get recorded events for a key.

        Args:
            source_id: Producer identifier
            label: Data label
            n: Number of most recent events (None = all retained)

        Returns:
            List of events (oldest first)
        """
        history = self._history.get(source_id, {}).get(label)
        if not history:
            return []
        events = list(history)
        return events[-n:] if n else events

    def get_all_sources(self) -> List[str]:
        return list(self._latest.keys())

    def get_labels(self, source_id: str) -> List[str]:
        if source_id in self._latest:
            return list(self._latest[source_id].keys())
        return []

    def snapshot(self) -> Dict[str, Dict[str, object]]:
        """Nested copy of the latest raw values."""
        return {
            source_id: {label: event.value.value for label, event in labels.items()}
            for source_id, labels in self._latest.items()
        }

    def clear(self, source_id: str = None):
        """
        Clear stored values.

        Args:
            source_id: Specific source to clear (None = all)
        """
        if source_id is None:
            self._latest.clear()
            self._history.clear()
        else:
            self._latest.pop(source_id, None)
            self._history.pop(source_id, None)

    def __len__(self) -> int:
        return sum(len(labels) for labels in self._latest.values())
