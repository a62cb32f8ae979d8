"""
Player Profiling - Adaptive behavioural similarity scoring for gameplay telemetry.

A small sigmoid classifier trained on a reference dataset, combined with
an online pipeline that turns checkpoint and life-loss telemetry into a
similarity score in [0, 1].
"""

from .config import ProfilingConfig, ServiceStatus, DEFAULT_CONFIG
from .service import InitReport, ProfilingService
from .telemetry_sink import AdaptationSignal, IngestStatus

__version__ = "1.0.0"

__all__ = [
    "ProfilingConfig",
    "ServiceStatus",
    "DEFAULT_CONFIG",
    "InitReport",
    "ProfilingService",
    "AdaptationSignal",
    "IngestStatus"
]
