import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from .config import ProfilingConfig, ServiceStatus, ThresholdRule, DEFAULT_CONFIG
from .data_layer import DatasetLoader, DatasetStatistics
from .ai_layer import (
    NeuralNetwork,
    ProfileAssessment,
    ProfileScorer,
    TrainingController,
    TrainingReport
)
from .telemetry_sink import AdaptationSignal, IngestStatus, TelemetrySink

logger = logging.getLogger(__name__)


@dataclass
class InitReport:
    status: ServiceStatus
    records_loaded: int = 0
    rows_skipped: int = 0
    statistics: Optional[DatasetStatistics] = None
    training: Optional[TrainingReport] = None
    error: Optional[str] = None
    loader_stats: Dict = field(default_factory=dict)


class ProfilingService:

    def __init__(
        self,
        config: ProfilingConfig = None,
        clock: Callable[[], float] = None
    ):
        self.config = config or DEFAULT_CONFIG

        self._lock = threading.RLock()
        self._init_lock = threading.Lock()
        self._ready_event = threading.Event()
        self._status = ServiceStatus.UNINITIALIZED
        self._init_report: Optional[InitReport] = None
        self._init_task: Optional[asyncio.Future] = None

        self._network = NeuralNetwork(self.config.network)
        self._trainer = TrainingController(self._network, self.config.training)
        self._scorer = ProfileScorer(self.config.scoring, lock=self._lock)
        self._sink = TelemetrySink(
            self._scorer,
            config=self.config.telemetry,
            scoring_config=self.config.scoring,
            clock=clock,
            lock=self._lock
        )
        self._statistics = DatasetStatistics.neutral()

        logger.info("ProfilingService created")

    def _load_statistics(self, report: InitReport):
        loader = DatasetLoader(self.config.dataset)
        try:
            records = loader.load()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load dataset: {e}. Falling back to neutral statistics.")
            report.status = ServiceStatus.DEGRADED
            report.error = str(e)
            return [], DatasetStatistics.neutral()

        report.loader_stats = loader.statistics
        report.records_loaded = len(records)
        report.rows_skipped = loader.statistics['rows_skipped']

        if not records:
            logger.warning("Dataset contained no valid records. Falling back to neutral statistics.")
            report.status = ServiceStatus.DEGRADED
            report.error = "no valid records"
            return records, DatasetStatistics.neutral()

        return records, DatasetStatistics.from_records(records)

    def initialize(self) -> InitReport:
        """
        Load the dataset, train the network, and mark the service ready.

        Idempotent: later calls return the first report. Never raises for
        dataset problems; the report's status is DEGRADED instead.
        """
        # Telemetry keeps flowing through self._lock while training runs
        with self._init_lock:
            if self._init_report is not None:
                return self._init_report
            self._status = ServiceStatus.INITIALIZING

            logger.info("Initializing profiling service...")
            report = InitReport(status=ServiceStatus.READY)

            records, stats = self._load_statistics(report)
            report.statistics = stats
            report.training = self._trainer.train(records, stats)

            with self._lock:
                self._statistics = stats
                self._scorer.mark_ready(self._network, stats)
                self._status = report.status
                self._init_report = report

            self._ready_event.set()
            logger.info(f"Profiling service ready (status={report.status.name})")
            return report

    def start(self) -> asyncio.Future:
        """
        Schedule initialization on the default executor.

        Must be called from a running event loop. Returns a future that
        resolves to the InitReport.
        """
        loop = asyncio.get_running_loop()
        if self._init_task is None or self._init_task.get_loop() is not loop:
            # initialize() is idempotent; a new loop waits on the same init lock
            self._init_task = asyncio.ensure_future(
                loop.run_in_executor(None, self.initialize)
            )
        return self._init_task

    async def wait_ready(self) -> InitReport:
        """Await readiness, starting initialization if needed."""
        if self._init_report is not None:
            return self._init_report
        return await self.start()

    # Ingestion API

    def ingest(
        self,
        source_id: str,
        label: str,
        value,
        timestamp: float = None
    ) -> IngestStatus:
        return self._sink.ingest(source_id, label, value, timestamp)

    def add_rule(self, rule: ThresholdRule):
        self._sink.add_rule(rule)

    # Query API

    def predict(self, feature_a: float, feature_b: float) -> float:
        return self._scorer.predict(feature_a, feature_b)

    def evaluate(self):
        return self._scorer.evaluate()

    def subscribe(self, callback: Callable[[float], None]):
        self._scorer.subscribe(callback)

    def subscribe_assessment(self, callback: Callable[[ProfileAssessment], None]):
        self._scorer.subscribe_assessment(callback)

    def subscribe_signals(self, callback: Callable[[AdaptationSignal], None]):
        self._sink.subscribe_signals(callback)

    @property
    def current_similarity(self) -> float:
        return self._scorer.current_similarity

    @property
    def assessment(self) -> Optional[ProfileAssessment]:
        return self._scorer.assessment

    @property
    def status(self) -> ServiceStatus:
        return self._status

    @property
    def is_ready(self) -> bool:
        return self._ready_event.is_set()

    @property
    def init_report(self) -> Optional[InitReport]:
        return self._init_report

    @property
    def statistics(self) -> DatasetStatistics:
        return self._statistics

    @property
    def scorer(self) -> ProfileScorer:
        return self._scorer

    @property
    def sink(self) -> TelemetrySink:
        return self._sink

    @property
    def network(self) -> NeuralNetwork:
        return self._network
