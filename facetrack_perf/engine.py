"""
Metrics engine facade.

Owns one collector, error aggregator, threshold evaluator, benchmark runner
and report generator, all sharing the same aggregator. Engines are built
explicitly by the host; there is no module-level instance.
"""

import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from facetrack_perf.benchmarks.results import BenchmarkResult
from facetrack_perf.benchmarks.runner import BenchmarkRunner, Operation
from facetrack_perf.config import Config, config as default_config
from facetrack_perf.errors import InactiveSessionError
from facetrack_perf.logging import get_perf_logger
from facetrack_perf.metrics.collector import MetricsCollector, RealtimeStats, StageTimer
from facetrack_perf.metrics.memory import MemoryProbe, MemoryUsage
from facetrack_perf.monitoring.error_aggregator import ErrorAggregator
from facetrack_perf.monitoring.schemas import ErrorRecord, ErrorStatistics
from facetrack_perf.monitoring.thresholds import ThresholdEvaluator
from facetrack_perf.reporting.generator import ReportGenerator
from facetrack_perf.reporting.schemas import PerformanceReport
from facetrack_perf.schemas import MetricKind

log = get_perf_logger("system")


class MetricsEngine:
    """Performance monitoring for one face tracking pipeline."""

    def __init__(
        self,
        config: Optional[Config] = None,
        memory_probe: Optional[MemoryProbe] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize engine.

        Args:
            config: Engine configuration, defaults to the environment-derived config
            memory_probe: Memory reader, defaults to the current process
            clock: Monotonic clock in seconds
        """
        self.config = config or default_config
        self.memory_probe = memory_probe or MemoryProbe(
            enabled=self.config.collector.enable_memory_tracking
        )

        self.aggregator = ErrorAggregator()
        self.evaluator = ThresholdEvaluator(self.aggregator, self.config.thresholds)
        self.collector = MetricsCollector(
            config=self.config.collector,
            aggregator=self.aggregator,
            evaluator=self.evaluator,
            memory_probe=self.memory_probe,
            clock=clock,
        )
        self.runner = BenchmarkRunner(
            self.aggregator,
            config=self.config.benchmark,
            memory_probe=self.memory_probe,
        )
        self.report_generator = ReportGenerator(
            self.collector, self.aggregator, self.runner, self.config.thresholds
        )

    @property
    def is_active(self) -> bool:
        return self.collector.is_active

    # Session control

    def start(self) -> None:
        """Start a new session, dropping benchmark history. No-op while active."""
        if not self.collector.is_active:
            self.runner.clear()
        self.collector.start()

    def stop(self) -> None:
        self.collector.stop()

    def reset(self) -> None:
        """Discard all data and benchmark history, leaving the engine inactive."""
        self.collector.reset()
        self.runner.clear()
        log.info("Metrics engine reset")

    # Recording

    def record_frame_time(self, frame_time_ms: float) -> Optional[ErrorRecord]:
        return self.collector.record_frame_time(frame_time_ms)

    def record_detection_time(self, detection_time_ms: float) -> Optional[ErrorRecord]:
        return self.collector.record_detection_time(detection_time_ms)

    def record_landmark_time(self, landmark_time_ms: float) -> Optional[ErrorRecord]:
        return self.collector.record_landmark_time(landmark_time_ms)

    def record_initialization_time(self, init_time_ms: float) -> Optional[ErrorRecord]:
        return self.collector.record_initialization_time(init_time_ms)

    def record(self, kind: MetricKind, value: float) -> Optional[ErrorRecord]:
        return self.collector.record(kind, value)

    @contextmanager
    def time_stage(self, kind: MetricKind) -> Iterator[StageTimer]:
        """Time a block and record it as ``kind`` on success."""
        with self.collector.time_stage(kind) as timer:
            yield timer

    def track_memory_usage(self) -> Optional[MemoryUsage]:
        return self.collector.track_memory_usage()

    # Queries

    def get_realtime_stats(self) -> RealtimeStats:
        return self.collector.get_realtime_stats()

    def get_error_statistics(self) -> ErrorStatistics:
        return self.aggregator.statistics()

    @property
    def benchmark_results(self) -> Dict[str, BenchmarkResult]:
        return self.runner.results

    # Benchmarks and reports

    def run_benchmark(
        self,
        name: str,
        operation: Operation,
        iterations: Optional[int] = None,
        warmup: Optional[int] = None,
    ) -> BenchmarkResult:
        """
        Run a benchmark through the engine's runner.

        Raises:
            InactiveSessionError: If the session has been stopped
            ValueError: If iterations < 1 or warmup < 0
            BenchmarkError: If the operation cannot be executed
        """
        if self.collector.is_stopped:
            raise InactiveSessionError("run benchmark", stopped=True)
        return self.runner.run_benchmark(name, operation, iterations, warmup)

    def generate_report(self) -> PerformanceReport:
        return self.report_generator.generate_report()
