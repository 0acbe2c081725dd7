"""
Report generation from collector, aggregator and benchmark state.

Generating a report only reads state. It never records samples, probes
memory or clears anything.
"""

from datetime import datetime
from typing import Dict, Optional

from facetrack_perf.benchmarks.runner import BenchmarkRunner
from facetrack_perf.config import MetricTarget, ThresholdConfig
from facetrack_perf.logging import get_perf_logger
from facetrack_perf.metrics.collector import MetricsCollector, RealtimeStats
from facetrack_perf.monitoring.error_aggregator import ErrorAggregator
from facetrack_perf.reporting.schemas import MemorySummary, PerformanceReport
from facetrack_perf.schemas import MetricKind

log = get_perf_logger("report")


def check_compliance(mean: Optional[float], target: MetricTarget) -> Optional[bool]:
    """Whether a mean meets its target. None when there is no data."""
    if mean is None:
        return None
    return mean <= target.target_ms


class ReportGenerator:
    """Builds PerformanceReport snapshots."""

    def __init__(
        self,
        collector: MetricsCollector,
        aggregator: ErrorAggregator,
        runner: BenchmarkRunner,
        thresholds: Optional[ThresholdConfig] = None,
    ):
        self.collector = collector
        self.aggregator = aggregator
        self.runner = runner
        self.thresholds = thresholds or ThresholdConfig()

    def _targets(self) -> Dict[str, MetricTarget]:
        return {
            "frame_time": self.thresholds.frame_time,
            "detection_time": self.thresholds.detection_time,
            "landmark_time": self.thresholds.landmark_time,
            "initialization_time": self.thresholds.initialization_time,
        }

    def _compliance(self, realtime: RealtimeStats) -> Dict[str, Optional[bool]]:
        targets = self._targets()
        return {
            "frame_time": check_compliance(realtime.frame_time.mean, targets["frame_time"]),
            "detection_time": check_compliance(
                realtime.detection_time.mean, targets["detection_time"]
            ),
            "landmark_time": check_compliance(
                realtime.landmark_time.mean, targets["landmark_time"]
            ),
            "initialization_time": check_compliance(
                realtime.initialization_time, targets["initialization_time"]
            ),
        }

    def _memory(self, realtime: RealtimeStats) -> MemorySummary:
        values = self.collector.window_values(MetricKind.MEMORY_USAGE)
        return MemorySummary(
            baseline=self.collector.memory_baseline,
            current=int(values[-1]) if values else None,
            peak=int(realtime.memory.max_value) if realtime.memory.has_data else None,
        )

    def generate_report(self) -> PerformanceReport:
        """
        Build a report of the current state.

        Returns:
            PerformanceReport; works on empty, active and stopped sessions
        """
        realtime = self.collector.get_realtime_stats()
        report = PerformanceReport(
            generated_at=datetime.now(),
            realtime=realtime,
            compliance=self._compliance(realtime),
            benchmarks=self.runner.results,
            errors=self.aggregator.statistics(),
            thresholds={
                key: {
                    "target": target.target_ms,
                    "warning": target.warning_bound,
                    "critical": target.critical_bound,
                }
                for key, target in self._targets().items()
            },
            memory=self._memory(realtime),
            initialization_time=realtime.initialization_time,
        )
        log.debug(
            f"Generated report: {realtime.frame_count} frames, "
            f"{len(report.benchmarks)} benchmarks, {report.errors.total} errors"
        )
        return report
