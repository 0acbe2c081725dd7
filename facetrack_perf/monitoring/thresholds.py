"""
Threshold classification of incoming samples.

Each timed metric kind has a (warning, critical) pair. A sample at or above
the critical bound is critical, a sample at or above the warning bound is a
warning, anything lower is nominal and produces no event.
"""

from typing import Dict, Optional, Tuple

from facetrack_perf.config import ThresholdConfig
from facetrack_perf.logging import get_perf_logger
from facetrack_perf.monitoring.error_aggregator import ErrorAggregator
from facetrack_perf.monitoring.schemas import ErrorRecord
from facetrack_perf.schemas import Category, MetricKind, Severity

log = get_perf_logger("thresholds")

KIND_CATEGORIES: Dict[MetricKind, Category] = {
    MetricKind.FRAME_TIME: Category.FRAME,
    MetricKind.DETECTION_TIME: Category.DETECTION,
    MetricKind.LANDMARK_TIME: Category.LANDMARK,
    MetricKind.INITIALIZATION_TIME: Category.OTHER,
    MetricKind.MEMORY_USAGE: Category.MEMORY,
}

KIND_LABELS: Dict[MetricKind, str] = {
    MetricKind.FRAME_TIME: "frame time",
    MetricKind.DETECTION_TIME: "detection time",
    MetricKind.LANDMARK_TIME: "landmark time",
    MetricKind.INITIALIZATION_TIME: "initialization time",
    MetricKind.MEMORY_USAGE: "memory usage",
}


def classify_value(value: float, warning: float, critical: float) -> Optional[Severity]:
    """Classify a value against a threshold pair.

    The critical bound is inclusive, so a value equal to it is critical.
    """
    if value >= critical:
        return Severity.CRITICAL
    if value >= warning:
        return Severity.WARNING
    return None


class ThresholdEvaluator:
    """Classifies samples and records breaches into an ErrorAggregator."""

    def __init__(
        self,
        aggregator: ErrorAggregator,
        thresholds: Optional[ThresholdConfig] = None,
    ):
        """
        Initialize evaluator.

        Args:
            aggregator: Destination for warning and critical events
            thresholds: Per-kind targets and bounds, defaults to ThresholdConfig()
        """
        self.aggregator = aggregator
        self.thresholds = thresholds or ThresholdConfig()
        self._pairs: Dict[MetricKind, Tuple[float, float]] = {
            MetricKind.FRAME_TIME: self.thresholds.frame_time.threshold_pair(),
            MetricKind.DETECTION_TIME: self.thresholds.detection_time.threshold_pair(),
            MetricKind.LANDMARK_TIME: self.thresholds.landmark_time.threshold_pair(),
            MetricKind.INITIALIZATION_TIME: (
                self.thresholds.initialization_time.threshold_pair()
            ),
        }

    def threshold_pair(self, kind: MetricKind) -> Optional[Tuple[float, float]]:
        """Get the (warning, critical) pair for a kind, or None if unconfigured."""
        return self._pairs.get(MetricKind(kind))

    def classify(self, kind: MetricKind, value: float) -> Optional[Severity]:
        """
        Classify a sample without recording anything.

        Args:
            kind: Metric kind of the sample
            value: Sample value in milliseconds

        Returns:
            Severity.CRITICAL, Severity.WARNING, or None for nominal values
            and kinds without thresholds
        """
        pair = self.threshold_pair(kind)
        if pair is None:
            return None
        warning, critical = pair
        return classify_value(value, warning, critical)

    def evaluate(self, kind: MetricKind, value: float) -> Optional[ErrorRecord]:
        """
        Classify a sample and record a breach.

        Args:
            kind: Metric kind of the sample
            value: Sample value in milliseconds

        Returns:
            The recorded ErrorRecord, or None when the value is nominal
        """
        kind = MetricKind(kind)
        severity = self.classify(kind, value)
        if severity is None:
            return None

        warning, critical = self._pairs[kind]
        bound = critical if severity is Severity.CRITICAL else warning
        label = KIND_LABELS[kind]
        prefix = "Critical" if severity is Severity.CRITICAL else "Slow"
        message = f"{prefix} {label}: {value:.2f}ms (threshold {bound:.2f}ms)"

        if severity is Severity.CRITICAL:
            log.error(message)
        else:
            log.warning(message)

        return self.aggregator.record(
            severity,
            KIND_CATEGORIES[kind],
            message,
            details={"kind": kind.value, "value": value, "threshold": bound},
        )
