"""
Error aggregation and threshold alerting for pipeline metrics.
"""

from facetrack_perf.monitoring.error_aggregator import ErrorAggregator
from facetrack_perf.monitoring.schemas import (
    Category,
    ErrorRecord,
    ErrorStatistics,
    Severity,
)
from facetrack_perf.monitoring.thresholds import ThresholdEvaluator, classify_value

__all__ = [
    "ErrorAggregator",
    "ErrorRecord",
    "ErrorStatistics",
    "Severity",
    "Category",
    "ThresholdEvaluator",
    "classify_value",
]
