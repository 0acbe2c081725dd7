"""
Shared enumerations for metric kinds and event classification.
"""

from enum import Enum


class MetricKind(str, Enum):
    """Kinds of measurement the host pipeline reports."""

    FRAME_TIME = "frame_time"
    DETECTION_TIME = "detection_time"
    LANDMARK_TIME = "landmark_time"
    INITIALIZATION_TIME = "initialization_time"
    MEMORY_USAGE = "memory_usage"


# Kinds that own a rolling window; initialization time is a single scalar
WINDOWED_KINDS = (
    MetricKind.FRAME_TIME,
    MetricKind.DETECTION_TIME,
    MetricKind.LANDMARK_TIME,
    MetricKind.MEMORY_USAGE,
)


class Severity(str, Enum):
    """Severity of a recorded event."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class Category(str, Enum):
    """Metric or operation that produced an event."""

    FRAME = "frame"
    DETECTION = "detection"
    LANDMARK = "landmark"
    MEMORY = "memory"
    BENCHMARK = "benchmark"
    OTHER = "other"
