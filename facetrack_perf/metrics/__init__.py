"""
Real-time metrics collection for the vision pipeline.

Provides rolling sample windows, memory sampling and the per-session
metrics collector.
"""

from facetrack_perf.metrics.window import (
    Sample,
    SampleWindow,
    WindowStats,
    percentile,
)
from facetrack_perf.metrics.memory import (
    MemoryProbe,
    MemoryUsage,
)
from facetrack_perf.metrics.collector import (
    MetricsCollector,
    RealtimeStats,
    StageTimer,
)

__all__ = [
    # Windows
    "Sample",
    "SampleWindow",
    "WindowStats",
    "percentile",
    # Memory
    "MemoryProbe",
    "MemoryUsage",
    # Collector
    "MetricsCollector",
    "RealtimeStats",
    "StageTimer",
]
