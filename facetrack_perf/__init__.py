"""
facetrack-perf: performance metrics engine for a face and gaze tracking demo.

Collects per-frame stage timings, classifies them against performance
targets, aggregates warnings, runs micro-benchmarks and produces
compliance reports.
"""

__version__ = "0.1.0"

from facetrack_perf.config import Config, config
from facetrack_perf.engine import MetricsEngine
from facetrack_perf.errors import (
    BenchmarkError,
    InactiveSessionError,
    MetricsError,
)
from facetrack_perf.schemas import Category, MetricKind, Severity

__all__ = [
    "__version__",
    "BenchmarkError",
    "Category",
    "Config",
    "InactiveSessionError",
    "MetricKind",
    "MetricsEngine",
    "MetricsError",
    "Severity",
    "config",
]
