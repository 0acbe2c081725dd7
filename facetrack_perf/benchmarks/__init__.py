"""
Micro-benchmarking of pipeline operations.
"""

from facetrack_perf.benchmarks.results import BenchmarkResult, BenchmarkStats
from facetrack_perf.benchmarks.runner import (
    BenchmarkOperation,
    BenchmarkRunner,
    resolve_operation,
)

__all__ = [
    "BenchmarkOperation",
    "BenchmarkResult",
    "BenchmarkRunner",
    "BenchmarkStats",
    "resolve_operation",
]
