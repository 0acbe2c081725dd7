"""
Benchmark result records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from statistics import mean, median
from typing import Any, Dict, List, Optional

from facetrack_perf.metrics.window import percentile


@dataclass
class BenchmarkStats:
    """Aggregate statistics over successful iteration durations (ms)."""

    count: int
    mean: float
    median: float
    min_value: float
    max_value: float
    p95: float
    p99: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "min": self.min_value,
            "max": self.max_value,
            "p95": self.p95,
            "p99": self.p99,
        }


@dataclass
class BenchmarkResult:
    """Outcome of one named benchmark run.

    ``durations`` holds only successful measured iterations; failed iterations
    are counted in ``errors`` and still count toward ``iterations``.
    """

    name: str
    iterations: int
    durations: List[float] = field(default_factory=list)
    errors: int = 0
    warmup_iterations: int = 0
    memory_deltas: List[int] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    total_time_ms: float = 0.0

    @property
    def successful_iterations(self) -> int:
        return len(self.durations)

    @property
    def error_rate(self) -> float:
        return self.errors / self.iterations if self.iterations else 0.0

    @property
    def stats(self) -> Optional[BenchmarkStats]:
        """Statistics over durations, or None when every iteration failed."""
        if not self.durations:
            return None
        ordered = sorted(self.durations)
        return BenchmarkStats(
            count=len(ordered),
            mean=mean(ordered),
            median=median(ordered),
            min_value=ordered[0],
            max_value=ordered[-1],
            p95=percentile(ordered, 95),
            p99=percentile(ordered, 99),
        )

    @property
    def mean_memory_delta(self) -> Optional[float]:
        if not self.memory_deltas:
            return None
        return mean(self.memory_deltas)

    def summary(self) -> Dict[str, Any]:
        """Compact summary without per-iteration data."""
        stats = self.stats
        return {
            "name": self.name,
            "iterations": self.iterations,
            "errors": self.errors,
            "error_rate": self.error_rate,
            "stats": stats.to_dict() if stats else None,
            "mean_memory_delta": self.mean_memory_delta,
            "total_time_ms": self.total_time_ms,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            **self.summary(),
            "warmup_iterations": self.warmup_iterations,
            "durations": list(self.durations),
            "memory_deltas": list(self.memory_deltas),
            "started_at": self.started_at.isoformat(),
        }
