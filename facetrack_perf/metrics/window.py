"""
Rolling sample windows for per-frame timing and memory measurements.
"""

import math
import time
from collections import deque
from dataclasses import dataclass
from statistics import mean, median
from typing import Any, Deque, Dict, List, Optional, Sequence

from facetrack_perf.schemas import MetricKind


@dataclass(frozen=True)
class Sample:
    """A single timestamped measurement."""

    timestamp: float
    value: float


def percentile(sorted_values: Sequence[float], pct: float) -> float:
    """Nearest-rank percentile of an ascending sequence.

    Selects the value at 1-based rank ``ceil(pct / 100 * n)``, clamped to the
    first and last elements.

    Args:
        sorted_values: Non-empty ascending values
        pct: Percentile in the range 0-100

    Returns:
        The selected value
    """
    if not sorted_values:
        raise ValueError("percentile of empty sequence")
    rank = math.ceil(len(sorted_values) * pct / 100.0)
    index = min(max(rank - 1, 0), len(sorted_values) - 1)
    return sorted_values[index]


@dataclass(frozen=True)
class WindowStats:
    """Summary statistics over the samples currently in a window.

    A window with no samples yields the ``empty()`` sentinel: ``count`` is 0
    and every numeric field is None.
    """

    count: int
    mean: Optional[float] = None
    median: Optional[float] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    p95: Optional[float] = None

    @classmethod
    def empty(cls) -> "WindowStats":
        return cls(count=0)

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "WindowStats":
        if not values:
            return cls.empty()
        ordered = sorted(values)
        return cls(
            count=len(ordered),
            mean=mean(ordered),
            median=median(ordered),
            min_value=ordered[0],
            max_value=ordered[-1],
            p95=percentile(ordered, 95),
        )

    @property
    def has_data(self) -> bool:
        return self.count > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "min": self.min_value,
            "max": self.max_value,
            "p95": self.p95,
        }


class SampleWindow:
    """Fixed-capacity FIFO buffer of samples for one metric kind."""

    def __init__(self, kind: MetricKind, capacity: int = 100):
        """Initialize window.

        Args:
            kind: Metric kind this window holds
            capacity: Maximum number of retained samples
        """
        if capacity < 1:
            raise ValueError(f"Window capacity must be positive, got {capacity}")
        self.kind = kind
        self._samples: Deque[Sample] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def __len__(self) -> int:
        return len(self._samples)

    def record(self, value: float, timestamp: Optional[float] = None) -> Sample:
        """Append a sample, evicting the oldest one when full.

        Args:
            value: Measured value
            timestamp: Monotonic timestamp, defaults to now

        Returns:
            The recorded sample
        """
        sample = Sample(
            timestamp=time.monotonic() if timestamp is None else timestamp,
            value=float(value),
        )
        self._samples.append(sample)
        return sample

    def values(self) -> List[float]:
        """Retained values, oldest first."""
        return [s.value for s in self._samples]

    def samples(self) -> List[Sample]:
        return list(self._samples)

    def latest(self) -> Optional[Sample]:
        return self._samples[-1] if self._samples else None

    def percentile(self, pct: float) -> Optional[float]:
        """Percentile over retained values, or None when empty."""
        if not self._samples:
            return None
        return percentile(sorted(self.values()), pct)

    def stats(self) -> WindowStats:
        """Compute statistics over retained samples."""
        return WindowStats.from_values(self.values())

    def clear(self) -> None:
        self._samples.clear()
