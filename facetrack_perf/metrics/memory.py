"""
Process memory sampling.

Reads resident memory of the hosting process and total system memory
through psutil. Failures to read are reported as an unavailable reading,
never raised.
"""

import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import psutil

from facetrack_perf.logging import get_perf_logger

log = get_perf_logger("collector")


@dataclass(frozen=True)
class MemoryUsage:
    """Memory reading in bytes."""

    used: int
    total: int
    timestamp: float

    @property
    def used_mb(self) -> float:
        return self.used / (1024 * 1024)

    @property
    def pressure(self) -> float:
        """Fraction of total memory in use by the process."""
        return self.used / self.total if self.total else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "used": self.used,
            "total": self.total,
            "used_mb": self.used_mb,
            "pressure": self.pressure,
            "timestamp": self.timestamp,
        }


class MemoryProbe:
    """Reads memory usage of one process."""

    def __init__(self, pid: Optional[int] = None, enabled: bool = True):
        """Initialize probe.

        Args:
            pid: Process to sample, defaults to the current process
            enabled: When False every read returns None
        """
        self.pid = pid or os.getpid()
        self.enabled = enabled
        self._process: Optional[psutil.Process] = None

    def read(self) -> Optional[MemoryUsage]:
        """Take a reading.

        Returns:
            MemoryUsage, or None when tracking is disabled or unsupported
        """
        if not self.enabled:
            return None

        try:
            if self._process is None:
                self._process = psutil.Process(self.pid)
            used = self._process.memory_info().rss
            total = psutil.virtual_memory().total
        except (psutil.Error, OSError, NotImplementedError) as e:
            log.debug(f"Memory reading unavailable: {e}")
            return None

        return MemoryUsage(used=int(used), total=int(total), timestamp=time.monotonic())
