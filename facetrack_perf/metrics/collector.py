"""
Real-time metrics collector for the vision pipeline.

Receives per-frame stage durations from the host pipeline, keeps a rolling
window per metric kind, routes every sample through threshold evaluation,
and exposes a real-time snapshot of the session.
"""

import math
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from facetrack_perf.config import CollectorConfig, ThresholdConfig
from facetrack_perf.errors import InactiveSessionError
from facetrack_perf.logging import get_perf_logger
from facetrack_perf.metrics.memory import MemoryProbe, MemoryUsage
from facetrack_perf.metrics.window import SampleWindow, WindowStats
from facetrack_perf.monitoring.error_aggregator import ErrorAggregator
from facetrack_perf.monitoring.schemas import ErrorRecord
from facetrack_perf.monitoring.thresholds import ThresholdEvaluator
from facetrack_perf.schemas import WINDOWED_KINDS, Category, MetricKind, Severity

log = get_perf_logger("collector")


class StageTimer:
    """Context manager for timing one pipeline stage."""

    def __init__(self, kind: MetricKind, collector: Optional["MetricsCollector"] = None):
        """Initialize timer.

        Args:
            kind: Metric kind the stage reports
            collector: Optional MetricsCollector to record the timing
        """
        self.kind = MetricKind(kind)
        self.collector = collector
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed_ms: float = 0.0

    def __enter__(self) -> "StageTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.end_time = time.perf_counter()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000

        # A failed stage is not a timing sample
        if self.collector and exc_type is None:
            self.collector.record(self.kind, self.elapsed_ms)


@dataclass
class RealtimeStats:
    """Snapshot of the current session."""

    fps: float
    frame_time: WindowStats
    detection_time: WindowStats
    landmark_time: WindowStats
    memory: WindowStats
    frame_count: int
    uptime_seconds: float
    initialization_time: Optional[float] = None
    active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "fps": self.fps,
            "frame_time": self.frame_time.to_dict(),
            "detection_time": self.detection_time.to_dict(),
            "landmark_time": self.landmark_time.to_dict(),
            "memory": self.memory.to_dict(),
            "frame_count": self.frame_count,
            "uptime_seconds": self.uptime_seconds,
            "initialization_time": self.initialization_time,
            "active": self.active,
        }


@dataclass
class _SessionState:
    active: bool = False
    stopped: bool = False
    started_at: Optional[float] = None
    stopped_at: Optional[float] = None
    frame_count: int = 0
    initialization_time: Optional[float] = None
    memory_baseline: Optional[int] = None


class MetricsCollector:
    """Collects per-frame timings for one monitoring session.

    All mutation happens under a single lock, and the active flag is checked
    under that same lock, so a ``stop()`` racing a final ``record_*`` call
    either lets the sample in completely or rejects it.
    """

    def __init__(
        self,
        config: Optional[CollectorConfig] = None,
        aggregator: Optional[ErrorAggregator] = None,
        thresholds: Optional[ThresholdConfig] = None,
        evaluator: Optional[ThresholdEvaluator] = None,
        memory_probe: Optional[MemoryProbe] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize metrics collector.

        Args:
            config: Window and memory tracking settings
            aggregator: Destination for threshold and memory events
            thresholds: Threshold settings, used when no evaluator is given
            evaluator: Threshold evaluator, defaults to one over ``aggregator``
            memory_probe: Memory reader, defaults to the current process
            clock: Monotonic clock in seconds
        """
        self.config = config or CollectorConfig()
        self.aggregator = aggregator or ErrorAggregator()
        self.evaluator = evaluator or ThresholdEvaluator(self.aggregator, thresholds)
        self.memory_probe = memory_probe or MemoryProbe(
            enabled=self.config.enable_memory_tracking
        )
        self._clock = clock
        self._lock = threading.RLock()
        self._state = _SessionState()
        self._windows: Dict[MetricKind, SampleWindow] = {
            kind: SampleWindow(kind, self.config.window_size) for kind in WINDOWED_KINDS
        }

    # Session control

    @property
    def is_active(self) -> bool:
        return self._state.active

    @property
    def is_stopped(self) -> bool:
        return self._state.stopped

    @property
    def frame_count(self) -> int:
        return self._state.frame_count

    @property
    def initialization_time(self) -> Optional[float]:
        return self._state.initialization_time

    @property
    def memory_baseline(self) -> Optional[int]:
        return self._state.memory_baseline

    def start(self) -> None:
        """Start a new session, discarding the previous one."""
        with self._lock:
            if self._state.active:
                log.warning("start() called while session is active; ignoring")
                self.aggregator.record(
                    Severity.INFO,
                    Category.OTHER,
                    "Duplicate start() ignored on active session",
                )
                return

            self._clear()
            self._state.started_at = self._clock()
            self._state.active = True

            baseline = self.memory_probe.read()
            if baseline is not None:
                self._state.memory_baseline = baseline.used

        log.info(
            f"Performance monitoring started (window={self.config.window_size}, "
            f"memory_baseline={self._state.memory_baseline})"
        )

    def stop(self) -> None:
        """Freeze the session. Later record calls raise InactiveSessionError."""
        with self._lock:
            if not self._state.active:
                log.debug("stop() called on inactive session")
                return
            self._state.active = False
            self._state.stopped = True
            self._state.stopped_at = self._clock()
            frame_stats = self._windows[MetricKind.FRAME_TIME].stats()

        avg = f"{frame_stats.mean:.2f}ms" if frame_stats.has_data else "n/a"
        log.info(
            f"Performance monitoring stopped - frames: {self._state.frame_count}, "
            f"uptime: {self.uptime_seconds:.2f}s, avg frame: {avg}"
        )

    def reset(self) -> None:
        """Discard all session data and return to the never-started state."""
        with self._lock:
            self._clear()
        log.info("Metrics collector reset")

    def _clear(self) -> None:
        for window in self._windows.values():
            window.clear()
        self.aggregator.clear()
        self._state = _SessionState()

    def _require_active(self, operation: str) -> None:
        if not self._state.active:
            raise InactiveSessionError(operation, stopped=self._state.stopped)

    @staticmethod
    def _validate(value: float, name: str) -> float:
        value = float(value)
        if math.isnan(value) or math.isinf(value) or value < 0:
            raise ValueError(f"{name} must be a finite non-negative number, got {value}")
        return value

    # Recording

    def record_frame_time(self, frame_time_ms: float) -> Optional[ErrorRecord]:
        """Record the total processing time of one frame.

        Args:
            frame_time_ms: Frame duration in milliseconds

        Returns:
            The threshold event raised by this sample, if any
        """
        with self._lock:
            self._require_active("record frame time")
            value = self._validate(frame_time_ms, "frame_time_ms")
            self._state.frame_count += 1

            if self._state.frame_count <= self.config.warmup_frames:
                return None

            self._windows[MetricKind.FRAME_TIME].record(value, self._clock())
            return self.evaluator.evaluate(MetricKind.FRAME_TIME, value)

    def record_detection_time(self, detection_time_ms: float) -> Optional[ErrorRecord]:
        """Record face detection time for one frame."""
        return self._record_stage(MetricKind.DETECTION_TIME, detection_time_ms)

    def record_landmark_time(self, landmark_time_ms: float) -> Optional[ErrorRecord]:
        """Record landmark extraction time for one frame."""
        return self._record_stage(MetricKind.LANDMARK_TIME, landmark_time_ms)

    def _record_stage(self, kind: MetricKind, value_ms: float) -> Optional[ErrorRecord]:
        with self._lock:
            self._require_active(f"record {kind.value.replace('_', ' ')}")
            value = self._validate(value_ms, kind.value)
            self._windows[kind].record(value, self._clock())
            return self.evaluator.evaluate(kind, value)

    def record_initialization_time(self, init_time_ms: float) -> Optional[ErrorRecord]:
        """Record time-to-first-ready. Only the first call in a session counts.

        Args:
            init_time_ms: Initialization duration in milliseconds

        Returns:
            The threshold event raised by this sample, if any
        """
        with self._lock:
            self._require_active("record initialization time")
            value = self._validate(init_time_ms, "init_time_ms")

            if self._state.initialization_time is not None:
                log.debug(
                    f"Ignoring initialization time {value:.2f}ms; "
                    f"already recorded {self._state.initialization_time:.2f}ms"
                )
                return None

            self._state.initialization_time = value
            return self.evaluator.evaluate(MetricKind.INITIALIZATION_TIME, value)

    def record(self, kind: MetricKind, value: float) -> Optional[ErrorRecord]:
        """Record a value for any metric kind.

        Args:
            kind: Metric kind
            value: Milliseconds for timings, bytes for memory usage

        Returns:
            The threshold event raised by this sample, if any
        """
        kind = MetricKind(kind)
        if kind is MetricKind.FRAME_TIME:
            return self.record_frame_time(value)
        if kind is MetricKind.INITIALIZATION_TIME:
            return self.record_initialization_time(value)
        if kind is MetricKind.MEMORY_USAGE:
            with self._lock:
                self._require_active("record memory usage")
                self._windows[kind].record(self._validate(value, "memory_usage"), self._clock())
            return None
        return self._record_stage(kind, value)

    @contextmanager
    def time_stage(self, kind: MetricKind) -> Iterator[StageTimer]:
        """Context manager timing a pipeline stage into this collector.

        Args:
            kind: Metric kind the stage reports

        Yields:
            StageTimer instance
        """
        timer = StageTimer(kind, self)
        with timer:
            yield timer

    def track_memory_usage(self) -> Optional[MemoryUsage]:
        """Sample process memory.

        While the session is active the reading is also recorded and checked
        for growth over the session baseline and for memory pressure. Never
        raises for unavailable readings.

        Returns:
            MemoryUsage, or None when memory tracking is unavailable
        """
        reading = self.memory_probe.read()
        if reading is None:
            return None

        with self._lock:
            if not self._state.active:
                return reading

            self._windows[MetricKind.MEMORY_USAGE].record(reading.used, self._clock())

            baseline = self._state.memory_baseline
            growth_limit = self.config.memory_growth_threshold_bytes
            if baseline is not None and reading.used > baseline + growth_limit:
                increase_mb = (reading.used - baseline) / (1024 * 1024)
                self.aggregator.record(
                    Severity.WARNING,
                    Category.MEMORY,
                    f"Memory usage increased significantly: {increase_mb:.2f}MB",
                    details={
                        "baseline": baseline,
                        "current": reading.used,
                        "increase": reading.used - baseline,
                    },
                )

            if reading.total and reading.pressure > self.config.memory_pressure_ratio:
                self.aggregator.record(
                    Severity.WARNING,
                    Category.MEMORY,
                    f"Memory usage approaching limit: {reading.pressure * 100:.1f}%",
                    details=reading.to_dict(),
                )

        return reading

    # Queries

    @property
    def uptime_seconds(self) -> float:
        """Seconds since start(), frozen at stop()."""
        started = self._state.started_at
        if started is None:
            return 0.0
        end = self._state.stopped_at if self._state.stopped_at is not None else self._clock()
        return max(0.0, end - started)

    def window_stats(self, kind: MetricKind) -> WindowStats:
        """Statistics of one windowed metric kind."""
        with self._lock:
            return self._windows[MetricKind(kind)].stats()

    def window_values(self, kind: MetricKind) -> List[float]:
        """Retained values of one windowed metric kind, oldest first."""
        with self._lock:
            return self._windows[MetricKind(kind)].values()

    def get_realtime_stats(self) -> RealtimeStats:
        """Snapshot of the session. Never raises for missing data."""
        with self._lock:
            uptime = self.uptime_seconds
            frame_count = self._state.frame_count
            return RealtimeStats(
                fps=frame_count / uptime if uptime > 0 else 0.0,
                frame_time=self._windows[MetricKind.FRAME_TIME].stats(),
                detection_time=self._windows[MetricKind.DETECTION_TIME].stats(),
                landmark_time=self._windows[MetricKind.LANDMARK_TIME].stats(),
                memory=self._windows[MetricKind.MEMORY_USAGE].stats(),
                frame_count=frame_count,
                uptime_seconds=uptime,
                initialization_time=self._state.initialization_time,
                active=self._state.active,
            )
