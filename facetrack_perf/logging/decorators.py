"""
Decorators for timing pipeline stages without cluttering the stage code.
"""

import functools
import time
from typing import Any, Callable

from .logger import get_perf_logger


def timed_stage(recorder: Any, kind: Any, record_failures: bool = False) -> Callable:
    """
    Decorator to time a pipeline stage and record the duration.

    The recorder is anything exposing ``record(kind, value_ms)``, such as a
    MetricsCollector or MetricsEngine.

    Args:
        recorder: Object the elapsed time is recorded into
        kind: Metric kind the stage reports (e.g., MetricKind.DETECTION_TIME)
        record_failures: Whether to record the duration of a raising call

    Example:
        >>> @timed_stage(engine, MetricKind.DETECTION_TIME)
        ... def detect_faces(frame):
        ...     return detector.run(frame)
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()

            try:
                result = func(*args, **kwargs)
            except Exception:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                get_perf_logger("collector").debug(
                    f"Stage failed: {func.__name__}",
                    function=func.__name__,
                    elapsed_ms=elapsed_ms,
                )
                if record_failures:
                    recorder.record(kind, elapsed_ms)
                raise

            recorder.record(kind, (time.perf_counter() - start_time) * 1000)
            return result

        return wrapper

    return decorator

