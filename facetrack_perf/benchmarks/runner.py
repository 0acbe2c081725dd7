"""
Micro-benchmark runner.

Runs a caller-supplied operation a fixed number of times on the calling
thread and keeps one BenchmarkResult per benchmark name. Failed iterations
are counted and recorded as benchmark warnings; they never abort a run.
"""

import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Protocol, Union, runtime_checkable

from facetrack_perf.benchmarks.results import BenchmarkResult
from facetrack_perf.config import BenchmarkConfig
from facetrack_perf.errors import BenchmarkError
from facetrack_perf.logging import get_perf_logger
from facetrack_perf.metrics.memory import MemoryProbe
from facetrack_perf.monitoring.error_aggregator import ErrorAggregator
from facetrack_perf.schemas import Category, Severity

log = get_perf_logger("benchmark")


@runtime_checkable
class BenchmarkOperation(Protocol):
    """An object whose ``execute()`` call is the unit being benchmarked."""

    def execute(self) -> Any: ...


Operation = Union[Callable[[], Any], BenchmarkOperation]


def resolve_operation(name: str, operation: Operation) -> Callable[[], Any]:
    """Get a zero-arg callable for an operation.

    Raises:
        BenchmarkError: If the operation is neither callable nor exposes execute()
    """
    execute = getattr(operation, "execute", None)
    if callable(execute):
        return execute
    if callable(operation):
        return operation
    raise BenchmarkError(
        f"Benchmark '{name}' operation must be callable or expose execute()",
        benchmark_name=name,
    )


class BenchmarkRunner:
    """Sequential benchmark runner with per-name result history."""

    def __init__(
        self,
        aggregator: ErrorAggregator,
        config: Optional[BenchmarkConfig] = None,
        memory_probe: Optional[MemoryProbe] = None,
    ):
        """
        Initialize runner.

        Args:
            aggregator: Destination for failed-iteration warnings
            config: Warmup and default iteration counts
            memory_probe: Probe for per-iteration memory deltas, None to skip them
        """
        self.aggregator = aggregator
        self.config = config or BenchmarkConfig()
        self.memory_probe = memory_probe
        self._results: Dict[str, BenchmarkResult] = {}

    @property
    def results(self) -> Dict[str, BenchmarkResult]:
        """Copy of the stored results keyed by benchmark name."""
        return dict(self._results)

    def get_result(self, name: str) -> Optional[BenchmarkResult]:
        return self._results.get(name)

    def clear(self) -> None:
        self._results.clear()

    def _memory_used(self) -> Optional[int]:
        if self.memory_probe is None:
            return None
        reading = self.memory_probe.read()
        return reading.used if reading is not None else None

    def run_benchmark(
        self,
        name: str,
        operation: Operation,
        iterations: Optional[int] = None,
        warmup: Optional[int] = None,
    ) -> BenchmarkResult:
        """
        Run a named benchmark.

        Args:
            name: Benchmark name; a rerun replaces the previous result
            operation: Zero-arg callable or object exposing execute()
            iterations: Measured iterations, defaults to config.default_iterations
            warmup: Unmeasured iterations, defaults to config.warmup_iterations

        Returns:
            The stored BenchmarkResult

        Raises:
            ValueError: If iterations < 1 or warmup < 0
            BenchmarkError: If the operation cannot be executed
        """
        iterations = self.config.default_iterations if iterations is None else iterations
        warmup = self.config.warmup_iterations if warmup is None else warmup
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        if warmup < 0:
            raise ValueError(f"warmup must be >= 0, got {warmup}")

        call = resolve_operation(name, operation)
        log.info(f"Running benchmark '{name}': {warmup} warmup, {iterations} iterations")

        for i in range(warmup):
            try:
                call()
            except Exception as e:
                log.debug(f"Benchmark '{name}' warmup iteration {i} failed: {e}")

        result = BenchmarkResult(
            name=name,
            iterations=iterations,
            warmup_iterations=warmup,
            started_at=datetime.now(),
        )
        run_start = time.perf_counter()

        for i in range(iterations):
            memory_before = self._memory_used()
            start = time.perf_counter()
            try:
                call()
            except Exception as e:
                result.errors += 1
                log.warning(f"Benchmark '{name}' iteration {i} failed: {e}")
                self.aggregator.record(
                    Severity.WARNING,
                    Category.BENCHMARK,
                    f"Benchmark '{name}' iteration {i} failed: {e}",
                    details={
                        "benchmark": name,
                        "iteration": i,
                        "error_type": type(e).__name__,
                    },
                )
                continue
            result.durations.append((time.perf_counter() - start) * 1000)

            memory_after = self._memory_used()
            if memory_before is not None and memory_after is not None:
                result.memory_deltas.append(memory_after - memory_before)

        result.total_time_ms = (time.perf_counter() - run_start) * 1000
        self._results[name] = result

        stats = result.stats
        if stats is None:
            log.warning(f"Benchmark '{name}': all {iterations} iterations failed")
        else:
            log.info(
                f"Benchmark '{name}': mean={stats.mean:.3f}ms "
                f"p95={stats.p95:.3f}ms errors={result.errors}/{iterations}"
            )
        return result
