"""
Custom exceptions for the metrics engine.

Threshold breaches and unavailable memory readings are normal operating
conditions and are recorded, not raised. These exceptions cover host usage
faults only.
"""

from __future__ import annotations


class MetricsError(Exception):
    """Base exception for all metrics engine errors."""

    pass


class InactiveSessionError(MetricsError):
    """A recording call was made outside an active session."""

    def __init__(self, operation: str, stopped: bool = False):
        state = "stopped" if stopped else "not started"
        super().__init__(f"Cannot {operation}: session is {state}")
        self.operation = operation
        self.stopped = stopped


class BenchmarkError(MetricsError):
    """A benchmark was given an operation that cannot be executed."""

    def __init__(self, message: str, benchmark_name: str):
        super().__init__(message)
        self.benchmark_name = benchmark_name
