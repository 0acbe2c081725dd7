"""
Logging infrastructure for facetrack-perf.

Provides structured loguru logging and decorators for timing pipeline stages.
"""

from .logger import (
    PerfLogger,
    get_perf_logger,
    initialize_logging,
    get_logger_instance,
)

from .decorators import (
    timed_stage,
)

__all__ = [
    # Logger
    "PerfLogger",
    "get_perf_logger",
    "initialize_logging",
    "get_logger_instance",
    # Decorators
    "timed_stage",
]
