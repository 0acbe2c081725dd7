"""
Performance reporting.
"""

from facetrack_perf.reporting.generator import ReportGenerator, check_compliance
from facetrack_perf.reporting.schemas import MemorySummary, PerformanceReport

__all__ = [
    "MemorySummary",
    "PerformanceReport",
    "ReportGenerator",
    "check_compliance",
]
