"""
Error event aggregation.

Collects severity/category tagged events from threshold checks, memory
tracking, benchmarks and session lifecycle, and summarises them on demand.
"""

import threading
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from facetrack_perf.logging import get_perf_logger
from facetrack_perf.monitoring.schemas import (
    Category,
    ErrorRecord,
    ErrorStatistics,
    Severity,
)

log = get_perf_logger("system")

RECENT_LIMIT = 10


class ErrorAggregator:
    """
    Append-only store of error records.

    Records are never deduplicated. Statistics are recomputed from the
    backing list on every call, which is linear in the number of records.
    """

    def __init__(self, recent_limit: int = RECENT_LIMIT):
        """
        Initialize aggregator.

        Args:
            recent_limit: Number of most recent records included in statistics
        """
        self.recent_limit = recent_limit
        self._records: List[ErrorRecord] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def record(
        self,
        severity: Union[Severity, str],
        category: Union[Category, str],
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> ErrorRecord:
        """
        Record an event.

        Args:
            severity: Event severity ("info", "warning", "critical")
            category: Producing metric or operation
            message: Human readable description
            details: Optional structured context

        Returns:
            The created ErrorRecord
        """
        entry = ErrorRecord(
            severity=Severity(severity),
            category=Category(category),
            message=message,
            timestamp=datetime.now(),
            details=details or {},
        )

        with self._lock:
            self._records.append(entry)

        log.debug(
            f"Recorded {entry.severity.value} event [{entry.category.value}]: {message}"
        )

        return entry

    def records(
        self,
        severity: Optional[Severity] = None,
        category: Optional[Category] = None,
    ) -> List[ErrorRecord]:
        """
        Get recorded events, optionally filtered.

        Args:
            severity: Only return records with this severity
            category: Only return records with this category

        Returns:
            Copy of matching records, oldest first
        """
        with self._lock:
            records = list(self._records)

        if severity is not None:
            records = [r for r in records if r.severity == Severity(severity)]
        if category is not None:
            records = [r for r in records if r.category == Category(category)]
        return records

    def statistics(self) -> ErrorStatistics:
        """
        Summarise recorded events.

        Returns:
            Total count plus counts grouped by severity and by category.
            Groups with no records are omitted.
        """
        with self._lock:
            records = list(self._records)

        by_severity = Counter(r.severity.value for r in records)
        by_category = Counter(r.category.value for r in records)

        return ErrorStatistics(
            total=len(records),
            by_severity=dict(by_severity),
            by_category=dict(by_category),
            recent=records[-self.recent_limit :] if self.recent_limit else [],
        )

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
