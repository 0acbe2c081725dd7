"""
Schemas for error events raised while monitoring the pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from facetrack_perf.schemas import Category, Severity


@dataclass(frozen=True)
class ErrorRecord:
    """A single recorded event. Never mutated after creation."""

    severity: Severity
    category: Category
    message: str
    timestamp: datetime
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "details": dict(self.details),
        }


@dataclass
class ErrorStatistics:
    """Counts of recorded events grouped by severity and category."""

    total: int
    by_severity: Dict[str, int]
    by_category: Dict[str, int]
    recent: List[ErrorRecord] = field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return self.by_severity.get(severity.value, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total": self.total,
            "by_severity": dict(self.by_severity),
            "by_category": dict(self.by_category),
            "recent": [r.to_dict() for r in self.recent],
        }
