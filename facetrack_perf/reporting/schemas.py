"""
Schemas for performance reports.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from facetrack_perf.benchmarks.results import BenchmarkResult
from facetrack_perf.metrics.collector import RealtimeStats
from facetrack_perf.monitoring.schemas import ErrorStatistics
from facetrack_perf.schemas import Severity

COMPLIANCE_LABELS = {
    "frame_time": "Frame time",
    "detection_time": "Detection time",
    "landmark_time": "Landmark time",
    "initialization_time": "Initialization time",
}


@dataclass
class MemorySummary:
    """Memory figures for the session, in bytes."""

    baseline: Optional[int] = None
    current: Optional[int] = None
    peak: Optional[int] = None

    @property
    def growth(self) -> Optional[int]:
        if self.baseline is None or self.current is None:
            return None
        return self.current - self.baseline

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "baseline": self.baseline,
            "current": self.current,
            "peak": self.peak,
            "growth": self.growth,
        }


@dataclass
class PerformanceReport:
    """Point-in-time report of a monitoring session."""

    generated_at: datetime
    realtime: RealtimeStats
    compliance: Dict[str, Optional[bool]]
    benchmarks: Dict[str, BenchmarkResult]
    errors: ErrorStatistics
    thresholds: Dict[str, Dict[str, float]] = field(default_factory=dict)
    memory: MemorySummary = field(default_factory=MemorySummary)
    initialization_time: Optional[float] = None

    @property
    def is_compliant(self) -> bool:
        """True when no measured target is missed. Unmeasured targets are ignored."""
        return all(v is not False for v in self.compliance.values())

    def to_markdown(self) -> str:
        """Generate markdown report."""
        lines = [
            "# Performance Report",
            f"Generated: {self.generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
            "",
            "## Current Status",
        ]

        status = "✅ Within targets"
        if self.errors.count(Severity.CRITICAL):
            status = "🔴 Critical Issues"
        elif not self.is_compliant:
            status = "⚠️ Targets Missed"
        lines.append(f"**Status**: {status}")
        lines.append("")

        rt = self.realtime
        lines.append("### Session")
        lines.append(f"- FPS: {rt.fps:.1f}")
        lines.append(f"- Frames: {rt.frame_count}")
        lines.append(f"- Uptime: {rt.uptime_seconds:.1f}s")
        if self.initialization_time is not None:
            lines.append(f"- Initialization: {self.initialization_time:.1f}ms")
        lines.append("")

        lines.append("### Compliance")
        for key, label in COMPLIANCE_LABELS.items():
            compliant = self.compliance.get(key)
            target = self.thresholds.get(key, {}).get("target")
            target_str = f" (target {target:.2f}ms)" if target is not None else ""
            if compliant is None:
                mark = "➖ no data"
            else:
                mark = "✅" if compliant else "❌"
            lines.append(f"- {label}{target_str}: {mark}")
        lines.append("")

        lines.append("### Timings")
        lines.append("| Metric | Count | Mean | Median | P95 | Max |")
        lines.append("|---|---|---|---|---|---|")
        for label, stats in (
            ("Frame", rt.frame_time),
            ("Detection", rt.detection_time),
            ("Landmark", rt.landmark_time),
        ):
            if not stats.has_data:
                lines.append(f"| {label} | 0 | - | - | - | - |")
                continue
            lines.append(
                f"| {label} | {stats.count} | {stats.mean:.2f} | {stats.median:.2f} "
                f"| {stats.p95:.2f} | {stats.max_value:.2f} |"
            )
        lines.append("")

        if self.memory.current is not None:
            lines.append("### Memory")
            lines.append(f"- Current: {self.memory.current / (1024 * 1024):.1f} MB")
            if self.memory.growth is not None:
                lines.append(f"- Growth: {self.memory.growth / (1024 * 1024):+.1f} MB")
            lines.append("")

        if self.benchmarks:
            lines.append("### Benchmarks")
            for name, result in self.benchmarks.items():
                stats = result.stats
                if stats is None:
                    lines.append(f"- **{name}**: all {result.iterations} iterations failed")
                    continue
                lines.append(
                    f"- **{name}**: mean {stats.mean:.3f}ms, p95 {stats.p95:.3f}ms, "
                    f"p99 {stats.p99:.3f}ms ({result.errors}/{result.iterations} errors)"
                )
            lines.append("")

        lines.append("### Errors")
        lines.append(f"- Total: {self.errors.total}")
        for severity, count in self.errors.by_severity.items():
            lines.append(f"- {severity}: {count}")
        if self.errors.recent:
            lines.append("")
            lines.append("#### Recent")
            for record in self.errors.recent:
                lines.append(f"- [{record.severity.value}] {record.message}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "generated_at": self.generated_at.isoformat(),
            "realtime": self.realtime.to_dict(),
            "compliance": dict(self.compliance),
            "benchmarks": {k: v.to_dict() for k, v in self.benchmarks.items()},
            "errors": self.errors.to_dict(),
            "thresholds": {k: dict(v) for k, v in self.thresholds.items()},
            "memory": self.memory.to_dict(),
            "initialization_time": self.initialization_time,
        }

    def save(self, filepath: Path) -> Path:
        """Save report to a JSON file."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

        return filepath
