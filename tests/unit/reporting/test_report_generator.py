"""Tests for ReportGenerator and PerformanceReport."""

import json
from unittest.mock import MagicMock

import pytest

from facetrack_perf.benchmarks.runner import BenchmarkRunner
from facetrack_perf.config import BenchmarkConfig, MetricTarget, ThresholdConfig
from facetrack_perf.metrics.collector import MetricsCollector
from facetrack_perf.metrics.memory import MemoryProbe, MemoryUsage
from facetrack_perf.monitoring.error_aggregator import ErrorAggregator
from facetrack_perf.reporting.generator import ReportGenerator, check_compliance
from facetrack_perf.schemas import MetricKind

MB = 1024 * 1024


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def parts():
    aggregator = ErrorAggregator()
    probe = MagicMock(spec=MemoryProbe)
    probe.read.return_value = None
    collector = MetricsCollector(aggregator=aggregator, memory_probe=probe, clock=FakeClock())
    runner = BenchmarkRunner(aggregator, BenchmarkConfig(warmup_iterations=0))
    generator = ReportGenerator(collector, aggregator, runner)
    return collector, aggregator, runner, generator


class TestCheckCompliance:
    """Tests for check_compliance."""

    def test_mean_at_target_is_compliant(self):
        """Test the target itself is compliant."""
        assert check_compliance(10.0, MetricTarget(target_ms=10.0)) is True

    def test_mean_above_target(self):
        """Test a mean over the target is not compliant."""
        assert check_compliance(10.01, MetricTarget(target_ms=10.0)) is False

    def test_no_data(self):
        """Test missing data is unknown, not compliant."""
        assert check_compliance(None, MetricTarget(target_ms=10.0)) is None


class TestReportGenerator:
    """Tests for generate_report."""

    def test_report_on_empty_session(self, parts):
        """Test reports work before any data arrives."""
        collector, _, _, generator = parts
        collector.start()
        report = generator.generate_report()

        assert report.compliance == {
            "frame_time": None,
            "detection_time": None,
            "landmark_time": None,
            "initialization_time": None,
        }
        assert report.benchmarks == {}
        assert report.errors.total == 0
        assert report.is_compliant is True

    def test_report_never_started(self, parts):
        """Test reports work on a collector that was never started."""
        _, _, _, generator = parts
        report = generator.generate_report()

        assert report.realtime.active is False

    def test_compliance_from_means(self, parts):
        """Test compliance compares window means with targets."""
        collector, _, _, generator = parts
        collector.start()
        collector.record_frame_time(10.0)
        collector.record_frame_time(20.0)  # mean 15.0 <= 16.67
        collector.record_detection_time(12.0)  # mean 12.0 > 10.0
        collector.record_initialization_time(800.0)

        report = generator.generate_report()

        assert report.compliance["frame_time"] is True
        assert report.compliance["detection_time"] is False
        assert report.compliance["landmark_time"] is None
        assert report.compliance["initialization_time"] is True
        assert report.initialization_time == 800.0
        assert report.is_compliant is False

    def test_custom_targets(self, parts):
        """Test compliance follows configured targets."""
        collector, aggregator, runner, _ = parts
        thresholds = ThresholdConfig(frame_time=MetricTarget(target_ms=5.0))
        generator = ReportGenerator(collector, aggregator, runner, thresholds)
        collector.start()
        collector.record_frame_time(6.0)

        report = generator.generate_report()
        assert report.compliance["frame_time"] is False
        assert report.thresholds["frame_time"]["target"] == 5.0

    def test_report_does_not_mutate(self, parts):
        """Test generating reports leaves all state untouched."""
        collector, aggregator, runner, generator = parts
        collector.start()
        collector.record_frame_time(60.0)
        runner.run_benchmark("noop", lambda: None, iterations=2)

        before_values = collector.window_values(MetricKind.FRAME_TIME)
        before_errors = len(aggregator)
        generator.generate_report()
        generator.generate_report()

        assert collector.window_values(MetricKind.FRAME_TIME) == before_values
        assert len(aggregator) == before_errors
        assert collector.frame_count == 1
        assert list(runner.results) == ["noop"]

    def test_includes_benchmarks_and_errors(self, parts):
        """Test benchmark results and error statistics are included."""
        collector, _, runner, generator = parts
        collector.start()
        collector.record_landmark_time(40.0)
        runner.run_benchmark("noop", lambda: None, iterations=3)

        report = generator.generate_report()

        assert report.benchmarks["noop"].iterations == 3
        assert report.errors.by_severity == {"critical": 1}
        assert report.errors.by_category == {"landmark": 1}

    def test_memory_summary(self):
        """Test memory baseline and latest reading are reported."""
        aggregator = ErrorAggregator()
        probe = MagicMock(spec=MemoryProbe)
        probe.read.side_effect = [
            MemoryUsage(used=100 * MB, total=16 * 1024 * MB, timestamp=0.0),
            MemoryUsage(used=120 * MB, total=16 * 1024 * MB, timestamp=0.0),
        ]
        collector = MetricsCollector(aggregator=aggregator, memory_probe=probe, clock=FakeClock())
        runner = BenchmarkRunner(aggregator)
        generator = ReportGenerator(collector, aggregator, runner)
        collector.start()
        collector.track_memory_usage()

        report = generator.generate_report()

        assert report.memory.baseline == 100 * MB
        assert report.memory.current == 120 * MB
        assert report.memory.growth == 20 * MB
        assert probe.read.call_count == 2


class TestPerformanceReport:
    """Tests for report serialization."""

    def test_to_dict(self, parts):
        """Test dictionary form is JSON serializable."""
        collector, _, runner, generator = parts
        collector.start()
        collector.record_frame_time(40.0)
        runner.run_benchmark("noop", lambda: None, iterations=2)

        data = generator.generate_report().to_dict()

        assert data["compliance"]["frame_time"] is False
        assert data["benchmarks"]["noop"]["iterations"] == 2
        assert data["errors"]["total"] == 1
        json.dumps(data)

    def test_save_writes_json(self, parts, tmp_path):
        """Test save() writes a readable JSON file."""
        collector, _, _, generator = parts
        collector.start()
        collector.record_frame_time(16.0)

        path = generator.generate_report().save(tmp_path / "reports" / "perf.json")

        with open(path) as f:
            loaded = json.load(f)
        assert loaded["realtime"]["frame_count"] == 1

    def test_to_markdown(self, parts):
        """Test markdown rendering covers the main sections."""
        collector, _, runner, generator = parts
        collector.start()
        collector.record_frame_time(60.0)
        runner.run_benchmark("noop", lambda: None, iterations=2)

        markdown = generator.generate_report().to_markdown()

        assert markdown.startswith("# Performance Report")
        assert "Critical Issues" in markdown
        assert "### Compliance" in markdown
        assert "**noop**" in markdown
        assert "Critical frame time" in markdown

    def test_markdown_with_no_data(self, parts):
        """Test markdown renders for an empty session."""
        _, _, _, generator = parts
        markdown = generator.generate_report().to_markdown()

        assert "no data" in markdown
        assert "Within targets" in markdown
