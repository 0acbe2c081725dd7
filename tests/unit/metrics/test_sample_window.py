"""Tests for SampleWindow, WindowStats and percentile."""

import pytest

from facetrack_perf.metrics.window import SampleWindow, WindowStats, percentile
from facetrack_perf.schemas import MetricKind


class TestPercentile:
    """Tests for nearest-rank percentile selection."""

    def test_p95_of_one_to_hundred(self):
        """Test p95 of 1..100 selects the 95th value."""
        values = [float(v) for v in range(1, 101)]
        assert percentile(values, 95) == 95.0

    def test_p95_rank_rounds_up(self):
        """Test rank is ceil(0.95 * n)."""
        # ceil(0.95 * 10) = 10
        values = [float(v) for v in range(1, 11)]
        assert percentile(values, 95) == 10.0

    def test_single_value(self):
        """Test single value is every percentile."""
        assert percentile([7.0], 0) == 7.0
        assert percentile([7.0], 50) == 7.0
        assert percentile([7.0], 100) == 7.0

    def test_empty_raises(self):
        """Test empty input raises ValueError."""
        with pytest.raises(ValueError):
            percentile([], 95)


class TestWindowStats:
    """Tests for WindowStats."""

    def test_empty_sentinel(self):
        """Test empty sentinel has no numeric fields."""
        stats = WindowStats.empty()

        assert stats.count == 0
        assert stats.has_data is False
        assert stats.mean is None
        assert stats.p95 is None

    def test_from_values(self):
        """Test statistics over unsorted values."""
        stats = WindowStats.from_values([30.0, 10.0, 20.0])

        assert stats.count == 3
        assert stats.mean == 20.0
        assert stats.median == 20.0
        assert stats.min_value == 10.0
        assert stats.max_value == 30.0
        assert stats.p95 == 30.0

    def test_to_dict_keys(self):
        """Test serialized keys."""
        data = WindowStats.from_values([1.0]).to_dict()
        assert set(data) == {"count", "mean", "median", "min", "max", "p95"}


class TestSampleWindow:
    """Tests for SampleWindow."""

    def test_rejects_non_positive_capacity(self):
        """Test capacity must be at least one."""
        with pytest.raises(ValueError):
            SampleWindow(MetricKind.FRAME_TIME, capacity=0)

    def test_record_and_latest(self):
        """Test recording samples with explicit timestamps."""
        window = SampleWindow(MetricKind.FRAME_TIME, capacity=5)
        window.record(12.0, timestamp=1.0)
        window.record(14.0, timestamp=2.0)

        assert len(window) == 2
        assert window.values() == [12.0, 14.0]
        assert window.latest().value == 14.0
        assert window.latest().timestamp == 2.0

    def test_evicts_oldest_at_capacity(self):
        """Test FIFO eviction keeps the newest capacity samples."""
        window = SampleWindow(MetricKind.FRAME_TIME, capacity=3)
        for v in range(1, 6):
            window.record(float(v))

        assert len(window) == 3
        assert window.values() == [3.0, 4.0, 5.0]

    def test_length_never_exceeds_capacity(self):
        """Test length stays bounded over many samples."""
        window = SampleWindow(MetricKind.DETECTION_TIME, capacity=100)
        for i in range(150):
            window.record(float(i))
            assert len(window) <= 100

        assert window.stats().min_value == 50.0

    def test_stats_on_empty_window(self):
        """Test empty window returns the sentinel and never raises."""
        window = SampleWindow(MetricKind.LANDMARK_TIME)

        assert window.stats() == WindowStats.empty()
        assert window.latest() is None
        assert window.percentile(95) is None

    def test_percentile_over_window(self):
        """Test percentile uses the retained values only."""
        window = SampleWindow(MetricKind.FRAME_TIME, capacity=100)
        for v in range(1, 101):
            window.record(float(v))

        assert window.percentile(95) == 95.0
        assert window.percentile(50) == 50.0

    def test_clear(self):
        """Test clear empties the window but keeps capacity."""
        window = SampleWindow(MetricKind.FRAME_TIME, capacity=4)
        window.record(1.0)
        window.clear()

        assert len(window) == 0
        assert window.capacity == 4
