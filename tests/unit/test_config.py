"""
Unit tests for configuration system.

These tests verify that the configuration system works correctly
and can load settings from environment variables.
"""

import pytest
from pydantic import ValidationError

from facetrack_perf.config import (
    BenchmarkConfig,
    CollectorConfig,
    Config,
    LogConfig,
    MetricTarget,
    ThresholdConfig,
)


def test_config_has_defaults() -> None:
    """Test that Config initializes with sensible defaults."""
    config = Config()

    assert config.thresholds.frame_time.target_ms == 16.67
    assert config.thresholds.detection_time.target_ms == 10.0
    assert config.thresholds.landmark_time.target_ms == 5.0
    assert config.thresholds.initialization_time.target_ms == 1000.0

    assert config.collector.window_size == 100
    assert config.collector.warmup_frames == 0
    assert config.collector.enable_memory_tracking is True

    assert config.benchmark.warmup_iterations == 5
    assert config.benchmark.default_iterations == 10

    assert config.logging.level == "INFO"


def test_threshold_defaults() -> None:
    """Test derived warning and critical bounds."""
    thresholds = ThresholdConfig()

    assert thresholds.detection_time.threshold_pair() == (20.0, 50.0)
    assert thresholds.landmark_time.threshold_pair() == (15.0, 30.0)
    assert thresholds.initialization_time.threshold_pair() == (3000.0, 5000.0)
    assert thresholds.frame_time.warning_bound == pytest.approx(33.34)
    assert thresholds.frame_time.critical_bound == pytest.approx(50.01)


def test_collector_config_defaults() -> None:
    """Test CollectorConfig default values."""
    collector = CollectorConfig()

    assert collector.memory_growth_threshold_bytes == 100 * 1024 * 1024
    assert collector.memory_pressure_ratio == 0.8


def test_log_config_defaults() -> None:
    """Test LogConfig default values."""
    log_config = LogConfig()

    assert log_config.log_dir == "logs"
    assert log_config.enable_file_logging is False
    assert log_config.enable_console_logging is True


def test_invalid_window_size() -> None:
    """Test that window size must be positive."""
    with pytest.raises(ValidationError):
        CollectorConfig(window_size=0)


def test_invalid_warmup() -> None:
    """Test that warmup counts cannot be negative."""
    with pytest.raises(ValidationError):
        BenchmarkConfig(warmup_iterations=-1)
    with pytest.raises(ValidationError):
        CollectorConfig(warmup_frames=-1)


def test_invalid_target() -> None:
    """Test that targets must be positive."""
    with pytest.raises(ValidationError):
        MetricTarget(target_ms=0.0)


def test_invalid_log_level() -> None:
    """Test that invalid log levels raise errors."""
    with pytest.raises(ValidationError):
        LogConfig(level="VERBOSE")  # type: ignore[arg-type]


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test loading configuration from environment variables."""
    monkeypatch.setenv("FACETRACK_WINDOW_SIZE", "30")
    monkeypatch.setenv("FACETRACK_WARMUP_FRAMES", "3")
    monkeypatch.setenv("FACETRACK_MEMORY_TRACKING", "false")
    monkeypatch.setenv("FACETRACK_BENCHMARK_WARMUP", "2")
    monkeypatch.setenv("FACETRACK_TARGET_FRAME_MS", "33.33")
    monkeypatch.setenv("FACETRACK_TARGET_DETECTION_MS", "15")
    monkeypatch.setenv("FACETRACK_TARGET_LANDMARK_MS", "8")
    monkeypatch.setenv("FACETRACK_LOG_LEVEL", "DEBUG")

    config = Config.from_env()

    assert config.collector.window_size == 30
    assert config.collector.warmup_frames == 3
    assert config.collector.enable_memory_tracking is False
    assert config.benchmark.warmup_iterations == 2
    assert config.thresholds.frame_time.target_ms == 33.33
    assert config.thresholds.detection_time.target_ms == 15.0
    assert config.thresholds.landmark_time.target_ms == 8.0
    assert config.logging.level == "DEBUG"


def test_env_target_keeps_multipliers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test overriding a target rescales its derived bounds."""
    monkeypatch.setenv("FACETRACK_TARGET_DETECTION_MS", "20")

    config = Config.from_env()

    assert config.thresholds.detection_time.threshold_pair() == (40.0, 100.0)
