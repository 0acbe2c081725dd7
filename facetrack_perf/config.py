"""
Configuration management for facetrack-perf.

This module provides centralized configuration for the metrics engine:
- Performance targets and warning/critical thresholds
- Sample window and memory tracking settings
- Benchmark warmup settings
- Logging settings
"""

import os
from typing import Literal, Optional, Tuple, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()


class MetricTarget(BaseModel):
    """Target and alert bounds for one timed metric, in milliseconds."""

    target_ms: float = Field(gt=0.0, description="Target value for compliance checks")
    warning_multiplier: float = Field(
        default=2.0, gt=0.0, description="Warning bound as a multiple of the target"
    )
    critical_multiplier: float = Field(
        default=3.0, gt=0.0, description="Critical bound as a multiple of the target"
    )
    warning_ms: Optional[float] = Field(
        default=None, gt=0.0, description="Explicit warning bound (overrides multiplier)"
    )
    critical_ms: Optional[float] = Field(
        default=None, gt=0.0, description="Explicit critical bound (overrides multiplier)"
    )

    @property
    def warning_bound(self) -> float:
        if self.warning_ms is not None:
            return self.warning_ms
        return self.target_ms * self.warning_multiplier

    @property
    def critical_bound(self) -> float:
        if self.critical_ms is not None:
            return self.critical_ms
        return self.target_ms * self.critical_multiplier

    @model_validator(mode="after")
    def _check_ordering(self) -> "MetricTarget":
        if self.warning_bound > self.critical_bound:
            raise ValueError(
                f"warning bound {self.warning_bound} exceeds critical bound "
                f"{self.critical_bound}"
            )
        return self

    def threshold_pair(self) -> Tuple[float, float]:
        """Get the (warning, critical) pair."""
        return self.warning_bound, self.critical_bound


class ThresholdConfig(BaseModel):
    """Performance targets for the vision pipeline stages."""

    frame_time: MetricTarget = Field(
        default_factory=lambda: MetricTarget(
            target_ms=16.67, warning_multiplier=2.0, critical_multiplier=3.0
        ),
        description="60 FPS frame budget",
    )
    detection_time: MetricTarget = Field(
        default_factory=lambda: MetricTarget(
            target_ms=10.0, warning_multiplier=2.0, critical_multiplier=5.0
        ),
        description="Face detection budget",
    )
    landmark_time: MetricTarget = Field(
        default_factory=lambda: MetricTarget(
            target_ms=5.0, warning_multiplier=3.0, critical_multiplier=6.0
        ),
        description="Landmark extraction budget",
    )
    initialization_time: MetricTarget = Field(
        default_factory=lambda: MetricTarget(
            target_ms=1000.0, warning_multiplier=3.0, critical_multiplier=5.0
        ),
        description="Time-to-first-ready budget",
    )


class CollectorConfig(BaseModel):
    """Configuration for real-time sample collection."""

    window_size: int = Field(
        default=100, gt=0, description="Samples retained per metric window"
    )
    warmup_frames: int = Field(
        default=0, ge=0, description="Leading frames counted but not windowed"
    )
    enable_memory_tracking: bool = Field(
        default=True, description="Whether to sample process memory"
    )
    memory_growth_threshold_bytes: int = Field(
        default=100 * 1024 * 1024,
        gt=0,
        description="Growth over the session baseline that raises a memory warning",
    )
    memory_pressure_ratio: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Fraction of total memory that raises a memory warning",
    )


class BenchmarkConfig(BaseModel):
    """Configuration for the benchmark runner."""

    warmup_iterations: int = Field(
        default=5, ge=0, description="Unmeasured iterations run before measuring"
    )
    default_iterations: int = Field(
        default=10, gt=0, description="Measured iterations when none are given"
    )


class LogConfig(BaseModel):
    """Configuration for logging system."""

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[component]}</cyan> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>",
        description="Log message format",
    )
    rotation: str = Field(default="100 MB", description="Log file rotation size")
    retention: str = Field(default="1 month", description="Log file retention period")
    log_dir: str = Field(default="logs", description="Directory for log files")
    enable_file_logging: bool = Field(
        default=False, description="Whether to enable file logging"
    )
    enable_console_logging: bool = Field(
        default=True, description="Whether to enable console logging"
    )


class Config(BaseModel):
    """Main configuration object for the metrics engine."""

    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    collector: CollectorConfig = Field(default_factory=CollectorConfig)
    benchmark: BenchmarkConfig = Field(default_factory=BenchmarkConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        defaults = ThresholdConfig()
        return cls(
            thresholds=ThresholdConfig(
                frame_time=defaults.frame_time.model_copy(
                    update={
                        "target_ms": float(os.getenv("FACETRACK_TARGET_FRAME_MS", "16.67"))
                    }
                ),
                detection_time=defaults.detection_time.model_copy(
                    update={
                        "target_ms": float(
                            os.getenv("FACETRACK_TARGET_DETECTION_MS", "10.0")
                        )
                    }
                ),
                landmark_time=defaults.landmark_time.model_copy(
                    update={
                        "target_ms": float(
                            os.getenv("FACETRACK_TARGET_LANDMARK_MS", "5.0")
                        )
                    }
                ),
            ),
            collector=CollectorConfig(
                window_size=int(os.getenv("FACETRACK_WINDOW_SIZE", "100")),
                warmup_frames=int(os.getenv("FACETRACK_WARMUP_FRAMES", "0")),
                enable_memory_tracking=os.getenv("FACETRACK_MEMORY_TRACKING", "true").lower()
                in ("1", "true", "yes"),
            ),
            benchmark=BenchmarkConfig(
                warmup_iterations=int(os.getenv("FACETRACK_BENCHMARK_WARMUP", "5")),
            ),
            logging=LogConfig(
                level=cast(
                    Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                    os.getenv("FACETRACK_LOG_LEVEL", "INFO"),
                )
            ),
        )


# Global configuration instance
# Used as the default when an engine is built without explicit configuration
config = Config.from_env()
