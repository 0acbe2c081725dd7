"""
Logging infrastructure for the metrics engine.

Provides structured logging with:
- Component-specific bound loggers
- Separate sinks for threshold alerts and benchmark runs
- Log rotation and retention
"""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from facetrack_perf.config import LogConfig

COMPONENTS = ("system", "collector", "thresholds", "benchmark", "report")


class PerfLogger:
    """
    Logger setup for the metrics engine.

    Features:
    - Structured logging with a bound ``component`` field
    - Per-component file sinks for alerts and benchmarks
    - Log rotation and retention
    """

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        rotation: str = "100 MB",
        retention: str = "1 month",
        level: str = "INFO",
        format_string: Optional[str] = None,
        enable_file_logging: bool = True,
        enable_console_logging: bool = True,
    ):
        """
        Initialize the logger.

        Args:
            log_dir: Directory for log files
            rotation: When to rotate log files
            retention: How long to keep old logs
            level: Default log level
            format_string: Custom format string
            enable_file_logging: Whether to log to files
            enable_console_logging: Whether to log to console
        """
        self.log_dir = log_dir or Path("logs")
        self.rotation = rotation
        self.retention = retention
        self.level = level

        self.format_string = format_string or LogConfig().format

        # Records emitted without an explicit component still render with the format
        logger.configure(extra={"component": "system"})

        # Remove default handler
        logger.remove()

        if enable_console_logging:
            logger.add(
                sys.stderr,
                format=self.format_string,
                level=level,
                colorize=True,
            )

        if enable_file_logging:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._add_file_handlers()

        self.logger = logger.bind(component="system")

    @classmethod
    def from_config(cls, log_config: LogConfig) -> "PerfLogger":
        """Build a logger from a LogConfig section."""
        return cls(
            log_dir=Path(log_config.log_dir),
            rotation=log_config.rotation,
            retention=log_config.retention,
            level=log_config.level,
            format_string=log_config.format,
            enable_file_logging=log_config.enable_file_logging,
            enable_console_logging=log_config.enable_console_logging,
        )

    def _add_file_handlers(self) -> None:
        """Add file handlers for the main log, alerts, benchmarks and errors."""

        logger.add(
            self.log_dir / "facetrack_perf.log",
            format=self.format_string,
            level=self.level,
            rotation=self.rotation,
            retention=self.retention,
            compression="zip",
        )

        # Threshold breaches
        logger.add(
            self.log_dir / "alerts.log",
            format=self.format_string,
            level="WARNING",
            rotation=self.rotation,
            retention=self.retention,
            compression="zip",
            filter=lambda record: record["extra"].get("component") == "thresholds",
        )

        logger.add(
            self.log_dir / "benchmarks.log",
            format=self.format_string,
            level="DEBUG",
            rotation=self.rotation,
            retention=self.retention,
            compression="zip",
            filter=lambda record: record["extra"].get("component") == "benchmark",
        )

        logger.add(
            self.log_dir / "errors.log",
            format=self.format_string,
            level="ERROR",
            rotation=self.rotation,
            retention=self.retention,
            compression="zip",
        )

    def get_logger(self, component: str) -> Any:
        """
        Get a logger bound to a specific component.

        Args:
            component: Component name (e.g., "collector", "benchmark")

        Returns:
            Logger instance bound to the component
        """
        return logger.bind(component=component)


def get_perf_logger(component: str = "system") -> Any:
    """
    Get a component-specific logger.

    Args:
        component: Component name

    Returns:
        Logger instance

    Example:
        >>> log = get_perf_logger("collector")
        >>> log.info("Session started")
    """
    return logger.bind(component=component)


_perf_logger: Optional[PerfLogger] = None


def initialize_logging(log_config: Optional[LogConfig] = None, **kwargs: Any) -> PerfLogger:
    """
    Initialize the logging system.

    This should be called once at application startup. Without a call, loguru's
    default stderr sink stays in place.

    Args:
        log_config: Logging section of the configuration
        **kwargs: Overrides passed to PerfLogger

    Returns:
        Configured PerfLogger instance
    """
    global _perf_logger
    if log_config is not None and not kwargs:
        _perf_logger = PerfLogger.from_config(log_config)
    else:
        _perf_logger = PerfLogger(**kwargs)
    return _perf_logger


def get_logger_instance() -> Optional[PerfLogger]:
    """Get the global logger instance."""
    return _perf_logger
