"""
Structured logging for starchart.

Console and file output with JSON context, plus per-run metrics that
track how often each image source resolves a starship.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import copy
import json


class StructuredLogger:
    """
    Centralized logger with console and file outputs.
    Tracks request and lookup metrics for the resolver run.
    """

    def __init__(
        self,
        name: str = "starchart",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "requests": 0,
            "lookups_attempted": 0,
            "lookups_resolved": 0,
            "lookups_missing": 0,
            "errors_by_type": {},
            "source_success_rate": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"starchart_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # file gets everything
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, ensure_ascii=False, default=str)}"
        self.logger.log(level, message)

    # Metric tracking

    def record_request(self):
        """Increment HTTP request counter."""
        self.metrics["requests"] += 1

    def record_lookup_attempt(self, source: str):
        """Record that an image source was consulted for one starship."""
        self.metrics["lookups_attempted"] += 1
        stats = self.metrics["source_success_rate"].setdefault(
            source, {"attempts": 0, "successes": 0}
        )
        stats["attempts"] += 1

    def record_lookup_success(self, source: str):
        """Record that an image source resolved a starship."""
        self.metrics["lookups_resolved"] += 1
        if source in self.metrics["source_success_rate"]:
            self.metrics["source_success_rate"][source]["successes"] += 1

    def record_lookup_missing(self):
        """Record a starship left without any image."""
        self.metrics["lookups_missing"] += 1

    def record_error(self, error_type: str):
        """Count a failed request by error type."""
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics with per-source success rates."""
        metrics_copy = copy.deepcopy(self.metrics)
        for stats in metrics_copy["source_success_rate"].values():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(
                    stats["successes"] / stats["attempts"], 3
                )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        resolved = metrics["lookups_resolved"]
        total = resolved + metrics["lookups_missing"]
        overall_rate = 0
        if total > 0:
            overall_rate = round(resolved / total * 100, 1)

        self.info("=== Image Resolution Metrics ===")
        self.info(f"Requests: {metrics['requests']}")
        self.info(f"Starships: {resolved}/{total} resolved ({overall_rate}%)")

        if metrics["source_success_rate"]:
            self.info("Source Success Rates:")
            for source, stats in metrics["source_success_rate"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {source}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "starchart",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None


def configure_logger(
    name: str = "starchart",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """Replace the global logger with one built from the given settings."""
    global _global_logger
    _global_logger = StructuredLogger(name=name, level=level, **kwargs)
    return _global_logger
