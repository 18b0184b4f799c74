"""
Structured logging for crewmatch.

Provides centralized logging with console and file outputs, plus
per-session counters describing how matching runs behaved (candidates
scored, ontology cache effectiveness, trades that failed to resolve).
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .env import get_settings


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring matching runs.
    """

    def __init__(
        self,
        name: str = "crewmatch",
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
        self.logger.setLevel(logging.DEBUG if enable_file else getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "matching_runs": {},
            "candidates_scored": 0,
            "ontology_cache_hits": 0,
            "ontology_cache_misses": 0,
            "unresolved_trades": {},
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
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

            log_file = log_dir / f"crewmatch_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
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
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_matching_run(self, direction: str):
        """Count a top-level matching call ("workers_for_project" / "jobs_for_worker")."""
        runs = self.metrics["matching_runs"]
        runs[direction] = runs.get(direction, 0) + 1

    def record_candidate_scored(self, count: int = 1):
        self.metrics["candidates_scored"] += count

    def record_cache_hit(self):
        self.metrics["ontology_cache_hits"] += 1

    def record_cache_miss(self):
        self.metrics["ontology_cache_misses"] += 1

    def record_unresolved_trade(self, trade_name: str):
        """Record a trade name with no ontology counterpart."""
        unresolved = self.metrics["unresolved_trades"]
        unresolved[trade_name] = unresolved.get(trade_name, 0) + 1

    def record_failure(self, error_type: str):
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics, including the ontology cache hit rate."""
        metrics_copy = self.metrics.copy()
        lookups = metrics_copy["ontology_cache_hits"] + metrics_copy["ontology_cache_misses"]
        metrics_copy["ontology_cache_hit_rate"] = (
            round(metrics_copy["ontology_cache_hits"] / lookups, 3) if lookups else 0.0
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Matching Session Metrics ===")
        total_runs = sum(metrics["matching_runs"].values())
        self.info(f"Matching runs: {total_runs}")
        for direction, count in metrics["matching_runs"].items():
            self.info(f"  {direction}: {count}")
        self.info(f"Candidates scored: {metrics['candidates_scored']}")
        self.info(
            f"Ontology cache: {metrics['ontology_cache_hits']} hits, "
            f"{metrics['ontology_cache_misses']} misses "
            f"({metrics['ontology_cache_hit_rate'] * 100:.1f}% hit rate)"
        )

        if metrics["unresolved_trades"]:
            self.info("Unresolved trades:")
            for trade_name, count in metrics["unresolved_trades"].items():
                self.info(f"  {trade_name}: {count}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "crewmatch",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Unset arguments are taken from the environment settings
    (CREWMATCH_LOG_LEVEL, CREWMATCH_LOG_DIR, CREWMATCH_LOG_FILE).

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        settings = get_settings()
        kwargs.setdefault("log_dir", settings.log_dir)
        kwargs.setdefault("enable_file", settings.log_to_file)
        _global_logger = StructuredLogger(name=name, level=level or settings.log_level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
