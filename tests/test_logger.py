"""
Tests for logger functionality.
"""

import pytest
from pathlib import Path
from crewmatch.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["candidates_scored"] == 0
        assert logger.metrics["matching_runs"] == {}

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        # Should not raise exceptions
        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Logging with context should include extra data."""
        logger = StructuredLogger(
            name="test-context",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Message with context", project_id="p1", candidates=5, path=Path("x"))

        content = next(tmp_path.glob("*.log")).read_text()
        assert 'Context: {"project_id": "p1", "candidates": 5, "path": "x"}' in content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_matching_run("workers_for_project")
        logger.record_matching_run("workers_for_project")
        logger.record_matching_run("jobs_for_worker")
        logger.record_candidate_scored(4)
        logger.record_candidate_scored()
        logger.record_unresolved_trade("Drone Pilot")
        logger.record_failure("OperationalError")

        metrics = logger.get_metrics()

        assert metrics["matching_runs"] == {"workers_for_project": 2, "jobs_for_worker": 1}
        assert metrics["candidates_scored"] == 5
        assert metrics["unresolved_trades"]["Drone Pilot"] == 1
        assert metrics["errors_by_type"]["OperationalError"] == 1

    def test_cache_hit_rate(self, tmp_path):
        """Hit rate should be calculated correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.get_metrics()["ontology_cache_hit_rate"] == 0.0

        logger.record_cache_miss()
        logger.record_cache_hit()
        logger.record_cache_hit()

        assert logger.get_metrics()["ontology_cache_hit_rate"] == pytest.approx(0.667, rel=0.01)

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test-file",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Test message")

        log_files = list(tmp_path.glob("crewmatch_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()

    def test_console_writes_to_stderr(self, capsys):
        """Console output stays off stdout so JSON results can be piped."""
        logger = StructuredLogger(name="test-console", enable_file=False)

        logger.warning("Console message")

        captured = capsys.readouterr()
        assert "Console message" in captured.err
        assert captured.out == ""

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(
            name="test-summary",
            log_dir=tmp_path,
            enable_console=False,
        )
        logger.record_matching_run("jobs_for_worker")
        logger.record_unresolved_trade("Drone Pilot")

        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "Matching runs: 1" in content
        assert "Drone Pilot: 1" in content


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        reset_logger()  # Start fresh

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_cache_hit()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2.metrics["ontology_cache_hits"] == 0

    def test_settings_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CREWMATCH_LOG_DIR", str(tmp_path / "envlogs"))
        monkeypatch.setenv("CREWMATCH_LOG_FILE", "yes")
        reset_logger()

        logger = get_logger(enable_console=False)
        logger.info("from env")

        assert list((tmp_path / "envlogs").glob("crewmatch_*.log"))
        reset_logger()
