"""Unit tests for logging configuration and run statistics."""

import logging
from unittest.mock import Mock

from outlinekit.utils import ProcessingLogger, ProcessingStats, configure_logging
from outlinekit.utils.logging import _HANDLER_TAG


def own_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG, False)]


class TestProcessingStats:
    """Tests for ProcessingStats."""

    def test_duration_open_run(self):
        """Test duration is zero until the run has ended."""
        stats = ProcessingStats(start_time=10.0)
        assert stats.duration_seconds == 0.0
        stats.end_time = 12.5
        assert stats.duration_seconds == 2.5

    def test_timing_summary(self):
        """Test mean, min and max of per-glyph timings."""
        stats = ProcessingStats(glyph_timings_ms=[2.0, 4.0, 9.0])
        assert stats.avg_glyph_time_ms == 5.0
        assert stats.min_glyph_time_ms == 2.0
        assert stats.max_glyph_time_ms == 9.0

    def test_timing_summary_empty(self):
        """Test timing properties default to zero."""
        stats = ProcessingStats()
        assert stats.avg_glyph_time_ms == 0.0
        assert stats.min_glyph_time_ms == 0.0
        assert stats.max_glyph_time_ms == 0.0


class TestProcessingLogger:
    """Tests for ProcessingLogger tallies."""

    def test_outcomes_counted(self):
        """Test each outcome updates the matching counter."""
        logger = Mock()
        processing_logger = ProcessingLogger(logger)

        processing_logger.log_glyph_complete("a", changed=True, duration_ms=3.0)
        processing_logger.log_glyph_complete("b", changed=False, duration_ms=1.0)
        processing_logger.log_glyph_skipped("space", "empty glyph")
        processing_logger.log_glyph_error("c", ValueError("bad contour"))

        stats = processing_logger.stats
        assert stats.processed_count == 2
        assert stats.changed_count == 1
        assert stats.skipped_count == 1
        assert stats.error_count == 1
        assert stats.errors == [("c", "bad contour")]
        assert stats.glyph_timings_ms == [3.0, 1.0]
        logger.error.assert_called_once()

    def test_shared_stats(self):
        """Test a supplied stats object is updated in place."""
        stats = ProcessingStats()
        processing_logger = ProcessingLogger(Mock(), stats)
        processing_logger.log_cancelled(7)
        assert processing_logger.stats is stats
        assert stats.was_cancelled is True
        assert stats.cancelled_count == 7


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_file_only_when_quiet(self, tmp_path):
        """Test quiet mode installs only the file handler."""
        configure_logging(log_file=tmp_path / "a.log", quiet=True)
        handlers = own_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.FileHandler)

    def test_console_handler_added(self, tmp_path):
        """Test the console handler uses the console level."""
        configure_logging(log_file=tmp_path / "a.log", console_level="ERROR")
        stream_handlers = [h for h in own_handlers() if not isinstance(h, logging.FileHandler)]
        assert len(stream_handlers) == 1
        assert stream_handlers[0].level == logging.ERROR
        configure_logging(log_file=tmp_path / "a.log", quiet=True)

    def test_reconfigure_replaces_handlers(self, tmp_path):
        """Test repeated calls do not stack handlers."""
        configure_logging(log_file=tmp_path / "a.log", quiet=True)
        configure_logging(log_file=tmp_path / "b.log", quiet=True)
        handlers = own_handlers()
        assert len(handlers) == 1
        assert handlers[0].baseFilename == str(tmp_path / "b.log")

    def test_records_written(self, tmp_path):
        """Test records reach the log file as JSON."""
        log_file = tmp_path / "run.log"
        logger = configure_logging(log_file=log_file, quiet=True)
        logger.info("Hello", glyph="A")
        for handler in own_handlers():
            handler.flush()
        text = log_file.read_text()
        assert '"glyph": "A"' in text
        assert "Logging configured" in text
