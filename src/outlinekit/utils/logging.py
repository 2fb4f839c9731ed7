"""Structured logging and run statistics.

Records are written through structlog as JSON into the stdlib logging tree,
which fans them out to a log file and, unless quieted, to stderr.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

# Attribute set on handlers owned by configure_logging
_HANDLER_TAG = "_outlinekit_handler"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass
class ProcessingStats:
    """Counters and timings collected over one batch run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    changed_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    glyph_timings_ms: list[float] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Wall time between start and end, or 0.0 while the run is open."""
        if self.start_time is None or self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    @property
    def avg_glyph_time_ms(self) -> float:
        timings = self.glyph_timings_ms
        return sum(timings) / len(timings) if timings else 0.0

    @property
    def min_glyph_time_ms(self) -> float:
        return min(self.glyph_timings_ms, default=0.0)

    @property
    def max_glyph_time_ms(self) -> float:
        return max(self.glyph_timings_ms, default=0.0)


def _tagged(handler: logging.Handler, level: str, fmt: str) -> logging.Handler:
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter(fmt))
    setattr(handler, _HANDLER_TAG, True)
    return handler


def _drop_own_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Route structlog output to a log file and optionally the console.

    Calling this again replaces the handlers installed by the previous call,
    so repeated runs in one process do not duplicate records.

    Args:
        log_file: Destination file; a timestamped name in the working
            directory when None
        console_level: Minimum level echoed to stderr
        file_level: Minimum level written to the file
        quiet: Skip the stderr handler entirely

    Returns:
        Logger bound to the "outlinekit" name
    """
    if log_file is None:
        log_file = Path(f"outlinekit_{datetime.now():%Y%m%d_%H%M%S}.log")

    root = logging.getLogger()
    _drop_own_handlers(root)
    root.setLevel(logging.DEBUG)
    root.addHandler(_tagged(logging.FileHandler(log_file, encoding="utf-8"), file_level, _FILE_FORMAT))
    if not quiet:
        root.addHandler(_tagged(logging.StreamHandler(), console_level, "%(message)s"))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("outlinekit")
    logger.info("Logging configured", log_file=str(log_file), file_level=file_level)
    return logger


class ProcessingLogger:
    """Writes one log record per glyph outcome and tallies it.

    Args:
        logger: Structured logger to write to
        stats: Tally to update; a new one is created when None
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        stats: ProcessingStats | None = None,
    ) -> None:
        self._logger = logger
        self._stats = stats if stats is not None else ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def log_glyph_start(self, glyph_name: str) -> None:
        self._logger.debug("Glyph queued", glyph=glyph_name)

    def log_glyph_complete(
        self,
        glyph_name: str,
        changed: bool,
        duration_ms: float,
        segments_before: int = 0,
        segments_after: int = 0,
    ) -> None:
        """Record a glyph the worker finished, changed or not."""
        self._logger.info(
            "Glyph done",
            glyph=glyph_name,
            changed=changed,
            segments=f"{segments_before}->{segments_after}",
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.changed_count += int(changed)
        self._stats.glyph_timings_ms.append(duration_ms)

    def log_glyph_skipped(self, glyph_name: str, reason: str) -> None:
        self._logger.debug("Glyph skipped", glyph=glyph_name, reason=reason)
        self._stats.skipped_count += 1

    def log_glyph_error(
        self,
        glyph_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Record a failed glyph along with the worker's traceback."""
        message = str(error)
        self._logger.error(
            "Glyph failed",
            glyph=glyph_name,
            error=message,
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((glyph_name, message))

    def log_cancelled(self, pending: int) -> None:
        """Record a user interrupt and how many glyphs never ran."""
        self._logger.warning("Run interrupted", pending=pending)
        self._stats.was_cancelled = True
        self._stats.cancelled_count = pending
