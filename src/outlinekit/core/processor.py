"""Batch application of outline operations across a font.

Each eligible glyph is serialized to a plain dict and edited in a worker
process; only glyphs whose outline or advance actually changed are written
back into the font.
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from enum import Enum
from pathlib import Path
from typing import Any

from outlinekit.config import (
    DesignParameters,
    FontMetrics,
    OutlineKitSettings,
    SimplifierConfig,
)
from outlinekit.core.contours import remove_duplicate_points
from outlinekit.core.design import apply_design_tools
from outlinekit.core.simplifier import simplify_outline
from outlinekit.domain import Glyph
from outlinekit.io import FontReader, FontWriter
from outlinekit.utils import ProcessingLogger, ProcessingStats, configure_logging

ProgressCallback = Callable[[int, int, str, bool], None]


class GlyphOperation(str, Enum):
    """Outline operation applied to every glyph."""

    DESIGN = "design"
    SIMPLIFY = "simplify"


def _run_operation(
    glyph: Glyph,
    operation: GlyphOperation,
    options: dict[str, Any],
    metrics: FontMetrics,
) -> Glyph:
    if operation == GlyphOperation.DESIGN:
        result = apply_design_tools(glyph.path, DesignParameters(**options), metrics)
        return glyph.with_path(result.path, result.advance_width_delta)

    simplified = simplify_outline(glyph.path, metrics.units_per_em, SimplifierConfig(**options))
    return glyph.with_path(simplified)


def process_glyph(
    glyph_dict: dict[str, Any],
    operation: str,
    options: dict[str, Any],
    metrics_dict: dict[str, Any],
    remove_duplicates: bool = True,
) -> dict[str, Any]:
    """Edit one serialized glyph inside a worker process.

    Lives at module level so ProcessPoolExecutor can pickle it. Failures are
    returned rather than raised so a single bad glyph never aborts the batch.

    Args:
        glyph_dict: Output of Glyph.to_dict()
        operation: A GlyphOperation value
        options: model_dump() of DesignParameters or SimplifierConfig
        metrics_dict: model_dump() of FontMetrics
        remove_duplicates: Clean redundant points from the edited outline

    Returns:
        On success the keys "glyph", "changed", "segments_before",
        "segments_after" and "duration_ms". On failure the keys "error",
        "glyph_name", "traceback" and "duration_ms".
    """
    started = time.perf_counter()

    def elapsed_ms() -> float:
        return (time.perf_counter() - started) * 1000

    try:
        original = Glyph.from_dict(glyph_dict)
        edited = _run_operation(
            original, GlyphOperation(operation), options, FontMetrics(**metrics_dict)
        )
        if remove_duplicates:
            edited = edited.with_path(remove_duplicate_points(edited.path))
    except Exception as e:
        return {
            "error": str(e),
            "glyph_name": glyph_dict.get("metadata", {}).get("name", "unknown"),
            "traceback": traceback.format_exc(),
            "duration_ms": elapsed_ms(),
        }

    changed = (
        edited.path != original.path
        or edited.metadata.advance_width != original.metadata.advance_width
    )
    return {
        "glyph": edited.to_dict(),
        "changed": changed,
        "segments_before": len(original.path),
        "segments_after": len(edited.path),
        "duration_ms": elapsed_ms(),
    }


class FontProcessor:
    """Runs one GlyphOperation over a whole font file.

    A run loads the font, filters out glyphs the operation cannot affect,
    fans the rest out to worker processes and saves the edited font. The
    statistics of the latest run stay available on ``stats``, including
    after a KeyboardInterrupt.

    Example:
        settings = OutlineKitSettings(design=DesignParameters(weight=20))
        stats = FontProcessor(settings).process(
            Path("Sans-Regular.ttf"), GlyphOperation.DESIGN
        )
    """

    def __init__(self, config: OutlineKitSettings, quiet: bool = False) -> None:
        """Set up logging for the processor.

        Args:
            config: Operation parameters plus processing and logging settings
            quiet: Keep log records off the console
        """
        self.config = config
        self.stats: ProcessingStats | None = None
        log_config = config.logging
        self.logger = configure_logging(
            log_file=log_config.log_file,
            console_level=log_config.log_level,
            file_level=log_config.file_log_level,
            quiet=quiet,
        )

    def _operation_options(self, operation: GlyphOperation) -> dict[str, Any]:
        if operation == GlyphOperation.DESIGN:
            return self.config.design.model_dump()
        return self.config.simplifier.model_dump()

    def _skip_reason(self, glyph: Glyph, operation: GlyphOperation) -> str | None:
        if glyph.is_empty():
            return "empty glyph"
        if self.config.processing.skip_composite and glyph.is_composite():
            return "composite glyph"
        if operation == GlyphOperation.SIMPLIFY and not glyph.path.has_curves():
            return "no curves"
        return None

    def process(
        self,
        font_path: Path,
        operation: GlyphOperation,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> ProcessingStats:
        """Apply ``operation`` to every eligible glyph and save the result.

        Args:
            font_path: TrueType or CFF font to read
            operation: Operation to run on each glyph
            output_path: Destination; "<stem>-Edited<suffix>" next to the
                input when None
            max_workers: Worker process count; the configured value when None
            progress_callback: Called as (completed, total, glyph_name, success)
                after each glyph finishes

        Returns:
            Counters, timings and per-glyph errors of the run

        Raises:
            FileNotFoundError: The input font does not exist
            FontLoadError: The font could not be parsed
            FontFormatError: The font has neither glyf nor CFF outlines
            FontSaveError: The edited font could not be written
            KeyboardInterrupt: The run was cancelled
        """
        stats = ProcessingStats(start_time=time.time())
        self.stats = stats
        tracker = ProcessingLogger(self.logger, stats)

        workers = max_workers if max_workers is not None else self.config.processing.max_workers
        destination = output_path if output_path is not None else FontWriter.get_output_path(font_path)

        self.logger.info(
            "Run started",
            input=str(font_path),
            output=str(destination),
            operation=operation.value,
            max_workers=workers,
        )

        reader = FontReader(font_path)
        reader.load()
        try:
            metrics = reader.metrics
            self.logger.info(
                "Font opened",
                format=reader.format,
                upm=metrics.units_per_em,
                glyph_count=reader.glyph_count,
            )

            candidates: list[Glyph] = []
            for glyph in reader.iter_glyphs():
                reason = self._skip_reason(glyph, operation)
                if reason is not None:
                    tracker.log_glyph_skipped(glyph.name, reason)
                else:
                    candidates.append(glyph)
            self.logger.info("Glyphs selected", selected=len(candidates), skipped=stats.skipped_count)

            edited: dict[str, Glyph] = {}
            if candidates:
                edited = self._run_workers(
                    candidates, operation, metrics, workers, tracker, progress_callback
                )
            self._save_font(reader, destination, edited, tracker)
        finally:
            reader.close()

        stats.end_time = time.time()
        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            changed=stats.changed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return stats

    def _run_workers(
        self,
        glyphs: list[Glyph],
        operation: GlyphOperation,
        metrics: FontMetrics,
        max_workers: int | None,
        tracker: ProcessingLogger,
        progress_callback: ProgressCallback | None,
    ) -> dict[str, Glyph]:
        """Submit every glyph to a process pool and gather the changed ones.

        Returns:
            Changed glyphs keyed by name
        """
        task_args = (
            operation.value,
            self._operation_options(operation),
            metrics.model_dump(),
            self.config.processing.remove_duplicates,
        )
        edited: dict[str, Glyph] = {}
        total = len(glyphs)

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            pending: dict[Future[dict[str, Any]], str] = {}
            for glyph in glyphs:
                tracker.log_glyph_start(glyph.name)
                pending[executor.submit(process_glyph, glyph.to_dict(), *task_args)] = glyph.name

            try:
                for done, future in enumerate(as_completed(list(pending)), start=1):
                    name = pending.pop(future)
                    ok = self._collect(name, future, tracker, edited)
                    if progress_callback is not None:
                        progress_callback(done, total, name, ok)
            except KeyboardInterrupt:
                for future in pending:
                    future.cancel()
                tracker.log_cancelled(len(pending))
                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return edited

    @staticmethod
    def _collect(
        name: str,
        future: Future[dict[str, Any]],
        tracker: ProcessingLogger,
        edited: dict[str, Glyph],
    ) -> bool:
        try:
            result = future.result()
        except Exception as e:
            # Worker crashed or the pool broke
            tracker.log_glyph_error(name, e, traceback.format_exc())
            return False

        if "error" in result:
            tracker.log_glyph_error(
                result["glyph_name"], RuntimeError(result["error"]), result.get("traceback")
            )
            return False

        if result["changed"]:
            edited[name] = Glyph.from_dict(result["glyph"])
        tracker.log_glyph_complete(
            name,
            changed=result["changed"],
            duration_ms=result.get("duration_ms", 0.0),
            segments_before=result["segments_before"],
            segments_after=result["segments_after"],
        )
        return True

    def _save_font(
        self,
        reader: FontReader,
        output_path: Path,
        edited: dict[str, Glyph],
        tracker: ProcessingLogger,
    ) -> None:
        """Write the edited glyphs into the open font and save it to ``output_path``.

        A glyph that cannot be encoded keeps its original outline and is
        counted as an error of the run.
        """
        writer = FontWriter(reader.font, output_path)
        written = 0
        for name, glyph in edited.items():
            try:
                writer.update_glyph(glyph)
            except Exception as e:
                tracker.log_glyph_error(name, e, traceback.format_exc())
            else:
                written += 1
        writer.save()
        self.logger.info("Font written", output=str(output_path), updated_glyphs=written)
