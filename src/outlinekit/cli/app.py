"""Typer application for the outlinekit command.

Commands:
    info      Font format, metrics and outline statistics
    design    Parametric design tools applied to every glyph
    simplify  Curve simplification applied to every glyph
"""

import os
from pathlib import Path
from typing import Annotated

import typer
from typer.models import OptionInfo

from outlinekit import __version__
from outlinekit.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_error,
    print_font_info,
    print_glyph_errors,
    print_header,
    print_outline_table,
    print_parameters,
    print_processing_info,
    print_step,
    print_success,
)
from outlinekit.config import (
    DesignParameters,
    LoggingConfig,
    OutlineKitSettings,
    ProcessingConfig,
    SimplifierConfig,
)
from outlinekit.core import contour_ranges
from outlinekit.core.processor import FontProcessor, GlyphOperation
from outlinekit.exceptions import FontLoadError, FontSaveError, OutlineKitError
from outlinekit.io import FontReader, FontWriter
from outlinekit.utils import ProcessingStats

app = typer.Typer(
    name="outlinekit",
    help="Apply outline design tools and curve simplification to whole fonts.",
    add_completion=False,
    no_args_is_help=True,
)

InputFont = Annotated[
    Path,
    typer.Argument(help="TrueType (.ttf) or CFF (.otf) font to read", show_default=False),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Where to save the edited font [default: <name>-Edited.<ext>]"),
]
WorkersOption = Annotated[
    int | None,
    typer.Option("--workers", "-j", help="Worker processes [default: one per CPU]", min=1),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option("--log-file", help="JSON log destination [default: timestamped file in cwd]"),
]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="Console log threshold: DEBUG, INFO, WARNING or ERROR"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show parameters, tables and per-glyph errors"),
]
QuietOption = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Print nothing except errors"),
]


def _slider(name: str, help_text: str, low: float, high: float) -> OptionInfo:
    return typer.Option(name, help=f"{help_text} ({low:g} to {high:g})", min=low, max=high)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]Outlinekit[/bold] {__version__}")
        raise typer.Exit()


@app.callback()
def _main_options(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Print the version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Apply outline design tools and curve simplification to whole fonts."""


def _fail(message: str, details: str | None = None) -> typer.Exit:
    print_error(message, details=details)
    return typer.Exit(code=1)


def _validate_input(input_font: Path) -> None:
    if not input_font.exists():
        raise _fail(f"Font not found: {input_font}", details="Check the path and try again.")
    if not input_font.is_file():
        raise _fail(f"{input_font} is a directory", details="Pass a single .ttf or .otf file.")


def _validate_output_flags(verbose: bool, quiet: bool) -> None:
    if verbose and quiet:
        raise _fail("--verbose and --quiet are mutually exclusive")


def _build_settings(
    workers: int | None,
    log_file: Path | None,
    log_level: str,
    quiet: bool,
    **operation: DesignParameters | SimplifierConfig,
) -> OutlineKitSettings:
    return OutlineKitSettings(
        processing=ProcessingConfig(max_workers=workers),
        logging=LoggingConfig(log_file=log_file, log_level="WARNING" if quiet else log_level),
        **operation,
    )


@app.command()
def info(
    input_font: InputFont,
    verbose: VerboseOption = False,
) -> None:
    """Show font format, metrics and outline statistics.

    Example:
        outlinekit info Roboto-Regular.ttf --verbose
    """
    _validate_input(input_font)

    try:
        with FontReader(input_font) as reader:
            metrics = reader.metrics
            print_font_info(
                font_path=str(input_font),
                font_type=reader.format,
                glyph_count=reader.glyph_count,
                upm=metrics.units_per_em,
            )
            console.print(
                f"  ascender {metrics.ascender:g} · descender {metrics.descender:g} · "
                f"x-height {metrics.x_height:g}"
            )

            rows: list[tuple[str, int, int, int]] = []
            composites = 0
            for glyph in reader.iter_glyphs():
                if glyph.is_composite():
                    composites += 1
                elif not glyph.is_empty():
                    path = glyph.path
                    curves = sum(1 for segment in path if segment.is_curve)
                    rows.append((glyph.name, len(contour_ranges(path)), len(path), curves))

        print_step("Outlines")
        console.print(f"  {len(rows)} outline glyphs · {composites} composites")
        if verbose and rows:
            print_outline_table(rows)

    except FontLoadError as e:
        raise _fail(f"Unreadable font: {e.reason}") from None
    except OutlineKitError as e:
        raise _fail(str(e)) from None


@app.command()
def design(
    input_font: InputFont,
    output: OutputOption = None,
    weight: Annotated[float, _slider("--weight", "Stroke weight offset", -100, 100)] = 0.0,
    width: Annotated[float, _slider("--width", "Horizontal scale in percent", -100, 100)] = 0.0,
    contrast: Annotated[float, _slider("--contrast", "Horizontal vs vertical stroke contrast", -100, 100)] = 0.0,
    optical_size: Annotated[float, _slider("--optical-size", "Radial optical size offset", -50, 50)] = 0.0,
    x_height: Annotated[float, _slider("--x-height", "x-height zone scale", -100, 100)] = 0.0,
    ascender_extend: Annotated[float, _slider("--ascender", "Ascender extension", -100, 100)] = 0.0,
    descender_extend: Annotated[float, _slider("--descender", "Descender extension", -100, 100)] = 0.0,
    spacing: Annotated[float, _slider("--spacing", "Sidebearing change", -100, 100)] = 0.0,
    roundness: Annotated[float, _slider("--roundness", "Handle length scale", -100, 100)] = 0.0,
    slant: Annotated[float, _slider("--slant", "Shear angle in degrees", -30, 30)] = 0.0,
    ink_trap: Annotated[float, _slider("--ink-trap", "Ink trap depth at acute joints", 0, 100)] = 0.0,
    serif: Annotated[float, _slider("--serif", "Tangential extension at terminals", 0, 100)] = 0.0,
    overshoot: Annotated[float, _slider("--overshoot", "Overshoot at alignment zones", -50, 50)] = 0.0,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Apply the parametric design tools to every glyph of a font.

    Moves points along outline normals and remaps coordinates per the given
    sliders, then adjusts advance widths for width and spacing changes.

    Example:
        outlinekit design Roboto-Regular.ttf --weight 20 --slant 8
    """
    _validate_output_flags(verbose, quiet)
    _validate_input(input_font)

    params = DesignParameters(
        weight=weight,
        width=width,
        contrast=contrast,
        optical_size=optical_size,
        x_height=x_height,
        ascender_extend=ascender_extend,
        descender_extend=descender_extend,
        spacing=spacing,
        roundness=roundness,
        slant=slant,
        ink_trap=ink_trap,
        serif=serif,
        overshoot=overshoot,
    )
    if params.is_neutral():
        if not quiet:
            console.print("\nEvery slider is at zero. Nothing to do.")
        raise typer.Exit(code=0)

    _run_font_operation(
        input_font,
        output,
        GlyphOperation.DESIGN,
        _build_settings(workers, log_file, log_level, quiet, design=params),
        workers=workers,
        quiet=quiet,
        verbose=verbose,
    )


@app.command()
def simplify(
    input_font: InputFont,
    output: OutputOption = None,
    max_passes: Annotated[
        int,
        typer.Option("--max-passes", help="Maximum curve merge passes per glyph", min=1, max=20),
    ] = 5,
    tangent_threshold: Annotated[
        float,
        typer.Option(
            "--tangent-threshold",
            help="Minimum tangent alignment for merging curves (0 to 1)",
            min=0.0,
            max=1.0,
        ),
    ] = 0.8,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Refit glyph outlines with fewer curves.

    Converts quadratics to cubics, collapses nearly straight curves into
    lines, merges smooth runs of cubics and drops collinear points.

    Example:
        outlinekit simplify Roboto-Regular.ttf -o Roboto-Simple.ttf
    """
    _validate_output_flags(verbose, quiet)
    _validate_input(input_font)

    config = SimplifierConfig(max_passes=max_passes, tangent_threshold=tangent_threshold)
    _run_font_operation(
        input_font,
        output,
        GlyphOperation.SIMPLIFY,
        _build_settings(workers, log_file, log_level, quiet, simplifier=config),
        workers=workers,
        quiet=quiet,
        verbose=verbose,
    )


def _changed_parameters(settings: OutlineKitSettings, operation: GlyphOperation) -> dict[str, object]:
    if operation == GlyphOperation.DESIGN:
        return settings.design.model_dump(exclude_defaults=True)
    return settings.simplifier.model_dump(exclude_defaults=True)


def _process(
    processor: FontProcessor,
    input_font: Path,
    output_path: Path,
    operation: GlyphOperation,
    workers: int | None,
    show_progress: bool,
) -> ProcessingStats:
    if not show_progress:
        return processor.process(input_font, operation, output_path, max_workers=workers)

    with create_progress() as progress:
        task_id = progress.add_task("glyphs", total=None)

        def advance(completed: int, total: int, *_: object) -> None:
            progress.update(task_id, completed=completed, total=total)

        return processor.process(
            input_font, operation, output_path, max_workers=workers, progress_callback=advance
        )


def _run_font_operation(
    input_font: Path,
    output: Path | None,
    operation: GlyphOperation,
    settings: OutlineKitSettings,
    workers: int | None,
    quiet: bool,
    verbose: bool,
) -> None:
    """Drive one FontProcessor run and report it on the console.

    Exits with code 1 on font or processing errors and 130 when the user
    interrupts the run.
    """
    output_path = output if output is not None else FontWriter.get_output_path(input_font)

    try:
        if not quiet:
            print_header(__version__)
            print_step("Reading font")
            with FontReader(input_font) as reader:
                print_font_info(str(input_font), reader.format, reader.glyph_count, reader.units_per_em)
            if verbose:
                print_parameters(operation.value, _changed_parameters(settings, operation))
            print_step(f"Running {operation.value}")
            print_processing_info(workers or os.cpu_count() or 1, is_auto=workers is None)

        processor = FontProcessor(settings, quiet=quiet)
        try:
            stats = _process(processor, input_font, output_path, operation, workers, not quiet)
        except KeyboardInterrupt:
            if not quiet:
                partial = processor.stats or ProcessingStats()
                print_cancellation_notice()
                print_cancellation_summary(partial.processed_count, partial.cancelled_count)
            raise typer.Exit(code=130) from None

        if not quiet:
            print_success(
                output_path=str(output_path),
                file_size=_format_file_size(output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                changed=stats.changed_count,
                errors=stats.error_count,
                avg_time_ms=stats.avg_glyph_time_ms,
                min_time_ms=stats.min_glyph_time_ms,
                max_time_ms=stats.max_glyph_time_ms,
            )
            if verbose and stats.errors:
                print_glyph_errors(stats.errors)

    except typer.Exit:
        raise
    except FontLoadError as e:
        raise _fail(f"Unreadable font: {e.reason}") from None
    except FontSaveError as e:
        raise _fail(f"Saving failed: {e.reason}") from None
    except OutlineKitError as e:
        raise _fail(str(e)) from None
    except Exception as e:
        raise _fail(f"{type(e).__name__}: {e}") from None


def _format_file_size(path: Path) -> str:
    try:
        size = float(path.stat().st_size)
    except OSError:
        return "size unknown"
    for unit in ("B", "KB"):
        if size < 1024:
            return f"{size:.0f} {unit}"
        size /= 1024
    return f"{size:.1f} MB"


def cli() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli()
