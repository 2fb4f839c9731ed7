"""Console rendering for the outlinekit commands.

All terminal output goes through the shared Rich ``console`` so that the
progress bar, summaries and errors interleave cleanly.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

console = Console()

MARK_STEP = "▸"
MARK_OK = "✓"
MARK_FAIL = "✗"
SEP = " · "


def create_progress() -> Progress:
    """Build the progress display used while glyphs are being edited."""
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=36, complete_style="cyan", finished_style="green"),
        MofNCompleteColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Outlinekit[/bold] [dim]{version}[/dim]")
    console.rule(style="dim")


def print_step(message: str) -> None:
    console.print(f"\n[bold cyan]{MARK_STEP}[/bold cyan] {message}")


def print_font_info(font_path: str, font_type: str, glyph_count: int, upm: int) -> None:
    """Show the file being worked on and its basic numbers.

    Args:
        font_path: Font file location
        font_type: "TrueType" or "OpenType"
        glyph_count: Number of glyphs in the glyph order
        upm: Units per em
    """
    # Text keeps square brackets in file names from being read as markup
    location = Text("  ").append(font_path, style="bold").append(f" [{font_type}]", style="dim")
    console.print(location)
    console.print(f"  {glyph_count:,} glyphs{SEP}{upm:,} units per em")


def _more_rows(hidden: int) -> None:
    if hidden > 0:
        console.print(f"  [dim]and {hidden} more[/dim]")


def print_outline_table(rows: list[tuple[str, int, int, int]], limit: int = 20) -> None:
    """Tabulate contour, segment and curve counts per glyph.

    Args:
        rows: One (name, contours, segments, curves) tuple per glyph
        limit: Rows shown before the rest are summarized
    """
    table = Table(box=None, padding=(0, 2), header_style="bold")
    table.add_column("Glyph", style="cyan")
    for heading in ("Contours", "Segments", "Curves"):
        table.add_column(heading, justify="right")

    for name, *counts in rows[:limit]:
        table.add_row(name, *(str(count) for count in counts))

    console.print(table)
    _more_rows(len(rows) - limit)


def print_parameters(title: str, values: dict[str, object]) -> None:
    """List the parameters of an operation that differ from their defaults."""
    summary = SEP.join(f"{key}={value}" for key, value in values.items()) or "defaults"
    console.print(f"  [dim]{title}:[/dim] {summary}")


def _format_time(seconds: float) -> str:
    if seconds >= 60:
        minutes, rest = divmod(seconds, 60)
        return f"{int(minutes)}m {rest:.1f}s"
    if seconds >= 1:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000:.0f}ms"


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    source = "detected" if is_auto else "requested"
    console.print(f"  {workers} worker processes ({source}){SEP}[dim]Ctrl+C cancels[/dim]")


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    processed: int,
    changed: int,
    errors: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Report a finished run as a short summary table.

    Args:
        output_path: Where the edited font was written
        file_size: Size of the written file, already formatted
        total_time_s: Wall time of the whole run
        processed: Glyphs handed to the workers
        changed: Glyphs whose outline or advance width changed
        errors: Glyphs that failed
        avg_time_ms: Mean per-glyph time, if any glyph was timed
        min_time_ms: Fastest glyph
        max_time_ms: Slowest glyph
    """
    console.print(f"\n[bold green]{MARK_OK} Done[/bold green] in {_format_time(total_time_s)}")

    summary = Table.grid(padding=(0, 2))
    summary.add_column(style="dim")
    summary.add_column()
    summary.add_row("  saved", Text(f"{output_path} ({file_size})", style="bold"))
    summary.add_row("  glyphs", f"{processed} processed{SEP}{changed} changed")
    summary.add_row("  errors", f"[{'red' if errors else 'green'}]{errors}[/]")
    if avg_time_ms is not None:
        timing = f"{avg_time_ms:.1f}ms mean"
        if min_time_ms is not None and max_time_ms is not None:
            timing += f"{SEP}{min_time_ms:.1f}ms min{SEP}{max_time_ms:.1f}ms max"
        summary.add_row("  per glyph", timing)
    console.print(summary)


def print_glyph_errors(errors: list[tuple[str, str]], limit: int = 10) -> None:
    """List failed glyphs with the message each one raised."""
    for glyph_name, message in errors[:limit]:
        line = Text("  ").append(MARK_FAIL, style="red").append(f" {glyph_name}: {message}")
        console.print(line)
    _more_rows(len(errors) - limit)


def print_error(message: str, details: str | None = None) -> None:
    console.print(f"\n[bold red]{MARK_FAIL}[/bold red] {message}")
    if details:
        console.print(f"  [dim]{details}[/dim]")


def print_cancellation_notice() -> None:
    console.print("\n[yellow]Interrupted[/yellow], letting running workers finish")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Tell the user what happened to an interrupted run.

    Args:
        processed: Glyphs finished before the interrupt
        cancelled: Queued glyphs that never ran
    """
    console.print(f"  {processed} glyphs finished{SEP}{cancelled} dropped from the queue")
    console.print("  [dim]The output font was not written[/dim]")
