"""Command-line interface for outlinekit.

Typer commands with Rich progress and summaries:

- ``info`` reports outline statistics
- ``design`` and ``simplify`` edit every glyph of a font in parallel
"""

from outlinekit.cli.app import app, cli

__all__ = ["app", "cli"]
