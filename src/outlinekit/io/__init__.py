"""Font I/O layer for outlinekit.

This module handles reading and writing font files using fonttools.
It provides a clean abstraction layer between fonttools and the
domain models; fonttools owns the binary encoding.

Key responsibilities:
- Load TTF/OTF fonts
- Convert glyph outlines to Paths and back
- Write edited fonts with a distinct family name

Key classes:
- FontReader: Load fonts and extract glyphs
- FontWriter: Save edited fonts
- PathPen: fonttools pen that records a Path
"""

from outlinekit.io.converter import PathPen
from outlinekit.io.reader import FontReader
from outlinekit.io.writer import FontWriter

__all__ = [
    "FontReader",
    "FontWriter",
    "PathPen",
]
