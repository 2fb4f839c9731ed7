"""Outlinekit - Outline geometry engine for type design.

Outlinekit manipulates glyph outlines made of straight and curved segments:
contour winding, curve subdivision and degree conversion, parametric design
tools that push points along outline normals, curve refitting, boolean
indents and line slicing. A thin fontTools adapter and CLI apply the engine
to whole fonts.

Example:
    $ outlinekit design Roboto-Regular.ttf --weight 20 --slant 8

This will create Roboto-Regular-Edited.ttf with every glyph made bolder and
slanted, and advance widths adjusted accordingly.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
