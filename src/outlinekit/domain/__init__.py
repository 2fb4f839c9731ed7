"""Domain models for outlinekit.

This module contains the core domain models representing glyph outlines.
All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel processing)
- Independent of fonttools implementation details

Key classes:
- Point: A 2D point in font units
- Segment: One drawing command of an outline
- Path: An immutable sequence of segments
- ContourRange: Derived index range of one contour
- Glyph: A single glyph with its outline
"""

from outlinekit.domain.glyph import Glyph, GlyphMetadata
from outlinekit.domain.path import BoundingBox, ContourRange, Path, Winding
from outlinekit.domain.segment import Point, PointField, Segment, SegmentType

__all__: list[str] = [
    # Enums
    "PointField",
    "SegmentType",
    "Winding",
    # Core types
    "BoundingBox",
    "ContourRange",
    "Glyph",
    "GlyphMetadata",
    "Path",
    "Point",
    "Segment",
]
