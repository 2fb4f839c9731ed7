"""Glyph model: an outline plus the horizontal metrics stored in hmtx.

Both classes round-trip through plain dicts so glyphs can be shipped to
worker processes without pickling fontTools objects.
"""

from dataclasses import dataclass, replace
from typing import Any

from outlinekit.domain.path import Path


@dataclass
class GlyphMetadata:
    """Identity and hmtx metrics of a glyph.

    Attributes:
        name: Name in the font's glyph order, such as "O" or "uni00E9"
        unicode: Code point mapped to the glyph by cmap, or None
        advance_width: Advance in font units
        left_side_bearing: Distance from the origin to the outline's xMin
    """

    name: str
    unicode: int | None
    advance_width: int
    left_side_bearing: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "unicode": self.unicode,
            "advance_width": self.advance_width,
            "lsb": self.left_side_bearing,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphMetadata":
        return cls(data["name"], data["unicode"], data["advance_width"], data["lsb"])


@dataclass
class Glyph:
    """A glyph outline together with its metadata.

    Attributes:
        metadata: Name, code point and horizontal metrics
        path: Outline segments, empty for spaces and composites
        _is_composite: Set by the reader for glyphs built from components
    """

    metadata: GlyphMetadata
    path: Path
    _is_composite: bool = False

    @property
    def name(self) -> str:
        return self.metadata.name

    def is_empty(self) -> bool:
        return self.path.is_empty()

    def is_composite(self) -> bool:
        """True when the glyph is assembled from other glyphs.

        Component references are flattened into ``path`` when the glyph is
        read, but writing such a glyph back would drop the references.
        """
        return self._is_composite

    def with_path(self, path: Path, advance_delta: int = 0) -> "Glyph":
        """Copy the glyph with a new outline.

        Args:
            path: Replacement outline
            advance_delta: Change to the advance width; the result is
                clamped at zero

        Returns:
            A new Glyph; this one is left untouched
        """
        advance = max(0, self.metadata.advance_width + advance_delta)
        return Glyph(
            metadata=replace(self.metadata, advance_width=advance),
            path=path,
            _is_composite=self._is_composite,
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form used to pass glyphs between processes."""
        return {
            "metadata": self.metadata.to_dict(),
            "path": self.path.to_dict(),
            "is_composite": self._is_composite,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Glyph":
        return cls(
            metadata=GlyphMetadata.from_dict(data["metadata"]),
            path=Path.from_dict(data["path"]),
            _is_composite=data.get("is_composite", False),
        )
