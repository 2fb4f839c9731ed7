"""Exception hierarchy for Outlinekit."""


class OutlineKitError(Exception):
    """Base exception for all Outlinekit errors."""

    pass


class FontError(OutlineKitError):
    """Errors related to font loading or saving."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class FontSaveError(FontError):
    """Error saving a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save font '{path}': {reason}")


class FontFormatError(FontError):
    """Unsupported or invalid font format."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid font format '{path}': {details}")


class GlyphError(OutlineKitError):
    """Errors related to glyph processing."""

    pass


class GlyphNotFoundError(GlyphError):
    """Requested glyph not found in font."""

    def __init__(self, glyph_name: str) -> None:
        self.glyph_name = glyph_name
        super().__init__(f"Glyph '{glyph_name}' not found in font")


class GeometryError(OutlineKitError):
    """Errors in geometric data."""

    pass


class SegmentError(GeometryError):
    """A segment is missing points required by its type."""

    def __init__(self, segment_type: str, reason: str) -> None:
        self.segment_type = segment_type
        self.reason = reason
        super().__init__(f"Malformed '{segment_type}' segment: {reason}")
