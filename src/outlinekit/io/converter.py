"""Converters between fonttools and domain models.

This module handles the conversion between fonttools glyph outlines and
our domain models (Glyph, Path, Segment).
"""

from typing import Any

from fontTools.pens.basePen import BasePen
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont

from outlinekit.core.contours import contour_ranges, reverse_contours
from outlinekit.core.curves import path_to_cubics, path_to_quadratics
from outlinekit.domain import Glyph, GlyphMetadata, Path, Point, Segment, SegmentType


class PathPen(BasePen):
    """Pen that records a glyph outline as domain segments.

    BasePen decomposes multi-point ``qCurveTo``/``curveTo`` calls, including
    TrueType implied on-curve points, into single quadratic and cubic
    segments before they reach this pen.
    """

    def __init__(self, glyph_set: Any = None) -> None:
        super().__init__(glyph_set)
        self.segments: list[Segment] = []

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self.segments.append(Segment(SegmentType.MOVE, end=Point(*pt)))

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self.segments.append(Segment(SegmentType.LINE, end=Point(*pt)))

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        self.segments.append(Segment(SegmentType.QUAD, end=Point(*pt2), cp1=Point(*pt1)))

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        self.segments.append(
            Segment(SegmentType.CUBIC, end=Point(*pt3), cp1=Point(*pt1), cp2=Point(*pt2))
        )

    def _closePath(self) -> None:
        self.segments.append(Segment.close())

    def _endPath(self) -> None:
        # Open contour: nothing to record, the next MoveTo starts a new one
        pass

    @property
    def path(self) -> Path:
        return Path(self.segments)


def _all_contours(path: Path) -> range:
    return range(len(contour_ranges(path)))


def is_cff(font: TTFont) -> bool:
    """Check if a font stores cubic (CFF) outlines."""
    return "CFF " in font


def fonttools_glyph_to_domain(
    name: str,
    fonttools_glyph: Any,
    font: TTFont,
) -> Glyph:
    """Convert fonttools glyph to domain Glyph model.

    Handles both TrueType (quadratic curves) and OpenType/CFF (cubic curves).

    Note: CFF fonts use the opposite winding convention from TrueType, so
    CFF contours are reversed to give every Path the same fill/hole sense.

    Args:
        name: Name of the glyph
        fonttools_glyph: The fonttools glyph object from GlyphSet
        font: The TTFont object for accessing metadata

    Returns:
        Domain Glyph model
    """
    pen = PathPen(font.getGlyphSet())
    fonttools_glyph.draw(pen)
    path = pen.path

    if is_cff(font):
        path = reverse_contours(path, _all_contours(path))

    metadata = _extract_glyph_metadata(name, font)

    is_composite = False
    if hasattr(fonttools_glyph, "_glyph"):
        raw_glyph = fonttools_glyph._glyph
        is_composite = hasattr(raw_glyph, "isComposite") and raw_glyph.isComposite()

    return Glyph(metadata=metadata, path=path, _is_composite=is_composite)


def domain_glyph_to_fonttools(glyph: Glyph, font: TTFont) -> None:
    """Write a domain glyph's outline and metrics back into the font.

    Args:
        glyph: Domain glyph model with modifications
        font: The TTFont object to update

    Raises:
        NotImplementedError: If the font has neither glyf nor CFF outlines
    """
    if "glyf" in font:
        _update_truetype_glyph(glyph, font)
    elif is_cff(font):
        _update_cff_glyph(glyph, font)
    else:
        raise NotImplementedError("Unsupported font format")

    _update_metrics(glyph, font)


def _rounded(path: Path) -> Path:
    return Path(seg.map_points(lambda _f, p: p.rounded()) for seg in path)


def _extract_glyph_metadata(name: str, font: TTFont) -> GlyphMetadata:
    """Extract glyph metadata from font.

    Args:
        name: Glyph name
        font: The TTFont object

    Returns:
        GlyphMetadata object
    """
    hmtx = font.get("hmtx")
    advance_width = 0
    lsb = 0

    if hmtx and name in hmtx.metrics:
        advance_width, lsb = hmtx.metrics[name]

    cmap = font.getBestCmap()
    unicode_value = None

    if cmap:
        for code_point, glyph_name in cmap.items():
            if glyph_name == name:
                unicode_value = code_point
                break

    return GlyphMetadata(
        name=name,
        unicode=unicode_value,
        advance_width=advance_width,
        left_side_bearing=lsb,
    )


def _update_truetype_glyph(glyph: Glyph, font: TTFont) -> None:
    """Update TrueType glyph from domain model.

    glyf only stores quadratic curves, so cubics are approximated first.
    """
    pen = TTGlyphPen(None)
    _rounded(path_to_quadratics(glyph.path)).draw(pen)
    font["glyf"][glyph.name] = pen.glyph()


def _update_cff_glyph(glyph: Glyph, font: TTFont) -> None:
    """Update CFF/OpenType glyph from domain model.

    Contours are reversed back to CFF winding and quadratics are promoted,
    since CFF charstrings only store cubic curves.
    """
    cff_table = font["CFF "]
    top_dict = cff_table.cff.topDictIndex[0]  # type: ignore[union-attr]
    charstrings = top_dict.CharStrings
    private = top_dict.Private
    global_subrs = cff_table.cff.GlobalSubrs  # type: ignore[union-attr]

    path = reverse_contours(glyph.path, _all_contours(glyph.path))
    nominal_width = getattr(private, "nominalWidthX", 0)
    pen = T2CharStringPen(
        width=glyph.metadata.advance_width - nominal_width,
        glyphSet=font.getGlyphSet(),
    )
    _rounded(path_to_cubics(path)).draw(pen)

    charstrings[glyph.name] = pen.getCharString(private=private, globalSubrs=global_subrs)


def _update_metrics(glyph: Glyph, font: TTFont) -> None:
    """Store the glyph's advance width and recomputed left side bearing."""
    hmtx = font.get("hmtx")
    if hmtx is None:
        return

    bounds_pen = BoundsPen(None)
    _rounded(glyph.path).draw(bounds_pen)
    lsb = round(bounds_pen.bounds[0]) if bounds_pen.bounds else 0
    hmtx.metrics[glyph.name] = (glyph.metadata.advance_width, lsb)
