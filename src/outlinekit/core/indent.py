"""Boolean indent: cut shapes into a glyph's fill.

Indenting contours are clipped against the union of every other contour.
Each ring of the clipped result becomes a line-only contour with hole
winding, and the indenting contours themselves are removed. Curves are
flattened into polygon rings before clipping and are not reconstructed.

The polygon boolean operations are pluggable through ``PolygonClipper``;
``ShapelyClipper`` is the default implementation.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.validation import make_valid

from outlinekit.config import IndentConfig
from outlinekit.core._bezier import sample_segment
from outlinekit.core.contours import contour_ranges
from outlinekit.core.geometry import signed_area
from outlinekit.domain import ContourRange, Path, Point, Segment, SegmentType

logger = logging.getLogger(__name__)

# A closed polygon boundary, without repeating the first vertex
Ring = list[tuple[float, float]]

# GeoJSON-style polygon: outer ring followed by any inner rings
PolygonRings = list[Ring]


class PolygonClipper(Protocol):
    """2D polygon boolean operations over ring lists."""

    def union(self, polygons: Sequence[PolygonRings]) -> list[PolygonRings]:
        """Merge polygons into non-overlapping polygons."""
        ...

    def intersection(
        self, a: Sequence[PolygonRings], b: Sequence[PolygonRings]
    ) -> list[PolygonRings]:
        """Area covered by both polygon sets."""
        ...


def _as_polygons(geom: BaseGeometry) -> list[Polygon]:
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, MultiPolygon):
        return list(geom.geoms)
    if hasattr(geom, "geoms"):
        polygons: list[Polygon] = []
        for part in geom.geoms:
            polygons.extend(_as_polygons(part))
        return polygons
    return []


def _ring_coords(coords: Iterable[tuple[float, ...]]) -> Ring:
    ring = [(float(c[0]), float(c[1])) for c in coords]
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


class ShapelyClipper:
    """PolygonClipper backed by shapely.

    Input rings are repaired with ``make_valid`` so self-intersecting
    contours still clip instead of raising.
    """

    @staticmethod
    def _to_geometry(polygons: Sequence[PolygonRings]) -> BaseGeometry:
        shapes = []
        for rings in polygons:
            if not rings or len(rings[0]) < 3:
                continue
            polygon = Polygon(rings[0], [r for r in rings[1:] if len(r) >= 3])
            shapes.append(polygon if polygon.is_valid else make_valid(polygon))
        return unary_union(shapes)

    @staticmethod
    def _to_rings(geom: BaseGeometry) -> list[PolygonRings]:
        return [
            [_ring_coords(p.exterior.coords)] + [_ring_coords(r.coords) for r in p.interiors]
            for p in _as_polygons(geom)
        ]

    def union(self, polygons: Sequence[PolygonRings]) -> list[PolygonRings]:
        return self._to_rings(self._to_geometry(polygons))

    def intersection(
        self, a: Sequence[PolygonRings], b: Sequence[PolygonRings]
    ) -> list[PolygonRings]:
        return self._to_rings(self._to_geometry(a).intersection(self._to_geometry(b)))


def contour_ring(path: Path, contour_range: ContourRange, samples_per_curve: int) -> Ring:
    """Flatten one contour into a polygon ring.

    Lines contribute their end point; curves are sampled at
    t = i/samples_per_curve for i in 1..samples_per_curve.
    """
    ring: Ring = []
    current = Point(0, 0)
    for i in range(contour_range.start, contour_range.end + 1):
        seg = path[i]
        if seg.type == SegmentType.MOVE:
            ring.append(seg.end.to_tuple())  # type: ignore[union-attr]
        elif seg.is_drawing:
            ring.extend(p.to_tuple() for p in sample_segment(current, seg, samples_per_curve))
        if seg.end is not None:
            current = seg.end
    return ring


def _hole_contour(ring: Ring) -> list[Segment]:
    """Line-only contour with hole winding (non-negative signed area)."""
    points = [Point(x, y) for x, y in ring]
    if signed_area(points) < 0:
        points.reverse()
    points = [p.rounded() for p in points]
    return (
        [Segment(SegmentType.MOVE, end=points[0])]
        + [Segment(SegmentType.LINE, end=p) for p in points[1:]]
        + [Segment.close()]
    )


def make_indent(
    path: Path,
    contour_indices: Iterable[int],
    config: IndentConfig | None = None,
    clipper: PolygonClipper | None = None,
) -> Path:
    """Cut the selected contours into the rest of the glyph as holes.

    Every other contour with at least 3 ring points joins the fill union.
    Each selected contour is intersected with that union and every ring of
    the result, inner rings included, is appended as a hole contour. The
    selected contours are removed; one whose intersection is empty leaves
    nothing behind.

    Args:
        path: Glyph outline
        contour_indices: Indenting contours
        config: Sampling settings (defaults if None)
        clipper: Polygon boolean implementation (shapely if None)

    Returns:
        New path, or the input when nothing is selected or there is no fill
    """
    config = config or IndentConfig()
    clipper = clipper or ShapelyClipper()

    ranges = contour_ranges(path)
    selected = sorted({i for i in contour_indices if 0 <= i < len(ranges)})
    if not selected:
        return path

    fills: list[PolygonRings] = []
    for index, contour_range in enumerate(ranges):
        if index in selected:
            continue
        ring = contour_ring(path, contour_range, config.samples_per_curve)
        if len(ring) >= 3:
            fills.append([ring])
    if not fills:
        logger.debug("No fill contours to indent into")
        return path

    fill_union = clipper.union(fills)

    holes: list[Segment] = []
    for index in selected:
        ring = contour_ring(path, ranges[index], config.samples_per_curve)
        if len(ring) < 3:
            continue
        result = clipper.intersection([[ring]], fill_union)
        if not result:
            logger.debug("Indent contour %d does not overlap the fill", index)
        for rings in result:
            for hole_ring in rings:
                if len(hole_ring) >= 3:
                    holes.extend(_hole_contour(hole_ring))

    segments: list[Segment] = []
    for index, contour_range in enumerate(ranges):
        if index not in selected:
            segments.extend(path.segments[contour_range.start : contour_range.end + 1])
    segments.extend(holes)
    return Path(segments)
