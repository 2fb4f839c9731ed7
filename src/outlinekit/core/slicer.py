"""Slicing contours with a cutting line.

``find_line_path_intersections`` reports every place a straight cutting
line crosses a contour edge. Lines are solved exactly; curves are flattened
into polylines and only their first crossing is reported.

``slice_path_with_line`` uses those crossings to bisect closed contours:
a contour crossed at exactly two distinct points is split at both points
and replaced by the two closed halves on either side of the cut.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from outlinekit.config import SliceConfig
from outlinekit.core._bezier import lerp, segment_point
from outlinekit.core.contours import contour_ranges, is_closed
from outlinekit.core.curves import split_segment
from outlinekit.core.geometry import line_intersection
from outlinekit.domain import ContourRange, Path, Point, Segment, SegmentType

logger = logging.getLogger(__name__)

# Split parameters this close to an edge's ends reuse the existing anchor
ENDPOINT_EPSILON = 1e-6


@dataclass(frozen=True, slots=True)
class LineIntersection:
    """One crossing of the cutting line with a contour edge.

    Attributes:
        contour_index: Contour the edge belongs to
        segment_index: Segment drawing the edge (the ClosePath index for
            the implicit closing edge)
        t: Parameter along the edge
        point: Crossing point, rounded to font units
        order_along_line: Parameter along the cutting line, used for sorting
    """

    contour_index: int
    segment_index: int
    t: float
    point: Point
    order_along_line: float


def _edge_crossing(
    line_start: Point,
    line_end: Point,
    edge_start: Point,
    seg: Segment,
    samples_per_curve: int,
) -> tuple[float, Point, float] | None:
    """First crossing of the cutting line with one edge: (t, point, order)."""
    if not seg.is_curve:
        hit = line_intersection(line_start, line_end, edge_start, seg.end)  # type: ignore[arg-type]
        if hit is None:
            return None
        order, s = hit
        return s, lerp(edge_start, seg.end, s).rounded(), order  # type: ignore[arg-type]

    prev = edge_start
    for i in range(1, samples_per_curve + 1):
        point = segment_point(edge_start, seg, i / samples_per_curve)
        hit = line_intersection(line_start, line_end, prev, point)
        if hit is not None:
            order, s = hit
            t = (i - 1 + s) / samples_per_curve
            return t, lerp(prev, point, s).rounded(), order
        prev = point
    return None


def find_line_path_intersections(
    path: Path,
    line_start: Point,
    line_end: Point,
    config: SliceConfig | None = None,
) -> list[LineIntersection]:
    """Find where a cutting line crosses the edges of a path.

    The implicit closing edge of a closed contour (from its last anchor back
    to its MoveTo point) is tested as well.

    Args:
        path: Outline to test
        line_start: First point of the cutting line
        line_end: Second point of the cutting line
        config: Sampling settings (defaults if None)

    Returns:
        Intersections sorted by position along the cutting line
    """
    steps = (config or SliceConfig()).samples_per_curve
    hits: list[LineIntersection] = []

    for contour_index, contour_range in enumerate(contour_ranges(path)):
        move_point = path[contour_range.start].end
        current = move_point
        for index in range(contour_range.start + 1, contour_range.end + 1):
            seg = path[index]
            if seg.type == SegmentType.CLOSE:
                edge = Segment(SegmentType.LINE, end=move_point)
            elif seg.is_drawing:
                edge = seg
            else:
                continue
            crossing = _edge_crossing(line_start, line_end, current, edge, steps)  # type: ignore[arg-type]
            if crossing is not None:
                t, point, order = crossing
                hits.append(LineIntersection(contour_index, index, t, point, order))
            current = edge.end

    hits.sort(key=lambda hit: hit.order_along_line)
    return hits


def _distinct_hits(hits: Sequence[LineIntersection], min_separation: float) -> list[LineIntersection]:
    """Drop hits that repeat an earlier one (a cut through a shared anchor)."""
    kept: list[LineIntersection] = []
    for hit in hits:
        if all(hit.point.distance_to(k.point) > min_separation for k in kept):
            kept.append(hit)
    return kept


def _bisect_contour(
    path: Path,
    contour_range: ContourRange,
    hits: Sequence[LineIntersection],
) -> list[Segment] | None:
    """Split one closed contour at two crossings into two closed contours."""
    move_point = path[contour_range.start].end
    edges: list[Segment] = []
    edge_of: dict[int, int] = {}
    for index in range(contour_range.start + 1, contour_range.end):
        seg = path[index]
        if seg.is_drawing:
            edge_of[index] = len(edges)
            edges.append(seg)
    if not edges:
        return None
    if edges[-1].end != move_point:
        edge_of[contour_range.end] = len(edges)
        edges.append(Segment(SegmentType.LINE, end=move_point))

    cuts: list[tuple[int, float]] = []
    for hit in hits:
        if hit.segment_index not in edge_of:
            return None
        cuts.append((edge_of[hit.segment_index], hit.t))

    # Split later edges first so earlier edge indices stay valid
    cuts.sort(reverse=True)
    vertices: list[int] = []
    last_split: tuple[int, float] | None = None
    for edge_index, t in cuts:
        if last_split is not None and last_split[0] == edge_index:
            t = t / last_split[1]
        if t <= ENDPOINT_EPSILON:
            vertices.append(edge_index)
            last_split = None
            continue
        if t >= 1 - ENDPOINT_EPSILON:
            vertices.append(edge_index + 1)
            last_split = None
            continue

        start = move_point if edge_index == 0 else edges[edge_index - 1].end
        first, second = split_segment(start, edges[edge_index], t)  # type: ignore[arg-type]
        edges[edge_index : edge_index + 1] = [first, second]
        vertices = [v + 1 if v > edge_index else v for v in vertices]
        vertices.append(edge_index + 1)
        last_split = (edge_index, t)

    count = len(edges)
    low, high = sorted(v % count for v in vertices)
    if low == high:
        return None

    def vertex(v: int) -> Point:
        return move_point if v == 0 else edges[v - 1].end  # type: ignore[return-value]

    first_half = (
        [Segment(SegmentType.MOVE, end=vertex(low))]
        + edges[low:high]
        + [Segment.close()]
    )
    second_half = (
        [Segment(SegmentType.MOVE, end=vertex(high))]
        + edges[high:]
        + edges[:low]
        + [Segment.close()]
    )
    return first_half + second_half


def slice_path_with_line(
    path: Path,
    line_start: Point,
    line_end: Point,
    config: SliceConfig | None = None,
) -> Path:
    """Bisect every closed contour the cutting line crosses exactly twice.

    Each such contour is replaced in place by two closed contours, one on
    each side of the cut. Open contours and contours crossed zero, one or
    more than two times are left as they are.

    Args:
        path: Outline to slice
        line_start: First point of the cutting line
        line_end: Second point of the cutting line
        config: Sampling settings (defaults if None)

    Returns:
        New path, or the input when no contour was bisected
    """
    config = config or SliceConfig()
    hits = find_line_path_intersections(path, line_start, line_end, config)
    if len(hits) < 2:
        return path

    by_contour: dict[int, list[LineIntersection]] = {}
    for hit in hits:
        by_contour.setdefault(hit.contour_index, []).append(hit)

    segments: list[Segment] = []
    position = 0
    changed = False
    for contour_index, contour_range in enumerate(contour_ranges(path)):
        segments.extend(path.segments[position : contour_range.start])
        position = contour_range.end + 1
        original = path.segments[contour_range.start : position]

        contour_hits = _distinct_hits(by_contour.get(contour_index, []), config.min_separation)
        if len(contour_hits) != 2 or not is_closed(path, contour_range):
            if contour_hits:
                logger.debug(
                    "Contour %d not sliced (%d crossings)", contour_index, len(contour_hits)
                )
            segments.extend(original)
            continue

        halves = _bisect_contour(path, contour_range, contour_hits)
        if halves is None:
            segments.extend(original)
            continue
        segments.extend(halves)
        changed = True

    segments.extend(path.segments[position:])
    return Path(segments) if changed else path
