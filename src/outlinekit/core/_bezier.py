"""Internal Bezier curve evaluation and subdivision helpers.

This is an internal module containing helper functions shared by the curve
algebra, simplifier, indent and slicer modules.
Not intended for public use.
"""

import math

from outlinekit.domain import Point, Segment, SegmentType

# Derivative roots closer than this to either end are anchors, not extrema
ROOT_MARGIN = 0.01


def lerp(a: Point, b: Point, t: float) -> Point:
    """Linear interpolation between two points."""
    return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def quad_point(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    """Evaluate a quadratic Bezier at parameter t."""
    mt = 1 - t
    return Point(
        mt * mt * p0.x + 2 * mt * t * p1.x + t * t * p2.x,
        mt * mt * p0.y + 2 * mt * t * p1.y + t * t * p2.y,
    )


def cubic_value(v0: float, v1: float, v2: float, v3: float, t: float) -> float:
    """Evaluate one coordinate of a cubic Bezier at parameter t."""
    mt = 1 - t
    return mt * mt * mt * v0 + 3 * mt * mt * t * v1 + 3 * mt * t * t * v2 + t * t * t * v3


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic Bezier at parameter t."""
    return Point(
        cubic_value(p0.x, p1.x, p2.x, p3.x, t),
        cubic_value(p0.y, p1.y, p2.y, p3.y, t),
    )


def segment_point(start: Point, segment: Segment, t: float) -> Point:
    """Evaluate a drawing segment at parameter t.

    Args:
        start: Anchor preceding the segment
        segment: Line, quadratic or cubic segment
        t: Curve parameter in [0, 1]

    Returns:
        Point on the segment
    """
    if segment.type == SegmentType.QUAD:
        return quad_point(start, segment.cp1, segment.end, t)  # type: ignore[arg-type]
    if segment.type == SegmentType.CUBIC:
        return cubic_point(start, segment.cp1, segment.cp2, segment.end, t)  # type: ignore[arg-type]
    return lerp(start, segment.end, t)  # type: ignore[arg-type]


def split_quad(
    p0: Point, p1: Point, p2: Point, t: float
) -> tuple[tuple[Point, Point, Point], tuple[Point, Point, Point]]:
    """Split a quadratic Bezier at t using De Casteljau's algorithm.

    Returns:
        (left, right) control polygons; left[2] == right[0] is the split point
    """
    q0 = lerp(p0, p1, t)
    q1 = lerp(p1, p2, t)
    mid = lerp(q0, q1, t)
    return (p0, q0, mid), (mid, q1, p2)


def split_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, t: float
) -> tuple[tuple[Point, Point, Point, Point], tuple[Point, Point, Point, Point]]:
    """Split a cubic Bezier at t using De Casteljau's algorithm.

    Returns:
        (left, right) control polygons; left[3] == right[0] is the split point
    """
    q0 = lerp(p0, p1, t)
    q1 = lerp(p1, p2, t)
    q2 = lerp(p2, p3, t)
    r0 = lerp(q0, q1, t)
    r1 = lerp(q1, q2, t)
    mid = lerp(r0, r1, t)
    return (p0, q0, r0, mid), (mid, r1, q2, p3)


def sample_segment(start: Point, segment: Segment, steps: int) -> list[Point]:
    """Sample a drawing segment at t = i/steps for i in 1..steps.

    Lines contribute only their end point. The start point is never included,
    so consecutive segments can be concatenated without duplicates.
    """
    if not segment.is_curve:
        return [segment.end] if segment.end is not None else []
    return [segment_point(start, segment, i / steps) for i in range(1, steps + 1)]


def cubic_arc_length(p0: Point, p1: Point, p2: Point, p3: Point, steps: int = 12) -> float:
    """Approximate the arc length of a cubic by summing polyline chords."""
    length = 0.0
    prev = p0
    for i in range(1, steps + 1):
        point = cubic_point(p0, p1, p2, p3, i / steps)
        length += math.hypot(point.x - prev.x, point.y - prev.y)
        prev = point
    return length


def cubic_extrema_params(v0: float, v1: float, v2: float, v3: float) -> list[float]:
    """Parameters where one coordinate of a cubic has a local extremum.

    Solves 3(-P0+3P1-3P2+P3)t^2 + 6(P0-2P1+P2)t + 3(P1-P0) = 0 and keeps
    roots strictly inside (0.01, 0.99).
    """
    a = 3 * (-v0 + 3 * v1 - 3 * v2 + v3)
    b = 6 * (v0 - 2 * v1 + v2)
    c = 3 * (v1 - v0)

    roots: list[float] = []
    if abs(a) < 1e-10:
        if abs(b) > 1e-10:
            roots.append(-c / b)
    else:
        disc = b * b - 4 * a * c
        if disc >= 0:
            sqrt_disc = math.sqrt(disc)
            roots.append((-b + sqrt_disc) / (2 * a))
            roots.append((-b - sqrt_disc) / (2 * a))

    return [t for t in roots if ROOT_MARGIN < t < 1 - ROOT_MARGIN]
