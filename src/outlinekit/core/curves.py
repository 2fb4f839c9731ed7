"""Curve degree algebra.

Exact subdivision of segments plus one-step degree promotion and demotion:

- Line -> Quad: control point at the line midpoint (shape preserving)
- Quad -> Cubic: cp1 = P0 + 2/3(CP - P0), cp2 = P3 + 2/3(CP - P3) (lossless)
- Cubic -> Quad: CP = (3*cp1 + 3*cp2 - P0 - P3) / 4 (lossy)
- Quad -> Line: drop the control point (lossy)

Editing operations round every coordinate to integer font units after each
step. ``elevate_quadratic`` is the unrounded identity used by the simplifier.
"""

from outlinekit.core._bezier import cubic_point, lerp, quad_point, split_cubic, split_quad
from outlinekit.domain import Path, Point, Segment, SegmentType

_DEGREE_ORDER = (SegmentType.LINE, SegmentType.QUAD, SegmentType.CUBIC)

# Maximum subdivision depth when approximating a cubic with quadratics
MAX_QUADRATIC_DEPTH = 8

# Parameters where a quadratic approximation is compared with its cubic
ERROR_SAMPLE_PARAMS = (0.25, 0.75)


def previous_anchor(path: Path, index: int) -> Point:
    """Find the anchor a segment starts from.

    Walks backwards to the nearest segment carrying an end point; the
    origin is returned when there is none.
    """
    for i in range(index - 1, -1, -1):
        end = path[i].end
        if end is not None:
            return end
    return Point(0, 0)


def split_segment(
    start: Point,
    segment: Segment,
    t: float,
    rounded: bool = True,
) -> tuple[Segment, Segment]:
    """Split a drawing segment at parameter t (De Casteljau).

    The second half always keeps the original end point, so the contour
    stays connected even when the split point is rounded.

    Args:
        start: Anchor preceding the segment
        segment: Line, quadratic or cubic segment
        t: Split parameter in [0, 1]
        rounded: Round new coordinates to integer font units

    Returns:
        (first, second) segments covering [0, t] and [t, 1]

    Raises:
        ValueError: If the segment is a MoveTo or ClosePath
    """
    def fix(point: Point) -> Point:
        return point.rounded() if rounded else point

    end = segment.end
    if segment.type == SegmentType.LINE:
        mid = fix(lerp(start, end, t))  # type: ignore[arg-type]
        return Segment(SegmentType.LINE, end=mid), segment

    if segment.type == SegmentType.QUAD:
        left, right = split_quad(start, segment.cp1, end, t)  # type: ignore[arg-type]
        return (
            Segment(SegmentType.QUAD, end=fix(left[2]), cp1=fix(left[1])),
            Segment(SegmentType.QUAD, end=end, cp1=fix(right[1])),
        )

    if segment.type == SegmentType.CUBIC:
        left, right = split_cubic(start, segment.cp1, segment.cp2, end, t)  # type: ignore[arg-type]
        return (
            Segment(SegmentType.CUBIC, end=fix(left[3]), cp1=fix(left[1]), cp2=fix(left[2])),
            Segment(SegmentType.CUBIC, end=end, cp1=fix(right[1]), cp2=fix(right[2])),
        )

    raise ValueError(f"Cannot split a '{segment.type.value}' segment")


def split_path_segment(path: Path, index: int, t: float) -> Path:
    """Replace segment ``index`` by its two halves split at t.

    Out-of-range indices and non-drawing segments leave the path unchanged.
    """
    if not 0 <= index < len(path) or not path[index].is_drawing:
        return path
    first, second = split_segment(previous_anchor(path, index), path[index], t)
    segments = list(path.segments)
    segments[index : index + 1] = [first, second]
    return Path(segments)


def elevate_quadratic(p0: Point, cp: Point, p2: Point) -> tuple[Point, Point]:
    """Exact cubic control points of a quadratic curve (unrounded)."""
    return (
        Point(p0.x + (2 / 3) * (cp.x - p0.x), p0.y + (2 / 3) * (cp.y - p0.y)),
        Point(p2.x + (2 / 3) * (cp.x - p2.x), p2.y + (2 / 3) * (cp.y - p2.y)),
    )


def reduce_cubic(p0: Point, cp1: Point, cp2: Point, p3: Point) -> Point:
    """Single quadratic control point approximating a cubic (unrounded)."""
    return Point(
        (3 * cp1.x + 3 * cp2.x - p0.x - p3.x) / 4,
        (3 * cp1.y + 3 * cp2.y - p0.y - p3.y) / 4,
    )


def promote(start: Point, segment: Segment) -> Segment:
    """Raise a segment's degree by one.

    Cubics, MoveTo and ClosePath are returned unchanged.
    """
    end = segment.end
    if segment.type == SegmentType.LINE:
        control = lerp(start, end, 0.5).rounded()  # type: ignore[arg-type]
        return Segment(SegmentType.QUAD, end=end, cp1=control)

    if segment.type == SegmentType.QUAD:
        cp1, cp2 = elevate_quadratic(start, segment.cp1, end)  # type: ignore[arg-type]
        return Segment(SegmentType.CUBIC, end=end, cp1=cp1.rounded(), cp2=cp2.rounded())

    return segment


def demote(start: Point, segment: Segment) -> Segment:
    """Lower a segment's degree by one.

    Lines, MoveTo and ClosePath are returned unchanged.
    """
    if segment.type == SegmentType.CUBIC:
        control = reduce_cubic(start, segment.cp1, segment.cp2, segment.end)  # type: ignore[arg-type]
        return Segment(SegmentType.QUAD, end=segment.end, cp1=control.rounded())

    if segment.type == SegmentType.QUAD:
        return Segment(SegmentType.LINE, end=segment.end)

    return segment


def convert_to_degree(start: Point, segment: Segment, target: SegmentType) -> Segment:
    """Promote or demote a segment one step at a time until it has type ``target``.

    Args:
        start: Anchor preceding the segment
        segment: Segment to convert
        target: LINE, QUAD or CUBIC

    Returns:
        Converted segment (unchanged for MoveTo/ClosePath or same type)

    Raises:
        ValueError: If target is not a drawing type
    """
    if target not in _DEGREE_ORDER:
        raise ValueError(f"Cannot convert a segment to '{target.value}'")
    if segment.type == target or not segment.is_drawing:
        return segment

    current = _DEGREE_ORDER.index(segment.type)
    wanted = _DEGREE_ORDER.index(target)
    step = promote if wanted > current else demote
    for _ in range(abs(wanted - current)):
        segment = step(start, segment)
    return segment


def convert_segment(path: Path, index: int, target: SegmentType) -> Path:
    """Convert segment ``index`` of a path to the ``target`` degree.

    Out-of-range indices leave the path unchanged.
    """
    if not 0 <= index < len(path):
        return path
    converted = convert_to_degree(previous_anchor(path, index), path[index], target)
    if converted == path[index]:
        return path
    segments = list(path.segments)
    segments[index] = converted
    return Path(segments)


def promote_segment(path: Path, index: int) -> Path:
    """Promote one segment of a path by one degree."""
    if not 0 <= index < len(path):
        return path
    segments = list(path.segments)
    segments[index] = promote(previous_anchor(path, index), path[index])
    return Path(segments)


def demote_segment(path: Path, index: int) -> Path:
    """Demote one segment of a path by one degree."""
    if not 0 <= index < len(path):
        return path
    segments = list(path.segments)
    segments[index] = demote(previous_anchor(path, index), path[index])
    return Path(segments)


def cubic_to_quadratics(
    p0: Point,
    cp1: Point,
    cp2: Point,
    p3: Point,
    tolerance: float = 1.0,
    _depth: int = 0,
) -> list[Segment]:
    """Approximate a cubic with a chain of quadratic segments.

    The single-control approximation is accepted when it lies within
    ``tolerance`` of the cubic at t = 1/4 and 3/4; otherwise the cubic
    is split at t=0.5 and each half approximated recursively, to a maximum
    depth of 8. Output coordinates are rounded.

    Args:
        p0: Start anchor
        cp1: First control point
        cp2: Second control point
        p3: End anchor
        tolerance: Maximum deviation in font units

    Returns:
        Quadratic segments drawing from p0 to p3
    """
    control = reduce_cubic(p0, cp1, cp2, p3)
    error_sq = 0.0
    # The reduced control always matches the cubic at t=0.5, so test either side
    for t in ERROR_SAMPLE_PARAMS:
        on_cubic = cubic_point(p0, cp1, cp2, p3, t)
        on_quad = quad_point(p0, control, p3, t)
        error_sq = max(error_sq, (on_cubic.x - on_quad.x) ** 2 + (on_cubic.y - on_quad.y) ** 2)

    if error_sq <= tolerance * tolerance or _depth >= MAX_QUADRATIC_DEPTH:
        return [Segment(SegmentType.QUAD, end=p3.rounded(), cp1=control.rounded())]

    left, right = split_cubic(p0, cp1, cp2, p3, 0.5)
    return cubic_to_quadratics(*left, tolerance, _depth + 1) + cubic_to_quadratics(
        *right, tolerance, _depth + 1
    )


def path_to_quadratics(path: Path, tolerance: float = 1.0) -> Path:
    """Replace every cubic in a path by its quadratic approximation.

    This is what quadratic-only outline formats (TrueType glyf) need.
    """
    if not any(seg.type == SegmentType.CUBIC for seg in path):
        return path

    segments: list[Segment] = []
    current = Point(0, 0)
    for seg in path:
        if seg.type == SegmentType.CUBIC:
            segments.extend(
                cubic_to_quadratics(current, seg.cp1, seg.cp2, seg.end, tolerance)  # type: ignore[arg-type]
            )
        else:
            segments.append(seg)
        if seg.end is not None:
            current = seg.end
    return Path(segments)


def path_to_cubics(path: Path) -> Path:
    """Replace every quadratic in a path by its exact cubic (unrounded)."""
    if not any(seg.type == SegmentType.QUAD for seg in path):
        return path

    segments: list[Segment] = []
    current = Point(0, 0)
    for seg in path:
        if seg.type == SegmentType.QUAD:
            cp1, cp2 = elevate_quadratic(current, seg.cp1, seg.end)  # type: ignore[arg-type]
            segments.append(Segment(SegmentType.CUBIC, end=seg.end, cp1=cp1, cp2=cp2))
        else:
            segments.append(seg)
        if seg.end is not None:
            current = seg.end
    return Path(segments)
