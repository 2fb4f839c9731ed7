"""Contour model: ranges, winding and structural contour edits.

A contour is a maximal run of segments from one MoveTo up to the next
ClosePath (inclusive) or the segment before the next MoveTo. Ranges are
derived from the segment stream on every call and never cached, so they
always match the Path they were computed from.

Winding follows a y-up convention: negative shoelace area over the anchor
polygon means fill, anything else means hole.
"""

import logging
from collections.abc import Callable, Iterable, Sequence

from outlinekit.core.geometry import signed_area
from outlinekit.domain import (
    BoundingBox,
    ContourRange,
    Path,
    Point,
    Segment,
    SegmentType,
    Winding,
)

logger = logging.getLogger(__name__)

# Coordinates closer than this (per axis) are treated as the same point
DUPLICATE_TOLERANCE = 1.0


def contour_ranges(path: Path) -> list[ContourRange]:
    """Split a path into contour index ranges.

    A MoveTo opens a range; a ClosePath, or the segment before the next
    MoveTo, closes it. A trailing contour without ClosePath is still returned.
    Segments before the first MoveTo belong to no contour.

    Args:
        path: Path to scan

    Returns:
        Inclusive (start, end) ranges in path order
    """
    ranges: list[ContourRange] = []
    start: int | None = None

    for i, seg in enumerate(path):
        if seg.type == SegmentType.MOVE:
            if start is not None:
                ranges.append(ContourRange(start, i - 1))
            start = i
        elif seg.type == SegmentType.CLOSE and start is not None:
            ranges.append(ContourRange(start, i))
            start = None

    if start is not None:
        ranges.append(ContourRange(start, len(path) - 1))

    return ranges


def is_closed(path: Path, contour_range: ContourRange) -> bool:
    """Check if a contour ends with ClosePath."""
    return path[contour_range.end].type == SegmentType.CLOSE


def contour_anchors(path: Path, contour_range: ContourRange) -> list[tuple[int, Point]]:
    """List the on-curve anchors of a contour with their segment indices."""
    return [
        (i, path[i].end)  # type: ignore[misc]
        for i in range(contour_range.start, contour_range.end + 1)
        if path[i].end is not None
    ]


def _anchor_area(path: Path, contour_range: ContourRange) -> float | None:
    points = [p for _, p in contour_anchors(path, contour_range)]
    if len(points) < 3:
        return None
    return signed_area(points)


def is_clockwise(path: Path, contour_index: int) -> bool:
    """Check if a contour has fill winding.

    Only on-curve anchors take part in the shoelace sum; control points are
    ignored. Out-of-range indices and contours with fewer than 3 anchors
    report fill.

    Args:
        path: Path containing the contour
        contour_index: Index into ``contour_ranges(path)``

    Returns:
        True if the signed area is negative (fill)
    """
    ranges = contour_ranges(path)
    if not 0 <= contour_index < len(ranges):
        return True

    area = _anchor_area(path, ranges[contour_index])
    if area is None:
        return True
    return area < 0


def contour_winding(path: Path, contour_index: int) -> Winding:
    """Classify a contour as fill or hole."""
    return Winding.FILL if is_clockwise(path, contour_index) else Winding.HOLE


def _reverse_segments(segments: Sequence[Segment]) -> list[Segment]:
    """Reverse the drawing direction of one contour's segments.

    The new MoveTo lands on the old last anchor; every segment is walked
    backwards towards the previous anchor, with cubic handles swapped.
    """
    has_close = segments[-1].type == SegmentType.CLOSE
    drawing = list(segments[1:-1] if has_close else segments[1:])
    if not drawing:
        return list(segments)

    endpoints = [segments[0].end] + [seg.end for seg in drawing]
    reversed_segments = [Segment(SegmentType.MOVE, end=endpoints[-1])]

    for i in range(len(drawing) - 1, -1, -1):
        seg = drawing[i]
        target = endpoints[i]
        if seg.type == SegmentType.CUBIC:
            reversed_segments.append(
                Segment(SegmentType.CUBIC, end=target, cp1=seg.cp2, cp2=seg.cp1)
            )
        else:
            reversed_segments.append(Segment(seg.type, end=target, cp1=seg.cp1))

    if has_close:
        reversed_segments.append(Segment.close())
    return reversed_segments


def rebuild_contours(
    path: Path,
    contour_indices: Iterable[int],
    rewrite: Callable[[Path, ContourRange], Sequence[Segment]],
) -> Path:
    """Replace selected contours with rewritten segment lists.

    Contours are rewritten from the last to the first so earlier ranges stay
    valid while the segment list changes length. Out-of-range indices are
    ignored.

    Args:
        path: Source path
        contour_indices: Contours to rewrite
        rewrite: Called with the original path and range; returns new segments

    Returns:
        New path
    """
    ranges = contour_ranges(path)
    selected = sorted({i for i in contour_indices if 0 <= i < len(ranges)}, reverse=True)
    if not selected:
        return path

    segments = list(path.segments)
    for index in selected:
        contour_range = ranges[index]
        segments[contour_range.start : contour_range.end + 1] = rewrite(path, contour_range)
    return Path(segments)


def reverse_contours(path: Path, contour_indices: Iterable[int]) -> Path:
    """Reverse the drawing direction of the selected contours."""
    return rebuild_contours(
        path,
        contour_indices,
        lambda p, r: _reverse_segments(p.segments[r.start : r.end + 1]),
    )


def reverse_contour(path: Path, contour_index: int) -> Path:
    """Reverse the drawing direction of one contour."""
    return reverse_contours(path, [contour_index])


def _set_winding(path: Path, contour_indices: Iterable[int], winding: Winding) -> Path:
    ranges = contour_ranges(path)
    to_reverse: list[int] = []
    for index in contour_indices:
        if not 0 <= index < len(ranges):
            continue
        area = _anchor_area(path, ranges[index])
        if area is None or area == 0:
            # Orientation undefined
            continue
        current = Winding.FILL if area < 0 else Winding.HOLE
        if current != winding:
            to_reverse.append(index)
    return reverse_contours(path, to_reverse)


def make_fill(path: Path, contour_indices: Iterable[int]) -> Path:
    """Give the selected contours fill winding.

    Contours already winding as fill are left untouched, so applying this
    twice is the same as applying it once.
    """
    return _set_winding(path, contour_indices, Winding.FILL)


def make_cutout(path: Path, contour_indices: Iterable[int]) -> Path:
    """Give the selected contours hole winding.

    Contours already winding as holes are left untouched, so applying this
    twice is the same as applying it once.
    """
    return _set_winding(path, contour_indices, Winding.HOLE)


def _same_point(a: Point, b: Point, tolerance: float) -> bool:
    return abs(a.x - b.x) < tolerance and abs(a.y - b.y) < tolerance


def remove_duplicate_points(path: Path, tolerance: float = DUPLICATE_TOLERANCE) -> Path:
    """Remove redundant points from a path.

    Dropped segments:
    1. A closing LineTo that returns to the contour's MoveTo point, since
       ClosePath already draws that edge
    2. A LineTo that repeats the preceding anchor of its contour
    3. A quadratic or cubic whose controls and end all sit on the preceding anchor

    MoveTo segments are always kept.

    Args:
        path: Path to clean
        tolerance: Per-axis distance under which points coincide

    Returns:
        New path (equal to the input when nothing was redundant)
    """
    if path.is_empty():
        return path

    closing_lines: set[int] = set()
    for contour_range in contour_ranges(path):
        if not is_closed(path, contour_range):
            continue
        last = contour_range.end - 1
        if last <= contour_range.start:
            continue
        seg = path[last]
        move_point = path[contour_range.start].end
        if seg.type == SegmentType.LINE and _same_point(seg.end, move_point, tolerance):  # type: ignore[arg-type]
            closing_lines.add(last)

    result: list[Segment] = []
    last_anchor: Point | None = None

    for i, seg in enumerate(path):
        if i in closing_lines:
            continue

        if seg.type == SegmentType.MOVE:
            result.append(seg)
            last_anchor = seg.end
            continue

        if seg.type == SegmentType.CLOSE:
            result.append(seg)
            last_anchor = None
            continue

        if last_anchor is not None and all(
            _same_point(point, last_anchor, tolerance) for _, point in seg.items()
        ):
            continue

        result.append(seg)
        last_anchor = seg.end

    removed = len(path) - len(result)
    if removed:
        logger.debug("Removed %d redundant segments", removed)
        return Path(result)
    return path


def extract_contours(path: Path, contour_indices: Iterable[int]) -> Path:
    """Copy the selected contours into a new path, in the order given."""
    ranges = contour_ranges(path)
    segments: list[Segment] = []
    for index in contour_indices:
        if 0 <= index < len(ranges):
            contour_range = ranges[index]
            segments.extend(path.segments[contour_range.start : contour_range.end + 1])
    return Path(segments)


def remove_contours(path: Path, contour_indices: Iterable[int]) -> Path:
    """Drop the selected contours, keeping the rest in order."""
    remove = set(contour_indices)
    segments: list[Segment] = []
    for index, contour_range in enumerate(contour_ranges(path)):
        if index not in remove:
            segments.extend(path.segments[contour_range.start : contour_range.end + 1])
    return Path(segments)


def contour_bounds(path: Path, contour_index: int) -> BoundingBox | None:
    """Bounding box of one contour, control points included.

    Returns:
        The box, or None for an out-of-range index
    """
    ranges = contour_ranges(path)
    if not 0 <= contour_index < len(ranges):
        return None
    contour_range = ranges[contour_index]
    return path[contour_range.start : contour_range.end + 1].bounds()


def selection_bounds(path: Path, contour_indices: Iterable[int]) -> BoundingBox | None:
    """Bounding box of several contours, or None if none is in range."""
    sub_path = extract_contours(path, contour_indices)
    if sub_path.is_empty():
        return None
    return sub_path.bounds()
