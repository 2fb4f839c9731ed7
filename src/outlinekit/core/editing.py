"""Point-level outline editing.

Helpers behind direct point manipulation: listing the points a user can
grab, deleting a selection of points and breaking a contour at a segment.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from outlinekit.core.contours import DUPLICATE_TOLERANCE, contour_ranges
from outlinekit.domain import Path, Point, PointField, Segment, SegmentType


@dataclass(frozen=True, slots=True)
class EditablePoint:
    """A point the user can select.

    Attributes:
        segment_index: Segment carrying the point
        field: Which point of the segment
        x: X coordinate
        y: Y coordinate
        on_curve: True for anchors, False for control points
    """

    segment_index: int
    field: PointField
    x: float
    y: float
    on_curve: bool

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


def _near(a: Point, b: Point) -> bool:
    return abs(a.x - b.x) < DUPLICATE_TOLERANCE and abs(a.y - b.y) < DUPLICATE_TOLERANCE


def _hidden_anchors(path: Path) -> set[int]:
    """Anchors drawn on top of another anchor."""
    hidden: set[int] = set()

    for contour_range in contour_ranges(path):
        if path[contour_range.end].type != SegmentType.CLOSE:
            continue
        last = contour_range.end - 1
        move_point = path[contour_range.start].end
        if last > contour_range.start and _near(path[last].end, move_point):  # type: ignore[arg-type]
            hidden.add(last)

    prev_anchor: Point | None = None
    for i, seg in enumerate(path):
        if seg.type in (SegmentType.MOVE, SegmentType.CLOSE):
            prev_anchor = seg.end
            continue
        if seg.type == SegmentType.LINE and prev_anchor is not None and _near(seg.end, prev_anchor):  # type: ignore[arg-type]
            hidden.add(i)
        prev_anchor = seg.end

    return hidden


def editable_points(path: Path) -> list[EditablePoint]:
    """List the anchors and control points of a path in drawing order.

    Control points come before the anchor of their segment. An anchor that
    repeats the contour's MoveTo point just before ClosePath, or a line
    anchor on top of the previous anchor, is left out.

    Args:
        path: Outline to list

    Returns:
        Editable points
    """
    hidden = _hidden_anchors(path)
    points: list[EditablePoint] = []
    for i, seg in enumerate(path):
        for point_field in (PointField.CP1, PointField.CP2):
            control = seg.get(point_field)
            if control is not None:
                points.append(EditablePoint(i, point_field, control.x, control.y, False))
        if seg.end is not None and i not in hidden:
            points.append(EditablePoint(i, PointField.END, seg.end.x, seg.end.y, True))
    return points


def _demote_controls(seg: Segment, removed: set[PointField]) -> Segment:
    if seg.type == SegmentType.CUBIC:
        if PointField.CP1 in removed and PointField.CP2 in removed:
            return Segment(SegmentType.LINE, end=seg.end)
        if PointField.CP1 in removed:
            return Segment(SegmentType.QUAD, end=seg.end, cp1=seg.cp2)
        return Segment(SegmentType.QUAD, end=seg.end, cp1=seg.cp1)
    if seg.type == SegmentType.QUAD:
        return Segment(SegmentType.LINE, end=seg.end)
    return seg


def delete_points(path: Path, selection: Iterable[EditablePoint]) -> Path:
    """Delete selected points.

    Deleting an anchor removes its whole segment. Deleting a MoveTo anchor
    moves the contour start to the next segment's anchor, consuming that
    segment. Deleting control points lowers the segment's degree: a cubic
    that loses one control becomes a quadratic on the other, and a cubic
    losing both or a quadratic losing its control becomes a line.

    Args:
        path: Outline to edit
        selection: Points to delete

    Returns:
        New path
    """
    delete_segments: set[int] = set()
    removed_controls: dict[int, set[PointField]] = {}
    for point in selection:
        if point.field == PointField.END:
            delete_segments.add(point.segment_index)
        else:
            removed_controls.setdefault(point.segment_index, set()).add(point.field)

    segments: list[Segment] = []
    for i, seg in enumerate(path):
        if i in delete_segments:
            if seg.type == SegmentType.MOVE and i + 1 < len(path):
                nxt = path[i + 1]
                if nxt.is_drawing:
                    segments.append(Segment(SegmentType.MOVE, end=nxt.end))
                    delete_segments.add(i + 1)
            continue

        if i in removed_controls:
            segments.append(_demote_controls(seg, removed_controls[i]))
            continue

        segments.append(seg)

    return Path(segments)


def break_segment(path: Path, index: int) -> Path:
    """Remove one drawing segment, splitting its contour at that edge.

    Everything before the segment stays as an open contour ending at the
    segment's start. A new contour begins at the segment's end with the
    remaining segments; if the original contour was closed, it is closed
    back to that new start.

    Args:
        path: Outline to edit
        index: Index of a line, quadratic or cubic segment

    Returns:
        New path, or the input for other segment types
    """
    if not 0 <= index < len(path) or not path[index].is_drawing:
        return path
    contour_range = next((r for r in contour_ranges(path) if r.covers(index)), None)
    if contour_range is None:
        return path

    new_start = path[index].end
    segments = list(path.segments[:index])
    segments.append(Segment(SegmentType.MOVE, end=new_start))
    for i in range(index + 1, contour_range.end + 1):
        seg = path[i]
        if seg.type == SegmentType.CLOSE:
            segments.append(Segment(SegmentType.LINE, end=new_start))
        segments.append(seg)
    segments.extend(path.segments[contour_range.end + 1 :])
    return Path(segments)
