"""Outline normal field estimation.

Each anchor gets a unit normal from the average of its incoming and outgoing
unit tangents, rotated by +90 degrees. For fill contours (negative area in
y-up space) this normal points away from the filled interior. Control points
get normals from the chord they shape.

A NormalField is bound to the Path it was computed from. Any edit that moves
a point produces a new Path, which needs a new field.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

from outlinekit.core.contours import contour_anchors, contour_ranges, is_closed
from outlinekit.core.geometry import EPSILON_LENGTH, perpendicular, unit_vector
from outlinekit.domain import Path, Point, PointField, SegmentType


class Vector(NamedTuple):
    """A 2D direction."""

    x: float
    y: float

    def dot(self, other: "Vector") -> float:
        return self.x * other.x + self.y * other.y

    @property
    def tangent(self) -> "Vector":
        """The direction rotated by -90 degrees (tangent of a normal)."""
        return Vector(self.y, -self.x)


@dataclass(frozen=True)
class NormalField:
    """Unit normals of every anchor and control point of one Path.

    Attributes:
        path: The path the normals were computed from
        anchors: Segment index -> anchor normal
        controls: (segment index, field) -> control point normal
    """

    path: Path
    anchors: Mapping[int, Vector] = field(default_factory=dict)
    controls: Mapping[tuple[int, PointField], Vector] = field(default_factory=dict)

    def get(self, index: int, point_field: PointField = PointField.END) -> Vector | None:
        """Look up the normal of one point (None if it has none)."""
        if point_field == PointField.END:
            return self.anchors.get(index)
        return self.controls.get((index, point_field))

    def is_valid_for(self, path: Path) -> bool:
        """Check whether this field was computed from ``path``."""
        return self.path is path or self.path == path


def _from_points(dx: float, dy: float) -> Vector | None:
    unit = unit_vector(dx, dy)
    return Vector(*unit) if unit is not None else None


def _anchor_normals(path: Path) -> dict[int, Vector]:
    normals: dict[int, Vector] = {}

    for contour_range in contour_ranges(path):
        anchors = contour_anchors(path, contour_range)
        if len(anchors) < 2:
            continue
        closed = is_closed(path, contour_range)
        last = len(anchors) - 1

        for j, (index, curr) in enumerate(anchors):
            prev_j = j - 1 if j > 0 else (last if closed else j)
            next_j = j + 1 if j < last else (0 if closed else j)
            prev = anchors[prev_j][1]
            next_index, next_point = anchors[next_j]

            seg = path[index]
            if seg.type == SegmentType.CUBIC:
                incoming = (curr.x - seg.cp2.x, curr.y - seg.cp2.y)  # type: ignore[union-attr]
            elif seg.type == SegmentType.QUAD:
                incoming = (curr.x - seg.cp1.x, curr.y - seg.cp1.y)  # type: ignore[union-attr]
            else:
                incoming = (curr.x - prev.x, curr.y - prev.y)

            next_seg = path[next_index]
            if next_seg.is_curve:
                outgoing = (next_seg.cp1.x - curr.x, next_seg.cp1.y - curr.y)  # type: ignore[union-attr]
            else:
                outgoing = (next_point.x - curr.x, next_point.y - curr.y)

            in_unit = _from_points(*incoming)
            out_unit = _from_points(*outgoing)

            if in_unit is None and out_unit is None:
                chord = _from_points(next_point.x - prev.x, next_point.y - prev.y)
                if chord is not None:
                    normals[index] = Vector(*perpendicular(*chord))
                continue

            in_unit = in_unit or out_unit
            out_unit = out_unit or in_unit

            tx = (in_unit.x + out_unit.x) / 2  # type: ignore[union-attr]
            ty = (in_unit.y + out_unit.y) / 2  # type: ignore[union-attr]
            if math.hypot(tx, ty) < EPSILON_LENGTH:
                # Cusp: tangents cancel out
                tangent = in_unit
            else:
                tangent = _from_points(tx, ty)

            normals[index] = Vector(*perpendicular(*tangent))  # type: ignore[misc]

    return normals


def _chord_normal(start: Point, end: Point, fallback: Vector | None) -> Vector | None:
    unit = _from_points(end.x - start.x, end.y - start.y)
    if unit is None:
        return fallback
    return Vector(*perpendicular(*unit))


def _control_normals(
    path: Path, anchor_normals: Mapping[int, Vector]
) -> dict[tuple[int, PointField], Vector]:
    normals: dict[tuple[int, PointField], Vector] = {}

    for contour_range in contour_ranges(path):
        prev_anchor: Point | None = None
        for index in range(contour_range.start, contour_range.end + 1):
            seg = path[index]
            if seg.is_curve and prev_anchor is not None:
                fallback = anchor_normals.get(index)
                if seg.type == SegmentType.QUAD:
                    entries = {PointField.CP1: _chord_normal(prev_anchor, seg.end, fallback)}  # type: ignore[arg-type]
                else:
                    entries = {
                        PointField.CP1: _chord_normal(prev_anchor, seg.cp1, fallback),  # type: ignore[arg-type]
                        PointField.CP2: _chord_normal(seg.cp2, seg.end, fallback),  # type: ignore[arg-type]
                    }
                for point_field, normal in entries.items():
                    if normal is not None:
                        normals[(index, point_field)] = normal
            if seg.end is not None:
                prev_anchor = seg.end

    return normals


def compute_normal_field(path: Path) -> NormalField:
    """Estimate unit normals for every anchor and control point.

    Anchors: the incoming tangent comes from the segment's last control
    point when curved, else from the previous anchor; the outgoing tangent
    goes to the next segment's first control point when curved, else to the
    next anchor. A degenerate tangent is replaced by the other one; when both
    are degenerate the previous-to-next anchor chord is used. At a cusp the
    incoming tangent is used alone. Open contours treat their end anchors as
    their own neighbours. Contours with fewer than 2 anchors get no normals.

    Controls: a quadratic control is normal to the chord between its two
    anchors; a cubic cp1 to (previous anchor -> cp1) and cp2 to (cp2 -> end).
    Degenerate chords fall back to the segment's anchor normal.

    Args:
        path: Outline to analyse

    Returns:
        NormalField bound to ``path``
    """
    anchors = _anchor_normals(path)
    controls = _control_normals(path, anchors)
    return NormalField(path=path, anchors=anchors, controls=controls)
