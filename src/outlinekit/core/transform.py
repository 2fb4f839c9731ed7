"""Affine transforms over selected contours.

Every operation takes a path plus the indices of the contours to affect,
transforms the anchor and control points of segments inside those contour
ranges, rounds the results to integer font units and leaves all other
segments untouched. An empty or out-of-range selection returns the path
unchanged.
"""

import math
from collections.abc import Callable, Iterable
from enum import Enum

from outlinekit.config import TransformValues
from outlinekit.core.contours import contour_ranges, selection_bounds
from outlinekit.domain import Path, Point

PointMap = Callable[[Point], Point]


class FlipAxis(str, Enum):
    """Mirror direction for ``flip_contours``."""

    HORIZONTAL = "horizontal"  # mirror x
    VERTICAL = "vertical"  # mirror y


def map_contours(path: Path, contour_indices: Iterable[int], func: PointMap) -> Path:
    """Apply a point mapping to every point of the selected contours.

    Results are rounded to integer font units.

    Args:
        path: Source path
        contour_indices: Contours to transform
        func: Mapping applied to each anchor and control point

    Returns:
        New path, or the input when nothing is selected
    """
    ranges = contour_ranges(path)
    selected = [ranges[i] for i in set(contour_indices) if 0 <= i < len(ranges)]
    if not selected:
        return path

    segments = list(path.segments)
    for contour_range in selected:
        for i in range(contour_range.start, contour_range.end + 1):
            segments[i] = segments[i].map_points(lambda _f, p: func(p).rounded())
    return Path(segments)


def _selection_center(path: Path, contour_indices: Iterable[int]) -> Point | None:
    bounds = selection_bounds(path, contour_indices)
    return bounds.center if bounds is not None else None


def translate_contours(
    path: Path, contour_indices: Iterable[int], dx: float, dy: float
) -> Path:
    """Move the selected contours by (dx, dy)."""
    return map_contours(path, contour_indices, lambda p: Point(p.x + dx, p.y + dy))


def scale_contours(
    path: Path,
    contour_indices: Iterable[int],
    sx: float,
    sy: float,
    center: Point | None = None,
) -> Path:
    """Scale the selected contours about ``center``.

    Args:
        path: Source path
        contour_indices: Contours to scale
        sx: Horizontal scale factor
        sy: Vertical scale factor
        center: Fixed point (defaults to the selection's bounding-box center)

    Returns:
        New path
    """
    contour_indices = list(contour_indices)
    if center is None:
        center = _selection_center(path, contour_indices)
        if center is None:
            return path
    cx, cy = center.x, center.y
    return map_contours(
        path,
        contour_indices,
        lambda p: Point(cx + (p.x - cx) * sx, cy + (p.y - cy) * sy),
    )


def rotate_contours(
    path: Path,
    contour_indices: Iterable[int],
    degrees: float,
    center: Point | None = None,
) -> Path:
    """Rotate the selected contours counter-clockwise about ``center``."""
    contour_indices = list(contour_indices)
    if center is None:
        center = _selection_center(path, contour_indices)
        if center is None:
            return path
    cx, cy = center.x, center.y
    rad = math.radians(degrees)
    cos = math.cos(rad)
    sin = math.sin(rad)

    def rotate(p: Point) -> Point:
        dx = p.x - cx
        dy = p.y - cy
        return Point(cx + dx * cos - dy * sin, cy + dx * sin + dy * cos)

    return map_contours(path, contour_indices, rotate)


def skew_contours(
    path: Path,
    contour_indices: Iterable[int],
    degrees_x: float,
    degrees_y: float,
    center: Point | None = None,
) -> Path:
    """Shear the selected contours about ``center``.

    x moves by (y - cy) * tan(degrees_x) and y by (x - cx) * tan(degrees_y),
    both measured from the original point.
    """
    contour_indices = list(contour_indices)
    if center is None:
        center = _selection_center(path, contour_indices)
        if center is None:
            return path
    cx, cy = center.x, center.y
    tan_x = math.tan(math.radians(degrees_x))
    tan_y = math.tan(math.radians(degrees_y))
    return map_contours(
        path,
        contour_indices,
        lambda p: Point(p.x + (p.y - cy) * tan_x, p.y + (p.x - cx) * tan_y),
    )


def flip_contours(path: Path, contour_indices: Iterable[int], axis: FlipAxis) -> Path:
    """Mirror the selected contours about their combined bounding-box center.

    The box includes control points.
    """
    contour_indices = list(contour_indices)
    center = _selection_center(path, contour_indices)
    if center is None:
        return path
    if axis == FlipAxis.HORIZONTAL:
        return scale_contours(path, contour_indices, -1, 1, center)
    return scale_contours(path, contour_indices, 1, -1, center)


def transform_point(point: Point, center: Point, values: TransformValues) -> Point:
    """Apply scale, skew and rotation about ``center``, then shift.

    Args:
        point: Point to transform
        center: Fixed point of scale, skew and rotation
        values: Transform parameters

    Returns:
        Transformed point (unrounded)
    """
    px = (point.x - center.x) * values.scale_x
    py = (point.y - center.y) * values.scale_y

    if values.skew_x or values.skew_y:
        tan_x = math.tan(math.radians(values.skew_x))
        tan_y = math.tan(math.radians(values.skew_y))
        px, py = px + py * tan_x, py + px * tan_y

    if values.rotation:
        rad = math.radians(values.rotation)
        cos = math.cos(rad)
        sin = math.sin(rad)
        px, py = px * cos - py * sin, px * sin + py * cos

    return Point(px + center.x + values.shift_x, py + center.y + values.shift_y)


def apply_transform(path: Path, values: TransformValues) -> Path:
    """Transform a whole glyph outline about its bounding-box center.

    Applies to every segment, including ones outside any contour.
    """
    if path.is_empty():
        return path
    center = path.bounds().center
    return Path(
        seg.map_points(lambda _f, p: transform_point(p, center, values).rounded())
        for seg in path
    )
