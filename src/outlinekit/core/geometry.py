"""Geometric operations shared by the outline algorithms.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Line segment intersection
- Perpendicular distance to a chord
- Unit vectors and perpendiculars

All functions are pure, stateless, and designed for use in parallel processing.
"""

import math
from collections.abc import Sequence

from outlinekit.domain import Point

# Vectors shorter than this are treated as zero length
EPSILON_LENGTH = 0.001


def signed_area(points: Sequence[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    In the y-up font coordinate space, negative area is clockwise.

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]
        >>> signed_area(square)  # CCW square
        1.0
        >>> signed_area(square[::-1])  # CW square
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def line_intersection(
    p1: Point,
    p2: Point,
    p3: Point,
    p4: Point,
    epsilon: float = 1e-10,
) -> tuple[float, float] | None:
    """Find where two line segments cross.

    Uses parametric line equations. Returns None if the lines are parallel
    or if the crossing lies outside either segment.

    Args:
        p1: First endpoint of segment 1
        p2: Second endpoint of segment 1
        p3: First endpoint of segment 2
        p4: Second endpoint of segment 2
        epsilon: Denominator below which the lines count as parallel

    Returns:
        (t, s) parameters along segment 1 and segment 2, or None

    Examples:
        >>> line_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        (0.5, 0.5)
    """
    d1x = p2.x - p1.x
    d1y = p2.y - p1.y
    d2x = p4.x - p3.x
    d2y = p4.y - p3.y

    denom = d1x * d2y - d1y * d2x
    if abs(denom) < epsilon:
        return None

    t = ((p3.x - p1.x) * d2y - (p3.y - p1.y) * d2x) / denom
    s = ((p3.x - p1.x) * d1y - (p3.y - p1.y) * d1x) / denom

    if 0.0 <= t <= 1.0 and 0.0 <= s <= 1.0:
        return t, s
    return None


def unit_vector(dx: float, dy: float) -> tuple[float, float] | None:
    """Normalize a vector, or None if it is shorter than EPSILON_LENGTH."""
    length = math.hypot(dx, dy)
    if length < EPSILON_LENGTH:
        return None
    return dx / length, dy / length


def perpendicular(dx: float, dy: float) -> tuple[float, float]:
    """Rotate a vector by +90 degrees."""
    return -dy, dx


def perpendicular_distance(point: Point, start: Point, end: Point) -> float:
    """Distance from a point to the infinite line through start and end.

    Falls back to the distance to ``start`` when the chord is degenerate.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length < EPSILON_LENGTH:
        return math.hypot(point.x - start.x, point.y - start.y)
    return abs((point.x - start.x) * -dy + (point.y - start.y) * dx) / length
