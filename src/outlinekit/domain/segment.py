"""Core geometric types for outline segments.

This module defines the fundamental geometric types used throughout outlinekit:
- Point: An immutable 2D point in font units
- SegmentType: Enum for the segment kinds of a path
- PointField: Enum addressing the points inside a segment
- Segment: One drawing command (move, line, quadratic, cubic or close)
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from outlinekit.exceptions import SegmentError


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.
    Uses slots for memory efficiency in parallel processing.

    Attributes:
        x: X coordinate in font units
        y: Y coordinate in font units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def rounded(self) -> "Point":
        """Round both coordinates to the nearest integer font unit."""
        return Point(round(self.x), round(self.y))

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"])


class SegmentType(str, Enum):
    """Segment kind, using the single-letter SVG command names."""

    MOVE = "M"
    LINE = "L"
    QUAD = "Q"
    CUBIC = "C"
    CLOSE = "Z"


class PointField(str, Enum):
    """Addresses one point inside a segment.

    - END: the on-curve anchor terminating the segment
    - CP1: first (or only) control point
    - CP2: second control point of a cubic
    """

    END = "end"
    CP1 = "cp1"
    CP2 = "cp2"


_REQUIRED_FIELDS: dict[SegmentType, tuple[PointField, ...]] = {
    SegmentType.MOVE: (PointField.END,),
    SegmentType.LINE: (PointField.END,),
    SegmentType.QUAD: (PointField.END, PointField.CP1),
    SegmentType.CUBIC: (PointField.END, PointField.CP1, PointField.CP2),
    SegmentType.CLOSE: (),
}

_DEGREES = {
    SegmentType.LINE: 1,
    SegmentType.QUAD: 2,
    SegmentType.CUBIC: 3,
}


@dataclass(frozen=True, slots=True)
class Segment:
    """One drawing command of a path.

    The points a segment carries are fixed by its type: MoveTo and LineTo
    carry only ``end``, QuadTo adds ``cp1``, CubicTo adds ``cp1`` and
    ``cp2``, ClosePath carries nothing.

    Attributes:
        type: Segment kind
        end: On-curve anchor (None for ClosePath)
        cp1: First control point (QuadTo, CubicTo)
        cp2: Second control point (CubicTo)

    Raises:
        SegmentError: If the points present do not match the segment type
    """

    type: SegmentType
    end: Point | None = None
    cp1: Point | None = None
    cp2: Point | None = None

    def __post_init__(self) -> None:
        required = _REQUIRED_FIELDS[self.type]
        for point_field in PointField:
            present = getattr(self, point_field.value) is not None
            if point_field in required and not present:
                raise SegmentError(self.type.value, f"missing {point_field.value}")
            if point_field not in required and present:
                raise SegmentError(self.type.value, f"unexpected {point_field.value}")

    @classmethod
    def move(cls, x: float, y: float) -> "Segment":
        """Create a MoveTo segment."""
        return cls(SegmentType.MOVE, end=Point(x, y))

    @classmethod
    def line(cls, x: float, y: float) -> "Segment":
        """Create a LineTo segment."""
        return cls(SegmentType.LINE, end=Point(x, y))

    @classmethod
    def quad(cls, cx: float, cy: float, x: float, y: float) -> "Segment":
        """Create a QuadTo segment with one control point."""
        return cls(SegmentType.QUAD, end=Point(x, y), cp1=Point(cx, cy))

    @classmethod
    def cubic(
        cls,
        c1x: float,
        c1y: float,
        c2x: float,
        c2y: float,
        x: float,
        y: float,
    ) -> "Segment":
        """Create a CubicTo segment with two control points."""
        return cls(SegmentType.CUBIC, end=Point(x, y), cp1=Point(c1x, c1y), cp2=Point(c2x, c2y))

    @classmethod
    def close(cls) -> "Segment":
        """Create a ClosePath segment."""
        return cls(SegmentType.CLOSE)

    @property
    def degree(self) -> int:
        """Curve degree: 1 for lines, 2 for quadratics, 3 for cubics, 0 otherwise."""
        return _DEGREES.get(self.type, 0)

    @property
    def is_drawing(self) -> bool:
        """True for segments that draw an edge (line, quadratic, cubic)."""
        return self.type in _DEGREES

    @property
    def is_curve(self) -> bool:
        """True for quadratic and cubic segments."""
        return self.type in (SegmentType.QUAD, SegmentType.CUBIC)

    @property
    def controls(self) -> tuple[Point, ...]:
        """Off-curve control points in drawing order."""
        return tuple(p for p in (self.cp1, self.cp2) if p is not None)

    def get(self, point_field: PointField) -> Point | None:
        """Get the point stored in a field (None if absent)."""
        return getattr(self, point_field.value)

    def items(self) -> Iterator[tuple[PointField, Point]]:
        """Iterate over (field, point) pairs present, anchor first."""
        for point_field in PointField:
            point = getattr(self, point_field.value)
            if point is not None:
                yield point_field, point

    def with_point(self, point_field: PointField, point: Point) -> "Segment":
        """Return a copy with one point replaced."""
        return replace(self, **{point_field.value: point})

    def map_points(self, func: Callable[[PointField, Point], Point]) -> "Segment":
        """Return a copy with every present point passed through ``func``."""
        if self.type == SegmentType.CLOSE:
            return self
        return replace(self, **{f.value: func(f, p) for f, p in self.items()})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with the type and the present points
        """
        data: dict[str, Any] = {"type": self.type.value}
        for point_field, point in self.items():
            data[point_field.value] = point.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a segment

        Returns:
            Segment instance
        """
        points = {
            f.value: Point.from_dict(data[f.value]) for f in PointField if data.get(f.value)
        }
        return cls(SegmentType(data["type"]), **points)
