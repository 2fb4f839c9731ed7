"""Path value type and the derived contour descriptors.

A Path is an immutable, ordered sequence of segments. Contours are never
stored: their index ranges are derived on demand from the segment stream
(see ``outlinekit.core.contours``), so a Path can never carry stale ranges.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, overload

from outlinekit.domain.segment import Point, Segment, SegmentType


class Winding(Enum):
    """Contour fill classification.

    Outlines use a y-up coordinate space: a contour whose anchor polygon has
    negative signed area is a fill, anything else is a hole.
    """

    FILL = "fill"
    HOLE = "hole"


class ContourRange(NamedTuple):
    """Inclusive segment index range of one contour."""

    start: int
    end: int

    def covers(self, index: int) -> bool:
        """Check if a segment index falls inside the range."""
        return self.start <= index <= self.end

    @property
    def length(self) -> int:
        """Number of segments in the range."""
        return self.end - self.start + 1


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min_x: Left edge
        min_y: Bottom edge
        max_x: Right edge
        max_y: Top edge
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        """Center of the box."""
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "BoundingBox":
        """Build the box enclosing ``points``.

        An empty iterable gives the all-zero box.
        """
        xs: list[float] = []
        ys: list[float] = []
        for point in points:
            xs.append(point.x)
            ys.append(point.y)
        if not xs:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls(min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True)
class Path:
    """An immutable outline made of segments.

    Any iterable of segments is accepted and stored as a tuple. Engine
    operations never modify a Path; they return a new one.

    Attributes:
        segments: The drawing commands in order

    Example:
        path = Path([
            Segment.move(0, 0),
            Segment.line(100, 0),
            Segment.line(100, 100),
            Segment.close(),
        ])
    """

    segments: tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    @overload
    def __getitem__(self, index: int) -> Segment: ...

    @overload
    def __getitem__(self, index: slice) -> "Path": ...

    def __getitem__(self, index: int | slice) -> "Segment | Path":
        if isinstance(index, slice):
            return Path(self.segments[index])
        return self.segments[index]

    def __add__(self, other: "Path") -> "Path":
        return Path(self.segments + other.segments)

    def is_empty(self) -> bool:
        """Check if the path has no segments."""
        return not self.segments

    def has_curves(self) -> bool:
        """Check if any segment is a quadratic or cubic."""
        return any(seg.is_curve for seg in self.segments)

    def all_points(self) -> Iterator[Point]:
        """Iterate over every anchor and control point."""
        for seg in self.segments:
            for _, point in seg.items():
                yield point

    def bounds(self) -> BoundingBox:
        """Bounding box of all anchors and control points."""
        return BoundingBox.from_points(self.all_points())

    def draw(self, pen: Any) -> None:
        """Replay the path into a fontTools-style segment pen.

        Contours without a ClosePath are finished with ``endPath``.

        Args:
            pen: Object implementing moveTo/lineTo/qCurveTo/curveTo/closePath/endPath
        """
        is_open = False
        for seg in self.segments:
            if seg.type == SegmentType.MOVE:
                if is_open:
                    pen.endPath()
                pen.moveTo(seg.end.to_tuple())  # type: ignore[union-attr]
                is_open = True
            elif seg.type == SegmentType.LINE:
                pen.lineTo(seg.end.to_tuple())  # type: ignore[union-attr]
            elif seg.type == SegmentType.QUAD:
                pen.qCurveTo(seg.cp1.to_tuple(), seg.end.to_tuple())  # type: ignore[union-attr]
            elif seg.type == SegmentType.CUBIC:
                pen.curveTo(
                    seg.cp1.to_tuple(),  # type: ignore[union-attr]
                    seg.cp2.to_tuple(),  # type: ignore[union-attr]
                    seg.end.to_tuple(),  # type: ignore[union-attr]
                )
            elif seg.type == SegmentType.CLOSE and is_open:
                pen.closePath()
                is_open = False
        if is_open:
            pen.endPath()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"segments": [seg.to_dict() for seg in self.segments]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Path":
        """Deserialize from dictionary."""
        return cls(tuple(Segment.from_dict(s) for s in data["segments"]))
