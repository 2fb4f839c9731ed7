"""Tests for line slicing."""

import pytest

from outlinekit.core.contours import contour_ranges
from outlinekit.core.geometry import signed_area
from outlinekit.core.slicer import find_line_path_intersections, slice_path_with_line
from outlinekit.domain import Path, Point, Segment, SegmentType


@pytest.fixture
def rectangle() -> Path:
    return Path(
        [
            Segment.move(0, 0),
            Segment.line(100, 0),
            Segment.line(100, 100),
            Segment.line(0, 100),
            Segment.close(),
        ]
    )


def contour_area(path: Path, index: int) -> float:
    contour_range = contour_ranges(path)[index]
    return signed_area(
        [path[i].end for i in range(contour_range.start, contour_range.end + 1) if path[i].end is not None]  # type: ignore[misc]
    )


class TestFindIntersections:
    """Tests for intersection discovery."""

    def test_vertical_cut(self, rectangle: Path) -> None:
        """Test both crossings are found and sorted along the cutting line."""
        hits = find_line_path_intersections(rectangle, Point(50, -10), Point(50, 110))
        assert [hit.point for hit in hits] == [Point(50, 0), Point(50, 100)]
        assert [hit.segment_index for hit in hits] == [1, 3]
        assert all(hit.t == pytest.approx(0.5) for hit in hits)

    def test_sorted_along_line_direction(self, rectangle: Path) -> None:
        """Test reversing the cutting line reverses the order."""
        hits = find_line_path_intersections(rectangle, Point(50, 110), Point(50, -10))
        assert [hit.point for hit in hits] == [Point(50, 100), Point(50, 0)]
        assert hits[0].order_along_line < hits[1].order_along_line

    def test_closing_edge_tested(self, rectangle: Path) -> None:
        """Test the implicit closing edge reports the ClosePath index."""
        hits = find_line_path_intersections(rectangle, Point(-10, 50), Point(110, 50))
        assert [hit.segment_index for hit in hits] == [4, 2]
        assert hits[0].point == Point(0, 50)

    def test_curve_first_crossing(self) -> None:
        """Test a curve reports its crossing at the right parameter."""
        path = Path([Segment.move(0, 0), Segment.quad(50, 100, 100, 0)])
        hits = find_line_path_intersections(path, Point(50, -10), Point(50, 110))
        assert len(hits) == 1
        assert hits[0].point == Point(50, 50)
        assert hits[0].t == pytest.approx(0.5)

    def test_no_crossing(self, rectangle: Path) -> None:
        """Test a line missing the outline finds nothing."""
        assert find_line_path_intersections(rectangle, Point(200, 0), Point(200, 100)) == []


class TestSlicePath:
    """Tests for contour bisection."""

    def test_rectangle_cut_in_half(self, rectangle: Path) -> None:
        """Test a vertical cut yields two closed halves of equal area."""
        result = slice_path_with_line(rectangle, Point(50, -10), Point(50, 110))
        assert list(result) == [
            Segment.move(50, 0),
            Segment.line(100, 0),
            Segment.line(100, 100),
            Segment.line(50, 100),
            Segment.close(),
            Segment.move(50, 100),
            Segment.line(0, 100),
            Segment.line(0, 0),
            Segment.line(50, 0),
            Segment.close(),
        ]
        assert contour_area(result, 0) == pytest.approx(5000)
        assert contour_area(result, 1) == pytest.approx(5000)

    def test_cut_through_corners(self, rectangle: Path) -> None:
        """Test a diagonal through two anchors reuses them as split points."""
        result = slice_path_with_line(rectangle, Point(-10, -10), Point(110, 110))
        assert len(contour_ranges(result)) == 2
        assert [seg.end for seg in result[0:4]] == [Point(0, 0), Point(100, 0), Point(100, 100), None]
        assert contour_area(result, 0) == pytest.approx(5000)
        assert contour_area(result, 1) == pytest.approx(5000)

    def test_curved_contour(self) -> None:
        """Test curves are split and kept as curves."""
        path = Path([Segment.move(0, 0), Segment.quad(50, 100, 100, 0), Segment.close()])
        result = slice_path_with_line(path, Point(50, -10), Point(50, 110))
        assert list(result) == [
            Segment.move(50, 50),
            Segment.quad(75, 50, 100, 0),
            Segment.line(50, 0),
            Segment.close(),
            Segment.move(50, 0),
            Segment.line(0, 0),
            Segment.quad(25, 50, 50, 50),
            Segment.close(),
        ]

    def test_single_crossing_unchanged(self, rectangle: Path) -> None:
        """Test a line ending inside the contour leaves it alone."""
        assert slice_path_with_line(rectangle, Point(50, 50), Point(50, 200)) is rectangle

    def test_open_contour_unchanged(self) -> None:
        """Test open contours are never sliced."""
        path = Path([Segment.move(0, 0), Segment.line(100, 0), Segment.line(100, 100), Segment.line(0, 100)])
        assert slice_path_with_line(path, Point(50, -10), Point(50, 110)) is path

    def test_other_contours_untouched(self, rectangle: Path) -> None:
        """Test contours the line misses keep their place."""
        path = rectangle + Path([Segment.move(300, 0), Segment.line(300, 100), Segment.line(400, 100), Segment.close()])
        result = slice_path_with_line(path, Point(50, -10), Point(50, 110))
        assert len(contour_ranges(result)) == 3
        assert result[10:] == path[5:]
        assert all(seg.type != SegmentType.QUAD for seg in result)
