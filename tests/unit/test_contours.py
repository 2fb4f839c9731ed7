"""Tests for the contour model: ranges, winding and structural edits."""

import pytest

from outlinekit.core.contours import (
    contour_bounds,
    contour_ranges,
    contour_winding,
    extract_contours,
    is_clockwise,
    make_cutout,
    make_fill,
    remove_contours,
    remove_duplicate_points,
    reverse_contour,
    reverse_contours,
    selection_bounds,
)
from outlinekit.domain import BoundingBox, ContourRange, Path, Point, Segment, SegmentType, Winding


def rect(x0: float, y0: float, x1: float, y1: float, fill: bool = True) -> list[Segment]:
    """Closed rectangle; clockwise (fill) by default in y-up space."""
    if fill:
        corners = [(x0, y0), (x0, y1), (x1, y1), (x1, y0)]
    else:
        corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
    return (
        [Segment.move(*corners[0])]
        + [Segment.line(*c) for c in corners[1:]]
        + [Segment.close()]
    )


def anchors(path: Path) -> list[Point]:
    return [seg.end for seg in path if seg.end is not None]


@pytest.fixture
def ring_path() -> Path:
    """Outer fill square with an inner hole square."""
    return Path(rect(0, 0, 100, 100) + rect(25, 25, 75, 75, fill=False))


class TestContourRanges:
    """Tests for contour range derivation."""

    def test_closed_contours(self, ring_path: Path) -> None:
        """Test ranges end at ClosePath."""
        assert contour_ranges(ring_path) == [ContourRange(0, 4), ContourRange(5, 9)]

    def test_open_contour_ends_before_next_move(self) -> None:
        """Test an open contour ends at the segment before the next MoveTo."""
        path = Path([Segment.move(0, 0), Segment.line(10, 0), Segment.move(20, 0), Segment.line(30, 0)])
        assert contour_ranges(path) == [ContourRange(0, 1), ContourRange(2, 3)]

    def test_segments_before_first_move_ignored(self) -> None:
        """Test stray segments before any MoveTo belong to no contour."""
        path = Path([Segment.line(5, 5), Segment.move(0, 0), Segment.line(10, 0)])
        assert contour_ranges(path) == [ContourRange(1, 2)]

    def test_empty_path(self) -> None:
        """Test the empty path has no contours."""
        assert contour_ranges(Path()) == []


class TestWinding:
    """Tests for winding classification."""

    def test_clockwise_is_fill(self, ring_path: Path) -> None:
        """Test negative signed area classifies as fill."""
        assert is_clockwise(ring_path, 0)
        assert contour_winding(ring_path, 0) == Winding.FILL

    def test_counter_clockwise_is_hole(self, ring_path: Path) -> None:
        """Test positive signed area classifies as hole."""
        assert not is_clockwise(ring_path, 1)
        assert contour_winding(ring_path, 1) == Winding.HOLE

    def test_controls_ignored(self) -> None:
        """Test only anchors take part in the area."""
        path = Path(
            [
                Segment.move(0, 0),
                Segment.quad(-500, 50, 0, 100),
                Segment.line(100, 100),
                Segment.line(100, 0),
                Segment.close(),
            ]
        )
        assert contour_winding(path, 0) == Winding.FILL

    def test_degenerate_contour_is_fill(self) -> None:
        """Test fewer than 3 anchors report fill."""
        path = Path([Segment.move(0, 0), Segment.line(10, 10), Segment.close()])
        assert contour_winding(path, 0) == Winding.FILL

    def test_out_of_range_is_fill(self, ring_path: Path) -> None:
        """Test out-of-range indices report fill rather than raising."""
        assert is_clockwise(ring_path, 7)


class TestReverse:
    """Tests for contour reversal."""

    def test_reverse_flips_winding(self, ring_path: Path) -> None:
        """Test reversal turns a fill into a hole and back."""
        reversed_path = reverse_contour(ring_path, 0)
        assert contour_winding(reversed_path, 0) == Winding.HOLE
        assert contour_winding(reversed_path, 1) == Winding.HOLE

        hole_reversed = reverse_contour(ring_path, 1)
        assert contour_winding(hole_reversed, 1) == Winding.FILL

    def test_reverse_starts_at_last_anchor(self) -> None:
        """Test the new MoveTo lands on the old last anchor."""
        path = Path(rect(0, 0, 100, 100))
        reversed_path = reverse_contour(path, 0)
        assert anchors(reversed_path) == [Point(100, 0), Point(100, 100), Point(0, 100), Point(0, 0)]
        assert reversed_path[-1].type == SegmentType.CLOSE

    def test_reverse_swaps_cubic_handles(self) -> None:
        """Test cubic controls are swapped when walked backwards."""
        path = Path([Segment.move(0, 0), Segment.cubic(10, 20, 30, 40, 50, 0)])
        reversed_path = reverse_contour(path, 0)
        assert reversed_path[0] == Segment.move(50, 0)
        assert reversed_path[1] == Segment.cubic(30, 40, 10, 20, 0, 0)

    def test_reverse_keeps_quadratic_control(self) -> None:
        """Test a quadratic keeps its single control."""
        path = Path([Segment.move(0, 0), Segment.quad(25, 50, 50, 0)])
        assert reverse_contour(path, 0)[1] == Segment.quad(25, 50, 0, 0)

    def test_double_reverse_keeps_cyclic_anchor_order(self, ring_path: Path) -> None:
        """Test reversing twice gives the same anchors in the same cyclic order."""
        twice = reverse_contours(reverse_contours(ring_path, [0, 1]), [0, 1])
        original = anchors(ring_path[0:5])
        result = anchors(twice[0:5])
        assert len(result) == len(original)
        shift = result.index(original[0])
        assert result[shift:] + result[:shift] == original

    def test_double_reverse_with_curves(self) -> None:
        """Test reversing twice restores a curved open contour exactly."""
        path = Path([Segment.move(0, 0), Segment.cubic(10, 20, 30, 40, 50, 0), Segment.quad(60, 10, 70, 0)])
        assert reverse_contour(reverse_contour(path, 0), 0) == path

    def test_untouched_contours_preserved(self, ring_path: Path) -> None:
        """Test unselected contours keep their segments."""
        reversed_path = reverse_contour(ring_path, 1)
        assert reversed_path[0:5] == ring_path[0:5]

    def test_out_of_range_is_noop(self, ring_path: Path) -> None:
        """Test out-of-range indices return the input."""
        assert reverse_contours(ring_path, [5, -1]) is ring_path


class TestFillAndCutout:
    """Tests for make_fill and make_cutout."""

    def test_make_fill(self, ring_path: Path) -> None:
        """Test a hole becomes a fill."""
        result = make_fill(ring_path, [1])
        assert contour_winding(result, 1) == Winding.FILL

    def test_make_fill_already_fill(self, ring_path: Path) -> None:
        """Test a fill contour is left untouched."""
        assert make_fill(ring_path, [0]) == ring_path

    def test_make_cutout(self, ring_path: Path) -> None:
        """Test a fill becomes a hole."""
        result = make_cutout(ring_path, [0])
        assert contour_winding(result, 0) == Winding.HOLE

    def test_idempotent(self, ring_path: Path) -> None:
        """Test applying either operation twice equals applying it once."""
        once = make_fill(ring_path, [0, 1])
        assert make_fill(once, [0, 1]) == once

        once = make_cutout(ring_path, [0, 1])
        assert make_cutout(once, [0, 1]) == once

    def test_zero_area_contour_untouched(self) -> None:
        """Test a contour with undefined orientation is skipped."""
        path = Path([Segment.move(0, 0), Segment.line(50, 0), Segment.line(100, 0), Segment.close()])
        assert make_cutout(path, [0]) == path


class TestRemoveDuplicatePoints:
    """Tests for duplicate point removal."""

    def test_closing_line_dropped(self) -> None:
        """Test a LineTo back onto the MoveTo point is dropped."""
        path = Path(rect(0, 0, 100, 100)[:-1] + [Segment.line(0.5, 0), Segment.close()])
        result = remove_duplicate_points(path)
        assert result == Path(rect(0, 0, 100, 100))

    def test_repeated_line_dropped(self) -> None:
        """Test a LineTo on top of the previous anchor is dropped."""
        path = Path(
            [
                Segment.move(0, 0),
                Segment.line(0, 100),
                Segment.line(0, 100),
                Segment.line(100, 100),
                Segment.close(),
            ]
        )
        result = remove_duplicate_points(path)
        assert len(result) == 4
        assert anchors(result) == [Point(0, 0), Point(0, 100), Point(100, 100)]

    def test_degenerate_curve_dropped(self) -> None:
        """Test a curve collapsed onto its start anchor is dropped."""
        path = Path(
            [
                Segment.move(0, 0),
                Segment.line(0, 100),
                Segment.cubic(0, 100, 0, 100, 0, 100),
                Segment.line(100, 100),
                Segment.close(),
            ]
        )
        assert SegmentType.CUBIC not in [seg.type for seg in remove_duplicate_points(path)]

    def test_move_never_dropped(self) -> None:
        """Test a MoveTo on top of the previous contour's end is kept."""
        path = Path([Segment.move(0, 0), Segment.line(100, 0), Segment.move(100, 0), Segment.line(200, 0)])
        assert remove_duplicate_points(path) is path

    def test_clean_path_returned_as_is(self, ring_path: Path) -> None:
        """Test nothing changes when there are no duplicates."""
        assert remove_duplicate_points(ring_path) is ring_path


class TestContourSelection:
    """Tests for extraction, removal and bounds."""

    def test_extract_contours(self, ring_path: Path) -> None:
        """Test copying one contour."""
        assert extract_contours(ring_path, [1]) == ring_path[5:10]

    def test_remove_contours(self, ring_path: Path) -> None:
        """Test dropping one contour."""
        assert remove_contours(ring_path, [0]) == ring_path[5:10]

    def test_contour_bounds(self, ring_path: Path) -> None:
        """Test single contour bounds."""
        assert contour_bounds(ring_path, 1) == BoundingBox(25, 25, 75, 75)
        assert contour_bounds(ring_path, 3) is None

    def test_selection_bounds(self, ring_path: Path) -> None:
        """Test combined bounds of several contours."""
        assert selection_bounds(ring_path, [0, 1]) == BoundingBox(0, 0, 100, 100)
        assert selection_bounds(ring_path, []) is None
