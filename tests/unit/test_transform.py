"""Tests for affine transforms over contour selections."""

import pytest

from outlinekit.config import TransformValues
from outlinekit.core.transform import (
    FlipAxis,
    apply_transform,
    flip_contours,
    rotate_contours,
    scale_contours,
    skew_contours,
    transform_point,
    translate_contours,
)
from outlinekit.domain import Path, Point, Segment


@pytest.fixture
def two_contours() -> Path:
    """A curved contour followed by a square."""
    return Path(
        [
            Segment.move(0, 0),
            Segment.cubic(0, 50, 50, 100, 100, 100),
            Segment.line(100, 0),
            Segment.close(),
            Segment.move(200, 0),
            Segment.line(200, 100),
            Segment.line(300, 100),
            Segment.line(300, 0),
            Segment.close(),
        ]
    )


class TestContourTransforms:
    """Tests for per-selection transforms."""

    def test_translate_moves_anchors_and_controls(self, two_contours: Path) -> None:
        """Test translation moves every point of the selected contour."""
        result = translate_contours(two_contours, [0], 10, -5)
        assert result[0] == Segment.move(10, -5)
        assert result[1] == Segment.cubic(10, 45, 60, 95, 110, 95)
        assert result[4:] == two_contours[4:]

    def test_empty_selection_is_noop(self, two_contours: Path) -> None:
        """Test an empty or out-of-range selection returns the input."""
        assert translate_contours(two_contours, [], 10, 10) is two_contours
        assert scale_contours(two_contours, [7], 2, 2) is two_contours
        assert rotate_contours(two_contours, [], 90) is two_contours
        assert skew_contours(two_contours, [], 10, 0) is two_contours
        assert flip_contours(two_contours, [], FlipAxis.VERTICAL) is two_contours

    def test_scale_about_selection_center(self, two_contours: Path) -> None:
        """Test scaling keeps the selection's bounding-box center fixed."""
        result = scale_contours(two_contours, [1], 2, 0.5)
        assert [seg.end for seg in result[4:8]] == [
            Point(150, 25),
            Point(150, 75),
            Point(350, 75),
            Point(350, 25),
        ]

    def test_scale_about_explicit_center(self, two_contours: Path) -> None:
        """Test an explicit center is honoured."""
        result = scale_contours(two_contours, [1], 2, 2, center=Point(200, 0))
        assert result[6].end == Point(400, 200)

    def test_rotate_quarter_turn(self, two_contours: Path) -> None:
        """Test a 90 degree rotation about the square's center."""
        result = rotate_contours(two_contours, [1], 90)
        # Square is symmetric: the corner set is unchanged, the order rotates
        assert {seg.end for seg in result[4:8]} == {seg.end for seg in two_contours[4:8]}
        assert result[4].end == Point(300, 0)

    def test_results_are_rounded(self, two_contours: Path) -> None:
        """Test transformed coordinates are integers."""
        result = rotate_contours(two_contours, [0], 33)
        for point in result.all_points():
            assert point.x == int(point.x)
            assert point.y == int(point.y)

    def test_skew(self, two_contours: Path) -> None:
        """Test a horizontal shear moves x by y distance from the center."""
        result = skew_contours(two_contours, [1], 45, 0)
        assert result[4].end == Point(150, 0)
        assert result[5].end == Point(250, 100)

    def test_flip_horizontal(self, two_contours: Path) -> None:
        """Test mirroring in x about the selection center, controls included."""
        result = flip_contours(two_contours, [0], FlipAxis.HORIZONTAL)
        assert result[0] == Segment.move(100, 0)
        assert result[1] == Segment.cubic(100, 50, 50, 100, 0, 100)

    def test_flip_vertical(self, two_contours: Path) -> None:
        """Test mirroring in y."""
        result = flip_contours(two_contours, [1], FlipAxis.VERTICAL)
        assert result[4].end == Point(200, 100)
        assert result[5].end == Point(200, 0)


class TestApplyTransform:
    """Tests for the combined whole-glyph transform."""

    def test_identity(self, two_contours: Path) -> None:
        """Test default values leave the outline unchanged."""
        assert apply_transform(two_contours, TransformValues()) == two_contours

    def test_shift(self, two_contours: Path) -> None:
        """Test shift applies after the other steps."""
        result = apply_transform(two_contours, TransformValues(shift_x=10, shift_y=20))
        assert result[0] == Segment.move(10, 20)

    def test_scale_about_glyph_center(self, two_contours: Path) -> None:
        """Test scaling keeps the glyph center fixed."""
        result = apply_transform(two_contours, TransformValues(scale_x=2.0))
        assert result.bounds().center == two_contours.bounds().center
        assert result.bounds().width == 2 * two_contours.bounds().width

    def test_rotation_order(self) -> None:
        """Test scale happens before rotation."""
        point = transform_point(Point(10, 0), Point(0, 0), TransformValues(scale_x=2.0, rotation=90))
        assert point.x == pytest.approx(0)
        assert point.y == pytest.approx(20)

    def test_empty_path(self) -> None:
        """Test the empty path is returned as is."""
        path = Path()
        assert apply_transform(path, TransformValues(shift_x=5)) is path
