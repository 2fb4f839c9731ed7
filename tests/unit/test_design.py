"""Tests for the parametric design tool pipeline."""

import pytest

from outlinekit.config import DesignParameters, FontMetrics
from outlinekit.core.design import DesignToolPipeline, apply_design_tools, round_half_up
from outlinekit.domain import Path, Point, Segment


@pytest.fixture
def metrics() -> FontMetrics:
    return FontMetrics(units_per_em=1000, ascender=800, descender=-200)


@pytest.fixture
def square() -> Path:
    """Clockwise (fill) square."""
    return Path(
        [
            Segment.move(0, 0),
            Segment.line(0, 100),
            Segment.line(100, 100),
            Segment.line(100, 0),
            Segment.close(),
        ]
    )


@pytest.fixture
def stem() -> Path:
    """Fill rectangle with extra collinear anchors on the left and bottom edges."""
    return Path(
        [
            Segment.move(0, 0),
            Segment.line(0, 25),
            Segment.line(0, 50),
            Segment.line(0, 75),
            Segment.line(0, 100),
            Segment.line(100, 100),
            Segment.line(100, 0),
            Segment.line(50, 0),
            Segment.close(),
        ]
    )


def anchors(path: Path) -> list[Point]:
    return [seg.end for seg in path if seg.end is not None]


class TestNeutralParameters:
    """Tests for the all-zero case."""

    def test_zero_parameters_are_identity(self, square: Path, metrics: FontMetrics) -> None:
        """Test neutral sliders leave an integer outline unchanged."""
        result = apply_design_tools(square, DesignParameters(), metrics)
        assert result.path == square
        assert result.advance_width_delta == 0

    def test_empty_path(self, metrics: FontMetrics) -> None:
        """Test the empty path passes through."""
        result = apply_design_tools(Path(), DesignParameters(weight=50), metrics)
        assert result.path.is_empty()
        assert result.advance_width_delta == 0

    def test_neutral_detection(self) -> None:
        """Test is_neutral and needs_normals."""
        assert DesignParameters().is_neutral()
        assert not DesignParameters(slant=5).is_neutral()
        assert not DesignParameters(slant=5).needs_normals()
        assert DesignParameters(serif=10).needs_normals()


class TestSpatialRemap:
    """Tests for the shared remap step."""

    def test_width_scales_about_center(self, square: Path, metrics: FontMetrics) -> None:
        """Test width stretches x about the glyph center and widens the advance."""
        result = apply_design_tools(square, DesignParameters(width=50), metrics)
        bounds = result.path.bounds()
        assert (bounds.min_x, bounds.max_x) == (-25, 125)
        assert (bounds.min_y, bounds.max_y) == (0, 100)
        assert result.advance_width_delta == 50

    def test_slant_shears_by_height(self, square: Path, metrics: FontMetrics) -> None:
        """Test slant moves x by y * tan(angle)."""
        result = apply_design_tools(square, DesignParameters(slant=30), metrics)
        assert anchors(result.path) == [Point(0, 0), Point(58, 100), Point(158, 100), Point(100, 0)]
        assert result.advance_width_delta == 0

    def test_descender_only_affects_negative_y(self, metrics: FontMetrics) -> None:
        """Test descender extension leaves points above the baseline alone."""
        path = Path([Segment.move(0, -100), Segment.line(0, 100), Segment.line(100, 100), Segment.close()])
        result = apply_design_tools(path, DesignParameters(descender_extend=100), metrics)
        assert anchors(result.path) == [Point(0, -130), Point(0, 100), Point(100, 100)]

    def test_x_height_zone_and_blend_band(self, metrics: FontMetrics) -> None:
        """Test the x-height zone scales, the band above blends, and higher points stay."""
        # x-height 576, scale 1.1, blend band up to 748.8
        path = Path(
            [
                Segment.move(0, -50),
                Segment.line(0, 100),
                Segment.line(0, 576),
                Segment.line(0, 640),
                Segment.line(0, 760),
            ]
        )
        result = apply_design_tools(path, DesignParameters(x_height=50), metrics)
        assert [p.y for p in anchors(result.path)] == [-50, 110, 634, 695, 760]

    def test_ascender_stretches_above_x_height(self, metrics: FontMetrics) -> None:
        """Test ascender extension pins the x-height and stretches above it."""
        path = Path([Segment.move(0, 100), Segment.line(0, 576), Segment.line(0, 700)])
        result = apply_design_tools(path, DesignParameters(ascender_extend=100), metrics)
        assert [p.y for p in anchors(result.path)] == [100, 576, 737]

    def test_optical_size_pushes_inner_points_further(self, metrics: FontMetrics) -> None:
        """Test points near the glyph center move outward more than edge points."""
        path = Path(
            [
                Segment.move(0, 0),
                Segment.line(0, 50),
                Segment.line(0, 100),
                Segment.line(100, 100),
                Segment.line(100, 0),
                Segment.close(),
                Segment.move(40, 50),
                Segment.line(60, 50),
                Segment.line(50, 60),
                Segment.close(),
            ]
        )
        result = apply_design_tools(path, DesignParameters(optical_size=50), metrics)
        assert result.path[0].end == Point(0, 0)
        assert result.path[1].end == Point(-2, 50)
        assert result.path[6].end == Point(34, 50)
        assert result.path[7].end == Point(66, 50)
        assert result.path[8].end == Point(50, 66)

    def test_overshoot_pushes_baseline_down(self, square: Path, metrics: FontMetrics) -> None:
        """Test points near the baseline move below it."""
        result = apply_design_tools(square, DesignParameters(overshoot=50), metrics)
        assert result.path[0].end == Point(0, -10)
        assert result.path[1].end == Point(0, 100)

    def test_coordinates_rounded(self, square: Path, metrics: FontMetrics) -> None:
        """Test every output coordinate is an integer."""
        params = DesignParameters(slant=7, x_height=13, optical_size=21)
        for point in apply_design_tools(square, params, metrics).path.all_points():
            assert point.x == int(point.x)
            assert point.y == int(point.y)


class TestNormalTools:
    """Tests for normal-based offsets."""

    def test_positive_weight_grows_outline(self, square: Path, metrics: FontMetrics) -> None:
        """Test weight pushes fill anchors outward along their normals."""
        result = apply_design_tools(square, DesignParameters(weight=20), metrics)
        assert result.path[0].end == Point(-7, -7)
        assert result.path[2].end == Point(107, 107)

    def test_negative_weight_shrinks_outline(self, square: Path, metrics: FontMetrics) -> None:
        """Test negative weight pulls anchors inward."""
        result = apply_design_tools(square, DesignParameters(weight=-20), metrics)
        assert result.path.bounds().width < 100

    def test_contrast_cancels_on_diagonals(self, square: Path, metrics: FontMetrics) -> None:
        """Test contrast does nothing where normals are at 45 degrees."""
        result = apply_design_tools(square, DesignParameters(contrast=80), metrics)
        assert result.path == square

    def test_ink_trap_pulls_acute_joints_inward(self, stem: Path, metrics: FontMetrics) -> None:
        """Test only joints whose neighbouring normals diverge are cut in."""
        result = apply_design_tools(stem, DesignParameters(ink_trap=50), metrics)
        # Corner normals' neighbours are perpendicular: depth 10 along (-1, -1) / sqrt(2)
        assert result.path[0].end == Point(7, 7)
        # Mid-stem neighbours share the normal (-1, 0)
        assert result.path[1].end == Point(0, 25)
        assert result.path[2].end == Point(0, 50)
        assert result.path[3].end == Point(0, 75)

    def test_serif_extends_vertical_strokes_near_zones(self, stem: Path, metrics: FontMetrics) -> None:
        """Test serif shifts vertical-stroke anchors near a zone along the tangent."""
        result = apply_design_tools(stem, DesignParameters(serif=50), metrics)
        # Within 40 units of the baseline on a stroke with normal (-1, 0)
        assert result.path[1].end == Point(0, 5)
        # Outside every zone
        assert result.path[2].end == Point(0, 50)
        # On the baseline but on a horizontal stroke
        assert result.path[7].end == Point(50, 0)


class TestSpacingAndRoundness:
    """Tests for spacing and handle scaling."""

    def test_spacing_shifts_and_widens(self, square: Path, metrics: FontMetrics) -> None:
        """Test spacing shifts by half the advance delta."""
        result = apply_design_tools(square, DesignParameters(spacing=10), metrics)
        assert result.advance_width_delta == 10
        assert anchors(result.path) == [Point(5, 0), Point(5, 100), Point(105, 100), Point(105, 0)]

    def test_odd_spacing_rounds_shift_half_up(self, square: Path, metrics: FontMetrics) -> None:
        """Test an odd advance delta shifts the outline by the upper half."""
        result = apply_design_tools(square, DesignParameters(spacing=5), metrics)
        assert result.advance_width_delta == 5
        assert anchors(result.path) == [Point(3, 0), Point(3, 100), Point(103, 100), Point(103, 0)]

    def test_negative_odd_spacing(self, square: Path, metrics: FontMetrics) -> None:
        """Test ties round toward positive infinity for negative spacing."""
        result = apply_design_tools(square, DesignParameters(spacing=-5), metrics)
        assert result.advance_width_delta == -5
        assert result.path[0].end == Point(-2, 0)

    def test_round_half_up(self) -> None:
        """Test tie rounding."""
        assert [round_half_up(v) for v in (2.5, 3.5, -2.5, 2.4)] == [3, 4, -2, 2]

    def test_roundness_scales_cubic_handles(self, metrics: FontMetrics) -> None:
        """Test cubic handles scale about their own anchors."""
        path = Path([Segment.move(0, 0), Segment.cubic(0, 50, 50, 100, 100, 100), Segment.close()])
        result = apply_design_tools(path, DesignParameters(roundness=100), metrics)
        assert result.path[1] == Segment.cubic(0, 100, 0, 100, 100, 100)

    def test_roundness_scales_quad_control_about_chord_midpoint(self, metrics: FontMetrics) -> None:
        """Test a quadratic control scales about its chord's midpoint."""
        path = Path([Segment.move(0, 0), Segment.quad(50, 100, 100, 0)])
        result = DesignToolPipeline(DesignParameters(roundness=-50), metrics).apply(path)
        assert result.path[1] == Segment.quad(50, 50, 100, 0)

    def test_roundness_ignores_lines(self, square: Path, metrics: FontMetrics) -> None:
        """Test line-only outlines are unaffected by roundness."""
        assert apply_design_tools(square, DesignParameters(roundness=60), metrics).path == square
