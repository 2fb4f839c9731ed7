"""Parametric design tools.

The pipeline applies slider-driven edits to every anchor and control point
of a glyph outline:

1. Shared spatial remap, in order: width, slant, x-height, ascender,
   descender, overshoot, optical size
2. Normal-based offsets, in order: weight, contrast, ink trap, serif
3. Roundness: control handle scaling relative to the owning anchor

Spacing and width also produce an advance-width delta that the caller adds
to the glyph's advance. Coordinates are rounded after each step, so with
every slider at zero the output equals the input up to integer rounding.
"""

import logging
import math
from dataclasses import dataclass

from outlinekit.config import DesignParameters, FontMetrics
from outlinekit.core.contours import contour_ranges
from outlinekit.core.normals import NormalField, Vector, compute_normal_field
from outlinekit.domain import BoundingBox, Path, Point, PointField, Segment, SegmentType

logger = logging.getLogger(__name__)

# Neighbour normal dot product below which a joint is acute enough for an ink trap
INK_TRAP_THRESHOLD = 0.3

# |normal.x| above which a point sits on a mostly vertical stroke
SERIF_VERTICAL_THRESHOLD = 0.7


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class DesignResult:
    """Output of the design tool pipeline.

    Attributes:
        path: Transformed outline
        advance_width_delta: Amount to add to the glyph's advance width
    """

    path: Path
    advance_width_delta: int = 0


class DesignToolPipeline:
    """Applies design parameters to glyph outlines.

    Example:
        pipeline = DesignToolPipeline(
            DesignParameters(weight=20, slant=8),
            FontMetrics(units_per_em=1000, ascender=800, descender=-200),
        )
        result = pipeline.apply(path)
    """

    def __init__(self, params: DesignParameters, metrics: FontMetrics) -> None:
        """Initialize the pipeline.

        Args:
            params: Slider values
            metrics: Font metrics used for zones and UPM-relative amounts
        """
        self.params = params
        self.metrics = metrics

    @property
    def upm(self) -> int:
        return self.metrics.units_per_em

    def apply(self, path: Path) -> DesignResult:
        """Run the pipeline over one glyph outline.

        Args:
            path: Source outline

        Returns:
            DesignResult with the new outline and advance-width delta
        """
        if path.is_empty():
            return DesignResult(path, 0)

        bounds = path.bounds()
        normals = compute_normal_field(path) if self.params.needs_normals() else None
        sharpness = (
            self._ink_trap_sharpness(path, normals)
            if normals is not None and self.params.ink_trap
            else {}
        )

        segments: list[Segment] = []
        prev_anchor: Point | None = None
        for index, seg in enumerate(path):
            new_seg = seg.map_points(lambda _f, p: self._remap(p, bounds).rounded())

            if normals is not None:
                new_seg = self._apply_normal_tools(index, new_seg, normals, sharpness)

            if self.params.roundness and new_seg.is_curve:
                new_seg = self._scale_handles(new_seg, prev_anchor)

            segments.append(new_seg)
            if new_seg.end is not None:
                prev_anchor = new_seg.end

        advance_delta = 0
        if self.params.spacing:
            spacing_delta = round_half_up(self.params.spacing / 100 * self.upm * 0.1)
            half_shift = round_half_up(spacing_delta / 2)
            segments = [
                seg.map_points(lambda _f, p: Point(p.x + half_shift, p.y)) for seg in segments
            ]
            advance_delta += spacing_delta

        if self.params.width:
            advance_delta += round_half_up(self.params.width / 100 * (bounds.width or 1))

        logger.debug(
            "Applied design tools to %d segments (advance delta %d)",
            len(segments),
            advance_delta,
        )
        return DesignResult(Path(segments), advance_delta)

    def _remap(self, point: Point, bounds: BoundingBox) -> Point:
        """Shared spatial remap of one point."""
        params = self.params
        x, y = point.x, point.y
        center = bounds.center
        x_height = self.metrics.x_height

        if params.width:
            x = center.x + (x - center.x) * (1 + params.width / 100)

        if params.slant:
            x = x + y * math.tan(math.radians(params.slant))

        if params.x_height:
            scale = 1 + params.x_height / 100 * 0.2
            if 0 <= y <= x_height:
                y = y * scale
            elif x_height < y < x_height * 1.3:
                t = (y - x_height) / (x_height * 0.3)
                blend = 1 - t * t
                y = x_height * scale + (y - x_height) * (1 - blend * (scale - 1) * 0.5)

        if params.ascender_extend and y > x_height:
            y = x_height + (y - x_height) * (1 + params.ascender_extend / 100 * 0.3)

        if params.descender_extend and y < 0:
            y = y * (1 + params.descender_extend / 100 * 0.3)

        if params.overshoot:
            amount = params.overshoot / 100 * self.upm * 0.02
            band = self.upm * 0.03
            if abs(y) < band:
                y -= amount
            if abs(y - x_height) < band:
                y += amount
            if abs(y - self.metrics.ascender) < band:
                y += amount
            if abs(y - self.metrics.descender) < band:
                y -= amount

        if params.optical_size:
            dx = x - center.x
            dy = y - center.y
            dist = math.hypot(dx, dy) or 1
            half_diag = math.hypot(bounds.width or 1, bounds.height or 1) / 2 or 1
            proximity = 1 - min(dist / half_diag, 1)
            offset = params.optical_size / 100 * self.upm * 0.015 * proximity
            x += dx / dist * offset
            y += dy / dist * offset

        return Point(x, y)

    def _ink_trap_sharpness(self, path: Path, normals: NormalField) -> dict[int, float]:
        """Dot product of each anchor's neighbouring normals, per contour."""
        sharpness: dict[int, float] = {}
        for contour_range in contour_ranges(path):
            indices = [
                i for i in range(contour_range.start, contour_range.end + 1) if i in normals.anchors
            ]
            count = len(indices)
            for j, index in enumerate(indices):
                prev_normal = normals.anchors[indices[(j - 1) % count]]
                next_normal = normals.anchors[indices[(j + 1) % count]]
                sharpness[index] = prev_normal.dot(next_normal)
        return sharpness

    @staticmethod
    def _offset(point: Point, normal: Vector, amount: float) -> Point:
        return Point(round(point.x + normal.x * amount), round(point.y + normal.y * amount))

    def _apply_normal_tools(
        self,
        index: int,
        seg: Segment,
        normals: NormalField,
        sharpness: dict[int, float],
    ) -> Segment:
        """Weight, contrast, ink trap and serif offsets for one segment."""
        params = self.params
        upm = self.upm

        if params.weight:
            amount = params.weight / 100 * upm * 0.05
            seg = seg.map_points(
                lambda f, p: self._offset(p, n, amount) if (n := normals.get(index, f)) else p
            )

        if params.contrast:
            factor = params.contrast / 100 * upm * 0.03
            seg = seg.map_points(
                lambda f, p: self._offset(p, n, factor * (n.x * n.x - n.y * n.y))
                if (n := normals.get(index, f))
                else p
            )

        anchor_normal = normals.get(index, PointField.END)
        if anchor_normal is None or seg.end is None:
            return seg

        if params.ink_trap:
            dot = sharpness.get(index)
            if dot is not None and dot < INK_TRAP_THRESHOLD:
                depth = params.ink_trap / 100 * upm * 0.02 * (1 - dot)
                seg = seg.with_point(PointField.END, self._offset(seg.end, anchor_normal, -depth))

        if params.serif and abs(anchor_normal.x) > SERIF_VERTICAL_THRESHOLD:
            y = seg.end.y  # type: ignore[union-attr]
            zone = upm * 0.04
            near_zone = any(
                abs(y - level) < zone
                for level in (
                    0.0,
                    self.metrics.x_height,
                    self.metrics.ascender,
                    self.metrics.descender,
                )
            )
            if near_zone:
                size = params.serif / 100 * upm * 0.04 * math.copysign(1, anchor_normal.x)
                seg = seg.with_point(
                    PointField.END,
                    self._offset(seg.end, anchor_normal.tangent, size),  # type: ignore[arg-type]
                )

        return seg

    def _scale_handles(self, seg: Segment, prev_anchor: Point | None) -> Segment:
        """Scale control handles by (1 + roundness/100) about their owning anchor."""
        factor = 1 + self.params.roundness / 100
        end = seg.end
        start = prev_anchor if prev_anchor is not None else end

        def scale(origin: Point, point: Point) -> Point:
            return Point(
                round(origin.x + (point.x - origin.x) * factor),
                round(origin.y + (point.y - origin.y) * factor),
            )

        if seg.type == SegmentType.CUBIC:
            return Segment(
                SegmentType.CUBIC,
                end=end,
                cp1=scale(start, seg.cp1),  # type: ignore[arg-type]
                cp2=scale(end, seg.cp2),  # type: ignore[arg-type]
            )

        mid = Point((start.x + end.x) / 2, (start.y + end.y) / 2)  # type: ignore[union-attr]
        return Segment(SegmentType.QUAD, end=end, cp1=scale(mid, seg.cp1))  # type: ignore[arg-type]


def apply_design_tools(
    path: Path,
    params: DesignParameters,
    metrics: FontMetrics,
) -> DesignResult:
    """Apply design parameters to one outline.

    Args:
        path: Source outline
        params: Slider values
        metrics: Font metrics

    Returns:
        DesignResult with the new outline and advance-width delta
    """
    return DesignToolPipeline(params, metrics).apply(path)
