"""Outline simplification.

Reduces the number of segments of an outline while keeping its shape within
UPM-relative tolerances. Four stages run in order:

1. Quadratic -> cubic elevation (lossless)
2. Near-straight cubics become lines
3. Smooth chains of cubics are refit as single cubics (multi-pass)
4. Intermediate points on collinear line runs are dropped

Output coordinates are left unrounded; callers round when writing to a font.
"""

import logging
import math
from collections.abc import Sequence
from typing import NamedTuple

from outlinekit.config import SimplifierConfig
from outlinekit.core._bezier import cubic_arc_length, cubic_extrema_params, cubic_point, cubic_value
from outlinekit.core.contours import contour_ranges
from outlinekit.core.curves import path_to_cubics
from outlinekit.core.geometry import EPSILON_LENGTH, perpendicular_distance
from outlinekit.domain import BoundingBox, Path, Point, Segment, SegmentType

logger = logging.getLogger(__name__)

# Determinant below which the least-squares system is singular
SINGULAR_DETERMINANT = 1e-12

# Smallest handle length a least-squares fit may produce
MIN_HANDLE_LENGTH = 0.01


class _Cubic(NamedTuple):
    p0: Point
    p1: Point
    p2: Point
    p3: Point

    def arc_length(self) -> float:
        return cubic_arc_length(self.p0, self.p1, self.p2, self.p3)

    def at(self, t: float) -> Point:
        return cubic_point(self.p0, self.p1, self.p2, self.p3, t)


class _Sample(NamedTuple):
    point: Point
    u: float


def _unit(dx: float, dy: float) -> tuple[float, float, float]:
    length = math.hypot(dx, dy)
    return (dx / length, dy / length, length) if length >= EPSILON_LENGTH else (0.0, 0.0, length)


def _tangents_smooth(arrive: tuple[float, float], depart: tuple[float, float], threshold: float) -> bool:
    ax, ay, alen = _unit(*arrive)
    dx, dy, dlen = _unit(*depart)
    if alen < EPSILON_LENGTH or dlen < EPSILON_LENGTH:
        return True
    return ax * dx + ay * dy > threshold


def _sample_chain(chain: Sequence[_Cubic], samples_per_curve: int) -> list[_Sample]:
    """Interior samples of each curve, parameterised by cumulative arc length."""
    lengths = [c.arc_length() for c in chain]
    total = sum(lengths)
    if total < EPSILON_LENGTH:
        return []

    samples: list[_Sample] = []
    before = 0.0
    for curve, length in zip(chain, lengths):
        for s in range(1, samples_per_curve):
            t = s / samples_per_curve
            samples.append(_Sample(curve.at(t), (before + t * length) / total))
        before += length
    return samples


def _max_error_sq(chain: Sequence[_Cubic], cp1: Point, cp2: Point, samples_per_curve: int) -> float:
    start = chain[0].p0
    end = chain[-1].p3
    worst = 0.0
    for sample in _sample_chain(chain, samples_per_curve):
        fitted = cubic_point(start, cp1, cp2, end, sample.u)
        error = (sample.point.x - fitted.x) ** 2 + (sample.point.y - fitted.y) ** 2
        worst = max(worst, error)
    return worst


def _fit_least_squares(
    samples: Sequence[_Sample],
    start: Point,
    end: Point,
    t1: tuple[float, float],
    t2: tuple[float, float],
) -> tuple[Point, Point] | None:
    """Fit handle lengths along fixed end tangents (Graphics Gems curve fitting).

    Solves for alpha1, alpha2 with cp1 = start + alpha1*t1 and
    cp2 = end + alpha2*t2, minimising squared distance to the samples.
    """
    if not samples:
        return None

    c11 = c12 = c22 = x1 = x2 = 0.0
    for sample in samples:
        u = sample.u
        mu = 1 - u
        b0 = mu * mu * mu
        b1 = 3 * mu * mu * u
        b2 = 3 * mu * u * u
        b3 = u * u * u

        ex = sample.point.x - (b0 + b1) * start.x - (b2 + b3) * end.x
        ey = sample.point.y - (b0 + b1) * start.y - (b2 + b3) * end.y
        a1x, a1y = b1 * t1[0], b1 * t1[1]
        a2x, a2y = b2 * t2[0], b2 * t2[1]

        c11 += a1x * a1x + a1y * a1y
        c12 += a1x * a2x + a1y * a2y
        c22 += a2x * a2x + a2y * a2y
        x1 += a1x * ex + a1y * ey
        x2 += a2x * ex + a2y * ey

    det = c11 * c22 - c12 * c12
    if abs(det) < SINGULAR_DETERMINANT:
        return None

    alpha1 = (x1 * c22 - x2 * c12) / det
    alpha2 = (x2 * c11 - x1 * c12) / det
    if alpha1 < MIN_HANDLE_LENGTH or alpha2 < MIN_HANDLE_LENGTH:
        return None

    return (
        Point(start.x + alpha1 * t1[0], start.y + alpha1 * t1[1]),
        Point(end.x + alpha2 * t2[0], end.y + alpha2 * t2[1]),
    )


class OutlineSimplifier:
    """Simplifies glyph outlines with tolerances scaled to the font's UPM.

    Example:
        simplifier = OutlineSimplifier(SimplifierConfig(), units_per_em=1000)
        simpler = simplifier.simplify(path)
    """

    def __init__(self, config: SimplifierConfig, units_per_em: int) -> None:
        self.config = config
        self.units_per_em = units_per_em
        self.curve_tolerance = config.get_curve_tolerance(units_per_em)
        self.straight_tolerance = config.get_straight_tolerance(units_per_em)
        self.extremum_tolerance = config.get_extremum_tolerance(units_per_em)
        self.line_tolerance = config.get_line_tolerance(units_per_em)

    def simplify(self, path: Path) -> Path:
        """Run all simplification stages over a path.

        Paths without curves are returned unchanged.

        Args:
            path: Outline to simplify

        Returns:
            Simplified outline (unrounded)
        """
        if path.is_empty() or not path.has_curves():
            return path

        result = path_to_cubics(path)
        result = self.straighten_curves(result)

        for _ in range(self.config.max_passes):
            before = len(result)
            result = self.merge_cubics(result)
            if len(result) >= before:
                break

        result = self.remove_collinear_points(result)
        logger.debug("Simplified %d segments to %d", len(path), len(result))
        return result

    def straighten_curves(self, path: Path) -> Path:
        """Replace cubics whose controls hug the chord with lines."""
        segments: list[Segment] = []
        current = Point(0, 0)
        for seg in path:
            if seg.type == SegmentType.CUBIC and current.distance_to(seg.end) >= EPSILON_LENGTH:  # type: ignore[arg-type]
                d1 = perpendicular_distance(seg.cp1, current, seg.end)  # type: ignore[arg-type]
                d2 = perpendicular_distance(seg.cp2, current, seg.end)  # type: ignore[arg-type]
                if d1 < self.straight_tolerance and d2 < self.straight_tolerance:
                    seg = Segment(SegmentType.LINE, end=seg.end)
            segments.append(seg)
            if seg.end is not None:
                current = seg.end
        return Path(segments)

    def _contour_extrema(self, path: Path) -> tuple[list[int], list[BoundingBox | None]]:
        """Contour index of every segment and each contour's true-extrema box."""
        owners = [-1] * len(path)
        boxes: list[BoundingBox | None] = []
        for index, contour_range in enumerate(contour_ranges(path)):
            points: list[Point] = []
            current = Point(0, 0)
            for i in range(contour_range.start, contour_range.end + 1):
                owners[i] = index
                seg = path[i]
                if seg.end is None:
                    continue
                points.append(seg.end)
                if seg.type == SegmentType.CUBIC:
                    xs = (current.x, seg.cp1.x, seg.cp2.x, seg.end.x)  # type: ignore[union-attr]
                    ys = (current.y, seg.cp1.y, seg.cp2.y, seg.end.y)  # type: ignore[union-attr]
                    for t in cubic_extrema_params(*xs):
                        points.append(Point(cubic_value(*xs, t), seg.end.y))
                    for t in cubic_extrema_params(*ys):
                        points.append(Point(seg.end.x, cubic_value(*ys, t)))
                current = seg.end
            boxes.append(BoundingBox.from_points(points) if points else None)
        return owners, boxes

    def _is_extremum(self, point: Point, box: BoundingBox | None) -> bool:
        if box is None:
            return False
        tol = self.extremum_tolerance
        return (
            abs(point.x - box.min_x) < tol
            or abs(point.x - box.max_x) < tol
            or abs(point.y - box.min_y) < tol
            or abs(point.y - box.max_y) < tol
        )

    def _try_merge(self, chain: Sequence[_Cubic]) -> tuple[Point, Point] | None:
        """Fit one cubic to a chain, by least squares then by handle scaling."""
        if len(chain) < 2:
            return None

        first = chain[0]
        last = chain[-1]
        start = first.p0
        end = last.p3
        tol_sq = self.curve_tolerance * self.curve_tolerance
        samples_per_curve = self.config.samples_per_segment

        t1x, t1y, dep_len = _unit(first.p1.x - start.x, first.p1.y - start.y)
        if dep_len < EPSILON_LENGTH:
            t1x, t1y, dep_len = _unit(first.p3.x - start.x, first.p3.y - start.y)
            if dep_len < EPSILON_LENGTH:
                return None

        t2x, t2y, arr_len = _unit(last.p2.x - end.x, last.p2.y - end.y)
        if arr_len < EPSILON_LENGTH:
            t2x, t2y, arr_len = _unit(last.p0.x - end.x, last.p0.y - end.y)
            if arr_len < EPSILON_LENGTH:
                return None

        samples = _sample_chain(chain, samples_per_curve)
        fit = _fit_least_squares(samples, start, end, (t1x, t1y), (t2x, t2y))
        if fit is not None and _max_error_sq(chain, *fit, samples_per_curve) <= tol_sq:
            return fit

        total = sum(c.arc_length() for c in chain)
        h1 = dep_len / (first.arc_length() or 1) * total
        h2 = arr_len / (last.arc_length() or 1) * total
        fallback = (
            Point(start.x + t1x * h1, start.y + t1y * h1),
            Point(end.x + t2x * h2, end.y + t2y * h2),
        )
        if _max_error_sq(chain, *fallback, samples_per_curve) <= tol_sq:
            return fallback
        return None

    def merge_cubics(self, path: Path) -> Path:
        """One pass of merging consecutive smooth cubics.

        A chain grows while the next segment is a cubic of the same contour,
        the junction is not on the contour's extremum box, the tangents agree
        and the refit stays within tolerance.
        """
        owners, boxes = self._contour_extrema(path)
        segments: list[Segment] = []
        current = Point(0, 0)
        i = 0

        while i < len(path):
            seg = path[i]
            if seg.type != SegmentType.CUBIC:
                segments.append(seg)
                if seg.end is not None:
                    current = seg.end
                i += 1
                continue

            chain = [_Cubic(current, seg.cp1, seg.cp2, seg.end)]  # type: ignore[arg-type]
            merged: tuple[Point, Point] | None = None
            j = i + 1

            while j < len(path):
                nxt = path[j]
                if nxt.type != SegmentType.CUBIC or owners[j] != owners[i]:
                    break
                junction = chain[-1].p3
                box = boxes[owners[j]] if owners[j] >= 0 else None
                if self._is_extremum(junction, box):
                    break
                arrive = (junction.x - chain[-1].p2.x, junction.y - chain[-1].p2.y)
                depart = (nxt.cp1.x - junction.x, nxt.cp1.y - junction.y)  # type: ignore[union-attr]
                if not _tangents_smooth(arrive, depart, self.config.tangent_threshold):
                    break

                chain.append(_Cubic(junction, nxt.cp1, nxt.cp2, nxt.end))  # type: ignore[arg-type]
                fit = self._try_merge(chain)
                if fit is None:
                    chain.pop()
                    break
                merged = fit
                j += 1

            if merged is not None:
                end = chain[-1].p3
                segments.append(Segment(SegmentType.CUBIC, end=end, cp1=merged[0], cp2=merged[1]))
                current = end
                i = j
            else:
                segments.append(seg)
                current = seg.end  # type: ignore[assignment]
                i += 1

        return Path(segments)

    def remove_collinear_points(self, path: Path) -> Path:
        """Drop line anchors that sit on the line between their neighbours."""
        segments: list[Segment] = []
        i = 0
        count = len(path)

        while i < count:
            seg = path[i]
            if seg.type != SegmentType.LINE:
                segments.append(seg)
                i += 1
                continue

            j = i + 1
            while j < count and path[j].type == SegmentType.LINE:
                j += 1
            if j == i + 1:
                segments.append(seg)
                i += 1
                continue

            start = next(
                (s.end for s in reversed(segments) if s.end is not None), Point(0, 0)
            )
            points = [start] + [path[k].end for k in range(i, j)]
            keep = {j - 1 - i}  # positions in the run, last point always kept

            anchor = 0
            for k in range(2, len(points)):
                a = points[anchor]
                b = points[k]
                if a.distance_to(b) < EPSILON_LENGTH:  # type: ignore[arg-type]
                    continue
                worst = max(
                    perpendicular_distance(points[m], a, b)  # type: ignore[arg-type]
                    for m in range(anchor + 1, k)
                )
                if worst > self.line_tolerance:
                    keep.add(k - 2)
                    anchor = k - 1

            segments.extend(path[i + offset] for offset in sorted(keep))
            i = j

        return Path(segments)


def simplify_outline(
    path: Path,
    units_per_em: int,
    config: SimplifierConfig | None = None,
) -> Path:
    """Simplify an outline with default or custom tolerances.

    Args:
        path: Outline to simplify
        units_per_em: Font UPM the tolerances scale with
        config: Tolerance settings (defaults if None)

    Returns:
        Simplified outline
    """
    return OutlineSimplifier(config or SimplifierConfig(), units_per_em).simplify(path)
