"""Core outline algorithms for outlinekit.

This module contains the geometry engine:
- Contour model: winding, fill/cutout, duplicate removal
- Curve degree algebra: split, promote, demote, bulk conversion
- Affine transforms on contour selections
- Normal field and design tool pipeline
- Outline simplifier
- Boolean indent and line slicing
- Point editing

The batch processor lives in outlinekit.core.processor and is imported
from there directly.
"""

from outlinekit.core.contours import (
    contour_ranges,
    contour_winding,
    is_clockwise,
    make_cutout,
    make_fill,
    remove_duplicate_points,
    reverse_contour,
    reverse_contours,
)
from outlinekit.core.curves import (
    convert_segment,
    demote_segment,
    path_to_cubics,
    path_to_quadratics,
    promote_segment,
    split_path_segment,
    split_segment,
)
from outlinekit.core.design import DesignResult, DesignToolPipeline, apply_design_tools
from outlinekit.core.editing import EditablePoint, break_segment, delete_points, editable_points
from outlinekit.core.indent import ShapelyClipper, make_indent
from outlinekit.core.normals import NormalField, compute_normal_field
from outlinekit.core.simplifier import OutlineSimplifier, simplify_outline
from outlinekit.core.slicer import (
    LineIntersection,
    find_line_path_intersections,
    slice_path_with_line,
)
from outlinekit.core.transform import (
    FlipAxis,
    apply_transform,
    flip_contours,
    rotate_contours,
    scale_contours,
    skew_contours,
    translate_contours,
)

__all__ = [
    "DesignResult",
    "DesignToolPipeline",
    "EditablePoint",
    "FlipAxis",
    "LineIntersection",
    "NormalField",
    "OutlineSimplifier",
    "ShapelyClipper",
    "apply_design_tools",
    "apply_transform",
    "break_segment",
    "compute_normal_field",
    "contour_ranges",
    "contour_winding",
    "convert_segment",
    "delete_points",
    "demote_segment",
    "editable_points",
    "find_line_path_intersections",
    "flip_contours",
    "is_clockwise",
    "make_cutout",
    "make_fill",
    "make_indent",
    "path_to_cubics",
    "path_to_quadratics",
    "promote_segment",
    "remove_duplicate_points",
    "reverse_contour",
    "reverse_contours",
    "rotate_contours",
    "scale_contours",
    "simplify_outline",
    "skew_contours",
    "slice_path_with_line",
    "split_path_segment",
    "split_segment",
    "translate_contours",
]
