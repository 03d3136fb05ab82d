"""Geometric operations on contours and shapes.

This module provides core mathematical utilities for:
- Bezier curve flattening
- Flattening whole contours and compound shapes into polygons
- Path length measurement
- Bounding box overlap tests

All functions are pure and stateless.
"""

import math

from pancakepath.core._bezier import flatten_cubic as _flatten_cubic
from pancakepath.core._bezier import flatten_quadratic as _flatten_quadratic
from pancakepath.domain import CompoundShape, Contour, Point, PointType
from pancakepath.exceptions import ContourError


def bezier_flatten(points: list[Point], tolerance: float = 1.0) -> list[Point]:
    """Convert Bezier curve to line segments using recursive subdivision.

    Handles both quadratic (3 points) and cubic (4 points) Bezier curves.
    Uses recursive subdivision until the curve is flat enough (within tolerance).

    Args:
        points: Control points of the Bezier curve (3 for quadratic, 4 for cubic)
        tolerance: Maximum distance from true curve

    Returns:
        List of points forming line segments that approximate the curve

    Raises:
        ValueError: If points list is not of length 2, 3 or 4
    """
    if len(points) == 2:
        # Already a line segment
        return points
    elif len(points) == 3:
        return _flatten_quadratic(points, tolerance)
    elif len(points) == 4:
        return _flatten_cubic(points, tolerance)
    else:
        raise ValueError(f"Expected 2-4 points for Bezier curve, got {len(points)}")


def _expand_implied_points(points: list[Point], closed: bool) -> list[Point]:
    """Insert the implied on-curve point between consecutive quadratic controls."""
    n = len(points)
    expanded: list[Point] = []
    for i in range(n):
        curr = points[i]
        expanded.append(curr)

        if i == n - 1 and not closed:
            break

        next_pt = points[(i + 1) % n]
        if (
            curr.point_type == PointType.OFF_CURVE_QUAD
            and next_pt.point_type == PointType.OFF_CURVE_QUAD
        ):
            expanded.append(
                Point((curr.x + next_pt.x) / 2, (curr.y + next_pt.y) / 2, PointType.ON_CURVE)
            )

    return expanded


def flatten_contour(contour: Contour, resolution: float) -> Contour:
    """Approximate a contour's curves with straight segments.

    Args:
        contour: Contour possibly containing Bezier control points
        resolution: Maximum distance between the polygon and the true curve

    Returns:
        New contour with only on-curve points and the same closed flag

    Raises:
        ValueError: If resolution is not positive
        ContourError: If the contour's control points cannot form curves
    """
    if resolution <= 0:
        raise ValueError(f"Flatten resolution must be positive, got {resolution}")

    if contour.is_flat():
        return Contour(points=[Point(p.x, p.y) for p in contour.points], closed=contour.closed)

    points = _expand_implied_points(contour.points, contour.closed)
    if points[0].point_type != PointType.ON_CURVE:
        raise ContourError("Contour must start with an on-curve point")

    n = len(points)
    flat: list[Point] = [points[0]]
    i = 0
    while i < n:
        # Find next on-curve point
        j = i + 1
        while j < n and points[j].point_type != PointType.ON_CURVE:
            j += 1

        if j < n:
            segment = points[i : j + 1]
        elif contour.closed:
            # Closing segment wraps around to the first point
            segment = points[i:] + [points[0]]
        elif j - i > 1:
            raise ContourError("Open contour ends with control points")
        else:
            break

        try:
            flat.extend(bezier_flatten(segment, resolution)[1:])
        except ValueError as e:
            raise ContourError(str(e)) from e
        i = j

    # The closing segment lands back on the first point
    if contour.closed and len(flat) > 1 and flat[-1].to_tuple() == flat[0].to_tuple():
        flat.pop()

    return Contour(points=[Point(p.x, p.y) for p in flat], closed=contour.closed)


def flatten_shape(shape: CompoundShape, resolution: float) -> CompoundShape:
    """Flatten every contour of a shape.

    Args:
        shape: Shape to flatten
        resolution: Maximum distance between the polygons and the true curves

    Returns:
        New shape made only of polygons
    """
    return CompoundShape(
        contours=[flatten_contour(c, resolution) for c in shape.contours],
        fill_rule=shape.fill_rule,
    )


def contour_length(contour: Contour) -> float:
    """Length of a flattened contour, including the closing edge if closed."""
    points = contour.points
    if len(points) < 2:
        return 0.0

    length = sum(
        math.hypot(points[i + 1].x - points[i].x, points[i + 1].y - points[i].y)
        for i in range(len(points) - 1)
    )
    if contour.closed:
        length += math.hypot(points[0].x - points[-1].x, points[0].y - points[-1].y)
    return length


def shape_length(shape: CompoundShape, resolution: float = 0.5) -> float:
    """Total path length of a shape, curves measured after flattening."""
    return sum(contour_length(flatten_contour(c, resolution)) for c in shape.contours)


def shape_area(shape: CompoundShape, resolution: float = 0.5) -> float:
    """Signed area sum of a shape's closed contours after flattening.

    Holes wound opposite to their outer contour subtract from the total.
    """
    return sum(flatten_contour(c, resolution).signed_area() for c in shape.contours)


def bounds_overlap(
    a: tuple[float, float, float, float],
    b: tuple[float, float, float, float],
) -> bool:
    """Check whether two (min_x, min_y, max_x, max_y) boxes intersect."""
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]
