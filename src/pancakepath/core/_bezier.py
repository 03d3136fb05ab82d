"""Internal Bezier curve flattening algorithms.

This is an internal module containing helper functions for bezier_flatten.
Not intended for public use.
"""

import math

from pancakepath.domain import Point

# Subdivision depth after which a segment is accepted regardless of flatness.
MAX_DEPTH = 16


def flatten_quadratic(points: list[Point], tolerance: float, depth: int = 0) -> list[Point]:
    """Flatten a quadratic Bezier curve using recursive subdivision.

    Args:
        points: List of 3 control points [p0, p1, p2]
        tolerance: Maximum distance from true curve
        depth: Current recursion depth

    Returns:
        List of on-curve points approximating the curve
    """
    p0, p1, p2 = points

    # Curve midpoint (t=0.5) against the chord midpoint
    curve_mid_x = 0.25 * p0.x + 0.5 * p1.x + 0.25 * p2.x
    curve_mid_y = 0.25 * p0.y + 0.5 * p1.y + 0.25 * p2.y
    chord_mid_x = (p0.x + p2.x) / 2
    chord_mid_y = (p0.y + p2.y) / 2

    distance = math.hypot(curve_mid_x - chord_mid_x, curve_mid_y - chord_mid_y)

    if distance <= tolerance or depth >= MAX_DEPTH:
        return [Point(p0.x, p0.y), Point(p2.x, p2.y)]

    # Subdivide at t=0.5
    mid = Point(curve_mid_x, curve_mid_y)
    left = [p0, Point((p0.x + p1.x) / 2, (p0.y + p1.y) / 2), mid]
    right = [mid, Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2), p2]

    # Combine, avoiding duplicate midpoint
    return (
        flatten_quadratic(left, tolerance, depth + 1)[:-1]
        + flatten_quadratic(right, tolerance, depth + 1)
    )


def flatten_cubic(points: list[Point], tolerance: float, depth: int = 0) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses De Casteljau's algorithm for subdivision. Both control points are
    checked against the chord so S-shaped curves whose midpoint happens to lie
    on the chord still get subdivided.

    Args:
        points: List of 4 control points [p0, p1, p2, p3]
        tolerance: Maximum distance from true curve
        depth: Current recursion depth

    Returns:
        List of on-curve points approximating the curve
    """
    p0, p1, p2, p3 = points

    deviation = max(
        _distance_to_line(p1, p0, p3),
        _distance_to_line(p2, p0, p3),
    )
    # Control polygon deviation bounds the curve deviation by 3/4
    if deviation * 0.75 <= tolerance or depth >= MAX_DEPTH:
        return [Point(p0.x, p0.y), Point(p3.x, p3.y)]

    # First level
    q1 = Point((p0.x + p1.x) / 2, (p0.y + p1.y) / 2)
    q2 = Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
    q3 = Point((p2.x + p3.x) / 2, (p2.y + p3.y) / 2)

    # Second level
    r1 = Point((q1.x + q2.x) / 2, (q1.y + q2.y) / 2)
    r2 = Point((q2.x + q3.x) / 2, (q2.y + q3.y) / 2)

    # Third level (midpoint)
    mid = Point((r1.x + r2.x) / 2, (r1.y + r2.y) / 2)

    left = flatten_cubic([p0, q1, r1, mid], tolerance, depth + 1)
    right = flatten_cubic([mid, r2, q3, p3], tolerance, depth + 1)

    return left[:-1] + right


def _distance_to_line(point: Point, start: Point, end: Point) -> float:
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length < 1e-12:
        return math.hypot(point.x - start.x, point.y - start.y)
    return abs(dx * (start.y - point.y) - dy * (start.x - point.x)) / length
