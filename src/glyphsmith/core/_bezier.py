"""Internal Bezier curve sampling and flattening algorithms.

This is an internal module containing helper functions for core.geometry.
Not intended for public use.
"""

import math

from glyphsmith.domain import Point


def quadratic_point(t: float, p0: Point, p1: Point, p2: Point) -> Point:
    """Evaluate a quadratic Bezier curve at parameter t."""
    u = 1.0 - t
    return Point(
        u * u * p0.x + 2 * u * t * p1.x + t * t * p2.x,
        u * u * p0.y + 2 * u * t * p1.y + t * t * p2.y,
    )


def sample_quadratic(p0: Point, p1: Point, p2: Point, density: int) -> list[Point]:
    """Sample a quadratic curve at t = 1/density .. 1.

    The start point is not included so consecutive pieces can be chained.

    Args:
        p0: Start point
        p1: Control point
        p2: End point
        density: Number of line segments for the piece

    Returns:
        density points, the last one equal to p2
    """
    return [quadratic_point(j / density, p0, p1, p2) for j in range(1, density + 1)]


def flatten_cubic(points: list[Point], tolerance: float) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses De Casteljau's algorithm for subdivision.

    Args:
        points: List of 4 control points [p0, p1, p2, p3]
        tolerance: Maximum distance from true curve

    Returns:
        List of points approximating the curve, both endpoints included
    """
    p0, p1, p2, p3 = points

    curve_mid_x = 0.125 * (p0.x + 3 * p1.x + 3 * p2.x + p3.x)
    curve_mid_y = 0.125 * (p0.y + 3 * p1.y + 3 * p2.y + p3.y)
    line_mid_x = (p0.x + p3.x) / 2
    line_mid_y = (p0.y + p3.y) / 2

    # Control points off the chord can hide an S-bend with a centered midpoint
    chord_ok = math.hypot(curve_mid_x - line_mid_x, curve_mid_y - line_mid_y) <= tolerance
    if chord_ok and _controls_near_chord(p0, p1, p2, p3, tolerance):
        return [p0, p3]

    q1 = _mid(p0, p1)
    q2 = _mid(p1, p2)
    q3 = _mid(p2, p3)
    r1 = _mid(q1, q2)
    r2 = _mid(q2, q3)
    mid = _mid(r1, r2)

    left = flatten_cubic([p0, q1, r1, mid], tolerance)
    right = flatten_cubic([mid, r2, q3, p3], tolerance)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right


def _mid(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def _controls_near_chord(
    p0: Point, p1: Point, p2: Point, p3: Point, tolerance: float
) -> bool:
    dx = p3.x - p0.x
    dy = p3.y - p0.y
    length = math.hypot(dx, dy)
    if length < 1e-9:
        return (
            math.hypot(p1.x - p0.x, p1.y - p0.y) <= tolerance
            and math.hypot(p2.x - p0.x, p2.y - p0.y) <= tolerance
        )
    d1 = abs((p1.x - p0.x) * dy - (p1.y - p0.y) * dx) / length
    d2 = abs((p2.x - p0.x) * dy - (p2.y - p0.y) * dx) / length
    return d1 <= tolerance and d2 <= tolerance
