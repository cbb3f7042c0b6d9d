"""Geometric primitives for glyph measurement.

This module provides core mathematical utilities for:
- 2D vector arithmetic on Points
- Quadratic curve sampling into polylines
- Free-hand (pen) stroke smoothing through point midpoints
- Closed cubic contour flattening for outline paths

All functions are pure, stateless, and designed for use in parallel processing.
Functions that need more points than they are given return the input unchanged.
"""

import math
from collections.abc import Sequence

from glyphsmith.core._bezier import flatten_cubic as _flatten_cubic
from glyphsmith.core._bezier import sample_quadratic as _sample_quadratic
from glyphsmith.domain import (
    ORIGIN,
    CalligraphyPath,
    CurvePath,
    OutlinePath,
    Path,
    PenPath,
    Point,
    Segment,
)

DEFAULT_PEN_DENSITY = 15
DEFAULT_CURVE_DENSITY = 10
NORMALIZE_EPSILON = 1e-6


def vec_add(a: Point, b: Point) -> Point:
    return Point(a.x + b.x, a.y + b.y)


def vec_sub(a: Point, b: Point) -> Point:
    return Point(a.x - b.x, a.y - b.y)


def vec_scale(p: Point, s: float) -> Point:
    return Point(p.x * s, p.y * s)


def vec_length(p: Point) -> float:
    return math.hypot(p.x, p.y)


def vec_normalize(p: Point, epsilon: float = NORMALIZE_EPSILON) -> Point:
    """Scale a vector to unit length.

    Args:
        p: Vector to normalize
        epsilon: Length at or below which the vector counts as zero

    Returns:
        Unit vector, or the zero vector for (near) zero-length input
    """
    length = vec_length(p)
    if length <= epsilon:
        return Point(0.0, 0.0)
    return vec_scale(p, 1.0 / length)


def vec_perp(p: Point) -> Point:
    """Rotate a vector by 90 degrees."""
    return Point(-p.y, p.x)


def vec_dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def vec_rotate(p: Point, angle: float) -> Point:
    """Rotate a vector by angle radians."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Point(p.x * cos_a - p.y * sin_a, p.x * sin_a + p.y * cos_a)


def quadratic_curve_to_polyline(
    points: Sequence[Point], density: int = DEFAULT_CURVE_DENSITY
) -> list[Point]:
    """Sample a single quadratic curve into a polyline.

    Args:
        points: Exactly three points [start, control, end]
        density: Number of line segments

    Returns:
        density + 1 points from start to end, or the input unchanged
        if it does not hold exactly three points
    """
    if len(points) != 3:
        return list(points)
    p0, p1, p2 = points
    return [p0, *_sample_quadratic(p0, p1, p2, density)]


def curve_to_polyline(
    points: Sequence[Point], density: int = DEFAULT_PEN_DENSITY
) -> list[Point]:
    """Smooth a free-hand stroke into a polyline.

    Each interior point is used as the control point of a quadratic piece
    that runs between consecutive point midpoints. The first piece starts at
    the first point and the last piece ends exactly at the last point.

    Args:
        points: Raw stroke points
        density: Number of line segments per quadratic piece

    Returns:
        Smoothed polyline, or the input unchanged for fewer than 3 points

    Examples:
        >>> pts = [Point(0, 0), Point(10, 10), Point(20, 0)]
        >>> len(curve_to_polyline(pts, density=4))
        5
    """
    if len(points) < 3:
        return list(points)

    polyline = [points[0]]
    start = points[0]
    for i in range(1, len(points) - 2):
        control = points[i]
        end = Point(
            (points[i].x + points[i + 1].x) / 2,
            (points[i].y + points[i + 1].y) / 2,
        )
        polyline.extend(_sample_quadratic(start, control, end, density))
        start = end

    polyline.extend(_sample_quadratic(start, points[-2], points[-1], density))
    return polyline


def flatten_cubic_segment(
    start: Segment, end: Segment, tolerance: float
) -> list[Point]:
    """Flatten the contour piece running from one segment to the next.

    Args:
        start: Segment the piece leaves (its handle_out is used)
        end: Segment the piece arrives at (its handle_in is used)
        tolerance: Maximum distance from the true curve

    Returns:
        Points from start.point to end.point inclusive
    """
    p0 = start.point
    p3 = end.point
    if start.handle_out == ORIGIN and end.handle_in == ORIGIN:
        return [p0, p3]
    p1 = vec_add(p0, start.handle_out)
    p2 = vec_add(p3, end.handle_in)
    return _flatten_cubic([p0, p1, p2, p3], tolerance)


def flatten_outline_group(
    segments: Sequence[Segment], tolerance: float
) -> list[Point]:
    """Flatten one closed cubic contour into a polygon.

    Args:
        segments: Contour vertices; the last one connects back to the first
        tolerance: Maximum distance from the true curve

    Returns:
        Polygon points without the closing duplicate of the first point
    """
    if not segments:
        return []
    if len(segments) == 1:
        return [segments[0].point]

    points: list[Point] = []
    count = len(segments)
    for i, seg in enumerate(segments):
        piece = flatten_cubic_segment(seg, segments[(i + 1) % count], tolerance)
        points.extend(piece[:-1])
    return points


def flatten_path(
    path: Path,
    pen_density: int = DEFAULT_PEN_DENSITY,
    curve_density: int = DEFAULT_CURVE_DENSITY,
    outline_tolerance: float = 1.0,
) -> list[Point]:
    """Produce the sample points of any path kind.

    Pen and calligraphy strokes with more than two points are smoothed,
    a three-point curve is sampled, outline contours are flattened one after
    another, and every other path contributes its raw points.

    Args:
        path: Path to flatten
        pen_density: Segments per piece for pen/calligraphy strokes
        curve_density: Segments for a quadratic curve path
        outline_tolerance: Flattening tolerance for outline contours

    Returns:
        Sample points (may be empty)
    """
    if isinstance(path, OutlinePath):
        points: list[Point] = []
        for group in path.non_empty_groups():
            points.extend(flatten_outline_group(group, outline_tolerance))
        return points
    if isinstance(path, (PenPath, CalligraphyPath)) and len(path.points) > 2:
        return curve_to_polyline(path.points, pen_density)
    if isinstance(path, CurvePath) and len(path.points) == 3:
        return quadratic_curve_to_polyline(path.points, curve_density)
    return list(path.points)
