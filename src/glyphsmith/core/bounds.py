"""Bounding box engine.

Computes the axis-aligned bounds of a glyph's ink. Outline paths are measured
exactly with fontTools' BoundsPen (true cubic extrema, not control points);
stroked paths are flattened and then grown by half the stroke thickness.
"""

import math
from collections.abc import Iterable

import structlog
from fontTools.pens.boundsPen import BoundsPen

from glyphsmith.config import GeometryConfig
from glyphsmith.core.geometry import flatten_path, vec_length, vec_sub
from glyphsmith.domain import (
    ORIGIN,
    BoundingBox,
    DotPath,
    GlyphData,
    OutlinePath,
    Path,
    Segment,
)

logger = structlog.get_logger(__name__)


class _Extents:
    """Running min/max accumulator."""

    __slots__ = ("min_x", "max_x", "min_y", "max_y")

    def __init__(self) -> None:
        self.min_x = math.inf
        self.max_x = -math.inf
        self.min_y = math.inf
        self.max_y = -math.inf

    def add(self, min_x: float, min_y: float, max_x: float, max_y: float) -> None:
        if not all(math.isfinite(v) for v in (min_x, min_y, max_x, max_y)):
            return
        self.min_x = min(self.min_x, min_x)
        self.max_x = max(self.max_x, max_x)
        self.min_y = min(self.min_y, min_y)
        self.max_y = max(self.max_y, max_y)

    @property
    def empty(self) -> bool:
        return self.min_x == math.inf

    def to_bbox(self) -> BoundingBox | None:
        if self.empty:
            return None
        return BoundingBox.from_extents(self.min_x, self.max_x, self.min_y, self.max_y)


def _draw_contour(pen: BoundsPen, segments: tuple[Segment, ...]) -> None:
    """Draw one closed cubic contour into a fontTools pen."""
    pen.moveTo(segments[0].point.to_tuple())
    count = len(segments)
    if count == 1:
        pen.closePath()
        return
    for i, seg in enumerate(segments):
        nxt = segments[(i + 1) % count]
        if seg.handle_out == ORIGIN and nxt.handle_in == ORIGIN:
            if i < count - 1:
                pen.lineTo(nxt.point.to_tuple())
            continue
        c1 = (seg.point.x + seg.handle_out.x, seg.point.y + seg.handle_out.y)
        c2 = (nxt.point.x + nxt.handle_in.x, nxt.point.y + nxt.handle_in.y)
        pen.curveTo(c1, c2, nxt.point.to_tuple())
    pen.closePath()


def outline_bounds(path: OutlinePath) -> tuple[float, float, float, float] | None:
    """Exact bounds of an outline's compound envelope.

    All non-empty contours are drawn into one pen. Under even-odd fill a hole
    lies inside its outer contour, so the union of contour bounds is the
    envelope of the compound shape.

    Returns:
        (min_x, min_y, max_x, max_y), or None if the outline has no contours
    """
    groups = path.non_empty_groups()
    if not groups:
        return None
    pen = BoundsPen(None)
    for group in groups:
        _draw_contour(pen, group)
    return pen.bounds


def compute_bounding_box(
    paths: Iterable[Path],
    stroke_thickness: float,
    config: GeometryConfig | None = None,
) -> BoundingBox | None:
    """Compute the bounding box of a set of paths.

    Args:
        paths: Paths to measure
        stroke_thickness: Active stroke thickness; strokes grow by half of it
        config: Flattening densities (defaults if None)

    Returns:
        Bounding box, or None if no path contributed a finite extent.
        A single point still yields a valid zero-size box.
    """
    config = config or GeometryConfig()
    half = stroke_thickness / 2
    extents = _Extents()

    for path in paths:
        if isinstance(path, OutlinePath):
            bounds = outline_bounds(path)
            if bounds is not None:
                extents.add(*bounds)
            continue

        if not path.points:
            continue

        if isinstance(path, DotPath):
            center = path.points[0]
            if len(path.points) > 1:
                radius = vec_length(vec_sub(path.points[1], center))
            else:
                radius = half
            extents.add(
                center.x - radius, center.y - radius, center.x + radius, center.y + radius
            )
            continue

        samples = flatten_path(
            path, pen_density=config.pen_density, curve_density=config.curve_density
        )
        if not samples:
            continue
        xs = [p.x for p in samples]
        ys = [p.y for p in samples]
        extents.add(min(xs) - half, min(ys) - half, max(xs) + half, max(ys) + half)

    return extents.to_bbox()


def glyph_bounding_box(
    glyph: GlyphData,
    stroke_thickness: float,
    config: GeometryConfig | None = None,
) -> BoundingBox | None:
    """Bounding box of a glyph, memoized on the glyph per stroke thickness.

    Args:
        glyph: Glyph to measure
        stroke_thickness: Active stroke thickness
        config: Flattening densities (defaults if None)

    Returns:
        Bounding box, or None if the glyph has no ink
    """
    cached = glyph.cached_bbox(stroke_thickness)
    if cached is not None:
        return cached.box

    box = compute_bounding_box(glyph.paths, stroke_thickness, config)
    glyph.store_bbox(stroke_thickness, box)
    logger.debug(
        "Computed glyph bounds",
        paths=len(glyph.paths),
        stroke_thickness=stroke_thickness,
        empty=box is None,
    )
    return box
