"""Vertical zone classification.

Splits a glyph's sample points into ascender, x-height and descender boxes
relative to the font's top line and baseline. Every boundary carries an
inclusive tolerance band of half the stroke thickness, so a point sitting on
a guide belongs to both zones that meet there.
"""

import math

from glyphsmith.config import GeometryConfig
from glyphsmith.core.bounds import glyph_bounding_box
from glyphsmith.core.geometry import flatten_path
from glyphsmith.domain import Box, GlyphData, Point, ZoneBoxes


class _ZoneAccumulator:
    __slots__ = ("min_x", "max_x", "min_y", "max_y")

    def __init__(self) -> None:
        self.min_x = math.inf
        self.max_x = -math.inf
        self.min_y = math.inf
        self.max_y = -math.inf

    def add(self, p: Point) -> None:
        self.min_x = min(self.min_x, p.x)
        self.max_x = max(self.max_x, p.x)
        self.min_y = min(self.min_y, p.y)
        self.max_y = max(self.max_y, p.y)

    def to_box(self, inflate: float) -> Box | None:
        if self.min_x == math.inf:
            return None
        return Box(self.min_x, self.max_x, self.min_y, self.max_y).inflated(inflate)


def classify_point(
    y: float, baseline_y: float, topline_y: float, tolerance: float
) -> tuple[bool, bool, bool]:
    """Zone membership of a Y coordinate.

    Returns:
        (ascender, x_height, descender) flags; more than one may be set
    """
    return (
        y <= topline_y + tolerance,
        topline_y - tolerance <= y <= baseline_y + tolerance,
        y >= baseline_y - tolerance,
    )


def compute_zone_boxes(
    glyph: GlyphData,
    baseline_y: float,
    topline_y: float,
    stroke_thickness: float,
    config: GeometryConfig | None = None,
) -> ZoneBoxes | None:
    """Compute the zone boxes of a glyph.

    Args:
        glyph: Glyph to classify
        baseline_y: Y of the baseline
        topline_y: Y of the top line (smaller than baseline_y)
        stroke_thickness: Active stroke thickness
        config: Flattening densities and tolerances (defaults if None)

    Returns:
        Zone boxes, or None if the glyph has no measurable ink
    """
    config = config or GeometryConfig()
    full = glyph_bounding_box(glyph, stroke_thickness, config)
    if full is None:
        return None

    tolerance = stroke_thickness / 2
    ascender = _ZoneAccumulator()
    x_height = _ZoneAccumulator()
    descender = _ZoneAccumulator()

    for path in glyph.paths:
        samples = flatten_path(
            path,
            pen_density=config.pen_density,
            curve_density=config.curve_density,
            outline_tolerance=config.zone_flatten_tolerance,
        )
        for point in samples:
            in_asc, in_x, in_desc = classify_point(point.y, baseline_y, topline_y, tolerance)
            if in_asc:
                ascender.add(point)
            if in_x:
                x_height.add(point)
            if in_desc:
                descender.add(point)

    return ZoneBoxes(
        full=full.to_box(),
        ascender=ascender.to_box(tolerance),
        x_height=x_height.to_box(tolerance),
        descender=descender.to_box(tolerance),
    )


def boxes_collide(a: Box | None, b: Box | None) -> bool:
    """Inclusive axis-aligned overlap test; touching edges collide.

    A missing box never collides.
    """
    if a is None or b is None:
        return False
    return not (
        a.max_x < b.min_x or a.min_x > b.max_x or a.max_y < b.min_y or a.min_y > b.max_y
    )
