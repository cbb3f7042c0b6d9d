"""Conversion between fonttools pen recordings and domain outline contours.

Font outlines come in with Y growing upward and arbitrary units per em. The
editor frame is 1000 units per em with Y growing downward from a fixed
baseline, so every point is scaled, flipped and rounded on the way in.
"""

from dataclasses import dataclass
from typing import Any

from fontTools.misc.roundTools import otRound
from fontTools.pens.basePen import decomposeQuadraticSegment
from fontTools.pens.recordingPen import RecordingPen
from fontTools.ttLib import TTFont

from glyphsmith.domain.contour import ORIGIN, Point, Segment
from glyphsmith.domain.path import OutlinePath

# Closing points nearer than this to the contour start are merged into it
CLOSE_MERGE_DISTANCE = 1.0

_TWO_THIRDS = 2.0 / 3.0


@dataclass
class _Vertex:
    """Mutable segment under construction."""

    point: Point
    handle_in: Point = ORIGIN
    handle_out: Point = ORIGIN

    def freeze(self) -> Segment:
        return Segment(self.point, self.handle_in, self.handle_out)


def _relative(target: Point, anchor: Point) -> Point:
    return Point(target.x - anchor.x, target.y - anchor.y)


def _close_contour(vertices: list[_Vertex]) -> tuple[Segment, ...]:
    """Freeze a contour, folding a duplicated closing point into the first one."""
    if len(vertices) > 1:
        first, last = vertices[0], vertices[-1]
        if (
            abs(last.point.x - first.point.x) < CLOSE_MERGE_DISTANCE
            and abs(last.point.y - first.point.y) < CLOSE_MERGE_DISTANCE
        ):
            first.handle_in = last.handle_in
            vertices.pop()
    return tuple(v.freeze() for v in vertices)


def recording_to_segment_groups(
    recording: list[tuple[str, tuple[Any, ...]]],
    scale: float = 1.0,
    base_line_y: float = 0.0,
) -> list[tuple[Segment, ...]]:
    """Convert a RecordingPen recording to editor-space segment groups.

    The RecordingPen records drawing commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), (x2, y2), ...))  # Quadratic, implied on-curves
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
    - ('closePath', ())

    Quadratic pieces are raised to cubic. Handles are stored relative to
    their on-curve point.

    Args:
        recording: List of drawing commands from RecordingPen
        scale: Factor from font units to editor units
        base_line_y: Editor Y of the font's y=0 line

    Returns:
        One tuple of segments per contour
    """

    def to_editor(pt: tuple[float, float]) -> Point:
        x, y = pt
        return Point(float(otRound(x * scale)), float(otRound(base_line_y - y * scale)))

    groups: list[tuple[Segment, ...]] = []
    vertices: list[_Vertex] = []

    def quad_to(control: Point, end: Point) -> None:
        prev = vertices[-1]
        cp1 = Point(
            prev.point.x + _TWO_THIRDS * (control.x - prev.point.x),
            prev.point.y + _TWO_THIRDS * (control.y - prev.point.y),
        )
        cp2 = Point(
            end.x + _TWO_THIRDS * (control.x - end.x),
            end.y + _TWO_THIRDS * (control.y - end.y),
        )
        prev.handle_out = _relative(cp1, prev.point)
        vertices.append(_Vertex(end, handle_in=_relative(cp2, end)))

    for command, args in recording:
        if command == "moveTo":
            if vertices:
                groups.append(_close_contour(vertices))
                vertices = []
            vertices.append(_Vertex(to_editor(args[0])))

        elif command == "lineTo":
            vertices.append(_Vertex(to_editor(args[0])))

        elif command == "curveTo":
            c1, c2, end = (to_editor(pt) for pt in args)
            prev = vertices[-1]
            prev.handle_out = _relative(c1, prev.point)
            vertices.append(_Vertex(end, handle_in=_relative(c2, end)))

        elif command == "qCurveTo":
            points = list(args)
            if points[-1] is None:
                # Contour without on-curve points: start at an implied midpoint
                first, last = points[0], points[-2]
                start = ((first[0] + last[0]) / 2, (first[1] + last[1]) / 2)
                if vertices:
                    groups.append(_close_contour(vertices))
                vertices = [_Vertex(to_editor(start))]
                points[-1] = start
            if len(points) == 1:
                vertices.append(_Vertex(to_editor(points[0])))
                continue
            for control, end in decomposeQuadraticSegment(points):
                quad_to(to_editor(control), to_editor(end))

        elif command in ("closePath", "endPath"):
            if vertices:
                groups.append(_close_contour(vertices))
                vertices = []

    if vertices:
        groups.append(_close_contour(vertices))

    return groups


def fonttools_glyph_to_outline(
    font: TTFont,
    glyph_name: str,
    scale: float = 1.0,
    base_line_y: float = 0.0,
) -> OutlinePath:
    """Draw a font glyph into a single editor outline path.

    Args:
        font: Loaded fonttools TTFont
        glyph_name: Name of the glyph in the font
        scale: Factor from font units to editor units
        base_line_y: Editor Y of the font's y=0 line

    Returns:
        The outline; empty glyphs (space, ZWJ) give an outline without contours
    """
    pen = RecordingPen()
    font.getGlyphSet()[glyph_name].draw(pen)
    groups = recording_to_segment_groups(pen.value, scale, base_line_y)
    return OutlinePath(segment_groups=tuple(groups))
