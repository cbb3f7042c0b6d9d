"""Core geometric types for glyph ink.

This module defines the fundamental coordinate types used throughout glyphsmith:
- Point: A 2D point in font design units
- Segment: A vertex of a closed cubic contour with relative handles

Coordinates follow the editor convention: Y grows downward, so a glyph's
ascender sits at smaller Y values than its baseline.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in font units
        y: Y coordinate in font units (grows downward)
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class Segment:
    """A vertex of a closed cubic Bezier contour.

    The curve from segment A to segment B uses control points
    ``A.point + A.handle_out`` and ``B.point + B.handle_in``. Zero handles
    on both ends make the piece a straight line.

    Attributes:
        point: On-curve position
        handle_in: Incoming control point, relative to point
        handle_out: Outgoing control point, relative to point
    """

    point: Point
    handle_in: Point = ORIGIN
    handle_out: Point = ORIGIN

    def translated(self, dx: float, dy: float) -> "Segment":
        """Return a copy moved by (dx, dy); handles are relative and stay put."""
        return Segment(
            point=Point(self.point.x + dx, self.point.y + dy),
            handle_in=self.handle_in,
            handle_out=self.handle_out,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "point": self.point.to_dict(),
            "handleIn": self.handle_in.to_dict(),
            "handleOut": self.handle_out.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        handle_in = data.get("handleIn")
        handle_out = data.get("handleOut")
        return cls(
            point=Point.from_dict(data["point"]),
            handle_in=Point.from_dict(handle_in) if handle_in else ORIGIN,
            handle_out=Point.from_dict(handle_out) if handle_out else ORIGIN,
        )
