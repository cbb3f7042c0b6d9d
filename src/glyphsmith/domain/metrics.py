"""Font metrics and box types.

- FontMetrics: font-wide coordinate frame and side-bearing defaults
- BoundingBox: origin + size box, as measured for a glyph
- Box: min/max box, as used for zone collision tests
- ZoneBoxes: per-zone boxes of a glyph plus its full box
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FontMetrics:
    """Font-wide metrics in editor coordinates (Y grows downward).

    Attributes:
        units_per_em: Design units per em
        base_line_y: Y of the baseline guide
        top_line_y: Y of the top (x-height / cap) guide; smaller than base_line_y
        default_lsb: Left side bearing for characters without their own
        default_rsb: Right side bearing for characters without their own
        ascender: Font ascender in font units
        descender: Font descender in font units (negative)
        default_advance_width: Advance width for new glyphs
    """

    units_per_em: int = 1000
    base_line_y: float = 600.0
    top_line_y: float = 300.0
    default_lsb: float = 50.0
    default_rsb: float = 50.0
    ascender: float = 800.0
    descender: float = -200.0
    default_advance_width: float = 800.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "unitsPerEm": self.units_per_em,
            "baseLineY": self.base_line_y,
            "topLineY": self.top_line_y,
            "defaultLSB": self.default_lsb,
            "defaultRSB": self.default_rsb,
            "ascender": self.ascender,
            "descender": self.descender,
            "defaultAdvanceWidth": self.default_advance_width,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FontMetrics":
        defaults = cls()
        return cls(
            units_per_em=int(data.get("unitsPerEm", defaults.units_per_em)),
            base_line_y=float(data.get("baseLineY", defaults.base_line_y)),
            top_line_y=float(data.get("topLineY", defaults.top_line_y)),
            default_lsb=float(data.get("defaultLSB", defaults.default_lsb)),
            default_rsb=float(data.get("defaultRSB", defaults.default_rsb)),
            ascender=float(data.get("ascender", defaults.ascender)),
            descender=float(data.get("descender", defaults.descender)),
            default_advance_width=float(
                data.get("defaultAdvanceWidth", defaults.default_advance_width)
            ),
        )


@dataclass(frozen=True, slots=True)
class Box:
    """Axis-aligned min/max box."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def shifted_x(self, dx: float) -> "Box":
        """Return the box translated horizontally by dx."""
        return Box(self.min_x + dx, self.max_x + dx, self.min_y, self.max_y)

    def inflated(self, amount: float) -> "Box":
        """Return the box grown by amount on every side."""
        return Box(
            self.min_x - amount,
            self.max_x + amount,
            self.min_y - amount,
            self.max_y + amount,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "minX": self.min_x,
            "maxX": self.max_x,
            "minY": self.min_y,
            "maxY": self.max_y,
        }


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Origin + size bounding box of a glyph's ink.

    Attributes:
        x: Left edge
        y: Top edge (smallest Y)
        width: Horizontal extent, may be 0
        height: Vertical extent, may be 0
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def to_box(self) -> Box:
        return Box(self.x, self.x + self.width, self.y, self.y + self.height)

    @classmethod
    def from_extents(
        cls, min_x: float, max_x: float, min_y: float, max_y: float
    ) -> "BoundingBox":
        return cls(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class ZoneBoxes:
    """Vertical zone boxes of one glyph.

    Attributes:
        full: Full bounding box of the glyph
        ascender: Ink at or above the top line (None if none)
        x_height: Ink between top line and baseline (None if none)
        descender: Ink at or below the baseline (None if none)
    """

    full: Box
    ascender: Box | None = field(default=None)
    x_height: Box | None = field(default=None)
    descender: Box | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "full": self.full.to_dict(),
            "ascender": self.ascender.to_dict() if self.ascender else None,
            "xHeight": self.x_height.to_dict() if self.x_height else None,
            "descender": self.descender.to_dict() if self.descender else None,
        }
