"""Glyph ink and character records.

This module defines the glyph domain model: the drawn ink of a glyph
(GlyphData) and the identity/metrics record of the character it belongs to.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from glyphsmith.domain.metrics import BoundingBox, FontMetrics
from glyphsmith.domain.path import Path, path_from_dict


class GlyphClass(str, Enum):
    """OpenType-style glyph classification."""

    BASE = "base"
    MARK = "mark"
    LIGATURE = "ligature"
    COMPONENT = "component"


@dataclass(frozen=True, slots=True)
class BBoxCacheEntry:
    """Last computed bounding box and the stroke thickness it was computed with."""

    stroke_thickness: float
    box: BoundingBox | None


@dataclass
class GlyphData:
    """The visible ink of one glyph.

    Owns a memo of its last computed bounding box. The memo is only valid for
    the exact stroke thickness it was computed with and is dropped whenever
    the paths are replaced.

    Attributes:
        paths: Ordered paths forming the glyph
    """

    paths: list[Path] = field(default_factory=list)
    _bbox_cache: BBoxCacheEntry | None = field(
        default=None, repr=False, init=False, compare=False
    )

    def is_empty(self) -> bool:
        """Check if glyph has no ink.

        Returns:
            True if no path carries any points or contour segments
        """
        return not any(path.has_ink() for path in self.paths)

    def set_paths(self, paths: list[Path]) -> None:
        """Replace the paths and invalidate the bounding-box memo."""
        self.paths = list(paths)
        self._bbox_cache = None

    def invalidate_cache(self) -> None:
        self._bbox_cache = None

    def cached_bbox(self, stroke_thickness: float) -> BBoxCacheEntry | None:
        """Get the memoized box if it was computed for this stroke thickness.

        Args:
            stroke_thickness: Thickness the caller is about to measure with

        Returns:
            The cache entry, or None when absent or computed with another thickness
        """
        entry = self._bbox_cache
        if entry is not None and entry.stroke_thickness == stroke_thickness:
            return entry
        return None

    def store_bbox(self, stroke_thickness: float, box: BoundingBox | None) -> None:
        self._bbox_cache = BBoxCacheEntry(stroke_thickness=stroke_thickness, box=box)

    def translated(self, dx: float, dy: float) -> "GlyphData":
        """Return new glyph data with every path moved by (dx, dy)."""
        return GlyphData(paths=[path.translated(dx, dy) for path in self.paths])

    def to_dict(self) -> dict[str, Any]:
        return {"paths": [path.to_dict() for path in self.paths]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphData":
        """Deserialize from dictionary.

        Raises:
            PathFormatError: If any path is malformed
        """
        return cls(paths=[path_from_dict(p) for p in data.get("paths", [])])


@dataclass
class Character:
    """Identity and spacing record of a character.

    Attributes:
        name: Character name used by rules and groups (e.g. "a", "ka")
        unicode: Code point keying glyph data and maps (None if unassigned)
        lsb: Own left side bearing, None to use the font default
        rsb: Own right side bearing, None to use the font default
        glyph_class: Classification (base, mark, ligature, component)
        hidden: Hidden from pair discovery
    """

    name: str
    unicode: int | None = None
    lsb: float | None = None
    rsb: float | None = None
    glyph_class: GlyphClass | None = None
    hidden: bool = False

    def resolved_lsb(self, metrics: FontMetrics) -> float:
        return self.lsb if self.lsb is not None else metrics.default_lsb

    def resolved_rsb(self, metrics: FontMetrics) -> float:
        return self.rsb if self.rsb is not None else metrics.default_rsb

    def is_base_like(self) -> bool:
        """Bases and unclassified characters take part in kerning."""
        return self.glyph_class in (None, GlyphClass.BASE)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.unicode is not None:
            data["unicode"] = self.unicode
        if self.lsb is not None:
            data["lsb"] = self.lsb
        if self.rsb is not None:
            data["rsb"] = self.rsb
        if self.glyph_class is not None:
            data["glyphClass"] = self.glyph_class.value
        if self.hidden:
            data["hidden"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Character":
        glyph_class = data.get("glyphClass")
        return cls(
            name=data["name"],
            unicode=data.get("unicode"),
            lsb=data.get("lsb"),
            rsb=data.get("rsb"),
            glyph_class=GlyphClass(glyph_class) if glyph_class else None,
            hidden=bool(data.get("hidden", False)),
        )


@dataclass
class CharacterSet:
    """A named list of characters; its name doubles as a group name."""

    name_key: str
    characters: list[Character] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nameKey": self.name_key,
            "characters": [c.to_dict() for c in self.characters],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CharacterSet":
        return cls(
            name_key=data["nameKey"],
            characters=[Character.from_dict(c) for c in data.get("characters", [])],
        )
