"""Font reader for importing TTF/OTF fonts into projects.

This module provides the FontReader class for loading font files
and turning every glyph into an editable outline character.
"""

from collections.abc import Iterator
from pathlib import Path

import structlog
from fontTools.misc.roundTools import otRound
from fontTools.ttLib import TTFont, TTLibError

from glyphsmith.core.bounds import outline_bounds
from glyphsmith.domain import (
    Character,
    CharacterSet,
    FontMetrics,
    GlyphClass,
    GlyphData,
    Project,
)
from glyphsmith.exceptions import FontLoadError
from glyphsmith.io.converter import fonttools_glyph_to_outline

logger = structlog.get_logger(__name__)

# Editor frame every imported font is scaled into
EDITOR_UNITS_PER_EM = 1000
EDITOR_BASE_LINE_Y = 600.0

# Top guide sits at this fraction of the ascender above the baseline
TOP_LINE_ASCENDER_RATIO = 0.6

# First code point handed to unencoded glyphs (Private Use Area)
PUA_START = 0xE000

IMPORTED_SET_NAME = "Imported"

# GDEF GlyphClassDef values
_GDEF_CLASSES = {
    1: GlyphClass.BASE,
    2: GlyphClass.LIGATURE,
    3: GlyphClass.MARK,
    4: GlyphClass.COMPONENT,
}


def infer_glyph_class(name: str, unicode: int | None, advance_width: int) -> GlyphClass:
    """Guess a glyph class for fonts without a GDEF table.

    Encoded zero-width glyphs are marks, names with ``_`` or ``.liga`` are
    ligatures, everything else is a base.
    """
    if unicode is not None and advance_width == 0:
        return GlyphClass.MARK
    if "_" in name or ".liga" in name:
        return GlyphClass.LIGATURE
    return GlyphClass.BASE


class FontReader:
    """Loads TTF/OTF fonts and converts them to glyphsmith projects.

    Every glyph is imported as one outline path, including empty ones
    (space, ZWJ). Coordinates are rescaled to 1000 units per em and flipped
    into the editor frame with the baseline at y=600.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            project = reader.read_project()
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
        """
        self._font_path = font_path
        self._font: TTFont | None = None

    def load(self) -> None:
        """Load the font file.

        Raises:
            FontLoadError: If the font file does not exist or cannot be parsed
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            self._font = TTFont(str(self._font_path))
            # Force the parse now so a corrupt file fails here, not mid-import
            self._font.getGlyphOrder()
        except (TTLibError, OSError, AssertionError, KeyError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

    @property
    def font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """Return font format.

        Returns:
            'TrueType' for TTF fonts, 'OpenType' for OTF fonts

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        if "CFF " in self.font or "CFF2" in self.font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        return self.font["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        return len(self.font.getGlyphOrder())

    @property
    def scale(self) -> float:
        """Factor from font units to editor units."""
        return EDITOR_UNITS_PER_EM / self.units_per_em

    @property
    def family_name(self) -> str | None:
        name_table = self.font.get("name")
        if name_table is None:
            return None
        family = name_table.getBestFamilyName()  # type: ignore[attr-defined]
        return family or None

    def metrics(self) -> FontMetrics:
        """Editor metrics of the font.

        The top guide is an approximate cap height; side-bearing and advance
        defaults are the editor's own.
        """
        hhea = self.font.get("hhea")
        ascender = hhea.ascent if hhea is not None else self.units_per_em * 0.8  # type: ignore[attr-defined]
        descender = hhea.descent if hhea is not None else -self.units_per_em * 0.2  # type: ignore[attr-defined]
        return FontMetrics(
            units_per_em=EDITOR_UNITS_PER_EM,
            base_line_y=EDITOR_BASE_LINE_Y,
            top_line_y=EDITOR_BASE_LINE_Y
            - otRound(ascender * self.scale * TOP_LINE_ASCENDER_RATIO),
            ascender=float(otRound(ascender * self.scale)),
            descender=float(otRound(descender * self.scale)),
        )

    def _unicode_map(self) -> dict[str, int]:
        """Glyph name to its lowest code point."""
        names: dict[str, int] = {}
        for code_point, glyph_name in sorted((self.font.getBestCmap() or {}).items()):
            names.setdefault(glyph_name, code_point)
        return names

    def _gdef_classes(self) -> dict[str, int] | None:
        gdef = self.font.get("GDEF")
        if gdef is None:
            return None
        class_def = getattr(gdef.table, "GlyphClassDef", None)  # type: ignore[attr-defined]
        if class_def is None:
            return None
        return class_def.classDefs

    def iter_characters(self) -> Iterator[tuple[Character, GlyphData]]:
        """Iterate over all glyphs as characters with their ink.

        Yields glyphs in the order they appear in the font. Unencoded glyphs
        get consecutive Private Use Area code points that no encoded glyph
        uses.

        Yields:
            (character, glyph data) tuples

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        glyph_order = self.font.getGlyphOrder()
        unicodes = self._unicode_map()
        used = set(unicodes.values())
        gdef_classes = self._gdef_classes()
        hmtx = self.font.get("hmtx")
        scale = self.scale
        pua = PUA_START

        for glyph_name in glyph_order:
            unicode = unicodes.get(glyph_name)
            advance_width, lsb = (0, 0)
            if hmtx is not None and glyph_name in hmtx.metrics:  # type: ignore[attr-defined]
                advance_width, lsb = hmtx.metrics[glyph_name]  # type: ignore[attr-defined]

            if gdef_classes is not None:
                glyph_class = _GDEF_CLASSES.get(gdef_classes.get(glyph_name, 0), GlyphClass.BASE)
            else:
                glyph_class = infer_glyph_class(glyph_name, unicode, advance_width)

            if unicode is None:
                while pua in used:
                    pua += 1
                unicode = pua
                used.add(unicode)
                logger.debug("Assigned private use code point", glyph=glyph_name, unicode=unicode)

            outline = fonttools_glyph_to_outline(self.font, glyph_name, scale, EDITOR_BASE_LINE_Y)

            rsb = 0.0
            bounds = outline_bounds(outline)
            if bounds is not None:
                rsb = float(otRound(advance_width * scale) - otRound(bounds[2]))

            character = Character(
                name=glyph_name,
                unicode=unicode,
                lsb=float(otRound(lsb * scale)),
                rsb=rsb,
                glyph_class=glyph_class,
            )
            yield character, GlyphData(paths=[outline])

    def read_project(self, name: str | None = None) -> Project:
        """Build a complete project from the font.

        Args:
            name: Project name (default: family name, then file stem)

        Returns:
            Project with one "Imported" character set and outline glyphs
        """
        characters: list[Character] = []
        glyphs: dict[int, GlyphData] = {}
        for character, glyph in self.iter_characters():
            characters.append(character)
            glyphs[character.unicode] = glyph  # type: ignore[index]

        project = Project(
            name=name or self.family_name or self._font_path.stem,
            stroke_thickness=1.0,
            metrics=self.metrics(),
            character_sets=[CharacterSet(name_key=IMPORTED_SET_NAME, characters=characters)],
            glyphs=glyphs,
        )
        logger.info(
            "Font imported",
            font=str(self._font_path),
            format=self.format,
            units_per_em=self.units_per_em,
            glyphs=len(glyphs),
        )
        return project

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()


def merge_font_into_project(
    project: Project, imported: Project
) -> tuple[dict[int, GlyphData], list[Character]]:
    """Pick the parts of an imported project that a project does not have yet.

    Args:
        project: Project being merged into
        imported: Project read from a font

    Returns:
        (glyphs whose unicode the project lacks, characters whose unicode
        the project lacks). Neither project is modified.
    """
    new_glyphs = {u: g for u, g in imported.glyphs.items() if u not in project.glyphs}
    known = {c.unicode for c in project.all_characters()}
    new_characters = [
        c for c in imported.all_characters() if c.unicode is not None and c.unicode not in known
    ]
    return new_glyphs, new_characters
