"""Project bundles handed to the engine.

- GlyphSet: read-only lookup view over characters, glyph ink and groups
- RuleSet: every rule table the kerning solver and cascade consult
- Project: the whole editable project snapshot, as loaded from disk
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from glyphsmith.domain.contour import Point
from glyphsmith.domain.glyph import Character, CharacterSet, GlyphData
from glyphsmith.domain.metrics import FontMetrics
from glyphsmith.domain.rules import (
    AttachmentClass,
    KerningRule,
    MarkAttachmentRules,
    PositioningRule,
)

# (left unicode, right unicode) -> kern value; 0 means reviewed, no adjustment
KerningMap = dict[tuple[int, int], int]

# (base unicode, mark unicode) -> mark offset
MarkPositioningMap = dict[tuple[int, int], Point]


@dataclass
class GlyphSet:
    """Snapshot of characters and their ink, indexed for the engine.

    Attributes:
        characters: Characters by name
        glyphs: Glyph ink by unicode
        groups: Named groups of character names
        character_sets: Character sets; each name is also usable as a group
    """

    characters: dict[str, Character] = field(default_factory=dict)
    glyphs: dict[int, GlyphData] = field(default_factory=dict)
    groups: dict[str, list[str]] = field(default_factory=dict)
    character_sets: list[CharacterSet] = field(default_factory=list)

    @classmethod
    def from_characters(
        cls,
        characters: Iterable[Character],
        glyphs: dict[int, GlyphData] | None = None,
        groups: dict[str, list[str]] | None = None,
    ) -> "GlyphSet":
        return cls(
            characters={c.name: c for c in characters},
            glyphs=dict(glyphs or {}),
            groups=dict(groups or {}),
        )

    def character(self, name: str) -> Character | None:
        return self.characters.get(name)

    def glyph_for(self, character: Character) -> GlyphData | None:
        """Get the ink of a character, or None if it has none."""
        if character.unicode is None:
            return None
        glyph = self.glyphs.get(character.unicode)
        if glyph is None or glyph.is_empty():
            return None
        return glyph

    def has_ink(self, character: Character) -> bool:
        return self.glyph_for(character) is not None


@dataclass
class RuleSet:
    """Rule tables consulted by kerning and mark positioning."""

    recommended_kerning: list[KerningRule] = field(default_factory=list)
    positioning_rules: list[PositioningRule] = field(default_factory=list)
    mark_attachment_rules: MarkAttachmentRules = field(default_factory=dict)
    mark_attachment_classes: list[AttachmentClass] = field(default_factory=list)
    base_attachment_classes: list[AttachmentClass] = field(default_factory=list)


@dataclass
class Project:
    """A complete project snapshot.

    Attributes:
        name: Font name
        stroke_thickness: Active stroke thickness of the drawing tools
        metrics: Font metrics
        character_sets: All character sets, in display order
        glyphs: Glyph ink by unicode
        kerning: Reviewed kerning values
        mark_positioning: Mark offsets set so far
        rules: Rule tables
        groups: Named groups of character names
    """

    name: str = "Untitled"
    stroke_thickness: float = 15.0
    metrics: FontMetrics = field(default_factory=FontMetrics)
    character_sets: list[CharacterSet] = field(default_factory=list)
    glyphs: dict[int, GlyphData] = field(default_factory=dict)
    kerning: KerningMap = field(default_factory=dict)
    mark_positioning: MarkPositioningMap = field(default_factory=dict)
    rules: RuleSet = field(default_factory=RuleSet)
    groups: dict[str, list[str]] = field(default_factory=dict)

    def all_characters(self) -> list[Character]:
        return [c for cs in self.character_sets for c in cs.characters]

    def glyph_set(self) -> GlyphSet:
        """Build the engine-facing lookup view of this project."""
        return GlyphSet(
            characters={c.name: c for c in self.all_characters()},
            glyphs=self.glyphs,
            groups=self.groups,
            character_sets=self.character_sets,
        )

    def add_character(self, character: Character, set_name: str) -> None:
        """Append a character to the named set, creating the set if needed."""
        for char_set in self.character_sets:
            if char_set.name_key == set_name:
                char_set.characters.append(character)
                return
        self.character_sets.append(CharacterSet(name_key=set_name, characters=[character]))
