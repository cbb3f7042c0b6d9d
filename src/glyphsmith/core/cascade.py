"""Mark positioning cascade.

One manual base/mark placement is propagated to every sibling pair that
shares the base's or the mark's attachment class. The cascade runs in two
phases:

1. Sibling resolution: a pure function over the attachment class tables.
2. Re-derivation: each sibling pair gets the offset that reproduces the same
   anchor delta with its own bounding boxes.

The input map is a read-only snapshot; all writes go to a fresh map, so the
order in which siblings are processed never matters.
"""

from dataclasses import dataclass, field

import structlog

from glyphsmith.config import GeometryConfig
from glyphsmith.core.anchors import (
    compute_anchor_delta,
    derive_offset,
    resolve_attachment_rule,
)
from glyphsmith.core.bounds import glyph_bounding_box
from glyphsmith.core.compose import compose_ligature
from glyphsmith.core.groups import GroupResolver
from glyphsmith.domain import (
    AttachmentClass,
    BoundingBox,
    Character,
    GlyphData,
    GlyphSet,
    MarkPositioningMap,
    Point,
    PositioningRule,
    RuleSet,
)
from glyphsmith.utils.logging import ProcessingLogger

logger = structlog.get_logger(__name__)

PairKey = tuple[int, int]


def _first_class_containing(
    classes: list[AttachmentClass], name: str, resolver: GroupResolver
) -> AttachmentClass | None:
    for attachment_class in classes:
        if resolver.contains(attachment_class.members, name):
            return attachment_class
    return None


def _class_applies(
    attachment_class: AttachmentClass, counterpart: str, resolver: GroupResolver
) -> bool:
    if attachment_class.exceptions and resolver.contains(
        attachment_class.exceptions, counterpart
    ):
        return False
    if attachment_class.applies is not None and not resolver.contains(
        attachment_class.applies, counterpart
    ):
        return False
    return True


def resolve_sibling_marks(
    base: Character,
    mark: Character,
    mark_classes: list[AttachmentClass],
    characters: dict[str, Character],
    resolver: GroupResolver,
) -> list[Character]:
    """Marks that should follow a placement of mark on base.

    The mark itself comes first, followed by the other members of the first
    mark class containing it. The class contributes nothing when the base is
    one of its exceptions or is missing from its ``applies`` list, and a
    member is left out when ``"base-member"`` is in ``except_pairs``.
    """
    siblings = {mark.name: mark}
    attachment_class = _first_class_containing(mark_classes, mark.name, resolver)
    if attachment_class is None or not _class_applies(attachment_class, base.name, resolver):
        return list(siblings.values())

    except_pairs = set(attachment_class.except_pairs or [])
    for name in resolver.expand(attachment_class.members):
        if f"{base.name}-{name}" in except_pairs:
            continue
        character = characters.get(name)
        if character is not None:
            siblings.setdefault(name, character)
    return list(siblings.values())


def resolve_sibling_bases(
    base: Character,
    mark: Character,
    base_classes: list[AttachmentClass],
    characters: dict[str, Character],
    resolver: GroupResolver,
) -> list[Character]:
    """Bases that should follow a placement of mark on base.

    Mirror image of resolve_sibling_marks: exceptions and ``applies`` are
    checked against the mark, and ``except_pairs`` entries read
    ``"member-mark"``.
    """
    siblings = {base.name: base}
    attachment_class = _first_class_containing(base_classes, base.name, resolver)
    if attachment_class is None or not _class_applies(attachment_class, mark.name, resolver):
        return list(siblings.values())

    except_pairs = set(attachment_class.except_pairs or [])
    for name in resolver.expand(attachment_class.members):
        if f"{name}-{mark.name}" in except_pairs:
            continue
        character = characters.get(name)
        if character is not None:
            siblings.setdefault(name, character)
    return list(siblings.values())


def find_positioning_rule(
    base: Character,
    mark: Character,
    rules: list[PositioningRule],
    resolver: GroupResolver,
) -> PositioningRule | None:
    for rule in rules:
        if resolver.contains(rule.base, base.name) and resolver.contains(rule.mark, mark.name):
            return rule
    return None


@dataclass
class CascadeResult:
    """Outcome of one cascade.

    Attributes:
        positioning: New positioning map (input entries plus new ones)
        updated_glyphs: Composed ligature glyphs by unicode
        cascaded_pairs: Sibling pairs that received an offset
        skipped_manual: Sibling pairs left alone because they already had one
    """

    positioning: MarkPositioningMap
    updated_glyphs: dict[int, GlyphData] = field(default_factory=dict)
    cascaded_pairs: list[PairKey] = field(default_factory=list)
    skipped_manual: list[PairKey] = field(default_factory=list)


class MarkPositioningCascade:
    """Propagates a manual mark placement across attachment classes.

    Example:
        cascade = MarkPositioningCascade()
        result = cascade.apply(base, mark, Point(40, -20), glyph_set,
                               project.mark_positioning, project.rules, 15.0)
    """

    def __init__(
        self,
        geometry: GeometryConfig | None = None,
        processing_logger: ProcessingLogger | None = None,
    ) -> None:
        self.geometry = geometry or GeometryConfig()
        self.processing_logger = processing_logger

    def _ligature(
        self,
        base: Character,
        mark: Character,
        offset: Point,
        glyph_set: GlyphSet,
        rules: RuleSet,
        resolver: GroupResolver,
    ) -> tuple[Character, GlyphData] | None:
        """Composed ligature for a pair whose positioning rule bakes one."""
        rule = find_positioning_rule(base, mark, rules.positioning_rules, resolver)
        if rule is None or not rule.gsub:
            return None
        name = rule.ligature_name(base.name, mark.name)
        ligature = glyph_set.character(name) if name else None
        if ligature is None or ligature.unicode is None:
            return None
        base_glyph = glyph_set.glyph_for(base)
        mark_glyph = glyph_set.glyph_for(mark)
        if base_glyph is None or mark_glyph is None:
            return None
        return ligature, compose_ligature(base_glyph, mark_glyph, offset)

    def apply(
        self,
        base: Character,
        mark: Character,
        new_offset: Point,
        glyph_set: GlyphSet,
        positioning: MarkPositioningMap,
        rules: RuleSet,
        stroke_thickness: float,
    ) -> CascadeResult:
        """Apply one manual placement and cascade it.

        Args:
            base: Base character of the edited pair
            mark: Mark character of the edited pair
            new_offset: Mark offset the user set
            glyph_set: Characters, glyph ink and groups (read only)
            positioning: Current positioning map (read only)
            rules: Attachment rules, classes and positioning rules
            stroke_thickness: Active stroke thickness for bounds

        Returns:
            CascadeResult with a fresh positioning map
        """
        resolver = GroupResolver(glyph_set.groups, glyph_set.character_sets)
        result = CascadeResult(positioning=dict(positioning))

        if base.unicode is None or mark.unicode is None:
            logger.debug("Edited pair has no code points", base=base.name, mark=mark.name)
            return result

        primary: PairKey = (base.unicode, mark.unicode)
        result.positioning[primary] = new_offset

        baked = self._ligature(base, mark, new_offset, glyph_set, rules, resolver)
        if baked is not None:
            ligature, glyph = baked
            result.updated_glyphs[ligature.unicode] = glyph  # type: ignore[index]

        base_bbox = self._bbox(base, glyph_set, stroke_thickness)
        mark_bbox = self._bbox(mark, glyph_set, stroke_thickness)
        if base_bbox is None or mark_bbox is None:
            logger.debug("Edited pair has no geometry", base=base.name, mark=mark.name)
            return result

        rule = resolve_attachment_rule(
            base.name, mark.name, rules.mark_attachment_rules, resolver
        )
        delta = compute_anchor_delta(base_bbox, mark_bbox, rule, new_offset)

        marks = resolve_sibling_marks(
            base, mark, rules.mark_attachment_classes, glyph_set.characters, resolver
        )
        bases = resolve_sibling_bases(
            base, mark, rules.base_attachment_classes, glyph_set.characters, resolver
        )

        for sibling_base in bases:
            for sibling_mark in marks:
                if sibling_base.unicode is None or sibling_mark.unicode is None:
                    continue
                key: PairKey = (sibling_base.unicode, sibling_mark.unicode)
                if key == primary:
                    continue
                if key in positioning:
                    result.skipped_manual.append(key)
                    continue

                sb_bbox = self._bbox(sibling_base, glyph_set, stroke_thickness)
                sm_bbox = self._bbox(sibling_mark, glyph_set, stroke_thickness)
                if sb_bbox is None or sm_bbox is None:
                    continue

                sibling_rule = resolve_attachment_rule(
                    sibling_base.name,
                    sibling_mark.name,
                    rules.mark_attachment_rules,
                    resolver,
                )
                offset = derive_offset(sb_bbox, sm_bbox, sibling_rule, delta)
                result.positioning[key] = offset
                result.cascaded_pairs.append(key)

                baked = self._ligature(
                    sibling_base, sibling_mark, offset, glyph_set, rules, resolver
                )
                ligature_name = None
                if baked is not None:
                    ligature, glyph = baked
                    result.updated_glyphs[ligature.unicode] = glyph  # type: ignore[index]
                    ligature_name = ligature.name

                if self.processing_logger is not None:
                    self.processing_logger.log_cascade_pair(
                        sibling_base.name, sibling_mark.name, offset.x, offset.y, ligature_name
                    )

        logger.debug(
            "Cascade applied",
            base=base.name,
            mark=mark.name,
            cascaded=len(result.cascaded_pairs),
            skipped_manual=len(result.skipped_manual),
        )
        return result

    def _bbox(
        self, character: Character, glyph_set: GlyphSet, stroke_thickness: float
    ) -> BoundingBox | None:
        glyph = glyph_set.glyph_for(character)
        if glyph is None:
            return None
        return glyph_bounding_box(glyph, stroke_thickness, self.geometry)
