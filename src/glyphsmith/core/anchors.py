"""Anchor math for mark attachment.

A mark is placed on a base by lining up one named anchor of the base's
bounding box with one named anchor of the mark's box. Offsets here are the
mark's translation in editor coordinates.

The anchor delta ``(offset + mark_anchor) - base_anchor`` describes where the
mark sits relative to the base independently of either glyph's size, which is
what lets one manual placement be re-derived for differently shaped siblings.
"""

from glyphsmith.core.geometry import vec_add, vec_sub
from glyphsmith.core.groups import GroupResolver, is_group_ref
from glyphsmith.domain import (
    DEFAULT_ATTACHMENT_RULE,
    AttachmentPoint,
    AttachmentRule,
    BoundingBox,
    MarkAttachmentRules,
    Point,
)


# (fraction of width, fraction of height) from the box origin
_ANCHOR_FRACTIONS: dict[AttachmentPoint, tuple[float, float]] = {
    AttachmentPoint.TOP_LEFT: (0.0, 0.0),
    AttachmentPoint.TOP_CENTER: (0.5, 0.0),
    AttachmentPoint.TOP_RIGHT: (1.0, 0.0),
    AttachmentPoint.MID_LEFT: (0.0, 0.5),
    AttachmentPoint.MID_RIGHT: (1.0, 0.5),
    AttachmentPoint.BOTTOM_LEFT: (0.0, 1.0),
    AttachmentPoint.BOTTOM_CENTER: (0.5, 1.0),
    AttachmentPoint.BOTTOM_RIGHT: (1.0, 1.0),
}


def anchor_coords(bbox: BoundingBox, point: AttachmentPoint) -> Point:
    """Coordinates of a named anchor on a box (Y grows downward)."""
    fx, fy = _ANCHOR_FRACTIONS[point]
    return Point(bbox.x + bbox.width * fx, bbox.y + bbox.height * fy)


def resolve_attachment_rule(
    base_name: str,
    mark_name: str,
    rules: MarkAttachmentRules | None,
    resolver: GroupResolver | None = None,
) -> AttachmentRule:
    """Find the attachment rule of a base/mark pair.

    Lookup order:
    1. ``rules[base_name][mark_name]``
    2. For each group key containing the base: the mark by name, then
       each mark group key containing the mark
    3. The default rule (topCenter of the base on bottomCenter of the mark)
    """
    if not rules:
        return DEFAULT_ATTACHMENT_RULE

    exact = rules.get(base_name, {}).get(mark_name)
    if exact is not None:
        return exact

    resolver = resolver or GroupResolver()
    for base_key, mark_rules in rules.items():
        if not is_group_ref(base_key) or not resolver.contains([base_key], base_name):
            continue
        rule = mark_rules.get(mark_name)
        if rule is not None:
            return rule
        for mark_key, group_rule in mark_rules.items():
            if is_group_ref(mark_key) and resolver.contains([mark_key], mark_name):
                return group_rule

    return DEFAULT_ATTACHMENT_RULE


def base_anchor_point(bbox: BoundingBox, rule: AttachmentRule) -> Point:
    """Base anchor including the rule's fixed nudge."""
    anchor = anchor_coords(bbox, rule.base_anchor)
    return Point(anchor.x + rule.x_offset, anchor.y + rule.y_offset)


def compute_anchor_delta(
    base_bbox: BoundingBox,
    mark_bbox: BoundingBox,
    rule: AttachmentRule,
    offset: Point,
) -> Point:
    """Anchor-to-anchor vector established by a mark offset.

    Args:
        base_bbox: Base glyph bounds
        mark_bbox: Mark glyph bounds (untranslated)
        rule: Attachment rule of the pair
        offset: Mark translation

    Returns:
        ``(offset + mark_anchor) - base_anchor``
    """
    mark_anchor = anchor_coords(mark_bbox, rule.mark_anchor)
    return vec_sub(vec_add(offset, mark_anchor), base_anchor_point(base_bbox, rule))


def derive_offset(
    base_bbox: BoundingBox,
    mark_bbox: BoundingBox,
    rule: AttachmentRule,
    delta: Point,
) -> Point:
    """Mark offset reproducing an anchor delta; inverse of compute_anchor_delta."""
    mark_anchor = anchor_coords(mark_bbox, rule.mark_anchor)
    return vec_sub(vec_add(delta, base_anchor_point(base_bbox, rule)), mark_anchor)


def calculate_default_mark_offset(
    base_bbox: BoundingBox | None,
    mark_bbox: BoundingBox | None,
    rule: AttachmentRule = DEFAULT_ATTACHMENT_RULE,
) -> Point:
    """Offset that puts the mark anchor exactly on the base anchor.

    Returns the zero offset when either glyph has no bounds.
    """
    if base_bbox is None or mark_bbox is None:
        return Point(0.0, 0.0)
    return derive_offset(base_bbox, mark_bbox, rule, Point(0.0, 0.0))
