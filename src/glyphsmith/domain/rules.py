"""Positioning, attachment and kerning rule records.

Rule tables reference characters by name. Any member starting with ``$`` or
``@`` is a group reference and is expanded by ``core.groups.GroupResolver``.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AttachmentPoint(str, Enum):
    """The eight canonical anchors on a bounding box."""

    TOP_LEFT = "topLeft"
    TOP_CENTER = "topCenter"
    TOP_RIGHT = "topRight"
    MID_LEFT = "midLeft"
    MID_RIGHT = "midRight"
    BOTTOM_LEFT = "bottomLeft"
    BOTTOM_CENTER = "bottomCenter"
    BOTTOM_RIGHT = "bottomRight"


def _parse_offset(raw: Any) -> float:
    """Parse a rule offset; anything unparseable counts as 0."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


@dataclass(frozen=True)
class AttachmentRule:
    """Which anchor of the base meets which anchor of the mark.

    Attributes:
        base_anchor: Anchor on the base box
        mark_anchor: Anchor on the mark box
        x_offset: Horizontal nudge added to the base anchor
        y_offset: Vertical nudge added to the base anchor
    """

    base_anchor: AttachmentPoint
    mark_anchor: AttachmentPoint
    x_offset: float = 0.0
    y_offset: float = 0.0

    @classmethod
    def from_sequence(cls, raw: Sequence[Any]) -> "AttachmentRule | None":
        """Parse the list form ``[base, mark]`` or ``[base, mark, x, y]``.

        Returns:
            The rule, or None if the anchors are missing or unknown
        """
        if isinstance(raw, str) or len(raw) < 2:
            return None
        try:
            base_anchor = AttachmentPoint(raw[0])
            mark_anchor = AttachmentPoint(raw[1])
        except ValueError:
            return None
        if len(raw) >= 4:
            return cls(base_anchor, mark_anchor, _parse_offset(raw[2]), _parse_offset(raw[3]))
        return cls(base_anchor, mark_anchor)

    def to_sequence(self) -> list[str]:
        items = [self.base_anchor.value, self.mark_anchor.value]
        if self.x_offset or self.y_offset:
            items += [f"{self.x_offset:g}", f"{self.y_offset:g}"]
        return items


DEFAULT_ATTACHMENT_RULE = AttachmentRule(
    AttachmentPoint.TOP_CENTER, AttachmentPoint.BOTTOM_CENTER
)

# base name (or group key) -> mark name (or group key) -> rule
MarkAttachmentRules = dict[str, dict[str, AttachmentRule]]


@dataclass
class AttachmentClass:
    """A set of interchangeable marks or bases for the positioning cascade.

    Attributes:
        members: Names or group references in the class
        exceptions: Counterpart names that never receive cascaded offsets
        applies: If set, only these counterparts receive cascaded offsets
        except_pairs: Individual ``"base-mark"`` pairs left out
        name: Optional display name
    """

    members: list[str] = field(default_factory=list)
    exceptions: list[str] | None = None
    applies: list[str] | None = None
    except_pairs: list[str] | None = None
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"members": list(self.members)}
        if self.name is not None:
            data["name"] = self.name
        if self.exceptions is not None:
            data["exceptions"] = list(self.exceptions)
        if self.applies is not None:
            data["applies"] = list(self.applies)
        if self.except_pairs is not None:
            data["exceptPairs"] = list(self.except_pairs)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttachmentClass":
        return cls(
            members=list(data.get("members", [])),
            exceptions=data.get("exceptions"),
            applies=data.get("applies"),
            except_pairs=data.get("exceptPairs"),
            name=data.get("name"),
        )


@dataclass
class PositioningRule:
    """Declares which bases and marks combine, and how.

    A rule with ``gsub`` set bakes each base+mark combination into the
    ligature glyph named by ``ligature_map[base][mark]``.
    """

    base: list[str]
    mark: list[str]
    gpos: str | None = None
    gsub: str | None = None
    ligature_map: dict[str, dict[str, str]] = field(default_factory=dict)

    def ligature_name(self, base_name: str, mark_name: str) -> str | None:
        return self.ligature_map.get(base_name, {}).get(mark_name)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"base": list(self.base), "mark": list(self.mark)}
        if self.gpos is not None:
            data["gpos"] = self.gpos
        if self.gsub is not None:
            data["gsub"] = self.gsub
        if self.ligature_map:
            data["ligatureMap"] = self.ligature_map
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PositioningRule":
        return cls(
            base=list(data.get("base", [])),
            mark=list(data.get("mark", [])),
            gpos=data.get("gpos"),
            gsub=data.get("gsub"),
            ligature_map=dict(data.get("ligatureMap") or {}),
        )


@dataclass(frozen=True)
class KerningRule:
    """A recommended kerning pair and its target gap.

    Attributes:
        left: Left character name or group reference
        right: Right character name or group reference
        target: Number, "lsb", "rsb", or None for the default gap.
            Unrecognized tokens are kept and resolve to the default gap.
    """

    left: str
    right: str
    target: float | str | None = None

    @classmethod
    def from_sequence(cls, raw: Sequence[Any]) -> "KerningRule | None":
        if isinstance(raw, str) or len(raw) < 2:
            return None
        target = raw[2] if len(raw) > 2 else None
        if isinstance(target, bool):
            target = None
        return cls(left=str(raw[0]), right=str(raw[1]), target=target)

    def to_sequence(self) -> list[Any]:
        if self.target is None:
            return [self.left, self.right]
        return [self.left, self.right, self.target]
