"""Path variants making up a glyph's ink.

A glyph is an ordered list of paths. Each path kind is its own frozen
dataclass, so geometry code dispatches on the type and only sees the fields
that kind actually has:

- LinePath: straight polyline stroke
- CurvePath: single quadratic curve stroke (start, control, end)
- PenPath: free-hand stroke smoothed through point midpoints
- CalligraphyPath: free-hand stroke drawn with a fixed nib angle
- DotPath: filled circle (center, optional radius point)
- OutlinePath: filled closed cubic contours combined under even-odd fill
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar

from glyphsmith.domain.contour import Point, Segment
from glyphsmith.exceptions import PathFormatError


class PathKind(str, Enum):
    """Serialized ``type`` tag of a path."""

    LINE = "line"
    CURVE = "curve"
    PEN = "pen"
    CALLIGRAPHY = "calligraphy"
    DOT = "dot"
    OUTLINE = "outline"


def _points_from_list(raw: list[dict[str, Any]] | None) -> tuple[Point, ...]:
    return tuple(Point.from_dict(p) for p in raw or [])


@dataclass(frozen=True, slots=True)
class _StrokePath:
    """Common shape of every point-list path."""

    points: tuple[Point, ...]
    group_id: str | None = None

    kind: ClassVar[PathKind]

    def has_ink(self) -> bool:
        return len(self.points) > 0

    def translated(self, dx: float, dy: float) -> "_StrokePath":
        """Return a copy moved by (dx, dy)."""
        return replace(
            self, points=tuple(Point(p.x + dx, p.y + dy) for p in self.points)
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.kind.value,
            "points": [p.to_dict() for p in self.points],
        }
        if self.group_id is not None:
            data["groupId"] = self.group_id
        return data


@dataclass(frozen=True, slots=True)
class LinePath(_StrokePath):
    kind: ClassVar[PathKind] = PathKind.LINE


@dataclass(frozen=True, slots=True)
class CurvePath(_StrokePath):
    kind: ClassVar[PathKind] = PathKind.CURVE


@dataclass(frozen=True, slots=True)
class PenPath(_StrokePath):
    kind: ClassVar[PathKind] = PathKind.PEN


@dataclass(frozen=True, slots=True)
class CalligraphyPath(_StrokePath):
    """Free-hand stroke with a fixed nib angle in degrees.

    The angle only changes how wide the rendered stroke is at each point;
    its bounds are approximated like a pen stroke.
    """

    angle: float | None = None

    kind: ClassVar[PathKind] = PathKind.CALLIGRAPHY

    def to_dict(self) -> dict[str, Any]:
        data = _StrokePath.to_dict(self)
        if self.angle is not None:
            data["angle"] = self.angle
        return data


@dataclass(frozen=True, slots=True)
class DotPath(_StrokePath):
    """Filled circle: points[0] is the center, points[1] (if any) sets the radius."""

    kind: ClassVar[PathKind] = PathKind.DOT

    @property
    def center(self) -> Point | None:
        return self.points[0] if self.points else None


@dataclass(frozen=True, slots=True)
class OutlinePath:
    """One or more closed cubic contours filled with the even-odd rule.

    Inner contours become holes (the counter of an "o"); they never extend
    the outline's bounds past its outer contour.
    """

    segment_groups: tuple[tuple[Segment, ...], ...]
    group_id: str | None = None

    kind: ClassVar[PathKind] = PathKind.OUTLINE

    def has_ink(self) -> bool:
        return any(len(group) > 0 for group in self.segment_groups)

    def non_empty_groups(self) -> list[tuple[Segment, ...]]:
        return [group for group in self.segment_groups if group]

    def translated(self, dx: float, dy: float) -> "OutlinePath":
        return replace(
            self,
            segment_groups=tuple(
                tuple(seg.translated(dx, dy) for seg in group)
                for group in self.segment_groups
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.kind.value,
            "points": [],
            "segmentGroups": [
                [seg.to_dict() for seg in group] for group in self.segment_groups
            ],
        }
        if self.group_id is not None:
            data["groupId"] = self.group_id
        return data


Path = LinePath | CurvePath | PenPath | CalligraphyPath | DotPath | OutlinePath

_STROKE_TYPES: dict[PathKind, type[_StrokePath]] = {
    PathKind.LINE: LinePath,
    PathKind.CURVE: CurvePath,
    PathKind.PEN: PenPath,
    PathKind.DOT: DotPath,
}


def path_from_dict(data: dict[str, Any]) -> Path:
    """Deserialize a path from its tagged dictionary form.

    Args:
        data: Dictionary with a ``type`` tag and the fields of that kind

    Returns:
        The matching Path variant

    Raises:
        PathFormatError: If the tag is unknown or the payload is malformed
    """
    tag = data.get("type")
    try:
        kind = PathKind(tag)
    except ValueError as e:
        raise PathFormatError(f"unknown path type {tag!r}") from e

    group_id = data.get("groupId")

    try:
        if kind is PathKind.OUTLINE:
            groups = tuple(
                tuple(Segment.from_dict(seg) for seg in group)
                for group in data.get("segmentGroups") or []
            )
            return OutlinePath(segment_groups=groups, group_id=group_id)

        points = _points_from_list(data.get("points"))
        if kind is PathKind.CALLIGRAPHY:
            angle = data.get("angle")
            return CalligraphyPath(
                points=points,
                group_id=group_id,
                angle=float(angle) if angle is not None else None,
            )
        return _STROKE_TYPES[kind](points=points, group_id=group_id)  # type: ignore[return-value]
    except (KeyError, TypeError, ValueError) as e:
        raise PathFormatError(f"malformed {kind.value} path: {e}") from e
