"""Project snapshot files.

A project is stored as one JSON document. Maps keyed by a unicode pair are
written as ``[["left-right", value], ...]`` lists, the same shape the editor
exports, so snapshots can be exchanged with it unchanged.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from glyphsmith.domain import (
    AttachmentClass,
    AttachmentRule,
    CharacterSet,
    FontMetrics,
    GlyphData,
    KerningMap,
    KerningRule,
    MarkAttachmentRules,
    MarkPositioningMap,
    Point,
    PositioningRule,
    Project,
    RuleSet,
)
from glyphsmith.domain.path import path_from_dict
from glyphsmith.exceptions import PathFormatError, ProjectLoadError, ProjectSaveError

logger = structlog.get_logger(__name__)


def pair_key(left: int, right: int) -> str:
    return f"{left}-{right}"


def parse_pair_key(key: str) -> tuple[int, int] | None:
    """Parse a ``"left-right"`` unicode pair key, None if malformed."""
    left, sep, right = str(key).partition("-")
    if not sep:
        return None
    try:
        return int(left), int(right)
    except ValueError:
        return None


def _glyph_from_dict(unicode: int, data: dict[str, Any]) -> GlyphData:
    """Deserialize glyph ink, dropping paths that cannot be understood."""
    paths = []
    for raw in data.get("paths", []):
        try:
            paths.append(path_from_dict(raw))
        except PathFormatError as e:
            logger.warning("Skipping unreadable path", unicode=unicode, reason=e.reason)
    return GlyphData(paths=paths)


def _kerning_from_list(raw: list[Any]) -> KerningMap:
    kerning: KerningMap = {}
    for entry in raw:
        key = parse_pair_key(entry[0])
        if key is None:
            logger.warning("Skipping malformed kerning key", key=entry[0])
            continue
        kerning[key] = int(entry[1])
    return kerning


def _positioning_from_list(raw: list[Any]) -> MarkPositioningMap:
    positioning: MarkPositioningMap = {}
    for entry in raw:
        key = parse_pair_key(entry[0])
        if key is None:
            logger.warning("Skipping malformed positioning key", key=entry[0])
            continue
        positioning[key] = Point.from_dict(entry[1])
    return positioning


def _attachment_rules_from_dict(raw: dict[str, Any]) -> MarkAttachmentRules:
    rules: MarkAttachmentRules = {}
    for base, marks in raw.items():
        for mark, sequence in marks.items():
            rule = AttachmentRule.from_sequence(sequence)
            if rule is None:
                logger.warning("Skipping malformed attachment rule", base=base, mark=mark)
                continue
            rules.setdefault(base, {})[mark] = rule
    return rules


def project_from_dict(data: dict[str, Any]) -> Project:
    """Build a Project from its JSON document.

    Raises:
        KeyError, TypeError, ValueError: If a required field is malformed
    """
    settings = data.get("settings") or {}
    rules = RuleSet(
        recommended_kerning=[
            rule
            for rule in (KerningRule.from_sequence(r) for r in data.get("recommendedKerning") or [])
            if rule is not None
        ],
        positioning_rules=[
            PositioningRule.from_dict(r) for r in data.get("positioningRules") or []
        ],
        mark_attachment_rules=_attachment_rules_from_dict(data.get("markAttachmentRules") or {}),
        mark_attachment_classes=[
            AttachmentClass.from_dict(c) for c in data.get("markAttachmentClasses") or []
        ],
        base_attachment_classes=[
            AttachmentClass.from_dict(c) for c in data.get("baseAttachmentClasses") or []
        ],
    )
    return Project(
        name=data.get("name") or settings.get("fontName") or "Untitled",
        stroke_thickness=float(settings.get("strokeThickness", 15.0)),
        metrics=FontMetrics.from_dict(data.get("metrics") or {}),
        character_sets=[CharacterSet.from_dict(cs) for cs in data.get("characterSets") or []],
        glyphs={
            int(unicode): _glyph_from_dict(int(unicode), glyph)
            for unicode, glyph in data.get("glyphs") or []
        },
        kerning=_kerning_from_list(data.get("kerning") or []),
        mark_positioning=_positioning_from_list(data.get("markPositioning") or []),
        rules=rules,
        groups={name: list(members) for name, members in (data.get("groups") or {}).items()},
    )


def project_to_dict(project: Project) -> dict[str, Any]:
    """Serialize a Project to its JSON document."""
    return {
        "name": project.name,
        "settings": {"fontName": project.name, "strokeThickness": project.stroke_thickness},
        "metrics": project.metrics.to_dict(),
        "characterSets": [cs.to_dict() for cs in project.character_sets],
        "glyphs": [[unicode, glyph.to_dict()] for unicode, glyph in project.glyphs.items()],
        "kerning": [[pair_key(*key), value] for key, value in project.kerning.items()],
        "markPositioning": [
            [pair_key(*key), offset.to_dict()] for key, offset in project.mark_positioning.items()
        ],
        "recommendedKerning": [rule.to_sequence() for rule in project.rules.recommended_kerning],
        "positioningRules": [rule.to_dict() for rule in project.rules.positioning_rules],
        "markAttachmentRules": {
            base: {mark: rule.to_sequence() for mark, rule in marks.items()}
            for base, marks in project.rules.mark_attachment_rules.items()
        },
        "markAttachmentClasses": [c.to_dict() for c in project.rules.mark_attachment_classes],
        "baseAttachmentClasses": [c.to_dict() for c in project.rules.base_attachment_classes],
        "groups": project.groups,
    }


class ProjectReader:
    """Loads project snapshot files.

    Example:
        project = ProjectReader(Path("project.json")).read()
    """

    def __init__(self, project_path: Path) -> None:
        self._project_path = project_path

    def read(self) -> Project:
        """Read and parse the project file.

        Raises:
            ProjectLoadError: If the file is missing, not JSON, or malformed
        """
        path = self._project_path
        if not path.exists():
            raise ProjectLoadError(str(path), "file not found")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProjectLoadError(str(path), str(e)) from e

        if not isinstance(data, dict):
            raise ProjectLoadError(str(path), "top level is not an object")

        try:
            project = project_from_dict(data)
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise ProjectLoadError(str(path), f"malformed project data: {e}") from e

        logger.debug(
            "Project loaded",
            path=str(path),
            characters=len(project.all_characters()),
            glyphs=len(project.glyphs),
        )
        return project


class ProjectWriter:
    """Saves project snapshot files."""

    def __init__(self, project_path: Path) -> None:
        self._project_path = project_path

    def write(self, project: Project) -> None:
        """Write the project as indented JSON.

        Raises:
            ProjectSaveError: If the file cannot be written
        """
        try:
            self._project_path.write_text(
                json.dumps(project_to_dict(project), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except (OSError, TypeError, ValueError) as e:
            raise ProjectSaveError(str(self._project_path), str(e)) from e

        logger.debug("Project saved", path=str(self._project_path))

    @staticmethod
    def get_output_path(input_path: Path, suffix: str) -> Path:
        """Generate a sibling output path.

        Converts: project.json -> project-kerned.json

        Args:
            input_path: Original file path
            suffix: Suffix to add before the extension (e.g. "kerned")

        Returns:
            Path with ``-suffix`` before ``.json``
        """
        return input_path.parent / f"{input_path.stem}-{suffix}.json"
