"""Domain models for glyphsmith.

This module contains the core domain models representing glyph ink,
characters, font metrics and the rule tables that drive kerning and mark
positioning. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel kerning)
- Independent of fonttools implementation details

Key classes:
- Point, Segment: coordinates and cubic contour vertices
- Path variants: LinePath, CurvePath, PenPath, CalligraphyPath, DotPath, OutlinePath
- GlyphData: a glyph's ink with its bounding-box memo
- Character, CharacterSet: identity and spacing records
- FontMetrics, BoundingBox, Box, ZoneBoxes: measurement types
- AttachmentRule, AttachmentClass, PositioningRule, KerningRule: rule tables
- GlyphSet, RuleSet, Project: bundles handed to the engine
"""

from glyphsmith.domain.contour import ORIGIN, Point, Segment
from glyphsmith.domain.glyph import (
    BBoxCacheEntry,
    Character,
    CharacterSet,
    GlyphClass,
    GlyphData,
)
from glyphsmith.domain.metrics import BoundingBox, Box, FontMetrics, ZoneBoxes
from glyphsmith.domain.path import (
    CalligraphyPath,
    CurvePath,
    DotPath,
    LinePath,
    OutlinePath,
    Path,
    PathKind,
    PenPath,
    path_from_dict,
)
from glyphsmith.domain.project import (
    GlyphSet,
    KerningMap,
    MarkPositioningMap,
    Project,
    RuleSet,
)
from glyphsmith.domain.rules import (
    DEFAULT_ATTACHMENT_RULE,
    AttachmentClass,
    AttachmentPoint,
    AttachmentRule,
    KerningRule,
    MarkAttachmentRules,
    PositioningRule,
)

__all__: list[str] = [
    # Enums
    "PathKind",
    "GlyphClass",
    "AttachmentPoint",
    # Core types
    "ORIGIN",
    "Point",
    "Segment",
    "Path",
    "LinePath",
    "CurvePath",
    "PenPath",
    "CalligraphyPath",
    "DotPath",
    "OutlinePath",
    "path_from_dict",
    "BBoxCacheEntry",
    "GlyphData",
    "Character",
    "CharacterSet",
    "FontMetrics",
    "BoundingBox",
    "Box",
    "ZoneBoxes",
    # Rules
    "AttachmentRule",
    "DEFAULT_ATTACHMENT_RULE",
    "MarkAttachmentRules",
    "AttachmentClass",
    "PositioningRule",
    "KerningRule",
    # Bundles
    "GlyphSet",
    "RuleSet",
    "Project",
    "KerningMap",
    "MarkPositioningMap",
]
