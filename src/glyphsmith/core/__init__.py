"""Core algorithms for glyphsmith.

This module contains the core algorithms for:

- Geometry primitives (vector math, curve and stroke flattening)
- Bounding boxes (exact outline bounds, stroke inflation, per-glyph memo)
- Zone classification (ascender / x-height / descender boxes)
- Auto-kerning (target gap resolution, monotone binary search)
- Mark positioning (anchor math, sibling cascade, ligature composition)

All algorithms are designed to be:
- Stateless (safe for use in worker processes)
- Pure (new maps are returned, inputs are never modified)

Key functions:
- compute_bounding_box: Bounds of a set of paths
- compute_zone_boxes: Zone boxes of a glyph
- resolve_target_gap: Target x-height gap of a kerning pair
- kern_pair: Tightest valid kern value of a pair
- compute_anchor_delta / derive_offset: Anchor-relative mark placement

Key classes:
- GroupResolver: Expands $group / @group references
- KerningSolver: Solves kerning for batches of pairs
- MarkPositioningCascade: Propagates a manual mark placement
- ProjectProcessor: Parallel kerning runs and positioning edits
"""

from glyphsmith.core.anchors import (
    anchor_coords,
    calculate_default_mark_offset,
    compute_anchor_delta,
    derive_offset,
    resolve_attachment_rule,
)
from glyphsmith.core.bounds import compute_bounding_box, glyph_bounding_box
from glyphsmith.core.cascade import (
    CascadeResult,
    MarkPositioningCascade,
    resolve_sibling_bases,
    resolve_sibling_marks,
)
from glyphsmith.core.compose import compose_ligature
from glyphsmith.core.geometry import (
    curve_to_polyline,
    flatten_path,
    quadratic_curve_to_polyline,
)
from glyphsmith.core.groups import GroupResolver
from glyphsmith.core.kerning import (
    KerningBatch,
    KerningSolver,
    all_base_pairs,
    discover_pairs,
    is_kern_valid,
    kern_pair,
    resolve_target_gap,
    solve_kerning,
)
from glyphsmith.core.processor import ProjectProcessor, solve_chunk
from glyphsmith.core.zones import boxes_collide, compute_zone_boxes

__all__ = [
    # Cascade classes
    "CascadeResult",
    "GroupResolver",
    # Kerning classes
    "KerningBatch",
    "KerningSolver",
    "MarkPositioningCascade",
    # Processor classes
    "ProjectProcessor",
    # Functions
    "all_base_pairs",
    "anchor_coords",
    "boxes_collide",
    "calculate_default_mark_offset",
    "compose_ligature",
    "compute_anchor_delta",
    "compute_bounding_box",
    "compute_zone_boxes",
    "curve_to_polyline",
    "derive_offset",
    "discover_pairs",
    "flatten_path",
    "glyph_bounding_box",
    "is_kern_valid",
    "kern_pair",
    "quadratic_curve_to_polyline",
    "resolve_attachment_rule",
    "resolve_sibling_bases",
    "resolve_sibling_marks",
    "resolve_target_gap",
    "solve_chunk",
    "solve_kerning",
]
