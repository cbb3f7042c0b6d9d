"""Collision-aware auto-kerning.

For each pair the solver looks for the tightest (most negative) kern value in
``[-round(upm * search_fraction), 0]`` that still satisfies three constraints:

1. Ascender and descender zone boxes never collide (touching counts).
2. If both glyphs have an x-height zone, the x-height gap is at least the
   target gap T.
3. Otherwise the full boxes never collide.

For a non-negative target, validity is monotone in the kern value: once a
value is too tight, every more negative value is too tight as well, so a
binary search finds the tightest one.
"""

import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

import structlog

from glyphsmith.config import GeometryConfig, KerningConfig
from glyphsmith.core.groups import GroupResolver
from glyphsmith.core.zones import boxes_collide, compute_zone_boxes
from glyphsmith.domain import (
    Box,
    Character,
    FontMetrics,
    GlyphSet,
    KerningMap,
    KerningRule,
    Project,
    ZoneBoxes,
)
from glyphsmith.utils.logging import ProcessingLogger

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int], None]
CharacterPair = tuple[Character, Character]

TARGET_LSB = "lsb"
TARGET_RSB = "rsb"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def progress_percent(completed: int, total: int) -> int:
    """Completion percentage; an empty batch is complete."""
    if total <= 0:
        return 100
    return _round_half_up(completed / total * 100)


def find_kerning_rule(
    left: Character,
    right: Character,
    rules: Iterable[KerningRule],
    resolver: GroupResolver,
) -> KerningRule | None:
    """First rule whose left and right sides list the pair, directly or via groups."""
    for rule in rules:
        if resolver.contains([rule.left], left.name) and resolver.contains(
            [rule.right], right.name
        ):
            return rule
    return None


def _numeric_target(target: float | str) -> float | None:
    if isinstance(target, bool):
        return None
    if isinstance(target, (int, float)):
        return float(target) if math.isfinite(target) else None
    if not isinstance(target, str):
        return None
    # A blank target is malformed here, not a zero "touch" target
    try:
        value = float(target.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def default_target_gap(left: Character, right: Character, metrics: FontMetrics) -> float:
    """Side-bearing sum, with negative bearings replaced by the metric defaults."""
    rsb = left.resolved_rsb(metrics)
    lsb = right.resolved_lsb(metrics)
    if rsb < 0:
        rsb = metrics.default_rsb
    if lsb < 0:
        lsb = metrics.default_lsb
    return rsb + lsb


def resolve_target_gap(
    left: Character,
    right: Character,
    rules: Iterable[KerningRule] | None,
    metrics: FontMetrics,
    resolver: GroupResolver | None = None,
) -> float:
    """Resolve the x-height target gap T of a pair.

    Args:
        left: Left character
        right: Right character
        rules: Recommended kerning rules
        metrics: Font metrics supplying side-bearing defaults
        resolver: Group resolver for ``$group`` references in rules

    Returns:
        T. A rule target of 0 asks for touching x-height boxes. "lsb" uses the
        right glyph's LSB and "rsb" the left glyph's RSB. No rule, a rule
        without a target, or an unrecognized token gives the default gap.
    """
    resolver = resolver or GroupResolver()
    rule = find_kerning_rule(left, right, rules or [], resolver)
    if rule is None or rule.target is None:
        return default_target_gap(left, right, metrics)

    target = rule.target
    if isinstance(target, str):
        token = target.strip()
        if token == TARGET_LSB:
            return right.resolved_lsb(metrics)
        if token == TARGET_RSB:
            return left.resolved_rsb(metrics)

    value = _numeric_target(target)
    if value is None:
        logger.debug(
            "Invalid kerning target, using default",
            left=left.name,
            right=right.name,
            target=target,
        )
        return default_target_gap(left, right, metrics)
    return value


def _shift(box: Box | None, dx: float) -> Box | None:
    return box.shifted_x(dx) if box is not None else None


def is_kern_valid(
    left: ZoneBoxes,
    right: ZoneBoxes,
    left_rsb: float,
    right_lsb: float,
    target: float,
    k: int,
) -> bool:
    """Check whether kern value k keeps the pair legible.

    The right glyph is placed so its ink starts at
    ``left.full.max_x + left_rsb + right_lsb + k``.

    Args:
        left: Zone boxes of the left glyph
        right: Zone boxes of the right glyph (untranslated)
        left_rsb: Left glyph's right side bearing
        right_lsb: Right glyph's left side bearing
        target: Minimum x-height gap T
        k: Candidate kern value

    Returns:
        True if k violates neither a hard collision nor the target gap
    """
    dx = left.full.max_x + left_rsb + right_lsb + k - right.full.min_x

    if boxes_collide(left.ascender, _shift(right.ascender, dx)):
        return False
    if boxes_collide(left.descender, _shift(right.descender, dx)):
        return False

    right_x = _shift(right.x_height, dx)
    if right_x is not None and left.x_height is not None:
        return right_x.min_x - left.x_height.max_x >= target

    return not boxes_collide(left.full, right.full.shifted_x(dx))


def kern_pair(
    left: ZoneBoxes,
    right: ZoneBoxes,
    left_rsb: float,
    right_lsb: float,
    target: float,
    units_per_em: int,
    search_fraction: float = 0.5,
) -> int | None:
    """Binary-search the tightest valid kern value of one pair.

    Args:
        left: Zone boxes of the left glyph
        right: Zone boxes of the right glyph
        left_rsb: Left glyph's right side bearing
        right_lsb: Right glyph's left side bearing
        target: Minimum x-height gap T
        units_per_em: Font UPM; bounds the search range
        search_fraction: Search floor as a fraction of UPM

    Returns:
        The most negative valid k, 0 if no tightening is possible,
        or None if not even k=0 is valid
    """
    low = -_round_half_up(units_per_em * search_fraction)
    high = 0
    best_k: int | None = None

    while low <= high:
        mid = (low + high) // 2
        if is_kern_valid(left, right, left_rsb, right_lsb, target, mid):
            best_k = mid
            high = mid - 1
        else:
            low = mid + 1

    return best_k


@dataclass
class KerningBatch:
    """Results handed back at one cooperative yield point.

    Attributes:
        completed: Pairs processed so far (solved or skipped)
        total: Pairs in the whole run
        percent: Progress 0..100
        results: Values solved since the previous yield
    """

    completed: int
    total: int
    percent: int
    results: KerningMap = field(default_factory=dict)


class KerningSolver:
    """Solves kerning values for batches of character pairs.

    The solver is stateless across calls; each call builds its own zone box
    table and group resolver. Glyph bounding boxes are memoized on the glyphs.

    Example:
        solver = KerningSolver()
        kerning = solver.solve(pairs, glyph_set, metrics, stroke_thickness=15.0)
    """

    def __init__(
        self,
        config: KerningConfig | None = None,
        geometry: GeometryConfig | None = None,
        processing_logger: ProcessingLogger | None = None,
    ) -> None:
        self.config = config or KerningConfig()
        self.geometry = geometry or GeometryConfig()
        self.processing_logger = processing_logger

    def _zone_boxes(
        self,
        character: Character,
        glyph_set: GlyphSet,
        metrics: FontMetrics,
        stroke_thickness: float,
        table: dict[int, ZoneBoxes | None],
    ) -> ZoneBoxes | None:
        glyph = glyph_set.glyph_for(character)
        if glyph is None or character.unicode is None:
            return None
        if character.unicode not in table:
            table[character.unicode] = compute_zone_boxes(
                glyph,
                metrics.base_line_y,
                metrics.top_line_y,
                stroke_thickness,
                self.geometry,
            )
        return table[character.unicode]

    def _skip(self, left: Character, right: Character, reason: str) -> None:
        if self.processing_logger is not None:
            self.processing_logger.log_pair_skipped(left.name, right.name, reason)

    def iter_solve(
        self,
        pairs: list[CharacterPair],
        glyph_set: GlyphSet,
        metrics: FontMetrics,
        stroke_thickness: float,
        rules: list[KerningRule] | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> Iterator[KerningBatch]:
        """Solve pairs, yielding control back every few pairs.

        Args:
            pairs: (left, right) characters to kern
            glyph_set: Characters, glyph ink and groups
            metrics: Font metrics
            stroke_thickness: Active stroke thickness
            rules: Recommended kerning rules for target gaps
            progress_callback: Called with 0..100 after every pair

        Yields:
            KerningBatch after every ``yield_every`` pairs and after the last pair
        """
        resolver = GroupResolver(glyph_set.groups, glyph_set.character_sets)
        zone_table: dict[int, ZoneBoxes | None] = {}
        total = len(pairs)

        if total == 0:
            if progress_callback is not None:
                progress_callback(100)
            return

        pending: KerningMap = {}
        for index, (left, right) in enumerate(pairs):
            left_boxes = self._zone_boxes(left, glyph_set, metrics, stroke_thickness, zone_table)
            right_boxes = self._zone_boxes(right, glyph_set, metrics, stroke_thickness, zone_table)

            if left_boxes is None or right_boxes is None:
                self._skip(left, right, "missing geometry")
            else:
                target = resolve_target_gap(left, right, rules, metrics, resolver)
                value = kern_pair(
                    left_boxes,
                    right_boxes,
                    left.resolved_rsb(metrics),
                    right.resolved_lsb(metrics),
                    target,
                    metrics.units_per_em,
                    self.config.search_fraction,
                )
                if value is not None:
                    pending[(left.unicode, right.unicode)] = value  # type: ignore[index]
                    if self.processing_logger is not None:
                        self.processing_logger.log_pair_kerned(
                            left.name, right.name, value, target
                        )
                else:
                    self._skip(left, right, "no valid kern value")

            completed = index + 1
            percent = progress_percent(completed, total)
            if progress_callback is not None:
                progress_callback(percent)

            if completed % self.config.yield_every == 0 or completed == total:
                yield KerningBatch(completed, total, percent, pending)
                pending = {}

    def solve(
        self,
        pairs: list[CharacterPair],
        glyph_set: GlyphSet,
        metrics: FontMetrics,
        stroke_thickness: float,
        rules: list[KerningRule] | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> KerningMap:
        """Solve every pair and return the new kerning map.

        Pairs whose glyphs are missing or empty are left out of the result.
        """
        result: KerningMap = {}
        for batch in self.iter_solve(
            pairs, glyph_set, metrics, stroke_thickness, rules, progress_callback
        ):
            result.update(batch.results)
        logger.debug("Kerning solved", pairs=len(pairs), values=len(result))
        return result


def solve_kerning(
    pairs: list[CharacterPair],
    glyph_set: GlyphSet,
    metrics: FontMetrics,
    stroke_thickness: float,
    rules: list[KerningRule] | None = None,
    progress_callback: ProgressCallback | None = None,
    config: KerningConfig | None = None,
) -> KerningMap:
    """Convenience wrapper around KerningSolver.solve."""
    return KerningSolver(config).solve(
        pairs, glyph_set, metrics, stroke_thickness, rules, progress_callback
    )


def _drawn(glyph_set: GlyphSet, names: Iterable[str]) -> list[Character]:
    drawn = []
    for name in names:
        character = glyph_set.character(name)
        if character is not None and not character.hidden and glyph_set.has_ink(character):
            drawn.append(character)
    return drawn


def discover_pairs(project: Project, include_reviewed: bool = False) -> list[CharacterPair]:
    """Expand recommended kerning rules into concrete drawn pairs.

    Args:
        project: Project whose rules, groups and glyphs are used
        include_reviewed: Also return pairs already in the kerning map

    Returns:
        Unique (left, right) pairs in rule order
    """
    glyph_set = project.glyph_set()
    resolver = GroupResolver(glyph_set.groups, glyph_set.character_sets)
    seen: set[tuple[int, int]] = set()
    pairs: list[CharacterPair] = []

    for rule in project.rules.recommended_kerning:
        lefts = _drawn(glyph_set, resolver.expand([rule.left]))
        rights = _drawn(glyph_set, resolver.expand([rule.right]))
        for left in lefts:
            for right in rights:
                key = (left.unicode, right.unicode)
                if key in seen:
                    continue
                seen.add(key)  # type: ignore[arg-type]
                if not include_reviewed and key in project.kerning:
                    continue
                pairs.append((left, right))
    return pairs


def all_base_pairs(project: Project, include_reviewed: bool = False) -> list[CharacterPair]:
    """Every ordered pair of drawn, visible base characters, by code point."""
    glyph_set = project.glyph_set()
    bases = sorted(
        (
            c
            for c in _drawn(glyph_set, glyph_set.characters)
            if c.is_base_like()
        ),
        key=lambda c: c.unicode or 0,
    )
    return [
        (left, right)
        for left in bases
        for right in bases
        if include_reviewed or (left.unicode, right.unicode) not in project.kerning
    ]
