"""Tests for target gap resolution and the kerning solver."""

import pytest

from glyphsmith.config import KerningConfig
from glyphsmith.core.groups import GroupResolver
from glyphsmith.core.kerning import (
    KerningSolver,
    all_base_pairs,
    discover_pairs,
    is_kern_valid,
    kern_pair,
    progress_percent,
    resolve_target_gap,
    solve_kerning,
)
from glyphsmith.domain import (
    Box,
    Character,
    CharacterSet,
    FontMetrics,
    GlyphClass,
    GlyphData,
    GlyphSet,
    KerningRule,
    OutlinePath,
    Point,
    Project,
    RuleSet,
    Segment,
    ZoneBoxes,
)

METRICS = FontMetrics(base_line_y=600, top_line_y=-100, default_lsb=50, default_rsb=50)


def rect_glyph(x: float, y: float, w: float, h: float) -> GlyphData:
    group = (
        Segment(Point(x, y)),
        Segment(Point(x + w, y)),
        Segment(Point(x + w, y + h)),
        Segment(Point(x, y + h)),
    )
    return GlyphData(paths=[OutlinePath(segment_groups=(group,))])


def x_height_boxes(min_x: float, max_x: float) -> ZoneBoxes:
    box = Box(min_x, max_x, 0, 500)
    return ZoneBoxes(full=box, x_height=box)


@pytest.fixture
def stems() -> GlyphSet:
    """Two 100x500 stems with 50-unit bearings."""
    characters = [
        Character(name="H", unicode=72, lsb=50, rsb=50),
        Character(name="I", unicode=73, lsb=50, rsb=50),
    ]
    glyphs = {72: rect_glyph(0, 0, 100, 500), 73: rect_glyph(0, 0, 100, 500)}
    return GlyphSet.from_characters(characters, glyphs)


class TestProgress:
    """Tests for progress percentages."""

    def test_rounds_half_up(self) -> None:
        assert progress_percent(1, 8) == 13  # 12.5
        assert progress_percent(1, 3) == 33
        assert progress_percent(2, 3) == 67

    def test_empty_batch_is_complete(self) -> None:
        assert progress_percent(0, 0) == 100


class TestResolveTargetGap:
    """Tests for x-height target gap resolution."""

    left = Character(name="a", unicode=97, lsb=20, rsb=30)
    right = Character(name="b", unicode=98, lsb=40, rsb=10)

    def test_no_rule_uses_bearing_sum(self) -> None:
        assert resolve_target_gap(self.left, self.right, [], METRICS) == 70

    def test_rule_without_target_uses_bearing_sum(self) -> None:
        rules = [KerningRule("a", "b")]
        assert resolve_target_gap(self.left, self.right, rules, METRICS) == 70

    def test_lsb_token(self) -> None:
        rules = [KerningRule("a", "b", "lsb")]
        assert resolve_target_gap(self.left, self.right, rules, METRICS) == 40

    def test_rsb_token(self) -> None:
        rules = [KerningRule("a", "b", "rsb")]
        assert resolve_target_gap(self.left, self.right, rules, METRICS) == 30

    def test_numeric_targets(self) -> None:
        assert resolve_target_gap(self.left, self.right, [KerningRule("a", "b", 0)], METRICS) == 0
        assert resolve_target_gap(self.left, self.right, [KerningRule("a", "b", "25")], METRICS) == 25

    def test_invalid_target_uses_default(self) -> None:
        rules = [KerningRule("a", "b", "tight")]
        assert resolve_target_gap(self.left, self.right, rules, METRICS) == 70
        rules = [KerningRule("a", "b", "")]
        assert resolve_target_gap(self.left, self.right, rules, METRICS) == 70

    def test_negative_bearings_replaced_by_defaults(self) -> None:
        left = Character(name="a", rsb=-10)
        right = Character(name="b", lsb=-5)
        assert resolve_target_gap(left, right, [], METRICS) == 100

    def test_missing_bearings_use_defaults(self) -> None:
        left = Character(name="a")
        right = Character(name="b")
        assert resolve_target_gap(left, right, [], METRICS) == 100

    def test_first_matching_rule_wins(self) -> None:
        rules = [KerningRule("x", "b", 5), KerningRule("a", "b", 10), KerningRule("a", "b", 20)]
        assert resolve_target_gap(self.left, self.right, rules, METRICS) == 10

    def test_group_rules(self) -> None:
        resolver = GroupResolver({"left": ["a", "c"]})
        rules = [KerningRule("$left", "b", 12)]
        assert resolve_target_gap(self.left, self.right, rules, METRICS, resolver) == 12


class TestKernPair:
    """Tests for the per-pair binary search."""

    def test_stems_close_to_target(self) -> None:
        boxes = x_height_boxes(0, 100)
        assert kern_pair(boxes, boxes, 50, 50, 0, 1000) == -100

    def test_default_gap_keeps_spacing(self) -> None:
        boxes = x_height_boxes(0, 100)
        assert kern_pair(boxes, boxes, 50, 50, 100, 1000) == 0

    def test_touching_boxes_with_zero_target_are_reviewed_as_zero(self) -> None:
        boxes = x_height_boxes(0, 100)
        assert kern_pair(boxes, boxes, 0, 0, 0, 1000) == 0

    def test_wide_gap_kerns_negative(self) -> None:
        boxes = x_height_boxes(0, 100)
        assert kern_pair(boxes, boxes, 30, 30, 0, 1000) == -60

    def test_no_valid_value_gives_none(self) -> None:
        boxes = x_height_boxes(0, 100)
        # The default gap of 100 already falls short of 200 at k=0
        assert not is_kern_valid(boxes, boxes, 50, 50, 200, 0)
        assert kern_pair(boxes, boxes, 50, 50, 200, 1000) is None

    def test_search_floor(self) -> None:
        boxes = x_height_boxes(0, 100)
        # Target far below anything reachable: stops at -round(upm / 2)
        assert kern_pair(boxes, boxes, 50, 50, -10_000, 1000) == -500
        assert kern_pair(boxes, boxes, 50, 50, -10_000, 2048) == -1024

    def test_ascender_collision_is_hard(self) -> None:
        left = ZoneBoxes(
            full=Box(0, 100, 0, 500),
            ascender=Box(0, 100, 0, 100),
            x_height=Box(0, 100, 300, 500),
        )
        # Touching ascender boxes already collide, so -100 is not allowed
        assert kern_pair(left, left, 50, 50, -10_000, 1000) == -99

    def test_descender_collision_is_hard(self) -> None:
        left = ZoneBoxes(
            full=Box(0, 100, 0, 800),
            x_height=Box(0, 100, 0, 500),
            descender=Box(0, 100, 600, 800),
        )
        assert kern_pair(left, left, 50, 50, -10_000, 1000) == -99

    def test_full_box_fallback_without_x_height(self) -> None:
        left = ZoneBoxes(full=Box(0, 100, 0, 100), ascender=Box(0, 100, 0, 100))
        right = ZoneBoxes(full=Box(0, 100, 600, 700), descender=Box(0, 100, 600, 700))
        # Full boxes never overlap vertically, so the search floor is reached
        assert kern_pair(left, right, 50, 50, 0, 1000) == -500

    @pytest.mark.parametrize(
        ("left_rsb", "right_lsb", "target"),
        [(50, 50, 0), (0, 0, 30), (50, 50, 100), (10, 80, 15)],
    )
    def test_validity_is_monotone(self, left_rsb: float, right_lsb: float, target: float) -> None:
        left = ZoneBoxes(
            full=Box(0, 100, 0, 800),
            ascender=Box(60, 100, 0, 100),
            x_height=Box(0, 100, 300, 500),
            descender=Box(0, 40, 600, 800),
        )
        right = ZoneBoxes(
            full=Box(0, 120, 0, 800),
            ascender=Box(0, 50, 0, 100),
            x_height=Box(10, 120, 300, 500),
            descender=Box(70, 120, 600, 800),
        )
        seen_invalid = False
        for k in range(0, -501, -1):
            valid = is_kern_valid(left, right, left_rsb, right_lsb, target, k)
            if seen_invalid:
                assert not valid, f"k={k} valid after a tighter-than-allowed value"
            seen_invalid = seen_invalid or not valid


class TestKerningSolver:
    """Tests for batch solving."""

    def test_rule_target_zero(self, stems: GlyphSet) -> None:
        pairs = [(stems.characters["H"], stems.characters["I"])]
        result = solve_kerning(pairs, stems, METRICS, 0.0, [KerningRule("H", "I", 0)])
        assert result == {(72, 73): -100}

    def test_default_gap_records_zero(self, stems: GlyphSet) -> None:
        pairs = [(stems.characters["H"], stems.characters["I"])]
        assert solve_kerning(pairs, stems, METRICS, 0.0) == {(72, 73): 0}

    def test_unreachable_target_records_nothing(self, stems: GlyphSet) -> None:
        pairs = [(stems.characters["H"], stems.characters["I"])]
        result = solve_kerning(pairs, stems, METRICS, 0.0, [KerningRule("H", "I", 200)])
        assert result == {}

    def test_missing_geometry_skipped(self, stems: GlyphSet) -> None:
        ghost = Character(name="ghost", unicode=0xE000)
        pairs = [(stems.characters["H"], ghost), (ghost, stems.characters["I"])]
        assert solve_kerning(pairs, stems, METRICS, 0.0) == {}

    def test_batches_and_progress(self, stems: GlyphSet) -> None:
        h, i = stems.characters["H"], stems.characters["I"]
        pairs = [(h, i), (i, h), (h, h), (i, i), (h, i)]
        progress: list[int] = []
        solver = KerningSolver(KerningConfig(yield_every=2))

        batches = list(
            solver.iter_solve(pairs, stems, METRICS, 0.0, progress_callback=progress.append)
        )

        assert [b.completed for b in batches] == [2, 4, 5]
        assert batches[-1].percent == 100
        assert progress == [20, 40, 60, 80, 100]
        assert set(batches[0].results) == {(72, 73), (73, 72)}

    def test_empty_batch_reports_complete(self, stems: GlyphSet) -> None:
        progress: list[int] = []
        batches = list(
            KerningSolver().iter_solve([], stems, METRICS, 0.0, progress_callback=progress.append)
        )
        assert batches == []
        assert progress == [100]

    def test_inputs_not_modified(self, stems: GlyphSet) -> None:
        pairs = [(stems.characters["H"], stems.characters["I"])]
        rules = [KerningRule("H", "I", 0)]
        KerningSolver().solve(pairs, stems, METRICS, 0.0, rules)
        assert rules == [KerningRule("H", "I", 0)]
        assert set(stems.glyphs) == {72, 73}


@pytest.fixture
def latin_project() -> Project:
    characters = [
        Character(name="H", unicode=72),
        Character(name="I", unicode=73),
        Character(name="O", unicode=79),
        Character(name="X", unicode=88, hidden=True),
        Character(name="Q", unicode=81),
        Character(name="acute", unicode=0x301, glyph_class=GlyphClass.MARK),
    ]
    glyphs = {u: rect_glyph(0, 0, 100, 500) for u in (72, 73, 79, 88, 0x301)}
    return Project(
        metrics=METRICS,
        character_sets=[CharacterSet("Latin", characters)],
        glyphs=glyphs,
        kerning={(72, 79): -10},
        rules=RuleSet(
            recommended_kerning=[
                KerningRule("$straight", "O"),
                KerningRule("H", "O", 0),
                KerningRule("X", "O"),
                KerningRule("Q", "O"),
            ]
        ),
        groups={"straight": ["H", "I"]},
    )


class TestPairDiscovery:
    """Tests for pair discovery from rules."""

    def test_reviewed_pairs_excluded(self, latin_project: Project) -> None:
        pairs = discover_pairs(latin_project)
        assert [(l.name, r.name) for l, r in pairs] == [("I", "O")]

    def test_include_reviewed(self, latin_project: Project) -> None:
        pairs = discover_pairs(latin_project, include_reviewed=True)
        assert [(l.name, r.name) for l, r in pairs] == [("H", "O"), ("I", "O")]

    def test_all_base_pairs_skip_marks_hidden_and_undrawn(self, latin_project: Project) -> None:
        pairs = all_base_pairs(latin_project, include_reviewed=True)
        names = {(l.name, r.name) for l, r in pairs}
        assert len(names) == 9
        assert ("H", "O") in names
        assert not any("acute" in pair or "X" in pair or "Q" in pair for pair in names)

    def test_all_base_pairs_excludes_reviewed(self, latin_project: Project) -> None:
        pairs = all_base_pairs(latin_project)
        assert ("H", "O") not in {(l.name, r.name) for l, r in pairs}
