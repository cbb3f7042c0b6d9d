"""Unit tests for the I/O layer.

Tests for project snapshot files, the pen recording converter and FontReader.
"""

import json
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphsmith.domain import (
    AttachmentClass,
    AttachmentPoint,
    AttachmentRule,
    Character,
    CharacterSet,
    FontMetrics,
    GlyphClass,
    GlyphData,
    KerningRule,
    LinePath,
    OutlinePath,
    Point,
    PositioningRule,
    Project,
    RuleSet,
    Segment,
)
from glyphsmith.exceptions import FontLoadError, ProjectLoadError, ProjectSaveError
from glyphsmith.io import (
    FontReader,
    ProjectReader,
    ProjectWriter,
    merge_font_into_project,
    project_from_dict,
    project_to_dict,
)
from glyphsmith.io.converter import recording_to_segment_groups
from glyphsmith.io.project import parse_pair_key
from glyphsmith.io.reader import infer_glyph_class


@pytest.fixture
def sample_project() -> Project:
    """A small project touching every serialized table."""
    characters = [
        Character(name="a", unicode=97, lsb=40, rsb=35),
        Character(name="acute", unicode=0x301, glyph_class=GlyphClass.MARK),
        Character(name="aacute", unicode=0xE1, glyph_class=GlyphClass.LIGATURE, hidden=True),
    ]
    square = (
        Segment(Point(0, 0)),
        Segment(Point(10, 0), handle_in=Point(-3, 0), handle_out=Point(0, 4)),
        Segment(Point(10, 10)),
    )
    return Project(
        name="Test",
        stroke_thickness=12.0,
        metrics=FontMetrics(top_line_y=280, default_lsb=40),
        character_sets=[CharacterSet("Latin", characters)],
        glyphs={
            97: GlyphData(paths=[LinePath(points=(Point(0, 0), Point(100, 50)))]),
            0x301: GlyphData(paths=[OutlinePath(segment_groups=(square,))]),
        },
        kerning={(97, 97): -12, (97, 0x301): 0},
        mark_positioning={(97, 0x301): Point(40, -20)},
        rules=RuleSet(
            recommended_kerning=[KerningRule("a", "a", "lsb"), KerningRule("$vowels", "a")],
            positioning_rules=[
                PositioningRule(
                    base=["a"],
                    mark=["acute"],
                    gsub="ccmp",
                    ligature_map={"a": {"acute": "aacute"}},
                )
            ],
            mark_attachment_rules={
                "a": {
                    "acute": AttachmentRule(
                        AttachmentPoint.TOP_RIGHT, AttachmentPoint.BOTTOM_LEFT, 5, -3
                    )
                }
            },
            mark_attachment_classes=[AttachmentClass(members=["acute"], except_pairs=["a-acute"])],
            base_attachment_classes=[AttachmentClass(members=["$vowels"], applies=[])],
        ),
        groups={"vowels": ["a"]},
    )


class TestProjectFiles:
    """Tests for ProjectReader and ProjectWriter."""

    def test_round_trip(self, sample_project: Project, tmp_path: Path) -> None:
        path = tmp_path / "project.json"
        ProjectWriter(path).write(sample_project)
        assert ProjectReader(path).read() == sample_project

    def test_pair_maps_use_string_keys(self, sample_project: Project) -> None:
        data = project_to_dict(sample_project)
        assert data["kerning"] == [["97-97", -12], ["97-769", 0]]
        assert data["markPositioning"] == [["97-769", {"x": 40, "y": -20}]]
        assert data["markAttachmentRules"] == {
            "a": {"acute": ["topRight", "bottomLeft", "5", "-3"]}
        }

    def test_minimal_document(self) -> None:
        project = project_from_dict({})
        assert project.name == "Untitled"
        assert project.stroke_thickness == 15.0
        assert project.metrics == FontMetrics()
        assert project.glyphs == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ProjectLoadError, match="file not found"):
            ProjectReader(tmp_path / "missing.json").read()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ProjectLoadError):
            ProjectReader(path).read()

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ProjectLoadError, match="not an object"):
            ProjectReader(path).read()

    def test_malformed_character_set(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"characterSets": [{"characters": []}]}), encoding="utf-8")
        with pytest.raises(ProjectLoadError, match="malformed"):
            ProjectReader(path).read()

    def test_unreadable_entries_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "partial.json"
        data = {
            "glyphs": [
                [
                    97,
                    {
                        "paths": [
                            {"type": "spiral", "points": []},
                            {"type": "line", "points": [{"x": 0}]},
                            {"type": "line", "points": [{"x": 0, "y": 0}]},
                        ]
                    },
                ]
            ],
            "kerning": [["97", -10], ["97-98", -20]],
            "markAttachmentRules": {"a": {"acute": ["nowhere", "bottomCenter"]}},
        }
        path.write_text(json.dumps(data), encoding="utf-8")

        project = ProjectReader(path).read()

        assert project.glyphs[97].paths == [LinePath(points=(Point(0, 0),))]
        assert project.kerning == {(97, 98): -20}
        assert project.rules.mark_attachment_rules == {}

    def test_write_to_missing_directory(self, sample_project: Project, tmp_path: Path) -> None:
        with pytest.raises(ProjectSaveError):
            ProjectWriter(tmp_path / "nope" / "project.json").write(sample_project)

    def test_output_path(self) -> None:
        out = ProjectWriter.get_output_path(Path("/fonts/latin.json"), "kerned")
        assert out == Path("/fonts/latin-kerned.json")

    def test_parse_pair_key(self) -> None:
        assert parse_pair_key("72-73") == (72, 73)
        assert parse_pair_key("72") is None
        assert parse_pair_key("a-b") is None


class TestRecordingConversion:
    """Tests for converting fonttools pen recordings to contours."""

    def test_line_square_flipped_onto_baseline(self) -> None:
        recording = [
            ("moveTo", ((0, 0),)),
            ("lineTo", ((100, 0),)),
            ("lineTo", ((100, 100),)),
            ("lineTo", ((0, 100),)),
            ("closePath", ()),
        ]
        groups = recording_to_segment_groups(recording, 1.0, 600.0)

        assert len(groups) == 1
        assert [s.point for s in groups[0]] == [
            Point(0, 600),
            Point(100, 600),
            Point(100, 500),
            Point(0, 500),
        ]
        assert all(s.handle_in == Point(0, 0) and s.handle_out == Point(0, 0) for s in groups[0])

    def test_scaled_points_round_half_up(self) -> None:
        recording = [("moveTo", ((101, 0),)), ("lineTo", ((3, 5),)), ("closePath", ())]
        groups = recording_to_segment_groups(recording, 0.5, 600.0)
        assert [s.point for s in groups[0]] == [Point(51, 600), Point(2, 598)]

    def test_closing_point_merged_into_start(self) -> None:
        recording = [
            ("moveTo", ((0, 0),)),
            ("lineTo", ((100, 0),)),
            ("curveTo", ((100, 50), (50, 100), (0, 0))),
            ("closePath", ()),
        ]
        groups = recording_to_segment_groups(recording)

        first, second = groups[0]
        assert len(groups[0]) == 2
        assert first.point == Point(0, 0)
        assert first.handle_in == Point(50, -100)
        assert second.handle_out == Point(0, -50)

    def test_quadratic_raised_to_cubic(self) -> None:
        recording = [
            ("moveTo", ((0, 0),)),
            ("qCurveTo", ((50, 100), (100, 0))),
            ("closePath", ()),
        ]
        start, end = recording_to_segment_groups(recording)[0]

        assert start.handle_out.x == pytest.approx(100 / 3)
        assert start.handle_out.y == pytest.approx(-200 / 3)
        assert end.point == Point(100, 0)
        assert end.handle_in.x == pytest.approx(-100 / 3)
        assert end.handle_in.y == pytest.approx(-200 / 3)

    def test_contour_without_on_curve_points(self) -> None:
        recording = [
            ("qCurveTo", ((0, 0), (100, 0), (100, 100), (0, 100), None)),
            ("closePath", ()),
        ]
        groups = recording_to_segment_groups(recording)

        assert len(groups) == 1
        assert {s.point for s in groups[0]} == {
            Point(0, -50),
            Point(50, 0),
            Point(100, -50),
            Point(50, -100),
        }

    def test_open_contours_are_split(self) -> None:
        recording = [
            ("moveTo", ((0, 0),)),
            ("lineTo", ((10, 0),)),
            ("moveTo", ((20, 0),)),
            ("lineTo", ((30, 0),)),
            ("endPath", ()),
        ]
        assert len(recording_to_segment_groups(recording)) == 2


def draw_rect(x0: int, y0: int, x1: int, y1: int):
    pen = TTGlyphPen(None)
    pen.moveTo((x0, y0))
    pen.lineTo((x0, y1))
    pen.lineTo((x1, y1))
    pen.lineTo((x1, y0))
    pen.closePath()
    return pen.glyph()


@pytest.fixture
def font_path(tmp_path: Path) -> Path:
    """A 2000 UPM TrueType font with encoded, unencoded and mark glyphs."""
    order = [".notdef", "space", "H", "H.alt", "acutecomb"]
    fb = FontBuilder(2000, isTTF=True)
    fb.setupGlyphOrder(order)
    fb.setupCharacterMap({32: "space", 72: "H", 0x301: "acutecomb"})
    fb.setupGlyf(
        {
            ".notdef": TTGlyphPen(None).glyph(),
            "space": TTGlyphPen(None).glyph(),
            "H": draw_rect(100, 0, 300, 1400),
            "H.alt": draw_rect(100, 0, 300, 1400),
            "acutecomb": draw_rect(-200, 1500, 0, 1700),
        }
    )
    fb.setupHorizontalMetrics(
        {
            ".notdef": (1000, 0),
            "space": (500, 0),
            "H": (800, 100),
            "H.alt": (800, 100),
            "acutecomb": (0, -200),
        }
    )
    fb.setupHorizontalHeader(ascent=1600, descent=-400)
    fb.setupNameTable({"familyName": "Test Sans", "styleName": "Regular"})
    fb.setupOS2()
    fb.setupPost()
    fb.setupMaxp()
    path = tmp_path / "TestSans.ttf"
    fb.save(str(path))
    return path


class TestFontReader:
    """Tests for FontReader class."""

    def test_init(self) -> None:
        path = Path("test.ttf")
        reader = FontReader(path)
        assert reader._font_path == path
        assert reader._font is None

    def test_load_nonexistent_file(self) -> None:
        with pytest.raises(FontLoadError, match="file not found"):
            FontReader(Path("nonexistent.ttf")).load()

    def test_load_garbage(self, tmp_path: Path) -> None:
        path = tmp_path / "garbage.ttf"
        path.write_bytes(b"not a font at all")
        with pytest.raises(FontLoadError):
            FontReader(path).load()

    def test_properties_before_load(self) -> None:
        reader = FontReader(Path("test.ttf"))
        with pytest.raises(RuntimeError, match="Font not loaded"):
            _ = reader.units_per_em

    def test_font_properties(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            assert reader.format == "TrueType"
            assert reader.units_per_em == 2000
            assert reader.glyph_count == 5
            assert reader.scale == 0.5
            assert reader.family_name == "Test Sans"

    def test_metrics(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            metrics = reader.metrics()
        assert metrics.units_per_em == 1000
        assert metrics.base_line_y == 600
        assert metrics.top_line_y == 120
        assert metrics.ascender == 800
        assert metrics.descender == -200

    def test_characters(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            imported = dict((c.name, (c, g)) for c, g in reader.iter_characters())

        h, h_glyph = imported["H"]
        assert h.unicode == 72
        assert h.glyph_class == GlyphClass.BASE
        assert h.lsb == 50
        assert h.rsb == 250
        outline = h_glyph.paths[0]
        assert isinstance(outline, OutlinePath)
        assert {s.point for s in outline.segment_groups[0]} == {
            Point(50, 600),
            Point(50, -100),
            Point(150, -100),
            Point(150, 600),
        }

    def test_unencoded_glyphs_get_private_use_codes(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            unicodes = {c.name: c.unicode for c, _ in reader.iter_characters()}
        assert unicodes[".notdef"] == 0xE000
        assert unicodes["H.alt"] == 0xE001

    def test_empty_glyphs_kept(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            imported = {c.name: (c, g) for c, g in reader.iter_characters()}
        space, glyph = imported["space"]
        assert space.rsb == 0
        assert glyph.is_empty()
        assert len(glyph.paths) == 1

    def test_zero_width_encoded_glyph_is_mark(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            classes = {c.name: c.glyph_class for c, _ in reader.iter_characters()}
        assert classes["acutecomb"] == GlyphClass.MARK
        assert classes["space"] == GlyphClass.BASE

    def test_read_project(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            project = reader.read_project()

        assert project.name == "Test Sans"
        assert project.stroke_thickness == 1.0
        assert [cs.name_key for cs in project.character_sets] == ["Imported"]
        assert len(project.all_characters()) == 5
        assert set(project.glyphs) == {32, 72, 0x301, 0xE000, 0xE001}

    def test_read_project_explicit_name(self, font_path: Path) -> None:
        with FontReader(font_path) as reader:
            assert reader.read_project("Mine").name == "Mine"


class TestGlyphClassInference:
    """Tests for class guessing without GDEF."""

    def test_rules(self) -> None:
        assert infer_glyph_class("acutecomb", 0x301, 0) == GlyphClass.MARK
        assert infer_glyph_class("f_i", 0xFB01, 500) == GlyphClass.LIGATURE
        assert infer_glyph_class("fi.liga", None, 500) == GlyphClass.LIGATURE
        assert infer_glyph_class("a", 97, 500) == GlyphClass.BASE
        # Unencoded zero-width glyphs are not assumed to be marks
        assert infer_glyph_class("blank", None, 0) == GlyphClass.BASE


class TestMergeFontIntoProject:
    """Tests for merging imported glyphs."""

    def test_only_missing_unicodes_added(self) -> None:
        existing = Project(
            character_sets=[CharacterSet("Latin", [Character(name="H", unicode=72)])],
            glyphs={72: GlyphData(paths=[LinePath(points=(Point(0, 0),))])},
        )
        imported = Project(
            character_sets=[
                CharacterSet(
                    "Imported",
                    [Character(name="H", unicode=72), Character(name="I", unicode=73)],
                )
            ],
            glyphs={72: GlyphData(), 73: GlyphData()},
        )

        new_glyphs, new_characters = merge_font_into_project(existing, imported)

        assert set(new_glyphs) == {73}
        assert [c.name for c in new_characters] == ["I"]
        assert set(existing.glyphs) == {72}
