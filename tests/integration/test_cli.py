"""Tests for the glyphsmith command line."""

import json
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from typer.testing import CliRunner

from glyphsmith import __version__
from glyphsmith.cli.app import app
from glyphsmith.domain import Point
from glyphsmith.io import ProjectReader

runner = CliRunner()


def outline_rect(w: float, h: float) -> dict:
    corners = [(0, 0), (w, 0), (w, h), (0, h)]
    return {
        "type": "outline",
        "points": [],
        "segmentGroups": [[{"point": {"x": x, "y": y}} for x, y in corners]],
    }


@pytest.fixture
def project_path(tmp_path: Path) -> Path:
    document = {
        "name": "Stems",
        "settings": {"strokeThickness": 0},
        "metrics": {"baseLineY": 600, "topLineY": -100},
        "characterSets": [
            {
                "nameKey": "Latin",
                "characters": [
                    {"name": "H", "unicode": 72, "lsb": 50, "rsb": 50},
                    {"name": "I", "unicode": 73, "lsb": 50, "rsb": 50},
                    {"name": "acute", "unicode": 769, "glyphClass": "mark"},
                    {"name": "space", "unicode": 32},
                ],
            }
        ],
        "glyphs": [
            [72, {"paths": [outline_rect(100, 500)]}],
            [73, {"paths": [outline_rect(100, 500)]}],
            [769, {"paths": [outline_rect(20, 20)]}],
        ],
        "recommendedKerning": [["H", "I", 0]],
        "baseAttachmentClasses": [{"members": ["H", "I"]}],
    }
    path = tmp_path / "stems.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "cli.log"


@pytest.fixture
def font_path(tmp_path: Path) -> Path:
    """A two-glyph TrueType font."""
    pen = TTGlyphPen(None)
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((300, 700))
    pen.lineTo((300, 0))
    pen.closePath()

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "I"])
    fb.setupCharacterMap({73: "I"})
    fb.setupGlyf({".notdef": TTGlyphPen(None).glyph(), "I": pen.glyph()})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "I": (400, 100)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Cli Test", "styleName": "Regular"})
    fb.setupOS2()
    fb.setupPost()
    fb.setupMaxp()
    path = tmp_path / "CliTest.ttf"
    fb.save(str(path))
    return path


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestKernCommand:
    """Tests for `glyphsmith kern`."""

    def test_writes_kerned_copy(self, project_path: Path, log_file: Path) -> None:
        result = runner.invoke(
            app, ["kern", str(project_path), "--quiet", "--log-file", str(log_file)]
        )

        assert result.exit_code == 0, result.output
        output = project_path.parent / "stems-kerned.json"
        assert ProjectReader(output).read().kerning == {(72, 73): -100}
        # The input is left as it was
        assert ProjectReader(project_path).read().kerning == {}

    def test_progress_output(self, project_path: Path, log_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "out.json"
        result = runner.invoke(
            app, ["kern", str(project_path), "-o", str(output), "--log-file", str(log_file)]
        )

        assert result.exit_code == 0, result.output
        assert "Complete" in result.output
        assert output.exists()

    def test_all_pairs(self, project_path: Path, log_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "all.json"
        result = runner.invoke(
            app,
            [
                "kern",
                str(project_path),
                "--all-pairs",
                "-o",
                str(output),
                "--quiet",
                "--log-file",
                str(log_file),
            ],
        )

        assert result.exit_code == 0, result.output
        # H and I only; the mark and the undrawn space are left out
        assert set(ProjectReader(output).read().kerning) == {
            (72, 72),
            (72, 73),
            (73, 72),
            (73, 73),
        }

    def test_nothing_to_do(self, project_path: Path, log_file: Path) -> None:
        args = ["kern", str(project_path), "--log-file", str(log_file)]
        runner.invoke(app, [*args, "-o", str(project_path), "--quiet"])

        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert "Nothing to process" in result.output

    def test_missing_project(self, tmp_path: Path, log_file: Path) -> None:
        result = runner.invoke(
            app, ["kern", str(tmp_path / "missing.json"), "--log-file", str(log_file)]
        )
        assert result.exit_code == 1
        assert "Could not load project" in result.output


class TestPositionCommand:
    """Tests for `glyphsmith position`."""

    def test_cascades_and_saves_in_place(self, project_path: Path, log_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "position",
                str(project_path),
                "H",
                "acute",
                "--quiet",
                "--log-file",
                str(log_file),
                "--",
                "40",
                "-20",
            ],
        )

        assert result.exit_code == 0, result.output
        assert ProjectReader(project_path).read().mark_positioning == {
            (72, 769): Point(40, -20),
            (73, 769): Point(40, -20),
        }

    def test_unknown_character(self, project_path: Path, log_file: Path) -> None:
        result = runner.invoke(
            app,
            ["position", str(project_path), "H", "cedilla", "0", "0", "--log-file", str(log_file)],
        )
        assert result.exit_code == 1
        assert "cedilla" in result.output


class TestBboxCommand:
    """Tests for `glyphsmith bbox`."""

    def test_prints_boxes(self, project_path: Path, log_file: Path) -> None:
        result = runner.invoke(app, ["bbox", str(project_path), "H", "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert "w=100 h=500" in result.output
        assert "x-height" in result.output

    def test_glyph_without_ink(self, project_path: Path, log_file: Path) -> None:
        result = runner.invoke(
            app, ["bbox", str(project_path), "space", "--log-file", str(log_file)]
        )
        assert result.exit_code == 0
        assert "has no ink" in result.output


class TestImportFontCommand:
    """Tests for `glyphsmith import-font`."""

    def test_creates_project_next_to_font(self, font_path: Path, log_file: Path) -> None:
        result = runner.invoke(
            app, ["import-font", str(font_path), "--quiet", "--log-file", str(log_file)]
        )

        assert result.exit_code == 0, result.output
        project = ProjectReader(font_path.with_suffix(".json")).read()
        assert project.name == "Cli Test"
        assert [c.name for c in project.all_characters()] == [".notdef", "I"]
        assert project.all_characters()[1].lsb == 100
        assert project.all_characters()[1].rsb == 100

    def test_merge_into_existing_project(
        self, font_path: Path, project_path: Path, log_file: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "import-font",
                str(font_path),
                "--merge-into",
                str(project_path),
                "--quiet",
                "--log-file",
                str(log_file),
            ],
        )

        assert result.exit_code == 0, result.output
        project = ProjectReader(project_path).read()
        # I already existed; only .notdef is new
        assert [cs.name_key for cs in project.character_sets] == ["Latin", "Imported"]
        assert [c.name for c in project.character_sets[1].characters] == [".notdef"]
        assert project.glyphs[73].paths[0].segment_groups[0][1].point.x == 100

    def test_missing_font(self, tmp_path: Path, log_file: Path) -> None:
        result = runner.invoke(
            app, ["import-font", str(tmp_path / "none.ttf"), "--log-file", str(log_file)]
        )
        assert result.exit_code == 1
        assert "Could not load font" in result.output
