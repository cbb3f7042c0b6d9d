"""End-to-end tests that load project files, kern or position, and save."""

import json
from pathlib import Path

import pytest

from glyphsmith.config import GlyphsmithSettings, LoggingConfig
from glyphsmith.core import ProjectProcessor, discover_pairs
from glyphsmith.domain import Point
from glyphsmith.io import ProjectReader, ProjectWriter


def outline_rect(w: float, h: float) -> dict:
    corners = [(0, 0), (w, 0), (w, h), (0, h)]
    return {
        "type": "outline",
        "points": [],
        "segmentGroups": [[{"point": {"x": x, "y": y}} for x, y in corners]],
    }


@pytest.fixture
def settings(tmp_path: Path) -> GlyphsmithSettings:
    return GlyphsmithSettings(logging=LoggingConfig(log_file=tmp_path / "run.log"))


@pytest.fixture
def stems_path(tmp_path: Path) -> Path:
    """Two 100x500 stems with 50-unit bearings, as the editor exports them."""
    document = {
        "name": "Stems",
        "settings": {"fontName": "Stems", "strokeThickness": 0},
        "metrics": {"baseLineY": 600, "topLineY": -100, "defaultLSB": 50, "defaultRSB": 50},
        "characterSets": [
            {
                "nameKey": "Latin",
                "characters": [
                    {"name": "H", "unicode": 72, "lsb": 50, "rsb": 50},
                    {"name": "I", "unicode": 73, "lsb": 50, "rsb": 50},
                ],
            }
        ],
        "glyphs": [
            [72, {"paths": [outline_rect(100, 500)]}],
            [73, {"paths": [outline_rect(100, 500)]}],
        ],
        "kerning": [["72-72", -5]],
        "recommendedKerning": [["H", "I", 0], ["I", "H"], ["H", "H", 0]],
    }
    path = tmp_path / "stems.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def accents_path(tmp_path: Path) -> Path:
    """Two bases and two marks sharing attachment classes."""
    document = {
        "name": "Accents",
        "settings": {"strokeThickness": 0},
        "characterSets": [
            {
                "nameKey": "Latin",
                "characters": [
                    {"name": "a", "unicode": 97},
                    {"name": "e", "unicode": 101},
                    {"name": "grave", "unicode": 768, "glyphClass": "mark"},
                    {"name": "acute", "unicode": 769, "glyphClass": "mark"},
                    {"name": "eacute", "unicode": 233, "glyphClass": "ligature"},
                ],
            }
        ],
        "glyphs": [
            [97, {"paths": [outline_rect(100, 50)]}],
            [101, {"paths": [outline_rect(200, 50)]}],
            [768, {"paths": [outline_rect(20, 20)]}],
            [769, {"paths": [outline_rect(20, 20)]}],
        ],
        "markPositioning": [["101-768", {"x": 1, "y": 2}]],
        "positioningRules": [
            {
                "base": ["$bases"],
                "mark": ["acute"],
                "gsub": "ccmp",
                "ligatureMap": {"e": {"acute": "eacute"}},
            }
        ],
        "markAttachmentClasses": [{"members": ["grave", "acute"]}],
        "baseAttachmentClasses": [{"members": ["$bases"]}],
        "groups": {"bases": ["a", "e"]},
    }
    path = tmp_path / "accents.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


class TestKerningPipeline:
    """Kerning from a project file back to a project file."""

    def test_stems_touch_exactly(
        self, stems_path: Path, settings: GlyphsmithSettings, tmp_path: Path
    ) -> None:
        project = ProjectReader(stems_path).read()
        pairs = discover_pairs(project)
        assert [(l.name, r.name) for l, r in pairs] == [("H", "I"), ("I", "H")]

        kerning, stats = ProjectProcessor(settings, quiet=True).kern(project, pairs)
        project.kerning.update(kerning)
        output = ProjectWriter.get_output_path(stems_path, "kerned")
        ProjectWriter(output).write(project)

        saved = ProjectReader(output).read()
        assert saved.kerning == {(72, 72): -5, (72, 73): -100, (73, 72): 0}
        assert stats.kerned_count == 2
        assert (tmp_path / "run.log").exists()

    def test_second_run_finds_nothing(
        self, stems_path: Path, settings: GlyphsmithSettings
    ) -> None:
        project = ProjectReader(stems_path).read()
        kerning, _ = ProjectProcessor(settings, quiet=True).kern(project, discover_pairs(project))
        project.kerning.update(kerning)
        assert discover_pairs(project) == []


class TestPositioningPipeline:
    """Mark positioning from a project file back to a project file."""

    def test_cascade_and_ligature_saved(
        self, accents_path: Path, settings: GlyphsmithSettings
    ) -> None:
        project = ProjectReader(accents_path).read()

        result = ProjectProcessor(settings, quiet=True).position(
            project, "a", "acute", Point(40, -20)
        )
        project.mark_positioning = result.positioning
        project.glyphs.update(result.updated_glyphs)
        ProjectWriter(accents_path).write(project)

        saved = ProjectReader(accents_path).read()
        assert saved.mark_positioning == {
            (97, 769): Point(40, -20),
            (97, 768): Point(40, -20),
            (101, 769): Point(90, -20),
            # Set by hand before, left alone
            (101, 768): Point(1, 2),
        }
        assert 233 in saved.glyphs
        assert len(saved.glyphs[233].paths) == 2

    def test_repeated_edit_is_stable(
        self, accents_path: Path, settings: GlyphsmithSettings
    ) -> None:
        project = ProjectReader(accents_path).read()
        processor = ProjectProcessor(settings, quiet=True)

        first = processor.position(project, "a", "acute", Point(40, -20))
        second = processor.position(project, "a", "acute", Point(40, -20))

        assert first.positioning == second.positioning
        assert first.updated_glyphs.keys() == second.updated_glyphs.keys()
