"""I/O layer for glyphsmith.

This module handles project snapshot files and font import. It provides a
clean abstraction layer between JSON/fonttools and the domain models.

Key responsibilities:
- Load and save JSON project snapshots
- Convert fonttools outlines to editor-space cubic contours
- Import TTF/OTF fonts as new projects

Key classes:
- ProjectReader: Load project snapshots
- ProjectWriter: Save project snapshots
- FontReader: Load fonts and build projects from them
"""

from glyphsmith.io.project import (
    ProjectReader,
    ProjectWriter,
    project_from_dict,
    project_to_dict,
)
from glyphsmith.io.reader import FontReader, merge_font_into_project

__all__ = [
    "FontReader",
    "ProjectReader",
    "ProjectWriter",
    "merge_font_into_project",
    "project_from_dict",
    "project_to_dict",
]
