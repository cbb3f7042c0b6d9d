"""Exception hierarchy for Glyphsmith.

The geometry engine itself never raises for degenerate or missing data; it
degrades to "no adjustment". These exceptions belong to the outer layers
(project files, font import, CLI).
"""


class GlyphsmithError(Exception):
    """Base exception for all Glyphsmith errors."""

    pass


class ProjectError(GlyphsmithError):
    """Errors related to project snapshot files."""

    pass


class ProjectLoadError(ProjectError):
    """Error loading a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load project '{path}': {reason}")


class ProjectSaveError(ProjectError):
    """Error saving a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save project '{path}': {reason}")


class FontError(GlyphsmithError):
    """Errors related to font import."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GlyphError(GlyphsmithError):
    """Errors related to glyph and character records."""

    pass


class CharacterNotFoundError(GlyphError):
    """Requested character not found in the project."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Character '{name}' not found in project")


class PathFormatError(GlyphError):
    """Serialized path data could not be understood."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid path data: {reason}")
