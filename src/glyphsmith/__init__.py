"""Glyphsmith - Glyph geometry and layout engine for font authoring.

Glyphsmith computes accurate bounds of hand-drawn and imported glyph outlines,
splits them into ascender / x-height / descender zones, solves optically
correct kerning for batches of glyph pairs, and cascades a manually placed
mark offset across whole attachment classes.

Example:
    $ glyphsmith kern project.json

This will auto-kern every recommended pair in project.json and write the
merged kerning map back to project-kerned.json.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
