"""Ligature composition from a base and a positioned mark."""

from glyphsmith.domain import GlyphData, Point


def compose_ligature(base: GlyphData, mark: GlyphData, offset: Point) -> GlyphData:
    """Bake a base and a mark into one glyph.

    Args:
        base: Base glyph ink, copied as is
        mark: Mark glyph ink, moved by offset
        offset: Mark translation

    Returns:
        New glyph data with the base paths followed by the moved mark paths
    """
    paths = list(base.paths)
    paths.extend(path.translated(offset.x, offset.y) for path in mark.paths)
    return GlyphData(paths=paths)
