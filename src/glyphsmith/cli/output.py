"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from glyphsmith.domain import BoundingBox, Box, ZoneBoxes

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for kerning runs.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Glyphsmith[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_project_info(
    project_path: str, name: str, characters: int, glyphs: int, stroke_thickness: float
) -> None:
    """Print project information.

    Args:
        project_path: Path to the project file
        name: Project (font) name
        characters: Number of characters across all sets
        glyphs: Number of glyphs with stored ink
        stroke_thickness: Active stroke thickness
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(project_path)
    line1.append(f" ({name})")
    console.print(line1)
    console.print(
        f"  {characters:,} characters {SYM_DOT} {glyphs:,} glyphs {SYM_DOT} "
        f"stroke {stroke_thickness:g}"
    )


def print_font_info(font_path: str, font_type: str, glyph_count: int, upm: int) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font_type: Font format type (e.g., "TrueType", "OpenType")
        glyph_count: Total number of glyphs in font
        upm: Units per em value
    """
    line1 = Text("  ")
    line1.append(font_path)
    line1.append(f" ({font_type})")
    console.print(line1)
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(pairs: int, workers: int | None) -> None:
    """Print kerning run configuration.

    Args:
        pairs: Number of pairs to solve
        workers: Number of parallel workers (None = auto)
    """
    workers_str = f"{workers} workers" if workers else "auto workers"
    console.print(f"  {pairs:,} pairs {SYM_DOT} {workers_str} {SYM_DOT} Ctrl+C to cancel")


def _print_output_line(output_path: str) -> None:
    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)


def print_kerning_success(
    output_path: str,
    total_time_s: float,
    kerned: int,
    skipped: int,
    errors: int,
) -> None:
    """Print success message with kerning summary.

    Args:
        output_path: Path to output file
        total_time_s: Total processing time in seconds
        kerned: Number of pairs that received a value
        skipped: Number of pairs left without a value
        errors: Number of failed chunks
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")
    _print_output_line(output_path)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {kerned} kerned {SYM_DOT} {skipped} skipped {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )


def print_positioning_success(
    output_path: str,
    cascaded: int,
    skipped_manual: int,
    ligatures: int,
) -> None:
    """Print success message with cascade summary.

    Args:
        output_path: Path to output file
        cascaded: Number of sibling pairs that received an offset
        skipped_manual: Number of sibling pairs kept at their manual offset
        ligatures: Number of ligature glyphs recomposed
    """
    console.print(f"\n[bold green]{SYM_OK} Positioned[/bold green]")
    _print_output_line(output_path)
    console.print(
        f"  {cascaded} cascaded {SYM_DOT} {skipped_manual} kept manual {SYM_DOT} "
        f"{ligatures} ligatures"
    )


def print_import_success(output_path: str, characters: int) -> None:
    console.print(f"\n[bold green]{SYM_OK} Imported[/bold green] {characters:,} characters")
    _print_output_line(output_path)


def _box_row(label: str, box: Box | None) -> list[str]:
    if box is None:
        return [label, "-", "-", "-", "-"]
    return [label, f"{box.min_x:g}", f"{box.max_x:g}", f"{box.min_y:g}", f"{box.max_y:g}"]


def print_glyph_boxes(name: str, bbox: BoundingBox | None, zones: ZoneBoxes | None) -> None:
    """Print a glyph's bounding box and zone boxes as a table.

    Args:
        name: Character name
        bbox: Full bounding box (None if the glyph has no ink)
        zones: Zone boxes (None if the glyph has no ink)
    """
    if bbox is None or zones is None:
        console.print(f"\n  [bold]{name}[/bold] has no ink")
        return

    console.print(
        f"\n  [bold]{name}[/bold] {SYM_DOT} x={bbox.x:g} y={bbox.y:g} "
        f"w={bbox.width:g} h={bbox.height:g}"
    )
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    for column in ("zone", "min x", "max x", "min y", "max y"):
        table.add_column(column, justify="right" if column != "zone" else "left")
    table.add_row(*_box_row("full", zones.full))
    table.add_row(*_box_row("ascender", zones.ascender))
    table.add_row(*_box_row("x-height", zones.x_height))
    table.add_row(*_box_row("descender", zones.descender))
    console.print(table)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress chunks")


def print_cancellation_summary(kerned: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        kerned: Number of pairs solved before cancellation
        cancelled: Number of pending pairs that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {kerned} pairs completed {SYM_DOT} {cancelled} pairs cancelled")
    console.print("  No output file created")
