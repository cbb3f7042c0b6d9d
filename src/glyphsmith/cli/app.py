"""CLI application entry point for glyphsmith.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from glyphsmith import __version__
from glyphsmith.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_error,
    print_font_info,
    print_glyph_boxes,
    print_header,
    print_import_success,
    print_kerning_success,
    print_positioning_success,
    print_processing_info,
    print_project_info,
    print_step,
)
from glyphsmith.config import GlyphsmithSettings, KerningConfig, LoggingConfig
from glyphsmith.core import (
    ProjectProcessor,
    all_base_pairs,
    compute_zone_boxes,
    discover_pairs,
    glyph_bounding_box,
)
from glyphsmith.domain import Point, Project
from glyphsmith.exceptions import (
    CharacterNotFoundError,
    FontLoadError,
    GlyphsmithError,
    ProjectLoadError,
    ProjectSaveError,
)
from glyphsmith.io import FontReader, ProjectReader, ProjectWriter, merge_font_into_project
from glyphsmith.utils import ProcessingStats, configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphsmith",
    help="Auto-kern and position marks in glyphsmith font projects.",
    add_completion=False,
    no_args_is_help=True,
)

LogFileOption = Annotated[
    Path | None,
    typer.Option("--log-file", help="Write detailed logs to file"),
]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
]
QuietOption = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Minimal console output"),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Output project path"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Glyphsmith[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Glyph geometry tools: bounds, zones, auto-kerning and mark positioning."""


def _settings(
    log_file: Path | None,
    log_level: str,
    quiet: bool,
    workers: int | None = None,
) -> GlyphsmithSettings:
    return GlyphsmithSettings(
        kerning=KerningConfig(max_workers=workers),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )


def _load_project(project_path: Path, quiet: bool) -> Project:
    if not quiet:
        print_step("Loading project")
    project = ProjectReader(project_path).read()
    if not quiet:
        print_project_info(
            project_path=str(project_path),
            name=project.name,
            characters=len(project.all_characters()),
            glyphs=len(project.glyphs),
            stroke_thickness=project.stroke_thickness,
        )
    return project


def _fail(error: GlyphsmithError) -> typer.Exit:
    """Print a handled error and build the exit to raise."""
    if isinstance(error, ProjectLoadError):
        print_error(f"Could not load project: {error.reason}")
    elif isinstance(error, ProjectSaveError):
        print_error(f"Could not save project: {error.reason}")
    elif isinstance(error, FontLoadError):
        print_error(f"Could not load font: {error.reason}")
    else:
        print_error(str(error))
    return typer.Exit(code=1)


@app.command()
def kern(
    project_path: Annotated[
        Path,
        typer.Argument(help="Path to the project JSON file", show_default=False),
    ],
    output: OutputOption = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    all_pairs: Annotated[
        bool,
        typer.Option(
            "--all-pairs",
            help="Kern every drawn base pair instead of the recommended pairs",
        ),
    ] = False,
    redo: Annotated[
        bool,
        typer.Option("--redo", help="Also recompute pairs that already have a value"),
    ] = False,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Auto-kern a project and write the merged kerning map.

    Example:
        glyphsmith kern project.json

    This will create project-kerned.json with values for every recommended
    pair that did not have one yet.
    """
    if not quiet:
        print_header(__version__)

    settings = _settings(log_file, log_level, quiet, workers)
    stats: ProcessingStats | None = None

    try:
        project = _load_project(project_path, quiet)

        if all_pairs:
            pairs = all_base_pairs(project, include_reviewed=redo)
        else:
            pairs = discover_pairs(project, include_reviewed=redo)

        if not pairs:
            if not quiet:
                console.print("\nNo pairs to kern. Nothing to process.")
            raise typer.Exit(code=0)

        if not quiet:
            print_step("Kerning")
            print_processing_info(len(pairs), workers)

        output_path = output or ProjectWriter.get_output_path(project_path, "kerned")
        processor = ProjectProcessor(settings, quiet=quiet)

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(f"Kerning {len(pairs)} pairs", total=100)

                    def update_progress(percent: int) -> None:
                        progress.update(task_id, completed=percent)

                    kerning, stats = processor.kern(
                        project, pairs, max_workers=workers, progress_callback=update_progress
                    )
            else:
                kerning, stats = processor.kern(project, pairs, max_workers=workers)
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
                print_cancellation_summary(
                    kerned=stats.kerned_count if stats else 0,
                    cancelled=stats.cancelled_count if stats else 0,
                )
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        project.kerning.update(kerning)
        ProjectWriter(output_path).write(project)

        if not quiet:
            print_kerning_success(
                output_path=str(output_path),
                total_time_s=stats.duration_seconds,
                kerned=stats.kerned_count,
                skipped=stats.skipped_count,
                errors=stats.error_count,
            )

    except GlyphsmithError as e:
        raise _fail(e) from None


@app.command()
def position(
    project_path: Annotated[
        Path,
        typer.Argument(help="Path to the project JSON file", show_default=False),
    ],
    base: Annotated[str, typer.Argument(help="Base character name", show_default=False)],
    mark: Annotated[str, typer.Argument(help="Mark character name", show_default=False)],
    x: Annotated[float, typer.Argument(help="Mark X offset", show_default=False)],
    y: Annotated[float, typer.Argument(help="Mark Y offset", show_default=False)],
    output: OutputOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Set one mark offset and cascade it to sibling pairs.

    Negative offsets go after a ``--`` separator.

    Example:
        glyphsmith position project.json a acute -- 40 -20
    """
    if not quiet:
        print_header(__version__)

    settings = _settings(log_file, log_level, quiet)

    try:
        project = _load_project(project_path, quiet)
        if not quiet:
            print_step(f"Positioning {mark} on {base}")

        processor = ProjectProcessor(settings, quiet=quiet)
        result = processor.position(project, base, mark, Point(x, y))

        project.mark_positioning = result.positioning
        for unicode, glyph in result.updated_glyphs.items():
            project.glyphs[unicode] = glyph

        output_path = output or project_path
        ProjectWriter(output_path).write(project)

        if not quiet:
            print_positioning_success(
                output_path=str(output_path),
                cascaded=len(result.cascaded_pairs),
                skipped_manual=len(result.skipped_manual),
                ligatures=len(result.updated_glyphs),
            )

    except GlyphsmithError as e:
        raise _fail(e) from None


@app.command(name="import-font")
def import_font(
    font_path: Annotated[
        Path,
        typer.Argument(help="Path to input TTF/OTF font file", show_default=False),
    ],
    output: OutputOption = None,
    merge_into: Annotated[
        Path | None,
        typer.Option(
            "--merge-into",
            help="Add the font's missing characters to an existing project instead",
        ),
    ] = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Build a project from a TTF/OTF font.

    Example:
        glyphsmith import-font Roboto-Regular.ttf

    This will create Roboto-Regular.json with one outline character per glyph.
    """
    if not quiet:
        print_header(__version__)

    configure_logging(
        log_file=log_file,
        console_level=log_level if not quiet else "WARNING",
        quiet=quiet,
    )

    try:
        if not quiet:
            print_step("Loading font")

        with FontReader(font_path) as reader:
            if not quiet:
                print_font_info(
                    font_path=str(font_path),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                )
                print_step("Importing glyphs")
            imported = reader.read_project()

        if merge_into is not None:
            project = ProjectReader(merge_into).read()
            new_glyphs, new_characters = merge_font_into_project(project, imported)
            project.glyphs.update(new_glyphs)
            for character in new_characters:
                project.add_character(character, "Imported")
            output_path = output or merge_into
            added = len(new_characters)
        else:
            project = imported
            output_path = output or font_path.with_suffix(".json")
            added = len(project.all_characters())

        ProjectWriter(output_path).write(project)

        if not quiet:
            print_import_success(str(output_path), added)

    except GlyphsmithError as e:
        raise _fail(e) from None


@app.command()
def bbox(
    project_path: Annotated[
        Path,
        typer.Argument(help="Path to the project JSON file", show_default=False),
    ],
    name: Annotated[str, typer.Argument(help="Character name", show_default=False)],
    log_file: LogFileOption = None,
) -> None:
    """Print the bounding box and zone boxes of one character."""
    configure_logging(log_file=log_file, console_level="WARNING", quiet=True)

    try:
        project = ProjectReader(project_path).read()
        glyph_set = project.glyph_set()
        character = glyph_set.character(name)
        if character is None:
            raise CharacterNotFoundError(name)

        settings = GlyphsmithSettings()
        glyph = glyph_set.glyph_for(character)
        box = zones = None
        if glyph is not None:
            box = glyph_bounding_box(glyph, project.stroke_thickness, settings.geometry)
            zones = compute_zone_boxes(
                glyph,
                project.metrics.base_line_y,
                project.metrics.top_line_y,
                project.stroke_thickness,
                settings.geometry,
            )
        print_glyph_boxes(name, box, zones)

    except GlyphsmithError as e:
        raise _fail(e) from None


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
