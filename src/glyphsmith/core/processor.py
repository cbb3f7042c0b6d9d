"""Batch orchestration for kerning and mark positioning.

Large kerning batches are split into chunks and solved on a
ProcessPoolExecutor. Pairs are independent, so chunk results merge by plain
map union.

Key components:
- solve_chunk: Top-level picklable function for parallel execution
- ProjectProcessor: Orchestrates kerning runs and positioning edits on a project
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from typing import Any

from glyphsmith.config import GeometryConfig, GlyphsmithSettings, KerningConfig
from glyphsmith.core.cascade import CascadeResult, MarkPositioningCascade
from glyphsmith.core.kerning import CharacterPair, KerningSolver, progress_percent
from glyphsmith.domain import (
    Character,
    CharacterSet,
    FontMetrics,
    GlyphData,
    GlyphSet,
    KerningMap,
    KerningRule,
    Point,
    Project,
)
from glyphsmith.exceptions import CharacterNotFoundError
from glyphsmith.utils import ProcessingLogger, ProcessingStats, configure_logging


def solve_chunk(
    pairs_data: list[tuple[dict[str, Any], dict[str, Any]]],
    glyphs_data: dict[int, dict[str, Any]],
    metrics_data: dict[str, Any],
    stroke_thickness: float,
    rules_data: list[list[Any]],
    groups: dict[str, list[str]],
    character_sets_data: list[dict[str, Any]],
    config_data: dict[str, Any],
) -> dict[str, Any]:
    """Solve one chunk of kerning pairs.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Every argument is plain data produced by the domain ``to_dict`` methods.

    Returns:
        Dictionary containing either:
        - Success: {"results": [[left, right, value], ...], "pairs": int, "duration_ms": float}
        - Error: {"error": str, "traceback": str, "pairs": int, "duration_ms": float}
    """
    start_time = time.time()

    try:
        pairs = [
            (Character.from_dict(left), Character.from_dict(right))
            for left, right in pairs_data
        ]
        glyph_set = GlyphSet(
            characters={},
            glyphs={int(u): GlyphData.from_dict(g) for u, g in glyphs_data.items()},
            groups=groups,
            character_sets=[CharacterSet.from_dict(cs) for cs in character_sets_data],
        )
        rules = [r for r in (KerningRule.from_sequence(raw) for raw in rules_data) if r]
        solver = KerningSolver(
            KerningConfig(**config_data["kerning"]),
            GeometryConfig(**config_data["geometry"]),
        )
        kerning = solver.solve(
            pairs, glyph_set, FontMetrics.from_dict(metrics_data), stroke_thickness, rules
        )

        return {
            "results": [[left, right, value] for (left, right), value in kerning.items()],
            "pairs": len(pairs),
            "duration_ms": (time.time() - start_time) * 1000,
        }

    except Exception as e:
        return {
            "error": str(e),
            "traceback": traceback.format_exc(),
            "pairs": len(pairs_data),
            "duration_ms": (time.time() - start_time) * 1000,
        }


class ProjectProcessor:
    """Orchestrates auto-kerning runs and positioning edits on a project.

    Example:
        settings = GlyphsmithSettings()
        processor = ProjectProcessor(settings)
        kerning, stats = processor.kern(project, discover_pairs(project), max_workers=4)
    """

    def __init__(self, config: GlyphsmithSettings, quiet: bool = False) -> None:
        """Initialize processor with configuration.

        Args:
            config: Glyphsmith settings
            quiet: Suppress console logging except errors
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=quiet,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    def _chunks(self, pairs: list[CharacterPair]) -> list[list[CharacterPair]]:
        size = self.config.kerning.chunk_size
        return [pairs[i : i + size] for i in range(0, len(pairs), size)]

    def kern(
        self,
        project: Project,
        pairs: list[CharacterPair],
        max_workers: int | None = None,
        progress_callback: Callable[[int], None] | None = None,
    ) -> tuple[KerningMap, ProcessingStats]:
        """Auto-kern pairs of a project.

        Args:
            project: Project supplying glyphs, metrics, rules and groups
            pairs: Pairs to solve
            max_workers: Maximum worker processes (None = config default)
            progress_callback: Called with 0..100 as pairs complete

        Returns:
            (new kerning values, run statistics). The project is not modified.

        Raises:
            KeyboardInterrupt: If processing is cancelled by user
        """
        stats = ProcessingStats()
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.kerning.max_workers

        self.logger.info(
            "Starting auto-kerning",
            pairs=len(pairs),
            max_workers=max_workers,
            stroke_thickness=project.stroke_thickness,
        )

        if len(pairs) <= self.config.kerning.chunk_size or max_workers == 1:
            solver = KerningSolver(
                self.config.kerning, self.config.geometry, self.processing_logger
            )
            kerning = solver.solve(
                pairs,
                project.glyph_set(),
                project.metrics,
                project.stroke_thickness,
                project.rules.recommended_kerning,
                progress_callback,
            )
            stats.kerned_count = len(kerning)
            stats.skipped_count = len(pairs) - len(kerning)
        else:
            kerning = self._kern_parallel(project, pairs, max_workers, stats, progress_callback)

        stats.end_time = time.time()
        self.logger.info(
            "Auto-kerning complete",
            kerned=stats.kerned_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return kerning, stats

    def _kern_parallel(
        self,
        project: Project,
        pairs: list[CharacterPair],
        max_workers: int | None,
        stats: ProcessingStats,
        progress_callback: Callable[[int], None] | None = None,
    ) -> KerningMap:
        """Solve chunks of pairs in parallel using ProcessPoolExecutor."""
        kerning: KerningMap = {}

        metrics_data = project.metrics.to_dict()
        rules_data = [rule.to_sequence() for rule in project.rules.recommended_kerning]
        sets_data = [cs.to_dict() for cs in project.character_sets]
        config_data = {
            "kerning": self.config.kerning.model_dump(),
            "geometry": self.config.geometry.model_dump(),
        }

        chunks = self._chunks(pairs)
        total = len(pairs)
        completed = 0

        self.logger.info("Starting parallel kerning", chunks=len(chunks), max_workers=max_workers)

        pending_futures: dict[Future, int] = {}
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for chunk_idx, chunk in enumerate(chunks):
                unicodes = {c.unicode for pair in chunk for c in pair if c.unicode is not None}
                glyphs_data = {
                    u: project.glyphs[u].to_dict() for u in unicodes if u in project.glyphs
                }
                future = executor.submit(
                    solve_chunk,
                    [(left.to_dict(), right.to_dict()) for left, right in chunk],
                    glyphs_data,
                    metrics_data,
                    project.stroke_thickness,
                    rules_data,
                    project.groups,
                    sets_data,
                    config_data,
                )
                pending_futures[future] = chunk_idx

            try:
                for future in as_completed(pending_futures):
                    chunk_idx = pending_futures.pop(future)
                    chunk_size = len(chunks[chunk_idx])

                    try:
                        result = future.result()

                        if "error" in result:
                            self.processing_logger.log_chunk_error(
                                chunk_idx,
                                Exception(result["error"]),
                                traceback=result.get("traceback"),
                            )
                            stats.error_count += 1
                        else:
                            for left, right, value in result["results"]:
                                kerning[(left, right)] = value
                            stats.kerned_count += len(result["results"])
                            stats.skipped_count += chunk_size - len(result["results"])
                            self.logger.debug(
                                "Chunk solved",
                                chunk=chunk_idx,
                                values=len(result["results"]),
                                duration_ms=round(result.get("duration_ms", 0.0), 2),
                            )

                    except Exception as e:
                        self.processing_logger.log_chunk_error(
                            chunk_idx, e, traceback=traceback.format_exc()
                        )
                        stats.error_count += 1

                    completed += chunk_size
                    if progress_callback is not None:
                        progress_callback(progress_percent(completed, total))

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = sum(len(chunks[i]) for i in pending_futures.values())

                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return kerning

    def position(
        self,
        project: Project,
        base_name: str,
        mark_name: str,
        offset: Point,
    ) -> CascadeResult:
        """Apply a manual mark offset and cascade it across attachment classes.

        Raises:
            CharacterNotFoundError: If base or mark is not in the project
        """
        glyph_set = project.glyph_set()
        base = glyph_set.character(base_name)
        if base is None:
            raise CharacterNotFoundError(base_name)
        mark = glyph_set.character(mark_name)
        if mark is None:
            raise CharacterNotFoundError(mark_name)

        cascade = MarkPositioningCascade(self.config.geometry, self.processing_logger)
        result = cascade.apply(
            base,
            mark,
            offset,
            glyph_set,
            project.mark_positioning,
            project.rules,
            project.stroke_thickness,
        )
        self.logger.info(
            "Positioning applied",
            base=base_name,
            mark=mark_name,
            cascaded=len(result.cascaded_pairs),
            skipped_manual=len(result.skipped_manual),
            ligatures=len(result.updated_glyphs),
        )
        return result
