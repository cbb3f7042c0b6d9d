"""Logging utilities for Glyphsmith."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

_FILE_HANDLER = "glyphsmith.file"
_CONSOLE_HANDLER = "glyphsmith.console"


@dataclass
class ProcessingStats:
    """Statistics from a kerning or positioning run."""

    kerned_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    cascaded_count: int = 0
    ligatures_composed: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"glyphsmith_{timestamp}.log")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Each CLI command reconfigures; drop the handlers a previous call installed
    for handler in list(root_logger.handlers):
        if handler.get_name() in (_FILE_HANDLER, _CONSOLE_HANDLER):
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.set_name(_FILE_HANDLER)
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_CONSOLE_HANDLER)
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphsmith")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class ProcessingLogger:
    """Logger for tracking per-pair results and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_pair_kerned(self, left: str, right: str, value: int, target: float) -> None:
        """Log a solved kerning pair."""
        self._logger.debug(
            "Pair kerned",
            left=left,
            right=right,
            value=value,
            target=round(target, 2),
        )
        self._stats.kerned_count += 1

    def log_pair_skipped(self, left: str, right: str, reason: str) -> None:
        self._logger.debug("Pair skipped", left=left, right=right, reason=reason)
        self._stats.skipped_count += 1

    def log_chunk_error(
        self,
        chunk_idx: int,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a failed worker chunk."""
        self._logger.error(
            "Kerning chunk failed",
            chunk=chunk_idx,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((f"chunk {chunk_idx}", str(error)))

    def log_cascade_pair(
        self,
        base: str,
        mark: str,
        offset_x: float,
        offset_y: float,
        ligature: str | None = None,
    ) -> None:
        """Log a pair that received a cascaded mark offset."""
        self._logger.debug(
            "Offset cascaded",
            base=base,
            mark=mark,
            x=round(offset_x, 2),
            y=round(offset_y, 2),
            ligature=ligature,
        )
        self._stats.cascaded_count += 1
        if ligature is not None:
            self._stats.ligatures_composed += 1

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
