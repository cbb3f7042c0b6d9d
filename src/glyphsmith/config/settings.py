"""Configuration settings for Glyphsmith."""

from pathlib import Path

from pydantic import BaseModel, Field


class GeometryConfig(BaseModel):
    """Configuration for curve flattening.

    Densities are segment counts per curve piece; tolerances are in font
    units at the project's own UPM (editor projects are normalized to 1000).
    """

    pen_density: int = Field(
        default=15,
        ge=2,
        le=64,
        description="Subdivisions per implicit quadratic piece of a pen stroke",
    )
    curve_density: int = Field(
        default=10,
        ge=2,
        le=64,
        description="Subdivisions of a single quadratic curve path",
    )
    zone_flatten_tolerance: float = Field(
        default=2.0,
        ge=0.05,
        le=20.0,
        description="Outline flattening tolerance used for zone classification",
    )


class KerningConfig(BaseModel):
    """Configuration for the auto-kerning solver."""

    search_fraction: float = Field(
        default=0.5,
        gt=0.0,
        le=1.0,
        description="Search floor as a fraction of UPM (floor = -round(upm * fraction))",
    )
    yield_every: int = Field(
        default=5,
        ge=1,
        description="Pairs solved between cooperative yields",
    )
    chunk_size: int = Field(
        default=200,
        ge=1,
        description="Pairs per worker task when solving in parallel",
    )
    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphsmithSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    kerning: KerningConfig = Field(default_factory=KerningConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphsmithSettings:
    """Get default application settings."""
    return GlyphsmithSettings()
