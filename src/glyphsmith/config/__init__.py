"""Configuration management for glyphsmith.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments, a project file, or defaults.

Key classes:
- GeometryConfig: Curve flattening densities and tolerances
- KerningConfig: Auto-kerning search and batching settings
- LoggingConfig: Logging settings
- GlyphsmithSettings: Main application settings
"""

from glyphsmith.config.settings import (
    GeometryConfig,
    GlyphsmithSettings,
    KerningConfig,
    LoggingConfig,
    get_default_settings,
)

__all__ = [
    "GeometryConfig",
    "GlyphsmithSettings",
    "KerningConfig",
    "LoggingConfig",
    "get_default_settings",
]
