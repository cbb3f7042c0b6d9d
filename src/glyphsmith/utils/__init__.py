"""Utility functions for glyphsmith.

This module provides utility functions including:

- Logging setup and configuration
- Per-pair result tracking and run statistics
"""

from glyphsmith.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
