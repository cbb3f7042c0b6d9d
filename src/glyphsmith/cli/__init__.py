"""Command-line interface for glyphsmith.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for kerning runs
- Cascade and import summaries
- Bounding box and zone inspection
- Detailed error reporting
"""

from glyphsmith.cli.app import cli, main

__all__ = ["cli", "main"]
