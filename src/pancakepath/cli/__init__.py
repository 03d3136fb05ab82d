"""Command-line interface for pancakepath.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Full processing pipeline for SVG drawings
- Duplication layout and color snapping helpers
- PNG export
- Verbose/quiet output modes
"""

from pancakepath.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]
