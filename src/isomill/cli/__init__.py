"""Command-line interface for isomill.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for region processing
- Verbose/quiet output modes
- SVG debug output of Voronoi cells and passes
- Detailed error reporting
"""

from isomill.cli.app import cli, main

__all__ = ["cli", "main"]
