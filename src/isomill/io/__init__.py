"""Geometry and toolpath I/O layer for isomill.

This module handles reading copper geometry and writing generated
toolpaths. It provides a clean abstraction layer between file formats
and the domain models.

Key responsibilities:
- Load GeoJSON/WKT geometry and render it at a given scale
- Write ordered toolpaths as JSON
- Render debug images of intermediate geometry

Key classes:
- ShapelyImporter: Import in-memory shapely geometry
- GeometryReader: Load geometry files
- ToolpathWriter: Save toolpaths
- SvgDebugSink: Write debug images
"""

from isomill.io.debug import DebugSink, NullDebugSink, SvgDebugSink
from isomill.io.reader import DEFAULT_SCALE, GeometryReader, ShapelyImporter
from isomill.io.writer import ToolpathWriter, toolpath_document

__all__ = [
    "DEFAULT_SCALE",
    "DebugSink",
    "GeometryReader",
    "NullDebugSink",
    "ShapelyImporter",
    "SvgDebugSink",
    "ToolpathWriter",
    "toolpath_document",
]
