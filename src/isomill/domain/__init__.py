"""Domain models for isomill.

This module contains the value types exchanged with the toolpath engine.
All models are frozen dataclasses, independent of any file format, and
serializable to plain dictionaries.

Key classes:
- MillKind: Tool kind carrying the extra-pass capability
- Mill: Milling tool descriptor
- Toolpath: Ordered tool-center points in physical units
- BoundingBox: Axis-aligned envelope
"""

from isomill.domain.mill import Mill, MillKind
from isomill.domain.toolpath import BoundingBox, Coordinate, Toolpath

__all__: list[str] = [
    # Enums
    "MillKind",
    # Core types
    "BoundingBox",
    "Coordinate",
    "Mill",
    "Toolpath",
]
