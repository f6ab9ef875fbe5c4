"""Toolpath writer for saving generated paths.

This module provides the ToolpathWriter class for writing ordered
toolpaths to a JSON document that downstream G-code emitters consume.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from isomill import __version__
from isomill.domain import Mill, Toolpath

FORMAT_VERSION = 1


def toolpath_document(
    toolpaths: list[Toolpath],
    mill: Mill | None = None,
    units: str = "mm",
    layer: str | None = None,
) -> dict[str, Any]:
    """Build the JSON-serializable document for a toolpath set.

    Args:
        toolpaths: Ordered toolpaths in physical units
        mill: Tool the paths were generated for
        units: Name of the physical unit
        layer: Layer name

    Returns:
        Document dictionary
    """
    return {
        "format_version": FORMAT_VERSION,
        "generator": f"isomill {__version__}",
        "created": datetime.now().strftime("%Y-%m-%dT%H:%M:%S"),
        "layer": layer,
        "units": units,
        "mill": mill.to_dict() if mill is not None else None,
        "toolpaths": [toolpath.to_dict() for toolpath in toolpaths],
    }


class ToolpathWriter:
    """Writes toolpaths as JSON.

    Example:
        writer = ToolpathWriter(Path("top-toolpaths.json"))
        writer.write(toolpaths, mill=mill, units="mm", layer="top")
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the toolpath writer.

        Args:
            output_path: Path where the document will be saved
        """
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def write(
        self,
        toolpaths: list[Toolpath],
        mill: Mill | None = None,
        units: str = "mm",
        layer: str | None = None,
    ) -> None:
        """Save the toolpaths to the output path.

        Raises:
            OSError: If file cannot be written
        """
        document = toolpath_document(toolpaths, mill=mill, units=units, layer=layer)
        self._output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")

    @staticmethod
    def read(path: Path) -> list[Toolpath]:
        """Load toolpaths from a document written by write().

        Args:
            path: Toolpath document

        Returns:
            Toolpaths in stored order
        """
        document = json.loads(path.read_text(encoding="utf-8"))
        return [Toolpath.from_dict(item) for item in document["toolpaths"]]

    @staticmethod
    def get_toolpath_path(input_path: Path) -> Path:
        """Generate output path with toolpath naming convention.

        Converts: top.geojson -> top-toolpaths.json
                  board/outline.wkt -> board/outline-toolpaths.json

        Args:
            input_path: Geometry file path

        Returns:
            Path with -toolpaths suffix and .json extension
        """
        return input_path.parent / f"{input_path.stem}-toolpaths.json"
