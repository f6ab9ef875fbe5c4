"""Debug image sinks.

The toolpath engine reports its intermediate geometry (Voronoi cells,
offset passes, final regions) to a sink. The default sink ignores
everything; SvgDebugSink renders it as an SVG overlay for inspection.
"""

import random
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from shapely.affinity import scale as scale_geometry
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry


class DebugSink(Protocol):
    """Observer of the engine's intermediate geometry (internal units)."""

    def begin(self, name: str, scale: float) -> None: ...

    def add_cells(self, cells: Sequence[Polygon]) -> None: ...

    def add_passes(self, polygons: Sequence[Polygon]) -> None: ...

    def add_regions(self, geometry: BaseGeometry) -> None: ...

    def close(self) -> None: ...


class NullDebugSink:
    """Sink that discards everything."""

    def begin(self, name: str, scale: float) -> None:
        pass

    def add_cells(self, cells: Sequence[Polygon]) -> None:
        pass

    def add_passes(self, polygons: Sequence[Polygon]) -> None:
        pass

    def add_regions(self, geometry: BaseGeometry) -> None:
        pass

    def close(self) -> None:
        pass


class SvgDebugSink:
    """Writes one SVG image per generation run.

    Cells are drawn faintly, passes of each region in one colour with the
    innermost pass filled, and regions on top with a black stroke. Colours
    come from a seeded generator so images are reproducible.

    Example:
        sink = SvgDebugSink(Path("debug"))
        surface = RegionSurface(name="top", debug_sink=sink)
    """

    PIXELS_PER_UNIT = 1000.0

    def __init__(self, directory: Path) -> None:
        """Initialize the sink.

        Args:
            directory: Directory receiving the SVG files
        """
        self.directory = directory
        self._name: str | None = None
        self._factor = 1.0
        self._elements: list[str] = []
        self._bounds: list[tuple[float, float, float, float]] = []
        self._random = random.Random(1)

    @property
    def output_path(self) -> Path | None:
        """Path of the image being written, None when idle."""
        if self._name is None:
            return None
        return self.directory / f"{self._name}.svg"

    def begin(self, name: str, scale: float) -> None:
        self._name = name
        self._factor = self.PIXELS_PER_UNIT / scale
        self._elements = []
        self._bounds = []
        self._random = random.Random(1)

    def _color(self) -> str:
        r, g, b = (self._random.randrange(256) for _ in range(3))
        return f"rgb({r},{g},{b})"

    def _add(self, geometry: BaseGeometry, style: str, track: bool = True) -> None:
        if geometry.is_empty:
            return
        # SVG y grows downwards.
        scaled = scale_geometry(geometry, self._factor, -self._factor, origin=(0, 0))
        if track:
            self._bounds.append(scaled.bounds)
        for polygon in getattr(scaled, "geoms", [scaled]):
            path = " ".join(
                "M " + " L ".join(f"{x:.3f},{y:.3f}" for x, y in ring.coords) + " Z"
                for ring in [polygon.exterior, *polygon.interiors]
            )
            self._elements.append(f'<path fill-rule="evenodd" d="{path}" style="{style}"/>')

    def add_cells(self, cells: Sequence[Polygon]) -> None:
        for cell in cells:
            # Cells reach far beyond the board and would dwarf it.
            self._add(cell, f"fill-opacity:0.2;fill:{self._color()};", track=False)

    def add_passes(self, polygons: Sequence[Polygon]) -> None:
        color = self._color()
        for index, polygon in enumerate(reversed(polygons)):
            if index == 0:
                style = f"fill-opacity:0.6;fill:{color};stroke:rgb(0,0,0);stroke-width:1"
            else:
                style = "fill:none;stroke:rgb(0,0,0);stroke-width:1"
            self._add(polygon, style)

    def add_regions(self, geometry: BaseGeometry) -> None:
        for polygon in getattr(geometry, "geoms", [geometry]):
            self._add(
                polygon,
                f"fill-opacity:1;fill:{self._color()};stroke:rgb(0,0,0);stroke-width:1",
            )

    def close(self) -> None:
        path = self.output_path
        if path is None:
            return

        if self._bounds:
            min_x = min(b[0] for b in self._bounds)
            min_y = min(b[1] for b in self._bounds)
            max_x = max(b[2] for b in self._bounds)
            max_y = max(b[3] for b in self._bounds)
        else:
            min_x = min_y = max_x = max_y = 0.0

        view_box = f"{min_x:.3f} {min_y:.3f} {max_x - min_x:.3f} {max_y - min_y:.3f}"
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{view_box}">\n'
            + "\n".join(self._elements)
            + "\n</svg>\n",
            encoding="utf-8",
        )
        self._name = None
