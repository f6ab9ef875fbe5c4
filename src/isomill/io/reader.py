"""Geometry readers for copper layers.

This module provides the import side of the pipeline: it turns copper
geometry described in physical units into the scaled geometry a
RegionSurface works on.

Supported sources:
- In-memory shapely geometry (ShapelyImporter)
- GeoJSON and WKT files (GeometryReader)

GeoJSON polygons are taken as copper as they are. Line strings carrying a
``width`` property are stroked as traces and points carrying a
``diameter`` property are flashed as round pads.
"""

import json
from pathlib import Path
from typing import Any

import shapely
from shapely.affinity import scale as scale_geometry
from shapely.errors import GEOSException
from shapely.geometry import LineString, MultiPolygon, Point, Polygon, shape
from shapely.geometry.base import BaseGeometry

from isomill.config import DEFAULT_SCALE
from isomill.exceptions import GeometryImportError


class ShapelyImporter:
    """Importer for copper geometry already held in memory.

    Primitives that are not polygons yet (stroked lines, flashed pads) are
    kept apart and only buffered when rendering, so the circle resolution
    of the surface applies to them.

    Example:
        importer = ShapelyImporter(copper, scale=10000.0)
        surface.render(importer)
    """

    def __init__(
        self,
        geometry: BaseGeometry,
        scale: float = DEFAULT_SCALE,
        strokes: list[tuple[BaseGeometry, float]] | None = None,
        source: str = "<memory>",
    ) -> None:
        """Initialize the importer.

        Args:
            geometry: Polygon or multipolygon in physical units
            scale: Internal units per physical unit
            strokes: Extra (geometry, width) primitives to buffer by width / 2
            source: Name used in error messages

        Raises:
            GeometryImportError: If geometry is not areal or scale is not positive
        """
        if not isinstance(geometry, (Polygon, MultiPolygon)):
            raise GeometryImportError(source, f"unsupported geometry type {geometry.geom_type}")
        if scale <= 0:
            raise GeometryImportError(source, f"scale must be positive, got {scale}")

        self.geometry = geometry
        self.scale = scale
        self.strokes = strokes or []
        self.source = source

    def render(self, resolution: int) -> tuple[BaseGeometry, float]:
        """Render the primitives in internal units.

        Args:
            resolution: Points used to approximate a full circle

        Returns:
            Tuple of (geometry, scale)
        """
        quad_segs = max(1, resolution // 4)
        shapes: list[BaseGeometry] = [
            polygon for polygon in getattr(self.geometry, "geoms", [self.geometry])
            if not polygon.is_empty
        ]
        shapes.extend(
            primitive.buffer(width / 2, quad_segs=quad_segs)
            for primitive, width in self.strokes
        )

        if all(shapely.is_valid(item) for item in shapes):
            merged = shapely.union_all(shapes)
        else:
            # Keep invalid input as it is so the surface can reject it.
            merged = MultiPolygon([item for item in shapes if isinstance(item, Polygon)])

        return scale_geometry(merged, self.scale, self.scale, origin=(0, 0)), self.scale


class GeometryReader:
    """Loads copper geometry from GeoJSON or WKT files.

    Example:
        reader = GeometryReader(Path("top.geojson"))
        reader.load()
        surface.render(reader)
    """

    SUFFIXES = {".geojson": "geojson", ".json": "geojson", ".wkt": "wkt"}

    def __init__(self, path: Path, scale: float = DEFAULT_SCALE) -> None:
        """Initialize the reader.

        Args:
            path: GeoJSON (.geojson, .json) or WKT (.wkt) file
            scale: Internal units per physical unit
        """
        self._path = path
        self._scale = scale
        self._importer: ShapelyImporter | None = None

    @property
    def format(self) -> str:
        """Return the file format derived from the suffix.

        Raises:
            GeometryImportError: If the suffix is not supported
        """
        fmt = self.SUFFIXES.get(self._path.suffix.lower())
        if fmt is None:
            raise GeometryImportError(str(self._path), f"unsupported file type '{self._path.suffix}'")
        return fmt

    def load(self) -> None:
        """Parse the file.

        Raises:
            FileNotFoundError: If the file does not exist
            GeometryImportError: If the content cannot be parsed
        """
        if not self._path.exists():
            raise FileNotFoundError(f"Geometry file not found: {self._path}")

        text = self._path.read_text(encoding="utf-8")
        source = str(self._path)

        try:
            if self.format == "wkt":
                polygons, strokes = _split_primitives(source, [shapely.from_wkt(text)], [{}])
            else:
                geometries, properties = _parse_geojson(source, json.loads(text))
                polygons, strokes = _split_primitives(source, geometries, properties)
        except (json.JSONDecodeError, GEOSException, ValueError, KeyError, TypeError) as e:
            raise GeometryImportError(source, str(e)) from e

        self._importer = ShapelyImporter(
            MultiPolygon(polygons), scale=self._scale, strokes=strokes, source=source
        )

    @property
    def region_count(self) -> int:
        """Number of polygon primitives read, before merging.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._importer is None:
            raise RuntimeError("Geometry not loaded. Call load() first.")
        return len(self._importer.geometry.geoms) + len(self._importer.strokes)

    def render(self, resolution: int) -> tuple[BaseGeometry, float]:
        """Render the loaded geometry in internal units.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._importer is None:
            raise RuntimeError("Geometry not loaded. Call load() first.")
        return self._importer.render(resolution)


def _parse_geojson(source: str, data: dict[str, Any]) -> tuple[list[BaseGeometry], list[dict[str, Any]]]:
    """Extract geometries and their properties from a GeoJSON document."""
    kind = data.get("type")
    if kind == "FeatureCollection":
        features = data["features"]
    elif kind == "Feature":
        features = [data]
    elif kind is not None:
        features = [{"type": "Feature", "geometry": data, "properties": {}}]
    else:
        raise GeometryImportError(source, "missing GeoJSON 'type' member")

    geometries = []
    properties = []
    for feature in features:
        if feature.get("geometry") is None:
            continue
        geometries.append(shape(feature["geometry"]))
        properties.append(feature.get("properties") or {})
    return geometries, properties


def _split_primitives(
    source: str,
    geometries: list[BaseGeometry],
    properties: list[dict[str, Any]],
) -> tuple[list[Polygon], list[tuple[BaseGeometry, float]]]:
    """Sort primitives into ready polygons and shapes still to be buffered."""
    polygons: list[Polygon] = []
    strokes: list[tuple[BaseGeometry, float]] = []

    for geometry, props in zip(geometries, properties):
        for part in getattr(geometry, "geoms", [geometry]):
            if isinstance(part, Polygon):
                polygons.append(part)
            elif isinstance(part, LineString):
                if "width" not in props:
                    raise GeometryImportError(source, "line feature without 'width' property")
                strokes.append((part, float(props["width"])))
            elif isinstance(part, Point):
                if "diameter" not in props:
                    raise GeometryImportError(source, "point feature without 'diameter' property")
                strokes.append((part, float(props["diameter"])))
            else:
                raise GeometryImportError(source, f"unsupported geometry type {part.geom_type}")

    return polygons, strokes
