"""Geometric kernel helpers built on shapely.

This module wraps the polygon set operations used by the toolpath engine:
- Round-joined buffering (offsetting)
- Normalising boolean results back to polygons
- Duplicate vertex removal and simplification
- Ring predicates (near-equality, coverage, reachability)
- Nearest vertex lookup and mirroring

All functions are pure and never mutate their inputs.
"""

import math

import shapely
from shapely.geometry import LinearRing, LineString, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from isomill.domain import Coordinate


def quad_segments(points_per_circle: int) -> int:
    """Convert a full-circle resolution to shapely's per-quadrant segments."""
    return max(1, points_per_circle // 4)


def round_buffer(geometry: BaseGeometry, distance: float, points_per_circle: int) -> BaseGeometry:
    """Offset a geometry with rounded joins.

    Args:
        geometry: Polygon or multipolygon to offset
        distance: Offset distance; negative shrinks
        points_per_circle: Circle approximation resolution

    Returns:
        Buffered geometry (possibly empty)
    """
    return geometry.buffer(
        distance,
        quad_segs=quad_segments(points_per_circle),
        join_style="round",
    )


def polygons_of(geometry: BaseGeometry) -> list[Polygon]:
    """Extract the non-empty polygons of any geometry.

    Boolean operations can return collections that mix polygons with
    degenerate lines or points; only areal parts are kept.
    """
    if geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if hasattr(geometry, "geoms"):
        result: list[Polygon] = []
        for part in geometry.geoms:
            result.extend(polygons_of(part))
        return result
    return []


def as_multipolygon(geometry: BaseGeometry) -> MultiPolygon:
    """Normalise any geometry to a multipolygon of its areal parts."""
    if isinstance(geometry, MultiPolygon):
        return geometry
    return MultiPolygon(polygons_of(geometry))


def largest_polygon(geometry: BaseGeometry) -> Polygon | None:
    """Get the polygon with the largest area.

    Args:
        geometry: Result of a boolean operation

    Returns:
        Largest polygon, or None if the geometry has no area
    """
    polygons = polygons_of(geometry)
    if not polygons:
        return None
    return max(polygons, key=lambda polygon: polygon.area)


def remove_duplicate_points(geometry: MultiPolygon) -> MultiPolygon:
    """Drop consecutive repeated vertices from every ring."""
    return as_multipolygon(shapely.remove_repeated_points(geometry, tolerance=0.0))


def simplify(geometry: MultiPolygon, tolerance: float) -> MultiPolygon:
    """Reduce vertex count within tolerance, keeping rings valid."""
    return as_multipolygon(geometry.simplify(tolerance, preserve_topology=True))


def ring_area(ring: LinearRing) -> float:
    """Unsigned area enclosed by a ring."""
    return Polygon(ring).area


def rings_equal(a: LinearRing, b: LinearRing, tolerance: float) -> bool:
    """Check if two rings describe the same boundary.

    Rings are equal when their Hausdorff distance is within tolerance, so
    rings differing only in start vertex, orientation, redundant vertices or
    floating point noise compare equal.
    """
    if len(a.coords) == len(b.coords) and a.equals_exact(b, 0.0):
        return True
    return a.hausdorff_distance(b) <= tolerance


def ring_covers(outer: LinearRing, inner: LinearRing) -> bool:
    """Check if the area of inner lies within the area of outer."""
    return Polygon(outer).covers(Polygon(inner))


def segment_within_ring(ring: LinearRing, start: Coordinate, end: Coordinate) -> bool:
    """Check if the straight move between two points stays inside a ring."""
    if start == end:
        return Polygon(ring).covers(shapely.Point(start))
    return Polygon(ring).covers(LineString([start, end]))


def closest_vertex_index(ring: LinearRing, point: Coordinate) -> int:
    """Find the ring vertex nearest to a point.

    The closing vertex is ignored since it repeats the first one. Ties
    resolve to the lowest index.

    Args:
        ring: Closed ring to search
        point: Reference point

    Returns:
        Index of the closest vertex
    """
    coords = ring.coords
    best_index = 0
    best_distance = math.inf
    for index in range(len(coords) - 1):
        distance = math.dist(coords[index], point)
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def mirror_x(point: Coordinate, axis: float) -> Coordinate:
    """Mirror a point across the vertical line x = axis."""
    return (2 * axis - point[0], point[1])
