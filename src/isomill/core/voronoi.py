"""Voronoi partition of a multi-region geometry.

Each region receives the territory of points closer to it than to any other
region. Growing a region inside its own cell can never reach a neighbour,
which is what bounds isolation passes.

The polygon-site diagram is approximated from a point-site diagram: every
region boundary is densified and each sample becomes a point site. Instead
of dissolving thousands of point cells with polygon unions, the cell edges
are snapped to a fine grid and only edges separating sites of different
regions are kept. Polygonizing those edges yields the region cells. The
cell boundaries converge to the true bisectors as the sampling distance
shrinks; between parallel edges sampled at matching positions they are
exact.
"""

import numpy as np
import shapely
import structlog
from shapely.geometry import MultiPoint, MultiPolygon, Polygon, box

from isomill.core.geometry import largest_polygon, polygons_of

logger = structlog.get_logger(__name__)

# Snapping grid as a fraction of the working tolerance.
SNAP_RATIO = 0.001


def _boundary_samples(region: Polygon, spacing: float) -> np.ndarray:
    """Densify the region's rings and return their distinct vertices."""
    boundary = shapely.segmentize(region.boundary, spacing)
    coords = shapely.get_coordinates(boundary)
    return np.unique(coords, axis=0)


def _snapped_edges(cells: np.ndarray, grid: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split cell exteriors into edges with grid-snapped, canonical endpoints.

    Neighbouring cells share their Voronoi vertices, so after snapping a
    shared edge has identical endpoints in both cells.

    Returns:
        Tuple of (first endpoints, second endpoints, cell index per edge)
    """
    coords, cell_index = shapely.get_coordinates(
        shapely.get_exterior_ring(cells), return_index=True
    )
    # Adding zero folds -0.0 into 0.0 so equal keys compare equal.
    coords = np.round(coords / grid) * grid + 0.0

    same_ring = cell_index[:-1] == cell_index[1:]
    starts = coords[:-1][same_ring]
    ends = coords[1:][same_ring]
    edge_cells = cell_index[:-1][same_ring]

    # Edges collapsed by snapping carry no boundary.
    keep = np.any(starts != ends, axis=1)
    starts, ends, edge_cells = starts[keep], ends[keep], edge_cells[keep]

    swap = (starts[:, 0] > ends[:, 0]) | (
        (starts[:, 0] == ends[:, 0]) & (starts[:, 1] > ends[:, 1])
    )
    first = np.where(swap[:, None], ends, starts)
    second = np.where(swap[:, None], starts, ends)
    return first, second, edge_cells


def _separating_edges(edge_owners: np.ndarray, first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Mask of edges not shared by two cells of the same region."""
    keys = np.hstack([first, second])
    _, inverse, counts = np.unique(keys, axis=0, return_inverse=True, return_counts=True)
    inverse = inverse.reshape(-1)

    lowest = np.full(len(counts), np.iinfo(np.int64).max, dtype=np.int64)
    highest = np.full(len(counts), -1, dtype=np.int64)
    np.minimum.at(lowest, inverse, edge_owners)
    np.maximum.at(highest, inverse, edge_owners)

    interior = (counts > 1) & (lowest == highest)
    return ~interior[inverse]


def partition(
    geometry: MultiPolygon,
    offset_distance: float,
    tolerance: float,
    spacing: float | None = None,
) -> list[Polygon]:
    """Compute one bounded Voronoi cell per region.

    Args:
        geometry: Regions to partition, in internal units
        offset_distance: How far beyond the geometry envelope cells extend
        tolerance: Positive working tolerance in internal units
        spacing: Boundary sampling distance (defaults to tolerance)

    Returns:
        Cells index-aligned with ``geometry.geoms``. Every cell covers its
        own region and no other.
    """
    regions = list(geometry.geoms)
    if not regions:
        return []

    min_x, min_y, max_x, max_y = geometry.bounds
    envelope = box(
        min_x - offset_distance,
        min_y - offset_distance,
        max_x + offset_distance,
        max_y + offset_distance,
    )

    if len(regions) == 1:
        return [envelope]

    sample_spacing = max(spacing if spacing is not None else tolerance, tolerance)

    samples: list[np.ndarray] = []
    labels: list[np.ndarray] = []
    for index, region in enumerate(regions):
        region_samples = _boundary_samples(region, sample_spacing)
        samples.append(region_samples)
        labels.append(np.full(len(region_samples), index, dtype=np.int64))

    # Regions touching at a vertex share a sample; the first region keeps it.
    points, first_seen = np.unique(np.concatenate(samples), axis=0, return_index=True)
    owners = np.concatenate(labels)[first_seen]

    diagram = shapely.voronoi_polygons(MultiPoint(points), extend_to=envelope, ordered=True)
    point_cells = shapely.get_parts(diagram)

    first, second, edge_cells = _snapped_edges(point_cells, tolerance * SNAP_RATIO)
    edge_owners = owners[edge_cells]
    separating = _separating_edges(edge_owners, first, second)

    logger.debug(
        "Voronoi diagram built",
        regions=len(regions),
        sites=len(points),
        edges=int(separating.sum()),
    )

    region_tree = shapely.STRtree(regions)

    cells: list[Polygon] = []
    for index, region in enumerate(regions):
        territory = _territory(
            first, second, separating & (edge_owners == index), points[owners == index]
        )
        territory = territory.intersection(envelope).union(region)

        # Sampling error may leak a sliver of a close neighbour into the cell.
        neighbours = [
            regions[other]
            for other in region_tree.query(territory, predicate="intersects")
            if other != index
        ]
        if neighbours:
            territory = territory.difference(shapely.union_all(neighbours))

        cells.append(_cell_around(territory, region))

    return cells


def _territory(first: np.ndarray, second: np.ndarray, mask: np.ndarray, sites: np.ndarray):
    """Polygonize the boundary edges of one region and keep its own faces.

    Faces enclosed by the region's territory but owned by other regions
    (an island inside a frame) contain none of the region's sites.
    """
    if not mask.any():
        return Polygon()

    lines = shapely.linestrings(np.stack([first[mask], second[mask]], axis=1))
    faces = polygons_of(shapely.polygonize(lines))

    owned = [
        face for face in faces
        if shapely.contains_xy(face, sites[:, 0], sites[:, 1]).any()
    ]
    return shapely.union_all(owned) if owned else Polygon()


def _cell_around(territory, region: Polygon) -> Polygon:
    """Pick the part of a territory holding the region."""
    parts = polygons_of(territory)
    for part in parts:
        if part.covers(region):
            return part
    cell = largest_polygon(territory)
    return cell if cell is not None else region
