"""Stitching of offset rings into continuous toolpaths.

The offset passes of one region produce nested rings: exteriors that grow
outwards pass after pass, and hole rings that shrink inwards. Cutting every
ring as a separate path would lift the tool between each of them, so rings
are chained into as few continuous paths as possible:

- All exteriors of a region form one path, each ring entered at the vertex
  nearest to where the previous ring ended. Once an exterior stops changing
  (the region is boxed in by its cell) later exteriors are skipped.
- Hole rings are chained from the largest inwards, as long as the next ring
  lies inside the current one and the connecting move stays inside it too,
  so the tool never crosses uncut copper.
"""

from collections.abc import Sequence

from shapely.geometry import LinearRing, Polygon

from isomill.core.geometry import (
    closest_vertex_index,
    mirror_x,
    ring_area,
    ring_covers,
    rings_equal,
    segment_within_ring,
)
from isomill.domain import Coordinate, Toolpath


class RingStitcher:
    """Accumulates toolpaths from rings in internal units.

    Points are converted to physical units (and mirrored if requested) as
    they are emitted. ``last_point`` is kept in internal, unmirrored units
    and carries across rings and regions.

    Example:
        stitcher = RingStitcher(scale=10000.0, tolerance=1.0)
        stitcher.stitch_region(pass_polygons)
        toolpaths = stitcher.toolpaths()
    """

    def __init__(
        self,
        scale: float,
        tolerance: float,
        mirror_axis: float | None = None,
    ) -> None:
        """Initialize the stitcher.

        Args:
            scale: Internal units per physical unit
            tolerance: Ring equality tolerance in internal units
            mirror_axis: Internal X coordinate to mirror across, None for no mirroring
        """
        self.scale = scale
        self.tolerance = tolerance
        self.mirror_axis = mirror_axis
        self.last_point: Coordinate = (0.0, 0.0)
        self.rings_emitted = 0
        self._paths: list[list[Coordinate]] = []

    def open_path(self) -> None:
        """Start a new, empty toolpath."""
        self._paths.append([])

    def push_point(self, point: Coordinate) -> None:
        """Append one internal point to the current toolpath."""
        if self.mirror_axis is not None:
            point = mirror_x(point, self.mirror_axis)
        self._paths[-1].append((point[0] / self.scale, point[1] / self.scale))

    def copy_ring(self, ring: LinearRing, start: int) -> None:
        """Append a full ring to the current toolpath.

        The ring is walked once around from vertex ``start`` and closed back
        on it.

        Args:
            ring: Closed ring to emit
            start: Index of the entry vertex
        """
        coords = ring.coords
        size = len(coords) - 1
        index = start
        while True:
            self.push_point(coords[index])
            index = (index + 1) % size
            if index == start:
                break
        self.push_point(coords[start])
        self.last_point = tuple(coords[start])
        self.rings_emitted += 1

    def closest_index(self, ring: LinearRing) -> int:
        """Index of the ring vertex nearest to the last emitted point."""
        return closest_vertex_index(ring, self.last_point)

    def stitch_region(self, passes: Sequence[Polygon]) -> None:
        """Emit the toolpaths of one region.

        Args:
            passes: Offset polygons of the region, innermost pass first
        """
        if not passes:
            return

        self._stitch_exteriors(passes)
        self._stitch_holes([list(polygon.interiors) for polygon in passes])

    def _stitch_exteriors(self, passes: Sequence[Polygon]) -> None:
        self.open_path()
        self.copy_ring(passes[0].exterior, 0)

        for previous, current in zip(passes, passes[1:]):
            if rings_equal(current.exterior, previous.exterior, self.tolerance):
                # Collapsed: every later exterior repeats this one.
                break
            self.copy_ring(current.exterior, self.closest_index(current.exterior))

    def _stitch_holes(self, pool: list[list[LinearRing]]) -> None:
        areas = {id(ring): ring_area(ring) for rings in pool for ring in rings}

        while any(pool):
            first_pass, first_slot = max(
                (
                    (pass_index, slot)
                    for pass_index, rings in enumerate(pool)
                    for slot in range(len(rings))
                ),
                key=lambda key: areas[id(pool[key[0]][key[1]])],
            )
            current = pool[first_pass].pop(first_slot)

            self.open_path()
            self.copy_ring(current, 0)

            for rings in pool[first_pass + 1:]:
                match = self._find_continuation(current, rings)
                if match is None:
                    break
                current = rings.pop(match)

    def _find_continuation(self, current: LinearRing, candidates: list[LinearRing]) -> int | None:
        """Find the ring of the next pass that continues the current chain.

        Identical rings are consumed without emitting them again. Contained
        rings are emitted when the move from the last point stays inside
        the current ring.

        Returns:
            Index of the consumed candidate, or None to end the chain
        """
        for slot, candidate in enumerate(candidates):
            if rings_equal(candidate, current, self.tolerance):
                return slot
            if ring_covers(current, candidate):
                entry = self.closest_index(candidate)
                if segment_within_ring(current, candidate.coords[entry], self.last_point):
                    self.copy_ring(candidate, entry)
                    return slot
        return None

    def toolpaths(self) -> list[Toolpath]:
        """Freeze the accumulated point lists into toolpaths."""
        return [Toolpath(points=tuple(points)) for points in self._paths if points]
