"""Core toolpath algorithms for isomill.

This module contains the algorithms that turn copper regions into
isolation toolpaths:

- Geometry helpers (round buffering, ring predicates, nearest vertex)
- Voronoi partition bounding how far each region may grow
- Ring stitching into continuous toolpaths
- Nearest-neighbour path ordering
- Outline grouping for board edge filling

Key functions:
- partition: Compute one Voronoi cell per region
- nearest_neighbour: Reorder toolpaths for minimal travel
- group_rings: Group outline rings by direct containment

Key classes:
- RegionSurface: Geometry holder and toolpath generator
- RingStitcher: Accumulates rings into continuous toolpaths
"""

from isomill.core.geometry import (
    closest_vertex_index,
    largest_polygon,
    mirror_x,
    rings_equal,
    round_buffer,
)
from isomill.core.ordering import nearest_neighbour, order
from isomill.core.outline import RingGroup, fill_groups, group_rings
from isomill.core.stitching import RingStitcher
from isomill.core.surface import GeometryImporter, RegionSurface
from isomill.core.voronoi import partition

__all__ = [
    # Surface
    "GeometryImporter",
    "RegionSurface",
    # Stitching and outline
    "RingGroup",
    "RingStitcher",
    "fill_groups",
    "group_rings",
    # Collaborators
    "nearest_neighbour",
    "order",
    "partition",
    # Geometry functions
    "closest_vertex_index",
    "largest_polygon",
    "mirror_x",
    "rings_equal",
    "round_buffer",
]
