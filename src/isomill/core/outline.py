"""Outline grouping for board edge filling.

A board outline usually arrives as drawn curves: a frame around the board
and smaller frames around cutouts. Filling it means turning the frame into
a solid shell and every directly nested frame into a hole of that shell.
"""

from dataclasses import dataclass, field

from shapely.geometry import LinearRing, MultiPolygon, Polygon

from isomill.core.geometry import ring_area, ring_covers


@dataclass
class RingGroup:
    """A top ring with the rings directly nested inside it.

    Attributes:
        top: Index of the enclosing polygon
        members: Indices of polygons whose exteriors are directly inside top
    """

    top: int
    members: list[int] = field(default_factory=list)


def group_rings(rings: list[LinearRing]) -> list[RingGroup]:
    """Group rings by direct containment.

    Repeatedly takes the largest remaining ring as the top of a new group.
    A remaining ring joins the group when the top covers it and no other
    remaining ring does, so deeper nested rings wait for a later group.

    Args:
        rings: Exterior rings, indexed like their polygons

    Returns:
        Groups in order of decreasing top area
    """
    areas = [ring_area(ring) for ring in rings]
    remaining = list(range(len(rings)))
    groups: list[RingGroup] = []

    while remaining:
        top = max(remaining, key=lambda index: areas[index])
        remaining.remove(top)
        group = RingGroup(top=top)

        for candidate in remaining:
            if not ring_covers(rings[top], rings[candidate]):
                continue
            nested_deeper = any(
                other != candidate and ring_covers(rings[other], rings[candidate])
                for other in remaining
            )
            if not nested_deeper:
                group.members.append(candidate)

        for member in group.members:
            remaining.remove(member)
        groups.append(group)

    return groups


def fill_groups(geometry: MultiPolygon) -> list[Polygon]:
    """Assemble one filled polygon per ring group.

    Each member becomes a hole of its top. A member drawn as a thin frame
    contributes its inner ring; a member without holes contributes its own
    exterior.

    Args:
        geometry: Outline regions

    Returns:
        Filled polygons, one per group
    """
    polygons = list(geometry.geoms)
    groups = group_rings([polygon.exterior for polygon in polygons])

    filled: list[Polygon] = []
    for group in groups:
        holes = []
        for member in group.members:
            interiors = polygons[member].interiors
            holes.append(interiors[0] if len(interiors) > 0 else polygons[member].exterior)
        filled.append(Polygon(polygons[group.top].exterior, holes))
    return filled
