"""Nearest-neighbour ordering of toolpaths.

Reduces non-cutting travel by always moving to the path whose start point
is closest to where the tool currently is.
"""

import math
from collections.abc import Sequence

from isomill.domain import Coordinate, Toolpath


def order(paths: Sequence[Toolpath], start: Coordinate, epsilon: float) -> list[int]:
    """Compute a visiting order for a set of paths.

    Greedy nearest neighbour: from the current position pick the path with
    the nearest start point, then continue from its end point. A candidate
    closer than epsilon is taken at once, since coincident points leave
    nothing to optimise. Ties resolve to the lowest index, so the result is
    deterministic and an already nearest-neighbour ordered input is returned
    unchanged.

    Args:
        paths: Paths to visit (empty paths are visited last)
        start: Initial tool position
        epsilon: Distance under which two points are treated as coincident

    Returns:
        Permutation of path indices
    """
    remaining = [index for index, path in enumerate(paths) if len(path) > 0]
    empty = [index for index, path in enumerate(paths) if len(path) == 0]
    permutation: list[int] = []
    position = start

    while remaining:
        best_slot = 0
        best_distance = math.inf

        for slot, index in enumerate(remaining):
            distance = math.dist(position, paths[index].start)
            if distance < epsilon:
                best_slot = slot
                break
            if distance < best_distance:
                best_distance = distance
                best_slot = slot

        chosen = remaining.pop(best_slot)
        permutation.append(chosen)
        position = paths[chosen].end

    return permutation + empty


def nearest_neighbour(
    paths: Sequence[Toolpath],
    start: Coordinate = (0.0, 0.0),
    epsilon: float = 0.0001,
) -> list[Toolpath]:
    """Return paths reordered for minimal travel.

    Args:
        paths: Paths to reorder
        start: Initial tool position
        epsilon: Coincidence distance

    Returns:
        New list with the same paths in visiting order
    """
    return [paths[index] for index in order(paths, start, epsilon)]
