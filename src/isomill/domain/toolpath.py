"""Toolpath and bounding box types.

This module defines the output types of the toolpath engine:
- Toolpath: An ordered, immutable sequence of tool-center points
- BoundingBox: Axis-aligned envelope in physical units
"""

import math
from dataclasses import dataclass
from typing import Any

from shapely.geometry import LineString

Coordinate = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Toolpath:
    """One continuous tool movement.

    Points are in physical units. A toolpath is closed when its last point
    equals its first one.

    Attributes:
        points: Ordered tool-center points
    """

    points: tuple[Coordinate, ...]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def start(self) -> Coordinate:
        """First point of the path."""
        return self.points[0]

    @property
    def end(self) -> Coordinate:
        """Last point of the path."""
        return self.points[-1]

    def is_closed(self) -> bool:
        """Check if the path returns to its starting point.

        Returns:
            True for closed paths with at least 4 points
        """
        return len(self.points) >= 4 and self.points[0] == self.points[-1]

    def length(self) -> float:
        """Total cutting length of the path.

        Returns:
            Sum of segment lengths in physical units
        """
        return sum(
            math.dist(self.points[i - 1], self.points[i])
            for i in range(1, len(self.points))
        )

    def simplified(self, tolerance: float) -> "Toolpath":
        """Reduce vertices while staying within tolerance of this path.

        Uses Douglas-Peucker, so no simplified point is further than
        tolerance from the original path and vice versa.

        Args:
            tolerance: Maximum deviation in physical units

        Returns:
            New simplified toolpath
        """
        if len(self.points) < 3 or tolerance <= 0:
            return self
        line = LineString(self.points).simplify(tolerance, preserve_topology=False)
        return Toolpath(points=tuple((x, y) for x, y in line.coords))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with the point list
        """
        return {"points": [[x, y] for x, y in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Toolpath":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with a point list

        Returns:
            Toolpath instance
        """
        return cls(points=tuple((float(x), float(y)) for x, y in data["points"]))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min_x: Minimum X coordinate
        min_y: Minimum Y coordinate
        max_x: Maximum X coordinate
        max_y: Maximum Y coordinate
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def min_corner(self) -> Coordinate:
        return (self.min_x, self.min_y)

    @property
    def max_corner(self) -> Coordinate:
        return (self.max_x, self.max_y)

    def scaled(self, factor: float) -> "BoundingBox":
        """Return this box with every coordinate multiplied by factor."""
        return BoundingBox(
            min_x=self.min_x * factor,
            min_y=self.min_y * factor,
            max_x=self.max_x * factor,
            max_y=self.max_y * factor,
        )

    @classmethod
    def from_bounds(cls, bounds: tuple[float, float, float, float]) -> "BoundingBox":
        """Build a box from a shapely ``bounds`` tuple."""
        min_x, min_y, max_x, max_y = bounds
        return cls(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)
