"""Milling tool descriptor.

This module defines the tool description consumed by the toolpath engine:
- MillKind: Enum of tool kinds with their capabilities
- Mill: Diameter, tolerance and pass settings of one tool
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MillKind(str, Enum):
    """Kind of milling tool.

    Only isolation tools cut extra concentric passes; cutters and drills
    always produce a single pass.
    """

    ISOLATOR = "isolator"
    CUTTER = "cutter"
    DRILL = "drill"

    @property
    def supports_extra_passes(self) -> bool:
        """Whether this tool kind can cut extra isolation passes."""
        return self is MillKind.ISOLATOR


@dataclass(frozen=True, slots=True)
class Mill:
    """Description of a milling tool.

    Attributes:
        tool_diameter: Cutting diameter in physical units. A negative value
            grows inward (fill-in mode) and always yields one pass.
        tolerance: Allowed path deviation in physical units
        optimise: Simplify toolpaths within tolerance after ordering
        extra_passes: Additional concentric passes beyond the first
        kind: Tool kind, decides whether extra passes apply
    """

    tool_diameter: float
    tolerance: float = 0.0
    optimise: bool = False
    extra_passes: int = 0
    kind: MillKind = MillKind.ISOLATOR

    @property
    def passes(self) -> int:
        """Number of concentric passes this tool cuts per region."""
        if self.kind.supports_extra_passes:
            return self.extra_passes + 1
        return 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary representation of the mill
        """
        return {
            "tool_diameter": self.tool_diameter,
            "tolerance": self.tolerance,
            "optimise": self.optimise,
            "extra_passes": self.extra_passes,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Mill":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a mill

        Returns:
            Mill instance
        """
        return cls(
            tool_diameter=data["tool_diameter"],
            tolerance=data.get("tolerance", 0.0),
            optimise=data.get("optimise", False),
            extra_passes=data.get("extra_passes", 0),
            kind=MillKind(data.get("kind", MillKind.ISOLATOR.value)),
        )
