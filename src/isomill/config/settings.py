"""Configuration settings for Isomill."""

from pathlib import Path

from pydantic import BaseModel, Field

from isomill.domain.mill import Mill, MillKind

# Internal units per physical unit.
DEFAULT_SCALE = 10000.0


class GeometryConfig(BaseModel):
    """Configuration for geometry operations.

    Ratios are relative to the surface scale, so they stay meaningful
    whatever internal resolution an importer picks. Lengths are in
    physical units.
    """

    points_per_circle: int = Field(
        default=30,
        ge=4,
        le=360,
        description="Segments used to approximate a full circle in round joins",
    )
    simplify_ratio: float = Field(
        default=0.0001,
        gt=0.0,
        le=0.01,
        description="Import simplification error bound as a fraction of scale",
    )
    tolerance_floor: float = Field(
        default=0.0001,
        gt=0.0,
        description="Partition tolerance used when the mill tolerance is not positive",
    )
    voronoi_tool_factor: float = Field(
        default=5.0,
        ge=1.0,
        description="Voronoi offset as a multiple of the tool diameter",
    )
    voronoi_size_factor: float = Field(
        default=10.0,
        ge=1.0,
        description="Voronoi offset as a multiple of the largest board dimension",
    )
    voronoi_spacing: float = Field(
        default=0.005,
        gt=0.0,
        description="Boundary sampling distance for the Voronoi partition",
    )
    coincidence_epsilon: float = Field(
        default=0.0001,
        gt=0.0,
        description="Distance below which path ordering treats points as coincident",
    )
    default_scale: float = Field(
        default=DEFAULT_SCALE,
        gt=0.0,
        description="Internal units per physical unit for importers without their own scale",
    )

    def simplify_tolerance(self, scale: float) -> float:
        """Get the import simplification tolerance in internal units."""
        return scale * self.simplify_ratio

    def partition_tolerance(self, mill_tolerance: float, scale: float) -> float:
        """Get the Voronoi tolerance in internal units.

        Args:
            mill_tolerance: Mill tolerance in physical units
            scale: Surface scale

        Returns:
            Positive tolerance in internal units
        """
        tolerance = mill_tolerance * scale
        if tolerance <= 0:
            tolerance = self.tolerance_floor * scale
        return tolerance

    def voronoi_offset(self, tool_diameter: float, width: float, height: float, scale: float) -> float:
        """Get the Voronoi envelope offset in internal units."""
        return max(
            abs(tool_diameter) * scale * self.voronoi_tool_factor,
            max(width, height) * scale * self.voronoi_size_factor,
        )


class MillConfig(BaseModel):
    """Configuration for the milling tool."""

    tool_diameter: float = Field(
        default=0.2,
        description="Tool diameter in physical units (negative grows inward)",
    )
    tolerance: float = Field(
        default=0.0,
        ge=0.0,
        description="Path simplification tolerance in physical units",
    )
    optimise: bool = Field(
        default=False,
        description="Simplify toolpaths within tolerance after ordering",
    )
    extra_passes: int = Field(
        default=0,
        ge=0,
        le=50,
        description="Extra concentric passes (isolation tools only)",
    )
    kind: MillKind = Field(
        default=MillKind.ISOLATOR,
        description="Tool kind",
    )

    def to_mill(self) -> Mill:
        """Build the domain mill descriptor."""
        return Mill(
            tool_diameter=self.tool_diameter,
            tolerance=self.tolerance,
            optimise=self.optimise,
            extra_passes=self.extra_passes,
            kind=self.kind,
        )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class IsomillSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    mill: MillConfig = Field(default_factory=MillConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> IsomillSettings:
    """Get default application settings."""
    return IsomillSettings()
