"""Region surface: the isolation toolpath engine.

A RegionSurface owns the copper geometry of one layer and turns it into
tool-center paths. Every region is grown pass by pass by half the tool
width, but never beyond its Voronoi cell, so two neighbouring regions are
always separated by at least one cut. Passes that had to be clipped are
reported once as a ClearanceContention warning.

Key classes:
- GeometryImporter: Protocol of the geometry source
- RegionSurface: Geometry holder and toolpath generator
"""

import time
import warnings
import weakref
from collections.abc import Callable
from typing import Protocol

import shapely
import structlog
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from isomill.config import GeometryConfig
from isomill.core import voronoi
from isomill.core.geometry import (
    as_multipolygon,
    largest_polygon,
    remove_duplicate_points,
    rings_equal,
    round_buffer,
    simplify,
)
from isomill.core.ordering import nearest_neighbour
from isomill.core.outline import fill_groups
from isomill.core.stitching import RingStitcher
from isomill.domain import BoundingBox, Mill, Toolpath
from isomill.exceptions import (
    ClearanceContention,
    IncompatibleMaskError,
    MaskUnavailableError,
    SelfIntersectionError,
    SurfaceNotRenderedError,
)
from isomill.io.debug import DebugSink, NullDebugSink
from isomill.utils import GenerationLogger, GenerationStats

logger = structlog.get_logger(__name__)


class GeometryImporter(Protocol):
    """Source of copper geometry."""

    def render(self, resolution: int) -> tuple[BaseGeometry, float]:
        """Render the source.

        Args:
            resolution: Points used to approximate a full circle

        Returns:
            Geometry in internal units and the scale that maps physical
            units to internal units
        """
        ...


class RegionSurface:
    """Multi-region copper geometry with toolpath generation.

    Geometry is stored in internal units (physical units times ``scale``);
    every coordinate handed out (bounding box, toolpaths) is in physical
    units.

    Example:
        surface = RegionSurface(name="top")
        surface.render(ShapelyImporter(copper, scale=10000.0))
        toolpaths = surface.generate(Mill(tool_diameter=0.2, extra_passes=1))
    """

    def __init__(
        self,
        name: str = "surface",
        width: float | None = None,
        height: float | None = None,
        config: GeometryConfig | None = None,
        debug_sink: DebugSink | None = None,
    ) -> None:
        """Initialize an empty surface.

        Args:
            name: Layer name, used for debug output
            width: Board width in physical units (defaults to the geometry width)
            height: Board height in physical units (defaults to the geometry height)
            config: Geometry settings
            debug_sink: Observer for intermediate geometry
        """
        self.name = name
        self.config = config or GeometryConfig()
        self.debug_sink: DebugSink = debug_sink or NullDebugSink()
        self.last_stats: GenerationStats | None = None
        self._width = width
        self._height = height
        self._geometry: MultiPolygon | None = None
        self._scale = 1.0
        self._bounds = BoundingBox(0.0, 0.0, 0.0, 0.0)
        self._mask_ref: weakref.ReferenceType["RegionSurface"] | None = None

    @property
    def is_rendered(self) -> bool:
        return self._geometry is not None

    @property
    def scale(self) -> float:
        """Internal units per physical unit."""
        return self._scale

    @property
    def geometry(self) -> MultiPolygon:
        """Working geometry in internal units.

        Raises:
            SurfaceNotRenderedError: If render() was not called yet
        """
        if self._geometry is None:
            raise SurfaceNotRenderedError("access geometry")
        return self._geometry

    @property
    def width(self) -> float:
        """Board width in physical units."""
        return self._width if self._width is not None else self.bounding_box().width

    @property
    def height(self) -> float:
        """Board height in physical units."""
        return self._height if self._height is not None else self.bounding_box().height

    def bounding_box(self) -> BoundingBox:
        """Envelope of the geometry in physical units."""
        return self._bounds.scaled(1.0 / self._scale)

    def _set_geometry(self, geometry: MultiPolygon) -> None:
        self._geometry = geometry
        if geometry.is_empty:
            self._bounds = BoundingBox(0.0, 0.0, 0.0, 0.0)
        else:
            self._bounds = BoundingBox.from_bounds(geometry.bounds)

    def render(self, importer: GeometryImporter) -> None:
        """Import, validate and simplify geometry.

        Args:
            importer: Geometry source

        Raises:
            SelfIntersectionError: If the rendered geometry is self-intersecting
        """
        raw, scale = importer.render(self.config.points_per_circle)

        if not shapely.is_valid(raw):
            raise SelfIntersectionError(shapely.is_valid_reason(raw))

        self._scale = scale
        # Lossy, but the deviation is far below any tool tolerance.
        geometry = simplify(as_multipolygon(raw), self.config.simplify_tolerance(scale))
        self._set_geometry(geometry)

        logger.info(
            "Surface rendered",
            surface=self.name,
            regions=len(geometry.geoms),
            scale=scale,
        )

    @property
    def mask(self) -> "RegionSurface | None":
        """Attached mask surface, None if no mask was attached.

        Raises:
            MaskUnavailableError: If the mask was released
        """
        if self._mask_ref is None:
            return None
        mask = self._mask_ref()
        if mask is None:
            raise MaskUnavailableError()
        return mask

    def attach_mask(self, surface: object) -> None:
        """Clip everything this surface produces to another surface.

        The current geometry is reduced right away so later operations
        work on fewer regions. Only a weak reference is kept; the mask must
        stay alive while this surface generates toolpaths.

        Args:
            surface: Mask surface

        Raises:
            SurfaceNotRenderedError: If render() was not called yet
            IncompatibleMaskError: If surface is not a RegionSurface on the
                same scale
        """
        if self._geometry is None:
            raise SurfaceNotRenderedError("attach mask")
        if not isinstance(surface, RegionSurface):
            raise IncompatibleMaskError(type(surface).__name__)
        if surface.scale != self.scale:
            raise IncompatibleMaskError(
                type(surface).__name__,
                f"scale {surface.scale} does not match surface scale {self.scale}",
            )

        self._mask_ref = weakref.ref(surface)
        self._set_geometry(self._apply_mask(self.geometry))

        logger.debug("Mask attached", surface=self.name, mask=surface.name)

    def _apply_mask(self, geometry: BaseGeometry) -> MultiPolygon:
        mask = self.mask
        if mask is None:
            return as_multipolygon(geometry)
        return as_multipolygon(geometry.intersection(mask.geometry))

    def _masked_polygon(self, polygon: BaseGeometry) -> Polygon | None:
        if self.mask is None:
            return largest_polygon(polygon)
        return largest_polygon(polygon.intersection(self.mask.geometry))

    def fill(self, line_width: float) -> None:
        """Turn a drawn outline into a solid routable region.

        Nested outline curves become holes of their enclosing curve and the
        result is shrunk by half the line width.

        Args:
            line_width: Width of the drawn outline in physical units

        Raises:
            SurfaceNotRenderedError: If render() was not called yet
        """
        if self._geometry is None:
            raise SurfaceNotRenderedError("fill outline")

        filled = MultiPolygon(fill_groups(self._geometry))
        shrunk = round_buffer(
            filled,
            -line_width * self._scale / 2,
            self.config.points_per_circle,
        )
        self._set_geometry(as_multipolygon(shrunk))

        logger.info(
            "Outline filled",
            surface=self.name,
            groups=len(filled.geoms),
            regions=len(self._geometry.geoms),
        )

    def _mirror_axis(self, mirror: bool, mirror_absolute: bool) -> float | None:
        if not mirror:
            return None
        if mirror_absolute:
            return self._bounds.min_x
        return (self._bounds.min_x + self._bounds.max_x) / 2

    def generate(
        self,
        mill: Mill,
        mirror: bool = False,
        mirror_absolute: bool = False,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> list[Toolpath]:
        """Generate ordered isolation toolpaths.

        Clipped passes raise one ClearanceContention warning per call.
        Python's default warning filter shows a repeated warning only once,
        so callers generating several times should read
        ``last_stats.contention`` for the result of each run.

        Args:
            mill: Tool description
            mirror: Mirror the paths for the bottom side of the board
            mirror_absolute: Mirror across the geometry's minimum X instead
                of its horizontal centre
            progress_callback: Optional callback(completed, total) per region

        Returns:
            Toolpaths in physical units, ordered for minimal travel

        Raises:
            SurfaceNotRenderedError: If render() was not called yet
            MaskUnavailableError: If the attached mask was released
        """
        if self._geometry is None:
            raise SurfaceNotRenderedError("generate toolpaths")
        if self._mask_ref is not None and self._mask_ref() is None:
            raise MaskUnavailableError()

        stats = GenerationStats(start_time=time.time())
        generation_logger = GenerationLogger(logger.bind(surface=self.name), stats)

        scale = self._scale
        tolerance = self.config.partition_tolerance(mill.tolerance, scale)
        geometry = remove_duplicate_points(self._geometry)
        regions = list(geometry.geoms)

        cells = voronoi.partition(
            geometry,
            self.config.voronoi_offset(mill.tool_diameter, self.width, self.height, scale),
            tolerance,
            spacing=self.config.voronoi_spacing * scale,
        )

        grow = mill.tool_diameter / 2 * scale
        stitcher = RingStitcher(
            scale=scale,
            tolerance=tolerance,
            mirror_axis=self._mirror_axis(mirror, mirror_absolute),
        )

        self.debug_sink.begin(self.name, scale)
        try:
            self.debug_sink.add_cells(cells)

            for index, (region, cell) in enumerate(zip(regions, cells)):
                passes = self._offset_region(
                    region, cell, grow, mill.passes, tolerance, index, generation_logger
                )
                stitcher.stitch_region(passes)
                self.debug_sink.add_passes(passes)

                if progress_callback is not None:
                    progress_callback(index + 1, len(regions))

            self.debug_sink.add_regions(geometry)
        finally:
            self.debug_sink.close()

        if stats.contention:
            generation_logger.log_contention()
            warnings.warn(ClearanceContention(stats.clipped_passes), stacklevel=2)

        toolpaths = nearest_neighbour(
            stitcher.toolpaths(), (0.0, 0.0), self.config.coincidence_epsilon
        )

        if mill.optimise:
            toolpaths = [toolpath.simplified(mill.tolerance) for toolpath in toolpaths]

        stats.rings_emitted = stitcher.rings_emitted
        stats.toolpath_count = len(toolpaths)
        stats.point_count = sum(len(toolpath) for toolpath in toolpaths)
        stats.end_time = time.time()
        self.last_stats = stats

        logger.info(
            "Toolpaths generated",
            surface=self.name,
            regions=stats.region_count,
            toolpaths=stats.toolpath_count,
            points=stats.point_count,
            contention=stats.contention,
            duration_seconds=round(stats.duration_seconds, 3),
        )

        return toolpaths

    def _offset_region(
        self,
        region: Polygon,
        cell: Polygon,
        grow: float,
        steps: int,
        tolerance: float,
        index: int,
        generation_logger: GenerationLogger,
    ) -> list[Polygon]:
        """Compute the pass polygons of one region.

        Args:
            region: Region in internal units
            cell: Voronoi cell of the region
            grow: Offset per pass in internal units (half the tool diameter)
            steps: Requested number of passes
            tolerance: Ring equality tolerance
            index: Region index, for logging
            generation_logger: Logger collecting statistics

        Returns:
            Pass polygons, innermost first. Empty if masking removed the region.
        """
        if grow < 0:
            # Growing inward fills the whole cell at once.
            steps = 1

        generation_logger.log_region_start(index, steps)
        polygons: list[Polygon] = []

        for pass_index in range(steps):
            if grow == 0:
                polygon = region
            elif grow > 0:
                buffered = largest_polygon(
                    round_buffer(region, grow * (pass_index + 1), self.config.points_per_circle)
                )
                if buffered is None:
                    break
                polygon = self._masked_polygon(buffered.intersection(cell))
                if polygon is None:
                    break
                if not rings_equal(polygon.exterior, buffered.exterior, tolerance):
                    generation_logger.log_pass_clipped(index, pass_index)
            else:
                polygon = self._masked_polygon(cell)
                if polygon is None:
                    break

            polygons.append(polygon)

        if not polygons:
            generation_logger.log_region_skipped(index, "masked out")
        else:
            generation_logger.log_region_complete(index, len(polygons))

        return polygons
