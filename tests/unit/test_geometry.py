"""Unit tests for the geometry helpers."""

import pytest
from shapely.geometry import GeometryCollection, LinearRing, LineString, MultiPolygon, Point, Polygon, box

from isomill.core.geometry import (
    as_multipolygon,
    closest_vertex_index,
    largest_polygon,
    mirror_x,
    polygons_of,
    remove_duplicate_points,
    ring_area,
    ring_covers,
    rings_equal,
    round_buffer,
    segment_within_ring,
)


class TestRoundBuffer:
    """Tests for round_buffer."""

    def test_grow_square(self) -> None:
        """Test growing a square extends its bounds by the distance."""
        grown = round_buffer(box(0, 0, 10, 10), 2.0, 32)
        assert grown.bounds == pytest.approx((-2.0, -2.0, 12.0, 12.0))

    def test_shrink_square(self) -> None:
        """Test a negative distance shrinks with sharp corners."""
        shrunk = round_buffer(box(0, 0, 10, 10), -2.0, 32)
        assert shrunk.area == pytest.approx(36.0)

    def test_shrink_to_nothing(self) -> None:
        """Test shrinking past the half width yields an empty geometry."""
        assert round_buffer(box(0, 0, 10, 10), -6.0, 32).is_empty

    def test_resolution(self) -> None:
        """Test the circle resolution controls the vertex count."""
        coarse = round_buffer(Point(0, 0), 1.0, 8)
        fine = round_buffer(Point(0, 0), 1.0, 64)
        assert len(coarse.exterior.coords) < len(fine.exterior.coords)


class TestPolygonExtraction:
    """Tests for polygons_of, as_multipolygon and largest_polygon."""

    def test_polygons_of_mixed_collection(self) -> None:
        """Test that only areal parts are kept."""
        collection = GeometryCollection([box(0, 0, 1, 1), LineString([(0, 0), (5, 5)]), Point(3, 3)])
        assert len(polygons_of(collection)) == 1

    def test_polygons_of_empty(self) -> None:
        """Test an empty geometry has no polygons."""
        assert polygons_of(Polygon()) == []

    def test_as_multipolygon_from_polygon(self) -> None:
        """Test wrapping a single polygon."""
        result = as_multipolygon(box(0, 0, 1, 1))
        assert isinstance(result, MultiPolygon)
        assert len(result.geoms) == 1

    def test_largest_polygon(self) -> None:
        """Test picking the largest part."""
        geometry = MultiPolygon([box(0, 0, 1, 1), box(5, 5, 8, 8)])
        assert largest_polygon(geometry).area == pytest.approx(9.0)

    def test_largest_polygon_none(self) -> None:
        """Test a geometry without area yields None."""
        assert largest_polygon(LineString([(0, 0), (1, 1)])) is None

    def test_remove_duplicate_points(self) -> None:
        """Test consecutive repeated vertices are dropped."""
        polygon = Polygon([(0, 0), (10, 0), (10, 0), (10, 10), (0, 10)])
        cleaned = remove_duplicate_points(MultiPolygon([polygon]))
        assert len(cleaned.geoms[0].exterior.coords) == 5


class TestRingPredicates:
    """Tests for ring comparison and containment."""

    @pytest.fixture
    def ring(self) -> LinearRing:
        """Create a square ring."""
        return LinearRing([(0, 0), (10, 0), (10, 10), (0, 10)])

    def test_ring_area(self, ring: LinearRing) -> None:
        """Test unsigned area regardless of orientation."""
        assert ring_area(ring) == pytest.approx(100.0)
        assert ring_area(LinearRing(list(ring.coords)[::-1])) == pytest.approx(100.0)

    def test_rings_equal_different_start(self, ring: LinearRing) -> None:
        """Test rings starting at another vertex compare equal."""
        rotated = LinearRing([(10, 10), (0, 10), (0, 0), (10, 0)])
        assert rings_equal(ring, rotated, 0.01)

    def test_rings_equal_reversed(self, ring: LinearRing) -> None:
        """Test rings with opposite orientation compare equal."""
        assert rings_equal(ring, LinearRing(list(ring.coords)[::-1]), 0.01)

    def test_rings_equal_within_tolerance(self, ring: LinearRing) -> None:
        """Test small perturbations stay within tolerance."""
        moved = LinearRing([(0, 0), (10.005, 0), (10, 10), (0, 10)])
        assert rings_equal(ring, moved, 0.01)
        assert not rings_equal(ring, moved, 0.001)

    def test_rings_not_equal(self, ring: LinearRing) -> None:
        """Test distinct rings differ."""
        assert not rings_equal(ring, LinearRing([(0, 0), (12, 0), (12, 12), (0, 12)]), 0.01)

    def test_ring_covers(self, ring: LinearRing) -> None:
        """Test area containment of rings."""
        inner = LinearRing([(2, 2), (8, 2), (8, 8), (2, 8)])
        assert ring_covers(ring, inner)
        assert not ring_covers(inner, ring)

    def test_segment_within_ring(self, ring: LinearRing) -> None:
        """Test straight moves inside and across the ring."""
        assert segment_within_ring(ring, (0, 0), (5, 5))
        assert not segment_within_ring(ring, (5, 5), (15, 5))

    def test_segment_within_concave_ring(self) -> None:
        """Test a move cutting across a notch leaves the ring."""
        notched = LinearRing([(0, 0), (10, 0), (10, 10), (6, 10), (6, 2), (4, 2), (4, 10), (0, 10)])
        assert not segment_within_ring(notched, (2, 8), (8, 8))


class TestClosestVertex:
    """Tests for closest_vertex_index."""

    def test_closest_vertex(self) -> None:
        """Test finding the nearest vertex."""
        ring = LinearRing([(0, 0), (10, 0), (10, 10), (0, 10)])
        assert closest_vertex_index(ring, (9, 11)) == 2

    def test_tie_resolves_to_lowest_index(self) -> None:
        """Test equidistant vertices resolve to the first one."""
        ring = LinearRing([(0, 0), (10, 0), (10, 10), (0, 10)])
        assert closest_vertex_index(ring, (5, 5)) == 0

    def test_closing_vertex_ignored(self) -> None:
        """Test the repeated closing vertex is never returned."""
        ring = LinearRing([(0, 0), (10, 0), (10, 10), (0, 10)])
        assert closest_vertex_index(ring, (0, 0)) == 0


class TestMirror:
    """Tests for mirror_x."""

    def test_mirror(self) -> None:
        """Test mirroring across a vertical axis."""
        assert mirror_x((3.0, 7.0), 5.0) == (7.0, 7.0)

    def test_mirror_involution(self) -> None:
        """Test mirroring twice restores the point."""
        assert mirror_x(mirror_x((1.5, -2.0), 4.0), 4.0) == (1.5, -2.0)
