"""Unit tests for the Voronoi partition."""

import pytest
from shapely.geometry import MultiPolygon, Point, Polygon, box

from isomill.core.voronoi import partition


@pytest.fixture
def two_squares() -> MultiPolygon:
    """Two 1000 unit squares separated by a 100 unit gap."""
    return MultiPolygon([box(0, 0, 1000, 1000), box(1100, 0, 2100, 1000)])


class TestPartition:
    """Tests for partition."""

    def test_empty_geometry(self) -> None:
        """Test an empty geometry has no cells."""
        assert partition(MultiPolygon(), 100.0, 0.1) == []

    def test_single_region_gets_envelope(self) -> None:
        """Test a lone region owns the whole grown envelope."""
        cells = partition(MultiPolygon([box(0, 0, 10, 20)]), 5.0, 0.1)
        assert len(cells) == 1
        assert cells[0].bounds == pytest.approx((-5.0, -5.0, 15.0, 25.0))

    def test_cells_are_index_aligned(self, two_squares: MultiPolygon) -> None:
        """Test each cell covers its own region and no other."""
        cells = partition(two_squares, 5000.0, 0.1, spacing=5.0)
        assert len(cells) == 2
        for index, cell in enumerate(cells):
            assert cell.covers(two_squares.geoms[index])
            other = two_squares.geoms[1 - index]
            assert cell.intersection(other).area == pytest.approx(0.0, abs=1e-6)

    def test_bisector_between_parallel_edges(self, two_squares: MultiPolygon) -> None:
        """Test the boundary between two facing edges lies halfway."""
        left, right = partition(two_squares, 5000.0, 0.1, spacing=5.0)
        band = box(0, 0, 2100, 1000)
        assert left.intersection(band).bounds[2] == pytest.approx(1050.0, abs=1.0)
        assert right.intersection(band).bounds[0] == pytest.approx(1050.0, abs=1.0)

    def test_cells_bounded_by_envelope(self, two_squares: MultiPolygon) -> None:
        """Test cells never reach beyond the grown envelope."""
        cells = partition(two_squares, 500.0, 0.1, spacing=5.0)
        envelope = box(-500.0, -500.0, 2600.0, 1500.0)
        for cell in cells:
            assert envelope.buffer(1e-6).covers(cell)

    def test_region_with_hole(self) -> None:
        """Test a region enclosing another keeps the space around it."""
        frame = Polygon(box(0, 0, 1000, 1000).exterior, [box(200, 200, 800, 800).exterior])
        island = box(400, 400, 600, 600)
        cells = partition(MultiPolygon([frame, island]), 1000.0, 0.1, spacing=5.0)

        assert cells[0].covers(frame)
        assert cells[1].covers(island)
        assert cells[1].within(box(200, 200, 800, 800).buffer(1.0))

    def test_curved_neighbours(self) -> None:
        """Test two circles split the envelope along their bisector."""
        circles = MultiPolygon([Point(0, 0).buffer(10000.0), Point(30000, 0).buffer(10000.0)])
        left, right = partition(circles, 20000.0, 1.0, spacing=50.0)

        assert left.covers(circles.geoms[0])
        assert right.covers(circles.geoms[1])
        assert left.intersection(right).area == pytest.approx(0.0, abs=1e-3)
        assert left.area + right.area == pytest.approx(90000.0 * 60000.0, rel=1e-6)
        assert left.bounds[2] == pytest.approx(15000.0, abs=5.0)

    def test_slanted_neighbours(self) -> None:
        """Test the boundary between slanted edges follows their bisector."""
        left_region = Polygon([(0, 0), (1000, 0), (1500, 1000), (500, 1000)])
        right_region = Polygon([(1100, 0), (2100, 0), (2600, 1000), (1600, 1000)])
        left, right = partition(MultiPolygon([left_region, right_region]), 5000.0, 1.0, spacing=5.0)

        # Points halfway between the facing edges.
        for t in (0.25, 0.5, 0.75):
            x, y = 1050 + 500 * t, 1000 * t
            assert left.buffer(1.0).contains(Point(x - 2, y))
            assert right.buffer(1.0).contains(Point(x + 2, y))
        assert left.intersection(right_region).area == pytest.approx(0.0, abs=1e-6)
        assert right.intersection(left_region).area == pytest.approx(0.0, abs=1e-6)
