"""Unit tests for ring stitching."""

import pytest
from shapely.geometry import LinearRing, Polygon, box

from isomill.core.geometry import round_buffer
from isomill.core.stitching import RingStitcher


@pytest.fixture
def stitcher() -> RingStitcher:
    """Stitcher working in unscaled units."""
    return RingStitcher(scale=1.0, tolerance=0.01)


def framed_square() -> Polygon:
    """Square region with a square hole."""
    return Polygon(box(0, 0, 100, 100).exterior, [box(40, 40, 60, 60).exterior])


class TestCopyRing:
    """Tests for emitting single rings."""

    def test_copy_ring_closes_on_start(self, stitcher: RingStitcher) -> None:
        """Test a ring is walked once and closed on its entry vertex."""
        ring = LinearRing([(0, 0), (10, 0), (10, 10), (0, 10)])
        stitcher.open_path()
        stitcher.copy_ring(ring, 2)

        (toolpath,) = stitcher.toolpaths()
        assert toolpath.points == ((10, 10), (0, 10), (0, 0), (10, 0), (10, 10))
        assert stitcher.last_point == (10.0, 10.0)
        assert stitcher.rings_emitted == 1

    def test_points_scaled_to_physical_units(self) -> None:
        """Test emitted points are divided by the scale."""
        stitcher = RingStitcher(scale=1000.0, tolerance=0.1)
        stitcher.open_path()
        stitcher.copy_ring(LinearRing([(0, 0), (1000, 0), (1000, 2000)]), 0)

        (toolpath,) = stitcher.toolpaths()
        assert toolpath.points[1] == pytest.approx((1.0, 0.0))
        assert toolpath.points[2] == pytest.approx((1.0, 2.0))
        assert stitcher.last_point == (0.0, 0.0)

    def test_mirrored_points(self) -> None:
        """Test points are mirrored while last_point stays unmirrored."""
        stitcher = RingStitcher(scale=1.0, tolerance=0.01, mirror_axis=5.0)
        stitcher.open_path()
        stitcher.copy_ring(LinearRing([(1, 0), (2, 0), (2, 1)]), 0)

        (toolpath,) = stitcher.toolpaths()
        assert toolpath.points[:3] == ((9.0, 0.0), (8.0, 0.0), (8.0, 1.0))
        assert stitcher.last_point == (1.0, 0.0)


class TestStitchRegion:
    """Tests for stitching the passes of one region."""

    def test_no_passes(self, stitcher: RingStitcher) -> None:
        """Test a region without passes emits nothing."""
        stitcher.stitch_region([])
        assert stitcher.toolpaths() == []

    def test_exteriors_form_one_path(self, stitcher: RingStitcher) -> None:
        """Test growing exteriors are chained into a single path."""
        passes = [box(0, 0, 10, 10), box(-1, -1, 11, 11)]
        stitcher.stitch_region(passes)

        (toolpath,) = stitcher.toolpaths()
        assert len(toolpath) == 10
        assert stitcher.rings_emitted == 2

        # The second ring is entered at its vertex nearest to the first ring's end.
        first_end = toolpath.points[4]
        second_start = toolpath.points[5]
        assert abs(first_end[0] - second_start[0]) == 1
        assert abs(first_end[1] - second_start[1]) == 1

    def test_collapsed_exteriors_skipped(self, stitcher: RingStitcher) -> None:
        """Test identical exteriors after a collapse are not cut again."""
        cell = box(0, 0, 10, 10)
        stitcher.stitch_region([cell, cell, cell])

        (toolpath,) = stitcher.toolpaths()
        assert len(toolpath) == 5
        assert stitcher.rings_emitted == 1

    def test_nested_holes_chained(self, stitcher: RingStitcher) -> None:
        """Test shrinking holes of successive passes form one path."""
        region = framed_square()
        passes = [round_buffer(region, d, 32) for d in (2.0, 4.0)]
        stitcher.stitch_region(passes)

        toolpaths = stitcher.toolpaths()
        assert len(toolpaths) == 2
        assert stitcher.rings_emitted == 4

        hole_path = toolpaths[1]
        assert hole_path.points[0][0] == pytest.approx(42.0) or hole_path.points[0][0] == pytest.approx(58.0)
        assert all(44.0 - 1e-9 <= x <= 56.0 + 1e-9 for x, _ in hole_path.points[5:])

    def test_identical_holes_consumed(self, stitcher: RingStitcher) -> None:
        """Test a hole repeated in the next pass is not emitted twice."""
        hole = box(40, 40, 60, 60).exterior
        passes = [
            Polygon(box(0, 0, 100, 100).exterior, [hole]),
            Polygon(box(-2, -2, 102, 102).exterior, [hole]),
        ]
        stitcher.stitch_region(passes)

        toolpaths = stitcher.toolpaths()
        assert len(toolpaths) == 2
        assert len(toolpaths[1]) == 5

    def test_separate_holes_start_new_paths(self, stitcher: RingStitcher) -> None:
        """Test a hole outside the current one is not reached by a move."""
        passes = [
            Polygon(box(0, 0, 100, 100).exterior, [box(10, 10, 20, 20).exterior]),
            Polygon(box(-1, -1, 101, 101).exterior, [box(50, 50, 60, 60).exterior]),
        ]
        stitcher.stitch_region(passes)

        toolpaths = stitcher.toolpaths()
        assert len(toolpaths) == 3
        assert stitcher.rings_emitted == 4

    def test_last_point_carries_across_regions(self, stitcher: RingStitcher) -> None:
        """Test the next region's later rings are entered near the previous end."""
        stitcher.stitch_region([box(0, 0, 10, 10)])
        stitcher.stitch_region([box(20, 0, 30, 10), box(19, -1, 31, 11)])

        toolpaths = stitcher.toolpaths()
        assert len(toolpaths) == 2
        assert stitcher.last_point in {(19.0, -1.0), (19.0, 11.0), (31.0, -1.0), (31.0, 11.0)}
