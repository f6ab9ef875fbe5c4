"""Unit tests for outline grouping and filling."""

import pytest
from shapely.geometry import MultiPolygon, Polygon, box

from isomill.core.outline import RingGroup, fill_groups, group_rings


def frame(outer: float, inner: float, center: float = 50.0) -> Polygon:
    """Square frame drawn around center."""
    return Polygon(
        box(center - outer, center - outer, center + outer, center + outer).exterior,
        [box(center - inner, center - inner, center + inner, center + inner).exterior],
    )


class TestGroupRings:
    """Tests for group_rings."""

    def test_single_ring(self) -> None:
        """Test a lone ring forms its own group."""
        assert group_rings([box(0, 0, 1, 1).exterior]) == [RingGroup(top=0)]

    def test_direct_containment_only(self) -> None:
        """Test deeper nested rings start a group of their own."""
        rings = [
            box(20, 20, 80, 80).exterior,
            box(0, 0, 100, 100).exterior,
            box(10, 10, 90, 90).exterior,
        ]
        groups = group_rings(rings)
        assert groups == [RingGroup(top=1, members=[2]), RingGroup(top=0)]

    def test_siblings_share_group(self) -> None:
        """Test side by side rings inside one top are both members."""
        rings = [
            box(0, 0, 100, 100).exterior,
            box(10, 10, 20, 20).exterior,
            box(50, 50, 60, 60).exterior,
        ]
        assert group_rings(rings) == [RingGroup(top=0, members=[1, 2])]

    def test_disjoint_rings(self) -> None:
        """Test separate rings form separate groups, largest first."""
        rings = [box(0, 0, 1, 1).exterior, box(5, 5, 8, 8).exterior]
        assert [group.top for group in group_rings(rings)] == [1, 0]


class TestFillGroups:
    """Tests for fill_groups."""

    def test_frame_becomes_solid(self) -> None:
        """Test a drawn frame fills to its outer boundary."""
        (filled,) = fill_groups(MultiPolygon([frame(50, 49)]))
        assert len(filled.interiors) == 0
        assert filled.area == pytest.approx(100.0 * 100.0)

    def test_nested_frame_becomes_hole(self) -> None:
        """Test a frame inside the board becomes a cutout via its inner ring."""
        (filled,) = fill_groups(MultiPolygon([frame(50, 49), frame(10, 9)]))
        assert len(filled.interiors) == 1
        assert Polygon(filled.interiors[0]).bounds == pytest.approx((41.0, 41.0, 59.0, 59.0))

    def test_solid_member_becomes_hole(self) -> None:
        """Test a nested region without holes is cut out by its exterior."""
        (filled,) = fill_groups(MultiPolygon([frame(50, 49), box(45, 45, 55, 55)]))
        assert Polygon(filled.interiors[0]).area == pytest.approx(100.0)
