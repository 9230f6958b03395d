"""
Unit tests for region construction.

Tests cover:
- Line regions keep click order
- Polygon ring closure
- close_ring idempotence
- Rectangle corner synthesis
- Minimum point counts
"""
import math
from datetime import timezone

import pytest

from aoi_insights.domain.exceptions import InsufficientPointsError, InvalidPointError
from aoi_insights.domain.models import DrawingMode, Point, RegionKind
from aoi_insights.services.domain.geometry_builder import GeometryBuilder, close_ring, corner_count


def pts(*pairs) -> list[Point]:
    return [Point(lat=lat, lon=lon) for lat, lon in pairs]


# ============================================================
# Line Tests
# ============================================================

class TestLineRegions:
    """Tests for open line regions."""

    @pytest.mark.parametrize("pairs", [
        [(0, 0), (1, 1)],
        [(10.5, -3.2), (11.0, -3.0), (11.5, -2.1), (10.5, -3.2)],
        [(-45, 170), (-44, 179.9), (-43, -179.9), (-42, -170), (-41, -160)],
    ])
    def test_line_ring_matches_input(self, pairs):
        """Line ring should be identical in order and count to the input."""
        points = pts(*pairs)

        region = GeometryBuilder().build_region(RegionKind.LINE, points)

        assert list(region.ring) == points
        assert region.kind is RegionKind.LINE
        assert region.drawing_type is DrawingMode.LINE
        assert not region.is_closed or points[0] == points[-1]

    def test_line_needs_two_points(self):
        """A single point is not a line."""
        with pytest.raises(InsufficientPointsError) as exc_info:
            GeometryBuilder().build_region(RegionKind.LINE, pts((0, 0)))

        assert exc_info.value.required == 2
        assert exc_info.value.actual == 1


# ============================================================
# Polygon Tests
# ============================================================

class TestPolygonRegions:
    """Tests for closed polygon regions."""

    @pytest.mark.parametrize("pairs", [
        [(0, 0), (0, 1), (1, 0)],
        [(0, 0), (0, 1), (1, 1), (1, 0)],
        [(34.1, 74.8), (34.2, 74.9), (34.0, 75.0), (33.9, 74.9), (33.95, 74.7)],
    ])
    def test_polygon_ring_is_closed(self, pairs):
        """Ring should have one extra point equal to the first."""
        points = pts(*pairs)

        region = GeometryBuilder().build_region(RegionKind.POLYGON, points)

        assert len(region.ring) == len(points) + 1
        assert region.ring[-1] == region.ring[0]
        assert list(region.ring[:-1]) == points
        assert region.is_closed

    def test_polygon_needs_three_points(self):
        """Two points cannot form a polygon."""
        with pytest.raises(InsufficientPointsError):
            GeometryBuilder().build_region(RegionKind.POLYGON, pts((0, 0), (0, 1)))

    def test_closed_input_counts_distinct_corners(self):
        """A pre-closed ring of two corners is still below the minimum."""
        with pytest.raises(InsufficientPointsError) as exc_info:
            GeometryBuilder().build_region(RegionKind.POLYGON, pts((0, 0), (0, 1), (0, 0)))

        assert exc_info.value.actual == 2

    def test_repeated_interior_corner_counts_once(self):
        """[A, A, B] has only two distinct corners."""
        with pytest.raises(InsufficientPointsError) as exc_info:
            GeometryBuilder().build_region(RegionKind.POLYGON, pts((0, 0), (0, 0), (1, 1)))

        assert exc_info.value.actual == 2

    def test_corner_count_matches_build_region(self):
        assert corner_count(RegionKind.POLYGON, pts((0, 0), (0, 1), (0, 0))) == 2
        assert corner_count(RegionKind.POLYGON, pts((0, 0), (0, 1), (1, 0), (0, 0))) == 3
        assert corner_count(RegionKind.LINE, pts((0, 0), (0, 0))) == 2

    def test_already_closed_input_not_duplicated(self):
        """Closing point should not be appended twice."""
        points = pts((0, 0), (0, 1), (1, 0), (0, 0))

        region = GeometryBuilder().build_region(RegionKind.POLYGON, points)

        assert len(region.ring) == 4

    def test_region_metadata(self):
        """Region should carry a UTC timestamp, a name and an id."""
        region = GeometryBuilder().build_region(
            RegionKind.POLYGON, pts((0, 0), (0, 1), (1, 0)), name="orchard"
        )

        assert region.created_at.tzinfo is timezone.utc
        assert region.name == "orchard"
        assert region.id

    def test_region_is_immutable(self):
        region = GeometryBuilder().build_region(RegionKind.LINE, pts((0, 0), (1, 1)))

        with pytest.raises(Exception):
            region.name = "renamed"


# ============================================================
# close_ring Tests
# ============================================================

class TestCloseRing:
    """Tests for ring closure."""

    def test_close_ring_appends_first_point(self):
        ring = close_ring(pts((0, 0), (0, 1), (1, 0)))

        assert ring == pts((0, 0), (0, 1), (1, 0), (0, 0))

    def test_close_ring_idempotent(self):
        """Closing a closed ring returns the same ring."""
        once = close_ring(pts((0, 0), (0, 1), (1, 0)))
        twice = close_ring(once)

        assert twice == once

    def test_close_ring_available_on_builder(self):
        ring = GeometryBuilder.close_ring(pts((5, 5), (6, 6), (7, 5)))

        assert ring[0] == ring[-1]

    def test_close_ring_empty(self):
        assert close_ring([]) == []


# ============================================================
# Rectangle Tests
# ============================================================

class TestRectangle:
    """Tests for two-corner rectangles."""

    def test_rectangle_corner_order(self):
        """Corners (10,20) and (12,22) give the documented ring."""
        region = GeometryBuilder().build_rectangle(Point(lat=10, lon=20), Point(lat=12, lon=22))

        assert [p.as_tuple() for p in region.ring] == [
            (10, 20), (10, 22), (12, 22), (12, 20), (10, 20),
        ]

    def test_rectangle_is_polygon(self):
        region = GeometryBuilder().build_rectangle(Point(lat=1, lon=1), Point(lat=-1, lon=-1))

        assert region.kind is RegionKind.POLYGON
        assert region.drawing_type is DrawingMode.RECTANGLE
        assert region.is_closed

    def test_collapsed_rectangle_rejected(self):
        """Corners on the same longitude span no area."""
        with pytest.raises(InsufficientPointsError):
            GeometryBuilder().build_rectangle(Point(lat=1, lon=5), Point(lat=3, lon=5))


# ============================================================
# Accumulation Tests
# ============================================================

class TestAccumulation:
    """Tests for point accumulation."""

    def test_add_point_and_reset(self):
        builder = GeometryBuilder()
        builder.add_point(Point(lat=1, lon=2))
        builder.add_point(Point(lat=3, lon=4))

        assert builder.points == tuple(pts((1, 2), (3, 4)))

        builder.reset()

        assert builder.points == ()

    def test_build_uses_accumulated_points(self):
        builder = GeometryBuilder()
        for p in pts((0, 0), (2, 2)):
            builder.add_point(p)

        region = builder.build_region(RegionKind.LINE)

        assert len(region.ring) == 2

    def test_add_point_rejects_non_finite(self):
        """Points that bypassed validation are still rejected."""
        bad = Point.model_construct(lat=math.nan, lon=0.0)

        with pytest.raises(InvalidPointError):
            GeometryBuilder().add_point(bad)

    def test_point_model_rejects_infinity(self):
        with pytest.raises(ValueError):
            Point(lat=math.inf, lon=0.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
