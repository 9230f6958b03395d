"""
Domain service: point accumulation and region construction.

Turns raw map clicks into normalized, immutable RegionOfInterest records:
- Line: open path, kept exactly as clicked
- Polygon: ring closed by repeating the first point
- Rectangle: two opposite corners expanded to an axis-aligned closed ring
"""
import logging
import math
from typing import List, Optional, Sequence, Tuple

from aoi_insights.domain.exceptions import InsufficientPointsError, InvalidPointError
from aoi_insights.domain.models import DrawingMode, Point, RegionKind, RegionOfInterest

logger = logging.getLogger(__name__)


MIN_POINTS = {
    RegionKind.LINE: 2,
    RegionKind.POLYGON: 3,
}
"""Minimum distinct points per region kind, counted before ring closure."""

RECTANGLE_CLICKS = 2


def close_ring(points: Sequence[Point]) -> List[Point]:
    """
    Close a polygon ring.

    Appends a copy of the first point when the first and last points are
    not coordinate-equal. Applying it to an already closed ring returns
    the same ring.

    Args:
        points: Ordered ring vertices

    Returns:
        New list of points whose last point equals the first
    """
    ring = list(points)
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0].model_copy())
    return ring


def corner_count(kind: RegionKind, points: Sequence[Point]) -> int:
    """
    Count the points that count towards a region's minimum.

    Polygon corners are counted once each, so a closing duplicate or a
    repeated click on the same corner adds nothing. Line points are
    counted as clicked.
    """
    if kind is RegionKind.POLYGON:
        return len(dict.fromkeys(p.as_tuple() for p in points))
    return len(points)


def rectangle_corners(corner_a: Point, corner_b: Point) -> List[Point]:
    """Four corners of the axis-aligned rectangle spanned by two opposite corners."""
    return [
        corner_a,
        Point(lat=corner_a.lat, lon=corner_b.lon),
        corner_b,
        Point(lat=corner_b.lat, lon=corner_a.lon),
    ]


class GeometryBuilder:
    """
    Accumulates the points of the current drawing and builds regions.

    The builder holds no mode of its own; DrawingSession decides when
    points are added, which kind of region to build and when to reset.
    """

    close_ring = staticmethod(close_ring)

    def __init__(self):
        self._points: List[Point] = []

    @property
    def points(self) -> Tuple[Point, ...]:
        """Points accumulated so far, in click order."""
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def add_point(self, point: Point) -> None:
        """
        Append a point to the active accumulation.

        Args:
            point: Clicked coordinate

        Raises:
            InvalidPointError: If latitude or longitude is not finite
        """
        if not (math.isfinite(point.lat) and math.isfinite(point.lon)):
            raise InvalidPointError(f"Point must be finite, got ({point.lat}, {point.lon})")
        self._points.append(point)

    def reset(self) -> None:
        """Discard accumulated points."""
        self._points = []

    def build_region(
        self,
        kind: RegionKind,
        points: Optional[Sequence[Point]] = None,
        drawing_type: Optional[DrawingMode] = None,
        name: Optional[str] = None,
    ) -> RegionOfInterest:
        """
        Build an immutable region from a finished set of points.

        Args:
            kind: Region kind to build
            points: Points to use; defaults to the accumulated points
            drawing_type: Mode the shape was drawn with, defaults to the kind
            name: Optional display name

        Returns:
            RegionOfInterest stamped with the current UTC time

        Raises:
            InsufficientPointsError: If there are fewer points than the kind needs
        """
        pts = list(self._points if points is None else points)
        required = MIN_POINTS[kind]
        actual = corner_count(kind, pts)
        if actual < required:
            raise InsufficientPointsError(kind.value, required, actual)

        ring = close_ring(pts) if kind is RegionKind.POLYGON else pts
        region = RegionOfInterest(
            kind=kind,
            drawing_type=drawing_type or DrawingMode(kind.value),
            ring=tuple(ring),
            name=name,
        )
        logger.debug(f"Built {region.drawing_type.value} region {region.id} with {len(ring)} ring points")
        return region

    def build_rectangle(
        self,
        corner_a: Point,
        corner_b: Point,
        name: Optional[str] = None,
    ) -> RegionOfInterest:
        """
        Build an axis-aligned rectangle from two opposite corners.

        The synthesized ring is: first corner, (first lat, second lon),
        second corner, (second lat, first lon), first corner again.

        Args:
            corner_a: First clicked corner
            corner_b: Opposite corner

        Returns:
            Closed polygon region with drawing type RECTANGLE

        Raises:
            InsufficientPointsError: If the corners share a latitude or a longitude
        """
        return self.build_region(
            RegionKind.POLYGON,
            rectangle_corners(corner_a, corner_b),
            drawing_type=DrawingMode.RECTANGLE,
            name=name,
        )
