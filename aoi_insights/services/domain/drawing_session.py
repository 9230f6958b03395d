"""
Domain service: drawing state machine.

States are Idle (mode NONE) and Collecting(mode). Map clicks are
accumulated through a GeometryBuilder until the shape is finished:
- Line / Polygon finish on an explicit finish() once the minimum
  point count is reached
- Rectangle finishes by itself on the second click

Every input returns a DrawingOutcome instead of raising, so a finish()
below the minimum is distinguishable from a successful one without
being an error.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from aoi_insights.domain.models import DrawingMode, Point, RegionKind, RegionOfInterest
from aoi_insights.services.domain.drawing_surface import DrawingSurface
from aoi_insights.services.domain.geometry_builder import (
    MIN_POINTS,
    RECTANGLE_CLICKS,
    GeometryBuilder,
    corner_count,
    rectangle_corners,
)
from aoi_insights.utils.geojson import sketch_to_feature

logger = logging.getLogger(__name__)


SKETCH_SHAPE_ID = "sketch"

RegionListener = Callable[[RegionOfInterest], None]


class OutcomeStatus:
    """Status values of a DrawingOutcome."""
    COLLECTING = "collecting"
    EMITTED = "emitted"
    BELOW_MINIMUM = "below_minimum"
    CANCELLED = "cancelled"
    IGNORED = "ignored"
    IDLE = "idle"


@dataclass(frozen=True)
class DrawingOutcome:
    """Result of feeding one input to the session."""
    status: str
    mode: DrawingMode
    point_count: int
    region: Optional[RegionOfInterest] = None

    @property
    def emitted(self) -> bool:
        return self.region is not None


_REGION_KIND = {
    DrawingMode.LINE: RegionKind.LINE,
    DrawingMode.POLYGON: RegionKind.POLYGON,
    DrawingMode.RECTANGLE: RegionKind.POLYGON,
}


class DrawingSession:
    """
    Single active drawing session.

    Invariant: points are only held while mode is not NONE. The session
    is back at (NONE, []) after every finish, cancel or mode switch.

    Finished regions are handed to listeners registered with on_region(),
    in registration order, before the session resets.
    """

    def __init__(
        self,
        builder: Optional[GeometryBuilder] = None,
        surface: Optional[DrawingSurface] = None,
    ):
        self._builder = builder or GeometryBuilder()
        self._surface = surface
        self._mode = DrawingMode.NONE
        self._listeners: List[RegionListener] = []

    @property
    def mode(self) -> DrawingMode:
        return self._mode

    @property
    def is_active(self) -> bool:
        return self._mode is not DrawingMode.NONE

    @property
    def points(self):
        return self._builder.points

    @property
    def can_finish(self) -> bool:
        """Whether finish() would emit a region right now."""
        if self._mode not in (DrawingMode.LINE, DrawingMode.POLYGON):
            return False
        kind = _REGION_KIND[self._mode]
        return corner_count(kind, self._builder.points) >= MIN_POINTS[kind]

    def on_region(self, listener: RegionListener) -> None:
        """Register a callback for every finished region."""
        self._listeners.append(listener)

    def select_mode(self, mode: DrawingMode) -> DrawingOutcome:
        """
        Select a drawing mode.

        Selecting the active mode again toggles it off, which cancels the
        drawing. Selecting another mode discards the points collected so far.

        Args:
            mode: Mode to activate; NONE cancels

        Returns:
            DrawingOutcome describing the new state
        """
        if mode is DrawingMode.NONE or mode is self._mode:
            return self.cancel()

        if self.is_active:
            logger.debug(f"Switching drawing mode {self._mode.value} -> {mode.value}, "
                         f"discarding {len(self._builder)} points")
        self._reset()
        self._mode = mode
        return self._outcome(OutcomeStatus.COLLECTING)

    def click(self, point: Point) -> DrawingOutcome:
        """
        Record a map click.

        Args:
            point: Clicked coordinate

        Returns:
            COLLECTING while points accumulate, EMITTED when the second
            rectangle corner completes the shape, BELOW_MINIMUM when that
            corner would collapse the rectangle, IGNORED while idle
        """
        if not self.is_active:
            return self._outcome(OutcomeStatus.IGNORED)

        if self._mode is DrawingMode.RECTANGLE and len(self._builder) == RECTANGLE_CLICKS - 1:
            corners = rectangle_corners(self._builder.points[0], point)
            if corner_count(RegionKind.POLYGON, corners) < MIN_POINTS[RegionKind.POLYGON]:
                logger.info("Rectangle corner ignored: it shares a latitude or longitude with the first corner")
                return self._outcome(OutcomeStatus.BELOW_MINIMUM)

        self._builder.add_point(point)
        logger.debug(f"{self._mode.value} point {len(self._builder)}: ({point.lat:.6f}, {point.lon:.6f})")

        if self._mode is DrawingMode.RECTANGLE and len(self._builder) >= RECTANGLE_CLICKS:
            first, second = self._builder.points[:RECTANGLE_CLICKS]
            return self._emit(self._builder.build_rectangle(first, second))

        self._show_sketch()
        return self._outcome(OutcomeStatus.COLLECTING)

    def finish(self, name: Optional[str] = None) -> DrawingOutcome:
        """
        Finish a line or polygon.

        Below the minimum point count nothing is emitted and the session
        keeps collecting.

        Args:
            name: Optional display name for the region

        Returns:
            EMITTED with the region, BELOW_MINIMUM, or IGNORED when there is
            nothing to finish (idle, or rectangle which finishes on its own)
        """
        if self._mode not in (DrawingMode.LINE, DrawingMode.POLYGON):
            return self._outcome(OutcomeStatus.IGNORED)

        if not self.can_finish:
            kind = _REGION_KIND[self._mode]
            logger.info(f"Finish ignored: {self._mode.value} has "
                        f"{corner_count(kind, self._builder.points)} of {MIN_POINTS[kind]} required points")
            return self._outcome(OutcomeStatus.BELOW_MINIMUM)

        region = self._builder.build_region(
            _REGION_KIND[self._mode],
            drawing_type=self._mode,
            name=name,
        )
        return self._emit(region)

    def cancel(self) -> DrawingOutcome:
        """Discard the current drawing and return to idle."""
        if not self.is_active:
            return self._outcome(OutcomeStatus.IDLE)
        logger.debug(f"Cancelled {self._mode.value} drawing with {len(self._builder)} points")
        self._reset()
        return self._outcome(OutcomeStatus.CANCELLED)

    def _emit(self, region: RegionOfInterest) -> DrawingOutcome:
        mode = self._mode
        try:
            for listener in self._listeners:
                listener(region)
        finally:
            self._reset()
        logger.info(f"Finished {mode.value} region {region.id} ({len(region.ring)} ring points)")
        return DrawingOutcome(
            status=OutcomeStatus.EMITTED,
            mode=DrawingMode.NONE,
            point_count=0,
            region=region,
        )

    def _show_sketch(self) -> None:
        if self._surface is not None:
            self._surface.add_shape(
                SKETCH_SHAPE_ID,
                sketch_to_feature(self._builder.points, self._mode.value),
            )

    def _reset(self) -> None:
        self._builder.reset()
        self._mode = DrawingMode.NONE
        if self._surface is not None:
            self._surface.remove_shape(SKETCH_SHAPE_ID)

    def _outcome(self, status: str) -> DrawingOutcome:
        return DrawingOutcome(status=status, mode=self._mode, point_count=len(self._builder))
