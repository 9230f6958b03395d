"""
Application service: the interactive map workspace.

Wires the drawing session, the region store, the click dispatcher and the
fetch orchestrator together. All mutation happens on the event loop in
handlers that run to completion; the provider call is the only await,
and its result is applied only if the target it was issued for is still
current when it resolves.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from aoi_insights.config import settings
from aoi_insights.domain.models import (
    DateRange,
    DrawingMode,
    EnvironmentalSample,
    FetchMode,
    Point,
    RegionOfInterest,
)
from aoi_insights.infrastructure.insights_client import get_api_client
from aoi_insights.services.application.click_dispatcher import ClickDispatcher, MapCursor
from aoi_insights.services.application.fetch_orchestrator import DataFetchOrchestrator
from aoi_insights.services.application.live_refresh import LiveRefresher
from aoi_insights.services.domain.drawing_session import DrawingOutcome, DrawingSession
from aoi_insights.services.domain.drawing_surface import DrawingSurface, InMemoryDrawingSurface
from aoi_insights.services.domain.geometry_builder import GeometryBuilder
from aoi_insights.services.domain.region_store import RegionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    """Result of a workspace fetch."""
    sample: EnvironmentalSample
    mode: FetchMode
    applied: bool
    region_id: Optional[str] = None

    @property
    def stale(self) -> bool:
        return not self.applied


class MapWorkspace:
    """
    State behind one interactive map.

    Finished regions flow session -> store, and mark the boundary path as
    ready. Point fetches use the ambient marker position.
    """

    def __init__(
        self,
        orchestrator: DataFetchOrchestrator,
        surface: Optional[DrawingSurface] = None,
        center: Optional[Point] = None,
        debounce_seconds: Optional[float] = None,
    ):
        self.orchestrator = orchestrator
        self.surface = surface or InMemoryDrawingSurface()
        self.builder = GeometryBuilder()
        self.session = DrawingSession(self.builder, self.surface)
        self.store = RegionStore(self.session, self.surface)
        self.cursor = MapCursor(
            center or Point(lat=settings.default_latitude, lon=settings.default_longitude)
        )
        self.dispatcher = ClickDispatcher(self.session, self.cursor)
        self.live = LiveRefresher(
            self.refresh,
            settings.live_debounce_seconds if debounce_seconds is None else debounce_seconds,
        )

        self.fetch_mode = FetchMode.POINT
        self.layers: Tuple[str, ...] = ()
        self.date_range = DateRange.ending_today(settings.default_date_range_months)
        self.boundary_ready = False
        self.latest_sample: Optional[EnvironmentalSample] = None

        self._issued = 0
        self._applied = 0

        self.session.on_region(self._on_region)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def select_mode(self, mode: DrawingMode) -> DrawingOutcome:
        return self.session.select_mode(mode)

    def click(self, point: Point) -> Tuple[str, Optional[DrawingOutcome]]:
        return self.dispatcher.handle_click(point)

    def finish(self, name: Optional[str] = None) -> DrawingOutcome:
        return self.session.finish(name=name)

    def cancel(self) -> DrawingOutcome:
        return self.session.cancel()

    def clear_regions(self) -> None:
        """Drop every region, cancel drawing and any pending live refresh."""
        self.store.clear_all()
        self.boundary_ready = False
        self.live.cancel()

    def _on_region(self, region: RegionOfInterest) -> None:
        self.store.add(region)
        self.boundary_ready = True
        if self.fetch_mode is FetchMode.BOUNDARY:
            self.live.trigger()

    # ------------------------------------------------------------------
    # Map and query settings
    # ------------------------------------------------------------------

    def move_center(self, point: Point) -> bool:
        """
        Record a new map center (pan end or geolocation).

        Returns:
            True if a live refresh was scheduled
        """
        self.cursor.move_to(point)
        return self.live.trigger()

    def set_fetch_mode(self, mode: FetchMode) -> None:
        self.fetch_mode = mode

    def set_query(
        self,
        layers: Optional[Iterable[str]] = None,
        date_range: Optional[DateRange] = None,
    ) -> None:
        if layers is not None:
            self.layers = tuple(dict.fromkeys(layers))
        if date_range is not None:
            self.date_range = date_range

    def set_live(self, enabled: bool) -> None:
        self.live.enabled = enabled
        if not enabled:
            self.live.cancel()

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def refresh(self) -> FetchOutcome:
        """Fetch with the current mode and query settings."""
        return await self.fetch()

    async def fetch(
        self,
        mode: Optional[FetchMode] = None,
        layers: Optional[Iterable[str]] = None,
        date_range: Optional[DateRange] = None,
    ) -> FetchOutcome:
        """
        Fetch environmental data for the marker or the latest region.

        Boundary fetches always target the most recently finished region.
        The sample becomes ``latest_sample`` only if, once the provider
        answers, no newer fetch has been applied and the target is
        unchanged (same region generation, or same marker position).

        Raises:
            NoRegionError: Boundary mode with no region drawn
            DataUnavailableError: Every provider attempt failed
        """
        mode = mode or self.fetch_mode
        layers = tuple(self.layers if layers is None else layers)
        date_range = date_range or self.date_range

        self._issued += 1
        ticket = self._issued

        if mode is FetchMode.BOUNDARY:
            region = self.store.latest()
            generation = self.store.generation
            sample = await self.orchestrator.fetch(
                mode,
                roi=region,
                layers=layers,
                date_range=date_range,
                center=self.cursor.position,
            )
            still_current = self.store.generation == generation
            region_id = region.id
        else:
            coord = self.cursor.position
            sample = await self.orchestrator.fetch(
                mode,
                coord=coord,
                layers=layers,
                date_range=date_range,
            )
            still_current = self.cursor.position == coord
            region_id = None

        applied = still_current and ticket > self._applied
        if applied:
            self._applied = ticket
            self.latest_sample = sample
        else:
            logger.info(f"Discarding stale {mode.value} result (fetch #{ticket})")

        return FetchOutcome(sample=sample, mode=mode, applied=applied, region_id=region_id)


# Singleton instance
_workspace: Optional[MapWorkspace] = None


def get_workspace() -> MapWorkspace:
    """
    Get or create the singleton workspace instance.

    Returns:
        MapWorkspace instance
    """
    global _workspace
    if _workspace is None:
        _workspace = MapWorkspace(DataFetchOrchestrator(get_api_client()))
    return _workspace
