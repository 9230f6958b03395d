"""
Domain service: ordered collection of finished regions.
"""
import logging
from typing import List, Optional, Tuple

from aoi_insights.domain.models import RegionOfInterest
from aoi_insights.services.domain.drawing_session import DrawingSession
from aoi_insights.services.domain.drawing_surface import DrawingSurface
from aoi_insights.utils.geojson import region_to_feature

logger = logging.getLogger(__name__)


class RegionStore:
    """
    Regions in insertion order, most recent last.

    Regions are never removed one at a time; clear_all() drops them all.
    ``generation`` changes on every add and clear so an in-flight fetch
    can tell whether the region it targeted is still current.
    """

    def __init__(
        self,
        session: Optional[DrawingSession] = None,
        surface: Optional[DrawingSurface] = None,
    ):
        self._regions: List[RegionOfInterest] = []
        self._session = session
        self._surface = surface
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        return len(self._regions)

    def add(self, region: RegionOfInterest) -> None:
        """Append a finished region and draw it."""
        self._regions.append(region)
        self._generation += 1
        if self._surface is not None:
            self._surface.add_shape(region.id, region_to_feature(region))
        logger.debug(f"Stored region {region.id} ({len(self._regions)} total)")

    def clear_all(self) -> None:
        """Remove every region and cancel any drawing in progress."""
        if self._session is not None:
            self._session.cancel()
        if self._surface is not None:
            for region in self._regions:
                self._surface.remove_shape(region.id)
        cleared = len(self._regions)
        self._regions = []
        self._generation += 1
        logger.info(f"Cleared {cleared} regions")

    def latest(self) -> Optional[RegionOfInterest]:
        """Return the most recently added region, or None when empty."""
        return self._regions[-1] if self._regions else None

    def all(self) -> Tuple[RegionOfInterest, ...]:
        """Return every region, oldest first."""
        return tuple(self._regions)
