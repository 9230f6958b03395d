"""
Application service: route map clicks to exactly one consumer.
"""
import logging
from typing import Optional

from aoi_insights.domain.models import Point
from aoi_insights.services.domain.drawing_session import DrawingOutcome, DrawingSession

logger = logging.getLogger(__name__)


class MapCursor:
    """Ambient marker position used by point-mode fetches and as the map center."""

    def __init__(self, position: Point):
        self._position = position

    @property
    def position(self) -> Point:
        return self._position

    def move_to(self, point: Point) -> None:
        self._position = point


class ClickDispatcher:
    """
    Single map-click handler.

    The dispatcher reads the drawing mode from the session it owns at the
    moment the click arrives, so there is no separate copy of the mode to
    keep in sync. Active drawing consumes the click; otherwise the click
    moves the ambient marker.
    """

    SESSION = "session"
    CURSOR = "cursor"

    def __init__(self, session: DrawingSession, cursor: MapCursor):
        self.session = session
        self.cursor = cursor

    def handle_click(self, point: Point) -> tuple[str, Optional[DrawingOutcome]]:
        """
        Route one click.

        Args:
            point: Clicked coordinate

        Returns:
            Tuple of (consumer, outcome); outcome is None when the cursor
            took the click
        """
        if self.session.is_active:
            return self.SESSION, self.session.click(point)

        self.cursor.move_to(point)
        logger.debug(f"Marker moved to ({point.lat:.6f}, {point.lon:.6f})")
        return self.CURSOR, None
