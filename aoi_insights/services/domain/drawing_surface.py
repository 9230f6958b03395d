"""
Drawing surface capability.

The drawing engine never touches a map widget directly. It is handed an
object implementing DrawingSurface and tells it which shapes to show,
as GeoJSON features keyed by a shape id.
"""
import abc
from typing import Any, Dict


class DrawingSurface(abc.ABC):
    """Abstract rendering target for drawn and in-progress shapes."""

    @abc.abstractmethod
    def add_shape(self, shape_id: str, feature: Dict[str, Any]) -> None:
        """Show a shape, replacing any shape already shown under the same id."""

    @abc.abstractmethod
    def remove_shape(self, shape_id: str) -> None:
        """Remove a shape. Removing an unknown id is a no-op."""

    @property
    def shapes(self) -> Dict[str, Dict[str, Any]]:
        """Shapes currently shown, by id. Surfaces that cannot report them return {}."""
        return {}


class InMemoryDrawingSurface(DrawingSurface):
    """
    Surface that keeps shapes in a dict.

    Used by the HTTP service, where the browser renders whatever
    ``GET /map`` reports.
    """

    def __init__(self):
        self._shapes: Dict[str, Dict[str, Any]] = {}

    def add_shape(self, shape_id: str, feature: Dict[str, Any]) -> None:
        self._shapes[shape_id] = feature

    def remove_shape(self, shape_id: str) -> None:
        self._shapes.pop(shape_id, None)

    @property
    def shapes(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._shapes)
