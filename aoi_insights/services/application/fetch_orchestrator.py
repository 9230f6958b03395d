"""
Application service: environmental data fetch orchestration.

Decides what to request (point or boundary), runs an ordered list of
fetch strategies until one succeeds, and normalizes the answer. No
transport error leaves this module: callers get either a sample or one
of the domain errors.
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

import httpx

from aoi_insights.config import settings
from aoi_insights.domain.exceptions import (
    DataUnavailableError,
    InvalidPointError,
    NoRegionError,
)
from aoi_insights.domain.models import (
    DateRange,
    EnvironmentalSample,
    FetchMode,
    Point,
    RegionOfInterest,
)
from aoi_insights.infrastructure.insights_client import ExternalAPIError, InsightsAPIClient
from aoi_insights.services.domain.sample_normalizer import (
    FALLBACK_REDUCED_REQUEST,
    normalize_sample,
)
from aoi_insights.utils.geojson import region_to_feature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchStrategy:
    """One way of asking the provider for a sample."""
    name: str
    request: Callable[[], Awaitable[Dict[str, Any]]]
    fallback_reason: Optional[str] = None
    """Reason recorded on the sample when this strategy is the one that answered"""


@dataclass(frozen=True)
class StrategyFailure:
    """Classified failure of a single strategy."""
    strategy: str
    kind: str
    detail: str
    status_code: Optional[int] = None


StrategyResult = Union[EnvironmentalSample, StrategyFailure]


def _ordered_layers(layers: Iterable[str]) -> List[str]:
    # Keep first-seen order, drop duplicates
    return list(dict.fromkeys(layers))


class DataFetchOrchestrator:
    """
    Fetches environmental samples for a coordinate or a drawn region.

    Point queries try the full request, then a reduced request without
    layers. Boundary queries have no reduced variant and fail fast.
    Every call goes to the provider; nothing is cached.
    """

    def __init__(
        self,
        api_client: InsightsAPIClient,
        config_id: Optional[str] = None,
    ):
        """
        Initialize the orchestrator with dependencies.

        Args:
            api_client: Insights provider client
            config_id: Provider configuration id sent with every query
        """
        self.api_client = api_client
        self.config_id = config_id if config_id is not None else settings.insights_config_id

    async def fetch(
        self,
        mode: FetchMode,
        *,
        coord: Optional[Point] = None,
        roi: Optional[RegionOfInterest] = None,
        layers: Iterable[str] = (),
        date_range: Optional[DateRange] = None,
        center: Optional[Point] = None,
    ) -> EnvironmentalSample:
        """
        Single entry point: dispatch to the point or boundary path.

        Args:
            mode: Which fetch path to use
            coord: Coordinate for point mode
            roi: Region for boundary mode
            layers: Visualization layer identifiers
            date_range: Query window, defaults to the configured window ending today
            center: Map center sent with boundary queries

        Returns:
            Normalized EnvironmentalSample

        Raises:
            NoRegionError: Boundary mode without a region
            InvalidPointError: Point mode without a coordinate
            DataUnavailableError: Every provider attempt failed
        """
        if mode is FetchMode.BOUNDARY:
            return await self.fetch_for_region(roi, layers, date_range, center=center)
        if coord is None:
            raise InvalidPointError("A point fetch needs a coordinate")
        return await self.fetch_for_point(coord, layers, date_range)

    async def fetch_for_point(
        self,
        coord: Point,
        layers: Iterable[str] = (),
        date_range: Optional[DateRange] = None,
    ) -> EnvironmentalSample:
        """
        Fetch a sample for a single coordinate.

        Tries the full request first, then once more without layers. A
        sample from the reduced request is flagged as a fallback.

        Raises:
            DataUnavailableError: If both requests fail
        """
        date_range = date_range or DateRange.ending_today(settings.default_date_range_months)
        full = self._point_payload(coord, date_range, _ordered_layers(layers))
        reduced = self._point_payload(coord, date_range, None)

        strategies = [
            FetchStrategy(
                name="point",
                request=lambda: self.api_client.fetch_point_insights(full),
            ),
            FetchStrategy(
                name="point_reduced",
                request=lambda: self.api_client.fetch_point_insights(reduced),
                fallback_reason=FALLBACK_REDUCED_REQUEST,
            ),
        ]
        return await self._run(strategies, target=f"point ({coord.lat:.5f}, {coord.lon:.5f})")

    async def fetch_for_region(
        self,
        roi: Optional[RegionOfInterest],
        layers: Iterable[str] = (),
        date_range: Optional[DateRange] = None,
        center: Optional[Point] = None,
    ) -> EnvironmentalSample:
        """
        Fetch a sample for a drawn region.

        Raises:
            NoRegionError: If no region is given; checked before any request
            DataUnavailableError: If the request fails
        """
        if roi is None:
            raise NoRegionError()

        date_range = date_range or DateRange.ending_today(settings.default_date_range_months)
        payload = self._boundary_payload(roi, date_range, _ordered_layers(layers), center or roi.center)

        strategies = [
            FetchStrategy(
                name="boundary",
                request=lambda: self.api_client.fetch_boundary_insights(payload),
            ),
        ]
        return await self._run(strategies, target=f"region {roi.id}")

    async def _run(self, strategies: List[FetchStrategy], target: str) -> EnvironmentalSample:
        failures: List[StrategyFailure] = []
        for strategy in strategies:
            result = await self._attempt(strategy)
            if isinstance(result, EnvironmentalSample):
                if result.is_fallback:
                    logger.warning(f"Fallback data for {target} via {strategy.name} "
                                   f"({result.fallback_reason})")
                else:
                    logger.info(f"Fetched data for {target} via {strategy.name}")
                return result
            failures.append(result)
            logger.warning(f"Strategy {strategy.name} failed for {target}: "
                           f"{result.kind} - {result.detail}")

        raise DataUnavailableError(
            f"Environmental data unavailable for {target} after {len(failures)} attempt(s)",
            failures=failures,
        )

    async def _attempt(self, strategy: FetchStrategy) -> StrategyResult:
        try:
            raw = await strategy.request()
        except ExternalAPIError as e:
            return StrategyFailure(strategy.name, e.kind, e.message, e.status_code)
        except httpx.HTTPError as e:
            return StrategyFailure(strategy.name, "transport", str(e))
        return normalize_sample(raw, fallback_reason=strategy.fallback_reason)

    def _base_payload(self, lat: float, lon: float, date_range: DateRange) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "lat": lat,
            "lon": lon,
            "startDate": date_range.start_date.isoformat(),
            "endDate": date_range.end_date.isoformat(),
        }
        if self.config_id:
            payload["configId"] = self.config_id
        return payload

    def _point_payload(
        self,
        coord: Point,
        date_range: DateRange,
        layers: Optional[List[str]],
    ) -> Dict[str, Any]:
        payload = self._base_payload(coord.lat, coord.lon, date_range)
        if layers is not None:
            payload["layers"] = layers
        return payload

    def _boundary_payload(
        self,
        roi: RegionOfInterest,
        date_range: DateRange,
        layers: List[str],
        center: Point,
    ) -> Dict[str, Any]:
        payload = self._base_payload(center.lat, center.lon, date_range)
        payload["region"] = region_to_feature(roi)
        payload["layers"] = layers
        return payload
