"""
Infrastructure layer: environmental insights provider client with retry logic.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from aoi_insights.config import settings
from aoi_insights.infrastructure.api_constants import APIConstants, InsightsAPIEndpoints

logger = logging.getLogger(__name__)


class ExternalAPIError(Exception):
    """
    Provider call failed.

    Attributes:
        message: Human-readable description
        status_code: Provider HTTP status, or 502 when no response arrived
        kind: "transport", "http_status" or "malformed"
    """

    def __init__(
        self,
        message: str,
        status_code: int = APIConstants.TRANSPORT_FAILURE_STATUS,
        kind: str = "transport",
    ):
        self.message = message
        self.status_code = status_code
        self.kind = kind
        super().__init__(message)


class InsightsAPIClient:
    """
    Client for the environmental insights provider.
    Implements retry logic with exponential backoff for 5xx responses.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the API client with configuration.

        Args:
            base_url: Provider base URL, defaults to settings
            api_key: Bearer token, defaults to settings
            timeout: Request timeout in seconds, defaults to settings
        """
        self.base_url = base_url or settings.insights_api_base_url
        self.api_key = api_key if api_key is not None else settings.insights_api_key
        headers = {
            "accept": APIConstants.CONTENT_TYPE_JSON,
            "content-type": APIConstants.CONTENT_TYPE_JSON,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout or settings.request_timeout_seconds,
        )

    async def __aenter__(self) -> "InsightsAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type(httpx.HTTPStatusError),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make an HTTP request, retrying server errors.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Response data as dictionary

        Raises:
            httpx.HTTPStatusError: On 5xx, so the retry policy can see it
            ExternalAPIError: On 4xx, network errors or a non-object body
        """
        try:
            response = await self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            # Retry on server errors (5xx)
            if e.response.status_code >= 500:
                raise
            # Don't retry on client errors (4xx)
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
                kind="http_status",
            )
        except httpx.RequestError as e:
            raise ExternalAPIError(f"API request error: {str(e)}")

        try:
            data = response.json()
        except ValueError:
            raise ExternalAPIError(
                "API returned a body that is not JSON",
                status_code=response.status_code,
                kind="malformed",
            )
        if not isinstance(data, dict):
            raise ExternalAPIError(
                f"API returned {type(data).__name__}, expected a JSON object",
                status_code=response.status_code,
                kind="malformed",
            )
        return data

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return await self._make_request("POST", endpoint, json=payload)
        except httpx.HTTPStatusError as e:
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
                kind="http_status",
            )

    async def fetch_point_insights(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Query environmental data for a single coordinate.

        Args:
            payload: Point query body (lat, lon, startDate, endDate, layers?)

        Returns:
            Raw provider payload

        Raises:
            ExternalAPIError: If the request fails
        """
        return await self._post(InsightsAPIEndpoints.POINT, payload)

    async def fetch_boundary_insights(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Query environmental data for a drawn region.

        Args:
            payload: Boundary query body (region feature plus map center,
                dates and layers)

        Returns:
            Raw provider payload

        Raises:
            ExternalAPIError: If the request fails
        """
        return await self._post(InsightsAPIEndpoints.BOUNDARY, payload)


# Singleton instance
_api_client: Optional[InsightsAPIClient] = None


def get_api_client() -> InsightsAPIClient:
    """
    Get or create the singleton API client instance.

    Returns:
        InsightsAPIClient instance
    """
    global _api_client
    if _api_client is None:
        _api_client = InsightsAPIClient()
    return _api_client
