"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample points and regions
- Sample provider payloads
- Mock insights API client
- Workspace wired to the mock client
- FastAPI test client
"""
import pytest
from datetime import date
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from aoi_insights.main import app, limiter
from aoi_insights.domain.models import DateRange, Point, RegionKind
from aoi_insights.infrastructure.insights_client import InsightsAPIClient
from aoi_insights.services.application.fetch_orchestrator import DataFetchOrchestrator
from aoi_insights.services.application.map_workspace import MapWorkspace, get_workspace
from aoi_insights.services.domain.drawing_surface import InMemoryDrawingSurface
from aoi_insights.services.domain.geometry_builder import GeometryBuilder


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def triangle() -> list[Point]:
    """Three corners of a small triangle."""
    return [
        Point(lat=0.0, lon=0.0),
        Point(lat=0.0, lon=1.0),
        Point(lat=1.0, lon=0.0),
    ]


@pytest.fixture
def triangle_region(triangle):
    """Closed polygon region built from the triangle."""
    return GeometryBuilder().build_region(RegionKind.POLYGON, triangle)


@pytest.fixture
def date_range() -> DateRange:
    return DateRange(start_date=date(2025, 11, 1), end_date=date(2025, 12, 1))


@pytest.fixture
def provider_payload() -> dict:
    """A real (non-synthetic) provider answer using canonical names."""
    return {
        "temperature": 18.2,
        "relativeHumidity": 71.0,
        "rainfall": 12.5,
        "windSpeed": 3.1,
        "soilMoisture": 0.27,
        "canopyHumidity": 80.0,
        "leafWetnessHours": 9.0,
    }


@pytest.fixture
def mock_payload() -> dict:
    """A synthetic provider answer using the alternate field names."""
    return {
        "temp": 21.5,
        "rh": 55,
        "precipitation": 3,
        "wetnessHours": 4,
        "_source": "mock",
    }


# ============================================================
# Mock API Client Fixtures
# ============================================================

@pytest.fixture
def mock_api_client(provider_payload):
    """Create a mock insights API client that always succeeds."""
    mock_client = AsyncMock(spec=InsightsAPIClient)
    mock_client.fetch_point_insights.return_value = provider_payload
    mock_client.fetch_boundary_insights.return_value = {**provider_payload, "regionId": "r-1"}
    return mock_client


@pytest.fixture
def orchestrator(mock_api_client) -> DataFetchOrchestrator:
    return DataFetchOrchestrator(api_client=mock_api_client, config_id="")


@pytest.fixture
def surface() -> InMemoryDrawingSurface:
    return InMemoryDrawingSurface()


@pytest.fixture
def workspace(orchestrator, surface) -> MapWorkspace:
    return MapWorkspace(
        orchestrator,
        surface=surface,
        center=Point(lat=34.1, lon=74.8),
        debounce_seconds=0.01,
    )


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client(workspace) -> TestClient:
    """Create a synchronous test client bound to a fresh workspace."""
    limiter.reset()
    app.dependency_overrides[get_workspace] = lambda: workspace
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
