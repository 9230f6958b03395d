"""
API router for ambient map state: marker position, fetch mode, live updates.
"""
from fastapi import APIRouter

from aoi_insights.api.dependencies import WorkspaceDep
from aoi_insights.api.v1.models.requests import (
    CoordinateRequest,
    FetchModeRequest,
    LiveUpdatesRequest,
)
from aoi_insights.api.v1.models.responses import Coordinate, MapStateResponse
from aoi_insights.services.application.map_workspace import MapWorkspace


router = APIRouter(
    prefix="/map",
    tags=["map"],
)


def _state(workspace: MapWorkspace) -> MapStateResponse:
    marker = workspace.cursor.position
    return MapStateResponse(
        marker=Coordinate(latitude=marker.lat, longitude=marker.lon),
        fetch_mode=workspace.fetch_mode,
        live_updates=workspace.live.enabled,
        boundary_ready=workspace.boundary_ready,
        region_count=len(workspace.store),
        shapes=workspace.surface.shapes,
    )


@router.get("", response_model=MapStateResponse, summary="Current map state")
async def get_map_state(workspace: WorkspaceDep) -> MapStateResponse:
    return _state(workspace)


@router.put("/center", response_model=MapStateResponse, summary="Move the map center")
async def move_center(body: CoordinateRequest, workspace: WorkspaceDep) -> MapStateResponse:
    """
    Record the map center after a pan or a geolocation fix.

    With live updates on, this schedules a debounced refresh.
    """
    workspace.move_center(body.to_point())
    return _state(workspace)


@router.put("/fetch-mode", response_model=MapStateResponse, summary="Select point or boundary fetching")
async def set_fetch_mode(body: FetchModeRequest, workspace: WorkspaceDep) -> MapStateResponse:
    workspace.set_fetch_mode(body.mode)
    return _state(workspace)


@router.put("/live", response_model=MapStateResponse, summary="Toggle live updates")
async def set_live_updates(body: LiveUpdatesRequest, workspace: WorkspaceDep) -> MapStateResponse:
    workspace.set_live(body.enabled)
    return _state(workspace)
