"""
API router for the drawing session.
"""
from typing import Optional

from fastapi import APIRouter

from aoi_insights.api.dependencies import WorkspaceDep
from aoi_insights.api.v1.models.requests import (
    CoordinateRequest,
    FinishRequest,
    SelectModeRequest,
)
from aoi_insights.api.v1.models.responses import Coordinate, DrawingStateResponse
from aoi_insights.services.application.map_workspace import MapWorkspace
from aoi_insights.services.domain.drawing_session import DrawingOutcome, OutcomeStatus
from aoi_insights.utils.geojson import region_to_feature


router = APIRouter(
    prefix="/drawing",
    tags=["drawing"],
)


def _state(
    workspace: MapWorkspace,
    outcome: Optional[DrawingOutcome] = None,
    consumer: Optional[str] = None,
) -> DrawingStateResponse:
    session = workspace.session
    if outcome is None:
        status = OutcomeStatus.COLLECTING if session.is_active else OutcomeStatus.IDLE
    else:
        status = outcome.status
    return DrawingStateResponse(
        status=status,
        mode=session.mode,
        points=[Coordinate(latitude=p.lat, longitude=p.lon) for p in session.points],
        can_finish=session.can_finish,
        consumer=consumer,
        region=region_to_feature(outcome.region) if outcome and outcome.region else None,
    )


@router.get("", response_model=DrawingStateResponse, summary="Current drawing state")
async def get_drawing_state(workspace: WorkspaceDep) -> DrawingStateResponse:
    return _state(workspace)


@router.post("/mode", response_model=DrawingStateResponse, summary="Select drawing mode")
async def select_mode(body: SelectModeRequest, workspace: WorkspaceDep) -> DrawingStateResponse:
    """
    Start drawing a line, polygon or rectangle.

    Selecting the mode that is already active turns drawing off and
    discards its points.
    """
    return _state(workspace, workspace.select_mode(body.mode))


@router.post("/clicks", response_model=DrawingStateResponse, summary="Handle a map click")
async def click(body: CoordinateRequest, workspace: WorkspaceDep) -> DrawingStateResponse:
    """
    Feed one map click.

    While drawing, the click is a vertex (the second rectangle corner
    finishes the rectangle). Otherwise it moves the marker used by point
    fetches.
    """
    consumer, outcome = workspace.click(body.to_point())
    return _state(workspace, outcome, consumer=consumer)


@router.post("/finish", response_model=DrawingStateResponse, summary="Finish the line or polygon")
async def finish(workspace: WorkspaceDep, body: Optional[FinishRequest] = None) -> DrawingStateResponse:
    """
    Finish the current line or polygon.

    Below the minimum point count (2 for lines, 3 for polygons) nothing is
    emitted and the status is ``below_minimum``.
    """
    return _state(workspace, workspace.finish(name=body.name if body else None))


@router.post("/cancel", response_model=DrawingStateResponse, summary="Cancel the current drawing")
async def cancel(workspace: WorkspaceDep) -> DrawingStateResponse:
    return _state(workspace, workspace.cancel())
