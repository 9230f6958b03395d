"""
API router for environmental insights.
"""
from typing import Optional

from fastapi import APIRouter

from aoi_insights.api.dependencies import WorkspaceDep
from aoi_insights.api.v1.models.requests import FetchRequest
from aoi_insights.api.v1.models.responses import FetchResponse


router = APIRouter(
    prefix="/insights",
    tags=["insights"],
)


@router.post(
    "/fetch",
    response_model=FetchResponse,
    summary="Fetch environmental data",
    description="""
    Fetch environmental data for the map marker (point mode) or for the
    most recently drawn region (boundary mode).

    Point queries that fail are retried once without layers; a sample from
    that reduced request has `isFallback` set. Boundary queries are not
    retried. A sample the provider itself marked as synthetic also has
    `isFallback` set.
    """,
    responses={
        409: {"description": "Boundary mode selected but no region drawn"},
        429: {"description": "Rate limit exceeded"},
        503: {"description": "Provider unavailable after all attempts"},
    },
)
async def fetch_insights(
    workspace: WorkspaceDep,
    body: Optional[FetchRequest] = None,
) -> FetchResponse:
    body = body or FetchRequest()
    if body.layers is not None or body.start_date is not None:
        workspace.set_query(layers=body.layers, date_range=body.date_range())

    outcome = await workspace.fetch(mode=body.mode)

    return FetchResponse(
        mode=outcome.mode,
        sample=outcome.sample,
        applied=outcome.applied,
        stale=outcome.stale,
        region_id=outcome.region_id,
    )
