"""
API router for finished regions of interest.
"""
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status

from aoi_insights.api.dependencies import WorkspaceDep
from aoi_insights.utils.geojson import region_to_feature, regions_to_feature_collection


router = APIRouter(
    prefix="/regions",
    tags=["regions"],
)


@router.get("", summary="List regions as a GeoJSON FeatureCollection")
async def list_regions(workspace: WorkspaceDep) -> Dict[str, Any]:
    """Return every finished region, oldest first. Coordinates are [lon, lat]."""
    return regions_to_feature_collection(workspace.store.all())


@router.get(
    "/latest",
    summary="Most recently finished region",
    responses={404: {"description": "No region has been drawn"}},
)
async def latest_region(workspace: WorkspaceDep) -> Dict[str, Any]:
    region = workspace.store.latest()
    if region is None:
        raise HTTPException(status_code=404, detail="No region has been drawn")
    return region_to_feature(region)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear all regions")
async def clear_regions(workspace: WorkspaceDep) -> None:
    """Remove every region and cancel any drawing in progress."""
    workspace.clear_regions()
