"""
API response models using Pydantic.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from aoi_insights.domain.models import DrawingMode, EnvironmentalSample, FetchMode


class Coordinate(BaseModel):
    """Single map coordinate."""
    latitude: float = Field(
        description="Latitude coordinate in degrees",
        examples=[34.1]
    )
    longitude: float = Field(
        description="Longitude coordinate in degrees",
        examples=[74.8]
    )


class DrawingStateResponse(BaseModel):
    """Drawing session state after an input."""
    status: str = Field(
        description="collecting, emitted, below_minimum, cancelled, ignored or idle"
    )
    mode: DrawingMode
    points: List[Coordinate]
    can_finish: bool
    consumer: Optional[str] = Field(
        default=None,
        description="Who took a click: 'session' or 'cursor'"
    )
    region: Optional[Dict[str, Any]] = Field(
        default=None,
        description="GeoJSON Feature of the region emitted by this input"
    )


class MapStateResponse(BaseModel):
    """Ambient map state."""
    marker: Coordinate
    fetch_mode: FetchMode
    live_updates: bool
    boundary_ready: bool
    region_count: int
    shapes: Dict[str, Dict[str, Any]] = Field(
        description="GeoJSON features currently on the drawing surface, by shape id"
    )


class FetchResponse(BaseModel):
    """Response model for the insights fetch endpoint."""
    mode: FetchMode
    sample: EnvironmentalSample
    applied: bool = Field(
        description="False when a newer fetch or a region change made this result stale"
    )
    stale: bool = False
    region_id: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "mode": "boundary",
                "sample": {
                    "temperature": 21.5,
                    "relativeHumidity": 64.0,
                    "rainfall": 3.0,
                    "windSpeed": 2.4,
                    "soilMoisture": 0.31,
                    "canopyHumidity": 71.0,
                    "leafWetnessHours": 6.0,
                    "riskAnalysis": None,
                    "regionId": "r-42",
                    "isFallback": False,
                    "fallbackReason": None,
                },
                "applied": True,
                "stale": False,
                "region_id": "3f2b0c9e8a7d4e51b6c2d1f0a9e8b7c6",
            }
        }
