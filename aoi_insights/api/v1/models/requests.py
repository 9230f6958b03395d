"""
API request models using Pydantic.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from aoi_insights.domain.models import DateRange, DrawingMode, FetchMode, Point


class CoordinateRequest(BaseModel):
    """A map coordinate (click, pan end or geolocation)."""
    latitude: float = Field(
        description="Latitude coordinate in degrees",
        examples=[34.1],
        allow_inf_nan=False,
    )
    longitude: float = Field(
        description="Longitude coordinate in degrees",
        examples=[74.8],
        allow_inf_nan=False,
    )

    def to_point(self) -> Point:
        return Point(lat=self.latitude, lon=self.longitude)


class SelectModeRequest(BaseModel):
    """Drawing mode selection. Selecting the active mode again turns it off."""
    mode: DrawingMode


class FinishRequest(BaseModel):
    """Optional name for the region being finished."""
    name: Optional[str] = Field(default=None, max_length=200)


class LiveUpdatesRequest(BaseModel):
    """Toggle for debounced live refresh on map moves."""
    enabled: bool


class FetchRequest(BaseModel):
    """Environmental data query."""
    mode: Optional[FetchMode] = Field(
        default=None,
        description="Fetch path; defaults to the workspace's current mode"
    )
    layers: Optional[List[str]] = Field(
        default=None,
        description="Layer identifiers; defaults to the last selection"
    )
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self) -> "FetchRequest":
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be given together")
        if self.start_date is not None and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def date_range(self) -> Optional[DateRange]:
        if self.start_date is None:
            return None
        return DateRange(start_date=self.start_date, end_date=self.end_date)


class FetchModeRequest(BaseModel):
    """Which fetch path the Live button and live updates use."""
    mode: FetchMode
