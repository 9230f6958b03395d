"""
Domain models for drawn regions and environmental samples.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, map rendering, etc.).
Coordinates are held as (latitude, longitude) everywhere in the domain;
the [lon, lat] wire order only exists in utils.geojson.
"""
import calendar
import math
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Point(BaseModel):
    """A (latitude, longitude) pair in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float

    @field_validator("lat", "lon")
    @classmethod
    def check_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"Coordinate must be finite, got {v}")
        return v

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lon)


class DrawingMode(str, Enum):
    """How incoming map clicks are interpreted."""
    NONE = "none"
    LINE = "line"
    POLYGON = "polygon"
    RECTANGLE = "rectangle"


class RegionKind(str, Enum):
    """Geometry kind of a finished region. Rectangles are polygons."""
    LINE = "line"
    POLYGON = "polygon"


class FetchMode(str, Enum):
    """Which data-fetch path is active."""
    POINT = "point"
    BOUNDARY = "boundary"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RegionOfInterest(BaseModel):
    """
    A finished, immutable region produced by a drawing session.

    For polygons the ring is closed (first point == last point);
    for lines it is the open path in click order.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    kind: RegionKind
    drawing_type: DrawingMode = Field(
        description="Mode the region was drawn with (line, polygon or rectangle)"
    )
    ring: Tuple[Point, ...]
    created_at: datetime = Field(default_factory=_utcnow)
    name: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return len(self.ring) > 1 and self.ring[0] == self.ring[-1]

    @property
    def center(self) -> Point:
        """Mean of the distinct ring vertices, used as a fallback map center."""
        vertices = self.ring[:-1] if self.is_closed else self.ring
        return Point(
            lat=sum(p.lat for p in vertices) / len(vertices),
            lon=sum(p.lon for p in vertices) / len(vertices),
        )


def months_before(day: date, months: int) -> date:
    """Step back whole calendar months, clamping to the last valid day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class DateRange(BaseModel):
    """Inclusive query window."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date ({self.start_date}) must not be after end_date ({self.end_date})"
            )
        return self

    @classmethod
    def ending_today(cls, months: int = 1) -> "DateRange":
        today = date.today()
        return cls(start_date=months_before(today, months), end_date=today)


class EnvironmentalSample(BaseModel):
    """
    Normalized environmental data for a point or a region.

    ``is_fallback`` is set whenever the values did not come from a full,
    real provider answer. ``fallback_reason`` tells the two cases apart:
    ``"provider_synthetic"`` when the provider flagged its own output as
    mocked, ``"reduced_request"`` when the full request failed and a
    reduced one was substituted.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    temperature: Optional[float] = None
    relative_humidity: Optional[float] = None
    rainfall: Optional[float] = None
    wind_speed: Optional[float] = None
    soil_moisture: Optional[float] = None
    canopy_humidity: Optional[float] = None
    leaf_wetness_hours: Optional[float] = None
    risk_analysis: Optional[Any] = None
    region_id: Optional[str] = None
    is_fallback: bool = False
    fallback_reason: Optional[str] = None
