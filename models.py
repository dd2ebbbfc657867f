"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from astrocalc.datatypes import RiseSetKind


class Twilight(str, Enum):
    """Enumeration of supported twilight definitions."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


class LocationQuery(BaseModel):
    """Observer coordinates shared by every location-based endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(
        ..., ge=-180.0, le=180.0, description="Longitude in degrees (east-positive)"
    )


class DayQueryParams(LocationQuery):
    """Validated query parameters for the daily event endpoints."""

    date_utc: date = Field(..., alias="date", description="Calendar date (YYYY-MM-DD)")
    offset_hours: Optional[float] = Field(
        None,
        description="Optional fixed UTC offset in hours defining the local civil day",
    )

    @field_validator("offset_hours")
    @classmethod
    def validate_offset_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if not -24.0 <= value <= 24.0:
            raise ValueError("offset_hours must be within ±24 hours")
        return value


class SunQueryParams(DayQueryParams):
    """Validated query parameters for the ``/sun`` endpoint."""

    twilight: Optional[Twilight] = Field(
        None, description="Twilight definition (defaults to the configured one)"
    )


class PositionQueryParams(LocationQuery):
    """Validated query parameters for the position endpoints."""

    at: Optional[datetime] = Field(
        None, description="Instant (ISO-8601); naive values are UTC, default is now"
    )


class PhaseQueryParams(BaseModel):
    at: Optional[datetime] = Field(
        None, description="Instant (ISO-8601); naive values are UTC, default is now"
    )


class SunResponse(BaseModel):
    """Successful sunrise/sunset response payload."""

    ok: bool = True
    status: str = Field(..., description="Computation status")
    date_utc: date = Field(..., description="Requested date")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    twilight: Twilight = Field(..., description="Applied twilight definition")
    sunrise_utc: Optional[str] = Field(None, description="Sunrise time in UTC (ISO-8601)")
    sunset_utc: Optional[str] = Field(None, description="Sunset time in UTC (ISO-8601)")
    solar_noon_utc: str = Field(..., description="Upper transit of the Sun in UTC")
    nadir_utc: str = Field(..., description="Lower transit of the Sun in UTC")
    times: Dict[str, str] = Field(
        default_factory=dict, description="Named sun times in UTC (ISO-8601)"
    )
    offset_hours: Optional[float] = Field(None, description="User-specified offset in hours")
    sunrise_local: Optional[str] = Field(
        None, description="Sunrise expressed in local time when offset provided"
    )
    sunset_local: Optional[str] = Field(
        None, description="Sunset expressed in local time when offset provided"
    )
    source: Literal["low-precision"] = Field(
        "low-precision", description="Ephemeris source identifier"
    )


class MoonResponse(BaseModel):
    """Moonrise/moonset response payload."""

    ok: bool = True
    kind: RiseSetKind = Field(..., description="Which events occur on the day")
    date_utc: date = Field(..., description="Requested date")
    latitude: float
    longitude: float
    moonrise_utc: Optional[str] = None
    moonset_utc: Optional[str] = None
    offset_hours: Optional[float] = None
    moonrise_local: Optional[str] = None
    moonset_local: Optional[str] = None
    always_above: bool = False
    always_below: bool = False


class BodyPositionResponse(BaseModel):
    """Horizontal and equatorial coordinates in degrees.

    Azimuth is measured from North through East.
    """

    ok: bool = True
    at_utc: str
    latitude: float
    longitude: float
    altitude_deg: float
    azimuth_deg: float
    declination_deg: float
    right_ascension_deg: float
    distance_km: Optional[float] = None
    parallactic_angle_deg: Optional[float] = None


class MoonPhaseResponse(BaseModel):
    ok: bool = True
    at_utc: str
    illuminated_fraction: float = Field(..., ge=0.0, le=1.0)
    phase_fraction: float = Field(..., ge=0.0, lt=1.0)
    bright_limb_angle_deg: float
    phase_name: str


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    engine: str
    version: str


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
