"""FastAPI application exposing Sun and Moon computations."""

from __future__ import annotations

import json
import logging
import math
import time
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime, timedelta, timezone
from datetime import time as dtime
from typing import Annotated, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from astrocalc import (
    DomainError,
    GeographicPosition,
    __version__,
    moon_illumination,
    moon_position,
    moon_times,
    sun_event,
    sun_position,
    sun_times,
)
from astrocalc.config import TWILIGHT_ANGLES, load_settings
from astrocalc.moon import moon_coords
from astrocalc.sun import sun_coords
from astrocalc.timeconv import days_since_j2000
from models import (
    BodyPositionResponse,
    DayQueryParams,
    ErrorResponse,
    HealthResponse,
    MoonPhaseResponse,
    MoonResponse,
    PhaseQueryParams,
    PositionQueryParams,
    SunQueryParams,
    SunResponse,
    Twilight,
)

SETTINGS = load_settings()

logging.basicConfig(level=SETTINGS.log_level, format="%(message)s")
LOGGER = logging.getLogger("astro-api")

APP_DESCRIPTION = "Low-precision Sun and Moon positions, rise/set times and lunar phase"

ENGINE_NAME = "low-precision"


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - exercised in integration tests
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "version": __version__,
                "cors_origins": list(SETTINGS.cors_origins),
                "default_twilight": SETTINGS.default_twilight,
            }
        )
    )
    yield


app = FastAPI(
    title="Astrocalc API",
    description=APP_DESCRIPTION,
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _format_local(dt: Optional[datetime], offset_hours: Optional[float]) -> Optional[str]:
    if dt is None or offset_hours is None:
        return None
    offset = timezone(timedelta(hours=offset_hours))
    return dt.astimezone(offset).isoformat()


def _local_zone(offset_hours: Optional[float]) -> timezone:
    if offset_hours is None:
        return UTC
    return timezone(timedelta(hours=offset_hours))


def _at_day_time(day: date, offset_hours: Optional[float], at: dtime) -> datetime:
    return datetime.combine(day, at, tzinfo=_local_zone(offset_hours))


def _resolve_instant(at: Optional[datetime]) -> datetime:
    if at is None:
        return datetime.now(UTC)
    if at.tzinfo is None:
        return at.replace(tzinfo=UTC)
    return at


def _position(lat: float, lon: float) -> GeographicPosition:
    try:
        return GeographicPosition(latitude=lat, longitude=lon)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


def _log_request(event: str, start_time: float, **fields: object) -> None:
    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(json.dumps({"event": event, **fields, "duration_ms": round(duration_ms, 3)}))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, engine=ENGINE_NAME, version=__version__)


@app.get("/sun", response_model=SunResponse, responses=_ERROR_RESPONSES)
def sun_endpoint(params: Annotated[SunQueryParams, Query()]) -> SunResponse:
    start_time = time.perf_counter()
    twilight = params.twilight or Twilight(SETTINGS.default_twilight)
    position = _position(params.lat, params.lon)
    # The transit nearest to local noon belongs to the requested day.
    noon = _at_day_time(params.date_utc, params.offset_hours, dtime(12))
    try:
        day = sun_times(noon, position)
        event = sun_event(noon, position, TWILIGHT_ANGLES[twilight.value])
    except DomainError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if event.always_above:
        status = "polar_day"
    elif event.always_below:
        status = "polar_night"
    else:
        status = "ok"

    response = SunResponse(
        status=status,
        date_utc=params.date_utc,
        latitude=params.lat,
        longitude=params.lon,
        twilight=twilight,
        sunrise_utc=_format_utc(event.rise),
        sunset_utc=_format_utc(event.set),
        solar_noon_utc=_format_utc(day.solar_noon),
        nadir_utc=_format_utc(day.nadir),
        times={label: _format_utc(value) for label, value in day.times.items()},
        offset_hours=params.offset_hours,
        sunrise_local=_format_local(event.rise, params.offset_hours),
        sunset_local=_format_local(event.set, params.offset_hours),
    )

    _log_request(
        "sun",
        start_time,
        lat=params.lat,
        lon=params.lon,
        date=params.date_utc.isoformat(),
        twilight=twilight.value,
        status=status,
    )
    return response


@app.get("/sun/position", response_model=BodyPositionResponse, responses=_ERROR_RESPONSES)
def sun_position_endpoint(
    params: Annotated[PositionQueryParams, Query()],
) -> BodyPositionResponse:
    start_time = time.perf_counter()
    at = _resolve_instant(params.at)
    position = _position(params.lat, params.lon)
    try:
        horizontal = sun_position(at, position)
        equatorial = sun_coords(days_since_j2000(at))
    except DomainError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = BodyPositionResponse(
        at_utc=_format_utc(at),
        latitude=params.lat,
        longitude=params.lon,
        altitude_deg=math.degrees(horizontal.altitude),
        azimuth_deg=math.degrees(horizontal.azimuth_from_north()),
        declination_deg=math.degrees(equatorial.declination),
        right_ascension_deg=math.degrees(equatorial.right_ascension) % 360.0,
    )
    _log_request("sun_position", start_time, lat=params.lat, lon=params.lon, at=response.at_utc)
    return response


@app.get("/moon", response_model=MoonResponse, responses=_ERROR_RESPONSES)
def moon_endpoint(params: Annotated[DayQueryParams, Query()]) -> MoonResponse:
    start_time = time.perf_counter()
    position = _position(params.lat, params.lon)
    midnight = _at_day_time(params.date_utc, params.offset_hours, dtime.min)
    try:
        result = moon_times(midnight, position)
    except DomainError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = MoonResponse(
        kind=result.kind,
        date_utc=params.date_utc,
        latitude=params.lat,
        longitude=params.lon,
        moonrise_utc=_format_utc(result.rise),
        moonset_utc=_format_utc(result.set),
        offset_hours=params.offset_hours,
        moonrise_local=_format_local(result.rise, params.offset_hours),
        moonset_local=_format_local(result.set, params.offset_hours),
        always_above=result.always_above,
        always_below=result.always_below,
    )
    _log_request(
        "moon",
        start_time,
        lat=params.lat,
        lon=params.lon,
        date=params.date_utc.isoformat(),
        kind=result.kind.value,
    )
    return response


@app.get("/moon/position", response_model=BodyPositionResponse, responses=_ERROR_RESPONSES)
def moon_position_endpoint(
    params: Annotated[PositionQueryParams, Query()],
) -> BodyPositionResponse:
    start_time = time.perf_counter()
    at = _resolve_instant(params.at)
    position = _position(params.lat, params.lon)
    try:
        horizontal = moon_position(at, position)
        equatorial = moon_coords(days_since_j2000(at))
    except DomainError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = BodyPositionResponse(
        at_utc=_format_utc(at),
        latitude=params.lat,
        longitude=params.lon,
        altitude_deg=math.degrees(horizontal.altitude),
        azimuth_deg=math.degrees(horizontal.azimuth_from_north()),
        declination_deg=math.degrees(equatorial.declination),
        right_ascension_deg=math.degrees(equatorial.right_ascension) % 360.0,
        distance_km=horizontal.distance,
        parallactic_angle_deg=math.degrees(horizontal.parallactic_angle),
    )
    _log_request("moon_position", start_time, lat=params.lat, lon=params.lon, at=response.at_utc)
    return response


@app.get("/moon/phase", response_model=MoonPhaseResponse, responses=_ERROR_RESPONSES)
def moon_phase_endpoint(params: Annotated[PhaseQueryParams, Query()]) -> MoonPhaseResponse:
    start_time = time.perf_counter()
    at = _resolve_instant(params.at)
    try:
        phase = moon_illumination(at)
    except DomainError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = MoonPhaseResponse(
        at_utc=_format_utc(at),
        illuminated_fraction=phase.illuminated_fraction,
        phase_fraction=phase.phase_fraction,
        bright_limb_angle_deg=math.degrees(phase.bright_limb_angle),
        phase_name=phase.name,
    )
    _log_request("moon_phase", start_time, at=response.at_utc, phase=phase.name)
    return response
