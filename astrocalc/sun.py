"""Low-precision solar ephemeris and closed-form sunrise/sunset.

Formulas follow http://aa.quae.nl/en/reken/zonpositie.html. Rise and set
are obtained analytically from the hour angle at the requested altitude,
reflected around the solar transit; nothing is sampled or iterated.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Sequence, Tuple

from .coords import (
    DomainError,
    altitude,
    azimuth,
    declination,
    hour_angle,
    right_ascension,
    sidereal_time,
)
from .datatypes import (
    DEFAULT_SUN_TIMES,
    EquatorialCoordinates,
    GeographicPosition,
    HorizontalCoordinates,
    RiseSetResult,
    SunDayStatus,
    SunDayTimes,
    SunTimeThreshold,
)
from .timeconv import J2000, days_since_j2000, from_julian

__all__ = [
    "J0",
    "SUNRISE_ALTITUDE",
    "approx_transit",
    "ecliptic_longitude",
    "get_set_j",
    "julian_cycle",
    "solar_mean_anomaly",
    "solar_transit_j",
    "sun_coords",
    "sun_event",
    "sun_position",
    "sun_times",
]

LOGGER = logging.getLogger(__name__)

# Table 6 of the reference page: fraction of a day between the mean and the
# true transit at J2000.
J0 = 0.0009

# Altitude (degrees) of the end of sunrise / start of sunset used for the
# headline rise and set times.
SUNRISE_ALTITUDE = -0.3

PERIHELION = math.radians(102.9372)


def solar_mean_anomaly(days: float) -> float:
    return math.radians(357.5291 + 0.98560028 * days)


def ecliptic_longitude(mean_anomaly: float) -> float:
    """Ecliptic longitude of the Sun from its mean anomaly."""

    center = math.radians(
        1.9148 * math.sin(mean_anomaly)
        + 0.02 * math.sin(2 * mean_anomaly)
        + 0.0003 * math.sin(3 * mean_anomaly)
    )
    return mean_anomaly + center + PERIHELION + math.pi


def sun_coords(days: float) -> EquatorialCoordinates:
    lon = ecliptic_longitude(solar_mean_anomaly(days))
    return EquatorialCoordinates(
        declination=declination(lon, 0.0),
        right_ascension=right_ascension(lon, 0.0),
    )


def sun_position(dt: datetime, position: GeographicPosition) -> HorizontalCoordinates:
    """Altitude and azimuth (South-based) of the Sun at *dt*."""

    days = days_since_j2000(dt)
    coords = sun_coords(days)
    ha = sidereal_time(days, position.lw) - coords.right_ascension
    return HorizontalCoordinates(
        altitude=altitude(ha, position.phi, coords.declination),
        azimuth=azimuth(ha, position.phi, coords.declination),
    )


def julian_cycle(days: float, lw: float) -> float:
    return float(round(days - J0 - lw / (2 * math.pi)))


def approx_transit(target_hour_angle: float, lw: float, cycle: float) -> float:
    return J0 + cycle + (target_hour_angle + lw) / (2 * math.pi)


def solar_transit_j(approx: float, mean_anomaly: float, ecl_longitude: float) -> float:
    """Julian day of the transit closest to *approx*."""

    return J2000 + approx + 0.0053 * math.sin(mean_anomaly) - 0.0069 * math.sin(2 * ecl_longitude)


def get_set_j(
    h: float,
    lw: float,
    phi: float,
    dec: float,
    cycle: float,
    mean_anomaly: float,
    ecl_longitude: float,
) -> float:
    """Julian day at which the Sun descends through altitude *h* (radians).

    Raises :class:`DomainError` when the Sun never crosses *h* that day.
    """

    w = hour_angle(h, phi, dec)
    approx = approx_transit(w, lw, cycle)
    return solar_transit_j(approx, mean_anomaly, ecl_longitude)


@dataclass(frozen=True)
class _SolarDay:
    """Quantities shared by every threshold of one solar day."""

    lw: float
    phi: float
    cycle: float
    mean_anomaly: float
    ecl_longitude: float
    declination: float
    noon: float

    @classmethod
    def for_date(cls, dt: datetime, position: GeographicPosition) -> "_SolarDay":
        lw = position.lw
        days = days_since_j2000(dt)
        cycle = julian_cycle(days, lw)
        approx = approx_transit(0.0, lw, cycle)
        mean_anomaly = solar_mean_anomaly(days)
        ecl_longitude = ecliptic_longitude(mean_anomaly)
        return cls(
            lw=lw,
            phi=position.phi,
            cycle=cycle,
            mean_anomaly=mean_anomaly,
            ecl_longitude=ecl_longitude,
            declination=declination(ecl_longitude, 0.0),
            noon=solar_transit_j(approx, mean_anomaly, ecl_longitude),
        )

    def crossings(self, altitude_deg: float) -> Tuple[float, float]:
        """Julian days of the morning and evening crossings of *altitude_deg*."""

        j_set = get_set_j(
            math.radians(altitude_deg),
            self.lw,
            self.phi,
            self.declination,
            self.cycle,
            self.mean_anomaly,
            self.ecl_longitude,
        )
        return self.noon - (j_set - self.noon), j_set


def _status_for(exc: DomainError) -> SunDayStatus:
    # cos(H) below -1: the Sun stays above the threshold all day.
    return SunDayStatus.polar_day if exc.value < 0 else SunDayStatus.polar_night


def sun_times(
    dt: datetime,
    position: GeographicPosition,
    thresholds: Sequence[SunTimeThreshold] = DEFAULT_SUN_TIMES,
) -> SunDayTimes:
    """Compute solar noon, nadir, sunrise/sunset and the named sun times.

    Parameters
    ----------
    dt:
        Any timezone-aware instant of the day of interest. The transit
        nearest to *dt* is used, so local noon is the safest choice.
    position:
        Observer location.
    thresholds:
        Altitude thresholds with the labels of their morning and evening
        crossings. Thresholds the Sun does not reach that day are left out
        of :attr:`SunDayTimes.times`.
    """

    day = _SolarDay.for_date(dt, position)

    times: Dict[str, datetime] = {}
    for threshold in thresholds:
        try:
            j_rise, j_set = day.crossings(threshold.altitude)
        except DomainError as exc:
            LOGGER.debug(
                json.dumps(
                    {
                        "event": "sun_threshold_unreached",
                        "altitude": threshold.altitude,
                        "status": _status_for(exc).value,
                    }
                )
            )
            continue
        times[threshold.before_noon] = from_julian(j_rise)
        times[threshold.after_noon] = from_julian(j_set)

    solar_noon = from_julian(day.noon)
    nadir = from_julian(day.noon - 0.5)
    try:
        j_rise, j_set = day.crossings(SUNRISE_ALTITUDE)
    except DomainError as exc:
        return SunDayTimes(solar_noon=solar_noon, nadir=nadir, status=_status_for(exc), times=times)

    return SunDayTimes(
        solar_noon=solar_noon,
        nadir=nadir,
        status=SunDayStatus.ok,
        rise=from_julian(j_rise),
        set=from_julian(j_set),
        times=times,
    )


def sun_event(dt: datetime, position: GeographicPosition, altitude_deg: float) -> RiseSetResult:
    """Morning and evening crossings of a single altitude threshold."""

    day = _SolarDay.for_date(dt, position)
    try:
        j_rise, j_set = day.crossings(altitude_deg)
    except DomainError as exc:
        if _status_for(exc) is SunDayStatus.polar_day:
            return RiseSetResult.always_above_result()
        return RiseSetResult.always_below_result()
    return RiseSetResult.from_events(from_julian(j_rise), from_julian(j_set))
