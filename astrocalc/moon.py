"""Truncated-series lunar ephemeris and moonrise/moonset.

Series from http://aa.quae.nl/en/reken/hemelpositie.html.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime

from .coords import (
    altitude,
    azimuth,
    declination,
    parallactic_angle,
    right_ascension,
    sidereal_time,
)
from .datatypes import EquatorialCoordinates, GeographicPosition, HorizontalCoordinates, RiseSetResult
from .solver import find_rise_set
from .timeconv import day_start, days_since_j2000

__all__ = ["MOON_HORIZON", "altitude_correction", "moon_coords", "moon_position", "moon_times"]

LOGGER = logging.getLogger(__name__)

# Apparent radius plus parallax, as an altitude threshold.
MOON_HORIZON = math.radians(0.133)


def moon_coords(days: float) -> EquatorialCoordinates:
    """Geocentric equatorial coordinates and distance (km) of the Moon."""

    mean_longitude = math.radians(218.316 + 13.176396 * days)
    mean_anomaly = math.radians(134.963 + 13.064993 * days)
    mean_distance = math.radians(93.272 + 13.229350 * days)

    lon = mean_longitude + math.radians(6.289) * math.sin(mean_anomaly)
    lat = math.radians(5.128) * math.sin(mean_distance)
    distance = 385001 - 20905 * math.cos(mean_anomaly)

    return EquatorialCoordinates(
        declination=declination(lon, lat),
        right_ascension=right_ascension(lon, lat),
        distance=distance,
    )


def altitude_correction(h: float) -> float:
    """Empirical low-altitude correction added to the geometric altitude."""

    return math.radians(0.017) / math.tan(h + math.radians(10.26) / (h + math.radians(5.10)))


def moon_position(dt: datetime, position: GeographicPosition) -> HorizontalCoordinates:
    days = days_since_j2000(dt)
    coords = moon_coords(days)
    phi = position.phi
    ha = sidereal_time(days, position.lw) - coords.right_ascension
    h = altitude(ha, phi, coords.declination)
    return HorizontalCoordinates(
        altitude=h + altitude_correction(h),
        azimuth=azimuth(ha, phi, coords.declination),
        distance=coords.distance,
        parallactic_angle=parallactic_angle(ha, phi, coords.declination),
    )


def moon_times(dt: datetime, position: GeographicPosition) -> RiseSetResult:
    """Moonrise and moonset during the civil day containing *dt*.

    The day boundaries follow *dt*'s timezone. Rise and set are
    independent events: the set may precede the rise, and a day can hold
    only one of them.
    """

    start = day_start(dt)
    result = find_rise_set(lambda t: moon_position(t, position).altitude, start, MOON_HORIZON)
    LOGGER.debug(
        json.dumps(
            {
                "event": "moon_times",
                "day": start.isoformat(),
                "lat": position.latitude,
                "lon": position.longitude,
                "kind": result.kind.value,
            }
        )
    )
    return result
