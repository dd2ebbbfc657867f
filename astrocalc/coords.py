"""Spherical trigonometry between ecliptic, equatorial and horizontal frames.

All angles are radians. Longitudes passed to :func:`sidereal_time` are
measured west of Greenwich (see :attr:`GeographicPosition.lw`).
"""

from __future__ import annotations

import math

import numpy as np

__all__ = [
    "DOMAIN_TOLERANCE",
    "DomainError",
    "OBLIQUITY",
    "altitude",
    "azimuth",
    "declination",
    "hour_angle",
    "parallactic_angle",
    "right_ascension",
    "safe_acos",
    "safe_asin",
    "sidereal_time",
]

OBLIQUITY = math.radians(23.4397)  # mean obliquity of the ecliptic

# Largest excursion past +/-1 treated as rounding noise rather than a real
# out-of-domain argument.
DOMAIN_TOLERANCE = 1e-9


class DomainError(ValueError):
    """Raised when an inverse-trig argument lies outside [-1, 1]."""

    def __init__(self, value: float, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"argument outside [-1, 1]: {value!r}")


def _clip_unit(value: float) -> float:
    if math.isnan(value) or abs(value) > 1.0 + DOMAIN_TOLERANCE:
        raise DomainError(value)
    return float(np.clip(value, -1.0, 1.0))


def safe_asin(value: float) -> float:
    return math.asin(_clip_unit(value))


def safe_acos(value: float) -> float:
    return math.acos(_clip_unit(value))


def altitude(hour_angle: float, phi: float, dec: float) -> float:
    return safe_asin(
        math.sin(phi) * math.sin(dec) + math.cos(phi) * math.cos(dec) * math.cos(hour_angle)
    )


def azimuth(hour_angle: float, phi: float, dec: float) -> float:
    """Azimuth measured from South towards West."""

    return math.atan2(
        math.sin(hour_angle),
        math.cos(hour_angle) * math.sin(phi) - math.tan(dec) * math.cos(phi),
    )


def declination(lon: float, lat: float) -> float:
    """Declination of a point with ecliptic longitude *lon* and latitude *lat*."""

    return safe_asin(
        math.sin(lat) * math.cos(OBLIQUITY)
        + math.cos(lat) * math.sin(OBLIQUITY) * math.sin(lon)
    )


def right_ascension(lon: float, lat: float) -> float:
    return math.atan2(
        math.sin(lon) * math.cos(OBLIQUITY) - math.tan(lat) * math.sin(OBLIQUITY),
        math.cos(lon),
    )


def sidereal_time(days: float, lw: float) -> float:
    return math.radians(280.16 + 360.9856235 * days) - lw


def hour_angle(h: float, phi: float, dec: float) -> float:
    """Hour angle at which a body of declination *dec* reaches altitude *h*.

    Raises
    ------
    DomainError
        If the body never reaches *h* on that day. ``value`` below -1 means
        it stays above *h*, above +1 means it stays below.
    """

    denominator = math.cos(phi) * math.cos(dec)
    numerator = math.sin(h) - math.sin(phi) * math.sin(dec)
    if denominator == 0.0:
        raise DomainError(math.copysign(math.inf, numerator), "hour angle undefined at the pole")
    return safe_acos(numerator / denominator)


def parallactic_angle(hour_angle: float, phi: float, dec: float) -> float:
    # Meeus, Astronomical Algorithms, formula 14.1
    return math.atan2(
        math.sin(hour_angle),
        math.tan(phi) * math.cos(dec) - math.sin(dec) * math.cos(hour_angle),
    )
