"""Illumination of the Moon from the geocentric Sun-Moon elongation.

Based on mphase.pro from the IDL astronomy library and chapter 48 of
Meeus, *Astronomical Algorithms*.
"""

from __future__ import annotations

import math
from datetime import datetime

from .coords import safe_acos
from .datatypes import EquatorialCoordinates, MoonPhase
from .moon import moon_coords
from .sun import sun_coords
from .timeconv import days_since_j2000

__all__ = ["SUN_DISTANCE_KM", "moon_illumination", "phase_from_coords"]

SUN_DISTANCE_KM = 149598000.0  # 1 AU


def phase_from_coords(sun: EquatorialCoordinates, moon: EquatorialCoordinates) -> MoonPhase:
    if moon.distance is None:
        raise ValueError("moon coordinates must include the geocentric distance")

    delta_ra = sun.right_ascension - moon.right_ascension
    elongation = safe_acos(
        math.sin(sun.declination) * math.sin(moon.declination)
        + math.cos(sun.declination) * math.cos(moon.declination) * math.cos(delta_ra)
    )
    # selenocentric elongation of the Earth from the Sun
    inc = math.atan2(
        SUN_DISTANCE_KM * math.sin(elongation),
        moon.distance - SUN_DISTANCE_KM * math.cos(elongation),
    )
    angle = math.atan2(
        math.cos(sun.declination) * math.sin(delta_ra),
        math.sin(sun.declination) * math.cos(moon.declination)
        - math.cos(sun.declination) * math.sin(moon.declination) * math.cos(delta_ra),
    )
    sign = -1 if angle < 0 else 1
    return MoonPhase(
        illuminated_fraction=(1 + math.cos(inc)) / 2,
        # exact new moon gives 1.0, which is the same phase as 0.0
        phase_fraction=(0.5 + 0.5 * inc * sign / math.pi) % 1.0,
        bright_limb_angle=angle,
    )


def moon_illumination(dt: datetime) -> MoonPhase:
    """Illuminated fraction, phase and bright-limb angle of the Moon at *dt*."""

    days = days_since_j2000(dt)
    return phase_from_coords(sun_coords(days), moon_coords(days))
