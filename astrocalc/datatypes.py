"""Value types shared by the ephemerides, the event solver and the API."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

__all__ = [
    "AltitudeSample",
    "DEFAULT_SUN_TIMES",
    "EquatorialCoordinates",
    "GeographicPosition",
    "HorizontalCoordinates",
    "MoonPhase",
    "RiseSetKind",
    "RiseSetResult",
    "SunDayStatus",
    "SunDayTimes",
    "SunTimeThreshold",
]


@dataclass(frozen=True)
class GeographicPosition:
    """Observer location in degrees, north and east positive.

    The ephemeris formulas work with longitude measured *west* of Greenwich.
    :attr:`lw` is the only place where that sign flip happens.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")

    @property
    def phi(self) -> float:
        """Latitude in radians."""
        return math.radians(self.latitude)

    @property
    def lw(self) -> float:
        """Longitude west of the prime meridian, in radians."""
        return math.radians(-self.longitude)


@dataclass(frozen=True)
class EquatorialCoordinates:
    """Geocentric equatorial coordinates of date, in radians."""

    declination: float
    right_ascension: float
    distance: Optional[float] = None  # km, Moon only


@dataclass(frozen=True)
class HorizontalCoordinates:
    """Altitude and azimuth in radians.

    Azimuth is measured from South towards West; use
    :meth:`azimuth_from_north` for the usual North-through-East bearing.
    """

    altitude: float
    azimuth: float
    distance: Optional[float] = None
    parallactic_angle: Optional[float] = None

    def azimuth_from_north(self) -> float:
        return (self.azimuth + math.pi) % (2 * math.pi)


@dataclass(frozen=True)
class AltitudeSample:
    hours: float
    altitude: float


class RiseSetKind(str, Enum):
    """Outcome of a rise/set search over one day."""

    both = "both"
    rise_only = "rise_only"
    set_only = "set_only"
    always_above = "always_above"
    always_below = "always_below"


@dataclass(frozen=True)
class RiseSetResult:
    kind: RiseSetKind
    rise: Optional[datetime] = None
    set: Optional[datetime] = None

    def __post_init__(self) -> None:
        has_rise = self.kind in (RiseSetKind.both, RiseSetKind.rise_only)
        has_set = self.kind in (RiseSetKind.both, RiseSetKind.set_only)
        if has_rise != (self.rise is not None) or has_set != (self.set is not None):
            raise ValueError(f"rise/set do not match result kind {self.kind.value}")

    @classmethod
    def from_events(
        cls, rise: Optional[datetime], set: Optional[datetime]
    ) -> "RiseSetResult":
        if rise is not None and set is not None:
            return cls(RiseSetKind.both, rise, set)
        if rise is not None:
            return cls(RiseSetKind.rise_only, rise=rise)
        if set is not None:
            return cls(RiseSetKind.set_only, set=set)
        raise ValueError("at least one event is required; use always_above/always_below")

    @classmethod
    def always_above_result(cls) -> "RiseSetResult":
        return cls(RiseSetKind.always_above)

    @classmethod
    def always_below_result(cls) -> "RiseSetResult":
        return cls(RiseSetKind.always_below)

    @property
    def always_above(self) -> bool:
        return self.kind is RiseSetKind.always_above

    @property
    def always_below(self) -> bool:
        return self.kind is RiseSetKind.always_below


_PHASE_NAMES: Tuple[str, ...] = (
    "new moon",
    "waxing crescent",
    "first quarter",
    "waxing gibbous",
    "full moon",
    "waning gibbous",
    "last quarter",
    "waning crescent",
)


@dataclass(frozen=True)
class MoonPhase:
    """Illumination parameters of the Moon.

    ``phase_fraction`` runs from 0 (new) through 0.5 (full) back towards 1;
    values below 0.5 are waxing. ``bright_limb_angle`` is the position angle
    of the midpoint of the illuminated limb, in radians.
    """

    illuminated_fraction: float
    phase_fraction: float
    bright_limb_angle: float

    @property
    def name(self) -> str:
        index = int(math.floor(self.phase_fraction * 8 + 0.5)) % 8
        return _PHASE_NAMES[index]


class SunDayStatus(str, Enum):
    ok = "ok"
    polar_day = "polar_day"
    polar_night = "polar_night"


@dataclass(frozen=True)
class SunTimeThreshold:
    """Sun altitude (degrees) and the labels of its morning/evening crossings."""

    altitude: float
    before_noon: str
    after_noon: str


DEFAULT_SUN_TIMES: Tuple[SunTimeThreshold, ...] = (
    SunTimeThreshold(-0.833, "sunriseStart", "sunsetEnd"),
    SunTimeThreshold(-0.3, "sunriseEnd", "sunsetStart"),
    SunTimeThreshold(-6.0, "dawn", "dusk"),
    SunTimeThreshold(-12.0, "nauticalDawn", "nauticalDusk"),
    SunTimeThreshold(-18.0, "nightEnd", "nightStart"),
    SunTimeThreshold(6.0, "goldenHourEnd", "goldenHourStart"),
)


@dataclass(frozen=True)
class SunDayTimes:
    solar_noon: datetime
    nadir: datetime
    status: SunDayStatus
    rise: Optional[datetime] = None
    set: Optional[datetime] = None
    times: Dict[str, datetime] = field(default_factory=dict)
