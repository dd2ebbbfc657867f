"""Low-precision Sun and Moon positions, rise/set times and lunar phase."""

from .coords import DomainError
from .datatypes import (
    DEFAULT_SUN_TIMES,
    EquatorialCoordinates,
    GeographicPosition,
    HorizontalCoordinates,
    MoonPhase,
    RiseSetKind,
    RiseSetResult,
    SunDayStatus,
    SunDayTimes,
    SunTimeThreshold,
)
from .moon import moon_coords, moon_position, moon_times
from .phase import moon_illumination
from .solver import find_rise_set
from .sun import sun_coords, sun_event, sun_position, sun_times
from .timeconv import days_since_j2000, from_julian, hours_later, to_julian

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_SUN_TIMES",
    "DomainError",
    "EquatorialCoordinates",
    "GeographicPosition",
    "HorizontalCoordinates",
    "MoonPhase",
    "RiseSetKind",
    "RiseSetResult",
    "SunDayStatus",
    "SunDayTimes",
    "SunTimeThreshold",
    "days_since_j2000",
    "find_rise_set",
    "from_julian",
    "hours_later",
    "moon_coords",
    "moon_illumination",
    "moon_position",
    "moon_times",
    "sun_coords",
    "sun_event",
    "sun_position",
    "sun_times",
    "to_julian",
]
