"""Conversions between datetimes, Julian days and days since J2000.0."""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta

import erfa

__all__ = [
    "DAY_SECONDS",
    "J1970",
    "J2000",
    "day_start",
    "days_since_j2000",
    "from_julian",
    "hours_later",
    "require_aware",
    "to_julian",
]

DAY_SECONDS = erfa.DAYSEC
J1970 = 2440588.0  # Julian day of the Unix epoch, offset by half a day.
J2000 = erfa.DJ00


def require_aware(dt: datetime) -> datetime:
    """Return *dt* unchanged, rejecting naive datetimes."""

    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def to_julian(dt: datetime) -> float:
    """Number of days since the beginning of the Julian Period."""

    return require_aware(dt).timestamp() / DAY_SECONDS - 0.5 + J1970


def from_julian(julian_days: float) -> datetime:
    """UTC datetime of a Julian day number."""

    return datetime.fromtimestamp((julian_days + 0.5 - J1970) * DAY_SECONDS, tz=UTC)


def days_since_j2000(dt: datetime) -> float:
    return to_julian(dt) - J2000


def hours_later(dt: datetime, hours: float) -> datetime:
    """Offset *dt* by a number of hours of absolute time.

    No calendar arithmetic is involved: the result is always exactly
    ``hours * 3600`` seconds after *dt*, regardless of DST transitions.
    """

    return (require_aware(dt).astimezone(UTC) + timedelta(hours=hours)).astimezone(dt.tzinfo)


def day_start(dt: datetime) -> datetime:
    """Midnight of the civil day containing *dt*, in *dt*'s own timezone."""

    require_aware(dt)
    return datetime.combine(dt.date(), time.min, tzinfo=dt.tzinfo)
