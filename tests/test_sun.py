from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import erfa
import numpy as np
import pytest

from astrocalc.datatypes import (
    GeographicPosition,
    RiseSetKind,
    SunDayStatus,
    SunTimeThreshold,
)
from astrocalc.sun import sun_coords, sun_event, sun_position, sun_times
from astrocalc.timeconv import days_since_j2000, to_julian

PITTSBURGH = GeographicPosition(latitude=40.4291, longitude=-79.9229)
SVALBARD = GeographicPosition(latitude=78.2232, longitude=15.6469)
EQUATOR = GeographicPosition(latitude=0.0, longitude=0.0)
EDT = timezone(timedelta(hours=-4))


def _declination_deg(dt: datetime) -> float:
    return math.degrees(sun_coords(days_since_j2000(dt)).declination)


@pytest.mark.parametrize(
    "dt,expected,tolerance",
    [
        (datetime(2015, 3, 20, 12, tzinfo=UTC), 0.0, 1.0),
        (datetime(2015, 6, 21, 12, tzinfo=UTC), 23.4, 0.5),
        (datetime(2015, 12, 22, 12, tzinfo=UTC), -23.4, 0.5),
    ],
)
def test_solar_declination_at_equinox_and_solstices(dt, expected, tolerance):
    assert _declination_deg(dt) == pytest.approx(expected, abs=tolerance)


def _erfa_sun_direction(dt: datetime) -> tuple[float, float]:
    # reversed heliocentric Earth position, ICRS axes (precession ignored)
    pvh, _ = erfa.epv00(to_julian(dt), 0.0)
    ra, dec = erfa.c2s(-np.asarray(pvh[0]))
    return float(ra), float(dec)


def test_sun_coords_track_erfa_over_a_year():
    tolerance = math.radians(0.1)
    start = datetime(2015, 1, 1, tzinfo=UTC)
    for step in range(0, 366, 10):
        dt = start + timedelta(days=step)
        coords = sun_coords(days_since_j2000(dt))
        ra, dec = _erfa_sun_direction(dt)

        ra_diff = (coords.right_ascension - ra + math.pi) % (2 * math.pi) - math.pi
        assert abs(ra_diff) <= tolerance, dt
        assert abs(coords.declination - dec) <= tolerance, dt


def test_pittsburgh_solstice_day():
    local_noon = datetime(2015, 6, 21, 12, tzinfo=EDT)
    day = sun_times(local_noon, PITTSBURGH)

    assert day.status is SunDayStatus.ok
    assert day.rise is not None and day.set is not None
    assert day.rise < day.solar_noon < day.set
    assert abs((day.solar_noon - day.nadir) - timedelta(hours=12)) <= timedelta(milliseconds=1)

    # rise and set belong to the same local civil day
    assert day.rise.astimezone(EDT).date() == local_noon.date()
    assert day.set.astimezone(EDT).date() == local_noon.date()

    day_length = day.set - day.rise
    assert timedelta(hours=14, minutes=30) <= day_length <= timedelta(hours=15, minutes=30)


def test_altitude_at_solar_noon():
    day = sun_times(datetime(2015, 6, 21, 12, tzinfo=EDT), PITTSBURGH)
    noon_position = sun_position(day.solar_noon, PITTSBURGH)
    expected = 90.0 - abs(40.4291 - _declination_deg(day.solar_noon))
    assert math.degrees(noon_position.altitude) == pytest.approx(expected, abs=2.0)
    assert noon_position.altitude == pytest.approx(math.radians(90.0 - abs(40.4291 - 23.4)), abs=math.radians(3.0))
    # on the meridian, due south
    assert math.degrees(noon_position.azimuth) == pytest.approx(0.0, abs=3.0)


def test_rise_and_set_are_symmetric_around_noon():
    day = sun_times(datetime(2015, 6, 21, 12, tzinfo=EDT), PITTSBURGH)
    morning = day.solar_noon - day.rise
    evening = day.set - day.solar_noon
    assert abs(morning - evening) <= timedelta(milliseconds=1)


def test_named_times_are_ordered():
    times = sun_times(datetime(2015, 6, 21, 12, tzinfo=EDT), PITTSBURGH).times
    morning = ["nightEnd", "nauticalDawn", "dawn", "sunriseStart", "sunriseEnd", "goldenHourEnd"]
    evening = ["goldenHourStart", "sunsetStart", "sunsetEnd", "dusk", "nauticalDusk", "nightStart"]
    for earlier, later in zip(morning + evening, (morning + evening)[1:]):
        assert times[earlier] < times[later], (earlier, later)


def test_headline_rise_uses_sunrise_end_altitude():
    day = sun_times(datetime(2015, 6, 21, 12, tzinfo=EDT), PITTSBURGH)
    assert day.rise == day.times["sunriseEnd"]
    assert day.set == day.times["sunsetStart"]


def test_custom_threshold_table():
    noon = datetime(2015, 6, 21, 12, tzinfo=EDT)
    day = sun_times(noon, PITTSBURGH, thresholds=[SunTimeThreshold(-3.0, "blueStart", "blueEnd")])
    assert set(day.times) == {"blueStart", "blueEnd"}
    assert day.times["blueStart"] < day.solar_noon < day.times["blueEnd"]


def test_polar_day_svalbard():
    day = sun_times(datetime(2025, 6, 21, 12, tzinfo=UTC), SVALBARD)
    assert day.status is SunDayStatus.polar_day
    assert day.rise is None
    assert day.set is None
    assert day.times == {}


def test_polar_night_svalbard():
    day = sun_times(datetime(2025, 12, 21, 12, tzinfo=UTC), SVALBARD)
    assert day.status is SunDayStatus.polar_night
    assert day.rise is None and day.set is None
    # nautical and astronomical twilight still happen
    assert "nauticalDawn" in day.times
    assert "nightEnd" in day.times
    assert "dawn" not in day.times


def test_sun_event_tagged_results():
    summer = sun_event(datetime(2025, 6, 21, 12, tzinfo=UTC), SVALBARD, -0.833)
    winter = sun_event(datetime(2025, 12, 21, 12, tzinfo=UTC), SVALBARD, -0.833)
    assert summer.kind is RiseSetKind.always_above and summer.always_above
    assert winter.kind is RiseSetKind.always_below and winter.always_below
    assert summer.rise is None and winter.set is None

    ok = sun_event(datetime(2015, 6, 21, 12, tzinfo=EDT), PITTSBURGH, -6.0)
    assert ok.kind is RiseSetKind.both
    assert ok.rise < ok.set


def test_equator_equinox_day_is_twelve_hours():
    day = sun_times(datetime(2015, 3, 20, 12, tzinfo=UTC), EQUATOR)
    # -0.3 degrees adds a couple of minutes on each side
    assert timedelta(hours=12) <= day.set - day.rise <= timedelta(hours=12, minutes=10)
    assert day.solar_noon.hour in (11, 12)


def test_naive_datetime_rejected():
    with pytest.raises(ValueError):
        sun_times(datetime(2015, 6, 21, 12), PITTSBURGH)
