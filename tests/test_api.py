from __future__ import annotations

from pathlib import Path
from typing import Iterable

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient

PITTSBURGH = {"lat": 40.4291, "lon": -79.9229}


@pytest.fixture(scope="module")
def api_client() -> Iterable[TestClient]:
    from astro_api import app

    with TestClient(app) as client:
        yield client


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["engine"] == "low-precision"
    assert payload["version"]


def test_sun_pittsburgh_solstice(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun", params={**PITTSBURGH, "date": "2015-06-21", "offset_hours": -4}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["twilight"] == "official"
    assert payload["sunrise_local"].startswith("2015-06-21T05:")
    assert payload["sunset_local"].startswith("2015-06-21T20:")
    assert payload["sunrise_utc"].endswith("Z")
    assert payload["sunrise_utc"] < payload["solar_noon_utc"] < payload["sunset_utc"]
    assert {"dawn", "dusk", "goldenHourStart"} <= set(payload["times"])


def test_sun_civil_twilight_starts_earlier(api_client: TestClient) -> None:
    params = {**PITTSBURGH, "date": "2015-06-21", "offset_hours": -4}
    official = api_client.get("/sun", params=params).json()
    civil = api_client.get("/sun", params={**params, "twilight": "civil"}).json()
    assert civil["twilight"] == "civil"
    assert civil["sunrise_utc"] < official["sunrise_utc"]
    assert civil["sunset_utc"] > official["sunset_utc"]


def test_polar_day_svalbard(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={"lat": 78.2232, "lon": 15.6469, "date": "2025-06-21", "twilight": "civil"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "polar_day"
    assert payload["sunrise_utc"] is None
    assert payload["sunset_utc"] is None


def test_validation_error(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={
            "lat": 95,  # invalid latitude
            "lon": 0,
            "date": "2015-06-21",
        },
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["ok"] is False


def test_offset_out_of_range(api_client: TestClient) -> None:
    response = api_client.get(
        "/moon", params={**PITTSBURGH, "date": "2015-06-21", "offset_hours": 30}
    )
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_sun_position_near_transit(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/position", params={**PITTSBURGH, "at": "2015-06-21T17:18:00Z"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["altitude_deg"] > 70.0
    assert payload["azimuth_deg"] == pytest.approx(180.0, abs=10.0)
    assert payload["declination_deg"] == pytest.approx(23.4, abs=0.5)
    assert payload["distance_km"] is None


def test_moon_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/moon", params={**PITTSBURGH, "date": "2015-06-21", "offset_hours": -4}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["kind"] in {"both", "rise_only", "set_only"}
    assert payload["always_above"] is False
    assert payload["always_below"] is False
    if payload["moonrise_local"] is not None:
        assert payload["moonrise_local"].endswith("-04:00")


def test_moon_position(api_client: TestClient) -> None:
    response = api_client.get(
        "/moon/position", params={**PITTSBURGH, "at": "2015-06-21T03:00:00"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["at_utc"] == "2015-06-21T03:00:00Z"
    assert 364000.0 <= payload["distance_km"] <= 406000.0
    assert -90.0 <= payload["altitude_deg"] <= 90.0
    assert 0.0 <= payload["azimuth_deg"] < 360.0


def test_moon_phase(api_client: TestClient) -> None:
    response = api_client.get("/moon/phase", params={"at": "2015-09-28T02:50:00Z"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["phase_name"] == "full moon"
    assert payload["illuminated_fraction"] > 0.98
