import asyncio
from datetime import date, datetime, timezone

import pytest
import requests

from panchang_api.errors import UpstreamUnavailableError
from panchang_api.services.remote_provider import RemoteEphemerisClient


class FakeResponse:
    def __init__(self, payload=None, status=200, body_error=None):
        self._payload = payload
        self.status_code = status
        self._body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._body_error is not None:
            raise self._body_error
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


INSTANT = datetime(2026, 1, 14, 0, 45, tzinfo=timezone.utc)


def _longitudes(session, **kwargs):
    client = RemoteEphemerisClient("https://ephemeris.example/", session=session, **kwargs)
    return asyncio.run(client.get_longitudes(INSTANT, 28.6, 77.2))


def test_longitudes_accept_camel_case_payload():
    session = FakeSession(FakeResponse({
        "sunLongitudeDeg": 260.5,
        "moonLongitudeDeg": 15.3,
        "moonNakshatraName": "Bharani",
        "moonPadaNumber": 1,
        "ayanamsha": "lahiri",
    }))
    reading = _longitudes(session, api_key="secret", timeout=5.0)

    assert reading.sun_longitude_deg == 260.5
    assert reading.moon_nakshatra_name == "Bharani"
    sent = session.requests[0]
    assert sent["url"] == "https://ephemeris.example/v1/ephemeris/longitudes"
    assert sent["json"] == {"instant_utc": "2026-01-14T00:45:00+00:00", "lat": 28.6, "lon": 77.2}
    assert sent["headers"]["Authorization"] == "Bearer secret"
    assert sent["timeout"] == 5.0


def test_longitudes_accept_snake_case_payload():
    session = FakeSession(FakeResponse({
        "sun_longitude_deg": 10.0,
        "moon_longitude_deg": 40.0,
        "moon_nakshatra_name": "Krittika",
        "moon_pada_number": 4,
    }))
    reading = _longitudes(session)
    assert reading.moon_pada_number == 4
    assert "Authorization" not in session.requests[0]["headers"]


@pytest.mark.parametrize(
    "payload",
    [
        {"sunLongitudeDeg": "nan", "moonLongitudeDeg": 1.0, "moonNakshatraName": "Ashwini", "moonPadaNumber": 1},
        {"sunLongitudeDeg": 1.0, "moonLongitudeDeg": 1.0, "moonNakshatraName": "Ashwini", "moonPadaNumber": 5},
        {"sunLongitudeDeg": 1.0},
        ["not", "an", "object"],
    ],
)
def test_malformed_longitude_payload_is_upstream_failure(payload):
    with pytest.raises(UpstreamUnavailableError) as info:
        _longitudes(FakeSession(FakeResponse(payload)))
    assert info.value.provider == "longitude"


def test_http_error_is_upstream_failure():
    with pytest.raises(UpstreamUnavailableError) as info:
        _longitudes(FakeSession(FakeResponse({}, status=503)))
    assert "503" in info.value.reason


def test_connection_error_is_upstream_failure():
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    with pytest.raises(UpstreamUnavailableError) as info:
        _longitudes(session)
    assert "connection refused" in info.value.reason


def test_invalid_json_body_is_upstream_failure():
    session = FakeSession(FakeResponse(body_error=ValueError("Expecting value")))
    with pytest.raises(UpstreamUnavailableError) as info:
        _longitudes(session)
    assert info.value.reason.startswith("invalid JSON body")


def test_rise_set_payload_and_request():
    session = FakeSession(FakeResponse({
        "sunrise": "2026-01-14T07:14:00+05:30",
        "sunset": "2026-01-14T17:49:00+05:30",
        "moonrise": None,
        "rahuKalam": "08:33 - 09:53",
        "yama_gandha": "11:12 - 12:31",
    }))
    client = RemoteEphemerisClient("https://ephemeris.example", session=session)
    times = asyncio.run(client.compute(date(2026, 1, 14), 28.6, 77.2, "Asia/Kolkata"))

    assert times.sunrise.hour == 7
    assert times.moonrise is None
    assert times.rahu_kalam == "08:33 - 09:53"
    assert times.yama_gandha == "11:12 - 12:31"
    assert times.gulika_kalam is None
    sent = session.requests[0]
    assert sent["url"].endswith("/v1/ephemeris/rise-set")
    assert sent["json"] == {"date": "2026-01-14", "lat": 28.6, "lon": 77.2, "tz": "Asia/Kolkata"}


def test_malformed_rise_set_names_the_day():
    session = FakeSession(FakeResponse({"sunrise": "not a time"}))
    client = RemoteEphemerisClient("https://ephemeris.example", session=session)
    with pytest.raises(UpstreamUnavailableError) as info:
        asyncio.run(client.compute(date(2026, 1, 14), 28.6, 77.2, "Asia/Kolkata"))
    assert info.value.provider == "rise_set"
    assert info.value.day == date(2026, 1, 14)
