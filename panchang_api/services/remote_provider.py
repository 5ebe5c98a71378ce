"""Longitude and rise/set providers served by a remote astrology HTTP API."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from ..errors import UpstreamUnavailableError
from ..schemas.ephemeris import LongitudeReading, RiseSetTimes


logger = logging.getLogger(__name__)

LONGITUDES_PATH = "/v1/ephemeris/longitudes"
RISE_SET_PATH = "/v1/ephemeris/rise-set"


class RemoteEphemerisClient:
    """Implements both ephemeris provider interfaces over HTTP JSON.

    Requests run in a worker thread so the event loop keeps serving the other
    days of a month while one call is in flight.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"Content-Type": "application/json"}
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"

    def _post(self, provider: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            r = self._session.post(
                f"{self.base_url}{path}", json=payload, headers=self._headers, timeout=self.timeout
            )
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as exc:
            raise UpstreamUnavailableError(provider, str(exc)) from exc
        except ValueError as exc:
            raise UpstreamUnavailableError(provider, f"invalid JSON body: {exc}") from exc
        if not isinstance(data, dict):
            raise UpstreamUnavailableError(provider, "expected a JSON object")
        return data

    async def get_longitudes(
        self, instant_utc: datetime, latitude: float, longitude: float
    ) -> LongitudeReading:
        payload = {
            "instant_utc": instant_utc.astimezone(timezone.utc).isoformat(),
            "lat": latitude,
            "lon": longitude,
        }
        data = await asyncio.to_thread(self._post, "longitude", LONGITUDES_PATH, payload)
        try:
            return LongitudeReading.model_validate(data)
        except ValidationError as exc:
            logger.warning("ephemeris.remote.malformed", extra={"path": LONGITUDES_PATH})
            raise UpstreamUnavailableError("longitude", f"malformed payload: {exc}") from exc

    async def compute(
        self, day: date, latitude: float, longitude: float, timezone_id: str
    ) -> RiseSetTimes:
        payload = {
            "date": day.isoformat(),
            "lat": latitude,
            "lon": longitude,
            "tz": timezone_id,
        }
        data = await asyncio.to_thread(self._post, "rise_set", RISE_SET_PATH, payload)
        try:
            return RiseSetTimes.model_validate(data)
        except ValidationError as exc:
            logger.warning("ephemeris.remote.malformed", extra={"path": RISE_SET_PATH})
            raise UpstreamUnavailableError("rise_set", f"malformed payload: {exc}", day=day) from exc
