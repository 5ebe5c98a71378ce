"""Interfaces of the collaborators the calendar depends on."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Protocol

from ..schemas.calendar import RegionalCalendar
from ..schemas.ephemeris import LongitudeReading, RiseSetTimes


class LongitudeProvider(Protocol):
    async def get_longitudes(
        self, instant_utc: datetime, latitude: float, longitude: float
    ) -> LongitudeReading:
        ...


class RiseSetProvider(Protocol):
    async def compute(
        self, day: date, latitude: float, longitude: float, timezone_id: str
    ) -> RiseSetTimes:
        ...


class FestivalProvider(Protocol):
    async def get_festivals_for_month(
        self,
        year: int,
        month: int,
        region: RegionalCalendar,
        latitude: float,
        longitude: float,
    ) -> Dict[int, List[str]]:
        """Festival names keyed by day of month."""
        ...
