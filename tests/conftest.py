import asyncio
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

import pytest

from panchang_api.schemas.ephemeris import LongitudeReading, RiseSetTimes
from panchang_api.services.calendar_facade import PanchangCalendar


class FakeLongitudes:
    """Sun fixed at 0°, Moon advancing 12° per UTC day so each date has its own tithi."""

    def __init__(self) -> None:
        self.calls: List[datetime] = []
        self.fail_on: Optional[date] = None
        self.sun: Optional[float] = None
        self.moon: Optional[float] = None

    async def get_longitudes(self, instant_utc, latitude, longitude):
        self.calls.append(instant_utc)
        if self.fail_on is not None and instant_utc.date() == self.fail_on:
            raise RuntimeError("ephemeris offline")
        sun = self.sun if self.sun is not None else 0.0
        moon = self.moon if self.moon is not None else (instant_utc.day - 1) * 12.0 + 1.0
        return LongitudeReading(
            sun_longitude_deg=sun,
            moon_longitude_deg=moon,
            moon_nakshatra_name="Pushya",
            moon_pada_number=2,
        )


class FakeRiseSet:
    """Sunrise 06:15 and sunset 18:15 local; optional per-day delays and gate."""

    def __init__(self) -> None:
        self.calls: List[date] = []
        self.no_sunrise = False
        self.reverse_delays = False
        self.gate: Optional[asyncio.Event] = None

    async def compute(self, day, latitude, longitude, timezone_id):
        self.calls.append(day)
        if self.gate is not None:
            await self.gate.wait()
        if self.reverse_delays:
            await asyncio.sleep((32 - day.day) * 0.001)
        tz = ZoneInfo(timezone_id)
        if self.no_sunrise:
            return RiseSetTimes()
        return RiseSetTimes(
            sunrise=datetime.combine(day, time(6, 15), tzinfo=tz),
            sunset=datetime.combine(day, time(18, 15), tzinfo=tz),
            moonset=datetime.combine(day, time(9, 5), tzinfo=tz),
            rahu_kalam="07:45 - 09:15",
            yama_gandha="10:45 - 12:15",
            gulika_kalam="13:45 - 15:15",
        )


class FakeFestivals:
    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.fail = False
        self.by_month: Dict[int, Dict[int, List[str]]] = {
            1: {14: ["Makar Sankranti", "Pongal"], 23: ["Vasant Panchami"]},
            3: {4: ["Holi"]},
        }

    async def get_festivals_for_month(self, year, month, region, latitude, longitude):
        self.calls.append((year, month, region))
        if self.fail:
            raise RuntimeError("feed unavailable")
        return self.by_month.get(month, {})


class MutableClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def longitudes():
    return FakeLongitudes()


@pytest.fixture
def rise_set():
    return FakeRiseSet()


@pytest.fixture
def festivals():
    return FakeFestivals()


@pytest.fixture
def clock():
    return MutableClock(datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def panchang_calendar(longitudes, rise_set, festivals, clock):
    return PanchangCalendar(longitudes, rise_set, festivals, clock=clock, max_concurrency=4)
