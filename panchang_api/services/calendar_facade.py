"""Month and year calendar views with single-slot caching of the current period.

Only the month (or year) that contains ``now`` is cached, until the last
second of that period. Other periods are always recomputed and never stored.
"""

from __future__ import annotations

import asyncio
import calendar
import logging
import math
import time
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .. import config
from ..errors import CacheConsistencyError, InvalidInputError, UpstreamUnavailableError
from ..schemas.calendar import DayRecord, MonthView, RegionalCalendar, YearView
from . import ephem
from .day_assembler import DayAssembler
from .festivals import FestivalFeed
from .panchang_elements import KARANA_SEQUENCE, karana_table
from .period_cache import SingleSlotCache, month_end, year_end
from .providers import FestivalProvider, LongitudeProvider, RiseSetProvider
from .remote_provider import RemoteEphemerisClient
from .swiss_providers import SwissEphemerisLongitudes, SwissEphemerisRiseSet


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
MonthKey = Tuple[int, int, RegionalCalendar, float, float, str]
YearKey = Tuple[int, RegionalCalendar, float, float]


def default_clock() -> datetime:
    tz_name = config.calendar_tz()
    if tz_name:
        return datetime.now(ZoneInfo(tz_name))
    return datetime.now().astimezone()


def _month_matches(key: MonthKey, view: MonthView) -> bool:
    return (view.year, view.month, view.region, view.latitude, view.longitude, view.timezone_id) == key


def _year_matches(key: YearKey, view: YearView) -> bool:
    return (view.year, view.region) == key[:2]


def _region(value: Union[RegionalCalendar, str]) -> RegionalCalendar:
    try:
        return RegionalCalendar(value)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown regional calendar: {value!r}") from exc


def _check_place(latitude: float, longitude: float) -> None:
    if not (math.isfinite(latitude) and -90.0 <= latitude <= 90.0):
        raise InvalidInputError(f"Latitude out of range: {latitude!r}")
    if not (math.isfinite(longitude) and -180.0 <= longitude <= 180.0):
        raise InvalidInputError(f"Longitude out of range: {longitude!r}")


def _check_year(year: int) -> None:
    if not 1 <= year <= 9999:
        raise InvalidInputError(f"Year out of range: {year!r}")


def _check_timezone(timezone_id: str) -> None:
    try:
        ZoneInfo(timezone_id)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInputError(f"Invalid timezone: {timezone_id}") from exc


class PanchangCalendar:
    def __init__(
        self,
        longitude_provider: LongitudeProvider,
        rise_set_provider: RiseSetProvider,
        festival_provider: FestivalProvider,
        clock: Optional[Clock] = None,
        karana_table: Sequence[str] = KARANA_SEQUENCE,
        max_concurrency: int = 8,
    ) -> None:
        self.festival_provider = festival_provider
        self.clock = clock or default_clock
        self.max_concurrency = max(1, max_concurrency)
        self._assembler = DayAssembler(longitude_provider, rise_set_provider, karana_table)
        self._month_cache: SingleSlotCache[MonthKey, MonthView] = SingleSlotCache("month", _month_matches)
        self._year_cache: SingleSlotCache[YearKey, YearView] = SingleSlotCache("year", _year_matches)

    def _cached(self, cache: SingleSlotCache, key, now: datetime):
        try:
            return cache.get(key, now)
        except CacheConsistencyError as exc:
            logger.error("panchang.cache.inconsistent", extra={"cache": cache.name, "error": str(exc)})
            return None

    async def _festivals_for_month(
        self, year: int, month: int, region: RegionalCalendar, latitude: float, longitude: float
    ) -> Dict[int, List[str]]:
        try:
            return await self.festival_provider.get_festivals_for_month(
                year, month, region, latitude, longitude
            )
        except UpstreamUnavailableError:
            raise
        except Exception as exc:
            raise UpstreamUnavailableError("festival", f"{year}-{month:02d}: {exc}") from exc

    async def get_month_panchang(
        self,
        year: int,
        month: int,
        region: Union[RegionalCalendar, str],
        latitude: float,
        longitude: float,
        timezone_id: str,
    ) -> MonthView:
        region = _region(region)
        _check_year(year)
        if not 1 <= month <= 12:
            raise InvalidInputError(f"Month out of range: {month!r}")
        _check_place(latitude, longitude)
        _check_timezone(timezone_id)

        now = self.clock()
        key: MonthKey = (year, month, region, latitude, longitude, timezone_id)
        cached = self._cached(self._month_cache, key, now)
        if cached is not None:
            logger.debug("panchang.month.cache_hit", extra={"year": year, "month": month, "region": region.value})
            return cached

        start = time.time()
        festivals_by_day = await self._festivals_for_month(year, month, region, latitude, longitude)
        days = await self._assemble_days(year, month, latitude, longitude, timezone_id, festivals_by_day)
        view = MonthView(
            year=year,
            month=month,
            region=region,
            latitude=latitude,
            longitude=longitude,
            timezone_id=timezone_id,
            days=days,
        )
        logger.info(
            "panchang.month.computed",
            extra={
                "year": year,
                "month": month,
                "region": region.value,
                "days": len(days),
                "elapsed_ms": round((time.time() - start) * 1000, 2),
            },
        )

        if (year, month) == (now.year, now.month):
            self._month_cache.put(key, view, month_end(now))
        return view

    async def _assemble_days(
        self,
        year: int,
        month: int,
        latitude: float,
        longitude: float,
        timezone_id: str,
        festivals_by_day: Dict[int, List[str]],
    ) -> List[DayRecord]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _one(day: date) -> DayRecord:
            async with semaphore:
                return await self._assembler.assemble(day, latitude, longitude, timezone_id, festivals_by_day)

        last_day = calendar.monthrange(year, month)[1]
        tasks = [asyncio.ensure_future(_one(date(year, month, d))) for d in range(1, last_day + 1)]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # One failed day fails the month; stop the rest before propagating.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def get_year_festival_names(
        self,
        year: int,
        region: Union[RegionalCalendar, str],
        latitude: float,
        longitude: float,
    ) -> YearView:
        region = _region(region)
        _check_year(year)
        _check_place(latitude, longitude)

        now = self.clock()
        key: YearKey = (year, region, latitude, longitude)
        cached = self._cached(self._year_cache, key, now)
        if cached is not None:
            return cached

        monthly = await asyncio.gather(
            *(self._festivals_for_month(year, m, region, latitude, longitude) for m in range(1, 13))
        )
        festivals_by_month: Dict[int, List[str]] = {}
        for month, by_day in enumerate(monthly, start=1):
            names = [name for day in sorted(by_day) for name in by_day[day]]
            if names:
                festivals_by_month[month] = names

        view = YearView(year=year, region=region, festivals_by_month=festivals_by_month)
        if year == now.year:
            self._year_cache.put(key, view, year_end(now))
        return view


def build_calendar() -> PanchangCalendar:
    """Composition root: wire the configured providers into a calendar."""
    provider = config.ephemeris_provider()
    if provider == "remote":
        client = RemoteEphemerisClient(
            config.ephemeris_api_url(),
            api_key=config.ephemeris_api_key(),
            timeout=config.ephemeris_api_timeout(),
        )
        longitudes, rise_set = client, client
    elif provider == "swisseph":
        ephem.init_paths(config.ephe_path())
        longitudes = SwissEphemerisLongitudes(config.ayanamsha())
        rise_set = SwissEphemerisRiseSet()
    else:
        raise ValueError(f"Unknown EPHEMERIS_PROVIDER: {provider}")

    logger.info(
        "panchang.calendar.configured",
        extra={"provider": provider, "karana_table": config.karana_table_name()},
    )
    return PanchangCalendar(
        longitudes,
        rise_set,
        FestivalFeed.from_path(config.festival_feed_path(), config.ayanamsha()),
        karana_table=karana_table(config.karana_table_name()),
        max_concurrency=config.max_concurrency(),
    )
