"""Assemble one calendar day's panchang record.

The day is anchored at local sunrise (local midnight when the location has no
sunrise that day). Sun and Moon longitudes at the anchor give tithi, yoga and
karana; nakshatra and pada come straight from the longitude provider.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time as time_cls, timezone
from typing import Awaitable, List, Mapping, Optional, Sequence, TypeVar
from zoneinfo import ZoneInfo

from ..errors import UpstreamUnavailableError
from ..schemas.calendar import DayRecord
from .muhurta import format_hhmm
from .panchang_elements import KARANA_SEQUENCE, compute_elements
from .providers import LongitudeProvider, RiseSetProvider


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _local(moment: datetime, tz: ZoneInfo) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def _fmt(moment: Optional[datetime], tz: ZoneInfo) -> str:
    return format_hhmm(_local(moment, tz)) if moment else ""


async def _guarded(provider: str, day: date, call: Awaitable[T]) -> T:
    try:
        return await call
    except UpstreamUnavailableError as exc:
        if exc.day is None:
            raise UpstreamUnavailableError(exc.provider, exc.reason, day=day) from exc
        raise
    except Exception as exc:
        raise UpstreamUnavailableError(provider, str(exc) or type(exc).__name__, day=day) from exc


class DayAssembler:
    def __init__(
        self,
        longitude_provider: LongitudeProvider,
        rise_set_provider: RiseSetProvider,
        karana_table: Sequence[str] = KARANA_SEQUENCE,
    ) -> None:
        self.longitude_provider = longitude_provider
        self.rise_set_provider = rise_set_provider
        self.karana_table = karana_table

    async def assemble(
        self,
        day: date,
        latitude: float,
        longitude: float,
        timezone_id: str,
        festivals_by_day: Mapping[int, List[str]],
    ) -> DayRecord:
        tz = ZoneInfo(timezone_id)
        rise_set = await _guarded(
            "rise_set", day, self.rise_set_provider.compute(day, latitude, longitude, timezone_id)
        )

        if rise_set.sunrise is not None:
            anchor = _local(rise_set.sunrise, tz)
        else:
            logger.info(
                "panchang.day.no_sunrise",
                extra={"date": day.isoformat(), "lat": latitude, "lon": longitude, "tz": timezone_id},
            )
            anchor = datetime.combine(day, time_cls(0, 0), tzinfo=tz)

        reading = await _guarded(
            "longitude",
            day,
            self.longitude_provider.get_longitudes(anchor.astimezone(timezone.utc), latitude, longitude),
        )
        elements = compute_elements(
            reading.sun_longitude_deg, reading.moon_longitude_deg, self.karana_table
        )

        return DayRecord(
            date=day,
            tithi_name=elements.tithi,
            paksha_name=elements.paksha,
            nakshatra_name=reading.moon_nakshatra_name,
            pada_name=f"Pada {reading.moon_pada_number}",
            yoga_name=elements.yoga,
            karana_name=elements.karana,
            sunrise_time=_fmt(rise_set.sunrise, tz),
            sunset_time=_fmt(rise_set.sunset, tz),
            moonrise_time=_fmt(rise_set.moonrise, tz),
            moonset_time=_fmt(rise_set.moonset, tz),
            rahu_kalam=rise_set.rahu_kalam or "",
            yama_ganda=rise_set.yama_gandha or "",
            gulika_kalam=rise_set.gulika_kalam or "",
            festivals=list(festivals_by_day.get(day.day, [])),
        )
