"""In-process longitude and rise/set providers backed by Swiss Ephemeris."""

from __future__ import annotations

from datetime import date, datetime, time as time_cls
from zoneinfo import ZoneInfo

import swisseph as swe

from . import ephem
from .muhurta import inauspicious_windows
from ..schemas.ephemeris import LongitudeReading, RiseSetTimes


class SwissEphemerisLongitudes:
    """Sidereal Sun and Moon longitudes with the Moon's nakshatra and pada."""

    def __init__(self, ayanamsha: str = "lahiri") -> None:
        self.ayanamsha = ayanamsha

    async def get_longitudes(
        self, instant_utc: datetime, latitude: float, longitude: float
    ) -> LongitudeReading:
        del latitude, longitude  # geocentric positions
        bodies = ephem.positions_ecliptic(
            ephem.to_jd(instant_utc), sidereal=True, ayanamsha=self.ayanamsha
        )
        moon_lon = bodies["Moon"]
        nakshatra, pada = ephem.nakshatra_pada(moon_lon)
        return LongitudeReading(
            sun_longitude_deg=bodies["Sun"],
            moon_longitude_deg=moon_lon,
            moon_nakshatra_name=nakshatra,
            moon_pada_number=pada,
        )


class SwissEphemerisRiseSet:
    """Rise/set events within the local calendar day.

    The search runs forward from local midnight; an event that only happens
    on a later day (the Moon skips a rise or set about once a month) is
    reported as missing.
    """

    def __init__(self, elevation: float = 0.0) -> None:
        self.elevation = elevation

    async def compute(
        self, day: date, latitude: float, longitude: float, timezone_id: str
    ) -> RiseSetTimes:
        start_of_day = datetime.combine(day, time_cls(0, 0), tzinfo=ZoneInfo(timezone_id))
        events = {
            "sunrise": (swe.SUN, swe.CALC_RISE),
            "sunset": (swe.SUN, swe.CALC_SET),
            "moonrise": (swe.MOON, swe.CALC_RISE),
            "moonset": (swe.MOON, swe.CALC_SET),
        }
        found = {}
        for key, (body, rsmi) in events.items():
            moment = ephem.rise_or_set(start_of_day, body, rsmi, latitude, longitude, self.elevation)
            found[key] = moment if moment is not None and moment.date() == day else None
        windows = {}
        if found["sunrise"] and found["sunset"] and found["sunset"] > found["sunrise"]:
            windows = inauspicious_windows(found["sunrise"], found["sunset"])
        return RiseSetTimes(**found, **windows)
