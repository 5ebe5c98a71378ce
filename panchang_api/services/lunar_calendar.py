"""Lunar months and tithi positions used to date festivals in any year.

Months are amanta: a lunation runs from one new moon to the next and is named
after the sidereal sign the Sun occupies at its opening new moon (Sun in
Meena opens Chaitra). A lunation whose successor opens in the same sign is
adhika and carries no festivals.
"""

from __future__ import annotations

from datetime import date, datetime, time as time_cls, timedelta, timezone
from functools import lru_cache
from typing import NamedTuple, Tuple

import swisseph as swe

from ..schemas.ephemeris import MASA_NAMES
from . import ephem
from .panchang_elements import elongation, tithi_index

SYNODIC_MONTH = 29.530588853
MEAN_ELONGATION_RATE = 360.0 / SYNODIC_MONTH
# New moon of 2000-01-06 18:14 UT.
REFERENCE_NEW_MOON_JD = 2451550.09765


class LunarMonth(NamedTuple):
    lunation: int
    name: str
    adhika: bool


class TithiPosition(NamedTuple):
    """Orders instants by lunation, then by tithi (1..30) within it."""

    lunation: int
    tithi: int


def sidereal_sun_moon(jd_utc: float, ayanamsha: str = "lahiri") -> Tuple[float, float]:
    longitudes = ephem.positions_ecliptic(jd_utc, sidereal=True, ayanamsha=ayanamsha)
    return longitudes["Sun"], longitudes["Moon"]


def new_moon_before(jd_utc: float, ayanamsha: str = "lahiri") -> float:
    """Julian day (UT) of the last new moon at or before ``jd_utc``."""
    sun, moon = sidereal_sun_moon(jd_utc, ayanamsha)
    guess = jd_utc - elongation(sun, moon) / MEAN_ELONGATION_RATE
    for _ in range(8):
        sun, moon = sidereal_sun_moon(guess, ayanamsha)
        diff = elongation(sun, moon)
        if diff > 180.0:
            diff -= 360.0
        guess -= diff / MEAN_ELONGATION_RATE
    return guess


def lunation_number(new_moon_jd: float) -> int:
    return round((new_moon_jd - REFERENCE_NEW_MOON_JD) / SYNODIC_MONTH)


def opening_sign(lunation: int, ayanamsha: str = "lahiri") -> int:
    """Sidereal sign (0 = Mesha) of the Sun at the new moon opening ``lunation``."""
    mean_new_moon = REFERENCE_NEW_MOON_JD + lunation * SYNODIC_MONTH
    new_moon = new_moon_before(mean_new_moon + 1.5, ayanamsha)
    sun, _moon = sidereal_sun_moon(new_moon, ayanamsha)
    return int(sun // 30.0) % 12


@lru_cache(maxsize=512)
def lunar_month(lunation: int, ayanamsha: str = "lahiri") -> LunarMonth:
    sign = opening_sign(lunation, ayanamsha)
    adhika = opening_sign(lunation + 1, ayanamsha) == sign
    return LunarMonth(lunation, MASA_NAMES[(sign + 1) % 12], adhika)


def tithi_position(jd_utc: float, ayanamsha: str = "lahiri") -> TithiPosition:
    sun, moon = sidereal_sun_moon(jd_utc, ayanamsha)
    lunation = lunation_number(new_moon_before(jd_utc, ayanamsha))
    return TithiPosition(lunation, tithi_index(sun, moon) + 1)


def day_anchor(day: date, latitude: float, longitude: float, event: str = "sunrise") -> float:
    """Julian day (UT) of sunrise or sunset on ``day`` at the given place.

    The day starts at local mean midnight. Where the Sun does not rise or set
    that day, mean-time 06:00 or 18:00 stands in.
    """
    start = datetime.combine(day, time_cls(0, 0), tzinfo=timezone.utc) - timedelta(hours=longitude / 15.0)
    rsmi = swe.CALC_RISE if event == "sunrise" else swe.CALC_SET
    moment = ephem.rise_or_set(start, swe.SUN, rsmi, latitude, longitude)
    if moment is None or moment - start >= timedelta(days=1):
        moment = start + timedelta(hours=6 if event == "sunrise" else 18)
    return ephem.to_jd(moment)
