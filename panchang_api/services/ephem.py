"""Swiss Ephemeris helpers used by the in-process ephemeris providers."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

import swisseph as swe


BODIES: Dict[str, int] = {
    "Sun": swe.SUN,
    "Moon": swe.MOON,
}

AYANAMSHA_MAP = {
    "lahiri": swe.SIDM_LAHIRI,
    "krishnamurti": swe.SIDM_KRISHNAMURTI,
    "raman": swe.SIDM_RAMAN,
}

NAKSHATRA_NAMES = [
    "Ashwini",
    "Bharani",
    "Krittika",
    "Rohini",
    "Mrigashira",
    "Ardra",
    "Punarvasu",
    "Pushya",
    "Ashlesha",
    "Magha",
    "Purva Phalguni",
    "Uttara Phalguni",
    "Hasta",
    "Chitra",
    "Swati",
    "Vishakha",
    "Anuradha",
    "Jyeshtha",
    "Mula",
    "Purva Ashadha",
    "Uttara Ashadha",
    "Shravana",
    "Dhanishtha",
    "Shatabhisha",
    "Purva Bhadrapada",
    "Uttara Bhadrapada",
    "Revati",
]

NAKSHATRA_SPAN = 360.0 / 27.0
PADA_SPAN = NAKSHATRA_SPAN / 4.0


def _backend_flag() -> int:
    """Return the Swiss Ephemeris backend flag based on environment configuration."""

    raw_backend = os.getenv("EPHEMERIS_BACKEND")
    backend = raw_backend.strip().lower() if raw_backend else "swieph"
    return swe.FLG_MOSEPH if backend == "moseph" else swe.FLG_SWIEPH


def init_paths(ephe_dir: str | os.PathLike[str] | None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


def to_jd(moment: datetime) -> float:
    """Convert a datetime into a Julian day (UT); naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).timestamp() / 86400.0 + 2440587.5


def from_jd(jd: float) -> datetime:
    seconds = (jd - 2440587.5) * 86400.0
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def positions_ecliptic(jd_utc: float, sidereal: bool = False, ayanamsha: str = "lahiri") -> Dict[str, float]:
    """Return the ecliptic longitude of the Sun and Moon, in degrees within ``[0, 360)``."""

    flag = _backend_flag()
    if sidereal:
        mode = AYANAMSHA_MAP.get(ayanamsha.lower(), swe.SIDM_LAHIRI)
        swe.set_sid_mode(mode)
        flag |= swe.FLG_SIDEREAL

    longitudes: Dict[str, float] = {}
    for name, code in BODIES.items():
        values, _ = swe.calc_ut(jd_utc, code, flag)
        longitudes[name] = values[0] % 360.0
    return longitudes


def nakshatra_pada(lon: float) -> Tuple[str, int]:
    """Return the nakshatra name and pada (1..4) for a sidereal longitude."""
    pos = lon % 360.0
    index = int(pos // NAKSHATRA_SPAN) % len(NAKSHATRA_NAMES)
    pada = min(int((pos - index * NAKSHATRA_SPAN) // PADA_SPAN) + 1, 4)
    return NAKSHATRA_NAMES[index], pada


def rise_or_set(
    start_of_day: datetime,
    body: int,
    rsmi: int,
    lat: float,
    lon: float,
    elevation: float = 0.0,
) -> Optional[datetime]:
    """Next rise or set of ``body`` after ``start_of_day``, in its timezone.

    Returns ``None`` when the body does not cross the horizon (polar day or
    night) so callers can fall back to their own anchors.
    """
    geopos = (lon, lat, elevation)
    try:
        result, times = swe.rise_trans(
            to_jd(start_of_day), body, rsmi | swe.BIT_DISC_CENTER, geopos, 0.0, 0.0, _backend_flag()
        )
    except swe.Error:
        return None
    if result < 0 or not times:
        return None
    return from_jd(times[0]).astimezone(start_of_day.tzinfo or timezone.utc)
