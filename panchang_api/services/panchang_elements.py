"""Tithi, paksha, yoga and karana from Sun and Moon ecliptic longitudes.

All helpers are pure: the longitudes are normalised into ``[0, 360)`` so any
finite input is accepted, and non-finite input is rejected before any
arithmetic happens.
"""

from __future__ import annotations

import math
from typing import Dict, List, NamedTuple, Sequence

from ..errors import InvalidInputError

TITHI_NAMES = [
    "Shukla Pratipada",
    "Shukla Dvitiya",
    "Shukla Tritiya",
    "Shukla Chaturthi",
    "Shukla Panchami",
    "Shukla Shashthi",
    "Shukla Saptami",
    "Shukla Ashtami",
    "Shukla Navami",
    "Shukla Dashami",
    "Shukla Ekadashi",
    "Shukla Dwadashi",
    "Shukla Trayodashi",
    "Shukla Chaturdashi",
    "Purnima",
    "Krishna Pratipada",
    "Krishna Dvitiya",
    "Krishna Tritiya",
    "Krishna Chaturthi",
    "Krishna Panchami",
    "Krishna Shashthi",
    "Krishna Saptami",
    "Krishna Ashtami",
    "Krishna Navami",
    "Krishna Dashami",
    "Krishna Ekadashi",
    "Krishna Dwadashi",
    "Krishna Trayodashi",
    "Krishna Chaturdashi",
    "Amavasya",
]

PAKSHA_SHUKLA = "Shukla"
PAKSHA_KRISHNA = "Krishna"

YOGA_NAMES = [
    "Vishkambha",
    "Priti",
    "Ayushman",
    "Saubhagya",
    "Shobhana",
    "Atiganda",
    "Sukarma",
    "Dhriti",
    "Shoola",
    "Ganda",
    "Vriddhi",
    "Dhruva",
    "Vyaghata",
    "Harshana",
    "Vajra",
    "Siddhi",
    "Vyatipata",
    "Variyana",
    "Parigha",
    "Shiva",
    "Siddha",
    "Sadhya",
    "Shubha",
    "Shukla",
    "Brahma",
    "Indra",
    "Vaidhriti",
]

MOBILE_KARANAS = [
    "Bava",
    "Balava",
    "Kaulava",
    "Taitila",
    "Garaja",
    "Vanija",
    "Vishti",
]

FIXED_KARANAS = [
    "Shakuni",
    "Chatushpada",
    "Naga",
    "Kimstughna",
]

TITHI_SPAN = 12.0
YOGA_SPAN = 360.0 / 27.0
KARANA_SLOTS = 60

# Movable cycle eight times, then the four fixed karanas.
KARANA_SEQUENCE = MOBILE_KARANAS * 8 + FIXED_KARANAS

# Astronomical order: Kimstughna opens the lunar month, Shakuni, Chatushpada
# and Naga close it.
CANONICAL_KARANA_SEQUENCE = (
    [FIXED_KARANAS[3]] + MOBILE_KARANAS * 8 + FIXED_KARANAS[:3]
)

KARANA_TABLES: Dict[str, List[str]] = {
    "sequence": KARANA_SEQUENCE,
    "canonical": CANONICAL_KARANA_SEQUENCE,
}


class TithiResult(NamedTuple):
    name: str
    paksha: str


class PanchangElements(NamedTuple):
    tithi: str
    paksha: str
    yoga: str
    karana: str


def karana_table(name: str) -> List[str]:
    try:
        return KARANA_TABLES[name.lower()]
    except KeyError as exc:
        raise InvalidInputError(
            f"Unknown karana table {name!r}; expected one of {sorted(KARANA_TABLES)}"
        ) from exc


def _require_finite(**values: float) -> None:
    for label, value in values.items():
        if not math.isfinite(value):
            raise InvalidInputError(f"{label} must be a finite number of degrees, got {value!r}")


def _clamp(index: int, upper: int) -> int:
    return max(0, min(index, upper))


def normalize_degrees(value: float) -> float:
    return ((value % 360.0) + 360.0) % 360.0


def elongation(sun_longitude: float, moon_longitude: float) -> float:
    """Moon minus Sun, in degrees within ``[0, 360)``."""
    _require_finite(sun_longitude=sun_longitude, moon_longitude=moon_longitude)
    return normalize_degrees(normalize_degrees(moon_longitude) - normalize_degrees(sun_longitude))


def tithi_index(sun_longitude: float, moon_longitude: float) -> int:
    """Zero-based tithi of the lunar month, 0 (Shukla Pratipada) to 29 (Amavasya)."""
    diff = elongation(sun_longitude, moon_longitude)
    return _clamp(int(math.floor(diff / TITHI_SPAN)), len(TITHI_NAMES) - 1)


def compute_tithi_and_paksha(sun_longitude: float, moon_longitude: float) -> TithiResult:
    index = tithi_index(sun_longitude, moon_longitude)
    paksha = PAKSHA_SHUKLA if index < 15 else PAKSHA_KRISHNA
    return TithiResult(TITHI_NAMES[index], paksha)


def compute_yoga_name(sun_longitude: float, moon_longitude: float) -> str:
    _require_finite(sun_longitude=sun_longitude, moon_longitude=moon_longitude)
    total = normalize_degrees(normalize_degrees(sun_longitude) + normalize_degrees(moon_longitude))
    index = _clamp(int(math.floor(total / YOGA_SPAN)), len(YOGA_NAMES) - 1)
    return YOGA_NAMES[index]


def compute_karana_name(
    sun_longitude: float,
    moon_longitude: float,
    table: Sequence[str] = KARANA_SEQUENCE,
) -> str:
    tithi = elongation(sun_longitude, moon_longitude) / TITHI_SPAN
    index = int(math.floor(tithi * 2)) % KARANA_SLOTS
    return table[_clamp(index, len(table) - 1)]


def compute_elements(
    sun_longitude: float,
    moon_longitude: float,
    table: Sequence[str] = KARANA_SEQUENCE,
) -> PanchangElements:
    tithi = compute_tithi_and_paksha(sun_longitude, moon_longitude)
    return PanchangElements(
        tithi=tithi.name,
        paksha=tithi.paksha,
        yoga=compute_yoga_name(sun_longitude, moon_longitude),
        karana=compute_karana_name(sun_longitude, moon_longitude, table),
    )
