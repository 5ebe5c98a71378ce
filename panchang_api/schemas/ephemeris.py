"""Typed records exchanged with the ephemeris and festival collaborators.

Upstream payloads arrive with camelCase or snake_case keys. Both spellings
are accepted here through the alias generator so callers never see the raw
dictionaries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .calendar import RegionalCalendar

# Amanta lunar months, Chaitra first.
MASA_NAMES = (
    "Chaitra",
    "Vaishakha",
    "Jyeshtha",
    "Ashadha",
    "Shravana",
    "Bhadrapada",
    "Ashwin",
    "Kartika",
    "Margashirsha",
    "Pausha",
    "Magha",
    "Phalguna",
)


class _Boundary(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class LongitudeReading(_Boundary):
    sun_longitude_deg: float = Field(allow_inf_nan=False)
    moon_longitude_deg: float = Field(allow_inf_nan=False)
    moon_nakshatra_name: str
    moon_pada_number: int = Field(ge=1, le=4)


class RiseSetTimes(_Boundary):
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    moonrise: Optional[datetime] = None
    moonset: Optional[datetime] = None
    rahu_kalam: Optional[str] = None
    yama_gandha: Optional[str] = None
    gulika_kalam: Optional[str] = None


class FestivalRule(_Boundary):
    """A festival that recurs every year, in one of three ways.

    ``fixed`` falls on a Gregorian ``month``/``day``. ``solar`` falls on the
    day the sidereal Sun reaches ``sun_longitude``. ``lunar`` falls on the day
    ``tithi`` (1..30) of the amanta ``lunar_month`` prevails at
    ``observed_at`` (sunrise or sunset). ``offset_days`` shifts the result.
    """

    name: str
    english_name: Optional[str] = None
    region: RegionalCalendar = RegionalCalendar.UNIVERSAL
    type: str = "regional"
    rule: Literal["fixed", "solar", "lunar"]
    month: Optional[int] = Field(None, ge=1, le=12)
    day: Optional[int] = Field(None, ge=1, le=31)
    sun_longitude: Optional[float] = Field(None, ge=0.0, lt=360.0)
    lunar_month: Optional[str] = None
    tithi: Optional[int] = Field(None, ge=1, le=30)
    observed_at: Literal["sunrise", "sunset"] = "sunrise"
    offset_days: int = Field(0, ge=-3, le=3)

    @model_validator(mode="after")
    def _check_rule_fields(self) -> "FestivalRule":
        if self.rule == "fixed" and (self.month is None or self.day is None):
            raise ValueError(f"{self.name}: fixed rules need month and day")
        if self.rule == "solar" and self.sun_longitude is None:
            raise ValueError(f"{self.name}: solar rules need sun_longitude")
        if self.rule == "lunar":
            if self.lunar_month not in MASA_NAMES or self.tithi is None:
                raise ValueError(f"{self.name}: lunar rules need a lunar_month in {MASA_NAMES} and a tithi")
        return self

    @property
    def display_name(self) -> str:
        return self.english_name or self.name
