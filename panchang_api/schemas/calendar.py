"""Calendar view schemas returned by the month and year endpoints."""

from __future__ import annotations

from datetime import date as date_cls
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class RegionalCalendar(str, Enum):
    NORTH_INDIAN = "north_indian"
    PUNJABI = "punjabi"
    HIMACHALI = "himachali"
    UTTARAKHANDI = "uttarakhandi"
    RAJASTHANI = "rajasthani"
    HARYANVI = "haryanvi"
    SOUTH_INDIAN = "south_indian"
    TAMIL = "tamil"
    MALAYALAM = "malayalam"
    KANNADA = "kannada"
    TELUGU = "telugu"
    BENGALI = "bengali"
    ODIA = "odia"
    ASSAMESE = "assamese"
    MANIPURI = "manipuri"
    GUJARATI = "gujarati"
    MARATHI = "marathi"
    KONKANI = "konkani"
    CHHATTISGARHI = "chhattisgarhi"
    MADHYA_PRADESHI = "madhya_pradeshi"
    KASHMIRI = "kashmiri"
    NEPALI = "nepali"
    SIKKIMESE = "sikkimese"
    GOAN = "goan"
    UNIVERSAL = "universal"


class DayRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date_cls
    tithi_name: str
    paksha_name: str
    nakshatra_name: str
    pada_name: str
    yoga_name: str
    karana_name: str
    sunrise_time: str = ""
    sunset_time: str = ""
    moonrise_time: str = ""
    moonset_time: str = ""
    rahu_kalam: str = ""
    yama_ganda: str = ""
    gulika_kalam: str = ""
    festivals: List[str] = Field(default_factory=list)


class MonthView(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    region: RegionalCalendar
    latitude: float
    longitude: float
    timezone_id: str
    days: List[DayRecord] = Field(default_factory=list)


class YearView(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    region: RegionalCalendar
    festivals_by_month: Dict[int, List[str]] = Field(default_factory=dict)


class PanchangElementsVM(BaseModel):
    sun_longitude: float
    moon_longitude: float
    tithi: str
    paksha: str
    yoga: str
    karana: str
