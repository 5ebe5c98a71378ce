"""Regional festival feed.

The feed stores year-independent rules. Each request resolves them for one
Gregorian month at the requested place: solar rules from the sidereal Sun's
ingress between consecutive sunrises, lunar rules from the tithi prevailing at
sunrise or sunset within the named amanta month.
"""

from __future__ import annotations

import calendar
import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from ..schemas.calendar import RegionalCalendar
from ..schemas.ephemeris import FestivalRule
from . import lunar_calendar
from .lunar_calendar import TithiPosition


logger = logging.getLogger(__name__)


def load_feed(path: Path) -> List[FestivalRule]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    entries = raw.get("festivals", []) if isinstance(raw, dict) else raw
    return [FestivalRule.model_validate(item) for item in entries]


def merge_names(names: Iterable[str]) -> List[str]:
    """Drop repeated names while keeping first-seen order."""
    merged: List[str] = []
    seen = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        merged.append(name)
    return merged


class MonthResolver:
    """Dates on which festival rules fall within one Gregorian month.

    Sunrise/sunset anchors and tithi positions are computed once per day and
    shared by every rule resolved through the same instance.
    """

    def __init__(
        self, year: int, month: int, latitude: float, longitude: float, ayanamsha: str = "lahiri"
    ) -> None:
        self.first = date(year, month, 1)
        self.last = date(year, month, calendar.monthrange(year, month)[1])
        self.latitude = latitude
        self.longitude = longitude
        self.ayanamsha = ayanamsha
        self._anchors: Dict[Tuple[date, str], float] = {}
        self._positions: Dict[Tuple[date, str], TithiPosition] = {}
        self._suns: Dict[date, float] = {}

    def _anchor(self, day: date, event: str) -> float:
        key = (day, event)
        if key not in self._anchors:
            self._anchors[key] = lunar_calendar.day_anchor(day, self.latitude, self.longitude, event)
        return self._anchors[key]

    def _position(self, day: date, event: str) -> TithiPosition:
        key = (day, event)
        if key not in self._positions:
            self._positions[key] = lunar_calendar.tithi_position(self._anchor(day, event), self.ayanamsha)
        return self._positions[key]

    def _sun_at_sunrise(self, day: date) -> float:
        if day not in self._suns:
            sun, _moon = lunar_calendar.sidereal_sun_moon(self._anchor(day, "sunrise"), self.ayanamsha)
            self._suns[day] = sun
        return self._suns[day]

    def _ingress_on(self, day: date, target: float) -> bool:
        before = self._sun_at_sunrise(day)
        after = self._sun_at_sunrise(day + timedelta(days=1))
        ahead = (target - before) % 360.0
        return 0.0 < ahead <= (after - before) % 360.0

    def _tithi_on(self, day: date, rule: FestivalRule) -> bool:
        # The first day whose anchor has reached the target tithi; a tithi
        # that spans no anchor (kshaya) lands on the following day.
        previous = self._position(day - timedelta(days=1), rule.observed_at)
        current = self._position(day, rule.observed_at)
        for lunation in range(previous.lunation, current.lunation + 1):
            month = lunar_calendar.lunar_month(lunation, self.ayanamsha)
            if month.adhika or month.name != rule.lunar_month:
                continue
            if previous < (lunation, rule.tithi) <= current:
                return True
        return False

    def _fixed(self, rule: FestivalRule, shift: timedelta) -> List[date]:
        found = []
        for year in (self.first.year - 1, self.first.year, self.first.year + 1):
            try:
                moved = date(year, rule.month, rule.day) + shift
            except ValueError:  # 29 February outside leap years
                continue
            if self.first <= moved <= self.last:
                found.append(moved)
        return found

    def dates_for(self, rule: FestivalRule) -> List[date]:
        shift = timedelta(days=rule.offset_days)
        if rule.rule == "fixed":
            return self._fixed(rule, shift)

        start = self.first - shift
        days = [start + timedelta(days=n) for n in range((self.last - self.first).days + 1)]
        if rule.rule == "solar":
            matched = [day for day in days if self._ingress_on(day, rule.sun_longitude)]
        else:
            matched = [day for day in days if self._tithi_on(day, rule)]
        return [day + shift for day in matched]


class FestivalFeed:
    """Festival provider over a list of recurring rules.

    Rules of the ``universal`` calendar are observed in every region.
    """

    def __init__(self, rules: Iterable[FestivalRule], ayanamsha: str = "lahiri") -> None:
        self._rules = list(rules)
        self.ayanamsha = ayanamsha

    @classmethod
    def from_path(cls, path: Path, ayanamsha: str = "lahiri") -> "FestivalFeed":
        rules = load_feed(path)
        logger.info("festivals.feed.loaded", extra={"path": str(path), "entries": len(rules)})
        return cls(rules, ayanamsha)

    def _applies(self, rule: FestivalRule, region: RegionalCalendar) -> bool:
        return rule.region == region or rule.region == RegionalCalendar.UNIVERSAL

    async def get_festivals_for_month(
        self,
        year: int,
        month: int,
        region: RegionalCalendar,
        latitude: float,
        longitude: float,
    ) -> Dict[int, List[str]]:
        rules = [rule for rule in self._rules if self._applies(rule, region)]
        resolver = MonthResolver(year, month, latitude, longitude, self.ayanamsha)
        by_day: Dict[int, List[str]] = {}
        for rule in rules:
            for day in resolver.dates_for(rule):
                by_day.setdefault(day.day, []).append(rule.display_name)
        return {day: merge_names(by_day[day]) for day in sorted(by_day)}
