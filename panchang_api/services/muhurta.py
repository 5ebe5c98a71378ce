"""Rahu Kalam, Yamaganda and Gulika Kalam from sunrise and sunset.

The daytime span is cut into eight equal segments and each weekday assigns
one of them to every inauspicious window.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Tuple

# Segment indices (1-based) per weekday.
RAHU_INDEX = {
    "Monday": 2,
    "Tuesday": 7,
    "Wednesday": 5,
    "Thursday": 6,
    "Friday": 4,
    "Saturday": 3,
    "Sunday": 8,
}

YAMAGANDA_INDEX = {
    "Monday": 4,
    "Tuesday": 3,
    "Wednesday": 2,
    "Thursday": 1,
    "Friday": 7,
    "Saturday": 6,
    "Sunday": 5,
}

GULIKA_INDEX = {
    "Monday": 6,
    "Tuesday": 5,
    "Wednesday": 4,
    "Thursday": 3,
    "Friday": 2,
    "Saturday": 1,
    "Sunday": 7,
}


def _segment(start: datetime, duration: timedelta, index: int) -> Tuple[datetime, datetime]:
    """Return the ``index`` (1-based) segment within a day divided into eight parts."""

    seg = duration / 8
    seg_start = start + (index - 1) * seg
    return seg_start, seg_start + seg


def format_hhmm(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def format_span(span: Tuple[datetime, datetime]) -> str:
    return f"{format_hhmm(span[0])} - {format_hhmm(span[1])}"


def compute_inauspicious_blocks(sunrise: datetime, sunset: datetime) -> Dict[str, Tuple[datetime, datetime]]:
    weekday = sunrise.strftime("%A")
    day_length = sunset - sunrise
    return {
        "rahu_kalam": _segment(sunrise, day_length, RAHU_INDEX[weekday]),
        "yama_gandha": _segment(sunrise, day_length, YAMAGANDA_INDEX[weekday]),
        "gulika_kalam": _segment(sunrise, day_length, GULIKA_INDEX[weekday]),
    }


def inauspicious_windows(sunrise: datetime, sunset: datetime) -> Dict[str, str]:
    """Windows as ``"HH:MM - HH:MM"`` strings in the timezone of ``sunrise``."""
    return {
        kind: format_span(span)
        for kind, span in compute_inauspicious_blocks(sunrise, sunset).items()
    }
