"""Environment driven settings.

Values are read on every call so tests can adjust them with ``monkeypatch``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


DEFAULT_FEED_PATH = Path(__file__).resolve().parent / "data" / "festivals.json"


def default_place_lat() -> float:
    return float(os.getenv("DEFAULT_PLACE_LAT", "28.6139"))


def default_place_lon() -> float:
    return float(os.getenv("DEFAULT_PLACE_LON", "77.2090"))


def default_place_tz() -> str:
    return os.getenv("DEFAULT_PLACE_TZ", "Asia/Kolkata")


def default_place_label() -> str:
    return os.getenv("DEFAULT_PLACE_LABEL", "New Delhi, India")


def ephemeris_provider() -> str:
    """``swisseph`` (in-process) or ``remote`` (HTTP JSON service)."""
    return os.getenv("EPHEMERIS_PROVIDER", "swisseph").strip().lower()


def ephe_path() -> Optional[str]:
    return os.getenv("SE_EPHE_PATH") or None


def ayanamsha() -> str:
    return os.getenv("PANCHANG_AYANAMSHA", "lahiri").strip().lower()


def karana_table_name() -> str:
    return os.getenv("PANCHANG_KARANA_TABLE", "sequence").strip().lower()


def max_concurrency() -> int:
    return max(1, int(os.getenv("PANCHANG_MAX_CONCURRENCY", "8")))


def festival_feed_path() -> Path:
    raw = os.getenv("FESTIVAL_FEED_PATH")
    return Path(raw) if raw else DEFAULT_FEED_PATH


def ephemeris_api_url() -> str:
    return os.getenv("EPHEMERIS_API_URL", "http://localhost:8080").rstrip("/")


def ephemeris_api_key() -> Optional[str]:
    return os.getenv("EPHEMERIS_API_KEY") or None


def ephemeris_api_timeout() -> float:
    return float(os.getenv("EPHEMERIS_API_TIMEOUT", "30"))


def calendar_tz() -> Optional[str]:
    """Timezone of the cache clock; unset means the host's local zone."""
    return os.getenv("CALENDAR_TZ") or None
