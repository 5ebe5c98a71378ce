"""Exception types raised by the panchang calendar services."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional


class PanchangError(Exception):
    """Base class for calendar computation failures."""


class InvalidInputError(PanchangError, ValueError):
    """Raised when a caller passes values the calculators cannot accept."""


class UpstreamUnavailableError(PanchangError):
    """Raised when an external collaborator fails to answer.

    ``provider`` names the collaborator (``longitude``, ``rise_set`` or
    ``festival``) and ``day`` the calendar date being computed, when known.
    """

    def __init__(self, provider: str, reason: str, day: Optional[date] = None) -> None:
        self.provider = provider
        self.reason = reason
        self.day = day
        where = f" for {day.isoformat()}" if day else ""
        super().__init__(f"{provider} provider unavailable{where}: {reason}")

    def as_detail(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "date": self.day.isoformat() if self.day else None,
            "reason": self.reason,
        }


class CacheConsistencyError(PanchangError):
    """Raised when a cached entry no longer matches the key it was stored under."""
