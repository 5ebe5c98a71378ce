"""Single-slot cache for the current calendar period.

Holds at most one ``(key, value, expires_at)`` entry. The entry is replaced
as a whole under a lock, so a reader never sees a value paired with another
key or expiry.
"""

from __future__ import annotations

import calendar
import threading
from datetime import datetime
from typing import Callable, Generic, Hashable, NamedTuple, Optional, TypeVar

from ..errors import CacheConsistencyError

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Entry(NamedTuple):
    key: Hashable
    value: object
    expires_at: datetime


def month_end(now: datetime) -> datetime:
    last_day = calendar.monthrange(now.year, now.month)[1]
    return now.replace(day=last_day, hour=23, minute=59, second=59, microsecond=0)


def year_end(now: datetime) -> datetime:
    return now.replace(month=12, day=31, hour=23, minute=59, second=59, microsecond=0)


class SingleSlotCache(Generic[K, V]):
    def __init__(self, name: str, check: Optional[Callable[[K, V], bool]] = None) -> None:
        self.name = name
        self._check = check
        self._entry: Optional[_Entry] = None
        self._lock = threading.Lock()

    def get(self, key: K, now: datetime) -> Optional[V]:
        """Return the cached value for ``key`` or ``None``.

        Expired entries are evicted. A live entry whose value fails the
        consistency check is evicted and reported with ``CacheConsistencyError``.
        """
        with self._lock:
            entry = self._entry
            if entry is None:
                return None
            if now >= entry.expires_at:
                self._entry = None
                return None
            if entry.key != key:
                return None
            if self._check is not None and not self._check(key, entry.value):
                self._entry = None
                raise CacheConsistencyError(f"{self.name} cache entry does not match key {key!r}")
            return entry.value  # type: ignore[return-value]

    def put(self, key: K, value: V, expires_at: datetime) -> None:
        with self._lock:
            self._entry = _Entry(key, value, expires_at)

    def clear(self) -> None:
        with self._lock:
            self._entry = None

    @property
    def key(self) -> Optional[Hashable]:
        entry = self._entry
        return entry.key if entry else None
