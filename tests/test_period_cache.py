from datetime import datetime, timedelta, timezone

import pytest

from panchang_api.errors import CacheConsistencyError
from panchang_api.services.period_cache import SingleSlotCache, month_end, year_end


NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def test_month_end_is_last_second_of_month():
    assert month_end(datetime(2024, 2, 3, 8, 30)) == datetime(2024, 2, 29, 23, 59, 59)
    assert month_end(datetime(2025, 12, 31, 23, 59, 59)) == datetime(2025, 12, 31, 23, 59, 59)
    assert month_end(NOW).tzinfo is timezone.utc


def test_year_end_is_december_thirty_first():
    assert year_end(NOW) == datetime(2026, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def test_hit_requires_matching_key_and_live_entry():
    cache = SingleSlotCache("month")
    assert cache.get("a", NOW) is None
    cache.put("a", "view-a", NOW + timedelta(days=1))
    assert cache.get("a", NOW) == "view-a"
    assert cache.get("b", NOW) is None
    # A key miss does not evict the stored entry.
    assert cache.get("a", NOW) == "view-a"


def test_expired_entry_is_evicted():
    cache = SingleSlotCache("month")
    expires = NOW + timedelta(hours=1)
    cache.put("a", "view-a", expires)
    assert cache.get("a", expires) is None
    assert cache.key is None
    assert cache.get("a", NOW) is None


def test_put_replaces_the_single_slot():
    cache = SingleSlotCache("year")
    cache.put("a", "view-a", NOW + timedelta(days=1))
    cache.put("b", "view-b", NOW + timedelta(days=1))
    assert cache.key == "b"
    assert cache.get("a", NOW) is None
    assert cache.get("b", NOW) == "view-b"


def test_inconsistent_entry_fails_closed():
    cache = SingleSlotCache("month", check=lambda key, value: value.startswith(key))
    cache.put("a", "b-view", NOW + timedelta(days=1))
    with pytest.raises(CacheConsistencyError):
        cache.get("a", NOW)
    assert cache.key is None


def test_clear_empties_slot():
    cache = SingleSlotCache("month")
    cache.put("a", "view-a", NOW + timedelta(days=1))
    cache.clear()
    assert cache.get("a", NOW) is None
