"""Public holiday lookups keyed by country.

Holiday lists are computed once per ``(country, year)`` and shared by every
caller: concurrent requests for the same key wait on a single in-flight load.
The provider fails open. Any error or timeout is logged and the date is
treated as a regular day, which is the ``ignore`` holiday policy.
"""

from __future__ import annotations

import atexit
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import date, timedelta
from functools import lru_cache
from typing import Optional, Protocol

import holidays
import pytz

from quorum.core.cache import RedisCache, get_cache, holiday_cache_key
from quorum.core.config import settings
from quorum.engine.types import parse_date

logger = logging.getLogger(__name__)


class HolidayLookup(Protocol):
    def is_holiday(self, country: str, day: date) -> bool: ...


@lru_cache
def _timezone_countries() -> dict[str, str]:
    mapping: dict[str, str] = {}
    for country, zones in pytz.country_timezones.items():
        for zone in zones:
            mapping.setdefault(zone, country.upper())
    return mapping


def country_for_timezone(timezone: str | None) -> Optional[str]:
    """ISO country code of an IANA timezone, ``None`` for zones like UTC."""
    if not timezone:
        return None
    return _timezone_countries().get(timezone)


def load_holidays(country: str, year: int) -> frozenset[date]:
    try:
        calendar = holidays.country_holidays(country, years=year)
    except NotImplementedError:
        logger.info(f"No holiday data for country {country}")
        return frozenset()
    return frozenset(calendar.keys())


class HolidayProvider:
    """Read-through holiday cache with duplicate suppression per key."""

    def __init__(
        self,
        cache: RedisCache | None = None,
        timeout: float | None = None,
        loader=load_holidays,
        max_workers: int = 4,
    ) -> None:
        self._cache = cache
        self._timeout = timeout
        self._loader = loader
        self._years: dict[tuple[str, int], Future] = {}
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="holidays"
        )

    def is_holiday(self, country: str, day: date) -> bool:
        try:
            return day in self.holidays_for_year(country, day.year)
        except FutureTimeoutError:
            logger.warning(
                f"Holiday lookup for {country}/{day.year} timed out, ignoring holidays"
            )
        except Exception as e:
            logger.warning(
                f"Holiday lookup for {country}/{day.year} failed: {e}. Ignoring holidays"
            )
        return False

    def is_holiday_eve(self, country: str, day: date) -> bool:
        return self.is_holiday(country, day + timedelta(days=1))

    def holidays_for_year(self, country: str, year: int) -> frozenset[date]:
        key = (country.upper(), year)
        with self._lock:
            future = self._years.get(key)
            # A failed load is retried by the next caller
            if future is None or (future.done() and future.exception() is not None):
                future = self._executor.submit(self._load, *key)
                self._years[key] = future
        return future.result(timeout=self._timeout)

    def invalidate(self, country: str | None = None) -> None:
        """Drop loaded years, also from the shared cache."""
        with self._lock:
            keys = [k for k in self._years if country is None or k[0] == country.upper()]
            for key in keys:
                del self._years[key]
        if self._cache is not None:
            for key in keys:
                self._cache.delete(holiday_cache_key(*key))

    def close(self) -> None:
        """Stop the loader threads; years not loaded yet then fail open."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _load(self, country: str, year: int) -> frozenset[date]:
        cache_key = holiday_cache_key(country, year)
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if isinstance(cached, list):
                return frozenset(parse_date(value) for value in cached)

        days = frozenset(self._loader(country, year))
        logger.debug(f"Loaded {len(days)} holidays for {country}/{year}")
        if self._cache is not None:
            self._cache.set(cache_key, sorted(d.isoformat() for d in days))
        return days


_provider: HolidayProvider | None = None
_provider_lock = threading.Lock()


def get_holiday_provider() -> HolidayProvider:
    """Process-wide provider backed by the shared Redis cache."""
    global _provider
    if _provider is None:
        with _provider_lock:
            if _provider is None:
                _provider = HolidayProvider(
                    cache=get_cache(), timeout=settings.HOLIDAY_LOOKUP_TIMEOUT
                )
                atexit.register(_provider.close)
    return _provider
