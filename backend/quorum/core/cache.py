"""Redis-based cache for data shared between workers (holiday lists)."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Optional

import redis
from redis.exceptions import ConnectionError, RedisError

from quorum.core.config import settings

logger = logging.getLogger(__name__)


class _InMemoryCache:
    """Fallback in-memory cache when Redis is unavailable."""

    def __init__(self):
        self._cache: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._cache.get(key)

    def set(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        with self._lock:
            self._cache[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)


def _connect(url: str) -> redis.Redis | _InMemoryCache:
    try:
        pool = redis.ConnectionPool.from_url(
            url,
            max_connections=50,
            decode_responses=True,
            socket_connect_timeout=1,
        )
        client = redis.Redis(connection_pool=pool)
        client.ping()
        logger.info(f"Redis cache connected: {url}")
        return client
    except (ConnectionError, RedisError) as e:
        logger.warning(f"Failed to connect to Redis cache: {e}. Using fallback in-memory cache.")
        return _InMemoryCache()


class RedisCache:
    """Redis-based cache with TTL support.

    The connection is opened on first use, so importing this module never
    touches the network.
    """

    def __init__(self, url: str | None = None, default_ttl: int = 300):
        self.url = url
        self.default_ttl = default_ttl
        self._client: redis.Redis | _InMemoryCache | None = None
        self._connect_lock = threading.Lock()

    @property
    def client(self) -> redis.Redis | _InMemoryCache:
        if self._client is None:
            with self._connect_lock:
                if self._client is None:
                    self._client = (
                        _connect(self.url) if self.url else _InMemoryCache()
                    )
        return self._client

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        try:
            client = self.client
            if isinstance(client, _InMemoryCache):
                return client.get(key)

            value = client.get(key)
            if value is None:
                return None
            try:
                return json.loads(value)
            except (json.JSONDecodeError, TypeError):
                return value
        except (ConnectionError, RedisError) as e:
            logger.warning(f"Redis cache get error for key {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set value in cache with TTL."""
        try:
            ttl = ttl or self.default_ttl
            client = self.client
            if isinstance(client, _InMemoryCache):
                client.set(key, value, ex=ttl)
                return

            if isinstance(value, (dict, list)):
                serialized = json.dumps(value)
            else:
                serialized = str(value)
            client.setex(key, ttl, serialized)
        except (ConnectionError, RedisError) as e:
            logger.warning(f"Redis cache set error for key {key}: {e}")

    def delete(self, key: str) -> None:
        """Delete key from cache."""
        try:
            self.client.delete(key)
        except (ConnectionError, RedisError) as e:
            logger.warning(f"Redis cache delete error for key {key}: {e}")


_cache = RedisCache(settings.REDIS_CACHE_URL, default_ttl=settings.HOLIDAY_CACHE_TTL)


def get_cache() -> RedisCache:
    """Get global cache instance."""
    return _cache


def holiday_cache_key(country: str, year: int) -> str:
    return f"holidays:{country.upper()}:{year}"
