"""
Cache backends for the article cache-aside layer.

Both backends store plain strings (callers serialise) and expose the same
four operations: ``get``, ``set``, ``delete`` and ``keys``.  Neither
supports pattern deletion; prefix invalidation is done by the caller by
enumerating ``keys()``.

Unlike a best-effort cache, failures are not hidden here: a Redis error
is re-raised as ``CacheUnavailableError`` and the caller decides whether
it may be ignored.
"""
import logging
import time
from typing import Callable, Protocol

import redis.asyncio as redis

from articlehub.config import Settings
from articlehub.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def keys(self) -> list[str]: ...


class RedisCache:
    """Cache backed by ``redis.asyncio``."""

    def __init__(self, url: str, client: redis.Redis | None = None) -> None:
        self._url = url
        self._redis: redis.Redis | None = client

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool.  Called once at application startup."""
        if self._redis is None:
            self._redis = redis.from_url(
                self._url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        # Ping to surface mis-configuration early (non-fatal).
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", self._url)
        except redis.RedisError as exc:
            logger.warning("Redis ping failed, cache calls will fail: %s", exc)

    async def disconnect(self) -> None:
        """Close the connection pool.  Called once at application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    def _client(self) -> redis.Redis:
        if self._redis is None:
            raise CacheUnavailableError("Cache is not connected")
        return self._redis

    async def get(self, key: str) -> str | None:
        try:
            return await self._client().get(key)
        except redis.RedisError as exc:
            raise CacheUnavailableError(f"Cache GET failed for key {key!r}") from exc

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store *value* under *key* with an optional TTL (seconds)."""
        try:
            await self._client().set(key, value, ex=ttl)
        except redis.RedisError as exc:
            raise CacheUnavailableError(f"Cache SET failed for key {key!r}") from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client().delete(key)
        except redis.RedisError as exc:
            raise CacheUnavailableError(f"Cache DELETE failed for key {key!r}") from exc

    async def keys(self) -> list[str]:
        """
        Return every live key.

        Uses SCAN rather than KEYS so large keyspaces do not block the
        server; cost is still proportional to the total number of keys.
        """
        client = self._client()
        try:
            return [key async for key in client.scan_iter()]
        except redis.RedisError as exc:
            raise CacheUnavailableError("Cache SCAN failed") from exc


class MemoryCache:
    """
    In-process cache with per-key expiry.

    Used when ``CACHE_BACKEND=memory`` and by the test-suite.  Expired
    entries are dropped lazily on access or enumeration.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}

    async def connect(self) -> None:
        logger.info("Using in-memory cache")

    async def disconnect(self) -> None:
        self._data.clear()

    def _expired(self, expires_at: float | None) -> bool:
        return expires_at is not None and self._clock() >= expires_at

    async def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._expired(expires_at):
            del self._data[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._data[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self) -> list[str]:
        for key in [k for k, (_, exp) in self._data.items() if self._expired(exp)]:
            del self._data[key]
        return list(self._data)


def create_cache(settings: Settings) -> RedisCache | MemoryCache:
    """Build the cache backend selected by ``settings.CACHE_BACKEND``."""
    backend = settings.CACHE_BACKEND.lower()
    if backend == "memory":
        return MemoryCache()
    if backend == "redis":
        return RedisCache(settings.REDIS_URL)
    raise ValueError(f"Unknown CACHE_BACKEND: {settings.CACHE_BACKEND!r}")
