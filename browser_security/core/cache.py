"""
Key/value cache stores for computed integrity hashes.

The hash engine only needs ``get`` and ``set`` with an expiry, so any store
satisfying ``CacheStore`` can be injected. Redis is used when configured;
otherwise hashes are cached in-process.
"""

from __future__ import annotations

import time
from typing import Protocol

import redis.asyncio as redis

from browser_security.core.config import Settings
from browser_security.core.logging import get_logger

logger = get_logger(__name__)


class CacheStore(Protocol):
    """Protocol for string-keyed cache backends."""

    async def get(self, key: str) -> str | None:
        """Return the cached value, or None on a miss."""
        ...

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Store *value* under *key* for *ttl* seconds."""
        ...


class MemoryCacheStore:
    """Process-local cache with lazy expiry."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= time.monotonic():
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._entries[key] = (value, time.monotonic() + ttl)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheStore:
    """Cache backed by a shared Redis instance, keys namespaced by *prefix*."""

    def __init__(self, client: redis.Redis, prefix: str = "browser_security:") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "browser_security:") -> RedisCacheStore:
        client = redis.from_url(url, decode_responses=True)  # type: ignore[no-untyped-call]
        return cls(client, prefix=prefix)

    async def get(self, key: str) -> str | None:
        value = await self._client.get(self._prefix + key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._client.set(self._prefix + key, value, ex=ttl)

    async def close(self) -> None:
        await self._client.aclose()


def create_cache_store(settings: Settings) -> CacheStore:
    """Build the cache store selected by *settings*."""
    if settings.redis_url:
        logger.info("integrity_cache_backend", backend="redis")
        return RedisCacheStore.from_url(str(settings.redis_url))
    return MemoryCacheStore()
