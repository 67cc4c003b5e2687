"""
Read-through cache capability.

The cache is advisory: a miss or a backend error only costs a database
round trip. Values are JSON documents so both backends hand back fresh
copies and identical bytes on every hit.

Key layout:
- ``user:{id}``                          cached user record
- ``user:{id}:following_ids``            ids the user follows
- ``user:{id}:sleep_statistics:{N}days`` statistics snapshot for an N-day window
"""
import json
from abc import ABC, abstractmethod
from time import monotonic
from typing import Any, Dict, Optional, Tuple

from fastapi import Request
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from sleep_tracker.core.config import settings
from sleep_tracker.core.logger import get_logger

logger = get_logger("cache_service")


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def following_ids_key(user_id: str) -> str:
    return f"user:{user_id}:following_ids"


def statistics_key(user_id: str, period_days: int) -> str:
    return f"user:{user_id}:sleep_statistics:{period_days}days"


def statistics_prefix(user_id: str) -> str:
    return f"user:{user_id}:sleep_statistics:"


class CacheBackend(ABC):
    """get/set/delete over opaque string keys with per-entry TTLs."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> None:
        ...

    async def close(self) -> None:
        return None


class InMemoryCache(CacheBackend):
    """
    Process-local cache for single-instance deployments and tests.

    Uses monotonic() for TTL comparison so wall-clock changes do not
    expire or resurrect entries.
    """

    def __init__(self):
        # { key: (expires_at_monotonic, json_payload) }
        self._entries: Dict[str, Tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, payload = entry
        if monotonic() >= expires_at:
            self._entries.pop(key, None)
            return None
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._entries[key] = (monotonic() + ttl_seconds, json.dumps(value))

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def delete_prefix(self, prefix: str) -> None:
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]


class RedisCache(CacheBackend):
    """Redis-backed cache. Backend failures are logged and treated as misses."""

    def __init__(self, client: aioredis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        return cls(aioredis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[Any]:
        try:
            payload = await self.client.get(key)
        except RedisError as e:
            logger.warning(f"Redis GET failed for {key}: {e}")
            return None
        return json.loads(payload) if payload is not None else None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self.client.setex(key, ttl_seconds, json.dumps(value))
        except RedisError as e:
            logger.warning(f"Redis SETEX failed for {key}: {e}")

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            logger.warning(f"Redis DEL failed for {key}: {e}")

    async def delete_prefix(self, prefix: str) -> None:
        try:
            keys = [key async for key in self.client.scan_iter(match=f"{prefix}*")]
            if keys:
                await self.client.delete(*keys)
        except RedisError as e:
            logger.warning(f"Redis prefix delete failed for {prefix}: {e}")

    async def close(self) -> None:
        await self.client.aclose()


def build_cache() -> CacheBackend:
    """Redis when REDIS_URL is configured, otherwise in-process memory."""
    if settings.REDIS_URL:
        logger.info("Using Redis cache backend")
        return RedisCache.from_url(settings.REDIS_URL)
    logger.info("REDIS_URL not set, using in-memory cache backend")
    return InMemoryCache()


async def get_cache(request: Request) -> CacheBackend:
    """Dependency returning the cache created at application startup."""
    return request.app.state.cache
