"""
Redis read-through cache for computed responses.

Dashboard and charge payloads are cached under a key derived from the
response kind, the meter set and the window bounds. Windows that reach the
current time are never cached because their latest minutes are still
being written. Cache access is best-effort: connection failures are
logged but do not propagate exceptions.

CHANGELOG:
- 2026-10-19: Cache computed responses keyed by (meter set, window)
- 2026-10-19: Initial creation
"""

import json
import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import redis.asyncio as redis

logger = logging.getLogger(__name__)

KEY_PREFIX = "webmeter"


async def get_redis(redis_url: str) -> redis.Redis:
    """Create and return an async Redis client for *redis_url*."""
    return redis.from_url(redis_url)


def make_cache_key(kind: str, slave_ids: Sequence[int], start: datetime, end: datetime) -> str:
    """Build the cache key for a computed response.

    Example: ``webmeter:charge:1,4:2026-10-01T00:00:00:2026-10-18T23:59:00``.
    """
    meters = ",".join(str(i) for i in sorted(set(slave_ids))) or "all"
    return f"{KEY_PREFIX}:{kind}:{meters}:{start.isoformat()}:{end.isoformat()}"


def is_cacheable(end: datetime, now: datetime) -> bool:
    """True when the window closed before the minute containing *now*."""
    return end < now.replace(second=0, microsecond=0)


async def get_cached(redis_url: str, key: str) -> Any | None:
    """Return the decoded cached value for *key*, or None.

    Returns None on a miss, when caching is disabled (empty *redis_url*)
    or when Redis is unreachable.
    """
    if not redis_url:
        return None
    try:
        client = await get_redis(redis_url)
        try:
            cached = await client.get(key)
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Redis read failed for key %s, computing response", key, exc_info=True)
        return None
    if cached is None:
        return None
    try:
        return json.loads(cached)
    except (TypeError, ValueError):
        logger.warning("Discarding undecodable cache entry %s", key)
        return None


async def set_cached(redis_url: str, key: str, value: Any, ttl_s: int) -> None:
    """Store *value* as JSON under *key* with a *ttl_s* expiry (best-effort)."""
    if not redis_url:
        return
    try:
        client = await get_redis(redis_url)
        try:
            await client.set(key, json.dumps(value), ex=ttl_s)
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Redis write failed for key %s", key, exc_info=True)
