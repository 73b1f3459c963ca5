"""
Redis caching service for hotel listings.

CACHING STRATEGY
================

What we cache:
  - The hotel list:            "hotels:list"
  - One hotel with its rooms:  "hotels:detail:{hotel_id}"

Both are read far more often than they change. The hotel detail embeds
per-room availability, so it goes stale on every booking change.

Invalidation strategy:
  - On booking create/update: delete every "hotels:*" key
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

The cache is best-effort. Redis being disabled, down, or erroring only
costs a database round-trip; it never fails a request.
"""

import json
from typing import Optional, Union

import redis.asyncio as redis

from hotel_booking.core.config import get_settings
from hotel_booking.core.logging import get_logger
from hotel_booking.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

HOTEL_KEY_PREFIX = "hotels:"
HOTEL_LIST_KEY = f"{HOTEL_KEY_PREFIX}list"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            redis_connection_errors.inc()
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def hotel_detail_key(hotel_id: int) -> str:
    return f"{HOTEL_KEY_PREFIX}detail:{hotel_id}"


async def get_cached(key: str) -> Optional[Union[dict, list]]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached(key: str, data: Union[dict, list]) -> None:
    """Cache a JSON-serializable response with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_hotel_cache() -> None:
    """
    Invalidate all cached hotel responses.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{HOTEL_KEY_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
