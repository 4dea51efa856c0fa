"""
Redis caching service for the hotel catalog.

CACHING STRATEGY
================

What we cache:
  - The hotel list response (JSON-serialized), key "hotels:list"

Why:
  - Every eligible attendee opens the hotel list before picking a room
  - Hotels change only when the catalog is reloaded, never through this API

What we do NOT cache:
  - Room occupancy (hotel detail) and anything about bookings or ticket
    eligibility. Occupancy drives capacity decisions and eligibility can
    change with a payment; both are read fresh on every request.

Invalidation:
  - TTL-based expiry (REDIS_CACHE_TTL). The catalog is loaded out of band,
    so a stale list lives at most one TTL.

Every Redis failure degrades to a cache miss; the database stays the
source of truth.
"""

import json
from typing import Optional

import redis.asyncio as redis
from hotel_booking.core.config import get_settings
from hotel_booking.core.logging import get_logger
from hotel_booking.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

HOTEL_LIST_KEY = "hotels:list"

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


async def get_cached_hotels() -> Optional[list]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(HOTEL_LIST_KEY)
    except Exception as e:
        logger.error("cache_get_error", key=HOTEL_LIST_KEY, error=str(e))
        record_cache_operation("get", "error")
        return None

    record_cache_operation("get", "hit" if data is not None else "miss")
    if data:
        return json.loads(data)
    return None


async def set_cached_hotels(hotels: list) -> None:
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(HOTEL_LIST_KEY, settings.REDIS_CACHE_TTL, json.dumps(hotels, default=str))
        logger.debug("cache_set", key=HOTEL_LIST_KEY, ttl=settings.REDIS_CACHE_TTL)
        record_cache_operation("set", "ok")
    except Exception as e:
        logger.error("cache_set_error", key=HOTEL_LIST_KEY, error=str(e))
        record_cache_operation("set", "error")


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
