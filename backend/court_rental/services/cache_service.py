"""
Redis caching for the public court catalogue.

CACHING STRATEGY
================

What we cache:
  - The serialized list of active courts (with resolved image URLs)
  - Single key: "courts:active"

Why:
  - Every visit to the booking page lists courts; the catalogue changes a
    handful of times a year
  - Prices on the booking itself are always computed from the database row,
    so a stale listing can never change what a customer is charged

Invalidation:
  - TTL only (REDIS_CACHE_TTL). Courts are edited directly in the database
    by the business owner.

Redis is optional. When it is disabled or unreachable the client is None and
every helper here degrades to a no-op so the catalogue is read from the
database on each request.
"""

import json
from typing import Optional

import redis.asyncio as redis
from court_rental.core.config import Settings
from court_rental.core.logging import get_logger
from court_rental.core.metrics import record_cache_operation

logger = get_logger(__name__)

COURT_LIST_KEY = "courts:active"


async def connect_redis(settings: Settings) -> Optional[redis.Redis]:
    """Open a Redis connection. Returns None if Redis is disabled or unreachable."""
    if not settings.REDIS_ENABLED:
        return None

    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    try:
        await client.ping()
    except redis.RedisError as e:
        logger.warning("redis_unavailable", url=settings.REDIS_URL, error=str(e))
        await client.aclose()
        return None

    logger.info("redis_connected", url=settings.REDIS_URL)
    return client


async def close_redis(client: Optional[redis.Redis]) -> None:
    if client is not None:
        await client.aclose()


async def get_cached_courts(client: Optional[redis.Redis]) -> Optional[list[dict]]:
    if client is None:
        return None

    try:
        data = await client.get(COURT_LIST_KEY)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=COURT_LIST_KEY, error=str(e))
        record_cache_operation("get", "error")
        return None

    if data:
        record_cache_operation("get", "hit")
        return json.loads(data)
    record_cache_operation("get", "miss")
    return None


async def set_cached_courts(client: Optional[redis.Redis], courts: list[dict], ttl: int) -> None:
    if client is None:
        return

    try:
        await client.setex(COURT_LIST_KEY, ttl, json.dumps(courts, default=str))
        record_cache_operation("set", "ok")
    except redis.RedisError as e:
        logger.error("cache_set_error", key=COURT_LIST_KEY, error=str(e))
        record_cache_operation("set", "error")


async def get_cache_stats(client: Optional[redis.Redis]) -> dict:
    """Redis keyspace statistics for the health endpoint."""
    if client is None:
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
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}
