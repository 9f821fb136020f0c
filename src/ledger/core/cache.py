"""Redis connection handling for the reference catalog cache.

The cache is a process-wide ``redis.asyncio.Redis`` handle created once at
startup by :func:`init_cache` and released by :func:`close_cache`. It is
never recreated implicitly: routes receive it through the ``get_cache``
dependency and pass it explicitly into the catalog service, so tests can
substitute a fake or ``None``.

Redis is strictly an accelerator. When it is unreachable at startup the
handle is ``None`` and every catalog read goes to the database.
"""

import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ledger.core.config import settings
from ledger.core.constants import CatalogCacheConstants

logger = logging.getLogger(__name__)

CATALOG_KEYS = (
    CatalogCacheConstants.ASSET_TYPE_KEY,
    CatalogCacheConstants.ACTION_TYPE_KEY,
)


async def init_cache() -> "Redis | None":
    """
    Connect to Redis for catalog caching.

    Returns:
        Redis client instance or None if connection fails

    Note:
        Socket timeouts come from settings so that a slow Redis cannot
        stall a request beyond them.
    """
    client: Redis | None = None
    try:
        client = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_CONNECT_TIMEOUT,
        )
        await client.ping()
        logger.info(f"Connected to Redis at {settings.REDIS_URL}")
        return client
    except RedisError as e:
        logger.warning(f"Failed to connect to Redis: {e}. Catalog caching disabled.")
        if client is not None:
            await client.aclose()
        return None


async def close_cache(client: "Redis | None") -> None:
    """Release the Redis connection pool, if one was opened."""
    if client is None:
        return
    try:
        await client.aclose()
        logger.info("Closed Redis connection")
    except RedisError as e:
        logger.warning(f"Error while closing Redis connection: {e}")


async def invalidate_catalog_cache(client: "Redis | None") -> None:
    """
    Drop both catalog snapshots so the next read goes to the database.

    Failures are logged and ignored; the snapshots expire on their own
    after ``CATALOG_CACHE_TTL_SECONDS``.
    """
    if client is None:
        return
    try:
        await client.delete(*CATALOG_KEYS)
        logger.info("Invalidated catalog cache")
    except RedisError as e:
        logger.warning(f"Failed to invalidate catalog cache: {e}")


async def get_cache_stats(client: "Redis | None") -> dict[str, Any]:
    """
    Report whether the catalog cache is usable and which snapshots it holds.

    Returns:
        Dictionary with cache statistics:
        - enabled: Whether a Redis handle exists and answers PING
        - backend: Backend type
        - cached_catalogs: Number of catalog snapshots currently stored
    """
    if client is None:
        return {"enabled": False}

    try:
        await client.ping()
        cached = await client.exists(*CATALOG_KEYS)
    except RedisError as e:
        logger.error(f"Failed to get cache stats: {e}")
        return {"enabled": False, "error": str(e)}

    return {
        "enabled": True,
        "backend": "redis",
        "ttl_seconds": settings.CATALOG_CACHE_TTL_SECONDS,
        "cached_catalogs": cached,
    }
