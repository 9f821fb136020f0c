"""Read-through cache for the reference catalogs.

The asset type and action type listings are read far more often than they
change, so each is kept in Redis as a JSON snapshot for
``CATALOG_CACHE_TTL_SECONDS``. The cache is best-effort in both directions:

- a miss, a Redis error or a snapshot that no longer parses falls through
  to the database;
- a failed write is logged and the database result is returned anyway.

Only these listings are cached. Activity checks on the mutation path go
to the database (see ``ledger.services.validation``).
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.config import settings
from ledger.core.constants import CatalogCacheConstants
from ledger.models.action_type import ActionType
from ledger.models.asset_type import AssetType
from ledger.repositories.action_type import ActionTypeRepository
from ledger.repositories.asset_type import AssetTypeRepository
from ledger.schemas.action_type import ActionTypeResponse
from ledger.schemas.asset_type import AssetTypeResponse

logger = logging.getLogger(__name__)

SchemaType = TypeVar("SchemaType", bound=BaseModel)

_asset_types_adapter = TypeAdapter(list[AssetTypeResponse])
_action_types_adapter = TypeAdapter(list[ActionTypeResponse])


async def _read_snapshot(
    cache: "Redis | None",
    key: str,
    adapter: TypeAdapter[list[SchemaType]],
) -> list[SchemaType] | None:
    """Return the cached catalog, or None on miss, cache error or bad payload."""
    if cache is None:
        return None
    try:
        payload = await cache.get(key)
    except RedisError as e:
        logger.warning(f"Catalog cache read failed for {key}: {e}")
        return None
    if payload is None:
        return None
    try:
        return adapter.validate_json(payload)
    except PydanticValidationError:
        logger.warning(f"Discarding unreadable catalog snapshot for {key}")
        return None


async def _write_snapshot(
    cache: "Redis | None",
    key: str,
    adapter: TypeAdapter[list[SchemaType]],
    items: list[SchemaType],
) -> None:
    """Store the catalog snapshot with the configured TTL. Never raises on cache errors."""
    if cache is None:
        return
    try:
        await cache.setex(key, settings.CATALOG_CACHE_TTL_SECONDS, adapter.dump_json(items))
    except RedisError as e:
        logger.warning(f"Catalog cache write failed for {key}: {e}")


async def _read_through(
    cache: "Redis | None",
    key: str,
    adapter: TypeAdapter[list[SchemaType]],
    load: Callable[[], Awaitable[Sequence[Any]]],
) -> list[SchemaType]:
    cached = await _read_snapshot(cache, key, adapter)
    if cached is not None:
        logger.debug(f"Catalog cache hit for {key}")
        return cached

    rows = await load()
    items = adapter.validate_python(rows, from_attributes=True)
    await _write_snapshot(cache, key, adapter, items)
    return items


async def fetch_all_asset_types(
    db: AsyncSession,
    cache: "Redis | None",
) -> list[AssetTypeResponse]:
    """List active asset types, preferring a fresh cached snapshot.

    Args:
        db: Database session
        cache: Redis handle, or None when caching is disabled

    Returns:
        Active asset types ordered by id
    """
    repo = AssetTypeRepository(AssetType, db)
    return await _read_through(
        cache, CatalogCacheConstants.ASSET_TYPE_KEY, _asset_types_adapter, repo.get_all_active
    )


async def fetch_all_action_types(
    db: AsyncSession,
    cache: "Redis | None",
) -> list[ActionTypeResponse]:
    """List active action types, preferring a fresh cached snapshot.

    Args:
        db: Database session
        cache: Redis handle, or None when caching is disabled

    Returns:
        Active action types ordered by id
    """
    repo = ActionTypeRepository(ActionType, db)
    return await _read_through(
        cache, CatalogCacheConstants.ACTION_TYPE_KEY, _action_types_adapter, repo.get_all_active
    )
