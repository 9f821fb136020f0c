"""Reference catalog endpoints."""

from fastapi import APIRouter

from ledger.core.deps import CatalogCache, DbSession
from ledger.schemas.action_type import ActionTypeResponse
from ledger.schemas.asset_type import AssetTypeResponse
from ledger.services.catalog_service import fetch_all_action_types, fetch_all_asset_types

router = APIRouter()


@router.get("/asset-types", response_model=list[AssetTypeResponse])
async def list_asset_types(db: DbSession, cache: CatalogCache) -> list[AssetTypeResponse]:
    """
    List active asset types.

    Served from the catalog cache when a snapshot younger than
    ``CATALOG_CACHE_TTL_SECONDS`` exists.
    """
    return await fetch_all_asset_types(db, cache)


@router.get("/action-types", response_model=list[ActionTypeResponse])
async def list_action_types(db: DbSession, cache: CatalogCache) -> list[ActionTypeResponse]:
    """
    List active action types with their balance rules.

    Served from the catalog cache when a snapshot younger than
    ``CATALOG_CACHE_TTL_SECONDS`` exists.
    """
    return await fetch_all_action_types(db, cache)
