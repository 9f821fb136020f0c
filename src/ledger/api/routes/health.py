"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ledger.core.cache import get_cache_stats
from ledger.core.deps import CatalogCache, DbSession
from ledger.models import Account, AccountLog, ActionType, AssetType

router = APIRouter()

LEDGER_TABLES = (AssetType, ActionType, Account, AccountLog)


@router.get("/health")
async def health_check():
    """Liveness probe. Touches nothing."""
    return {"status": "healthy"}


@router.get("/health/db")
async def database_health(db: DbSession) -> dict[str, Any]:
    """
    Check that every ledger table can be read.

    Stops at the first unreadable table and reports it; a missing migration
    shows up here rather than on the first balance mutation.
    """
    tables: dict[str, str] = {}
    for model in LEDGER_TABLES:
        try:
            await db.execute(select(model.id).limit(1))
        except SQLAlchemyError as e:
            await db.rollback()
            tables[model.__tablename__] = "unreachable"
            return {"status": "unhealthy", "tables": tables, "error": str(e)}
        tables[model.__tablename__] = "ok"
    return {"status": "healthy", "tables": tables}


@router.get("/health/cache")
async def cache_health(cache: CatalogCache):
    """
    Catalog cache health check and statistics.

    A disabled cache is not an error: catalogs fall back to the database.
    """
    stats = await get_cache_stats(cache)
    if stats.get("enabled"):
        return {"status": "healthy", "cache": stats}
    return {"status": "disabled", "cache": stats}
