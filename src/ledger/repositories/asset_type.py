"""Asset type repository."""

from sqlalchemy import exists, select

from ledger.models.asset_type import AssetType
from ledger.repositories.base import BaseRepository


class AssetTypeRepository(BaseRepository[AssetType]):
    """Repository for the asset type catalog.

    Activity checks always hit the database; only the full catalog listing
    is served through the cache (see ``ledger.services.catalog_service``).

    Example:
        >>> repo = AssetTypeRepository(AssetType, db)
        >>> if await repo.is_active(asset_type_id):
        ...     ...
    """

    async def get_all_active(self) -> list[AssetType]:
        """Get every active asset type, ordered by id."""
        result = await self.db.execute(
            select(AssetType).where(AssetType.is_active.is_(True)).order_by(AssetType.id)
        )
        return list(result.scalars().all())

    async def get_active_ids(self) -> list[int]:
        """Get the ids of every active asset type, ordered by id."""
        result = await self.db.execute(
            select(AssetType.id).where(AssetType.is_active.is_(True)).order_by(AssetType.id)
        )
        return list(result.scalars().all())

    async def is_active(self, asset_type_id: int) -> bool:
        """Check that the asset type exists and is active."""
        result = await self.db.execute(
            select(
                exists().where(
                    AssetType.id == asset_type_id,
                    AssetType.is_active.is_(True),
                )
            )
        )
        return bool(result.scalar())
