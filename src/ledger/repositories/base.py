"""Base repository with the common read/insert operations.

Provides generic database operations inherited by model-specific
repositories. Uses SQLAlchemy 2.0's async API.

There is intentionally no generic update or delete: accounts change only
through ``AccountRepository.apply_deltas`` and nothing in the ledger is ever
deleted.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.db.base import Base

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common read and insert operations.

    Repositories do NOT manage transactions - the caller is responsible
    for commit/rollback.

    Type Parameters:
        ModelType: The SQLAlchemy model class

    Example:
        >>> class AssetTypeRepository(BaseRepository[AssetType]):
        ...     pass
        >>>
        >>> repo = AssetTypeRepository(AssetType, db)
        >>> asset_type = await repo.get(1)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        """Initialize repository.

        Args:
            model: The SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def get(self, id: Any, *, refresh: bool = False) -> ModelType | None:
        """Get a single record by primary key.

        Args:
            id: Primary key value
            refresh: Overwrite any copy already held in the session with
                the current row (needed after Core-level UPDATEs)

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, *, obj_in: BaseModel | dict[str, Any]) -> ModelType:
        """Insert a new record.

        Args:
            obj_in: Pydantic model or dictionary of field names and values

        Returns:
            Created model instance (flushed, not yet committed)

        Note:
            Caller must commit the transaction.

        Example:
            >>> account = await repo.create(obj_in={"user_id": 1, "asset_type_id": 1})
            >>> await db.commit()
        """
        if isinstance(obj_in, BaseModel):
            create_data = obj_in.model_dump(exclude_unset=True)
        else:
            create_data = obj_in

        db_obj = self.model(**create_data)
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj
