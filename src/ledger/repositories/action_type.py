"""Action type repository."""

from sqlalchemy import exists, select

from ledger.models.action_type import ActionType
from ledger.repositories.base import BaseRepository


class ActionTypeRepository(BaseRepository[ActionType]):
    """Repository for the action type catalog.

    Example:
        >>> repo = ActionTypeRepository(ActionType, db)
        >>> action_type = await repo.get_active(action_type_id)
        >>> action_type.available_balance_change
        <Change.DEC: 'DEC'>
    """

    async def get_all_active(self) -> list[ActionType]:
        """Get every active action type, ordered by id."""
        result = await self.db.execute(
            select(ActionType).where(ActionType.is_active.is_(True)).order_by(ActionType.id)
        )
        return list(result.scalars().all())

    async def get_active(self, action_type_id: int) -> ActionType | None:
        """Get one action type by id, or None when it is missing or inactive.

        Reloads the row even if the session already holds it, so a
        deactivation committed elsewhere is seen immediately.
        """
        result = await self.db.execute(
            select(ActionType)
            .where(ActionType.id == action_type_id, ActionType.is_active.is_(True))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def is_active(self, action_type_id: int) -> bool:
        """Check that the action type exists and is active."""
        result = await self.db.execute(
            select(
                exists().where(
                    ActionType.id == action_type_id,
                    ActionType.is_active.is_(True),
                )
            )
        )
        return bool(result.scalar())
