"""Account log repository. Insert and read only."""

from sqlalchemy import select

from ledger.models.account_log import AccountLog
from ledger.repositories.base import BaseRepository


class AccountLogRepository(BaseRepository[AccountLog]):
    """Repository for the append-only audit trail.

    Example:
        >>> repo = AccountLogRepository(AccountLog, db)
        >>> history = await repo.get_by_account_id(account.id)
    """

    async def get_by_account_id(self, account_id: int) -> list[AccountLog]:
        """Get an account's audit entries in the order they were written."""
        result = await self.db.execute(
            select(AccountLog).where(AccountLog.account_id == account_id).order_by(AccountLog.id)
        )
        return list(result.scalars().all())

    async def get_by_order_number(self, order_number: str) -> list[AccountLog]:
        """Get every audit entry written for a caller-supplied order number."""
        result = await self.db.execute(
            select(AccountLog).where(AccountLog.order_number == order_number).order_by(AccountLog.id)
        )
        return list(result.scalars().all())
